import json

import pytest

from leverage_audit.assessment.stages import classify_stage, stage_rank
from leverage_audit.errors import MissingAnswersError
from leverage_audit.scoring.composer import AssessmentRequest, compose_results, require_answers
from leverage_audit.signals.models import AnalysisMode, EmailCategory, RawMetrics, TimeDrainType

RESULT_KEYS = {
    'score', 'component_scores', 'time_categories', 'email_load', 'meeting_cost',
    'response_lag', 'time_breakdown', 'time_leak', 'ai_opportunities',
    'automation_metrics', 'ai_timeback', 'meta',
}


@pytest.fixture
def deep_request(best_answers, make_email, make_meeting):
    emails = [make_email(EmailCategory.DELEGATABLE_OPERATIONAL, drain=TimeDrainType.STATUS_UPDATE_LOOP,
                         action='Automate the weekly status digest', item_id=f"t{i}")
              for i in range(40)]
    emails += [make_email(EmailCategory.PERSONAL_IGNORE, confidence=0.99, item_id=f"p{i}") for i in range(5)]
    meetings = [make_meeting(category='Status Standup', wasteful=i < 3, minutes=60, item_id=f"m{i}")
                for i in range(12)]
    return AssessmentRequest(
        mode=AnalysisMode.DEEP_ANALYSIS,
        answers=best_answers,
        email_signals=tuple(emails),
        meeting_signals=tuple(meetings),
        raw_metrics=RawMetrics(pending_reply_count=9),
    )


def test_best_answers_only(best_answers):
    result = compose_results(AssessmentRequest(answers=best_answers))

    assert result.score == 90
    assert stage_rank(classify_stage(result.score)) >= stage_rank(classify_stage(70))
    assert result.email_load.count == 0
    assert result.meeting_cost.amount == 0
    assert result.automation_metrics is None
    assert result.ai_opportunities == ()
    assert result.response_lag.avg_hours == 0
    assert result.meta.analysis_mode == 'ANSWERS_ONLY'

    categories = {c.category: c.percentage for c in result.time_categories}
    assert categories == {'Worthy': 54, 'Whirlwind': 36, 'Wasted': 10}

    breakdown = {b.category: (b.percentage, b.hours) for b in result.time_breakdown}
    assert breakdown == {
        'Doing the work': (38, 15.1),
        'Coordinating others': (36, 14.4),
        'Strategic decisions': (16, 6.5),
        'Admin & overhead': (10, 4.0),
    }


def test_empty_answers_produce_a_fully_shaped_result():
    result = compose_results(AssessmentRequest())
    data = result.to_dict()

    assert result.score == 46
    assert set(data) == RESULT_KEYS
    assert len(data['time_categories']) == 3
    assert len(data['time_breakdown']) == 4
    assert data['time_leak']['total_hours_wasted'] == 0
    assert data['ai_timeback']['hours'] == 0
    categories = {c['category']: c['percentage'] for c in data['time_categories']}
    assert categories == {'Worthy': 30, 'Whirlwind': 16, 'Wasted': 54}


def test_deep_analysis(deep_request):
    result = compose_results(deep_request)

    assert result.email_load.delegatable_count == 40
    assert result.email_load.automatable_count == 40
    assert result.email_load.count == 100
    assert result.meeting_cost.count == 12
    assert result.meeting_cost.weekly_hours == 2.8
    assert result.response_lag.pending == 9
    assert result.response_lag.avg_hours == 8.0

    leak = result.time_leak
    assert leak.top_leak == 'Status update loops and repetitive requests'
    assert leak.description.startswith("You're spending 6 hours per week responding to status updates")
    assert leak.total_hours_wasted == 6.3
    assert leak.monthly_value == 6800

    metrics = result.automation_metrics
    assert metrics is not None
    assert metrics.build_cost == 1500
    assert [(p.type, p.percentage) for p in metrics.patterns] == [('Delegatable Operational', 100)]

    assert [o.type for o in result.ai_opportunities] == ['automation', 'ai-assisted', 'ai-assisted']
    assert result.ai_opportunities[0].description == 'Automate the weekly status digest'

    # Deep-mode wasted share: (40 automatable + 2.8 h) / 10, floored at 10
    categories = {c.category: c.percentage for c in result.time_categories}
    assert categories['Wasted'] == 10

    assert result.meta.email_used and result.meta.calendar_used
    assert not result.meta.fallback_used


def test_result_is_deterministic(deep_request):
    first = json.dumps(compose_results(deep_request).to_dict(), sort_keys=True)
    second = json.dumps(compose_results(deep_request).to_dict(), sort_keys=True)
    assert first == second


def test_answers_only_ignores_signals(deep_request):
    request = AssessmentRequest(
        mode=AnalysisMode.ANSWERS_ONLY,
        answers=deep_request.answers,
        email_signals=deep_request.email_signals,
        meeting_signals=deep_request.meeting_signals,
    )
    result = compose_results(request)
    assert result.email_load.delegatable_count == 0
    assert result.meeting_cost.count == 0
    assert not result.meta.email_used


def test_raw_metrics_fallback(best_answers):
    request = AssessmentRequest.from_dict({
        'mode': 'DEEP_ANALYSIS',
        'answers': best_answers,
        'rawMetrics': {'threadCount': 100, 'messageCount': 250, 'meetingCount': 12,
                       'weeklyMeetingHours': 10, 'pendingReplyCount': 7},
    })
    result = compose_results(request)

    assert result.meta.fallback_used
    assert not result.meta.email_used
    assert result.email_load.count == 250
    assert result.email_load.delegatable_count == 40
    assert result.email_load.automatable_count == 30
    assert result.response_lag.pending == 7
    patterns = [(p.type, p.count, p.percentage) for p in result.automation_metrics.patterns]
    assert patterns[0] == ('Purchase order requests', 12, 41)
    assert sum(p[2] for p in patterns) == 100


def test_personal_signals_alone_change_nothing(best_answers, make_email):
    request = AssessmentRequest(
        mode=AnalysisMode.DEEP_ANALYSIS,
        answers=best_answers,
        email_signals=tuple(make_email(EmailCategory.PERSONAL_IGNORE, confidence=1.0,
                                       drain=TimeDrainType.STATUS_UPDATE_LOOP) for _ in range(50)),
    )
    result = compose_results(request)
    assert result.email_load.delegatable_count == 0
    assert result.email_load.automatable_count == 0
    assert result.automation_metrics is None


def test_from_dict_accepts_orchestrator_json():
    request = AssessmentRequest.from_dict({
        'mode': 'deep',
        'answers': {'q1': 'Daily'},
        'emailSignals': [{'threadId': 't1', 'category': 'FIREFIGHTING', 'confidence': 0.9}, 'junk'],
        'meetingSignals': [{'eventId': 'e1', 'category': 'Planning', 'confidence': 0.9}],
        'aiSolutions': [{'name': 'Inbox agent', 'tools': ['Gmail']}],
    })
    assert request.is_deep
    assert len(request.email_signals) == 1
    assert len(request.meeting_signals) == 1
    assert request.ai_solutions[0].tools == ('Gmail',)


def test_from_dict_bare_answers():
    request = AssessmentRequest.from_dict({'q1': 'Daily', 'email': 'dana@acme.io'})
    assert request.mode is AnalysisMode.ANSWERS_ONLY
    assert request.answers['q1'] == 'Daily'


def test_require_answers():
    with pytest.raises(MissingAnswersError):
        require_answers({})
    with pytest.raises(MissingAnswersError):
        require_answers({'email': 'dana@acme.io'})
    assert require_answers({'q2': 'Weekly'}) == {'q2': 'Weekly'}


def test_score_bounds_across_partial_answer_sets(best_answers, worst_answers):
    for cut in range(0, 25):
        answers = dict(worst_answers)
        answers.update({k: v for k, v in list(best_answers.items())[:cut]})
        result = compose_results(AssessmentRequest(answers=answers))
        assert 0 <= result.score <= 100
        assert 46 <= result.score <= 90


def test_email_load_hours_come_from_weekly_minutes(best_answers, make_email):
    request = AssessmentRequest(
        mode=AnalysisMode.DEEP_ANALYSIS,
        answers=best_answers,
        email_signals=tuple(make_email(item_id=f"t{i}") for i in range(9)),
    )
    result = compose_results(request)
    assert result.email_load.delegatable_count == 9
    assert result.email_load.hours == 0.8


def test_non_finite_numbers_are_dropped_at_the_boundary():
    request = AssessmentRequest.from_dict(json.loads(
        '{"mode": "DEEP_ANALYSIS", "answers": {"q1": "Daily"},'
        ' "meetingSignals": [{"eventId": "e1", "category": "Sync", "confidence": 0.9, "durationMinutes": NaN}],'
        ' "rawMetrics": {"weeklyMeetingHours": Infinity, "meetingCount": -Infinity, "pendingReplyCount": NaN}}'
    ))
    assert request.meeting_signals[0].duration_minutes is None
    assert request.raw_metrics == RawMetrics()

    result = compose_results(request)
    # one meeting at the 30-minute default: 30 / 60 / 4.33
    assert result.meeting_cost.weekly_hours == 0.1
    assert result.response_lag.pending == 0
    json.dumps(result.to_dict(), allow_nan=False)


def test_raw_only_infinite_hours_count_as_zero():
    request = AssessmentRequest.from_dict(json.loads(
        '{"mode": "DEEP_ANALYSIS", "answers": {"q1": "Daily"}, "rawMetrics": {"weeklyMeetingHours": Infinity}}'
    ))
    result = compose_results(request)
    assert result.meeting_cost.weekly_hours == 0
    assert result.meeting_cost.amount == 0
    assert not result.meta.fallback_used


@pytest.mark.parametrize("value", [7, 'emails', {'threadId': 't1'}, True])
def test_from_dict_drops_non_list_record_fields(value):
    request = AssessmentRequest.from_dict({
        'mode': 'DEEP_ANALYSIS',
        'answers': {'q1': 'Daily'},
        'emailSignals': value,
        'meetingSignals': value,
        'aiSolutions': value,
        'rawMetrics': 7,
    })
    assert request.email_signals == ()
    assert request.meeting_signals == ()
    assert request.ai_solutions == ()
    assert request.raw_metrics is None
    compose_results(request)


def test_solution_tools_must_be_a_list():
    request = AssessmentRequest.from_dict({
        'answers': {'q1': 'Daily'},
        'aiSolutions': [{'name': 'X', 'tools': 5}, {'name': 'Y', 'tools': 'Zapier'}],
    })
    assert request.ai_solutions[0].tools == ()
    assert request.ai_solutions[1].tools == ('Zapier',)


def test_non_mapping_answers_become_empty():
    request = AssessmentRequest.from_dict({'answers': ['q1', 'Daily']})
    assert request.answers == {}
    with pytest.raises(MissingAnswersError):
        require_answers(request.answers)
