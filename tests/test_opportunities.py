from leverage_audit.config import CalculationConstants
from leverage_audit.scoring.formulas import automation_cost
from leverage_audit.scoring.opportunities import (
    Opportunity,
    from_ai_solutions,
    generate_opportunities,
    rank_opportunities,
)
from leverage_audit.signals.extractor import EmailMetrics, Insight, MeetingMetrics, SignalSummary
from leverage_audit.signals.models import AISolution

C = CalculationConstants()


def _summary(**kwargs):
    return SignalSummary(
        email=EmailMetrics(count=kwargs.get('count', 0),
                           delegatable_count=kwargs.get('delegatable', 0),
                           automatable_count=kwargs.get('automatable', 0)),
        meetings=MeetingMetrics(count=kwargs.get('meetings', 0),
                                weekly_hours=kwargs.get('meeting_hours', 0.0),
                                wasteful_count=kwargs.get('wasteful', 0)),
        automation=kwargs.get('automation', Insight()),
        delegation=kwargs.get('delegation', Insight()),
        meeting=kwargs.get('meeting', Insight()),
    )


def test_no_workload_no_opportunities():
    assert generate_opportunities(_summary()) == []


def test_gates_are_strictly_greater_than():
    summary = _summary(automatable=20, delegatable=30, meetings=10, meeting_hours=8)
    assert generate_opportunities(summary) == []


def test_ai_solutions_use_stepped_estimates():
    solutions = [
        AISolution(name='Inbox triage agent', description='Sorts mail', tools=('Gmail', 'Zapier')),
        AISolution(name='Status bot', tools=('Slack',)),
        AISolution(name='Meeting briefs'),
        AISolution(name='Never shown'),
    ]
    opportunities = from_ai_solutions(solutions, C)

    assert [o.title for o in opportunities] == ['Inbox triage agent', 'Status bot', 'Meeting briefs']
    first, second, third = opportunities
    assert first.time_saved == '8 hours/week'
    assert first.weekly_savings == 2000
    assert first.monthly_savings == 8600
    assert first.build_cost == 2000
    assert first.monthly_maintenance == 100
    assert first.roi == '50x first year'
    assert first.tools == 'Gmail, Zapier'
    assert first.type == 'ai-powered'
    assert second.build_cost == 2400
    assert second.implementation_time == '1-2 weeks'
    assert third.time_saved == '4 hours/week'
    assert third.priority == 'medium'
    assert [o.emoji for o in opportunities] == ['🤖', '🎯', '📊']


def test_ai_solutions_take_precedence_over_rules():
    summary = _summary(automatable=80, delegatable=90)
    opportunities = generate_opportunities(summary, [AISolution(name='Custom agent')])
    assert len(opportunities) == 1
    assert opportunities[0].title == 'Custom agent'


def test_rule_based_templates_and_ranking():
    summary = _summary(
        count=100, automatable=40, delegatable=40, meetings=12, wasteful=3,
        automation=Insight(matches=40, top_label='Delegatable Operational',
                           top_suggestion='Automate the weekly status digest'),
        meeting=Insight(matches=3, top_label='Status Standup'),
    )
    opportunities = generate_opportunities(summary, automation=automation_cost(40, 100, C), constants=C)

    assert [o.type for o in opportunities] == ['automation', 'ai-assisted', 'ai-assisted']

    automation, triage, meeting = opportunities
    assert automation.title == 'Automate Repetitive Email Work'
    assert automation.description == 'Automate the weekly status digest'
    assert automation.weekly_savings == 925
    assert automation.build_cost == 1500
    assert automation.roi == '30x first year'

    assert triage.title == 'Smart Email Assistant for Your Team'
    assert triage.weekly_savings == 800
    assert triage.break_even_weeks == 1
    assert triage.roi == '17x first year'
    assert triage.implementation_time == '3-5 days'

    assert meeting.title == 'Replace Status Meetings with Async Updates'
    assert meeting.time_saved == '2 hours/week'
    assert meeting.priority == 'medium'


def test_automation_defaults_without_cost_model():
    summary = _summary(automatable=30)
    (opportunity,) = generate_opportunities(summary)
    assert opportunity.title == 'Stop Manual Order & Invoice Processing'
    assert opportunity.build_cost == 2400
    assert opportunity.monthly_maintenance == 100
    # 30 × 0.15 = 4.5 h/week
    assert opportunity.weekly_savings == 1125


def test_many_wasteful_meetings_are_high_priority():
    (opportunity,) = generate_opportunities(_summary(meetings=4, wasteful=6))
    assert opportunity.priority == 'high'
    assert opportunity.title == 'Eliminate Wasteful Meetings & Automate Prep'


def test_zero_savings_break_even_is_zero():
    (opportunity,) = generate_opportunities(_summary(meeting_hours=9))
    assert opportunity.weekly_savings == 0
    assert opportunity.break_even_weeks == 0


def _opp(number, priority, weekly):
    return Opportunity(
        id=number, emoji='', title=str(number), description='', time_saved='',
        weekly_savings=weekly, monthly_savings=0, build_cost=0, monthly_maintenance=0,
        break_even_weeks=0, roi='', implementation_time='', priority=priority, type='automation',
    )


def test_ranking_puts_high_priority_first_then_savings():
    ranked = rank_opportunities([
        _opp(1, 'medium', 5000),
        _opp(2, 'high', 100),
        _opp(3, 'high', 900),
        _opp(4, 'medium', 10),
    ])
    assert [o.id for o in ranked] == [3, 2, 1]
