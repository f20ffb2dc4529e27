"""
Results Composer

Turns one assessment request into a complete ResultRecord. Deterministic and
free of I/O: the same request always yields the same to_dict() output.

Pipeline:
1. Reduce deep-analysis signals to counts (skipped in answers-only mode)
2. Score the answers per component
3. Price email, meetings, time-back and (when present) automatable work
4. Derive time categories, the 40-hour breakdown and the time leak
5. Rank up to three AI opportunities

The stage is not part of the record; presentation classifies result.score.
"""

import logging
from dataclasses import dataclass, asdict, field
from typing import Any, Dict, Mapping, Optional, Tuple

from leverage_audit.assessment.questions import has_question_answers
from leverage_audit.config import EngineConfig
from leverage_audit.errors import MissingAnswersError
from leverage_audit.scoring.formulas import (
    AutomationCost,
    Timeback,
    ai_timeback,
    automation_cost,
    email_cost,
    email_weekly_hours,
    meeting_cost,
    round_dollars,
    round_hours,
    round_int,
    weekly_value,
)
from leverage_audit.scoring.opportunities import Opportunity, generate_opportunities
from leverage_audit.scoring.scorer import ComponentScorer, ComponentScores
from leverage_audit.signals.extractor import Pattern, SignalSummary, summarize_signals
from leverage_audit.signals.models import (
    AISolution,
    AnalysisMode,
    EmailSignal,
    MeetingSignal,
    RawMetrics,
    TimeDrainType,
)

logger = logging.getLogger(__name__)

# Response-lag estimate in deep mode; answers-only reports 0
DEEP_RESPONSE_LAG_HOURS = 8.0

CATEGORY_COLORS = {
    'Worthy': '#4CAF50',
    'Whirlwind': '#EDDF00',
    'Wasted': '#F44336',
}

# Used when automatable work exists but no categorized records explain it
DEFAULT_AUTOMATION_PATTERNS = (
    ("Purchase order requests", 41),
    ("Invoice processing", 26),
    ("Inventory status checks", 18),
    ("Order status updates", 15),
)

DRAIN_NARRATIVES = {
    TimeDrainType.STATUS_UPDATE_LOOP: (
        "Status update loops and repetitive requests",
        "responding to status updates and repetitive information requests that could be automated.",
    ),
    TimeDrainType.COORDINATION_BACK_AND_FORTH: (
        "Coordination overhead and email back-and-forth",
        "on coordination emails that could be streamlined or delegated.",
    ),
    TimeDrainType.INFORMATION_REQUEST_LOOP: (
        "Manual information lookups and data requests",
        "answering information requests that could be automated with simple systems.",
    ),
}


# =============================================================================
# REQUEST
# =============================================================================

@dataclass(frozen=True)
class AssessmentRequest:
    """Everything the engine is allowed to know about one respondent."""
    mode: AnalysisMode = AnalysisMode.ANSWERS_ONLY
    answers: Mapping[str, Any] = field(default_factory=dict)
    email_signals: Tuple[EmailSignal, ...] = ()
    meeting_signals: Tuple[MeetingSignal, ...] = ()
    raw_metrics: Optional[RawMetrics] = None
    ai_solutions: Tuple[AISolution, ...] = ()

    @property
    def is_deep(self) -> bool:
        return self.mode is AnalysisMode.DEEP_ANALYSIS

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'AssessmentRequest':
        """
        Build a request from the orchestrator's JSON.

        A mapping without an 'answers' key is treated as a bare answer set.
        """
        if 'answers' not in data:
            return cls(answers=dict(data))

        def records(*keys) -> list:
            for key in keys:
                value = data.get(key)
                if value and isinstance(value, (list, tuple)):
                    return [r for r in value if isinstance(r, Mapping)]
            return []

        raw = data.get('rawMetrics') or data.get('raw_metrics')
        answers = data.get('answers')
        return cls(
            mode=AnalysisMode.parse(data.get('mode')),
            answers=dict(answers) if isinstance(answers, Mapping) else {},
            email_signals=tuple(EmailSignal.from_dict(r) for r in records('emailSignals', 'email_signals')),
            meeting_signals=tuple(MeetingSignal.from_dict(r) for r in records('meetingSignals', 'meeting_signals')),
            raw_metrics=RawMetrics.from_dict(raw) if isinstance(raw, Mapping) else None,
            ai_solutions=tuple(AISolution.from_dict(r) for r in records('aiSolutions', 'ai_solutions')),
        )


def require_answers(answers: Optional[Mapping[str, Any]]) -> Mapping[str, Any]:
    """The one precondition the shell enforces before scoring."""
    if not answers or not has_question_answers(answers):
        raise MissingAnswersError("No assessment answers provided")
    return answers


# =============================================================================
# RESULT RECORD
# =============================================================================

@dataclass(frozen=True)
class TimeCategory:
    category: str
    percentage: int
    color: str


@dataclass(frozen=True)
class EmailLoad:
    count: int
    hours: float  # weekly
    delegatable_count: int
    automatable_count: int


@dataclass(frozen=True)
class MeetingLoad:
    amount: int  # monthly cost
    count: int
    weekly_hours: float


@dataclass(frozen=True)
class ResponseLag:
    pending: int
    avg_hours: float


@dataclass(frozen=True)
class BreakdownItem:
    category: str
    percentage: int
    hours: float
    automatable: float


@dataclass(frozen=True)
class TimeLeak:
    total_hours_wasted: float  # weekly
    weekly_value: int
    monthly_value: int
    top_leak: str
    description: str


@dataclass(frozen=True)
class AutomationMetrics:
    weekly_hours: float
    monthly_hours: float
    monthly_cost: int
    patterns: Tuple[Pattern, ...]
    build_cost: int
    monthly_maintenance: float
    break_even_months: Optional[float]
    first_year_savings: int
    delegation_alternative: int


@dataclass(frozen=True)
class ResultMeta:
    analysis_mode: str
    email_used: bool
    calendar_used: bool
    fallback_used: bool


@dataclass(frozen=True)
class ResultRecord:
    score: int
    component_scores: ComponentScores
    time_categories: Tuple[TimeCategory, ...]
    email_load: EmailLoad
    meeting_cost: MeetingLoad
    response_lag: ResponseLag
    time_breakdown: Tuple[BreakdownItem, ...]
    time_leak: TimeLeak
    ai_opportunities: Tuple[Opportunity, ...]
    automation_metrics: Optional[AutomationMetrics]
    ai_timeback: Timeback
    meta: ResultMeta

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready dict; tuples become lists."""
        return _listify(asdict(self))


def _listify(value):
    if isinstance(value, dict):
        return {k: _listify(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_listify(v) for v in value]
    return value


# =============================================================================
# DERIVATIONS
# =============================================================================

def time_categories(score: int, summary: SignalSummary, deep: bool,
                    config: EngineConfig) -> Tuple[float, float, float]:
    """
    Worthy / Whirlwind / Wasted shares of the week, unrounded.

    Logic:
    - Worthy: at least 30%, otherwise 60% of the score
    - Wasted (answers-only): inverse of the score, at least 10%
    - Wasted (deep): automatable threads plus meeting hours, scaled into 10-40%
    - Whirlwind: whatever is left, never negative
    """
    worthy = max(30.0, score * 0.6)
    if deep:
        load = summary.email.automatable_count + summary.meetings.weekly_hours
        wasted = max(10.0, min(40.0, load / config.constants.wasted_divisor))
    else:
        wasted = max(10.0, 100.0 - score)
    whirlwind = max(0.0, 100.0 - worthy - wasted)
    return worthy, whirlwind, wasted


def time_breakdown(worthy: float, whirlwind: float, wasted: float, automatable_count: int,
                   week_hours: float = 40.0) -> Tuple[BreakdownItem, ...]:
    automatable_hours = automatable_count * 0.15
    buckets = (
        ("Doing the work", worthy * 0.7, automatable_hours),
        ("Coordinating others", whirlwind, 0.0),
        ("Strategic decisions", worthy * 0.3, 0.0),
        ("Admin & overhead", wasted, automatable_hours * 0.2),
    )

    items = []
    for category, share, automatable in buckets:
        hours = share / 100 * week_hours
        items.append(BreakdownItem(
            category=category,
            percentage=round_int(hours / week_hours * 100),
            hours=round_hours(hours),
            automatable=round_hours(automatable),
        ))
    return tuple(items)


def time_leak(summary: SignalSummary, email_hours: float, email_dollars: int,
              config: EngineConfig) -> TimeLeak:
    """Weekly email time plus meeting prep/follow-up overhead, with a narrative."""
    c = config.constants
    email_weekly = email_hours / c.weeks_per_month
    overhead_minutes = summary.meetings.count * (c.meeting_prep_minutes + c.meeting_followup_minutes)
    overhead_weekly = overhead_minutes / 60
    total_weekly = email_weekly + overhead_weekly
    hours_text = f"You're spending {round_int(total_weekly)} hours per week"

    top_leak = "Email coordination and meeting overhead"
    description = f"{hours_text} on tasks that could be automated or delegated."

    email = summary.email
    if summary.top_drain in DRAIN_NARRATIVES:
        top_leak, tail = DRAIN_NARRATIVES[summary.top_drain]
        description = f"{hours_text} {tail}"
    elif email.automatable_count > email.delegatable_count:
        top_leak = "Manual process work that could be automated"
        description = f"{hours_text} on repetitive process work that could be fully automated with simple workflows."
    elif email.count > 50:
        description = (
            f"{hours_text} on email coordination and meeting overhead "
            f"that could be automated or delegated."
        )

    overhead_cost = overhead_weekly * c.weeks_per_month * c.hourly_rate
    return TimeLeak(
        total_hours_wasted=round_hours(total_weekly),
        weekly_value=weekly_value(total_weekly, c),
        monthly_value=email_dollars + round_dollars(overhead_cost),
        top_leak=top_leak,
        description=description,
    )


def automation_patterns(summary: SignalSummary) -> Tuple[Pattern, ...]:
    if summary.patterns:
        return summary.patterns
    automatable = summary.email.automatable_count
    return tuple(
        Pattern(type=label, count=round_int(automatable * share / 100), percentage=share)
        for label, share in DEFAULT_AUTOMATION_PATTERNS
    )


def automation_metrics(summary: SignalSummary, cost: AutomationCost) -> AutomationMetrics:
    return AutomationMetrics(
        weekly_hours=cost.weekly_hours,
        monthly_hours=cost.monthly_hours,
        monthly_cost=cost.monthly_cost,
        patterns=automation_patterns(summary),
        build_cost=cost.automation.build_cost,
        monthly_maintenance=cost.automation.monthly_maintenance,
        break_even_months=cost.automation.break_even_months,
        first_year_savings=cost.automation.first_year_savings,
        delegation_alternative=cost.delegation.monthly_cost,
    )


# =============================================================================
# COMPOSER
# =============================================================================

def compose_results(request: AssessmentRequest, config: Optional[EngineConfig] = None) -> ResultRecord:
    """Score one request end to end. Never raises on malformed input."""
    config = config or EngineConfig()
    c = config.constants
    deep = request.is_deep

    if deep:
        summary = summarize_signals(request.email_signals, request.meeting_signals,
                                    request.raw_metrics, config)
    else:
        summary = SignalSummary()

    score, components = ComponentScorer(config).score(request.answers or {})

    email = summary.email
    meetings = summary.meetings
    mail = email_cost(email.delegatable_count, email.count, c)
    meeting = meeting_cost(meetings.count, meetings.weekly_hours, c)
    timeback = ai_timeback(email.delegatable_count, meetings.count, summary.pending_replies,
                           email.automatable_count, c)

    automation = None
    metrics = None
    if email.automatable_count > 0:
        automation = automation_cost(email.automatable_count, email.count, c)
        metrics = automation_metrics(summary, automation)

    worthy, whirlwind, wasted = time_categories(score, summary, deep, config)
    opportunities = generate_opportunities(summary, request.ai_solutions, automation, c)

    result = ResultRecord(
        score=score,
        component_scores=components,
        time_categories=tuple(
            TimeCategory(category=name, percentage=round_int(share), color=CATEGORY_COLORS[name])
            for name, share in (('Worthy', worthy), ('Whirlwind', whirlwind), ('Wasted', wasted))
        ),
        email_load=EmailLoad(
            count=email.count,
            hours=round_hours(email_weekly_hours(email.delegatable_count, c)),
            delegatable_count=email.delegatable_count,
            automatable_count=email.automatable_count,
        ),
        meeting_cost=MeetingLoad(
            amount=meeting.monthly_cost,
            count=meetings.count,
            weekly_hours=meetings.weekly_hours,
        ),
        response_lag=ResponseLag(
            pending=summary.pending_replies,
            avg_hours=DEEP_RESPONSE_LAG_HOURS if deep else 0.0,
        ),
        time_breakdown=time_breakdown(worthy, whirlwind, wasted, email.automatable_count, c.work_week_hours),
        time_leak=time_leak(summary, mail.hours, mail.cost, config),
        ai_opportunities=tuple(opportunities),
        automation_metrics=metrics,
        ai_timeback=timeback,
        meta=ResultMeta(
            analysis_mode=request.mode.value,
            email_used=summary.has_email_signals,
            calendar_used=summary.has_meeting_signals,
            fallback_used=summary.fallback_used,
        ),
    )

    logger.info("Composed %s result: score %d, %d opportunities",
                request.mode.value, score, len(opportunities))
    return result

