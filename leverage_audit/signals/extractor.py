"""
Signal Extraction

Reduces categorized email and meeting records to the plain counts the cost
formulas need. Only two rules decide what counts:

- A record below the confidence threshold (0.7) never counts
- A PERSONAL_IGNORE record never counts, whatever its confidence

Beyond the counts, only the most frequent labels and the strongest suggested
action survive, for narrative text. Nothing else about individual records
leaves this module.
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from leverage_audit.config import CalculationConstants, EngineConfig
from leverage_audit.scoring.formulas import round_hours, round_int
from leverage_audit.signals.models import (
    EmailCategory,
    EmailSignal,
    MeetingSignal,
    RawMetrics,
    REPETITIVE_DRAINS,
    TimeDrainType,
)

logger = logging.getLogger(__name__)

MESSAGES_PER_THREAD = 2.5

# Share of raw threads assumed delegatable/automatable when no categories exist
RAW_DELEGATABLE_SHARE = 0.4
RAW_AUTOMATABLE_SHARE = 0.3


# =============================================================================
# DATA STRUCTURES
# =============================================================================

@dataclass(frozen=True)
class EmailMetrics:
    count: int = 0
    delegatable_count: int = 0
    automatable_count: int = 0
    personal_ignored: int = 0      # trusted personal records
    personal_uncertain: int = 0    # low-confidence personal records, still excluded


@dataclass(frozen=True)
class MeetingMetrics:
    count: int = 0
    weekly_hours: float = 0.0
    wasteful_count: int = 0


@dataclass(frozen=True)
class Insight:
    """Most common label and strongest suggestion among matching records."""
    matches: int = 0
    top_label: Optional[str] = None
    top_suggestion: Optional[str] = None


@dataclass(frozen=True)
class Pattern:
    type: str
    count: int
    percentage: int


@dataclass(frozen=True)
class SignalSummary:
    """Everything the composer may know about the categorized records."""
    email: EmailMetrics = field(default_factory=EmailMetrics)
    meetings: MeetingMetrics = field(default_factory=MeetingMetrics)
    pending_replies: int = 0
    has_email_signals: bool = False
    has_meeting_signals: bool = False
    fallback_used: bool = False
    top_drain: Optional[TimeDrainType] = None
    patterns: Tuple[Pattern, ...] = ()
    automation: Insight = field(default_factory=Insight)
    delegation: Insight = field(default_factory=Insight)
    meeting: Insight = field(default_factory=Insight)


# =============================================================================
# FILTERS
# =============================================================================

def trusted_emails(signals: Iterable[EmailSignal], threshold: float = 0.7) -> List[EmailSignal]:
    """Business records the engine is allowed to count."""
    return [
        s for s in signals
        if not s.is_personal
        and s.category is not EmailCategory.UNKNOWN
        and s.confidence >= threshold
    ]


def trusted_meetings(signals: Iterable[MeetingSignal], threshold: float = 0.7) -> List[MeetingSignal]:
    return [m for m in signals if not m.is_personal and m.confidence >= threshold]


def _insight(records: Sequence, label: Callable) -> Insight:
    if not records:
        return Insight()

    top_label = Counter(label(r) for r in records).most_common(1)[0][0]
    suggested = [r for r in records if r.suggested_action]
    top_suggestion = max(suggested, key=lambda r: r.confidence).suggested_action if suggested else None

    return Insight(matches=len(records), top_label=top_label, top_suggestion=top_suggestion)


# =============================================================================
# EXTRACTION
# =============================================================================

def extract_email_metrics(signals: Sequence[EmailSignal], raw: Optional[RawMetrics] = None,
                          threshold: float = 0.7) -> EmailMetrics:
    """
    Count delegatable and automatable threads.

    Logic:
    - Personal records are split into trusted/uncertain for reporting only
    - Delegatable: operational, coordination or firefighting categories
    - Automatable: delegatable with a repetitive drain or an automation suggestion
    - Volume: provider message count, else 2.5 messages per counted thread
    """
    personal = [s for s in signals if s.is_personal]
    personal_trusted = sum(1 for s in personal if s.confidence >= threshold)
    if personal:
        logger.debug("Excluding %d personal threads from calculations", len(personal))

    counted = trusted_emails(signals, threshold)
    delegatable = sum(1 for s in counted if s.is_delegatable)
    automatable = sum(1 for s in counted if s.is_automatable)

    if raw is not None and raw.message_count:
        count = raw.message_count
    else:
        count = round_int(len(counted) * MESSAGES_PER_THREAD)

    return EmailMetrics(
        count=count,
        delegatable_count=delegatable,
        automatable_count=automatable,
        personal_ignored=personal_trusted,
        personal_uncertain=len(personal) - personal_trusted,
    )


def estimate_email_metrics(raw: RawMetrics) -> EmailMetrics:
    """Rough split of raw mailbox counts when no categorized records exist."""
    return EmailMetrics(
        count=raw.message_count or raw.thread_count,
        delegatable_count=round_int(raw.thread_count * RAW_DELEGATABLE_SHARE),
        automatable_count=round_int(raw.thread_count * RAW_AUTOMATABLE_SHARE),
    )


def extract_meeting_metrics(signals: Sequence[MeetingSignal], raw: Optional[RawMetrics] = None,
                            constants: Optional[CalculationConstants] = None,
                            threshold: float = 0.7) -> MeetingMetrics:
    """
    Count meetings and wasteful meetings, and estimate weekly meeting hours.

    Without explicit hours, each counted event is assumed to last its recorded
    duration (or 30 minutes) and the window is spread over 4.33 weeks.
    """
    c = constants or CalculationConstants()
    counted = trusted_meetings(signals, threshold)

    count = raw.meeting_count if raw is not None and raw.meeting_count else len(counted)
    wasteful = sum(1 for m in counted if m.is_wasteful)

    if raw is not None and raw.weekly_meeting_hours:
        weekly_hours = raw.weekly_meeting_hours
    elif count:
        durations = [m.duration_minutes for m in counted if m.duration_minutes]
        average = sum(durations) / len(durations) if durations else c.default_meeting_minutes
        weekly_hours = count * average / 60 / c.calendar_weeks_per_month
    else:
        weekly_hours = 0.0

    return MeetingMetrics(count=count, weekly_hours=round_hours(weekly_hours), wasteful_count=wasteful)


def top_time_drain(signals: Sequence[EmailSignal], threshold: float = 0.7) -> Optional[TimeDrainType]:
    """Most frequent time drain among counted threads."""
    drains = Counter(
        s.time_drain for s in trusted_emails(signals, threshold)
        if s.time_drain is not TimeDrainType.NONE
    )
    if not drains:
        return None
    return drains.most_common(1)[0][0]


def category_patterns(signals: Sequence[EmailSignal], threshold: float = 0.7,
                      limit: int = 4) -> Tuple[Pattern, ...]:
    """Top categories among counted threads, with their share of the top group."""
    top = Counter(s.category.label for s in trusted_emails(signals, threshold)).most_common(limit)
    total = sum(count for _, count in top)
    return tuple(
        Pattern(type=label, count=count, percentage=round_int(count / total * 100) if total else 0)
        for label, count in top
    )


def summarize_signals(email_signals: Sequence[EmailSignal] = (),
                      meeting_signals: Sequence[MeetingSignal] = (),
                      raw: Optional[RawMetrics] = None,
                      config: Optional[EngineConfig] = None) -> SignalSummary:
    """Reduce deep-analysis inputs to a SignalSummary."""
    config = config or EngineConfig()
    threshold = config.confidence_threshold
    fallback_used = False

    if email_signals:
        email = extract_email_metrics(email_signals, raw, threshold)
    elif raw is not None and (raw.thread_count or raw.message_count):
        email = estimate_email_metrics(raw)
        fallback_used = True
    else:
        email = EmailMetrics()

    if meeting_signals:
        meetings = extract_meeting_metrics(meeting_signals, raw, config.constants, threshold)
    elif raw is not None and (raw.meeting_count or raw.weekly_meeting_hours):
        meetings = MeetingMetrics(count=raw.meeting_count, weekly_hours=round_hours(raw.weekly_meeting_hours))
        fallback_used = True
    else:
        meetings = MeetingMetrics()

    counted_emails = trusted_emails(email_signals, threshold)
    automation_records = [
        s for s in counted_emails
        if s.category is EmailCategory.DELEGATABLE_OPERATIONAL
        or s.time_drain in REPETITIVE_DRAINS
        or s.suggests_automation
    ]
    delegation_records = [s for s in counted_emails if s.is_delegatable]

    counted_meetings = trusted_meetings(meeting_signals, threshold)
    wasteful = [m for m in counted_meetings if m.is_wasteful]
    meeting_insight = _insight(wasteful, lambda m: m.category)
    suggested = [m for m in counted_meetings if m.suggested_action]
    if suggested:
        best = max(suggested, key=lambda m: m.confidence).suggested_action
        meeting_insight = Insight(meeting_insight.matches, meeting_insight.top_label, best)

    summary = SignalSummary(
        email=email,
        meetings=meetings,
        pending_replies=raw.pending_reply_count if raw is not None else 0,
        has_email_signals=bool(email_signals),
        has_meeting_signals=bool(meeting_signals),
        fallback_used=fallback_used,
        top_drain=top_time_drain(email_signals, threshold),
        patterns=category_patterns(email_signals, threshold),
        automation=_insight(automation_records, lambda s: s.category.label),
        delegation=_insight(delegation_records, lambda s: s.category.label),
        meeting=meeting_insight,
    )

    logger.info(
        "Signals summarized: %d delegatable, %d automatable, %d meetings (%d wasteful)%s",
        email.delegatable_count, email.automatable_count, meetings.count,
        meetings.wasteful_count, " [raw-metric fallback]" if fallback_used else "",
    )
    return summary
