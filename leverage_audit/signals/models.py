"""
Signal Record Types

Structured output of the external email/calendar categorizer. Records are
validated once, here, so the extractor can match on closed enums instead of
free-text labels:

- Unknown category labels become UNKNOWN (excluded from every tally)
- Confidence that is missing, non-numeric or outside [0, 1] becomes 0.0
- PERSONAL_IGNORE is the sentinel for personal-life content
"""

import math
import re
from dataclasses import dataclass, field
from enum import Enum
from numbers import Real
from typing import Any, Dict, Mapping, Optional, Tuple


class AnalysisMode(str, Enum):
    ANSWERS_ONLY = 'ANSWERS_ONLY'
    DEEP_ANALYSIS = 'DEEP_ANALYSIS'

    @classmethod
    def parse(cls, value) -> 'AnalysisMode':
        if isinstance(value, cls):
            return value
        text = str(value or '').strip().upper().replace('-', '_').replace(' ', '_')
        if text in ('DEEP', 'DEEP_ANALYSIS'):
            return cls.DEEP_ANALYSIS
        return cls.ANSWERS_ONLY


class EmailCategory(str, Enum):
    DELEGATABLE_OPERATIONAL = 'DELEGATABLE_OPERATIONAL'
    STRATEGIC_INPUT = 'STRATEGIC_INPUT'
    TEAM_COORDINATION = 'TEAM_COORDINATION'
    EXTERNAL_CRITICAL = 'EXTERNAL_CRITICAL'
    FIREFIGHTING = 'FIREFIGHTING'
    PERSONAL_IGNORE = 'PERSONAL_IGNORE'
    UNKNOWN = 'UNKNOWN'

    @property
    def label(self) -> str:
        return self.value.replace('_', ' ').title()


class TimeDrainType(str, Enum):
    STATUS_UPDATE_LOOP = 'Status Update Loop'
    INFORMATION_REQUEST_LOOP = 'Information Request Loop'
    COORDINATION_BACK_AND_FORTH = 'Coordination Back-and-forth'
    AWAITING_RESPONSE = 'Awaiting Response'
    RECURRING_QUESTION = 'Recurring Question'
    MANUAL_DATA_LOOKUP = 'Manual Data Lookup'
    OTHER = 'Other'
    NONE = 'N/A'


# Categories the respondent's team could own
DELEGATABLE_CATEGORIES = frozenset({
    EmailCategory.DELEGATABLE_OPERATIONAL,
    EmailCategory.TEAM_COORDINATION,
    EmailCategory.FIREFIGHTING,
})

# Drain types that point at a repeatable workflow
REPETITIVE_DRAINS = frozenset({
    TimeDrainType.STATUS_UPDATE_LOOP,
    TimeDrainType.INFORMATION_REQUEST_LOOP,
    TimeDrainType.RECURRING_QUESTION,
    TimeDrainType.MANUAL_DATA_LOOKUP,
})


# =============================================================================
# BOUNDARY PARSING
# =============================================================================

def _normalize_label(value: str) -> str:
    return re.sub(r'[\s_\-]+', ' ', value.strip().lower())


_DRAIN_LOOKUP: Dict[str, TimeDrainType] = {}
for _drain in TimeDrainType:
    _DRAIN_LOOKUP[_normalize_label(_drain.value)] = _drain
    _DRAIN_LOOKUP[_normalize_label(_drain.name)] = _drain
_DRAIN_LOOKUP['none'] = TimeDrainType.NONE


def parse_confidence(value) -> float:
    """Confidence in [0, 1]; anything else is untrusted (0.0)."""
    if isinstance(value, bool) or not isinstance(value, Real):
        return 0.0
    value = float(value)
    if not 0.0 <= value <= 1.0:
        return 0.0
    return value


def parse_email_category(value) -> EmailCategory:
    if isinstance(value, EmailCategory):
        return value
    if not isinstance(value, str):
        return EmailCategory.UNKNOWN
    key = value.strip().upper().replace(' ', '_').replace('-', '_')
    try:
        return EmailCategory(key)
    except ValueError:
        return EmailCategory.UNKNOWN


def parse_time_drain(value) -> TimeDrainType:
    if isinstance(value, TimeDrainType):
        return value
    if not isinstance(value, str) or not value.strip():
        return TimeDrainType.NONE
    return _DRAIN_LOOKUP.get(_normalize_label(value), TimeDrainType.OTHER)


def _finite(value) -> bool:
    """A real, non-boolean number other than NaN or infinity."""
    return not isinstance(value, bool) and isinstance(value, Real) and math.isfinite(value)


def _sequence(value) -> tuple:
    if isinstance(value, (list, tuple)):
        return tuple(value)
    return ()


def _text(value) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _pick(data: Mapping, *keys, default=None):
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


# =============================================================================
# RECORDS
# =============================================================================

@dataclass(frozen=True)
class EmailSignal:
    """One categorized email thread."""
    item_id: str
    category: EmailCategory
    confidence: float = 0.0
    time_drain: TimeDrainType = TimeDrainType.NONE
    suggested_action: Optional[str] = None

    @property
    def is_personal(self) -> bool:
        return self.category is EmailCategory.PERSONAL_IGNORE

    @property
    def is_delegatable(self) -> bool:
        return self.category in DELEGATABLE_CATEGORIES

    @property
    def suggests_automation(self) -> bool:
        return bool(self.suggested_action) and 'automat' in self.suggested_action.lower()

    @property
    def is_automatable(self) -> bool:
        return self.is_delegatable and (self.time_drain in REPETITIVE_DRAINS or self.suggests_automation)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'EmailSignal':
        return cls(
            item_id=str(_pick(data, 'item_id', 'itemId', 'threadId', 'thread_id', default='')),
            category=parse_email_category(data.get('category')),
            confidence=parse_confidence(data.get('confidence')),
            time_drain=parse_time_drain(_pick(data, 'time_drain', 'timeDrainType', 'time_drain_type')),
            suggested_action=_text(_pick(data, 'suggested_action', 'suggestedAction')),
        )


@dataclass(frozen=True)
class MeetingSignal:
    """One categorized calendar event."""
    item_id: str
    category: str = 'Other'
    confidence: float = 0.0
    is_wasteful: bool = False
    meeting_type: Optional[str] = None
    suggested_action: Optional[str] = None
    duration_minutes: Optional[float] = None

    @property
    def is_personal(self) -> bool:
        return parse_email_category(self.category) is EmailCategory.PERSONAL_IGNORE

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'MeetingSignal':
        duration = _pick(data, 'duration_minutes', 'durationMinutes')
        if not _finite(duration) or duration <= 0:
            duration = None

        return cls(
            item_id=str(_pick(data, 'item_id', 'itemId', 'eventId', 'event_id', default='')),
            category=_text(data.get('category')) or 'Other',
            confidence=parse_confidence(data.get('confidence')),
            is_wasteful=_pick(data, 'is_wasteful', 'isWasteful') is True,
            meeting_type=_text(_pick(data, 'meeting_type', 'meetingType')),
            suggested_action=_text(_pick(data, 'suggested_action', 'suggestedAction')),
            duration_minutes=float(duration) if duration is not None else None,
        )


@dataclass(frozen=True)
class RawMetrics:
    """Uncategorized mailbox/calendar counts from the provider."""
    thread_count: int = 0
    message_count: int = 0
    meeting_count: int = 0
    weekly_meeting_hours: float = 0.0
    pending_reply_count: int = 0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'RawMetrics':
        def number(*keys) -> float:
            value = _pick(data, *keys, default=0)
            if not _finite(value) or value < 0:
                return 0
            return value

        return cls(
            thread_count=int(number('thread_count', 'threadCount')),
            message_count=int(number('message_count', 'messageCount')),
            meeting_count=int(number('meeting_count', 'meetingCount')),
            weekly_meeting_hours=float(number('weekly_meeting_hours', 'weeklyMeetingHours')),
            pending_reply_count=int(number('pending_reply_count', 'pendingReplyCount')),
        )


@dataclass(frozen=True)
class AISolution:
    """A suggested intervention from the synthesis step."""
    name: str
    description: str = ''
    tools: Tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'AISolution':
        tools = data.get('tools')
        tools = (tools,) if isinstance(tools, str) else _sequence(tools)
        return cls(
            name=_text(data.get('name')) or 'Untitled solution',
            description=_text(data.get('description')) or '',
            tools=tuple(str(t) for t in tools),
        )
