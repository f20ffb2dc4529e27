"""
Cost/Value Formulas

Converts weekly counts (delegatable emails, meetings, pending replies,
automatable requests) into monthly hours and dollars. Every function is pure;
the economics come from CalculationConstants.
"""

# =============================================================================
# FORMULA REFERENCE
# =============================================================================
"""
EMAIL COST
==========

    WEEKLY_MINUTES = DELEGATABLE × 0.6 × RESPONSE_MIN + DELEGATABLE × READ_MIN
    MONTHLY_HOURS  = WEEKLY_MINUTES / 60 × WEEKS_PER_MONTH
    COST           = MONTHLY_HOURS × HOURLY_RATE

    Example (100 delegatable emails/week):
    - 100 × 0.6 × 5 + 100 × 2 = 500 min/week
    - 500 / 60 × 4.3 = 35.8 h/month
    - 35.83 × $250 = $8,958 → $9,000


MEETING COST
============

    TRUE_WEEKLY_HOURS = REPORTED_HOURS + COUNT × (PREP + SWITCH + FOLLOWUP) / 60
    MONTHLY_HOURS     = TRUE_WEEKLY_HOURS × WEEKS_PER_MONTH
    COST              = MONTHLY_HOURS × HOURLY_RATE


AUTOMATION COST
===============

    Same shape as email cost with a 70% response rate. Build effort scales
    with volume between 10 and 20 hours:

    BUILD_HOURS  = clamp(AUTOMATABLE / 10, 10, 20)
    BUILD_COST   = BUILD_HOURS × BUILD_RATE
    BREAK_EVEN   = BUILD_COST / (MONTHLY_COST - MAINTENANCE)
    FIRST_YEAR   = MONTHLY_COST × 12 - BUILD_COST - MAINTENANCE × 12

    Delegation comparison: same monthly hours at the VA rate.


AI TIME-BACK (monthly hours)
============================

    EMAIL      = min(DELEGATABLE × 0.5 × 3.5 / 60 × WPM, 10)
    MEETINGS   = min(MEETINGS × PREP / 60 × WPM, 8)
    DECISIONS  = min(PENDING × 5 / 60, 5)
    AUTOMATION = min(AUTOMATABLE × 0.8 × 4 / 60 × WPM, 12)
    TOTAL      = min(EMAIL + MEETINGS + DECISIONS + AUTOMATION, 25)

    Category caps apply first; the total cap only binds when several
    categories are near their own caps.


ROUNDING
========

    Dollars → nearest $100, hours → 1 decimal, both half-up, applied once at
    the end of each formula.
"""

import math
from dataclasses import dataclass, asdict
from typing import Optional

from leverage_audit.config import CalculationConstants


DEFAULT_CONSTANTS = CalculationConstants()


# =============================================================================
# ROUNDING
# =============================================================================

def round_half_up(value: float, digits: int = 0) -> float:
    """Round .5 away from the floor, never to even."""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def round_hours(value: float) -> float:
    return round_half_up(value, 1)


def round_dollars(value: float) -> int:
    """Nearest $100."""
    return int(math.floor(value / 100 + 0.5)) * 100


def round_int(value: float) -> int:
    return int(math.floor(value + 0.5))


# =============================================================================
# RESULT STRUCTURES
# =============================================================================

@dataclass(frozen=True)
class EmailCost:
    hours: float  # monthly
    cost: int

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class MeetingCost:
    actual_hours: float   # weekly, as reported
    true_hours: float     # weekly, with prep/follow-up overhead
    monthly_hours: float
    monthly_cost: int

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class AutomationEconomics:
    build_cost: int
    monthly_maintenance: float
    break_even_months: Optional[float]  # None when it never pays back
    first_year_savings: int


@dataclass(frozen=True)
class DelegationEconomics:
    monthly_cost: int
    annual_cost: int


@dataclass(frozen=True)
class AutomationCost:
    weekly_hours: float
    monthly_hours: float
    monthly_cost: int
    automation: AutomationEconomics
    delegation: DelegationEconomics

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class TimebackBreakdown:
    email: float
    meetings: float
    decisions: float
    automation: float


@dataclass(frozen=True)
class Timeback:
    hours: float
    cost: int
    breakdown: TimebackBreakdown

    def to_dict(self) -> dict:
        return asdict(self)


# =============================================================================
# FORMULAS
# =============================================================================

def _weekly_mail_minutes(count: float, response_rate: float, c: CalculationConstants) -> float:
    return count * response_rate * c.email_response_minutes + count * c.email_read_minutes


def email_weekly_hours(delegatable_count: float,
                       constants: CalculationConstants = DEFAULT_CONSTANTS) -> float:
    """Unrounded weekly hours spent reading and answering delegatable email."""
    c = constants
    return _weekly_mail_minutes(delegatable_count, c.email_response_rate, c) / 60


def email_cost(delegatable_count: float, total_count: float = 0,
               constants: CalculationConstants = DEFAULT_CONSTANTS) -> EmailCost:
    """Monthly time and cost of handling delegatable email yourself."""
    c = constants
    monthly_hours = email_weekly_hours(delegatable_count, c) * c.weeks_per_month
    monthly_cost = monthly_hours * c.hourly_rate

    return EmailCost(hours=round_hours(monthly_hours), cost=round_dollars(monthly_cost))


def meeting_cost(weekly_meetings: float, weekly_hours: float,
                 constants: CalculationConstants = DEFAULT_CONSTANTS) -> MeetingCost:
    """True meeting load including prep, context switching and follow-up."""
    c = constants
    overhead_per_meeting = c.meeting_prep_minutes + c.meeting_context_switch_minutes + c.meeting_followup_minutes
    total_weekly_minutes = weekly_hours * 60 + weekly_meetings * overhead_per_meeting
    true_weekly_hours = total_weekly_minutes / 60
    monthly_hours = true_weekly_hours * c.weeks_per_month
    monthly_cost = monthly_hours * c.hourly_rate

    return MeetingCost(
        actual_hours=round_hours(weekly_hours),
        true_hours=round_hours(true_weekly_hours),
        monthly_hours=round_hours(monthly_hours),
        monthly_cost=round_dollars(monthly_cost),
    )


def automation_cost(automatable_count: float, total_count: float = 0,
                    constants: CalculationConstants = DEFAULT_CONSTANTS) -> AutomationCost:
    """
    Cost of handling automatable requests manually, against building a
    workflow for them or handing them to a VA.
    """
    c = constants
    weekly_minutes = _weekly_mail_minutes(automatable_count, c.automatable_response_rate, c)
    weekly_hours = weekly_minutes / 60
    monthly_hours = weekly_hours * c.weeks_per_month
    monthly_cost = monthly_hours * c.hourly_rate

    build_hours = min(max(c.automation_min_build_hours, automatable_count / 10), c.automation_max_build_hours)
    build_cost = build_hours * c.automation_build_rate

    maintenance = c.automation_monthly_maintenance
    net_monthly = monthly_cost - maintenance
    break_even = round_hours(build_cost / net_monthly) if net_monthly > 0 else None

    delegation_monthly = monthly_hours * c.delegation_hourly_rate

    return AutomationCost(
        weekly_hours=round_hours(weekly_hours),
        monthly_hours=round_hours(monthly_hours),
        monthly_cost=round_dollars(monthly_cost),
        automation=AutomationEconomics(
            build_cost=round_dollars(build_cost),
            monthly_maintenance=maintenance,
            break_even_months=break_even,
            first_year_savings=round_int(monthly_cost * 12 - build_cost - maintenance * 12),
        ),
        delegation=DelegationEconomics(
            monthly_cost=round_dollars(delegation_monthly),
            annual_cost=round_dollars(delegation_monthly * 12),
        ),
    )


def ai_timeback(delegatable_count: float, weekly_meeting_count: float, pending_count: float,
                automatable_count: float = 0,
                constants: CalculationConstants = DEFAULT_CONSTANTS) -> Timeback:
    """Monthly hours an assistant could hand back, capped per category then overall."""
    c = constants

    email_raw = delegatable_count * 0.5 * 3.5 / 60 * c.weeks_per_month
    email_hours = min(email_raw, c.max_email_timeback)

    meeting_raw = weekly_meeting_count * c.meeting_prep_minutes / 60 * c.weeks_per_month
    meeting_hours = min(meeting_raw, c.max_meeting_prep_timeback)

    decision_raw = pending_count * 5 / 60
    decision_hours = min(decision_raw, c.max_decision_timeback)

    automation_hours = 0.0
    if automatable_count:
        automation_raw = automatable_count * 0.8 * 4 / 60 * c.weeks_per_month
        automation_hours = min(automation_raw, c.max_automation_timeback)

    total = min(email_hours + meeting_hours + decision_hours + automation_hours, c.max_total_timeback)

    return Timeback(
        hours=round_hours(total),
        cost=round_dollars(total * c.hourly_rate),
        breakdown=TimebackBreakdown(
            email=round_hours(email_hours),
            meetings=round_hours(meeting_hours),
            decisions=round_hours(decision_hours),
            automation=round_hours(automation_hours),
        ),
    )


def weekly_value(hours: float, constants: CalculationConstants = DEFAULT_CONSTANTS) -> int:
    """Dollar value of weekly hours, to the dollar."""
    return round_int(hours * constants.hourly_rate)


def monthly_value(weekly_dollars: float, constants: CalculationConstants = DEFAULT_CONSTANTS) -> int:
    return round_int(weekly_dollars * constants.weeks_per_month)
