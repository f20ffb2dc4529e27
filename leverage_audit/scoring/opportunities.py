"""
AI Opportunity Generator

Turns the extracted workload into at most three ranked recommendations.

Two paths:
1. Externally supplied AI solutions are wrapped with a stepped estimate
   (the first solution is assumed to save the most time)
2. Otherwise up to three rule-based templates (automation, email triage,
   meeting prep) fire when the workload crosses their volume gates

Every entry carries the same economics: weekly/monthly savings at the hourly
rate, build and maintenance cost, break-even in weeks and a first-year ROI.
"""

from dataclasses import dataclass, asdict
from typing import List, Optional, Sequence

from leverage_audit.config import CalculationConstants
from leverage_audit.scoring.formulas import AutomationCost, monthly_value, round_int
from leverage_audit.signals.extractor import Insight, SignalSummary
from leverage_audit.signals.models import AISolution, EmailCategory

MAX_OPPORTUNITIES = 3

# Volume gates for the rule-based templates
AUTOMATION_GATE = 20
DELEGATION_GATE = 30
MEETING_COUNT_GATE = 10
MEETING_HOURS_GATE = 8

SOLUTION_EMOJI = ('🤖', '🎯', '📊')
SOLUTION_TIMELINE = ('2-3 weeks', '1-2 weeks', '2-4 weeks')

AUTOMATION_TITLES = {
    EmailCategory.TEAM_COORDINATION.label: "Automate Team Coordination",
}
DELEGATION_TITLES = {
    EmailCategory.TEAM_COORDINATION.label: "Delegate Team Coordination",
}


@dataclass(frozen=True)
class Opportunity:
    id: int
    emoji: str
    title: str
    description: str
    time_saved: str
    weekly_savings: int
    monthly_savings: int
    build_cost: float
    monthly_maintenance: float
    break_even_weeks: int
    roi: str
    implementation_time: str
    priority: str              # 'high' | 'medium'
    type: str                  # 'automation' | 'ai-assisted' | 'ai-powered'
    tools: Optional[str] = None

    @property
    def is_high_priority(self) -> bool:
        return self.priority == 'high'

    def to_dict(self) -> dict:
        return asdict(self)


# =============================================================================
# ECONOMICS
# =============================================================================

def _savings(hours: float, c: CalculationConstants) -> dict:
    weekly = hours * c.hourly_rate
    return {
        'time_saved': f"{round_int(hours)} hours/week",
        'weekly_savings': round_int(weekly),
        'monthly_savings': monthly_value(weekly, c),
    }


def _break_even_weeks(build_cost: float, hours: float, c: CalculationConstants) -> int:
    monthly_value = hours * c.hourly_rate * 4
    if monthly_value <= 0:
        return 0
    return round_int(build_cost / monthly_value)


def _first_year_roi(hours: float, build_cost: float, maintenance: float, c: CalculationConstants) -> str:
    annual = hours * c.hourly_rate * 52
    return f"{round_int((annual - build_cost - maintenance * 12) / build_cost)}x first year"


def _build(number: int, emoji: str, title: str, description: str, hours: float,
           build_cost: float, maintenance: float, c: CalculationConstants, **extra) -> Opportunity:
    fields = {
        'break_even_weeks': _break_even_weeks(build_cost, hours, c),
        'roi': _first_year_roi(hours, build_cost, maintenance, c) if build_cost else '0x first year',
    }
    fields.update(extra)
    return Opportunity(
        id=number,
        emoji=emoji,
        title=title,
        description=description,
        build_cost=build_cost,
        monthly_maintenance=maintenance,
        **_savings(hours, c),
        **fields,
    )


# =============================================================================
# AI SOLUTIONS
# =============================================================================

def from_ai_solutions(solutions: Sequence[AISolution], c: CalculationConstants) -> List[Opportunity]:
    """Wrap synthesized solutions with index-stepped estimates."""
    opportunities = []
    for index, solution in enumerate(solutions[:MAX_OPPORTUNITIES]):
        hours = 8 - 2 * index
        opportunities.append(_build(
            number=index + 1,
            emoji=SOLUTION_EMOJI[index],
            title=solution.name,
            description=solution.description,
            hours=hours,
            build_cost=2000 + 400 * index,
            maintenance=100 + 50 * index,
            c=c,
            tools=', '.join(solution.tools),
            implementation_time=SOLUTION_TIMELINE[index],
            priority='high' if index < 2 else 'medium',
            type='ai-powered',
        ))
    return opportunities


# =============================================================================
# RULE-BASED TEMPLATES
# =============================================================================

def _automation(summary: SignalSummary, automation: Optional[AutomationCost],
                c: CalculationConstants) -> Opportunity:
    email = summary.email
    insight = summary.automation
    hours = (automation.weekly_hours if automation else 0) or email.automatable_count * 0.15
    build_cost = (automation.automation.build_cost if automation else 0) or 2400
    maintenance = (automation.automation.monthly_maintenance if automation else 0) or 100

    if insight.matches:
        title = AUTOMATION_TITLES.get(insight.top_label, "Automate Repetitive Email Work")
        description = insight.top_suggestion or (
            f"Stop manually handling {insight.top_label.lower()}. Automate these repetitive tasks "
            f"so you can focus on what actually needs you."
        )
    else:
        title = "Stop Manual Order & Invoice Processing"
        description = (
            f"Stop answering the same requests over and over. A simple automated system handles "
            f"{'recurring' if email.automatable_count > 50 else 'repetitive'} tasks like purchase orders, "
            f"invoices, and inventory questions. It just runs in the background."
        )

    return _build(1, '🤖', title, description, hours, build_cost, maintenance, c,
                  implementation_time='2-3 weeks', priority='high', type='automation')


def _email_triage(summary: SignalSummary, c: CalculationConstants) -> Opportunity:
    insight = summary.delegation
    hours = summary.email.delegatable_count * 0.08

    if insight.matches:
        title = DELEGATION_TITLES.get(insight.top_label, "Delegate Email Management")
        description = insight.top_suggestion or (
            f"Let your team handle {insight.top_label.lower()}. An AI assistant sorts your emails and "
            f"routes these tasks to the right person so you only see what actually needs your attention."
        )
    else:
        title = "Smart Email Assistant for Your Team"
        description = (
            "An AI assistant reads your emails, sorts what needs your attention, drafts responses for "
            "common requests, and sends the rest to your team. You only see what actually needs you."
        )

    # No build: priced as a subscription against a nominal $2,400 setup
    return _build(2, '🎯', title, description, hours, 0, 200, c,
                  break_even_weeks=1,
                  roi=f"{round_int(hours * c.hourly_rate * 52 / 2400)}x first year",
                  implementation_time='3-5 days', priority='high', type='ai-assisted')


def _meeting_title(insight: Insight, wasteful: int) -> str:
    label = insight.top_label or ''
    if 'Status' in label or 'Standup' in label:
        return "Replace Status Meetings with Async Updates"
    if 'Planning' in label:
        return "Streamline Planning Meetings"
    if wasteful:
        return "Eliminate Wasteful Meetings & Automate Prep"
    return "Meeting Prep & Follow-up Assistant"


def _meeting_prep(summary: SignalSummary, c: CalculationConstants) -> Opportunity:
    meetings = summary.meetings
    insight = summary.meeting
    wasteful = meetings.wasteful_count
    hours = wasteful * 0.5 if wasteful else meetings.count * 0.25

    if insight.top_suggestion:
        description = insight.top_suggestion
    elif wasteful:
        description = (
            f"You have {wasteful} {insight.top_label or 'meetings'} per week that could be replaced with "
            f"async updates or eliminated. Automate meeting prep and follow-up to save time on the rest."
        )
    else:
        description = (
            "Never walk into a meeting unprepared again. Get a one-page brief before each meeting, "
            "plus automatic summaries and action items afterward."
        )

    return _build(3, '📊', _meeting_title(insight, wasteful), description, hours, 1200, 150, c,
                  implementation_time='1-2 weeks',
                  priority='high' if hours > 6 or wasteful > 5 else 'medium',
                  type='ai-assisted')


def from_workload(summary: SignalSummary, automation: Optional[AutomationCost],
                  c: CalculationConstants) -> List[Opportunity]:
    """
    Fire the rule-based templates whose volume gates are crossed.

    Gates:
    - Automation: more than 20 automatable threads
    - Email triage: more than 30 delegatable threads
    - Meeting prep: more than 10 meetings, more than 8 weekly hours, or any
      wasteful meeting
    """
    opportunities = []

    if summary.email.automatable_count > AUTOMATION_GATE:
        opportunities.append(_automation(summary, automation, c))

    if summary.email.delegatable_count > DELEGATION_GATE:
        opportunities.append(_email_triage(summary, c))

    meetings = summary.meetings
    if (meetings.count > MEETING_COUNT_GATE or meetings.weekly_hours > MEETING_HOURS_GATE
            or meetings.wasteful_count > 0):
        opportunities.append(_meeting_prep(summary, c))

    return opportunities


def rank_opportunities(opportunities: Sequence[Opportunity]) -> List[Opportunity]:
    """High priority first, then largest weekly savings; top three."""
    ranked = sorted(opportunities, key=lambda o: (not o.is_high_priority, -o.weekly_savings))
    return ranked[:MAX_OPPORTUNITIES]


def generate_opportunities(summary: SignalSummary, solutions: Sequence[AISolution] = (),
                           automation: Optional[AutomationCost] = None,
                           constants: Optional[CalculationConstants] = None) -> List[Opportunity]:
    c = constants or CalculationConstants()
    if solutions:
        candidates = from_ai_solutions(solutions, c)
    else:
        candidates = from_workload(summary, automation, c)
    return rank_opportunities(candidates)
