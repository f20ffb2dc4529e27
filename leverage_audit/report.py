"""
Console Report

Rich rendering of the catalog and of a composed result. This is the
presentation layer: it is the only place a stage is attached to a score.
"""

import json
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from leverage_audit.assessment.questions import Component, QuestionType, get_questions
from leverage_audit.assessment.stages import classify_stage
from leverage_audit.config import ScoringWeights
from leverage_audit.scoring.composer import ResultRecord

PRIORITY_STYLE = {
    'high': '[bold green]',
    'medium': '[yellow]',
}


def display_questions(console: Console, component: Optional[Component] = None):
    """Display the question catalog in a table."""
    questions = get_questions(component)
    table = Table(title=f"Assessment Questions ({len(questions)})")

    table.add_column("ID", style="cyan")
    table.add_column("Component", style="magenta")
    table.add_column("Pts", justify="right")
    table.add_column("Question", max_width=60)
    table.add_column("Answers", max_width=40)

    for question in questions:
        if question.type is QuestionType.BOOLEAN:
            answers = "true / false"
        else:
            answers = " | ".join(question.options)
        if question.reverse_scored:
            answers += " [dim](reversed)[/dim]"

        table.add_row(question.id, question.component.label, str(question.points), question.text, answers)

    console.print(table)


def display_result(console: Console, result: ResultRecord, weights: Optional[ScoringWeights] = None):
    """Score panel, component table and opportunities."""
    weights = weights or ScoringWeights()
    stage = classify_stage(result.score)
    leak = result.time_leak

    console.print(Panel.fit(
        f"""[bold]{stage.emoji} {stage.name}[/bold]  [green]{result.score}/100[/green]
{stage.description}

[cyan]Time leak:[/cyan] {leak.top_leak}
  {leak.description}
  ${leak.weekly_value:,}/week, ${leak.monthly_value:,}/month

[cyan]AI time-back:[/cyan] {result.ai_timeback.hours} h/month (${result.ai_timeback.cost:,})
""",
        title="Founder Leverage Assessment"
    ))

    table = Table(title="Component Scores")
    table.add_column("Component", style="cyan")
    table.add_column("Score", style="green", justify="right")
    table.add_column("Max", justify="right")
    for component in Component:
        table.add_row(
            component.label,
            str(result.component_scores.get(component)),
            str(getattr(weights, component.value)),
        )
    console.print(table)

    breakdown = Table(title="Typical 40-Hour Week")
    breakdown.add_column("Activity", style="cyan")
    breakdown.add_column("%", justify="right")
    breakdown.add_column("Hours", justify="right")
    breakdown.add_column("Automatable", justify="right")
    for item in result.time_breakdown:
        breakdown.add_row(item.category, str(item.percentage), f"{item.hours:.1f}", f"{item.automatable:.1f}")
    console.print(breakdown)

    if not result.ai_opportunities:
        console.print("[dim]No opportunities cleared the volume thresholds.[/dim]")
        return

    opportunities = Table(title="Top Opportunities")
    opportunities.add_column("", justify="center")
    opportunities.add_column("Opportunity", style="cyan", max_width=40)
    opportunities.add_column("Saves", justify="right")
    opportunities.add_column("$/week", style="green", justify="right")
    opportunities.add_column("ROI", justify="right")
    opportunities.add_column("Priority")
    for opp in result.ai_opportunities:
        style = PRIORITY_STYLE.get(opp.priority, '')
        opportunities.add_row(
            opp.emoji,
            opp.title,
            opp.time_saved,
            f"{opp.weekly_savings:,}",
            opp.roi,
            f"{style}{opp.priority}[/]" if style else opp.priority,
        )
    console.print(opportunities)


def export_json(result: ResultRecord, output_path: Path):
    """Write the result record as sorted JSON."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, 'w', encoding='utf-8') as f:
        json.dump(result.to_dict(), f, indent=2, sort_keys=True, ensure_ascii=False)
