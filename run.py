#!/usr/bin/env python3
"""
Founder Leverage Assessment - Main Entry Point

Unified CLI around the scoring engine. The engine itself never reads files or
the environment; everything here loads input, calls it, and renders.

Usage:
    python run.py questions --component delegation_quality
    python run.py score answers.json --json
    python run.py score request.json --categorizer mypackage.llm:LLMCategorizer
    python run.py stage 72
    python run.py capture request.json
    python run.py init
"""

import json
import sys
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))

import click
import yaml
from rich.console import Console

console = Console()

COMPONENT_CHOICES = ['time_allocation', 'delegation_quality', 'strategic_focus', 'operating_rhythm']


def _load_input(path: Path) -> dict:
    """Read an answers or request file (JSON or YAML)."""
    try:
        with open(path, encoding='utf-8') as f:
            if path.suffix.lower() == '.json':
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
    except (ValueError, yaml.YAMLError) as e:
        raise click.BadParameter(f"{path} is not valid JSON/YAML: {e}", param_hint='INPUT')

    if not isinstance(data, dict):
        raise click.BadParameter(f"{path} must contain a mapping", param_hint='INPUT')
    return data


def _categorize(request, data: dict, categorizer_ref: str):
    """Run the categorizer over raw emailThreads/calendarEvents and add the records."""
    from dataclasses import replace
    from leverage_audit.signals.categorizer import categorize_all, load_categorizer

    categorizer = load_categorizer(categorizer_ref)
    threads = data.get('emailThreads')
    events = data.get('calendarEvents')
    emails, meetings = categorize_all(
        categorizer,
        threads if isinstance(threads, list) else [],
        events if isinstance(events, list) else [],
    )
    return replace(
        request,
        email_signals=request.email_signals + tuple(emails),
        meeting_signals=request.meeting_signals + tuple(meetings),
    )


def _score_file(input_file: str, config_file, categorizer_ref=None):
    from leverage_audit.config import load_config
    from leverage_audit.errors import LeverageError
    from leverage_audit.scoring.composer import AssessmentRequest, compose_results, require_answers

    try:
        config = load_config(Path(config_file) if config_file else None)
        data = _load_input(Path(input_file))
        request = AssessmentRequest.from_dict(data)
        if categorizer_ref:
            request = _categorize(request, data, categorizer_ref)
        require_answers(request.answers)
    except LeverageError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)

    return request, compose_results(request, config), config


@click.group()
@click.version_option(version='1.0.0')
@click.option('--log-level', default=None, help='DEBUG, INFO, WARNING (default: $LOG_LEVEL or WARNING)')
def cli(log_level):
    """Founder Leverage Assessment

    Score a founder's self-assessment (and optional inbox/calendar signals)
    into a 0-100 leverage score, stage and ranked opportunities.
    """
    from leverage_audit.utils.logging import setup_logging
    setup_logging(log_level)


@cli.command()
@click.option('--component', '-c', type=click.Choice(COMPONENT_CHOICES), help='Only one component')
def questions(component):
    """Show the assessment questions."""
    from leverage_audit.assessment.questions import Component
    from leverage_audit.report import display_questions

    display_questions(console, Component(component) if component else None)


@cli.command()
@click.argument('input_file', metavar='INPUT', type=click.Path(exists=True))
@click.option('--config', '-C', 'config_file', type=click.Path(exists=True), help='Config YAML path')
@click.option('--categorizer', 'categorizer_ref', metavar='MODULE:OBJECT',
              help='Categorize emailThreads/calendarEvents from INPUT before scoring')
@click.option('--json', 'as_json', is_flag=True, help='Print the result record as JSON')
@click.option('--output', '-o', type=click.Path(), help='Write the result record to a JSON file')
def score(input_file, config_file, categorizer_ref, as_json, output):
    """Score an answers or request file."""
    from leverage_audit.report import display_result, export_json

    request, result, config = _score_file(input_file, config_file, categorizer_ref)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2, sort_keys=True, ensure_ascii=False))
    else:
        display_result(console, result, config.weights)

    if output:
        export_json(result, Path(output))
        console.print(f"[green]Exported result to {output}[/green]")


@cli.command()
@click.argument('value', type=float)
def stage(value):
    """Classify a score into its stage."""
    from leverage_audit.assessment.stages import classify_stage

    result = classify_stage(value)
    console.print(f"{result.emoji} [bold]{result.name}[/bold] ({result.min_score}-{result.max_score})")
    console.print(result.description)


@cli.command()
@click.argument('input_file', metavar='INPUT', type=click.Path(exists=True))
@click.option('--config', '-C', 'config_file', type=click.Path(exists=True), help='Config YAML path')
@click.option('--dry-run', is_flag=True, help='Show the lead without sending it')
def capture(input_file, config_file, dry_run):
    """Score a file and push the lead into the CRM."""
    from leverage_audit.errors import LeverageError
    from leverage_audit.utils.leads import LeadCaptureManager, build_lead_capture

    request, result, _ = _score_file(input_file, config_file)
    lead = build_lead_capture(request.answers, result.score)

    console.print(f"[cyan]Lead:[/cyan] {lead.name} <{lead.email or '-'}> "
                  f"{lead.stage_emoji} {lead.stage_name} ({lead.score}/100)")

    if dry_run:
        return

    try:
        manager = LeadCaptureManager(config_path=Path(config_file) if config_file else None)
        sent = manager.send(lead)
    except LeverageError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)

    if sent:
        console.print("[green]✓[/green] Lead captured")
    else:
        console.print("[yellow]Lead was not captured (see log)[/yellow]")


@cli.command()
def init():
    """Copy the example config into place."""
    import shutil

    config_path = PROJECT_ROOT / 'config' / 'config.yaml'
    example_path = PROJECT_ROOT / 'config' / 'config.example.yaml'

    if config_path.exists():
        console.print("[yellow]config/config.yaml already exists[/yellow]")
    elif example_path.exists():
        shutil.copy(example_path, config_path)
        console.print("[green]✓[/green] Created config/config.yaml from example")
    else:
        console.print("[red]config/config.example.yaml not found[/red]")
        return

    console.print("\nNext steps:")
    console.print("  1. Edit config/config.yaml (economics, Notion credentials)")
    console.print("  2. Run: python run.py score answers.json")


if __name__ == '__main__':
    cli()
