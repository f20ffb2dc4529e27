"""
Engine Configuration

Holds the scoring weights and the economic constants behind every cost and
time-back figure. Defaults match the production assessment; a YAML file can
override any of them:

    scoring:
      weights:
        time_allocation: 30
        delegation_quality: 25
        strategic_focus: 20
        operating_rhythm: 15
    economics:
      hourly_rate: 250
      weeks_per_month: 4.3
    signals:
      confidence_threshold: 0.7

The engine never reads this file itself; the shell loads it and passes the
resulting EngineConfig in.
"""

import math
from dataclasses import dataclass, field, fields, replace
from numbers import Real
from pathlib import Path
from typing import Dict, Optional

import yaml

from leverage_audit.errors import ConfigError


PROJECT_ROOT = Path(__file__).parent.parent


# =============================================================================
# SCORING WEIGHTS
# =============================================================================

@dataclass(frozen=True)
class ScoringWeights:
    """Point share of each component on the 100-point scale."""
    time_allocation: int = 30
    delegation_quality: int = 25
    strategic_focus: int = 20
    operating_rhythm: int = 15

    @property
    def total(self) -> int:
        return (self.time_allocation + self.delegation_quality +
                self.strategic_focus + self.operating_rhythm)

    def validate(self) -> bool:
        """Every weight positive and the total within the 100-point scale.

        The four live components sum to 90; the remaining 10 points are
        headroom rather than an error.
        """
        weights = (self.time_allocation, self.delegation_quality,
                   self.strategic_focus, self.operating_rhythm)
        return all(w > 0 for w in weights) and 0 < self.total <= 100

    def as_dict(self) -> Dict[str, int]:
        return {
            'time_allocation': self.time_allocation,
            'delegation_quality': self.delegation_quality,
            'strategic_focus': self.strategic_focus,
            'operating_rhythm': self.operating_rhythm,
        }


# =============================================================================
# ECONOMIC CONSTANTS
# =============================================================================

@dataclass(frozen=True)
class CalculationConstants:
    """Fixed economics used by the cost/value formulas."""
    hourly_rate: float = 250.0           # $/hr of the respondent's time
    email_read_minutes: float = 2.0
    email_response_minutes: float = 5.0
    email_response_rate: float = 0.6     # share of delegatable mail needing a reply
    automatable_response_rate: float = 0.7
    meeting_prep_minutes: float = 10.0
    meeting_context_switch_minutes: float = 0.0
    meeting_followup_minutes: float = 5.0
    weeks_per_month: float = 4.3
    calendar_weeks_per_month: float = 4.33
    default_meeting_minutes: float = 30.0

    # Monthly time-back caps (hours)
    max_email_timeback: float = 10.0
    max_meeting_prep_timeback: float = 8.0
    max_decision_timeback: float = 5.0
    max_automation_timeback: float = 12.0
    max_total_timeback: float = 25.0

    # Automation economics
    automation_build_rate: float = 150.0
    automation_min_build_hours: float = 10.0
    automation_max_build_hours: float = 20.0
    automation_monthly_maintenance: float = 100.0
    delegation_hourly_rate: float = 35.0

    # Time-category heuristics
    work_week_hours: float = 40.0
    wasted_divisor: float = 10.0


@dataclass(frozen=True)
class EngineConfig:
    """Full engine configuration."""
    weights: ScoringWeights = field(default_factory=ScoringWeights)
    constants: CalculationConstants = field(default_factory=CalculationConstants)
    confidence_threshold: float = 0.7


# =============================================================================
# LOADING
# =============================================================================

def _overlay(base, overrides: dict, section: str):
    """Return a copy of a frozen dataclass with known keys replaced."""
    if not overrides:
        return base
    if not isinstance(overrides, dict):
        raise ConfigError(f"'{section}' must be a mapping")

    known = {f.name for f in fields(base)}
    unknown = set(overrides) - known
    if unknown:
        raise ConfigError(f"Unknown keys in '{section}': {', '.join(sorted(unknown))}")

    for key, value in overrides.items():
        if isinstance(value, bool) or not isinstance(value, Real) or not math.isfinite(value):
            raise ConfigError(f"'{section}.{key}' must be a number (got {value!r})")

    return replace(base, **overrides)


def _section(data: dict, key: str) -> dict:
    section = data.get(key) or {}
    if not isinstance(section, dict):
        raise ConfigError(f"'{key}' must be a mapping")
    return section


def load_config(config_path: Optional[Path] = None) -> EngineConfig:
    """Load engine configuration from YAML, falling back to defaults."""
    if config_path is None:
        config_path = PROJECT_ROOT / 'config' / 'config.yaml'
        if not config_path.exists():
            config_path = PROJECT_ROOT / 'config' / 'config.example.yaml'

    config = EngineConfig()
    if not config_path.exists():
        return config

    try:
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"{config_path} must contain a mapping")

    scoring = _section(data, 'scoring')
    weights = _overlay(config.weights, scoring.get('weights', {}), 'scoring.weights')
    if not weights.validate():
        raise ConfigError(f"Scoring weights must be positive and total at most 100 (got {weights.total})")

    constants = _overlay(config.constants, _section(data, 'economics'), 'economics')

    threshold = _section(data, 'signals').get('confidence_threshold', config.confidence_threshold)
    if isinstance(threshold, bool) or not isinstance(threshold, Real) or not 0.0 <= threshold <= 1.0:
        raise ConfigError(f"signals.confidence_threshold must be within [0, 1] (got {threshold})")

    return EngineConfig(weights=weights, constants=constants, confidence_threshold=float(threshold))
