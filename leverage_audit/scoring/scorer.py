"""
Component Scoring Engine for the Founder Leverage Assessment

Scores a respondent's answers across four components:
- Time allocation (where the week actually goes)
- Delegation quality (what the team owns)
- Strategic focus (protected thinking time)
- Operating rhythm (weekly/monthly habits)

Each component is worth a fixed share of the 100-point scale. Half of that
share comes from the self-assessment; the other half is reserved for
behavioral (email/calendar) evidence and is a flat placeholder until that
evidence is wired in.
"""

import logging
from dataclasses import dataclass, asdict
from typing import Callable, Dict, Mapping, Optional, Tuple

from leverage_audit.assessment.questions import (
    Component,
    Question,
    QuestionType,
    get_questions,
    max_points,
)
from leverage_audit.config import EngineConfig, ScoringWeights
from leverage_audit.scoring.formulas import round_int

logger = logging.getLogger(__name__)


# =============================================================================
# SCORING CURVES
# =============================================================================

# Option position -> multiplier, best answer first
SCORING_CURVES: Dict[int, Tuple[float, ...]] = {
    4: (1.0, 0.66, 0.33, 0.0),
    5: (1.0, 0.75, 0.5, 0.25, 0.0),
}

BOOLEAN_CURVE = {True: 1.0, False: 0.0}

SELF_ASSESSMENT_SHARE = 0.5


def scoring_curve(option_count: int, reverse: bool = False) -> Tuple[float, ...]:
    """Multipliers for an option list; linear when no fixed curve exists."""
    curve = SCORING_CURVES.get(option_count)
    if curve is None:
        if option_count == 1:
            curve = (1.0,)
        else:
            curve = tuple(1.0 - i / (option_count - 1) for i in range(option_count))
    return tuple(reversed(curve)) if reverse else curve


def answer_multiplier(question: Question, value) -> Optional[float]:
    """
    Multiplier earned by an answer, or None if it does not count.

    Malformed answers (unknown option, wrong type) count as unanswered.
    """
    if value is None or not question.accepts(value):
        return None

    if question.type is QuestionType.BOOLEAN:
        earned = BOOLEAN_CURVE[value]
        return 1.0 - earned if question.reverse_scored else earned

    curve = scoring_curve(len(question.options), question.reverse_scored)
    return curve[question.options.index(value)]


# =============================================================================
# BEHAVIORAL CONTRIBUTION
# =============================================================================

# (component, component weight) -> points from behavioral evidence
BehavioralContribution = Callable[[Component, int], float]


def placeholder_contribution(component: Component, weight: int) -> float:
    """Flat half-weight until email/calendar evidence feeds the score."""
    return weight * (1 - SELF_ASSESSMENT_SHARE)


# =============================================================================
# SCORING DATA STRUCTURES
# =============================================================================

@dataclass(frozen=True)
class ComponentScores:
    """Per-component points (each capped at its weight)."""
    time_allocation: int = 0
    delegation_quality: int = 0
    strategic_focus: int = 0
    operating_rhythm: int = 0

    @property
    def total(self) -> int:
        return (self.time_allocation + self.delegation_quality +
                self.strategic_focus + self.operating_rhythm)

    def get(self, component: Component) -> int:
        return getattr(self, component.value)

    def to_dict(self) -> dict:
        return asdict(self)


# =============================================================================
# SCORING ENGINE
# =============================================================================

class ComponentScorer:
    """
    Scores assessment answers per component.

    Scoring Formula:

    COMPONENT_SCORE = round(
        SELF_POINTS / MAX_SELF_POINTS × WEIGHT × 0.5 +
        BEHAVIORAL(component, WEIGHT)
    )

    capped at WEIGHT. TOTAL_SCORE is the sum of the four components, clamped
    to 0-100.
    """

    def __init__(self, config: Optional[EngineConfig] = None,
                 behavioral: Optional[BehavioralContribution] = None):
        self.config = config or EngineConfig()
        self.behavioral = behavioral or placeholder_contribution

    @property
    def weights(self) -> ScoringWeights:
        return self.config.weights

    def weight_for(self, component: Component) -> int:
        return getattr(self.weights, component.value)

    def self_assessment_points(self, component: Component, answers: Mapping) -> float:
        """Sum of points × multiplier over answered questions."""
        points = 0.0
        for question in get_questions(component):
            multiplier = answer_multiplier(question, answers.get(question.id))
            if multiplier is None:
                continue
            points += question.points * multiplier
        return points

    def score_component(self, component: Component, answers: Mapping) -> int:
        weight = self.weight_for(component)
        answers = answers or {}

        possible = max_points(component)
        earned = self.self_assessment_points(component, answers)
        self_scaled = earned / possible * weight * SELF_ASSESSMENT_SHARE if possible else 0.0

        score = round_int(self_scaled + self.behavioral(component, weight))
        return max(0, min(score, weight))

    def score_components(self, answers: Mapping) -> ComponentScores:
        return ComponentScores(**{
            component.value: self.score_component(component, answers)
            for component in Component
        })

    def total_score(self, answers: Mapping) -> int:
        return self.score(answers)[0]

    def score(self, answers: Mapping) -> Tuple[int, ComponentScores]:
        """Total score and the component breakdown it was summed from."""
        components = self.score_components(answers)
        total = max(0, min(100, components.total))
        logger.debug("Component scores %s -> %d", components.to_dict(), total)
        return total, components
