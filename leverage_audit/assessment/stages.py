"""
Leader Stage Classification

Maps a 0-100 efficiency score onto one of five stages. Stages are derived at
read time from the score and never stored next to it.

    Crisis State        0 - 29
    Firefighter Mode   30 - 49
    Overloaded Founder 50 - 69
    Stretched Leader   70 - 89
    Elite Operator     90 - 100
"""

import logging
import math
from dataclasses import dataclass
from decimal import Decimal
from numbers import Real
from typing import Tuple

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Stage:
    name: str
    emoji: str
    description: str
    min_score: int
    max_score: int

    def contains(self, score: float) -> bool:
        # Each stage owns [min, max + 1) so fractional scores never fall between stages
        if self.max_score >= 100:
            return self.min_score <= score <= self.max_score
        return self.min_score <= score < self.max_score + 1


# Ordered best to worst
STAGES: Tuple[Stage, ...] = (
    Stage(
        name="Elite Operator",
        emoji="🚀",
        description="You've built a machine. Your time is focused, your team owns outcomes, "
                    "and you're leading at the right altitude.",
        min_score=90,
        max_score=100,
    ),
    Stage(
        name="Stretched Leader",
        emoji="🎯",
        description="You're leading well but still caught in the weeds. Your team needs more "
                    "ownership, and your calendar needs real boundaries.",
        min_score=70,
        max_score=89,
    ),
    Stage(
        name="Overloaded Founder",
        emoji="⚠️",
        description="You're the bottleneck. Too many decisions, too many emails, not enough "
                    "leverage. Time to build systems and delegate.",
        min_score=50,
        max_score=69,
    ),
    Stage(
        name="Firefighter Mode",
        emoji="🔥",
        description="You're drowning in execution. Your business is running you. "
                    "You need structure, fast.",
        min_score=30,
        max_score=49,
    ),
    Stage(
        name="Crisis State",
        emoji="🆘",
        description="You're in survival mode. Every hour is reactive. This pace is "
                    "unsustainable and urgent intervention is needed.",
        min_score=0,
        max_score=29,
    ),
)

TOP_STAGE = STAGES[0]
LOWEST_STAGE = STAGES[-1]


def classify_stage(score) -> Stage:
    """
    Get the stage for a score.

    Logic:
    - Non-numeric or non-finite input: lowest stage, logged as a data-quality issue
    - Clamp to [0, 100]
    - Return the single stage whose range holds the score
    """
    if isinstance(score, Decimal):
        score = float(score) if score.is_finite() else math.nan

    if isinstance(score, bool) or not isinstance(score, Real) or not math.isfinite(score):
        logger.warning("Invalid score %r, falling back to %s", score, LOWEST_STAGE.name)
        return LOWEST_STAGE

    clamped = max(0.0, min(100.0, float(score)))

    for stage in STAGES:
        if stage.contains(clamped):
            return stage

    logger.error("No stage found for score %s", clamped)
    return TOP_STAGE if clamped >= TOP_STAGE.min_score else LOWEST_STAGE


def stage_rank(stage: Stage) -> int:
    """0 for the lowest stage, 4 for the top."""
    return len(STAGES) - 1 - STAGES.index(stage)


def validate_stage_partition() -> bool:
    """True if the stage ranges cover 0-100 with no gaps or overlaps."""
    ordered = sorted(STAGES, key=lambda s: s.min_score)
    if ordered[0].min_score != 0 or ordered[-1].max_score != 100:
        return False
    return all(nxt.min_score == cur.max_score + 1 for cur, nxt in zip(ordered, ordered[1:]))
