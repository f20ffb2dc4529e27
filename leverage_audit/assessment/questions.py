"""
Assessment Question Catalog

The 24 self-assessment items, in display order, grouped into four scoring
components of six questions each:

- Time Allocation     (where your time actually goes)
- Delegation Quality  (what you shouldn't own anymore)
- Strategic Focus     (how you protect or destroy your focus)
- Operating Rhythm    (your personal operating system)

Each question carries the points it can contribute and whether a "yes" or a
first-option answer is the bad end of the scale (reverse scoring).
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple


class Component(str, Enum):
    TIME_ALLOCATION = 'time_allocation'
    DELEGATION_QUALITY = 'delegation_quality'
    STRATEGIC_FOCUS = 'strategic_focus'
    OPERATING_RHYTHM = 'operating_rhythm'

    @property
    def label(self) -> str:
        return self.value.replace('_', ' ').title()


class QuestionType(str, Enum):
    ENUMERATED = 'enumerated'
    BOOLEAN = 'boolean'


# Keys in an answer set that are lead details, not question answers
RESERVED_KEYS = ('name', 'email', 'revenueRange')

FREQUENCY = ('Daily', 'Weekly', 'Occasionally', 'Rarely')
CONFIDENCE = ('Fully Confident', 'Very Confident', 'Mostly Confident',
              'Somewhat Confident', 'Not Confident')


@dataclass(frozen=True)
class Question:
    """A single quiz item."""
    id: str
    text: str
    type: QuestionType
    component: Component
    points: int
    options: Tuple[str, ...] = ()
    reverse_scored: bool = False

    def __post_init__(self):
        if self.points <= 0:
            raise ValueError(f"Question {self.id} must carry positive points")
        if self.type is QuestionType.ENUMERATED and not self.options:
            raise ValueError(f"Enumerated question {self.id} needs options")
        if self.type is QuestionType.BOOLEAN and self.options:
            raise ValueError(f"Boolean question {self.id} cannot have options")

    def accepts(self, value) -> bool:
        """True if value is a well-formed answer to this question."""
        if self.type is QuestionType.ENUMERATED:
            return isinstance(value, str) and value in self.options
        return isinstance(value, bool)


def _choice(qid: str, text: str, component: Component, points: int,
            options: Tuple[str, ...] = FREQUENCY, reverse: bool = False) -> Question:
    return Question(qid, text, QuestionType.ENUMERATED, component, points, options, reverse)


def _toggle(qid: str, text: str, component: Component, points: int, reverse: bool = False) -> Question:
    return Question(qid, text, QuestionType.BOOLEAN, component, points, (), reverse)


_TA = Component.TIME_ALLOCATION
_DQ = Component.DELEGATION_QUALITY
_SF = Component.STRATEGIC_FOCUS
_OR = Component.OPERATING_RHYTHM


QUESTIONS: Tuple[Question, ...] = (
    # Where your time actually goes
    _choice('q1', 'How often do you block time for deep, focused work?', _TA, 4),
    _choice('q2', 'How often do you get pulled into strategy and big-picture thinking?', _TA, 4),
    _choice('q3', 'How often do you lead or attend scheduled team meetings?', _TA, 3),
    _choice('q4', 'How often do you give guidance to accelerate results/projects?', _TA, 3),
    _choice('q5', 'How often do you get pulled into unscheduled tasks?', _TA, 3, reverse=True),
    _choice('q6', 'How often do you take over tasks your team should do?', _TA, 3, reverse=True),

    # What you shouldn't own (anymore)
    _choice('q7', "How confident are you in your team's decisions?", _DQ, 4, options=CONFIDENCE),
    _choice('q8', 'How often can you coach or mentor your reports?', _DQ, 3),
    _choice('q9', 'How often do you reset or clarify team responsibilities?', _DQ, 3),
    _choice('q10', 'How often do you ensure follow-through on delegated tasks?', _DQ, 3),
    _choice('q11', 'How often do you make decisions your team should own?', _DQ, 3, reverse=True),
    _choice('q12', 'How often do you redo work instead of giving feedback?', _DQ, 3, reverse=True),

    # How you protect (or destroy) your focus
    _toggle('q13', 'I protect time for thinking, not just doing', _SF, 3),
    _toggle('q14', 'I end each week with a clear review or recap', _SF, 2),
    _toggle('q15', 'I start each day with a clear priority list', _SF, 2),
    _toggle('q16', 'I batch communications and shallow work', _SF, 2),
    _toggle('q17', "I keep working even when I'm mentally exhausted", _SF, 2, reverse=True),
    _toggle('q18', "I'm always busy with tasks that feel urgent but aren't strategic", _SF, 2, reverse=True),

    # Your personal operating system
    _toggle('q19', 'I plan my week in advance with clear priorities', _OR, 2),
    _toggle('q20', 'I review my P&L & key financials at least monthly', _OR, 2),
    _toggle('q21', 'I schedule time weekly for learning or growth', _OR, 2),
    _toggle('q22', 'I block time each week for recovery or rest', _OR, 2),
    _toggle('q23', 'I start most days by checking Slack or email', _OR, 2, reverse=True),
    _toggle('q24', 'I often step in to fix issues my team could resolve themselves', _OR, 2, reverse=True),
)

_BY_ID: Dict[str, Question] = {q.id: q for q in QUESTIONS}


def get_questions(component: Optional[Component] = None) -> Tuple[Question, ...]:
    """Questions in display order, optionally restricted to one component."""
    if component is None:
        return QUESTIONS
    return tuple(q for q in QUESTIONS if q.component is component)


def get_question(question_id: str) -> Optional[Question]:
    return _BY_ID.get(question_id)


def max_points(component: Component) -> int:
    """Self-assessment maximum for a component (sum of its question points)."""
    return sum(q.points for q in get_questions(component))


def has_question_answers(answers: dict) -> bool:
    """True if at least one catalog question has an answer."""
    return any(key in _BY_ID for key in (answers or {}))
