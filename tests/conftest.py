"""Shared fixtures for the assessment tests."""

import pytest

from leverage_audit.assessment.questions import QuestionType, get_questions
from leverage_audit.config import EngineConfig
from leverage_audit.signals.models import EmailCategory, EmailSignal, MeetingSignal, TimeDrainType


def _answer(question, best: bool):
    if question.type is QuestionType.BOOLEAN:
        return best != question.reverse_scored
    first_is_best = not question.reverse_scored
    return question.options[0] if best == first_is_best else question.options[-1]


@pytest.fixture
def best_answers():
    answers = {q.id: _answer(q, best=True) for q in get_questions()}
    answers.update({'name': 'Dana Founder', 'email': 'dana@acme.io', 'revenueRange': '$1M-$5M'})
    return answers


@pytest.fixture
def worst_answers():
    return {q.id: _answer(q, best=False) for q in get_questions()}


@pytest.fixture
def config():
    return EngineConfig()


def email(category=EmailCategory.DELEGATABLE_OPERATIONAL, confidence=0.9,
          drain=TimeDrainType.NONE, action=None, item_id='t'):
    return EmailSignal(item_id=item_id, category=category, confidence=confidence,
                       time_drain=drain, suggested_action=action)


def meeting(category='Team Sync', confidence=0.9, wasteful=False, minutes=None, action=None, item_id='m'):
    return MeetingSignal(item_id=item_id, category=category, confidence=confidence,
                         is_wasteful=wasteful, duration_minutes=minutes, suggested_action=action)


@pytest.fixture
def make_email():
    return email


@pytest.fixture
def make_meeting():
    return meeting
