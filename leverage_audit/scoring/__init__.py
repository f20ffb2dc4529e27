"""Scoring Layer - Component Scores and Cost/Value Formulas"""
from .formulas import ai_timeback, automation_cost, email_cost, meeting_cost
from .scorer import ComponentScorer, ComponentScores

__all__ = [
    'ComponentScorer', 'ComponentScores',
    'ai_timeback', 'automation_cost', 'email_cost', 'meeting_cost',
]
