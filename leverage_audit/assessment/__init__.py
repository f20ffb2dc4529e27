"""Assessment Layer - Question Catalog and Stage Classification"""
from .questions import Component, Question, QuestionType, get_questions, max_points
from .stages import Stage, STAGES, classify_stage

__all__ = [
    'Component', 'Question', 'QuestionType', 'get_questions', 'max_points',
    'Stage', 'STAGES', 'classify_stage',
]
