"""Signals Layer - Categorized Email/Calendar Records"""
from .models import AISolution, AnalysisMode, EmailCategory, EmailSignal, MeetingSignal, RawMetrics, TimeDrainType
from .extractor import SignalSummary, summarize_signals
from .categorizer import Categorizer, categorize_all, load_categorizer

__all__ = [
    'AISolution', 'AnalysisMode', 'EmailCategory', 'EmailSignal', 'MeetingSignal',
    'RawMetrics', 'TimeDrainType', 'SignalSummary', 'summarize_signals',
    'Categorizer', 'categorize_all', 'load_categorizer',
]
