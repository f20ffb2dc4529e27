"""
Error taxonomy for the leverage assessment.

The scoring engine itself degrades gracefully on bad input and does not raise
these. They are raised by the orchestration shell and by configuration loading.
"""


class LeverageError(Exception):
    """Base class for all assessment errors."""
    pass


class MissingAnswersError(LeverageError):
    # No question answers at all; the only input the shell refuses to score.
    pass


class ConfigError(LeverageError):
    # Unreadable YAML, invalid settings or an unloadable categorizer.
    pass


class LeadCaptureError(LeverageError):
    # A lead sink is enabled but not configured well enough to send.
    pass
