import logging

import pytest

from leverage_audit.errors import ConfigError
from leverage_audit.signals.categorizer import (
    CALENDAR_BATCH_SIZE,
    EMAIL_BATCH_SIZE,
    categorize_all,
    load_categorizer,
)
from leverage_audit.signals.models import EmailCategory, EmailSignal, MeetingSignal


class RecordingCategorizer:
    def __init__(self, fail_batch=None):
        self.email_batches = []
        self.meeting_batches = []
        self.fail_batch = fail_batch

    def categorize_emails(self, threads):
        self.email_batches.append(len(threads))
        if len(self.email_batches) == self.fail_batch:
            raise TimeoutError("categorizer timed out")
        return [{'threadId': t, 'category': 'DELEGATABLE_OPERATIONAL', 'confidence': 0.9} for t in threads]

    def categorize_meetings(self, events):
        self.meeting_batches.append(len(events))
        return [MeetingSignal(item_id=e, category='Team Sync', confidence=0.8) for e in events]


def test_batches_respect_collaborator_limits():
    categorizer = RecordingCategorizer()
    threads = [f"t{i}" for i in range(23)]
    events = [f"e{i}" for i in range(45)]

    emails, meetings = categorize_all(categorizer, threads, events)

    assert categorizer.email_batches == [10, 10, 3]
    assert categorizer.meeting_batches == [20, 20, 5]
    assert max(categorizer.email_batches) <= EMAIL_BATCH_SIZE
    assert max(categorizer.meeting_batches) <= CALENDAR_BATCH_SIZE
    assert len(emails) == 23
    assert all(isinstance(e, EmailSignal) for e in emails)
    assert emails[0].category is EmailCategory.DELEGATABLE_OPERATIONAL
    assert len(meetings) == 45


def test_failed_batch_yields_fewer_records(caplog):
    categorizer = RecordingCategorizer(fail_batch=2)
    with caplog.at_level(logging.WARNING):
        emails, _ = categorize_all(categorizer, [f"t{i}" for i in range(25)])

    assert len(emails) == 15
    assert "batch 2 failed" in caplog.text


def test_load_categorizer_instantiates_classes():
    categorizer = load_categorizer(f"{__name__}:RecordingCategorizer")
    assert isinstance(categorizer, RecordingCategorizer)


@pytest.mark.parametrize("target", [
    'no_separator',
    'leverage_audit.missing_module:Thing',
    f"{__name__}:NotDefined",
    'json:JSONDecoder',
])
def test_load_categorizer_rejects_bad_targets(target):
    with pytest.raises(ConfigError):
        load_categorizer(target)
