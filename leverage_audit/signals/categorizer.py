"""
Categorizer Boundary

The email/calendar categorizer is an external collaborator (an LLM call in
production). The engine only depends on this protocol and on the structured
records it returns.

Usage:
    categorizer = load_categorizer('mypackage.llm:LLMCategorizer')
    emails, meetings = categorize_all(categorizer, threads, events)
"""

import importlib
import logging
from typing import Any, Iterator, List, Mapping, Protocol, Sequence, Tuple, TypeVar

from leverage_audit.errors import ConfigError
from leverage_audit.signals.models import EmailSignal, MeetingSignal

logger = logging.getLogger(__name__)

EMAIL_BATCH_SIZE = 10
CALENDAR_BATCH_SIZE = 20

T = TypeVar('T')


class Categorizer(Protocol):
    """Returns one record (dict or signal) per input item."""

    def categorize_emails(self, threads: Sequence[Any]) -> Sequence[Any]:
        ...

    def categorize_meetings(self, events: Sequence[Any]) -> Sequence[Any]:
        ...


def batched(items: Sequence[T], size: int) -> Iterator[Sequence[T]]:
    for start in range(0, len(items), size):
        yield items[start:start + size]


def _to_signals(records: Sequence[Any], signal_type) -> List:
    signals = []
    for record in records or ():
        if isinstance(record, signal_type):
            signals.append(record)
        elif isinstance(record, Mapping):
            signals.append(signal_type.from_dict(record))
        else:
            logger.debug("Skipping unrecognized %s record: %r", signal_type.__name__, type(record))
    return signals


def _run_batches(call, items: Sequence[Any], size: int, signal_type, label: str) -> List:
    signals = []
    for number, batch in enumerate(batched(items, size), start=1):
        try:
            records = call(batch)
        except Exception as e:
            # The batch contributes nothing; the engine sees fewer records
            logger.warning("%s batch %d failed (%d items): %s", label, number, len(batch), e)
            continue
        signals.extend(_to_signals(records, signal_type))
    return signals


def categorize_emails(categorizer: Categorizer, threads: Sequence[Any]) -> List[EmailSignal]:
    return _run_batches(categorizer.categorize_emails, threads, EMAIL_BATCH_SIZE, EmailSignal, 'Email')


def categorize_meetings(categorizer: Categorizer, events: Sequence[Any]) -> List[MeetingSignal]:
    return _run_batches(categorizer.categorize_meetings, events, CALENDAR_BATCH_SIZE, MeetingSignal, 'Calendar')


def categorize_all(categorizer: Categorizer, threads: Sequence[Any] = (),
                   events: Sequence[Any] = ()) -> Tuple[List[EmailSignal], List[MeetingSignal]]:
    """Categorize threads in batches of 10 and events in batches of 20."""
    emails = categorize_emails(categorizer, list(threads))
    meetings = categorize_meetings(categorizer, list(events))
    logger.info("Categorized %d/%d threads and %d/%d events",
                len(emails), len(threads), len(meetings), len(events))
    return emails, meetings


def load_categorizer(target: str) -> Categorizer:
    """
    Resolve a 'package.module:name' reference to a categorizer.

    A class is instantiated without arguments; any other object is used as is.
    """
    module_name, _, attr = target.partition(':')
    if not module_name or not attr:
        raise ConfigError(f"Categorizer must be given as module:object (got {target!r})")

    try:
        categorizer = getattr(importlib.import_module(module_name), attr)
    except (ImportError, AttributeError) as e:
        raise ConfigError(f"Cannot load categorizer {target!r}: {e}") from e

    if isinstance(categorizer, type):
        categorizer = categorizer()

    for method in ('categorize_emails', 'categorize_meetings'):
        if not callable(getattr(categorizer, method, None)):
            raise ConfigError(f"Categorizer {target!r} has no {method}()")
    return categorizer
