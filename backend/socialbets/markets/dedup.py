"""Seen-event tracking to drop replayed stream deliveries."""

import logging

logger = logging.getLogger(__name__)


class EventDeduplicator:
    """Set of event ids already processed or sent by the agent.

    Grows for the lifetime of the process unless ``max_entries`` is set, in
    which case the oldest ids are evicted first.
    """

    def __init__(self, max_entries: int = 0):
        self._max_entries = max_entries
        self._seen: dict[str, None] = {}

    def __len__(self) -> int:
        return len(self._seen)

    def has_seen(self, event_id: str) -> bool:
        return event_id in self._seen

    def mark_seen(self, event_id: str | None) -> None:
        """Record an event id. Marking twice is a no-op."""
        if not event_id or event_id in self._seen:
            return
        self._seen[event_id] = None

        if self._max_entries and len(self._seen) > self._max_entries:
            oldest = next(iter(self._seen))
            del self._seen[oldest]
            logger.debug(f"Evicted oldest seen event id {oldest}")
