# src/models/change_event.py

"""Row-level change record emitted by the item store's change stream."""

from dataclasses import dataclass

from src.models.monitored_item import MonitoredItem

INSERT = "INSERT"
MODIFY = "MODIFY"
REMOVE = "REMOVE"

EVENT_KINDS: frozenset[str] = frozenset({INSERT, MODIFY, REMOVE})


@dataclass(frozen=True)
class ChangeEvent:
    """A before/after snapshot pair for one item mutation."""

    event_kind: str
    before: MonitoredItem | None = None
    after: MonitoredItem | None = None
    sequence: int = 0
    recorded_at: str = ""

    @property
    def item_id(self) -> str:
        """Id of the mutated row, taken from whichever snapshot exists."""
        snapshot = self.after or self.before
        return snapshot.id if snapshot else ""
