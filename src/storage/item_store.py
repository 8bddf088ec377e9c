# src/storage/item_store.py

"""SQLite-backed item store with an append-only change stream."""

import json
import logging
import sqlite3
import threading
from datetime import datetime
from pathlib import Path
from typing import Any

from src.config.settings import Settings
from src.errors import StoreReadError, StoreWriteError
from src.models.change_event import INSERT, MODIFY, REMOVE, ChangeEvent
from src.models.monitored_item import MonitoredItem

logger = logging.getLogger("price_monitor.item_store")

_SCHEMA = """\
CREATE TABLE IF NOT EXISTS items (
    id       TEXT PRIMARY KEY,
    url      TEXT NOT NULL,
    selector TEXT NOT NULL,
    item     TEXT NOT NULL,
    price    TEXT NOT NULL,
    email    TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS item_changes (
    sequence    INTEGER PRIMARY KEY AUTOINCREMENT,
    event_kind  TEXT NOT NULL,
    item_id     TEXT NOT NULL,
    before_json TEXT,
    after_json  TEXT,
    recorded_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS stream_checkpoints (
    consumer TEXT PRIMARY KEY,
    sequence INTEGER NOT NULL
);
"""

_ITEM_COLUMNS = "id, url, selector, item, price, email"


def _row_to_item(row: tuple[str, ...]) -> MonitoredItem:
    return MonitoredItem(
        id=row[0],
        url=row[1],
        selector=row[2],
        item=row[3],
        price=row[4],
        email=row[5],
    )


def _snapshot(item: MonitoredItem | None) -> str | None:
    return json.dumps(item.to_dict()) if item else None


def _from_snapshot(raw: str | None) -> MonitoredItem | None:
    if not raw:
        return None
    try:
        return MonitoredItem.from_dict(json.loads(raw))
    except (json.JSONDecodeError, KeyError, TypeError) as exc:
        raise StoreReadError(f"Corrupt change snapshot: {exc}") from exc


class ItemStore:
    """Durable table of monitored items keyed by id.

    Every mutation appends a record to ``item_changes`` in the same
    transaction as the row change, giving subscribers an ordered,
    per-row change stream. A ``put`` that leaves the row identical
    writes nothing and emits no record.
    """

    def __init__(
        self, db_path: Path | None = None,
    ) -> None:
        path = db_path or Settings.ITEM_DB_PATH
        path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()
        self._conn = sqlite3.connect(
            str(path), check_same_thread=False,
        )
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.executescript(_SCHEMA)
        logger.debug("ItemStore opened at %s", path)

    def close(self) -> None:
        """Close the database connection."""
        self._conn.close()

    def _query(
        self, sql: str, params: tuple[object, ...] = (),
    ) -> list[tuple[Any, ...]]:
        """Run a read query under the lock.

        Raises:
            StoreReadError: the database could not be read.
        """
        try:
            with self._lock:
                return self._conn.execute(sql, params).fetchall()
        except sqlite3.Error as exc:
            raise StoreReadError(
                f"Failed to read item store: {exc}"
            ) from exc

    # ── Items ────────────────────────────────────────────

    def scan_all(self) -> list[MonitoredItem]:
        """Return every monitored item, ordered by id."""
        rows = self._query(
            f"SELECT {_ITEM_COLUMNS} FROM items ORDER BY id",
        )
        return [_row_to_item(r) for r in rows]

    def get(self, item_id: str) -> MonitoredItem | None:
        """Return one item by id, or ``None``."""
        rows = self._query(
            f"SELECT {_ITEM_COLUMNS} FROM items WHERE id = ?",
            (item_id,),
        )
        return _row_to_item(rows[0]) if rows else None

    def put(self, item: MonitoredItem) -> None:
        """Insert or fully replace a row and record the change.

        Raises:
            StoreWriteError: the database rejected the write.
        """
        try:
            with self._lock, self._conn:
                row = self._conn.execute(
                    f"SELECT {_ITEM_COLUMNS} FROM items WHERE id = ?",
                    (item.id,),
                ).fetchone()
                before = _row_to_item(row) if row else None
                if before == item:
                    logger.debug("put %s: row unchanged", item.id)
                    return

                self._conn.execute(
                    f"INSERT INTO items ({_ITEM_COLUMNS}) "
                    "VALUES (?, ?, ?, ?, ?, ?) "
                    "ON CONFLICT(id) DO UPDATE SET "
                    "url=excluded.url, selector=excluded.selector, "
                    "item=excluded.item, price=excluded.price, "
                    "email=excluded.email",
                    (
                        item.id, item.url, item.selector,
                        item.item, item.price, item.email,
                    ),
                )
                self._append_change(
                    MODIFY if before else INSERT, item.id, before, item,
                )
        except sqlite3.Error as exc:
            raise StoreWriteError(
                f"Failed to write item {item.id}: {exc}"
            ) from exc

    def delete(self, item_id: str) -> bool:
        """Remove a row. Returns ``False`` when the id is unknown."""
        try:
            with self._lock, self._conn:
                row = self._conn.execute(
                    f"SELECT {_ITEM_COLUMNS} FROM items WHERE id = ?",
                    (item_id,),
                ).fetchone()
                if row is None:
                    return False
                self._conn.execute(
                    "DELETE FROM items WHERE id = ?", (item_id,),
                )
                self._append_change(
                    REMOVE, item_id, _row_to_item(row), None,
                )
        except sqlite3.Error as exc:
            raise StoreWriteError(
                f"Failed to delete item {item_id}: {exc}"
            ) from exc
        return True

    def _append_change(
        self,
        event_kind: str,
        item_id: str,
        before: MonitoredItem | None,
        after: MonitoredItem | None,
    ) -> None:
        self._conn.execute(
            "INSERT INTO item_changes "
            "(event_kind, item_id, before_json, after_json, recorded_at) "
            "VALUES (?, ?, ?, ?, ?)",
            (
                event_kind,
                item_id,
                _snapshot(before),
                _snapshot(after),
                datetime.now().isoformat(),
            ),
        )

    # ── Change stream ────────────────────────────────────

    def read_changes(
        self, after_sequence: int = 0, limit: int = 100,
    ) -> list[ChangeEvent]:
        """Return change records newer than *after_sequence*, oldest first."""
        rows = self._query(
            "SELECT sequence, event_kind, before_json, after_json, "
            "       recorded_at "
            "FROM item_changes WHERE sequence > ? "
            "ORDER BY sequence ASC LIMIT ?",
            (after_sequence, limit),
        )
        return [
            ChangeEvent(
                event_kind=r[1],
                before=_from_snapshot(r[2]),
                after=_from_snapshot(r[3]),
                sequence=r[0],
                recorded_at=r[4],
            )
            for r in rows
        ]

    def get_checkpoint(self, consumer: str) -> int:
        """Last sequence acknowledged by *consumer* (0 if none)."""
        rows = self._query(
            "SELECT sequence FROM stream_checkpoints WHERE consumer = ?",
            (consumer,),
        )
        return int(rows[0][0]) if rows else 0

    def set_checkpoint(self, consumer: str, sequence: int) -> None:
        """Record that *consumer* has processed up to *sequence*."""
        try:
            with self._lock, self._conn:
                self._conn.execute(
                    "INSERT INTO stream_checkpoints (consumer, sequence) "
                    "VALUES (?, ?) "
                    "ON CONFLICT(consumer) DO UPDATE SET "
                    "sequence=excluded.sequence",
                    (consumer, sequence),
                )
        except sqlite3.Error as exc:
            raise StoreWriteError(
                f"Failed to save checkpoint for {consumer}: {exc}"
            ) from exc
