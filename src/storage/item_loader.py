# src/storage/item_loader.py

"""Seed the item store from a JSON file of pre-registered items."""

import json
import logging
from pathlib import Path
from typing import cast

from src.models.monitored_item import REQUIRED_FIELDS, MonitoredItem
from src.storage.item_store import ItemStore

logger = logging.getLogger("price_monitor.item_loader")


def parse_items(data: object) -> tuple[list[MonitoredItem], int]:
    """Turn decoded JSON into items.

    Returns the valid items and the number of rejected entries.
    Entries that are not objects, lack a required field, hold a
    non-string value or carry an empty id are rejected.
    """
    if not isinstance(data, list):
        return [], 0

    entries: list[object] = cast(list[object], data)
    items: list[MonitoredItem] = []
    rejected = 0
    for entry in entries:
        if not isinstance(entry, dict):
            rejected += 1
            continue
        row = cast(dict[str, object], entry)
        missing = [f for f in REQUIRED_FIELDS if f not in row]
        if missing or not str(row["id"]).strip():
            logger.warning(
                "Skipping item entry (missing %s): %s",
                ", ".join(missing) or "id",
                row,
            )
            rejected += 1
            continue
        wrong_type = [
            f for f in REQUIRED_FIELDS if not isinstance(row[f], str)
        ]
        if wrong_type:
            logger.warning(
                "Skipping item entry (non-string %s): %s",
                ", ".join(wrong_type),
                row,
            )
            rejected += 1
            continue
        items.append(MonitoredItem.from_dict(row))
    return items, rejected


def import_items(store: ItemStore, filepath: Path) -> int:
    """Load *filepath* and ``put`` every valid item.

    Returns the number of items written. Unreadable files log a
    warning and import nothing.
    """
    try:
        with open(filepath, encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError) as exc:
        logger.warning("Failed to read %s: %s", filepath, exc)
        return 0

    items, rejected = parse_items(data)
    for item in items:
        store.put(item)

    logger.info(
        "Item import complete: %d written, %d rejected from %s",
        len(items),
        rejected,
        filepath.name,
    )
    return len(items)
