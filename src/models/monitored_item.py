# src/models/monitored_item.py

"""Monitored item model: one tracked price on one web page."""

from dataclasses import asdict, dataclass, replace
from typing import cast

REQUIRED_FIELDS: tuple[str, ...] = (
    "id", "url", "selector", "item", "price", "email",
)


@dataclass(frozen=True)
class MonitoredItem:
    """A single tracked price.

    ``price`` is the last extracted text, kept verbatim (currency
    symbols and whitespace included). It is never parsed as a number.
    """

    id: str
    url: str
    selector: str
    item: str
    price: str
    email: str

    def with_price(self, price: str) -> "MonitoredItem":
        """Return a copy of this row with only ``price`` replaced."""
        return replace(self, price=price)

    def to_dict(self) -> dict[str, str]:
        """Serialise to a plain dict (store snapshots, JSON output)."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "MonitoredItem":
        """Build an item from a mapping holding every required field.

        Raises ``KeyError`` when a field is missing and ``TypeError``
        when one is not a string.
        """
        values = {name: data[name] for name in REQUIRED_FIELDS}
        for name, value in values.items():
            if not isinstance(value, str):
                raise TypeError(
                    f"{name} must be a string, got {type(value).__name__}"
                )
        return cls(**cast(dict[str, str], values))
