# src/models/price_event.py

"""Append-only price change event model."""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum


class ChangeKind(str, Enum):
    """How a price event relates to the price before it."""

    INITIAL = "initial"
    INCREASE = "increase"
    DECREASE = "decrease"
    UNCHANGED = "unchanged"


def derive_change_kind(
    price: float, previous_price: float | None,
) -> ChangeKind:
    """Classify a price against the one it replaces."""
    if previous_price is None:
        return ChangeKind.INITIAL
    if price > previous_price:
        return ChangeKind.INCREASE
    if price < previous_price:
        return ChangeKind.DECREASE
    return ChangeKind.UNCHANGED


def to_utc(moment: datetime) -> datetime:
    """Return *moment* as an aware UTC datetime (naive means UTC)."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


@dataclass(frozen=True)
class PriceEvent:
    """One immutable record of a product's price at a point in time."""

    id: int
    product_id: int
    price: float
    previous_price: float | None
    change_kind: ChangeKind
    recorded_at: datetime

    def to_dict(self) -> dict[str, object]:
        """Public projection used by the history API."""
        return {
            "id": self.id,
            "price": self.price,
            "previousPrice": self.previous_price,
            "changeKind": self.change_kind.value,
            "recordedAt": self.recorded_at.isoformat(),
        }
