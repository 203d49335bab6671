# src/analysis/aggregator.py

"""Collapse raw price events into one value per calendar month."""

from collections.abc import Iterable

from src.models.price_event import PriceEvent, to_utc
from src.models.series import MonthlyPoint


def aggregate(events: Iterable[PriceEvent]) -> list[MonthlyPoint]:
    """Return one point per UTC calendar month, oldest month first.

    Within a month the chronologically last event wins.  Events with
    identical timestamps keep their input (creation) order.
    """
    ordered = sorted(events, key=lambda e: to_utc(e.recorded_at))

    by_month: dict[tuple[int, int], float] = {}
    for event in ordered:
        moment = to_utc(event.recorded_at)
        by_month[(moment.year, moment.month)] = event.price

    return [
        MonthlyPoint(year=year, month=month, price=price)
        for (year, month), price in sorted(by_month.items())
    ]
