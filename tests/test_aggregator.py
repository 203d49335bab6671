# tests/test_aggregator.py

"""Tests for monthly aggregation of price events."""

import unittest
from datetime import datetime, timedelta, timezone

from src.analysis.aggregator import aggregate
from src.models.price_event import ChangeKind, PriceEvent, derive_change_kind


def _events(*entries: tuple[datetime, float]) -> list[PriceEvent]:
    """Build a consistent timeline from (timestamp, price) pairs."""
    events: list[PriceEvent] = []
    previous: float | None = None
    for i, (at, price) in enumerate(entries, 1):
        events.append(PriceEvent(
            id=i,
            product_id=1,
            price=price,
            previous_price=previous,
            change_kind=derive_change_kind(price, previous),
            recorded_at=at,
        ))
        previous = price
    return events


def _utc(year: int, month: int, day: int, hour: int = 0) -> datetime:
    return datetime(year, month, day, hour, tzinfo=timezone.utc)


class TestAggregate(unittest.TestCase):
    """Last-write-wins monthly buckets."""

    def test_three_months_with_shadowed_event(self) -> None:
        """Two events in one month collapse to the later one."""
        events = _events(
            (_utc(2026, 1, 5), 100.0),
            (_utc(2026, 2, 3), 120.0),
            (_utc(2026, 2, 20), 110.0),
            (_utc(2026, 3, 10), 115.0),
        )
        points = aggregate(events)
        self.assertEqual(len(points), 3)
        self.assertEqual(points[1].price, 110.0)
        self.assertEqual(
            [p.label for p in points],
            ["Jan 2026", "Feb 2026", "Mar 2026"],
        )

    def test_single_event(self) -> None:
        """A lone bootstrap event yields one point."""
        points = aggregate(_events((_utc(2025, 9, 14), 500.0)))
        self.assertEqual(len(points), 1)
        self.assertEqual(points[0].price, 500.0)
        self.assertEqual((points[0].year, points[0].month), (2025, 9))

    def test_empty(self) -> None:
        """No events, no points."""
        self.assertEqual(aggregate([]), [])

    def test_unsorted_input(self) -> None:
        """Input order does not change which event wins."""
        events = _events(
            (_utc(2026, 2, 20), 110.0),
            (_utc(2026, 2, 3), 120.0),
        )
        points = aggregate(events)
        self.assertEqual(len(points), 1)
        self.assertEqual(points[0].price, 110.0)

    def test_same_timestamp_keeps_creation_order(self) -> None:
        """Ties resolve to the later-created event."""
        at = _utc(2026, 4, 1)
        points = aggregate(_events((at, 100.0), (at, 90.0)))
        self.assertEqual(points[0].price, 90.0)

    def test_gap_months_not_filled(self) -> None:
        """Months without events are absent, not interpolated."""
        points = aggregate(_events(
            (_utc(2026, 1, 1), 100.0),
            (_utc(2026, 5, 1), 80.0),
        ))
        self.assertEqual([p.month for p in points], [1, 5])

    def test_year_boundary(self) -> None:
        """December sorts before the following January."""
        points = aggregate(_events(
            (_utc(2025, 12, 31, 23), 100.0),
            (_utc(2026, 1, 1, 1), 105.0),
        ))
        self.assertEqual(
            [(p.year, p.month) for p in points], [(2025, 12), (2026, 1)],
        )

    def test_buckets_use_utc(self) -> None:
        """Local-time offsets are bucketed by their UTC month."""
        ist = timezone(timedelta(hours=5, minutes=30))
        # 1 Feb 02:00 IST is still 31 Jan in UTC
        points = aggregate(_events(
            (datetime(2026, 2, 1, 2, 0, tzinfo=ist), 100.0),
        ))
        self.assertEqual((points[0].year, points[0].month), (2026, 1))

    def test_kind_does_not_matter(self) -> None:
        """Unchanged corrections still count as the month's price."""
        events = [
            PriceEvent(1, 1, 100.0, None, ChangeKind.INITIAL, _utc(2026, 1, 1)),
            PriceEvent(2, 1, 100.0, 100.0, ChangeKind.UNCHANGED, _utc(2026, 2, 1)),
        ]
        self.assertEqual(len(aggregate(events)), 2)


if __name__ == "__main__":
    unittest.main()
