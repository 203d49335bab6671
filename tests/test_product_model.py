# tests/test_product_model.py

"""Tests for the catalog and price event dataclasses."""

import unittest
from datetime import datetime, timedelta, timezone

from src.models.price_event import (
    ChangeKind,
    PriceEvent,
    derive_change_kind,
    to_utc,
)
from src.models.product import (
    CatalogMutation,
    CatalogProduct,
    MutationOperation,
)
from src.models.series import MonthlyPoint, month_label


class TestDeriveChangeKind(unittest.TestCase):
    """Change kind is a pure function of the two prices."""

    def test_initial_without_previous(self) -> None:
        """No previous price means the first event."""
        self.assertIs(derive_change_kind(100.0, None), ChangeKind.INITIAL)

    def test_increase(self) -> None:
        """A higher price is an increase."""
        self.assertIs(
            derive_change_kind(120.0, 100.0), ChangeKind.INCREASE,
        )

    def test_decrease(self) -> None:
        """A lower price is a decrease."""
        self.assertIs(
            derive_change_kind(80.0, 100.0), ChangeKind.DECREASE,
        )

    def test_unchanged(self) -> None:
        """Equal prices are unchanged."""
        self.assertIs(
            derive_change_kind(100.0, 100.0), ChangeKind.UNCHANGED,
        )

    def test_zero_previous_is_not_initial(self) -> None:
        """A free item changing price is still a change, not initial."""
        self.assertIs(derive_change_kind(10.0, 0.0), ChangeKind.INCREASE)


class TestToUtc(unittest.TestCase):
    """Timestamp normalisation."""

    def test_naive_is_treated_as_utc(self) -> None:
        """Naive datetimes gain a UTC tzinfo without shifting."""
        result = to_utc(datetime(2026, 1, 1, 12, 0))
        self.assertEqual(result.tzinfo, timezone.utc)
        self.assertEqual(result.hour, 12)

    def test_aware_is_converted(self) -> None:
        """Offsets are converted to UTC."""
        ist = timezone(timedelta(hours=5, minutes=30))
        result = to_utc(datetime(2026, 1, 1, 5, 30, tzinfo=ist))
        self.assertEqual(result, datetime(2026, 1, 1, tzinfo=timezone.utc))


class TestPriceEvent(unittest.TestCase):
    """PriceEvent projection and immutability."""

    def _event(self) -> PriceEvent:
        return PriceEvent(
            id=7,
            product_id=3,
            price=450.0,
            previous_price=500.0,
            change_kind=ChangeKind.DECREASE,
            recorded_at=datetime(2026, 2, 1, tzinfo=timezone.utc),
        )

    def test_to_dict_public_shape(self) -> None:
        """The projection exposes exactly the public fields."""
        self.assertEqual(
            self._event().to_dict(),
            {
                "id": 7,
                "price": 450.0,
                "previousPrice": 500.0,
                "changeKind": "decrease",
                "recordedAt": "2026-02-01T00:00:00+00:00",
            },
        )

    def test_frozen(self) -> None:
        """Events cannot be mutated after creation."""
        event = self._event()
        with self.assertRaises(AttributeError):
            event.price = 1.0  # type: ignore[misc]


class TestCatalogModels(unittest.TestCase):
    """Catalog product and mutation defaults."""

    def test_product_title_defaults_empty(self) -> None:
        """Title is optional."""
        product = CatalogProduct(
            id=1, price=10.0, created_at=datetime(2026, 1, 1),
        )
        self.assertEqual(product.title, "")

    def test_create_mutation_has_no_previous(self) -> None:
        """previous_doc defaults to None."""
        product = CatalogProduct(
            id=1, price=10.0, created_at=datetime(2026, 1, 1),
        )
        mutation = CatalogMutation(MutationOperation.CREATE, product)
        self.assertIsNone(mutation.previous_doc)


class TestMonthLabels(unittest.TestCase):
    """Month bucket labels."""

    def test_month_label_format(self) -> None:
        """Labels read like ``Mar 2026``."""
        self.assertEqual(month_label(2026, 3), "Mar 2026")

    def test_monthly_point_label(self) -> None:
        """MonthlyPoint exposes its label."""
        self.assertEqual(
            MonthlyPoint(year=2025, month=12, price=1.0).label,
            "Dec 2025",
        )


if __name__ == "__main__":
    unittest.main()
