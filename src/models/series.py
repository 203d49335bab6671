# src/models/series.py

"""Derived (never persisted) monthly, forecast and chart series models."""

from dataclasses import dataclass, field
from datetime import date


def month_label(year: int, month: int) -> str:
    """Format a calendar month as ``"Jan 2026"``."""
    return date(year, month, 1).strftime("%b %Y")


@dataclass(frozen=True)
class MonthlyPoint:
    """Last recorded price within one calendar month."""

    year: int
    month: int
    price: float

    @property
    def label(self) -> str:
        """Human-readable month bucket."""
        return month_label(self.year, self.month)


@dataclass(frozen=True)
class ForecastPoint:
    """Projected price for a future month with a symmetric band."""

    year: int
    month: int
    predicted: float
    upper: float
    lower: float

    @property
    def label(self) -> str:
        """Human-readable month bucket."""
        return month_label(self.year, self.month)


@dataclass(frozen=True)
class ChartPoint:
    """One row of the combined historical + forecast series.

    Historical rows carry only ``price``; forecast rows carry only the
    ``predicted``/``upper``/``lower`` triple; the bridge row carries all.
    """

    label: str
    price: float | None = None
    predicted: float | None = None
    upper: float | None = None
    lower: float | None = None

    def to_dict(self) -> dict[str, object]:
        """Serialise for JSON output."""
        return {
            "month": self.label,
            "price": self.price,
            "predicted": self.predicted,
            "upper": self.upper,
            "lower": self.lower,
        }


@dataclass(frozen=True)
class SummaryStats:
    """Statistics over the historical segment of a series."""

    highest: float
    lowest: float
    average: float
    current_trend: float
    predicted_next: float
    predicted_delta: float

    def to_dict(self) -> dict[str, object]:
        """Serialise for JSON output."""
        return {
            "highest": self.highest,
            "lowest": self.lowest,
            "average": self.average,
            "currentTrend": self.current_trend,
            "predictedNext": self.predicted_next,
            "predictedDelta": self.predicted_delta,
        }


@dataclass
class PriceSeries:
    """Chart-ready price series plus summary statistics."""

    points: list[ChartPoint]
    stats: SummaryStats
    forecast: list[ForecastPoint] = field(
        default_factory=lambda: list[ForecastPoint]()
    )

    @property
    def can_predict(self) -> bool:
        """Whether a forecast segment is present."""
        return bool(self.forecast)

    @property
    def outlook(self) -> str:
        """``drop``, ``rise`` or ``stable`` for next month's price."""
        if self.stats.predicted_delta < 0:
            return "drop"
        if self.stats.predicted_delta > 0:
            return "rise"
        return "stable"

    def to_dict(self) -> dict[str, object]:
        """Serialise for JSON output."""
        return {
            "sparse": False,
            "canPredict": self.can_predict,
            "outlook": self.outlook,
            "points": [p.to_dict() for p in self.points],
            "stats": self.stats.to_dict(),
        }


@dataclass(frozen=True)
class SparseSeries:
    """Too little history to chart; callers show a placeholder."""

    current_price: float
    tracked_points: int = 0

    def to_dict(self) -> dict[str, object]:
        """Serialise for JSON output."""
        return {
            "sparse": True,
            "currentPrice": self.current_price,
            "trackedPoints": self.tracked_points,
        }
