# src/analysis/predictor.py

"""Short-horizon linear trend forecast over monthly prices.

The forecast is a deterministic extrapolation, not a statistical model:
an ordinary least-squares line is fitted to the most recent monthly
prices (x = 0..n-1) and projected forward one step per calendar month.
Each projection is floored at a fraction of the last known price, and
a symmetric confidence band widens linearly with the step.
"""

import math
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date, datetime, timezone

from src.config.settings import Settings
from src.models.series import ForecastPoint, MonthlyPoint


@dataclass(frozen=True)
class ForecastPolicy:
    """Tunable forecast constants; defaults come from ``Settings``."""

    window: int = field(default_factory=lambda: Settings.FORECAST_WINDOW)
    horizon: int = field(default_factory=lambda: Settings.FORECAST_HORIZON)
    confidence_rate: float = field(
        default_factory=lambda: Settings.CONFIDENCE_RATE
    )
    floor_ratio: float = field(
        default_factory=lambda: Settings.PRICE_FLOOR_RATIO
    )
    min_points: int = field(
        default_factory=lambda: Settings.MIN_FORECAST_POINTS
    )


@dataclass(frozen=True)
class TrendLine:
    """``price ~= intercept + slope * index``."""

    slope: float
    intercept: float

    def at(self, index: float) -> float:
        """Evaluate the line at *index*."""
        return self.intercept + self.slope * index


def round_half_up(value: float) -> float:
    """Round to a whole currency unit, halves toward +infinity."""
    return float(math.floor(value + 0.5))


def fit_trend(prices: Sequence[float]) -> TrendLine | None:
    """Ordinary least-squares fit over ``x = 0..n-1``.

    Returns ``None`` when the x-variance term is zero (fewer than two
    points), where no slope can be determined.
    """
    n = len(prices)
    sum_x = sum_y = sum_xy = sum_x2 = 0.0
    for i, price in enumerate(prices):
        sum_x += i
        sum_y += price
        sum_xy += i * price
        sum_x2 += i * i

    denom = n * sum_x2 - sum_x * sum_x
    if denom == 0:
        return None

    slope = (n * sum_xy - sum_x * sum_y) / denom
    intercept = (sum_y - slope * sum_x) / n
    return TrendLine(slope=slope, intercept=intercept)


def future_months(today: date, horizon: int) -> list[tuple[int, int]]:
    """The *horizon* calendar months following *today*'s month."""
    months: list[tuple[int, int]] = []
    for step in range(1, horizon + 1):
        offset = today.month - 1 + step
        months.append((today.year + offset // 12, offset % 12 + 1))
    return months


def predict(
    points: Sequence[MonthlyPoint],
    today: date | None = None,
    policy: ForecastPolicy | None = None,
) -> list[ForecastPoint]:
    """Project ``policy.horizon`` monthly prices after *today*.

    Returns an empty list when fewer than ``policy.min_points`` months
    of history exist; callers present that as "not enough data yet".
    """
    policy = policy or ForecastPolicy()
    if len(points) < max(policy.min_points, 1):
        return []

    today = today or datetime.now(timezone.utc).date()
    recent = [p.price for p in points[-policy.window:]]
    n = len(recent)
    last_price = points[-1].price
    months = future_months(today, policy.horizon)
    trend = fit_trend(recent)

    forecast: list[ForecastPoint] = []
    for step, (year, month) in enumerate(months, 1):
        half_width = last_price * policy.confidence_rate * step
        if trend is None:
            # No slope: hold the window mean
            predicted = round_half_up(sum(recent) / n)
        else:
            predicted = max(
                round_half_up(last_price * policy.floor_ratio),
                round_half_up(trend.at(n + step - 1)),
            )
        forecast.append(ForecastPoint(
            year=year,
            month=month,
            predicted=predicted,
            upper=round_half_up(predicted + half_width),
            lower=max(0.0, round_half_up(predicted - half_width)),
        ))
    return forecast
