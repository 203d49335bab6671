# src/analysis/series_composer.py

"""Merge historical and forecast months into one chart-ready series."""

import logging
from collections.abc import Sequence

from src.analysis.predictor import round_half_up
from src.config.settings import Settings
from src.models.series import (
    ChartPoint,
    ForecastPoint,
    MonthlyPoint,
    PriceSeries,
    SparseSeries,
    SummaryStats,
)

logger = logging.getLogger("price_trends.composer")


def _summarise(
    history: Sequence[MonthlyPoint],
    forecast: Sequence[ForecastPoint],
    current_price: float,
) -> SummaryStats:
    prices = [p.price for p in history]
    previous = prices[-2] if len(prices) >= 2 else current_price
    predicted_next = (
        forecast[0].predicted if forecast else current_price
    )
    return SummaryStats(
        highest=max(prices),
        lowest=min(prices),
        average=round_half_up(sum(prices) / len(prices)),
        current_trend=current_price - previous,
        predicted_next=predicted_next,
        predicted_delta=predicted_next - current_price,
    )


def compose(
    history: Sequence[MonthlyPoint],
    forecast: Sequence[ForecastPoint],
    current_price: float,
    min_chart_points: int | None = None,
) -> PriceSeries | SparseSeries:
    """Build the combined series, or a sparse marker for thin history.

    When a forecast exists a bridge point repeating the last historical
    month (with every value set to its price) joins the two segments.
    Statistics cover the historical segment only.
    """
    threshold = (
        Settings.MIN_CHART_POINTS
        if min_chart_points is None
        else min_chart_points
    )
    if len(history) < max(threshold, 1):
        logger.debug(
            "Sparse series: %d month(s) tracked, %d needed",
            len(history),
            threshold,
        )
        return SparseSeries(
            current_price=current_price, tracked_points=len(history),
        )

    points = [ChartPoint(label=p.label, price=p.price) for p in history]

    if forecast:
        last = history[-1]
        points.append(ChartPoint(
            label=last.label,
            price=last.price,
            predicted=last.price,
            upper=last.price,
            lower=last.price,
        ))
        points.extend(
            ChartPoint(
                label=f.label,
                predicted=f.predicted,
                upper=f.upper,
                lower=f.lower,
            )
            for f in forecast
        )

    return PriceSeries(
        points=points,
        stats=_summarise(history, forecast, current_price),
        forecast=list(forecast),
    )
