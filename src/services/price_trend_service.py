# src/services/price_trend_service.py

"""Facade exposing recording, history and series queries."""

import logging
from datetime import date

from src.analysis.aggregator import aggregate
from src.analysis.predictor import ForecastPolicy, predict
from src.analysis.series_composer import compose
from src.models.errors import ProductNotFoundError
from src.models.price_event import PriceEvent
from src.models.product import CatalogMutation, CatalogService
from src.models.series import PriceSeries, SparseSeries
from src.services.change_recorder import ChangeRecorder
from src.services.timeline_reader import TimelineReader
from src.storage.price_history_db import PriceHistoryDB

logger = logging.getLogger("price_trends.service")


class PriceTrendService:
    """Coordinates the recorder, reader, aggregator, predictor and composer."""

    def __init__(
        self,
        store: PriceHistoryDB,
        catalog: CatalogService,
        policy: ForecastPolicy | None = None,
        recorder: ChangeRecorder | None = None,
    ) -> None:
        self._catalog = catalog
        self.policy = policy or ForecastPolicy()
        self.recorder = recorder or ChangeRecorder(store)
        self.reader = TimelineReader(store, catalog)

    def record_if_changed(
        self, mutation: CatalogMutation,
    ) -> PriceEvent | None:
        """Append an event for the mutation if its price changed."""
        return self.recorder.record_if_changed(mutation)

    def get_history(self, product_id: int) -> dict[str, object]:
        """Return ``{"events": [...]}`` with public event projections."""
        events = self.reader.get_history(product_id)
        return {"events": [e.to_dict() for e in events]}

    def get_series(
        self, product_id: int, today: date | None = None,
    ) -> PriceSeries | SparseSeries:
        """Monthly history, forecast and stats for one product."""
        events = self.reader.get_history(product_id)
        product = self._catalog.find_product(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)

        history = aggregate(events)
        forecast = predict(history, today=today, policy=self.policy)
        logger.debug(
            "Series for product %d: %d event(s), %d month(s), %d forecast",
            product_id,
            len(events),
            len(history),
            len(forecast),
        )
        return compose(history, forecast, product.price)
