# src/services/timeline_reader.py

"""Reads a product's price timeline, bootstrapping it on first access."""

import logging

from src.models.errors import DuplicateInitialEventError, ProductNotFoundError
from src.models.price_event import ChangeKind, PriceEvent
from src.models.product import CatalogService
from src.storage.price_history_db import PriceHistoryDB

logger = logging.getLogger("price_trends.reader")


class TimelineReader:
    """Returns ordered price history, never an empty one.

    A product with no recorded events gets a single ``initial`` event
    built from its current price and backdated to its creation time.
    That event is persisted, so later reads return it instead of
    synthesising another.
    """

    def __init__(
        self, store: PriceHistoryDB, catalog: CatalogService,
    ) -> None:
        self._store = store
        self._catalog = catalog

    def get_history(self, product_id: int) -> list[PriceEvent]:
        """Return the product's events oldest first.

        Raises ``ProductNotFoundError`` if the product has no events
        and does not exist in the catalog.
        """
        events = self._store.query(product_id)
        if events:
            return events
        return self._bootstrap(product_id)

    def _bootstrap(self, product_id: int) -> list[PriceEvent]:
        product = self._catalog.find_product(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)

        try:
            event = self._store.append(
                product_id=product.id,
                price=product.price,
                previous_price=None,
                change_kind=ChangeKind.INITIAL,
                recorded_at=product.created_at,
            )
        except DuplicateInitialEventError:
            # A concurrent reader (or the recorder) got there first
            events = self._store.query(product_id)
            if not events:
                raise
            logger.info(
                "Bootstrap for product %d lost the race to event #%d",
                product_id,
                events[0].id,
            )
            return events

        logger.info(
            "Bootstrapped history for product %d at %s (created %s)",
            product_id,
            product.price,
            product.created_at.isoformat(),
        )
        return [event]
