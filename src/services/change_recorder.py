# src/services/change_recorder.py

"""Turns committed catalog mutations into timeline price events."""

import logging
from collections.abc import Callable
from datetime import datetime, timezone

from src.models.errors import DuplicateInitialEventError
from src.models.price_event import ChangeKind, PriceEvent, derive_change_kind
from src.models.product import (
    CatalogMutation,
    CatalogProduct,
    MutationOperation,
)
from src.storage.price_history_db import PriceHistoryDB

logger = logging.getLogger("price_trends.recorder")


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ChangeRecorder:
    """Appends exactly one price event per effective price change.

    Register :meth:`record_if_changed` as a catalog listener.  Storage
    errors propagate to the caller; the catalog write that triggered
    the notification has already committed and stays in place.
    """

    def __init__(
        self,
        store: PriceHistoryDB,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._store = store
        self._clock = clock

    def __call__(self, mutation: CatalogMutation) -> PriceEvent | None:
        return self.record_if_changed(mutation)

    def record_if_changed(
        self, mutation: CatalogMutation,
    ) -> PriceEvent | None:
        """Record the mutation's price change, if it carries one.

        Returns the appended event, or ``None`` for an update whose
        price did not change.
        """
        doc = mutation.doc

        if mutation.operation is MutationOperation.CREATE:
            return self._store.append(
                product_id=doc.id,
                price=doc.price,
                previous_price=None,
                change_kind=ChangeKind.INITIAL,
                recorded_at=self._clock(),
            )

        previous = mutation.previous_doc
        if previous is None:
            msg = f"Update of product {doc.id} arrived without previous_doc"
            raise ValueError(msg)

        if doc.price == previous.price:
            logger.debug(
                "Product %d updated without a price change", doc.id,
            )
            return None

        if self._store.find_initial(doc.id) is None:
            self._backfill_initial(previous)

        return self._store.append(
            product_id=doc.id,
            price=doc.price,
            previous_price=previous.price,
            change_kind=derive_change_kind(doc.price, previous.price),
            recorded_at=self._clock(),
        )

    def record_correction(
        self,
        product_id: int,
        price: float,
        previous_price: float,
    ) -> PriceEvent:
        """Append an administrative correction, even at an equal price."""
        kind = derive_change_kind(price, previous_price)
        logger.info(
            "Manual correction for product %d: %s -> %s (%s)",
            product_id,
            previous_price,
            price,
            kind.value,
        )
        return self._store.append(
            product_id=product_id,
            price=price,
            previous_price=previous_price,
            change_kind=kind,
            recorded_at=self._clock(),
        )

    def _backfill_initial(self, previous: CatalogProduct) -> None:
        """Anchor an untracked product's timeline at its pre-update price.

        Products that existed before tracking have no ``initial`` event
        until someone reads their history.  The first repricing writes
        it instead, stamped with the product's creation time.
        """
        try:
            self._store.append(
                product_id=previous.id,
                price=previous.price,
                previous_price=None,
                change_kind=ChangeKind.INITIAL,
                recorded_at=previous.created_at,
            )
        except DuplicateInitialEventError:
            logger.debug(
                "Product %d was bootstrapped concurrently", previous.id,
            )
        else:
            logger.info(
                "Backfilled initial event for product %d at %s",
                previous.id,
                previous.price,
            )
