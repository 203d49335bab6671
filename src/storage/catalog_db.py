# src/storage/catalog_db.py

"""Minimal SQLite catalog that notifies listeners after each commit."""

import logging
import sqlite3
from collections.abc import Callable
from datetime import datetime, timezone
from pathlib import Path

from src.config.settings import Settings
from src.models.errors import PersistenceError, ProductNotFoundError
from src.models.price_event import to_utc
from src.models.product import (
    CatalogMutation,
    CatalogProduct,
    MutationOperation,
)

logger = logging.getLogger("price_trends.catalog")

MutationListener = Callable[[CatalogMutation], object]

_SCHEMA = """\
CREATE TABLE IF NOT EXISTS products (
    id         INTEGER PRIMARY KEY AUTOINCREMENT,
    title      TEXT    NOT NULL DEFAULT '',
    price      REAL    NOT NULL CHECK (price >= 0),
    created_at TEXT    NOT NULL
);
"""


class CatalogDB:
    """Product catalog with post-commit mutation listeners.

    Listeners run synchronously after the write is committed.  An
    exception raised by a listener reaches the caller, but the catalog
    write is already durable and is not rolled back.
    """

    def __init__(
        self, db_path: Path | None = None,
    ) -> None:
        path = db_path or Settings.PRICE_DB_PATH
        path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(
            str(path), check_same_thread=False,
        )
        self._conn.executescript(_SCHEMA)
        self._listeners: list[MutationListener] = []
        logger.debug("CatalogDB opened at %s", path)

    def close(self) -> None:
        """Close the database connection."""
        self._conn.close()

    def add_listener(self, listener: MutationListener) -> None:
        """Register a callback fired after every committed write."""
        self._listeners.append(listener)

    def _notify(self, mutation: CatalogMutation) -> None:
        for listener in self._listeners:
            listener(mutation)

    # ── Reads ────────────────────────────────────────────

    def find_product(self, product_id: int) -> CatalogProduct | None:
        """Return the product, or ``None`` if it does not exist."""
        row = self._conn.execute(
            "SELECT id, title, price, created_at "
            "FROM products WHERE id = ?",
            (product_id,),
        ).fetchone()
        if row is None:
            return None
        return CatalogProduct(
            id=row[0],
            title=row[1],
            price=row[2],
            created_at=datetime.fromisoformat(row[3]),
        )

    # ── Writes ───────────────────────────────────────────

    def create_product(
        self,
        price: float,
        title: str = "",
        created_at: datetime | None = None,
        notify: bool = True,
    ) -> CatalogProduct:
        """Insert a product and fire a ``create`` notification.

        ``notify=False`` simulates products that predate price
        tracking; their history is bootstrapped on first read.
        """
        created = to_utc(created_at or datetime.now(timezone.utc))
        try:
            with self._conn:
                cur = self._conn.execute(
                    "INSERT INTO products (title, price, created_at) "
                    "VALUES (?, ?, ?)",
                    (title, price, created.isoformat()),
                )
        except sqlite3.Error as exc:
            msg = f"Failed to create product: {exc}"
            raise PersistenceError(msg) from exc

        product_id = cur.lastrowid
        assert product_id is not None
        product = CatalogProduct(
            id=product_id, price=price, created_at=created, title=title,
        )
        logger.info("Created product %d at %s", product_id, price)
        if notify:
            self._notify(
                CatalogMutation(MutationOperation.CREATE, product)
            )
        return product

    def update_product(
        self,
        product_id: int,
        price: float | None = None,
        title: str | None = None,
    ) -> CatalogProduct:
        """Update price and/or title and fire an ``update`` notification."""
        previous = self.find_product(product_id)
        if previous is None:
            raise ProductNotFoundError(product_id)

        updated = CatalogProduct(
            id=previous.id,
            price=previous.price if price is None else price,
            created_at=previous.created_at,
            title=previous.title if title is None else title,
        )
        try:
            with self._conn:
                self._conn.execute(
                    "UPDATE products SET price = ?, title = ? WHERE id = ?",
                    (updated.price, updated.title, product_id),
                )
        except sqlite3.Error as exc:
            msg = f"Failed to update product {product_id}: {exc}"
            raise PersistenceError(msg) from exc

        logger.info(
            "Updated product %d: price %s -> %s",
            product_id,
            previous.price,
            updated.price,
        )
        self._notify(
            CatalogMutation(MutationOperation.UPDATE, updated, previous)
        )
        return updated
