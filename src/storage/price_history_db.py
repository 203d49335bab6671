# src/storage/price_history_db.py

"""SQLite-backed append-only timeline of product price events."""

import logging
import sqlite3
from datetime import datetime
from pathlib import Path

from src.config.settings import Settings
from src.models.errors import DuplicateInitialEventError, PersistenceError
from src.models.price_event import ChangeKind, PriceEvent, to_utc

logger = logging.getLogger("price_trends.timeline")

_SCHEMA = """\
CREATE TABLE IF NOT EXISTS price_events (
    id             INTEGER PRIMARY KEY AUTOINCREMENT,
    product_id     INTEGER NOT NULL,
    price          REAL    NOT NULL CHECK (price >= 0),
    previous_price REAL,
    change_kind    TEXT    NOT NULL
                   CHECK (change_kind IN
                          ('initial', 'increase', 'decrease', 'unchanged')),
    recorded_at    TEXT    NOT NULL,
    CHECK ((change_kind = 'initial') = (previous_price IS NULL))
);

CREATE INDEX IF NOT EXISTS idx_events_product_date
    ON price_events(product_id, recorded_at, id);

CREATE UNIQUE INDEX IF NOT EXISTS uq_events_initial
    ON price_events(product_id) WHERE change_kind = 'initial';

CREATE TRIGGER IF NOT EXISTS trg_events_no_update
    BEFORE UPDATE ON price_events
BEGIN
    SELECT RAISE(ABORT, 'price_events is append-only');
END;

CREATE TRIGGER IF NOT EXISTS trg_events_no_delete
    BEFORE DELETE ON price_events
BEGIN
    SELECT RAISE(ABORT, 'price_events is append-only');
END;
"""

_COLUMNS = (
    "id, product_id, price, previous_price, change_kind, recorded_at"
)


def _format_ts(moment: datetime) -> str:
    """Fixed-width UTC ISO string so text order equals time order."""
    return to_utc(moment).isoformat(timespec="microseconds")


def _row_to_event(row: tuple[object, ...]) -> PriceEvent:
    previous = row[3]
    return PriceEvent(
        id=int(str(row[0])),
        product_id=int(str(row[1])),
        price=float(str(row[2])),
        previous_price=(
            float(str(previous)) if previous is not None else None
        ),
        change_kind=ChangeKind(str(row[4])),
        recorded_at=datetime.fromisoformat(str(row[5])),
    )


class PriceHistoryDB:
    """Append-only store of price events, one timeline per product.

    Events can be appended and queried but never updated or deleted;
    schema triggers reject both.  A partial unique index guarantees at
    most one ``initial`` event per product.
    """

    def __init__(
        self, db_path: Path | None = None,
    ) -> None:
        path = db_path or Settings.PRICE_DB_PATH
        path.parent.mkdir(parents=True, exist_ok=True)
        try:
            self._conn = sqlite3.connect(
                str(path), check_same_thread=False,
            )
            self._conn.execute("PRAGMA journal_mode=WAL")
            self._conn.executescript(_SCHEMA)
        except sqlite3.Error as exc:
            msg = f"Cannot open price history at {path}: {exc}"
            raise PersistenceError(msg) from exc
        logger.debug(
            "PriceHistoryDB opened at %s", path,
        )

    def close(self) -> None:
        """Close the database connection."""
        self._conn.close()

    # ── Recording ────────────────────────────────────────

    def append(
        self,
        product_id: int,
        price: float,
        previous_price: float | None,
        change_kind: ChangeKind,
        recorded_at: datetime,
    ) -> PriceEvent:
        """Append one event and return it with its assigned id.

        Raises ``DuplicateInitialEventError`` when an ``initial`` event
        already exists for the product, ``PersistenceError`` on any
        other storage failure and ``ValueError`` for a negative price.
        """
        if price < 0:
            msg = f"Price must be non-negative, got {price}"
            raise ValueError(msg)

        ts = _format_ts(recorded_at)
        try:
            with self._conn:
                cur = self._conn.execute(
                    "INSERT INTO price_events "
                    "(product_id, price, previous_price, "
                    " change_kind, recorded_at) "
                    "VALUES (?, ?, ?, ?, ?)",
                    (
                        product_id,
                        price,
                        previous_price,
                        change_kind.value,
                        ts,
                    ),
                )
        except sqlite3.IntegrityError as exc:
            if (
                change_kind is ChangeKind.INITIAL
                and "UNIQUE" in str(exc)
            ):
                raise DuplicateInitialEventError(product_id) from exc
            msg = f"Rejected price event for product {product_id}: {exc}"
            raise PersistenceError(msg) from exc
        except sqlite3.Error as exc:
            msg = f"Failed to append price event for product {product_id}: {exc}"
            raise PersistenceError(msg) from exc

        event_id = cur.lastrowid
        assert event_id is not None
        logger.info(
            "Recorded %s event #%d for product %d: %s -> %s",
            change_kind.value,
            event_id,
            product_id,
            previous_price,
            price,
        )
        return PriceEvent(
            id=event_id,
            product_id=product_id,
            price=price,
            previous_price=previous_price,
            change_kind=change_kind,
            recorded_at=datetime.fromisoformat(ts),
        )

    # ── Querying ─────────────────────────────────────────

    def query(self, product_id: int) -> list[PriceEvent]:
        """Return all events for a product, oldest first.

        Events sharing a timestamp come back in creation order.
        """
        try:
            rows = self._conn.execute(
                f"SELECT {_COLUMNS} FROM price_events "
                "WHERE product_id = ? "
                "ORDER BY recorded_at ASC, id ASC",
                (product_id,),
            ).fetchall()
        except sqlite3.Error as exc:
            msg = f"Failed to read timeline for product {product_id}: {exc}"
            raise PersistenceError(msg) from exc
        return [_row_to_event(r) for r in rows]

    def find_initial(self, product_id: int) -> PriceEvent | None:
        """Return the product's ``initial`` event, if any."""
        try:
            row = self._conn.execute(
                f"SELECT {_COLUMNS} FROM price_events "
                "WHERE product_id = ? AND change_kind = 'initial'",
                (product_id,),
            ).fetchone()
        except sqlite3.Error as exc:
            msg = f"Failed to read timeline for product {product_id}: {exc}"
            raise PersistenceError(msg) from exc
        return _row_to_event(row) if row else None
