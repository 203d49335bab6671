# src/models/product.py

"""Catalog product and mutation models consumed from the catalog."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Protocol


@dataclass
class CatalogProduct:
    """The slice of a catalog item the price engine reads."""

    id: int
    price: float
    created_at: datetime
    title: str = ""


class MutationOperation(str, Enum):
    """Catalog write that triggered a notification."""

    CREATE = "create"
    UPDATE = "update"


@dataclass
class CatalogMutation:
    """Notification fired after a catalog write commits.

    ``previous_doc`` is the product as it was before an update and is
    ``None`` for creates.
    """

    operation: MutationOperation
    doc: CatalogProduct
    previous_doc: CatalogProduct | None = None


class CatalogService(Protocol):
    """Read-only catalog lookup used by the timeline reader."""

    def find_product(self, product_id: int) -> CatalogProduct | None:
        """Return the product, or ``None`` if it does not exist."""
        ...
