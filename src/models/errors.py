# src/models/errors.py

"""Error taxonomy for the price history engine."""


class PriceTrendError(Exception):
    """Base class for all price_trends errors."""


class ProductNotFoundError(PriceTrendError):
    """The referenced catalog product does not exist."""

    def __init__(self, product_id: int) -> None:
        self.product_id = product_id
        super().__init__(f"Product {product_id} not found")


class PersistenceError(PriceTrendError):
    """The timeline store could not complete a read or write."""


class DuplicateInitialEventError(PersistenceError):
    """A product already has its ``initial`` price event."""

    def __init__(self, product_id: int) -> None:
        self.product_id = product_id
        super().__init__(
            f"Product {product_id} already has an initial price event"
        )
