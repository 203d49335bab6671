# src/cli/runner.py

"""Headless CLI commands over the catalog and price timeline."""

import json
import logging
import sys
from pathlib import Path
from typing import cast

from rich.console import Console
from rich.table import Table

from src.config.settings import Settings
from src.models.errors import PersistenceError, ProductNotFoundError
from src.models.series import PriceSeries, SparseSeries
from src.services.price_trend_service import PriceTrendService
from src.storage.catalog_db import CatalogDB
from src.storage.price_history_db import PriceHistoryDB

logger = logging.getLogger("price_trends.cli")

# Stderr console for status messages so stdout stays clean for JSON
_err = Console(stderr=True)


class Workspace:
    """Opens the catalog and timeline and wires the recorder listener."""

    def __init__(self, db_path: Path | None = None) -> None:
        path = db_path or Settings.PRICE_DB_PATH
        self.store = PriceHistoryDB(path)
        self.catalog = CatalogDB(path)
        self.service = PriceTrendService(self.store, self.catalog)
        self.catalog.add_listener(self.service.record_if_changed)

    def close(self) -> None:
        """Close both connections."""
        self.catalog.close()
        self.store.close()


def _money(value: float | None) -> str:
    if value is None:
        return "—"
    return f"{Settings.CURRENCY} {value:,.0f}"


def _dump_json(data: object) -> None:
    json.dump(data, sys.stdout, ensure_ascii=False, indent=2)
    sys.stdout.write("\n")


def _print_history_table(
    product_id: int, events: list[dict[str, object]],
) -> None:
    table = Table(
        title=f"Price History — product {product_id}",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("#", style="dim", width=6)
    table.add_column("Recorded", style="dim")
    table.add_column("Change", style="magenta")
    table.add_column("Previous", justify="right")
    table.add_column("Price", justify="right", style="green")

    for event in events:
        previous = event["previousPrice"]
        price = event["price"]
        table.add_row(
            str(event["id"]),
            str(event["recordedAt"]),
            str(event["changeKind"]),
            _money(float(str(previous)) if previous is not None else None),
            _money(float(str(price))),
        )

    Console().print(table)


def _print_series_table(product_id: int, series: PriceSeries) -> None:
    table = Table(
        title=f"Price Trend — product {product_id}",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("Month")
    table.add_column("Price", justify="right", style="green")
    table.add_column("Predicted", justify="right", style="yellow")
    table.add_column("Range", justify="right", style="dim")

    for point in series.points:
        band = (
            f"{_money(point.lower)} – {_money(point.upper)}"
            if point.lower is not None
            else "—"
        )
        table.add_row(
            point.label,
            _money(point.price),
            _money(point.predicted),
            band,
        )
    Console().print(table)

    stats = series.stats
    _err.print(
        f"High {_money(stats.highest)} · Low {_money(stats.lowest)} · "
        f"Avg {_money(stats.average)} · "
        f"Trend {stats.current_trend:+,.0f}"
    )
    if series.can_predict:
        colour = {"drop": "green", "rise": "red"}.get(
            series.outlook, "dim",
        )
        _err.print(
            f"[{colour}]Next month: {_money(stats.predicted_next)} "
            f"({stats.predicted_delta:+,.0f}, expected to "
            f"{series.outlook if series.outlook != 'stable' else 'stay stable'})"
            f"[/{colour}]"
        )


def run_add_product(
    price: float, title: str, db_path: Path | None = None,
) -> int:
    """Create a catalog product; its initial price event follows."""
    workspace = Workspace(db_path)
    try:
        product = workspace.catalog.create_product(price, title=title)
    except PersistenceError as exc:
        logger.error("Create failed: %s", exc, exc_info=True)
        _err.print(f"[red]Create failed: {exc}[/red]")
        return 1
    finally:
        workspace.close()

    _err.print(
        f"[green]✓ Product {product.id} created at "
        f"{_money(product.price)}[/green]"
    )
    _dump_json({"id": product.id, "price": product.price})
    return 0


def run_set_price(
    product_id: int, price: float, db_path: Path | None = None,
) -> int:
    """Change a product's catalog price."""
    workspace = Workspace(db_path)
    try:
        product = workspace.catalog.update_product(product_id, price=price)
    except ProductNotFoundError as exc:
        _err.print(f"[red]{exc}[/red]")
        return 1
    except PersistenceError as exc:
        # The catalog write may already be committed at this point
        logger.error("Price update failed: %s", exc, exc_info=True)
        _err.print(f"[red]Price update failed: {exc}[/red]")
        return 1
    finally:
        workspace.close()

    _err.print(
        f"[green]✓ Product {product.id} now {_money(product.price)}[/green]"
    )
    return 0


def run_correct_price(
    product_id: int, price: float, db_path: Path | None = None,
) -> int:
    """Record an administrative price correction on the timeline."""
    workspace = Workspace(db_path)
    try:
        history = workspace.service.reader.get_history(product_id)
        event = workspace.service.recorder.record_correction(
            product_id, price, history[-1].price,
        )
    except ProductNotFoundError as exc:
        _err.print(f"[red]{exc}[/red]")
        return 1
    except ValueError as exc:
        _err.print(f"[red]Correction failed: {exc}[/red]")
        return 1
    except PersistenceError as exc:
        logger.error("Correction failed: %s", exc, exc_info=True)
        _err.print(f"[red]Correction failed: {exc}[/red]")
        return 1
    finally:
        workspace.close()

    _dump_json(event.to_dict())
    return 0


def run_history(
    product_id: int,
    output_format: str = "json",
    db_path: Path | None = None,
) -> int:
    """Print a product's price events."""
    workspace = Workspace(db_path)
    try:
        result = workspace.service.get_history(product_id)
    except ProductNotFoundError as exc:
        _err.print(f"[red]{exc}[/red]")
        return 1
    except PersistenceError as exc:
        logger.error("History query failed: %s", exc, exc_info=True)
        _err.print(f"[red]History query failed: {exc}[/red]")
        return 1
    finally:
        workspace.close()

    events = cast(list[dict[str, object]], result["events"])
    if output_format == "table":
        _print_history_table(product_id, events)
    else:
        _dump_json(result)
    return 0


def run_series(
    product_id: int,
    output_format: str = "json",
    db_path: Path | None = None,
) -> int:
    """Print a product's monthly series, forecast and stats."""
    workspace = Workspace(db_path)
    try:
        series = workspace.service.get_series(product_id)
    except ProductNotFoundError as exc:
        _err.print(f"[red]{exc}[/red]")
        return 1
    except PersistenceError as exc:
        logger.error("Series query failed: %s", exc, exc_info=True)
        _err.print(f"[red]Series query failed: {exc}[/red]")
        return 1
    finally:
        workspace.close()

    if output_format != "table":
        _dump_json(series.to_dict())
    elif isinstance(series, SparseSeries):
        _err.print(
            "[yellow]Price tracking just started for this product. "
            f"Current price {_money(series.current_price)}; check back "
            "after its next price change.[/yellow]"
        )
    else:
        _print_series_table(product_id, series)
    return 0
