# src/config/settings.py

"""Central configuration for the price_trends engine."""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

_ENV_PREFIX = "PRICE_TRENDS_"


def _env_int(name: str, default: int) -> int:
    """Read an integer override from the environment."""
    raw = os.getenv(_ENV_PREFIX + name)
    return int(raw) if raw else default


def _env_float(name: str, default: float) -> float:
    """Read a float override from the environment."""
    raw = os.getenv(_ENV_PREFIX + name)
    return float(raw) if raw else default


class Settings:
    """Central configuration for the price_trends engine."""

    # --- Forecast policy ---
    FORECAST_WINDOW: int = _env_int("FORECAST_WINDOW", 6)        # Most recent months fitted
    FORECAST_HORIZON: int = _env_int("FORECAST_HORIZON", 3)      # Months projected ahead
    CONFIDENCE_RATE: float = _env_float("CONFIDENCE_RATE", 0.08)  # Band per step, x last price
    PRICE_FLOOR_RATIO: float = _env_float("PRICE_FLOOR_RATIO", 0.5)  # Predicted floor, x last price
    MIN_FORECAST_POINTS: int = _env_int("MIN_FORECAST_POINTS", 2)  # Months needed for a trend

    # --- Presentation ---
    MIN_CHART_POINTS: int = _env_int("MIN_CHART_POINTS", 2)      # Below this the series is sparse
    CURRENCY: str = os.getenv(_ENV_PREFIX + "CURRENCY", "INR")

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    DATA_DIR: Path = Path(
        os.getenv(_ENV_PREFIX + "DATA_DIR", str(BASE_DIR / "data"))
    )
    PRICE_DB_PATH: Path = DATA_DIR / "price_history.db"
    LOGS_DIR: Path = BASE_DIR / "logs"
