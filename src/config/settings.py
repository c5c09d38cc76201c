# src/config/settings.py

"""Central configuration for the price_spotlight widget."""

import os
from pathlib import Path

from curl_cffi.requests import BrowserTypeLiteral
from dotenv import load_dotenv

load_dotenv()


def _env_positive_int(name: str, default: int) -> int:
    """Read a positive integer override from the environment."""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return value if value > 0 else default


class Settings:
    """Central configuration for the price_spotlight widget."""

    # --- Rotation ---
    ROTATION_PERIOD_MS: int = _env_positive_int("SPOTLIGHT_PERIOD_MS", 5000)

    # --- History service ---
    API_BASE_URL: str = os.getenv(
        "SPOTLIGHT_API_BASE_URL", "http://localhost:3000"
    )
    HISTORY_PATH_TEMPLATE: str = (
        "/api/backend/inventory/product/{product_id}/history"
    )
    REQUEST_TIMEOUT: int = 15           # Seconds before a request times out
    SESSION_COOKIE: str = os.getenv("SPOTLIGHT_SESSION_COOKIE", "")

    # --- Browser Impersonation ---
    IMPERSONATE_BROWSER: BrowserTypeLiteral = "chrome131"
    DEFAULT_HEADERS: dict[str, str] = {
        "Accept": "application/json",
        "Accept-Language": "en-US,en;q=0.9",
        "Cache-Control": "no-cache, no-store",
        "Pragma": "no-cache",
    }

    # --- Display ---
    CURRENCY: str = os.getenv("SPOTLIGHT_CURRENCY", "EUR")
    DISPLAY_TIMEZONE: str = os.getenv(
        "SPOTLIGHT_TIMEZONE", "Europe/Tallinn"
    )

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    INVENTORY_PATH: Path = Path(
        os.getenv(
            "SPOTLIGHT_INVENTORY_PATH",
            str(BASE_DIR / "data" / "inventory.json"),
        )
    )
    LOGS_DIR: Path = BASE_DIR / "logs"
