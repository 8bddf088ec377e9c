# src/config/settings.py

"""Central configuration for the price_monitor service."""

import os
from pathlib import Path

from curl_cffi.requests import BrowserTypeLiteral
from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Central configuration for the price_monitor service."""

    # --- Fetching ---
    REQUEST_TIMEOUT: int = int(
        os.getenv("REQUEST_TIMEOUT", "15")
    )                                   # Seconds before a fetch times out

    # --- Scheduling ---
    CHECK_INTERVAL_MINUTES: int = int(
        os.getenv("CHECK_INTERVAL_MINUTES", "15")
    )
    INVOCATION_TIMEOUT: float = float(
        os.getenv("INVOCATION_TIMEOUT", "20")
    )                                   # Deadline for a single pass (secs)
    STREAM_BATCH_SIZE: int = 1          # Change records per notifier call

    # --- Health ---
    HEALTH_SLOW_MS: float = 5000.0

    # --- Browser Impersonation ---
    IMPERSONATE_BROWSER: BrowserTypeLiteral = "chrome131"
    DEFAULT_HEADERS: dict[str, str] = {
        "Accept": (
            "text/html,application/xhtml+xml,"
            "application/xml;q=0.9,image/avif,"
            "image/webp,image/apng,*/*;q=0.8"
        ),
        "Accept-Language": "en-US,en;q=0.9",
        "sec-ch-ua": (
            '"Google Chrome";v="131", '
            '"Chromium";v="131", '
            '"Not_A Brand";v="24"'
        ),
        "sec-ch-ua-mobile": "?0",
        "sec-ch-ua-platform": '"Windows"',
        "sec-fetch-dest": "document",
        "sec-fetch-mode": "navigate",
        "sec-fetch-site": "none",
        "sec-fetch-user": "?1",
        "Upgrade-Insecure-Requests": "1",
    }

    # --- Mail ---
    SMTP_HOST: str = os.getenv("SMTP_HOST", "localhost")
    SMTP_PORT: int = int(os.getenv("SMTP_PORT", "587"))
    SMTP_USER: str = os.getenv("SMTP_USER", "")
    SMTP_PASSWORD: str = os.getenv("SMTP_PASSWORD", "")
    SMTP_USE_SSL: bool = (
        os.getenv("SMTP_USE_SSL", "false").lower() == "true"
    )
    SMTP_TIMEOUT: int = 20

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    DATA_DIR: Path = Path(
        os.getenv("DATA_DIR", str(BASE_DIR / "data"))
    )
    ITEM_DB_PATH: Path = DATA_DIR / "items.db"
    LOGS_DIR: Path = BASE_DIR / "logs"
