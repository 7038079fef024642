# shopdash/config/settings.py

"""Central configuration for the shopdash dashboard."""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

_FALLBACK_API_URL = "https://ourapp.space/api"


def _resolve_api_url() -> str:
    """Build the remote API base URL from ``SHOPDASH_API_URL``."""
    configured = os.getenv("SHOPDASH_API_URL", "").strip().rstrip("/")
    if configured:
        return f"{configured}/api"
    return _FALLBACK_API_URL


class Settings:
    """Central configuration for the shopdash dashboard."""

    # --- Remote API ---
    API_BASE_URL: str = _resolve_api_url()
    REQUEST_TIMEOUT: int = 15           # Seconds before a request times out
    SLOW_RESPONSE_MS: float = 5000.0    # Health check "slow" threshold
    DEFAULT_HEADERS: dict[str, str] = {
        "Accept": "application/json",
        "Accept-Language": "en-US,en;q=0.9",
    }
    USER_HEADER: str = "x-user-id"

    # --- Read cache ---
    QUERY_CACHE_TTL: float = 300.0      # Seconds before a cached read expires

    # --- Product form ---
    MIN_IMAGES: int = 3
    MAX_IMAGES: int = 3
    PREVIEW_SIZE: tuple[int, int] = (320, 180)

    # --- Presentation ---
    TABLE_PAGE_SIZE: int = 10
    CURRENCY_SYMBOL: str = "₹"
    IMAGE_UPLOAD_SEGMENT: str = "/upload/"

    # --- Accounts (credential provider stand-in) ---
    ACCOUNTS: list[dict[str, str]] = [
        {
            "id": os.getenv("SHOPDASH_USER_ID", "user-1"),
            "name": os.getenv("SHOPDASH_USER_NAME", "Test User"),
            "email": os.getenv("SHOPDASH_EMAIL", "test@test.com"),
            "password": os.getenv("SHOPDASH_PASSWORD", "password"),
        },
    ]

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    LOGS_DIR: Path = BASE_DIR / "logs"
