"""Centralised settings for the quiz solver.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).

``Settings`` is frozen: it is built once at startup and handed explicitly to
the API factory and the task orchestrator, never looked up ambiently by the
pipeline stages.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (one level up from this package)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)

DEFAULT_MARKERS = ("Q834", "Download file", "sum of")


def _env_bool(name: str, default: str) -> bool:
    return os.environ.get(name, default).strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    # ------------------------------------------------------------------
    # HTTP acceptance layer
    # ------------------------------------------------------------------
    secret: str = field(default_factory=lambda: os.environ.get("SECRET", ""))
    host: str = field(default_factory=lambda: os.environ.get("HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: int(os.environ.get("PORT", "3000")))
    max_body_bytes: int = field(
        default_factory=lambda: int(os.environ.get("MAX_BODY_BYTES", str(2 * 1024 * 1024)))
    )

    # ------------------------------------------------------------------
    # Time budget (seconds)
    # ------------------------------------------------------------------
    total_budget: float = field(
        default_factory=lambda: float(os.environ.get("TOTAL_BUDGET", "180"))
    )
    safety_margin: float = field(
        default_factory=lambda: float(os.environ.get("SAFETY_MARGIN", "5"))
    )
    cleanup_slack: float = field(
        default_factory=lambda: float(os.environ.get("CLEANUP_SLACK", "1"))
    )

    # ------------------------------------------------------------------
    # Browser
    # ------------------------------------------------------------------
    headless: bool = field(default_factory=lambda: _env_bool("HEADLESS", "true"))
    navigation_timeout: float = field(
        default_factory=lambda: float(os.environ.get("NAVIGATION_TIMEOUT", "45"))
    )
    settle_delay: float = field(
        default_factory=lambda: float(os.environ.get("SETTLE_DELAY", "0.6"))
    )
    browser_args: tuple[str, ...] = ("--no-sandbox", "--disable-setuid-sandbox")

    # ------------------------------------------------------------------
    # Decoding
    # ------------------------------------------------------------------
    marker_substrings: tuple[str, ...] = DEFAULT_MARKERS
    min_payload_length: int = field(
        default_factory=lambda: int(os.environ.get("MIN_PAYLOAD_LENGTH", "100"))
    )

    # ------------------------------------------------------------------
    # Outbound HTTP
    # ------------------------------------------------------------------
    request_timeout: float = field(
        default_factory=lambda: float(os.environ.get("REQUEST_TIMEOUT", "30.0"))
    )
    default_submit_url: str = field(
        default_factory=lambda: os.environ.get(
            "DEFAULT_SUBMIT_URL", "https://example.com/submit"
        )
    )

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------
    log_level: str = field(default_factory=lambda: os.environ.get("LOG_LEVEL", "INFO"))


# Module-level singleton, read once at startup:
#   from quizsolver.config import settings
settings = Settings()
