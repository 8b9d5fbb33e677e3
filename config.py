"""
Application configuration.

Values are read from the environment. A `.env` file in the project directory
is loaded first, so local development does not need exported variables.

Environment variables:
- SALES_BACKEND: "supabase" (default) or "memory"
- SUPABASE_URL / SUPABASE_KEY: required when SALES_BACKEND=supabase
- ALERT_WINDOW_DAYS: default alert visibility window (default 14)
- LOG_LEVEL: root log level (default INFO)
- CORS_ORIGINS: comma separated allowed origins (default "*")
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from dotenv import load_dotenv

env_path = Path(__file__).parent / ".env"
load_dotenv(dotenv_path=env_path)

SUPPORTED_BACKENDS: Tuple[str, ...] = ("supabase", "memory")


@dataclass(frozen=True, slots=True)
class Settings:
    sales_backend: str = "supabase"
    supabase_url: Optional[str] = None
    supabase_key: Optional[str] = None
    alert_window_days: int = 14
    log_level: str = "INFO"
    cors_origins: Tuple[str, ...] = ("*",)


def load_settings() -> Settings:
    """Build Settings from the current environment."""

    backend = (os.getenv("SALES_BACKEND") or "supabase").strip().lower()
    if backend not in SUPPORTED_BACKENDS:
        raise RuntimeError(
            f"Invalid SALES_BACKEND: {backend!r}. "
            f"Use one of: {', '.join(SUPPORTED_BACKENDS)}."
        )

    window_raw = os.getenv("ALERT_WINDOW_DAYS") or "14"
    try:
        window = int(window_raw)
    except ValueError:
        raise RuntimeError(f"ALERT_WINDOW_DAYS must be an integer, got {window_raw!r}") from None
    if window < 0:
        raise RuntimeError("ALERT_WINDOW_DAYS must be >= 0")

    origins = tuple(o.strip() for o in (os.getenv("CORS_ORIGINS") or "*").split(",") if o.strip())

    return Settings(
        sales_backend=backend,
        supabase_url=os.getenv("SUPABASE_URL"),
        supabase_key=os.getenv("SUPABASE_KEY"),
        alert_window_days=window,
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
        cors_origins=origins or ("*",),
    )


__all__ = ["Settings", "SUPPORTED_BACKENDS", "load_settings"]
