"""
Request dependencies.

Routers receive the sale repository, settings and clock through FastAPI
`Depends`, so tests can swap any of them with `app.dependency_overrides`.
"""

from __future__ import annotations

from datetime import date
from functools import lru_cache

from config import Settings, load_settings
from domain.time import today_local
from repositories.base import SaleRepository
from repositories.memory_sale_repository import InMemorySaleRepository
from repositories.sale_repository import SupabaseSaleRepository
from services.sale_service import Clock, utc_now


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()


def build_sale_repository(settings: Settings) -> SaleRepository:
    if settings.sales_backend == "memory":
        return InMemorySaleRepository()
    return SupabaseSaleRepository()


@lru_cache(maxsize=1)
def _shared_repository() -> SaleRepository:
    return build_sale_repository(get_settings())


def get_sale_repository() -> SaleRepository:
    return _shared_repository()


def get_clock() -> Clock:
    return utc_now


def get_today() -> date:
    """Calendar date used for alert and due-date evaluation."""

    return today_local()
