"""Dependency diagnostics for the health endpoint.

Each probe reports ``connected`` plus the failure text; a probe never raises,
so /health always answers 200 and lets the caller judge.
"""

import logging
from typing import Protocol

from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncEngine

from src.ic_common.database import ping_database

logger = logging.getLogger(__name__)


class CacheProbe(Protocol):
    last_error: str | None

    async def ping(self) -> bool: ...


class DependencyStatus(BaseModel):
    connected: bool
    error: str | None = None


class HealthReport(BaseModel):
    status: str = "ok"
    timestamp: str
    database: DependencyStatus
    cache: DependencyStatus
    environment: str
    version: str


async def check_database(engine: AsyncEngine) -> DependencyStatus:
    try:
        await ping_database(engine)
    except Exception as exc:  # noqa: BLE001
        logger.error("Database health check failed: %s", exc)
        return DependencyStatus(connected=False, error=f"{type(exc).__name__}: {exc}")
    return DependencyStatus(connected=True)


async def check_cache(cache: CacheProbe | None) -> DependencyStatus:
    if cache is None:
        return DependencyStatus(connected=False, error="cache client not configured")
    if await cache.ping():
        return DependencyStatus(connected=True)
    return DependencyStatus(connected=False, error=cache.last_error)
