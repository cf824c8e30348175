"""
Dependency wiring for the FastAPI app.
"""

from __future__ import annotations

from typing import Optional

import requests
from fastapi import Depends

from freelanceos.config import Settings, get_settings
from freelanceos.db import DbClient, InMemoryDbClient, PostgresDbClient
from freelanceos.lock import InMemoryResetLock, RedisResetLock, ResetLock
from freelanceos.reset_client import HttpResetFunctionClient, ResetFunctionClient

_db_client: DbClient | None = None
_reset_lock: ResetLock | None = None
_http_session: requests.Session | None = None


def get_db_client() -> DbClient:
    """
    Return a singleton DB client so workspace state persists across requests.
    """
    global _db_client
    if _db_client:
        return _db_client

    settings = get_settings()
    if settings.use_in_memory_backends or not settings.database_url:
        _db_client = InMemoryDbClient()
    else:
        _db_client = PostgresDbClient(settings.database_url)
    return _db_client


def get_reset_lock() -> ResetLock:
    """
    Return the process-wide reset guard. Redis makes it cluster-wide.
    """
    global _reset_lock
    if _reset_lock:
        return _reset_lock

    settings = get_settings()
    if settings.redis_url and not settings.use_in_memory_backends:
        _reset_lock = RedisResetLock(
            url=settings.redis_url,
            key=settings.reset_lock_key,
            timeout_seconds=settings.reset_lock_timeout_seconds,
        )
    else:
        _reset_lock = InMemoryResetLock()
    return _reset_lock


def get_http_session() -> requests.Session:
    """
    Return the shared HTTP session so connections are pooled across requests.
    """
    global _http_session
    if _http_session is None:
        _http_session = requests.Session()
    return _http_session


def build_reset_client(settings: Settings) -> Optional[ResetFunctionClient]:
    if not settings.reset_endpoint or not settings.supabase_service_role_key:
        return None
    return HttpResetFunctionClient(
        settings.reset_endpoint,
        settings.supabase_service_role_key,
        timeout=settings.reset_request_timeout_seconds,
        probe_timeout=settings.reset_probe_timeout_seconds,
        session=get_http_session(),
    )


def get_reset_client(
    settings: Settings = Depends(get_settings),
) -> Optional[ResetFunctionClient]:
    return build_reset_client(settings)
