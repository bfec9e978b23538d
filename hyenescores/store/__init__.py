"""
Store handles.

``get_store`` builds the store described by the settings, or returns None
when the backend is not configured. Components receive the handle (or None)
explicitly; there is no process-wide "configured" flag.
"""
import logging

from hyenescores.config import Settings, get_settings
from hyenescores.store.base import (
    MAX_ROWS,
    TABLES,
    Filters,
    Row,
    StoreError,
    StoreNotConfiguredError,
    TableStore,
)
from hyenescores.store.postgrest import PostgrestStore

logger = logging.getLogger(__name__)


def get_store(settings: Settings | None = None) -> TableStore | None:
    settings = settings or get_settings()

    if settings.store_backend == "sql":
        from hyenescores.database import engine
        from hyenescores.store.sql import SqlStore

        return SqlStore(engine, max_rows=settings.store_page_size)

    if not settings.rest_configured:
        logger.warning("Store credentials missing (SUPABASE_URL / SUPABASE_KEY), running offline")
        return None
    return PostgrestStore.from_settings(settings)


__all__ = [
    "MAX_ROWS",
    "TABLES",
    "Filters",
    "Row",
    "StoreError",
    "StoreNotConfiguredError",
    "TableStore",
    "PostgrestStore",
    "get_store",
]
