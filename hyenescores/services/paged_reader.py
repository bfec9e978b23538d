"""
Complete reads through the store's per-request row cap.

The store truncates every select to ``max_rows`` rows without saying so, so
a collection is read page by page until a short (or empty) page shows up.
"""
import logging
from collections.abc import Sequence

from hyenescores.store.base import MAX_ROWS, Filters, Row, TableStore

logger = logging.getLogger(__name__)


class PagedReader:
    def __init__(self, store: TableStore, page_size: int | None = None):
        self.store = store
        max_rows = getattr(store, "max_rows", MAX_ROWS)
        # pages never exceed the store cap
        self.page_size = min(page_size or max_rows, max_rows)
        self.rows_fetched = 0
        self.pages_fetched = 0

    async def fetch_all(
        self,
        table: str,
        order_by: str | Sequence[str],
        *,
        filters: Filters | None = None,
    ) -> list[Row]:
        """
        Fetch every row of ``table`` in ascending ``order_by`` order.

        Pages are requested one after the other: whether another page exists
        is only known once the previous one came back full. A failing page is
        logged and ends the read; rows gathered so far are returned.
        """
        rows: list[Row] = []
        offset = 0
        self.rows_fetched = 0
        self.pages_fetched = 0

        while True:
            page_number = offset // self.page_size + 1
            try:
                page = await self.store.select(
                    table,
                    filters=filters,
                    order_by=order_by,
                    offset=offset,
                    limit=self.page_size,
                )
            except Exception as e:
                logger.warning(f"Error reading {table} page {page_number}: {e}")
                break

            self.pages_fetched += 1
            if not page:
                break

            rows.extend(page)
            self.rows_fetched = len(rows)
            logger.debug(f"{table}: {self.rows_fetched} rows loaded (page {page_number})")

            if len(page) < self.page_size:
                break
            offset += self.page_size

        return rows
