"""
Query service for transaction records.

Implements the list, statistics, bar-chart, pie-chart and combined
operations on top of :class:`TransactionStore`.  Store calls are
blocking SQLite calls, so each one runs in a worker thread with a
timeout; independent calls inside one operation are issued
concurrently with ``asyncio.gather``.

Month validation happens before any store access, so a missing or
malformed month never reaches the database.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, List, Optional

from ..core.config import Settings
from ..core.errors import StoreError, TransactionsAPIError, UpstreamError
from ..core.filters import PRICE_RANGES, build_list_filter, build_month_filter, clamp_page, require_month
from ..core.store import TransactionStore
from ..schemas.statistics import CombinedData, MonthlyStatistics, PieSlice
from ..schemas.transaction import TransactionPage


logger = logging.getLogger(__name__)


@contextmanager
def _failure_message(message: str) -> Iterator[None]:
    """Replace the message of a ``StoreError`` raised inside the block."""
    try:
        yield
    except StoreError as exc:
        raise StoreError(message) from exc


class TransactionService:
    """Read-only queries over the transaction records."""

    def __init__(self, store: TransactionStore, settings: Settings) -> None:
        self.store = store
        self.settings = settings

    async def _call(self, func: Callable[..., Any], *args: Any) -> Any:
        """Run a blocking store call in a thread, bounded by the query timeout."""
        try:
            return await asyncio.wait_for(
                asyncio.to_thread(func, *args),
                timeout=self.settings.query_timeout_seconds,
            )
        except asyncio.TimeoutError as exc:
            logger.error(
                "Store call %s timed out after %ss",
                getattr(func, "__name__", func),
                self.settings.query_timeout_seconds,
            )
            raise StoreError("Record store timed out") from exc

    async def list_transactions(
        self,
        search: Optional[str] = None,
        page: Optional[int] = None,
        per_page: Optional[int] = None,
        month: Optional[str] = None,
    ) -> TransactionPage:
        """Return one page of records matching ``month`` and ``search``.

        ``total`` counts every match, not just the returned page.
        Pagination parameters are clamped (see ``filters.clamp_page``).
        """
        flt = build_list_filter(search, month, self.settings.list_empty_month)
        window = clamp_page(page, per_page, self.settings.default_per_page, self.settings.max_per_page)
        with _failure_message("Failed to fetch transactions"):
            transactions, total = await asyncio.gather(
                self._call(self.store.find, flt, window.skip, window.per_page),
                self._call(self.store.count, flt),
            )
        return TransactionPage(
            total=total,
            page=window.page,
            per_page=window.per_page,
            transactions=transactions,
        )

    async def statistics(self, month: Optional[str]) -> MonthlyStatistics:
        """Total sale amount, sold count and unsold count for ``month``."""
        flt = build_month_filter(month)
        sold = flt.with_sold(True)
        with _failure_message("Failed to fetch statistics"):
            sold_count, not_sold_count, total_amount = await asyncio.gather(
                self._call(self.store.count, sold),
                self._call(self.store.count, flt.with_sold(False)),
                self._call(self.store.sum_where, sold, "price"),
            )
        return MonthlyStatistics(
            total_sales_amount=round(total_amount, 2),
            sold_items_count=sold_count,
            not_sold_items_count=not_sold_count,
        )

    async def bar_chart(self, month: Optional[str]) -> Dict[str, int]:
        """Number of records of ``month`` in each price range, zeros included."""
        flt = build_month_filter(month)
        with _failure_message("Failed to fetch bar chart data"):
            counts = await self._call(self.store.count_grouped_by, flt, "price_bucket")
        return {price_range.label: counts.get(price_range.label, 0) for price_range in PRICE_RANGES}

    async def pie_chart(self, month: Optional[str]) -> List[PieSlice]:
        """Number of records of ``month`` per distinct title."""
        flt = build_month_filter(month)
        with _failure_message("Failed to fetch pie chart data"):
            counts = await self._call(self.store.count_grouped_by, flt, "title")
        return [PieSlice(title=title, count=count) for title, count in counts.items()]

    async def combined(self, month: Optional[str]) -> CombinedData:
        """Statistics, bar chart and pie chart for ``month`` in one response.

        The three queries run concurrently.  If any of them fails, or all
        of them together exceed the combined timeout, the whole call fails
        with ``UpstreamError``.
        """
        require_month(month)
        try:
            statistics, bar_chart, pie_chart = await asyncio.wait_for(
                asyncio.gather(
                    self.statistics(month),
                    self.bar_chart(month),
                    self.pie_chart(month),
                ),
                timeout=self.settings.combined_timeout_seconds,
            )
        except asyncio.TimeoutError as exc:
            logger.error("Combined data for month %s timed out", month)
            raise UpstreamError() from exc
        except TransactionsAPIError as exc:
            logger.error("Combined data for month %s failed: %s", month, exc.message)
            raise UpstreamError() from exc
        return CombinedData(statistics=statistics, bar_chart=bar_chart, pie_chart=pie_chart)
