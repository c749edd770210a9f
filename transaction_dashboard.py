"""A terminal dashboard for the transactions API.

This module renders the transaction list served by ``/transactions``
as a text table with Previous/Next navigation.  It uses the
:class:`transactions_client.TransactionsAPI` client, sending the same
four parameters as the list endpoint (``search``, ``page``,
``perPage`` and ``month``).  Optionally a monthly summary (statistics,
price histogram and top titles) from ``/combined_data`` is printed
above the table.

Commands at the prompt:

``n`` / ``p``
    next / previous page.
``m <MM>``
    switch month (``m`` alone clears the month).
``s <text>``
    search (``s`` alone clears the search).
``q``
    quit.

The base URL defaults to the ``TRANSACTIONS_API_URL`` environment
variable, or ``http://localhost:5000``.

Usage:
    python transaction_dashboard.py --month 03 --search shirt --summary
"""

from __future__ import annotations

import argparse
import calendar
import logging
import os
import sys
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Optional

from transactions_client import TransactionsAPI


logger = logging.getLogger(__name__)

COLUMNS = ("ID", "Title", "Description", "Price", "Category", "Sold")
# Maximum characters per cell before truncation.
CELL_WIDTH = {"ID": 6, "Title": 30, "Description": 40, "Price": 10, "Category": 18, "Sold": 4}


@dataclass(frozen=True)
class DashboardState:
    search: str = ""
    page: int = 1
    per_page: int = 10
    month: str = ""
    total: int = 0

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page * self.per_page < self.total

    def next_page(self) -> "DashboardState":
        return replace(self, page=self.page + 1) if self.has_next else self

    def previous_page(self) -> "DashboardState":
        return replace(self, page=self.page - 1) if self.has_previous else self

    def with_month(self, month: str) -> "DashboardState":
        return replace(self, month=month, page=1)

    def with_search(self, search: str) -> "DashboardState":
        return replace(self, search=search, page=1)


def month_label(month: str) -> str:
    """``"03"`` -> ``"March"``; empty -> ``"All months"``."""
    if not month:
        return "All months"
    try:
        return calendar.month_name[int(month)]
    except (ValueError, IndexError):
        return month


def _cell(column: str, value: str) -> str:
    width = CELL_WIDTH[column]
    if len(value) > width:
        value = value[: width - 1] + "…"
    return value.ljust(width)


def _row_values(transaction: Dict[str, Any]) -> Dict[str, str]:
    price = transaction.get("price")
    return {
        "ID": str(transaction.get("id", "")),
        "Title": transaction.get("title") or "",
        "Description": (transaction.get("description") or "").replace("\n", " "),
        "Price": f"${price:.2f}" if isinstance(price, (int, float)) else "",
        "Category": transaction.get("category") or "N/A",
        "Sold": "Yes" if transaction.get("sold") else "No",
    }


def render_table(transactions: List[Dict[str, Any]]) -> str:
    """Render a list of transactions as a fixed-width text table."""
    header = " | ".join(_cell(c, c) for c in COLUMNS)
    lines = [header, "-+-".join("-" * CELL_WIDTH[c] for c in COLUMNS)]
    if not transactions:
        lines.append("(no transactions)")
    for transaction in transactions:
        values = _row_values(transaction)
        lines.append(" | ".join(_cell(c, values[c]) for c in COLUMNS))
    return "\n".join(lines)


def render_footer(state: DashboardState) -> str:
    previous = "[p] Previous" if state.has_previous else "            "
    following = "[n] Next" if state.has_next else ""
    return f"Page No: {state.page}   {previous}  -  {following}   Per Page: {state.per_page}   Total: {state.total}"


def render_summary(combined: Dict[str, Any], month: str, top: int = 5) -> str:
    """Render the ``/combined_data`` payload of ``month`` as text."""
    stats = combined.get("statistics", {})
    lines = [
        f"Statistics - {month_label(month)}",
        f"  Total sale:          {stats.get('total_sales_amount', 0)}",
        f"  Total sold items:    {stats.get('sold_items_count', 0)}",
        f"  Total not sold items: {stats.get('not_sold_items_count', 0)}",
        "Price ranges",
    ]
    bar_chart = combined.get("bar_chart", {})
    widest = max(bar_chart.values(), default=0) or 1
    for label, count in bar_chart.items():
        bar = "#" * round(20 * count / widest)
        lines.append(f"  {label:>10} {bar} {count}")
    lines.append("Top titles")
    for item in combined.get("pie_chart", [])[:top]:
        lines.append(f"  {item.get('count', 0):>3}  {item.get('_id', '')}")
    return "\n".join(lines)


class TransactionDashboard:
    """Interactive loop around :class:`TransactionsAPI`."""

    def __init__(self, api: TransactionsAPI, state: DashboardState, summary: bool = False) -> None:
        self.api = api
        self.state = state
        self.summary = summary
        self.transactions: List[Dict[str, Any]] = []

    def refresh(self) -> Optional[str]:
        """Fetch the current page.  Returns an error message or ``None``."""
        data, error = self.api.list_transactions(
            search=self.state.search,
            page=self.state.page,
            per_page=self.state.per_page,
            month=self.state.month,
        )
        if error:
            self.transactions = []
            return error.get("message") or "Failed to fetch transactions"
        data = data or {}
        self.transactions = data.get("transactions", [])
        self.state = replace(
            self.state,
            total=data.get("total", 0),
            page=data.get("page", self.state.page),
            per_page=data.get("perPage", self.state.per_page),
        )
        return None

    def render(self) -> str:
        parts = [f"Transaction Dashboard - {month_label(self.state.month)}"]
        if self.state.search:
            parts[0] += f" - search: {self.state.search!r}"
        if self.summary and self.state.month:
            combined, error = self.api.combined(self.state.month)
            if combined:
                parts.append(render_summary(combined, self.state.month))
            else:
                parts.append(f"[!] {(error or {}).get('message')}")
        parts.append(render_table(self.transactions))
        parts.append(render_footer(self.state))
        return "\n\n".join(parts)

    def handle(self, command: str) -> bool:
        """Apply one prompt command.  Returns False when the user quits."""
        verb, _, argument = command.strip().partition(" ")
        verb = verb.lower()
        if verb in {"q", "quit", "exit"}:
            return False
        if verb == "n":
            self.state = self.state.next_page()
        elif verb == "p":
            self.state = self.state.previous_page()
        elif verb == "m":
            self.state = self.state.with_month(argument.strip())
        elif verb == "s":
            self.state = self.state.with_search(argument.strip())
        return True

    def run(self, once: bool = False) -> None:
        while True:
            error = self.refresh()
            print(f"[!] {error}" if error else self.render())
            if once:
                return
            try:
                command = input("\n[n]ext [p]revious [m MM] [s text] [q]uit > ")
            except EOFError:
                return
            if not self.handle(command):
                return


def main(argv: Optional[List[str]] = None) -> None:
    ap = argparse.ArgumentParser(description="Terminal dashboard for the transactions API.")
    ap.add_argument("--base-url", default=os.getenv("TRANSACTIONS_API_URL", "http://localhost:5000"))
    ap.add_argument("--month", default="", help="Two-digit month, e.g. 03")
    ap.add_argument("--search", default="", help="Search text")
    ap.add_argument("--per-page", type=int, default=10)
    ap.add_argument("--summary", action="store_true", help="Show monthly statistics and charts")
    ap.add_argument("--once", action="store_true", help="Print one page and exit")
    args = ap.parse_args(argv)

    logging.basicConfig(level=logging.WARNING, format="%(asctime)s [%(levelname)s] %(message)s")
    api = TransactionsAPI(base_url=args.base_url)
    state = DashboardState(search=args.search, per_page=args.per_page, month=args.month)
    TransactionDashboard(api, state, summary=args.summary).run(once=args.once)


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        sys.exit(130)
