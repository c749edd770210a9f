"""
Record store for transaction records.

``TransactionStore`` translates :class:`TransactionFilter` values into
parameterized SQL against the SQLite database from ``core.db``.  Every
call opens its own connection, so one store instance can be shared by
concurrent requests (each running in its own worker thread).

Each connection registers two SQL functions: ``casefold`` for search
and ``price_bucket`` (from ``core.filters``) for the price histogram.

All ``sqlite3`` failures are logged and re-raised as ``StoreError``.
"""

import logging
import sqlite3
from contextlib import contextmanager
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Tuple, Union

from pydantic import ValidationError as PydanticValidationError

from ..schemas.transaction import TransactionCreate, TransactionRead
from .db import get_connection, init_db
from .errors import StoreError
from .filters import MONTH_ANY, MONTH_EQUALS, MONTH_PATTERN, TransactionFilter, price_bucket


logger = logging.getLogger(__name__)


def _casefold(value: Any) -> Any:
    return None if value is None else str(value).casefold()


# SQL expression per searchable field; price is matched as text.
_SEARCH_COLUMNS = {
    "title": "title",
    "description": "description",
    "price": "CAST(price AS TEXT)",
}

_GROUP_COLUMNS = {
    "title": "title",
    "category": "category",
    "sold": "sold",
    "price_bucket": "price_bucket(price)",
}

_SUM_COLUMNS = {"price"}

_SELECT_COLUMNS = "id, title, description, price, date_of_sale, sold, category, image"


def compile_filter(flt: TransactionFilter) -> Tuple[str, List[Any]]:
    """Return ``(where_sql, params)`` for ``flt``.

    ``where_sql`` is empty when the filter matches every record,
    otherwise it starts with ``" WHERE "``.
    """
    clauses: List[str] = []
    params: List[Any] = []

    month = flt.month
    if month.kind == MONTH_EQUALS:
        clauses.append("sale_month = ?")
        params.append(month.month)
    elif month.kind == MONTH_PATTERN:
        clauses.append("INSTR(date_of_sale, ?) > 0")
        params.append(month.token)
    elif month.kind != MONTH_ANY:
        raise ValueError(f"Unknown month predicate kind: {month.kind}")

    if not flt.search.is_empty:
        needle = flt.search.text.casefold()
        ors = []
        for name in flt.search.fields:
            ors.append(f"INSTR(COALESCE(casefold({_SEARCH_COLUMNS[name]}), ''), ?) > 0")
            params.append(needle)
        clauses.append("(" + " OR ".join(ors) + ")")

    if flt.sold is not None:
        clauses.append("sold = ?")
        params.append(int(flt.sold))

    where_sql = " WHERE " + " AND ".join(clauses) if clauses else ""
    return where_sql, params


def _row_to_transaction(row: sqlite3.Row) -> TransactionRead:
    return TransactionRead(
        id=row["id"],
        title=row["title"],
        description=row["description"],
        price=row["price"],
        date_of_sale=row["date_of_sale"],
        sold=bool(row["sold"]),
        category=row["category"],
        image=row["image"],
    )


class TransactionStore:
    """SQLite-backed store holding ``TransactionRecord`` rows."""

    def __init__(self, database_url: str) -> None:
        self.database_url = database_url

    def initialize(self) -> None:
        """Create the schema (apply pending migrations)."""
        with self._guard("initialize"):
            init_db(self.database_url)

    @contextmanager
    def _connection(self) -> Iterator[sqlite3.Connection]:
        conn = get_connection(self.database_url)
        try:
            conn.create_function("casefold", 1, _casefold, deterministic=True)
            conn.create_function("price_bucket", 1, price_bucket, deterministic=True)
            yield conn
        finally:
            conn.close()

    @contextmanager
    def _guard(self, operation: str) -> Iterator[None]:
        try:
            yield
        except (sqlite3.Error, OverflowError) as exc:
            # OverflowError: a parameter outside the SQLite integer range.
            logger.exception("Store operation '%s' failed", operation)
            raise StoreError(f"Store operation '{operation}' failed") from exc

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------
    def bulk_load(self, records: Iterable[Union[TransactionCreate, Mapping[str, Any]]]) -> int:
        """Insert ``records`` and return how many were inserted.

        Every record is validated before anything is written; a single
        invalid record aborts the whole load with ``StoreError``.  The
        load is not idempotent: calling it twice stores every record
        twice.
        """
        validated: List[TransactionCreate] = []
        for position, record in enumerate(records):
            try:
                if isinstance(record, TransactionCreate):
                    validated.append(record)
                else:
                    validated.append(TransactionCreate.model_validate(record))
            except PydanticValidationError as exc:
                logger.error("Seed record %s is invalid: %s", position, exc)
                raise StoreError(f"Record {position} failed validation") from exc

        rows = [
            (
                r.title,
                r.description,
                r.price,
                r.date_of_sale.isoformat(),
                r.date_of_sale.year,
                r.date_of_sale.month,
                int(r.sold),
                r.category,
                r.image,
            )
            for r in validated
        ]
        with self._guard("bulk_load"), self._connection() as conn:
            try:
                conn.executemany(
                    """
                    INSERT INTO transactions
                        (title, description, price, date_of_sale, sale_year, sale_month, sold, category, image)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    rows,
                )
                conn.commit()
            except sqlite3.Error:
                conn.rollback()
                raise
        logger.info("Loaded %s transaction records", len(rows))
        return len(rows)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    def find(self, flt: TransactionFilter, skip: int = 0, limit: int = 10) -> List[TransactionRead]:
        """Return at most ``limit`` matches after skipping ``skip``, in id order."""
        if skip < 0 or limit < 0:
            raise ValueError("skip and limit must be non-negative")
        where_sql, params = compile_filter(flt)
        query = f"SELECT {_SELECT_COLUMNS} FROM transactions{where_sql} ORDER BY id LIMIT ? OFFSET ?"
        with self._guard("find"), self._connection() as conn:
            rows = conn.execute(query, (*params, limit, skip)).fetchall()
        return [_row_to_transaction(row) for row in rows]

    def count(self, flt: TransactionFilter) -> int:
        where_sql, params = compile_filter(flt)
        with self._guard("count"), self._connection() as conn:
            return conn.execute(f"SELECT COUNT(*) FROM transactions{where_sql}", params).fetchone()[0]

    def sum_where(self, flt: TransactionFilter, field: str) -> float:
        """Sum ``field`` over matching records; 0 when nothing matches."""
        if field not in _SUM_COLUMNS:
            raise ValueError(f"Cannot sum over field '{field}'")
        where_sql, params = compile_filter(flt)
        with self._guard("sum_where"), self._connection() as conn:
            return conn.execute(
                f"SELECT COALESCE(SUM({field}), 0) FROM transactions{where_sql}", params
            ).fetchone()[0]

    def count_grouped_by(self, flt: TransactionFilter, group_field: str) -> Dict[Any, int]:
        """Count matching records per distinct ``group_field`` value.

        Groups are ordered by count (descending) then key.  Records whose
        group value is NULL (no category, negative price) are left out.
        """
        if group_field not in _GROUP_COLUMNS:
            raise ValueError(f"Cannot group by field '{group_field}'")
        expression = _GROUP_COLUMNS[group_field]
        where_sql, params = compile_filter(flt)
        query = (
            f"SELECT {expression} AS group_key, COUNT(*) AS group_count FROM transactions{where_sql} "
            "GROUP BY group_key ORDER BY group_count DESC, group_key ASC"
        )
        with self._guard("count_grouped_by"), self._connection() as conn:
            rows = conn.execute(query, params).fetchall()
        result: Dict[Any, int] = {}
        for row in rows:
            key = row["group_key"]
            if key is None:
                continue
            result[bool(key) if group_field == "sold" else key] = row["group_count"]
        return result
