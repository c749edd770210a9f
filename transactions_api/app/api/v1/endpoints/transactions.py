"""
Transaction list endpoint for API v1.

Pages through the records of a month, optionally narrowed by a search
text matched against title, description and price.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from transactions_api.app.api.deps import get_transaction_service
from transactions_api.app.schemas.transaction import TransactionPage
from transactions_api.app.services.transaction_service import TransactionService


router = APIRouter()


@router.get("/transactions", response_model=TransactionPage)
async def list_transactions(
    search: str = Query(""),
    page: Optional[int] = Query(None),
    per_page: Optional[int] = Query(None, alias="perPage"),
    month: str = Query(""),
    service: TransactionService = Depends(get_transaction_service),
) -> TransactionPage:
    """Return a page of transactions.

    - **search**: case-insensitive substring of title, description or price.
    - **page**, **perPage**: pagination; out-of-range values are clamped.
    - **month**: two-digit month (`01`–`12`).  When empty, the server's
      ``LIST_EMPTY_MONTH`` setting decides whether all months match.
    """
    return await service.list_transactions(search=search, page=page, per_page=per_page, month=month)
