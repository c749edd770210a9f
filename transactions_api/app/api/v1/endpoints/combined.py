"""
Combined endpoint for API v1.

Returns the statistics, bar chart and pie chart of one month in a
single response.  The three queries run concurrently in-process; if
any of them fails the whole request fails.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from transactions_api.app.api.deps import get_transaction_service
from transactions_api.app.schemas.statistics import CombinedData
from transactions_api.app.services.transaction_service import TransactionService


router = APIRouter()


@router.get("/combined_data", response_model=CombinedData)
async def combined_data(
    month: Optional[str] = Query(None),
    service: TransactionService = Depends(get_transaction_service),
) -> CombinedData:
    return await service.combined(month)
