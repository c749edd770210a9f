"""
Monthly statistics endpoint for API v1.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from transactions_api.app.api.deps import get_transaction_service
from transactions_api.app.schemas.statistics import MonthlyStatistics
from transactions_api.app.services.transaction_service import TransactionService


router = APIRouter()


@router.get("/statistics", response_model=MonthlyStatistics)
async def statistics(
    month: Optional[str] = Query(None),
    service: TransactionService = Depends(get_transaction_service),
) -> MonthlyStatistics:
    """Total amount of sold items plus sold and unsold counts for a month.

    The month is required; a missing or invalid month yields 400.
    """
    return await service.statistics(month)
