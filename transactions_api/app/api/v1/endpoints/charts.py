"""
Chart endpoints for API v1.

``/bar_chart`` returns a histogram of prices in ten fixed ranges and
``/pie_chart`` the number of records per title, both for one month.
"""

from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, Query

from transactions_api.app.api.deps import get_transaction_service
from transactions_api.app.schemas.statistics import PieSlice
from transactions_api.app.services.transaction_service import TransactionService


router = APIRouter()


@router.get("/bar_chart", response_model=Dict[str, int])
async def bar_chart(
    month: Optional[str] = Query(None),
    service: TransactionService = Depends(get_transaction_service),
) -> Dict[str, int]:
    """Count of records per price range (`0-100` … `901-above`)."""
    return await service.bar_chart(month)


@router.get("/pie_chart", response_model=List[PieSlice])
async def pie_chart(
    month: Optional[str] = Query(None),
    service: TransactionService = Depends(get_transaction_service),
) -> List[PieSlice]:
    """Count of records per distinct title, as `{_id, count}` items."""
    return await service.pie_chart(month)
