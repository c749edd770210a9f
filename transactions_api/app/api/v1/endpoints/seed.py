"""
Seed endpoint for API v1.

``GET /initialize`` downloads the product transaction dataset and
appends it to the record store.  Calling it twice stores every record
twice.
"""

from fastapi import APIRouter, Depends, status

from transactions_api.app.api.deps import get_seed_service
from transactions_api.app.schemas.transaction import SeedResult
from transactions_api.app.services.seed_service import SeedService


router = APIRouter()


@router.get("/initialize", response_model=SeedResult, status_code=status.HTTP_201_CREATED)
async def initialize(service: SeedService = Depends(get_seed_service)) -> SeedResult:
    """Load the seed dataset into the database."""
    return await service.initialize()
