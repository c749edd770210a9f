"""
Pydantic models for transaction records.

``TransactionCreate`` validates records coming from the seed dataset;
``TransactionRead`` adds the store identifier for responses.  The JSON
names follow the dataset (``dateOfSale``), while Python code uses
snake case attributes.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class TransactionBase(BaseModel):
    title: str = Field(..., examples=["Mens Casual Premium Slim Fit T-Shirts"])
    description: Optional[str] = Field(None, examples=["Slim-fitting style, contrast raglan long sleeve"])
    price: float = Field(..., examples=[329.85])
    date_of_sale: datetime = Field(..., alias="dateOfSale", examples=["2021-11-27T20:29:54+05:30"])
    sold: bool = Field(..., examples=[False])
    category: Optional[str] = Field(None, examples=["men's clothing"])
    image: Optional[str] = None

    model_config = {
        "populate_by_name": True,
        "extra": "ignore",
    }


class TransactionCreate(TransactionBase):
    """Schema for a record loaded from the seed dataset."""
    pass


class TransactionRead(TransactionBase):
    """Schema for reading a record from the API."""

    id: int


class TransactionPage(BaseModel):
    """One page of ``/transactions`` results."""

    total: int
    page: int
    per_page: int = Field(..., alias="perPage")
    transactions: List[TransactionRead]

    model_config = {
        "populate_by_name": True,
    }


class SeedResult(BaseModel):
    message: str
    inserted: int
