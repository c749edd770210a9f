"""
Pydantic models for the monthly aggregation endpoints.
"""

from typing import Dict, List

from pydantic import BaseModel, Field


class MonthlyStatistics(BaseModel):
    total_sales_amount: float = Field(..., examples=[15423.57])
    sold_items_count: int = Field(..., examples=[12])
    not_sold_items_count: int = Field(..., examples=[18])


class PieSlice(BaseModel):
    """Number of records sharing one title."""

    title: str = Field(..., alias="_id")
    count: int

    model_config = {
        "populate_by_name": True,
    }


class CombinedData(BaseModel):
    statistics: MonthlyStatistics
    bar_chart: Dict[str, int]
    pie_chart: List[PieSlice]
