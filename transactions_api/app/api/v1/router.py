"""
Top‑level router for version 1 of the API.

This router aggregates the endpoint routers.  Each endpoint module
declares its full path (``/transactions``, ``/bar_chart`` ...) so the
routers are included without a prefix; the application decides where
the whole version is mounted.
"""

from fastapi import APIRouter

from .endpoints import charts, combined, health, seed, statistics, transactions

router = APIRouter()

router.include_router(health.router, tags=["health"])
router.include_router(seed.router, tags=["seed"])
router.include_router(transactions.router, tags=["transactions"])
router.include_router(statistics.router, tags=["statistics"])
router.include_router(charts.router, tags=["charts"])
router.include_router(combined.router, tags=["combined"])
