"""
FastAPI dependencies.

The application keeps its settings, record store and (optional) seed
HTTP transport on ``app.state``; these helpers hand them to route
handlers so that no module holds a global handle.
"""

from fastapi import Request

from ..services.seed_service import SeedService
from ..services.transaction_service import TransactionService


def get_transaction_service(request: Request) -> TransactionService:
    state = request.app.state
    return TransactionService(state.store, state.settings)


def get_seed_service(request: Request) -> SeedService:
    state = request.app.state
    return SeedService(state.store, state.settings, transport=state.seed_transport)
