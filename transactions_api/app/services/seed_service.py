"""
Seed loader.

Fetches the product transaction dataset over HTTP and bulk-loads it
into the record store.  Loading is not idempotent: every call appends
the full dataset again.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional

import httpx

from ..core.config import Settings
from ..core.errors import SeedError, StoreError
from ..core.store import TransactionStore
from ..schemas.transaction import SeedResult


logger = logging.getLogger(__name__)


class SeedService:
    """Fetch the remote dataset and store it."""

    def __init__(
        self,
        store: TransactionStore,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.store = store
        self.settings = settings
        # Tests inject an ``httpx.MockTransport`` here.
        self.transport = transport

    async def fetch_dataset(self) -> List[Dict[str, Any]]:
        """Download the dataset and return its records.

        Network errors, non-2xx responses and bodies that are not a JSON
        list are reported as ``SeedError``.
        """
        logger.info("Fetching seed dataset from %s", self.settings.seed_url)
        try:
            async with httpx.AsyncClient(
                timeout=self.settings.seed_timeout_seconds,
                transport=self.transport,
            ) as client:
                response = await client.get(self.settings.seed_url)
                response.raise_for_status()
                data = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.error("Failed to fetch seed dataset: %s", exc)
            raise SeedError() from exc
        if not isinstance(data, list):
            logger.error("Seed dataset is a %s, expected a list", type(data).__name__)
            raise SeedError()
        return data

    async def initialize(self) -> SeedResult:
        records = await self.fetch_dataset()
        try:
            inserted = await asyncio.wait_for(
                asyncio.to_thread(self.store.bulk_load, records),
                timeout=self.settings.seed_timeout_seconds,
            )
        except asyncio.TimeoutError as exc:
            logger.error("Loading the seed dataset timed out")
            raise SeedError() from exc
        except StoreError as exc:
            raise SeedError() from exc
        return SeedResult(message="Database initialized with seed data", inserted=inserted)
