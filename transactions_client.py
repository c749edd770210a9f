"""Transactions API client.

This module defines a small client wrapper around the REST API served
by ``transactions_api``.  It uses the ``requests`` library internally
to make HTTP calls and exposes one method per endpoint:

* :meth:`initialize` – load the seed dataset on the server.
* :meth:`list_transactions` – one page of transactions.
* :meth:`statistics` – monthly totals and sold/unsold counts.
* :meth:`bar_chart` – price-range histogram of a month.
* :meth:`pie_chart` – record count per title of a month.
* :meth:`combined` – the three monthly views in one call.

Every method returns a tuple ``(data, error)``.  On success ``error``
is ``None``; on failure ``data`` is ``None`` (or an empty value) and
``error`` is a dictionary with keys ``status_code`` and ``message``.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

import requests


logger = logging.getLogger(__name__)

Error = Dict[str, Any]


class TransactionsAPI:
    """Client for interacting with the transactions API."""

    def __init__(
        self,
        *,
        base_url: str,
        timeout: float = 15,
        session: Optional[requests.Session] = None,
    ) -> None:
        """Initialise the API client.

        Args:
            base_url: Base URL for the API, e.g. ``http://localhost:5000``.
            timeout: Per-request timeout in seconds.
            session: Optional requests session.  If not supplied a
                session will be created automatically.
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    # ------------------------------------------------------------------
    # Low level HTTP helpers
    # ------------------------------------------------------------------
    def _request(self, path: str, *, params: Dict[str, Any] | None = None) -> Tuple[Optional[Any], Optional[Error]]:
        """Perform a GET request to the API.

        Args:
            path: Path relative to :attr:`base_url` (e.g. ``/statistics``).
            params: Query parameters to include in the request.
        Returns:
            A tuple ``(data, error)``.
        """
        url = f"{self.base_url}{path}"
        try:
            logger.debug("Sending GET request to %s", url)
            response = self.session.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
            if response.content:
                return response.json(), None
            return None, None
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            message = ""
            if exc.response is not None:
                try:
                    err_json = exc.response.json()
                    message = err_json.get("error") or err_json.get("detail") or str(err_json)
                except ValueError:
                    message = exc.response.text
            if not message:
                message = str(exc)
            logger.error("API request failed (%s): %s", status, message)
            return None, {"status_code": status, "message": message}
        except requests.RequestException as exc:
            logger.error("API request failed: %s", exc)
            return None, {"status_code": None, "message": str(exc)}

    # ------------------------------------------------------------------
    # Endpoints
    # ------------------------------------------------------------------
    def initialize(self) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        """Ask the server to load the seed dataset (appends on every call)."""
        return self._request("/initialize")

    def list_transactions(
        self,
        *,
        search: str = "",
        page: int = 1,
        per_page: int = 10,
        month: str = "",
    ) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        """Retrieve one page of transactions.

        Returns:
            A tuple ``(page, error)`` where ``page`` has the keys
            ``total``, ``page``, ``perPage`` and ``transactions``.
        """
        params = {"search": search, "page": page, "perPage": per_page, "month": month}
        return self._request("/transactions", params=params)

    def statistics(self, month: str) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._request("/statistics", params={"month": month})

    def bar_chart(self, month: str) -> Tuple[Optional[Dict[str, int]], Optional[Error]]:
        return self._request("/bar_chart", params={"month": month})

    def pie_chart(self, month: str) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        data, error = self._request("/pie_chart", params={"month": month})
        return (data or []), error

    def combined(self, month: str) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._request("/combined_data", params={"month": month})
