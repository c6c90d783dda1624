"""QuickBooks Online client: OAuth2 refresh plus paged query API."""

import logging
from datetime import date
from typing import Any

import httpx

logger = logging.getLogger(__name__)

TOKEN_URL = "https://oauth.platform.intuit.com/oauth2/v1/tokens/bearer"

_BASE_URLS = {
    "sandbox": "https://sandbox-quickbooks.api.intuit.com",
    "production": "https://quickbooks.api.intuit.com",
}

# QBO caps a single query page at 1000 rows
PAGE_SIZE = 1000


class QuickBooksError(Exception):
    """Base exception for QuickBooks Online API errors."""

    def __init__(self, message: str, status_code: int | None = None, details: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.details = details


class QuickBooksAuthError(QuickBooksError):
    """Token refresh was rejected."""


class QuickBooksClient:
    """Async client for one QBO company (realm).

    Must be refreshed with :meth:`refresh_access_token` before any query.
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        refresh_token: str,
        realm_id: str,
        environment: str = "sandbox",
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._client_id = client_id
        self._client_secret = client_secret
        self.refresh_token = refresh_token
        self.realm_id = realm_id
        if environment not in _BASE_URLS:
            raise ValueError(
                f"Unknown QuickBooks environment {environment!r}; expected one of {sorted(_BASE_URLS)}"
            )
        self.base_url = _BASE_URLS[environment]
        self.access_token: str | None = None
        self._http = httpx.AsyncClient(timeout=httpx.Timeout(timeout), transport=transport)

    async def close(self) -> None:
        await self._http.aclose()

    # === Authentication ===

    async def refresh_access_token(self) -> dict[str, Any]:
        """Exchange the refresh token for a fresh access token.

        Intuit rotates refresh tokens, so the returned one replaces ours.
        """
        response = await self._http.post(
            TOKEN_URL,
            auth=(self._client_id, self._client_secret),
            data={"grant_type": "refresh_token", "refresh_token": self.refresh_token},
            headers={"Accept": "application/json"},
        )
        if response.status_code != 200:
            logger.error("QuickBooks token refresh failed (%d): %s", response.status_code, response.text[:200])
            raise QuickBooksAuthError(
                "QuickBooks token refresh failed",
                status_code=response.status_code,
                details=response.text,
            )

        data = response.json()
        self.access_token = data["access_token"]
        self.refresh_token = data.get("refresh_token", self.refresh_token)
        return data

    # === Queries ===

    async def query(self, statement: str) -> dict[str, Any]:
        """Run one QBO SQL-like query and return its ``QueryResponse`` object."""
        if not self.access_token:
            raise QuickBooksAuthError("QuickBooks client used before token refresh")

        response = await self._http.get(
            f"{self.base_url}/v3/company/{self.realm_id}/query",
            params={"query": statement},
            headers={
                "Authorization": f"Bearer {self.access_token}",
                "Accept": "application/json",
            },
        )
        if response.status_code == 401:
            raise QuickBooksAuthError("QuickBooks rejected access token", status_code=401)
        if response.status_code >= 400:
            raise QuickBooksError(
                f"QuickBooks query failed: {statement}",
                status_code=response.status_code,
                details=response.text,
            )
        return response.json().get("QueryResponse", {})

    async def fetch_all(self, entity: str, where: str | None = None) -> list[dict]:
        """Page through every ``entity`` row matching ``where``."""
        rows: list[dict] = []
        start = 1
        while True:
            statement = f"SELECT * FROM {entity}"
            if where:
                statement += f" WHERE {where}"
            statement += f" STARTPOSITION {start} MAXRESULTS {PAGE_SIZE}"

            page = (await self.query(statement)).get(entity, [])
            rows.extend(page)
            if len(page) < PAGE_SIZE:
                return rows
            start += PAGE_SIZE

    async def find_accounts(self) -> list[dict]:
        return await self.fetch_all("Account")

    async def find_journal_entries(self, since: date) -> list[dict]:
        return await self.fetch_all("JournalEntry", f"TxnDate >= '{since.isoformat()}'")
