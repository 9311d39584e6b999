"""Bank API HTTP client for fetching accounts, purchases, deposits and bills"""

import asyncio
import logging
from typing import Any, Dict, List

import httpx

from forecast_gateway.config import settings
from forecast_gateway.domain.exceptions import AccountNotFoundError, BankAPIError, InvalidEventDataError
from forecast_gateway.domain.models import Account
from forecast_gateway.infrastructure.clients.normalize import normalize_account

logger = logging.getLogger(__name__)


def to_array(data: Any) -> List[Any]:
    """Unwrap list payloads that arrive bare or as {"results": [...]} / {"data": [...]}"""
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        for key in ("results", "data"):
            if isinstance(data.get(key), list):
                return data[key]
    return []


class BankClient:
    """
    Client for a Nessie-style bank REST API.

    Two URL layouts are supported: "customer" mode uses nested resources
    (/accounts/{id}/purchases), "enterprise" mode uses flat collections
    filtered by query parameters (/enterprise/purchases?account_id=...).
    """

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        mode: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        backoff_base: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = (base_url or settings.bank_api_base).rstrip("/")
        self.api_key = api_key if api_key is not None else settings.bank_api_key
        self.mode = mode or settings.bank_mode
        self.timeout = timeout or settings.http_timeout_seconds
        self.max_retries = settings.bank_max_retries if max_retries is None else max_retries
        self.backoff_base = settings.bank_backoff_base if backoff_base is None else backoff_base
        self.transport = transport

    @property
    def enterprise(self) -> bool:
        return self.mode == "enterprise"

    async def _get(self, path: str, params: Dict[str, Any] | None = None) -> Any:
        """
        GET a provider resource with retry logic.

        Retry strategy:
        - Exponential backoff: base, 2*base, 4*base ... (base * 2^(attempt-1))
        - Retries on 5xx errors and network failures, never on 4xx

        Raises:
            AccountNotFoundError: on 404
            BankAPIError: on other HTTP errors, timeouts or a non-JSON body
        """
        query = dict(params or {})
        if self.api_key:
            query["key"] = self.api_key

        attempt = 0
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            while True:
                try:
                    response = await client.get(f"{self.base_url}{path}", params=query)
                    response.raise_for_status()
                    return response.json()

                except httpx.HTTPStatusError as e:
                    status = e.response.status_code
                    if status == 404:
                        raise AccountNotFoundError(f"Bank API has no resource at {path}", status_code=404) from e
                    attempt += 1
                    if status < 500 or attempt >= self.max_retries:
                        raise BankAPIError(f"Bank API error: {status}", status_code=status) from e

                except httpx.TimeoutException as e:
                    attempt += 1
                    if attempt >= self.max_retries:
                        raise BankAPIError(f"Bank API timeout after {self.timeout}s") from e

                except httpx.RequestError as e:
                    attempt += 1
                    if attempt >= self.max_retries:
                        raise BankAPIError(f"Bank API unreachable: {e}") from e

                except ValueError as e:
                    raise BankAPIError(f"Invalid JSON from bank: {e}") from e

                backoff = self.backoff_base * (2 ** (attempt - 1))
                logger.warning(f"Bank API GET {path} failed (attempt {attempt}), retrying in {backoff}s")
                await asyncio.sleep(backoff)

    async def get_account(self, account_id: str) -> Account:
        """
        Fetch a single account.

        Raises:
            AccountNotFoundError: if the provider does not know the account
            BankAPIError: on provider failure or an unusable account record
        """
        if self.enterprise:
            data = await self._get(f"/enterprise/accounts/{account_id}")
        else:
            data = await self._get(f"/accounts/{account_id}")

        try:
            return normalize_account(data)
        except InvalidEventDataError as e:
            raise BankAPIError(f"Invalid account data from bank: {e}") from e

    async def list_accounts(self, customer_id: str) -> List[Account]:
        """Accounts owned by a customer; unusable records are skipped"""
        if self.enterprise:
            data = await self._get("/enterprise/accounts", {"customer_id": customer_id})
        else:
            data = await self._get(f"/customers/{customer_id}/accounts")

        accounts = []
        for record in to_array(data):
            try:
                accounts.append(normalize_account(record))
            except InvalidEventDataError as e:
                logger.warning(f"Rejected account record: {e}")
        return accounts

    async def list_purchases(self, account_id: str) -> List[Dict[str, Any]]:
        """
        Raw purchase records for an account.

        Enterprise deployments do not all expose /purchases, so fall back to
        /transactions and then /withdrawals, keeping the first non-empty one.
        """
        if not self.enterprise:
            return to_array(await self._get(f"/accounts/{account_id}/purchases"))

        for collection in ("purchases", "transactions", "withdrawals"):
            try:
                records = to_array(await self._get(f"/enterprise/{collection}", {"account_id": account_id}))
            except BankAPIError as e:
                logger.info(f"Enterprise {collection} unavailable for {account_id}: {e}")
                continue
            if records:
                return records
        return []

    async def list_deposits(self, account_id: str) -> List[Dict[str, Any]]:
        """Raw deposit (income) records for an account"""
        if self.enterprise:
            return to_array(await self._get("/enterprise/deposits", {"account_id": account_id}))
        return to_array(await self._get(f"/accounts/{account_id}/deposits"))

    async def list_bills(self, customer_id: str) -> List[Dict[str, Any]]:
        """Raw bill records for a customer"""
        if self.enterprise:
            return to_array(await self._get("/enterprise/bills", {"customer_id": customer_id}))
        return to_array(await self._get(f"/customers/{customer_id}/bills"))
