"""HTTP Ledger Client — LedgerService over httpx with retry, backoff, and error mapping.

Invariants:
    - get_balance only: rate limits (429) and transient errors (5xx, connect,
      timeout) retried with exponential backoff, at most max_retries extra attempts
    - add/subtract are sent exactly once: a lost response may hide an applied
      mutation, so any failure surfaces as LedgerError for reconciliation
    - Client errors (4xx except 429): immediate failure, no retry
    - Non-JSON bodies or a missing/non-integer "balance": LedgerError, never retried
    - All failures mapped to LedgerError (core/errors.py)

Design Decisions:
    - Wrapper over raw httpx.AsyncClient: isolates retry policy from the engine
    - ±25% jitter on backoff: prevents thundering herd on a shared ledger
    - Retry-After header honored on 429 (capped at max_delay_ms)
    - Identity is path-quoted: names are user input
"""

import asyncio
import logging
import random
from urllib.parse import quote

import httpx

from tagshop.core.domain_types import Identity
from tagshop.core.errors import LedgerError, ErrorContext

logger = logging.getLogger(__name__)

_RETRYABLE_STATUS = frozenset({429, 500, 502, 503, 504})


class HttpLedgerClient:
    """Talks to the external balance ledger over HTTP."""

    def __init__(
        self,
        base_url: str,
        api_key: str | None = None,
        max_retries: int = 3,
        base_delay_ms: int = 200,
        max_delay_ms: int = 5_000,
        timeout_seconds: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        headers = {"Authorization": f"Bearer {api_key}"} if api_key else {}
        self.client = httpx.AsyncClient(
            base_url=base_url,
            headers=headers,
            timeout=timeout_seconds,
            transport=transport,
        )
        self.max_retries = max_retries
        self.base_delay_ms = base_delay_ms
        self.max_delay_ms = max_delay_ms

    async def get_balance(self, identity: Identity) -> int:
        data = await self._request("GET", self._path(identity), "get_balance", identity)
        balance = data.get("balance") if isinstance(data, dict) else None
        if isinstance(balance, bool) or not isinstance(balance, int):
            raise LedgerError(
                f"unexpected response shape: {data!r}", "get_balance",
                context=ErrorContext(identity=identity),
            )
        return balance

    async def add(self, identity: Identity, amount: int) -> None:
        await self._request(
            "POST", self._path(identity, "add"), "add", identity,
            json={"amount": amount}, retry=False,
        )

    async def subtract(self, identity: Identity, amount: int) -> None:
        await self._request(
            "POST", self._path(identity, "subtract"), "subtract", identity,
            json={"amount": amount}, retry=False,
        )

    async def aclose(self) -> None:
        await self.client.aclose()

    def _path(self, identity: Identity, action: str | None = None) -> str:
        path = f"/balances/{quote(identity, safe='')}"
        return f"{path}/{action}" if action else path

    async def _request(
        self,
        method: str,
        path: str,
        operation: str,
        identity: Identity,
        json: dict | None = None,
        retry: bool = True,
    ):
        ctx = ErrorContext(identity=identity, operation=operation)
        max_retries = self.max_retries if retry else 0
        for attempt in range(max_retries + 1):
            try:
                response = await self.client.request(method, path, json=json)
            except (httpx.TimeoutException, httpx.TransportError) as e:
                if attempt >= max_retries:
                    raise LedgerError(str(e) or type(e).__name__, operation, context=ctx)
                await self._backoff(operation, attempt, e)
                continue

            if response.status_code in _RETRYABLE_STATUS:
                if attempt >= max_retries:
                    raise LedgerError(
                        f"HTTP {response.status_code}", operation,
                        response.status_code, ctx,
                    )
                await self._backoff(
                    operation, attempt, f"HTTP {response.status_code}",
                    retry_after=response.headers.get("retry-after"),
                )
                continue

            if response.is_error:
                raise LedgerError(
                    f"HTTP {response.status_code}", operation,
                    response.status_code, ctx,
                )
            if not response.content:
                return {}
            try:
                return response.json()
            except ValueError:
                raise LedgerError("response is not JSON", operation, context=ctx)

    async def _backoff(
        self, operation: str, attempt: int, reason, retry_after: str | None = None,
    ) -> None:
        delay_ms = self._compute_delay_ms(attempt, retry_after)
        logger.warning(
            f"Ledger {operation} retry in {delay_ms}ms: {reason}",
            extra={"operation": operation, "attempt": attempt + 1},
        )
        await asyncio.sleep(delay_ms / 1000)

    def _compute_delay_ms(self, attempt: int, retry_after: str | None = None) -> int:
        if retry_after:
            try:
                return min(int(float(retry_after) * 1000), self.max_delay_ms)
            except ValueError:
                pass
        delay = min(self.base_delay_ms * (2 ** attempt), self.max_delay_ms)
        jitter = delay * 0.25 * (2 * random.random() - 1)
        return max(0, int(delay + jitter))
