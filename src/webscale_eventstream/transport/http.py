"""
HTTP clients for the clickstream collector.

One POST per event, no retry. Timeouts: 1s to connect, 5s overall.
Both clients enforce the overall limit as a deadline: the async one around
the whole request, the sync one by shrinking each phase timeout to the
budget left and checking the deadline between body chunks.
"""

import asyncio
import json
import time
from typing import Any, Optional

import httpx
from pydantic import BaseModel

from webscale_eventstream.errors import DeliveryError

DEFAULT_TIMEOUT = 5.0
DEFAULT_CONNECT_TIMEOUT = 1.0
APP_ID_HEADER = "Webscale-App-Id"
USER_AGENT = "webscale-eventstream/0.1.0"


class CollectorResponse(BaseModel):
    status_code: int
    body: str = ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


def _headers(app_id: str) -> dict[str, str]:
    return {"Content-Type": "application/json", APP_ID_HEADER: app_id}


def _encode(payload: Any) -> str:
    return json.dumps(payload, separators=(",", ":"))


class CollectorClient:
    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        connect_timeout: float = DEFAULT_CONNECT_TIMEOUT,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self._timeout = timeout
        self._connect_timeout = connect_timeout
        self._client = httpx.Client(
            headers={"User-Agent": USER_AGENT},
            timeout=httpx.Timeout(timeout, connect=connect_timeout),
            transport=transport,
        )

    def _remaining(self, deadline: float, endpoint: str) -> float:
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            raise DeliveryError(f"POST {endpoint} exceeded {self._timeout}s", details={"endpoint": endpoint})
        return remaining

    def post(self, endpoint: str, payload: Any, app_id: str = "") -> CollectorResponse:
        deadline = time.monotonic() + self._timeout
        content = _encode(payload)
        # each phase gets at most what is left of the overall budget,
        # the body is read chunk by chunk against the same deadline
        remaining = self._remaining(deadline, endpoint)
        timeout = httpx.Timeout(remaining, connect=min(self._connect_timeout, remaining))
        try:
            with self._client.stream(
                "POST", endpoint, content=content, headers=_headers(app_id), timeout=timeout,
            ) as resp:
                chunks = []
                for chunk in resp.iter_bytes():
                    chunks.append(chunk)
                    self._remaining(deadline, endpoint)
                body = b"".join(chunks).decode(resp.encoding or "utf-8", errors="replace")
        except httpx.RequestError as e:
            raise DeliveryError(f"POST {endpoint} failed: {e!r}", details={"endpoint": endpoint}) from e
        return CollectorResponse(status_code=resp.status_code, body=body)

    def close(self) -> None:
        self._client.close()


class AsyncCollectorClient:
    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        connect_timeout: float = DEFAULT_CONNECT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._timeout = timeout
        self._client = httpx.AsyncClient(
            headers={"User-Agent": USER_AGENT},
            timeout=httpx.Timeout(timeout, connect=connect_timeout),
            transport=transport,
        )

    async def post(self, endpoint: str, payload: Any, app_id: str = "") -> CollectorResponse:
        content = _encode(payload)
        try:
            resp = await asyncio.wait_for(
                self._client.post(endpoint, content=content, headers=_headers(app_id)),
                timeout=self._timeout,
            )
        except asyncio.TimeoutError as e:
            raise DeliveryError(
                f"POST {endpoint} exceeded {self._timeout}s", details={"endpoint": endpoint},
            ) from e
        except httpx.RequestError as e:
            raise DeliveryError(f"POST {endpoint} failed: {e!r}", details={"endpoint": endpoint}) from e
        return CollectorResponse(status_code=resp.status_code, body=resp.text)

    async def close(self) -> None:
        await self._client.aclose()
