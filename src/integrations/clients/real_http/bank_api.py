"""
Quantum Pay backend HTTP client.

Used by the pay-by-bank screen flow to reach the mock backend.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import httpx

logger = logging.getLogger(__name__)


@dataclass
class ApiResponse:
    status_code: int
    data: Dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


class BankApiClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
        timeout_seconds: float = 20.0,
    ) -> None:
        self.base_url = (base_url or os.getenv("QUANTUM_PAY_API_URL", "http://localhost:8080")).rstrip("/")
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(base_url=self.base_url, timeout=timeout_seconds)

    async def list_banks(self) -> List[Dict[str, Any]]:
        response = await self._client.get("/api/banks")
        response.raise_for_status()
        return list(_json(response).get("banks") or [])

    async def connect(self, bank_id: str) -> ApiResponse:
        """Post a connection attempt; non-2xx statuses are returned, not raised."""
        response = await self._client.post("/api/connect", json={"bankId": bank_id})
        logger.info("POST /api/connect bank=%s → %s", bank_id, response.status_code)
        return ApiResponse(status_code=response.status_code, data=_json(response))

    async def recent_events(self, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        params = {"limit": limit} if limit is not None else None
        response = await self._client.get("/api/events/recent", params=params)
        response.raise_for_status()
        return list(_json(response).get("events") or [])

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()


def _json(response: httpx.Response) -> Dict[str, Any]:
    if not response.content:
        return {}
    try:
        data = response.json()
    except ValueError:
        logger.warning("Non-JSON response from %s (status %s)", response.url, response.status_code)
        return {}
    return data if isinstance(data, dict) else {}
