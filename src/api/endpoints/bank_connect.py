import asyncio
from typing import Optional

from fastapi import APIRouter, Query, Request
from fastapi.responses import JSONResponse

from src.integrations.clients.mocks.connection_simulator import ConnectionSimulator
from src.integrations.contracts.bank_connect import (
    BankListResponse,
    BankSummary,
    ConnectRequest,
    RecentEventsResponse,
)
from src.integrations.contracts.interfaces import EventStore
from src.utils.config_loader import AppConfig

api = APIRouter()
bank_connect_api = api


def _simulator(request: Request) -> ConnectionSimulator:
    return request.app.state.simulator


def _event_store(request: Request) -> EventStore:
    return request.app.state.event_store


def _config(request: Request) -> AppConfig:
    return request.app.state.config


@api.get("/banks", tags=["Banks"], response_model=BankListResponse)
async def list_banks(request: Request):
    banks = _simulator(request).registry.list_banks()
    return BankListResponse(banks=[BankSummary(**bank.summary()) for bank in banks])


@api.post("/connect", tags=["Banks"])
async def connect_bank(body: ConnectRequest, request: Request):
    """
    Simulate linking the selected bank.

    Example payload:
    {
        "bankId": "chase"
    }

    Status mirrors the simulated outcome: 200, 400 (unknown bank),
    500 (upstream failure) or 504 (timeout).
    """
    result = await _simulator(request).attempt_connection(body.bank_id)
    return JSONResponse(status_code=result.status_code, content=result.body)


@api.get("/events/recent", tags=["Events"], response_model=RecentEventsResponse)
async def recent_events(
    request: Request,
    limit: Optional[int] = Query(default=None, ge=1, le=1000),
):
    effective_limit = limit if limit is not None else _config(request).default_recent_limit
    events = await asyncio.to_thread(_event_store(request).recent, effective_limit)
    return RecentEventsResponse(events=events)
