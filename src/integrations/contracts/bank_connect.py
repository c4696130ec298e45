"""
Bank connection contracts.

Defines the request/response shapes of the pay-by-bank API, e.g.:
- listing the banks shown in the picker
- attempting a connection to one of them
- reading back the recent event feed

These contracts are used by both:
- src/api/endpoints/bank_connect.py (the mock backend routes)
- clients/real_http/bank_api.py (the client driving the screen flow)
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .interfaces import ErrorKind


class ConnectRequest(BaseModel):
    """Body of ``POST /api/connect``."""

    model_config = ConfigDict(populate_by_name=True)

    bank_id: Optional[str] = Field(default=None, alias="bankId")


class BankSummary(BaseModel):
    id: str
    name: str


class BankListResponse(BaseModel):
    banks: List[BankSummary] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    """Body returned with every non-2xx status."""

    error: str
    message: str


class RecentEventsResponse(BaseModel):
    events: List[Dict[str, Any]] = Field(default_factory=list)


def error_body(kind: ErrorKind, message: str) -> Dict[str, str]:
    return ErrorResponse(error=kind.value, message=message).model_dump()


__all__ = [
    "BankListResponse",
    "BankSummary",
    "ConnectRequest",
    "ErrorKind",
    "ErrorResponse",
    "RecentEventsResponse",
    "error_body",
]
