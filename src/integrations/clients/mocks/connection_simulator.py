"""
Bank connection simulator: MOCK client.

Simulates linking a bank account through a data-aggregation provider without
any network calls. The outcome is fixed per bank by its ``FailMode``:

- NONE          -> 200 with a freshly generated synthetic account
- SERVER_ERROR  -> 500 immediately (``upstream_500``)
- TIMEOUT       -> 504 after an artificial delay (``timeout``)

An unknown bank id answers 400 (``bank_not_found``) without delay.

Every attempt writes an "attempt" event followed by exactly one terminal
event, both tagged with the same session id.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Awaitable, Callable, Dict, Optional

from src.integrations.contracts.interfaces import (
    Account,
    Bank,
    ConnectionEvent,
    ConnectionResult,
    ErrorKind,
    EventOutcome,
    EventStore,
    FailMode,
    IdentifierGenerator,
)
from src.integrations.contracts.bank_connect import error_body

from .bank_registry import BankRegistry, default_bank_registry
from .identifiers import RandomIdentifierGenerator

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_DELAY_SECONDS = 10.0

_Handler = Callable[[Bank, str, float], Awaitable[ConnectionResult]]


class ConnectionSimulator:
    """
    Mock bank connection client.

    Parameters
    ----------
    event_store : EventStore
        Where attempt/terminal events are recorded.
    registry : BankRegistry
        Bank lookup. Defaults to the fixed demo registry.
    identifiers : IdentifierGenerator
        Source of session ids and synthetic account values.
    timeout_delay_seconds : float
        How long the TIMEOUT path waits before answering 504. Default 10s.
    """

    def __init__(
        self,
        event_store: EventStore,
        registry: Optional[BankRegistry] = None,
        identifiers: Optional[IdentifierGenerator] = None,
        timeout_delay_seconds: float = DEFAULT_TIMEOUT_DELAY_SECONDS,
    ) -> None:
        self.event_store = event_store
        self.registry = registry or default_bank_registry
        self.identifiers = identifiers or RandomIdentifierGenerator()
        self.timeout_delay_seconds = timeout_delay_seconds

        self._handlers: Dict[FailMode, _Handler] = {
            FailMode.NONE: self._succeed,
            FailMode.SERVER_ERROR: self._fail_upstream,
            FailMode.TIMEOUT: self._time_out,
        }

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def attempt_connection(self, bank_id: Optional[str]) -> ConnectionResult:
        session_id = self.identifiers.session_id()
        started = time.monotonic()
        bank_key = (bank_id or "").strip()

        await self._record(ConnectionEvent(session_id=session_id, bank_id=bank_key, outcome=EventOutcome.ATTEMPT))
        logger.info("[CONNECT MOCK] Attempt session=%s bank=%s", session_id, bank_key)

        bank = self.registry.find_bank(bank_key)
        if bank is None:
            return await self._error(
                session_id,
                bank_key,
                started,
                status_code=400,
                kind=ErrorKind.BANK_NOT_FOUND,
                message=f"Unknown bank '{bank_key}'.",
            )

        handler = self._handlers[bank.fail_mode]
        return await handler(bank, session_id, started)

    # ------------------------------------------------------------------
    # Outcome handlers
    # ------------------------------------------------------------------

    async def _succeed(self, bank: Bank, session_id: str, started: float) -> ConnectionResult:
        account = Account(
            account_id=self.identifiers.account_id(),
            institution=bank.name,
            mask=self.identifiers.masked_number(),
            balances=self.identifiers.balances(),
        )
        await self._record(
            ConnectionEvent(
                session_id=session_id,
                bank_id=bank.id,
                outcome=EventOutcome.SUCCESS,
                detail={
                    "account_id": account.account_id,
                    "institution": account.institution,
                    "mask": account.mask,
                    "duration_ms": _elapsed_ms(started),
                },
            )
        )
        logger.info("[CONNECT MOCK] Session %s → connected account=%s", session_id, account.account_id)
        return ConnectionResult(
            status_code=200,
            body={"success": True, "account": account.to_payload()},
            session_id=session_id,
        )

    async def _fail_upstream(self, bank: Bank, session_id: str, started: float) -> ConnectionResult:
        return await self._error(
            session_id,
            bank.id,
            started,
            status_code=500,
            kind=ErrorKind.UPSTREAM_500,
            message=f"{bank.name} connection failed. Please contact your administrator.",
        )

    async def _time_out(self, bank: Bank, session_id: str, started: float) -> ConnectionResult:
        logger.info(
            "[CONNECT MOCK] Session %s waiting %.1fs to simulate a gateway timeout",
            session_id,
            self.timeout_delay_seconds,
        )
        try:
            await asyncio.sleep(self.timeout_delay_seconds)
        except asyncio.CancelledError:
            # Caller went away mid-wait; the session still gets its terminal event.
            await self._error(
                session_id,
                bank.id,
                started,
                status_code=504,
                kind=ErrorKind.TIMEOUT,
                message=f"{bank.name} request was cancelled before a response.",
            )
            raise
        return await self._error(
            session_id,
            bank.id,
            started,
            status_code=504,
            kind=ErrorKind.TIMEOUT,
            message=f"{bank.name} did not respond in time.",
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _error(
        self,
        session_id: str,
        bank_id: str,
        started: float,
        *,
        status_code: int,
        kind: ErrorKind,
        message: str,
    ) -> ConnectionResult:
        await self._record(
            ConnectionEvent(
                session_id=session_id,
                bank_id=bank_id,
                outcome=EventOutcome.ERROR,
                detail={
                    "error": kind.value,
                    "message": message,
                    "status_code": status_code,
                    "duration_ms": _elapsed_ms(started),
                },
            )
        )
        logger.warning("[CONNECT MOCK] Session %s → %s (%s)", session_id, kind.value, status_code)
        return ConnectionResult(
            status_code=status_code,
            body=error_body(kind, message),
            session_id=session_id,
        )

    async def _record(self, event: ConnectionEvent) -> None:
        try:
            # Store writes may touch disk; keep them off the event loop.
            await asyncio.to_thread(self.event_store.record, event)
        except Exception:
            logger.exception(
                "Failed to record %s event for session %s",
                event.outcome.value,
                event.session_id,
            )


def _elapsed_ms(started: float) -> int:
    return int(round((time.monotonic() - started) * 1000))
