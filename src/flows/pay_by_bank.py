"""
Pay-by-bank screen flow.

Four linear screens, advanced only by user actions:

    BILL --pay_by_bank()--> INTRO --next()--> FIND_BANK --select_bank()--> SHARE_DATA

Entering FIND_BANK loads the bank list once. Entering SHARE_DATA loads the
event feed immediately and then polls it every ``poll_interval_seconds``
until the flow is closed (SHARE_DATA is the last screen).
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

import httpx

from src.integrations.clients.real_http.bank_api import BankApiClient

logger = logging.getLogger(__name__)

POLL_INTERVAL_SECONDS = 5.0


class Screen(str, Enum):
    BILL = "bill"
    INTRO = "intro"
    FIND_BANK = "find_bank"
    SHARE_DATA = "share_data"


class FlowTransitionError(Exception):
    """Raised when an action is not valid on the current screen."""


@dataclass
class Banner:
    type: str  # "success" | "error"
    text: str


class PayByBankFlow:
    STEPS = [Screen.BILL, Screen.INTRO, Screen.FIND_BANK, Screen.SHARE_DATA]

    def __init__(self, api: BankApiClient, poll_interval_seconds: float = POLL_INTERVAL_SECONDS) -> None:
        self.api = api
        self.poll_interval_seconds = poll_interval_seconds

        self.screen: Screen = Screen.BILL
        self.banks: List[Dict[str, Any]] = []
        self.selected_bank: Optional[Dict[str, Any]] = None
        self.loading: bool = False
        self.banner: Optional[Banner] = None
        self.events: List[Dict[str, Any]] = []

        self._poll_task: Optional[asyncio.Task] = None

    @property
    def polling(self) -> bool:
        return self._poll_task is not None and not self._poll_task.done()

    # ------------------------------------------------------------------
    # User actions
    # ------------------------------------------------------------------

    async def pay_by_bank(self) -> None:
        await self._advance(Screen.BILL, Screen.INTRO)

    async def next(self) -> None:
        await self._advance(Screen.INTRO, Screen.FIND_BANK)

    async def select_bank(self, bank: Dict[str, Any]) -> None:
        self._require(Screen.FIND_BANK)
        self.selected_bank = bank
        await self._advance(Screen.FIND_BANK, Screen.SHARE_DATA)

    async def connect(self) -> Optional[Banner]:
        """Attempt the connection for the selected bank and set the result banner."""
        self._require(Screen.SHARE_DATA)
        if not self.selected_bank:
            return None

        self.loading = True
        self.banner = None
        try:
            result = await self.api.connect(self.selected_bank["id"])
            if not result.ok:
                self.banner = Banner("error", result.data.get("message") or "Connection failed")
            else:
                account = result.data.get("account") or {}
                self.banner = Banner(
                    "success",
                    f"Connected: {account.get('institution', '')} {account.get('mask', '')}".strip(),
                )
        except httpx.HTTPError as exc:
            self.banner = Banner("error", str(exc) or "Connection failed")
        finally:
            self.loading = False
        return self.banner

    async def close(self) -> None:
        await self._stop_polling()

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def _require(self, screen: Screen) -> None:
        if self.screen is not screen:
            raise FlowTransitionError(f"Action not available on screen '{self.screen.value}'")

    async def _advance(self, current: Screen, target: Screen) -> None:
        self._require(current)
        self.screen = target
        logger.info("Screen %s → %s", current.value, target.value)

        if target is Screen.FIND_BANK:
            await self._load_banks()
        elif target is Screen.SHARE_DATA:
            await self.refresh_events()
            self._poll_task = asyncio.create_task(self._poll_events())

    # ------------------------------------------------------------------
    # Fetches
    # ------------------------------------------------------------------

    async def _load_banks(self) -> None:
        if self.banks:
            return
        try:
            self.banks = await self.api.list_banks()
        except httpx.HTTPError as exc:
            logger.warning("Bank list fetch failed: %s", exc)
            self.banks = []

    async def refresh_events(self) -> None:
        try:
            self.events = await self.api.recent_events()
        except httpx.HTTPError as exc:
            logger.warning("Event feed fetch failed: %s", exc)
            self.events = []

    async def _poll_events(self) -> None:
        while True:
            await asyncio.sleep(self.poll_interval_seconds)
            await self.refresh_events()

    async def _stop_polling(self) -> None:
        task, self._poll_task = self._poll_task, None
        if task is None or task.done():
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
