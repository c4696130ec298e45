"""
Bank registry: MOCK data.

Fixed list of institutions shown in the "Find your bank" picker. Each entry
carries the failure mode the connection simulator uses for it:
- Partner Bank always fails with a simulated upstream 500
- Slow Savings Bank never answers and ends in a gateway timeout
- every other bank connects successfully
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional

from src.integrations.contracts.interfaces import Bank, FailMode

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Seed data
# ---------------------------------------------------------------------------

_MOCK_BANKS: List[Bank] = [
    Bank(id="partnerbank", name="Partner Bank", fail_mode=FailMode.SERVER_ERROR),
    Bank(id="chase", name="Chase"),
    Bank(id="wellsfargo", name="Wells Fargo"),
    Bank(id="bofa", name="Bank of America"),
    Bank(id="citi", name="Citi"),
    Bank(id="ally", name="Ally"),
    Bank(id="capitalone", name="Capital One"),
    Bank(id="truist", name="Truist"),
    Bank(id="santander", name="Santander"),
    Bank(id="slowbank", name="Slow Savings Bank", fail_mode=FailMode.TIMEOUT),
]


class BankRegistry:
    """Read-only lookup over a fixed bank list."""

    def __init__(self, banks: Optional[Iterable[Bank]] = None) -> None:
        self._banks: List[Bank] = list(_MOCK_BANKS if banks is None else banks)
        self._by_id: Dict[str, Bank] = {}
        for bank in self._banks:
            key = self._normalize(bank.id)
            if key in self._by_id:
                raise ValueError(f"Duplicate bank id '{bank.id}' in registry.")
            self._by_id[key] = bank

        logger.info("[BANK REGISTRY] Loaded %d banks", len(self._banks))

    @staticmethod
    def _normalize(bank_id: Optional[str]) -> str:
        return (bank_id or "").strip().lower()

    def list_banks(self) -> List[Bank]:
        return list(self._banks)

    def find_bank(self, bank_id: Optional[str]) -> Optional[Bank]:
        bank = self._by_id.get(self._normalize(bank_id))
        if bank is None:
            logger.warning("[BANK REGISTRY] Bank not found id=%s", bank_id)
        return bank


default_bank_registry = BankRegistry()
