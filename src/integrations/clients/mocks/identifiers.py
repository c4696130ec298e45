"""Seedable generator for session ids, account ids and masked numbers."""

from __future__ import annotations

import random
import uuid
from typing import Optional

from src.integrations.contracts.interfaces import Balances, IdentifierGenerator


class RandomIdentifierGenerator(IdentifierGenerator):
    """
    Identifier generator backed by ``random.Random``.

    Pass a ``seed`` to get a reproducible sequence (tests); leave it out for
    fresh values on every process start.
    """

    def __init__(self, seed: Optional[int] = None) -> None:
        self._rng = random.Random(seed)

    def _hex(self, length: int) -> str:
        return uuid.UUID(int=self._rng.getrandbits(128), version=4).hex[:length]

    def session_id(self) -> str:
        return f"sess-{self._hex(16)}"

    def account_id(self) -> str:
        return f"acct-{self._hex(12)}"

    def masked_number(self) -> str:
        last_four = "".join(str(self._rng.randint(0, 9)) for _ in range(4))
        return f"****{last_four}"

    def balances(self) -> Balances:
        current = round(self._rng.uniform(500.0, 25_000.0), 2)
        # Available never exceeds current.
        available = round(current - self._rng.uniform(0.0, min(current, 250.0)), 2)
        return Balances(available=available, current=current)
