"""
Integrations layer.
This package contains all code used to talk to (or stand in for) the bank
data-aggregation side of the pay-by-bank flow:
- Bank registry and connection simulator (mock backend)
- HTTP client used by the screen flow to reach the backend

Key rule:
- Flows MUST NOT call the backend directly.
- Flows should call integration clients (under src/integrations/clients).

Switching implementations:
- The wiring of simulator and event store happens in ONE place (src/api/main.py).
"""

from .contracts.interfaces import (
    Account,
    Balances,
    Bank,
    ConnectionEvent,
    ConnectionResult,
    ErrorKind,
    EventOutcome,
    EventStore,
    FailMode,
    IdentifierGenerator,
)

__all__ = [
    "Account", "Balances", "Bank", "ConnectionEvent", "ConnectionResult",
    "ErrorKind", "EventOutcome", "EventStore", "FailMode", "IdentifierGenerator",
]
