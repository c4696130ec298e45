from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class FailMode(str, Enum):
    NONE = "NONE"
    SERVER_ERROR = "SERVER_ERROR"
    TIMEOUT = "TIMEOUT"


class EventOutcome(str, Enum):
    ATTEMPT = "attempt"
    SUCCESS = "success"
    ERROR = "error"


class ErrorKind(str, Enum):
    BANK_NOT_FOUND = "bank_not_found"
    UPSTREAM_500 = "upstream_500"
    TIMEOUT = "timeout"
    SERVER_ERROR = "server_error"
    INVALID_REQUEST = "invalid_request"


# ---------------------------------------------------------------------------
# Shared data models
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Bank:
    id: str
    name: str
    fail_mode: FailMode = FailMode.NONE

    def summary(self) -> Dict[str, str]:
        """Public shape returned by the bank listing (failure mode stays internal)."""
        return {"id": self.id, "name": self.name}


@dataclass
class Balances:
    available: float
    current: float


@dataclass
class Account:
    account_id: str
    institution: str
    mask: str
    balances: Balances

    def to_payload(self) -> Dict[str, Any]:
        return {
            "accountId": self.account_id,
            "institution": self.institution,
            "mask": self.mask,
            "balances": asdict(self.balances),
        }


@dataclass
class ConnectionEvent:
    session_id: str
    bank_id: str
    outcome: EventOutcome
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    detail: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "session_id": self.session_id,
            "bank_id": self.bank_id,
            "timestamp": self.timestamp,
            "outcome": self.outcome.value,
            "detail": self.detail,
        }


@dataclass
class ConnectionResult:
    status_code: int
    body: Dict[str, Any]
    session_id: str

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


# ---------------------------------------------------------------------------
# Abstract interfaces
# ---------------------------------------------------------------------------

class EventStore(ABC):
    """Every event log backend must implement this interface."""

    @property
    @abstractmethod
    def kind(self) -> str:
        """Short name of the storage strategy ("file" or "memory")."""

    @abstractmethod
    def record(self, event: ConnectionEvent) -> None:
        """Append one event to the log."""

    @abstractmethod
    def recent(self, limit: int) -> List[Dict[str, Any]]:
        """Return at most ``limit`` events, most recent first."""


class IdentifierGenerator(ABC):
    """Source of random identifiers and synthetic account values."""

    @abstractmethod
    def session_id(self) -> str:
        """Opaque token correlating the events of one connection attempt."""

    @abstractmethod
    def account_id(self) -> str:
        """Synthetic account identifier."""

    @abstractmethod
    def masked_number(self) -> str:
        """Account number with everything but the last four digits hidden."""

    @abstractmethod
    def balances(self) -> Balances:
        """Synthetic available/current balances."""
