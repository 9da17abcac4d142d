from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional, Protocol


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class PaymentMethod(str, Enum):
    CARD = "card"
    CRYPTO = "crypto"
    MPESA = "mpesa"


class TransactionType(str, Enum):
    DEPOSIT = "DEPOSIT"


class TransactionStatus(str, Enum):
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    ERROR = "ERROR"


class NotificationVariant(str, Enum):
    DEFAULT = "default"
    DESTRUCTIVE = "destructive"


# ---------------------------------------------------------------------------
# Shared data models
# ---------------------------------------------------------------------------

@dataclass
class Transaction:
    """A deposit as handed to the ledger; the ledger assigns id/timestamp."""
    amount: float
    type: TransactionType
    status: TransactionStatus
    details: str


@dataclass
class LedgerEntry:
    id: str
    amount: float
    type: TransactionType
    status: TransactionStatus
    details: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "amount": self.amount,
            "type": self.type.value,
            "status": self.status.value,
            "details": self.details,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass
class Notification:
    title: str
    description: str
    variant: NotificationVariant = NotificationVariant.DEFAULT

    def to_dict(self) -> Dict[str, str]:
        return {"title": self.title, "description": self.description, "variant": self.variant.value}


@dataclass
class BillingAddress:
    phone_number: str
    email_address: str = ""


@dataclass
class OrderRequest:
    id: str
    amount: float
    description: str
    billing_address: BillingAddress
    currency: str = "USD"


@dataclass
class OrderResponse:
    order_tracking_id: Optional[str]
    redirect_url: Optional[str]
    merchant_reference: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict)


@dataclass
class DepositResult:
    """Outcome of a deposit attempt. Either `error` is set or the deposit went through."""
    redirect_url: Optional[str] = None
    order_tracking_id: Optional[str] = None
    transaction_reference: Optional[str] = None
    error: Optional[str] = None
    invalid_input: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> Dict[str, Any]:
        if self.error is not None:
            return {"error": self.error}
        out: Dict[str, Any] = {}
        if self.redirect_url is not None:
            out["redirectUrl"] = self.redirect_url
            out["orderTrackingId"] = self.order_tracking_id
        if self.transaction_reference is not None:
            out["transactionReference"] = self.transaction_reference
        return out


# ---------------------------------------------------------------------------
# Collaborator interfaces
# ---------------------------------------------------------------------------

class TransactionLedger(Protocol):
    def add_transaction(self, transaction: Transaction) -> Any:
        ...


class Notifier(Protocol):
    def notify(self, notification: Notification) -> None:
        ...


class PaymentGatewayClient(ABC):
    """Every payment gateway client (real or mock) must implement this interface."""

    @abstractmethod
    async def request_token(self) -> str:
        """Exchange the consumer credentials for a bearer token."""

    @abstractmethod
    async def register_ipn_url(self, token: Optional[str] = None) -> Dict[str, Any]:
        """Register the configured IPN URL with the gateway."""

    @abstractmethod
    async def submit_order_request(self, order: OrderRequest) -> OrderResponse:
        """Submit an order; the response carries the redirect link."""

    @abstractmethod
    async def get_transaction_status(self, order_tracking_id: str) -> Dict[str, Any]:
        """Fetch the raw status payload for a previously submitted order."""
