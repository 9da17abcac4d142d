"""
Integrations layer.
This package contains all code used to communicate with external systems:
- the Pesapal payment gateway (token, order submission, status, IPN)

Key rule:
- The deposit workflow MUST NOT call external APIs directly.
- It calls a gateway client (under src/integrations/clients).
- We use the MOCK client during development and swap to the REAL_HTTP client
  when credentials are available.
"""

from .contracts.interfaces import (
    BillingAddress,
    DepositResult,
    LedgerEntry,
    Notification,
    NotificationVariant,
    Notifier,
    OrderRequest,
    OrderResponse,
    PaymentGatewayClient,
    PaymentMethod,
    Transaction,
    TransactionLedger,
    TransactionStatus,
    TransactionType,
)
from .gateway.response_wrappers import IntegrationResponseError, PaymentGatewayError

__all__ = [
    # interfaces
    "BillingAddress", "DepositResult", "LedgerEntry", "Notification",
    "NotificationVariant", "Notifier", "OrderRequest", "OrderResponse",
    "PaymentGatewayClient", "PaymentMethod", "Transaction", "TransactionLedger",
    "TransactionStatus", "TransactionType",
    # errors
    "IntegrationResponseError", "PaymentGatewayError",
]
