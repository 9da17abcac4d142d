"""
Payment contracts.

Wire-level request/response shapes for the Pesapal REST API:
- token exchange
- IPN registration
- order submission
- transaction status

These contracts must be used by both:
- clients/mocks/pesapal.py (fake responses for development/testing)
- clients/real_http/pesapal.py (real API calls)
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from .interfaces import OrderRequest

# Paths are relative to the configured API URL.
TOKEN_PATH = "/api/Auth/RequestToken"
REGISTER_IPN_PATH = "/api/URLSetup/RegisterIPN"
SUBMIT_ORDER_PATH = "/api/Transactions/SubmitOrderRequest"
TRANSACTION_STATUS_PATH = "/api/Transactions/GetTransactionStatus"

DEFAULT_CURRENCY = "USD"
IPN_NOTIFICATION_TYPE = "GET"


class TokenResponseModel(BaseModel):
    access_token: str
    expiry_date: Optional[str] = None


class IPNRegistrationResponseModel(BaseModel):
    ipn_id: Optional[str] = None
    url: Optional[str] = None
    raw: Dict[str, Any] = Field(default_factory=dict)


class SubmitOrderResponseModel(BaseModel):
    order_tracking_id: Optional[str] = None
    merchant_reference: Optional[str] = None
    redirect_url: Optional[str] = None
    raw: Dict[str, Any] = Field(default_factory=dict)


def build_order_payload(order: OrderRequest, *, callback_url: str, notification_id: str) -> Dict[str, Any]:
    """Request body for SubmitOrderRequest."""
    return {
        "id": order.id,
        "currency": order.currency,
        "amount": order.amount,
        "description": order.description,
        "callback_url": callback_url,
        "notification_id": notification_id,
        "billing_address": {
            "phone_number": order.billing_address.phone_number,
            "email_address": order.billing_address.email_address or "",
        },
    }


def build_ipn_payload(ipn_url: str) -> Dict[str, str]:
    return {"url": ipn_url, "ipn_notification_type": IPN_NOTIFICATION_TYPE}
