from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import ValidationError

from src.integrations.contracts.interfaces import OrderResponse
from src.integrations.contracts.payments import (
    IPNRegistrationResponseModel,
    SubmitOrderResponseModel,
    TokenResponseModel,
)


class PaymentGatewayError(Exception):
    """Base class for failures talking to the payment gateway."""


class IntegrationResponseError(PaymentGatewayError, ValueError):
    def __init__(self, message: str, *, payload: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.payload = payload or {}


def normalize_token_response(raw: Any) -> str:
    data = _as_dict(raw)
    token = _first_non_empty(data, "access_token", "token")
    model = _build_model(
        TokenResponseModel,
        {"access_token": str(token), "expiry_date": _first_non_empty(data, "expiry_date", "expiryDate", default="") or None},
        data,
    )
    return model.access_token


def normalize_ipn_response(raw: Any) -> IPNRegistrationResponseModel:
    data = _as_dict(raw)
    return _build_model(
        IPNRegistrationResponseModel,
        {
            "ipn_id": _optional_str(data, "ipn_id", "ipnId"),
            "url": _optional_str(data, "url"),
            "raw": data,
        },
        data,
    )


def normalize_order_response(raw: Any) -> OrderResponse:
    """
    Map a SubmitOrderRequest body onto OrderResponse.

    A missing redirect_url is not an error here; the workflow decides what
    an order without a redirect means.
    """
    data = _as_dict(raw)
    model = _build_model(
        SubmitOrderResponseModel,
        {
            "order_tracking_id": _optional_str(data, "order_tracking_id", "orderTrackingId"),
            "merchant_reference": _optional_str(data, "merchant_reference", "merchantReference"),
            "redirect_url": _optional_str(data, "redirect_url", "redirectUrl"),
            "raw": data,
        },
        data,
    )
    return OrderResponse(
        order_tracking_id=model.order_tracking_id,
        redirect_url=model.redirect_url,
        merchant_reference=model.merchant_reference,
        raw=model.raw,
    )


def _as_dict(raw: Any) -> Dict[str, Any]:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise IntegrationResponseError(f"Expected a JSON object from gateway, got {type(raw).__name__}.")
    return raw


def _optional_str(data: Dict[str, Any], *keys: str) -> Optional[str]:
    value = _first_non_empty(data, *keys, default="")
    return str(value) if value != "" else None


def _first_non_empty(data: Dict[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        value = data.get(key)
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        return value
    if default is not None:
        return default
    raise IntegrationResponseError(f"Missing required field. Checked keys: {', '.join(keys)}", payload=data)


def _build_model(model_type, payload: Dict[str, Any], raw: Dict[str, Any]):
    try:
        return model_type(**payload)
    except ValidationError as exc:
        raise IntegrationResponseError(f"Response validation failed: {exc}", payload=raw) from exc
