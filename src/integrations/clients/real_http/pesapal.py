"""
Real Pesapal HTTP Client.

Used when gateway credentials are configured. Every public call acquires its
own bearer token; tokens are not cached between calls.
"""

from __future__ import annotations

import base64
import logging
import time
from typing import Any, Dict, Optional

import httpx

from src.integrations.contracts.interfaces import OrderRequest, OrderResponse, PaymentGatewayClient
from src.integrations.contracts.payments import (
    REGISTER_IPN_PATH,
    SUBMIT_ORDER_PATH,
    TOKEN_PATH,
    TRANSACTION_STATUS_PATH,
    build_ipn_payload,
    build_order_payload,
)
from src.integrations.gateway.response_wrappers import (
    IntegrationResponseError,
    normalize_ipn_response,
    normalize_order_response,
    normalize_token_response,
)
from src.utils.config_loader import PesapalConfig

logger = logging.getLogger(__name__)


def basic_auth_credential(consumer_key: str, consumer_secret: str) -> str:
    return base64.b64encode(f"{consumer_key}:{consumer_secret}".encode("utf-8")).decode("ascii")


def new_notification_id() -> str:
    return f"notify-{int(time.time() * 1000)}"


class PesapalClient(PaymentGatewayClient):
    def __init__(
        self,
        config: PesapalConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.config = config
        self.base_url = config.base_url
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        kwargs: Dict[str, Any] = {}
        if self.config.timeout_seconds is not None:
            kwargs["timeout"] = self.config.timeout_seconds
        if self._transport is not None:
            kwargs["transport"] = self._transport
        return httpx.AsyncClient(**kwargs)

    @staticmethod
    def _bearer_headers(token: str) -> Dict[str, str]:
        return {"Authorization": f"Bearer {token}", "Content-Type": "application/json"}

    async def request_token(self) -> str:
        credential = basic_auth_credential(self.config.consumer_key, self.config.consumer_secret)
        headers = {"Authorization": f"Basic {credential}", "Content-Type": "application/json"}
        url = f"{self.base_url}{TOKEN_PATH}"
        try:
            logger.info("Requesting gateway access token from %s", url)
            async with self._client() as client:
                response = await client.post(url, json={}, headers=headers)
                response.raise_for_status()
                data = response.json() if response.content else {}
            return normalize_token_response(data)
        except httpx.HTTPStatusError as e:
            logger.error("Error fetching access token: %s %s", e.response.status_code, e.response.text)
            raise
        except (httpx.RequestError, IntegrationResponseError) as e:
            logger.error("Error fetching access token: %s", e)
            raise

    async def register_ipn_url(self, token: Optional[str] = None) -> Dict[str, Any]:
        if not self.config.ipn_url:
            raise ValueError("PESAPAL_IPN_URL is not configured.")
        token = token or await self.request_token()
        url = f"{self.base_url}{REGISTER_IPN_PATH}"
        try:
            async with self._client() as client:
                response = await client.post(url, json=build_ipn_payload(self.config.ipn_url), headers=self._bearer_headers(token))
                response.raise_for_status()
                data = response.json() if response.content else {}
            registration = normalize_ipn_response(data)
            logger.info("Registered IPN URL %s (ipn_id=%s)", self.config.ipn_url, registration.ipn_id)
            return registration.raw
        except httpx.HTTPError as e:
            logger.error("Error registering IPN URL: %s", e)
            raise

    async def submit_order_request(self, order: OrderRequest) -> OrderResponse:
        token = await self.request_token()
        payload = build_order_payload(order, callback_url=self.config.callback_url, notification_id=new_notification_id())
        url = f"{self.base_url}{SUBMIT_ORDER_PATH}"
        try:
            logger.info("Submitting order %s to %s", order.id, url)
            logger.debug("Order payload: %s", {k: v for k, v in payload.items() if k != "billing_address"})
            async with self._client() as client:
                response = await client.post(url, json=payload, headers=self._bearer_headers(token))
                response.raise_for_status()
                data = response.json() if response.content else {}
            logger.info("Received order response: status=%s", response.status_code)
            return normalize_order_response(data)
        except httpx.HTTPStatusError as e:
            logger.error("Error submitting payment request: %s %s", e.response.status_code, e.response.text)
            raise
        except httpx.RequestError as e:
            logger.error("Error submitting payment request: %s", e)
            raise

    async def get_transaction_status(self, order_tracking_id: str) -> Dict[str, Any]:
        token = await self.request_token()
        url = f"{self.base_url}{TRANSACTION_STATUS_PATH}"
        async with self._client() as client:
            response = await client.get(
                url,
                params={"orderTrackingId": order_tracking_id},
                headers=self._bearer_headers(token),
            )
            response.raise_for_status()
            data = response.json() if response.content else {}
        if not isinstance(data, dict):
            raise IntegrationResponseError("Unexpected transaction status body.", payload={"body": data})
        return data
