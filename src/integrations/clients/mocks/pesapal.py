"""
Pesapal - MOCK client.

⚠️  This is a mock implementation for development and testing.
    It makes no network calls. Orders are kept in memory and every submitted
    order gets a fake redirect link and tracking id. Failure scenarios are
    configurable via the MockPesapalClient constructor.
"""

import logging
import uuid
from typing import Any, Dict, Optional

from src.integrations.contracts.interfaces import OrderRequest, OrderResponse, PaymentGatewayClient
from src.integrations.gateway.response_wrappers import PaymentGatewayError

logger = logging.getLogger(__name__)

MOCK_REDIRECT_BASE = "https://cybqa.pesapal.com/pesapaliframe/PesapalIframe3/Index"


class MockPesapalClient(PaymentGatewayClient):
    """
    Mock Pesapal client.

    Parameters
    ----------
    fail_token : bool
        If True, token acquisition raises. Default False.
    omit_redirect : bool
        If True, submitted orders come back without a redirect_url. Default False.
    status_code : str or None
        Status code reported for every known order. Default "1" (completed).
    """

    def __init__(
        self,
        fail_token: bool = False,
        omit_redirect: bool = False,
        status_code: Optional[str] = "1",
    ):
        self._fail_token = fail_token
        self._omit_redirect = omit_redirect
        self._status_code = status_code

        # In-memory stores (reset on restart)
        self.orders: Dict[str, OrderRequest] = {}
        self.token_requests = 0

        logger.info("[PESAPAL MOCK] Client initialised")

    async def request_token(self) -> str:
        self.token_requests += 1
        if self._fail_token:
            raise PaymentGatewayError("[PESAPAL MOCK] Token request rejected.")
        return f"mock-token-{uuid.uuid4().hex[:16]}"

    async def register_ipn_url(self, token: Optional[str] = None) -> Dict[str, Any]:
        token = token or await self.request_token()
        ipn_id = str(uuid.uuid4())
        logger.info("[PESAPAL MOCK] IPN registered ipn_id=%s", ipn_id)
        return {"ipn_id": ipn_id, "status": "200"}

    async def submit_order_request(self, order: OrderRequest) -> OrderResponse:
        await self.request_token()
        tracking_id = str(uuid.uuid4())
        self.orders[tracking_id] = order
        logger.info("[PESAPAL MOCK] Order %s accepted amount=%s %s tracking=%s",
                    order.id, order.amount, order.currency, tracking_id)

        redirect_url = None if self._omit_redirect else f"{MOCK_REDIRECT_BASE}?OrderTrackingId={tracking_id}"
        raw = {"order_tracking_id": tracking_id, "merchant_reference": order.id, "redirect_url": redirect_url}
        return OrderResponse(
            order_tracking_id=tracking_id,
            redirect_url=redirect_url,
            merchant_reference=order.id,
            raw=raw,
        )

    async def get_transaction_status(self, order_tracking_id: str) -> Dict[str, Any]:
        await self.request_token()
        order = self.orders.get(order_tracking_id)
        if order is None:
            # Unknown tracking id: no status code, callers treat it as pending
            return {"order_tracking_id": order_tracking_id, "payment_status_description": "INVALID"}

        return {
            "order_tracking_id": order_tracking_id,
            "merchant_reference": order.id,
            "amount": order.amount,
            "currency": order.currency,
            "status_code": self._status_code,
        }
