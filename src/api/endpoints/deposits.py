import logging
import os
from functools import lru_cache
from typing import Any, Dict, Optional, Union

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from src.database.ledger import InMemoryTransactionLedger
from src.deposit.method_selector import PaymentMethodSelector
from src.deposit.notifications import RecordingNotifier
from src.deposit.workflow import DepositWorkflow
from src.integrations.clients.mocks.pesapal import MockPesapalClient
from src.integrations.clients.real_http.pesapal import PesapalClient
from src.integrations.contracts.interfaces import DepositResult, PaymentGatewayClient, PaymentMethod, TransactionStatus
from src.utils.config_loader import ConfigError, PesapalConfig, load_pesapal_config

logger = logging.getLogger(__name__)

api = APIRouter()
deposits_api = api

DEFAULT_ACCOUNT_LABEL = "Vertex Trading Account"
GATEWAY_NOT_CONFIGURED = "Payment gateway is not configured"

_ledger = InMemoryTransactionLedger()
_mock_gateway = MockPesapalClient()


class MpesaDepositRequest(BaseModel):
    amount: Union[str, float] = Field(..., description="Deposit amount as typed by the user")
    phone_number: str = Field(..., description="M-Pesa number, must start with 254")
    email: str = ""


class OtherDepositRequest(BaseModel):
    amount: Union[str, float] = Field(..., description="Deposit amount as typed by the user")


def _should_use_real_integrations() -> bool:
    mode = os.getenv("INTEGRATIONS_MODE", "").strip().lower()
    if mode in {"real", "live"}:
        return True
    if mode in {"mock", "test"}:
        return False
    return bool(os.getenv("PESAPAL_CONSUMER_KEY") and os.getenv("PESAPAL_CONSUMER_SECRET"))


@lru_cache(maxsize=1)
def get_pesapal_config() -> Optional[PesapalConfig]:
    """Gateway settings, read once per process. None when they are missing or invalid."""
    try:
        return load_pesapal_config()
    except ConfigError as e:
        logger.warning(f"Pesapal gateway is not configured: {e}")
        return None


def get_gateway_client(config: Optional[PesapalConfig] = Depends(get_pesapal_config)) -> Optional[PaymentGatewayClient]:
    """Mock client in mock mode, a real client in real mode, None when real mode has no settings."""
    if not _should_use_real_integrations():
        return _mock_gateway
    if config is None:
        return None
    return PesapalClient(config)


def get_ledger() -> InMemoryTransactionLedger:
    return _ledger


def _account_label(config: Optional[PesapalConfig]) -> str:
    return config.account_label if config else DEFAULT_ACCOUNT_LABEL


def _respond(result: DepositResult, notifier: RecordingNotifier, failure_status: int) -> JSONResponse:
    body: Dict[str, Any] = {**result.to_dict(), "notifications": notifier.to_list()}
    if result.ok:
        return JSONResponse(status_code=200, content=body)
    return JSONResponse(status_code=422 if result.invalid_input else failure_status, content=body)


@api.get("/methods", tags=["Deposits"])
async def list_methods(selected: Optional[str] = None, disabled: bool = False):
    selector = PaymentMethodSelector(payment_method=selected, on_change=lambda method: None, disabled=disabled)
    return selector.render()


@api.post("/mpesa", tags=["Deposits"])
async def deposit_mpesa(
    request: MpesaDepositRequest,
    gateway: Optional[PaymentGatewayClient] = Depends(get_gateway_client),
    ledger: InMemoryTransactionLedger = Depends(get_ledger),
    config: Optional[PesapalConfig] = Depends(get_pesapal_config),
):
    if gateway is None:
        return JSONResponse(status_code=503, content={"error": GATEWAY_NOT_CONFIGURED, "notifications": []})

    notifier = RecordingNotifier()
    workflow = DepositWorkflow(gateway, ledger, notifier, account_label=_account_label(config))
    result = await workflow.process_mpesa_payment(request.amount, request.phone_number, request.email)
    return _respond(result, notifier, failure_status=502)


@api.get("/status/{order_tracking_id}", tags=["Deposits"])
async def payment_status(
    order_tracking_id: str,
    gateway: Optional[PaymentGatewayClient] = Depends(get_gateway_client),
    ledger: InMemoryTransactionLedger = Depends(get_ledger),
):
    # A missing gateway surfaces as "ERROR" like any other failed lookup
    workflow = DepositWorkflow(gateway, ledger, RecordingNotifier())
    status = await workflow.check_payment_status(order_tracking_id)
    return {"order_tracking_id": order_tracking_id, "status": status}


@api.get("/transactions", tags=["Deposits"])
async def list_transactions(
    status: Optional[str] = Query(default=None, description="PENDING, COMPLETED or ERROR"),
    ledger: InMemoryTransactionLedger = Depends(get_ledger),
):
    try:
        wanted = TransactionStatus(status.upper()) if status else None
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid status '{status}'.")
    return {"transactions": [e.to_dict() for e in ledger.list_transactions(wanted)]}


@api.post("/{method}", tags=["Deposits"])
async def deposit_other(
    method: str,
    request: OtherDepositRequest,
    ledger: InMemoryTransactionLedger = Depends(get_ledger),
):
    try:
        payment_method = PaymentMethod(method.strip().lower())
    except ValueError:
        raise HTTPException(status_code=404, detail=f"Unknown payment method '{method}'.")
    if payment_method == PaymentMethod.MPESA:
        raise HTTPException(status_code=400, detail="Use /mpesa for M-Pesa deposits.")

    # Card and crypto deposits settle locally; no gateway is involved
    notifier = RecordingNotifier()
    workflow = DepositWorkflow(None, ledger, notifier)
    result = workflow.process_other_payment(request.amount, payment_method)
    return _respond(result, notifier, failure_status=500)
