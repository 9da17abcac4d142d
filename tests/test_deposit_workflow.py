import re
from typing import Any, Dict, List, Optional

import httpx
import pytest

from src.deposit.workflow import DepositWorkflow, generate_transaction_reference
from src.integrations.contracts.interfaces import (
    NotificationVariant,
    OrderRequest,
    OrderResponse,
    PaymentGatewayClient,
    PaymentMethod,
    TransactionStatus,
    TransactionType,
)
from src.integrations.gateway.response_wrappers import PaymentGatewayError


class FakeGateway(PaymentGatewayClient):
    """Gateway double that records calls and can be told to fail."""

    def __init__(
        self,
        ledger=None,
        response: Optional[OrderResponse] = None,
        submit_error: Optional[Exception] = None,
        token_error: Optional[Exception] = None,
        status_payload: Optional[Dict[str, Any]] = None,
        status_error: Optional[Exception] = None,
    ):
        self.ledger = ledger
        self.response = response or OrderResponse(
            order_tracking_id="track-123",
            redirect_url="https://pay.example/redirect/track-123",
        )
        self.submit_error = submit_error
        self.token_error = token_error
        self.status_payload = status_payload if status_payload is not None else {}
        self.status_error = status_error

        self.orders: List[OrderRequest] = []
        self.ledger_size_at_submit: List[int] = []
        self.token_calls = 0
        self.status_calls: List[str] = []

    async def request_token(self) -> str:
        self.token_calls += 1
        if self.token_error is not None:
            raise self.token_error
        return "token"

    async def register_ipn_url(self, token: Optional[str] = None) -> Dict[str, Any]:
        return {"ipn_id": "ipn-1"}

    async def submit_order_request(self, order: OrderRequest) -> OrderResponse:
        if self.ledger is not None:
            self.ledger_size_at_submit.append(len(self.ledger))
        await self.request_token()
        self.orders.append(order)
        if self.submit_error is not None:
            raise self.submit_error
        return self.response

    async def get_transaction_status(self, order_tracking_id: str) -> Dict[str, Any]:
        self.status_calls.append(order_tracking_id)
        if self.status_error is not None:
            raise self.status_error
        return self.status_payload


def _workflow(gateway, ledger, notifier):
    return DepositWorkflow(gateway, ledger, notifier, account_label="Test Account")


def test_transaction_reference_format():
    ref = generate_transaction_reference()
    match = re.fullmatch(r"TX-(\d+)-(\d+)", ref)
    assert match
    assert 0 <= int(match.group(2)) < 10000


@pytest.mark.asyncio
async def test_mpesa_success_records_pending_before_submission(ledger, notifier):
    gateway = FakeGateway(ledger=ledger)
    wf = _workflow(gateway, ledger, notifier)

    result = await wf.process_mpesa_payment("150.456", "+254712345678", "jane@example.com")

    assert result.ok
    assert result.redirect_url == "https://pay.example/redirect/track-123"
    assert result.order_tracking_id == "track-123"
    assert result.to_dict()["redirectUrl"] == result.redirect_url
    assert result.to_dict()["orderTrackingId"] == "track-123"

    entries = ledger.list_transactions()
    assert len(entries) == 1
    assert entries[0].status == TransactionStatus.PENDING
    assert entries[0].type == TransactionType.DEPOSIT
    assert entries[0].amount == 150.46
    assert entries[0].details == f"Via M-Pesa (+254712345678) - Ref: {result.transaction_reference}"
    # the ledger already held the PENDING entry when the gateway was called
    assert gateway.ledger_size_at_submit == [1]


@pytest.mark.asyncio
async def test_mpesa_order_payload(ledger, notifier):
    gateway = FakeGateway(ledger=ledger)
    wf = _workflow(gateway, ledger, notifier)

    result = await wf.process_mpesa_payment("20", "254712345678", "")

    order = gateway.orders[0]
    assert order.id == result.transaction_reference
    assert order.currency == "USD"
    assert order.amount == 20.0
    assert order.description == "Deposit to Test Account - $20.00"
    assert order.billing_address.phone_number == "254712345678"
    assert order.billing_address.email_address == ""


@pytest.mark.asyncio
async def test_mpesa_success_notifications(ledger, notifier):
    wf = _workflow(FakeGateway(ledger=ledger), ledger, notifier)

    await wf.process_mpesa_payment("20", "254712345678")

    assert [m.title for m in notifier.messages] == ["Initializing Payment", "Payment Gateway Ready"]
    assert all(m.variant == NotificationVariant.DEFAULT for m in notifier.messages)


@pytest.mark.asyncio
@pytest.mark.parametrize("amount", ["0", "-10", "abc", ""])
async def test_mpesa_invalid_amount_aborts_before_ledger_and_gateway(ledger, notifier, amount):
    gateway = FakeGateway(ledger=ledger)
    wf = _workflow(gateway, ledger, notifier)

    result = await wf.process_mpesa_payment(amount, "254712345678")

    assert result.to_dict() == {"error": "Invalid amount"}
    assert result.invalid_input
    assert len(ledger) == 0
    assert gateway.orders == [] and gateway.token_calls == 0
    assert notifier.messages[0].title == "Invalid Amount"
    assert notifier.messages[0].variant == NotificationVariant.DESTRUCTIVE


@pytest.mark.asyncio
async def test_mpesa_invalid_phone_aborts(ledger, notifier):
    gateway = FakeGateway(ledger=ledger)
    wf = _workflow(gateway, ledger, notifier)

    result = await wf.process_mpesa_payment("100", "0712345678")

    assert result.error == "Invalid phone number"
    assert len(ledger) == 0
    assert gateway.orders == []
    assert notifier.messages[-1].title == "Invalid Phone Number"


@pytest.mark.asyncio
async def test_mpesa_token_failure_leaves_pending_transaction(ledger, notifier):
    gateway = FakeGateway(ledger=ledger, token_error=httpx.ConnectError("connection refused"))
    wf = _workflow(gateway, ledger, notifier)

    result = await wf.process_mpesa_payment("100", "254712345678")

    assert not result.ok
    assert result.error == "connection refused"
    assert result.redirect_url is None
    entries = ledger.list_transactions()
    assert len(entries) == 1
    assert entries[0].status == TransactionStatus.PENDING
    assert notifier.messages[-1].title == "Payment Error"
    assert notifier.messages[-1].variant == NotificationVariant.DESTRUCTIVE


@pytest.mark.asyncio
async def test_mpesa_submission_failure_leaves_pending_transaction(ledger, notifier):
    gateway = FakeGateway(ledger=ledger, submit_error=PaymentGatewayError("gateway down"))
    wf = _workflow(gateway, ledger, notifier)

    result = await wf.process_mpesa_payment("100", "254712345678")

    assert result.to_dict() == {"error": "gateway down"}
    assert [e.status for e in ledger.list_transactions()] == [TransactionStatus.PENDING]


@pytest.mark.asyncio
async def test_mpesa_missing_redirect_is_a_failure(ledger, notifier):
    gateway = FakeGateway(ledger=ledger, response=OrderResponse(order_tracking_id="t-1", redirect_url=None))
    wf = _workflow(gateway, ledger, notifier)

    result = await wf.process_mpesa_payment("100", "254712345678")

    assert result.error == "Payment initialization failed"
    assert result.redirect_url is None
    assert len(ledger) == 1


@pytest.mark.asyncio
async def test_double_submission_creates_two_entries(ledger, notifier):
    gateway = FakeGateway(ledger=ledger)
    wf = _workflow(gateway, ledger, notifier)

    first = await wf.process_mpesa_payment("10", "254712345678")
    second = await wf.process_mpesa_payment("10", "254712345678")

    assert first.ok and second.ok
    assert len(ledger) == 2
    assert len(gateway.orders) == 2


@pytest.mark.parametrize("method, details", [(PaymentMethod.CARD, "Via Credit Card"), ("crypto", "Via Crypto Wallet")])
def test_other_payment_records_completed_without_gateway(ledger, notifier, method, details):
    gateway = FakeGateway(ledger=ledger)
    wf = _workflow(gateway, ledger, notifier)

    result = wf.process_other_payment("49.999", method)

    assert result.ok
    entries = ledger.list_transactions()
    assert len(entries) == 1
    assert entries[0].status == TransactionStatus.COMPLETED
    assert entries[0].amount == 50.0
    assert entries[0].details == details
    assert gateway.token_calls == 0 and gateway.orders == []
    assert notifier.messages[-1].title == "Deposit Successful"
    assert notifier.messages[-1].description == "Your deposit of $50.00 has been processed successfully."


@pytest.mark.parametrize("amount", ["0", "-1", "twenty"])
def test_other_payment_invalid_amount(ledger, notifier, amount):
    wf = _workflow(FakeGateway(), ledger, notifier)

    result = wf.process_other_payment(amount, PaymentMethod.CARD)

    assert result.error == "Invalid amount"
    assert len(ledger) == 0


def test_other_payment_rejects_mpesa_generically(ledger, notifier):
    wf = _workflow(FakeGateway(), ledger, notifier)

    result = wf.process_other_payment("10", PaymentMethod.MPESA)

    assert not result.ok
    assert not result.invalid_input
    assert len(ledger) == 0
    assert notifier.messages[-1].title == "Payment Error"


def test_other_payment_ledger_failure_is_reported(notifier):
    class BrokenLedger:
        def add_transaction(self, transaction):
            raise RuntimeError("ledger unavailable")

    wf = _workflow(FakeGateway(), BrokenLedger(), notifier)

    result = wf.process_other_payment("10", PaymentMethod.CRYPTO)

    assert result.error == "ledger unavailable"
    assert notifier.messages[-1].description == "There was an error processing your payment. Please try again."


@pytest.mark.asyncio
async def test_process_deposit_dispatches_by_method(ledger, notifier):
    gateway = FakeGateway(ledger=ledger)
    wf = _workflow(gateway, ledger, notifier)

    mpesa = await wf.process_deposit("mpesa", "10", phone_number="254712345678")
    card = await wf.process_deposit(PaymentMethod.CARD, "10")

    assert mpesa.redirect_url is not None
    assert card.ok and card.redirect_url is None
    assert [e.status for e in ledger.list_transactions()] == [TransactionStatus.COMPLETED, TransactionStatus.PENDING]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload, expected",
    [
        ({"status_code": "1"}, "1"),
        ({"status_code": 2}, "2"),
        ({}, "PENDING"),
        ({"status_code": None}, "PENDING"),
    ],
)
async def test_check_payment_status(ledger, notifier, payload, expected):
    gateway = FakeGateway(status_payload=payload)
    wf = _workflow(gateway, ledger, notifier)

    assert await wf.check_payment_status("track-9") == expected
    assert gateway.status_calls == ["track-9"]


@pytest.mark.asyncio
async def test_check_payment_status_collapses_errors(ledger, notifier):
    gateway = FakeGateway(status_error=httpx.ReadTimeout("timed out"))
    wf = _workflow(gateway, ledger, notifier)

    assert await wf.check_payment_status("track-9") == "ERROR"
    assert notifier.messages == []


@pytest.mark.asyncio
async def test_workflow_without_gateway(ledger, notifier):
    wf = _workflow(None, ledger, notifier)

    assert await wf.check_payment_status("track-1") == "ERROR"
    assert wf.process_other_payment("15", PaymentMethod.CRYPTO).ok
    assert [e.status for e in ledger.list_transactions()] == [TransactionStatus.COMPLETED]
