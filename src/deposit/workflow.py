"""
Deposit workflow.

Two paths, picked by the selected payment method:
- M-Pesa: validate, record a PENDING transaction, then hand the order to the
  payment gateway and return its redirect link.
- Card / crypto: validate and record a COMPLETED transaction. No remote call.

A PENDING transaction written before a failed gateway call stays PENDING;
nothing here reconciles it afterwards.
"""

from __future__ import annotations

import logging
import random
import time
from typing import Optional, Union

from src.error_handler import GENERIC_GATEWAY_MESSAGE, GENERIC_PAYMENT_MESSAGE, ErrorHandler
from src.deposit.validation import format_amount, parse_amount, validate_phone_number
from src.integrations.contracts.interfaces import (
    BillingAddress,
    DepositResult,
    Notification,
    NotificationVariant,
    Notifier,
    OrderRequest,
    PaymentGatewayClient,
    PaymentMethod,
    Transaction,
    TransactionLedger,
    TransactionStatus,
    TransactionType,
)
from src.integrations.contracts.payments import DEFAULT_CURRENCY
from src.integrations.gateway.response_wrappers import PaymentGatewayError

logger = logging.getLogger(__name__)

TRANSACTION_PREFIX = "TX"
STATUS_PENDING = "PENDING"
STATUS_ERROR = "ERROR"

METHOD_DETAILS = {
    PaymentMethod.CARD: "Via Credit Card",
    PaymentMethod.CRYPTO: "Via Crypto Wallet",
}


def generate_transaction_reference() -> str:
    return f"{TRANSACTION_PREFIX}-{int(time.time() * 1000)}-{random.randrange(10000)}"


class DepositWorkflow:
    def __init__(
        self,
        gateway: Optional[PaymentGatewayClient],
        ledger: TransactionLedger,
        notifier: Notifier,
        account_label: str = "Vertex Trading Account",
        error_handler: Optional[ErrorHandler] = None,
    ) -> None:
        self.gateway = gateway
        self.ledger = ledger
        self.notifier = notifier
        self.account_label = account_label
        self.error_handler = error_handler or ErrorHandler()

    def _require_gateway(self) -> PaymentGatewayClient:
        if self.gateway is None:
            raise PaymentGatewayError("Payment gateway is not configured")
        return self.gateway

    def _notify(self, title: str, description: str, destructive: bool = False) -> None:
        variant = NotificationVariant.DESTRUCTIVE if destructive else NotificationVariant.DEFAULT
        self.notifier.notify(Notification(title=title, description=description, variant=variant))

    def _reject_amount(self) -> DepositResult:
        self._notify("Invalid Amount", "Please enter a valid deposit amount.", destructive=True)
        return DepositResult(error="Invalid amount", invalid_input=True)

    async def process_deposit(
        self,
        method: Union[PaymentMethod, str],
        amount: Union[str, float],
        phone_number: str = "",
        email: str = "",
    ) -> DepositResult:
        """Route a deposit to the path matching the selected method."""
        method = PaymentMethod(method)
        if method == PaymentMethod.MPESA:
            return await self.process_mpesa_payment(amount, phone_number, email)
        return self.process_other_payment(amount, method)

    async def process_mpesa_payment(self, amount: Union[str, float], phone_number: str, email: str = "") -> DepositResult:
        try:
            if parse_amount(amount) is None:
                return self._reject_amount()

            if not validate_phone_number(phone_number):
                self._notify(
                    "Invalid Phone Number",
                    "Please enter a valid M-Pesa phone number starting with 254.",
                    destructive=True,
                )
                return DepositResult(error="Invalid phone number", invalid_input=True)

            formatted_amount = format_amount(amount)
            reference = generate_transaction_reference()

            self.ledger.add_transaction(Transaction(
                amount=formatted_amount,
                type=TransactionType.DEPOSIT,
                status=TransactionStatus.PENDING,
                details=f"Via M-Pesa ({phone_number}) - Ref: {reference}",
            ))

            self._notify("Initializing Payment", "Connecting to Pesapal payment gateway...")

            order = OrderRequest(
                id=reference,
                amount=formatted_amount,
                currency=DEFAULT_CURRENCY,
                description=f"Deposit to {self.account_label} - ${formatted_amount:.2f}",
                billing_address=BillingAddress(phone_number=phone_number, email_address=email or ""),
            )
            response = await self._require_gateway().submit_order_request(order)

            if not response.redirect_url:
                raise PaymentGatewayError("Payment initialization failed")

            self._notify("Payment Gateway Ready", "You'll be redirected to complete your payment with M-Pesa.")
            logger.info("Order %s submitted, tracking id %s", reference, response.order_tracking_id)
            return DepositResult(
                redirect_url=response.redirect_url,
                order_tracking_id=response.order_tracking_id,
                transaction_reference=reference,
            )
        except Exception as exc:
            handled = self.error_handler.handle_exception(exc, context={"method": PaymentMethod.MPESA.value})
            self._notify("Payment Error", GENERIC_GATEWAY_MESSAGE, destructive=True)
            return DepositResult(error=handled["error"])

    def process_other_payment(self, amount: Union[str, float], payment_method: Union[PaymentMethod, str]) -> DepositResult:
        try:
            if parse_amount(amount) is None:
                return self._reject_amount()

            method = PaymentMethod(payment_method)
            if method not in METHOD_DETAILS:
                raise ValueError(f"{method.value} deposits must go through the payment gateway")

            formatted_amount = format_amount(amount)
            self.ledger.add_transaction(Transaction(
                amount=formatted_amount,
                type=TransactionType.DEPOSIT,
                status=TransactionStatus.COMPLETED,
                details=METHOD_DETAILS[method],
            ))

            self._notify(
                "Deposit Successful",
                f"Your deposit of ${formatted_amount:.2f} has been processed successfully.",
            )
            return DepositResult()
        except Exception as exc:
            handled = self.error_handler.handle_exception(exc, context={"method": str(payment_method)})
            self._notify("Payment Error", GENERIC_PAYMENT_MESSAGE, destructive=True)
            return DepositResult(error=handled["error"])

    async def check_payment_status(self, order_tracking_id: str) -> str:
        """
        Gateway status code for an order, "PENDING" when the gateway reports
        none yet, "ERROR" when the lookup fails for any reason.
        """
        try:
            data = await self._require_gateway().get_transaction_status(order_tracking_id)
        except Exception as exc:
            logger.error("Error checking payment status for %s: %s", order_tracking_id, exc)
            return STATUS_ERROR

        status_code = (data or {}).get("status_code")
        if status_code:
            return str(status_code)
        return STATUS_PENDING
