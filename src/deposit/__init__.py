"""
Deposit flow: method selection, input validation and the deposit workflow.
"""

from .method_selector import PaymentMethodSelector
from .notifications import LoggingNotifier, RecordingNotifier
from .validation import format_amount, parse_amount, validate_phone_number
from .workflow import DepositWorkflow, generate_transaction_reference

__all__ = [
    "DepositWorkflow",
    "LoggingNotifier",
    "PaymentMethodSelector",
    "RecordingNotifier",
    "format_amount",
    "generate_transaction_reference",
    "parse_amount",
    "validate_phone_number",
]
