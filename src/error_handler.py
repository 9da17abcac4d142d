"""Error handling helpers for the deposit workflow."""
from typing import Any, Dict
import logging

logger = logging.getLogger(__name__)

GENERIC_GATEWAY_MESSAGE = "There was an error connecting to the payment gateway. Please try again."
GENERIC_PAYMENT_MESSAGE = "There was an error processing your payment. Please try again."


class ErrorHandler:
    def handle_exception(self, exc: Exception, context: Dict[str, Any] = None) -> Dict[str, Any]:
        logger.error("Error processing payment: %s", exc, exc_info=True)
        return {
            "error": str(exc) or exc.__class__.__name__,
            "metadata": {"exception": exc.__class__.__name__, "context": context or {}},
        }
