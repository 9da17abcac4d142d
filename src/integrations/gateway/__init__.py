"""
Gateway response handling: error types and normalisation of raw Pesapal bodies.
"""

from .response_wrappers import IntegrationResponseError, PaymentGatewayError

__all__ = ["IntegrationResponseError", "PaymentGatewayError"]
