"""Pytest fixtures for the deposit workflow and gateway client tests."""

import pytest

from src.database.ledger import InMemoryTransactionLedger
from src.deposit.notifications import RecordingNotifier
from src.utils.config_loader import PesapalConfig


@pytest.fixture
def ledger():
    return InMemoryTransactionLedger()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def pesapal_config():
    return PesapalConfig(
        consumer_key="test-key",
        consumer_secret="test-secret",
        api_url="https://pesapal.test/api",
        callback_url="https://app.test/api/payments/callback",
        ipn_url="https://app.test/api/payments/ipn",
    )
