"""Shared test fixtures."""

import os

import pytest

import adyen_payments
from adyen_payments.core.config import ApiConfig, Credentials


@pytest.fixture
def config():
    """A fully configured test-environment config."""
    return ApiConfig(
        credentials=Credentials("ws@Company.Test", "secret"),
        default_params={"merchant_account": "TestMerchant"},
    )


@pytest.fixture
def clean_environment(monkeypatch):
    """Hide any ADYEN_* variables of the machine running the tests."""
    for key in list(os.environ):
        if key.startswith("ADYEN_"):
            monkeypatch.delenv(key)


@pytest.fixture
def process_config():
    """Reset the process-wide configuration around a test."""
    adyen_payments.reset_config()
    yield
    adyen_payments.reset_config()
