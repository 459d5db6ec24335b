"""
Pytest fixtures for the settlement test suite.

Provides:
- Structured logging configured for the session, with per-test capture
- Default settings that never touch the environment
- Record factories for engine tests
"""

import json
import logging
from decimal import Decimal
from io import StringIO

import pytest

from settlement_config import parse_settings, reset_settings_cache
from settlement_kernel.domain.records import InvoiceRecord, PaymentRecord
from settlement_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture(autouse=True)
def _clear_settings_cache(monkeypatch):
    """Each test resolves settings from scratch, ignoring the caller's env."""
    monkeypatch.delenv("SETTLEMENT_CONFIG", raising=False)
    reset_settings_cache()
    yield
    reset_settings_cache()


@pytest.fixture
def captured_logs():
    """
    Capture settlement logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs):
            engine.allocate(invoices=..., payments=...)
            logs = captured_logs()
            assert any(r["message"] == "settlement_allocation_completed" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("settlement")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Settings and record factories
# =============================================================================


@pytest.fixture
def default_settings():
    """Schema defaults, independent of any settings file."""
    return parse_settings({})


def make_invoice(invoice_id, amount, due_date="20-01-2025", rate="0", **kwargs):
    return InvoiceRecord(
        invoice_id=invoice_id,
        amount=Decimal(amount),
        due_date=due_date,
        discount_rate=Decimal(rate),
        **kwargs,
    )


def make_payment(payment_id, amount, payment_date="10-01-2025", **kwargs):
    return PaymentRecord(
        payment_id=payment_id,
        amount=Decimal(amount),
        payment_date=payment_date,
        **kwargs,
    )


@pytest.fixture
def invoice():
    return make_invoice


@pytest.fixture
def payment():
    return make_payment
