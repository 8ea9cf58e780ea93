"""
Pytest configuration and shared fixtures for the ACH codec test suite.
"""

import os
import sys
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Generator, List

import pytest

# Add src to Python path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from nacha_records import BatchConfig, Transaction, TransactionKind  # noqa: E402

ORIGINATOR_SETTINGS = {
    "company_name": "PAY IT FORWARD HS",
    "company_id": "1234567890",
    "destination_routing": "123456789",
    "destination_name": "DEST BANK NAME",
    "origin_id": "987654321",
    "origin_name": "PAY IT FORWARD HS",
    "originating_dfi_id": "12345678",
    "entry_description": "PAYMENT",
}


@pytest.fixture
def originator_settings() -> dict[str, str]:
    return dict(ORIGINATOR_SETTINGS)


@pytest.fixture
def batch_config() -> BatchConfig:
    """Config with a fixed creation timestamp so output is deterministic."""
    return BatchConfig(
        effective_date=date(2024, 1, 16),
        created_at=datetime(2024, 1, 15, 10, 0, 0),
        **ORIGINATOR_SETTINGS,
    )


@pytest.fixture
def sample_transactions() -> List[Transaction]:
    """Debit $10.00, credit $20.00, debit $5.50."""
    return [
        Transaction(
            id="txn-1",
            amount=Decimal("10.00"),
            kind=TransactionKind.DEBIT,
            routing_number="021000021",
            account_number_last4="1234",
            payee_id="M-001",
            payee_name="Jane Doe",
        ),
        Transaction(
            id="txn-2",
            amount=Decimal("20.00"),
            kind=TransactionKind.CREDIT,
            routing_number="011000015",
            account_number_last4="5678",
            payee_id="M-002",
            payee_name="John Smith",
        ),
        Transaction(
            id="txn-3",
            amount=Decimal("5.50"),
            kind=TransactionKind.DEBIT,
            routing_number="121000358",
            account_number_last4=None,
            payee_id="M-003",
            payee_name="Ana Lopez",
        ),
    ]


@pytest.fixture
def freeze_time() -> Generator[datetime, None, None]:
    """Freeze the clock for code that stamps files with the current time."""
    from freezegun import freeze_time as _freeze_time

    with _freeze_time("2024-01-15 10:00:00"):
        yield datetime(2024, 1, 15, 10, 0, 0)


def pytest_configure(config: Any) -> None:
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "unit: Fast unit tests with no external dependencies"
    )
    config.addinivalue_line(
        "markers", "financial: Tests involving amounts, totals or hashes"
    )


def pytest_collection_modifyitems(config: Any, items: List[Any]) -> None:
    """Automatically mark tests based on their location and name."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        name = item.name.lower()
        if "total" in name or "hash" in name or "amount" in name:
            item.add_marker(pytest.mark.financial)
