"""Pytest configuration and fixtures."""
import pytest
from datetime import datetime, timezone

from spendtrack.config import CategoryConfig, get_bank_config_loader, get_region_config
from spendtrack.config.settings import DATA_DIR
from spendtrack.ledger import TransactionLedger
from spendtrack.models import Direction, Transaction


def utc(year, month, day):
    """Midnight UTC on the given day."""
    return datetime(year, month, day, tzinfo=timezone.utc)


def make_transaction(
    title="Whole Foods Market",
    amount=45.0,
    day=utc(2025, 1, 15),
    direction=Direction.SPEND,
    category="Food & Dining",
    source="Unknown",
    transaction_id=None
):
    """Build a transaction the way a parser would emit it."""
    return Transaction(
        id=transaction_id or f"{title.replace(' ', '')}-{day:%Y%m%d}-1",
        timestamp=day,
        amount=amount,
        title=title,
        category=category,
        source=source,
        direction=direction,
    )


@pytest.fixture
def make_tx():
    """Factory for test transactions."""
    return make_transaction


@pytest.fixture(scope="session")
def bank_loader():
    """Bundled issuer configurations."""
    return get_bank_config_loader()


@pytest.fixture(scope="session")
def category_config():
    """Bundled category keywords and merchant mappings."""
    return CategoryConfig.from_file(DATA_DIR / "categories.yaml")


@pytest.fixture(scope="session")
def nz_region():
    """New Zealand locale rules."""
    return get_region_config("NZ")


@pytest.fixture
def sample_transactions():
    """A small month of spending with one refund."""
    return [
        make_transaction("Whole Foods Market", 45.0, utc(2025, 1, 15)),
        make_transaction("Joe's Pizza", 25.5, utc(2025, 1, 20)),
        make_transaction("Shell Oil", 40.0, utc(2025, 1, 31), category="Transportation"),
        make_transaction(
            "Target", 20.0, utc(2025, 1, 22),
            direction=Direction.CREDIT, category="Shopping"
        ),
        make_transaction("Netflix", 15.49, utc(2025, 2, 1), category="Subscriptions"),
    ]


@pytest.fixture
def ledger(sample_transactions):
    """Ledger pre-loaded with the sample transactions."""
    ledger = TransactionLedger()
    ledger.add_transactions(sample_transactions)
    return ledger


@pytest.fixture
def whole_foods_csv():
    """Minimal CSV export with a single purchase."""
    return "Date,Amount,Description\n2025-01-15,45.00,Whole Foods Market #123\n"
