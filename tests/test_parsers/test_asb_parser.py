"""Tests for the ASB Bank statement parser."""
import pytest
from datetime import datetime, timezone

from spendtrack.config import get_bank_config_loader
from spendtrack.models import Direction
from spendtrack.parsers import ASBParser, determine_amount_and_type


ASB_PAGE = """ASB Bank
Streamline Account
Opening date 18 Nov 25 Closing date 17 Dec 25
Date Transaction Debit/Withdrawal Deposit Balance
18 Nov Opening Balance 1,280.16
19 Nov Card 1234 Christchurch Countdown Riccarton 45.60 1,234.56
20 Nov SaveTheChange 0.40 1,234.16
02 Dec Acme Ltd 01-Dec-2025 Salary/Wagespay Ended 0.00 2,500.00 3,734.16
05 Dec USD 20.00 At 0.5709* Cursor, Ai Powered Ide 35.03 3,699.13
"""


@pytest.fixture
def asb_config():
    return get_bank_config_loader().get_config("asb")


@pytest.fixture
def parser(asb_config, category_config, nz_region):
    return ASBParser(asb_config, category_config, nz_region)


class TestDetermineAmountAndType:
    """Test amount column interpretation."""

    def test_two_amounts_is_debit(self):
        """Test transaction plus balance is a debit."""
        assert determine_amount_and_type([45.60, 1234.56]) == (45.60, Direction.SPEND)

    def test_three_amounts_deposit(self):
        """Test a deposit with a zero debit is a credit."""
        assert determine_amount_and_type([0.0, 2500.0, 3734.16]) == (2500.0, Direction.CREDIT)

    def test_three_amounts_debit(self):
        """Test a non-zero debit wins over the deposit column."""
        assert determine_amount_and_type([12.0, 0.0, 100.0]) == (12.0, Direction.SPEND)

    def test_other_counts_rejected(self):
        """Test rows with one amount are rejected."""
        assert determine_amount_and_type([1280.16]) == (0.0, Direction.SPEND)
        assert determine_amount_and_type([]) == (0.0, Direction.SPEND)


class TestASBParser:
    """Test ASB statement parsing."""

    def test_parse_statement(self, parser):
        """Test balance and round-up rows are skipped."""
        transactions = parser.parse([ASB_PAGE])

        assert [t.title for t in transactions] == [
            "Countdown Riccarton",
            "Acme Ltd (Salary)",
            "Cursor, Ai Powered Ide",
        ]

    def test_card_purchase(self, parser):
        """Test a card purchase row."""
        purchase = parser.parse([ASB_PAGE])[0]

        assert purchase.amount == 45.60
        assert purchase.direction is Direction.SPEND
        assert purchase.timestamp == datetime(2025, 11, 19, tzinfo=timezone.utc)
        assert purchase.source == "ASB Bank"
        assert purchase.region == "NZ"
        assert purchase.currency == "NZD"

    def test_salary_is_credit(self, parser):
        """Test a deposit row is a credit."""
        salary = parser.parse([ASB_PAGE])[1]

        assert salary.direction is Direction.CREDIT
        assert salary.amount == 2500.0
        assert salary.timestamp == datetime(2025, 12, 2, tzinfo=timezone.utc)

    def test_foreign_currency_row_amount(self, parser):
        """Test the NZD amount is used for foreign currency rows."""
        fx = parser.parse([ASB_PAGE])[2]

        assert fx.amount == 35.03
        assert fx.timestamp == datetime(2025, 12, 5, tzinfo=timezone.utc)

    def test_categorization_deferred(self, parser):
        """Test rows keep the default category."""
        assert {t.category for t in parser.parse([ASB_PAGE])} == {"Other"}

    def test_rollover_without_closing_date(self, parser):
        """Test early-year rows follow a late-year opening date into the next year."""
        page = (
            "Opening date 18 Nov 25\n"
            "03 Jan Countdown Papanui 20.00 900.00\n"
        )
        transaction = parser.parse([page])[0]
        assert transaction.timestamp == datetime(2026, 1, 3, tzinfo=timezone.utc)

    def test_no_rollover_for_early_opening_month(self, parser):
        """Test the rollover only applies to openings from August."""
        page = (
            "Opening date 10 Mar 25\n"
            "03 Feb Countdown Papanui 20.00 900.00\n"
        )
        transaction = parser.parse([page])[0]
        assert transaction.timestamp == datetime(2025, 2, 3, tzinfo=timezone.utc)

    def test_rows_on_several_pages(self, parser):
        """Test pages are parsed in order."""
        second_page = "21 Dec Z Energy Hornby 80.00 3,619.13\n"
        transactions = parser.parse([ASB_PAGE, second_page])

        assert transactions[-1].title == "Z Energy Hornby"
        assert transactions[-1].timestamp == datetime(2025, 12, 21, tzinfo=timezone.utc)

    def test_detection(self, parser):
        """Test ASB markers."""
        assert parser.detect("asb_statement.pdf", "")
        assert parser.detect("statement.pdf", "ASB Bank")
        assert not parser.detect("statement.pdf", "Apple Card")
