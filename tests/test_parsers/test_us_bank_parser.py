"""Tests for the U.S. Bank statement parser."""
import pytest
from datetime import date, datetime, timezone

from spendtrack.config import get_bank_config_loader
from spendtrack.models import Direction
from spendtrack.parsers import USBankParser


US_BANK_PAGE = """U.S. Bank
Altitude Go Visa Signature
Statement Period: 12 / 15 / 20 24 - 01 / 14 / 20 25
Transactions
Post Date Trans Date Ref # Transaction Description Amount
12 / 18   12 / 17   2443   STARBUCKS STORE 12345 SEATTLE WA   $5.75
12 / 20   12 / 20   MTC   PAYMENT THANK YOU   $524.77
12 / 22   12 / 21   7731   ZELLE TO JANE DOE   $40.00
01 / 03   01 / 02   8812   TOTAL WINE & MORE 123   $45.10
"""


@pytest.fixture
def parser(category_config):
    config = get_bank_config_loader().get_config("us_bank")
    return USBankParser(config, category_config)


class TestUSBankParser:
    """Test U.S. Bank row parsing."""

    def test_parse_statement(self, parser):
        """Test payments and transfers are dropped."""
        transactions = parser.parse([US_BANK_PAGE])

        assert [t.title for t in transactions] == [
            "Starbucks Store 12345 Seattle Wa",
            "Total Wine & More 123",
        ]
        assert all(t.direction is Direction.SPEND for t in transactions)

    def test_year_from_statement_period(self, parser):
        """Test rows on either side of the new year get the right year."""
        transactions = parser.parse([US_BANK_PAGE])

        assert transactions[0].timestamp == datetime(2024, 12, 17, tzinfo=timezone.utc)
        assert transactions[1].timestamp == datetime(2025, 1, 2, tzinfo=timezone.utc)

    def test_row_values(self, parser):
        """Test amount, category and issuer label."""
        starbucks = parser.parse([US_BANK_PAGE])[0]

        assert starbucks.amount == 5.75
        assert starbucks.category == "Food & Dining"
        assert starbucks.source == "US Bank"

    def test_extract_statement_period(self):
        """Test a period with split years."""
        start, end = USBankParser.extract_statement_period("09 / 26 / 20 25 - 10 / 25 / 20 25")
        assert start == date(2025, 9, 26)
        assert end == date(2025, 10, 25)

    def test_missing_statement_period(self):
        """Test the calendar-year fallback."""
        year = datetime.now(timezone.utc).year
        start, end = USBankParser.extract_statement_period("no period here")
        assert start == date(year, 1, 1)
        assert end == date(year, 12, 31)

    def test_invalid_statement_period(self):
        """Test an impossible period falls back to the calendar year."""
        start, _ = USBankParser.extract_statement_period("13 / 45 / 20 25 - 14 / 50 / 20 25")
        assert start == date(datetime.now(timezone.utc).year, 1, 1)
