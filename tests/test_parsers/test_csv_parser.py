"""Tests for the CSV export parser."""
import pytest
from datetime import datetime, timezone

from spendtrack.models import Direction
from spendtrack.parsers import CSVStatementParser, MissingColumnsError, StatementParseError
from spendtrack.parsers.csv_parser import AMOUNT_COLUMNS, find_column


@pytest.fixture
def parser(bank_loader, category_config):
    return CSVStatementParser(bank_loader, category_config)


class TestCSVStatementParser:
    """Test CSV parsing."""

    def test_parse_single_purchase(self, parser, whole_foods_csv):
        """Test a generic export end to end."""
        result = parser.parse_text(whole_foods_csv)

        assert result.transaction_count == 1
        transaction = result.transactions[0]
        assert transaction.title == "Whole Foods Market"
        assert transaction.category == "Food & Dining"
        assert transaction.amount == 45.0
        assert transaction.timestamp == datetime(2025, 1, 15, tzinfo=timezone.utc)
        assert transaction.direction is Direction.SPEND
        assert transaction.source == "Unknown"
        assert result.source == "Unknown"

    def test_header_synonyms(self, parser):
        """Test alternative column names are recognised, case-insensitively."""
        text = "Transaction Date,DEBIT,Payee\n01/20/2025,$12.50,Blue Bottle Coffee\n"
        transaction = parser.parse_text(text).transactions[0]

        assert transaction.title == "Blue Bottle Coffee"
        assert transaction.amount == 12.5
        assert transaction.timestamp == datetime(2025, 1, 20, tzinfo=timezone.utc)

    def test_quoted_amount_with_thousands(self, parser):
        """Test quoted amounts containing commas."""
        text = 'Date,Amount,Description\n2025-03-01,"$1,234.56",Best Buy\n'
        transaction = parser.parse_text(text).transactions[0]

        assert transaction.amount == 1234.56
        assert transaction.category == "Shopping"

    def test_missing_columns(self, parser):
        """Test the missing-column message lists the headers found."""
        with pytest.raises(MissingColumnsError) as exc_info:
            parser.parse_text("Foo,Bar\n1,2\n")

        assert str(exc_info.value) == (
            "Could not identify required columns. Found: Foo, Bar. "
            "Need date, amount, and title/description columns."
        )

    @pytest.mark.parametrize("text", ["", "   \n", "Date,Amount,Description\n"])
    def test_empty_file(self, parser, text):
        """Test empty files and header-only files."""
        with pytest.raises(StatementParseError, match="Empty CSV file"):
            parser.parse_text(text)

    def test_rows_filtered(self, parser):
        """Test transfers, zero amounts and blank descriptions are dropped."""
        text = (
            "Date,Amount,Description\n"
            "2025-01-10,50.00,Zelle to John\n"
            "2025-01-11,0.00,Free Sample\n"
            "2025-01-12,5.00,\n"
            "2025-01-13,abc,Broken Row\n"
            "2025-01-14,8.00,Joe's Pizza\n"
        )
        result = parser.parse_text(text)

        assert [t.title for t in result.transactions] == ["Joe's Pizza"]
        assert result.stats.amount_fallbacks == 1

    def test_chase_sign_convention(self, parser):
        """Test Chase exports list charges as negative amounts."""
        text = (
            "Transaction Date,Description,Amount\n"
            "01/15/2025,STARBUCKS,-5.75\n"
            "01/16/2025,TARGET REFUND,10.00\n"
        )
        result = parser.parse_text(text, "chase_jan.csv")

        assert result.source == "Chase"
        assert [t.direction for t in result.transactions] == [Direction.SPEND, Direction.CREDIT]
        assert result.transactions[0].amount == 5.75

    def test_amex_sign_convention(self, parser):
        """Test Amex exports list credits as negative amounts."""
        text = (
            "Date,Description,Amount\n"
            "01/15/2025,BLUE BOTTLE COFFEE,6.50\n"
            "01/16/2025,TARGET,-25.00\n"
        )
        result = parser.parse_text(text, "amex_activity.csv")

        assert result.source == "American Express"
        assert result.currency == "USD"
        assert [t.direction for t in result.transactions] == [Direction.SPEND, Direction.CREDIT]

    def test_unknown_issuer_ignores_sign(self, parser):
        """Test negative amounts are spending when the issuer is unknown."""
        text = "Date,Amount,Description\n2025-01-15,-9.99,Spotify\n"
        transaction = parser.parse_text(text).transactions[0]

        assert transaction.direction is Direction.SPEND
        assert transaction.title == "Spotify"
        assert transaction.amount == 9.99

    def test_content_match_keeps_amount_signs(self, parser):
        """Test a card payment row in a checking export does not flip purchases to credits."""
        text = (
            "Date,Amount,Description\n"
            "01/15/2025,-45.00,Whole Foods Market #123\n"
            "01/16/2025,-12.00,Blue Bottle Coffee\n"
            "01/20/2025,-500.00,AMEX EPAYMENT ACH PMT\n"
        )
        result = parser.parse_text(text, "checking_jan.csv")

        assert result.source == "American Express"
        assert [(t.title, t.direction) for t in result.transactions] == [
            ("Whole Foods Market", Direction.SPEND),
            ("Blue Bottle Coffee", Direction.SPEND),
        ]
        assert sum(t.amount for t in result.transactions) == pytest.approx(57.0)

    def test_dollar_amount_row(self, parser):
        """Test a US-style date with a currency-symbol amount."""
        text = "Date,Amount,Description\n01/15/2025,$45.00,Whole Foods Market #123\n"
        result = parser.parse_text(text, "export.csv")

        transaction = result.transactions[0]
        assert result.transaction_count == 1
        assert transaction.amount == 45.0
        assert transaction.title == "Whole Foods Market"
        assert transaction.category == "Food & Dining"
        assert transaction.timestamp == datetime(2025, 1, 15, tzinfo=timezone.utc)
        assert transaction.direction is Direction.SPEND

    def test_nz_export_is_day_first(self, parser):
        """Test NZ exports read dates day-first and defer categorization."""
        text = "Date,Amount,Description\n05/01/2025,12.00,Countdown Papanui\n"
        result = parser.parse_text(text, "asb_export.csv")

        transaction = result.transactions[0]
        assert result.source == "ASB Bank"
        assert result.region == "NZ"
        assert transaction.timestamp == datetime(2025, 1, 5, tzinfo=timezone.utc)
        assert transaction.category == "Other"

    def test_unparseable_date_counted(self, parser):
        """Test bad dates fall back and are counted."""
        text = "Date,Amount,Description\nnot-a-date,5.00,Blue Bottle Coffee\n"
        result = parser.parse_text(text)

        assert result.transaction_count == 1
        assert result.stats.date_fallbacks == 1

    def test_repeated_rows_get_distinct_ids(self, parser):
        """Test identical rows are both kept."""
        text = (
            "Date,Amount,Description\n"
            "2025-01-15,4.50,Blue Bottle Coffee\n"
            "2025-01-15,4.50,Blue Bottle Coffee\n"
        )
        transactions = parser.parse_text(text).transactions

        assert len(transactions) == 2
        assert transactions[0].id != transactions[1].id


class TestFindColumn:
    """Test header lookup."""

    def test_first_synonym_wins(self):
        """Test synonyms are tried in preference order."""
        fields = {'debit': 'Debit', 'amount': 'Amount'}
        assert find_column(fields, AMOUNT_COLUMNS) == 'Amount'

    def test_no_match(self):
        """Test None when no header matches."""
        assert find_column({'foo': 'Foo'}, AMOUNT_COLUMNS) is None
