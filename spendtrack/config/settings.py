"""Global settings and configuration."""
import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Package directories
PACKAGE_ROOT = Path(__file__).parent.parent
DATA_DIR = PACKAGE_ROOT / "data"
BANK_TEMPLATES_DIR = DATA_DIR / "banks"
REGION_TEMPLATES_DIR = DATA_DIR / "regions"

# Category keywords and merchant mappings. Point this at a private copy to
# keep personal merchant names out of the package.
CATEGORY_CONFIG_FILE = Path(
    os.getenv("SPENDTRACK_CATEGORY_CONFIG", str(DATA_DIR / "categories.yaml"))
)

# Upload limits (hard rejections, never truncation)
MAX_FILE_SIZE_BYTES = int(os.getenv("MAX_FILE_SIZE_BYTES", str(2 * 1024 * 1024)))
MAX_PDF_PAGES = int(os.getenv("MAX_PDF_PAGES", "60"))
PARSE_TIMEOUT_SECONDS = float(os.getenv("PARSE_TIMEOUT_SECONDS", "60"))
ALLOWED_EXTENSIONS = (".csv", ".pdf")

# Logging. File logging is off unless a path is given: the ledger is
# memory-only and nothing else is written to disk by default.
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE = Path(os.environ["SPENDTRACK_LOG_FILE"]) if os.getenv("SPENDTRACK_LOG_FILE") else None

# Transaction defaults
DEFAULT_CATEGORY = "Other"
UNKNOWN_MERCHANT = "Unknown Merchant"
UNKNOWN_SOURCE = "Unknown"
ALL_CATEGORIES_LABEL = "All"

# Currency settings
DEFAULT_CURRENCY = "USD"
CURRENCY_SYMBOLS = {
    "USD": "$",
    "NZD": "NZ$",
    "AUD": "A$",
    "GBP": "£",
    "EUR": "€"
}
