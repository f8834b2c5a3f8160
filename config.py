import os
import sys

from dotenv import load_dotenv

from enums.price_rounding import PriceRounding
from enums.runtime_environment import RuntimeEnvironment

# Load .env but don't override existing environment variables
# This allows test scripts to set RUNTIME_ENVIRONMENT=TEST before import
load_dotenv(".env", override=False)


def _exit_with_config_error(name: str, reason: Exception, expected: str):
    print(f"\n ERROR: Invalid {name} configuration\n", file=sys.stderr)
    print(f"Reason: {reason}", file=sys.stderr)
    print(f"Expected: {expected}", file=sys.stderr)
    print(f"Current value: {os.environ.get(name, '(not set)')}\n", file=sys.stderr)
    sys.exit(1)


def _positive_int(name: str, default: int) -> int:
    try:
        value = int(os.environ.get(name, str(default)))
        if value <= 0:
            raise ValueError(f"{name} must be positive (got: {value})")
        return value
    except ValueError as e:
        _exit_with_config_error(name, e, "Positive integer")


# Parse RUNTIME_ENVIRONMENT with clear error message on misconfiguration
try:
    RUNTIME_ENVIRONMENT = RuntimeEnvironment(os.environ.get("RUNTIME_ENVIRONMENT", "DEV"))
except ValueError as e:
    _exit_with_config_error("RUNTIME_ENVIRONMENT", e, ", ".join(env.value for env in RuntimeEnvironment))

WEBAPP_HOST = os.environ.get("WEBAPP_HOST", "0.0.0.0")
WEBAPP_PORT = int(os.environ.get("WEBAPP_PORT")) if os.environ.get("WEBAPP_PORT") else 8000

# Database
DB_NAME = os.environ.get("DB_NAME", "storefront.db")
DB_URL = os.environ.get("DB_URL") or f"sqlite+aiosqlite:///data/{DB_NAME}"
SQL_ECHO = os.environ.get("SQL_ECHO", "false") == "true"

# Serve fixture facets instead of querying the store (demo / broken-backend mode)
MOCK_DATA = os.environ.get("MOCK_DATA", "false") in ("true", "1")

# Catalog pagination
PAGE_SIZE_MIN = _positive_int("PAGE_SIZE_MIN", 6)
PAGE_SIZE_MAX = _positive_int("PAGE_SIZE_MAX", 96)
PAGE_SIZE_DEFAULT = _positive_int("PAGE_SIZE_DEFAULT", 24)
if not PAGE_SIZE_MIN <= PAGE_SIZE_DEFAULT <= PAGE_SIZE_MAX:
    _exit_with_config_error(
        "PAGE_SIZE_DEFAULT",
        ValueError(f"default page size must lie within [{PAGE_SIZE_MIN}, {PAGE_SIZE_MAX}]"),
        "PAGE_SIZE_MIN <= PAGE_SIZE_DEFAULT <= PAGE_SIZE_MAX",
    )

# Dollars -> cents conversion of user supplied price bounds
try:
    PRICE_BOUND_ROUNDING = PriceRounding(os.environ.get("PRICE_BOUND_ROUNDING", "round"))
except ValueError as e:
    _exit_with_config_error("PRICE_BOUND_ROUNDING", e, ", ".join(r.value for r in PriceRounding))

CURRENCY = os.environ.get("CURRENCY", "USD")

# Cart session cookie
CART_COOKIE_NAME = os.environ.get("CART_COOKIE_NAME", "cartId")
CART_COOKIE_MAX_AGE_DAYS = _positive_int("CART_COOKIE_MAX_AGE_DAYS", 30)
CART_COOKIE_SECURE = os.environ.get("CART_COOKIE_SECURE", "false") == "true"

# Largest quantity a single add or update may request
CART_QUANTITY_MAX = _positive_int("CART_QUANTITY_MAX", 999)

CORS_ALLOWED_ORIGINS = os.environ.get("CORS_ALLOWED_ORIGINS", "").split(",") if os.environ.get("CORS_ALLOWED_ORIGINS") else []

# Logging Configuration
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")  # DEBUG, INFO, WARNING, ERROR, CRITICAL
LOG_MASK_SECRETS = os.environ.get("LOG_MASK_SECRETS", "true") == "true"  # Mask cart tokens and emails in logs

# Log Retention: Environment-specific defaults
# Dev: 30 days for debugging, Prod: 5 days to save disk space
if RUNTIME_ENVIRONMENT == RuntimeEnvironment.DEV:
    LOG_RETENTION_DAYS = int(os.environ.get("LOG_RETENTION_DAYS", "30"))
else:
    LOG_RETENTION_DAYS = int(os.environ.get("LOG_RETENTION_DAYS", "5"))
