"""Constants and defaults.

Note: Keep constants here to avoid magic strings spread across code.
"""

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100

API_PREFIX = "/api"
EMPLOYEES_PATH = f"{API_PREFIX}/employees"

# Paths served without authentication.
PUBLIC_PATH_PREFIXES = ("/built/", "/main.css")

WEBSOCKET_ENDPOINT = "/payroll"
TOPIC_PREFIX = "/topic"
APP_PREFIX = "/app"

BASIC_REALM = "Payroll"

# Largest row offset the database accepts (signed BIGINT).
MAX_ROW_OFFSET = 2**63 - 1
