"""
Constants, timeouts, storage keys, and validation limits.
"""

CONSOLE_VERSION = "1.2.0"

# ─── Remote API ──────────────────────────────────────────────────
DEFAULT_API_BASE_URL = "http://localhost:8080/api"
API_TIMEOUT_READ = 15          # Seconds, list/get/search calls
API_TIMEOUT_WRITE = 30         # Create/update/replace calls (DB write on the server)

# ─── Rate limiting ───────────────────────────────────────────────
RATE_LIMIT_COOLDOWN_SEC = 30   # At most one advisory per window
RATE_LIMIT_ADVISORY_TITLE = "API Rate Limit Reached"
RATE_LIMIT_ADVISORY_MESSAGE = (
    "The demo API has a request limit. Please wait a moment before trying "
    "again. This is not an application error."
)
RATE_LIMIT_ADVISORY_DURATION_MS = 8000

GENERIC_ERROR_TITLE = "Error"
GENERIC_ERROR_MESSAGE = "Something went wrong. Please try again later."

# ─── Session ─────────────────────────────────────────────────────
SESSION_TTL_DAYS = 7           # "Remember me" lifetime
TOKEN_KEY = "auth_token"
USER_KEY = "auth_user"
EXPIRY_KEY = "auth_token_expiry"
SESSION_KEYS = (TOKEN_KEY, USER_KEY, EXPIRY_KEY)

LOGIN_BAD_CREDENTIALS = "Invalid email or password"
LOGIN_TRANSIENT_FAILURE = "An error occurred during login. Please try again."

# ─── Validation ──────────────────────────────────────────────────
COURSE_CODE_PATTERN = r"^[A-Z0-9]{2,10}$"
COURSE_TITLE_MAX = 100
COURSE_DESCRIPTION_MAX = 500
EMAIL_PATTERN = r"^[^\s@]+@[^\s@]+\.[^\s@]+$"

# ─── Listing ─────────────────────────────────────────────────────
DEFAULT_PAGE_SIZE = 10
DEFAULT_SORT = "id,asc"

# ─── Dashboard ───────────────────────────────────────────────────
RECENT_ENROLLMENTS_MAX = 5
