"""High-value constants for the authed-http package."""

# Package metadata
PACKAGE_VERSION = "0.3.0"
PACKAGE_NAME = "authed-http"
USER_AGENT = f"{PACKAGE_NAME}/{PACKAGE_VERSION}"

# External API contract consts
REFRESH_URL_PATH = "/api/auth/refresh"
LOGOUT_URL_PATH = "/api/auth/logout"

# Storage consts
DEFAULT_TOKEN_STORAGE_KEY = "auth_token"
DEFAULT_STORAGE_FILE = "~/.authed_http/storage.json"

# Business logic consts
DEFAULT_ERROR_CODE = 500  # used when the transport gives no status
DEFAULT_ERROR_MESSAGE = "Request failed"
SESSION_EXPIRED_MESSAGE = "Your session has expired, please log in again"
NO_REFRESH_TOKEN_MESSAGE = "No refresh token available"
