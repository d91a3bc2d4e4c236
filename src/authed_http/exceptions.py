"""authed-http custom exceptions.

Exception Design Principles:
1. Use these custom exceptions only when additional useful context can be provided
2. Transport failures stay as httpx exceptions (HTTPStatusError, RequestError)
   so callers that opt into raising see exactly what the transport reported
3. Split on domain of actionable information:
   - Recoverable by user reconfiguration outside session (ConfigError)
   - Recoverable only by logging in again (RefreshError)
   - Unrecoverable except by code changes at the call site (PathVariableError)
"""


class AuthedHttpError(Exception):
    """Base exception for all authed-http errors.

    Provides rich context and actionable suggestions beyond standard exceptions.
    """

    def __init__(
        self,
        message: str,  # the error message
        *,
        errors: list[str] = None,  # detailed list of errors (if available)
        suggestions: list[str] = None,  # remedial actions
        context: dict = None,  # additional detailed context
    ):
        """Initialize AuthedHttpError.

        Args:
            message: Primary error message for users
            errors: List of specific error details
            suggestions: List of actionable suggestions for resolution
            context: Additional context information as key-value pairs
        """
        super().__init__(message)
        self.message = message
        self.errors = errors or []
        self.suggestions = suggestions or []
        self.context = context or {}


class ConfigError(AuthedHttpError):
    """Local configuration errors - recoverable by user reconfiguration.

    Covers setup issues such as a credential storage file that cannot be
    written. Does NOT include runtime HTTP errors - those remain httpx
    exceptions.
    """

    pass


class RefreshError(AuthedHttpError):
    """Access token could not be refreshed - recoverable only by a new login.

    Raised when no refresh token is stored, or when the auth service rejects
    the refresh token or cannot be reached. By the time this is raised the
    token store has already erased its stored credentials.
    """

    def __init__(self, message: str, *, status_code: int | None = None, **kwargs):
        super().__init__(message, **kwargs)
        self.status_code = status_code


class PathVariableError(AuthedHttpError):
    """URL template references placeholders with no supplied value.

    A programming error at the call site, raised before anything is sent.
    """

    def __init__(self, message: str, *, missing: list[str], **kwargs):
        super().__init__(message, **kwargs)
        self.missing = missing
