from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from .consts import DEFAULT_ERROR_CODE, DEFAULT_ERROR_MESSAGE

# =============================================================================
# CREDENTIALS
# =============================================================================


class Token(BaseModel):
    """Access/refresh credential pair as issued by the auth service.

    Unknown fields returned by the auth service (expiry, scope, ...) are kept
    so they survive a round trip through storage.
    """

    model_config = ConfigDict(extra="allow")

    access: str | None = Field(None, description="Bearer token for API calls")
    refresh: str | None = Field(
        None, description="Longer-lived token exchanged for a new pair"
    )


# =============================================================================
# REQUEST DESCRIPTOR
# =============================================================================


class RequestDescriptor(BaseModel):
    """Declarative description of a single call through the pipeline.

    `url` may be a template with `:name` or `{name}` placeholders that are
    filled from `path_variables`.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    method: str = Field("GET", description="HTTP method")
    url: str = Field(..., description="URL or URL template")
    path_variables: dict[str, str | int] | None = Field(
        None, description="Values for the URL template placeholders"
    )
    params: dict[str, Any] | None = Field(None, description="Query parameters")
    body: Any | None = Field(None, description="JSON request body")
    data: dict[str, Any] | None = Field(None, description="Form request body")
    headers: dict[str, str] = Field(
        default_factory=dict, description="Extra request headers"
    )
    timeout: float | None = Field(
        None, gt=0, description="Per-call timeout override in seconds"
    )
    ignore_auth: bool = Field(False, description="Never attach a bearer token")
    silent_error: bool = Field(False, description="Do not notify the user on failure")
    throw_error: bool = Field(
        False, description="Raise on failure instead of returning a Failure"
    )


# =============================================================================
# RESULT
# =============================================================================
# Uniform outcome of a pipeline call, discriminated on `success`


class Success(BaseModel):
    """Successful call carrying the decoded response body."""

    success: Literal[True] = True
    data: Any = Field(None, description="Decoded response body")


class Failure(BaseModel):
    """Failed call; `data` is always absent."""

    model_config = ConfigDict(populate_by_name=True)

    success: Literal[False] = False
    data: None = None
    error_code: int = Field(DEFAULT_ERROR_CODE, alias="errorCode")
    error_message: str = Field(DEFAULT_ERROR_MESSAGE, alias="errorMessage")


Result = Success | Failure


# =============================================================================
# TOAST
# =============================================================================


class ToastConfig(BaseModel):
    """Advisory display options for a toast sink."""

    duration: float | None = Field(None, gt=0, description="Seconds on screen")
    position: Literal["top", "bottom", "center"] | None = None
    type: Literal["success", "error", "warning", "info"] = "error"
