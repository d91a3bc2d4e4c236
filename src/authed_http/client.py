"""Request pipeline: bearer auth, refresh-on-401 and error reporting."""

import asyncio
import logging
from functools import cache
from typing import Any

import httpx

from .auth import AuthService, TokenStore
from .config import Config, get_config
from .consts import (
    DEFAULT_ERROR_CODE,
    DEFAULT_ERROR_MESSAGE,
    SESSION_EXPIRED_MESSAGE,
    USER_AGENT,
)
from .errors import ErrorReporter
from .exceptions import RefreshError
from .models import Failure, RequestDescriptor, Result, Success, Token
from .pathvars import resolve_path
from .protocols import ErrorHandler, TokenManager
from .storage import JsonFileStorage

logger = logging.getLogger("authed-http.client")


def error_message(error: Exception) -> str:
    """Resolve the user-facing message for a failed call.

    Prefers a `message` field in a JSON error body, then the exception's own
    text, then a generic default.
    """
    if isinstance(error, httpx.HTTPStatusError):
        try:
            body = error.response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and isinstance(body.get("message"), str):
            if body["message"]:
                return body["message"]
    if isinstance(error, RefreshError):
        return error.message or DEFAULT_ERROR_MESSAGE
    return str(error) or DEFAULT_ERROR_MESSAGE


def error_code(error: Exception) -> int:
    """HTTP status of a failed call, or 500 when there is none."""
    if isinstance(error, httpx.HTTPStatusError):
        return error.response.status_code
    if isinstance(error, RefreshError) and error.status_code is not None:
        return error.status_code
    return DEFAULT_ERROR_CODE


class RequestPipeline:
    """HTTP client wrapper with credentials, session recovery and reporting.

    Responsibilities:
    - Attach the stored bearer token to outgoing calls
    - Refresh the token once and replay a call that got 401
    - Report failures to the user and normalize outcomes into a Result
    """

    def __init__(
        self,
        config: Config | None = None,
        token_manager: TokenManager | None = None,
        error_handler: ErrorHandler | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        """Initialize RequestPipeline.

        Args:
            config: Config instance. If None, uses get_config().
            token_manager: Credential owner. If None, creates a TokenStore
                over JsonFileStorage at config.storage_file.
            error_handler: Notification channel. If None, uses the
                process-wide ErrorReporter.
            http_client: HTTP client. If None, creates a new one.
        """
        self.config = config or get_config()

        self.http_client = http_client or httpx.AsyncClient(
            base_url=self.config.base_url,
            headers={"User-Agent": USER_AGENT},
            timeout=self.config.timeout_seconds,
        )

        self.token_manager = token_manager or TokenStore(
            JsonFileStorage(self.config.storage_file),
            AuthService(self.config, self.http_client),
            self.config.token_storage_key,
        )
        self.error_handler = error_handler or ErrorReporter.get_instance()

        # In-flight refresh shared by every call that sees a 401
        self._refresh_task: asyncio.Task | None = None

        logger.info(
            f"Request pipeline created for {self.config.base_url or '(no base URL)'}"
        )

    async def __aenter__(self) -> "RequestPipeline":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.http_client.aclose()

    async def request(
        self, descriptor: RequestDescriptor | None = None, **fields: Any
    ) -> Result:
        """Send a call described by `descriptor` (or by keyword fields).

        Returns:
            Success with the decoded body, or Failure with status and message.

        Raises:
            PathVariableError: If the URL template cannot be filled.
            httpx.HTTPStatusError: On failure when throw_error is set.
            httpx.RequestError: On network failure when throw_error is set.
            RefreshError: If the session could not be renewed and
                throw_error is set.
        """
        descriptor = self._descriptor(descriptor, fields)
        url = resolve_path(descriptor.url, descriptor.path_variables)

        try:
            response = await self._dispatch(descriptor, url)
        except RefreshError as e:
            # Session expiry was already reported by the shared refresh
            if descriptor.throw_error:
                raise
            return Failure(error_code=error_code(e), error_message=error_message(e))
        except httpx.HTTPError as e:
            message = error_message(e)
            logger.debug(f"{descriptor.method} {url} failed: {message}")
            if not descriptor.silent_error:
                self.error_handler.show_error(message)
            if descriptor.throw_error:
                raise
            return Failure(error_code=error_code(e), error_message=message)

        return Success(data=self._decode(response))

    async def request_data(
        self, descriptor: RequestDescriptor | None = None, **fields: Any
    ) -> Any:
        """Send a call and return the decoded body, raising on any failure."""
        descriptor = self._descriptor(descriptor, {**fields, "throw_error": True})
        result = await self.request(descriptor)
        return result.data

    async def get(self, url: str, **fields: Any) -> Result:
        return await self.request(method="GET", url=url, **fields)

    async def post(self, url: str, **fields: Any) -> Result:
        return await self.request(method="POST", url=url, **fields)

    async def put(self, url: str, **fields: Any) -> Result:
        return await self.request(method="PUT", url=url, **fields)

    async def patch(self, url: str, **fields: Any) -> Result:
        return await self.request(method="PATCH", url=url, **fields)

    async def delete(self, url: str, **fields: Any) -> Result:
        return await self.request(method="DELETE", url=url, **fields)

    async def _dispatch(
        self,
        descriptor: RequestDescriptor,
        url: str,
        retried: bool = False,
        access: str | None = None,
    ) -> httpx.Response:
        """Send once, replaying at most once after a token refresh.

        `retried` marks that this call already spent its refresh. `access`
        overrides the stored access token for the replay.
        """
        request, sent_access = self._build_request(descriptor, url, access)

        logger.debug(f"{request.method} {request.url}")
        try:
            response = await self.http_client.send(request)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            if e.response.status_code != 401 or retried or descriptor.ignore_auth:
                raise

            # Another call may have refreshed while this one was in flight
            stored = self.token_manager.get_token()
            if stored is not None and stored.access and stored.access != sent_access:
                logger.info(f"{request.method} {request.url} got 401, token already renewed")
                return await self._dispatch(
                    descriptor, url, retried=True, access=stored.access
                )

            logger.info(f"{request.method} {request.url} got 401, refreshing token")
            token = await self._refresh_shared()
            if token is None or not token.access:
                raise
            return await self._dispatch(descriptor, url, retried=True, access=token.access)

        logger.debug(f"{request.method} {request.url} successful")
        return response

    def _build_request(
        self, descriptor: RequestDescriptor, url: str, access: str | None
    ) -> tuple[httpx.Request, str | None]:
        """Build the outgoing request and report which access token it carries."""
        headers = dict(descriptor.headers)
        if access is None and not descriptor.ignore_auth:
            token = self.token_manager.get_token()
            if token is not None and token.access:
                access = token.access
        if access:
            headers["Authorization"] = f"Bearer {access}"

        kwargs: dict[str, Any] = {}
        if descriptor.timeout is not None:
            kwargs["timeout"] = descriptor.timeout

        request = self.http_client.build_request(
            descriptor.method.upper(),
            url,
            params=descriptor.params,
            json=descriptor.body,
            data=descriptor.data,
            headers=headers,
            **kwargs,
        )
        return request, access

    async def _refresh_shared(self) -> Token | None:
        """Refresh the token, joining a refresh already in flight."""
        task = self._refresh_task
        if task is None:
            task = asyncio.ensure_future(self._refresh())
            task.add_done_callback(self._refresh_done)
            self._refresh_task = task
        else:
            logger.debug("Token refresh in progress, waiting")
        return await asyncio.shield(task)

    def _refresh_done(self, task: asyncio.Task) -> None:
        if self._refresh_task is task:
            self._refresh_task = None
        if not task.cancelled():
            task.exception()  # mark retrieved even if every waiter went away

    async def _refresh(self) -> Token | None:
        try:
            return await self.token_manager.refresh_token()
        except Exception as e:
            logger.warning(f"Session expired: {e}")
            try:
                await self.token_manager.remove_token()
            except Exception as remove_error:
                logger.warning(f"Removing credentials failed: {remove_error}")
            self.error_handler.show_error(SESSION_EXPIRED_MESSAGE)
            if isinstance(e, RefreshError):
                raise
            raise RefreshError(
                f"Token refresh failed: {e}",
                errors=[str(e)],
                context={"exception_type": type(e).__name__},
            ) from e

    @staticmethod
    def _descriptor(
        descriptor: RequestDescriptor | None, fields: dict[str, Any]
    ) -> RequestDescriptor:
        if descriptor is None:
            return RequestDescriptor(**fields)
        if fields:
            return descriptor.model_copy(update=fields)
        return descriptor

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text


@cache
def get_pipeline() -> RequestPipeline:
    """Get a cached RequestPipeline instance with default configuration.

    Raises:
        No exceptions raised directly.
        May propagate exceptions from Config() initialization via get_config().
    """
    return RequestPipeline()


async def request(descriptor: RequestDescriptor | None = None, **fields: Any) -> Result:
    """Send a call through the default pipeline."""
    return await get_pipeline().request(descriptor, **fields)
