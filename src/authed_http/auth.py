"""Credential storage and token refresh against the auth service."""

import json
import logging

import httpx
from pydantic import ValidationError

from .config import Config
from .consts import DEFAULT_TOKEN_STORAGE_KEY, NO_REFRESH_TOKEN_MESSAGE
from .exceptions import RefreshError
from .models import Token
from .protocols import KeyValueStorage

logger = logging.getLogger("authed-http.auth")


class AuthService:
    """Remote auth endpoints.

    Talks to the auth service over a plain HTTP client, never through the
    request pipeline, so auth calls cannot trigger another refresh.
    """

    def __init__(self, config: Config, http_client: httpx.AsyncClient):
        """Initialize AuthService.

        Args:
            config: Config instance with auth endpoint settings.
            http_client: HTTP client (for auth requests only)
        """
        self.config = config
        self.http_client = http_client

    async def refresh(self, refresh_token: str) -> Token | None:
        """Exchange a refresh token for a new credential pair.

        Returns:
            The new pair, or None if the service answered without one.

        Raises:
            httpx.HTTPStatusError: If the service rejected the refresh token.
            httpx.RequestError: For network errors, timeouts, DNS failures.
        """
        logger.debug(f"POST {self.config.refresh_url}")
        response = await self.http_client.post(
            self.config.refresh_url, json={"refreshToken": refresh_token}
        )
        response.raise_for_status()
        payload = response.json()

        # Accept both a bare pair and a {"data": pair} envelope
        if isinstance(payload, dict) and isinstance(payload.get("data"), dict):
            payload = payload["data"]
        if not isinstance(payload, dict) or not payload.get("access"):
            return None
        return Token.model_validate(payload)

    async def logout(self, access_token: str | None = None) -> None:
        """End the remote session.

        Raises:
            httpx.HTTPStatusError: For HTTP 4xx/5xx responses.
            httpx.RequestError: For network errors, timeouts, DNS failures.
        """
        headers = {}
        if access_token:
            headers["Authorization"] = f"Bearer {access_token}"

        logger.debug(f"POST {self.config.logout_url}")
        response = await self.http_client.post(self.config.logout_url, headers=headers)
        response.raise_for_status()


class TokenStore:
    """Owner of the persisted credential pair.

    Responsibilities:
    - Read and write the pair in key-value storage
    - Exchange the refresh token for a new pair
    - Erase everything when the pair can no longer be trusted
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        auth_service: AuthService,
        storage_key: str = DEFAULT_TOKEN_STORAGE_KEY,
    ):
        self.storage = storage
        self.auth_service = auth_service
        self.storage_key = storage_key

    def get_token(self) -> Token | None:
        """Get the stored pair, or None if missing or malformed."""
        raw = self.storage.get(self.storage_key)
        if not raw:
            return None
        try:
            return Token.model_validate(json.loads(raw))
        except (json.JSONDecodeError, ValidationError) as e:
            logger.warning(f"Ignoring malformed stored token: {type(e).__name__}")
            return None

    def set_token(self, token: Token) -> None:
        self.storage.set(self.storage_key, token.model_dump_json())

    async def refresh_token(self) -> Token | None:
        """Exchange the stored refresh token for a new pair.

        Returns:
            The new pair, already stored, or None if the auth service
            answered without one.

        Raises:
            RefreshError: If no refresh token is stored or the exchange
                failed. Stored credentials are erased first.
        """
        logger.debug("Refreshing access token")
        try:
            current = self.get_token()
            if current is None or not current.refresh:
                raise RefreshError(
                    NO_REFRESH_TOKEN_MESSAGE,
                    suggestions=["Log in again to obtain a new credential pair"],
                )

            token = await self.auth_service.refresh(current.refresh)
            if token is None:
                logger.warning("Auth service returned no token on refresh")
                return None

            self.set_token(token)
            logger.info("Token refreshed successfully")
            return token

        except Exception as e:
            logger.warning(f"Token refresh failed: {e}")
            await self._discard()
            if isinstance(e, RefreshError):
                raise
            status_code = None
            if isinstance(e, httpx.HTTPStatusError):
                status_code = e.response.status_code
            raise RefreshError(
                f"Token refresh failed: {e}",
                status_code=status_code,
                errors=[str(e)],
                suggestions=["Log in again to obtain a new credential pair"],
                context={"exception_type": type(e).__name__},
            ) from e

    async def remove_token(self) -> None:
        """Log out remotely, then erase stored credentials.

        Storage is erased even if the logout call fails; the failure then
        propagates. With nothing stored there is no session to end remotely.
        """
        current = self.get_token()
        if current is None:
            self.storage.remove(self.storage_key)
            return
        try:
            await self.auth_service.logout(current.access)
        finally:
            self.storage.remove(self.storage_key)
            logger.info("Stored credentials removed")

    async def _discard(self) -> None:
        try:
            await self.remove_token()
        except Exception as e:
            # Local storage is already erased; keep the refresh failure primary
            logger.warning(f"Logout after failed refresh also failed: {e}")
