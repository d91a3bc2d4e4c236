"""Protocol definitions for dependency injection and interface contracts."""

from typing import Protocol, runtime_checkable

from .models import Token


@runtime_checkable
class Toast(Protocol):
    """Sink that shows a transient message to the user.

    Sinks may also provide `hide()` and a `config` attribute holding a
    ToastConfig; neither is required.
    """

    def show(self, message: str) -> None: ...


class KeyValueStorage(Protocol):
    """Synchronous string key-value storage."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class TokenManager(Protocol):
    """Owner of the persisted credential pair."""

    def get_token(self) -> Token | None:
        """Return the stored pair, or None if absent or unreadable."""
        ...

    def set_token(self, token: Token) -> None: ...

    async def refresh_token(self) -> Token | None:
        """Exchange the refresh token for a new pair and store it.

        Raises:
            RefreshError: If there is no refresh token or the exchange failed.
                Stored credentials have been erased when this is raised.
        """
        ...

    async def remove_token(self) -> None:
        """End the remote session and erase stored credentials."""
        ...


class ErrorHandler(Protocol):
    """User-facing error notification channel."""

    def show_error(self, message: str) -> None: ...

    def set_toast(self, toast: Toast) -> None: ...
