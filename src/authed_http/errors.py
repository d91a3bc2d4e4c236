"""User-facing error reporting through a swappable toast sink."""

import logging

from .protocols import Toast
from .toast import ConsoleToast

logger = logging.getLogger("authed-http.errors")


class ErrorReporter:
    """Forwards error messages to the active toast sink.

    One process-wide instance is available through get_instance(); UI code
    installs its own sink with set_toast() once it is ready to display
    messages. Instances can also be built directly and injected.
    """

    _instance: "ErrorReporter | None" = None

    def __init__(self, toast: Toast | None = None):
        self.toast = toast or ConsoleToast()

    @classmethod
    def get_instance(cls) -> "ErrorReporter":
        """Get the process-wide reporter, creating it on first use."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Forget the process-wide reporter."""
        cls._instance = None

    def set_toast(self, toast: Toast) -> None:
        """Route all subsequent messages to `toast`."""
        logger.debug(f"Toast sink set to {type(toast).__name__}")
        self.toast = toast

    def show_error(self, message: str) -> None:
        """Show `message` on the current sink. Never raises."""
        try:
            self.toast.show(message)
        except Exception:
            logger.exception(f"Toast sink {type(self.toast).__name__} failed")
