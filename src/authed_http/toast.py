"""Default toast sink for environments without a UI."""

import logging

from .models import ToastConfig

logger = logging.getLogger("authed-http.toast")

_LEVELS = {
    "success": logging.INFO,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


class ConsoleToast:
    """Writes messages to the console through logging."""

    def __init__(self, config: ToastConfig | None = None):
        self.config = config or ToastConfig()

    def show(self, message: str) -> None:
        logger.log(_LEVELS[self.config.type], message)

    def hide(self) -> None:
        pass
