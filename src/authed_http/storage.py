"""Key-value storage backends for persisted client state."""

import json
import logging
import os
from pathlib import Path

from .exceptions import ConfigError

logger = logging.getLogger("authed-http.storage")


class MemoryStorage:
    """Dict-backed storage that lives as long as the process."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._items: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._items.get(key)

    def set(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove(self, key: str) -> None:
        self._items.pop(key, None)


class JsonFileStorage:
    """Storage persisted as a single JSON object in a file.

    Every operation re-reads the file so that several processes sharing the
    file see each other's writes.
    """

    def __init__(self, path: str | Path):
        """Initialize JsonFileStorage.

        Args:
            path: File path; `~` is expanded. The file need not exist yet.
        """
        self.path = Path(os.path.expanduser(str(path)))

    def get(self, key: str) -> str | None:
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        items = self._load()
        items[key] = value
        self._dump(items)

    def remove(self, key: str) -> None:
        items = self._load()
        if items.pop(key, None) is not None:
            self._dump(items)

    def _load(self) -> dict[str, str]:
        try:
            with open(self.path, encoding="utf-8") as f:
                items = json.load(f)
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as e:  # bad JSON or bad UTF-8
            logger.warning(f"Ignoring unreadable storage file {self.path}: {e}")
            return {}

        if not isinstance(items, dict):
            logger.warning(f"Ignoring storage file {self.path}: not a JSON object")
            return {}
        return {k: v for k, v in items.items() if isinstance(v, str)}

    def _dump(self, items: dict[str, str]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(items, f)
        except OSError as e:
            raise ConfigError(
                f"Cannot write storage file: {self.path}",
                errors=[str(e)],
                suggestions=[
                    "Check file permissions",
                    "Point AUTHED_HTTP_STORAGE_FILE at a writable location",
                ],
                context={"storage_path": str(self.path)},
            ) from e
