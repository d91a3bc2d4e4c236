"""authed-http package

An asyncio HTTP request layer that attaches bearer credentials, refreshes an
expired access token once per call, and reports failures through a
swappable toast sink.
"""

from .auth import AuthService, TokenStore
from .client import RequestPipeline, get_pipeline, request
from .config import Config, get_config, setup_logging
from .consts import PACKAGE_VERSION
from .errors import ErrorReporter
from .exceptions import (
    AuthedHttpError,
    ConfigError,
    PathVariableError,
    RefreshError,
)
from .models import Failure, RequestDescriptor, Result, Success, Token, ToastConfig
from .pathvars import resolve_path
from .storage import JsonFileStorage, MemoryStorage
from .toast import ConsoleToast

__version__ = PACKAGE_VERSION

__all__ = [
    "__version__",
    "get_config",
    "get_pipeline",
    "request",
    "resolve_path",
    "setup_logging",
    "Config",
    "RequestPipeline",
    "TokenStore",
    "AuthService",
    "ErrorReporter",
    "ConsoleToast",
    "MemoryStorage",
    "JsonFileStorage",
    "RequestDescriptor",
    "Result",
    "Success",
    "Failure",
    "Token",
    "ToastConfig",
    "AuthedHttpError",
    "ConfigError",
    "PathVariableError",
    "RefreshError",
]
