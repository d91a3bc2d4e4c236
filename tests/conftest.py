"""Pytest configuration and shared fixtures"""

import asyncio
import json
import os

import httpx
import pytest

from authed_http.auth import AuthService, TokenStore
from authed_http.client import RequestPipeline
from authed_http.config import Config
from authed_http.consts import LOGOUT_URL_PATH, REFRESH_URL_PATH
from authed_http.errors import ErrorReporter
from authed_http.models import Token
from authed_http.storage import MemoryStorage

# Configure pytest-asyncio
pytest_plugins = ("pytest_asyncio",)

BASE_URL = "https://api.test"


class RecordingToast:
    """Toast sink that remembers every message shown.

    When `snapshot` is set it is called on every show() and its result
    kept in `snapshots`, to capture state at notification time.
    """

    def __init__(self):
        self.messages: list[str] = []
        self.snapshot = None
        self.snapshots: list = []

    def show(self, message: str) -> None:
        if self.snapshot is not None:
            self.snapshots.append(self.snapshot())
        self.messages.append(message)


class FakeServer:
    """In-process API plus auth service behind httpx.MockTransport.

    Routes:
    - POST /api/auth/refresh: exchanges a known refresh token for a new pair
    - POST /api/auth/logout: counts calls, optionally fails
    - /api/protected/*: 401 unless the bearer token is currently valid
    - /api/public: always 200, echoes the Authorization header
    - /api/status/<code>: answers with that status
    - /api/down: raises a connection error
    - /api/text, /api/empty: non-JSON and empty bodies
    - anything else: 200 echoing method and path
    """

    def __init__(self):
        self.valid_tokens = {"access-1"}
        self.refresh_pairs = {
            "refresh-1": {"access": "access-2", "refresh": "refresh-2"}
        }
        self.accept_refreshed = True
        self.refresh_delay = 0.0
        self.response_delays: dict[str, float] = {}
        self.logout_fails = False
        self.refresh_calls = 0
        self.logout_calls = 0
        self.requests: list[httpx.Request] = []

    def api_requests(self, prefix: str = "/api/protected") -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path.startswith(prefix)]

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if path == REFRESH_URL_PATH:
            self.refresh_calls += 1
            if self.refresh_delay:
                await asyncio.sleep(self.refresh_delay)
            refresh = json.loads(request.content).get("refreshToken")
            pair = self.refresh_pairs.get(refresh)
            if pair is None:
                return httpx.Response(401, json={"message": "invalid refresh token"})
            if self.accept_refreshed:
                self.valid_tokens.add(pair["access"])
            return httpx.Response(200, json={"data": pair})

        if path == LOGOUT_URL_PATH:
            self.logout_calls += 1
            if self.logout_fails:
                return httpx.Response(503, json={"message": "logout unavailable"})
            return httpx.Response(204)

        if path.startswith("/api/protected"):
            if path in self.response_delays:
                await asyncio.sleep(self.response_delays[path])
            auth = request.headers.get("Authorization", "")
            if auth.removeprefix("Bearer ") not in self.valid_tokens:
                return httpx.Response(401, json={"message": "token expired"})
            return httpx.Response(200, json={"path": path, "auth": auth})

        if path == "/api/public":
            return httpx.Response(
                200, json={"auth": request.headers.get("Authorization")}
            )

        if path.startswith("/api/status/"):
            code = int(path.rsplit("/", 1)[1])
            message = request.url.params.get("message")
            if message is None:
                return httpx.Response(code, text="plain failure")
            return httpx.Response(code, json={"message": message})

        if path == "/api/down":
            raise httpx.ConnectError(
                request.url.params.get("reason", "Connection refused"),
                request=request,
            )

        if path == "/api/text":
            return httpx.Response(200, text="hello")

        if path == "/api/empty":
            return httpx.Response(204)

        body = json.loads(request.content) if request.content else None
        return httpx.Response(
            200,
            json={
                "method": request.method,
                "path": path,
                "params": dict(request.url.params),
                "body": body,
            },
        )


@pytest.fixture
def clean_env():
    """Fixture that temporarily clears AUTHED_HTTP_* environment variables.

    This ensures Config tests see the true defaults without interference
    from environment variables that might be set in the user's shell.
    """
    saved = {
        key: value for key, value in os.environ.items() if key.startswith("AUTHED_HTTP_")
    }

    for key in saved:
        os.environ.pop(key, None)

    try:
        yield
    finally:
        for key, value in saved.items():
            os.environ[key] = value


@pytest.fixture
def clean_config(clean_env):
    """Config instance with clean environment."""
    return Config()


@pytest.fixture
def config(clean_env, tmp_path):
    """Config pointing at the fake server"""
    return Config(
        base_url=BASE_URL,
        log_level="DEBUG",
        storage_file=str(tmp_path / "storage.json"),
    )


@pytest.fixture
def server():
    return FakeServer()


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def toast():
    return RecordingToast()


@pytest.fixture
def reporter(toast):
    return ErrorReporter(toast)


@pytest.fixture
async def http_client(server):
    client = httpx.AsyncClient(
        base_url=BASE_URL, transport=httpx.MockTransport(server.handler)
    )
    yield client
    await client.aclose()


@pytest.fixture
def token_store(config, storage, http_client):
    return TokenStore(storage, AuthService(config, http_client))


@pytest.fixture
def pipeline(config, token_store, reporter, http_client):
    """RequestPipeline wired to the fake server with injected collaborators"""
    return RequestPipeline(
        config=config,
        token_manager=token_store,
        error_handler=reporter,
        http_client=http_client,
    )


@pytest.fixture
def logged_in(token_store):
    """Store a valid credential pair"""
    token_store.set_token(Token(access="access-1", refresh="refresh-1"))
    return token_store


@pytest.fixture
def expired(token_store):
    """Store a pair whose access token the server no longer accepts"""
    token_store.set_token(Token(access="stale", refresh="refresh-1"))
    return token_store
