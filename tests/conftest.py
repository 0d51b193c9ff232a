from __future__ import annotations
import logging

import httpx
import pytest

from trello_export.config import Settings, get_settings

TRELLO_ENV = (
    "TRELLO_API_KEY", "TRELLO_TOKEN", "TRELLO_BOARD_ID", "TRELLO_BASE_URL", "TRELLO_TIMEOUT_S",
    "TRELLO_MAX_RETRIES", "TRELLO_BACKOFF_S", "TRELLO_OUTPUT_PATH", "TRELLO_CONFIG",
)


def make_settings(**overrides) -> Settings:
    # dummy settings; every test talks to a MockTransport, never to Trello
    values = dict(
        key="TEST_KEY",
        token="TEST_TOKEN",
        board_id="b1",
        base_url="https://trello.example.com",
        timeout_s=5.0,
    )
    values.update(overrides)
    return Settings(**values)


def comment(i: int, *, user: str | None = "alice", text: str | None = None) -> dict:
    raw = {
        "id": f"a{i:05d}",
        "date": "2024-09-01T10:00:00.000Z",
        "data": {"card": {"id": f"c{i % 7}", "name": f"Card {i % 7}"}, "text": text or f"comment {i}"},
    }
    if user is not None:
        raw["memberCreator"] = {"username": user}
    return raw


def make_pages(*sizes: int) -> list[list[dict]]:
    pages, n = [], 0
    for size in sizes:
        pages.append([comment(n + i) for i in range(size)])
        n += size
    return pages


class PageServer:
    """Serves the given pages in order on the board actions endpoint and records every request."""

    def __init__(self, pages, fail_at: int | None = None, status: int = 500):
        self.pages = pages
        self.fail_at = fail_at
        self.status = status
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        idx = len(self.requests) - 1
        if not request.url.path.startswith("/1/boards/") or not request.url.path.endswith("/actions"):
            return httpx.Response(404)
        if self.fail_at is not None and idx == self.fail_at:
            return httpx.Response(self.status, text="boom")
        return httpx.Response(200, json=self.pages[min(idx, len(self.pages) - 1)])

    def client(self, settings: Settings) -> httpx.Client:
        return settings.build_client(transport=httpx.MockTransport(self))


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    for var in TRELLO_ENV:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield tmp_path
    get_settings.cache_clear()


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    factory = logging.getLogRecordFactory()
    yield
    for h in list(root.handlers):
        root.removeHandler(h)
        if h not in handlers:
            h.close()
    for h in handlers:
        root.addHandler(h)
    root.setLevel(level)
    logging.setLogRecordFactory(factory)
