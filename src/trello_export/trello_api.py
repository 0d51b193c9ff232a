from __future__ import annotations
import logging
import time
from typing import Any, Callable, Iterator

import httpx

from .config import Settings
from .errors import HttpError, ParseError
from .urls import add_query_args

log = logging.getLogger(__name__)

BOARD_ACTIONS_PATH_TEMPLATE = "/1/boards/{board_id}/actions"
COMMENT_FILTER = "commentCard"
PAGE_SIZE = 1000

RETRY_STATUSES = frozenset({429, 500, 502, 503, 504})


class TrelloClient:
    def __init__(
        self,
        settings: Settings,
        client: httpx.Client | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.settings = settings
        self._owns_client = client is None
        self.client = client or settings.build_client()
        self._sleep = sleep

    # lifecycle
    def close(self) -> None:
        if self._owns_client:
            self.client.close()

    def __enter__(self) -> "TrelloClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # transport
    def _backoff(self, attempt: int) -> float:
        return self.settings.backoff_s * (2 ** attempt)

    def request(self, endpoint: str, method: str = "GET", **kwargs: Any) -> httpx.Response:
        """
        Sends an authenticated request. key/token are always appended as query args.
        429/5xx and transport errors are retried up to settings.max_retries times.
        """
        url = add_query_args(self.settings.base_url + endpoint, self.settings.auth_params())
        attempt = 0
        while True:
            try:
                r = self.client.request(method, url, **kwargs)
            except httpx.TransportError as e:
                if attempt >= self.settings.max_retries:
                    raise
                wait = self._backoff(attempt)
                # never log url: it carries the token
                log.warning("Transport error, retrying", extra={
                    "endpoint": endpoint.split("?", 1)[0], "attempt": attempt, "wait_s": wait, "error": str(e),
                })
            else:
                if r.status_code not in RETRY_STATUSES or attempt >= self.settings.max_retries:
                    return r
                wait = self._backoff(attempt)
                log.warning("Retryable status, retrying", extra={
                    "endpoint": endpoint.split("?", 1)[0], "status": r.status_code, "attempt": attempt, "wait_s": wait,
                })
            self._sleep(wait)
            attempt += 1

    def get_json(self, endpoint: str) -> Any:
        r = self.request(endpoint)
        if not r.is_success:
            path = endpoint.split("?", 1)[0]
            raise HttpError(
                f"Trello {path} returned {r.status_code}. Body: {r.text}",
                request=r.request,
                response=r,
            )
        try:
            return r.json()
        except ValueError as e:
            raise ParseError(f"Malformed JSON from {endpoint.split('?', 1)[0]}: {e}") from e

    # API
    def fetch_comment_page(self, board_id: str, *, limit: int, before: str | None = None) -> list[dict]:
        endpoint = add_query_args(
            BOARD_ACTIONS_PATH_TEMPLATE.format(board_id=board_id),
            {"filter": COMMENT_FILTER, "limit": limit},
        )
        if before is not None:
            endpoint = add_query_args(endpoint, {"before": before})

        data = self.get_json(endpoint)
        if not isinstance(data, list):
            raise ParseError(f"Expected a JSON array of actions, got {type(data).__name__}")
        return data

    def iter_comment_pages(self, board_id: str, page_size: int = PAGE_SIZE) -> Iterator[list[dict]]:
        """
        Pages backwards through the board's comments, newest first.
        Stops after the first page shorter than page_size; that page is still yielded.
        """
        total = 0
        cursor: str | None = None
        while True:
            log.info("Fetching %d - %d", total, total + page_size, extra={"board_id": board_id})
            page = self.fetch_comment_page(board_id, limit=page_size, before=cursor)
            yield page

            total += len(page)
            if len(page) < page_size:
                break
            last = page[-1]
            if not isinstance(last, dict) or not last.get("id"):
                raise ParseError("Last action of the page has no id, cannot page further")
            cursor = str(last["id"])


__all__ = [
    "BOARD_ACTIONS_PATH_TEMPLATE",
    "PAGE_SIZE",
    "TrelloClient",
]
