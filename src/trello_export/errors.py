# src/trello_export/errors.py
from __future__ import annotations

import httpx


class TrelloExportError(Exception):
    """Base class for everything the exporter raises on purpose."""


class ConfigError(TrelloExportError):
    """Missing or invalid configuration. Raised before any request is sent."""


class HttpError(TrelloExportError, httpx.HTTPStatusError):
    """Trello answered with a non-success status (after any retries)."""


class ParseError(TrelloExportError, ValueError):
    """Response body is not the JSON shape we page through."""
