# src/trello_export/urls.py
from __future__ import annotations

from typing import Any, Mapping
from urllib.parse import urlencode


def add_query_args(url: str, args: Mapping[str, Any]) -> str:
    """Append raw (not yet encoded) query arguments to ``url``.

    Keys and values are form-encoded, so spaces become ``+``. Uses ``&`` if
    the URL already carries a query string, ``?`` otherwise. An empty mapping
    leaves the URL untouched.
    """
    if not args:
        return url
    qs = urlencode({str(k): str(v) for k, v in args.items()})
    sep = "&" if "?" in url else "?"
    return f"{url}{sep}{qs}"
