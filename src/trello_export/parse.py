# src/trello_export/parse.py
from __future__ import annotations
from dataclasses import astuple, dataclass
from typing import Any, Dict

from .errors import ParseError

UNKNOWN_USER = "UNKNOWN_USER"
HEADER = ("ID", "CardID", "CardName", "Date", "User", "Text")


@dataclass(frozen=True)
class CommentRow:
    id: str
    card_id: str
    card_name: str
    date: str        # ISO-8601 as delivered by Trello, not parsed
    user: str
    text: str

    def as_row(self) -> tuple[str, ...]:
        """Column order matches HEADER."""
        return astuple(self)


def _get(d: Dict[str, Any], path: str, default=None):
    """Small helper for nested dicts with 'a.b.c' paths."""
    cur = d
    for part in path.split("."):
        if not isinstance(cur, dict) or part not in cur:
            return default
        cur = cur[part]
    return cur


def _str(val: Any) -> str:
    return "" if val is None else str(val)


def parse_comment(raw: Dict[str, Any]) -> CommentRow:
    if not isinstance(raw, dict):
        raise ParseError(f"Expected a comment action object, got {type(raw).__name__}")

    if raw.get("memberCreator"):
        user = _str(_get(raw, "memberCreator.username"))
    else:
        user = UNKNOWN_USER

    return CommentRow(
        id=_str(raw.get("id")),
        card_id=_str(_get(raw, "data.card.id")),
        card_name=_str(_get(raw, "data.card.name")),
        date=_str(raw.get("date")),
        user=user,
        text=_str(_get(raw, "data.text")),
    )
