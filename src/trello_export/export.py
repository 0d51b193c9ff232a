"""Writes a board's comment history to a tab-separated file."""
from __future__ import annotations

import csv
import logging
from dataclasses import dataclass
from pathlib import Path

from .parse import HEADER, parse_comment
from .trello_api import PAGE_SIZE, TrelloClient

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExportResult:
    total: int
    pages: int
    path: Path


def export_comments(
    client: TrelloClient,
    board_id: str,
    out_path: str | Path,
    *,
    page_size: int = PAGE_SIZE,
) -> ExportResult:
    """
    Truncates out_path, writes the header, then one row per comment action.
    Errors propagate; rows already written stay in the file.
    """
    out = Path(out_path)
    total = 0
    pages = 0

    with out.open("w", encoding="utf-8", newline="") as fh:
        writer = csv.writer(fh, delimiter="\t", lineterminator="\n")
        writer.writerow(HEADER)

        for page in client.iter_comment_pages(board_id, page_size=page_size):
            writer.writerows(parse_comment(raw).as_row() for raw in page)
            total += len(page)
            pages += 1
            log.debug("Page written", extra={"page": pages, "rows": len(page), "total": total})

    log.info("OK! Wrote %d entries to %s", total, out.resolve(), extra={"pages": pages})
    return ExportResult(total=total, pages=pages, path=out)
