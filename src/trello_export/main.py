# src/trello_export/main.py
from __future__ import annotations

import argparse
import logging
import sys

import httpx

from .config import load_env_file, load_settings
from .errors import ConfigError, TrelloExportError
from .export import export_comments
from .logging_setup import setup_logging_from_env
from .trello_api import TrelloClient

log = logging.getLogger(__name__)


def die(msg: str, code: int = 1) -> int:
    print(msg, file=sys.stderr)
    return code


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="trello-export",
        description="Export all comments of the configured Trello board to a TSV file.",
    )
    parser.add_argument("--config", help="YAML file with key/token/id (default: $TRELLO_CONFIG or ./config.yaml)")
    parser.add_argument("--env-file", help="Path to a .env file (defaults to ./.env when present)")
    parser.add_argument("--out", help="Output file (default: $TRELLO_OUTPUT_PATH or ./comments.tsv)")
    args = parser.parse_args(argv)

    try:
        load_env_file(args.env_file)
    except ConfigError as e:
        return die(f"Config error: {e}")

    setup_logging_from_env()

    try:
        settings = load_settings(config_path=args.config, env_path=args.env_file)
    except ConfigError as e:
        log.error("Configuration invalid", extra={"error": str(e)})
        return die(f"Config error: {e}")

    out_path = args.out or settings.output_path
    try:
        with TrelloClient(settings) as client:
            result = export_comments(client, settings.board_id, out_path)
    except (TrelloExportError, httpx.HTTPError, OSError) as e:
        log.error("Export failed", extra={"board_id": settings.board_id, "error": str(e)})
        return die(f"Export failed: {e}")

    log.info("Export done", extra={"total": result.total, "pages": result.pages, "path": str(result.path)})
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
