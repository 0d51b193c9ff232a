"""Entry point for the Trello comment export.
Usage:
    python main.py [--config config.yaml] [--out comments.tsv]
"""
from trello_export.main import main

if __name__ == "__main__":
    raise SystemExit(main())
