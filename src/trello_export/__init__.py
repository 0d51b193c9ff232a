"""Export the comment history of a Trello board to a TSV file."""
from .config import ConfigError, Settings, get_settings, load_settings
from .errors import HttpError, ParseError, TrelloExportError
from .export import ExportResult, export_comments
from .trello_api import PAGE_SIZE, TrelloClient
from .urls import add_query_args

__all__ = [
    "ConfigError",
    "ExportResult",
    "HttpError",
    "PAGE_SIZE",
    "ParseError",
    "Settings",
    "TrelloClient",
    "TrelloExportError",
    "add_query_args",
    "export_comments",
    "get_settings",
    "load_settings",
]
