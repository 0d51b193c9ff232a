# src/trello_export/config.py
from __future__ import annotations
import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Mapping, Optional
import httpx
import yaml
from dotenv import load_dotenv, find_dotenv

from .errors import ConfigError

API_BASE = "https://api.trello.com"
DEFAULT_CONFIG_FILE = "config.yaml"
DEFAULT_OUTPUT_PATH = "comments.tsv"

REQUIRED_KEYS = ("key", "token", "id")

# env var -> key in the config mapping
ENV_KEYS = {
    "TRELLO_API_KEY": "key",
    "TRELLO_TOKEN": "token",
    "TRELLO_BOARD_ID": "id",
    "TRELLO_BASE_URL": "base_url",
    "TRELLO_TIMEOUT_S": "timeout_s",
    "TRELLO_MAX_RETRIES": "max_retries",
    "TRELLO_BACKOFF_S": "backoff_s",
    "TRELLO_OUTPUT_PATH": "output_path",
}


def load_env_file(env_path: Optional[str | Path] = None) -> None:
    """Loads .env into os.environ: explicit path, else ./.env, else the nearest one found upwards."""
    # .env never overrides variables that are already set
    if env_path:
        p = Path(env_path)
        if not p.is_file():
            raise ConfigError(f"Env file not found: {p}")
        load_dotenv(p, override=False)
    elif (Path.cwd() / ".env").is_file():
        load_dotenv(Path.cwd() / ".env", override=False)
    else:
        found = find_dotenv(usecwd=True)
        if found:
            load_dotenv(found, override=False)


def _coerce(data: Mapping[str, Any], name: str, typ: type, default, *, positive: bool = False):
    val = data.get(name)
    if val is None or val == "":
        return default
    try:
        out = typ(val)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid value for {name!r}: {val!r}") from e
    if positive and out <= 0:
        raise ConfigError(f"{name!r} must be greater than 0, got {val!r}")
    if out < 0:
        raise ConfigError(f"{name!r} must not be negative, got {val!r}")
    return out


@dataclass(frozen=True)
class Settings:
    key: str
    token: str
    board_id: str
    base_url: str = API_BASE
    timeout_s: float = 30.0
    max_retries: int = 0
    backoff_s: float = 1.0
    output_path: str = DEFAULT_OUTPUT_PATH

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Settings":
        """Build settings from a ``key``/``token``/``id`` mapping plus optional extras."""
        missing = [k for k in REQUIRED_KEYS if not data.get(k)]
        if missing:
            raise ConfigError(f"Missing required config key(s): {', '.join(missing)}")
        # unquoted YAML such as 0123 or 0x1f loads as int
        not_text = [k for k in REQUIRED_KEYS if not isinstance(data[k], str)]
        if not_text:
            raise ConfigError(
                f"Config key(s) {', '.join(not_text)} must be strings; quote them in the config file"
            )

        return cls(
            key=data["key"],
            token=data["token"],
            board_id=data["id"],
            base_url=str(data.get("base_url") or API_BASE).rstrip("/"),
            timeout_s=_coerce(data, "timeout_s", float, 30.0, positive=True),
            max_retries=_coerce(data, "max_retries", int, 0),
            backoff_s=_coerce(data, "backoff_s", float, 1.0),
            output_path=str(data.get("output_path") or DEFAULT_OUTPUT_PATH),
        )

    @classmethod
    def from_file(cls, path: str | Path) -> "Settings":
        p = Path(path)
        try:
            with p.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except FileNotFoundError as e:
            raise ConfigError(f"Config file not found: {p}") from e
        except yaml.YAMLError as e:
            raise ConfigError(f"Config file {p} is not valid YAML: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"Config file {p} must contain a mapping")
        return cls.from_mapping(data)

    @classmethod
    def from_env(cls, env_path: Optional[str | Path] = None) -> "Settings":
        load_env_file(env_path)
        data = {name: os.getenv(var) for var, name in ENV_KEYS.items()}
        missing = [var for var, name in ENV_KEYS.items() if name in REQUIRED_KEYS and not data[name]]
        if missing:
            raise ConfigError(f"Missing required env var(s): {', '.join(missing)}")
        return cls.from_mapping(data)

    def auth_params(self) -> dict[str, str]:
        return {"key": self.key, "token": self.token}

    def build_client(self, transport: httpx.BaseTransport | None = None) -> httpx.Client:
        return httpx.Client(
            base_url=self.base_url,
            headers={"Accept": "application/json"},
            timeout=httpx.Timeout(self.timeout_s),
            transport=transport,
        )


def load_settings(
    config_path: Optional[str | Path] = None,
    env_path: Optional[str | Path] = None,
) -> Settings:
    """YAML file if one is given or found, otherwise the environment (+ .env)."""
    path = config_path or os.getenv("TRELLO_CONFIG")
    if path:
        return Settings.from_file(path)
    default = Path.cwd() / DEFAULT_CONFIG_FILE
    if default.is_file():
        return Settings.from_file(default)
    return Settings.from_env(env_path)


@lru_cache(maxsize=None)
def get_settings(
    config_path: Optional[str | Path] = None,
    env_path: Optional[str | Path] = None,
) -> Settings:
    """Cached ``load_settings``; the first call reads, later calls reuse it."""
    return load_settings(config_path, env_path)


__all__ = ["API_BASE", "ConfigError", "Settings", "get_settings", "load_env_file", "load_settings"]
