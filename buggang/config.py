# Bug Gang Scheduler: configuration
# Override paths and server settings via buggang.yaml, env vars or CLI args.

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional

import yaml

from .errors import ConfigError

CONFIG_PATH = Path.home() / ".config" / "buggang" / "buggang.yaml"
DEFAULT_DB = "~/.local/share/buggang/tasks.db"

VALID_VIEWS = ("list", "board")


def expand_db_path(db_path: str) -> str:
    """Expand ~ in a database path. ':memory:' is passed through."""
    if db_path == ":memory:":
        return db_path
    return str(Path(db_path).expanduser())


@dataclass
class Config:
    """Runtime configuration for the scheduler."""

    # Storage
    db_path: str = DEFAULT_DB

    # Behavior
    drag_threshold: float = 50.0
    default_view: str = "board"

    # Logging
    log_level: str = "INFO"

    # HTTP API
    host: str = "127.0.0.1"
    port: int = 3000
    api_secret: str = ""

    def resolve(self) -> "Config":
        """Apply env overrides, expand ~ and check values."""
        env_db = os.environ.get("BUGGANG_DB")
        if env_db:
            self.db_path = env_db
        env_secret = os.environ.get("BUGGANG_API_SECRET")
        if env_secret:
            self.api_secret = env_secret

        self.db_path = expand_db_path(self.db_path)

        self.default_view = str(self.default_view).strip().lower()
        if self.default_view not in VALID_VIEWS:
            raise ConfigError(
                f"default_view must be one of {VALID_VIEWS}, got {self.default_view!r}"
            )
        try:
            self.drag_threshold = float(self.drag_threshold)
            self.port = int(self.port)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid numeric setting: {e}") from e
        if self.drag_threshold < 0:
            raise ConfigError("drag_threshold must not be negative")
        self.log_level = str(self.log_level).upper()
        return self

    @classmethod
    def load(cls, path: Optional[str] = None) -> "Config":
        """Load config from a YAML file, falling back to defaults when it doesn't exist."""
        cfg_path = Path(path).expanduser() if path else CONFIG_PATH
        data = {}
        if cfg_path.exists():
            try:
                with open(cfg_path, "r") as f:
                    data = yaml.safe_load(f) or {}
            except (OSError, yaml.YAMLError) as e:
                raise ConfigError(f"Cannot read config {cfg_path}: {e}") from e
            if not isinstance(data, dict):
                raise ConfigError(f"Config {cfg_path} must contain a mapping")
        elif path:
            raise ConfigError(f"Config file not found: {cfg_path}")
        known = {f.name for f in fields(cls)}
        cfg = cls(**{k: v for k, v in data.items() if k in known})
        return cfg.resolve()
