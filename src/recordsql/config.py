"""Configuration loading with environment variable substitution."""

import json
import os
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from recordsql.observability import LogLevel
from recordsql.sql import QuotingPolicy

ENV_VAR_PATTERN = re.compile(r"\$\{([A-Z_][A-Z0-9_]*)\}")

# Character set appended to every MySQL connection target
CHARSET = "utf8mb4"


def substitute_env_vars(value: Any) -> Any:
    """Recursively substitute ${VAR_NAME} patterns with environment variables."""
    if isinstance(value, str):
        def replace(match: re.Match[str]) -> str:
            var_name = match.group(1)
            env_value = os.environ.get(var_name)
            if env_value is None:
                raise ValueError(f"Environment variable {var_name} is not set")
            return env_value

        return ENV_VAR_PATTERN.sub(replace, value)
    elif isinstance(value, dict):
        return {k: substitute_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [substitute_env_vars(v) for v in value]
    return value


class DatabaseConfig(BaseModel):
    """Database connection settings."""

    backend: str = "mysql"  # mysql | sqlite
    user: str = "root"
    password: str = ""
    host: str = "127.0.0.1"
    port: int = 3306
    database: str = ""
    path: str | None = None  # For SQLite; ":memory:" for an in-memory database

    def dsn(self, redact: bool = False) -> str:
        """Connection target ``user:password@host:port/database?charset=...``."""
        if self.backend == "sqlite":
            return self.path or ""
        password = "****" if redact and self.password else self.password
        return (
            f"{self.user}:{password}@{self.host}:{self.port}/{self.database}"
            f"?charset={CHARSET}"
        )


class LoggingConfig(BaseModel):
    """Logging settings."""

    level: LogLevel = LogLevel.INFO
    format: str = "json"  # json | text


class Config(BaseModel):
    """Main configuration for recordsql."""

    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    quoting: QuotingPolicy = QuotingPolicy.LEGACY

    @classmethod
    def from_file(cls, path: str | Path) -> "Config":
        """Load configuration from a YAML or JSON file."""
        path = Path(path)
        with path.open() as f:
            if path.suffix in (".yaml", ".yml"):
                data = yaml.safe_load(f)
            else:
                data = json.load(f)

        data = substitute_env_vars(data or {})
        return cls.model_validate(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Config":
        """Load configuration from a dictionary."""
        data = substitute_env_vars(data)
        return cls.model_validate(data)
