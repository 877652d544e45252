"""Process configuration, resolved once at startup.

Values come from the environment, with a ``.env`` file in the working
directory filling in anything the environment leaves unset.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

DEFAULT_PROJECT = "v1"
DEFAULT_BASE_URL = "https://api.jsondb.cloud"
DEFAULT_PORT = 3100
DEFAULT_HOST = "127.0.0.1"
DEFAULT_TIMEOUT = 30.0

TRANSPORT_STDIO = "stdio"
TRANSPORT_HTTP = "http"

MISSING_API_KEY_MESSAGE = (
    "JSONDB_API_KEY environment variable is required.\n\n"
    "Set it in your MCP server configuration:\n"
    '  "env": { "JSONDB_API_KEY": "jdb_sk_live_..." }\n\n'
    "Get an API key from your jsondb.cloud dashboard."
)


class ConfigError(Exception):
    """Raised when the process cannot start with the given configuration."""


@dataclass(frozen=True)
class Config:
    api_key: str
    project: str = DEFAULT_PROJECT
    base_url: str = DEFAULT_BASE_URL
    transport: str = TRANSPORT_STDIO
    port: int = DEFAULT_PORT
    host: str = DEFAULT_HOST
    timeout: float = DEFAULT_TIMEOUT
    log_level: str = "INFO"

    @property
    def project_url(self) -> str:
        return f"{self.base_url}/{self.project}"


def read_env_file(path: Path) -> dict[str, str]:
    """Parse KEY=VALUE lines from a .env file. Missing file yields {}."""
    values: dict[str, str] = {}
    if not path.exists():
        return values
    for line in path.read_text().splitlines():
        line = line.strip()
        if line and not line.startswith("#") and "=" in line:
            key, _, value = line.partition("=")
            values[key.strip()] = value.strip()
    return values


def load_config(
    environ: Optional[Mapping[str, str]] = None,
    env_file: Optional[Path] = None,
) -> Config:
    """Build the immutable Config for this process.

    Args:
        environ: Variables to read. Defaults to ``os.environ``.
        env_file: Optional .env path. Defaults to ``./.env``; its values
            never override ``environ``.

    Raises:
        ConfigError: if the API key is missing, a numeric value is malformed
            or the log level is unknown.
    """
    env = read_env_file(env_file if env_file is not None else Path.cwd() / ".env")
    env.update(os.environ if environ is None else environ)

    api_key = env.get("JSONDB_API_KEY", "").strip()
    if not api_key:
        raise ConfigError(MISSING_API_KEY_MESSAGE)

    project = env.get("JSONDB_PROJECT") or env.get("JSONDB_NAMESPACE") or DEFAULT_PROJECT
    base_url = (env.get("JSONDB_BASE_URL") or DEFAULT_BASE_URL).rstrip("/")
    transport = TRANSPORT_HTTP if env.get("JSONDB_MCP_TRANSPORT") == TRANSPORT_HTTP else TRANSPORT_STDIO

    raw_port = env.get("JSONDB_MCP_PORT") or str(DEFAULT_PORT)
    try:
        port = int(raw_port)
    except ValueError:
        raise ConfigError(f"JSONDB_MCP_PORT must be an integer, got {raw_port!r}")

    raw_timeout = env.get("JSONDB_TIMEOUT") or str(DEFAULT_TIMEOUT)
    try:
        timeout = float(raw_timeout)
    except ValueError:
        raise ConfigError(f"JSONDB_TIMEOUT must be a number of seconds, got {raw_timeout!r}")

    log_level = (env.get("JSONDB_MCP_LOG_LEVEL") or "INFO").upper()
    # getLevelName maps known names to their int and unknown ones to a string
    if not isinstance(logging.getLevelName(log_level), int):
        raise ConfigError(
            f"JSONDB_MCP_LOG_LEVEL must be a logging level such as DEBUG or INFO, got {log_level!r}"
        )

    return Config(
        api_key=api_key,
        project=project,
        base_url=base_url,
        transport=transport,
        port=port,
        host=env.get("JSONDB_MCP_HOST") or DEFAULT_HOST,
        timeout=timeout,
        log_level=log_level,
    )
