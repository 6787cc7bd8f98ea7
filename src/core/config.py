"""Core configuration.

Why here:
- Centralizes environment variables (pydantic-settings) without polluting the CLI.
- Lets adapters (HTTP client, dispatcher) read the same knobs consistently.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.domain.errors import InvalidURL
from core.domain.urls import validate_url


def get_user_config_dir() -> Path:
    """Per-user configuration directory (cross-platform, no dependencies)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "posthaste"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "posthaste"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "posthaste"
    return Path.home() / ".config" / "posthaste"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str], env_path: Path | None = None) -> Path:
    """Write/update variables in the user's global .env."""

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# posthaste user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class AppSettings(BaseSettings):
    """Central application settings.

    Why pydantic-settings:
    - Typing + validation at the edge (env vars) keeps the Core free of parsing.
    - One configuration contract shared by the CLI and the adapters.
    """

    model_config = SettingsConfigDict(
        env_prefix="POSTHASTE_",
        extra="ignore",
        case_sensitive=False,
        # Order: project first (dev), then the user's global config.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    input_path: Path = Field(
        default=Path("./input.txt"),
        description="JSON file holding the list of targets ([{\"location\": ...}]).",
    )
    max_concurrency: int = Field(
        default=10,
        ge=1,
        le=1000,
        description="Maximum number of requests in flight at the same time.",
    )
    request_timeout_seconds: float = Field(
        default=5.0,
        gt=0,
        description="Deadline for a single request, send and body read included (seconds).",
    )
    allowed_destinations: list[str] = Field(
        default_factory=lambda: ["https://bar.com"],
        description="Validated addresses that are actually contacted (exact match).",
    )
    allow_any_destination: bool = Field(
        default=False,
        description="Disable the destination allow-list and contact every valid target.",
    )
    payload_data: str = Field(
        default="example data",
        description="Value sent as `data` in the JSON request body.",
    )

    max_idle_connections: int = Field(
        default=100,
        ge=0,
        description="Idle (keep-alive) connections kept in the shared pool.",
    )
    idle_connection_timeout_seconds: float = Field(
        default=90.0,
        gt=0,
        description="How long an idle pooled connection is kept (seconds).",
    )
    handshake_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Timeout for establishing a connection, TLS handshake included (seconds).",
    )
    user_agent: str = Field(
        default="posthaste/0.1",
        min_length=1,
        description="User-Agent sent with every request.",
    )

    log_level: str = Field(
        default="INFO",
        description="Logging level name (DEBUG, INFO, WARNING, ...).",
    )

    @field_validator("allowed_destinations")
    @classmethod
    def normalize_destinations(cls, value: list[str]) -> list[str]:
        # Targets are compared after validation, so the allow-list must be too.
        try:
            return [validate_url(url) for url in value]
        except InvalidURL as exc:
            raise ValueError(str(exc)) from exc
