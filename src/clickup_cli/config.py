"""Runtime configuration for the ClickUp client and its response cache."""

from __future__ import annotations

import hashlib
import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_BASE_URL = "https://api.clickup.com/api/v2"
DEFAULT_CONFIG_PATH = Path("config.json")
DEFAULT_CACHE_NAMESPACE = "clickup-task-manager"


class ConfigurationError(ValueError):
    """Required credentials are missing or the config file is unreadable."""


@dataclass(slots=True)
class CredentialSettings:
    """Credential pair identifying the caller and the workspace."""

    api_key: str
    team_id: str


@dataclass(slots=True)
class HttpSettings:
    """Transport settings for the REST client."""

    base_url: str = DEFAULT_BASE_URL
    timeout_seconds: float | None = None


@dataclass(slots=True)
class CacheSettings:
    """Response cache settings."""

    directory: Path = field(default_factory=lambda: _default_cache_dir())
    namespace: str = DEFAULT_CACHE_NAMESPACE
    enabled: bool = True

    @classmethod
    def from_env(cls) -> CacheSettings:
        """Cache settings alone, usable without credentials."""

        cache_dir = os.getenv("CLICKUP_CACHE_DIR", "").strip()
        return cls(
            directory=Path(cache_dir).expanduser() if cache_dir else _default_cache_dir(),
            enabled=_env_bool("CLICKUP_CACHE_ENABLED", default=True),
        )


@dataclass(slots=True)
class LoggingSettings:
    """Root logger settings for the CLI."""

    level: int = logging.WARNING

    @classmethod
    def from_env(cls, verbose: bool = False) -> LoggingSettings:
        if verbose:
            return cls(level=logging.DEBUG)
        name = os.getenv("CLICKUP_LOG_LEVEL", "WARNING").strip().upper() or "WARNING"
        level = logging.getLevelName(name)
        if not isinstance(level, int):
            raise ConfigurationError(f"Invalid log level for CLICKUP_LOG_LEVEL: {name!r}")
        return cls(level=level)


@dataclass(slots=True)
class Settings:
    """Application settings grouped by concern."""

    credentials: CredentialSettings
    http: HttpSettings = field(default_factory=HttpSettings)
    cache: CacheSettings = field(default_factory=CacheSettings)

    @property
    def team_id(self) -> str:
        return self.credentials.team_id

    @property
    def cache_namespace(self) -> str:
        """Cache namespace for this workspace and API key.

        Team-scoped reads (spaces, search, members) and key-scoped reads
        (the authorized user) share key names across workspaces, so each
        credential pair gets its own directory.
        """

        scope = f"{self.credentials.team_id}\n{self.credentials.api_key}"
        digest = hashlib.sha256(scope.encode("utf-8")).hexdigest()[:16]
        return f"{self.cache.namespace}/{digest}"

    @classmethod
    def from_env(cls, config_path: Path | None = None) -> Settings:
        """Load credentials from the config file and the rest from environment.

        ``CLICKUP_API_KEY`` and ``CLICKUP_TEAM_ID`` take precedence over the
        file, so the file may be absent when both are exported.
        """

        path = config_path or Path(os.getenv("CLICKUP_CONFIG_PATH", str(DEFAULT_CONFIG_PATH)))
        file_api_key, file_team_id = _read_config_file(path)
        api_key = os.getenv("CLICKUP_API_KEY", "").strip() or file_api_key
        team_id = os.getenv("CLICKUP_TEAM_ID", "").strip() or file_team_id

        missing = [
            name
            for name, value in (("clickup.apiKey", api_key), ("clickup.teamId", team_id))
            if not value
        ]
        if missing:
            raise ConfigurationError(
                f"Missing required config in {path}: {', '.join(missing)}. "
                "Provide {\"clickup\": {\"apiKey\", \"teamId\"}} or set "
                "CLICKUP_API_KEY / CLICKUP_TEAM_ID.",
            )

        return cls(
            credentials=CredentialSettings(api_key=str(api_key), team_id=str(team_id)),
            http=HttpSettings(
                base_url=os.getenv("CLICKUP_BASE_URL", DEFAULT_BASE_URL).rstrip("/"),
                timeout_seconds=_env_positive_float("CLICKUP_HTTP_TIMEOUT_SECONDS"),
            ),
            cache=CacheSettings.from_env(),
        )


def parse_credentials(raw: object) -> tuple[str | None, str | None]:
    """Extract (api_key, team_id) from either supported config shape.

    Current shape: ``{"clickup": {"apiKey": ..., "teamId": ...}}``.
    Legacy shape: ``{"mcpServer": {"env": {"CLICKUP_API_KEY": ..., "CLICKUP_TEAM_ID": ...}}}``
    with the team id optionally at the top level as ``teamId``.
    """

    if not isinstance(raw, dict):
        return None, None

    section = raw.get("clickup")
    if isinstance(section, dict):
        return _clean(section.get("apiKey")), _clean(section.get("teamId"))

    server = raw.get("mcpServer")
    env = server.get("env") if isinstance(server, dict) else None
    if isinstance(env, dict):
        team_id = _clean(env.get("CLICKUP_TEAM_ID")) or _clean(raw.get("teamId"))
        return _clean(env.get("CLICKUP_API_KEY")), team_id

    return None, None


def _read_config_file(path: Path) -> tuple[str | None, str | None]:
    if not path.exists():
        return None, None
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as error:
        raise ConfigurationError(f"Cannot read config file {path}: {error}") from error
    return parse_credentials(raw)


def _clean(value: object) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _default_cache_dir() -> Path:
    xdg = os.environ.get("XDG_CACHE_HOME")
    if xdg:
        return Path(xdg) / "clickup-cli"
    return Path.home() / ".cache" / "clickup-cli"


def _env_positive_float(name: str) -> float | None:
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    try:
        parsed = float(value)
    except ValueError as error:
        raise ConfigurationError(f"Invalid numeric value for {name}: {value!r}") from error
    if parsed <= 0:
        raise ConfigurationError(f"{name} must be > 0.")
    return parsed


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    raise ConfigurationError(f"Invalid boolean value for {name}: {value!r}")
