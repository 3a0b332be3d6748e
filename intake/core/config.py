from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv


class ConfigError(RuntimeError):
    pass


MAX_FILE_BYTES = 10 * 1024 * 1024
ACCEPTED_FILE_HINT = "image/*,.pdf,.doc,.docx,.xls,.xlsx,.txt"


@dataclass(slots=True)
class BackendConfig:
    base_url: str = "http://localhost:8082"
    timeout_seconds: int = 30


@dataclass(slots=True)
class ServerConfig:
    host: str = "0.0.0.0"
    port: int = 8000


@dataclass(slots=True)
class LoggingConfig:
    level: str = "INFO"
    directory: str = "logs"
    file_name: str = "intake.log"
    max_bytes: int = 10_000_000
    backup_count: int = 10
    json_console: bool = False


@dataclass(slots=True)
class WizardConfig:
    advance_delay_seconds: float = 1.0
    message_ttl_seconds: float = 5.0


@dataclass(slots=True)
class AttachmentConfig:
    max_file_bytes: int = MAX_FILE_BYTES
    accept: str = ACCEPTED_FILE_HINT


@dataclass(slots=True)
class WorkspaceConfig:
    preserve_expansion_on_reload: bool = True


@dataclass(slots=True)
class GeneratorConfig:
    reference_instant: str = "2026-01-13T10:00:00"
    minute_mark: int = 35


@dataclass(slots=True)
class SessionConfig:
    cookie_name: str = "intake_session"
    ttl_seconds: int = 3600


@dataclass(slots=True)
class AppConfig:
    backend: BackendConfig = field(default_factory=BackendConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    wizard: WizardConfig = field(default_factory=WizardConfig)
    attachments: AttachmentConfig = field(default_factory=AttachmentConfig)
    workspace: WorkspaceConfig = field(default_factory=WorkspaceConfig)
    generator: GeneratorConfig = field(default_factory=GeneratorConfig)
    sessions: SessionConfig = field(default_factory=SessionConfig)


def _get_env_str(key: str, fallback: str | None = None) -> str | None:
    value = os.getenv(key)
    if value is None:
        return fallback
    cleaned = value.strip()
    return cleaned if cleaned else fallback


def _as_bool(value: Any, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in {"1", "true", "yes", "on"}


def _as_int(value: Any, default: int) -> int:
    if value is None:
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _as_float(value: Any, default: float) -> float:
    if value is None:
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _deep_get(data: dict[str, Any], *keys: str, default: Any = None) -> Any:
    node: Any = data
    for key in keys:
        if not isinstance(node, dict):
            return default
        node = node.get(key)
        if node is None:
            return default
    return node


def _load_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise ConfigError(f"Missing config file: {path}")
    with path.open("r", encoding="utf-8") as handle:
        raw = yaml.safe_load(handle) or {}
    if not isinstance(raw, dict):
        raise ConfigError("Config root must be a mapping")
    return raw


def load_config(config_path: Path) -> AppConfig:
    env_path = config_path.parent.parent / ".env"
    load_dotenv(env_path)
    raw = _load_yaml(config_path)

    base_url = str(
        _get_env_str("INTAKE_API_BASE", _deep_get(raw, "backend", "base_url", default="http://localhost:8082"))
    ).rstrip("/")
    if not base_url.startswith(("http://", "https://")):
        raise ConfigError(f"backend.base_url must be an http(s) address, got {base_url!r}")

    backend_cfg = BackendConfig(
        base_url=base_url,
        timeout_seconds=_as_int(_deep_get(raw, "backend", "timeout_seconds"), 30),
    )

    server_cfg = ServerConfig(
        host=str(_get_env_str("INTAKE_HOST", _deep_get(raw, "server", "host", default="0.0.0.0"))),
        port=_as_int(
            _get_env_str("INTAKE_PORT", None),
            _as_int(_deep_get(raw, "server", "port"), 8000),
        ),
    )

    logging_cfg = LoggingConfig(
        level=str(_get_env_str("LOG_LEVEL", _deep_get(raw, "logging", "level", default="INFO"))),
        directory=str(_deep_get(raw, "logging", "directory", default="logs")),
        file_name=str(_deep_get(raw, "logging", "file_name", default="intake.log")),
        max_bytes=_as_int(_deep_get(raw, "logging", "max_bytes"), 10_000_000),
        backup_count=_as_int(_deep_get(raw, "logging", "backup_count"), 10),
        json_console=_as_bool(_deep_get(raw, "logging", "json_console"), False),
    )

    wizard_cfg = WizardConfig(
        advance_delay_seconds=_as_float(_deep_get(raw, "wizard", "advance_delay_seconds"), 1.0),
        message_ttl_seconds=_as_float(_deep_get(raw, "wizard", "message_ttl_seconds"), 5.0),
    )

    attachment_cfg = AttachmentConfig(
        max_file_bytes=_as_int(_deep_get(raw, "attachments", "max_file_bytes"), MAX_FILE_BYTES),
        accept=str(_deep_get(raw, "attachments", "accept", default=ACCEPTED_FILE_HINT)),
    )

    workspace_cfg = WorkspaceConfig(
        preserve_expansion_on_reload=_as_bool(
            _deep_get(raw, "workspace", "preserve_expansion_on_reload"), True
        ),
    )

    generator_cfg = GeneratorConfig(
        reference_instant=str(
            _deep_get(raw, "generator", "reference_instant", default="2026-01-13T10:00:00")
        ),
        minute_mark=_as_int(_deep_get(raw, "generator", "minute_mark"), 35),
    )

    session_cfg = SessionConfig(
        cookie_name=str(_deep_get(raw, "sessions", "cookie_name", default="intake_session")),
        ttl_seconds=_as_int(_deep_get(raw, "sessions", "ttl_seconds"), 3600),
    )

    return AppConfig(
        backend=backend_cfg,
        server=server_cfg,
        logging=logging_cfg,
        wizard=wizard_cfg,
        attachments=attachment_cfg,
        workspace=workspace_cfg,
        generator=generator_cfg,
        sessions=session_cfg,
    )
