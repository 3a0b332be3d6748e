from __future__ import annotations

from pathlib import Path

import pytest

from core.config import MAX_FILE_BYTES, ConfigError, load_config


def _write_config(tmp_path: Path, body: str) -> Path:
    config_dir = tmp_path / "config"
    config_dir.mkdir(parents=True, exist_ok=True)
    config_path = config_dir / "config.yaml"
    config_path.write_text(body.strip(), encoding="utf-8")
    return config_path


def test_load_config_reads_yaml(tmp_path: Path, monkeypatch) -> None:
    config_path = _write_config(
        tmp_path,
        """
backend:
  base_url: "http://tickets.internal:9000/"
wizard:
  advance_delay_seconds: 0.5
workspace:
  preserve_expansion_on_reload: false
""",
    )
    monkeypatch.delenv("INTAKE_API_BASE", raising=False)
    cfg = load_config(config_path)

    assert cfg.backend.base_url == "http://tickets.internal:9000"
    assert cfg.wizard.advance_delay_seconds == 0.5
    assert cfg.wizard.message_ttl_seconds == 5.0
    assert cfg.workspace.preserve_expansion_on_reload is False
    assert cfg.attachments.max_file_bytes == MAX_FILE_BYTES
    assert cfg.generator.reference_instant == "2026-01-13T10:00:00"


def test_env_overrides_backend_and_port(tmp_path: Path, monkeypatch) -> None:
    config_path = _write_config(
        tmp_path,
        """
backend:
  base_url: "http://localhost:8082"
server:
  port: 8000
""",
    )
    monkeypatch.setenv("INTAKE_API_BASE", "http://env-backend:8082")
    monkeypatch.setenv("INTAKE_PORT", "9100")
    cfg = load_config(config_path)
    assert cfg.backend.base_url == "http://env-backend:8082"
    assert cfg.server.port == 9100


def test_missing_config_file_raises(tmp_path: Path) -> None:
    with pytest.raises(ConfigError):
        load_config(tmp_path / "config" / "missing.yaml")


def test_non_http_backend_rejected(tmp_path: Path, monkeypatch) -> None:
    config_path = _write_config(tmp_path, 'backend:\n  base_url: "ftp://nope"')
    monkeypatch.delenv("INTAKE_API_BASE", raising=False)
    with pytest.raises(ConfigError):
        load_config(config_path)
