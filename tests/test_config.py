from __future__ import annotations

from pathlib import Path

import pytest

from myqhome.core.config import AdapterConfig, load_config
from myqhome.core.errors import ConfigValidationError


def _write_config(tmp_path: Path, content: str) -> None:
    path = tmp_path / "cfg" / "myqhome" / "config.yaml"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "cfg"))
    monkeypatch.delenv("MYQHOME_ENDPOINT", raising=False)
    monkeypatch.delenv("MYQHOME_REQUEST_TIMEOUT_S", raising=False)


def test_defaults_without_config_file() -> None:
    loaded = load_config()
    assert loaded.config == AdapterConfig()
    assert loaded.config.endpoint == "https://myq.thomasmunduchira.com"
    assert loaded.config.request_timeout_s == 2.25
    assert loaded.warnings == ()


def test_user_config_file(tmp_path: Path) -> None:
    _write_config(
        tmp_path,
        """
endpoint: "https://myq.example.com/"
request_timeout_s: 5
manufacturer_name: LiftMaster
""",
    )
    config = load_config().config
    assert config.endpoint == "https://myq.example.com"
    assert config.request_timeout_s == 5.0
    assert config.manufacturer_name == "LiftMaster"
    assert config.dependent_service_name == "MyQ Service"


def test_empty_config_file_uses_defaults(tmp_path: Path) -> None:
    _write_config(tmp_path, "")
    assert load_config().config == AdapterConfig()


def test_duplicate_yaml_keys_rejected(tmp_path: Path) -> None:
    _write_config(
        tmp_path,
        """
endpoint: "https://a.example.com"
endpoint: "https://b.example.com"
""",
    )
    with pytest.raises(ConfigValidationError):
        load_config()


def test_unknown_key_rejected(tmp_path: Path) -> None:
    _write_config(tmp_path, "retries: 3\n")
    with pytest.raises(ConfigValidationError):
        load_config()


def test_non_positive_timeout_rejected(tmp_path: Path) -> None:
    _write_config(tmp_path, "request_timeout_s: 0\n")
    with pytest.raises(ConfigValidationError):
        load_config()


def test_non_http_endpoint_rejected(tmp_path: Path) -> None:
    _write_config(tmp_path, 'endpoint: "ftp://myq.example.com"\n')
    with pytest.raises(ConfigValidationError):
        load_config()


def test_root_must_be_mapping(tmp_path: Path) -> None:
    _write_config(tmp_path, "- endpoint\n")
    with pytest.raises(ConfigValidationError):
        load_config()


def test_env_overrides_file_with_warning(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    _write_config(tmp_path, 'endpoint: "https://file.example.com"\nrequest_timeout_s: 4\n')
    monkeypatch.setenv("MYQHOME_ENDPOINT", "http://localhost:8080/")
    monkeypatch.setenv("MYQHOME_REQUEST_TIMEOUT_S", "1.5")

    loaded = load_config()
    assert loaded.config.endpoint == "http://localhost:8080"
    assert loaded.config.request_timeout_s == 1.5
    assert len(loaded.warnings) == 2
    assert all("overrides" in warning for warning in loaded.warnings)


def test_env_without_file_has_no_warning(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MYQHOME_ENDPOINT", "http://localhost:8080")
    loaded = load_config()
    assert loaded.config.endpoint == "http://localhost:8080"
    assert loaded.warnings == ()


def test_invalid_env_timeout_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MYQHOME_REQUEST_TIMEOUT_S", "soon")
    with pytest.raises(ConfigValidationError):
        load_config()
