from __future__ import annotations

from pathlib import Path

import pytest

import token_launch.core.config as config
from token_launch.core.constants.base import (
    DEFAULT_HTTP_TIMEOUT,
    DEFAULT_SALT_SEARCH_TIMEOUT,
    DEFAULT_SALT_SEARCH_URL,
)


def test_resolve_config_path_defaults_to_repo_root(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.delenv("TOKEN_LAUNCH_CONFIG_PATH", raising=False)
    monkeypatch.delenv("TOKEN_LAUNCH_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path)

    repo_root = Path(__file__).resolve().parents[2]
    assert config.resolve_config_path() == repo_root / "config.json"


def test_resolve_config_path_env_relative_is_repo_relative(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.setenv("TOKEN_LAUNCH_CONFIG_PATH", "config.example.json")
    monkeypatch.chdir(tmp_path)

    repo_root = Path(__file__).resolve().parents[2]
    assert config.resolve_config_path() == repo_root / "config.example.json"


def test_load_config_json_supports_env_override(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.setenv("TOKEN_LAUNCH_CONFIG_PATH", "config.example.json")
    monkeypatch.chdir(tmp_path)

    cfg = config.load_config_json()
    services = cfg.get("services")
    assert isinstance(services, dict)
    assert services["salt_search_url"] == DEFAULT_SALT_SEARCH_URL


def test_load_config_json_missing_file(tmp_path: Path) -> None:
    assert config.load_config_json(tmp_path / "nope.json") == {}
    with pytest.raises(FileNotFoundError):
        config.load_config_json(tmp_path / "nope.json", require_exists=True)


def test_load_config_json_rejects_invalid_json(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text("{not json")
    with pytest.raises(ValueError, match="not valid JSON"):
        config.load_config_json(path)


def test_service_defaults(restore_global_config: None, monkeypatch) -> None:
    monkeypatch.delenv("TOKEN_LAUNCH_SALT_SEARCH_URL", raising=False)
    config.set_config({})
    assert config.get_salt_search_url() == DEFAULT_SALT_SEARCH_URL
    assert config.get_http_timeout() == DEFAULT_HTTP_TIMEOUT
    assert config.get_salt_search_timeout() == DEFAULT_SALT_SEARCH_TIMEOUT
    assert config.get_token_bytecode_paths() == {}


def test_service_overrides(restore_global_config: None) -> None:
    config.set_config(
        {
            "services": {
                "salt_search_url": "https://salts.example.com/ ",
                "allocation_registry_url": "https://registry.example.com/api/",
                "http_timeout": "5",
                "salt_search_timeout": 2,
            }
        }
    )
    assert config.get_salt_search_url() == "https://salts.example.com"
    assert config.get_allocation_registry_url() == "https://registry.example.com/api"
    assert config.get_http_timeout() == 5.0
    assert config.get_salt_search_timeout() == 2.0


def test_bytecode_paths_resolve_against_repo_root(restore_global_config: None) -> None:
    config.set_config(
        {
            "artifacts": {
                "token_bytecode": {"v4": "artifacts/token.hex", "v3_1": "/abs/token.hex"}
            }
        }
    )
    repo_root = Path(__file__).resolve().parents[2]
    paths = config.get_token_bytecode_paths()
    assert paths["v4"] == repo_root / "artifacts/token.hex"
    assert paths["v3_1"] == Path("/abs/token.hex")
