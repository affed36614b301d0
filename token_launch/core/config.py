import json
import os
from pathlib import Path
from typing import Any

from token_launch.core.constants.base import (
    DEFAULT_ALLOCATION_REGISTRY_URL,
    DEFAULT_HTTP_TIMEOUT,
    DEFAULT_SALT_SEARCH_TIMEOUT,
    DEFAULT_SALT_SEARCH_URL,
)

_CONFIG_ENV_KEYS = ("TOKEN_LAUNCH_CONFIG_PATH", "TOKEN_LAUNCH_CONFIG")
_DEFAULT_CONFIG_FILENAME = "config.json"


def _find_project_root(start: Path) -> Path | None:
    cur = start.resolve()
    for parent in [cur, *cur.parents]:
        if (parent / "pyproject.toml").exists():
            return parent
    return None


def _project_root() -> Path | None:
    return _find_project_root(Path.cwd()) or _find_project_root(Path(__file__).parent)


def resolve_config_path(path: str | Path | None = None) -> Path:
    if path is not None:
        return Path(path).expanduser()

    env_path = next(
        (os.getenv(k, "").strip() for k in _CONFIG_ENV_KEYS if os.getenv(k)), ""
    )
    if env_path:
        p = Path(env_path).expanduser()
        if p.is_absolute():
            return p
        root = _project_root()
        return (root / p) if root else p

    root = _project_root()
    return (root / _DEFAULT_CONFIG_FILENAME) if root else Path(_DEFAULT_CONFIG_FILENAME)


def load_config_json(
    path: str | Path | None = None, *, require_exists: bool = False
) -> dict[str, Any]:
    cfg_path = resolve_config_path(path)
    if not cfg_path.exists():
        if require_exists:
            raise FileNotFoundError(f"Config file not found: {cfg_path}")
        return {}
    try:
        data = json.loads(cfg_path.read_text())
    except json.JSONDecodeError as exc:
        raise ValueError(f"Config file is not valid JSON: {cfg_path}") from exc
    return data if isinstance(data, dict) else {}


CONFIG: dict[str, Any] = load_config_json()


def set_config(config: dict[str, Any]) -> None:
    """Replace the global CONFIG dict in-place.

    This allows code that imported CONFIG at module import time to see updates.
    """
    CONFIG.clear()
    CONFIG.update(config)


def load_config(
    path: str | Path | None = None, *, require_exists: bool = False
) -> None:
    """Load config from disk into the global CONFIG dict."""
    set_config(load_config_json(path, require_exists=require_exists))


def _services() -> dict[str, Any]:
    services = CONFIG.get("services", {})
    return services if isinstance(services, dict) else {}


def get_salt_search_url() -> str:
    url = _services().get("salt_search_url")
    if url:
        return str(url).strip().rstrip("/")
    return os.environ.get("TOKEN_LAUNCH_SALT_SEARCH_URL", DEFAULT_SALT_SEARCH_URL)


def get_allocation_registry_url() -> str:
    url = _services().get("allocation_registry_url")
    if url:
        return str(url).strip().rstrip("/")
    return DEFAULT_ALLOCATION_REGISTRY_URL


def get_http_timeout() -> float:
    value = _services().get("http_timeout")
    return float(value) if value is not None else DEFAULT_HTTP_TIMEOUT


def get_salt_search_timeout() -> float:
    value = _services().get("salt_search_timeout")
    return float(value) if value is not None else DEFAULT_SALT_SEARCH_TIMEOUT


def get_token_bytecode_paths() -> dict[str, Path]:
    """Generation -> file holding the hex token creation bytecode.

    Relative paths resolve against the project root.
    """
    raw = CONFIG.get("artifacts", {}).get("token_bytecode", {})
    if not isinstance(raw, dict):
        return {}
    root = _project_root()
    out: dict[str, Path] = {}
    for generation, path in raw.items():
        p = Path(str(path)).expanduser()
        if not p.is_absolute() and root is not None:
            p = root / p
        out[str(generation)] = p
    return out
