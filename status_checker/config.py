"""Configuration utilities for status-checker runs.

This module reads environment variables (optionally from an `.env` file) and
produces an application configuration object consumed across the project.

See `.env.example` for supported keys: `LOG_DIR`, `LOG_LEVEL`, `APP_NAME`,
`CHECK_WORKERS`, `CHECK_TIMEOUT_SECONDS`, `CHECK_RETRIES` and
`STATUS_OUTPUT`.

Usage example:

    from status_checker.config import load_config

    config = load_config()
    run_config = RunConfig(
        worker_count=config.worker_count,
        timeout_seconds=config.timeout_seconds,
        max_retries=config.max_retries,
    )
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, Mapping, MutableMapping, Optional, TypeVar

REPO_ROOT = Path(__file__).resolve().parents[1]
DEFAULT_ENV_FILE = REPO_ROOT / ".env"
DEFAULT_TIMEOUT_SECONDS = 5.0
DEFAULT_RETRIES = 0
DEFAULT_OUTPUT = "status.json"

_T = TypeVar("_T")


def _load_env_file(path: Path) -> Dict[str, str]:
    """Parse a dotenv-style file into a dictionary."""
    if not path.exists():
        return {}

    data: Dict[str, str] = {}
    for raw_line in path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        data[key.strip()] = value.strip().strip("\"'")
    return data


def _merge_envs(dotenv_values: Mapping[str, str], env: MutableMapping[str, str]) -> Dict[str, str]:
    """Merge dotenv values with the current environment, preferring os.environ."""
    merged = dict(dotenv_values)
    merged.update(env)  # os.environ wins
    return merged


def load_environment(env_file: Optional[Path] = None) -> Dict[str, str]:
    """Return the merged dotenv + process environment mapping."""
    target_file = env_file or DEFAULT_ENV_FILE
    return _merge_envs(_load_env_file(target_file), os.environ)


def _default_workers() -> int:
    return os.cpu_count() or 4


def _parse(values: Mapping[str, str], key: str, cast: Callable[[str], _T], default: _T) -> _T:
    raw = values.get(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw.strip())
    except ValueError as exc:
        raise ValueError(f"{key} has an invalid value: {raw!r}") from exc


@dataclass(frozen=True)
class AppConfig:
    """Application-level configuration values."""

    log_directory: Path
    log_level: str
    app_name: str = "status-checker"
    worker_count: int = 4
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    max_retries: int = DEFAULT_RETRIES
    output_path: Path = Path(DEFAULT_OUTPUT)


def load_config(env_file: Optional[Path] = None) -> AppConfig:
    """Load configuration values using environment defaults."""
    merged = load_environment(env_file)

    log_directory = Path(merged.get("LOG_DIR", REPO_ROOT / "logs"))
    if not log_directory.is_absolute():
        log_directory = REPO_ROOT / log_directory

    log_level = merged.get("LOG_LEVEL", "INFO").upper()

    return AppConfig(
        log_directory=log_directory,
        log_level=log_level,
        app_name=merged.get("APP_NAME", "status-checker"),
        worker_count=_parse(merged, "CHECK_WORKERS", int, _default_workers()),
        timeout_seconds=_parse(merged, "CHECK_TIMEOUT_SECONDS", float, DEFAULT_TIMEOUT_SECONDS),
        max_retries=_parse(merged, "CHECK_RETRIES", int, DEFAULT_RETRIES),
        output_path=Path(merged.get("STATUS_OUTPUT") or DEFAULT_OUTPUT),
    )


__all__ = ["AppConfig", "load_config", "load_environment", "REPO_ROOT"]
