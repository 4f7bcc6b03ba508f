from __future__ import annotations

import json
import logging
from dataclasses import dataclass
import os
from pathlib import Path
from typing import Any, Callable

from lrclib_lyrics.lyrics.parse import PLACEHOLDER
from lrclib_lyrics.sources.lrclib import DEFAULT_API_URL

logger = logging.getLogger(__name__)

_ENV_PREFIX = "LRCLIB_LYRICS_"


def _config_dir() -> Path:
    xdg = os.getenv("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "lrclib-lyrics"
    return Path.home() / ".config" / "lrclib-lyrics"


def _config_file() -> Path:
    return _config_dir() / "config.json"


@dataclass(frozen=True)
class AppConfig:
    config_dir: Path

    # API
    api_url: str
    api_timeout_s: float
    api_max_retries: int
    api_backoff_base_s: float

    # Parsing
    placeholder: str

    # Challenge solver
    solver_check_interval: int
    solver_timeout_s: float | None  # None = unbounded


def _read_file_settings(cfg_path: Path) -> dict[str, Any]:
    if not cfg_path.exists():
        return {}
    try:
        data = json.loads(cfg_path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.warning("Ignoring unreadable config %s: %s", cfg_path, e)
        return {}
    return data if isinstance(data, dict) else {}


def _optional_float(raw: Any) -> float | None:
    if raw is None or str(raw).strip().lower() in ("", "none"):
        return None
    value = float(raw)
    if value <= 0:
        raise ValueError(f"must be > 0, got {value}")
    return value


def load_config() -> AppConfig:
    # Priority: config.json → LRCLIB_LYRICS_* → default
    config_dir = _config_dir()
    file_settings = _read_file_settings(config_dir / "config.json")

    def setting(key: str, default: Any, conv: Callable[[Any], Any]) -> Any:
        raw = file_settings.get(key)
        if raw is None:
            raw = os.getenv(_ENV_PREFIX + key.upper())
        if raw is None:
            return default
        try:
            return conv(raw)
        except (TypeError, ValueError):
            logger.warning("Invalid value for %s: %r, using %r", key, raw, default)
            return default

    return AppConfig(
        config_dir=config_dir,
        api_url=setting("api_url", DEFAULT_API_URL, str),
        api_timeout_s=setting("api_timeout", 10.0, float),
        api_max_retries=setting("api_max_retries", 3, int),
        api_backoff_base_s=setting("api_backoff_base", 1.0, float),
        placeholder=setting("placeholder", PLACEHOLDER, str) or PLACEHOLDER,
        solver_check_interval=max(setting("solver_check_interval", 10_000, int), 1),
        solver_timeout_s=setting("solver_timeout", None, _optional_float),
    )


def save_config_value(key: str, value: str | int | float | None) -> None:
    cfg_path = _config_file()
    cfg_path.parent.mkdir(parents=True, exist_ok=True)
    data = _read_file_settings(cfg_path)
    data[key] = value
    cfg_path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
