from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

from dotenv import dotenv_values

# プロジェクトルートの .env
_DEFAULT_ENV_PATH = Path(__file__).parent.parent.parent / ".env"

_PREFIX = "UNIQUE_ID_"
_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


class SettingsError(Exception):
    pass


@dataclass(frozen=True)
class AppSettings:
    log_level: str = "INFO"
    log_serialize: bool = False
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_reload: bool = False

    @classmethod
    def from_env(cls, env_path: Optional[Path] = None) -> "AppSettings":
        """
        Load settings from a .env file and the process environment.

        Environment variables take precedence over the .env file. Only keys
        prefixed with UNIQUE_ID_ are read.
        """
        values = _load_values(env_path or _DEFAULT_ENV_PATH)
        defaults = cls()
        return cls(
            log_level=values.get("LOG_LEVEL", defaults.log_level).upper(),
            log_serialize=_to_bool("LOG_SERIALIZE", values.get("LOG_SERIALIZE"), defaults.log_serialize),
            api_host=values.get("API_HOST", defaults.api_host),
            api_port=_to_int("API_PORT", values.get("API_PORT"), defaults.api_port),
            api_reload=_to_bool("API_RELOAD", values.get("API_RELOAD"), defaults.api_reload),
        )


def _load_values(env_path: Path) -> Dict[str, str]:
    merged: Dict[str, str] = {}
    if env_path.exists():
        for key, value in dotenv_values(env_path).items():
            if value is not None:
                merged[key] = value
    merged.update(os.environ)
    return {key[len(_PREFIX):]: value for key, value in merged.items() if key.startswith(_PREFIX)}


def _to_bool(key: str, raw: Optional[str], default: bool) -> bool:
    if raw is None:
        return default
    normalized = raw.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise SettingsError(f"{_PREFIX}{key} must be a boolean: {raw!r}")


def _to_int(key: str, raw: Optional[str], default: int) -> int:
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        raise SettingsError(f"{_PREFIX}{key} must be an integer: {raw!r}") from None
