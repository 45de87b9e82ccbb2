"""
Bot configuration loading and validation.

Reads environment-style options, validates them against a schema and
normalizes them into a ReactConfig.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from .constants import K
from .utils import safe_float, safe_int

BASE_DIR = Path(__file__).resolve().parent.parent
DATA_DIR = BASE_DIR / "data"

DEFAULT_CONFIG: Dict[str, Any] = {
    K.STORE_SIZE: 200,
    K.THROTTLE_BASE_EXPIRATION_SECONDS: 300,
    K.THROTTLE_FREQUENCY_MULTIPLIER: 2.0,
    K.BRAIN_PATH: str(DATA_DIR / "brain.json"),
    K.BRAIN_FLUSH_INTERVAL_SECONDS: 60,
    K.LOG_LEVEL: "INFO",
}

CONFIG_SCHEMA: Dict[str, Tuple[str, bool]] = {
    K.STORE_SIZE: ("pos_int", True),
    K.THROTTLE_BASE_EXPIRATION_SECONDS: ("nonneg_int", True),
    K.THROTTLE_FREQUENCY_MULTIPLIER: ("pos_float", True),
    K.BRAIN_PATH: ("str", True),
    K.BRAIN_FLUSH_INTERVAL_SECONDS: ("pos_int", True),
    K.LOG_LEVEL: ("str", True),
}


class ConfigError(RuntimeError):
    pass


def resolve_repo_path(path: Union[str, Path]) -> Path:
    candidate = Path(path)
    if candidate.is_absolute() or candidate.drive:
        return candidate
    return BASE_DIR / candidate


@dataclass(frozen=True)
class ReactConfig:
    """Validated runtime settings."""
    store_size: int = 200
    throttle_base_expiration: int = 300
    throttle_frequency_multiplier: float = 2.0
    brain_path: Path = DATA_DIR / "brain.json"
    brain_flush_interval: int = 60
    log_level: str = "INFO"


def validate_and_normalize_config(data: Mapping[str, Any]) -> Dict[str, Any]:
    errors: List[str] = []
    normalized: Dict[str, Any] = {}

    for key, (type_name, required) in CONFIG_SCHEMA.items():
        value = data.get(key)
        if value is None or value == "":
            if required and key not in DEFAULT_CONFIG:
                errors.append(f"Missing required config key: {key}")
            else:
                normalized[key] = DEFAULT_CONFIG.get(key)
            continue
        if type_name == "pos_int":
            number = safe_int(value)
            if number is None or number <= 0:
                errors.append(f"{key} must be a positive integer")
            else:
                normalized[key] = number
        elif type_name == "nonneg_int":
            number = safe_int(value)
            if number is None or number < 0:
                errors.append(f"{key} must be a non-negative integer")
            else:
                normalized[key] = number
        elif type_name == "pos_float":
            real = safe_float(value)
            if real is None or real <= 0:
                errors.append(f"{key} must be a positive number")
            else:
                normalized[key] = real
        elif type_name == "str":
            if not isinstance(value, str) or not value.strip():
                errors.append(f"{key} must be a non-empty string")
            else:
                normalized[key] = value.strip()
        else:
            errors.append(f"Unknown config type for {key}")

    if errors:
        raise ConfigError("; ".join(errors))

    return normalized


def load_config(environ: Optional[Mapping[str, Any]] = None) -> ReactConfig:
    """Build a ReactConfig from the environment (or the given mapping)."""
    source = os.environ if environ is None else environ
    values = validate_and_normalize_config(
        {key: source.get(key) for key in CONFIG_SCHEMA}
    )
    return ReactConfig(
        store_size=values[K.STORE_SIZE],
        throttle_base_expiration=values[K.THROTTLE_BASE_EXPIRATION_SECONDS],
        throttle_frequency_multiplier=values[K.THROTTLE_FREQUENCY_MULTIPLIER],
        brain_path=resolve_repo_path(values[K.BRAIN_PATH]),
        brain_flush_interval=values[K.BRAIN_FLUSH_INTERVAL_SECONDS],
        log_level=values[K.LOG_LEVEL].upper(),
    )


def bot_token(environ: Optional[Mapping[str, Any]] = None) -> Optional[str]:
    source = os.environ if environ is None else environ
    return source.get(K.BOT_TOKEN) or source.get(K.BOT_TOKEN_FALLBACK)
