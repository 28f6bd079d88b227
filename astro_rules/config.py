"""Runtime settings read from the environment."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class Settings:
    include_minor_aspects: bool = True
    key_aspect_limit: int = 10
    log_level: str = "WARNING"
    output_dir: Path = Path("outputs")


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """
    Build Settings from ASTRO_RULES_* variables.

    Raises ValueError naming the variable when a value cannot be parsed.
    """
    env = os.environ if environ is None else environ
    defaults = Settings()
    return Settings(
        include_minor_aspects=_flag(env, "ASTRO_RULES_INCLUDE_MINOR", defaults.include_minor_aspects),
        key_aspect_limit=_positive_int(env, "ASTRO_RULES_KEY_ASPECTS", defaults.key_aspect_limit),
        log_level=_log_level(env, "ASTRO_RULES_LOG_LEVEL", defaults.log_level),
        output_dir=Path(env.get("ASTRO_RULES_OUTPUT_DIR") or defaults.output_dir).expanduser(),
    )


def _flag(env: Mapping[str, str], name: str, default: bool) -> bool:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(f"{name} must be a boolean flag, got {raw!r}")


def _positive_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
    if value < 1:
        raise ValueError(f"{name} must be at least 1, got {value}")
    return value


def _log_level(env: Mapping[str, str], name: str, default: str) -> str:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    level = raw.strip().upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ValueError(f"{name} is not a logging level: {raw!r}")
    return level
