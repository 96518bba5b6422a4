from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from assignment_core.hours import HoursConfig
from assignment_core.patterns import DEFAULT_MIN_CONSECUTIVE_WEEKS, DEFAULT_WINDOW_WEEKS


@dataclass(frozen=True)
class PatternConfig:
    window_weeks: int
    min_consecutive_weeks: int


@dataclass(frozen=True)
class RuntimeConfig:
    artifact_root: Path
    log_level: str
    patterns: PatternConfig
    hours: HoursConfig


def load_env(dotenv_path: str | Path | None = None) -> None:
    path = Path(dotenv_path) if dotenv_path else None
    if path and path.exists():
        load_dotenv(path)
        return
    load_dotenv()


def _env_int(name: str, default: int, *, minimum: int = 0) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}, got {value}")
    return value


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None
    if value < 0:
        raise ValueError(f"{name} must be >= 0, got {value}")
    return value


def pattern_config() -> PatternConfig:
    return PatternConfig(
        window_weeks=_env_int("HORARIOS_PATTERN_WINDOW_WEEKS", DEFAULT_WINDOW_WEEKS, minimum=1),
        min_consecutive_weeks=_env_int(
            "HORARIOS_MIN_CONSECUTIVE_WEEKS", DEFAULT_MIN_CONSECUTIVE_WEEKS, minimum=1
        ),
    )


def hours_config() -> HoursConfig:
    defaults = HoursConfig()
    return HoursConfig(
        rest_break_minutes=_env_int("HORARIOS_REST_BREAK_MINUTES", defaults.rest_break_minutes),
        rest_break_min_hours=_env_float("HORARIOS_REST_BREAK_MIN_HOURS", defaults.rest_break_min_hours),
    )


def runtime_config() -> RuntimeConfig:
    artifact_root = Path(os.getenv("HORARIOS_ARTIFACT_DIR", "./artifacts")).expanduser().resolve()
    log_level = os.getenv("HORARIOS_LOG_LEVEL", "INFO").strip().upper() or "INFO"
    return RuntimeConfig(
        artifact_root=artifact_root,
        log_level=log_level,
        patterns=pattern_config(),
        hours=hours_config(),
    )
