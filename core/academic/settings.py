"""Environment-driven knobs shared by the Django settings module and the calculators."""

from __future__ import annotations

from dataclasses import dataclass
import math
import os
from typing import List

_TRUTHY = {"1", "true", "yes", "on"}


def env_str(name: str, default: str = "") -> str:
    return str(os.environ.get(name, default)).strip()


def env_bool(name: str, default: bool = False) -> bool:
    raw = env_str(name)
    if not raw:
        return default
    return raw.lower() in _TRUTHY


def env_int(name: str, default: int) -> int:
    try:
        return int(env_str(name) or default)
    except (TypeError, ValueError):
        return int(default)


def env_float(name: str, default: float) -> float:
    try:
        value = float(env_str(name) or default)
    except (TypeError, ValueError):
        return float(default)
    # "nan"/"inf" parse as floats but are never usable thresholds.
    return value if math.isfinite(value) else float(default)


def env_list(name: str, default: str = "") -> List[str]:
    return [part.strip() for part in env_str(name, default).split(",") if part.strip()]


@dataclass(frozen=True)
class GradingSettings:
    budget_tolerance: float = 0.01
    budget_close_pct: float = 2.0
    recent_attempts: int = 5


def get_grading_settings() -> GradingSettings:
    return GradingSettings(
        budget_tolerance=max(env_float("FINLIT_BUDGET_TOLERANCE", 0.01), 0.0),
        budget_close_pct=max(env_float("FINLIT_BUDGET_CLOSE_PCT", 2.0), 0.0),
        recent_attempts=max(env_int("FINLIT_RECENT_ATTEMPTS", 5), 0),
    )
