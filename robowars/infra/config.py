"""Env-file loading and runtime settings."""

from __future__ import annotations

import os
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from robowars.core.models import DEFAULT_PLACEMENT_ATTEMPTS
from robowars.infra.app_data import resolve_config_dir


@dataclass(frozen=True, slots=True)
class RuntimeSettings:
    """Tournament defaults resolved from the environment."""

    rounds: int = 4
    tick_seconds: float = 0.1
    seed: int | None = None
    max_turns_per_round: int | None = 10_000
    placement_attempts: int = DEFAULT_PLACEMENT_ATTEMPTS


def load_env_file(path: str = ".env", *, override_existing: bool = True) -> None:
    """Load KEY=VALUE pairs from an env file into process environment.

    By default, values from the env file overwrite existing environment variables.
    """
    env_path = Path(path)
    if not env_path.exists():
        return

    for raw_line in env_path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = (part.strip() for part in line.split("=", 1))
        if not key:
            continue
        if len(value) >= 2 and value[0] == value[-1] and value[0] in {"'", '"'}:
            value = value[1:-1]
        if override_existing or key not in os.environ:
            os.environ[key] = value


def load_default_env_files(
    *, override_existing: bool = True, paths: Sequence[str] | None = None
) -> None:
    """Load env files in order; later files win.

    Default order: <app-data>/config/.env.app, <app-data>/config/.env.app.local,
    then .env.app and .env.app.local from the working directory. The app-data
    root honors ROBOWARS_APP_DATA_DIR.
    """
    if paths is not None:
        to_load = tuple(paths)
    else:
        config_dir = resolve_config_dir()
        to_load = (
            str(config_dir / ".env.app"),
            str(config_dir / ".env.app.local"),
            ".env.app",
            ".env.app.local",
        )
    for path in to_load:
        load_env_file(path, override_existing=override_existing)


def load_settings() -> RuntimeSettings:
    """Build settings from ROBOWARS_* env vars; malformed values raise ValueError."""
    defaults = RuntimeSettings()
    rounds = _int_env("ROBOWARS_ROUNDS", defaults.rounds)
    if rounds < 1:
        raise ValueError("ROBOWARS_ROUNDS must be >= 1")
    tick_seconds = _float_env("ROBOWARS_TICK_SECONDS", defaults.tick_seconds)
    if tick_seconds <= 0.0:
        raise ValueError("ROBOWARS_TICK_SECONDS must be > 0")
    max_turns = _int_env("ROBOWARS_MAX_TURNS", defaults.max_turns_per_round or 0)
    return RuntimeSettings(
        rounds=rounds,
        tick_seconds=tick_seconds,
        seed=_optional_int_env("ROBOWARS_SEED"),
        max_turns_per_round=max_turns if max_turns > 0 else None,
        placement_attempts=max(
            1, _int_env("ROBOWARS_PLACEMENT_ATTEMPTS", defaults.placement_attempts)
        ),
    )


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc


def _optional_int_env(name: str) -> int | None:
    raw = os.getenv(name, "").strip()
    if not raw:
        return None
    return _int_env(name, 0)


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {raw!r}") from exc
