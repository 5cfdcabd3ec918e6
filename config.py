"""Centralized configuration for environment variables."""

import os

from validation import DEFAULT_GAMES, DEFAULT_INNINGS, SimulationRangeError

INNINGS_ENV = "SIM_INNINGS"
GAMES_ENV = "SIM_GAMES"
SEED_ENV = "SIM_SEED"


def _int_from_env(name: str, default: int | None) -> int | None:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise SimulationRangeError(
            f"{name} must be an integer, got {raw!r}", parameter=name
        ) from None


def get_default_innings() -> int:
    """Innings per game, from SIM_INNINGS or the standard nine."""
    return _int_from_env(INNINGS_ENV, DEFAULT_INNINGS)


def get_default_games() -> int:
    """Games per series, from SIM_GAMES."""
    return _int_from_env(GAMES_ENV, DEFAULT_GAMES)


def get_seed() -> int | None:
    """Seed from SIM_SEED, or None for a random seed."""
    return _int_from_env(SEED_ENV, None)
