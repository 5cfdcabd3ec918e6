# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Input validation for simulation entry points.

Provides the simulator's exception types, the documented bounds for innings
and series length, bound-check helpers used by every entry point before any
simulation work starts, and Pydantic request models for callers that accept
configuration from outside (CLI arguments, JSON payloads).

Bounds are never clamped: a value outside its range raises
``SimulationRangeError`` with a message naming the parameter and the range.
"""

from __future__ import annotations

from collections import Counter
from typing import Any, Optional, Sequence

from pydantic import BaseModel, Field, ValidationError, model_validator


MIN_INNINGS = 1
MAX_INNINGS = 15
DEFAULT_INNINGS = 9

MIN_GAMES = 1
MAX_GAMES = 162
DEFAULT_GAMES = 10


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------

class SimulationError(ValueError):
    """Raised when a simulation request is invalid."""


class SimulationRangeError(SimulationError):
    """Raised when a numeric setting is outside its documented range."""

    def __init__(self, message: str, parameter: Optional[str] = None):
        self.parameter = parameter
        super().__init__(message)


class RosterError(SimulationError):
    """Raised when roster or stat-line data cannot be parsed."""

    def __init__(self, message: str, validation_errors: Optional[list[dict]] = None):
        self.validation_errors = validation_errors or []
        self.details = [
            f"{'.'.join(str(x) for x in e.get('loc', ()))}: {e.get('msg', '?')}"
            for e in self.validation_errors
        ]
        if self.details:
            message = f"{message} ({'; '.join(self.details)})"
        super().__init__(message)


# ---------------------------------------------------------------------------
# Bound checks
# ---------------------------------------------------------------------------

def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def check_innings(innings: Any) -> int:
    if not _is_int(innings) or not MIN_INNINGS <= innings <= MAX_INNINGS:
        raise SimulationRangeError(
            f"Innings must be between {MIN_INNINGS} and {MAX_INNINGS}, got {innings!r}",
            parameter="innings",
        )
    return innings


def check_number_of_games(number_of_games: Any) -> int:
    if not _is_int(number_of_games) or not MIN_GAMES <= number_of_games <= MAX_GAMES:
        raise SimulationRangeError(
            f"Number of games must be between {MIN_GAMES} and {MAX_GAMES}, "
            f"got {number_of_games!r}",
            parameter="number_of_games",
        )
    return number_of_games


def check_roster(players: Sequence[Any], what: str = "game") -> None:
    if len(players) == 0:
        raise SimulationError(f"Cannot simulate {what} with no players")
    duplicates = sorted(pid for pid, n in Counter(p.id for p in players).items() if n > 1)
    if duplicates:
        raise SimulationError(f"Duplicate player ids in roster: {', '.join(duplicates)}")


def check_workers(workers: Any) -> int:
    if not _is_int(workers) or workers < 1:
        raise SimulationRangeError(
            f"Workers must be at least 1, got {workers!r}", parameter="workers",
        )
    return workers


def check_distinct_teams(home_id: str, away_id: str) -> None:
    if home_id == away_id:
        raise SimulationError("Home and away teams must be different")


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------

class GameSimulationRequest(BaseModel):
    """Configuration for a single game or match."""
    innings: int = Field(default=DEFAULT_INNINGS, ge=MIN_INNINGS, le=MAX_INNINGS,
                         description="Innings per game (1-15)")
    seed: Optional[int] = Field(default=None, ge=0, description="Random seed for replay")


class SeasonSimulationRequest(BaseModel):
    """Configuration for a multi-game series."""
    home_team_id: str = Field(min_length=1)
    away_team_id: Optional[str] = Field(default=None, min_length=1)
    number_of_games: int = Field(default=DEFAULT_GAMES, ge=MIN_GAMES, le=MAX_GAMES,
                                 description="Games in the series (1-162)")
    innings: int = Field(default=DEFAULT_INNINGS, ge=MIN_INNINGS, le=MAX_INNINGS)
    seed: Optional[int] = Field(default=None, ge=0)
    workers: int = Field(default=1, ge=1, le=64)

    @model_validator(mode="after")
    def _teams_differ(self) -> SeasonSimulationRequest:
        if self.away_team_id is not None and self.away_team_id == self.home_team_id:
            raise ValueError("Home and away teams must be different")
        return self


def format_validation_error(exc: Exception) -> str:
    """Format a Pydantic validation error into a human-readable message.

    Includes which parameter failed and what was expected.
    """
    if isinstance(exc, ValidationError):
        parts = []
        for error in exc.errors():
            loc = ".".join(str(x) for x in error["loc"])
            msg = error["msg"]
            parts.append(f"Parameter '{loc}': {msg}" if loc else msg)
        return "; ".join(parts)

    return str(exc)
