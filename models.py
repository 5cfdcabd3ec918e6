# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Roster data models for the batting simulator.

Two stat-line shapes are accepted at the boundary:

1. **Combined-out lines** (``PlayerStatLine``) -- at-bats plus hit and walk
   counts; every at-bat that is not a hit is an out.
2. **Legacy lines** (``LegacyPlayerStatLine``) -- hit and walk counts plus
   separate strikeout, groundout and flyout counts.

Both feed the same ``Outcome`` enum inside the engine.
"""

from __future__ import annotations

import json
from enum import Enum
from pathlib import Path
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from validation import RosterError


# ---------------------------------------------------------------------------
# Outcomes
# ---------------------------------------------------------------------------

class Outcome(str, Enum):
    SINGLE = "single"
    DOUBLE = "double"
    TRIPLE = "triple"
    HOME_RUN = "home_run"
    WALK = "walk"
    OUT = "out"
    STRIKEOUT = "strikeout"
    GROUNDOUT = "groundout"
    FLYOUT = "flyout"

    @property
    def is_hit(self) -> bool:
        return self in _HITS

    @property
    def is_out(self) -> bool:
        return self in _OUTS

    @property
    def bases(self) -> int:
        """Bases credited to the batter (0 for walks and outs)."""
        return _TOTAL_BASES.get(self, 0)


_HITS = frozenset({Outcome.SINGLE, Outcome.DOUBLE, Outcome.TRIPLE, Outcome.HOME_RUN})
_OUTS = frozenset({Outcome.OUT, Outcome.STRIKEOUT, Outcome.GROUNDOUT, Outcome.FLYOUT})
_TOTAL_BASES = {
    Outcome.SINGLE: 1,
    Outcome.DOUBLE: 2,
    Outcome.TRIPLE: 3,
    Outcome.HOME_RUN: 4,
}

# Sampling order. Changing it changes every seeded replay.
SIX_WAY_ORDER: tuple[Outcome, ...] = (
    Outcome.SINGLE,
    Outcome.DOUBLE,
    Outcome.TRIPLE,
    Outcome.HOME_RUN,
    Outcome.WALK,
    Outcome.OUT,
)
EIGHT_WAY_ORDER: tuple[Outcome, ...] = (
    Outcome.SINGLE,
    Outcome.DOUBLE,
    Outcome.TRIPLE,
    Outcome.HOME_RUN,
    Outcome.WALK,
    Outcome.STRIKEOUT,
    Outcome.GROUNDOUT,
    Outcome.FLYOUT,
)


# ---------------------------------------------------------------------------
# Stat lines
# ---------------------------------------------------------------------------

class _StatLineBase(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1, description="Player identifier")
    name: str = Field(min_length=1)
    batting_order: int = Field(ge=1, le=9, description="Lineup slot (1-9)")
    singles: int = Field(default=0, ge=0)
    doubles: int = Field(default=0, ge=0)
    triples: int = Field(default=0, ge=0)
    home_runs: int = Field(default=0, ge=0)
    walks: int = Field(default=0, ge=0)

    @property
    def hits(self) -> int:
        return self.singles + self.doubles + self.triples + self.home_runs


class PlayerStatLine(_StatLineBase):
    """Cumulative batting counts with a single combined out category."""
    at_bats: int = Field(default=0, ge=0)

    @model_validator(mode="after")
    def _hits_within_at_bats(self) -> PlayerStatLine:
        if self.hits > self.at_bats:
            raise ValueError(
                f"hits ({self.hits}) cannot exceed at_bats ({self.at_bats})"
            )
        return self

    @property
    def outs(self) -> int:
        return self.at_bats - self.hits


class LegacyPlayerStatLine(_StatLineBase):
    """Stat line that records strikeouts, groundouts and flyouts separately."""
    strikeouts: int = Field(default=0, ge=0)
    groundouts: int = Field(default=0, ge=0)
    flyouts: int = Field(default=0, ge=0)
    at_bats: Optional[int] = Field(default=None, ge=0)

    @property
    def outs(self) -> int:
        return self.strikeouts + self.groundouts + self.flyouts

    def to_stat_line(self) -> PlayerStatLine:
        """Collapse the three out categories into a combined-out line."""
        return PlayerStatLine(
            id=self.id,
            name=self.name,
            batting_order=self.batting_order,
            at_bats=self.hits + self.outs,
            singles=self.singles,
            doubles=self.doubles,
            triples=self.triples,
            home_runs=self.home_runs,
            walks=self.walks,
        )


StatLine = Union[PlayerStatLine, LegacyPlayerStatLine]

_LEGACY_KEYS = ("strikeouts", "groundouts", "flyouts")


def is_legacy_payload(d: dict[str, Any]) -> bool:
    """A payload is legacy when it carries split outs and no at-bat count."""
    return any(k in d for k in _LEGACY_KEYS) and "at_bats" not in d


def parse_stat_line(d: dict[str, Any]) -> StatLine:
    """Build the right stat-line variant from a roster dict entry."""
    model_cls = LegacyPlayerStatLine if is_legacy_payload(d) else PlayerStatLine
    payload = {k: v for k, v in d.items() if k in model_cls.model_fields}
    try:
        return model_cls(**payload)
    except ValidationError as e:
        errors = e.errors()
        raise RosterError(
            f"Invalid stat line for player {d.get('name', d.get('id', '?'))!r}",
            validation_errors=errors,
        ) from e


def to_combined(player: StatLine) -> PlayerStatLine:
    if isinstance(player, LegacyPlayerStatLine):
        return player.to_stat_line()
    return player


# ---------------------------------------------------------------------------
# Teams
# ---------------------------------------------------------------------------

class TeamRoster(BaseModel):
    """A team and the stat lines of its lineup."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    players: list[StatLine] = Field(default_factory=list)

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> TeamRoster:
        players = [parse_stat_line(p) for p in d.get("players", [])]
        try:
            return cls(
                id=d.get("id", d.get("team_id", "")),
                name=d.get("name", d.get("team_name", "")),
                players=players,
            )
        except ValidationError as e:
            raise RosterError("Invalid team roster", validation_errors=e.errors()) from e


_ROSTER_PATH = Path(__file__).resolve().parent / "data" / "sample_rosters.json"


def load_rosters(path: Optional[Union[Path, str]] = None) -> dict[str, TeamRoster]:
    """Load the home and away rosters from a JSON file."""
    p = Path(path) if path else _ROSTER_PATH
    try:
        with open(p) as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise RosterError(f"Could not read rosters from {p}: {e}") from e
    missing = [side for side in ("home", "away") if side not in data]
    if missing:
        raise RosterError(f"Rosters file {p} is missing: {', '.join(missing)}")
    return {side: TeamRoster.from_dict(data[side]) for side in ("home", "away")}


# ---------------------------------------------------------------------------
# Default players for new teams
# ---------------------------------------------------------------------------

# AVG .250 (100/400), OBP .333 (150/450), SLG .375 (150/400)
DEFAULT_PLAYER_STATS: dict[str, int] = {
    "at_bats": 400,
    "singles": 65,
    "doubles": 25,
    "triples": 5,
    "home_runs": 5,
    "walks": 50,
}


def create_default_players(team_id: str, count: int = 9) -> list[PlayerStatLine]:
    """Build a full lineup of league-average players in slots 1..count."""
    if not 1 <= count <= 9:
        raise ValueError(f"count must be between 1 and 9, got {count}")
    return [
        PlayerStatLine(
            id=f"{team_id}-p{i}",
            name=f"Player {i}",
            batting_order=i,
            **DEFAULT_PLAYER_STATS,
        )
        for i in range(1, count + 1)
    ]
