# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Batting simulation engine.

Samples plate-appearance outcomes from each batter's historical stat line,
advances runners on a three-base state machine, and rolls at-bats up into
innings, games, and two-team matches.

All randomness comes from the engine's own ``random.Random`` so a seeded
engine replays the same game.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Sequence

from models import Outcome, StatLine, TeamRoster
from probability import RandomSource, compute_probabilities, sample_outcome
from stats import batting_average
from validation import (
    DEFAULT_INNINGS,
    SimulationError,
    check_distinct_teams,
    check_innings,
    check_roster,
)

logger = logging.getLogger(__name__)

OUTS_PER_INNING = 3


# ---------------------------------------------------------------------------
# Base and inning state
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class BaseState:
    first: bool = False
    second: bool = False
    third: bool = False

    @property
    def runners(self) -> int:
        return int(self.first) + int(self.second) + int(self.third)

    def bases_string(self) -> str:
        """Return base state string like '110' for runners on 1st and 2nd."""
        return "".join("1" if b else "0" for b in (self.first, self.second, self.third))

    def to_dict(self) -> dict:
        return {"first": self.first, "second": self.second, "third": self.third}


EMPTY_BASES = BaseState()


@dataclass(frozen=True)
class InningState:
    """State of one inning between plate appearances."""
    inning_number: int
    current_batter: int  # lineup slot, 1-based
    outs: int = 0
    bases: BaseState = EMPTY_BASES
    runs: int = 0

    @property
    def is_over(self) -> bool:
        return self.outs >= OUTS_PER_INNING


@dataclass(frozen=True)
class Transition:
    bases: BaseState
    runs_scored: int
    rbi: int
    outs: int = 0


# ---------------------------------------------------------------------------
# Result records
# ---------------------------------------------------------------------------

def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class AtBatResult:
    player_id: str
    player_name: str
    batting_order: int
    outcome: Outcome
    rbi: int
    timestamp: datetime = field(default_factory=_utcnow)

    def to_dict(self) -> dict:
        return {
            "player_id": self.player_id,
            "player_name": self.player_name,
            "batting_order": self.batting_order,
            "outcome": self.outcome.value,
            "rbi": self.rbi,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass(frozen=True)
class InningResult:
    inning_number: int
    at_bats: tuple[AtBatResult, ...]
    runs: int
    hits: int
    left_on_base: int
    errors: int = 0  # fielding is not modeled

    def to_dict(self) -> dict:
        return {
            "inning_number": self.inning_number,
            "at_bats": [ab.to_dict() for ab in self.at_bats],
            "runs": self.runs,
            "hits": self.hits,
            "errors": self.errors,
            "left_on_base": self.left_on_base,
        }


@dataclass
class PlayerGameStats:
    player_id: str
    player_name: str
    batting_order: int
    at_bats: int = 0
    hits: int = 0
    singles: int = 0
    doubles: int = 0
    triples: int = 0
    home_runs: int = 0
    runs: int = 0
    rbi: int = 0
    walks: int = 0
    strikeouts: int = 0
    outs: int = 0

    @property
    def batting_average(self) -> float:
        return batting_average(self.hits, self.at_bats)

    def record(self, at_bat: AtBatResult) -> None:
        outcome = at_bat.outcome
        if outcome != Outcome.WALK:
            self.at_bats += 1
        if outcome.is_hit:
            self.hits += 1
        if outcome == Outcome.SINGLE:
            self.singles += 1
        elif outcome == Outcome.DOUBLE:
            self.doubles += 1
        elif outcome == Outcome.TRIPLE:
            self.triples += 1
        elif outcome == Outcome.HOME_RUN:
            self.home_runs += 1
            # Runners are not tracked individually, so only the batter's
            # own trip around the bases is credited.
            self.runs += 1
        elif outcome == Outcome.WALK:
            self.walks += 1
        elif outcome.is_out:
            self.outs += 1
            if outcome == Outcome.STRIKEOUT:
                self.strikeouts += 1
        self.rbi += at_bat.rbi

    def to_dict(self) -> dict:
        return {
            "player_id": self.player_id,
            "player_name": self.player_name,
            "batting_order": self.batting_order,
            "at_bats": self.at_bats,
            "hits": self.hits,
            "singles": self.singles,
            "doubles": self.doubles,
            "triples": self.triples,
            "home_runs": self.home_runs,
            "runs": self.runs,
            "rbi": self.rbi,
            "walks": self.walks,
            "strikeouts": self.strikeouts,
            "outs": self.outs,
            "batting_average": self.batting_average,
        }


@dataclass(frozen=True)
class GameResult:
    team_id: str
    team_name: str
    innings: tuple[InningResult, ...]
    total_runs: int
    total_hits: int
    player_stats: tuple[PlayerGameStats, ...]
    total_errors: int = 0
    seed: int | None = None

    def iter_at_bats(self):
        for inning in self.innings:
            yield from inning.at_bats

    def to_dict(self) -> dict:
        return {
            "team_id": self.team_id,
            "team_name": self.team_name,
            "innings": [i.to_dict() for i in self.innings],
            "total_runs": self.total_runs,
            "total_hits": self.total_hits,
            "total_errors": self.total_errors,
            "player_stats": [p.to_dict() for p in self.player_stats],
            "seed": self.seed,
        }


class Winner(str, Enum):
    HOME = "home"
    AWAY = "away"
    TIE = "tie"


@dataclass(frozen=True)
class MatchResult:
    home: GameResult
    away: GameResult
    winner: Winner
    innings: int

    @property
    def final_score(self) -> dict[str, int]:
        return {"home": self.home.total_runs, "away": self.away.total_runs}

    def to_dict(self) -> dict:
        return {
            "home_team": self.home.to_dict(),
            "away_team": self.away.to_dict(),
            "winner": self.winner.value,
            "final_score": self.final_score,
            "innings": self.innings,
        }


def decide_winner(home_runs: int, away_runs: int) -> Winner:
    if home_runs > away_runs:
        return Winner.HOME
    if away_runs > home_runs:
        return Winner.AWAY
    return Winner.TIE


# ---------------------------------------------------------------------------
# Base-state machine
# ---------------------------------------------------------------------------

def apply_outcome(outcome: Outcome, bases: BaseState) -> Transition:
    """Move runners for one plate appearance.

    Every run scored on the play is an RBI for the batter, including a
    bases-loaded walk and the batter's own run on a home run. Outs never move
    runners (no sacrifices, fielder's choices or double plays).
    """
    if outcome.is_out:
        return Transition(bases=bases, runs_scored=0, rbi=0, outs=1)

    if outcome == Outcome.WALK:
        # Only forced runners move.
        runs = 1 if (bases.first and bases.second and bases.third) else 0
        new_bases = BaseState(
            first=True,
            second=bases.second or bases.first,
            third=bases.third or (bases.first and bases.second),
        )
        return Transition(bases=new_bases, runs_scored=runs, rbi=runs)

    if outcome == Outcome.SINGLE:
        runs = int(bases.third)
        new_bases = BaseState(first=True, second=bases.first, third=bases.second)
    elif outcome == Outcome.DOUBLE:
        runs = int(bases.second) + int(bases.third)
        new_bases = BaseState(first=False, second=True, third=bases.first)
    elif outcome == Outcome.TRIPLE:
        runs = bases.runners
        new_bases = BaseState(third=True)
    elif outcome == Outcome.HOME_RUN:
        runs = bases.runners + 1
        new_bases = EMPTY_BASES
    else:
        raise SimulationError(f"Unknown outcome: {outcome!r}")

    return Transition(bases=new_bases, runs_scored=runs, rbi=runs)


def advance(state: InningState, batter: StatLine,
            outcome: Outcome) -> tuple[AtBatResult, InningState]:
    """Apply one outcome to the inning state, returning the at-bat record."""
    t = apply_outcome(outcome, state.bases)
    at_bat = AtBatResult(
        player_id=batter.id,
        player_name=batter.name,
        batting_order=batter.batting_order,
        outcome=outcome,
        rbi=t.rbi,
    )
    new_state = replace(
        state,
        outs=state.outs + t.outs,
        bases=t.bases,
        runs=state.runs + t.runs_scored,
    )
    return at_bat, new_state


def next_slot(slot: int, lineup_size: int) -> int:
    return (slot % lineup_size) + 1


def build_player_stats(lineup: Sequence[StatLine],
                       innings: Sequence[InningResult]) -> list[PlayerGameStats]:
    """Box score lines for every lineup player, in batting order."""
    lines = {
        p.id: PlayerGameStats(player_id=p.id, player_name=p.name, batting_order=p.batting_order)
        for p in lineup
    }
    for inning in innings:
        for at_bat in inning.at_bats:
            lines[at_bat.player_id].record(at_bat)
    return sorted(lines.values(), key=lambda s: s.batting_order)


# ---------------------------------------------------------------------------
# Simulation engine
# ---------------------------------------------------------------------------

class SimulationEngine:
    """Runs innings, games and matches from batters' stat lines.

    Pass ``seed`` for a reproducible engine, or ``rng`` to supply any object
    with a ``random()`` method (the seed is then only recorded, not used).
    """

    def __init__(self, seed: int | None = None, rng: RandomSource | None = None):
        if seed is None and rng is None:
            seed = random.randint(0, 2**31 - 1)
        self.seed = seed
        self.rng = rng if rng is not None else random.Random(seed)

    # -------------------------------------------------------------------
    # Plate appearance
    # -------------------------------------------------------------------

    def plate_appearance(self, batter: StatLine) -> Outcome:
        return sample_outcome(compute_probabilities(batter), self.rng)

    # -------------------------------------------------------------------
    # Inning
    # -------------------------------------------------------------------

    def simulate_inning(self, lineup: Sequence[StatLine], inning_number: int,
                        starting_batter: int = 1) -> tuple[InningResult, int]:
        """Play one inning to three outs.

        Returns the inning result and the lineup slot of the next batter so
        the following inning continues the rotation.
        """
        check_roster(lineup, "inning")
        size = len(lineup)
        if not 1 <= starting_batter <= size:
            raise SimulationError(
                f"Starting batter slot must be between 1 and {size}, got {starting_batter}"
            )

        state = InningState(inning_number=inning_number, current_batter=starting_batter)
        at_bats: list[AtBatResult] = []

        while not state.is_over:
            batter = lineup[(state.current_batter - 1) % size]
            outcome = self.plate_appearance(batter)
            at_bat, state = advance(state, batter, outcome)
            at_bats.append(at_bat)
            state = replace(state, current_batter=next_slot(state.current_batter, size))

        result = InningResult(
            inning_number=inning_number,
            at_bats=tuple(at_bats),
            runs=state.runs,
            hits=sum(1 for ab in at_bats if ab.outcome.is_hit),
            left_on_base=state.bases.runners,
        )
        return result, state.current_batter

    # -------------------------------------------------------------------
    # Game
    # -------------------------------------------------------------------

    def simulate_game(self, team_id: str, team_name: str, roster: Sequence[StatLine],
                      innings: int = DEFAULT_INNINGS) -> GameResult:
        """Simulate one team batting through ``innings`` innings."""
        check_roster(roster)
        check_innings(innings)

        lineup = sorted(roster, key=lambda p: p.batting_order)
        inning_results: list[InningResult] = []
        current_batter = 1
        for number in range(1, innings + 1):
            result, current_batter = self.simulate_inning(lineup, number, current_batter)
            inning_results.append(result)

        game = GameResult(
            team_id=team_id,
            team_name=team_name,
            innings=tuple(inning_results),
            total_runs=sum(i.runs for i in inning_results),
            total_hits=sum(i.hits for i in inning_results),
            player_stats=tuple(build_player_stats(lineup, inning_results)),
            seed=self.seed,
        )
        logger.debug("Game finished: %s scored %d runs on %d hits over %d innings",
                     team_name, game.total_runs, game.total_hits, innings)
        return game

    def simulate_match(self, home: TeamRoster, away: TeamRoster,
                       innings: int = DEFAULT_INNINGS) -> MatchResult:
        """Simulate both teams independently and compare total runs."""
        check_distinct_teams(home.id, away.id)
        check_roster(home.players)
        check_roster(away.players)
        check_innings(innings)

        home_result = self.simulate_game(home.id, home.name, home.players, innings)
        away_result = self.simulate_game(away.id, away.name, away.players, innings)
        return MatchResult(
            home=home_result,
            away=away_result,
            winner=decide_winner(home_result.total_runs, away_result.total_runs),
            innings=innings,
        )


# ---------------------------------------------------------------------------
# Convenience wrappers
# ---------------------------------------------------------------------------

def simulate_game(team_id: str, team_name: str, roster: Sequence[StatLine],
                  innings: int = DEFAULT_INNINGS, *, seed: int | None = None,
                  rng: RandomSource | None = None) -> GameResult:
    return SimulationEngine(seed=seed, rng=rng).simulate_game(team_id, team_name, roster, innings)


def simulate_match(home: TeamRoster, away: TeamRoster, innings: int = DEFAULT_INNINGS,
                   *, seed: int | None = None, rng: RandomSource | None = None) -> MatchResult:
    return SimulationEngine(seed=seed, rng=rng).simulate_match(home, away, innings)
