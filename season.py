# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Season and series simulation.

Repeats single games (one team) or matches (two teams) and aggregates them
into team totals, win/loss/tie records and per-player season lines with
OBP, SLG and OPS.

Every game gets its own engine seeded from a per-game seed drawn up front
from the series seed, so games are independent trials and a seeded series
gives the same result whether it runs sequentially or on worker threads.
"""

from __future__ import annotations

import logging
import random
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Sequence, TypeVar

from models import StatLine, TeamRoster
from simulation import GameResult, MatchResult, SimulationEngine, Winner
from stats import batting_average, on_base_percentage, ops, slugging_percentage
from validation import (
    DEFAULT_INNINGS,
    SimulationError,
    check_distinct_teams,
    check_innings,
    check_number_of_games,
    check_roster,
    check_workers,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


# ---------------------------------------------------------------------------
# Season records
# ---------------------------------------------------------------------------

@dataclass
class PlayerSeasonStats:
    player_id: str
    player_name: str
    batting_order: int
    games: int = 0
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

    @property
    def on_base_percentage(self) -> float:
        return on_base_percentage(self.hits, self.walks, self.at_bats)

    @property
    def slugging_percentage(self) -> float:
        return slugging_percentage(self.singles, self.doubles, self.triples,
                                   self.home_runs, self.at_bats)

    @property
    def ops(self) -> float:
        return ops(self.on_base_percentage, self.slugging_percentage)

    def to_dict(self) -> dict:
        return {
            "player_id": self.player_id,
            "player_name": self.player_name,
            "batting_order": self.batting_order,
            "games": self.games,
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
            "on_base_percentage": self.on_base_percentage,
            "slugging_percentage": self.slugging_percentage,
            "ops": self.ops,
        }


_COUNTING_FIELDS = (
    "at_bats", "hits", "singles", "doubles", "triples", "home_runs",
    "runs", "rbi", "walks", "strikeouts", "outs",
)


@dataclass(frozen=True)
class TeamSeasonStats:
    team_id: str
    team_name: str
    total_runs: int
    total_hits: int
    total_at_bats: int
    average_runs_per_game: float
    average_batting_average: float
    player_stats: tuple[PlayerSeasonStats, ...]

    def to_dict(self) -> dict:
        return {
            "team_id": self.team_id,
            "team_name": self.team_name,
            "total_runs": self.total_runs,
            "total_hits": self.total_hits,
            "total_at_bats": self.total_at_bats,
            "average_runs_per_game": self.average_runs_per_game,
            "average_batting_average": self.average_batting_average,
            "player_stats": [p.to_dict() for p in self.player_stats],
        }


@dataclass(frozen=True)
class SeasonResult:
    home_team_id: str
    home_team_name: str
    games: tuple[GameResult, ...] | tuple[MatchResult, ...]
    home_stats: TeamSeasonStats
    away_team_id: str = ""
    away_team_name: str = ""
    away_stats: TeamSeasonStats | None = None
    home_wins: int = 0
    away_wins: int = 0
    ties: int = 0

    @property
    def total_games(self) -> int:
        return len(self.games)

    @property
    def is_match_season(self) -> bool:
        return self.away_stats is not None

    @property
    def total_runs(self) -> int:
        runs = self.home_stats.total_runs
        if self.away_stats is not None:
            runs += self.away_stats.total_runs
        return runs

    @property
    def total_hits(self) -> int:
        hits = self.home_stats.total_hits
        if self.away_stats is not None:
            hits += self.away_stats.total_hits
        return hits

    @property
    def average_runs_per_game(self) -> float:
        return self.total_runs / self.total_games if self.total_games else 0.0

    def to_dict(self) -> dict:
        return {
            "home_team_id": self.home_team_id,
            "home_team_name": self.home_team_name,
            "away_team_id": self.away_team_id,
            "away_team_name": self.away_team_name,
            "games": [g.to_dict() for g in self.games],
            "season_stats": {
                "total_games": self.total_games,
                "total_runs": self.total_runs,
                "total_hits": self.total_hits,
                "average_runs_per_game": self.average_runs_per_game,
                "home_wins": self.home_wins,
                "away_wins": self.away_wins,
                "ties": self.ties,
                "home_team_stats": self.home_stats.to_dict(),
                "away_team_stats": self.away_stats.to_dict() if self.away_stats else None,
            },
        }


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------

def aggregate_team_stats(team_id: str, team_name: str, roster: Sequence[StatLine],
                         games: Sequence[GameResult]) -> TeamSeasonStats:
    """Sum per-game box scores into season lines for one team."""
    lines: dict[str, PlayerSeasonStats] = {
        p.id: PlayerSeasonStats(player_id=p.id, player_name=p.name, batting_order=p.batting_order)
        for p in roster
    }
    for game in games:
        for box in game.player_stats:
            season_line = lines.get(box.player_id)
            if season_line is None:
                continue
            if box.at_bats or box.walks:
                season_line.games += 1
            for name in _COUNTING_FIELDS:
                setattr(season_line, name, getattr(season_line, name) + getattr(box, name))

    total_runs = sum(g.total_runs for g in games)
    total_hits = sum(g.total_hits for g in games)
    total_at_bats = sum(p.at_bats for g in games for p in g.player_stats)
    player_stats = sorted(lines.values(), key=lambda s: s.batting_average, reverse=True)

    return TeamSeasonStats(
        team_id=team_id,
        team_name=team_name,
        total_runs=total_runs,
        total_hits=total_hits,
        total_at_bats=total_at_bats,
        average_runs_per_game=total_runs / len(games) if games else 0.0,
        average_batting_average=batting_average(total_hits, total_at_bats),
        player_stats=tuple(player_stats),
    )


def _game_seeds(number_of_games: int, seed: int | None) -> list[int]:
    master = random.Random(seed)
    return [master.randint(0, 2**31 - 1) for _ in range(number_of_games)]


def _run_games(seeds: Sequence[int], play: Callable[[SimulationEngine], T],
               workers: int) -> list[T]:
    def run_one(game_seed: int) -> T:
        return play(SimulationEngine(seed=game_seed))

    if workers <= 1:
        return [run_one(s) for s in seeds]
    with ThreadPoolExecutor(max_workers=workers) as pool:
        return list(pool.map(run_one, seeds))


# ---------------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------------

def simulate_season(team_id: str, team_name: str, roster: Sequence[StatLine],
                    number_of_games: int, innings: int = DEFAULT_INNINGS, *,
                    seed: int | None = None, workers: int = 1) -> SeasonResult:
    """Simulate ``number_of_games`` independent games for one team."""
    check_roster(roster, "season")
    check_number_of_games(number_of_games)
    check_innings(innings)
    check_workers(workers)

    games = _run_games(
        _game_seeds(number_of_games, seed),
        lambda engine: engine.simulate_game(team_id, team_name, roster, innings),
        workers,
    )
    team_stats = aggregate_team_stats(team_id, team_name, roster, games)
    logger.debug("Season finished: %s, %d games, %d runs",
                 team_name, len(games), team_stats.total_runs)

    return SeasonResult(
        home_team_id=team_id,
        home_team_name=team_name,
        games=tuple(games),
        home_stats=team_stats,
    )


def simulate_match_season(home: TeamRoster, away: TeamRoster, number_of_games: int,
                          innings: int = DEFAULT_INNINGS, *,
                          seed: int | None = None, workers: int = 1) -> SeasonResult:
    """Simulate a series of matches between two teams."""
    if len(home.players) == 0 or len(away.players) == 0:
        raise SimulationError("Cannot simulate season with teams that have no players")
    check_roster(home.players, "season")
    check_roster(away.players, "season")
    check_distinct_teams(home.id, away.id)
    check_number_of_games(number_of_games)
    check_innings(innings)
    check_workers(workers)

    matches = _run_games(
        _game_seeds(number_of_games, seed),
        lambda engine: engine.simulate_match(home, away, innings),
        workers,
    )

    home_wins = sum(1 for m in matches if m.winner == Winner.HOME)
    away_wins = sum(1 for m in matches if m.winner == Winner.AWAY)
    ties = len(matches) - home_wins - away_wins
    logger.debug("Match season finished: %s %d - %s %d (%d ties)",
                 home.name, home_wins, away.name, away_wins, ties)

    return SeasonResult(
        home_team_id=home.id,
        home_team_name=home.name,
        away_team_id=away.id,
        away_team_name=away.name,
        games=tuple(matches),
        home_stats=aggregate_team_stats(home.id, home.name, home.players,
                                        [m.home for m in matches]),
        away_stats=aggregate_team_stats(away.id, away.name, away.players,
                                        [m.away for m in matches]),
        home_wins=home_wins,
        away_wins=away_wins,
        ties=ties,
    )


# ---------------------------------------------------------------------------
# Summaries
# ---------------------------------------------------------------------------

def season_summary(result: SeasonResult, win_threshold: int = 4) -> dict:
    """Headline numbers for a single-team season.

    A single team has no opponent, so games scoring at least
    ``win_threshold`` runs are counted as wins. For a match season the
    home team's runs are used; see ``match_season_summary`` for the
    head-to-head record.
    """
    if result.is_match_season:
        runs = [m.home.total_runs for m in result.games]
    else:
        runs = [g.total_runs for g in result.games]
    wins = sum(1 for r in runs if r >= win_threshold)
    return {
        "total_games": result.total_games,
        "wins": wins,
        "losses": result.total_games - wins,
        "win_rate": wins / result.total_games,
        "average_runs_per_game": result.home_stats.average_runs_per_game,
        "total_runs": result.home_stats.total_runs,
        "total_hits": result.home_stats.total_hits,
        "best_game_runs": max(runs),
        "worst_game_runs": min(runs),
    }


def match_season_summary(result: SeasonResult) -> dict:
    total = result.total_games
    return {
        "total_games": total,
        "home_wins": result.home_wins,
        "away_wins": result.away_wins,
        "ties": result.ties,
        "home_win_rate": result.home_wins / total,
        "away_win_rate": result.away_wins / total,
        "home_team_stats": result.home_stats.to_dict(),
        "away_team_stats": result.away_stats.to_dict() if result.away_stats else None,
    }
