# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Run batting simulations from the command line.

Usage:
    uv run run_sim.py game --team home --innings 9 --seed 42
    uv run run_sim.py match --seed 7
    uv run run_sim.py season --team away --games 50
    uv run run_sim.py match-season --games 162 --workers 4 --json
    uv run run_sim.py roster

Rosters are read from data/sample_rosters.json unless --rosters is given.
SIM_INNINGS, SIM_GAMES and SIM_SEED set the defaults for the matching flags.
"""

from __future__ import annotations

import argparse
import logging
import sys

from pydantic import ValidationError

from config import get_default_games, get_default_innings, get_seed
from models import TeamRoster, load_rosters
from response import exception_response, success_response
from season import (
    SeasonResult,
    match_season_summary,
    season_summary,
    simulate_match_season,
    simulate_season,
)
from simulation import GameResult, MatchResult, SimulationEngine, Winner
from stats import (
    format_batting_average,
    format_ops,
    format_percentage,
    player_batting_stats,
    team_batting_stats,
)
from validation import (
    GameSimulationRequest,
    SeasonSimulationRequest,
    SimulationError,
    format_validation_error,
)

logger = logging.getLogger("run_sim")


# ---------------------------------------------------------------------------
# Text formatting
# ---------------------------------------------------------------------------

def format_line_score(games: list[GameResult]) -> list[str]:
    innings = max(len(g.innings) for g in games)
    header = f"{'Team':<20}"
    for i in range(1, innings + 1):
        header += f" {i:>3}"
    header += "  |   R   H   E"
    lines = [header, "-" * len(header)]
    for game in games:
        row = f"{game.team_name:<20}"
        for inning in game.innings:
            row += f" {inning.runs:>3}"
        row += f"  | {game.total_runs:>3} {game.total_hits:>3} {game.total_errors:>3}"
        lines.append(row)
    return lines


def format_batting(game: GameResult) -> list[str]:
    lines = [f"\n{game.team_name} Batting:"]
    lines.append(f"  {'#':>1} {'Name':<20} {'AB':>3} {'H':>3} {'2B':>3} {'3B':>3} "
                 f"{'HR':>3} {'R':>3} {'RBI':>4} {'BB':>3} {'SO':>3} {'AVG':>5}")
    lines.append(f"  {'-'} {'-'*20} {'-'*3} {'-'*3} {'-'*3} {'-'*3} {'-'*3} {'-'*3} "
                 f"{'-'*4} {'-'*3} {'-'*3} {'-'*5}")
    for b in game.player_stats:
        lines.append(
            f"  {b.batting_order:>1} {b.player_name:<20} {b.at_bats:>3} {b.hits:>3} "
            f"{b.doubles:>3} {b.triples:>3} {b.home_runs:>3} {b.runs:>3} {b.rbi:>4} "
            f"{b.walks:>3} {b.strikeouts:>3} {format_batting_average(b.batting_average):>5}"
        )
    lob = sum(i.left_on_base for i in game.innings)
    lines.append(f"  LOB: {lob}")
    return lines


def format_game(game: GameResult) -> str:
    lines = ["=" * 72, "FINAL BOX SCORE", "=" * 72]
    lines.extend(format_line_score([game]))
    lines.extend(format_batting(game))
    lines.append(f"\nSeed: {game.seed}")
    return "\n".join(lines)


def format_match(match: MatchResult) -> str:
    lines = ["=" * 72, "FINAL BOX SCORE", "=" * 72]
    lines.extend(format_line_score([match.away, match.home]))
    lines.append("")
    if match.winner == Winner.TIE:
        lines.append("Result: tie")
    else:
        winner = match.home if match.winner == Winner.HOME else match.away
        lines.append(f"Winner: {winner.team_name}")
    for game in (match.away, match.home):
        lines.extend(format_batting(game))
    return "\n".join(lines)


def format_season_players(result: SeasonResult) -> list[str]:
    lines = []
    for team in (result.home_stats, result.away_stats):
        if team is None:
            continue
        lines.append(f"\n{team.team_name}: {team.total_runs} R, {team.total_hits} H, "
                     f"{team.average_runs_per_game:.2f} R/G, "
                     f"AVG {format_batting_average(team.average_batting_average)}")
        lines.append(f"  {'Name':<20} {'G':>3} {'AB':>4} {'H':>4} {'HR':>3} {'RBI':>4} "
                     f"{'BB':>3} {'AVG':>5} {'OBP':>5} {'SLG':>5} {'OPS':>5}")
        for p in team.player_stats:
            lines.append(
                f"  {p.player_name:<20} {p.games:>3} {p.at_bats:>4} {p.hits:>4} "
                f"{p.home_runs:>3} {p.rbi:>4} {p.walks:>3} "
                f"{format_batting_average(p.batting_average):>5} "
                f"{format_percentage(p.on_base_percentage):>5} "
                f"{format_percentage(p.slugging_percentage):>5} {format_ops(p.ops):>5}"
            )
    return lines


def format_season(result: SeasonResult) -> str:
    lines = ["=" * 72, f"SEASON: {result.total_games} games", "=" * 72]
    if result.is_match_season:
        summary = match_season_summary(result)
        lines.append(f"{result.home_team_name} (home) {summary['home_wins']} wins, "
                     f"{result.away_team_name} (away) {summary['away_wins']} wins, "
                     f"{summary['ties']} ties")
    else:
        summary = season_summary(result)
        lines.append(f"Best game: {summary['best_game_runs']} runs, "
                     f"worst game: {summary['worst_game_runs']} runs")
    lines.extend(format_season_players(result))
    return "\n".join(lines)


def format_roster(roster: TeamRoster) -> str:
    lines = [f"{roster.name} ({roster.id})"]
    lines.append(f"  {'#':>1} {'Name':<20} {'AB':>4} {'AVG':>5} {'OBP':>5} {'SLG':>5} {'OPS':>5}")
    for p in sorted(roster.players, key=lambda p: p.batting_order):
        s = player_batting_stats(p)
        lines.append(
            f"  {p.batting_order:>1} {p.name:<20} {s['at_bats']:>4} "
            f"{format_batting_average(s['batting_average']):>5} "
            f"{format_percentage(s['on_base_percentage']):>5} "
            f"{format_percentage(s['slugging_percentage']):>5} {format_ops(s['ops']):>5}"
        )
    if roster.players:
        t = team_batting_stats(roster.players)
        lines.append(f"  Team: AVG {format_batting_average(t['batting_average'])} "
                     f"OBP {format_percentage(t['on_base_percentage'])} "
                     f"SLG {format_percentage(t['slugging_percentage'])} "
                     f"OPS {format_ops(t['ops'])}")
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Simulate batting for one or two teams from their stat lines."
    )
    parser.add_argument(
        "command", choices=["game", "match", "season", "match-season", "roster"],
        help="What to simulate.",
    )
    parser.add_argument(
        "--rosters", default=None,
        help="Path to a rosters JSON file with 'home' and 'away' teams.",
    )
    parser.add_argument(
        "--team", choices=["home", "away"], default="home",
        help="Team to use for single-team commands (default: home).",
    )
    parser.add_argument("--innings", type=int, default=None, help="Innings per game (1-15).")
    parser.add_argument("--games", type=int, default=None, help="Games in a season (1-162).")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for replay.")
    parser.add_argument(
        "--workers", type=int, default=1,
        help="Threads used to run season games (results do not depend on it).",
    )
    parser.add_argument("--json", action="store_true", help="Print a JSON envelope.")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    return parser


def run(args: argparse.Namespace) -> tuple[str, str, dict]:
    """Run the requested command, returning (kind, text, payload).

    Settings are checked through the request models before any simulation
    starts, so a bad flag or environment value raises ``ValidationError``.
    """
    rosters = load_rosters(args.rosters)
    team = rosters[args.team]

    if args.command == "roster":
        payload = {
            side: {"id": r.id, "name": r.name, "batting": team_batting_stats(r.players)}
            for side, r in rosters.items()
        }
        return "roster", "\n\n".join(format_roster(r) for r in rosters.values()), payload

    innings = args.innings if args.innings is not None else get_default_innings()
    seed = args.seed if args.seed is not None else get_seed()

    if args.command in ("game", "match"):
        request = GameSimulationRequest(innings=innings, seed=seed)
        engine = SimulationEngine(seed=request.seed)
        if args.command == "game":
            game = engine.simulate_game(team.id, team.name, team.players, request.innings)
            return "game", format_game(game), game.to_dict()
        match = engine.simulate_match(rosters["home"], rosters["away"], request.innings)
        return "match", format_match(match), match.to_dict()

    games = args.games if args.games is not None else get_default_games()
    if args.command == "season":
        request = SeasonSimulationRequest(
            home_team_id=team.id, number_of_games=games, innings=innings,
            seed=seed, workers=args.workers,
        )
        result = simulate_season(team.id, team.name, team.players, request.number_of_games,
                                 request.innings, seed=request.seed, workers=request.workers)
        return "season", format_season(result), result.to_dict()

    home, away = rosters["home"], rosters["away"]
    request = SeasonSimulationRequest(
        home_team_id=home.id, away_team_id=away.id, number_of_games=games,
        innings=innings, seed=seed, workers=args.workers,
    )
    result = simulate_match_season(home, away, request.number_of_games, request.innings,
                                   seed=request.seed, workers=request.workers)
    return "match_season", format_season(result), result.to_dict()


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s: %(name)s: %(message)s",
    )

    try:
        kind, text, payload = run(args)
    except (SimulationError, ValidationError) as e:
        logger.debug("Simulation rejected", exc_info=True)
        if args.json:
            print(exception_response(e))
        else:
            print(f"Error: {format_validation_error(e)}", file=sys.stderr)
        return 1

    print(success_response(kind, payload) if args.json else text)
    return 0


if __name__ == "__main__":
    sys.exit(main())
