# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Batting rate statistics and display formatting.

Every rate returns 0.0 when its denominator is zero.
"""

from __future__ import annotations

from typing import Sequence

from models import StatLine, to_combined


def batting_average(hits: int, at_bats: int) -> float:
    if at_bats == 0:
        return 0.0
    return hits / at_bats


def on_base_percentage(hits: int, walks: int, at_bats: int) -> float:
    """(H + BB) / (AB + BB)."""
    plate_appearances = at_bats + walks
    if plate_appearances == 0:
        return 0.0
    return (hits + walks) / plate_appearances


def total_bases(singles: int, doubles: int, triples: int, home_runs: int) -> int:
    return singles + 2 * doubles + 3 * triples + 4 * home_runs


def slugging_percentage(singles: int, doubles: int, triples: int,
                        home_runs: int, at_bats: int) -> float:
    if at_bats == 0:
        return 0.0
    return total_bases(singles, doubles, triples, home_runs) / at_bats


def ops(obp: float, slg: float) -> float:
    return obp + slg


# ---------------------------------------------------------------------------
# Stat-line summaries
# ---------------------------------------------------------------------------

def _batting_line(at_bats: int, singles: int, doubles: int, triples: int,
                  home_runs: int, walks: int) -> dict:
    hits = singles + doubles + triples + home_runs
    obp = on_base_percentage(hits, walks, at_bats)
    slg = slugging_percentage(singles, doubles, triples, home_runs, at_bats)
    return {
        "at_bats": at_bats,
        "hits": hits,
        "singles": singles,
        "doubles": doubles,
        "triples": triples,
        "home_runs": home_runs,
        "walks": walks,
        "batting_average": batting_average(hits, at_bats),
        "on_base_percentage": obp,
        "slugging_percentage": slg,
        "ops": ops(obp, slg),
    }


def player_batting_stats(player: StatLine) -> dict:
    """Slash line for a player's historical stat line."""
    line = to_combined(player)
    return _batting_line(line.at_bats, line.singles, line.doubles,
                         line.triples, line.home_runs, line.walks)


def team_batting_stats(players: Sequence[StatLine]) -> dict:
    """Combined slash line for a roster's historical stat lines."""
    lines = [to_combined(p) for p in players]
    return _batting_line(
        sum(p.at_bats for p in lines),
        sum(p.singles for p in lines),
        sum(p.doubles for p in lines),
        sum(p.triples for p in lines),
        sum(p.home_runs for p in lines),
        sum(p.walks for p in lines),
    )


# ---------------------------------------------------------------------------
# Display
# ---------------------------------------------------------------------------

def _strip_leading_zero(text: str) -> str:
    return text[1:] if text.startswith("0.") else text


def format_batting_average(avg: float) -> str:
    """0.333 -> '.333'"""
    return _strip_leading_zero(f"{avg:.3f}")


def format_percentage(pct: float) -> str:
    return _strip_leading_zero(f"{min(pct, 1.0):.3f}")


def format_ops(value: float) -> str:
    """OPS keeps its leading digit once it reaches 1.000."""
    return _strip_leading_zero(f"{value:.3f}")
