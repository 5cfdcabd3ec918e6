# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Tests for input validation.

Verifies:
1. Innings and game counts are bound-checked and never clamped
2. Range errors name the parameter that failed
3. Empty rosters, duplicate player ids, bad worker counts and identical
   teams are rejected
4. Request models enforce the same bounds
5. Validation errors are formatted with the failing parameter
"""

import sys
from pathlib import Path

import pytest

# Ensure project root is on the path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from pydantic import ValidationError

from models import create_default_players
from validation import (
    MAX_GAMES,
    MAX_INNINGS,
    GameSimulationRequest,
    RosterError,
    SeasonSimulationRequest,
    SimulationError,
    SimulationRangeError,
    check_distinct_teams,
    check_innings,
    check_number_of_games,
    check_roster,
    check_workers,
    format_validation_error,
)


# ---------------------------------------------------------------------------
# Bound checks
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("innings", [1, 9, MAX_INNINGS])
def test_check_innings_accepts_range(innings):
    assert check_innings(innings) == innings


@pytest.mark.parametrize("innings", [0, 16, -1, 9.0, "9", True, None])
def test_check_innings_rejects(innings):
    with pytest.raises(SimulationRangeError) as exc_info:
        check_innings(innings)
    assert exc_info.value.parameter == "innings"
    assert "between 1 and 15" in str(exc_info.value)


@pytest.mark.parametrize("games", [1, 81, MAX_GAMES])
def test_check_number_of_games_accepts_range(games):
    assert check_number_of_games(games) == games


@pytest.mark.parametrize("games", [0, 163, 1000])
def test_check_number_of_games_rejects(games):
    with pytest.raises(SimulationRangeError, match="between 1 and 162") as exc_info:
        check_number_of_games(games)
    assert exc_info.value.parameter == "number_of_games"


def test_range_error_is_a_simulation_error():
    assert issubclass(SimulationRangeError, SimulationError)
    assert issubclass(RosterError, SimulationError)
    assert issubclass(SimulationError, ValueError)


def test_check_roster():
    check_roster(create_default_players("t"))
    with pytest.raises(SimulationError, match="Cannot simulate season with no players"):
        check_roster([], "season")


def test_check_roster_rejects_duplicate_ids():
    players = create_default_players("t")
    roster = [*players, players[0].model_copy(update={"batting_order": 9}),
              players[1].model_copy()]
    with pytest.raises(SimulationError, match=r"Duplicate player ids in roster: t-p1, t-p2$"):
        check_roster(roster)


@pytest.mark.parametrize("workers", [1, 4])
def test_check_workers_accepts(workers):
    assert check_workers(workers) == workers


@pytest.mark.parametrize("workers", [0, -3, 2.0, True])
def test_check_workers_rejects(workers):
    with pytest.raises(SimulationRangeError, match="Workers must be at least 1") as exc_info:
        check_workers(workers)
    assert exc_info.value.parameter == "workers"



def test_check_distinct_teams():
    check_distinct_teams("a", "b")
    with pytest.raises(SimulationError, match="must be different"):
        check_distinct_teams("a", "a")


def test_roster_error_details():
    err = RosterError("Bad roster", validation_errors=[
        {"loc": ("players", 0, "at_bats"), "msg": "Input should be greater than or equal to 0"},
    ])
    assert err.details == ["players.0.at_bats: Input should be greater than or equal to 0"]
    assert "players.0.at_bats" in str(err)


def test_roster_error_without_details():
    err = RosterError("Bad roster")
    assert err.details == []
    assert str(err) == "Bad roster"


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------

def test_game_request_defaults():
    req = GameSimulationRequest()
    assert req.innings == 9
    assert req.seed is None


def test_game_request_rejects_out_of_range():
    with pytest.raises(ValidationError):
        GameSimulationRequest(innings=16)


def test_season_request_defaults():
    req = SeasonSimulationRequest(home_team_id="h")
    assert req.number_of_games == 10
    assert req.workers == 1
    assert req.away_team_id is None


def test_season_request_rejects_same_teams():
    with pytest.raises(ValidationError, match="must be different"):
        SeasonSimulationRequest(home_team_id="x", away_team_id="x")


def test_season_request_rejects_too_many_games():
    with pytest.raises(ValidationError):
        SeasonSimulationRequest(home_team_id="h", number_of_games=163)


def test_format_validation_error_names_parameter():
    try:
        SeasonSimulationRequest(home_team_id="h", number_of_games=0)
    except ValidationError as e:
        message = format_validation_error(e)
    assert message.startswith("Parameter 'number_of_games':")


def test_format_validation_error_plain_exception():
    assert format_validation_error(ValueError("boom")) == "boom"
