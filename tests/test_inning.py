# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Tests for the inning simulator.

Verifies:
1. An inning always ends on exactly three outs with at least three at-bats
2. Hits exclude walks and left-on-base counts runners at the third out
3. The lineup rotation wraps and the next batter slot is returned
4. Runs equal the RBI credited across the inning's at-bats
5. Invalid lineups and starting slots are rejected
"""

import random
import sys
from pathlib import Path

import pytest

# Ensure project root is on the path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from models import Outcome, create_default_players
from simulation import SimulationEngine
from validation import SimulationError


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

# Default players: 100 H, 50 BB, 300 outs over 450 plate appearances, so
# cumulative bounds are single .144, double .200, triple .211, home run .222,
# walk .333, out 1.0.
SINGLE_R = 0.10
DOUBLE_R = 0.17
TRIPLE_R = 0.205
HOME_RUN_R = 0.215
WALK_R = 0.30
OUT_R = 0.90


class FixedRandom:
    """Random source that returns the given values in order, cycling."""

    def __init__(self, *values):
        self.values = list(values)
        self.calls = 0

    def random(self):
        value = self.values[self.calls % len(self.values)]
        self.calls += 1
        return value


def lineup():
    return create_default_players("t")


def outs_in(result):
    return sum(1 for ab in result.at_bats if ab.outcome.is_out)


# ---------------------------------------------------------------------------
# Termination
# ---------------------------------------------------------------------------

def test_three_up_three_down():
    engine = SimulationEngine(rng=FixedRandom(OUT_R))
    result, next_batter = engine.simulate_inning(lineup(), 1)
    assert len(result.at_bats) == 3
    assert result.runs == 0
    assert result.hits == 0
    assert result.left_on_base == 0
    assert next_batter == 4


@pytest.mark.parametrize("seed", range(20))
def test_inning_always_ends_on_three_outs(seed):
    engine = SimulationEngine(seed=seed)
    result, _ = engine.simulate_inning(lineup(), 1)
    assert outs_in(result) == 3
    assert len(result.at_bats) >= 3
    assert result.at_bats[-1].outcome.is_out


# ---------------------------------------------------------------------------
# Scoring and counting
# ---------------------------------------------------------------------------

def test_walks_force_in_a_run():
    engine = SimulationEngine(rng=FixedRandom(WALK_R, WALK_R, WALK_R, WALK_R, OUT_R, OUT_R, OUT_R))
    result, next_batter = engine.simulate_inning(lineup(), 2)

    outcomes = [ab.outcome for ab in result.at_bats]
    assert outcomes == [Outcome.WALK] * 4 + [Outcome.OUT] * 3
    assert result.runs == 1
    assert result.hits == 0
    assert result.left_on_base == 3
    assert [ab.rbi for ab in result.at_bats] == [0, 0, 0, 1, 0, 0, 0]
    assert result.inning_number == 2
    assert next_batter == 8


def test_hits_and_runs():
    rng = FixedRandom(SINGLE_R, DOUBLE_R, HOME_RUN_R, TRIPLE_R, OUT_R, OUT_R, OUT_R)
    result, _ = SimulationEngine(rng=rng).simulate_inning(lineup(), 1)

    # single; double -> 2nd/3rd; home run scores 3; triple; three outs
    assert [ab.rbi for ab in result.at_bats] == [0, 0, 3, 0, 0, 0, 0]
    assert result.runs == 3
    assert result.hits == 4
    assert result.left_on_base == 1


@pytest.mark.parametrize("seed", range(10))
def test_runs_equal_rbi(seed):
    result, _ = SimulationEngine(seed=seed).simulate_inning(lineup(), 1)
    assert result.runs == sum(ab.rbi for ab in result.at_bats)
    assert result.hits == sum(1 for ab in result.at_bats if ab.outcome.is_hit)
    assert result.errors == 0


# ---------------------------------------------------------------------------
# Lineup rotation
# ---------------------------------------------------------------------------

def test_rotation_wraps_around_lineup():
    engine = SimulationEngine(rng=FixedRandom(OUT_R))
    result, next_batter = engine.simulate_inning(lineup(), 1, starting_batter=8)
    assert [ab.batting_order for ab in result.at_bats] == [8, 9, 1]
    assert next_batter == 2


def test_short_lineup_rotation():
    players = create_default_players("s", count=2)
    engine = SimulationEngine(rng=FixedRandom(WALK_R, OUT_R, OUT_R, OUT_R))
    result, next_batter = engine.simulate_inning(players, 1)
    assert [ab.batting_order for ab in result.at_bats] == [1, 2, 1, 2]
    assert next_batter == 1


def test_legacy_lineup_records_split_outs():
    from models import LegacyPlayerStatLine

    players = [
        LegacyPlayerStatLine(id=f"l{i}", name=f"Legacy {i}", batting_order=i,
                             singles=10, walks=5, strikeouts=10, groundouts=10, flyouts=10)
        for i in range(1, 10)
    ]
    result, _ = SimulationEngine(seed=3).simulate_inning(players, 1)
    out_types = {ab.outcome for ab in result.at_bats if ab.outcome.is_out}
    assert out_types <= {Outcome.STRIKEOUT, Outcome.GROUNDOUT, Outcome.FLYOUT}


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

def test_empty_lineup():
    with pytest.raises(SimulationError, match="no players"):
        SimulationEngine(seed=1).simulate_inning([], 1)


@pytest.mark.parametrize("slot", [0, 10, -1])
def test_starting_batter_out_of_range(slot):
    with pytest.raises(SimulationError, match="Starting batter"):
        SimulationEngine(seed=1).simulate_inning(lineup(), 1, starting_batter=slot)


def test_inning_to_dict():
    result, _ = SimulationEngine(rng=random.Random(5)).simulate_inning(lineup(), 1)
    d = result.to_dict()
    assert d["inning_number"] == 1
    assert d["errors"] == 0
    assert len(d["at_bats"]) == len(result.at_bats)
