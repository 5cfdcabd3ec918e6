# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Outcome probabilities and sampling for a single plate appearance.

A stat line is turned into a discrete distribution over outcome categories
(six categories for combined-out lines, eight for legacy lines). Sampling
walks the categories in a fixed order, so the same distribution and the same
random value always give the same outcome.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Protocol, Sequence

from models import (
    EIGHT_WAY_ORDER,
    SIX_WAY_ORDER,
    LegacyPlayerStatLine,
    Outcome,
    StatLine,
)
from validation import SimulationError


class RandomSource(Protocol):
    def random(self) -> float: ...


@dataclass(frozen=True)
class OutcomeProbabilities:
    """Ordered outcome distribution for one player."""
    player_id: str
    entries: tuple[tuple[Outcome, float], ...]

    @property
    def outcomes(self) -> tuple[Outcome, ...]:
        return tuple(o for o, _ in self.entries)

    @property
    def total(self) -> float:
        return sum(p for _, p in self.entries)

    def get(self, outcome: Outcome) -> float:
        for o, p in self.entries:
            if o == outcome:
                return p
        return 0.0

    def with_player(self, player_id: str) -> OutcomeProbabilities:
        return OutcomeProbabilities(player_id=player_id, entries=self.entries)

    def to_dict(self) -> dict:
        return {"player_id": self.player_id, **{o.value: p for o, p in self.entries}}


def _distribution(player_id: str, order: Sequence[Outcome],
                  values: Sequence[float]) -> OutcomeProbabilities:
    return OutcomeProbabilities(player_id=player_id, entries=tuple(zip(order, values)))


# League-average production for players with no recorded plate appearances.
DEFAULT_PROBABILITIES = _distribution(
    "default", SIX_WAY_ORDER, (0.15, 0.05, 0.01, 0.03, 0.08, 0.68),
)
DEFAULT_LEGACY_PROBABILITIES = _distribution(
    "default", EIGHT_WAY_ORDER, (0.15, 0.05, 0.01, 0.03, 0.08, 0.20, 0.24, 0.24),
)


# ---------------------------------------------------------------------------
# Probability model
# ---------------------------------------------------------------------------

def compute_probabilities(player: StatLine) -> OutcomeProbabilities:
    """Convert a player's cumulative counts into outcome probabilities."""
    hit_counts = [player.singles, player.doubles, player.triples, player.home_runs, player.walks]

    if isinstance(player, LegacyPlayerStatLine):
        order = EIGHT_WAY_ORDER
        counts = hit_counts + [player.strikeouts, player.groundouts, player.flyouts]
        default = DEFAULT_LEGACY_PROBABILITIES
    else:
        order = SIX_WAY_ORDER
        counts = hit_counts + [player.outs]
        default = DEFAULT_PROBABILITIES

    total = sum(counts)
    if total == 0:
        return default.with_player(player.id)

    return _distribution(player.id, order, [c / total for c in counts])


def team_probabilities(players: Sequence[StatLine]) -> OutcomeProbabilities:
    """Average the per-player distributions of a roster.

    Legacy lines are averaged on the combined-out categories so that mixed
    rosters produce one six-way distribution.
    """
    if len(players) == 0:
        raise SimulationError("Cannot calculate probabilities for empty team")

    sums = dict.fromkeys(SIX_WAY_ORDER, 0.0)
    for player in players:
        for outcome, p in compute_probabilities(player).entries:
            sums[Outcome.OUT if outcome.is_out else outcome] += p

    count = len(players)
    return _distribution("team-average", SIX_WAY_ORDER, [sums[o] / count for o in SIX_WAY_ORDER])


# ---------------------------------------------------------------------------
# Sampler
# ---------------------------------------------------------------------------

def outcome_for_value(probabilities: OutcomeProbabilities, r: float) -> Outcome:
    """Map a uniform value in [0, 1) onto the ordered partition."""
    cumulative = 0.0
    for outcome, p in probabilities.entries:
        cumulative += p
        if r < cumulative:
            return outcome
    # Rounding can leave the partitions summing just under 1.
    return probabilities.entries[-1][0]


def sample_outcome(probabilities: OutcomeProbabilities,
                   rng: RandomSource | None = None) -> Outcome:
    """Draw one outcome using the injected random source."""
    source = rng if rng is not None else random.Random()
    return outcome_for_value(probabilities, source.random())
