"""Discard policies applied when a 7 is rolled.

Every player holding more than DISCARD_THRESHOLD cards gives back half of
them, rounded down.  Which cards go is decided by a DiscardStrategy so the
default random policy can be swapped for one that asks the player.
"""

from __future__ import annotations

import abc
import collections
import random
from collections.abc import Callable

from ..errors import FailureReason, RuleViolation
from ..models import board, player

DISCARD_THRESHOLD = 7


def discard_count(hand: player.Resources) -> int:
    """Number of cards a hand must give up after a 7 (0 when at or under 7)."""
    total = hand.total()
    return total // 2 if total > DISCARD_THRESHOLD else 0


class DiscardStrategy(abc.ABC):
    """Chooses which cards a player returns to the bank."""

    @abc.abstractmethod
    def choose(
        self, p: player.Player, count: int, rng: random.Random
    ) -> dict[str, int]:
        """Return a resource-name -> amount dict summing to *count*."""


class RandomDiscard(DiscardStrategy):
    """Drop *count* cards picked uniformly at random from the hand."""

    def choose(
        self, p: player.Player, count: int, rng: random.Random
    ) -> dict[str, int]:
        pool = p.resources.as_pool()
        rng.shuffle(pool)
        return dict(collections.Counter(r.value for r in pool[:count]))


class ChooserDiscard(DiscardStrategy):
    """Ask a callback (typically the UI) which cards the player gives up."""

    def __init__(self, chooser: Callable[[player.Player, int], dict[str, int]]) -> None:
        self._chooser = chooser

    def choose(
        self, p: player.Player, count: int, rng: random.Random
    ) -> dict[str, int]:
        chosen = self._chooser(p, count)
        check_choice(p, count, chosen)
        return chosen


def check_choice(p: player.Player, count: int, chosen: dict[str, int]) -> None:
    """Reject a discard that is the wrong size or not covered by the hand.

    Raises:
        RuleViolation: INVALID_TARGET for an unknown resource, a negative amount
            or the wrong total; INSUFFICIENT_RESOURCES for cards not held.
    """
    names = {r.value for r in board.ResourceType}
    if any(name not in names for name in chosen):
        raise RuleViolation(
            FailureReason.INVALID_TARGET,
            f'Player {p.player_index} cannot discard unknown cards {chosen}.',
        )
    if any(a < 0 for a in chosen.values()) or sum(chosen.values()) != count:
        raise RuleViolation(
            FailureReason.INVALID_TARGET,
            f'Player {p.player_index} must discard {count} cards, '
            f'chooser picked {sum(chosen.values())}.',
        )
    if not p.resources.can_afford(chosen):
        raise RuleViolation(
            FailureReason.INSUFFICIENT_RESOURCES,
            f'Player {p.player_index} cannot discard {chosen}; '
            'not enough cards in hand.',
        )
