"""Unit tests for game state models."""

from __future__ import annotations

import random
import unittest

import pydantic

from settlers.engine import turn_manager
from settlers.models import game_state


class TestDiceRoll(unittest.TestCase):
    """Tests for DiceRoll."""

    def test_total(self) -> None:
        self.assertEqual(game_state.DiceRoll(die1=2, die2=5).total, 7)

    def test_faces_out_of_range_rejected(self) -> None:
        with self.assertRaises(pydantic.ValidationError):
            game_state.DiceRoll(die1=0, die2=3)
        with self.assertRaises(pydantic.ValidationError):
            game_state.DiceRoll(die1=4, die2=7)

    def test_frozen(self) -> None:
        roll = game_state.DiceRoll(die1=1, die2=1)
        with self.assertRaises(pydantic.ValidationError):
            roll.die1 = 6  # type: ignore[misc]


class TestGameState(unittest.TestCase):
    """Tests for GameState defaults and helpers."""

    def setUp(self) -> None:
        self.state = turn_manager.create_initial_game_state(random.Random(3))

    def test_histogram_covers_every_sum(self) -> None:
        self.assertEqual(sorted(self.state.roll_histogram), list(range(2, 13)))
        self.assertEqual(sum(self.state.roll_histogram.values()), 0)

    def test_current_player_follows_turn_state(self) -> None:
        self.state.turn_state = game_state.TurnState(player_index=2)
        self.assertEqual(self.state.current_player.player_index, 2)

    def test_no_awards_at_start(self) -> None:
        self.assertIsNone(self.state.longest_road_owner)
        self.assertIsNone(self.state.largest_army_owner)
        self.assertIsNone(self.state.winner_index)

    def test_deep_copy_is_independent(self) -> None:
        copy = self.state.model_copy(deep=True)
        copy.players[0].victory_points = 5
        copy.board.hexes[0].has_robber = not copy.board.hexes[0].has_robber
        self.assertEqual(self.state.players[0].victory_points, 0)
        self.assertNotEqual(
            copy.board.hexes[0].has_robber, self.state.board.hexes[0].has_robber
        )


if __name__ == '__main__':
    unittest.main()
