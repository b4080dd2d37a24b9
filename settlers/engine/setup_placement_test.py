"""Unit tests for the setup-phase placement state machine."""

from __future__ import annotations

import random
import unittest

from settlers.engine import rules, setup_placement, turn_manager
from settlers.errors import FailureReason, RuleViolation
from settlers.models.board import TerrainType
from settlers.models.game_state import GamePhase, GameState, SetupStep
from settlers.models.player import Resources

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _new_state(seed: int = 42, **kwargs) -> GameState:
    return turn_manager.create_initial_game_state(random.Random(seed), **kwargs)


def _first_legal_vertex(state: GameState) -> int:
    seat = state.turn_state.player_index
    return next(
        v.vertex_id
        for v in state.board.vertices
        if rules.setup_settlement_violation(state, seat, v.vertex_id) is None
    )


def _first_legal_edge(state: GameState) -> int:
    seat = state.turn_state.player_index
    return next(
        e.edge_id
        for e in state.board.edges
        if rules.setup_road_violation(state, seat, e.edge_id) is None
    )


def _place_pair(state: GameState) -> tuple[int, int]:
    """Place the current seat's settlement and road at the first legal spots."""
    seat = state.turn_state.player_index
    vertex_id = _first_legal_vertex(state)
    setup_placement.place_settlement(state, seat, vertex_id)
    setup_placement.place_road(state, seat, _first_legal_edge(state))
    return seat, vertex_id


def _occupied_neighbours(state: GameState) -> list[tuple[int, int]]:
    brd = state.board
    return [
        (v.vertex_id, adj)
        for v in brd.vertices
        if v.building is not None
        for adj in v.adjacent_vertex_ids
        if brd.vertices[adj].building is not None
    ]


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------


class TestSetupOrder(unittest.TestCase):
    """Seat order through both rounds."""

    def test_four_seat_snake_order(self) -> None:
        state = _new_state()
        order = [_place_pair(state)[0] for _ in range(8)]
        self.assertEqual(order, [0, 1, 2, 3, 3, 2, 1, 0])
        self.assertEqual(state.phase, GamePhase.ROLLING)
        self.assertEqual(state.turn_state.player_index, 0)
        self.assertEqual(state.turn_number, 1)
        self.assertIsNone(state.setup)

    def test_two_seat_snake_order(self) -> None:
        state = _new_state(player_names=['Alice', 'Bob'])
        order = [_place_pair(state)[0] for _ in range(4)]
        self.assertEqual(order, [0, 1, 1, 0])
        self.assertEqual(state.phase, GamePhase.ROLLING)

    def test_everyone_ends_with_two_of_each(self) -> None:
        state = _new_state()
        for _ in range(8):
            _place_pair(state)
        for p in state.players:
            self.assertEqual(p.settlements_built, 2)
            self.assertEqual(p.roads_built, 2)
            self.assertEqual(p.victory_points, 2)
            status = setup_placement.setup_status(state, p.player_index)
            self.assertEqual((status.settlements, status.roads), (2, 2))

    def test_step_alternates(self) -> None:
        state = _new_state()
        self.assertEqual(state.setup.step, SetupStep.SETTLEMENT)
        setup_placement.place_settlement(state, 0, _first_legal_vertex(state))
        self.assertEqual(state.setup.step, SetupStep.ROAD)
        status = setup_placement.setup_status(state, 0)
        self.assertEqual((status.settlements, status.roads), (1, 0))

    def test_turnaround_stays_on_last_seat(self) -> None:
        state = _new_state()
        for _ in range(4):
            _place_pair(state)
        self.assertEqual(state.setup.round, 2)
        self.assertEqual(state.turn_state.player_index, 3)


class TestInitialResources(unittest.TestCase):
    """Only the second settlement pays out."""

    def test_round_one_grants_nothing(self) -> None:
        state = _new_state()
        _place_pair(state)
        self.assertEqual(state.players[0].resources.total(), 0)
        self.assertEqual(state.bank.total(), 95)

    def test_round_two_grants_one_per_productive_hex(self) -> None:
        state = _new_state()
        for _ in range(4):
            _place_pair(state)
        vertex_id = _first_legal_vertex(state)
        productive = [
            h
            for h in state.board.vertices[vertex_id].adjacent_hex_ids
            if state.board.hexes[h].terrain != TerrainType.DESERT
        ]
        notices = setup_placement.place_settlement(state, 3, vertex_id)
        self.assertEqual(notices, [])
        self.assertEqual(state.players[3].resources.total(), len(productive))
        self.assertEqual(state.bank.total(), 95 - len(productive))

    def test_empty_bank_reports_exhaustion(self) -> None:
        state = _new_state()
        for _ in range(4):
            _place_pair(state)
        state.bank = Resources()
        vertex_id = next(
            v.vertex_id
            for v in state.board.vertices
            if rules.setup_settlement_violation(state, 3, v.vertex_id) is None
            and any(
                state.board.hexes[h].resource is not None for h in v.adjacent_hex_ids
            )
        )
        notices = setup_placement.place_settlement(state, 3, vertex_id)
        self.assertIn(FailureReason.BANK_EXHAUSTED, notices)
        self.assertEqual(state.players[3].resources.total(), 0)
        # The settlement itself still stands.
        self.assertIsNotNone(state.board.vertices[vertex_id].building)


class TestSetupRejections(unittest.TestCase):
    """Rejected placements raise RuleViolation and leave state untouched."""

    def setUp(self) -> None:
        self.state = _new_state()

    def _assert_rejected(self, reason: FailureReason, func, *args) -> None:
        before = self.state.model_copy(deep=True)
        with self.assertRaises(RuleViolation) as ctx:
            func(self.state, *args)
        self.assertEqual(ctx.exception.reason, reason)
        self.assertEqual(self.state, before)

    def test_wrong_seat(self) -> None:
        self._assert_rejected(
            FailureReason.NOT_CURRENT_PLAYER, setup_placement.place_settlement, 1, 0
        )

    def test_road_before_settlement(self) -> None:
        self._assert_rejected(
            FailureReason.WRONG_PHASE, setup_placement.place_road, 0, 0
        )

    def test_second_settlement_before_road(self) -> None:
        setup_placement.place_settlement(self.state, 0, 0)
        far = next(
            v.vertex_id
            for v in self.state.board.vertices
            if rules.settlement_site_violation(self.state.board, v.vertex_id) is None
        )
        self._assert_rejected(
            FailureReason.WRONG_PHASE, setup_placement.place_settlement, 0, far
        )

    def test_out_of_range_vertex(self) -> None:
        self._assert_rejected(
            FailureReason.INVALID_TARGET, setup_placement.place_settlement, 0, 99
        )

    def test_occupied_and_too_close(self) -> None:
        _place_pair(self.state)
        taken = next(
            v.vertex_id for v in self.state.board.vertices if v.building is not None
        )
        self._assert_rejected(
            FailureReason.CELL_OCCUPIED, setup_placement.place_settlement, 1, taken
        )
        neighbour = self.state.board.vertices[taken].adjacent_vertex_ids[0]
        self._assert_rejected(
            FailureReason.DISTANCE_RULE_VIOLATION,
            setup_placement.place_settlement,
            1,
            neighbour,
        )

    def test_road_must_touch_new_settlement(self) -> None:
        setup_placement.place_settlement(self.state, 0, 0)
        detached = next(
            e.edge_id for e in self.state.board.edges if 0 not in e.vertex_ids
        )
        self._assert_rejected(
            FailureReason.NOT_CONNECTED, setup_placement.place_road, 0, detached
        )

    def test_round_two_road_may_use_first_settlement(self) -> None:
        """A round-2 road may hang off either of the seat's settlements."""
        state = _new_state(player_names=['Alice', 'Bob'])
        _place_pair(state)  # seat 0
        _place_pair(state)  # seat 1, round 1
        # Seat 1 places its round-2 settlement; its road may now hang off
        # the round-1 settlement instead.
        first = next(
            v.vertex_id
            for v in state.board.vertices
            if v.building is not None and v.building.player_index == 1
        )
        setup_placement.place_settlement(state, 1, _first_legal_vertex(state))
        free_edge = next(
            e
            for e in state.board.vertices[first].adjacent_edge_ids
            if state.board.edges[e].road is None
        )
        self.assertIsNone(rules.setup_road_violation(state, 1, free_edge))

    def test_setup_over(self) -> None:
        for _ in range(8):
            _place_pair(self.state)
        self._assert_rejected(
            FailureReason.WRONG_PHASE, setup_placement.place_settlement, 0, 30
        )


class TestDistanceRule(unittest.TestCase):
    """No two settlements ever end up on neighbouring vertices."""

    def test_random_setup_attempts(self) -> None:
        for seed in range(5):
            rng = random.Random(seed)
            state = _new_state(seed)
            attempts = 0
            while state.phase == GamePhase.SETUP:
                seat = state.turn_state.player_index
                vertex_id = rng.randrange(len(state.board.vertices))
                attempts += 1
                try:
                    setup_placement.place_settlement(state, seat, vertex_id)
                except RuleViolation as exc:
                    self.assertIn(
                        exc.reason,
                        (
                            FailureReason.CELL_OCCUPIED,
                            FailureReason.DISTANCE_RULE_VIOLATION,
                        ),
                    )
                else:
                    setup_placement.place_road(state, seat, _first_legal_edge(state))
                self.assertEqual(_occupied_neighbours(state), [])
            self.assertGreaterEqual(attempts, 8)


class TestSetupStatus(unittest.TestCase):
    """Tests for setup_status."""

    def test_counts_during_setup(self) -> None:
        state = _new_state()
        _place_pair(state)
        status = setup_placement.setup_status(state, 0)
        self.assertEqual((status.settlements, status.roads), (1, 1))
        status = setup_placement.setup_status(state, 1)
        self.assertEqual((status.settlements, status.roads), (0, 0))

    def test_unknown_seat_rejected_in_both_phases(self) -> None:
        state = _new_state(player_names=['Alice', 'Bob'])
        for seat in (-1, 2, 7):
            with self.assertRaises(RuleViolation) as ctx:
                setup_placement.setup_status(state, seat)
            self.assertEqual(ctx.exception.reason, FailureReason.INVALID_TARGET)
        for _ in range(4):
            _place_pair(state)
        self.assertEqual(state.phase, GamePhase.ROLLING)
        for seat in (-1, 2, 7):
            with self.assertRaises(RuleViolation):
                setup_placement.setup_status(state, seat)
        self.assertEqual(setup_placement.setup_status(state, 1).roads, 2)


if __name__ == '__main__':
    unittest.main()
