"""Setup-phase placement state machine.

Two rounds of settlement-then-road placement.  Round 1 visits seats in
forward order and round 2 in reverse, with the last seat placing twice in a
row at the turn-around::

    round 1:  0 -> 1 -> ... -> N-1
    round 2:  N-1 -> ... -> 1 -> 0  -> main game, seat 0 rolls first

Only the round-2 settlement earns resources: one card per productive hex it
touches.  Every function here validates completely before writing, and
raises :class:`~settlers.errors.RuleViolation` on a rejected placement.
"""

from __future__ import annotations

import logging

from ..errors import FailureReason, RuleViolation
from ..models import board, game_state
from . import rules

logger = logging.getLogger(__name__)


def place_settlement(
    state: game_state.GameState, player_index: int, vertex_id: int
) -> list[FailureReason]:
    """Place a setup settlement and return any non-fatal notices."""
    violation = rules.setup_settlement_violation(state, player_index, vertex_id)
    if violation is not None:
        raise RuleViolation(
            violation, f'Cannot place a setup settlement on vertex {vertex_id}.'
        )
    setup = _setup(state)

    state.board.vertices[vertex_id].building = board.Building(
        player_index=player_index, building_type=board.BuildingType.SETTLEMENT
    )
    p = state.players[player_index]
    p.settlements_built += 1
    p.victory_points += 1
    setup.placements[player_index].settlements += 1
    setup.last_settlement_vertex_id = vertex_id
    setup.step = game_state.SetupStep.ROAD

    if setup.round == 2:
        return grant_initial_resources(state, player_index, vertex_id)
    return []


def place_road(
    state: game_state.GameState, player_index: int, edge_id: int
) -> None:
    """Place a setup road, then hand the turn to the next seat."""
    violation = rules.setup_road_violation(state, player_index, edge_id)
    if violation is not None:
        raise RuleViolation(violation, f'Cannot place a setup road on edge {edge_id}.')
    setup = _setup(state)

    state.board.edges[edge_id].road = board.Road(player_index=player_index)
    state.players[player_index].roads_built += 1
    setup.placements[player_index].roads += 1
    advance_setup(state)


def grant_initial_resources(
    state: game_state.GameState, player_index: int, vertex_id: int
) -> list[FailureReason]:
    """Give one card per productive hex around *vertex_id*, bank permitting."""
    p = state.players[player_index]
    notices: list[FailureReason] = []
    for hex_id in state.board.vertices[vertex_id].adjacent_hex_ids:
        resource = state.board.hexes[hex_id].resource
        if resource is None:
            continue
        if state.bank.get(resource) < 1:
            notices.append(FailureReason.BANK_EXHAUSTED)
            continue
        state.bank = state.bank.subtract({resource.value: 1})
        p.resources = p.resources.add({resource.value: 1})
    return notices


def advance_setup(state: game_state.GameState) -> game_state.GameState:
    """Move to the next seat (or round, or the main game) after a setup road.

    Modifies ``state`` in place and returns it.
    """
    setup = _setup(state)
    num_players = len(state.players)
    current = state.turn_state.player_index

    setup.step = game_state.SetupStep.SETTLEMENT
    setup.last_settlement_vertex_id = None

    if setup.round == 1:
        if current == num_players - 1:
            # Switch direction: same seat places again in round 2.
            setup.round = 2
        else:
            state.turn_state = game_state.TurnState(player_index=current + 1)
    elif current == 0:
        # Setup complete; begin the main game.
        state.setup = None
        state.phase = game_state.GamePhase.ROLLING
        state.turn_number = 1
        state.turn_state = game_state.TurnState(player_index=0)
        logger.info('Setup complete; seat 0 rolls first')
    else:
        state.turn_state = game_state.TurnState(player_index=current - 1)
    return state


def setup_status(
    state: game_state.GameState, player_index: int
) -> game_state.SetupPlacements:
    """Pieces *player_index* has placed during setup (2 and 2 once finished).

    Raises:
        RuleViolation: INVALID_TARGET if no such seat exists.
    """
    if not 0 <= player_index < len(state.players):
        raise RuleViolation(
            FailureReason.INVALID_TARGET, f'No player at seat {player_index}.'
        )
    if state.setup is None:
        return game_state.SetupPlacements(settlements=2, roads=2)
    return state.setup.placements[player_index].model_copy()


def _setup(state: game_state.GameState) -> game_state.SetupState:
    if state.setup is None:
        raise RuleViolation(FailureReason.WRONG_PHASE, 'Setup has already finished.')
    return state.setup
