"""Turn manager.

Handles game state initialization and main-phase turn advancement.
"""

from __future__ import annotations

import random

from ..board_generator import generate_board
from ..models.game_state import (
    GamePhase,
    GameState,
    SetupPlacements,
    SetupState,
    TurnState,
)
from ..models.player import Player, PlayerColor, Resources
from . import rules

DEFAULT_PLAYER_NAMES = ['Player 1', 'Player 2', 'Player 3', 'Player 4']
DEFAULT_BANK_SIZE = 19


def create_initial_game_state(
    rng: random.Random,
    player_names: list[str] | None = None,
    bank_size: int = DEFAULT_BANK_SIZE,
) -> GameState:
    """Create and return a fresh GameState ready for the setup phase.

    Args:
        rng: Source of every shuffle used to build the board.
        player_names: Display names in seat order (2 to 4); defaults to four
            generic names.  Colours are assigned in PlayerColor order.
        bank_size: Cards of each resource the bank starts with.

    Returns:
        A :class:`GameState` in SETUP phase, seat 0 to place first.

    Raises:
        ValueError: If the number of players is not between 2 and 4.
        BoardGenerationError: If the board cannot be generated.
    """
    names = player_names if player_names is not None else DEFAULT_PLAYER_NAMES
    if not 2 <= len(names) <= len(PlayerColor):
        raise ValueError(f'Need 2 to {len(PlayerColor)} players, got {len(names)}.')

    board, _ = generate_board(rng)

    players = [
        Player(player_index=i, name=name, color=color)
        for i, (name, color) in enumerate(zip(names, PlayerColor, strict=False))
    ]

    return GameState(
        players=players,
        board=board,
        bank=Resources.uniform(bank_size),
        phase=GamePhase.SETUP,
        turn_state=TurnState(player_index=0),
        setup=SetupState(placements=[SetupPlacements() for _ in players]),
        turn_number=0,
    )


def advance_turn(state: GameState) -> GameState:
    """Pass play to the next seat after a main-phase turn ends.

    Clears the roll, moves the seat circularly, bumps the turn counter, and
    ends the game if the incoming player already has enough victory points.
    Modifies ``state`` in place and returns it.
    """
    next_player = (state.turn_state.player_index + 1) % len(state.players)
    state.turn_state = TurnState(player_index=next_player)
    state.phase = GamePhase.ROLLING
    state.turn_number += 1

    if state.players[next_player].victory_points >= rules.VICTORY_POINTS_TO_WIN:
        state.phase = GamePhase.GAME_OVER
        state.winner_index = next_player
    return state
