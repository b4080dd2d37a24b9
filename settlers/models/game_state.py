"""Game state model.

Captures the complete mutable state of a game in progress, including the
board, all players, the bank, the current turn, setup progress, and special
award tracking.
"""

from __future__ import annotations

import enum

import pydantic

from .board import Board
from .player import Player, Resources

DICE_SUMS = range(2, 13)


class GamePhase(enum.StrEnum):
    """High-level phases of a game."""

    # Initial placement: two rounds of settlement/road pairs.
    SETUP = 'setup'
    # Main game, current player has not rolled yet.
    ROLLING = 'rolling'
    # Main game after the roll: robber resolution, building, ending the turn.
    MAIN = 'main'
    # A player has reached 10 VP and the game is over.
    GAME_OVER = 'game_over'


class SetupStep(enum.StrEnum):
    """Which piece the current seat must place next during setup."""

    SETTLEMENT = 'settlement'
    ROAD = 'road'


class SetupPlacements(pydantic.BaseModel):
    """Pieces one seat has placed during the setup phase."""

    settlements: int = 0
    roads: int = 0


class SetupState(pydantic.BaseModel):
    """Progress through the two-round initial placement."""

    round: int = 1  # 1 = forward seat order, 2 = reverse seat order
    step: SetupStep = SetupStep.SETTLEMENT
    placements: list[SetupPlacements]
    # Vertex of the settlement the current seat placed this round.
    last_settlement_vertex_id: int | None = None


class DiceRoll(pydantic.BaseModel):
    """Both die faces of a single roll."""

    model_config = pydantic.ConfigDict(frozen=True)

    die1: int = pydantic.Field(ge=1, le=6)
    die2: int = pydantic.Field(ge=1, le=6)

    @property
    def total(self) -> int:
        """Sum of the two dice."""
        return self.die1 + self.die2


class TurnState(pydantic.BaseModel):
    """Transient state for the currently active turn."""

    player_index: int
    has_rolled: bool = False
    last_roll: DiceRoll | None = None  # None until dice are rolled
    # A 7 was rolled and the robber has not been moved yet.
    robber_pending: bool = False


def _empty_histogram() -> dict[int, int]:
    return {total: 0 for total in DICE_SUMS}


class GameState(pydantic.BaseModel):
    """Complete snapshot of a game at any point in time."""

    players: list[Player]
    board: Board
    bank: Resources
    phase: GamePhase = GamePhase.SETUP
    turn_state: TurnState
    setup: SetupState | None = None  # None once setup has finished
    # Count of every dice total rolled this game, keyed 2-12.
    roll_histogram: dict[int, int] = pydantic.Field(default_factory=_empty_histogram)
    # player_index of the current Longest Road holder, or None.
    longest_road_owner: int | None = None
    longest_road_length: int = 0
    # Largest Army needs knight cards, which this engine does not deal; the
    # fields are kept so snapshots carry the full scoring picture.
    largest_army_owner: int | None = None
    largest_army_size: int = 0
    # Turns completed since setup ended; 1 during the first main turn.
    turn_number: int = 0
    # player_index of the winner once phase == GAME_OVER, or None.
    winner_index: int | None = None

    @property
    def current_player(self) -> Player:
        """The player whose seat is active."""
        return self.players[self.turn_state.player_index]
