"""Pydantic action schemas for every engine command.

Each action subclass carries the data needed to apply that command to a
GameState.  The ActionResult carries the outcome back to the caller, and
PlacementIntent is what the UI layer hands over when a player clicks a cell.
"""

from __future__ import annotations

import enum
from typing import Annotated, Any, Literal

import pydantic

from ..errors import FailureReason
from .game_state import DiceRoll


class ActionType(enum.StrEnum):
    """Discriminator values for every action type."""

    PLACE_SETTLEMENT = 'place_settlement'
    PLACE_CITY = 'place_city'
    PLACE_ROAD = 'place_road'
    ROLL_DICE = 'roll_dice'
    MOVE_ROBBER = 'move_robber'
    END_TURN = 'end_turn'


class BaseAction(pydantic.BaseModel):
    """Base for all game actions. Every action identifies its acting player."""

    player_index: int


class PlaceSettlement(BaseAction):
    """Place a settlement on a vertex (setup or main phase)."""

    action_type: Literal[ActionType.PLACE_SETTLEMENT] = ActionType.PLACE_SETTLEMENT
    vertex_id: int


class PlaceCity(BaseAction):
    """Upgrade an existing settlement to a city on a vertex."""

    action_type: Literal[ActionType.PLACE_CITY] = ActionType.PLACE_CITY
    vertex_id: int


class PlaceRoad(BaseAction):
    """Place a road on an edge."""

    action_type: Literal[ActionType.PLACE_ROAD] = ActionType.PLACE_ROAD
    edge_id: int
    # Vertex the UI anchored the road on; must be one of the edge's endpoints
    # when given.  Connectivity is always checked against the board.
    vertex_id: int | None = None


class RollDice(BaseAction):
    """Roll the two dice to start a main-phase turn."""

    action_type: Literal[ActionType.ROLL_DICE] = ActionType.ROLL_DICE


class MoveRobber(BaseAction):
    """Move the robber after a 7, optionally stealing from an adjacent opponent."""

    action_type: Literal[ActionType.MOVE_ROBBER] = ActionType.MOVE_ROBBER
    hex_id: int
    steal_from: int | None = None


class EndTurn(BaseAction):
    """End the current player's turn and advance to the next seat."""

    action_type: Literal[ActionType.END_TURN] = ActionType.END_TURN


# Discriminated union of all action types for deserialization.
Action = Annotated[
    PlaceSettlement | PlaceCity | PlaceRoad | RollDice | MoveRobber | EndTurn,
    pydantic.Field(discriminator='action_type'),
]


class ActionResult(pydantic.BaseModel):
    """Result returned by the processor after attempting to apply an action.

    The updated GameState is carried as ``Any`` here to avoid a circular
    import with the engine layer; callers cast it to ``GameState``.
    """

    success: bool
    failure: FailureReason | None = None
    error_message: str | None = None
    # Non-fatal conditions hit while applying (e.g. BANK_EXHAUSTED).
    notices: list[FailureReason] = pydantic.Field(default_factory=list)
    # Dice thrown by a RollDice action.
    roll: DiceRoll | None = None
    # Updated game state after the action (None on failure).
    updated_state: Any | None = None


class PlacementKind(enum.StrEnum):
    """What the UI is asking to place."""

    SETTLEMENT = 'settlement'
    CITY = 'city'
    ROAD = 'road'


class PlacementIntent(pydantic.BaseModel):
    """A placement request from the UI layer.

    ``target_id`` is a vertex id for settlements and cities and an edge id for
    roads; ``supporting_vertex_id`` is the vertex a road was dragged from.
    """

    kind: PlacementKind
    target_id: int
    supporting_vertex_id: int | None = None
