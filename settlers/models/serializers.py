"""JSON serialization helpers for engine models.

Thin wrappers around Pydantic's built-in serialization so that callers
(the UI layer, save files, test fixtures) can move snapshots in and out of
JSON without depending on Pydantic internals.
"""

from __future__ import annotations

import typing

import pydantic

from .board import Board
from .game_state import GameState
from .player import Player


def serialize_model(model: pydantic.BaseModel) -> dict[str, typing.Any]:
    """Return a JSON-serializable dict representation of any Pydantic model."""
    return model.model_dump(mode='json')


def deserialize_board(data: dict[str, typing.Any]) -> Board:
    return Board.model_validate(data)


def deserialize_player(data: dict[str, typing.Any]) -> Player:
    return Player.model_validate(data)


def deserialize_game_state(data: dict[str, typing.Any]) -> GameState:
    """Rebuild a GameState from a dict produced by :func:`serialize_model`.

    Histogram keys come back from JSON as strings; validation coerces them
    to ints.
    """
    return GameState.model_validate(data)


def game_state_to_json(game_state: GameState) -> str:
    """Convert a GameState to a compact JSON string."""
    return game_state.model_dump_json()


def game_state_from_json(json_str: str) -> GameState:
    """Parse a JSON string back into a GameState instance."""
    return GameState.model_validate_json(json_str)
