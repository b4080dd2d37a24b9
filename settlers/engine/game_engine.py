"""Game engine facade.

Owns the single authoritative :class:`GameState` of a game and exposes the
query and command surface the presentation layer talks to.  Commands are
translated into action models and run through the pure processor; the
engine only swaps the new state in when the action succeeds, so a rejected
command leaves the game exactly as it was.  Everything handed out is a deep
copy.
"""

from __future__ import annotations

import logging
import random
import string

from common import settings

from ..models import actions, game_state, player, serializers
from . import discard, processor, rules, setup_placement, turn_manager

logger = logging.getLogger(__name__)

_GAME_ID_CHARS = string.ascii_uppercase + string.digits


class GameEngine:
    """One game in progress, driven seat by seat through the command methods.

    Args:
        player_names: Display names in seat order; defaults to four players.
        rng: Source of all randomness.  When omitted a ``random.Random`` is
            seeded from *seed*, falling back to ``settings.SEED``.
        seed: Seed for the default RNG; ignored when *rng* is given.
        bank_size: Starting cards per resource; defaults to
            ``settings.BANK_SIZE``.
        discard_strategy: Picks the cards dropped on a 7; random by default.
    """

    def __init__(
        self,
        player_names: list[str] | None = None,
        rng: random.Random | None = None,
        seed: int | None = None,
        bank_size: int | None = None,
        discard_strategy: discard.DiscardStrategy | None = None,
    ) -> None:
        if rng is None:
            rng = random.Random(seed if seed is not None else settings.SEED)
        self._rng = rng
        self._discard_strategy = discard_strategy or discard.RandomDiscard()
        self._state = turn_manager.create_initial_game_state(
            rng,
            player_names,
            bank_size if bank_size is not None else settings.BANK_SIZE,
        )
        self.game_id = ''.join(rng.choices(_GAME_ID_CHARS, k=4))
        logger.info(
            '[%s] Game created with %d players, robber on hex %d',
            self.game_id,
            len(self._state.players),
            self._state.board.robber_hex_id,
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_state(self) -> game_state.GameState:
        """Deep-copied snapshot; mutating it never affects the game."""
        return self._state.model_copy(deep=True)

    def get_current_player(self) -> player.Player:
        return self._state.current_player.model_copy(deep=True)

    def get_setup_status(self, player_index: int) -> game_state.SetupPlacements:
        """Settlements and roads *player_index* has placed during setup.

        Raises RuleViolation (INVALID_TARGET) for a seat that does not exist.
        """
        return setup_placement.setup_status(self._state, player_index)

    def get_vertex_placement_options(
        self, vertex_id: int
    ) -> list[actions.PlacementKind]:
        return rules.vertex_placement_options(self._state, vertex_id)

    def get_edge_placement_options(
        self, edge_id: int, vertex_id: int | None = None
    ) -> list[actions.PlacementKind]:
        return rules.edge_placement_options(self._state, edge_id, vertex_id)

    def get_robber_targets(self) -> list[int]:
        """Hex ids the robber may move to; empty unless a 7 is pending."""
        return rules.robber_hex_options(self._state)

    def snapshot_json(self) -> str:
        return serializers.game_state_to_json(self._state)

    # ------------------------------------------------------------------
    # Commands (always on behalf of the current seat)
    # ------------------------------------------------------------------

    def roll_dice(self) -> actions.ActionResult:
        return self._apply(actions.RollDice(player_index=self._seat()))

    def build_settlement(self, vertex_id: int) -> actions.ActionResult:
        return self._apply(
            actions.PlaceSettlement(player_index=self._seat(), vertex_id=vertex_id)
        )

    def build_city(self, vertex_id: int) -> actions.ActionResult:
        return self._apply(
            actions.PlaceCity(player_index=self._seat(), vertex_id=vertex_id)
        )

    def build_road(
        self, edge_id: int, vertex_id: int | None = None
    ) -> actions.ActionResult:
        return self._apply(
            actions.PlaceRoad(
                player_index=self._seat(), edge_id=edge_id, vertex_id=vertex_id
            )
        )

    def move_robber(
        self, hex_id: int, steal_from: int | None = None
    ) -> actions.ActionResult:
        return self._apply(
            actions.MoveRobber(
                player_index=self._seat(), hex_id=hex_id, steal_from=steal_from
            )
        )

    def end_turn(self) -> actions.ActionResult:
        return self._apply(actions.EndTurn(player_index=self._seat()))

    def handle_placement_intent(
        self, intent: actions.PlacementIntent
    ) -> actions.ActionResult:
        """Entry point for the UI: route a clicked placement to its command."""
        if intent.kind == actions.PlacementKind.SETTLEMENT:
            return self.build_settlement(intent.target_id)
        if intent.kind == actions.PlacementKind.CITY:
            return self.build_city(intent.target_id)
        return self.build_road(intent.target_id, intent.supporting_vertex_id)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _seat(self) -> int:
        return self._state.turn_state.player_index

    def _apply(self, action: actions.Action) -> actions.ActionResult:
        result = processor.apply_action(
            self._state, action, self._rng, self._discard_strategy
        )
        if not result.success:
            logger.debug(
                '[%s] Seat %d %s rejected: %s',
                self.game_id,
                action.player_index,
                action.action_type,
                result.failure,
            )
            return result

        new_state: game_state.GameState = result.updated_state
        self._log_success(action, result, new_state)
        self._state = new_state
        snapshot = new_state.model_copy(deep=True)
        return result.model_copy(update={'updated_state': snapshot})

    def _log_success(
        self,
        action: actions.Action,
        result: actions.ActionResult,
        new_state: game_state.GameState,
    ) -> None:
        if result.roll is not None:
            logger.info(
                '[%s] Seat %d rolled %d (%d+%d)',
                self.game_id,
                action.player_index,
                result.roll.total,
                result.roll.die1,
                result.roll.die2,
            )
        else:
            logger.info(
                '[%s] Seat %d: %s',
                self.game_id,
                action.player_index,
                action.action_type,
            )
        for notice in result.notices:
            logger.warning('[%s] %s', self.game_id, notice)
        if (
            new_state.phase == game_state.GamePhase.GAME_OVER
            and self._state.phase != game_state.GamePhase.GAME_OVER
        ):
            logger.info(
                '[%s] Game over, seat %s wins', self.game_id, new_state.winner_index
            )
