"""Action processor.

Applies a single game action to a GameState and returns the result.
This is a pure function: the original state is never modified.  Handlers
validate every rule before writing and raise RuleViolation otherwise; the
deep copy made up front means a rejected action can never leak a partial
write back to the caller.
"""

from __future__ import annotations

import collections
import logging
import random

from ..errors import FailureReason, RuleViolation
from ..models import actions, board, game_state, player
from . import discard, longest_road, rules, setup_placement, turn_manager

logger = logging.getLogger(__name__)

_DEFAULT_DISCARD = discard.RandomDiscard()

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def apply_action(
    state: game_state.GameState,
    action: actions.Action,
    rng: random.Random,
    discard_strategy: discard.DiscardStrategy | None = None,
) -> actions.ActionResult:
    """Apply *action* to *state* and return an :class:`ActionResult`.

    The original state is never modified; a deep copy is made first.
    On a rule violation an :class:`ActionResult` with ``success=False`` and
    the matching FailureReason is returned.
    """
    state = state.model_copy(deep=True)

    try:
        notices = _dispatch(state, action, rng, discard_strategy or _DEFAULT_DISCARD)
    except RuleViolation as exc:
        logger.debug('Rejected %s: %s (%s)', action.action_type, exc, exc.reason)
        return actions.ActionResult(
            success=False, failure=exc.reason, error_message=str(exc)
        )

    # Check for a winner after every action.
    if state.phase != game_state.GamePhase.GAME_OVER:
        winner = rules.check_victory_condition(state)
        if winner is not None:
            state.phase = game_state.GamePhase.GAME_OVER
            state.winner_index = winner

    roll = state.turn_state.last_roll if isinstance(action, actions.RollDice) else None
    return actions.ActionResult(
        success=True, notices=notices, roll=roll, updated_state=state
    )


def distribute_resources(
    state: game_state.GameState, roll: int
) -> list[FailureReason]:
    """Pay out every unblocked hex whose token matches *roll*.

    Settlements earn 1 card and cities 2.  Hexes are paid in hex-ID order;
    when the bank cannot cover a hex's whole payout, that hex pays nothing
    and its resource pays nobody else for the rest of this roll.

    Returns:
        ``[BANK_EXHAUSTED]`` per skipped hex, else an empty list.
    """
    notices: list[FailureReason] = []
    exhausted: set[board.ResourceType] = set()

    for tile in state.board.hexes:
        if tile.number_token != roll or tile.has_robber:
            continue
        resource = tile.resource
        if resource is None or resource in exhausted:
            continue

        payouts: dict[int, int] = collections.defaultdict(int)
        for vid in tile.vertex_ids:
            building = state.board.vertices[vid].building
            if building is None:
                continue
            amount = 2 if building.building_type == board.BuildingType.CITY else 1
            payouts[building.player_index] += amount

        demand = sum(payouts.values())
        if demand == 0:
            continue
        if demand > state.bank.get(resource):
            exhausted.add(resource)
            notices.append(FailureReason.BANK_EXHAUSTED)
            logger.warning(
                'Bank has %d %s, hex %d needs %d; skipping',
                state.bank.get(resource),
                resource,
                tile.hex_id,
                demand,
            )
            continue

        state.bank = state.bank.subtract({resource.value: demand})
        for player_index, amount in payouts.items():
            p = state.players[player_index]
            p.resources = p.resources.add({resource.value: amount})
    return notices


# ---------------------------------------------------------------------------
# Internal dispatch
# ---------------------------------------------------------------------------


def _dispatch(
    state: game_state.GameState,
    action: actions.Action,
    rng: random.Random,
    discard_strategy: discard.DiscardStrategy,
) -> list[FailureReason]:
    """Mutate *state* in place according to *action* type; return notices."""
    if isinstance(action, actions.PlaceSettlement):
        return _apply_place_settlement(state, action)
    if isinstance(action, actions.PlaceRoad):
        _apply_place_road(state, action)
    elif isinstance(action, actions.PlaceCity):
        _apply_place_city(state, action)
    elif isinstance(action, actions.RollDice):
        return _apply_roll_dice(state, action, rng, discard_strategy)
    elif isinstance(action, actions.MoveRobber):
        _apply_move_robber(state, action, rng)
    elif isinstance(action, actions.EndTurn):
        _apply_end_turn(state, action)
    else:
        raise TypeError(f'Unknown action type: {type(action).__name__}')
    return []


# ---------------------------------------------------------------------------
# Action handlers
# ---------------------------------------------------------------------------


def _apply_place_settlement(
    state: game_state.GameState, action: actions.PlaceSettlement
) -> list[FailureReason]:
    if state.phase == game_state.GamePhase.SETUP:
        return setup_placement.place_settlement(
            state, action.player_index, action.vertex_id
        )

    _raise_if(
        rules.main_settlement_violation(state, action.player_index, action.vertex_id),
        f'Cannot build a settlement on vertex {action.vertex_id}.',
    )
    state.board.vertices[action.vertex_id].building = board.Building(
        player_index=action.player_index,
        building_type=board.BuildingType.SETTLEMENT,
    )
    p = state.players[action.player_index]
    _pay(state, p, player.SETTLEMENT_COST)
    p.settlements_built += 1
    p.victory_points += 1
    return []


def _apply_place_city(state: game_state.GameState, action: actions.PlaceCity) -> None:
    _raise_if(
        rules.city_violation(state, action.player_index, action.vertex_id),
        f'Cannot build a city on vertex {action.vertex_id}.',
    )
    state.board.vertices[action.vertex_id].building = board.Building(
        player_index=action.player_index,
        building_type=board.BuildingType.CITY,
    )
    p = state.players[action.player_index]
    _pay(state, p, player.CITY_COST)
    p.settlements_built -= 1
    p.cities_built += 1
    p.victory_points += 1  # was 1 for settlement, now 2 total


def _apply_place_road(state: game_state.GameState, action: actions.PlaceRoad) -> None:
    in_setup = state.phase == game_state.GamePhase.SETUP
    check = rules.setup_road_violation if in_setup else rules.main_road_violation
    _raise_if(
        check(state, action.player_index, action.edge_id),
        f'Cannot place a road on edge {action.edge_id}.',
    )
    # Phase and seat errors take precedence over a mismatched anchor.
    _raise_if(
        rules.road_anchor_violation(state.board, action.edge_id, action.vertex_id),
        f'Vertex {action.vertex_id} is not an end of edge {action.edge_id}.',
    )
    if in_setup:
        setup_placement.place_road(state, action.player_index, action.edge_id)
    else:
        state.board.edges[action.edge_id].road = board.Road(
            player_index=action.player_index
        )
        p = state.players[action.player_index]
        _pay(state, p, player.ROAD_COST)
        p.roads_built += 1

    _update_longest_road(state)


def _apply_roll_dice(
    state: game_state.GameState,
    action: actions.RollDice,
    rng: random.Random,
    discard_strategy: discard.DiscardStrategy,
) -> list[FailureReason]:
    if state.phase not in (game_state.GamePhase.ROLLING, game_state.GamePhase.MAIN):
        raise RuleViolation(
            FailureReason.WRONG_PHASE, 'Dice can only be rolled in play.'
        )
    _require_current_player(state, action.player_index)
    if state.turn_state.has_rolled:
        raise RuleViolation(
            FailureReason.ALREADY_ROLLED, 'Dice already rolled this turn.'
        )

    roll = game_state.DiceRoll(die1=rng.randint(1, 6), die2=rng.randint(1, 6))
    state.turn_state.last_roll = roll
    state.turn_state.has_rolled = True
    state.roll_histogram[roll.total] += 1
    state.phase = game_state.GamePhase.MAIN

    if roll.total == 7:
        _discard_half_hands(state, rng, discard_strategy)
        state.turn_state.robber_pending = True
        return []
    return distribute_resources(state, roll.total)


def _discard_half_hands(
    state: game_state.GameState,
    rng: random.Random,
    discard_strategy: discard.DiscardStrategy,
) -> None:
    """Every player over the threshold returns half their hand to the bank."""
    for p in state.players:
        count = discard.discard_count(p.resources)
        if count == 0:
            continue
        chosen = discard_strategy.choose(p, count, rng)
        discard.check_choice(p, count, chosen)
        p.resources = p.resources.subtract(chosen)
        state.bank = state.bank.add(chosen)
        logger.info('Player %d discarded %d cards', p.player_index, count)


def _apply_move_robber(
    state: game_state.GameState, action: actions.MoveRobber, rng: random.Random
) -> None:
    if state.phase != game_state.GamePhase.MAIN or not state.turn_state.robber_pending:
        raise RuleViolation(
            FailureReason.WRONG_PHASE, 'The robber is not waiting to move.'
        )
    _require_current_player(state, action.player_index)
    if not rules.valid_hex(state.board, action.hex_id):
        raise RuleViolation(
            FailureReason.INVALID_TARGET, f'No hex with id {action.hex_id}.'
        )
    if action.hex_id == state.board.robber_hex_id:
        raise RuleViolation(
            FailureReason.INVALID_TARGET, 'Robber must move to a different hex.'
        )
    if action.steal_from is not None and action.steal_from not in (
        rules.steal_candidates(state, action.hex_id, action.player_index)
    ):
        raise RuleViolation(
            FailureReason.INVALID_TARGET,
            f'Player {action.steal_from} cannot be robbed at hex {action.hex_id}.',
        )

    state.board.hexes[state.board.robber_hex_id].has_robber = False
    state.board.hexes[action.hex_id].has_robber = True
    state.board.robber_hex_id = action.hex_id
    state.turn_state.robber_pending = False

    if action.steal_from is not None:
        target = state.players[action.steal_from]
        chosen = rng.choice(target.resources.as_pool())
        target.resources = target.resources.subtract({chosen.value: 1})
        actor = state.players[action.player_index]
        actor.resources = actor.resources.add({chosen.value: 1})


def _apply_end_turn(state: game_state.GameState, action: actions.EndTurn) -> None:
    if state.phase != game_state.GamePhase.MAIN or state.turn_state.robber_pending:
        raise RuleViolation(
            FailureReason.WRONG_PHASE, 'Turn can only end after rolling and robbing.'
        )
    _require_current_player(state, action.player_index)
    turn_manager.advance_turn(state)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _raise_if(violation: FailureReason | None, message: str) -> None:
    if violation is not None:
        raise RuleViolation(violation, message)


def _require_current_player(state: game_state.GameState, player_index: int) -> None:
    if player_index != state.turn_state.player_index:
        raise RuleViolation(
            FailureReason.NOT_CURRENT_PLAYER,
            f'It is seat {state.turn_state.player_index}\'s turn, not {player_index}.',
        )


def _pay(state: game_state.GameState, p: player.Player, cost: dict[str, int]) -> None:
    """Move *cost* from the player's hand back into the bank."""
    p.resources = p.resources.subtract(cost)
    state.bank = state.bank.add(cost)


def _update_longest_road(state: game_state.GameState) -> None:
    """Recompute every trail length and move the 2 VP bonus if it changes hands."""
    lengths = {
        p.player_index: longest_road.calculate_longest_road(state.board, p.player_index)
        for p in state.players
    }
    for p in state.players:
        p.longest_road_length = lengths[p.player_index]

    previous = state.longest_road_owner
    holder = longest_road.resolve_longest_road_holder(lengths, previous)
    if holder != previous:
        if previous is not None:
            state.players[previous].victory_points -= longest_road.LONGEST_ROAD_BONUS
            state.players[previous].has_longest_road = False
        if holder is not None:
            state.players[holder].victory_points += longest_road.LONGEST_ROAD_BONUS
            state.players[holder].has_longest_road = True
        logger.info('Longest road moves from %s to %s', previous, holder)

    state.longest_road_owner = holder
    state.longest_road_length = lengths[holder] if holder is not None else 0
