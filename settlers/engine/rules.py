"""Rules engine predicates.

Pure checks over a GameState: placement legality for the setup and main
phases, legal placement options for the UI, robber targets, and the victory
condition.  Each ``*_violation`` function returns the FailureReason that
would reject the placement, or None when it is legal; nothing here mutates
state.
"""

from __future__ import annotations

from ..errors import FailureReason
from ..models import actions, board, game_state, player

VICTORY_POINTS_TO_WIN = 10

# ---------------------------------------------------------------------------
# Public API – target lookup
# ---------------------------------------------------------------------------


def valid_vertex(brd: board.Board, vertex_id: int) -> bool:
    return 0 <= vertex_id < len(brd.vertices)


def valid_edge(brd: board.Board, edge_id: int) -> bool:
    return 0 <= edge_id < len(brd.edges)


def valid_hex(brd: board.Board, hex_id: int) -> bool:
    return 0 <= hex_id < len(brd.hexes)


# ---------------------------------------------------------------------------
# Public API – shared board checks
# ---------------------------------------------------------------------------


def settlement_site_violation(
    brd: board.Board, vertex_id: int
) -> FailureReason | None:
    """Check target range, vacancy, and the distance rule for a new settlement."""
    if not valid_vertex(brd, vertex_id):
        return FailureReason.INVALID_TARGET
    vertex = brd.vertices[vertex_id]
    if vertex.building is not None:
        return FailureReason.CELL_OCCUPIED
    if any(
        brd.vertices[adj].building is not None for adj in vertex.adjacent_vertex_ids
    ):
        return FailureReason.DISTANCE_RULE_VIOLATION
    return None


def road_site_violation(brd: board.Board, edge_id: int) -> FailureReason | None:
    """Check target range and vacancy for a new road."""
    if not valid_edge(brd, edge_id):
        return FailureReason.INVALID_TARGET
    if brd.edges[edge_id].road is not None:
        return FailureReason.CELL_OCCUPIED
    return None


def road_anchor_violation(
    brd: board.Board, edge_id: int, vertex_id: int | None
) -> FailureReason | None:
    """A road dragged from *vertex_id* must start at one of the edge's ends."""
    if vertex_id is None or not valid_edge(brd, edge_id):
        return None
    if vertex_id not in brd.edges[edge_id].vertex_ids:
        return FailureReason.INVALID_TARGET
    return None


def owns_building(brd: board.Board, player_index: int, vertex_id: int) -> bool:
    building = brd.vertices[vertex_id].building
    return building is not None and building.player_index == player_index


def has_own_road_at(brd: board.Board, player_index: int, vertex_id: int) -> bool:
    """Return True if *player_index* owns a road touching *vertex_id*."""
    for edge_id in brd.vertices[vertex_id].adjacent_edge_ids:
        road = brd.edges[edge_id].road
        if road is not None and road.player_index == player_index:
            return True
    return False


def road_connected(brd: board.Board, player_index: int, edge_id: int) -> bool:
    """Return True if the edge touches the player's building or road network."""
    return any(
        owns_building(brd, player_index, vid) or has_own_road_at(brd, player_index, vid)
        for vid in brd.edges[edge_id].vertex_ids
    )


# ---------------------------------------------------------------------------
# Public API – setup phase
# ---------------------------------------------------------------------------


def setup_settlement_violation(
    state: game_state.GameState, player_index: int, vertex_id: int
) -> FailureReason | None:
    """Why *player_index* may not place a setup settlement on *vertex_id*."""
    if state.phase != game_state.GamePhase.SETUP or state.setup is None:
        return FailureReason.WRONG_PHASE
    if player_index != state.turn_state.player_index:
        return FailureReason.NOT_CURRENT_PLAYER
    if state.setup.step != game_state.SetupStep.SETTLEMENT:
        return FailureReason.WRONG_PHASE
    return settlement_site_violation(state.board, vertex_id)


def setup_road_violation(
    state: game_state.GameState, player_index: int, edge_id: int
) -> FailureReason | None:
    """Why *player_index* may not place a setup road on *edge_id*.

    Round 1 roads must touch the settlement just placed; round 2 roads may
    touch either of the player's settlements.
    """
    setup = state.setup
    if state.phase != game_state.GamePhase.SETUP or setup is None:
        return FailureReason.WRONG_PHASE
    if player_index != state.turn_state.player_index:
        return FailureReason.NOT_CURRENT_PLAYER
    if setup.step != game_state.SetupStep.ROAD:
        return FailureReason.WRONG_PHASE
    violation = road_site_violation(state.board, edge_id)
    if violation is not None:
        return violation

    endpoints = state.board.edges[edge_id].vertex_ids
    if setup.round == 1:
        connected = setup.last_settlement_vertex_id in endpoints
    else:
        connected = any(owns_building(state.board, player_index, v) for v in endpoints)
    if not connected:
        return FailureReason.NOT_CONNECTED
    return None


# ---------------------------------------------------------------------------
# Public API – main phase
# ---------------------------------------------------------------------------


def build_phase_violation(
    state: game_state.GameState, player_index: int
) -> FailureReason | None:
    """Check that *player_index* is in a turn where building is allowed."""
    if state.phase != game_state.GamePhase.MAIN:
        return FailureReason.WRONG_PHASE
    if player_index != state.turn_state.player_index:
        return FailureReason.NOT_CURRENT_PLAYER
    if state.turn_state.robber_pending:
        return FailureReason.WRONG_PHASE
    return None


def main_settlement_violation(
    state: game_state.GameState, player_index: int, vertex_id: int
) -> FailureReason | None:
    """Why *player_index* may not build a settlement on *vertex_id* this turn."""
    violation = build_phase_violation(state, player_index) or (
        settlement_site_violation(state.board, vertex_id)
    )
    if violation is not None:
        return violation
    if not has_own_road_at(state.board, player_index, vertex_id):
        return FailureReason.NOT_CONNECTED
    p = state.players[player_index]
    if p.settlements_built >= player.MAX_SETTLEMENTS:
        return FailureReason.NO_PIECES_REMAINING
    if not p.resources.can_afford(player.SETTLEMENT_COST):
        return FailureReason.INSUFFICIENT_RESOURCES
    return None


def city_violation(
    state: game_state.GameState, player_index: int, vertex_id: int
) -> FailureReason | None:
    """Why *player_index* may not upgrade the settlement on *vertex_id*."""
    violation = build_phase_violation(state, player_index)
    if violation is not None:
        return violation
    if not valid_vertex(state.board, vertex_id):
        return FailureReason.INVALID_TARGET
    building = state.board.vertices[vertex_id].building
    if building is None or building.player_index != player_index:
        return FailureReason.INVALID_TARGET
    if building.building_type == board.BuildingType.CITY:
        return FailureReason.CELL_OCCUPIED
    p = state.players[player_index]
    if p.cities_built >= player.MAX_CITIES:
        return FailureReason.NO_PIECES_REMAINING
    if not p.resources.can_afford(player.CITY_COST):
        return FailureReason.INSUFFICIENT_RESOURCES
    return None


def main_road_violation(
    state: game_state.GameState, player_index: int, edge_id: int
) -> FailureReason | None:
    """Why *player_index* may not build a road on *edge_id* this turn."""
    violation = build_phase_violation(state, player_index) or (
        road_site_violation(state.board, edge_id)
    )
    if violation is not None:
        return violation
    if not road_connected(state.board, player_index, edge_id):
        return FailureReason.NOT_CONNECTED
    p = state.players[player_index]
    if p.roads_built >= player.MAX_ROADS:
        return FailureReason.NO_PIECES_REMAINING
    if not p.resources.can_afford(player.ROAD_COST):
        return FailureReason.INSUFFICIENT_RESOURCES
    return None


# ---------------------------------------------------------------------------
# Public API – placement options, robber, victory
# ---------------------------------------------------------------------------


def vertex_placement_options(
    state: game_state.GameState, vertex_id: int
) -> list[actions.PlacementKind]:
    """What the current player could place on *vertex_id* right now."""
    current = state.turn_state.player_index
    if state.phase == game_state.GamePhase.SETUP:
        if setup_settlement_violation(state, current, vertex_id) is None:
            return [actions.PlacementKind.SETTLEMENT]
        return []

    options: list[actions.PlacementKind] = []
    if main_settlement_violation(state, current, vertex_id) is None:
        options.append(actions.PlacementKind.SETTLEMENT)
    if city_violation(state, current, vertex_id) is None:
        options.append(actions.PlacementKind.CITY)
    return options


def edge_placement_options(
    state: game_state.GameState, edge_id: int, vertex_id: int | None = None
) -> list[actions.PlacementKind]:
    """What the current player could place on *edge_id* right now.

    When *vertex_id* is given the road must be anchored on that end.
    """
    if road_anchor_violation(state.board, edge_id, vertex_id) is not None:
        return []
    current = state.turn_state.player_index
    if state.phase == game_state.GamePhase.SETUP:
        violation = setup_road_violation(state, current, edge_id)
    else:
        violation = main_road_violation(state, current, edge_id)
    return [actions.PlacementKind.ROAD] if violation is None else []


def robber_hex_options(state: game_state.GameState) -> list[int]:
    """Hexes the robber may move to: every hex but its current one."""
    if not state.turn_state.robber_pending:
        return []
    return [
        h.hex_id for h in state.board.hexes if h.hex_id != state.board.robber_hex_id
    ]


def steal_candidates(
    state: game_state.GameState, hex_id: int, acting_player: int
) -> list[int]:
    """Opponents with a building on *hex_id* who hold at least one card.

    The desert never offers anyone to steal from.
    """
    tile = state.board.hexes[hex_id]
    if tile.resource is None:
        return []
    candidates: set[int] = set()
    for vid in tile.vertex_ids:
        building = state.board.vertices[vid].building
        if building is None or building.player_index == acting_player:
            continue
        if state.players[building.player_index].resources.total() > 0:
            candidates.add(building.player_index)
    return sorted(candidates)


def check_victory_condition(state: game_state.GameState) -> int | None:
    """Return the winner's player_index if any player has >= 10 VP, else None.

    ``Player.victory_points`` already includes the Longest Road bonus.
    """
    for p in state.players:
        if p.victory_points >= VICTORY_POINTS_TO_WIN:
            return p.player_index
    return None
