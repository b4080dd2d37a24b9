"""Longest road calculation and award resolution.

Both functions are pure: they read the board (or a length table) and return
a number, leaving scoring side effects to the processor.
"""

from __future__ import annotations

from ..models import board

LONGEST_ROAD_MINIMUM = 5
LONGEST_ROAD_BONUS = 2


def calculate_longest_road(brd: board.Board, player_index: int) -> int:
    """Return the length of the longest trail in *player_index*'s road network.

    A trail never reuses an edge but may pass through a vertex more than
    once.  DFS with backtracking is run from every owned edge in both
    directions; at each step the walk continues from the far endpoint of the
    edge just taken.
    """
    owned = {
        e.edge_id for e in brd.edges if e.road and e.road.player_index == player_index
    }
    max_length = 0
    for edge_id in owned:
        v0, v1 = brd.edges[edge_id].vertex_ids
        visited = {edge_id}
        for far_end in (v0, v1):
            length = 1 + _dfs_trail(brd, owned, far_end, visited)
            if length > max_length:
                max_length = length
    return max_length


def resolve_longest_road_holder(
    lengths: dict[int, int], holder: int | None
) -> int | None:
    """Return who should hold Longest Road given every player's trail length.

    A claimant needs at least LONGEST_ROAD_MINIMUM and must strictly beat
    every other player.  The current holder keeps the award on any tie, and
    it only moves to a challenger who strictly exceeds the holder's length.
    """
    if not lengths:
        return holder
    best = max(lengths.values())
    leaders = [p for p, length in lengths.items() if length == best]

    if holder is not None:
        if len(leaders) == 1 and leaders[0] != holder and best > lengths[holder]:
            return leaders[0]
        return holder

    if best >= LONGEST_ROAD_MINIMUM and len(leaders) == 1:
        return leaders[0]
    return None


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _dfs_trail(
    brd: board.Board, owned: set[int], vertex_id: int, visited: set[int]
) -> int:
    """Longest continuation from *vertex_id* using owned, unvisited edges."""
    best = 0
    for edge_id in brd.vertices[vertex_id].adjacent_edge_ids:
        if edge_id not in owned or edge_id in visited:
            continue
        v0, v1 = brd.edges[edge_id].vertex_ids
        far_end = v1 if v0 == vertex_id else v0
        visited.add(edge_id)
        length = 1 + _dfs_trail(brd, owned, far_end, visited)
        visited.remove(edge_id)
        if length > best:
            best = length
    return best
