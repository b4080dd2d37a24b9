"""Static hex/vertex/edge graph for the board.

Builds the combinatorial structure of the 19-hex board once, with stable
integer IDs and every adjacency map the rules engine needs.  Nothing here
depends on game state.

Offset-coordinate geometry
--------------------------
Hexes are pointy-topped and laid out in odd-row offset coordinates
``(row, col)``: odd rows are shifted half a hex to the right.  The classic
3-4-5-4-3 board uses::

    row 0:    cols 1..3
    row 1:   cols 0..3
    row 2:  cols 0..4
    row 3:   cols 0..3
    row 4:    cols 1..3

Integer corner lattice
----------------------
All points live in an integer lattice so that a corner shared by two or
three hexes is the *same* tuple no matter which hex produced it.  The x unit
is half a hex width and the y unit is a quarter of a hex height, giving a
hex centre of::

    (x, y) = (2 * col + row % 2, 3 * row)

and the six corners, clockwise from the top::

    0: ( 0, -2)   top
    1: (+1, -1)   upper-right
    2: (+1, +1)   lower-right
    3: ( 0, +2)   bottom
    4: (-1, +1)   lower-left
    5: (-1, -1)   upper-left

Side ``i`` of a hex joins corner ``i`` to corner ``(i + 1) % 6``.  Vertices
are the distinct corner points (54 for the classic board) and edges are the
distinct unordered corner pairs (72).  An edge bordered by a single hex is a
*border edge* (30 on the classic board).

IDs are handed out in first-seen order while walking hexes by ID and
corners/sides clockwise from the top, so they are reproducible.
"""

from __future__ import annotations

import collections
import math

import pydantic

from .errors import BoardGenerationError
from .models.board import OffsetCoord

Point = tuple[int, int]

# Corner offsets in lattice units, clockwise from the top corner.
_CORNER_OFFSETS: list[Point] = [
    (0, -2),
    (1, -1),
    (1, 1),
    (0, 2),
    (-1, 1),
    (-1, -1),
]

# One lattice x unit is half a hex width (sqrt(3)/2 of the circumradius) and
# one y unit is half the circumradius; used only to turn lattice offsets into
# true angles.
_X_SCALE = math.sqrt(3) / 2
_Y_SCALE = 0.5


class BoardLayout(pydantic.BaseModel):
    """Which offset columns exist in each row, plus the counts they must yield."""

    model_config = pydantic.ConfigDict(frozen=True)

    rows: tuple[tuple[int, ...], ...]
    expected_vertices: int
    expected_edges: int

    @property
    def hex_count(self) -> int:
        return sum(len(cols) for cols in self.rows)


CLASSIC_LAYOUT = BoardLayout(
    rows=(
        (1, 2, 3),
        (0, 1, 2, 3),
        (0, 1, 2, 3, 4),
        (0, 1, 2, 3),
        (1, 2, 3),
    ),
    expected_vertices=54,
    expected_edges=72,
)


class BoardTopology(pydantic.BaseModel):
    """Immutable adjacency structure of a board layout.

    Every list is indexed by the ID of the hex, vertex, or edge it describes.
    """

    model_config = pydantic.ConfigDict(frozen=True)

    hex_coords: list[OffsetCoord]
    hex_centers: list[Point]
    hex_vertices: list[list[int]]  # 6 per hex, clockwise from the top
    hex_edges: list[list[int]]  # 6 per hex, side i joins corners i and i+1
    vertex_points: list[Point]
    vertex_edges: list[list[int]]
    vertex_hexes: list[list[int]]
    vertex_neighbors: list[list[int]]
    edge_vertices: list[tuple[int, int]]
    edge_hexes: list[list[int]]
    edge_neighbors: list[list[int]]  # edges sharing an endpoint
    border_edge_ids: list[int]

    @property
    def hex_count(self) -> int:
        return len(self.hex_coords)

    @property
    def vertex_count(self) -> int:
        return len(self.vertex_points)

    @property
    def edge_count(self) -> int:
        return len(self.edge_vertices)

    def board_center(self) -> tuple[float, float]:
        """Centre of the bounding box of all hex centres, in lattice units."""
        xs = [x for x, _ in self.hex_centers]
        ys = [y for _, y in self.hex_centers]
        return (min(xs) + max(xs)) / 2, (min(ys) + max(ys)) / 2

    def edge_midpoint(self, edge_id: int) -> tuple[float, float]:
        """Midpoint of an edge, in lattice units."""
        v0, v1 = self.edge_vertices[edge_id]
        (x0, y0), (x1, y1) = self.vertex_points[v0], self.vertex_points[v1]
        return (x0 + x1) / 2, (y0 + y1) / 2

    def clockwise_angle(self, edge_id: int) -> float:
        """Angle of an edge midpoint around the board centre.

        Zero points straight up and the angle grows clockwise (screen y grows
        downwards), in the range ``[0, 2*pi)``.
        """
        cx, cy = self.board_center()
        mx, my = self.edge_midpoint(edge_id)
        dx = (mx - cx) * _X_SCALE
        dy = (my - cy) * _Y_SCALE
        angle = math.atan2(dy, dx) + math.pi / 2
        if angle < 0:
            angle += 2 * math.pi
        return angle


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def build_topology(layout: BoardLayout = CLASSIC_LAYOUT) -> BoardTopology:
    """Build and validate the adjacency structure for *layout*.

    Raises:
        BoardGenerationError: If the vertex or edge count differs from the
            layout's expected counts, or the graph is malformed.
    """
    hex_coords = [
        OffsetCoord(row=row, col=col)
        for row, cols in enumerate(layout.rows)
        for col in cols
    ]
    hex_centers = [_hex_center(c) for c in hex_coords]

    # ------------------------------------------------------------------
    # First pass: assign stable integer IDs to every unique corner/side.
    # ------------------------------------------------------------------
    point_to_vertex: dict[Point, int] = {}
    pair_to_edge: dict[frozenset[int], int] = {}
    hex_vertices: list[list[int]] = []
    hex_edges: list[list[int]] = []

    for center in hex_centers:
        corner_ids: list[int] = []
        for point in _corner_points(center):
            if point not in point_to_vertex:
                point_to_vertex[point] = len(point_to_vertex)
            corner_ids.append(point_to_vertex[point])
        hex_vertices.append(corner_ids)

        side_ids: list[int] = []
        for i in range(6):
            pair = frozenset({corner_ids[i], corner_ids[(i + 1) % 6]})
            if pair not in pair_to_edge:
                pair_to_edge[pair] = len(pair_to_edge)
            side_ids.append(pair_to_edge[pair])
        hex_edges.append(side_ids)

    vertex_points = sorted(point_to_vertex, key=point_to_vertex.__getitem__)
    edge_vertices: list[tuple[int, int]] = [
        tuple(sorted(pair))  # type: ignore[misc]
        for pair in sorted(pair_to_edge, key=pair_to_edge.__getitem__)
    ]

    # ------------------------------------------------------------------
    # Second pass: populate adjacency structures.
    # ------------------------------------------------------------------
    vertex_edges: dict[int, set[int]] = collections.defaultdict(set)
    vertex_neighbors: dict[int, set[int]] = collections.defaultdict(set)
    for eid, (v0, v1) in enumerate(edge_vertices):
        vertex_edges[v0].add(eid)
        vertex_edges[v1].add(eid)
        vertex_neighbors[v0].add(v1)
        vertex_neighbors[v1].add(v0)

    vertex_hexes: dict[int, set[int]] = collections.defaultdict(set)
    edge_hexes: dict[int, set[int]] = collections.defaultdict(set)
    for hid in range(len(hex_coords)):
        for vid in hex_vertices[hid]:
            vertex_hexes[vid].add(hid)
        for eid in hex_edges[hid]:
            edge_hexes[eid].add(hid)

    edge_neighbors = [
        sorted((vertex_edges[v0] | vertex_edges[v1]) - {eid})
        for eid, (v0, v1) in enumerate(edge_vertices)
    ]

    topology = BoardTopology(
        hex_coords=hex_coords,
        hex_centers=hex_centers,
        hex_vertices=hex_vertices,
        hex_edges=hex_edges,
        vertex_points=vertex_points,
        vertex_edges=[sorted(vertex_edges[v]) for v in range(len(vertex_points))],
        vertex_hexes=[sorted(vertex_hexes[v]) for v in range(len(vertex_points))],
        vertex_neighbors=[
            sorted(vertex_neighbors[v]) for v in range(len(vertex_points))
        ],
        edge_vertices=edge_vertices,
        edge_hexes=[sorted(edge_hexes[e]) for e in range(len(edge_vertices))],
        edge_neighbors=edge_neighbors,
        border_edge_ids=[
            e for e in range(len(edge_vertices)) if len(edge_hexes[e]) == 1
        ],
    )
    _validate(topology, layout)
    return topology


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _hex_center(coord: OffsetCoord) -> Point:
    return 2 * coord.col + coord.row % 2, 3 * coord.row


def _corner_points(center: Point) -> list[Point]:
    cx, cy = center
    return [(cx + dx, cy + dy) for dx, dy in _CORNER_OFFSETS]


def _validate(topology: BoardTopology, layout: BoardLayout) -> None:
    """Reject the whole generation if the structure is not what *layout* promises."""
    if topology.hex_count != layout.hex_count:
        raise BoardGenerationError(
            f'Expected {layout.hex_count} hexes, generated {topology.hex_count}.'
        )
    if topology.vertex_count != layout.expected_vertices:
        raise BoardGenerationError(
            f'Expected {layout.expected_vertices} vertices, '
            f'generated {topology.vertex_count}.'
        )
    if topology.edge_count != layout.expected_edges:
        raise BoardGenerationError(
            f'Expected {layout.expected_edges} edges, '
            f'generated {topology.edge_count}.'
        )
    for vid, edges in enumerate(topology.vertex_edges):
        if not 2 <= len(edges) <= 3:
            raise BoardGenerationError(f'Vertex {vid} has degree {len(edges)}.')
    for eid, (v0, v1) in enumerate(topology.edge_vertices):
        if v0 == v1:
            raise BoardGenerationError(f'Edge {eid} joins vertex {v0} to itself.')
        if not 1 <= len(topology.edge_hexes[eid]) <= 2:
            raise BoardGenerationError(
                f'Edge {eid} borders {len(topology.edge_hexes[eid])} hexes.'
            )
