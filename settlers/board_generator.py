"""Board generation: terrain, number tokens, and ports.

Combines the static :mod:`settlers.topology` graph with randomised terrain
and number-token placement, then fixes the nine ports around the coast.
All randomness comes from the ``random.Random`` passed in, so a seeded RNG
reproduces the same board.
"""

from __future__ import annotations

import logging
import random

from .errors import BoardGenerationError
from .models.board import (
    Board,
    Edge,
    HexTile,
    PortType,
    TerrainType,
    Vertex,
)
from .topology import CLASSIC_LAYOUT, BoardLayout, BoardTopology, build_topology

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Board constants
# ---------------------------------------------------------------------------

# Standard terrain distribution (must sum to 19).
_TERRAIN_DISTRIBUTION: list[TerrainType] = (
    [TerrainType.HILLS] * 3
    + [TerrainType.FOREST] * 4
    + [TerrainType.PASTURE] * 4
    + [TerrainType.FIELDS] * 4
    + [TerrainType.MOUNTAINS] * 3
    + [TerrainType.DESERT] * 1
)

# Standard number-token distribution (18 tokens for 18 non-desert tiles).
_NUMBER_TOKENS: list[int] = [2, 3, 3, 4, 4, 5, 5, 6, 6, 8, 8, 9, 9, 10, 10, 11, 11, 12]

# One 2:1 port per resource plus four generic 3:1 ports.
_PORT_DISTRIBUTION: list[PortType] = [
    PortType.BRICK,
    PortType.WOOD,
    PortType.SHEEP,
    PortType.WHEAT,
    PortType.ORE,
    PortType.GENERIC,
    PortType.GENERIC,
    PortType.GENERIC,
    PortType.GENERIC,
]

PORT_COUNT = len(_PORT_DISTRIBUTION)

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def generate_board(
    rng: random.Random, layout: BoardLayout = CLASSIC_LAYOUT
) -> tuple[Board, BoardTopology]:
    """Generate a randomised board and the topology it was built from.

    Returns:
        ``(board, topology)``; the board has terrain, tokens, robber and
        ports set, and the topology is the immutable graph behind it.

    Raises:
        BoardGenerationError: If the topology or port placement is invalid.
    """
    topology = build_topology(layout)
    hexes = assign_resources(topology, rng)
    robber_hex_id = next(h.hex_id for h in hexes if h.has_robber)

    vertices = [
        Vertex(
            vertex_id=vid,
            adjacent_vertex_ids=list(topology.vertex_neighbors[vid]),
            adjacent_edge_ids=list(topology.vertex_edges[vid]),
            adjacent_hex_ids=list(topology.vertex_hexes[vid]),
        )
        for vid in range(topology.vertex_count)
    ]
    edges = [
        Edge(
            edge_id=eid,
            vertex_ids=topology.edge_vertices[eid],
            adjacent_hex_ids=list(topology.edge_hexes[eid]),
            adjacent_edge_ids=list(topology.edge_neighbors[eid]),
        )
        for eid in range(topology.edge_count)
    ]

    board = Board(
        hexes=hexes, vertices=vertices, edges=edges, robber_hex_id=robber_hex_id
    )
    assign_ports(board, topology, rng)
    return board, topology


def assign_resources(topology: BoardTopology, rng: random.Random) -> list[HexTile]:
    """Shuffle terrains and number tokens onto the topology's hex slots.

    Tokens go to the non-desert hexes in hex-ID order; the desert receives
    no token and starts holding the robber.
    """
    if topology.hex_count != len(_TERRAIN_DISTRIBUTION):
        raise BoardGenerationError(
            f'Terrain set covers {len(_TERRAIN_DISTRIBUTION)} hexes, '
            f'layout has {topology.hex_count}.'
        )

    terrains = _TERRAIN_DISTRIBUTION.copy()
    rng.shuffle(terrains)

    number_tokens = _NUMBER_TOKENS.copy()
    rng.shuffle(number_tokens)
    token_iter = iter(number_tokens)

    hexes: list[HexTile] = []
    for hid, terrain in enumerate(terrains):
        is_desert = terrain == TerrainType.DESERT
        hexes.append(
            HexTile(
                hex_id=hid,
                coord=topology.hex_coords[hid],
                terrain=terrain,
                number_token=None if is_desert else next(token_iter),
                has_robber=is_desert,
                vertex_ids=list(topology.hex_vertices[hid]),
                edge_ids=list(topology.hex_edges[hid]),
            )
        )
    return hexes


def assign_ports(board: Board, topology: BoardTopology, rng: random.Random) -> None:
    """Place the nine ports at evenly spaced positions around the coast.

    Border edges without a road are ordered clockwise from the top around the
    board centre.  Positions ``i * (count // 9)`` are fixed; only the port
    types are shuffled onto them.  Mutates *board* in place.

    Raises:
        BoardGenerationError: If ports were already assigned or fewer than
            nine eligible border edges exist.
    """
    if board.ports_assigned():
        raise BoardGenerationError('Ports have already been assigned.')

    eligible = [
        eid for eid in topology.border_edge_ids if board.edges[eid].road is None
    ]
    if len(eligible) < PORT_COUNT:
        raise BoardGenerationError(
            f'Need {PORT_COUNT} free border edges for ports, found {len(eligible)}.'
        )

    ordered = sorted(eligible, key=lambda eid: (topology.clockwise_angle(eid), eid))
    stride = len(ordered) // PORT_COUNT
    positions = [ordered[i * stride] for i in range(PORT_COUNT)]

    port_types = _PORT_DISTRIBUTION.copy()
    rng.shuffle(port_types)

    for eid, port_type in zip(positions, port_types, strict=True):
        board.edges[eid].port = port_type
    logger.debug('Ports placed on edges %s', positions)
