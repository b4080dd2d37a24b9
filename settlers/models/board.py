"""Board data models.

Defines the hex tiles (offset coordinates), terrain and resource types, ports,
vertices, edges, and the overall Board structure.  Identities and adjacency
lists are fixed when the board is generated; only buildings, roads, ports and
the robber change afterwards.
"""

from __future__ import annotations

import enum

import pydantic


class TerrainType(enum.StrEnum):
    """Terrain tile types and the resource each produces."""

    HILLS = 'hills'  # produces brick
    FOREST = 'forest'  # produces wood
    PASTURE = 'pasture'  # produces sheep
    FIELDS = 'fields'  # produces wheat
    MOUNTAINS = 'mountains'  # produces ore
    DESERT = 'desert'  # produces nothing


class ResourceType(enum.StrEnum):
    """The five productive resource types."""

    BRICK = 'brick'
    WOOD = 'wood'
    SHEEP = 'sheep'
    WHEAT = 'wheat'
    ORE = 'ore'


# Map from terrain to the resource it produces (desert excluded).
TERRAIN_RESOURCE: dict[TerrainType, ResourceType] = {
    TerrainType.HILLS: ResourceType.BRICK,
    TerrainType.FOREST: ResourceType.WOOD,
    TerrainType.PASTURE: ResourceType.SHEEP,
    TerrainType.FIELDS: ResourceType.WHEAT,
    TerrainType.MOUNTAINS: ResourceType.ORE,
}


class PortType(enum.StrEnum):
    """Port types: generic any-resource or one specific resource."""

    GENERIC = 'generic'
    BRICK = 'brick'
    WOOD = 'wood'
    SHEEP = 'sheep'
    WHEAT = 'wheat'
    ORE = 'ore'


class BuildingType(enum.StrEnum):
    """Settlement or upgraded city."""

    SETTLEMENT = 'settlement'
    CITY = 'city'


class OffsetCoord(pydantic.BaseModel):
    """Odd-row offset coordinates of a pointy-top hex."""

    model_config = pydantic.ConfigDict(frozen=True)

    row: int
    col: int


class HexTile(pydantic.BaseModel):
    """A single terrain hex tile on the board."""

    hex_id: int
    coord: OffsetCoord
    terrain: TerrainType
    number_token: int | None = None  # None for desert; 2-12 excluding 7
    has_robber: bool = False
    vertex_ids: list[int] = pydantic.Field(default_factory=list)  # 6 corners
    edge_ids: list[int] = pydantic.Field(default_factory=list)  # 6 sides

    @property
    def resource(self) -> ResourceType | None:
        """Resource produced by this tile, or None for the desert."""
        return TERRAIN_RESOURCE.get(self.terrain)


class Building(pydantic.BaseModel):
    """A settlement or city placed on a vertex."""

    player_index: int
    building_type: BuildingType


class Road(pydantic.BaseModel):
    """A road placed on an edge."""

    player_index: int


class Vertex(pydantic.BaseModel):
    """An intersection point where settlements and cities can be placed.

    Each vertex touches up to three hex tiles and connects to up to three
    edges and three adjacent vertices.
    """

    vertex_id: int
    adjacent_vertex_ids: list[int]  # vertices one edge away (distance rule)
    adjacent_edge_ids: list[int]  # edges that touch this vertex
    adjacent_hex_ids: list[int]  # on-board tiles this vertex is a corner of
    building: Building | None = None


class Edge(pydantic.BaseModel):
    """A side of a hex tile where roads can be placed.

    Each edge connects exactly two vertices and borders one or two hex tiles.
    """

    edge_id: int
    vertex_ids: tuple[int, int]  # the two vertices this edge connects
    adjacent_hex_ids: list[int]  # one entry for a border edge, else two
    adjacent_edge_ids: list[int]  # edges sharing either endpoint
    road: Road | None = None
    port: PortType | None = None

    @property
    def is_border(self) -> bool:
        """True when only one on-board tile borders this edge."""
        return len(self.adjacent_hex_ids) == 1


class Board(pydantic.BaseModel):
    """The complete board: tiles, vertices, edges, and robber location."""

    hexes: list[HexTile]
    vertices: list[Vertex]
    edges: list[Edge]
    robber_hex_id: int  # mirrors the single HexTile with has_robber set

    def ports_assigned(self) -> bool:
        """Return True once any edge carries a port."""
        return any(e.port is not None for e in self.edges)
