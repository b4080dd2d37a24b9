"""Player data models.

Tracks a player's resources, placed pieces, and victory points throughout
the game.  The same Resources model doubles as the bank's card supply.
"""

from __future__ import annotations

import enum

import pydantic

from .board import ResourceType


class PlayerColor(enum.StrEnum):
    """The four fixed seat colours, in seat order."""

    RED = 'red'
    BLUE = 'blue'
    ORANGE = 'orange'
    WHITE = 'white'


# Standard build costs.
ROAD_COST = {'brick': 1, 'wood': 1}
SETTLEMENT_COST = {'brick': 1, 'wood': 1, 'sheep': 1, 'wheat': 1}
CITY_COST = {'wheat': 2, 'ore': 3}

# Pieces each player owns for the whole game.
MAX_SETTLEMENTS = 5
MAX_CITIES = 4
MAX_ROADS = 15


class Resources(pydantic.BaseModel):
    """A collection of resource cards held by a player or the bank."""

    brick: int = pydantic.Field(default=0, ge=0)
    wood: int = pydantic.Field(default=0, ge=0)
    sheep: int = pydantic.Field(default=0, ge=0)
    wheat: int = pydantic.Field(default=0, ge=0)
    ore: int = pydantic.Field(default=0, ge=0)

    @classmethod
    def uniform(cls, amount: int) -> Resources:
        """Return Resources holding *amount* of every type."""
        return cls(**{r.value: amount for r in ResourceType})

    def total(self) -> int:
        """Return the total number of resource cards."""
        return self.brick + self.wood + self.sheep + self.wheat + self.ore

    def can_afford(self, cost: dict[str, int]) -> bool:
        """Return True if these resources can cover the given cost dict."""
        return all(
            getattr(self, resource, 0) >= amount for resource, amount in cost.items()
        )

    def subtract(self, cost: dict[str, int]) -> Resources:
        """Return new Resources with cost subtracted.

        Raises:
            pydantic.ValidationError: If any count would drop below zero.
        """
        data = self.model_dump()
        for resource, amount in cost.items():
            data[resource] -= amount
        return Resources(**data)

    def add(self, other: dict[str, int]) -> Resources:
        """Return new Resources with the given counts added."""
        data = self.model_dump()
        for resource, amount in other.items():
            data[resource] += amount
        return Resources(**data)

    def get(self, resource_type: ResourceType) -> int:
        """Return the count for a specific resource type."""
        return getattr(self, resource_type.value, 0)

    def as_pool(self) -> list[ResourceType]:
        """Return one entry per card, grouped by type in ResourceType order."""
        pool: list[ResourceType] = []
        for resource_type in ResourceType:
            pool.extend([resource_type] * self.get(resource_type))
        return pool


class Player(pydantic.BaseModel):
    """A player's complete state."""

    player_index: int  # seat order, 0-based
    name: str
    color: PlayerColor
    resources: Resources = pydantic.Field(default_factory=Resources)
    victory_points: int = 0
    # Pieces currently on the board; a city upgrade moves one settlement to cities.
    settlements_built: int = 0
    cities_built: int = 0
    roads_built: int = 0
    longest_road_length: int = 0
    has_longest_road: bool = False
    has_largest_army: bool = False
