"""Load world templates from regions.json and build worlds from them."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

from smz3fill.items import ItemType, Progression, parse_item_type
from smz3fill.world import World

if TYPE_CHECKING:
    from smz3fill.config import Config


@dataclass(frozen=True)
class Requirement:
    """Item requirement in disjunctive form.

    Satisfied when every item count of at least one alternative is owned.
    No alternatives means no requirement.
    """

    alternatives: tuple[tuple[tuple[ItemType, int], ...], ...] = ()

    def __call__(self, items: Progression) -> bool:
        if not self.alternatives:
            return True
        return any(
            all(items.has(item_type, count) for item_type, count in alternative)
            for alternative in self.alternatives
        )

    @classmethod
    def parse(cls, data: list[Any] | None) -> Requirement:
        """Parse a requirement expression.

        The expression is a list of alternatives, each a list of item type
        names with an optional ":count" suffix. A flat list of names is
        read as a single alternative.

        Examples:
            [] or None                          -> always satisfied
            ["LAMP"]                            -> Lamp
            [["MOON_PEARL", "HAMMER"], ["MOON_PEARL", "PROGRESSIVE_GLOVE:2"]]
        """
        if not data:
            return cls()
        if all(isinstance(entry, str) for entry in data):
            data = [data]

        alternatives = []
        for alternative in data:
            if not isinstance(alternative, list):
                raise ValueError(f"Invalid requirement alternative: {alternative!r}")
            alternatives.append(tuple(_parse_term(term) for term in alternative))
        return cls(tuple(alternatives))


def _parse_term(term: str) -> tuple[ItemType, int]:
    """Parse "NAME" or "NAME:count"."""
    name, _, count = term.partition(":")
    if not count:
        return parse_item_type(name), 1
    if not count.isdigit() or int(count) < 1:
        raise ValueError(f"Invalid item count in requirement: '{term}'")
    return parse_item_type(name), int(count)


@dataclass
class LocationTemplate:
    """A location as described in regions.json."""

    name: str
    requirement: Requirement = field(default_factory=Requirement)
    forbidden: list[ItemType] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> LocationTemplate:
        return cls(
            name=data["name"],
            requirement=Requirement.parse(data.get("requires")),
            forbidden=[parse_item_type(name) for name in data.get("forbid", [])],
        )


@dataclass
class RegionTemplate:
    """A region as described in regions.json."""

    name: str
    parent: str | None = None
    requirement: Requirement = field(default_factory=Requirement)
    dungeon_items: list[ItemType] = field(default_factory=list)
    locations: list[LocationTemplate] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> RegionTemplate:
        return cls(
            name=data["name"],
            parent=data.get("parent"),
            requirement=Requirement.parse(data.get("requires")),
            dungeon_items=[
                parse_item_type(name) for name in data.get("dungeon_items", [])
            ],
            locations=[
                LocationTemplate.from_dict(loc) for loc in data.get("locations", [])
            ],
        )


@dataclass
class WorldTemplate:
    """Regions and locations shared by every world of a fill."""

    regions: list[RegionTemplate] = field(default_factory=list)

    @property
    def location_names(self) -> list[str]:
        return [loc.name for region in self.regions for loc in region.locations]

    def get_region(self, name: str) -> RegionTemplate | None:
        """Get a region template by name, or None if not found."""
        for region in self.regions:
            if region.name == name:
                return region
        return None

    def build(self, world_id: int, player: str = "", keysanity: bool = False) -> World:
        """Instantiate a World from this template.

        Raises:
            ValueError: If a region names an unknown or later parent.
        """
        world = World(world_id, player, keysanity)
        for template in self.regions:
            parent = None
            if template.parent is not None:
                parent = world.get_region(template.parent)
                if parent is None:
                    raise ValueError(
                        f"Region '{template.name}' has unknown parent "
                        f"'{template.parent}' (parents must be listed first)"
                    )
            region = world.add_region(
                template.name, template.requirement, parent, template.dungeon_items
            )
            for loc in template.locations:
                region.add_location(loc.name, loc.requirement, loc.forbidden)
        return world

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> WorldTemplate:
        return cls(
            regions=[RegionTemplate.from_dict(r) for r in data.get("regions", [])]
        )

    @classmethod
    def from_json(cls, path: Path) -> WorldTemplate:
        """Load a world template from a JSON file."""
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
        return cls.from_dict(data)


def load_regions(path: Path) -> WorldTemplate:
    """Load the world template from regions.json.

    Args:
        path: Path to regions.json

    Returns:
        WorldTemplate with all regions and locations

    Raises:
        FileNotFoundError: If the file doesn't exist
    """
    if not path.exists():
        raise FileNotFoundError(f"Regions file not found: {path}")
    return WorldTemplate.from_json(path)


def create_worlds(template: WorldTemplate, config: Config) -> list[World]:
    """Build one world per configured player."""
    return [
        template.build(world_id, player, config.fill.keysanity)
        for world_id, player in enumerate(config.run.players)
    ]
