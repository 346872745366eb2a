"""World, region and location model with reachability queries.

A World is one player's copy of the game: regions grouping locations,
and the list of items claimed by its locations so far. Reachability is
answered by the helpers at the bottom of this module, either against a
single owned-item set or, for multiworld fills, per location world.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field

from smz3fill.items import Item, ItemType, Progression

Requirement = Callable[[Progression], bool]


def always(items: Progression) -> bool:
    """Requirement satisfied by any inventory."""
    return True


@dataclass(eq=False)
class Region:
    """A group of locations sharing an entry requirement."""

    name: str
    world: World = field(repr=False)
    requirement: Requirement = field(default=always, repr=False)
    parent: Region | None = field(default=None, repr=False)
    dungeon_items: frozenset[ItemType] = frozenset()
    locations: list[Location] = field(default_factory=list, repr=False)

    def can_enter(self, items: Progression) -> bool:
        """Check that the region and all of its parents can be entered."""
        if self.parent is not None and not self.parent.can_enter(items):
            return False
        return self.requirement(items)

    def can_fill(self, item: Item) -> bool:
        """Dungeon items stay in their own dungeon unless keysanity is on."""
        if self.world.keysanity or not item.is_dungeon_item:
            return True
        return item.type in self.dungeon_items and item.world is self.world

    def add_location(
        self,
        name: str,
        requirement: Requirement = always,
        forbidden: Iterable[ItemType] = (),
    ) -> Location:
        location = Location(name, self, requirement, frozenset(forbidden))
        self.locations.append(location)
        self.world.register_location(location)
        return location


@dataclass(eq=False)
class Location:
    """A slot holding at most one item.

    Once filled, a location is never emptied or overwritten.
    """

    name: str
    region: Region = field(repr=False)
    requirement: Requirement = field(default=always, repr=False)
    forbidden: frozenset[ItemType] = frozenset()
    item: Item | None = None

    @property
    def world(self) -> World:
        return self.region.world

    @property
    def is_empty(self) -> bool:
        return self.item is None

    def available(self, items: Progression) -> bool:
        """Check that the location can be reached with the given items."""
        return self.region.can_enter(items) and self.requirement(items)

    def can_fill(self, item: Item, items: Progression) -> bool:
        """Check that `item` may be placed here and the location is reachable."""
        if item.type in self.forbidden:
            return False
        return self.region.can_fill(item) and self.available(items)

    def place(self, item: Item) -> None:
        """Put an item in this location.

        Raises:
            ValueError: If the location already holds an item.
        """
        if self.item is not None:
            raise ValueError(
                f"Location '{self.name}' ({self.world.player}) already holds "
                f"{self.item.name}"
            )
        self.item = item


@dataclass(eq=False)
class World:
    """One player's world."""

    id: int
    player: str = ""
    keysanity: bool = False
    regions: list[Region] = field(default_factory=list, repr=False)
    locations: list[Location] = field(default_factory=list, repr=False)
    items: list[Item] = field(default_factory=list, repr=False)
    _by_name: dict[str, Location] = field(
        default_factory=dict, init=False, repr=False
    )

    def __post_init__(self) -> None:
        if not self.player:
            self.player = f"Player {self.id + 1}"

    def add_region(
        self,
        name: str,
        requirement: Requirement = always,
        parent: Region | None = None,
        dungeon_items: Iterable[ItemType] = (),
    ) -> Region:
        region = Region(name, self, requirement, parent, frozenset(dungeon_items))
        self.regions.append(region)
        return region

    def register_location(self, location: Location) -> None:
        """Index a location added to one of this world's regions.

        Raises:
            ValueError: If the world already has a location with that name.
        """
        if location.name in self._by_name:
            raise ValueError(
                f"Duplicate location '{location.name}' in world {self.player}"
            )
        self.locations.append(location)
        self._by_name[location.name] = location

    def get_region(self, name: str) -> Region | None:
        """Get a region by name, or None if not found."""
        for region in self.regions:
            if region.name == name:
                return region
        return None

    def get_location(self, name: str) -> Location:
        """Get a location by name.

        Raises:
            KeyError: If the world has no location with that name.
        """
        try:
            return self._by_name[name]
        except KeyError:
            raise KeyError(
                f"No location named '{name}' in world {self.player}"
            ) from None

    def add_claimed_item(self, item: Item) -> None:
        self.items.append(item)


# =============================================================================
# Reachability
# =============================================================================


def empty(locations: Iterable[Location]) -> list[Location]:
    return [loc for loc in locations if loc.is_empty]


def filled(locations: Iterable[Location]) -> list[Location]:
    return [loc for loc in locations if not loc.is_empty]


def available(locations: Iterable[Location], items: Iterable[Item]) -> list[Location]:
    """Locations reachable with a single owned-item set."""
    progression = Progression(items)
    return [loc for loc in locations if loc.available(progression)]


def progression_by_world(items: Iterable[Item]) -> dict[World, Progression]:
    """Split owned items into one Progression per owning world."""
    grouped: dict[World, list[Item]] = {}
    for item in items:
        grouped.setdefault(item.world, []).append(item)
    return {world: Progression(owned) for world, owned in grouped.items()}


def available_within_world(
    locations: Iterable[Location], items: Iterable[Item]
) -> list[Location]:
    """Locations reachable when each is judged with its own world's items."""
    by_world = progression_by_world(items)
    none = Progression()
    return [loc for loc in locations if loc.available(by_world.get(loc.world, none))]


def can_fill_within_world(
    locations: Iterable[Location], item: Item, items: Iterable[Item]
) -> list[Location]:
    """Locations that can hold `item` in a multiworld fill.

    A location qualifies when it can take the item under its own world's
    items, and the location of the same name in the item's world is
    reachable under the item world's items.
    """
    by_world = progression_by_world(items)
    none = Progression()
    item_world_items = by_world.get(item.world, none)
    return [
        loc
        for loc in locations
        if loc.can_fill(item, by_world.get(loc.world, none))
        and item.world.get_location(loc.name).available(item_world_items)
    ]
