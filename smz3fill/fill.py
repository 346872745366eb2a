"""Item placement across one or more worlds.

Fill order:
- Initial fill: fixed key placements per world
- Per world: assumed fill of dungeon items, then front fill of early items
- Placement bias of two progression item types
- Partial junk fill of the trash region
- Cross-world assumed fill of the remaining progression items
- Fast fill of nice items, then junk
"""

from __future__ import annotations

import random
from collections.abc import Iterable, Sequence

from smz3fill.config import FillConfig
from smz3fill.items import Item, ItemType, PoolSource, parse_item_type
from smz3fill.pools import FillPools, build_pools
from smz3fill.world import (
    Location,
    World,
    available,
    available_within_world,
    can_fill_within_world,
    empty,
    filled,
)

SWAMP_PALACE_KEY_LOCATION = "Swamp Palace - Entrance"
SKULL_WOODS_KEY_LOCATION = "Skull Woods - Pinball Room"


class FillError(Exception):
    """Fatal error during item placement."""

    pass


class MissingItemError(FillError):
    """An item required by a fixed placement is not in its pool."""

    pass


class PlacementExhaustedError(FillError):
    """No location left for an item, or no item left for a location."""

    pass


class FillDeadlockError(FillError):
    """A full assumed-fill round placed nothing while items remain."""

    pass


def _place(location: Location, item: Item) -> None:
    """Fill a location and record the item as claimed by its world."""
    location.place(item)
    location.world.add_claimed_item(item)


def _take(pool: list[Item], item_type: ItemType, world: World) -> Item:
    """Remove and return the first item of a type owned by a world.

    Raises:
        MissingItemError: If the pool has no such item.
    """
    for item in pool:
        if item.type is item_type and item.world is world:
            pool.remove(item)
            return item
    raise MissingItemError(
        f"No {item_type.value} for {world.player} in the item pool"
    )


# =============================================================================
# Closure
# =============================================================================


def collect_items(items: Iterable[Item], worlds: Iterable[World]) -> list[Item]:
    """Compute every item obtainable starting from `items`.

    Repeatedly collects the items of filled locations that become
    reachable, until a round finds nothing new. Reads world state only.

    Args:
        items: Items assumed owned at the start.
        worlds: Worlds whose filled locations can be collected.

    Returns:
        The starting items followed by every collected item.
    """
    assumed = list(items)
    remaining = filled(loc for world in worlds for loc in world.locations)

    while remaining:
        reachable = available_within_world(remaining, assumed)
        if not reachable:
            break
        reached = set(reachable)
        remaining = [loc for loc in remaining if loc not in reached]
        assumed.extend(loc.item for loc in reachable if loc.item is not None)

    return assumed


# =============================================================================
# Fixed placements
# =============================================================================


def initial_fill(pool: list[Item], worlds: Iterable[World], keysanity: bool) -> None:
    """Place the two fixed dungeon keys of every world.

    The Swamp Palace key goes to the palace entrance unless keysanity is
    on; the Skull Woods key always goes to the pinball room.

    Raises:
        MissingItemError: If a world's key is not in the pool.
    """
    for world in worlds:
        if not keysanity:
            key = _take(pool, ItemType.KEY_SP, world)
            _place(world.get_location(SWAMP_PALACE_KEY_LOCATION), key)

        key = _take(pool, ItemType.KEY_SW, world)
        _place(world.get_location(SKULL_WOODS_KEY_LOCATION), key)


def front_fill_item_in_world(
    world: World, pool: list[Item], item_type: ItemType, rng: random.Random
) -> Location:
    """Place an item in a location the world can already reach.

    Only the items already claimed by the world count as owned.

    Returns:
        The filled location.

    Raises:
        MissingItemError: If the pool has no such item for the world.
        PlacementExhaustedError: If no empty location is reachable.
    """
    item = _take(pool, item_type, world)
    candidates = available(empty(world.locations), world.items)
    if not candidates:
        pool.append(item)
        raise PlacementExhaustedError(
            f"No location to place item: {item.name} ({world.player})"
        )
    location = rng.choice(candidates)
    _place(location, item)
    return location


# =============================================================================
# Assumed fill
# =============================================================================


def assumed_fill(
    items: list[Item],
    base_items: Sequence[Item],
    worlds: Sequence[World],
    rng: random.Random,
    pool: list[Item] | None = None,
) -> None:
    """Place items so the game stays completable after every placement.

    Each candidate is placed where it is reachable assuming every other
    queued item (and every base item) is owned. A candidate without such
    a location goes to the back of the queue. Placed items are removed
    from `items`, and from `pool` when given.

    Args:
        items: Items to place, in queue order.
        base_items: Items always assumed owned (not placed here).
        worlds: Worlds whose empty locations may be used.
        rng: Random number generator.
        pool: Pool that also holds `items`, when `items` is a subset of it.

    Raises:
        FillDeadlockError: If every queued item was tried since the last
            placement without finding a location.
    """
    queue = list(items)
    locations = empty(loc for world in worlds for loc in world.locations)
    stalled = 0

    while queue:
        item = queue.pop(0)
        inventory = collect_items([*queue, *base_items], worlds)
        candidates = can_fill_within_world(locations, item, inventory)

        if not candidates:
            queue.append(item)
            stalled += 1
            if stalled >= len(queue):
                names = ", ".join(str(i) for i in queue)
                raise FillDeadlockError(
                    f"No location for any of {len(queue)} remaining items: {names}"
                )
            continue

        location = rng.choice(candidates)
        _place(location, item)
        items.remove(item)
        if pool is not None:
            pool.remove(item)
        locations.remove(location)
        stalled = 0


# =============================================================================
# Placement bias
# =============================================================================


def bias_item_placement(
    items: list[Item], item_type: ItemType, divisor: int, rng: random.Random
) -> None:
    """Move every item of a type close to the end of the queue.

    Each item is reinserted at most len(items) // divisor positions from
    the tail. The assumed fill places queue-tail items last, when fewer
    items are assumed owned, which pulls them earlier in the playthrough.
    """
    moved = [item for item in items if item.type is item_type]
    items[:] = [item for item in items if item.type is not item_type]
    for item in moved:
        bound = len(items) // divisor
        offset = rng.randrange(bound) if bound > 0 else 0
        items.insert(len(items) - offset, item)


# =============================================================================
# Fast fill
# =============================================================================


def fast_fill_locations(
    items: list[Item], locations: Sequence[Location], rng: random.Random
) -> None:
    """Fill the given locations with random items, ignoring logic.

    Raises:
        PlacementExhaustedError: If a location is still empty but the
            pool is exhausted.
    """
    remaining = empty(locations)
    while remaining:
        if not items:
            raise PlacementExhaustedError(
                f"Tried to fill {remaining[0].name}, but no items were available"
            )
        item = rng.choice(items)
        location = rng.choice(remaining)
        _place(location, item)
        items.remove(item)
        remaining.remove(location)


def fast_fill(items: list[Item], worlds: Sequence[World], rng: random.Random) -> None:
    """Place every item at a random empty location of any world.

    Raises:
        PlacementExhaustedError: If an item remains but no location does.
    """
    remaining = empty(loc for world in worlds for loc in world.locations)
    while items:
        item = rng.choice(items)
        if not remaining:
            raise PlacementExhaustedError(
                f"Tried to fill item: {item}, but no locations were available"
            )
        location = rng.choice(remaining)
        _place(location, item)
        items.remove(item)
        remaining.remove(location)


# =============================================================================
# Orchestration
# =============================================================================


class Filler:
    """Runs the complete fill over a set of worlds.

    Pools are built on construction, so the pool shuffles consume the
    random stream before any placement does.
    """

    def __init__(
        self,
        worlds: list[World],
        config: FillConfig,
        rng: random.Random,
        source: PoolSource,
    ) -> None:
        self.worlds = worlds
        self.config = config
        self.rng = rng
        self.pools: FillPools = build_pools(worlds, source, rng)

    def fill(self) -> None:
        """Place every pooled item.

        Raises:
            FillError: If any stage cannot complete.
        """
        pools = self.pools
        initial_fill(pools.dungeon, self.worlds, self.config.keysanity)

        front_fill_types = [parse_item_type(name) for name in self.config.front_fill]
        for world in self.worlds:
            dungeon = [item for item in pools.dungeon if item.world is world]
            progression = [item for item in pools.progression if item.world is world]
            assumed_fill(dungeon, progression, [world], self.rng, pools.dungeon)

            # Early items, so later placements don't lock them away
            for item_type in front_fill_types:
                front_fill_item_in_world(world, pools.progression, item_type, self.rng)

        if self.config.bias_placement:
            late = parse_item_type(self.config.late_bias_item)
            early = parse_item_type(self.config.early_bias_item)
            bias_item_placement(pools.progression, late, 2, self.rng)
            bias_item_placement(pools.progression, early, 4, self.rng)

        self._fill_trash_region()

        assumed_fill(pools.progression, [], self.worlds, self.rng)
        fast_fill(pools.nice, self.worlds, self.rng)
        fast_fill(pools.junk, self.worlds, self.rng)

    def _fill_trash_region(self) -> None:
        """Fill part of the trash region with junk before progression."""
        locations = empty(
            loc
            for world in self.worlds
            for loc in world.locations
            if loc.region.name == self.config.trash_region
        )
        self.rng.shuffle(locations)
        count = int(len(locations) * self.config.gt_trash_ratio)
        fast_fill_locations(self.pools.junk, locations[:count], self.rng)
