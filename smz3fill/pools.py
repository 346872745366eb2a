"""Global item pools for a multiworld fill.

Each world contributes four pools. The dungeon pool keeps construction
order, since the initial fill and the per-world dungeon pass rely on it;
the other pools are shuffled per world before being concatenated.
"""

from __future__ import annotations

import random
from collections.abc import Iterable
from dataclasses import dataclass, field

from smz3fill.items import Item, PoolSource
from smz3fill.world import World


@dataclass
class FillPools:
    """Items not placed yet, by pool."""

    dungeon: list[Item] = field(default_factory=list)
    progression: list[Item] = field(default_factory=list)
    nice: list[Item] = field(default_factory=list)
    junk: list[Item] = field(default_factory=list)

    def __len__(self) -> int:
        return (
            len(self.dungeon) + len(self.progression) + len(self.nice) + len(self.junk)
        )


def _shuffled(items: list[Item], rng: random.Random) -> list[Item]:
    rng.shuffle(items)
    return items


def build_pools(
    worlds: Iterable[World], source: PoolSource, rng: random.Random
) -> FillPools:
    """Collect the item pools of every world.

    Args:
        worlds: Worlds taking part in the fill, in world order.
        source: Pool construction for a single world.
        rng: Random number generator.

    Returns:
        FillPools holding every item of every world.
    """
    pools = FillPools()
    for world in worlds:
        pools.dungeon.extend(source.create_dungeon_pool(world))
        pools.progression.extend(_shuffled(source.create_progression_pool(world), rng))
        pools.nice.extend(_shuffled(source.create_nice_pool(world), rng))
        pools.junk.extend(_shuffled(source.create_junk_pool(world), rng))
    return pools
