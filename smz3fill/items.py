"""Item types, items and per-world item pools."""

from __future__ import annotations

import sys
from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol

if sys.version_info >= (3, 11):
    import tomllib
else:
    try:
        import tomli as tomllib
    except ImportError as e:
        raise ImportError(
            "tomli is required for Python < 3.11. Install with: pip install tomli"
        ) from e

if TYPE_CHECKING:
    from smz3fill.world import World


class ItemType(Enum):
    """Every item that can be placed in a location.

    Member names are the identifiers used in data and config files,
    values are display names.
    """

    # Zelda progression
    PROGRESSIVE_SWORD = "Progressive Sword"
    PROGRESSIVE_GLOVE = "Progressive Glove"
    BOW = "Bow"
    HOOKSHOT = "Hookshot"
    LAMP = "Lamp"
    HAMMER = "Hammer"
    FLIPPERS = "Flippers"
    MOON_PEARL = "Moon Pearl"
    MAGIC_MIRROR = "Magic Mirror"
    FIRE_ROD = "Fire Rod"
    ICE_ROD = "Ice Rod"
    BOOK = "Book of Mudora"

    # Metroid progression
    MORPH = "Morphing Ball"
    BOMBS = "Morph Bombs"
    SUPER = "Super Missile"
    POWER_BOMB = "Power Bomb"
    VARIA = "Varia Suit"
    GRAVITY = "Gravity Suit"
    SPACE_JUMP = "Space Jump"
    GRAPPLE = "Grappling Beam"
    SPEED_BOOSTER = "Speed Booster"
    CHARGE = "Charge Beam"
    HIJUMP = "Hi-Jump Boots"

    # Dungeon items
    KEY_SP = "Swamp Palace Key"
    BIG_KEY_SP = "Swamp Palace Big Key"
    KEY_SW = "Skull Woods Key"
    BIG_KEY_SW = "Skull Woods Big Key"
    KEY_GT = "Ganon's Tower Key"
    BIG_KEY_GT = "Ganon's Tower Big Key"

    # Nice items
    HEART_CONTAINER = "Heart Container"
    HEART_PIECE = "Piece of Heart"
    ETANK = "Energy Tank"
    RESERVE_TANK = "Reserve Tank"

    # Junk
    MISSILE = "Missile"
    TWENTY_RUPEES = "Twenty Rupees"
    TEN_ARROWS = "Ten Arrows"
    THREE_BOMBS = "Three Bombs"


DUNGEON_ITEM_TYPES = frozenset(
    {
        ItemType.KEY_SP,
        ItemType.BIG_KEY_SP,
        ItemType.KEY_SW,
        ItemType.BIG_KEY_SW,
        ItemType.KEY_GT,
        ItemType.BIG_KEY_GT,
    }
)


def parse_item_type(name: str) -> ItemType:
    """Look up an ItemType by member name (case-insensitive).

    Raises:
        ValueError: If the name is not a known item type.
    """
    try:
        return ItemType[name.strip().upper()]
    except KeyError:
        valid = ", ".join(t.name for t in ItemType)
        raise ValueError(f"Unknown item type: '{name}'. Valid types: {valid}") from None


@dataclass(eq=False)
class Item:
    """A single item instance.

    Items compare by identity: a multiworld holds one instance of the
    same item type per world, and each one is placed independently.
    """

    type: ItemType
    world: World = field(repr=False)

    @property
    def name(self) -> str:
        """Display name of the item type."""
        return self.type.value

    @property
    def is_dungeon_item(self) -> bool:
        """True for keys and big keys bound to a dungeon."""
        return self.type in DUNGEON_ITEM_TYPES

    def __str__(self) -> str:
        return f"{self.name} ({self.world.player})"


class Progression:
    """Multiset of owned item types, as seen by logic predicates."""

    def __init__(self, items: Iterable[Item] = ()) -> None:
        self._counts: Counter[ItemType] = Counter(item.type for item in items)

    def has(self, item_type: ItemType, count: int = 1) -> bool:
        """Check that at least `count` items of `item_type` are owned."""
        return self._counts[item_type] >= count

    def count(self, item_type: ItemType) -> int:
        return self._counts[item_type]

    def __contains__(self, item_type: object) -> bool:
        return isinstance(item_type, ItemType) and self._counts[item_type] > 0

    def __len__(self) -> int:
        return sum(self._counts.values())


# =============================================================================
# Pool construction
# =============================================================================


class PoolSource(Protocol):
    """Builds the four typed item pools for one world."""

    def create_dungeon_pool(self, world: World) -> list[Item]: ...

    def create_progression_pool(self, world: World) -> list[Item]: ...

    def create_nice_pool(self, world: World) -> list[Item]: ...

    def create_junk_pool(self, world: World) -> list[Item]: ...


@dataclass
class TomlPoolSource:
    """Item pools described by item_pool.toml.

    The dungeon pool is an ordered list of item types; the other pools
    are tables of item type -> count.
    """

    dungeon: list[ItemType] = field(default_factory=list)
    progression: dict[ItemType, int] = field(default_factory=dict)
    nice: dict[ItemType, int] = field(default_factory=dict)
    junk: dict[ItemType, int] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TomlPoolSource:
        """Create a pool source from a dictionary (e.g., parsed TOML)."""

        def counts(section: str) -> dict[ItemType, int]:
            result: dict[ItemType, int] = {}
            for name, count in data.get(section, {}).items():
                if count < 0:
                    raise ValueError(f"[{section}] {name}: count must be >= 0")
                result[parse_item_type(name)] = count
            return result

        return cls(
            dungeon=[parse_item_type(name) for name in data.get("dungeon", [])],
            progression=counts("progression"),
            nice=counts("nice"),
            junk=counts("junk"),
        )

    @classmethod
    def from_toml(cls, path: str | Path) -> TomlPoolSource:
        """Load a pool source from a TOML file."""
        path = Path(path)
        with path.open("rb") as f:
            data = tomllib.load(f)
        return cls.from_dict(data)

    @property
    def total_items(self) -> int:
        """Number of items this source creates per world."""
        return (
            len(self.dungeon)
            + sum(self.progression.values())
            + sum(self.nice.values())
            + sum(self.junk.values())
        )

    def create_dungeon_pool(self, world: World) -> list[Item]:
        return [Item(item_type, world) for item_type in self.dungeon]

    def create_progression_pool(self, world: World) -> list[Item]:
        return _expand(self.progression, world)

    def create_nice_pool(self, world: World) -> list[Item]:
        return _expand(self.nice, world)

    def create_junk_pool(self, world: World) -> list[Item]:
        return _expand(self.junk, world)


def _expand(counts: dict[ItemType, int], world: World) -> list[Item]:
    return [
        Item(item_type, world)
        for item_type, count in counts.items()
        for _ in range(count)
    ]


def load_pool_source(path: Path) -> TomlPoolSource:
    """Load item pools from item_pool.toml.

    Raises:
        FileNotFoundError: If the file doesn't exist
    """
    if not path.exists():
        raise FileNotFoundError(f"Item pool file not found: {path}")
    return TomlPoolSource.from_toml(path)
