"""Tests for world templates and requirement expressions."""

import json
from pathlib import Path

import pytest

from smz3fill.config import Config, RunConfig
from smz3fill.items import Item, ItemType, Progression
from smz3fill.regions import (
    Requirement,
    WorldTemplate,
    create_worlds,
    load_regions,
)
from smz3fill.world import World


def owned(*item_types: ItemType) -> Progression:
    world = World(0)
    return Progression(Item(t, world) for t in item_types)


class TestRequirement:
    """Tests for requirement parsing and evaluation."""

    def test_none_is_always_satisfied(self):
        assert Requirement.parse(None)(owned())
        assert Requirement.parse([])(owned())

    def test_flat_list_is_one_alternative(self):
        req = Requirement.parse(["LAMP", "HAMMER"])
        assert req.alternatives == (((ItemType.LAMP, 1), (ItemType.HAMMER, 1)),)
        assert not req(owned(ItemType.LAMP))
        assert req(owned(ItemType.LAMP, ItemType.HAMMER))

    def test_alternatives(self):
        req = Requirement.parse(
            [["MOON_PEARL", "HAMMER"], ["MOON_PEARL", "PROGRESSIVE_GLOVE"]]
        )
        assert not req(owned(ItemType.MOON_PEARL))
        assert req(owned(ItemType.MOON_PEARL, ItemType.HAMMER))
        assert req(owned(ItemType.MOON_PEARL, ItemType.PROGRESSIVE_GLOVE))
        assert not req(owned(ItemType.HAMMER, ItemType.PROGRESSIVE_GLOVE))

    def test_count_suffix(self):
        req = Requirement.parse(["PROGRESSIVE_SWORD:2"])
        assert not req(owned(ItemType.PROGRESSIVE_SWORD))
        assert req(owned(ItemType.PROGRESSIVE_SWORD, ItemType.PROGRESSIVE_SWORD))

    @pytest.mark.parametrize("term", ["LAMP:0", "LAMP:x", "LAMP:-1"])
    def test_invalid_count(self, term):
        with pytest.raises(ValueError, match="Invalid item count"):
            Requirement.parse([term])

    def test_unknown_item(self):
        with pytest.raises(ValueError, match="Unknown item type"):
            Requirement.parse(["CAPE"])

    def test_invalid_alternative(self):
        with pytest.raises(ValueError, match="Invalid requirement alternative"):
            Requirement.parse([["LAMP"], "HAMMER"])


def make_template_data() -> dict:
    return {
        "regions": [
            {
                "name": "Overworld",
                "locations": [
                    {"name": "House"},
                    {"name": "Cave", "requires": ["LAMP"], "forbid": ["MOON_PEARL"]},
                ],
            },
            {
                "name": "Palace",
                "parent": "Overworld",
                "requires": ["FLIPPERS"],
                "dungeon_items": ["KEY_SP"],
                "locations": [{"name": "Palace - Entrance"}],
            },
        ]
    }


class TestWorldTemplate:
    """Tests for building worlds from templates."""

    def test_from_dict(self):
        template = WorldTemplate.from_dict(make_template_data())
        assert [r.name for r in template.regions] == ["Overworld", "Palace"]
        assert template.location_names == ["House", "Cave", "Palace - Entrance"]
        palace = template.get_region("Palace")
        assert palace is not None
        assert palace.parent == "Overworld"
        assert palace.dungeon_items == [ItemType.KEY_SP]
        assert template.get_region("Nowhere") is None

    def test_build(self):
        template = WorldTemplate.from_dict(make_template_data())
        world = template.build(3, "Dana", keysanity=True)
        assert world.id == 3
        assert world.player == "Dana"
        assert world.keysanity
        assert len(world.locations) == 3

        palace = world.get_region("Palace")
        assert palace.parent is world.get_region("Overworld")
        assert palace.dungeon_items == frozenset({ItemType.KEY_SP})

        cave = world.get_location("Cave")
        assert cave.forbidden == frozenset({ItemType.MOON_PEARL})
        assert not cave.available(owned())
        assert cave.available(owned(ItemType.LAMP))

        entrance = world.get_location("Palace - Entrance")
        assert not entrance.available(owned())
        assert entrance.available(owned(ItemType.FLIPPERS))

    def test_build_creates_independent_worlds(self):
        template = WorldTemplate.from_dict(make_template_data())
        first = template.build(0)
        second = template.build(1)
        assert first.get_location("House") is not second.get_location("House")

    def test_unknown_parent(self):
        data = {"regions": [{"name": "Inner", "parent": "Outer", "locations": []}]}
        template = WorldTemplate.from_dict(data)
        with pytest.raises(ValueError, match="unknown parent 'Outer'"):
            template.build(0)

    def test_from_json(self, tmp_path):
        path = tmp_path / "regions.json"
        path.write_text(json.dumps(make_template_data()))
        template = load_regions(path)
        assert len(template.location_names) == 3

    def test_load_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_regions(tmp_path / "missing.json")


class TestCreateWorlds:
    """Tests for create_worlds."""

    def test_one_world_per_player(self):
        template = WorldTemplate.from_dict(make_template_data())
        config = Config(run=RunConfig(players=["Alice", "Bob"]))
        config.fill.keysanity = True
        worlds = create_worlds(template, config)
        assert [w.id for w in worlds] == [0, 1]
        assert [w.player for w in worlds] == ["Alice", "Bob"]
        assert all(w.keysanity for w in worlds)


class TestShippedRegions:
    """Tests against data/regions.json."""

    @pytest.fixture
    def template(self):
        path = Path(__file__).parent.parent / "data" / "regions.json"
        return load_regions(path)

    def test_location_count(self, template):
        assert len(template.location_names) == 48
        assert len(set(template.location_names)) == 48

    def test_fixed_key_locations_exist(self, template):
        names = template.location_names
        assert "Swamp Palace - Entrance" in names
        assert "Skull Woods - Pinball Room" in names

    def test_trash_region_exists(self, template):
        region = template.get_region("Ganon's Tower")
        assert region is not None
        assert region.dungeon_items == [ItemType.KEY_GT, ItemType.BIG_KEY_GT]

    def test_everything_reachable_with_full_pool(self, template):
        """With every pooled item owned, every location is reachable."""
        world = template.build(0)
        everything = Progression(
            Item(t, world) for t in ItemType for _ in range(2)
        )
        assert all(loc.available(everything) for loc in world.locations)

    def test_free_locations(self, template):
        world = template.build(0)
        free = [loc.name for loc in world.locations if loc.available(Progression())]
        assert len(free) >= 4
