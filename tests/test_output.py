"""Tests for output module (JSON and spoiler log export)."""

import json

from smz3fill.items import Item, ItemType
from smz3fill.output import FORMAT_VERSION, export_json, export_spoiler_log, fill_to_dict
from smz3fill.world import World


def make_world(world_id: int = 0, player: str = "") -> World:
    """Overworld: Start (free), Cave (Lamp)."""
    world = World(world_id, player)
    region = world.add_region("Overworld")
    region.add_location("Start")
    region.add_location("Cave", lambda items: items.has(ItemType.LAMP))
    return world


def put(world: World, name: str, item_type: ItemType, owner: World | None = None):
    item = Item(item_type, owner or world)
    world.get_location(name).place(item)
    world.add_claimed_item(item)


class TestFillToDict:
    """Tests for fill_to_dict."""

    def test_structure(self):
        world = make_world(player="Alice")
        put(world, "Start", ItemType.LAMP)
        put(world, "Cave", ItemType.MISSILE)

        data = fill_to_dict([world], 1234)

        assert data == {
            "version": FORMAT_VERSION,
            "seed": 1234,
            "worlds": [
                {
                    "id": 0,
                    "player": "Alice",
                    "locations": {
                        "Start": {"item": "LAMP", "owner": 0},
                        "Cave": {"item": "MISSILE", "owner": 0},
                    },
                }
            ],
        }

    def test_empty_location_is_none(self):
        world = make_world()
        put(world, "Start", ItemType.LAMP)
        locations = fill_to_dict([world], 1)["worlds"][0]["locations"]
        assert locations["Cave"] is None

    def test_owner_of_foreign_item(self):
        first, second = make_world(0), make_world(1)
        put(first, "Start", ItemType.LAMP, owner=second)
        data = fill_to_dict([first, second], 1)
        assert data["worlds"][0]["locations"]["Start"] == {"item": "LAMP", "owner": 1}


def test_export_json(tmp_path):
    world = make_world()
    put(world, "Start", ItemType.LAMP)
    put(world, "Cave", ItemType.HAMMER)
    path = tmp_path / "fill.json"

    export_json([world], 99, path)

    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["seed"] == 99
    assert data["worlds"][0]["locations"]["Cave"]["item"] == "HAMMER"


class TestSpoilerLog:
    """Tests for export_spoiler_log."""

    def test_single_world(self, tmp_path):
        world = make_world()
        put(world, "Start", ItemType.LAMP)
        put(world, "Cave", ItemType.HAMMER)
        path = tmp_path / "spoiler.txt"

        export_spoiler_log([world], 42, path)

        content = path.read_text(encoding="utf-8")
        assert "SMZ3 FILL SPOILER (seed: 42)" in content
        assert "[Overworld]" in content
        assert "    Start: Lamp" in content
        assert "    Cave: Hammer" in content
        assert "PLAYTHROUGH" in content
        assert "Sphere 0:\n  Start: Lamp" in content
        assert "Sphere 1:\n  Cave: Hammer" in content

    def test_empty_location(self, tmp_path):
        world = make_world()
        path = tmp_path / "spoiler.txt"
        export_spoiler_log([world], 1, path)
        assert "    Start: (empty)" in path.read_text(encoding="utf-8")

    def test_multiworld_names_owners(self, tmp_path):
        first, second = make_world(0, "Alice"), make_world(1, "Bob")
        put(first, "Start", ItemType.LAMP, owner=second)
        put(first, "Cave", ItemType.MISSILE)
        put(second, "Start", ItemType.MISSILE, owner=first)
        put(second, "Cave", ItemType.HAMMER)
        path = tmp_path / "spoiler.txt"

        export_spoiler_log([first, second], 7, path)

        content = path.read_text(encoding="utf-8")
        assert "--- Alice ---" in content
        assert "--- Bob ---" in content
        assert "    Start: Lamp (Bob)" in content
        assert "  Cave (Bob): Hammer (Bob)" in content
