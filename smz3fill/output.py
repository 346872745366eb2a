"""Output module for fill export to JSON and spoiler logs.

This module provides functions to export a completed fill to:
- JSON format for patchers and tracking tools
- Human-readable spoiler log for players
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from datetime import datetime
from pathlib import Path
from typing import Any

from smz3fill.validator import compute_spheres
from smz3fill.world import World

FORMAT_VERSION = "1.0"


def fill_to_dict(worlds: Sequence[World], seed: int) -> dict[str, Any]:
    """Convert filled worlds to a JSON-serializable dictionary.

    Args:
        worlds: The filled worlds
        seed: Seed used for the fill

    Returns:
        Dictionary with the following structure:
        - version: format version
        - seed: int
        - worlds: list of {id, player, locations}, where locations maps
          location name -> {item, owner}; empty locations map to None
    """
    return {
        "version": FORMAT_VERSION,
        "seed": seed,
        "worlds": [
            {
                "id": world.id,
                "player": world.player,
                "locations": {
                    loc.name: (
                        {"item": loc.item.type.name, "owner": loc.item.world.id}
                        if loc.item is not None
                        else None
                    )
                    for loc in world.locations
                },
            }
            for world in worlds
        ],
    }


def export_json(worlds: Sequence[World], seed: int, output_path: Path) -> None:
    """Export the fill to a JSON file.

    Args:
        worlds: The filled worlds
        seed: Seed used for the fill
        output_path: Path to write the JSON file
    """
    data = fill_to_dict(worlds, seed)
    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)


def export_spoiler_log(worlds: Sequence[World], seed: int, output_path: Path) -> None:
    """Export human-readable spoiler log with placements and playthrough.

    Args:
        worlds: The filled worlds
        seed: Seed used for the fill
        output_path: Path to write the spoiler log
    """
    lines: list[str] = []
    multiworld = len(worlds) > 1

    # Header
    lines.append("=" * 60)
    lines.append(f"SMZ3 FILL SPOILER (seed: {seed})")
    lines.append(f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    lines.append("=" * 60)
    lines.append(f"Worlds: {len(worlds)}")
    lines.append(f"Locations: {sum(len(w.locations) for w in worlds)}")
    lines.append("")

    for world in worlds:
        lines.append(f"--- {world.player} ---")
        for region in world.regions:
            lines.append(f"  [{region.name}]")
            for loc in region.locations:
                if loc.item is None:
                    item_text = "(empty)"
                elif multiworld:
                    item_text = str(loc.item)
                else:
                    item_text = loc.item.name
                lines.append(f"    {loc.name}: {item_text}")
        lines.append("")

    lines.append("=" * 60)
    lines.append("PLAYTHROUGH")
    lines.append("=" * 60)
    for index, sphere in enumerate(compute_spheres(worlds)):
        lines.append(f"Sphere {index}:")
        for loc in sphere:
            item_text = str(loc.item) if multiworld else loc.item.name  # type: ignore[union-attr]
            where = f"{loc.name} ({loc.world.player})" if multiworld else loc.name
            lines.append(f"  {where}: {item_text}")
    lines.append("")

    output_path.write_text("\n".join(lines), encoding="utf-8")
