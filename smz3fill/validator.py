"""Fill validation for smz3fill.

This module validates completed fills, distinguishing between errors
(blocking) and warnings (informational).
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from smz3fill.items import Item
from smz3fill.world import Location, World, available_within_world, filled


@dataclass
class ValidationResult:
    """Result of fill validation.

    Attributes:
        is_valid: True if the fill passes all required checks (no errors).
        errors: List of blocking issues that make the fill invalid.
        warnings: List of informational issues that don't block validation.
    """

    is_valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


def compute_spheres(worlds: Sequence[World]) -> list[list[Location]]:
    """Group filled locations by the collection round that reaches them.

    Sphere 0 holds the locations reachable with no items; each following
    sphere holds the locations opened by everything collected before it.
    Locations that are never reached are not part of any sphere.

    This is the same fixpoint as `smz3fill.fill.collect_items` started
    from no items, keeping each round's locations apart. Keep the two
    loops in step.
    """
    owned: list[Item] = []
    remaining = filled(loc for world in worlds for loc in world.locations)
    spheres: list[list[Location]] = []

    while remaining:
        sphere = available_within_world(remaining, owned)
        if not sphere:
            break
        reached = set(sphere)
        remaining = [loc for loc in remaining if loc not in reached]
        owned.extend(loc.item for loc in sphere if loc.item is not None)
        spheres.append(sphere)

    return spheres


def validate_fill(worlds: Sequence[World]) -> ValidationResult:
    """Validate a completed fill.

    Checks:
    - Every location holds an item
    - No item is placed at more than one location
    - Each world's claimed items match the items in its locations
    - Every location is reachable from an empty inventory
    - Multiworld exchange (no items from other worlds = warning)

    Args:
        worlds: The filled worlds.

    Returns:
        ValidationResult with errors and warnings.
    """
    errors: list[str] = []
    warnings: list[str] = []

    _check_filled(worlds, errors)
    _check_unique_items(worlds, errors)
    _check_claimed_items(worlds, errors)
    _check_reachable(worlds, errors)
    _check_exchange(worlds, warnings)

    return ValidationResult(
        is_valid=len(errors) == 0,
        errors=errors,
        warnings=warnings,
    )


def _check_filled(worlds: Sequence[World], errors: list[str]) -> None:
    for world in worlds:
        for loc in world.locations:
            if loc.is_empty:
                errors.append(f"Location '{loc.name}' ({world.player}) is empty")


def _check_unique_items(worlds: Sequence[World], errors: list[str]) -> None:
    seen: dict[int, Location] = {}
    for world in worlds:
        for loc in filled(world.locations):
            key = id(loc.item)
            if key in seen:
                other = seen[key]
                errors.append(
                    f"Item {loc.item} placed twice: '{other.name}' "
                    f"({other.world.player}) and '{loc.name}' ({world.player})"
                )
            else:
                seen[key] = loc


def _check_claimed_items(worlds: Sequence[World], errors: list[str]) -> None:
    for world in worlds:
        placed = {id(loc.item) for loc in filled(world.locations)}
        claimed = {id(item) for item in world.items}
        if len(claimed) != len(world.items):
            errors.append(f"World {world.player} claims an item more than once")
        if placed != claimed:
            errors.append(
                f"World {world.player}: {len(claimed)} claimed items but "
                f"{len(placed)} placed items do not match"
            )


def _check_reachable(worlds: Sequence[World], errors: list[str]) -> None:
    reached = {id(loc) for sphere in compute_spheres(worlds) for loc in sphere}
    for world in worlds:
        for loc in filled(world.locations):
            if id(loc) not in reached:
                errors.append(
                    f"Location '{loc.name}' ({world.player}) is unreachable"
                )


def _check_exchange(worlds: Sequence[World], warnings: list[str]) -> None:
    if len(worlds) < 2:
        return
    for world in worlds:
        received = any(
            loc.item is not None and loc.item.world is world
            for other in worlds
            if other is not world
            for loc in other.locations
        )
        if not received:
            warnings.append(f"World {world.player} received no items from other worlds")
