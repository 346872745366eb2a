"""Seeded fill generation with validation and auto-reroll."""

from __future__ import annotations

import random
from dataclasses import dataclass

from smz3fill.config import Config
from smz3fill.fill import (
    SKULL_WOODS_KEY_LOCATION,
    SWAMP_PALACE_KEY_LOCATION,
    FillError,
    Filler,
)
from smz3fill.items import TomlPoolSource, parse_item_type
from smz3fill.regions import WorldTemplate, create_worlds
from smz3fill.validator import ValidationResult, validate_fill
from smz3fill.world import World


class GenerationError(Exception):
    """Error during fill generation."""

    pass


@dataclass
class FillResult:
    """Result of fill generation.

    Attributes:
        worlds: The filled worlds.
        seed: The actual seed used for generation.
        validation: Validation result (with any warnings).
        attempts: Number of generation attempts made.
    """

    worlds: list[World]
    seed: int
    validation: ValidationResult
    attempts: int


def validate_config(
    config: Config, template: WorldTemplate, source: TomlPoolSource
) -> list[str]:
    """Validate configuration options against the world template and pools.

    Args:
        config: Configuration to validate.
        template: World template every world is built from.
        source: Item pools of a single world.

    Returns:
        List of error messages (empty if valid).
    """
    errors: list[str] = []
    fill = config.fill

    for name in [*fill.front_fill, fill.late_bias_item, fill.early_bias_item]:
        try:
            parse_item_type(name)
        except ValueError as e:
            errors.append(str(e))

    if template.get_region(fill.trash_region) is None:
        errors.append(f"Unknown trash_region: '{fill.trash_region}'")

    names = template.location_names
    for name in (SWAMP_PALACE_KEY_LOCATION, SKULL_WOODS_KEY_LOCATION):
        if name not in names:
            errors.append(f"Missing fixed key location: '{name}'")
    duplicates = sorted({name for name in names if names.count(name) > 1})
    if duplicates:
        errors.append(f"Duplicate location names: {', '.join(duplicates)}")

    if source.total_items != len(names):
        errors.append(
            f"Item pool has {source.total_items} items per world "
            f"but the world has {len(names)} locations"
        )

    return errors


def generate_fill(
    config: Config,
    template: WorldTemplate,
    source: TomlPoolSource,
    seed: int | None = None,
) -> list[World]:
    """Build fresh worlds and fill them.

    Args:
        config: Configuration with players and fill options
        template: World template
        source: Item pools
        seed: Random seed (uses config.seed if None)

    Returns:
        The filled worlds

    Raises:
        FillError: If the fill cannot complete
    """
    if seed is None:
        seed = config.seed

    rng = random.Random(seed)
    worlds = create_worlds(template, config)
    Filler(worlds, config.fill, rng, source).fill()
    return worlds


def generate_with_retry(
    config: Config,
    template: WorldTemplate,
    source: TomlPoolSource,
    max_attempts: int = 100,
) -> FillResult:
    """Generate a fill with automatic retry on failure.

    If config.seed is 0, tries random seeds until success (fill + validation).
    If config.seed is non-zero, uses that seed (fails if fill or validation fails).

    Args:
        config: Configuration
        template: World template
        source: Item pools
        max_attempts: Maximum retry attempts (only for seed=0)

    Returns:
        FillResult with worlds, seed, validation, and attempt count.

    Raises:
        GenerationError: If the configuration is invalid, or generation
            fails after max_attempts
        FillError: If the fill fails with a fixed seed
    """
    config_errors = validate_config(config, template, source)
    if config_errors:
        raise GenerationError(f"Invalid configuration: {'; '.join(config_errors)}")

    if config.seed != 0:
        # Fixed seed - single attempt
        worlds = generate_fill(config, template, source, config.seed)
        validation = validate_fill(worlds)
        if not validation.is_valid:
            errors = "; ".join(validation.errors)
            raise GenerationError(f"Validation failed: {errors}")
        return FillResult(
            worlds=worlds,
            seed=config.seed,
            validation=validation,
            attempts=1,
        )

    # Auto-reroll mode
    base_rng = random.Random()

    for attempt in range(max_attempts):
        seed = base_rng.randint(1, 999999999)
        try:
            worlds = generate_fill(config, template, source, seed)
            validation = validate_fill(worlds)
            if not validation.is_valid:
                errors = "; ".join(validation.errors)
                raise GenerationError(f"Validation failed: {errors}")
            return FillResult(
                worlds=worlds,
                seed=seed,
                validation=validation,
                attempts=attempt + 1,
            )
        except (FillError, GenerationError) as e:
            print(f"Attempt {attempt + 1}: seed {seed} failed - {e}")
            continue

    raise GenerationError(f"Failed to generate fill after {max_attempts} attempts")
