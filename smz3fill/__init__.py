"""smz3fill - multiworld item placement for SMZ3 randomization."""

__version__ = "0.1.0"

from smz3fill.config import Config, FillConfig, PathsConfig, RunConfig, load_config
from smz3fill.fill import (
    FillDeadlockError,
    Filler,
    FillError,
    MissingItemError,
    PlacementExhaustedError,
    assumed_fill,
    bias_item_placement,
    collect_items,
    fast_fill,
    fast_fill_locations,
    front_fill_item_in_world,
    initial_fill,
)
from smz3fill.generator import (
    FillResult,
    GenerationError,
    generate_fill,
    generate_with_retry,
)
from smz3fill.items import (
    Item,
    ItemType,
    PoolSource,
    Progression,
    TomlPoolSource,
    load_pool_source,
)
from smz3fill.output import export_json, export_spoiler_log, fill_to_dict
from smz3fill.pools import FillPools, build_pools
from smz3fill.regions import Requirement, WorldTemplate, create_worlds, load_regions
from smz3fill.validator import ValidationResult, compute_spheres, validate_fill
from smz3fill.world import Location, Region, World

__all__ = [
    # Config
    "Config",
    "FillConfig",
    "PathsConfig",
    "RunConfig",
    "load_config",
    # Model
    "Item",
    "ItemType",
    "Location",
    "Progression",
    "Region",
    "World",
    # Data
    "PoolSource",
    "Requirement",
    "TomlPoolSource",
    "WorldTemplate",
    "create_worlds",
    "load_pool_source",
    "load_regions",
    # Pools
    "FillPools",
    "build_pools",
    # Fill
    "FillDeadlockError",
    "FillError",
    "Filler",
    "MissingItemError",
    "PlacementExhaustedError",
    "assumed_fill",
    "bias_item_placement",
    "collect_items",
    "fast_fill",
    "fast_fill_locations",
    "front_fill_item_in_world",
    "initial_fill",
    # Generator
    "FillResult",
    "GenerationError",
    "generate_fill",
    "generate_with_retry",
    # Validator
    "ValidationResult",
    "compute_spheres",
    "validate_fill",
    # Output
    "export_json",
    "export_spoiler_log",
    "fill_to_dict",
]
