"""Configuration parsing for smz3fill."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

# Use tomllib (Python 3.11+) with fallback to tomli
if sys.version_info >= (3, 11):
    import tomllib
else:
    try:
        import tomli as tomllib
    except ImportError as e:
        raise ImportError(
            "tomli is required for Python < 3.11. Install with: pip install tomli"
        ) from e

MAX_PLAYERS = 255


@dataclass
class RunConfig:
    """Seed and participating players."""

    seed: int = 0  # 0 = auto-reroll
    players: list[str] = field(default_factory=lambda: ["Player 1"])

    def __post_init__(self) -> None:
        """Validate run configuration."""
        if not self.players:
            raise ValueError("players must contain at least one player")
        if len(self.players) > MAX_PLAYERS:
            raise ValueError(
                f"players must contain at most {MAX_PLAYERS} entries, "
                f"got {len(self.players)}"
            )


@dataclass
class FillConfig:
    """Item placement configuration."""

    keysanity: bool = False  # Dungeon items may leave their dungeon
    gt_trash_ratio: float = 0.5  # Share of empty trash region locations pre-filled
    trash_region: str = "Ganon's Tower"
    front_fill: list[str] = field(default_factory=lambda: ["SUPER", "POWER_BOMB"])
    late_bias_item: str = "MOON_PEARL"
    early_bias_item: str = "MORPH"
    bias_placement: bool = True

    def __post_init__(self) -> None:
        """Validate fill configuration."""
        if not 0.0 <= self.gt_trash_ratio <= 1.0:
            raise ValueError(
                f"gt_trash_ratio must be between 0.0 and 1.0, got {self.gt_trash_ratio}"
            )


@dataclass
class PathsConfig:
    """File paths configuration."""

    output_dir: str = "./seeds"
    regions_file: str = "./data/regions.json"
    pool_file: str = "./data/item_pool.toml"


@dataclass
class Config:
    """Main configuration container."""

    run: RunConfig = field(default_factory=RunConfig)
    fill: FillConfig = field(default_factory=FillConfig)
    paths: PathsConfig = field(default_factory=PathsConfig)

    @property
    def seed(self) -> int:
        return self.run.seed

    @seed.setter
    def seed(self, value: int) -> None:
        self.run.seed = value

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Config:
        """Create Config from a dictionary (e.g., parsed TOML)."""
        run_section = data.get("run", {})
        fill_section = data.get("fill", {})
        paths_section = data.get("paths", {})

        return cls(
            run=RunConfig(
                seed=run_section.get("seed", 0),
                players=list(run_section.get("players", ["Player 1"])),
            ),
            fill=FillConfig(
                keysanity=fill_section.get("keysanity", False),
                gt_trash_ratio=fill_section.get("gt_trash_ratio", 0.5),
                trash_region=fill_section.get("trash_region", "Ganon's Tower"),
                front_fill=list(fill_section.get("front_fill", ["SUPER", "POWER_BOMB"])),
                late_bias_item=fill_section.get("late_bias_item", "MOON_PEARL"),
                early_bias_item=fill_section.get("early_bias_item", "MORPH"),
                bias_placement=fill_section.get("bias_placement", True),
            ),
            paths=PathsConfig(
                output_dir=paths_section.get("output_dir", "./seeds"),
                regions_file=paths_section.get("regions_file", "./data/regions.json"),
                pool_file=paths_section.get("pool_file", "./data/item_pool.toml"),
            ),
        )

    @classmethod
    def from_toml(cls, path: str | Path) -> Config:
        """Load configuration from a TOML file."""
        path = Path(path)
        with path.open("rb") as f:
            data = tomllib.load(f)
        return cls.from_dict(data)


def load_config(path: str | Path) -> Config:
    """Load configuration from a TOML file.

    This is a convenience function that wraps Config.from_toml().

    Args:
        path: Path to the TOML configuration file.

    Returns:
        Parsed Config object.
    """
    return Config.from_toml(path)
