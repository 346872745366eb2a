"""smz3fill CLI entry point."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from smz3fill.config import MAX_PLAYERS, Config, load_config
from smz3fill.fill import FillError
from smz3fill.generator import GenerationError, generate_with_retry
from smz3fill.items import load_pool_source
from smz3fill.output import export_json, export_spoiler_log
from smz3fill.regions import load_regions
from smz3fill.validator import compute_spheres


def _resolve(path_str: str, project_root: Path) -> Path:
    """Resolve a relative data path against the cwd, then the project root."""
    path = Path(path_str)
    if path.is_absolute() or path.exists():
        return path
    return project_root / path


def main() -> int:
    """Main entry point for the smz3fill command."""
    parser = argparse.ArgumentParser(
        description="smz3fill - Generate randomized multiworld item placements",
    )
    parser.add_argument(
        "config",
        type=Path,
        nargs="?",
        default=None,
        help="Path to config.toml (optional, uses defaults if not provided)",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=None,
        help="Output directory (default: config's output_dir or ./seeds). "
        "Files are written to <output>/<seed>/",
    )
    parser.add_argument(
        "--spoiler",
        action="store_true",
        help="Generate spoiler log file",
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Random seed (overrides config, 0 = auto-reroll)",
    )
    parser.add_argument(
        "--players",
        type=int,
        help="Number of worlds (overrides config player names)",
    )
    parser.add_argument(
        "--keysanity",
        action="store_true",
        help="Allow dungeon items outside their dungeon",
    )
    parser.add_argument(
        "--max-attempts",
        type=int,
        default=100,
        help="Max generation attempts for auto-reroll (default: 100)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Verbose output",
    )

    args = parser.parse_args()

    # Load or create config
    if args.config:
        try:
            config = load_config(args.config)
            if args.verbose:
                print(f"Loaded config from {args.config}")
        except FileNotFoundError:
            print(f"Error: Config file not found: {args.config}", file=sys.stderr)
            return 1
        except ValueError as e:
            print(f"Error: Invalid config: {e}", file=sys.stderr)
            return 1
    else:
        config = Config()
        if args.verbose:
            print("Using default configuration")

    # CLI overrides
    if args.seed is not None:
        config.seed = args.seed
    if args.players is not None:
        if not 1 <= args.players <= MAX_PLAYERS:
            print(
                f"Error: --players must be between 1 and {MAX_PLAYERS}",
                file=sys.stderr,
            )
            return 1
        config.run.players = [f"Player {i + 1}" for i in range(args.players)]
    if args.keysanity:
        config.fill.keysanity = True

    # Determine output directory: CLI > config > default
    if args.output is not None:
        output_dir = args.output
    else:
        output_dir = Path(config.paths.output_dir)

    project_root = Path(__file__).parent.parent
    regions_path = _resolve(config.paths.regions_file, project_root)
    pool_path = _resolve(config.paths.pool_file, project_root)

    try:
        template = load_regions(regions_path)
        source = load_pool_source(pool_path)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"Error: Invalid data file: {e}", file=sys.stderr)
        return 1

    if args.verbose:
        print(f"Loaded {len(template.location_names)} locations from {regions_path}")
        print(f"Loaded {source.total_items} items per world from {pool_path}")

    # Generate fill
    if args.verbose:
        mode = "fixed seed" if config.seed != 0 else "auto-reroll"
        print(f"Filling {len(config.run.players)} world(s) ({mode})...")

    try:
        result = generate_with_retry(
            config, template, source, max_attempts=args.max_attempts
        )
    except (GenerationError, FillError) as e:
        print(f"Error: Generation failed: {e}", file=sys.stderr)
        return 1

    worlds = result.worlds
    actual_seed = result.seed

    if args.verbose and result.validation.warnings:
        print("Validation warnings:")
        for warning in result.validation.warnings:
            print(f"  - {warning}")

    # Print summary
    if args.verbose or config.seed == 0:
        print(f"Generated fill with seed {actual_seed}")
        print(f"  Worlds: {len(worlds)}")
        print(f"  Locations: {sum(len(w.locations) for w in worlds)}")
        print(f"  Spheres: {len(compute_spheres(worlds))}")
        print(f"  Attempts: {result.attempts}")

    # Create output directory: <output>/<seed>/
    seed_dir = output_dir / str(actual_seed)
    seed_dir.mkdir(parents=True, exist_ok=True)

    json_path = seed_dir / "fill.json"
    export_json(worlds, actual_seed, json_path)
    print(f"Written: {json_path}")

    if args.spoiler:
        spoiler_path = seed_dir / "spoiler.txt"
        export_spoiler_log(worlds, actual_seed, spoiler_path)
        print(f"Written: {spoiler_path}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
