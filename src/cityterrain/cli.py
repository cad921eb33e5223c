"""Command-line interface for terrain generation and performance gating."""

import argparse
import logging
from pathlib import Path

import structlog
from pydantic import ValidationError

from .biome import get_biome
from .config import Config, find_config, list_configs, load_config
from .exceptions import TerrainError
from .terrain.config import TerrainConfig


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
    )


def _resolve_config(args: argparse.Namespace) -> Config:
    """Load the named config (or defaults) and apply CLI overrides."""
    logger = structlog.get_logger()

    if args.config:
        config_path = find_config(args.config)
        config = load_config(config_path)
        logger.info("config_loaded", path=str(config_path))
    else:
        config = Config()
        logger.info("using_default_config", available=list_configs())

    terrain_updates = {
        key: value
        for key, value in (
            ("seed", args.seed),
            ("width", args.width),
            ("height", args.height),
            ("generator", args.generator),
        )
        if value is not None
    }
    if terrain_updates:
        terrain = TerrainConfig.model_validate(
            {**config.terrain.model_dump(), **terrain_updates}
        )
        config = config.model_copy(update={"terrain": terrain})
    if args.biome is not None:
        config = config.model_copy(update={"biome": args.biome})
    return config


def cmd_generate(args: argparse.Namespace) -> int:
    """Generate terrain, audit it and save it as JSON."""
    from .persistence import save_terrain
    from .terrain.generator import create_terrain
    from .validation import validate_terrain

    logger = structlog.get_logger()
    config = _resolve_config(args)
    terrain = config.terrain
    biome = get_biome(config.biome)

    logger.info(
        "generating_terrain",
        width=terrain.width,
        height=terrain.height,
        seed=terrain.seed,
        biome=biome.id,
        generator=terrain.generator,
    )
    state = create_terrain(terrain, biome)

    result = validate_terrain(state)
    output_path = Path(args.output)
    save_terrain(output_path, state, seed=terrain.seed)
    print(f"Saved {terrain.width}x{terrain.height} '{biome.id}' terrain to {output_path}")

    if not result.passed:
        logger.error("terrain_invalid", errors=result.errors)
        return 1
    return 0


def cmd_perf(args: argparse.Namespace) -> int:
    """Measure generation time and write metrics JSON."""
    from .perf import evaluate_perf_gate, measure_generation, write_metrics

    config = _resolve_config(args)
    metrics = measure_generation(config.terrain, get_biome(config.biome), runs=args.runs)
    write_metrics(Path(args.output), metrics)
    print(
        f"mean {metrics.mean_ms:.1f} ms, p95 {metrics.p95_ms:.1f} ms, "
        f"peak {metrics.peak_ms:.1f} ms over {metrics.runs} runs"
    )

    if args.gate:
        return 0 if evaluate_perf_gate(metrics, config.perf).passed else 1
    return 0


def cmd_perf_gate(args: argparse.Namespace) -> int:
    """Check a metrics file against the configured budget."""
    from .perf import evaluate_perf_gate, load_metrics

    config = load_config(find_config(args.config)) if args.config else Config()
    metrics = load_metrics(Path(args.metrics))
    result = evaluate_perf_gate(metrics, config.perf)

    for warning in result.warnings:
        print(f"WARNING: {warning}")
    for error in result.errors:
        print(f"FAIL: {error}")
    print("Perf gate passed" if result.passed else "Perf gate failed")
    return 0 if result.passed else 1


def _add_generation_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config", type=str, default=None, help="Config name or path to TOML file"
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed override")
    parser.add_argument("--width", type=int, default=None, help="Grid width override")
    parser.add_argument("--height", type=int, default=None, help="Grid height override")
    parser.add_argument("--biome", type=str, default=None, help="Biome id override")
    parser.add_argument(
        "--generator",
        choices=["legacy", "runtime"],
        default=None,
        help="Generation strategy override",
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        description="Generate city-builder terrain and gate its performance"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate = subparsers.add_parser("generate", help="Generate and save terrain")
    _add_generation_options(generate)
    generate.add_argument(
        "--output",
        "-o",
        type=str,
        default="saves/terrain.json",
        help="Output path (default: saves/terrain.json)",
    )
    generate.set_defaults(handler=cmd_generate)

    perf = subparsers.add_parser("perf", help="Measure generation time")
    _add_generation_options(perf)
    perf.add_argument("--runs", type=int, default=5, help="Timed runs (default: 5)")
    perf.add_argument(
        "--output",
        "-o",
        type=str,
        default="metrics.json",
        help="Metrics output path (default: metrics.json)",
    )
    perf.add_argument(
        "--gate", action="store_true", help="Fail if the configured budget is exceeded"
    )
    perf.set_defaults(handler=cmd_perf)

    gate = subparsers.add_parser("perf-gate", help="Check a metrics file against the budget")
    gate.add_argument("metrics", type=str, help="Path to metrics.json")
    gate.add_argument(
        "--config", type=str, default=None, help="Config name or path supplying the budget"
    )
    gate.set_defaults(handler=cmd_perf_gate)

    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point.

    Returns:
        Process exit code: 0 on success, 1 on any failure.
    """
    args = build_parser().parse_args(argv)
    _configure_logging(args.verbose)
    logger = structlog.get_logger()

    try:
        return args.handler(args)
    except FileNotFoundError as e:
        logger.error("file_not_found", error=str(e))
    except TerrainError as e:
        logger.error("generation_failed", error=str(e))
    except ValidationError as e:
        logger.error("config_invalid", error=str(e))
    except ValueError as e:
        logger.error("invalid_input", error=str(e))
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
