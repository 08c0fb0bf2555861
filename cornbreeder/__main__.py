"""Entry point for ``python -m cornbreeder``.

Loads the default YAML config, runs a breeding program headless with
truncation auto-selection, and prints one row of stats per generation.
"""

from __future__ import annotations

import argparse
import dataclasses
import pathlib
import sys

from cornbreeder.errors import CornBreederError
from cornbreeder.logging_config import configure_logging
from cornbreeder.simulation.config import SimulationConfig
from cornbreeder.simulation.program import BreedingProgram

_DEFAULT_CONFIG = (
    pathlib.Path(__file__).resolve().parent.parent / "config" / "default.yaml"
)

_HEADER = (
    f"{'gen':>4} {'mean Y':>8} {'var Y':>7} {'max Y':>7} "
    f"{'res':>6} {'height':>7} {'het':>6} {'h2':>5}"
)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cornbreeder",
        description="CornBreeder - recurrent selection simulator",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=pathlib.Path,
        default=_DEFAULT_CONFIG,
        help="Path to YAML config file (default: config/default.yaml)",
    )
    parser.add_argument(
        "-g",
        "--generations",
        type=int,
        default=10,
        help="Generations to breed after the founders (default: 10)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Override the config seed",
    )
    parser.add_argument(
        "--intensity",
        type=float,
        default=None,
        help="Override the selection intensity (fraction kept, 0-1]",
    )
    parser.add_argument(
        "--genomic",
        action="store_true",
        help="Select on breeding values instead of phenotypes",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Parse CLI args, run the program, print the stats history.

    Args:
        argv: Command-line arguments. If None, uses ``sys.argv[1:]``.

    Returns:
        Exit code (0 on success, 2 on a configuration or selection error).
    """
    args = _build_parser().parse_args(argv)
    configure_logging()

    overrides: dict[str, object] = {}
    if args.seed is not None:
        overrides["seed"] = args.seed
    if args.intensity is not None:
        overrides["selection_intensity"] = args.intensity
    if args.genomic:
        overrides["genomic_selection"] = True

    try:
        config = (
            SimulationConfig.from_yaml(args.config)
            if args.config.exists()
            else SimulationConfig()
        )
        program = BreedingProgram(config=dataclasses.replace(config, **overrides))
        program.run(args.generations)
    except CornBreederError as exc:
        print(f"cornbreeder: {exc}", file=sys.stderr)
        return 2

    print(_HEADER)
    for stats in program.history:
        print(
            f"{stats.generation:>4} {stats.mean_yield:>8.2f} {stats.var_yield:>7.2f} "
            f"{stats.max_yield:>7.2f} {stats.mean_resistance:>6.2f} "
            f"{stats.mean_height:>7.2f} {stats.heterozygosity:>6.3f} "
            f"{stats.heritability:>5.2f}"
        )
    print(f"\n{program.note}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
