"""CLI entrypoint for the mosaic puzzle authoring tools."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List

from mosaic.core.constants import (
    Difficulty,
    advanced_fraction_for_difficulty,
    uses_advanced_solving,
)
from mosaic.core.exceptions import GenerationError
from mosaic.engine.generator import GeneratorConfig, MosaicGenerator, generate_full_clue_set, run
from mosaic.engine.grid import RegionIndex, require_same_shape
from mosaic.engine.solver import solve_regional
from mosaic.engine.validator import PuzzleValidator
from mosaic.io.clues import (
    clue_path,
    load_clues,
    load_region_map,
    load_solution,
    save_clues,
    save_solution,
    serialize_clues,
)
from mosaic.utils.logger import configure_logging, get_logger, parse_level
from mosaic.utils.pretty import print_generation_stats, print_solve_stats


LOGGER = get_logger("mosaic.cli")

DIFFICULTY_CHOICES = [level.name.lower() for level in Difficulty]


def parse_difficulties(value: str) -> List[Difficulty]:
    if value == "all":
        return list(Difficulty)
    return [Difficulty[value.upper()]]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Solve, generate and validate region-restricted mosaic puzzles",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )
    parser.add_argument("--output", type=Path, help="Optional path to JSON output")
    sub = parser.add_subparsers(dest="command", required=True)

    dense = sub.add_parser("dense", help="Derive the fully clued grid from a solution")
    dense.add_argument("--solution", type=Path, required=True, help="Solution CSV (1 black, 0 white)")
    dense.add_argument("--regions", type=Path, required=True, help="Region map CSV (-1 for walls)")
    dense.add_argument("--clues-out", type=Path, help="Write the clue grid here instead of stdout")

    solve = sub.add_parser("solve", help="Solve a clue file region by region")
    solve.add_argument("--clues", type=Path, required=True, help="Clue CSV (-1 for no clue)")
    solve.add_argument("--regions", type=Path, required=True, help="Region map CSV (-1 for walls)")
    solve.add_argument("--advanced", action="store_true", help="Enable overlap deduction")
    solve.add_argument("--workers", type=int, default=None, help="Solve regions on a thread pool")
    solve.add_argument("--show", action="store_true", help="Print the solved board to stderr")

    generate = sub.add_parser("generate", help="Prune clue sets for one or all difficulties")
    generate.add_argument("--solution", type=Path, required=True, help="Solution CSV (1 black, 0 white)")
    generate.add_argument("--regions", type=Path, required=True, help="Region map CSV (-1 for walls)")
    generate.add_argument("--output-dir", type=Path, required=True, help="Directory for clue files")
    generate.add_argument(
        "--difficulty",
        type=str,
        choices=DIFFICULTY_CHOICES + ["all"],
        default="classic",
        help="Difficulty level to generate, or 'all'",
    )
    generate.add_argument("--seed", type=int, default=None, help="Random seed for reproducibility")
    generate.add_argument(
        "--fix",
        action="store_true",
        help="Repair regions the dense clues cannot solve and write solution.csv",
    )
    generate.add_argument(
        "--max-fix-iterations",
        type=int,
        default=100,
        help="Upper bound on repair attempts per region",
    )
    generate.add_argument("--show", action="store_true", help="Print clue grids and stats to stderr")

    validate = sub.add_parser("validate", help="Check a clue file against its solution")
    validate.add_argument("--solution", type=Path, required=True, help="Solution CSV (1 black, 0 white)")
    validate.add_argument("--regions", type=Path, required=True, help="Region map CSV (-1 for walls)")
    validate.add_argument("--clues", type=Path, required=True, help="Clue CSV (-1 for no clue)")
    validate.add_argument("--unique", action="store_true", help="Also require a unique solution per region")
    return parser


# ----------------------------------------------------------------------
# Commands
# ----------------------------------------------------------------------
def run_dense(args: argparse.Namespace) -> Dict[str, Any]:
    solution = load_solution(args.solution)
    region_map = load_region_map(args.regions)
    clues = generate_full_clue_set(solution, region_map)
    if args.clues_out:
        save_clues(args.clues_out, clues)
    else:
        sys.stdout.write(serialize_clues(clues))
    return {
        "width": clues.width,
        "height": clues.height,
        "regions": len(RegionIndex(region_map)),
        "clues_out": str(args.clues_out) if args.clues_out else None,
    }


def run_solve(args: argparse.Namespace) -> Dict[str, Any]:
    clues = load_clues(args.clues)
    region_map = load_region_map(args.regions)
    result = solve_regional(clues, region_map, use_advanced=args.advanced, max_workers=args.workers)
    if args.show:
        print_solve_stats(result, region_map, stream=sys.stderr)
    return {
        "finished": result.finished,
        "remaining_tiles": result.remaining_tiles,
        "advanced_deductions": result.advanced_deductions,
        "tiles_attempted": result.tiles_attempted,
        "board": [[state.value for state in row] for row in result.board_state.rows()],
    }


def run_generate(args: argparse.Namespace) -> Dict[str, Any]:
    solution = load_solution(args.solution)
    region_map = load_region_map(args.regions)
    require_same_shape(solution=solution, region_map=region_map)
    difficulties = parse_difficulties(args.difficulty)
    config = GeneratorConfig(seed=args.seed, max_fix_iterations=args.max_fix_iterations)
    payload: Dict[str, Any] = {"seed": args.seed, "levels": []}

    if args.fix:
        repair = MosaicGenerator(config)
        dense = generate_full_clue_set(solution, region_map)
        randomized = 0
        for region_id in RegionIndex(region_map).region_ids:
            result = run(repair.fix_solution(solution, region_map, dense, region_id))
            if result.failure:
                raise GenerationError(
                    f"Region {region_id} could not be repaired in {args.max_fix_iterations} iterations"
                )
            randomized += result.clues_placed
        solution_path = save_solution(args.output_dir / "solution.csv", solution)
        payload["solution"] = str(solution_path)
        payload["tiles_randomized"] = randomized

    dense = generate_full_clue_set(solution, region_map)
    for level in difficulties:
        generator = MosaicGenerator(config)
        fraction = advanced_fraction_for_difficulty(level)
        result = run(generator.prune_regions(solution, region_map, dense, fraction))
        if result.failure:
            raise GenerationError(
                f"Dense clues do not solve every region at difficulty {level.name.lower()}; rerun with --fix"
            )
        path = save_clues(clue_path(args.output_dir, level), result.clues)
        if args.show:
            print(f"[{level.name.lower()}]", file=sys.stderr)
            print_generation_stats(result, region_map, seed=args.seed, stream=sys.stderr)
        payload["levels"].append(
            {
                "difficulty": level.name.lower(),
                "path": str(path),
                "advanced_solving": uses_advanced_solving(level),
                "clues_removed": result.clues_placed,
                "advanced_clues": result.advanced_clues,
                "steps": result.num_steps,
            }
        )
    return payload


def run_validate(args: argparse.Namespace) -> Dict[str, Any]:
    solution = load_solution(args.solution)
    region_map = load_region_map(args.regions)
    clues = load_clues(args.clues)
    result = PuzzleValidator().validate(solution, region_map, clues, check_unique=args.unique)
    return {"ok": result.ok, "messages": result.messages}


COMMANDS = {
    "dense": run_dense,
    "solve": run_solve,
    "generate": run_generate,
    "validate": run_validate,
}


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        level = parse_level(args.log_level)
    except ValueError as exc:
        parser.error(str(exc))
    configure_logging(level)

    if getattr(args, "workers", None) is not None and args.workers < 1:
        parser.error("--workers must be at least 1")
    if getattr(args, "max_fix_iterations", 1) < 1:
        parser.error("--max-fix-iterations must be at least 1")

    payload = COMMANDS[args.command](args)

    output_text = json.dumps(payload, ensure_ascii=False, indent=2)
    if args.output:
        args.output.write_text(output_text, encoding="utf-8")
    elif args.command != "dense" or args.clues_out:
        print(output_text)
    else:
        LOGGER.info("Dense clue grid %sx%s written to stdout", payload["width"], payload["height"])

    if args.command == "validate" and not payload["ok"]:
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
