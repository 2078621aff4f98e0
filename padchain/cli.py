"""padchain.cli
===============

Command-line entry point: score a batch of codes for a given chain depth and
optionally write a JSON report and per-code CSV stats.
"""

from __future__ import annotations

import argparse
import csv
import json
from pathlib import Path

from .constants import DEFAULT_LAYERS, MAX_WITNESS_LAYERS, PART_LAYERS
from .cost import CostEvaluator
from .expander import ChainConfig, ScoreReport, expand_code, score_codes, score_codes_parallel
from .memory import load_cost_cache, save_cost_cache


def _write_outputs(report: ScoreReport, outfile: str) -> None:
    out_path = Path(outfile)
    out_path.write_text(json.dumps(report.as_dict(), indent=2))
    stats_csv_path = out_path.with_suffix(".stats.csv")
    with stats_csv_path.open("w", newline="") as csv_file:
        writer = csv.writer(csv_file)
        writer.writerow(["code", "value", "length", "complexity", "layers"])
        for result in report.results:
            writer.writerow([result.code, result.value, result.length, result.complexity, report.layers])
    print("Report saved to", out_path)
    print(f"Per-code stats saved to {stats_csv_path}")


def main(argv: list[str] | None = None) -> int:
    """Parse CLI arguments and score the given codes."""

    parser = argparse.ArgumentParser("padchain")
    parser.add_argument("codes", nargs="+", help="Codes to type on the numeric keypad, e.g. 029A")
    depth = parser.add_mutually_exclusive_group()
    depth.add_argument("--layers", type=int, default=None, help="Directional keypads between the human and the numeric keypad")
    depth.add_argument("--part", type=int, choices=sorted(PART_LAYERS), default=None, help="Shorthand: 1 for 2 layers, 2 for 25 layers")
    parser.add_argument("--max-workers", type=int, default=1, help="Number of worker processes (0 uses every CPU)")
    parser.add_argument("--outfile", default=None, help="Write a JSON report (plus a .stats.csv) here")
    parser.add_argument("--cache-db", default=None, help="Load and save the cost table from this JSON file")
    parser.add_argument("--fail-log", default=None, help="JSONL file receiving rejected codes")
    parser.add_argument("--show-sequence", action="store_true", help="Print one optimal press sequence per code")
    parser.add_argument("--quiet", action="store_true", help="Only print the total")
    args = parser.parse_args(argv)

    if args.layers is not None:
        layers = args.layers
    elif args.part is not None:
        layers = PART_LAYERS[args.part]
    else:
        layers = DEFAULT_LAYERS
    try:
        config = ChainConfig(
            layers=layers,
            max_workers=args.max_workers,
            cache_path=args.cache_db,
            fail_log=args.fail_log,
            verbose=not args.quiet,
        )
    except ValueError as exc:
        parser.error(str(exc))

    evaluator = CostEvaluator()
    if config.max_workers == 1:
        if config.cache_path:
            added = evaluator.load_cache(load_cost_cache(config.cache_path))
            if config.verbose:
                print(f"Loaded {added} cached costs from {config.cache_path}")
        report = score_codes(args.codes, config, evaluator)
        if config.cache_path:
            save_cost_cache(evaluator.export_cache(), config.cache_path)
    else:
        if config.cache_path:
            print("[WARN] --cache-db is only used with a single worker")
        report = score_codes_parallel(args.codes, config)

    if args.show_sequence:
        if layers > MAX_WITNESS_LAYERS:
            print(f"[WARN] sequences are only shown for up to {MAX_WITNESS_LAYERS} layers")
        else:
            for result in report.results:
                print(f"{result.code}: {expand_code(result.code, layers, evaluator)}")

    if args.outfile:
        _write_outputs(report, args.outfile)
    print(report.total)
    return 1 if report.rejected else 0


__all__ = ["main"]
