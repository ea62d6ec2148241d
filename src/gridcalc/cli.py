"""Command-line front end.

Usage:
    gridcalc eval "L = 5 ft" "L * 2"
    gridcalc eval "2 ft * 3 ft" --as "in^2"
    gridcalc eval "300 lb / (2 in * 1 in)" --auto --system metric_mm
    gridcalc grid sheet.csv
    gridcalc grid sheet.yaml -v
"""

import argparse
import csv
import logging
import sys
from pathlib import Path

import yaml

from .a1 import index_to_col
from .config import ConfigError, UnitPrefs, load_prefs, prefs_for_system
from .errors import EvaluationError, TextEvaluationError
from .evaluator import Evaluator, Grid
from .format import auto_display, display_as, format_quantity, format_text
from .names import VariableRegistry
from .quantity import Quantity
from .units import UnitError


def load_grid(path: Path) -> list[list[str]]:
    """Read a grid of raw cell strings from a CSV or YAML file."""
    if path.suffix.lower() in (".yaml", ".yml"):
        with open(path) as f:
            data = yaml.safe_load(f) or []
        if not isinstance(data, list) or not all(isinstance(row, list) for row in data):
            raise ValueError(f"{path}: expected a list of rows")
        return [["" if cell is None else str(cell) for cell in row] for row in data]

    with open(path, newline="") as f:
        return [list(row) for row in csv.reader(f)]


def _render(q: Quantity, prefs: UnitPrefs, auto: bool, as_unit: str | None) -> str:
    if as_unit:
        return format_text(display_as(q, as_unit))
    if auto:
        return format_text(auto_display(q, prefs, lhs_unit=q.unit))
    return format_quantity(q)


def _resolve_prefs(args: argparse.Namespace) -> UnitPrefs:
    if args.system:
        return prefs_for_system(args.system)
    return load_prefs(args.config)


def cmd_eval(args: argparse.Namespace) -> int:
    prefs = _resolve_prefs(args)
    evaluator = Evaluator(VariableRegistry())
    failed = False
    for expr in args.expressions:
        try:
            q = evaluator.evaluate(expr)
            print(f"  {expr} => {_render(q, prefs, args.auto, args.as_unit)}")
        except (EvaluationError, UnitError) as e:
            failed = True
            print(f"  {expr} => {getattr(e, 'marker', '#VALUE!')} {e}")
    return 1 if failed else 0


def evaluate_grid(grid: Grid, evaluator: Evaluator, prefs: UnitPrefs, auto: bool = False) -> tuple[list[list[str]], int]:
    """Display text for every cell, and the number of cells that failed."""
    rendered: list[list[str]] = []
    errors = 0
    for r, row in enumerate(grid):
        out_row = []
        for c, raw in enumerate(row):
            if not raw.strip():
                out_row.append("")
                continue
            try:
                q = evaluator.evaluate_cell_quantity(grid, raw, r, c)
                out_row.append(_render(q, prefs, auto, None))
            except TextEvaluationError:
                out_row.append(raw)
            except EvaluationError as e:
                errors += 1
                out_row.append(e.marker)
        rendered.append(out_row)
    return rendered, errors


def cmd_grid(args: argparse.Namespace) -> int:
    prefs = _resolve_prefs(args)
    grid = load_grid(args.file)
    rendered, errors = evaluate_grid(grid, Evaluator(VariableRegistry()), prefs, args.auto)

    width = max((len(cell) for row in rendered for cell in row), default=0)
    width = max(width, 4)
    ncols = max((len(row) for row in rendered), default=0)
    print("     " + " ".join(f"{index_to_col(c):<{width}s}" for c in range(ncols)))
    for r, row in enumerate(rendered):
        print(f"{r + 1:<4d} " + " ".join(f"{cell:<{width}s}" for cell in row))

    if errors:
        print()
        print(f"  {errors} cell(s) failed")
        return 1
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="gridcalc", description="Evaluate unit-aware formulas")
    parser.add_argument("--verbose", "-v", action="store_true")
    parser.add_argument("--config", type=Path, default=None, help="YAML unit preferences file")
    parser.add_argument("--system", default=None, help="Unit system preset (e.g. imperial_ft, metric_mm)")
    parser.add_argument("--auto", action="store_true", help="Display results in preferred units")
    sub = parser.add_subparsers(dest="command", required=True)

    p_eval = sub.add_parser("eval", help="Evaluate expressions in order; assignments carry forward")
    p_eval.add_argument("expressions", nargs="+")
    p_eval.add_argument("--as", dest="as_unit", default=None, help="Display unit, e.g. in^2 or lb/in^2")
    p_eval.set_defaults(func=cmd_eval)

    p_grid = sub.add_parser("grid", help="Evaluate every cell of a CSV or YAML grid")
    p_grid.add_argument("file", type=Path)
    p_grid.set_defaults(func=cmd_grid)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        return args.func(args)
    except (ConfigError, OSError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
