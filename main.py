"""CLI entrypoint for crossword grid reconstruction."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List

from gridsmith.core.constants import (DEFAULT_CP_SAT_SECONDS, DEFAULT_MAX_MILLIS,
                                      DEFAULT_MAX_STATES)
from gridsmith.core.exceptions import InputError, TemplateGridError
from gridsmith.core.models import CellGrid, GridConstructorOptions, TemplateGrid
from gridsmith.engine.constructor import GridConstructor
from gridsmith.engine.grid_store import DEFAULT_STORE_DIR, GridStore
from gridsmith.engine.integrity import check_grid_integrity
from gridsmith.engine.templates import parse_template_grid
from gridsmith.io.answer_key import (answer_key_from_dict, load_answer_key_payload,
                                     load_template_file)
from gridsmith.utils.logger import configure_logging
from gridsmith.utils.pretty import print_result


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Reconstruct a crossword grid layout from a numbered answer key",
    )
    parser.add_argument(
        "--answers",
        type=Path,
        required=True,
        help="JSON answer key with across/down entries (number, answer, clue, length)",
    )
    parser.add_argument("--width", type=int, help="Override grid width in cells")
    parser.add_argument("--height", type=int, help="Override grid height in cells")
    parser.add_argument(
        "--max-states",
        type=int,
        default=DEFAULT_MAX_STATES,
        help="Search state budget",
    )
    parser.add_argument(
        "--max-millis",
        type=int,
        default=DEFAULT_MAX_MILLIS,
        help="Search wall-clock budget in milliseconds",
    )
    parser.add_argument(
        "--templates",
        type=Path,
        metavar="FILE",
        help="File of fallback template grids separated by blank lines",
    )
    parser.add_argument(
        "--template-dir",
        type=Path,
        metavar="DIR",
        help="Grid store directory whose saved grids are used as fallback templates",
    )
    parser.add_argument(
        "--save",
        action="store_true",
        help="Save a successful result into the grid store",
    )
    parser.add_argument(
        "--rot13",
        action="store_true",
        help="Answers in the key are ROT13-encoded",
    )
    parser.add_argument(
        "--diagnostics",
        action="store_true",
        help="Append search counters to failure messages",
    )
    parser.add_argument(
        "--cp-sat",
        action="store_true",
        help="Retry with a CP-SAT model when a search budget runs out",
    )
    parser.add_argument(
        "--cp-sat-seconds",
        type=float,
        default=DEFAULT_CP_SAT_SECONDS,
        help="CP-SAT time limit in seconds",
    )
    parser.add_argument(
        "--check-integrity",
        action="store_true",
        help="Audit the key's stored \"grid\" against its answers instead of solving",
    )
    parser.add_argument("--pretty", action="store_true", help="Print a rendered grid to stderr")
    parser.add_argument("--output", type=Path, help="Optional path to JSON output")
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    level = getattr(logging, args.log_level.upper(), logging.INFO)
    configure_logging(level)

    try:
        payload = load_answer_key_payload(args.answers)
        if args.check_integrity:
            report = check_grid_integrity(_grid_from_payload(payload), payload, encoded=args.rot13)
            _emit(args, report.to_jsonable())
            return 0 if report.is_valid else 1
        data = answer_key_from_dict(payload, encoded=args.rot13)
    except (InputError, TemplateGridError) as exc:
        parser.error(str(exc))
    except OSError as exc:
        parser.error(f"Cannot read answer key: {exc}")
    if args.width is not None:
        data.width = args.width
    if args.height is not None:
        data.height = args.height

    store_dir = args.template_dir or DEFAULT_STORE_DIR
    templates: List[TemplateGrid] = []
    if args.templates:
        try:
            templates.extend(load_template_file(args.templates))
        except OSError as exc:
            parser.error(f"Cannot read template file: {exc}")
    if args.template_dir:
        templates.extend(GridStore(store_dir).load_templates(width=data.width, height=data.height))

    options = GridConstructorOptions(
        max_states=args.max_states,
        max_millis=args.max_millis,
        template_grids=templates,
        include_diagnostics_in_message=args.diagnostics,
        cp_sat_fallback=args.cp_sat,
        cp_sat_seconds=args.cp_sat_seconds,
    )

    try:
        result = GridConstructor(options).construct(data)
    except InputError as exc:
        parser.error(str(exc))

    if result.success and args.save:
        GridStore(store_dir).save_success(result, data)
    if args.pretty:
        print_result(result, stream=sys.stderr)

    _emit(args, result.to_jsonable())
    return 0 if result.success else 1


def _grid_from_payload(payload: Dict[str, Any]) -> CellGrid:
    grid_text = payload.get("grid")
    if not grid_text:
        raise InputError("Integrity check needs a \"grid\" string in the answer key")
    return parse_template_grid(str(grid_text))


def _emit(args: argparse.Namespace, payload: Dict[str, Any]) -> None:
    output_text = json.dumps(payload, ensure_ascii=False, indent=2)
    if args.output:
        args.output.write_text(output_text, encoding="utf-8")
    else:
        print(output_text)


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
