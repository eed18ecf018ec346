"""
Score provider results from a JSON file and print the fused result.

Input: {"providers": [{"provider": "...", "status": "success", "data": {...}}, ...]}
or a bare list of provider results.

Usage:
  python -m backend_iocfusion.cli results.json
  python -m backend_iocfusion.cli results.json --record --ioc-type domain --ioc-value evil.example --owner-id alice
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from sqlalchemy.exc import SQLAlchemyError

from backend_iocfusion.config import load_scoring_tables
from backend_iocfusion.core.exceptions import ScoringTablesError
from backend_iocfusion.fusion_logging import get_logger
from backend_iocfusion.history import IocType, OwnerContext, init_db
from backend_iocfusion.scoring import compute_score
from backend_iocfusion.service import score_ioc

logger = get_logger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="backend_iocfusion.cli",
        description="Fuse threat-intelligence provider verdicts into one score and verdict.",
    )
    parser.add_argument("input", type=Path, help="JSON file with provider execution results ('-' for stdin)")
    parser.add_argument("--tables", type=Path, default=None, help="Scoring tables JSON (default: configured tables)")
    parser.add_argument("--record", action="store_true", help="Append the verdict to ioc_history")
    parser.add_argument("--ioc-type", choices=[t.value for t in IocType], help="Indicator type (with --record)")
    parser.add_argument("--ioc-value", help="Indicator value (with --record)")
    parser.add_argument("--owner-type", default="anonymous")
    parser.add_argument("--owner-id", default="anonymous")
    parser.add_argument("--indent", type=int, default=2)
    return parser


def _read_input(path: Path) -> dict:
    if str(path) == "-":
        raw = json.load(sys.stdin)
    else:
        with open(path, encoding="utf-8") as f:
            raw = json.load(f)
    if isinstance(raw, list):
        return {"providers": raw}
    if not isinstance(raw, dict):
        raise ValueError("input must be a JSON object or array")
    return raw


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.record and not (args.ioc_type and args.ioc_value):
        parser.error("--record requires --ioc-type and --ioc-value")

    try:
        payload = _read_input(args.input)
    except (OSError, ValueError) as e:
        logger.error("cli_input_unreadable", path=str(args.input), error=str(e))
        print(f"error: cannot read {args.input}: {e}", file=sys.stderr)
        return 1

    try:
        tables = load_scoring_tables(args.tables) if args.tables else None
    except ScoringTablesError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    if args.record:
        try:
            init_db()
        except SQLAlchemyError as e:
            print(f"error: cannot open ioc_history: {e}", file=sys.stderr)
            return 1
        outcome = score_ioc(
            payload,
            owner=OwnerContext(type=args.owner_type, id=args.owner_id),
            ioc_type=args.ioc_type,
            ioc_value=args.ioc_value,
            tables=tables,
        )
        out = outcome.to_dict()
    else:
        out = compute_score(payload, tables=tables).to_dict()

    print(json.dumps(out, indent=args.indent))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
