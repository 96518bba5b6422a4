"""horarios-ops command line: audit, migrate and suggest over a JSON export."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from .audit import audit_export, migrate_export, weekly_suggestions
from .config import load_env, runtime_config
from .storage import load_export, save_export, save_report

logger = logging.getLogger(__name__)


def _print_json(payload: Any) -> None:
    json.dump(payload, sys.stdout, indent=2, ensure_ascii=False)
    sys.stdout.write("\n")


def _cmd_audit(args: argparse.Namespace) -> int:
    config = runtime_config()
    report = audit_export(load_export(args.export), config.hours)
    path = save_report(config.artifact_root, "audit", report)
    logger.info("Audit report written to %s", path)
    if args.xlsx:
        from .xlsx import render_audit_xlsx

        render_audit_xlsx(report, Path(args.xlsx))
        logger.info("Audit workbook written to %s", args.xlsx)
    _print_json({"counts": report["counts"], "report": str(path)})
    return 1 if report["findings"] else 0


def _cmd_migrate(args: argparse.Namespace) -> int:
    export = load_export(args.export)
    migrated, summary = migrate_export(export)
    if args.apply:
        save_export(args.out, migrated)
        logger.info("Migrated export written to %s", args.out)
    else:
        logger.info("Dry run, nothing written (use --apply)")
    _print_json({**summary, "applied": bool(args.apply)})
    return 1 if summary["errors"] else 0


def _cmd_suggest(args: argparse.Namespace) -> int:
    config = runtime_config()
    rows = weekly_suggestions(load_export(args.export), args.employee, config.patterns)
    _print_json(rows)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Audit and maintain schedule exports")
    parser.add_argument("--env-file", default=None, help="Path to .env file")
    sub = parser.add_subparsers(dest="command", required=True)

    audit = sub.add_parser("audit", help="List incomplete and invalid cells")
    audit.add_argument("export", help="Path to the JSON export")
    audit.add_argument("--xlsx", default=None, help="Also write the findings workbook here")
    audit.set_defaults(handler=_cmd_audit)

    migrate = sub.add_parser("migrate", help="Normalize legacy cells and hydrate placeholders")
    migrate.add_argument("export", help="Path to the JSON export")
    migrate.add_argument("--out", required=True, help="Where to write the migrated export")
    migrate.add_argument("--apply", action="store_true", help="Write changes (default: dry run)")
    migrate.set_defaults(handler=_cmd_migrate)

    suggest = sub.add_parser("suggest", help="Weekly suggestions for one employee")
    suggest.add_argument("export", help="Path to the JSON export")
    suggest.add_argument("--employee", required=True, help="Employee id")
    suggest.set_defaults(handler=_cmd_suggest)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    load_env(args.env_file)
    logging.basicConfig(
        level=runtime_config().log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return args.handler(args)


if __name__ == "__main__":
    sys.exit(main())
