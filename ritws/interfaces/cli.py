"""
interfaces/cli.py
──────────────────────────────────────────────────────────────────────────────
Command-line interface for the RIT webservices client.

Usage:
  # Category with inherited attribute codes
  python -m ritws.interfaces.cli category C040

  # Leaf categories, English metadata, JSON output
  python -m ritws.interfaces.cli --lang en-GB --json leaves

  # One object by RIT id
  python -m ritws.interfaces.cli object 486762

  # Via installed entry-point (pyproject.toml [project.scripts])
  rit-ws languages

Credentials and endpoint come from RIT_* environment variables (see
config/settings.py).

Exit codes:
  0 — success
  1 — fatal error (configuration, certificate, webservice, …)
  2 — argument error
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any

from pydantic import BaseModel

from ritws.config.settings import get_settings
from ritws.domain.exceptions import RITError
from ritws.services.container import get_catalog, get_client

logger = logging.getLogger(__name__)


# ── Argument parser ────────────────────────────────────────────────────────

def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="rit-ws",
        description="Query the RIT tourism-data webservices.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    p.add_argument(
        "--lang", "-l",
        metavar="CODE",
        default=None,
        help="Language code, e.g. pl-PL or en-GB. (default: RIT_LANGUAGE)",
    )
    p.add_argument(
        "--json",
        action="store_true",
        dest="json_output",
        help="Output results as JSON.",
    )
    p.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging.",
    )

    sub = p.add_subparsers(dest="command", metavar="COMMAND")
    sub.add_parser("metadata", help="Metadata summary and last modification date.")
    sub.add_parser("categories", help="List all categories.")
    cat = sub.add_parser("category", help="Resolve one category.")
    cat.add_argument("code")
    cat.add_argument(
        "--no-inherit",
        action="store_false",
        dest="inherit",
        help="Do not merge ancestor attribute codes.",
    )
    sub.add_parser("leaves", help="List childless (leaf) category codes.")
    attr = sub.add_parser("attribute", help="Show one attribute definition.")
    attr.add_argument("code")
    dic = sub.add_parser("dictionary", help="Show one dictionary.")
    dic.add_argument("code")
    sub.add_parser("languages", help="List language codes known to RIT.")
    obj = sub.add_parser("object", help="Fetch one object by RIT id.")
    obj.add_argument("object_id")
    ev = sub.add_parser("events", help="Events between two dates (YYYY-MM-DD).")
    ev.add_argument("date_from")
    ev.add_argument("date_to")
    rep = sub.add_parser("report", help="Import report for a transaction id.")
    rep.add_argument("transaction_id")
    return p


# ── Formatting helpers ─────────────────────────────────────────────────────

def _to_jsonable(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, (list, tuple)):
        return [_to_jsonable(v) for v in value]
    if isinstance(value, set):
        return sorted(value)
    return value


def _print(value: Any, json_output: bool) -> None:
    """Print a result either as JSON or as readable text."""
    if json_output:
        print(json.dumps(_to_jsonable(value), indent=2, ensure_ascii=False, default=str))
        return
    if value is None:
        print("(not found)")
    elif isinstance(value, (set, list, tuple)):
        for item in sorted(value) if isinstance(value, set) else value:
            print(f"  {_line(item)}")
    else:
        print(_line(value))


def _line(item: Any) -> str:
    if isinstance(item, BaseModel):
        data = item.model_dump(exclude_none=True)
        code = data.pop("code", "")
        name = data.pop("name", "")
        rest = "  ".join(f"{k}={v}" for k, v in data.items() if v not in ((), []))
        return f"[{code}] {name}  {rest}".rstrip()
    return str(item)


# ── Main logic ─────────────────────────────────────────────────────────────

def run(args: argparse.Namespace) -> int:
    """Execute the selected command.

    Returns:
        Exit code (0 = success, 1 = error).
    """
    try:
        language = args.lang or get_settings().language
        client = get_client()
        catalog = get_catalog()
        command = args.command
        if command == "metadata":
            snap = catalog.snapshot(language)
            result: Any = {
                "language": snap.language,
                "last_modification_date": snap.last_modification_date,
                "categories": len(snap.categories),
                "attributes": len(snap.attributes),
                "dictionaries": len(snap.dictionaries),
            }
        elif command == "categories":
            result = catalog.get_categories(language)
        elif command == "category":
            result = catalog.get_category(args.code, language, inherit_attributes=args.inherit)
        elif command == "leaves":
            result = catalog.get_childless_categories(language)
        elif command == "attribute":
            result = catalog.get_attribute(args.code, language)
        elif command == "dictionary":
            result = catalog.get_dictionary(args.code, language)
        elif command == "languages":
            result = catalog.get_languages(language)
        elif command == "object":
            result = client.get_object_by_id(args.object_id, language)
        elif command == "events":
            result = client.get_events(args.date_from, args.date_to)
        elif command == "report":
            result = client.get_report(args.transaction_id)
        else:
            print(f"ERROR: unknown command {command!r}", file=sys.stderr)
            return 2
    except RITError as exc:
        logger.exception("Command %s failed", args.command)
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    _print(result, args.json_output)
    return 0


def main() -> None:
    """Entry point for the rit-ws console script."""
    parser = _build_parser()
    args = parser.parse_args()

    log_level = logging.DEBUG if args.verbose else logging.WARNING
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    )

    if not args.command:
        parser.print_help()
        sys.exit(2)

    sys.exit(run(args))


if __name__ == "__main__":
    main()
