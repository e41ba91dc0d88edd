# service/cli.py
"""
User-facing command-line entrypoints.

Subcommands
-----------
scrape [--companies PATH] [--output PATH] [--no-filter] [--headed] [--static] [--kwargs k=v ...]
    - Runs the scrape -> classify -> filter pipeline once
    - Writes the result file and prints per-source results + filter statistics

validate-config [--companies PATH]
    - Loads the companies file and lists the usable sources; nonzero on error

list-sources [--companies PATH]
    - Prints every configured source and whether it is excluded
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
import time
import uuid
from collections.abc import Iterable
from datetime import datetime
from typing import Any

from modules.career_scan import main as _career_scan
from modules.career_scan.lib import config as _config
from service import logging_utils as L

LOG = logging.getLogger("service.cli")


# ----------------------------- Logging setup ---------------------------------
def _ensure_logging() -> None:
    """Initialize a reasonable logging setup if none exists yet."""
    root = logging.getLogger()
    if not root.handlers:
        level = os.getenv("LOG_LEVEL", "INFO").upper()
        logging.basicConfig(
            level=getattr(logging, level, logging.INFO),
            format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        )


# -------------------------- Utility / glue code ------------------------------
def _parse_kv_pairs(pairs: Iterable[str]) -> dict[str, Any]:
    """
    Parse key=value strings into a dict.
    - Values that look like JSON (true/false/null/number/object/array) are parsed.
    - Otherwise keep as raw strings.
    """
    out: dict[str, Any] = {}
    for raw in pairs:
        if "=" not in raw:
            raise argparse.ArgumentTypeError(f"--kwargs item must be key=value (got {raw!r})")
        k, v = raw.split("=", 1)
        k = k.strip()
        v = v.strip()
        if not k:
            raise argparse.ArgumentTypeError(f"Invalid key in --kwargs item {raw!r}")
        try:
            out[k] = json.loads(v)
        except json.JSONDecodeError:
            out[k] = v
    return out


def _print_table(rows: Iterable[tuple[str, ...]], headers: tuple[str, ...]) -> None:
    """Very simple fixed-width table printer."""
    rows = [tuple(str(c) for c in r) for r in rows]
    widths = [max([len(h)] + [len(r[i]) for r in rows]) for i, h in enumerate(headers)]
    sep = "+" + "+".join("-" * (w + 2) for w in widths) + "+"
    print(sep)
    print("| " + " | ".join(h.ljust(w) for h, w in zip(headers, widths)) + " |")
    print(sep)
    for r in rows:
        print("| " + " | ".join(c.ljust(w) for c, w in zip(r, widths)) + " |")
    print(sep)


def _now_iso() -> str:
    return datetime.now().astimezone().isoformat()


def _companies_path(args: argparse.Namespace) -> str:
    return (
        args.companies
        or os.getenv("CAREER_SCAN_COMPANIES")
        or _config.Settings.companies_path
    )


# ------------------------------ Subcommands ----------------------------------
def cmd_scrape(args: argparse.Namespace) -> int:
    run_id = uuid.uuid4().hex
    start_time = time.monotonic()

    kwargs = _parse_kv_pairs(args.kwargs or [])
    if args.companies:
        kwargs["companies_path"] = args.companies
    if args.output:
        kwargs["output_path"] = args.output
    if args.no_filter:
        kwargs["apply_filters"] = False
    if args.headed:
        kwargs["headless"] = False
    if args.static:
        kwargs["render_js"] = False
    LOG.debug("scrape with kwargs=%s", kwargs)

    try:
        msg, meta = _career_scan.run(**kwargs)
    except KeyboardInterrupt:
        return 130
    except _config.ConfigError as e:
        print(f"ERROR: configuration invalid: {e}", file=sys.stderr)
        L.write_error_log({
            "ts": _now_iso(),
            "where": "cli.scrape",
            "run_id": run_id,
            "error": repr(e),
        })
        return 2
    except Exception as e:
        LOG.exception("Scrape failed: %s", e)
        print(f"FAILURE: {e}", file=sys.stderr)
        L.write_error_log({
            "ts": _now_iso(),
            "where": "cli.scrape",
            "run_id": run_id,
            "kwargs": kwargs,
            "error": repr(e),
            "duration_ms": int((time.monotonic() - start_time) * 1000),
        })
        return 1

    L.write_activity_log({
        "ts": _now_iso(),
        "event": "cli_scrape",
        "run_id": run_id,
        "kwargs": kwargs,
        "output_path": meta["output_path"],
        "duration_ms": int((time.monotonic() - start_time) * 1000),
    })

    rows = [
        (r["company"], "ok" if r["success"] else "FAILED", str(r["found"]), r["error"] or "")
        for r in meta["results"]
    ]
    _print_table(rows, headers=("COMPANY", "STATUS", "FOUND", "ERROR"))

    stats = meta["stats"]
    if stats:
        print("\nFilter statistics:")
        print(f"  scraped:             {stats['totalOriginal']}")
        print(f"  location match:      {stats['byLocation']}")
        print(f"  junior match:        {stats['byLevel']}")
        print(f"  experience match:    {stats['byExperience']}")
        print(f"  kept after filters:  {stats['totalFiltered']} (removed {stats['removed']})")

    print(f"\nSUCCESS: {msg}")
    print(f"Results written to {meta['output_path']}")
    return 0


def cmd_validate_config(args: argparse.Namespace) -> int:
    path = _companies_path(args)
    try:
        sources = _config.load_sources(path)
    except _config.ConfigError as e:
        print(f"ERROR: configuration invalid: {e}", file=sys.stderr)
        return 1
    print(f"OK: {len(sources)} usable source(s) in {path}.")
    for s in sources:
        print(f"  - {s.name}: {s.url}")
    return 0


def cmd_list_sources(args: argparse.Namespace) -> int:
    path = _companies_path(args)
    try:
        data = _config.load_companies_file(path)
        sources = _config.parse_sources(data.get("companies"))
    except _config.ConfigError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
    if not sources:
        print(f"No companies found in {path}.")
        return 0
    _print_table(
        ((s.name, s.url or "-", s.exclusion_reason or "active") for s in sources),
        headers=("COMPANY", "URL", "STATUS"),
    )
    return 0


# ------------------------------- Argparse ------------------------------------
def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="python -m service.cli",
        description="Career page scraper command-line tools",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    # scrape
    sp = sub.add_parser("scrape", help="Scrape all configured companies and write the result file.")
    sp.add_argument("--companies", help="Companies file (fallbacks to CAREER_SCAN_COMPANIES or default).")
    sp.add_argument("--output", help="Result file path (fallbacks to CAREER_SCAN_OUTPUT or default).")
    sp.add_argument("--no-filter", action="store_true", help="Keep every scraped posting (skip filters).")
    sp.add_argument("--headed", action="store_true", help="Show the browser window.")
    sp.add_argument("--static", action="store_true", help="Fetch pages over plain HTTP (no JavaScript).")
    sp.add_argument(
        "--kwargs",
        metavar="k=v",
        nargs="*",
        help="Extra settings (JSON values supported), e.g. source_delay=5.",
    )
    sp.set_defaults(func=cmd_scrape)

    # validate-config
    sp = sub.add_parser("validate-config", help="Verify the companies file.")
    sp.add_argument("--companies", help="Companies file to check.")
    sp.set_defaults(func=cmd_validate_config)

    # list-sources
    sp = sub.add_parser("list-sources", help="Print configured companies and their status.")
    sp.add_argument("--companies", help="Companies file to read.")
    sp.set_defaults(func=cmd_list_sources)

    return p


# --------------------------------- Main --------------------------------------
def main(argv: Iterable[str] | None = None) -> int:
    _ensure_logging()
    parser = _build_parser()
    args = parser.parse_args(args=list(argv) if argv is not None else None)
    return args.func(args)


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
