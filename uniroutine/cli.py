"""
CLI (Command Line Interface).

    uniroutine fetch                       download the routine page
    uniroutine parse                       cached HTML -> routines.json
    uniroutine refresh                     fetch + parse
    uniroutine programs                    list program -> intake -> sections
    uniroutine show <program> <intake> <section>
    uniroutine lookup <code>               course title / faculty name

Query commands read routines.json and never crash if it is missing.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Any

from rich import box
from rich.console import Console
from rich.table import Table

from uniroutine.parse import OUT_PATH, parse_file
from uniroutine.scrape import RAW_PATH, ROUTINE_URL, save_document
from uniroutine.storage import load_routine_document

console = Console()

# source order of the day rows
DAYS = ["SAT", "SUN", "MON", "TUE", "WED", "THU", "FRI"]


def _no_data(path: Path) -> int:
    print(f"No routine data at {path}. Run 'uniroutine refresh' first.")
    return 1


def _find_routine(data: dict[str, Any], program: str, intake: str, section: str) -> dict[str, Any] | None:
    """
    Find a routine by program, intake and section (case-insensitive).
    """
    want = (program.strip().lower(), intake.strip().lower(), section.strip().lower())
    for r in data.get("routines", []):
        have = (
            str(r.get("program", "")).strip().lower(),
            str(r.get("intake", "")).strip().lower(),
            str(r.get("section", "")).strip().lower(),
        )
        if have == want:
            return r
    return None


def _slot_text(slot: dict[str, Any] | None) -> str:
    if not slot:
        return ""
    room = " ".join(x for x in (slot.get("building", ""), slot.get("room", "")) if x)
    return "\n".join(x for x in (slot.get("courseCode", ""), slot.get("facultyCode", ""), room) if x)


def _cmd_fetch(args: argparse.Namespace) -> int:
    html = save_document(args.url, args.raw, timeout=args.timeout)
    print(f"Saved routine page to {args.raw} ({len(html):,} characters)")
    return 0


def _cmd_parse(args: argparse.Namespace) -> int:
    document = parse_file(args.raw, args.out, include_index=not args.no_index)
    print(f"Parsed {len(document.routines)} routines. JSON written to {args.out}")
    return 0


def _cmd_refresh(args: argparse.Namespace) -> int:
    code = _cmd_fetch(args)
    if code != 0:
        return code
    return _cmd_parse(args)


def _cmd_programs(args: argparse.Namespace) -> int:
    data = load_routine_document(args.out)
    programs = data.get("programs")
    if not data or not isinstance(programs, dict):
        return _no_data(args.out)

    table = Table(title="Programs", box=box.SIMPLE)
    table.add_column("Program")
    table.add_column("Intake")
    table.add_column("Sections")
    for program, intakes in programs.items():
        for intake, sections in intakes.items():
            table.add_row(str(program), str(intake), ", ".join(str(s) for s in sections))
    console.print(table)
    return 0


def _cmd_show(args: argparse.Namespace) -> int:
    data = load_routine_document(args.out)
    if not data:
        return _no_data(args.out)

    routine = _find_routine(data, args.program, args.intake, args.section)
    if routine is None:
        print(f"No routine for {args.program} intake {args.intake} section {args.section}.")
        return 1

    periods = routine.get("periods", [])
    classes = routine.get("classes", [])

    table = Table(
        title=f"{routine.get('program')} {routine.get('intake')}-{routine.get('section')} ({routine.get('semester')})",
        box=box.SIMPLE,
        show_lines=True,
    )
    table.add_column("Day")
    for period in periods:
        table.add_column(str(period))

    for i, row in enumerate(classes):
        day = DAYS[i] if len(classes) == len(DAYS) else str(i + 1)
        table.add_row(day, *[_slot_text(slot) for slot in row])
    console.print(table)

    # legend for the codes used in this routine
    titles = data.get("courseCodeToTitleMap", {})
    names = data.get("facultyIdToNameMap", {})
    used = sorted({(s.get("courseCode", ""), s.get("facultyCode", "")) for row in classes for s in row if s})
    for course_code, faculty_code in used:
        course_title = titles.get(course_code, "?")
        faculty_name = names.get(faculty_code, "?")
        print(f"{course_code} | {course_title} | {faculty_code} | {faculty_name}")
    return 0


def _cmd_lookup(args: argparse.Namespace) -> int:
    data = load_routine_document(args.out)
    if not data:
        return _no_data(args.out)

    code = (args.code or "").strip()
    if not code:
        print("Please provide a course or faculty code.")
        return 1

    found = False
    title = data.get("courseCodeToTitleMap", {}).get(code)
    if title is not None:
        print(f"Course  {code} | {title}")
        found = True
    name = data.get("facultyIdToNameMap", {}).get(code)
    if name is not None:
        print(f"Faculty {code} | {name}")
        found = True

    if not found:
        print(f"Unknown code: {code}")
        return 1
    return 0


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argparse CLI parser with sub-commands.
    """
    parser = argparse.ArgumentParser(prog="uniroutine", description="University routine scraper")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    def fetch_args(p: argparse.ArgumentParser) -> None:
        p.add_argument("--url", type=str, default=ROUTINE_URL, help="Routine page URL")
        p.add_argument("--timeout", type=float, default=30, help="Request timeout in seconds")

    def raw_arg(p: argparse.ArgumentParser) -> None:
        p.add_argument("--raw", type=Path, default=RAW_PATH, help="Cached routine HTML file")

    def out_arg(p: argparse.ArgumentParser) -> None:
        p.add_argument("--out", type=Path, default=OUT_PATH, help="routines.json path")

    p_fetch = sub.add_parser("fetch", help="Download the routine page")
    fetch_args(p_fetch)
    raw_arg(p_fetch)

    p_parse = sub.add_parser("parse", help="Parse cached HTML into routines.json")
    raw_arg(p_parse)
    out_arg(p_parse)
    p_parse.add_argument("--no-index", action="store_true", help="Omit 'updated' and 'programs'")

    p_refresh = sub.add_parser("refresh", help="Fetch and parse")
    fetch_args(p_refresh)
    raw_arg(p_refresh)
    out_arg(p_refresh)
    p_refresh.add_argument("--no-index", action="store_true", help="Omit 'updated' and 'programs'")

    p_programs = sub.add_parser("programs", help="List programs, intakes and sections")
    out_arg(p_programs)

    p_show = sub.add_parser("show", help="Show one section's weekly routine")
    p_show.add_argument("program", type=str, help="Program (e.g. BSCSE)")
    p_show.add_argument("intake", type=str, help="Intake (e.g. 45)")
    p_show.add_argument("section", type=str, help="Section (e.g. A)")
    out_arg(p_show)

    p_lookup = sub.add_parser("lookup", help="Look up a course or faculty code")
    p_lookup.add_argument("code", type=str, help="Course or faculty code")
    out_arg(p_lookup)

    return parser


def main(argv: list[str] | None = None) -> None:
    """
    CLI entry point. Parses args, dispatches to command handlers,
    and exits via SystemExit with a return code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command == "fetch":
        raise SystemExit(_cmd_fetch(args))
    if args.command == "parse":
        raise SystemExit(_cmd_parse(args))
    if args.command == "refresh":
        raise SystemExit(_cmd_refresh(args))
    if args.command == "programs":
        raise SystemExit(_cmd_programs(args))
    if args.command == "show":
        raise SystemExit(_cmd_show(args))
    if args.command == "lookup":
        raise SystemExit(_cmd_lookup(args))

    raise SystemExit(2)
