"""
Parsing (HTML -> structured JSON).

- Reads the cached routine page from data/raw/routine.php.html
- Locates the three table groups of every section:
  - table#HdtableRtn : program / intake - section / semester
  - table#tableRtn   : period headers + weekly class grid
  - table.tb         : legend (course titles, faculty names)
- Writes data/processed/routines.json

Important rules:
- The three groups are aligned by position, not by content
- A broken cell or row never aborts the run
"""

from __future__ import annotations

import argparse
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Tuple

from bs4 import BeautifulSoup, Tag

from uniroutine.cells import (
    labeled_value,
    pad_cells,
    parse_class_cell,
    sanitize_text,
    split_intake_section,
)
from uniroutine.model import (
    ClassSlot,
    OutputDocument,
    RoutineAccumulator,
    ScheduleInstance,
)
from uniroutine.storage import read_document, serialize, write_artifact

log = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------

PACKAGE_DIR = Path(__file__).resolve().parent
RAW_PATH = PACKAGE_DIR / "data" / "raw" / "routine.php.html"
OUT_PATH = PACKAGE_DIR / "data" / "processed" / "routines.json"

INFO_TABLE_SELECTOR = "table[id=HdtableRtn]"
GRID_TABLE_SELECTOR = "table[id=tableRtn]"
FOOTER_TABLE_SELECTOR = "table.tb"


# ---------------------------------------------------------------------------
# Table locator
# ---------------------------------------------------------------------------


def locate_tables(soup: BeautifulSoup) -> List[Tuple[Tag, Tag, Tag]]:
    """
    Return (info, grid, footer) table triples in document order.

    Surplus tables in a longer group are ignored.
    """
    info_tables = soup.select(INFO_TABLE_SELECTOR)
    grid_tables = soup.select(GRID_TABLE_SELECTOR)
    footer_tables = soup.select(FOOTER_TABLE_SELECTOR)

    sizes = (len(info_tables), len(grid_tables), len(footer_tables))
    if len(set(sizes)) > 1:
        log.debug("Table group sizes differ (info=%d, grid=%d, footer=%d)", *sizes)

    return list(zip(info_tables, grid_tables, footer_tables))


# ---------------------------------------------------------------------------
# Per-table parsing
# ---------------------------------------------------------------------------


def _cell_texts(row: Tag, names: str | list[str] = "td") -> List[str]:
    return [cell.get_text().strip() for cell in row.find_all(names)]


def parse_grid_table(table: Tag) -> Tuple[List[str], List[List[Optional[ClassSlot]]]]:
    """
    Parse the period header row and the day rows of one grid table.
    """
    rows = table.find_all("tr")
    if not rows:
        return [], []

    header, day_rows = rows[0], rows[1:]

    # first header cell is the day/period corner label
    periods = [sanitize_text(text) for text in _cell_texts(header, ["th", "td"])[1:]]

    grid: List[List[Optional[ClassSlot]]] = []
    for row_no, row in enumerate(day_rows):
        slots: List[Optional[ClassSlot]] = []
        for col_no, text in enumerate(_cell_texts(row)):
            cell = parse_class_cell(text)
            if cell.status in ("partial", "failed"):
                log.warning(
                    "Malformed class cell at row %d, column %d (%s, missing %s): %r",
                    row_no,
                    col_no,
                    cell.status,
                    ", ".join(cell.missing),
                    text,
                )
            slots.append(cell.slot)
        grid.append(slots)

    return periods, grid


def parse_legend_table(table: Tag, acc: RoutineAccumulator) -> int:
    """
    Add the course/faculty legend of one footer table to the accumulator.

    Returns the number of rows read.
    """
    count = 0
    # first row is the header
    for row in table.find_all("tr")[1:]:
        texts = _cell_texts(row)
        if not texts:
            continue
        course_code, course_title, faculty_code, faculty_name = pad_cells(texts, 4)
        acc.add_legend_entry(course_code, course_title, faculty_code, faculty_name)
        count += 1
    return count


def parse_info_table(table: Tag, routine: ScheduleInstance) -> None:
    """
    Fill program, intake, section and semester from one info table.
    """
    # [label, program, intake - section, semester, ...]
    _, program_text, intake_section_text, semester_text = pad_cells(_cell_texts(table), 4)

    routine.program = labeled_value(program_text)
    routine.intake, routine.section = split_intake_section(labeled_value(intake_section_text))
    routine.semester = labeled_value(semester_text)


# ---------------------------------------------------------------------------
# Schedule instance + program index
# ---------------------------------------------------------------------------


def add_routine_to_programs(routine: ScheduleInstance, acc: RoutineAccumulator) -> None:
    """
    Register the routine's section under program -> intake.

    Repeated sections are kept (this is a list, not a set).
    """
    intakes = acc.programs.get(routine.program)
    if intakes is None:
        acc.programs[routine.program] = {routine.intake: [routine.section]}
        return

    if routine.intake not in intakes:
        intakes[routine.intake] = [routine.section]
        return

    intakes[routine.intake].append(routine.section)


def parse_routine_tables(info: Tag, grid: Tag, footer: Tag, acc: RoutineAccumulator) -> ScheduleInstance:
    """
    Parse one aligned table triple into a ScheduleInstance.

    Legend entries and the program index are written to `acc`.
    """
    parse_legend_table(footer, acc)

    routine = ScheduleInstance()
    parse_info_table(info, routine)
    add_routine_to_programs(routine, acc)

    routine.periods, routine.grid = parse_grid_table(grid)
    return routine


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def parse_routine_html(html: str, updated: datetime | None = None) -> OutputDocument:
    """
    Parse a whole routine page and return the assembled OutputDocument.

    `updated` defaults to the current UTC time.
    """
    soup = BeautifulSoup(html, "html.parser")
    acc = RoutineAccumulator()

    for info, grid, footer in locate_tables(soup):
        acc.add_routine(parse_routine_tables(info, grid, footer, acc))

    return OutputDocument(
        updated=updated if updated is not None else datetime.now(timezone.utc),
        programs=acc.programs,
        course_titles=acc.course_titles,
        faculty_names=acc.faculty_names,
        routines=acc.routines,
    )


def parse_file(
    raw_path: Path = RAW_PATH,
    out_path: Path = OUT_PATH,
    include_index: bool = True,
) -> OutputDocument:
    """
    Parse the cached HTML file and write the JSON output.
    """
    document = parse_routine_html(read_document(raw_path))
    write_artifact(out_path, serialize(document, include_index=include_index))
    log.info("Parsed %d routines from %s", len(document.routines), raw_path)
    return document


# ---------------------------------------------------------------------------
# CLI connection
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="uniroutine.parse", description="Parse the cached routine page into JSON")
    p.add_argument("--raw", type=Path, default=RAW_PATH, help="Cached routine HTML file")
    p.add_argument("--out", type=Path, default=OUT_PATH, help="Output JSON file")
    p.add_argument("--no-index", action="store_true", help="Omit 'updated' and 'programs' from the output")
    return p


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    document = parse_file(args.raw, args.out, include_index=not args.no_index)
    print(f"Parsed {len(document.routines)} routines. JSON written to {args.out.resolve()}")


if __name__ == "__main__":
    main()
