"""
Cell text grammar.

Grid cells on the routine page encode one class as a single string:

    CS101FC: RahimB:Main⇒Room:301
    ^^^^^    ^^^^^  ^^^^ ^^^^^^^^
    course   faculty bld  room part

Info cells look like "Program: BSCSE", legend rows are plain text cells.
"""

from __future__ import annotations

import re
from typing import List, Tuple

from uniroutine.model import CellParse, ClassSlot, Intake

FACULTY_MARKER = "FC:"
BUILDING_MARKER = "B:"
# U+21D2 RIGHTWARDS DOUBLE ARROW
ROOM_SEPARATOR = "⇒"

_WHITESPACE = re.compile(r"\s+")


def sanitize_text(text: str) -> str:
    """
    Collapse all whitespace runs to a single space and trim the ends.
    """
    return _WHITESPACE.sub(" ", text or "").strip()


def _after_colon(text: str) -> str:
    # no colon -> whole text
    return text[text.find(":") + 1 :].strip()


def labeled_value(text: str) -> str:
    """
    Return the value of a "<label>: <value>" field (text after the first ':').
    """
    return _after_colon((text or "").strip())


def split_intake_section(value: str) -> Tuple[Intake, str]:
    """
    Split "45 - A" into (45, "A").

    Intake becomes an int when it is all decimal digits, otherwise the trimmed text.
    A value without '-' has an empty section.
    """
    parts = value.split("-")
    intake_text = parts[0].strip()
    section = sanitize_text(parts[1]) if len(parts) > 1 else ""
    intake: Intake = int(intake_text) if intake_text.isdecimal() else intake_text
    return intake, section


def parse_class_cell(text: str) -> CellParse:
    """
    Decode one grid cell into a ClassSlot.

    Each marker is searched only after the previous one, so a course code
    that happens to contain "B:" cannot shift the building boundary.
    """
    raw = (text or "").strip()
    if not raw:
        return CellParse(status="empty")

    missing: List[str] = []

    fc_index = raw.find(FACULTY_MARKER)
    if fc_index == -1:
        missing.append(FACULTY_MARKER)
        rest = raw
    else:
        course_code = raw[:fc_index].strip()
        rest = raw[fc_index + len(FACULTY_MARKER) :]

    b_index = rest.find(BUILDING_MARKER)
    if b_index == -1:
        missing.append(BUILDING_MARKER)
        head, location = rest, ""
    else:
        head, location = rest[:b_index], rest[b_index:]

    if fc_index == -1 and b_index == -1:
        return CellParse(status="failed", missing=missing)

    if fc_index == -1:
        # without "FC:" everything before "B:" is taken as the course code
        course_code, faculty_code = head.strip(), ""
    else:
        faculty_code = head.strip()

    building = room = ""
    if location:
        if ROOM_SEPARATOR in location:
            # text after a second arrow is dropped
            parts = location.split(ROOM_SEPARATOR)
            building = _after_colon(parts[0])
            room = _after_colon(parts[1])
        else:
            missing.append(ROOM_SEPARATOR)
            building = _after_colon(location)

    slot = ClassSlot(
        course_code=course_code,
        faculty_code=faculty_code,
        building=building,
        room=room,
    )
    return CellParse(status="partial" if missing else "ok", slot=slot, missing=missing)


def pad_cells(texts: List[str], size: int) -> List[str]:
    """
    Pad (or cut) a list of cell texts to exactly `size` entries.
    """
    return (list(texts) + [""] * size)[:size]
