"""
Central data model definitions used across the project.

This module defines the canonical structure of the parsed routine data so that:
- parser, storage and CLI share the same field names
- the JSON output keeps the camelCase keys consumed by the routine website
- accumulated lookup maps are passed around explicitly (no module globals)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple, Union

Intake = Union[int, str]


@dataclass
class ClassSlot:
    """
    One scheduled class occupying a single (day, period) cell.
    """

    course_code: str
    faculty_code: str
    building: str
    room: str

    def to_dict(self) -> Dict[str, str]:
        return {
            "courseCode": self.course_code,
            "facultyCode": self.faculty_code,
            "building": self.building,
            "room": self.room,
        }


@dataclass
class CellParse:
    """
    Tagged result of decoding one grid cell.

    status is one of:
    - "empty"   : no class in this cell
    - "ok"      : all markers found
    - "partial" : some markers missing, missing fields are ""
    - "failed"  : no marker found at all
    """

    status: str
    slot: Optional[ClassSlot] = None
    missing: List[str] = field(default_factory=list)


@dataclass
class ScheduleInstance:
    """
    One section's weekly timetable (rows = days, columns = periods).
    """

    program: str = ""
    intake: Intake = ""
    section: str = ""
    semester: str = ""
    periods: List[str] = field(default_factory=list)
    grid: List[List[Optional[ClassSlot]]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "program": self.program,
            "intake": self.intake,
            "section": self.section,
            "semester": self.semester,
            "periods": list(self.periods),
            "classes": [
                [slot.to_dict() if slot is not None else None for slot in row]
                for row in self.grid
            ],
        }


@dataclass
class RoutineAccumulator:
    """
    State folded across all schedule instances of one document.

    One accumulator belongs to exactly one pipeline run.
    """

    course_titles: Dict[str, str] = field(default_factory=dict)
    faculty_names: Dict[str, str] = field(default_factory=dict)
    programs: Dict[str, Dict[Intake, List[str]]] = field(default_factory=dict)
    routines: List[ScheduleInstance] = field(default_factory=list)

    def add_legend_entry(self, course_code: str, course_title: str, faculty_code: str, faculty_name: str) -> None:
        # last write wins
        self.course_titles[course_code] = course_title
        self.faculty_names[faculty_code] = faculty_name

    def add_routine(self, routine: ScheduleInstance) -> None:
        self.routines.append(routine)


@dataclass
class OutputDocument:
    """
    Root artifact written to routines.json.
    """

    updated: datetime
    programs: Dict[str, Dict[Intake, List[str]]]
    course_titles: Dict[str, str]
    faculty_names: Dict[str, str]
    routines: List[ScheduleInstance]

    def to_dict(self, include_index: bool = True) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        if include_index:
            data["updated"] = self.updated.isoformat()
            data["programs"] = {
                program: {str(intake): list(sections) for intake, sections in _index_key_order(intakes)}
                for program, intakes in _index_key_order(self.programs)
            }
        data["courseCodeToTitleMap"] = dict(_index_key_order(self.course_titles))
        data["facultyIdToNameMap"] = dict(_index_key_order(self.faculty_names))
        data["routines"] = [r.to_dict() for r in self.routines]
        return data


def _array_index(key: Any) -> Optional[int]:
    text = str(key)
    if not (text.isascii() and text.isdecimal()) or (len(text) > 1 and text[0] == "0"):
        return None
    value = int(text)
    return value if value < 2**32 - 1 else None


def _index_key_order(mapping: Dict[Any, Any]) -> List[Tuple[Any, Any]]:
    """
    Items in the key order the routine website's JSON has always had:
    integer-like keys ascending first, all other keys in insertion order.
    """

    def key(item: Tuple[Any, Any]) -> Tuple[int, int]:
        index = _array_index(item[0])
        return (0, index) if index is not None else (1, 0)

    return sorted(mapping.items(), key=key)
