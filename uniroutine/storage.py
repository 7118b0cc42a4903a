"""
Reading and writing routine files.

- data/raw/routine.php.html       : cached page, always UTF-8
- data/processed/routines.json    : parsed output

Read/write errors of the raw page and the output propagate to the caller.
Only load_routine_document() is defensive, because the CLI query commands
should still run (and say "no data") before the first parse.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from uniroutine.model import OutputDocument

SOURCE_ENCODING = "utf-8"


def serialize(document: OutputDocument, include_index: bool = True) -> str:
    """
    Turn an OutputDocument into indented JSON text.
    """
    return json.dumps(document.to_dict(include_index=include_index), indent=2, ensure_ascii=False) + "\n"


def write_artifact(path: str | Path, text: str) -> None:
    """
    Write text to path, creating parent directories if needed.
    """
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(text, encoding="utf-8")


def read_document(path: str | Path) -> str:
    """
    Read the cached routine page with an explicit encoding.
    """
    return Path(path).read_text(encoding=SOURCE_ENCODING)


def load_routine_document(path: str | Path) -> dict[str, Any]:
    """
    Load a previously written routines.json.

    Returns an empty dict if the file does not exist or is invalid.
    """
    p = Path(path)
    if not p.exists():
        return {}

    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError, UnicodeDecodeError):
        return {}

    return data if isinstance(data, dict) else {}
