from __future__ import annotations

import argparse
import logging
from pathlib import Path

import requests

from uniroutine.storage import SOURCE_ENCODING, write_artifact

log = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Paths & URLs
# ---------------------------------------------------------------------------

PACKAGE_DIR = Path(__file__).resolve().parent
RAW_PATH = PACKAGE_DIR / "data" / "raw" / "routine.php.html"

ROUTINE_URL = "https://annex.bubt.edu.bd/global_file/routine.php"


# ---------------------------------------------------------------------------
# Core logic
# ---------------------------------------------------------------------------


def fetch_document(url: str = ROUTINE_URL, timeout: float = 30) -> str:
    """
    Download the routine page and return it as text.

    The body is decoded as UTF-8 explicitly: the server sends no charset,
    and requests would fall back to ISO-8859-1, which garbles the room
    separator arrow.
    """
    resp = requests.get(url, timeout=timeout)
    resp.raise_for_status()
    return resp.content.decode(SOURCE_ENCODING, errors="replace")


def save_document(url: str = ROUTINE_URL, path: Path = RAW_PATH, timeout: float = 30) -> str:
    """
    Fetch the routine page and cache it as HTML. Returns the page text.
    """
    log.info("Fetching %s", url)
    html = fetch_document(url, timeout=timeout)
    write_artifact(path, html)
    return html


# ---------------------------------------------------------------------------
# CLI entry
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="uniroutine.scrape", description="Download the routine page (cache HTML)")
    p.add_argument("--url", type=str, default=ROUTINE_URL, help="Routine page URL")
    p.add_argument("--raw", type=Path, default=RAW_PATH, help="Where to cache the HTML")
    p.add_argument("--timeout", type=float, default=30, help="Request timeout in seconds")
    return p


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    html = save_document(args.url.strip(), args.raw, timeout=args.timeout)
    print(f"Saved routine page to {args.raw} ({len(html):,} characters)")


if __name__ == "__main__":
    main()
