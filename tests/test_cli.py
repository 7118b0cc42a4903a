"""
Tests for CLI entry points.

These tests focus on:
- parse command writing routines.json from a cached page
- query commands (programs/show/lookup) on a temporary routines.json
- safe behavior when no data has been parsed yet
"""

import io
import json
import tempfile
import unittest
from contextlib import redirect_stdout
from pathlib import Path
from unittest import mock

from rich.console import Console

from uniroutine.cli import main

PAGE = (
    "<html><body>"
    '<table id="HdtableRtn"><tr><td>Routine</td><td>Program: BSCSE</td>'
    "<td>Intake: 45 - A</td><td>Semester: Spring2024</td></tr></table>"
    '<table id="tableRtn"><tr><th>Day/Time</th><th>8:30-10:00</th><th>10:00-11:30</th></tr>'
    "<tr><th>SAT</th><td>CS101FC: RahimB:Main⇒Room:301</td><td></td></tr></table>"
    '<table class="tb"><tr><th>Code</th><th>Title</th><th>FC</th><th>Name</th></tr>'
    "<tr><td>CS101</td><td>Intro to CS</td><td>Rahim</td><td>Dr. Rahim Uddin</td></tr></table>"
    "</body></html>"
)


def _run(argv: list) -> tuple:
    """Run main() and return (exit code, captured output)."""
    buf = io.StringIO()
    console = Console(file=buf, width=200)
    with redirect_stdout(buf), mock.patch("uniroutine.cli.console", console):
        try:
            main(argv)
        except SystemExit as exc:
            return exc.code, buf.getvalue()
    return None, buf.getvalue()


class TestCLI(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.dir = Path(self._tmp.name)
        self.raw = self.dir / "routine.php.html"
        self.out = self.dir / "routines.json"
        self.raw.write_text(PAGE, encoding="utf-8")

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _parse(self) -> None:
        code, _ = _run(["parse", "--raw", str(self.raw), "--out", str(self.out)])
        self.assertEqual(code, 0)

    def test_parse_writes_output(self) -> None:
        code, output = _run(["parse", "--raw", str(self.raw), "--out", str(self.out)])

        self.assertEqual(code, 0)
        self.assertIn("Parsed 1 routines", output)
        data = json.loads(self.out.read_text(encoding="utf-8"))
        self.assertEqual(data["programs"], {"BSCSE": {"45": ["A"]}})

    def test_parse_no_index(self) -> None:
        code, _ = _run(["parse", "--raw", str(self.raw), "--out", str(self.out), "--no-index"])

        self.assertEqual(code, 0)
        data = json.loads(self.out.read_text(encoding="utf-8"))
        self.assertNotIn("programs", data)
        self.assertNotIn("updated", data)

    def test_refresh_fetches_then_parses(self) -> None:
        def fake_save(url, path, timeout=30):
            Path(path).write_text(PAGE, encoding="utf-8")
            return PAGE

        with mock.patch("uniroutine.cli.save_document", side_effect=fake_save) as save:
            code, output = _run(["refresh", "--raw", str(self.raw), "--out", str(self.out)])

        self.assertEqual(code, 0)
        save.assert_called_once()
        self.assertIn("Parsed 1 routines", output)
        self.assertTrue(self.out.exists())

    def test_query_without_data(self) -> None:
        for argv in (["programs"], ["show", "BSCSE", "45", "A"], ["lookup", "CS101"]):
            code, output = _run(argv + ["--out", str(self.dir / "missing.json")])
            self.assertEqual(code, 1)
            self.assertIn("No routine data", output)

    def test_programs(self) -> None:
        self._parse()
        code, output = _run(["programs", "--out", str(self.out)])

        self.assertEqual(code, 0)
        self.assertIn("BSCSE", output)
        self.assertIn("45", output)

    def test_show(self) -> None:
        self._parse()
        code, output = _run(["show", "bscse", "45", "a", "--out", str(self.out)])

        self.assertEqual(code, 0)
        self.assertIn("8:30-10:00", output)
        self.assertIn("CS101 | Intro to CS | Rahim | Dr. Rahim Uddin", output)

    def test_show_unknown_section(self) -> None:
        self._parse()
        code, output = _run(["show", "BSCSE", "45", "Z", "--out", str(self.out)])

        self.assertEqual(code, 1)
        self.assertIn("No routine for", output)

    def test_lookup(self) -> None:
        self._parse()
        code, output = _run(["lookup", "CS101", "--out", str(self.out)])
        self.assertEqual(code, 0)
        self.assertIn("Intro to CS", output)

        code, output = _run(["lookup", "Rahim", "--out", str(self.out)])
        self.assertEqual(code, 0)
        self.assertIn("Dr. Rahim Uddin", output)

        code, output = _run(["lookup", "NOPE", "--out", str(self.out)])
        self.assertEqual(code, 1)
        self.assertIn("Unknown code", output)


if __name__ == "__main__":
    unittest.main()
