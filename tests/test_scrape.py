"""
Tests for downloading the routine page. Network access is mocked.
"""

import io
import tempfile
import unittest
from contextlib import redirect_stdout
from pathlib import Path
from unittest import mock

import requests

from uniroutine.scrape import ROUTINE_URL, fetch_document, main, save_document

HTML = "<table id='tableRtn'><tr><td>CS101FC: RahimB:Main⇒Room:301</td></tr></table>"


def _response(body: bytes) -> mock.MagicMock:
    resp = mock.MagicMock()
    resp.content = body
    # what requests guesses for text/html without a charset
    resp.encoding = "ISO-8859-1"
    return resp


class TestFetch(unittest.TestCase):
    @mock.patch("uniroutine.scrape.requests.get")
    def test_body_is_decoded_as_utf8(self, get: mock.MagicMock) -> None:
        get.return_value = _response(HTML.encode("utf-8"))

        text = fetch_document()

        self.assertEqual(text, HTML)
        self.assertIn("⇒", text)
        get.assert_called_once_with(ROUTINE_URL, timeout=30)

    @mock.patch("uniroutine.scrape.requests.get")
    def test_http_error_propagates(self, get: mock.MagicMock) -> None:
        resp = _response(b"")
        resp.raise_for_status.side_effect = requests.HTTPError("503 Server Error")
        get.return_value = resp

        with self.assertRaises(requests.HTTPError):
            fetch_document("https://example.org/routine.php", timeout=5)

    @mock.patch("uniroutine.scrape.requests.get")
    def test_save_document_caches_html(self, get: mock.MagicMock) -> None:
        get.return_value = _response(HTML.encode("utf-8"))

        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "raw" / "routine.php.html"
            text = save_document(path=p)

            self.assertEqual(text, HTML)
            self.assertEqual(p.read_text(encoding="utf-8"), HTML)

    @mock.patch("uniroutine.scrape.requests.get")
    def test_module_main(self, get: mock.MagicMock) -> None:
        get.return_value = _response(HTML.encode("utf-8"))

        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "routine.php.html"
            buf = io.StringIO()
            with redirect_stdout(buf):
                main(["--url", " https://example.org/routine.php ", "--raw", str(p), "--timeout", "5"])

            get.assert_called_once_with("https://example.org/routine.php", timeout=5.0)
            self.assertEqual(p.read_text(encoding="utf-8"), HTML)
            self.assertIn("Saved routine page", buf.getvalue())


if __name__ == "__main__":
    unittest.main()
