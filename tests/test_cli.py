"""Tests for the tunemap command line."""

import os
import sys
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from io import StringIO
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

import tunemap

FIXTURES = Path(__file__).parent / "fixtures"


def run(argv):
    out, err = StringIO(), StringIO()
    with redirect_stdout(out), redirect_stderr(err):
        code = tunemap.main(argv)
    return code, out.getvalue(), err.getvalue()


class TestQueries(unittest.TestCase):

    def test_query_default_accidental(self):
        code, out, _ = run([str(FIXTURES / "just_major.json"), "--query", "64", "18"])
        self.assertEqual(code, 0)
        self.assertIn("Tuning: 5-limit just major", out)
        self.assertIn("pitch=64 tpc=18 accidental=NONE -> -13.69 cents", out)

    def test_query_named_and_numeric_accidentals(self):
        code, out, _ = run([
            str(FIXTURES / "just_major.json"),
            "--query", "61", "21", "sharp",
            "--query", "64", "18", "2",
        ])
        self.assertEqual(code, 0)
        self.assertIn("pitch=61 tpc=21 accidental=SHARP -> -29.33 cents", out)
        self.assertIn("pitch=64 tpc=18 accidental=NATURAL -> -13.69 cents", out)

    def test_bad_query(self):
        with redirect_stderr(StringIO()):
            with self.assertRaises(SystemExit):
                tunemap.main([str(FIXTURES / "just_major.json"), "--query", "64"])
            with self.assertRaises(SystemExit):
                tunemap.main([str(FIXTURES / "just_major.json"), "--query", "64", "18", "WOBBLE"])
            with self.assertRaises(SystemExit):
                tunemap.main([str(FIXTURES / "just_major.json"), "--query", "64", "18", "999"])

    def test_table(self):
        code, out, _ = run([str(FIXTURES / "twelve_edo.json"), "--table"])
        self.assertEqual(code, 0)
        self.assertIn("MIDI", out)
        self.assertIn("C4", out)


class TestInvalidFile(unittest.TestCase):

    def test_invalid_exit_code(self):
        code, _, err = run([str(FIXTURES / "missing_none.json")])
        self.assertEqual(code, 1)
        self.assertIn("Invalid tuning file", err)

    def test_missing_file(self):
        code, _, err = run([str(FIXTURES / "nope.json")])
        self.assertEqual(code, 1)
        self.assertIn("not readable", err)


class TestExports(unittest.TestCase):

    def test_exports(self):
        with tempfile.TemporaryDirectory() as tmp:
            base = os.path.join(tmp, "just")
            code, out, _ = run([
                str(FIXTURES / "just_major.json"),
                "--output", base, "--export-tun", "--export-csd", "--export-xlsx",
            ])
            self.assertEqual(code, 0)
            for suffix in (".tun", ".csd", "_offsets.txt", "_offsets.xlsx"):
                self.assertTrue(os.path.exists(base + suffix), suffix)
        self.assertIn("Exported:", out)


if __name__ == "__main__":
    unittest.main()
