"""Tests for .tun and .csd exports."""

import math
import sys
import tempfile
import unittest
from contextlib import redirect_stdout
from io import StringIO
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

import consts
import tun_csd
from tuning import load_tuning

FIXTURES = Path(__file__).parent / "fixtures"


class TestTunExport(unittest.TestCase):

    def test_twelve_edo_lines(self):
        config = load_tuning(str(FIXTURES / "twelve_edo.json"))
        lines = tun_csd.tun_lines(config)
        self.assertEqual(lines[0], "[Tuning]")
        self.assertEqual(len(lines), 129)
        for note in range(128):
            self.assertEqual(lines[note + 1], f"Note {note}={note * 100}")

    def test_just_major_lines(self):
        config = load_tuning(str(FIXTURES / "just_major.json"))
        lines = tun_csd.tun_lines(config)
        self.assertEqual(lines[61], "Note 60=6000")
        self.assertEqual(lines[65], "Note 64=6386.31")
        self.assertEqual(tun_csd.tun_lines(config, tun_integer=True)[65], "Note 64=6386")

    def test_exact_tuning_header(self):
        config = load_tuning(str(FIXTURES / "twelve_edo.json"))
        lines = tun_csd.tun_lines(config, diapason=415.0)
        self.assertEqual(lines[0], "[Exact Tuning]")
        self.assertTrue(lines[1].startswith("basefreq="))
        self.assertAlmostEqual(float(lines[1].split("=")[1]), consts.F_REF * 415.0 / 440.0)

    def test_write_file(self):
        config = load_tuning(str(FIXTURES / "twelve_edo.json"))
        with tempfile.TemporaryDirectory() as tmp:
            base = str(Path(tmp) / "edo")
            with redirect_stdout(StringIO()):
                self.assertTrue(tun_csd.write_tun_file(base, config))
            content = Path(f"{base}.tun").read_text(encoding="utf-8").splitlines()
        self.assertEqual(content[70], "Note 69=6900")


class TestCsdExport(unittest.TestCase):

    def setUp(self):
        self.config = load_tuning(str(FIXTURES / "just_major.json"))

    def test_new_file_and_numbering(self):
        with tempfile.TemporaryDirectory() as tmp:
            base = str(Path(tmp) / "just")
            with redirect_stdout(StringIO()):
                first, existed = tun_csd.write_cpstun_table(base, self.config)
                second, existed_again = tun_csd.write_cpstun_table(base, self.config)
            content = Path(f"{base}.csd").read_text(encoding="utf-8")

        self.assertEqual((first, existed), (1, False))
        self.assertEqual((second, existed_again), (2, True))
        self.assertTrue(content.startswith("<CsoundSynthesizer>"))
        self.assertLess(content.index("f 2 0 132 -2 "), content.index("</CsScore>"))

    def test_table_values(self):
        with tempfile.TemporaryDirectory() as tmp:
            base = str(Path(tmp) / "just")
            with redirect_stdout(StringIO()):
                tun_csd.write_cpstun_table(base, self.config)
            content = Path(f"{base}.csd").read_text(encoding="utf-8")

        f_line = next(line for line in content.splitlines() if line.startswith("f 1 "))
        values = f_line.split()[5:]
        self.assertEqual(values[0], "128")
        self.assertEqual(values[1], "0")
        self.assertAlmostEqual(float(values[2]), consts.F_REF)
        self.assertEqual(values[3], "0")
        ratios = [float(v) for v in values[4:]]
        self.assertEqual(len(ratios), 128)
        self.assertAlmostEqual(ratios[0], 1.0)
        # E4 sits a pure major third above C4
        self.assertAlmostEqual(ratios[64] / ratios[60], 1.25, places=8)
        self.assertAlmostEqual(math.log2(ratios[72] / ratios[60]), 1.0, places=8)

    def test_existing_file_keeps_content(self):
        with tempfile.TemporaryDirectory() as tmp:
            base = Path(tmp) / "score"
            Path(f"{base}.csd").write_text(
                "<CsoundSynthesizer>\n<CsScore>\nf 7 0 16 10 1\n</CsScore>\n</CsoundSynthesizer>\n",
                encoding="utf-8",
            )
            with redirect_stdout(StringIO()):
                fnum, existed = tun_csd.write_cpstun_table(str(base), self.config)
            content = Path(f"{base}.csd").read_text(encoding="utf-8")

        self.assertEqual((fnum, existed), (8, True))
        self.assertIn("f 7 0 16 10 1", content)
        self.assertIn("f 8 0 132 -2 ", content)


if __name__ == "__main__":
    unittest.main()
