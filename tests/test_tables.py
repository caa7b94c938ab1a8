"""Tests for offset table reports."""

import math
import sys
import tempfile
import unittest
from contextlib import redirect_stdout
from io import StringIO
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

import tables
from tuning import TuningConfiguration, load_tuning

FIXTURES = Path(__file__).parent / "fixtures"


class TestOffsetTable(unittest.TestCase):

    def setUp(self):
        self.config = load_tuning(str(FIXTURES / "just_major.json"))

    def test_headers(self):
        headers, _ = tables.offset_table_rows(self.config)
        self.assertEqual(headers, ["MIDI", "Note", "NONE", "FLAT", "SHARP"])

    def test_rows(self):
        _, rows = tables.offset_table_rows(self.config)
        self.assertEqual(len(rows), 75)
        middle_c = next(row for row in rows if row[0] == "60")
        self.assertEqual(middle_c[1], "C4")
        self.assertEqual(middle_c[2], "+0.00")
        self.assertEqual(middle_c[3], "")
        self.assertEqual(middle_c[4], "+70.67")
        e4 = next(row for row in rows if row[0] == "64")
        self.assertEqual(e4[2], "-13.69")

    def test_format(self):
        lines = tables.format_offset_table(self.config)
        self.assertEqual(lines[0], "Tuning: 5-limit just major")
        self.assertTrue(lines[2].startswith("MIDI"))
        self.assertEqual(len(lines), 3 + 75)
        middle_c = next(line for line in lines if line.startswith("60 "))
        self.assertTrue(middle_c.endswith("+70.67"))
        self.assertEqual(len(middle_c), len(lines[2]))

    def test_invalid_tuning_has_no_rows(self):
        headers, rows = tables.offset_table_rows(TuningConfiguration())
        self.assertEqual(headers, ["MIDI", "Note", "NONE"])
        self.assertEqual(rows, [])

    def test_keyboard_rows(self):
        rows = tables.keyboard_rows(self.config)
        self.assertEqual(len(rows), 128)
        midi, name, cents, deviation, hz = rows[69]
        self.assertEqual((midi, name), (69, "A4"))
        self.assertAlmostEqual(deviation, 1200 * math.log2(5 / 3) - 900)
        self.assertAlmostEqual(cents, 6900 + deviation)
        self.assertAlmostEqual(hz, 440.0 * 2 ** (deviation / 1200))


class TestExport(unittest.TestCase):

    def test_export_text_and_excel(self):
        config = load_tuning(str(FIXTURES / "twelve_edo.json"))
        with tempfile.TemporaryDirectory() as tmp:
            base = str(Path(tmp) / "edo")
            with redirect_stdout(StringIO()):
                tables.export_offset_tables(base, config)

            text = Path(f"{base}_offsets.txt").read_text(encoding="utf-8")
            self.assertIn("Tuning: 12-EDO", text)

            import openpyxl
            wb = openpyxl.load_workbook(f"{base}_offsets.xlsx")
            self.assertEqual(wb.sheetnames, ["Offsets", "Keyboard"])
            offsets = wb["Offsets"]
            self.assertEqual(offsets.cell(row=1, column=3).value, "NONE")
            self.assertEqual(offsets.max_row, 76)
            keyboard = wb["Keyboard"]
            self.assertEqual(keyboard.max_row, 129)
            self.assertEqual(keyboard.cell(row=71, column=2).value, "A4")
            self.assertAlmostEqual(keyboard.cell(row=71, column=5).value, 440.0)
            self.assertTrue(offsets.cell(row=1, column=1).font.bold)
            self.assertEqual(keyboard.freeze_panes, "A2")
            self.assertEqual(offsets.cell(row=2, column=3).fill.fill_type, "solid")


if __name__ == "__main__":
    unittest.main()
