"""Tests for the accidental vocabulary."""

import sys
import unittest
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from accidentals import (
    ACCIDENTAL_NAME_MAP,
    AccidentalType,
    UnknownAccidental,
    accidental_code,
    accidental_name,
)


class TestVocabulary(unittest.TestCase):

    def test_basic_codes(self):
        self.assertEqual(accidental_code("NONE"), 0)
        self.assertEqual(accidental_code("FLAT"), AccidentalType.FLAT)
        self.assertEqual(accidental_code("NATURAL"), AccidentalType.NATURAL)
        self.assertEqual(accidental_code("SHARP"), AccidentalType.SHARP)

    def test_microtonal_names(self):
        self.assertIn("SAGITTAL_5CD", ACCIDENTAL_NAME_MAP)
        self.assertIn("QUARTER_SHARP_EQUAL_TEMPERED", ACCIDENTAL_NAME_MAP)
        self.assertIn("FIVE_COMMA_SHARP", ACCIDENTAL_NAME_MAP)

    def test_codes_unique(self):
        self.assertEqual(len(set(ACCIDENTAL_NAME_MAP.values())), len(ACCIDENTAL_NAME_MAP))
        self.assertEqual(len(ACCIDENTAL_NAME_MAP), 144)

    def test_map_read_only(self):
        with self.assertRaises(TypeError):
            ACCIDENTAL_NAME_MAP["NEW"] = 999

    def test_unknown_name(self):
        with self.assertRaises(UnknownAccidental):
            accidental_code("flat")
        with self.assertRaises(UnknownAccidental):
            accidental_code("HALF_SHARP_OF_DOOM")

    def test_reverse_lookup(self):
        self.assertEqual(accidental_name(3), "SHARP")
        self.assertEqual(accidental_name(AccidentalType.FLAT2), "FLAT2")
        self.assertEqual(accidental_name(9999), "9999")


if __name__ == "__main__":
    unittest.main()
