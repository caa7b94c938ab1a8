"""Accidental vocabulary for tuning definitions.

Tuning files name accidentals with fixed identifiers ("FLAT", "SHARP",
"SAGITTAL_5CD", ...). This module maps those identifiers to the integer
accidental codes used by the notation layer. The table is a closed
vocabulary: names that are not listed here are rejected.
"""

from enum import IntEnum
from types import MappingProxyType
from typing import Mapping

from scala import TuningError


class UnknownAccidental(TuningError, ValueError):
    """Accidental name not in the vocabulary."""


class AccidentalType(IntEnum):
    NONE = 0
    FLAT = 1
    NATURAL = 2
    SHARP = 3
    SHARP2 = 4
    FLAT2 = 5
    SHARP3 = 6
    FLAT3 = 7
    NATURAL_FLAT = 8
    NATURAL_SHARP = 9
    SHARP_SHARP = 10
    FLAT_ARROW_UP = 11
    FLAT_ARROW_DOWN = 12
    NATURAL_ARROW_UP = 13
    NATURAL_ARROW_DOWN = 14
    SHARP_ARROW_UP = 15
    SHARP_ARROW_DOWN = 16
    SHARP2_ARROW_UP = 17
    SHARP2_ARROW_DOWN = 18
    FLAT2_ARROW_UP = 19
    FLAT2_ARROW_DOWN = 20
    ARROW_DOWN = 21
    ARROW_UP = 22
    MIRRORED_FLAT = 23
    MIRRORED_FLAT2 = 24
    SHARP_SLASH = 25
    SHARP_SLASH4 = 26
    FLAT_SLASH2 = 27
    FLAT_SLASH = 28
    SHARP_SLASH3 = 29
    SHARP_SLASH2 = 30
    DOUBLE_FLAT_ONE_ARROW_DOWN = 31
    FLAT_ONE_ARROW_DOWN = 32
    NATURAL_ONE_ARROW_DOWN = 33
    SHARP_ONE_ARROW_DOWN = 34
    DOUBLE_SHARP_ONE_ARROW_DOWN = 35
    DOUBLE_FLAT_ONE_ARROW_UP = 36
    FLAT_ONE_ARROW_UP = 37
    NATURAL_ONE_ARROW_UP = 38
    SHARP_ONE_ARROW_UP = 39
    DOUBLE_SHARP_ONE_ARROW_UP = 40
    DOUBLE_FLAT_TWO_ARROWS_DOWN = 41
    FLAT_TWO_ARROWS_DOWN = 42
    NATURAL_TWO_ARROWS_DOWN = 43
    SHARP_TWO_ARROWS_DOWN = 44
    DOUBLE_SHARP_TWO_ARROWS_DOWN = 45
    DOUBLE_FLAT_TWO_ARROWS_UP = 46
    FLAT_TWO_ARROWS_UP = 47
    NATURAL_TWO_ARROWS_UP = 48
    SHARP_TWO_ARROWS_UP = 49
    DOUBLE_SHARP_TWO_ARROWS_UP = 50
    DOUBLE_FLAT_THREE_ARROWS_DOWN = 51
    FLAT_THREE_ARROWS_DOWN = 52
    NATURAL_THREE_ARROWS_DOWN = 53
    SHARP_THREE_ARROWS_DOWN = 54
    DOUBLE_SHARP_THREE_ARROWS_DOWN = 55
    DOUBLE_FLAT_THREE_ARROWS_UP = 56
    FLAT_THREE_ARROWS_UP = 57
    NATURAL_THREE_ARROWS_UP = 58
    SHARP_THREE_ARROWS_UP = 59
    DOUBLE_SHARP_THREE_ARROWS_UP = 60
    LOWER_ONE_SEPTIMAL_COMMA = 61
    RAISE_ONE_SEPTIMAL_COMMA = 62
    LOWER_TWO_SEPTIMAL_COMMAS = 63
    RAISE_TWO_SEPTIMAL_COMMAS = 64
    LOWER_ONE_UNDECIMAL_QUARTERTONE = 65
    RAISE_ONE_UNDECIMAL_QUARTERTONE = 66
    LOWER_ONE_TRIDECIMAL_QUARTERTONE = 67
    RAISE_ONE_TRIDECIMAL_QUARTERTONE = 68
    DOUBLE_FLAT_EQUAL_TEMPERED = 69
    FLAT_EQUAL_TEMPERED = 70
    NATURAL_EQUAL_TEMPERED = 71
    SHARP_EQUAL_TEMPERED = 72
    DOUBLE_SHARP_EQUAL_TEMPERED = 73
    QUARTER_FLAT_EQUAL_TEMPERED = 74
    QUARTER_SHARP_EQUAL_TEMPERED = 75
    FLAT_17 = 76
    SHARP_17 = 77
    FLAT_19 = 78
    SHARP_19 = 79
    FLAT_23 = 80
    SHARP_23 = 81
    FLAT_31 = 82
    SHARP_31 = 83
    FLAT_53 = 84
    SHARP_53 = 85
    SORI = 86
    KORON = 87
    TEN_TWELFTH_FLAT = 88
    TEN_TWELFTH_SHARP = 89
    ELEVEN_TWELFTH_FLAT = 90
    ELEVEN_TWELFTH_SHARP = 91
    ONE_TWELFTH_FLAT = 92
    ONE_TWELFTH_SHARP = 93
    TWO_TWELFTH_FLAT = 94
    TWO_TWELFTH_SHARP = 95
    THREE_TWELFTH_FLAT = 96
    THREE_TWELFTH_SHARP = 97
    FOUR_TWELFTH_FLAT = 98
    FOUR_TWELFTH_SHARP = 99
    FIVE_TWELFTH_FLAT = 100
    FIVE_TWELFTH_SHARP = 101
    SIX_TWELFTH_FLAT = 102
    SIX_TWELFTH_SHARP = 103
    SEVEN_TWELFTH_FLAT = 104
    SEVEN_TWELFTH_SHARP = 105
    EIGHT_TWELFTH_FLAT = 106
    EIGHT_TWELFTH_SHARP = 107
    NINE_TWELFTH_FLAT = 108
    NINE_TWELFTH_SHARP = 109
    SAGITTAL_5V7KD = 110
    SAGITTAL_5V7KU = 111
    SAGITTAL_5CD = 112
    SAGITTAL_5CU = 113
    SAGITTAL_7CD = 114
    SAGITTAL_7CU = 115
    SAGITTAL_25SDD = 116
    SAGITTAL_25SDU = 117
    SAGITTAL_35MDD = 118
    SAGITTAL_35MDU = 119
    SAGITTAL_11MDD = 120
    SAGITTAL_11MDU = 121
    SAGITTAL_11LDD = 122
    SAGITTAL_11LDU = 123
    SAGITTAL_35LDD = 124
    SAGITTAL_35LDU = 125
    SAGITTAL_FLAT25SU = 126
    SAGITTAL_SHARP25SD = 127
    SAGITTAL_FLAT7CU = 128
    SAGITTAL_SHARP7CD = 129
    SAGITTAL_FLAT5CU = 130
    SAGITTAL_SHARP5CD = 131
    SAGITTAL_FLAT5V7KU = 132
    SAGITTAL_SHARP5V7KD = 133
    SAGITTAL_FLAT = 134
    SAGITTAL_SHARP = 135
    ONE_COMMA_FLAT = 136
    ONE_COMMA_SHARP = 137
    TWO_COMMA_FLAT = 138
    TWO_COMMA_SHARP = 139
    THREE_COMMA_FLAT = 140
    THREE_COMMA_SHARP = 141
    FOUR_COMMA_FLAT = 142
    FIVE_COMMA_SHARP = 143


ACCIDENTAL_NAME_MAP: Mapping[str, int] = MappingProxyType(
    {accidental.name: int(accidental) for accidental in AccidentalType}
)


def accidental_code(name: str) -> int:
    """Restituisce il codice di un'alterazione / Return the code of an accidental name."""
    try:
        return ACCIDENTAL_NAME_MAP[name]
    except (KeyError, TypeError):
        raise UnknownAccidental(f"Unknown accidental type: {name!r}") from None


def accidental_name(code: int) -> str:
    """Reverse lookup used by reports; unknown codes are shown as numbers."""
    try:
        return AccidentalType(code).name
    except ValueError:
        return str(code)
