"""Constants and metadata for the TUNEMAP microtonal tuning engine.

This module centralizes the constants shared by the parser, the offset map
builder and the exporters.

Program Metadata:
- Version information and authorship details
- Licensing information

Scala and Cents Constants:
- Cents per octave and per 12-EDO semitone

Keyboard Layout:
- Diatonic step pattern used to index nominals (C D E F G A B)
- Number of nominal slots built across the keyboard
- Default tuning root (degree 0 anchored at middle C)
- Natural pitch classes accepted as a tuning root

Spelling:
- Tonal pitch class bands that imply a flat, double flat, sharp or
  double sharp spelling

MIDI and Export Constants:
- MIDI note ranges and the A4 reference
- Default diapason and the AnaMark TUN reference frequency
- Regular expression pattern for Csound table numbers
"""

import re

# Metadata
__program_name__ = "TUNEMAP"
__version__ = "1.0"
__license__ = "MIT"  # See LICENSE file

# Cents
CENTS_PER_OCTAVE = 1200.0
CENTS_PER_SEMITONE = 100

# Nominals: semitone distance C->D->E->F->G->A->B->C
STANDARD_NOMINAL_STEPS = (2, 2, 1, 2, 2, 2, 1)
DIATONIC_STEPS = len(STANDARD_NOMINAL_STEPS)
KEYBOARD_NOMINALS = 75  # nominal slots 0..74 cover MIDI 0..127

# Root defaults: tuning degree 0 sits on middle C
DEFAULT_TUNING_ROOT = 0
DEFAULT_MIDI_ROOT = 60
NATURAL_PITCH_CLASSES = frozenset({0, 2, 4, 5, 7, 9, 11})

# Tonal pitch class bands (exclusive bounds) and the nominal shift they imply
TPC_FLAT_BAND = (5, 13)
TPC_FLAT2_BAND = (-2, 6)
TPC_SHARP_BAND = (19, 34)
TPC_SHARP2_BAND = (33, 41)

# Sharp-preferred tonal pitch class for each 12-EDO pitch class
DEFAULT_TPC_BY_PC = (14, 21, 16, 23, 18, 13, 20, 15, 22, 17, 24, 19)

# MIDI
MIDI_MIN = 0
MIDI_MAX = 127
MIDI_A4 = 69
SEMITONES_PER_OCTAVE = 12
DEFAULT_DIAPASON = 440.0

# Reference frequency for TUN format (MIDI 0 at A4 = 440 Hz)
F_REF = 8.1757989156437073336

# CSD file pattern matching
PATTERN = re.compile(r"\bf\s*(\d+)\b")
