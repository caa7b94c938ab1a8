"""Shared utilities for TUNEMAP.

Logging:
- One-shot logging setup for the command line (file or console handler)

Pitch Helpers:
- MIDI note to 12-EDO note name and frequency
- Cents offsets applied to frequencies and cents to ratio conversion

Console Output:
- Program banner
- Aligned text tables

File Export Support:
- Export success/error reporting
- Safe text file writing
"""

import logging
import os
from typing import List, Optional

import consts


# --- Logging ---

def setup_logging(log_file: Optional[str] = None, verbose: bool = False) -> None:
    """Configura il logging / Configure logging for the command line.

    Messages go to `log_file` when given, to stderr otherwise. `verbose`
    lowers the level from WARNING to INFO.
    """
    if log_file:
        handlers: List[logging.Handler] = [logging.FileHandler(log_file, encoding='utf-8')]
    else:
        handlers = [logging.StreamHandler()]
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers,
    )


# --- Pitch helpers ---

def midi_to_note_name_12tet(midi_value: int) -> str:
    """Converte un valore MIDI in nome nota 12-TET (con #) con ottava, es. A4, C#3."""
    try:
        m = int(midi_value)
    except (ValueError, TypeError, ArithmeticError):
        return ""
    if m < consts.MIDI_MIN or m > consts.MIDI_MAX:
        m = max(consts.MIDI_MIN, min(consts.MIDI_MAX, m))
    names = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]
    name = names[m % consts.SEMITONES_PER_OCTAVE]
    octave = (m // consts.SEMITONES_PER_OCTAVE) - 1
    return f"{name}{octave}"


def convert_midi_to_hz(midi_value: int, diapason_hz: float = consts.DEFAULT_DIAPASON) -> float:
    """Converte valore MIDI in frequenza Hz."""
    return diapason_hz * (2 ** ((float(midi_value) - consts.MIDI_A4) / consts.SEMITONES_PER_OCTAVE))


def apply_cents(freq_hz: float, cents: float) -> float:
    """Applica offset in cents a una frequenza / Apply cents offset to a frequency."""
    return float(freq_hz) * (2.0 ** (float(cents) / consts.CENTS_PER_OCTAVE))


def cents_to_ratio(cents: float) -> float:
    return 2.0 ** (float(cents) / consts.CENTS_PER_OCTAVE)


def format_cents(cents: float) -> str:
    """Signed cents with two decimals, e.g. +3.91."""
    return f"{cents:+.2f}"


# --- Console output ---

def print_banner() -> None:
    """Stampa le info di programma: nome, versione, licenza."""
    print(f"{consts.__program_name__}  |  Version: {consts.__version__}  |  License: {consts.__license__}")


def format_aligned_table(headers: List[str], rows: List[List[str]],
                         right_from: Optional[int] = None) -> List[str]:
    """Allinea le colonne di una tabella di testo / Align the columns of a text table.

    Columns from index `right_from` on are right-justified (numbers), the
    others left-justified. Trailing blanks are stripped from every line.
    An empty table gives no lines.
    """
    if not headers or not rows:
        return []

    widths = [max([len(h)] + [len(row[i]) for row in rows if i < len(row)])
              for i, h in enumerate(headers)]

    def format_row(cells: List[str]) -> str:
        padded = []
        for i, (cell, width) in enumerate(zip(cells, widths)):
            if right_from is not None and i >= right_from:
                padded.append(cell.rjust(width))
            else:
                padded.append(cell.ljust(width))
        return "  ".join(padded).rstrip()

    return [format_row(headers)] + [format_row(row) for row in rows]


# --- File export utilities ---

def file_exists(file_path: str) -> bool:
    """Verifica esistenza file."""
    exists = os.path.exists(file_path)
    logging.getLogger("export").info("File %s: %s", "exists" if exists else "not found", file_path)
    return exists


def log_export_success(file_path: str) -> None:
    """Log successful file export."""
    print(f"Exported: {file_path}")
    logging.getLogger("export").info("Exported %s", file_path)


def log_export_error(file_path: str, error: Exception) -> None:
    """Log file export error."""
    print(f"Write error {file_path}: {error}")
    logging.getLogger("export").error("Write error %s: %s", file_path, error)


def safe_file_write(file_path: str, content: str, encoding: str = "utf-8") -> bool:
    """Safely write content to file with error handling."""
    try:
        with open(file_path, "w", encoding=encoding) as f:
            f.write(content)
        log_export_success(file_path)
        return True
    except OSError as e:
        log_export_error(file_path, e)
        return False
