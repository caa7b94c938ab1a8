"""Offset table reports for loaded tunings.

This module turns a TuningConfiguration into readable tables, printed on the
console or exported to disk.

Offset Table:
- One row per keyboard nominal (white key) with its 12-EDO note name
- The nominal's deviation from 12-EDO (NONE column)
- One column per accidental mapped by the tuning, relative to the nominal

Keyboard Table:
- All 128 MIDI keys retuned with their default (sharp) spelling
- Absolute cents above MIDI 0, deviation from 12-EDO and frequency in Hz

Export Formats:
- Aligned text file (<base>_offsets.txt)
- Excel workbook (<base>_offsets.xlsx) with "Offsets" and "Keyboard" sheets,
  color-coded nominal and accidental columns

Dependencies:
- openpyxl for Excel export (the text export works without it)
"""

import logging
from typing import List, Tuple

import consts
import utils
from accidentals import accidental_name
from tuning import NONE, TuningConfiguration, retuned_keyboard

KEYBOARD_HEADERS = ["MIDI", "Note", "Cents", "Deviation", "Hz"]

# ARGB fills of the Excel sheets
EXCEL_FILLS = {"header": "FFDDDDDD", "nominal": "FFCCE5FF", "accidental": "FFFFFFCC"}


def _mapped_accidentals(config: TuningConfiguration) -> List[int]:
    """Accidental codes (besides NONE) mapped on at least one nominal."""
    codes = set()
    for slot in config.offset_map.values():
        codes.update(code for code in slot if code != NONE)
    return sorted(codes)


def offset_table_rows(config: TuningConfiguration) -> Tuple[List[str], List[List[str]]]:
    """Return (headers, rows) of the offset table; empty rows for an invalid tuning."""
    codes = _mapped_accidentals(config)
    headers = ["MIDI", "Note", "NONE"] + [accidental_name(code) for code in codes]
    rows = []
    for nominal in sorted(config.offset_map):
        slot = config.offset_map[nominal]
        row = [str(nominal), utils.midi_to_note_name_12tet(nominal), utils.format_cents(slot[NONE])]
        row.extend(utils.format_cents(slot[code]) if code in slot else "" for code in codes)
        rows.append(row)
    return headers, rows


def keyboard_rows(config: TuningConfiguration, diapason_hz: float = consts.DEFAULT_DIAPASON) -> List[Tuple[int, str, float, float, float]]:
    """Rows (midi, name, absolute cents, deviation, Hz) for the whole keyboard."""
    f_midi0 = utils.convert_midi_to_hz(consts.MIDI_MIN, diapason_hz)
    rows = []
    for midi, cents in retuned_keyboard(config):
        deviation = cents - midi * consts.CENTS_PER_SEMITONE
        rows.append((midi, utils.midi_to_note_name_12tet(midi), cents, deviation,
                     utils.apply_cents(f_midi0, cents)))
    return rows


def format_offset_table(config: TuningConfiguration) -> List[str]:
    """Aligned text lines of the offset table, preceded by the tuning name."""
    headers, rows = offset_table_rows(config)
    title = f"Tuning: {config.get_name() or '(unnamed)'}"
    return [title, ""] + utils.format_aligned_table(headers, rows, right_from=2)


def export_offset_tables(output_base: str, config: TuningConfiguration,
                         diapason_hz: float = consts.DEFAULT_DIAPASON) -> None:
    """Exports the offset table as text and Excel."""
    txt_path = f"{output_base}_offsets.txt"
    utils.safe_file_write(txt_path, "\n".join(format_offset_table(config)) + "\n")

    xlsx_path = f"{output_base}_offsets.xlsx"
    try:
        _export_excel_offsets(xlsx_path, config, diapason_hz)
    except ImportError:
        _handle_openpyxl_error(xlsx_path)
    except OSError as e:
        utils.log_export_error(xlsx_path, e)


# --- Private helper functions ---

def _handle_openpyxl_error(output_path: str, operation: str = "Excel export") -> None:
    print(f"openpyxl not installed: {operation} skipped ({output_path})")
    logging.getLogger("export").error("openpyxl not installed: %s skipped (%s)", operation, output_path)


def _solid_fill(PatternFill, kind: str):
    color = EXCEL_FILLS[kind]
    return PatternFill(start_color=color, end_color=color, fill_type="solid")


def _write_header(ws, headers: List[str], font, fill) -> None:
    ws.append(headers)
    for cell in ws[1]:
        cell.font = font
        cell.fill = fill
    ws.freeze_panes = "A2"


def _export_excel_offsets(xlsx_path: str, config: TuningConfiguration, diapason_hz: float) -> None:
    """Export offsets and keyboard sheets to Excel format."""
    from openpyxl import Workbook
    from openpyxl.styles import Font, PatternFill

    header_font = Font(bold=True)
    header_fill = _solid_fill(PatternFill, "header")
    nominal_fill = _solid_fill(PatternFill, "nominal")
    accidental_fill = _solid_fill(PatternFill, "accidental")
    codes = _mapped_accidentals(config)
    headers, _ = offset_table_rows(config)

    wb = Workbook()
    ws = wb.active
    ws.title = "Offsets"
    _write_header(ws, headers, header_font, header_fill)

    for row_idx, nominal in enumerate(sorted(config.offset_map), start=2):
        slot = config.offset_map[nominal]
        ws.cell(row=row_idx, column=1, value=nominal)
        ws.cell(row=row_idx, column=2, value=utils.midi_to_note_name_12tet(nominal))
        ws.cell(row=row_idx, column=3, value=round(float(slot[NONE]), 4)).fill = nominal_fill
        for col_idx, code in enumerate(codes, start=4):
            if code in slot:
                cell = ws.cell(row=row_idx, column=col_idx, value=round(float(slot[code]), 4))
                cell.fill = accidental_fill

    ws_keys = wb.create_sheet("Keyboard")
    _write_header(ws_keys, KEYBOARD_HEADERS, header_font, header_fill)
    for midi, name, cents, deviation, hz in keyboard_rows(config, diapason_hz):
        ws_keys.append([midi, name, round(cents, 4), round(deviation, 4), round(hz, 6)])

    wb.save(xlsx_path)
    utils.log_export_success(xlsx_path)
