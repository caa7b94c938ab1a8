"""Tuning file exports for synthesizers and Csound.

A loaded tuning retunes the whole MIDI keyboard; this module writes that
keyboard in formats other software can play directly.

AnaMark TUN Format:
- 128 MIDI note mapping in absolute cents relative to 8.1757989156437073336 Hz
- [Exact Tuning] section with basefreq when the diapason is not 440 Hz
- Integer cents output when every value is whole (or when requested)

Csound Integration:
- cpstun tables (GEN -2) appended to a .csd file
- Automatic table numbering after the highest existing "f N" statement
- Skeleton file creation for new Csound projects

Keys are retuned with their default sharp spelling (see tuning.default_tpc).
"""

from typing import List, Tuple

import consts
import utils
from tuning import TuningConfiguration, retuned_keyboard


def parse_file(file_name: str) -> int:
    """Finds the maximum table number 'f N' in the file."""
    max_num = 0
    try:
        with open(file_name, "r", encoding="utf-8") as f:
            for line in f:
                for match in consts.PATTERN.finditer(line):
                    max_num = max(max_num, int(match.group(1)))
    except FileNotFoundError:
        print(f"Error: file not found: {file_name}")
    return max_num


def tun_lines(config: TuningConfiguration, diapason: float = consts.DEFAULT_DIAPASON,
              tun_integer: bool = False) -> List[str]:
    """Lines of an AnaMark .tun file for the retuned keyboard."""
    if diapason != consts.DEFAULT_DIAPASON:
        f_ref = consts.F_REF * (diapason / consts.DEFAULT_DIAPASON)
        lines = ["[Exact Tuning]", f"basefreq={f_ref}"]
    else:
        lines = ["[Tuning]"]

    for note_idx, cents in retuned_keyboard(config):
        s2 = f"{round(cents, 2):.2f}"
        if tun_integer or s2.endswith(".00"):
            cents_text = str(int(round(cents)))
        else:
            cents_text = s2
        lines.append(f"Note {note_idx}={cents_text}")
    return lines


def write_tun_file(output_base: str, config: TuningConfiguration,
                   diapason: float = consts.DEFAULT_DIAPASON, tun_integer: bool = False) -> bool:
    """Exports a .tun file (AnaMark TUN) with values expressed in absolute cents relative to MIDI 0.
    Structure: [Tuning] + 128 lines "Note X=Y"."""
    tun_path = f"{output_base}.tun"
    return utils.safe_file_write(tun_path, "\n".join(tun_lines(config, diapason, tun_integer)) + "\n")


def write_cpstun_table(output_base: str, config: TuningConfiguration,
                       diapason: float = consts.DEFAULT_DIAPASON) -> Tuple[int, bool]:
    """Creates or appends a cpstun table to a Csound .csd file.

    The table covers the whole keyboard: 128 grades, interval 0 (no repetition),
    base frequency of MIDI 0 and base key 0.

    Returns:
        (table number, whether the .csd existed before); table number 0 on error.
    """
    csd_path = f"{output_base}.csd"
    skeleton = (
        "<CsoundSynthesizer>\n"
        "<CsOptions>\n\n</CsOptions>\n"
        "<CsInstruments>\n\n</CsInstruments>\n"
        "<CsScore>\n\n</CsScore>\n"
        "</CsoundSynthesizer>\n"
    )

    existed_before = utils.file_exists(csd_path)
    if not existed_before and not utils.safe_file_write(csd_path, skeleton):
        return 0, existed_before

    try:
        with open(csd_path, "r", encoding="utf-8") as f:
            content = f.read()
    except OSError as e:
        utils.log_export_error(csd_path, e)
        return 0, existed_before

    fnum = parse_file(csd_path) + 1
    basefrequency = utils.convert_midi_to_hz(consts.MIDI_MIN, diapason)
    keyboard = retuned_keyboard(config)

    data_list = [str(len(keyboard)), "0", f"{basefrequency:.10g}", str(consts.MIDI_MIN)]
    data_list.extend(f"{utils.cents_to_ratio(cents):.10f}" for _, cents in keyboard)

    prefix = f"f {fnum} 0 {len(data_list)} -2 "
    positions = []
    col = len(prefix)
    for t in data_list:
        positions.append(col)
        col += len(t) + 1

    def build_aligned_comment(label_map: List[Tuple[int, str]]) -> str:
        line = ";"
        for pos_idx, text in label_map:
            target = 1 + positions[pos_idx]
            if target < len(line):
                target = len(line) + 1
            line += " " * (target - len(line)) + text
        return line + "\n"

    name = config.get_name() or "unnamed"
    header_comment = (
        build_aligned_comment([(0, "numgrades"), (2, "basefreq"), (4, "ratios .......")]) +
        build_aligned_comment([(1, "interval"), (3, "basekey")]) +
        f"; cpstun table generated | tuning={name} diapason={diapason:.6f}Hz\n"
    )
    f_line = prefix + " ".join(data_list) + "\n"

    # Insert before </CsScore>
    insert_marker = "</CsScore>"
    idx = content.rfind(insert_marker)
    if idx == -1:
        content += f"\n<CsScore>\n{header_comment}{f_line}</CsScore>\n"
    else:
        content = content[:idx] + header_comment + f_line + content[idx:]

    if not utils.safe_file_write(csd_path, content):
        return 0, existed_before
    print(f"cpstun table (f {fnum}) saved to {csd_path}")
    return fnum, existed_before
