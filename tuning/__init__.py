"""Offset map construction and per-note lookup for microtonal tunings.

A tuning document describes one period of a scale:

    {
        "name": "Just intonation",
        "root": [0, 60],
        "map": [
            {"NONE": "2/1"},
            {"NONE": "9/8", "FLAT": "16/15"},
            ...
        ]
    }

Each entry of "map" is a scale degree holding Scala values keyed by
accidental name. The "NONE" value of degree 0 is the period of the tuning;
every other "NONE" value is the position of the degree inside the period.
"root" anchors a tuning degree to a MIDI note, which must be a natural
(white key) pitch.

From this the engine builds an offset map covering 75 nominals (the white
keys from MIDI 0 to 127). For each nominal it stores:

- under NONE, the deviation in cents of the natural nominal from 12-EDO
- under any other accidental code, the deviation of that variant relative
  to the natural nominal

Lookups combine the literal MIDI pitch with its spelling (tonal pitch class)
and accidental to produce the cents deviation to apply at playback.

A TuningConfiguration is built once and never modified afterwards; loading
another file produces a new instance (see load_tuning).
"""

import functools
import json
import logging
import math
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple

import consts
from accidentals import AccidentalType, accidental_code, accidental_name
from scala import InvalidScalaValue, TuningError, parse_scala_value

_log = logging.getLogger("tuning")

NONE = int(AccidentalType.NONE)
NATURAL = int(AccidentalType.NATURAL)

OffsetMap = Dict[int, Dict[int, float]]

# Spelling bands: (tpc band, implied accidental, shift from pitch to nominal)
_TPC_SPELLINGS = (
    (consts.TPC_FLAT_BAND, int(AccidentalType.FLAT), 1),
    (consts.TPC_FLAT2_BAND, int(AccidentalType.FLAT2), 2),
    (consts.TPC_SHARP_BAND, int(AccidentalType.SHARP), -1),
    (consts.TPC_SHARP2_BAND, int(AccidentalType.SHARP2), -2),
)


class FileUnreadable(TuningError):
    """Tuning file missing or not readable."""


class MalformedDocument(TuningError):
    """Tuning document without a usable "map"."""


class InvalidRootSpecification(TuningError):
    """Bad "root" entry in a tuning document."""


class UnmappedAccidental(TuningError):
    """Accidental with no offset for the requested nominal (reported, not raised)."""


@functools.lru_cache(maxsize=128)
def nominal_for(index: int) -> int:
    """Converte un indice di grado in nominale / Convert a degree or slot index to a nominal.

    The nominal is the semitone position of the index-th step of the diatonic
    pattern, e.g. 0 -> 0 (C), 1 -> 2 (D), 2 -> 4 (E), 7 -> 12 (C an octave up).
    The pattern repeats every 7 steps whatever the number of degrees of the
    tuning.
    """
    nominal = 0
    for i in range(index):
        nominal += consts.STANDARD_NOMINAL_STEPS[i % consts.DIATONIC_STEPS]
    return nominal


def default_tpc(pitch: int) -> int:
    """Sharp-preferred tonal pitch class for a MIDI pitch (C#, D#, F#, G#, A#)."""
    return consts.DEFAULT_TPC_BY_PC[pitch % consts.SEMITONES_PER_OCTAVE]


def _spell(pitch: int, tpc: int) -> Tuple[int, int]:
    """Return (nominal, implied accidental) for a pitch and its tonal pitch class."""
    for (low, high), accidental, shift in _TPC_SPELLINGS:
        if low < tpc < high:
            return pitch + shift, accidental
    return pitch, NONE


def _read_name(document: Any) -> str:
    if isinstance(document, dict):
        name = document.get("name")
        if isinstance(name, str):
            return name
    return ""


def _root_value(value: Any) -> int:
    if isinstance(value, bool):
        raise InvalidRootSpecification(f"Bad value for 'root': {value!r} is not an integer")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    raise InvalidRootSpecification(f"Bad value for 'root': {value!r} is not an integer")


def _read_root(document: Dict[str, Any], num_nominals: int) -> Tuple[int, int]:
    """Return (tuning_root, midi_root), validated against the degree count."""
    root = document.get("root")
    if root is None:
        return consts.DEFAULT_TUNING_ROOT, consts.DEFAULT_MIDI_ROOT
    if not isinstance(root, list) or len(root) != 2:
        raise InvalidRootSpecification("Bad value for 'root': expected array of size 2")

    tuning_root = _root_value(root[0])
    midi_root = _root_value(root[1])
    if not consts.MIDI_MIN <= midi_root <= consts.MIDI_MAX:
        raise InvalidRootSpecification(f"Bad value for 'root': {midi_root} is not a MIDI note")
    if midi_root % consts.SEMITONES_PER_OCTAVE not in consts.NATURAL_PITCH_CLASSES:
        raise InvalidRootSpecification(f"Bad value for 'root': {midi_root} is not a nominal")
    if tuning_root < 0:
        raise InvalidRootSpecification(f"Bad value for 'root': negative degree {tuning_root}")
    if tuning_root > num_nominals:
        raise InvalidRootSpecification(
            f"Bad value for 'root': {tuning_root} is larger than the number of nominals"
        )
    return tuning_root, midi_root


def _parse_degrees(degrees: List[Any]) -> OffsetMap:
    """Parse every degree into {nominal: {accidental code: cents}} (absolute scale positions)."""
    scala_map: OffsetMap = {}
    for index, entry in enumerate(degrees):
        if not isinstance(entry, dict):
            raise MalformedDocument(f"Degree {index} of 'map' is not an object")
        accidentals: Dict[int, float] = {}
        for name, raw in entry.items():
            try:
                cents = parse_scala_value(raw)
            except InvalidScalaValue as e:
                raise InvalidScalaValue(f"Bad scala value in degree {index} ({name}): {e}") from e
            accidentals[accidental_code(name)] = float(cents)
        scala_map[nominal_for(index)] = accidentals
    return scala_map


def _align_root(scala_map: OffsetMap, period: float, num_nominals: int,
                tuning_root: int, midi_root: int) -> Tuple[int, float]:
    """Return (first nominal index, root offset) so that midi_root gets an offset of 0."""
    # round half away from zero; midi_root is never negative here
    below_root = math.floor(midi_root * consts.DIATONIC_STEPS / consts.SEMITONES_PER_OCTAVE + 0.5)
    first_nominal_index = (tuning_root - below_root) % num_nominals

    root_value = scala_map.get(nominal_for(tuning_root), {}).get(NONE)
    if root_value is None:
        raise InvalidRootSpecification(f"Bad value for 'root': degree {tuning_root} has no NONE value")
    if tuning_root == 0:
        root_value = 0.0

    # periods added by the slot loop before reaching the root slot (slot `below_root`)
    periods_below_root = (first_nominal_index + below_root) // num_nominals
    root_offset = midi_root * consts.CENTS_PER_SEMITONE - (period * periods_below_root + root_value)
    return first_nominal_index, root_offset


def build_offset_map(document: Any) -> Tuple[str, OffsetMap]:
    """Build the keyboard offset map of a tuning document.

    Args:
        document: Decoded tuning document (dict with "map", optional "name" and "root").

    Returns:
        (name, offset_map) where offset_map maps each of the 75 keyboard nominals
        to {accidental code: cents}.

    Raises:
        MalformedDocument: missing or empty "map", or no "NONE" in degree 0.
        InvalidRootSpecification: bad "root".
        UnknownAccidental: accidental name outside the vocabulary.
        InvalidScalaValue: unparseable Scala value.
    """
    if not isinstance(document, dict):
        raise MalformedDocument("Tuning document must be an object")
    degrees = document.get("map")
    if not isinstance(degrees, list) or not degrees:
        raise MalformedDocument("Invalid tuning file: 'map' must be a non-empty array")
    first_degree = degrees[0]
    if not isinstance(first_degree, dict) or first_degree.get("NONE") is None:
        raise MalformedDocument("Invalid tuning file: first degree has no 'NONE' value")

    num_nominals = len(degrees)
    try:
        period = float(parse_scala_value(first_degree["NONE"]))
    except InvalidScalaValue as e:
        raise InvalidScalaValue(f"Bad scala value for the period: {e}") from e
    tuning_root, midi_root = _read_root(document, num_nominals)
    scala_map = _parse_degrees(degrees)
    first_nominal_index, root_offset = _align_root(scala_map, period, num_nominals,
                                                   tuning_root, midi_root)

    offset_map: OffsetMap = {}
    period_offset = 0.0
    for i in range(consts.KEYBOARD_NOMINALS):
        nominal_index = (first_nominal_index + i) % num_nominals
        nominal = nominal_for(nominal_index)
        midi_nominal = nominal_for(i)
        accidentals = scala_map[nominal]

        # nominals missing from the tuning keep their 12-EDO position
        nominal_value = accidentals.get(NONE, float(nominal * consts.CENTS_PER_SEMITONE))
        if nominal_index == 0:
            nominal_value = 0.0
            if i > 0:
                period_offset += period

        slot = {NONE: period_offset + nominal_value
                - midi_nominal * consts.CENTS_PER_SEMITONE + root_offset}
        for code, cents in accidentals.items():
            if code != NONE:
                slot[code] = cents - nominal_value
        offset_map[midi_nominal] = slot

    return _read_name(document), offset_map


def _read_document(path: str) -> Any:
    try:
        with open(path, "r", encoding="utf-8") as f:
            text = f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise FileUnreadable(f"Tuning file not readable: {path} ({e})") from e
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedDocument(f"Invalid tuning file {path}: {e}") from e


class TuningConfiguration:
    """A loaded tuning: name, validity and the keyboard offset map.

    The configuration starts invalid. init() (or init_from_file()) builds the
    offset map once; the map is published only when the whole build succeeds.
    Build errors are logged and kept in `error`, never raised. After init the
    object is read-only and get_offset() can be called from any thread.
    """

    def __init__(self) -> None:
        self._name = ""
        self._valid = False
        self._initialized = False
        self._offset_map: Mapping[int, Mapping[int, float]] = MappingProxyType({})
        self.error: Optional[TuningError] = None

    def _claim(self) -> bool:
        if self._initialized:
            _log.error("Tuning %r is already initialized; load a new configuration instead", self._name)
            return False
        self._initialized = True
        return True

    def _fail(self, error: TuningError) -> None:
        self.error = error
        _log.error("%s: %s", type(error).__name__, error)

    def init(self, document: Any) -> None:
        """Build the offset map from a decoded tuning document."""
        if not self._claim():
            return
        self._build(document)

    def init_from_file(self, path: str) -> None:
        """Read a JSON tuning file and build the offset map."""
        if not self._claim():
            return
        try:
            document = _read_document(path)
        except TuningError as e:
            self._fail(e)
            return
        self._build(document)

    def _build(self, document: Any) -> None:
        self._name = _read_name(document)
        try:
            _, offset_map = build_offset_map(document)
        except TuningError as e:
            self._fail(e)
            return
        self._offset_map = MappingProxyType(
            {nominal: MappingProxyType(slot) for nominal, slot in offset_map.items()}
        )
        self._valid = True
        _log.info("Loaded tuning %r (%d nominals)", self._name, len(self._offset_map))

    def valid(self) -> bool:
        return self._valid

    def get_name(self) -> str:
        return self._name

    @property
    def offset_map(self) -> Mapping[int, Mapping[int, float]]:
        return self._offset_map

    def get_offset(self, pitch: int, tpc: int, accidental_type: int) -> float:
        """Cents deviation from 12-EDO for a note.

        Args:
            pitch: MIDI pitch as played in 12-EDO.
            tpc: Tonal pitch class (spelling) of the note.
            accidental_type: Accidental code on the note, NONE when there is none.

        Returns:
            The deviation in cents; 0.0 for an invalid configuration.
        """
        if not self._valid:
            return 0.0

        nominal, tpc_accidental = _spell(pitch, tpc)
        accidentals = self._offset_map.get(nominal)
        if accidentals is None:
            _log.error("Nominal %d of pitch %d is outside the tuned keyboard", nominal, pitch)
            return 0.0

        # distance from the played pitch to its nominal, then the nominal's retuning
        offset = (nominal - pitch) * consts.CENTS_PER_SEMITONE + accidentals[NONE]

        # no accidental on the note: apply the one implied by the spelling (key signature)
        actual_accidental = accidental_type
        if accidental_type == NONE and tpc_accidental != NONE:
            actual_accidental = tpc_accidental
        if actual_accidental in (NATURAL, NONE):
            return offset

        delta = accidentals.get(actual_accidental)
        if delta is None:
            _log.warning("%s", UnmappedAccidental(
                f"Accidental type {accidental_name(actual_accidental)} has not been mapped "
                f"for nominal {nominal} in tuning {self._name!r}"
            ))
            return offset
        return offset + delta


def load_tuning(path: str) -> TuningConfiguration:
    """Load a tuning file into a new configuration (check valid() on the result)."""
    config = TuningConfiguration()
    config.init_from_file(path)
    return config


def retuned_keyboard(config: TuningConfiguration) -> List[Tuple[int, float]]:
    """Absolute cents above MIDI 0 for every key, using sharp spellings."""
    keyboard = []
    for midi in range(consts.MIDI_MIN, consts.MIDI_MAX + 1):
        offset = config.get_offset(midi, default_tpc(midi), NONE)
        keyboard.append((midi, midi * consts.CENTS_PER_SEMITONE + offset))
    return keyboard
