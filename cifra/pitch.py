"""Pitch-class model: note spellings and integer pitch classes (C = 0)."""

from enum import Enum

SEMITONES_PER_OCTAVE = 12


class NoteName(str, Enum):
    """
    Closed alphabet of note spellings accepted by the engine.

    Besides the naturals, sharps and flats, the theoretical spellings
    E#, Fb, B# and Cb are members because some key signatures require them.
    Constructing a NoteName from any other string raises ValueError.
    """

    C = "C"
    C_SHARP = "C#"
    D_FLAT = "Db"
    D = "D"
    D_SHARP = "D#"
    E_FLAT = "Eb"
    E = "E"
    E_SHARP = "E#"
    F_FLAT = "Fb"
    F = "F"
    F_SHARP = "F#"
    G_FLAT = "Gb"
    G = "G"
    G_SHARP = "G#"
    A_FLAT = "Ab"
    A = "A"
    A_SHARP = "A#"
    B_FLAT = "Bb"
    B = "B"
    B_SHARP = "B#"
    C_FLAT = "Cb"

    def __str__(self) -> str:
        return self.value


_PITCH_CLASSES: dict[NoteName, int] = {
    NoteName.C: 0,
    NoteName.C_SHARP: 1,
    NoteName.D_FLAT: 1,
    NoteName.D: 2,
    NoteName.D_SHARP: 3,
    NoteName.E_FLAT: 3,
    NoteName.E: 4,
    NoteName.F_FLAT: 4,
    NoteName.E_SHARP: 5,
    NoteName.F: 5,
    NoteName.F_SHARP: 6,
    NoteName.G_FLAT: 6,
    NoteName.G: 7,
    NoteName.G_SHARP: 8,
    NoteName.A_FLAT: 8,
    NoteName.A: 9,
    NoteName.A_SHARP: 10,
    NoteName.B_FLAT: 10,
    NoteName.B: 11,
    NoteName.C_FLAT: 11,
    NoteName.B_SHARP: 0,
}


def as_note_name(note: NoteName | str) -> NoteName:
    """Coerce a spelling string to a NoteName, raising ValueError if unknown."""
    if isinstance(note, NoteName):
        return note
    try:
        return NoteName(note)
    except ValueError:
        raise ValueError(f"Unknown note name '{note}'.") from None


def pitch_class_of(note: NoteName | str) -> int:
    """
    Return the acoustic pitch class (0-11) of a spelling.

    Enharmonic spellings share a pitch class: ``pitch_class_of("C#") ==
    pitch_class_of("Db") == 1`` and ``pitch_class_of("B#") == 0``.

    Raises:
        ValueError: If *note* is not a recognised spelling.
    """
    return _PITCH_CLASSES[as_note_name(note)]


def normalize(n: int) -> int:
    """Map any integer, however negative or large, into 0..11."""
    return ((n % SEMITONES_PER_OCTAVE) + SEMITONES_PER_OCTAVE) % SEMITONES_PER_OCTAVE
