"""
Spelling resolution: choosing the note name that represents a pitch class.

There are two independent paths here.

* The structured path (``resolve_spelling``) is key-aware. Keys whose
  canonical signature needs theoretical accidentals override the plain
  sharp/flat tables for specific pitch classes.

* The label path (``label_pitch_class`` / ``spell_label_note``) serves
  freehand chord labels that carry no key context. It reads any spelling
  and writes from the plain sharp or flat table only; it never consults the
  key-signature overrides. The two paths can therefore disagree for the
  exotic keys (the label path writes C where F# major would write B#).
"""

from typing import Final

from cifra.pitch import SEMITONES_PER_OCTAVE, NoteName, as_note_name, normalize

SHARP_SPELLINGS: Final[tuple[NoteName, ...]] = (
    NoteName.C,
    NoteName.C_SHARP,
    NoteName.D,
    NoteName.D_SHARP,
    NoteName.E,
    NoteName.F,
    NoteName.F_SHARP,
    NoteName.G,
    NoteName.G_SHARP,
    NoteName.A,
    NoteName.A_SHARP,
    NoteName.B,
)

FLAT_SPELLINGS: Final[tuple[NoteName, ...]] = (
    NoteName.C,
    NoteName.D_FLAT,
    NoteName.D,
    NoteName.E_FLAT,
    NoteName.E,
    NoteName.F,
    NoteName.G_FLAT,
    NoteName.G,
    NoteName.A_FLAT,
    NoteName.A,
    NoteName.B_FLAT,
    NoteName.B,
)

#: Pitch classes that exotic key signatures spell with theoretical accidentals.
KEY_SIGNATURE_SPELLINGS: Final[dict[NoteName, dict[int, NoteName]]] = {
    NoteName.G_FLAT: {
        11: NoteName.C_FLAT,
        4: NoteName.F_FLAT,
    },
    NoteName.D_FLAT: {
        11: NoteName.C_FLAT,
    },
    NoteName.C_FLAT: {
        11: NoteName.C_FLAT,
        4: NoteName.F_FLAT,
        9: NoteName.A_FLAT,
        2: NoteName.D_FLAT,
        7: NoteName.G_FLAT,
    },
    NoteName.F_SHARP: {
        5: NoteName.E_SHARP,
        0: NoteName.B_SHARP,
    },
    NoteName.C_SHARP: {
        5: NoteName.E_SHARP,
        0: NoteName.B_SHARP,
        10: NoteName.A_SHARP,
        3: NoteName.D_SHARP,
        8: NoteName.G_SHARP,
    },
}

#: Tonics whose conventional signature uses flats.
FLAT_KEYS: Final[frozenset[NoteName]] = frozenset(
    {
        NoteName.F,
        NoteName.B_FLAT,
        NoteName.E_FLAT,
        NoteName.A_FLAT,
        NoteName.D_FLAT,
        NoteName.G_FLAT,
        NoteName.C_FLAT,
    }
)


def resolve_spelling(
    pc: int,
    prefer_sharps: bool,
    key_tonic: NoteName | str | None = None,
) -> NoteName:
    """
    Spell pitch class *pc* for display.

    Args:
        pc:            Pitch class in 0..11.
        prefer_sharps: Use the sharp table (C#, D#, ...) instead of the flat one.
        key_tonic:     Tonic of the current key, if any. Gb, Db, Cb, F# and C#
                       replace specific pitch classes with the spellings their
                       signatures require (e.g. 0 -> B# in F#).

    Returns:
        The NoteName for *pc*.

    Raises:
        ValueError: If *pc* is outside 0..11 or *key_tonic* is not a spelling.
    """
    if not 0 <= pc < SEMITONES_PER_OCTAVE:
        raise ValueError(f"Pitch class must be in 0..11, got {pc}.")

    if key_tonic is not None:
        overrides = KEY_SIGNATURE_SPELLINGS.get(as_note_name(key_tonic), {})
        if pc in overrides:
            return overrides[pc]

    table = SHARP_SPELLINGS if prefer_sharps else FLAT_SPELLINGS
    return table[pc]


def prefers_sharps_for_key(tonic: NoteName | str | None) -> bool:
    """Return False for the flat keys (F, Bb, Eb, Ab, Db, Gb, Cb), True otherwise."""
    if tonic is None:
        return True
    return as_note_name(tonic) not in FLAT_KEYS


# ------------------------------------------------------------------
# Label path (no key context)
# ------------------------------------------------------------------

_SHARP_LABELS: Final[list[str]] = [note.value for note in SHARP_SPELLINGS]
_FLAT_LABELS: Final[list[str]] = [note.value for note in FLAT_SPELLINGS]


def label_pitch_class(note: str) -> int | None:
    """
    Read a root taken from a freehand chord label as a pitch class.

    Looks *note* up in the sharp table, then the flat table. Spellings in
    neither (E#, Fb, B#, Cb) are resolved as one semitone above or below the
    bare letter.

    Returns:
        The pitch class, or None when *note* does not start with A-G.
    """
    if note in _SHARP_LABELS:
        return _SHARP_LABELS.index(note)
    if note in _FLAT_LABELS:
        return _FLAT_LABELS.index(note)

    if not note or note[0] not in _SHARP_LABELS:
        return None
    letter_pc = _SHARP_LABELS.index(note[0])
    if note.endswith("b"):
        return normalize(letter_pc - 1)
    if note.endswith("#"):
        return normalize(letter_pc + 1)
    return letter_pc


def spell_label_note(pc: int, prefer_flats: bool = False) -> str:
    """Spell *pc* (any integer, wrapped mod 12) from the plain sharp or flat table."""
    table = _FLAT_LABELS if prefer_flats else _SHARP_LABELS
    return table[normalize(pc)]
