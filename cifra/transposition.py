"""
Transposition of chord tokens and freehand chord labels.

Tokens are never mutated: every function returns a new string or a new token.
"""

import re

from cifra.chart_models import KeyContext
from cifra.chords import ChordToken, chord_symbol, format_chord
from cifra.pitch import NoteName, normalize, pitch_class_of
from cifra.spelling import label_pitch_class, resolve_spelling, spell_label_note

_LABEL_ROOT_RE = re.compile(r"^([A-G][#b]?)(.*)$", re.DOTALL)


def transpose_note(
    root: NoteName | str,
    semitones: int,
    prefer_sharps: bool,
    key_tonic: NoteName | str | None = None,
) -> NoteName:
    """Shift *root* by *semitones* and re-spell it with ``resolve_spelling``."""
    return resolve_spelling(normalize(pitch_class_of(root) + semitones), prefer_sharps, key_tonic)


def transpose_token(
    token: ChordToken,
    semitones: int,
    prefer_sharps: bool,
    key_tonic: NoteName | str | None = None,
) -> ChordToken:
    """
    Return a copy of *token* (new identity) shifted by *semitones*.

    For inversions the bass note is transposed on its own and the label
    rebuilt as "<chord>/<bass>". Other labels (Roman numerals) are kept.
    """
    root = transpose_note(token.root, semitones, prefer_sharps, key_tonic)
    label = token.label
    bass = token.bass
    if bass is not None:
        new_bass = transpose_note(bass, semitones, prefer_sharps, key_tonic)
        moved = token.with_fresh_id(root=root)
        label = f"{format_chord(moved)}/{new_bass.value}"
    return token.with_fresh_id(root=root, label=label)


def net_shift(token: ChordToken, key: KeyContext, key_shift: int = 0) -> int:
    """
    Semitones to move *token* by to show it in *key*, plus *key_shift*.

    A token remembering the key it was added in (``base_key``) is first moved
    from that key to the chart's current tonic, so re-keying a chart carries
    its chords along.
    """
    if token.base_key is None or key.tonic is None:
        return key_shift
    return pitch_class_of(key.tonic) - pitch_class_of(token.base_key) + key_shift


def shifted_key(key: KeyContext, key_shift: int, prefer_sharps: bool = True) -> KeyContext:
    """The chart key as seen by a viewer transposing by *key_shift* semitones."""
    if key.tonic is None or not key_shift:
        return key
    return KeyContext(tonic=transpose_note(key.tonic, key_shift, prefer_sharps), mode=key.mode)


def display_chord(
    token: ChordToken,
    key: KeyContext,
    key_shift: int = 0,
    prefer_sharps: bool = True,
    spelling_tonic: NoteName | str | None = None,
) -> str:
    """
    Symbol to display for a chart chord under the chart's current key.

    Args:
        token:          Stored chord.
        key:            Chart key; decides how far ``base_key`` tokens move.
        key_shift:      Extra semitones (section and viewer shifts).
        prefer_sharps:  Spelling preference outside the key overrides.
        spelling_tonic: Tonic whose overrides spell the result. Defaults to
                        ``key.tonic``; a viewer transposing the whole chart
                        passes the shifted tonic (see ``shifted_key``).

    Tokens without a ``base_key`` (added while no key was set) always use
    the plain tables.
    """
    if token.base_key is None:
        spelling_key = None
    else:
        spelling_key = spelling_tonic if spelling_tonic is not None else key.tonic
    shifted = transpose_token(token, net_shift(token, key, key_shift), prefer_sharps, spelling_key)
    return chord_symbol(shifted)


def transpose_label(label: str, semitones: int, prefer_flats: bool = False) -> str:
    """
    Transpose a freehand chord label such as "Am7", "F#sus4" or "G/B".

    Each half around "/" must start with a root (A-G, optionally one "#" or
    "b"); the rest of the half is kept verbatim. Roots are read and written by
    the key-blind label path in ``cifra.spelling``.

    Returns:
        The transposed label. An empty label gives "". A label whose main half
        has no root is returned unchanged; a bass half with no root is kept
        as-is.
    """
    if not label:
        return ""

    main, slash, bass = label.partition("/")
    transposed_main = _transpose_label_half(main, semitones, prefer_flats)
    if transposed_main is None:
        return label
    if not slash:
        return transposed_main

    transposed_bass = _transpose_label_half(bass, semitones, prefer_flats)
    return f"{transposed_main}/{transposed_bass if transposed_bass is not None else bass}"


def _transpose_label_half(text: str, semitones: int, prefer_flats: bool) -> str | None:
    match = _LABEL_ROOT_RE.match(text)
    if not match:
        return None
    root, rest = match.groups()
    pc = label_pitch_class(root)
    if pc is None:
        return None
    return spell_label_note(pc + semitones, prefer_flats) + rest
