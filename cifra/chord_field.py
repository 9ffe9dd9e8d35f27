"""
Chord-field builders: the palettes of chords offered for a key.

All builders are pure. Each call returns new ChordToken objects with their own
identities; the pitch content depends only on the arguments.
"""

from dataclasses import dataclass, field
from typing import Final

from cifra.chart_models import KeyContext
from cifra.chords import ChordToken, Mode, Quality, format_chord
from cifra.pitch import NoteName, normalize, pitch_class_of
from cifra.spelling import FLAT_SPELLINGS, SHARP_SPELLINGS, resolve_spelling

# ── Scale and triad tables ──────────────────────────────────────────────────

#: Whole/half step patterns. Only the first six steps are walked.
MAJOR_STEPS: Final[list[int]] = [2, 2, 1, 2, 2, 2, 1]
MINOR_STEPS: Final[list[int]] = [2, 1, 2, 2, 1, 2, 2]

DIATONIC_QUALITIES: Final[dict[Mode, list[Quality]]] = {
    Mode.MAJOR: [
        Quality.MAJ, Quality.MIN, Quality.MIN, Quality.MAJ,
        Quality.MAJ, Quality.MIN, Quality.DIM,
    ],
    Mode.MINOR: [
        Quality.MIN, Quality.DIM, Quality.MAJ, Quality.MIN,
        Quality.MIN, Quality.MAJ, Quality.MAJ,
    ],
}

ROMAN_NUMERALS: Final[dict[Mode, list[str]]] = {
    Mode.MAJOR: ["I", "ii", "iii", "IV", "V", "vi", "vii°"],
    Mode.MINOR: ["i", "ii°", "III", "iv", "v", "VI", "VII"],
}

# ── Modal interchange catalogs: (semitones above tonic, quality, label) ─────

BORROWED_MAJOR: Final[list[tuple[int, Quality, str]]] = [
    (3, Quality.MAJ, "bIII"),
    (5, Quality.MIN, "iv"),
    (8, Quality.MAJ, "bVI"),
    (10, Quality.MAJ, "bVII"),
    # Offset 2 (D° in C) matches the ii° label; +1 would give C#°.
    (2, Quality.DIM, "ii° (harm.)"),
]

BORROWED_MINOR: Final[list[tuple[int, Quality, str]]] = [
    (7, Quality.MAJ, "V (harm.)"),
    (10, Quality.MAJ, "bVII"),
    (5, Quality.MAJ, "bIII+ (melód.)"),
]

#: Qualities offered for every root when no key is set.
PALETTE_QUALITIES: Final[list[Quality]] = [
    Quality.MAJ,
    Quality.MIN,
    Quality.DOM7,
    Quality.MAJ7,
    Quality.MIN7,
    Quality.DIM,
    Quality.SUS4,
]


def build_scale(tonic: NoteName | str, mode: Mode | str) -> list[int]:
    """Return the seven pitch classes of the diatonic scale on *tonic*."""
    steps = MAJOR_STEPS if Mode(mode) is Mode.MAJOR else MINOR_STEPS
    current = pitch_class_of(tonic)
    pitch_classes = [current]
    for step in steps[:6]:
        current += step
        pitch_classes.append(normalize(current))
    return pitch_classes


def diatonic_triads(
    tonic: NoteName | str,
    mode: Mode | str,
    prefer_sharps: bool,
    key_tonic: NoteName | str | None = None,
) -> list[ChordToken]:
    """
    Build the seven diatonic triads of the key, labelled with Roman numerals.

    Roots are spelled with ``resolve_spelling`` using *prefer_sharps* and
    *key_tonic*.
    """
    mode = Mode(mode)
    scale = build_scale(tonic, mode)
    return [
        ChordToken(
            root=resolve_spelling(pc, prefer_sharps, key_tonic),
            quality=quality,
            label=numeral,
        )
        for pc, quality, numeral in zip(scale, DIATONIC_QUALITIES[mode], ROMAN_NUMERALS[mode])
    ]


def borrowed_chords(
    tonic: NoteName | str,
    mode: Mode | str,
    prefer_sharps: bool,
    key_tonic: NoteName | str | None = None,
) -> list[ChordToken]:
    """Return the fixed modal-interchange catalog for a major or minor tonic."""
    catalog = BORROWED_MAJOR if Mode(mode) is Mode.MAJOR else BORROWED_MINOR
    tonic_pc = pitch_class_of(tonic)
    return [
        ChordToken(
            root=resolve_spelling(normalize(tonic_pc + offset), prefer_sharps, key_tonic),
            quality=quality,
            label=label,
        )
        for offset, quality, label in catalog
    ]


def common_inversions(
    tonic: NoteName | str,
    mode: Mode | str,
    prefer_sharps: bool,
    key_tonic: NoteName | str | None = None,
) -> list[ChordToken]:
    """
    Pair each diatonic triad with the scale degree two steps above its root
    as the bass, labelled "<chord>/<bass>" (C major: "C/E", "Dm/F", ...).
    """
    scale = build_scale(tonic, mode)
    triads = diatonic_triads(tonic, mode, prefer_sharps, key_tonic)
    inversions: list[ChordToken] = []
    for index, triad in enumerate(triads):
        bass = resolve_spelling(scale[(index + 2) % 7], prefer_sharps, key_tonic)
        inversions.append(triad.with_fresh_id(label=f"{format_chord(triad)}/{bass.value}"))
    return inversions


def full_palette(prefer_sharps: bool) -> list[ChordToken]:
    """Every root of the sharp or flat table combined with PALETTE_QUALITIES."""
    roots = SHARP_SPELLINGS if prefer_sharps else FLAT_SPELLINGS
    return [ChordToken(root=root, quality=quality) for root in roots for quality in PALETTE_QUALITIES]


@dataclass
class ChordPalette:
    """
    The chord bank offered while editing a chart.

    With a key set, ``diatonic``, ``borrowed`` and ``inversions`` are filled
    and ``chromatic`` is empty. Without a key only ``chromatic`` is filled.
    """

    diatonic: list[ChordToken] = field(default_factory=list)
    borrowed: list[ChordToken] = field(default_factory=list)
    inversions: list[ChordToken] = field(default_factory=list)
    chromatic: list[ChordToken] = field(default_factory=list)

    @classmethod
    def for_key(cls, key: KeyContext, prefer_sharps: bool) -> "ChordPalette":
        if key.tonic is None:
            return cls(chromatic=full_palette(prefer_sharps))
        return cls(
            diatonic=diatonic_triads(key.tonic, key.mode, prefer_sharps, key.tonic),
            borrowed=borrowed_chords(key.tonic, key.mode, prefer_sharps, key.tonic),
            inversions=common_inversions(key.tonic, key.mode, prefer_sharps, key.tonic),
        )

    @property
    def bank(self) -> list[ChordToken]:
        """Main bank: the diatonic triads, or the chromatic palette without a key."""
        return self.diatonic if self.diatonic else self.chromatic
