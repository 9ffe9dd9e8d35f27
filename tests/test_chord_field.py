"""Unit tests for chord tokens, the formatter and the palette builders."""

import pytest

from cifra.chart_models import KeyContext
from cifra.chord_field import (
    ChordPalette,
    borrowed_chords,
    build_scale,
    common_inversions,
    diatonic_triads,
    full_palette,
)
from cifra.chords import ChordToken, Mode, Quality, chord_symbol, format_chord, parse_chord_symbol
from cifra.pitch import NoteName


# ---------------------------------------------------------------------------
# Tokens and formatter
# ---------------------------------------------------------------------------

@pytest.mark.parametrize(
    "root, quality, expected",
    [
        ("C", Quality.MAJ, "C"),
        ("A", Quality.MIN, "Am"),
        ("B", Quality.DIM, "B°"),
        ("G", Quality.AUG, "G+"),
        ("G", Quality.DOM7, "G7"),
        ("F", Quality.MAJ7, "Fmaj7"),
        ("D", Quality.MIN7, "Dm7"),
        ("D", Quality.SUS2, "Dsus2"),
        ("C", Quality.SUS4, "Csus4"),
        ("E#", Quality.MIN, "E#m"),
    ],
)
def test_format_chord(root: str, quality: Quality, expected: str) -> None:
    assert format_chord(ChordToken(root=root, quality=quality)) == expected


def test_token_coerces_strings_to_enums() -> None:
    token = ChordToken(root="Bb", quality="min7", base_key="F")
    assert token.root is NoteName.B_FLAT
    assert token.quality is Quality.MIN7
    assert token.base_key is NoteName.F


def test_token_rejects_unknown_values() -> None:
    with pytest.raises(ValueError):
        ChordToken(root="H", quality=Quality.MAJ)
    with pytest.raises(ValueError):
        ChordToken(root="C", quality="major")


def test_tokens_with_same_content_are_distinct() -> None:
    first = ChordToken(root="C", quality=Quality.MAJ)
    second = ChordToken(root="C", quality=Quality.MAJ)
    assert first.id != second.id
    assert first != second


def test_with_fresh_id_copies_content() -> None:
    token = ChordToken(root="D", quality=Quality.MIN, label="ii")
    copy = token.with_fresh_id(base_key="C")
    assert copy.id != token.id
    assert (copy.root, copy.quality, copy.label, copy.base_key) == ("D", "min", "ii", "C")
    assert token.base_key is None


def test_inversion_properties() -> None:
    inversion = ChordToken(root="G", quality=Quality.MAJ, label="G/B")
    assert inversion.is_inversion
    assert inversion.bass is NoteName.B
    assert chord_symbol(inversion) == "G/B"

    numeral = ChordToken(root="G", quality=Quality.MAJ, label="V")
    assert not numeral.is_inversion
    assert numeral.bass is None
    assert chord_symbol(numeral) == "G"


@pytest.mark.parametrize(
    "symbol, root, quality",
    [("Am7", "A", Quality.MIN7), ("Bb", "Bb", Quality.MAJ), ("F#°", "F#", Quality.DIM), ("Ebmaj7", "Eb", Quality.MAJ7)],
)
def test_parse_chord_symbol(symbol: str, root: str, quality: Quality) -> None:
    token = parse_chord_symbol(symbol)
    assert token.root == root
    assert token.quality is quality
    assert format_chord(token) == symbol


@pytest.mark.parametrize("symbol", ["Hm", "Cxyz", "", "m7"])
def test_parse_chord_symbol_rejects_garbage(symbol: str) -> None:
    with pytest.raises(ValueError):
        parse_chord_symbol(symbol)


# ---------------------------------------------------------------------------
# Scale and diatonic triads
# ---------------------------------------------------------------------------

def test_build_scale_major_and_minor() -> None:
    assert build_scale("C", "major") == [0, 2, 4, 5, 7, 9, 11]
    assert build_scale("A", Mode.MINOR) == [9, 11, 0, 2, 4, 5, 7]
    assert build_scale("B", "major") == [11, 1, 3, 4, 6, 8, 10]


def test_diatonic_triads_c_major() -> None:
    triads = diatonic_triads("C", "major", True)
    assert [t.quality for t in triads] == ["maj", "min", "min", "maj", "maj", "min", "dim"]
    assert [t.root for t in triads] == ["C", "D", "E", "F", "G", "A", "B"]
    assert [t.label for t in triads] == ["I", "ii", "iii", "IV", "V", "vi", "vii°"]


def test_diatonic_triads_a_minor() -> None:
    triads = diatonic_triads("A", "minor", True)
    assert [format_chord(t) for t in triads] == ["Am", "B°", "C", "Dm", "Em", "F", "G"]
    assert [t.label for t in triads] == ["i", "ii°", "III", "iv", "v", "VI", "VII"]


def test_diatonic_triads_f_sharp_major_uses_e_sharp() -> None:
    triads = diatonic_triads("F#", "major", True, "F#")
    assert [t.root.value for t in triads] == ["F#", "G#", "A#", "B", "C#", "D#", "E#"]


def test_diatonic_triads_g_flat_major_uses_c_flat() -> None:
    triads = diatonic_triads("Gb", "major", False, "Gb")
    assert [t.root.value for t in triads] == ["Gb", "Ab", "Bb", "Cb", "Db", "Eb", "F"]


def test_diatonic_triads_without_key_context_use_plain_table() -> None:
    triads = diatonic_triads("F#", "major", True)
    assert triads[6].root == "F"


# ---------------------------------------------------------------------------
# Borrowed chords and inversions
# ---------------------------------------------------------------------------

def test_borrowed_chords_c_major() -> None:
    chords = borrowed_chords("C", "major", False, "C")
    assert [c.label for c in chords] == ["bIII", "iv", "bVI", "bVII", "ii° (harm.)"]
    assert [c.root.value for c in chords] == ["Eb", "F", "Ab", "Bb", "D"]
    assert [c.quality for c in chords] == ["maj", "min", "maj", "maj", "dim"]


def test_borrowed_chords_a_minor() -> None:
    chords = borrowed_chords("A", "minor", True, "A")
    assert [(format_chord(c), c.label) for c in chords] == [
        ("E", "V (harm.)"),
        ("G", "bVII"),
        ("D", "bIII+ (melód.)"),
    ]


def test_borrowed_chords_respect_key_overrides() -> None:
    chords = borrowed_chords("Db", "major", False, "Db")
    # bVI of Db is pitch class 9 (A), spelled from the flat table.
    assert chords[2].root == "A"
    chords = borrowed_chords("C#", "major", True, "C#")
    # bIII of C# is pitch class 4.
    assert chords[0].root == "E"


def test_common_inversions_c_major() -> None:
    inversions = common_inversions("C", "major", True, "C")
    assert [i.label for i in inversions] == ["C/E", "Dm/F", "Em/G", "F/A", "G/B", "Am/C", "B°/D"]
    assert inversions[0].root == "C"
    assert inversions[0].quality is Quality.MAJ


def test_common_inversions_a_minor() -> None:
    inversions = common_inversions("A", "minor", True, "A")
    assert inversions[0].label == "Am/C"
    assert inversions[6].label == "G/B"


def test_common_inversions_f_sharp_major_spells_bass_in_key() -> None:
    inversions = common_inversions("F#", "major", True, "F#")
    assert inversions[3].label == "B/D#"
    assert inversions[5].label == "D#m/F#"
    assert inversions[4].label == "C#/E#"


# ---------------------------------------------------------------------------
# Palettes
# ---------------------------------------------------------------------------

def test_full_palette_size_and_spelling() -> None:
    sharps = full_palette(True)
    flats = full_palette(False)
    assert len(sharps) == 84
    assert format_chord(sharps[0]) == "C"
    assert {c.root.value for c in sharps} >= {"C#", "F#"}
    assert "Db" in {c.root.value for c in flats}
    assert {c.quality for c in sharps} == {"maj", "min", "dom7", "maj7", "min7", "dim", "sus4"}


def test_palette_without_key_is_chromatic() -> None:
    palette = ChordPalette.for_key(KeyContext(tonic=None), prefer_sharps=True)
    assert palette.diatonic == []
    assert palette.borrowed == []
    assert len(palette.chromatic) == 84
    assert palette.bank is palette.chromatic


def test_palette_with_key() -> None:
    palette = ChordPalette.for_key(KeyContext(tonic="G", mode="major"), prefer_sharps=True)
    assert [format_chord(c) for c in palette.bank] == ["G", "Am", "Bm", "C", "D", "Em", "F#°"]
    assert len(palette.borrowed) == 5
    assert palette.inversions[0].label == "G/B"
    assert palette.chromatic == []


def test_builders_return_fresh_identities() -> None:
    first = diatonic_triads("C", "major", True)
    second = diatonic_triads("C", "major", True)
    assert [format_chord(c) for c in first] == [format_chord(c) for c in second]
    assert {c.id for c in first}.isdisjoint({c.id for c in second})
