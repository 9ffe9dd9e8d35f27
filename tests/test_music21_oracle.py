"""Cross-check the pitch-class table and scales against music21."""

import pytest

from cifra.chord_field import build_scale
from cifra.pitch import NoteName, pitch_class_of

music21 = pytest.importorskip("music21")


def _m21_name(note: NoteName) -> str:
    # music21 writes flats as "-".
    return note.value.replace("b", "-")


@pytest.mark.integration
def test_pitch_classes_match_music21() -> None:
    for note in NoteName:
        assert pitch_class_of(note) == music21.pitch.Pitch(_m21_name(note)).pitchClass


@pytest.mark.integration
@pytest.mark.parametrize("tonic", ["C", "G", "Eb", "F#", "Db"])
@pytest.mark.parametrize("mode", ["major", "minor"])
def test_scales_match_music21(tonic: str, mode: str) -> None:
    key = music21.key.Key(_m21_name(NoteName(tonic)), mode)
    expected = [p.pitchClass for p in key.getPitches()[:7]]
    assert build_scale(tonic, mode) == expected

