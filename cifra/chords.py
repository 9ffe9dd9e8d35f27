"""Chord tokens, qualities, modes and the chord symbol formatter."""

import re
import uuid
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Final

from cifra.pitch import NoteName, as_note_name


class Mode(str, Enum):
    """Key mode. Minor is the natural (aeolian) minor."""

    MAJOR = "major"
    MINOR = "minor"

    def __str__(self) -> str:
        return self.value


class Quality(str, Enum):
    """Chord quality: determines the display suffix."""

    MAJ = "maj"
    MIN = "min"
    DIM = "dim"
    AUG = "aug"
    DOM7 = "dom7"
    MAJ7 = "maj7"
    MIN7 = "min7"
    SUS2 = "sus2"
    SUS4 = "sus4"

    def __str__(self) -> str:
        return self.value


QUALITY_SUFFIXES: Final[dict[Quality, str]] = {
    Quality.MAJ: "",
    Quality.MIN: "m",
    Quality.DIM: "°",
    Quality.AUG: "+",
    Quality.DOM7: "7",
    Quality.MAJ7: "maj7",
    Quality.MIN7: "m7",
    Quality.SUS2: "sus2",
    Quality.SUS4: "sus4",
}

_SUFFIX_QUALITIES: Final[dict[str, Quality]] = {
    suffix: quality for quality, suffix in QUALITY_SUFFIXES.items()
}

_SYMBOL_RE = re.compile(r"^([A-G][#b]?)(.*)$")


def _new_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class ChordToken:
    """
    A chord as placed in a palette or a bar.

    Attributes:
        root:     Spelling of the chord root.
        quality:  Chord quality.
        label:    Optional annotation: a Roman numeral ("IV", "bVII") or, for
                  inversions, the full slash symbol ("C/E").
        base_key: Tonic of the chart key the root was spelled in when the
                  token was added to a chart. Display transposes from it.
        id:       Opaque identity. Two tokens with the same musical content
                  are still distinct entries.
    """

    root: NoteName
    quality: Quality
    label: str | None = None
    base_key: NoteName | None = None
    id: str = field(default_factory=_new_id)

    def __post_init__(self) -> None:
        object.__setattr__(self, "root", as_note_name(self.root))
        object.__setattr__(self, "quality", Quality(self.quality))
        if self.base_key is not None:
            object.__setattr__(self, "base_key", as_note_name(self.base_key))

    @property
    def is_inversion(self) -> bool:
        return self.label is not None and "/" in self.label

    @property
    def bass(self) -> NoteName | None:
        """Bass note after the slash of an inversion label."""
        if not self.is_inversion:
            return None
        assert self.label is not None
        return as_note_name(self.label.split("/", maxsplit=1)[1])

    def with_fresh_id(self, **changes: Any) -> "ChordToken":
        """Copy this token under a new identity, optionally changing fields."""
        return replace(self, id=_new_id(), **changes)


def format_chord(token: ChordToken) -> str:
    """Render a token as its chord symbol: root followed by the quality suffix."""
    return f"{token.root.value}{QUALITY_SUFFIXES[token.quality]}"


def chord_symbol(token: ChordToken) -> str:
    """Symbol shown for a token: the slash label for inversions, else ``format_chord``."""
    if token.is_inversion:
        assert token.label is not None
        return token.label
    return format_chord(token)


def parse_chord_symbol(symbol: str) -> ChordToken:
    """
    Parse a symbol produced by ``format_chord`` ("Am7", "G", "F#°") into a token.

    Raises:
        ValueError: If the root is not a spelling or the suffix is not a known quality.
    """
    match = _SYMBOL_RE.match(symbol.strip())
    if not match:
        raise ValueError(f"Cannot read a chord root from '{symbol}'.")
    root, suffix = match.groups()
    quality = _SUFFIX_QUALITIES.get(suffix)
    if quality is None:
        known = ", ".join(repr(s) for s in _SUFFIX_QUALITIES)
        raise ValueError(f"Unknown chord suffix '{suffix}' in '{symbol}'. Use one of: {known}.")
    return ChordToken(root=as_note_name(root), quality=quality)
