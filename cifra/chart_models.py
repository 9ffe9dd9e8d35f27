"""Data models for chord charts and their JSON-compatible dict codec."""

import uuid
from dataclasses import dataclass, field
from typing import Any, Final

from cifra.chords import ChordToken, Mode
from cifra.pitch import NoteName, as_note_name

DEFAULT_NUM_BARS: Final[int] = 4
DEFAULT_SECTION_TITLES: Final[list[str]] = ["Intro", "Verse", "Chorus"]
MAX_BEATS: Final[int] = 4

#: Serialized tonic meaning "no key established".
NO_KEY: Final[str] = "none"


def _new_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class TimeSignature:
    numerator: int = 4
    denominator: int = 4

    def __str__(self) -> str:
        return f"{self.numerator}/{self.denominator}"


@dataclass(frozen=True)
class KeyContext:
    """
    Key of a chart.

    Attributes:
        tonic: Tonic spelling, or None when no key is established.
        mode:  Major or natural minor.
    """

    tonic: NoteName | None = NoteName.C
    mode: Mode = Mode.MAJOR

    def __post_init__(self) -> None:
        tonic = self.tonic
        if tonic == NO_KEY:
            tonic = None
        object.__setattr__(self, "tonic", None if tonic is None else as_note_name(tonic))
        object.__setattr__(self, "mode", Mode(self.mode))

    @property
    def name(self) -> str:
        """Display name such as "D", "F#m" or "none"."""
        if self.tonic is None:
            return NO_KEY
        suffix = "m" if self.mode is Mode.MINOR else ""
        return f"{self.tonic.value}{suffix}"


@dataclass
class BarChord:
    """A chord placed in a bar, holding *beats* beats (1-4)."""

    chord: ChordToken
    beats: int = MAX_BEATS

    def __post_init__(self) -> None:
        if not 1 <= self.beats <= MAX_BEATS:
            raise ValueError(f"A chord must hold 1 to {MAX_BEATS} beats, got {self.beats}.")


@dataclass
class Bar:
    chords: list[BarChord] = field(default_factory=list)
    id: str = field(default_factory=_new_id)


@dataclass
class Section:
    """
    A titled run of bars. *key_shift* transposes every chord of the section
    by that many semitones on display.
    """

    title: str
    key_shift: int = 0
    bars: list[Bar] = field(default_factory=list)
    id: str = field(default_factory=_new_id)

    @classmethod
    def empty(cls, title: str, num_bars: int = DEFAULT_NUM_BARS) -> "Section":
        return cls(title=title, bars=[Bar() for _ in range(num_bars)])


@dataclass
class Chart:
    """A song's chord chart."""

    title: str = ""
    artist: str = ""
    time: TimeSignature = field(default_factory=TimeSignature)
    key: KeyContext = field(default_factory=KeyContext)
    sections: list[Section] = field(default_factory=list)
    notes: str = ""
    id: str = field(default_factory=_new_id)

    @classmethod
    def new(
        cls,
        title: str = "",
        artist: str = "",
        key: KeyContext | None = None,
    ) -> "Chart":
        """Create the starting chart: Intro, Verse and Chorus with four empty bars each."""
        return cls(
            title=title,
            artist=artist,
            key=key if key is not None else KeyContext(),
            sections=[Section.empty(title) for title in DEFAULT_SECTION_TITLES],
        )


# ------------------------------------------------------------------
# Dict codec
# ------------------------------------------------------------------

def _token_to_dict(token: ChordToken) -> dict[str, Any]:
    data: dict[str, Any] = {
        "id": token.id,
        "root": token.root.value,
        "quality": token.quality.value,
    }
    if token.label is not None:
        data["label"] = token.label
    if token.base_key is not None:
        data["baseKey"] = token.base_key.value
    return data


def _token_from_dict(data: dict[str, Any]) -> ChordToken:
    return ChordToken(
        root=data["root"],
        quality=data["quality"],
        label=data.get("label"),
        base_key=data.get("baseKey"),
        id=data.get("id") or _new_id(),
    )


def chart_to_dict(chart: Chart) -> dict[str, Any]:
    """Serialize *chart* to plain JSON-compatible values."""
    return {
        "id": chart.id,
        "title": chart.title,
        "artist": chart.artist,
        "time": {"numerator": chart.time.numerator, "denominator": chart.time.denominator},
        "key": {
            "tonic": chart.key.tonic.value if chart.key.tonic is not None else NO_KEY,
            "mode": chart.key.mode.value,
        },
        "sections": [
            {
                "id": section.id,
                "title": section.title,
                "keyShiftSemitones": section.key_shift,
                "bars": [
                    {
                        "id": bar.id,
                        "chords": [
                            {"chord": _token_to_dict(item.chord), "beats": item.beats}
                            for item in bar.chords
                        ],
                    }
                    for bar in section.bars
                ],
            }
            for section in chart.sections
        ],
        "notes": chart.notes,
    }


def chart_from_dict(data: dict[str, Any]) -> Chart:
    """
    Rebuild a Chart from ``chart_to_dict`` output.

    Raises:
        ValueError: If a note name, quality, mode or beat count is invalid.
        KeyError:   If a required field is missing.
    """
    time = data.get("time") or {}
    key = data.get("key") or {}
    return Chart(
        id=data["id"],
        title=data.get("title", ""),
        artist=data.get("artist", ""),
        time=TimeSignature(
            numerator=int(time.get("numerator", 4)),
            denominator=int(time.get("denominator", 4)),
        ),
        key=KeyContext(tonic=key.get("tonic", NO_KEY), mode=key.get("mode", Mode.MAJOR.value)),
        sections=[
            Section(
                id=section["id"],
                title=section.get("title", ""),
                key_shift=int(section.get("keyShiftSemitones", 0)),
                bars=[
                    Bar(
                        id=bar["id"],
                        chords=[
                            BarChord(chord=_token_from_dict(item["chord"]), beats=int(item["beats"]))
                            for item in bar.get("chords", [])
                        ],
                    )
                    for bar in section.get("bars", [])
                ],
            )
            for section in data.get("sections", [])
        ],
        notes=data.get("notes") or "",
    )
