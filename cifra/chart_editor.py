"""ChartEditor: editing operations on a Chart with an active section/bar cursor."""

from cifra.chart_models import DEFAULT_NUM_BARS, MAX_BEATS, Bar, BarChord, Chart, KeyContext, Section
from cifra.chord_field import ChordPalette
from cifra.chords import ChordToken, Mode
from cifra.pitch import NoteName
from cifra.transposition import display_chord, shifted_key


class ChartEditor:
    """
    Edits a Chart in place.

    The editor keeps a cursor (active section, active bar) that chord
    insertion targets, and the sharp/flat preference used for palettes and
    display. Operations that would leave a chart without sections or a
    section without bars raise ValueError.
    """

    def __init__(self, chart: Chart, prefer_sharps: bool = True) -> None:
        if not chart.sections:
            raise ValueError("A chart needs at least one section to be edited.")
        self.chart = chart
        self.prefer_sharps = prefer_sharps
        self.active_section_id = chart.sections[0].id
        self.active_bar_index = 0

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _section_index(self, section_id: str) -> int:
        for index, section in enumerate(self.chart.sections):
            if section.id == section_id:
                return index
        raise ValueError(f"No section with id '{section_id}'.")

    def _bar(self, bar_index: int) -> Bar:
        bars = self.active_section.bars
        if not 0 <= bar_index < len(bars):
            raise ValueError(f"Bar {bar_index + 1} does not exist (section has {len(bars)}).")
        return bars[bar_index]

    def _bar_chord(self, bar_index: int, chord_index: int) -> BarChord:
        chords = self._bar(bar_index).chords
        if not 0 <= chord_index < len(chords):
            raise ValueError(f"Chord {chord_index + 1} does not exist in bar {bar_index + 1}.")
        return chords[chord_index]

    # ------------------------------------------------------------------
    # Cursor
    # ------------------------------------------------------------------

    @property
    def active_section(self) -> Section:
        return self.chart.sections[self._section_index(self.active_section_id)]

    @property
    def active_bar(self) -> Bar:
        return self._bar(self.active_bar_index)

    def select_section(self, section_id: str) -> None:
        """Make *section_id* active; the bar cursor goes back to its first bar."""
        self._section_index(section_id)
        self.active_section_id = section_id
        self.active_bar_index = 0

    def select_bar(self, bar_index: int) -> None:
        self._bar(bar_index)
        self.active_bar_index = bar_index

    def next_bar(self) -> None:
        """Move to the next bar, appending one when the cursor is on the last."""
        if self.active_bar_index == len(self.active_section.bars) - 1:
            self.add_bar()
        else:
            self.active_bar_index += 1

    def next_section(self) -> None:
        """Move to the next section, appending one when the cursor is on the last."""
        index = self._section_index(self.active_section_id)
        if index == len(self.chart.sections) - 1:
            self.add_section()
        else:
            self.select_section(self.chart.sections[index + 1].id)

    # ------------------------------------------------------------------
    # Sections and bars
    # ------------------------------------------------------------------

    def add_section(self, title: str | None = None) -> Section:
        """Append a section of empty bars and make it active."""
        section = Section.empty(title or f"Section {len(self.chart.sections) + 1}", DEFAULT_NUM_BARS)
        self.chart.sections.append(section)
        self.select_section(section.id)
        return section

    def delete_section(self, section_id: str) -> None:
        """Remove a section; the previous one (or the first) becomes active."""
        if len(self.chart.sections) == 1:
            raise ValueError("Cannot delete the only section of a chart.")
        index = self._section_index(section_id)
        del self.chart.sections[index]
        self.select_section(self.chart.sections[max(0, index - 1)].id)

    def rename_section(self, section_id: str, title: str) -> None:
        self.chart.sections[self._section_index(section_id)].title = title

    def set_section_key_shift(self, section_id: str, semitones: int) -> None:
        self.chart.sections[self._section_index(section_id)].key_shift = semitones

    def add_bar(self) -> Bar:
        """Append an empty bar to the active section and select it."""
        bar = Bar()
        self.active_section.bars.append(bar)
        self.active_bar_index = len(self.active_section.bars) - 1
        return bar

    def remove_bar(self, bar_index: int) -> None:
        """Remove a bar of the active section, keeping the cursor in range."""
        bars = self.active_section.bars
        if len(bars) == 1:
            raise ValueError("Cannot remove the only bar of a section.")
        self._bar(bar_index)
        del bars[bar_index]
        if self.active_bar_index >= len(bars):
            self.active_bar_index = max(0, len(bars) - 1)

    # ------------------------------------------------------------------
    # Chords
    # ------------------------------------------------------------------

    def add_chord(self, token: ChordToken, beats: int = MAX_BEATS) -> BarChord:
        """
        Append a copy of *token* to the active bar.

        The copy gets a new identity and remembers the chart's current tonic
        as its ``base_key`` (none when the chart has no key).
        """
        item = BarChord(chord=token.with_fresh_id(base_key=self.chart.key.tonic), beats=beats)
        self.active_bar.chords.append(item)
        return item

    def remove_chord(self, bar_index: int, chord_index: int) -> None:
        self._bar_chord(bar_index, chord_index)
        del self._bar(bar_index).chords[chord_index]

    def remove_chord_by_id(self, section_id: str, bar_id: str, chord_id: str) -> None:
        """Drop the chord with *chord_id* from a bar. Unknown bar or chord ids are ignored."""
        section = self.chart.sections[self._section_index(section_id)]
        for bar in section.bars:
            if bar.id == bar_id:
                bar.chords = [item for item in bar.chords if item.chord.id != chord_id]

    def set_chord_beats(self, bar_index: int, chord_index: int, beats: int) -> None:
        if not 1 <= beats <= MAX_BEATS:
            raise ValueError(f"A chord must hold 1 to {MAX_BEATS} beats, got {beats}.")
        self._bar_chord(bar_index, chord_index).beats = beats

    def cycle_chord_beats(self, bar_index: int, chord_index: int) -> int:
        """Advance a chord's beat count 1 -> 2 -> 3 -> 4 -> 1 and return it."""
        item = self._bar_chord(bar_index, chord_index)
        item.beats = item.beats % MAX_BEATS + 1
        return item.beats

    # ------------------------------------------------------------------
    # Key and display
    # ------------------------------------------------------------------

    def set_key(self, tonic: NoteName | str | None, mode: Mode | str | None = None) -> None:
        """Re-key the chart. Stored chords are untouched; display follows the new key."""
        self.chart.key = KeyContext(tonic=tonic, mode=mode if mode is not None else self.chart.key.mode)

    def palette(self) -> ChordPalette:
        return ChordPalette.for_key(self.chart.key, self.prefer_sharps)

    def displayed_section(self, section: Section, key_shift: int = 0) -> list[list[str]]:
        """Chord symbols of each bar of *section*, shifted by its own and *key_shift* semitones."""
        tonic = shifted_key(self.chart.key, key_shift, self.prefer_sharps).tonic
        return [
            [
                display_chord(
                    item.chord,
                    self.chart.key,
                    section.key_shift + key_shift,
                    self.prefer_sharps,
                    spelling_tonic=tonic,
                )
                for item in bar.chords
            ]
            for bar in section.bars
        ]
