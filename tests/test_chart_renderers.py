"""Unit tests for chart renderers and ChartExporter."""

from pathlib import Path

import pytest

from cifra.chart_editor import ChartEditor
from cifra.chart_exporter import ChartExporter
from cifra.chart_models import Chart, KeyContext
from cifra.chart_renderers import HtmlChartRenderer, TextChartRenderer, build_chart_view
from cifra.chords import ChordToken, Quality


def _sample_chart(title: str = "My Song", tonic: str = "C") -> Chart:
    editor = ChartEditor(Chart.new(title=title, artist="The Band", key=KeyContext(tonic=tonic)))
    palette = editor.palette()
    editor.add_chord(palette.diatonic[0], beats=2)
    editor.add_chord(palette.diatonic[4], beats=2)
    editor.next_bar()
    editor.add_chord(palette.inversions[0])
    editor.next_section()
    editor.add_chord(palette.borrowed[3])
    editor.chart.notes = "Repeat chorus twice"
    return editor.chart


# ---------------------------------------------------------------------------
# View
# ---------------------------------------------------------------------------

def test_view_resolves_chords() -> None:
    view = build_chart_view(_sample_chart())
    assert view.key_name == "C"
    assert view.time_signature == "4/4"
    assert view.sections[0].bars[:2] == [["C", "G"], ["C/E"]]
    assert view.sections[1].bars[0] == ["A#"]


def test_view_shift_moves_key_and_chords() -> None:
    view = build_chart_view(_sample_chart(), key_shift=2)
    assert view.key_name == "D"
    assert view.sections[0].bars[:2] == [["D", "A"], ["D/F#"]]


def test_view_uses_flats_for_flat_keys() -> None:
    view = build_chart_view(_sample_chart(tonic="F"))
    assert view.key_name == "F"
    assert view.sections[0].bars[0] == ["F", "C"]
    assert view.sections[1].bars[0] == ["Eb"]


def test_view_preference_override() -> None:
    view = build_chart_view(_sample_chart(), key_shift=1, prefer_sharps=False)
    assert view.key_name == "Db"
    assert view.sections[0].bars[0] == ["Db", "Ab"]


def test_view_minor_key_name() -> None:
    chart = Chart.new(key=KeyContext(tonic="A", mode="minor"))
    assert build_chart_view(chart, key_shift=-2).key_name == "Gm"


def test_view_shift_spells_in_the_shifted_key() -> None:
    editor = ChartEditor(Chart.new(key=KeyContext(tonic="F#")))
    editor.add_chord(ChordToken(root="F#", quality=Quality.MAJ), beats=2)
    editor.add_chord(ChordToken(root="B", quality=Quality.MAJ), beats=2)

    assert build_chart_view(editor.chart).sections[0].bars[0] == ["F#", "B"]
    view = build_chart_view(editor.chart, key_shift=6)
    assert view.key_name == "C"
    assert view.sections[0].bars[0] == ["C", "F"]


# ---------------------------------------------------------------------------
# Text renderer
# ---------------------------------------------------------------------------

def test_text_renderer_layout() -> None:
    content = TextChartRenderer().render(_sample_chart())
    lines = content.splitlines()
    assert lines[0] == "My Song"
    assert lines[1] == "The Band"
    assert lines[2] == "Key: C  |  Time: 4/4"
    assert "[Intro]" in lines
    assert "| C G | C/E | - | - |" in lines
    assert content.endswith("Repeat chorus twice\n")


def test_text_renderer_untitled() -> None:
    content = TextChartRenderer().render(Chart.new())
    assert content.startswith("Untitled\n")


# ---------------------------------------------------------------------------
# HTML renderer
# ---------------------------------------------------------------------------

def test_html_title_in_title_tag_and_h1() -> None:
    html = HtmlChartRenderer().render(_sample_chart())
    assert "<title>My Song</title>" in html
    assert "<h1>My Song</h1>" in html


def test_html_empty_title_no_h1() -> None:
    html = HtmlChartRenderer().render(_sample_chart(title=""))
    assert "<h1>" not in html
    assert "<title>Chord chart</title>" in html


def test_html_escapes_text() -> None:
    html = HtmlChartRenderer().render(_sample_chart(title="<Fur> & Feathers"))
    assert "&lt;Fur&gt; &amp; Feathers" in html


def test_html_sections_and_bars() -> None:
    html = HtmlChartRenderer().render(_sample_chart())
    assert html.count('<div class="section">') == 3
    assert '<span class="bar">C G</span>' in html
    assert '<span class="bar">C/E</span>' in html
    assert "Key: C" in html


def test_html_print_styles_present() -> None:
    html = HtmlChartRenderer().render(_sample_chart())
    assert html.startswith("<!DOCTYPE html>")
    assert "@media print" in html
    assert "page-break-inside: avoid" in html
    assert html.rstrip().endswith("</html>")


def test_html_diminished_symbol_survives() -> None:
    editor = ChartEditor(Chart.new(title="Dim"))
    editor.add_chord(ChordToken(root="B", quality=Quality.DIM))
    assert '<span class="bar">B°</span>' in HtmlChartRenderer().render(editor.chart)


# ---------------------------------------------------------------------------
# Exporter
# ---------------------------------------------------------------------------

def test_exporter_rejects_unknown_format() -> None:
    with pytest.raises(ValueError):
        ChartExporter(output_format="pdf")


def test_exporter_normalizes_format() -> None:
    exporter = ChartExporter(output_format=" HTML ")
    assert exporter.output_format == "html"
    assert exporter.default_extension == ".html"
    assert ChartExporter("text").default_extension == ".txt"


def test_exporter_writes_file(tmp_path: Path) -> None:
    out = tmp_path / "song.txt"
    ChartExporter("text").export(_sample_chart(), str(out), key_shift=2)
    content = out.read_text(encoding="utf-8")
    assert "Key: D" in content
    assert "| D A | D/F# | - | - |" in content
