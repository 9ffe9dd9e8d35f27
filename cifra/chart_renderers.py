"""Renderer implementations for printable chart output formats."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from cifra.chart_models import Chart
from cifra.spelling import prefers_sharps_for_key
from cifra.transposition import display_chord, shifted_key


def _escape_html(text: str) -> str:
    """Escape the three characters that are unsafe in HTML text content."""
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


@dataclass(frozen=True)
class SectionView:
    """A section as displayed: its title and the chord symbols of each bar."""

    title: str
    bars: list[list[str]]


@dataclass(frozen=True)
class ChartView:
    """Neutral display representation consumed by every renderer."""

    title: str
    artist: str
    key_name: str
    time_signature: str
    sections: list[SectionView]
    notes: str


def build_chart_view(chart: Chart, key_shift: int = 0, prefer_sharps: bool | None = None) -> ChartView:
    """
    Resolve every chord of *chart* to its display symbol.

    Args:
        chart:         Chart to display.
        key_shift:     Extra semitones applied on top of each section's shift.
        prefer_sharps: Spelling preference. None derives it from the chart
                       tonic (flat keys spell with flats).
    """
    if prefer_sharps is None:
        prefer_sharps = prefers_sharps_for_key(chart.key.tonic)

    key = shifted_key(chart.key, key_shift, prefer_sharps)

    sections = [
        SectionView(
            title=section.title,
            bars=[
                [
                    display_chord(
                        item.chord,
                        chart.key,
                        section.key_shift + key_shift,
                        prefer_sharps,
                        spelling_tonic=key.tonic,
                    )
                    for item in bar.chords
                ]
                for bar in section.bars
            ],
        )
        for section in chart.sections
    ]
    return ChartView(
        title=chart.title,
        artist=chart.artist,
        key_name=key.name,
        time_signature=str(chart.time),
        sections=sections,
        notes=chart.notes,
    )


class ChartRenderer(ABC):
    """Abstract chart renderer."""

    @property
    @abstractmethod
    def default_extension(self) -> str:
        """Default filename extension for this renderer."""

    def render(self, chart: Chart, *, key_shift: int = 0, prefer_sharps: bool | None = None) -> str:
        """Render *chart* into a file content string."""
        return self.render_view(build_chart_view(chart, key_shift, prefer_sharps))

    @abstractmethod
    def render_view(self, view: ChartView) -> str:
        """Render an already resolved ChartView."""


class TextChartRenderer(ChartRenderer):
    """Plain-text chart: header lines, then one "| chord chord |" line per section."""

    @property
    def default_extension(self) -> str:
        return ".txt"

    def render_view(self, view: ChartView) -> str:
        lines = [view.title or "Untitled"]
        if view.artist:
            lines.append(view.artist)
        lines.append(f"Key: {view.key_name}  |  Time: {view.time_signature}")

        for section in view.sections:
            lines.append("")
            lines.append(f"[{section.title}]")
            cells = [" ".join(chords) if chords else "-" for chords in section.bars]
            lines.append("| " + " | ".join(cells) + " |" if cells else "|")

        if view.notes:
            lines.append("")
            lines.append(view.notes)
        return "\n".join(lines) + "\n"


class HtmlChartRenderer(ChartRenderer):
    """Render a chart into a self-contained HTML page ready for Print -> Save as PDF."""

    @property
    def default_extension(self) -> str:
        return ".html"

    def render_view(self, view: ChartView) -> str:
        title_safe = _escape_html(view.title)
        heading = f"  <h1>{title_safe}</h1>\n" if view.title else ""
        artist = f'  <p class="artist">{_escape_html(view.artist)}</p>\n' if view.artist else ""
        meta = (
            f'  <p class="meta">Key: {_escape_html(view.key_name)}'
            f" &middot; Time: {_escape_html(view.time_signature)}</p>\n"
        )
        sections = "\n".join(self._section_html(section) for section in view.sections)
        notes = f'  <div class="notes">{_escape_html(view.notes)}</div>\n' if view.notes else ""

        return f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1.0" />
  <title>{title_safe or "Chord chart"}</title>
  <style>
    *, *::before, *::after {{ box-sizing: border-box; }}
    body {{
      font-family: Georgia, serif;
      background: #f0f0f0;
      margin: 0;
      padding: 2rem;
      color: #222;
    }}
    h1 {{
      text-align: center;
      font-size: 1.6rem;
      margin-bottom: 0.25rem;
    }}
    .artist, .meta {{
      text-align: center;
      margin: 0.25rem 0;
      color: #555;
    }}
    .section {{
      background: #fff;
      box-shadow: 0 2px 8px rgba(0, 0, 0, 0.15);
      margin: 1.5rem auto;
      max-width: 860px;
      padding: 1rem;
    }}
    .section h2 {{
      font-size: 1.1rem;
      margin: 0 0 0.5rem;
    }}
    .bars {{
      display: flex;
      flex-wrap: wrap;
      font-family: "Courier New", monospace;
      font-size: 1.1rem;
    }}
    .bar {{
      border-left: 2px solid #222;
      min-width: 6rem;
      padding: 0.25rem 0.75rem;
    }}
    .bar:last-child {{
      border-right: 2px solid #222;
    }}
    .notes {{
      max-width: 860px;
      margin: 1.5rem auto;
      white-space: pre-wrap;
    }}
    @media print {{
      body {{
        background: #fff;
        padding: 0;
        margin: 0;
      }}
      .section {{
        box-shadow: none;
        page-break-inside: avoid;
        max-width: 100%;
        margin: 1rem 0;
      }}
      .notes {{
        page-break-before: auto;
      }}
    }}
  </style>
</head>
<body>
{heading}{artist}{meta}{sections}
{notes}</body>
</html>"""

    def _section_html(self, section: SectionView) -> str:
        bars = "".join(
            f'<span class="bar">{_escape_html(" ".join(chords)) if chords else "&nbsp;"}</span>'
            for chords in section.bars
        )
        return (
            f'  <div class="section">\n'
            f"    <h2>{_escape_html(section.title)}</h2>\n"
            f'    <div class="bars">{bars}</div>\n'
            f"  </div>"
        )
