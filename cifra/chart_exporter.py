"""ChartExporter: writes a chart to disk as printable HTML or plain text."""

from __future__ import annotations

from typing import Final

from cifra.chart_models import Chart
from cifra.chart_renderers import ChartRenderer, HtmlChartRenderer, TextChartRenderer

SUPPORTED_FORMATS: Final[set[str]] = {"html", "text"}


class ChartExporter:
    """
    Render a chart through a pluggable renderer and save the result.

    Supported formats:
    - ``html``: self-contained page with print styles (browser Print -> PDF).
    - ``text``: plain-text chart.
    """

    def __init__(self, output_format: str = "html") -> None:
        normalized = output_format.strip().lower()
        if normalized not in SUPPORTED_FORMATS:
            supported = ", ".join(sorted(SUPPORTED_FORMATS))
            raise ValueError(f"Unsupported output format '{output_format}'. Use one of: {supported}.")
        self.output_format = normalized
        self.renderer = self._build_renderer(normalized)

    def _build_renderer(self, output_format: str) -> ChartRenderer:
        if output_format == "html":
            return HtmlChartRenderer()
        return TextChartRenderer()

    @property
    def default_extension(self) -> str:
        return self.renderer.default_extension

    def export(
        self,
        chart: Chart,
        output_path: str,
        key_shift: int = 0,
        prefer_sharps: bool | None = None,
    ) -> None:
        """
        Render *chart* in the selected format and write it to *output_path*.

        Raises:
            OSError: If the output file cannot be written.
        """
        content = self.renderer.render(chart, key_shift=key_shift, prefer_sharps=prefer_sharps)
        with open(output_path, "w", encoding="utf-8") as fh:
            fh.write(content)
