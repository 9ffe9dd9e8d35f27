"""cifra CLI entry point."""

import os
import re
import sys
from typing import NoReturn

import click

from cifra import __version__
from cifra.chart_editor import ChartEditor
from cifra.chart_exporter import ChartExporter
from cifra.chart_models import NO_KEY, Chart, KeyContext
from cifra.chart_renderers import TextChartRenderer
from cifra.chart_store import ChartStore
from cifra.chord_field import ChordPalette
from cifra.chords import ChordToken, Mode, chord_symbol, parse_chord_symbol
from cifra.pitch import NoteName
from cifra.transposition import transpose_label

TONIC_CHOICES = [NO_KEY] + [note.value for note in NoteName]
MODE_CHOICES = [mode.value for mode in Mode]


def _default_store_path() -> str:
    return os.path.join(click.get_app_dir("cifra"), "charts.json")


def _fail(message: str) -> NoReturn:
    click.echo(f"  ERROR: {message}", err=True)
    sys.exit(1)


def _title_to_filename(title: str, extension: str) -> str:
    """Convert a chart title to a safe filename with the given extension."""
    sanitized = re.sub(r"[^\w\s-]", "", title)
    sanitized = re.sub(r"\s+", "_", sanitized.strip())
    return f"{sanitized or 'chart'}{extension}"


def _load_chart(store: ChartStore, chart_id: str) -> Chart:
    try:
        return store.get(chart_id)
    except ValueError as exc:
        _fail(str(exc))


def _echo_tokens(heading: str, tokens: list[ChordToken], labelled: bool = True) -> None:
    click.echo(f"{heading}:")
    for token in tokens:
        if labelled and token.label and not token.is_inversion:
            click.echo(f"  {token.label:<16} {chord_symbol(token)}")
        else:
            click.echo(f"  {chord_symbol(token)}")


# ── CLI group ──────────────────────────────────────────────────────────────────

@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__, prog_name="cifra")
@click.option(
    "--store",
    "store_path",
    envvar="CIFRA_STORE",
    default=_default_store_path,
    show_default="<app dir>/charts.json",
    metavar="PATH",
    help="JSON file holding saved charts.",
)
@click.pass_context
def main(ctx: click.Context, store_path: str) -> None:
    """cifra — chord-chart editor with harmonic palettes and transposition."""
    ctx.obj = ChartStore(store_path)


# ── palette subcommand ─────────────────────────────────────────────────────────

@main.command()
@click.argument("tonic", type=click.Choice(TONIC_CHOICES))
@click.option("--mode", type=click.Choice(MODE_CHOICES), default="major", show_default=True)
@click.option("--flats", is_flag=True, help="Spell accidentals with flats instead of sharps.")
def palette(tonic: str, mode: str, flats: bool) -> None:
    """
    Print the chord palette of a key.

    TONIC is a note name (C, F#, Bb, ...) or "none" for the full
    12-root palette.

    \b
    Examples:
      cifra palette G
      cifra palette A --mode minor
      cifra palette none --flats
    """
    key = KeyContext(tonic=tonic, mode=mode)
    chords = ChordPalette.for_key(key, prefer_sharps=not flats)

    if key.tonic is None:
        _echo_tokens("Chromatic palette", chords.chromatic, labelled=False)
        return

    click.echo(f"Key: {key.tonic.value} {key.mode.value}")
    _echo_tokens("Diatonic", chords.diatonic)
    _echo_tokens("Borrowed", chords.borrowed)
    _echo_tokens("Inversions", chords.inversions)


# ── transpose subcommand ───────────────────────────────────────────────────────

@main.command()
@click.argument("labels", nargs=-1, required=True)
@click.option("--semitones", "-s", type=int, required=True, help="Semitones to shift (may be negative).")
@click.option("--flats", is_flag=True, help="Spell transposed roots with flats.")
def transpose(labels: tuple[str, ...], semitones: int, flats: bool) -> None:
    """
    Transpose freehand chord labels.

    Labels without a recognisable root are printed unchanged.

    \b
    Examples:
      cifra transpose Am7 G/B F#sus4 -s 2
      cifra transpose Bb Eb -s -2 --flats
    """
    click.echo(" ".join(transpose_label(label, semitones, prefer_flats=flats) for label in labels))


# ── chart subcommands ──────────────────────────────────────────────────────────

@main.command()
@click.option("--title", default="", help="Song title.")
@click.option("--artist", default="", help="Artist or performer.")
@click.option("--key", "tonic", type=click.Choice(TONIC_CHOICES), default="C", show_default=True)
@click.option("--mode", type=click.Choice(MODE_CHOICES), default="major", show_default=True)
@click.pass_obj
def new(store: ChartStore, title: str, artist: str, tonic: str, mode: str) -> None:
    """Create a chart with Intro, Verse and Chorus sections and save it."""
    chart = Chart.new(title=title, artist=artist, key=KeyContext(tonic=tonic, mode=mode))
    try:
        store.save(chart)
    except OSError as exc:
        _fail(f"Could not write chart store — {exc}")
    click.echo(chart.id)


@main.command(name="list")
@click.pass_obj
def list_charts(store: ChartStore) -> None:
    """List saved charts."""
    try:
        charts = store.list()
    except (OSError, ValueError) as exc:
        _fail(f"Could not read chart store — {exc}")

    if not charts:
        click.echo("No saved charts.")
        return
    for chart in charts:
        line = f"{chart.id}  {chart.title or 'Untitled'}"
        if chart.artist:
            line += f"  ({chart.artist})"
        click.echo(line)


@main.command(name="add-chord")
@click.argument("chart_id")
@click.argument("section", type=click.IntRange(min=1))
@click.argument("bar", type=click.IntRange(min=1))
@click.argument("chord")
@click.option("--beats", type=click.IntRange(1, 4), default=4, show_default=True)
@click.pass_obj
def add_chord(store: ChartStore, chart_id: str, section: int, bar: int, chord: str, beats: int) -> None:
    """
    Add CHORD (e.g. Am7, F#°, Bbsus4) to bar BAR of section SECTION.

    SECTION and BAR are 1-based. The chord is taken to be written in the
    chart's current key.
    """
    chart = _load_chart(store, chart_id)
    editor = ChartEditor(chart)
    try:
        if section > len(chart.sections):
            raise ValueError(f"Section {section} does not exist (chart has {len(chart.sections)}).")
        editor.select_section(chart.sections[section - 1].id)
        editor.select_bar(bar - 1)
        editor.add_chord(parse_chord_symbol(chord), beats=beats)
        store.save(chart)
    except ValueError as exc:
        _fail(str(exc))
    except OSError as exc:
        _fail(f"Could not write chart store — {exc}")
    click.echo(f"Added {chord} to {chart.sections[section - 1].title}, bar {bar}.")


@main.command(name="set-key")
@click.argument("chart_id")
@click.argument("tonic", type=click.Choice(TONIC_CHOICES))
@click.option("--mode", type=click.Choice(MODE_CHOICES), default=None, help="Keep the current mode when omitted.")
@click.pass_obj
def set_key(store: ChartStore, chart_id: str, tonic: str, mode: str | None) -> None:
    """
    Re-key a saved chart. Stored chords follow the new key on display.

    \b
    Examples:
      cifra set-key 3f2a... D
      cifra set-key 3f2a... A --mode minor
    """
    chart = _load_chart(store, chart_id)
    editor = ChartEditor(chart)
    try:
        editor.set_key(tonic, mode)
        store.save(chart)
    except OSError as exc:
        _fail(f"Could not write chart store — {exc}")
    click.echo(f"Key set to {chart.key.name}.")


@main.command(name="set-shift")
@click.argument("chart_id")
@click.argument("section", type=click.IntRange(min=1))
@click.option("--semitones", "-s", type=int, required=True, help="Section shift in semitones (may be negative).")
@click.pass_obj
def set_shift(store: ChartStore, chart_id: str, section: int, semitones: int) -> None:
    """Transpose section SECTION (1-based) by a fixed number of semitones."""
    chart = _load_chart(store, chart_id)
    editor = ChartEditor(chart)
    try:
        if section > len(chart.sections):
            raise ValueError(f"Section {section} does not exist (chart has {len(chart.sections)}).")
        target = chart.sections[section - 1]
        editor.set_section_key_shift(target.id, semitones)
        store.save(chart)
    except ValueError as exc:
        _fail(str(exc))
    except OSError as exc:
        _fail(f"Could not write chart store — {exc}")
    click.echo(f"{target.title} shifted by {semitones:+d} semitones.")


@main.command()
@click.argument("chart_id")
@click.option("--shift", type=int, default=0, show_default=True, help="Extra semitones to transpose by.")
@click.option("--flats/--sharps", default=None, help="Override the spelling implied by the key.")
@click.pass_obj
def show(store: ChartStore, chart_id: str, shift: int, flats: bool | None) -> None:
    """Print a saved chart, optionally transposed."""
    chart = _load_chart(store, chart_id)
    prefer_sharps = None if flats is None else not flats
    click.echo(TextChartRenderer().render(chart, key_shift=shift, prefer_sharps=prefer_sharps), nl=False)


@main.command()
@click.argument("chart_id")
@click.option(
    "--output",
    "-o",
    default=None,
    metavar="PATH",
    help="Destination file. Defaults to <title>.html or <title>.txt.",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["html", "text"], case_sensitive=False),
    default="html",
    show_default=True,
    help="Printable HTML page or plain text.",
)
@click.option("--shift", type=int, default=0, show_default=True, help="Extra semitones to transpose by.")
@click.pass_obj
def export(store: ChartStore, chart_id: str, output: str | None, output_format: str, shift: int) -> None:
    """
    Export a saved chart for printing.

    \b
    Examples:
      cifra export 3f2a... -o song.html
      cifra export 3f2a... --format text --shift 2
    """
    chart = _load_chart(store, chart_id)
    exporter = ChartExporter(output_format=output_format)
    resolved_output = output if output is not None else _title_to_filename(chart.title, exporter.default_extension)

    try:
        exporter.export(chart, resolved_output, key_shift=shift)
    except OSError as exc:
        _fail(f"Could not write output file — {exc}")

    if exporter.output_format == "html":
        click.echo(f"Done!  Open '{resolved_output}' in any browser. Use Print → Save as PDF.")
    else:
        click.echo(f"Done!  Wrote '{resolved_output}'.")
