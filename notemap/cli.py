"""notemap CLI entry point."""

import logging
import sys

import click

from notemap import __version__
from notemap.mapping_exporter import DEFAULT_FORMAT, SUPPORTED_FORMATS, MappingExporter
from notemap.mapping_reader import load_mapping
from notemap.note_mapping import NoteMapping
from notemap.pitch_audit import DEFAULT_TOLERANCE_CENTS


def _load_or_exit(path: str) -> NoteMapping:
    """Load a mapping document, or print the error and exit with status 1."""
    try:
        return load_mapping(path)
    except OSError as exc:
        click.echo(f"  ERROR: Could not read '{path}' — {exc}", err=True)
        sys.exit(1)
    except ValueError as exc:
        click.echo(f"  ERROR: '{path}' is not a note mapping document — {exc}", err=True)
        sys.exit(1)


def _playback_end(mapping: NoteMapping) -> float:
    """Seconds from score start to the end of the last sounding note."""
    return max(
        (note.time_offset_seconds + note.duration_seconds for note in mapping.notes),
        default=0.0,
    )


# ── CLI group ──────────────────────────────────────────────────────────────────

@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__, prog_name="notemap")
@click.option("--verbose", "-v", is_flag=True, help="Log debug details to stderr.")
def main(verbose: bool) -> None:
    """notemap — inspect and convert note-to-pixel mapping documents."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


# ── inspect subcommand ─────────────────────────────────────────────────────────

@main.command()
@click.argument("mapping_file", type=click.Path(exists=True, dir_okay=False, readable=True))
def inspect(mapping_file: str) -> None:
    """
    Summarize a note mapping document.

    \b
    Examples:
      notemap inspect score.json
    """
    mapping = _load_or_exit(mapping_file)
    rests = sum(1 for note in mapping.notes if note.is_rest)

    click.echo(f"notemap v{__version__}")
    click.echo(f"  File      : {mapping_file}")
    click.echo(f"  Divisions : {mapping.divisions}")
    click.echo(f"  Sheets    : {len(mapping.sheets)}")
    click.echo(f"  Systems   : {len(mapping.systems)}")
    click.echo(f"  Measures  : {len(mapping.measures)}")
    click.echo(f"  Notes     : {len(mapping.notes)}  ({rests} rest(s))")
    click.echo(
        f"  Events    : {len(mapping.tempos)} tempo(s), "
        f"{len(mapping.time_signatures)} time signature(s), "
        f"{len(mapping.key_signatures)} key signature(s)"
    )
    click.echo(f"  Playback  : {_playback_end(mapping):.2f} s")

    if mapping.is_empty():
        click.echo()
        click.echo("  WARNING: The mapping holds no notes.", err=True)


# ── check subcommand ───────────────────────────────────────────────────────────

@main.command()
@click.argument("mapping_file", type=click.Path(exists=True, dir_okay=False, readable=True))
@click.option(
    "--pitch/--no-pitch",
    default=False,
    show_default=True,
    help="Also compare expected frequencies with spelled pitches (requires music21).",
)
@click.option(
    "--tolerance",
    type=click.FloatRange(min=0.0),
    default=DEFAULT_TOLERANCE_CENTS,
    show_default=True,
    metavar="CENTS",
    help="Largest accepted frequency deviation for --pitch.",
)
def check(mapping_file: str, pitch: bool, tolerance: float) -> None:
    """
    Check a note mapping document for unresolved references.

    Reports systems, measures, notes and tempo/key/time events that point
    at sheets, systems or measures the document does not contain, and notes
    whose global index does not increase. Exits with status 1 on problems.

    \b
    Examples:
      notemap check score.json
      notemap check score.json --pitch --tolerance 25
    """
    mapping = _load_or_exit(mapping_file)

    click.echo("[1/2] Checking references...")
    problems = mapping.check_references()
    for problem in problems:
        click.echo(f"        {problem}")

    if pitch:
        from notemap.pitch_audit import PitchAuditor

        click.echo("[2/2] Auditing expected frequencies...")
        auditor = PitchAuditor(tolerance_cents=tolerance)
        try:
            mismatches = auditor.audit(mapping)
        except ValueError as exc:
            click.echo(f"  ERROR: {exc}", err=True)
            sys.exit(1)
        for mismatch in mismatches:
            problems.append(f"pitch of note {mismatch.note.global_note_index}")
            click.echo(
                f"        note {mismatch.note.global_note_index}: {mismatch.pitch_name} "
                f"expected {mismatch.note.expected_frequency:.2f} Hz, "
                f"notated {mismatch.notated_frequency:.2f} Hz ({mismatch.cents:+.1f} cents)"
            )
    else:
        click.echo("[2/2] Skipping pitch audit.")

    click.echo()
    if problems:
        click.echo(f"Found {len(problems)} problem(s).", err=True)
        sys.exit(1)
    click.echo("OK!  No problems found.")


# ── reformat subcommand ────────────────────────────────────────────────────────

@main.command()
@click.argument("mapping_file", type=click.Path(exists=True, dir_okay=False, readable=True))
@click.option(
    "--output",
    "-o",
    default=None,
    metavar="PATH",
    help="Destination file path. Prints to standard output when omitted.",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(sorted(SUPPORTED_FORMATS), case_sensitive=False),
    default=DEFAULT_FORMAT,
    show_default=True,
    help="Indented JSON or compact JSON.",
)
def reformat(mapping_file: str, output: str | None, output_format: str) -> None:
    """
    Re-render a note mapping document in another layout.

    \b
    Examples:
      notemap reformat score.json --format json-compact -o score.min.json
    """
    mapping = _load_or_exit(mapping_file)
    exporter = MappingExporter(output_format=output_format)

    if output is None:
        click.echo(exporter.render(mapping))
        return

    try:
        written = exporter.export(mapping, output)
    except (OSError, ValueError) as exc:
        click.echo(f"  ERROR: Could not write output file — {exc}", err=True)
        sys.exit(1)

    if not written:
        click.echo("  WARNING: The mapping holds no notes; nothing written.", err=True)
        return
    click.echo(f"Done!  Wrote '{output}'.")
