"""Command line entry point: import a Standard MIDI File and summarise the score."""

from __future__ import annotations

import argparse
import dataclasses
import json
import logging
import sys
from pathlib import Path
from typing import Any, Sequence, TextIO

from app.config import get_app_config, load_app_config
from app.version import get_app_version
from domain.score import Note, Sheet
from score_tools.midi_import import ImportSettings, MidiImportReport
from score_tools.note_values import SMALLEST_TIME_LENGTH
from shared.logging_config import LogVerbosity, ensure_app_logging, set_file_log_verbosity

from .import_service import ScoreImportService

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_IMPORT_ERROR = 1
EXIT_USAGE = 2


def _positive_int(text: str) -> int:
    try:
        value = int(text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected an integer, got {text!r}") from exc
    if value <= 0:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value}")
    return value


def _grid_unit(text: str) -> int:
    value = _positive_int(text)
    if value % SMALLEST_TIME_LENGTH:
        raise argparse.ArgumentTypeError(
            f"expected a multiple of {SMALLEST_TIME_LENGTH} ticks, got {value}"
        )
    return value


def _non_negative_int(text: str) -> int:
    try:
        value = int(text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected an integer, got {text!r}") from exc
    if value < 0:
        raise argparse.ArgumentTypeError(f"expected a non-negative integer, got {value}")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="midi-score-import",
        description="Import a Standard MIDI File into a score and print what was written.",
    )
    parser.add_argument("file", type=Path, help="MIDI file to import.")
    parser.add_argument("--config", type=Path, help="JSON configuration overriding the defaults.")
    parser.add_argument(
        "--quantize",
        type=_grid_unit,
        metavar="TICKS",
        help="Quantization grid unit in ticks.",
    )
    parser.add_argument(
        "--max-dots",
        type=_non_negative_int,
        metavar="N",
        help="Maximum augmentation dots per note value.",
    )
    parser.add_argument("--flats", action="store_true", help="Spell black keys with flats.")
    parser.add_argument("--json", action="store_true", help="Print the summary as JSON.")
    parser.add_argument(
        "--verbose", action="store_true", help="Record per-event decoding details in the log file."
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {get_app_version()}")
    return parser


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    return build_parser().parse_args(argv)


def resolve_settings(args: argparse.Namespace) -> tuple[ImportSettings, LogVerbosity]:
    config = load_app_config(args.config) if args.config else get_app_config()
    settings = config.importer.to_settings()
    overrides: dict[str, Any] = {}
    if args.quantize is not None:
        overrides["quantization_unit"] = args.quantize
    if args.max_dots is not None:
        overrides["max_dots"] = args.max_dots
    if args.flats:
        overrides["prefer_flats"] = True
    if overrides:
        settings = dataclasses.replace(settings, **overrides)
    verbosity = LogVerbosity.VERBOSE if args.verbose else config.logging.verbosity
    return settings, verbosity


def summarize(sheet: Sheet, report: MidiImportReport) -> dict[str, Any]:
    """Return a JSON-ready description of the imported sheet."""

    staffs = []
    for staff_index, staff in enumerate(sheet.staffs):
        voices = []
        for voice in staff.voices:
            elements = []
            for element in voice:
                entry: dict[str, Any] = {
                    "type": "note" if isinstance(element, Note) else "rest",
                    "start": element.time_start,
                    "length": element.length.describe(),
                    "duration": element.time_length,
                }
                if isinstance(element, Note):
                    entry["pitch"] = element.pitch.describe()
                    entry["midi"] = element.pitch.to_midi()
                    entry["tied"] = element.tie_start is not None
                elements.append(entry)
            voices.append({"name": voice.name, "elements": elements})
        staffs.append({"index": staff_index, "lines": staff.number_of_lines, "voices": voices})

    header = report.header
    return {
        "sheet": sheet.name,
        "format": header.format_version,
        "tracks": header.number_of_tracks,
        "ticks_per_quarter": header.ticks_per_quarter,
        "quantization_unit": report.quantization_unit,
        "tempo_bpm": report.initial_tempo_bpm,
        "staffs": staffs,
        "statistics": dataclasses.asdict(report.statistics),
    }


def _print_text(summary: dict[str, Any], out: TextIO) -> None:
    print(
        f"Sheet {summary['sheet']!r}: format {summary['format']}, "
        f"{summary['tracks']} track(s), {len(summary['staffs'])} staff(s)",
        file=out,
    )
    for staff in summary["staffs"]:
        for voice_index, voice in enumerate(staff["voices"]):
            tokens = []
            for element in voice["elements"]:
                label = element.get("pitch", "rest")
                tie = "~" if element.get("tied") else ""
                tokens.append(f"{label}:{element['length']}{tie}")
            print(f"  staff {staff['index']} voice {voice_index}: {' '.join(tokens)}", file=out)
    stats = summary["statistics"]
    print(
        "Statistics: "
        + ", ".join(f"{name.replace('_', ' ')}={value}" for name, value in stats.items()),
        file=out,
    )


def main(argv: Sequence[str] | None = None, *, out: TextIO | None = None) -> int:
    out = out or sys.stdout
    try:
        args = parse_args(argv)
    except SystemExit as exc:
        return exc.code if isinstance(exc.code, int) else EXIT_USAGE

    settings, verbosity = resolve_settings(args)
    ensure_app_logging()
    set_file_log_verbosity(verbosity)

    service = ScoreImportService(settings=settings)
    try:
        result = service.import_file(args.file)
    except OSError as exc:
        print(f"error: cannot read {args.file}: {exc.strerror or exc}", file=sys.stderr)
        return EXIT_IMPORT_ERROR
    if result.is_err():
        print(f"error: {result.unwrap_err()}", file=sys.stderr)
        return EXIT_IMPORT_ERROR

    outcome = result.unwrap()
    summary = summarize(outcome.sheet, outcome.report)
    if args.json:
        json.dump(summary, out, indent=2)
        out.write("\n")
    else:
        _print_text(summary, out)
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
