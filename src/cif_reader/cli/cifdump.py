"""
cifdump - CIF File Inspection Command-Line Interface
====================================================

This module implements the command-line interface for inspecting CIF
timetable files with the streaming reader.

Commands
--------
- **records**: List records with their offsets (optionally every field)
- **schedules**: List logical schedules (BS + BX + LO + LI/CR + LT)
- **stats**: Count records by kind
- **validate**: Decode every field of every record and report errors

Usage Examples
--------------
Count the records of a full extract:
    $ cifdump stats timetable.cif

Show one schedule:
    $ cifdump schedules --uid W03751 timetable.cif

Dump every field of the BS records:
    $ cifdump records --fields --kind BS timetable.cif

Check a file end to end:
    $ cifdump validate timetable.cif

Environment
-----------
CIF_READER_CHUNK_SIZE sets the default refill size; --chunk-size
overrides it.

Exit Codes
----------
0 - Success
1 - Framing, I/O or field decode error
2 - Invalid arguments or missing file
3 - Internal error
"""

import logging
from collections import Counter
from datetime import date, time
from enum import Enum
from pathlib import Path
from typing import Any, Optional

import click

from cif_reader import __version__
from cif_reader.cli.errors import ExitCode, handle_cli_exception
from cif_reader.config import LINE_LENGTH, ReaderConfig
from cif_reader.errors import CIFError, FieldError
from cif_reader.reader import Reader, iter_schedules
from cif_reader.records import Days, RecordKind, iter_fields

logger = logging.getLogger(__name__)


# =============================================================================
# CLI Context and Utilities
# =============================================================================

class Context:
    """
    Shared context for CLI commands.

    Stores common options like verbosity and the reader configuration.
    """

    def __init__(self) -> None:
        self.verbose: bool = False
        self.config: ReaderConfig = ReaderConfig()

    def setup_logging(self) -> None:
        """Configure logging based on verbosity."""
        level = logging.DEBUG if self.verbose else logging.WARNING
        logging.basicConfig(
            level=level,
            format="%(levelname)s: %(name)s: %(message)s" if self.verbose else "%(message)s",
        )

    def open_reader(self, path: Path) -> Reader:
        logger.info(f"Reading {path} (chunk size {self.config.chunk_size})")
        return Reader.from_file(path, self.config)


pass_context = click.make_pass_decorator(Context, ensure=True)


class RecordKindChoice(click.ParamType):
    """
    Click parameter type for record kinds.

    Accepts a two-letter tag (BS, LI, ...) case-insensitively.
    """
    name = "tag"

    def convert(self, value: Any, param: Optional[click.Parameter],
                ctx: Optional[click.Context]) -> RecordKind:
        if isinstance(value, RecordKind):
            return value
        try:
            return RecordKind(str(value).upper())
        except ValueError:
            tags = ", ".join(k.value for k in RecordKind if k is not RecordKind.UNRECOGNISED)
            self.fail(f"Invalid record tag '{value}'. Choose from: {tags}", param, ctx)


RECORD_KIND = RecordKindChoice()


def format_value(value: Any) -> str:
    """Render a decoded field value for display."""
    if value is None:
        return "-"
    if isinstance(value, FieldError):
        return f"!! {value}"
    if isinstance(value, Days):
        return value.to_pattern()
    if isinstance(value, Enum):
        return value.name
    if isinstance(value, (date, time)):
        return value.isoformat()
    return str(value)


def warn_trailing(reader: Reader) -> None:
    """Report bytes left over after the last complete record."""
    if reader.unconsumed:
        click.echo(
            f"Warning: {reader.unconsumed} trailing bytes after offset "
            f"{reader.offset} do not form a complete record",
            err=True,
        )


# =============================================================================
# Main CLI Group
# =============================================================================

@click.group()
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Enable verbose output",
)
@click.option(
    "--chunk-size",
    type=click.IntRange(min=1),
    default=None,
    help="Bytes read per refill (default: $CIF_READER_CHUNK_SIZE or 32768)",
)
@click.version_option(__version__, "--version", "-V", prog_name="cifdump")
@pass_context
def main(ctx: Context, verbose: bool, chunk_size: Optional[int]) -> None:
    """
    Inspect railway timetable CIF files.

    \b
    Commands:
      records    List records with offsets
      schedules  List logical schedules
      stats      Count records by kind
      validate   Decode every field and report errors

    \b
    Examples:
      cifdump stats timetable.cif
      cifdump records --fields --kind BS timetable.cif
      cifdump schedules --uid W03751 timetable.cif
      cifdump validate timetable.cif
    """
    ctx.verbose = verbose
    ctx.config = ReaderConfig.from_env()
    if chunk_size is not None:
        ctx.config.chunk_size = chunk_size
    ctx.setup_logging()


# =============================================================================
# Records Command
# =============================================================================

@main.command("records")
@click.argument(
    "cif_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-f", "--fields",
    is_flag=True,
    help="Show every decoded field",
)
@click.option(
    "-k", "--kind",
    "kinds",
    type=RECORD_KIND,
    multiple=True,
    help="Only show records with this tag (repeatable)",
)
@click.option(
    "-n", "--limit",
    type=click.IntRange(min=1),
    default=None,
    help="Stop after this many records are shown",
)
@pass_context
def cmd_records(
    ctx: Context,
    cif_file: Path,
    fields: bool,
    kinds: tuple[RecordKind, ...],
    limit: Optional[int],
) -> None:
    """
    List the records of CIF_FILE with their byte offsets.

    \b
    Examples:
      cifdump records timetable.cif
      cifdump records -f -k LO -k LT timetable.cif
    """
    try:
        shown = 0
        with ctx.open_reader(cif_file) as reader:
            for record in reader:
                if kinds and record.kind not in kinds:
                    continue

                tag = record.span[:2].decode("latin-1")
                click.echo(
                    f"{reader.last_record_offset:>10}  {tag}  "
                    f"{record.kind.get_description()}"
                )
                if fields:
                    for name, value in iter_fields(record):
                        click.echo(f"{'':>14}{name}: {format_value(value)}")

                shown += 1
                if limit is not None and shown >= limit:
                    break
            else:
                warn_trailing(reader)

    except Exception as e:
        handle_cli_exception(e, ctx.verbose)


# =============================================================================
# Schedules Command
# =============================================================================

@main.command("schedules")
@click.argument(
    "cif_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-u", "--uid",
    type=str,
    default=None,
    help="Only show schedules for this train UID (e.g. W03751)",
)
@pass_context
def cmd_schedules(ctx: Context, cif_file: Path, uid: Optional[str]) -> None:
    """
    List the logical schedules of CIF_FILE.

    Each schedule is shown with its dates, running days, STP indicator
    and route from origin to destination.
    """
    try:
        count = 0
        with ctx.open_reader(cif_file) as reader:
            for schedule in iter_schedules(reader):
                basic = schedule.basic
                if uid is not None and basic.uid != uid:
                    continue

                origin = schedule.origin.tiploc if schedule.origin else "-"
                terminal = schedule.terminal.tiploc if schedule.terminal else "-"
                click.echo(
                    f"{basic.uid}  {format_value(basic.start_date)}.."
                    f"{format_value(basic.end_date)}  "
                    f"{format_value(basic.days)}  "
                    f"{format_value(basic.stp_indicator):<12}  "
                    f"{origin} -> {terminal} "
                    f"({len(schedule.intermediates)} intermediate, "
                    f"{len(schedule.changes)} changes)"
                )
                count += 1
            warn_trailing(reader)

        if ctx.verbose:
            click.echo(f"{count} schedules")

    except Exception as e:
        handle_cli_exception(e, ctx.verbose)


# =============================================================================
# Stats Command
# =============================================================================

@main.command("stats")
@click.argument(
    "cif_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@pass_context
def cmd_stats(ctx: Context, cif_file: Path) -> None:
    """
    Count the records of CIF_FILE by kind.

    Unrecognised records are counted per tag.
    """
    try:
        counts: Counter = Counter()
        with ctx.open_reader(cif_file) as reader:
            for record in reader:
                if record.kind is RecordKind.UNRECOGNISED:
                    counts[f"Unrecognised ({record.tag})"] += 1
                else:
                    counts[record.kind.get_description()] += 1

            total = sum(counts.values())
            for name, count in sorted(counts.items()):
                click.echo(f"{name:<28}{count:>10}")
            click.echo(f"{'Total':<28}{total:>10}")
            click.echo(f"{'Bytes':<28}{reader.offset:>10}")
            warn_trailing(reader)

    except Exception as e:
        handle_cli_exception(e, ctx.verbose)


# =============================================================================
# Validate Command
# =============================================================================

@main.command("validate")
@click.argument(
    "cif_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--max-errors",
    type=click.IntRange(min=1),
    default=100,
    help="Stop reporting after this many field errors (default: 100)",
)
@pass_context
def cmd_validate(ctx: Context, cif_file: Path, max_errors: int) -> None:
    """
    Decode every field of every record in CIF_FILE.

    Reports each field that fails to decode with the byte offset of its
    record. Exits with status 1 if anything is wrong.
    """
    errors = 0
    records = 0
    try:
        with ctx.open_reader(cif_file) as reader:
            for record in reader:
                records += 1
                if record.kind is RecordKind.UNRECOGNISED:
                    click.echo(
                        f"offset {reader.last_record_offset}: "
                        f"unrecognised record tag {record.tag!r}"
                    )
                for name, value in iter_fields(record):
                    if not isinstance(value, FieldError):
                        continue
                    errors += 1
                    if errors <= max_errors:
                        click.echo(f"offset {reader.last_record_offset}: {value}")

            trailing = reader.unconsumed
            warn_trailing(reader)

    except CIFError as e:
        # Framing or I/O failure: report where the last good record ended
        click.echo(
            f"Error: {e} (after {records} records, "
            f"{records * LINE_LENGTH} bytes)",
            err=True,
        )
        raise SystemExit(ExitCode.DECODE_ERROR)
    except Exception as e:
        handle_cli_exception(e, ctx.verbose)

    if errors > max_errors:
        click.echo(f"... {errors - max_errors} more errors not shown")
    click.echo(f"{records} records, {errors} field errors")
    if errors or trailing:
        raise SystemExit(ExitCode.DECODE_ERROR)


if __name__ == "__main__":
    main()
