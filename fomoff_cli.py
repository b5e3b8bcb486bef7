"""Command line catalog editor for the FOMOff events file."""
import argparse
import json
import logging
import os
import sys
from typing import List, Optional

from catalog.editor import CatalogEditor
from catalog.event_processor import InvalidEventError
from catalog.models import EventInput
from sources.registry import load_sources_config
from storage.json_store import JsonStore, StoreError

USAGE_ADD = (
    'Usage: fomoff add --name="Event Name" --date="2026-02-14" '
    '[--city=barranquilla] [--venue="Lugar"] [--start=18:00] [--end=23:00] '
    '[--category=fiesta] [--price="$50,000"] [--url=https://...]'
)

HELP_TEXT = """
FOMOff Scraper

Commands:
  run [--force]     Run all scrapers
  add --name=X ...  Add event manually
  list              List all events

Examples:
  fomoff run
  fomoff add --name="Fiesta Blanca" --date="2026-02-14" --city=barranquilla --venue="Hotel X" --price="$80,000"
  fomoff list
"""

COMMANDS = ('run', 'add', 'list')


class JsonFormatter(logging.Formatter):
    """Custom JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data = {
            'timestamp': self.formatTime(record),
            'level': record.levelname,
            'message': record.getMessage(),
            'logger': record.name
        }

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_data, ensure_ascii=False)


def setup_logging(log_level: str = 'INFO') -> None:
    """
    Configure logging with JSON formatter.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    root_logger = logging.getLogger()

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    root_logger.addHandler(handler)

    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='fomoff', add_help=False)
    sub = parser.add_subparsers(dest='command')

    run_parser = sub.add_parser('run')
    run_parser.add_argument('--force', action='store_true')

    # name and date are checked by hand so a missing one prints USAGE_ADD
    add_parser = sub.add_parser('add')
    add_parser.add_argument('--name')
    add_parser.add_argument('--date')
    add_parser.add_argument('--description', default='')
    add_parser.add_argument('--city', default='barranquilla')
    add_parser.add_argument('--venue', default='Por confirmar')
    add_parser.add_argument('--start', default='18:00')
    add_parser.add_argument('--end', default='23:00')
    add_parser.add_argument('--category', default='fiesta')
    add_parser.add_argument('--price')
    add_parser.add_argument('--url')

    sub.add_parser('list')
    return parser


def cmd_run(editor: CatalogEditor, sources_file: str, force: bool) -> int:
    print('FOMOff Scraper starting...\n')
    sources = load_sources_config(sources_file)
    result = editor.run(sources, force=force)

    for error in result.errors:
        print(f"  Error: {error}")
    if result.saved:
        print(f"Saved events file ({result.added} new)")
    print(f"\nScraper complete. Added {result.added} new events.")
    return 0


def cmd_add(editor: CatalogEditor, args: argparse.Namespace) -> int:
    if not args.name or not args.date:
        print(USAGE_ADD)
        return 1

    candidate = EventInput(
        name=args.name,
        date=args.date,
        description=args.description,
        city=args.city,
        venue=args.venue,
        start_time=args.start,
        end_time=args.end,
        category=args.category,
        price=args.price,
        url=args.url,
        source='manual'
    )

    try:
        result = editor.add_event(candidate)
    except InvalidEventError as e:
        print(f"Invalid event: {e}")
        return 1

    if result.added:
        print(f"  + Added: {result.record.name} ({result.record.date})")
        print('Event added successfully!')
    else:
        print('Event already exists')
    return 0


def cmd_list(editor: CatalogEditor) -> int:
    events = editor.list_events()
    print(f"\n{len(events)} events:\n")
    for event in events:
        print(f"  {event.date} | {event.city.ljust(12)} | {event.name}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """
    Entry point for the fomoff command.

    Args:
        argv: Command line arguments without the program name

    Returns:
        Process exit code
    """
    argv = sys.argv[1:] if argv is None else argv

    events_file = os.environ.get('FOMOFF_EVENTS_FILE', 'data/events.json')
    sources_file = os.environ.get('FOMOFF_SOURCES_FILE', 'data/sources.json')
    log_level = os.environ.get('LOG_LEVEL', 'INFO')

    setup_logging(log_level)
    logger = logging.getLogger(__name__)

    if not argv or argv[0] not in COMMANDS:
        print(HELP_TEXT)
        return 0

    args = build_parser().parse_args(argv)
    editor = CatalogEditor(JsonStore(events_file))
    logger.info(f"Running command {args.command} on {events_file}")

    try:
        if args.command == 'run':
            return cmd_run(editor, sources_file, args.force)
        if args.command == 'add':
            return cmd_add(editor, args)
        return cmd_list(editor)
    except StoreError as e:
        logger.error(f"Command {args.command} failed: {e}")
        print(f"Error: {e}")
        return 1


if __name__ == '__main__':
    sys.exit(main())
