"""Integration tests for the fomoff command line."""
import json
import logging
import os
from pathlib import Path
from unittest.mock import patch

import pytest

from fomoff_cli import JsonFormatter, main, setup_logging


@pytest.fixture
def mock_env(events_file, tmp_path):
    """Point the CLI at temporary data files."""
    sources_file = tmp_path / 'sources.json'
    sources_file.write_text(json.dumps({'sources': [
        {'name': 'Carnaval', 'type': 'web', 'enabled': True, 'url': 'https://example.com'},
        {'name': 'Apagada', 'type': 'web', 'enabled': False}
    ]}), encoding='utf-8')

    env_vars = {
        'FOMOFF_EVENTS_FILE': str(events_file),
        'FOMOFF_SOURCES_FILE': str(sources_file),
        'LOG_LEVEL': 'WARNING'
    }
    with patch.dict(os.environ, env_vars):
        yield env_vars


def stored_events(env):
    with open(env['FOMOFF_EVENTS_FILE'], encoding='utf-8') as infile:
        return json.load(infile)['events']


class TestCli:
    """Test cases for the fomoff entry point."""

    def test_no_arguments_prints_help(self, mock_env, capsys):
        assert main([]) == 0
        assert 'Commands:' in capsys.readouterr().out

    def test_unknown_command_prints_help(self, mock_env, capsys):
        assert main(['sync']) == 0
        assert 'run [--force]' in capsys.readouterr().out

    def test_list_sorted_by_date(self, mock_env, capsys):
        assert main(['list']) == 0

        out = capsys.readouterr().out
        lines = [line for line in out.splitlines() if '|' in line]
        assert '3 events:' in out
        assert lines[0] == '  2026-02-13 | santa-marta  | Noche de Tambó'
        assert lines[1].startswith('  2026-02-14 | barranquilla | Batalla de Flores')

    def test_add_event(self, mock_env, capsys):
        code = main([
            'add', '--name=Guacherna', '--date=13 de febrero 2026',
            '--venue=Calle 72', '--start=19:00', '--end=23:30', '--price=Gratis'
        ])

        assert code == 0
        assert 'Event added successfully!' in capsys.readouterr().out
        added = stored_events(mock_env)[-1]
        assert added['name'] == 'Guacherna'
        assert added['date'] == '2026-02-13'
        assert added['venue'] == 'Calle 72'
        assert added['price'] == 'Gratis'
        assert added['category'] == 'fiesta'

    def test_add_duplicate_reports_already_exists(self, mock_env, capsys):
        code = main(['add', '--name=fiesta blanca', '--date=2026-02-14'])

        assert code == 0
        assert 'Event already exists' in capsys.readouterr().out
        assert len(stored_events(mock_env)) == 3

    def test_add_missing_date_prints_usage(self, mock_env, capsys):
        assert main(['add', '--name=Solo nombre']) == 1
        assert 'Usage: fomoff add' in capsys.readouterr().out
        assert len(stored_events(mock_env)) == 3

    def test_add_invalid_date_exits_non_zero(self, mock_env, capsys):
        assert main(['add', '--name=Fiesta', '--date=cuando sea']) == 1
        assert 'Invalid event' in capsys.readouterr().out

    def test_run_without_force_does_not_save(self, mock_env, capsys):
        events_path = Path(mock_env['FOMOFF_EVENTS_FILE'])
        before = events_path.read_text(encoding='utf-8')

        assert main(['run']) == 0

        assert 'Added 0 new events' in capsys.readouterr().out
        assert events_path.read_text(encoding='utf-8') == before

    def test_run_with_force_saves(self, mock_env, capsys):
        assert main(['run', '--force']) == 0

        out = capsys.readouterr().out
        assert 'Saved events file' in out
        with open(mock_env['FOMOFF_EVENTS_FILE'], encoding='utf-8') as infile:
            assert json.load(infile)['lastUpdated'] != '2026-01-20T15:00:00.000Z'

    def test_corrupt_store_exits_non_zero(self, mock_env, capsys):
        with open(mock_env['FOMOFF_EVENTS_FILE'], 'w', encoding='utf-8') as outfile:
            outfile.write('{broken')

        assert main(['list']) == 1
        assert 'Error:' in capsys.readouterr().out

    def test_wrong_shape_store_exits_non_zero(self, mock_env, capsys):
        with open(mock_env['FOMOFF_EVENTS_FILE'], encoding='utf-8') as infile:
            document = json.load(infile)
        document['cities'] = None
        with open(mock_env['FOMOFF_EVENTS_FILE'], 'w', encoding='utf-8') as outfile:
            json.dump(document, outfile)

        assert main(['list']) == 1
        assert 'Error:' in capsys.readouterr().out


class TestLogging:
    """Test cases for the JSON log setup."""

    def test_setup_logging_installs_json_formatter(self):
        setup_logging('DEBUG')

        root_logger = logging.getLogger()
        assert root_logger.level == logging.DEBUG
        assert any(
            isinstance(handler.formatter, JsonFormatter) for handler in root_logger.handlers
        )

    def test_json_formatter_output(self):
        record = logging.LogRecord(
            name='catalog.editor', level=logging.INFO, pathname=__file__, lineno=1,
            msg='Added: %s', args=('Guacherna',), exc_info=None
        )

        data = json.loads(JsonFormatter().format(record))

        assert data['level'] == 'INFO'
        assert data['message'] == 'Added: Guacherna'
        assert data['logger'] == 'catalog.editor'
        assert 'timestamp' in data
