"""Shared fixtures for the FOMOff tests."""
import json
import logging

import pytest

from fomoff_cli import JsonFormatter


@pytest.fixture
def events_document():
    """A small events document with two cities and two categories."""
    return {
        'lastUpdated': '2026-01-20T15:00:00.000Z',
        'events': [
            {
                'id': 'evt-desfile',
                'name': 'Batalla de Flores',
                'description': 'Desfile inaugural',
                'city': 'barranquilla',
                'venue': 'Vía 40',
                'date': '2026-02-14',
                'startTime': '11:00',
                'endTime': '18:00',
                'category': 'desfile',
                'official': True,
                'price': 'Desde $120,000',
                'source': 'manual',
                'url': 'https://example.com/batalla',
                'addedAt': '2026-01-10T12:00:00.000Z'
            },
            {
                'id': 'evt-fiesta',
                'name': 'Fiesta Blanca',
                'description': 'Fiesta nocturna',
                'city': 'barranquilla',
                'venue': 'Hotel del Prado',
                'date': '2026-02-14',
                'startTime': '18:00',
                'endTime': '23:00',
                'category': 'fiesta',
                'official': False,
                'price': None,
                'source': 'manual',
                'url': None,
                'addedAt': '2026-01-12T18:30:00.000Z'
            },
            {
                'id': 'evt-tambo',
                'name': 'Noche de Tambó',
                'description': 'Cumbia frente al mar',
                'city': 'santa-marta',
                'venue': 'Parque de los Novios',
                'date': '2026-02-13',
                'startTime': '19:00',
                'endTime': '23:00',
                'category': 'fiesta',
                'official': False,
                'price': None,
                'source': 'manual',
                'url': None,
                'addedAt': '2026-01-15T09:00:00.000Z'
            }
        ],
        'cities': {
            'santa-marta': {'name': 'Santa Marta', 'emoji': '🏖️', 'travelTime': 0},
            'barranquilla': {'name': 'Barranquilla', 'emoji': '🎭', 'travelTime': 100}
        },
        'categories': {
            'fiesta': {'name': 'Fiesta', 'emoji': '🎉'},
            'desfile': {'name': 'Desfile', 'emoji': '💃'}
        }
    }


@pytest.fixture
def events_file(tmp_path, events_document):
    """Write the events document to a temporary file."""
    path = tmp_path / 'events.json'
    path.write_text(json.dumps(events_document, ensure_ascii=False), encoding='utf-8')
    return path


@pytest.fixture(autouse=True)
def restore_root_logging():
    """Drop the JSON handler installed by setup_logging after each test."""
    root_logger = logging.getLogger()
    level = root_logger.level
    yield
    for handler in root_logger.handlers[:]:
        if isinstance(handler.formatter, JsonFormatter):
            root_logger.removeHandler(handler)
    root_logger.setLevel(level)
