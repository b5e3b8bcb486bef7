"""Data models for the festival event catalog."""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

EVENT_KEYS = (
    'id', 'name', 'description', 'city', 'venue', 'date', 'startTime',
    'endTime', 'category', 'official', 'price', 'source', 'url', 'addedAt',
)


def extra_keys(data: Dict[str, Any], known) -> Dict[str, Any]:
    """Keys of a JSON object that the model does not map, kept for write-back."""
    return {key: value for key, value in data.items() if key not in known}


def with_extra(modeled: Dict[str, Any], extra: Dict[str, Any]) -> Dict[str, Any]:
    for key, value in extra.items():
        modeled.setdefault(key, value)
    return modeled


@dataclass
class EventInput:
    """Candidate event from the CLI or a source, before normalization."""
    name: str
    date: str
    description: str = ''
    city: str = 'barranquilla'
    venue: str = 'Por confirmar'
    start_time: str = '18:00'
    end_time: str = '23:00'
    category: str = 'fiesta'
    official: bool = False
    price: Optional[str] = None
    url: Optional[str] = None
    source: str = 'manual'


@dataclass
class EventRecord:
    """Normalized event as stored in the data file."""
    id: str
    name: str
    description: str
    city: str
    venue: str
    date: str
    start_time: str
    end_time: str
    category: str
    official: bool
    price: Optional[str]
    source: str
    url: Optional[str]
    added_at: Optional[str]
    extra: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'EventRecord':
        """
        Build a record from its JSON representation.

        Args:
            data: Event object as found in the data file

        Returns:
            EventRecord instance

        Raises:
            KeyError: If a required key is missing
        """
        return cls(
            id=data['id'],
            name=data['name'],
            description=data.get('description', ''),
            city=data['city'],
            venue=data.get('venue', ''),
            date=data['date'],
            start_time=data['startTime'],
            end_time=data['endTime'],
            category=data['category'],
            official=bool(data.get('official', False)),
            price=data.get('price'),
            source=data.get('source', 'manual'),
            url=data.get('url'),
            added_at=data.get('addedAt'),
            extra=extra_keys(data, EVENT_KEYS)
        )

    def to_dict(self) -> Dict[str, Any]:
        """Return the JSON representation used in the data file."""
        return with_extra({
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'city': self.city,
            'venue': self.venue,
            'date': self.date,
            'startTime': self.start_time,
            'endTime': self.end_time,
            'category': self.category,
            'official': self.official,
            'price': self.price,
            'source': self.source,
            'url': self.url,
            'addedAt': self.added_at
        }, self.extra)


@dataclass
class City:
    """Display metadata for a city."""
    name: str
    emoji: str
    travel_time: int = 0
    extra: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'City':
        return cls(
            name=data['name'],
            emoji=data.get('emoji', ''),
            travel_time=int(data.get('travelTime', 0)),
            extra=extra_keys(data, ('name', 'emoji', 'travelTime'))
        )

    def to_dict(self) -> Dict[str, Any]:
        return with_extra({
            'name': self.name,
            'emoji': self.emoji,
            'travelTime': self.travel_time
        }, self.extra)


@dataclass
class Category:
    """Display metadata for an event category."""
    name: str
    emoji: str
    extra: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Category':
        return cls(
            name=data['name'],
            emoji=data.get('emoji', ''),
            extra=extra_keys(data, ('name', 'emoji'))
        )

    def to_dict(self) -> Dict[str, Any]:
        return with_extra({'name': self.name, 'emoji': self.emoji}, self.extra)


@dataclass
class DataStore:
    """In-memory copy of the shared events document."""
    events: List[EventRecord] = field(default_factory=list)
    cities: Dict[str, City] = field(default_factory=dict)
    categories: Dict[str, Category] = field(default_factory=dict)
    last_updated: Optional[str] = None
    # events we could not read, with their position, written back untouched
    unparsed_events: List[Tuple[int, Dict[str, Any]]] = field(default_factory=list, repr=False)
    extra: Dict[str, Any] = field(default_factory=dict, repr=False)

    def find_event(self, event_id: str) -> Optional[EventRecord]:
        """Return the event with the given id, or None."""
        for event in self.events:
            if event.id == event_id:
                return event
        return None


@dataclass
class AddResult:
    """Result of an add operation."""
    added: bool
    record: EventRecord


@dataclass
class RunResult:
    """Result of a sources run."""
    added: int
    saved: bool
    errors: list[str]
