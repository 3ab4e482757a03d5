#!/usr/bin/env python3
"""Constant-memory search value resolution over ijson parse events."""
import ijson, logging
from typing import BinaryIO, Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

from shared.errors import InvalidArity, MalformedInput
from shared.search_path import PathExpression
from shared.values import as_text

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 64 * 1024
SCALAR_EVENTS = frozenset(('string', 'number', 'boolean', 'null'))
ARRAY_ITEM = 'item'

Event = Tuple[str, str, object]


def split_event_prefix(prefix: str) -> Tuple[Tuple[str, ...], str]:
    """Split an ijson prefix like ``Clients.item.ClientID`` into
    ``(('Clients',), 'ClientID')``."""
    if not prefix:
        return (), ''
    parts = prefix.split('.')
    return tuple(p for p in parts[:-1] if p != ARRAY_ITEM), parts[-1]


class StreamingResolver:
    """Builds one search value per logical record from leaf value events.

    Records have no explicit boundary: a record is complete as soon as every
    requested field has been seen since the previous record was emitted.
    Fields sharing a containment path share its materialization, and a single
    event satisfies every requested field with the same leaf name there.
    """

    def __init__(self, fields: Sequence[PathExpression], delimiter: str = ''):
        if not fields:
            raise InvalidArity('At least one field is required for streaming resolution.')
        self.fields = list(fields)
        self.delimiter = delimiter
        self.materialized_paths = list(dict.fromkeys(f.containment for f in self.fields))
        self._tracked = set(self.materialized_paths)
        self._wanted: Dict[Tuple[Tuple[str, ...], str], List[int]] = {}
        for index, field in enumerate(self.fields):
            self._wanted.setdefault((field.containment, field.field_name), []).append(index)
        self._collected: Dict[int, str] = {}
        self.emitted = 0
        logger.debug("Materializing %d path(s) for %d field(s)", len(self.materialized_paths), len(self.fields))

    def feed(self, prefix: str, event: str, value) -> Optional[str]:
        """Consume one parse event; return a search value when it completes a record."""
        if event not in SCALAR_EVENTS:
            return None
        containment, name = split_event_prefix(prefix)
        if containment not in self._tracked:
            return None
        indexes = self._wanted.get((containment, name))
        if not indexes:
            return None

        text = as_text(value)
        for index in indexes:
            self._collected[index] = text
        if len(self._collected) < len(self.fields):
            return None

        record = self.delimiter.join(self._collected[i] for i in range(len(self.fields)))
        self._collected.clear()
        self.emitted += 1
        return record

    def finalize(self) -> List[str]:
        """Drop a record still missing fields at end of input.

        Returns the records completed by finalizing, which is always none.
        """
        if self._collected:
            missing = [f.text for i, f in enumerate(self.fields) if i not in self._collected]
            logger.debug("Discarding incomplete record; missing %s", ', '.join(missing))
        self._collected.clear()
        return []


def resolve_events(events: Iterable[Event], fields: Sequence[PathExpression], delimiter: str = '') -> Iterator[str]:
    """Lazily yield search values from an iterable of ``(prefix, event, value)``."""
    resolver = StreamingResolver(fields, delimiter)
    for prefix, event, value in events:
        record = resolver.feed(prefix, event, value)
        if record is not None:
            yield record
    yield from resolver.finalize()


class SearchValueStream:
    """Push-based resolver: feed raw bytes with ``parse`` and end with ``flush``."""

    def __init__(self, fields: Sequence[PathExpression], delimiter: str = ''):
        self.resolver = StreamingResolver(fields, delimiter)
        self._events = ijson.sendable_list()
        self._coro = ijson.parse_coro(self._events)

    def parse(self, chunk: bytes) -> List[str]:
        try:
            self._coro.send(chunk)
        except ijson.JSONError as exc:
            raise MalformedInput(f"Failed to parse input data as JSON: {exc}") from exc
        return self._drain()

    def flush(self) -> List[str]:
        try:
            self._coro.close()
        except ijson.JSONError as exc:
            raise MalformedInput(f"Failed to parse input data as JSON: {exc}") from exc
        return self._drain() + self.resolver.finalize()

    def _drain(self) -> List[str]:
        values = []
        for prefix, event, value in self._events:
            record = self.resolver.feed(prefix, event, value)
            if record is not None:
                values.append(record)
        del self._events[:]
        return values


def iter_search_values(source: BinaryIO, fields: Sequence[PathExpression], delimiter: str = '',
                       chunk_size: int = DEFAULT_CHUNK_SIZE) -> Iterator[str]:
    """Yield search values from a binary file without loading it whole."""
    stream = SearchValueStream(fields, delimiter)
    try:
        while True:
            chunk = source.read(chunk_size)
            if not chunk:
                break
            yield from stream.parse(chunk)
        yield from stream.flush()
    except MalformedInput as e:
        logger.error(f"stream parse failed: {e}")
        raise
