#!/usr/bin/env python3
"""Search path expressions: JSONPath selectors plus a synthetic concat().

A search path is either a single JSONPath expression or

    concat(<delimiter>, <JSONPath expr 1>, <JSONPath expr 2>, ...)

which derives a composite key by joining the values matched by each
expression, position by position, with the delimiter.
"""
import logging, re
from dataclasses import dataclass
from typing import List, Tuple, Union

from shared.errors import InvalidArity, InvalidExpression

logger = logging.getLogger(__name__)

ROOT_SYMBOL = '$'
CONCAT_START_TOKEN = 'concat('
CONCAT_END_TOKEN = ')'
WILDCARD = '[*]'

_SEGMENT_RE = re.compile(r"""
    \.(?P<name>[^.\[\]]+)
  | \[\s*(?P<quoted>'[^']*'|"[^"]*")\s*\]
  | \[\s*(?P<selector>\*|-?\d+)\s*\]
""", re.VERBOSE)


def _is_selector(segment: str) -> bool:
    return segment.startswith('[')


@dataclass(frozen=True)
class PathExpression:
    """One path argument.

    ``segments`` holds field names and bracketed array selectors in order; it
    is empty when the text could not be reduced to simple segments (filters,
    recursive descent and the like), which only the whole-document resolver
    can evaluate.
    """
    text: str
    segments: Tuple[str, ...] = ()

    @property
    def anchored(self) -> bool:
        return self.text.startswith(ROOT_SYMBOL)

    @property
    def field_name(self) -> str:
        """Leaf field name, or '' when the path ends in an array selector."""
        if not self.segments or _is_selector(self.segments[-1]):
            return ''
        return self.segments[-1]

    @property
    def containment(self) -> Tuple[str, ...]:
        """Named segments leading to the leaf field, array selectors dropped."""
        return tuple(s for s in self.segments[:-1] if not _is_selector(s))

    @property
    def has_index_selector(self) -> bool:
        return any(_is_selector(s) and s != WILDCARD for s in self.segments)

    def __str__(self):
        return self.text


@dataclass(frozen=True)
class ConcatSpec:
    delimiter: str
    paths: Tuple[PathExpression, ...]


SearchPath = Union[ConcatSpec, List[PathExpression]]


def split_segments(text: str) -> Tuple[str, ...]:
    """Split ``$.a[*].b`` or ``a.b`` into ``('a', '[*]', 'b')``."""
    if text.startswith(ROOT_SYMBOL):
        body = text[len(ROOT_SYMBOL):]
    else:
        body = '.' + text if text else ''

    segments = []
    pos = 0
    while pos < len(body):
        match = _SEGMENT_RE.match(body, pos)
        if match is None:
            return ()
        if match.group('name') is not None:
            name = match.group('name').strip()
            segments.append(WILDCARD if name == '*' else name)
        elif match.group('quoted') is not None:
            segments.append(match.group('quoted')[1:-1])
        else:
            segments.append(f"[{match.group('selector')}]")
        pos = match.end()
    return tuple(segments)


def _unquote(token: str) -> str:
    if len(token) >= 2 and token[0] == token[-1] and token[0] in '"\'':
        return token[1:-1]
    return token


def parse_path(text: str, streaming: bool = False) -> PathExpression:
    """Validate one path argument for the chosen resolver."""
    path = PathExpression(text, split_segments(text))
    if streaming:
        if not path.field_name:
            raise InvalidExpression(text, 'no field name to match')
        if path.has_index_selector:
            raise InvalidExpression(text, 'index selectors are not supported when streaming')
    elif not path.anchored:
        raise InvalidExpression(text, 'missing root symbol')
    return path


def parse_search_path(spec: str, streaming: bool = False) -> SearchPath:
    """Parse a search path specification.

    Returns a ConcatSpec for ``concat(...)`` and a one-element list of
    PathExpression otherwise. With ``streaming`` set, paths must reduce to a
    leaf field name plus containment path instead of carrying the root symbol.
    """
    spec = (spec or '').strip()
    if not spec.startswith(CONCAT_START_TOKEN):
        path = parse_path(spec, streaming)
        logger.debug("Parsed search path %r", path.text)
        return [path]

    end = len(spec) - len(CONCAT_END_TOKEN) if spec.endswith(CONCAT_END_TOKEN) else len(spec)
    args = [arg.strip() for arg in spec[len(CONCAT_START_TOKEN):end].split(',')]
    if len(args) < 3:
        raise InvalidArity(f"Invalid number of arguments to concat(): '{spec}'")

    delimiter = _unquote(args[0])
    paths = tuple(parse_path(arg, streaming) for arg in args[1:])
    logger.debug("Parsed concat() with delimiter %r over %d path(s)", delimiter, len(paths))
    return ConcatSpec(delimiter, paths)


def search_path_parts(search_path: SearchPath) -> Tuple[List[PathExpression], str]:
    """Return ``(paths, delimiter)``; the delimiter is '' for a single path."""
    if isinstance(search_path, ConcatSpec):
        return list(search_path.paths), search_path.delimiter
    return list(search_path), ''
