#!/usr/bin/env python3
"""Pipeline step that writes the search values derived from an input JSON file.

The host hands the step a context for reading and writing resources and three
parameters: the input data file, the output search values file, and the
session search path used to derive a unique form session identifier.
"""
import enum, logging, pathlib
from dataclasses import dataclass
from typing import Any, BinaryIO, Dict, List, Mapping, Optional, Protocol

from shared.document_resolver import load_document, resolve_document
from shared.errors import MalformedInput
from shared.search_path import parse_search_path, search_path_parts
from shared.serializer import OutputMode, serialize_search_values
from shared.size_guard import InputSizeGuard
from shared.streaming_parser import DEFAULT_CHUNK_SIZE, iter_search_values

logger = logging.getLogger(__name__)

DEFAULT_SESSION_SEARCH_PATH = 'concat("-", $.Clients[*].ClientID, $.Clients[*].ClaimID)'


def describe() -> Dict[str, Any]:
    """Metadata the host UI shows for this step."""
    return {
        'description': (
            'Processes an input JSON file and stores the search value(s) used '
            'to look up a form session in a subsequent pipeline step.'
        ),
        'icon': 'action',
        'input': [
            {
                'id': 'inputDataFile',
                'displayName': 'Input Data File',
                'description': 'JSON-formatted input data file to read from.',
                'type': 'InputResource',
                'required': True,
            },
            {
                'id': 'outputSearchValuesFile',
                'displayName': 'Output Search Values File',
                'description': 'Output file to store the calculated search value(s).',
                'type': 'OutputResource',
                'required': True,
            },
            {
                'id': 'sessionSearchPath',
                'displayName': 'Form Session Search Value Path',
                'description': (
                    'A JSONPath expression for the input data element(s) to use '
                    'to calculate a unique form session identifier.'
                ),
                'defaultValue': DEFAULT_SESSION_SEARCH_PATH,
                'type': 'String',
                'required': True,
            },
        ],
        'output': [],
    }


@dataclass(frozen=True)
class StepParameters:
    input_data_file: str
    output_search_values_file: str
    session_search_path: str = DEFAULT_SESSION_SEARCH_PATH

    @classmethod
    def from_mapping(cls, parameters: Mapping[str, Any]) -> 'StepParameters':
        """Build from the host's parameter names (``inputDataFile`` etc.)."""
        for name in ('inputDataFile', 'outputSearchValuesFile'):
            if not parameters.get(name):
                raise ValueError(f"Missing required parameter '{name}'")
        return cls(
            input_data_file=str(parameters['inputDataFile']),
            output_search_values_file=str(parameters['outputSearchValuesFile']),
            session_search_path=str(parameters.get('sessionSearchPath') or DEFAULT_SESSION_SEARCH_PATH),
        )


class StepContext(Protocol):
    def read(self, locator: str) -> str: ...

    def open(self, locator: str) -> BinaryIO: ...

    def size(self, locator: str) -> int: ...

    def write(self, locator: str, text: str) -> None: ...

    def delete(self, locator: str) -> None: ...


class LocalFileContext:
    """StepContext over the local filesystem, relative to ``base_dir``."""

    def __init__(self, base_dir=None):
        self.base_dir = pathlib.Path(base_dir) if base_dir else None

    def _path(self, locator: str) -> pathlib.Path:
        path = pathlib.Path(locator)
        if self.base_dir is not None and not path.is_absolute():
            path = self.base_dir / path
        return path

    def read(self, locator):
        return self._path(locator).read_text(encoding='utf-8')

    def open(self, locator):
        return self._path(locator).open('rb')

    def size(self, locator):
        return self._path(locator).stat().st_size

    def write(self, locator, text):
        path = self._path(locator)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding='utf-8')

    def delete(self, locator):
        self._path(locator).unlink()


class ResolutionMode(enum.Enum):
    AUTO = 'auto'
    DOCUMENT = 'document'
    STREAM = 'stream'


@dataclass
class StepResult:
    values: List[str]
    output_mode: OutputMode
    output: str


def _resolve_from_document(context: StepContext, parameters: StepParameters) -> List[str]:
    search_path = parse_search_path(parameters.session_search_path)
    logger.info(f"Reading input file: {parameters.input_data_file}")
    try:
        content = context.read(parameters.input_data_file)
    except UnicodeDecodeError as exc:
        logger.error(f"Input data is not valid UTF-8: {exc}")
        raise MalformedInput('Failed to parse input data as JSON.') from exc
    document = load_document(content)
    return resolve_document(document, search_path)


def _resolve_from_stream(context: StepContext, parameters: StepParameters, chunk_size: int) -> List[str]:
    paths, delimiter = search_path_parts(parse_search_path(parameters.session_search_path, streaming=True))
    logger.info(f"Streaming input file: {parameters.input_data_file}")
    with context.open(parameters.input_data_file) as source:
        values = list(iter_search_values(source, paths, delimiter, chunk_size))
    logger.info("Resolved %d search value(s)", len(values))
    return values


def execute(context: StepContext, parameters: StepParameters, mode: ResolutionMode = ResolutionMode.AUTO,
            guard: Optional[InputSizeGuard] = None, chunk_size: int = DEFAULT_CHUNK_SIZE) -> StepResult:
    """Run the step once and write the serialized search values."""
    logger.info("Deriving search values with %s", parameters.session_search_path)

    try:
        context.delete(parameters.output_search_values_file)
    except FileNotFoundError:
        pass

    if mode is ResolutionMode.AUTO:
        guard = guard or InputSizeGuard()
        streaming = guard.should_stream(context.size(parameters.input_data_file))
    else:
        streaming = mode is ResolutionMode.STREAM

    if streaming:
        values = _resolve_from_stream(context, parameters, chunk_size)
        output_mode = OutputMode.JSON
    else:
        values = _resolve_from_document(context, parameters)
        output_mode = OutputMode.PLAIN

    output = serialize_search_values(values, output_mode)
    logger.info(f"Writing search values to file: {parameters.output_search_values_file}")
    context.write(parameters.output_search_values_file, output)

    logger.info('Done.')
    return StepResult(values, output_mode, output)
