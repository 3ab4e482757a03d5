#!/usr/bin/env python3
"""Whole-document resolution of search paths with jsonpath-ng."""
import json, logging
from typing import Any, List, Union

from jsonpath_ng.exceptions import JSONPathError
from jsonpath_ng.ext import parse

from shared.errors import InvalidExpression, MalformedInput, NoValuesFound, ResultCountMismatch
from shared.search_path import ConcatSpec, PathExpression, SearchPath
from shared.values import as_text

logger = logging.getLogger(__name__)


def load_document(content: Union[str, bytes]) -> Any:
    """Parse the raw input data, raising MalformedInput when it is not JSON."""
    try:
        return json.loads(content)
    except (TypeError, ValueError) as exc:
        logger.error(f"Failed to parse input data as JSON: {exc}")
        raise MalformedInput('Failed to parse input data as JSON.') from exc


def find_node_values(document: Any, path: PathExpression) -> List[str]:
    """Return the text of every node matched by ``path``, in traversal order.

    A matched array contributes its elements rather than itself.
    """
    try:
        expression = parse(path.text)
    except JSONPathError as exc:
        raise InvalidExpression(path.text, str(exc)) from exc

    values = []
    for match in expression.find(document):
        if isinstance(match.value, list):
            values.extend(as_text(item) for item in match.value)
        else:
            values.append(as_text(match.value))
    logger.debug("JSONPath %s matched %d value(s)", path.text, len(values))
    return values


def resolve_document(document: Any, search_path: SearchPath) -> List[str]:
    """Resolve a parsed search path against a fully loaded JSON document.

    A single path returns its matches directly, so no match means an empty
    result. Under concat() every argument must match, and all arguments must
    match the same number of nodes: the i-th value joins the i-th match of
    each argument with the delimiter.
    """
    if not isinstance(search_path, ConcatSpec):
        values = []
        for path in search_path:
            values.extend(find_node_values(document, path))
        logger.info("Resolved %d search value(s)", len(values))
        return values

    values: List[str] = []
    for index, path in enumerate(search_path.paths):
        node_values = find_node_values(document, path)
        if not node_values:
            raise NoValuesFound(path.text)
        if index == 0:
            values = node_values
            continue
        if len(node_values) != len(values):
            raise ResultCountMismatch(path.text, len(values), len(node_values))
        values = [f"{acc}{search_path.delimiter}{value}" for acc, value in zip(values, node_values)]

    logger.info("Resolved %d search value(s)", len(values))
    return values
