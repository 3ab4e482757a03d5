#!/usr/bin/env python3
"""Errors raised while deriving search values."""


class SearchValueError(Exception):
    """Base class for every failure that aborts a search value run."""


class MalformedInput(SearchValueError):
    """Input data could not be parsed as JSON."""


class InvalidArity(SearchValueError):
    """concat() was given fewer than two path arguments."""


class InvalidExpression(SearchValueError):
    """A path expression is not anchored or has no usable field name."""

    def __init__(self, expression: str, reason: str):
        self.expression = expression
        self.reason = reason
        super().__init__(f"Invalid JSONPath argument: '{expression}' ({reason}).")


class NoValuesFound(SearchValueError):
    def __init__(self, path: str):
        self.path = path
        super().__init__(f"No values found using the JSONPath expression '{path}'")


class ResultCountMismatch(SearchValueError):
    """Concatenated paths matched a different number of nodes."""

    def __init__(self, path: str, expected: int, actual: int):
        self.path = path
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"JSONPath expression '{path}' matched {actual} value(s), "
            f"expected {expected} to line up with the preceding arguments"
        )
