#!/usr/bin/env python3
"""Text form of JSON node values."""
import json
from decimal import Decimal
from typing import Any


def as_text(value: Any) -> str:
    """Render a node value the way it reads in JSON text.

    Strings are returned verbatim, integral numbers lose any trailing ``.0``
    and containers are rendered as compact JSON.
    """
    if isinstance(value, str):
        return value
    if value is None:
        return 'null'
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return str(int(value)) if value.is_integer() else repr(value)
    if isinstance(value, Decimal):
        # ijson hands out Decimal for every non-integer number
        integral = value.to_integral_value()
        if value == integral:
            return format(integral, 'f')
        return format(value.normalize(), 'f')
    return json.dumps(value, separators=(',', ':'), ensure_ascii=False, default=str)
