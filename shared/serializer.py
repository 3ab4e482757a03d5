#!/usr/bin/env python3
"""Output renderings of a search value set."""
import enum, json
from typing import Sequence


class OutputMode(enum.Enum):
    PLAIN = 'plain'  # whole-document runs
    JSON = 'json'    # streaming runs


def serialize_search_values(values: Sequence[str], mode: OutputMode) -> str:
    if mode is OutputMode.JSON:
        return json.dumps({'values': list(values)}, separators=(',', ':'), ensure_ascii=False)
    return ','.join(values)
