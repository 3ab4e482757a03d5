#!/usr/bin/env python3
"""Generate test JSON files for testing json-searchkey components."""

import json
import random
import pathlib
from typing import Any, Dict, List, Optional


def build_clients(records: int, prefix: str = "A") -> List[Dict[str, Any]]:
    """
    Build client records carrying the ClientID/ClaimID pair used as a search key.

    Args:
        records: Number of client records
        prefix: Prefix for generated client ids

    Returns:
        List of client dictionaries
    """
    return [
        {
            "ClientID": f"{prefix}{i}",
            "ClaimID": str(1000 + i),
            "Name": f"Client {i}",
            "Policy": {"Number": f"P-{i:06d}", "Active": i % 2 == 0},
        }
        for i in range(records)
    ]


def generate_clients_json(records: int, output_path: Optional[str] = None) -> str:
    """
    Generate a document of the shape {"Clients": [...]}.

    Args:
        records: Number of client records
        output_path: Optional path to save the file

    Returns:
        Path to the generated file or JSON string
    """
    json_str = json.dumps({"Batch": "B-001", "Clients": build_clients(records)}, indent=2)

    if output_path:
        pathlib.Path(output_path).write_text(json_str)
        return output_path

    return json_str


def generate_corrupted_json(valid_records: int, output_path: Optional[str] = None) -> str:
    """
    Generate a clients document truncated in the middle of a record.

    Args:
        valid_records: Number of complete records before the corruption
        output_path: Optional path to save the file

    Returns:
        Path to the generated file or JSON string
    """
    clients = ",".join(json.dumps(c) for c in build_clients(valid_records))
    json_str = '{"Clients": [' + clients + ', {"ClientID": "A'

    if output_path:
        pathlib.Path(output_path).write_text(json_str)
        return output_path

    return json_str


def generate_unicode_json(records: int = 20, output_path: Optional[str] = None) -> str:
    """
    Generate a clients document whose identifiers use non-ASCII text.

    Args:
        records: Number of records to generate
        output_path: Optional path to save the file

    Returns:
        Path to the generated file or JSON string
    """
    unicode_samples = ["你好", "مرحبا", "Здравствуй", "こんにちは", "Olá", "Γεια", "🌍🌎"]
    clients = [
        {"ClientID": f"{unicode_samples[i % len(unicode_samples)]}{i}", "ClaimID": str(i)}
        for i in range(records)
    ]
    json_str = json.dumps({"Clients": clients}, ensure_ascii=False, indent=2)

    if output_path:
        pathlib.Path(output_path).write_text(json_str, encoding='utf-8')
        return output_path

    return json_str


def generate_streaming_json(records: int = 10000, output_path: Optional[str] = None) -> str:
    """
    Generate a compact clients document large enough to exercise chunked reads.

    Args:
        records: Number of records to generate
        output_path: Optional path to save the file

    Returns:
        Path to the generated file or JSON string
    """
    clients = []
    for i in range(records):
        clients.append({
            "ClientID": f"ID{i:08d}",
            "ClaimID": str(i),
            "Score": round(random.uniform(0, 100), 2),
            "Tags": [f"tag{j}" for j in range(i % 5)],
        })

    json_str = json.dumps({"Clients": clients})  # No indent for more compact streaming

    if output_path:
        pathlib.Path(output_path).write_text(json_str)
        return output_path

    return json_str
