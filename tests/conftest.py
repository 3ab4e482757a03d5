#!/usr/bin/env python3
"""Shared pytest fixtures for json-searchkey test suite."""

import pytest
import json
import pathlib
import sys
from typing import Dict, Any
from unittest.mock import MagicMock

# Add parent directory to path for imports
sys.path.insert(0, str(pathlib.Path(__file__).parent.parent))

# Import test data generator
from tests.fixtures.generate_test_data import (
    generate_clients_json,
    generate_corrupted_json,
    generate_unicode_json,
    generate_streaming_json
)


DEFAULT_CONCAT = "concat(-, $.Clients[*].ClientID, $.Clients[*].ClaimID)"


# ============================================================================
# Document Fixtures
# ============================================================================

@pytest.fixture
def clients_document() -> Dict[str, Any]:
    """The two-client document used throughout the examples."""
    return {
        "Clients": [
            {"ClientID": "A1", "ClaimID": "99"},
            {"ClientID": "A2", "ClaimID": "88"},
        ]
    }


@pytest.fixture
def clients_json_file(tmp_path, clients_document) -> pathlib.Path:
    """Write the two-client document to disk."""
    json_file = tmp_path / "clients.json"
    json_file.write_text(json.dumps(clients_document))
    return json_file


@pytest.fixture
def many_clients_file(tmp_path) -> pathlib.Path:
    """Create a clients document with 100 records."""
    json_file = tmp_path / "many_clients.json"
    generate_clients_json(100, str(json_file))
    return json_file


@pytest.fixture
def large_clients_file(tmp_path) -> pathlib.Path:
    """Create a compact clients document with 20000 records."""
    json_file = tmp_path / "large_clients.json"
    generate_streaming_json(20000, str(json_file))
    return json_file


@pytest.fixture
def corrupted_json_file(tmp_path) -> pathlib.Path:
    """Create a clients document truncated mid-record."""
    json_file = tmp_path / "corrupted.json"
    generate_corrupted_json(10, str(json_file))
    return json_file


@pytest.fixture
def unicode_json_file(tmp_path) -> pathlib.Path:
    """Create a clients document with Unicode identifiers."""
    json_file = tmp_path / "unicode.json"
    generate_unicode_json(20, str(json_file))
    return json_file


@pytest.fixture
def output_file(tmp_path) -> pathlib.Path:
    """Destination for the serialized search values."""
    return tmp_path / "out" / "search_values.txt"


# ============================================================================
# Parser Fixtures
# ============================================================================

@pytest.fixture
def client_fields():
    """Streaming fields for ClientID and ClaimID under Clients."""
    from shared.search_path import parse_search_path
    return list(parse_search_path(DEFAULT_CONCAT, streaming=True).paths)


@pytest.fixture
def size_guard():
    """Create an InputSizeGuard with the default threshold."""
    from shared.size_guard import InputSizeGuard
    return InputSizeGuard(threshold_mb=8)


# ============================================================================
# FastAPI Test Client
# ============================================================================

@pytest.fixture
def fastapi_client():
    """Create a FastAPI test client for the search values service."""
    from fastapi.testclient import TestClient
    from op2_lite.app.simple_main import app

    return TestClient(app)


# ============================================================================
# Collaborator Fixtures
# ============================================================================

@pytest.fixture
def memory_context(clients_document):
    """A StepContext double holding files in a dict."""
    files = {"input.json": json.dumps(clients_document)}
    context = MagicMock()
    context.files = files

    def delete(locator):
        if locator not in files:
            raise FileNotFoundError(locator)
        del files[locator]

    def write(locator, text):
        files[locator] = text

    context.read.side_effect = lambda locator: files[locator]
    context.size.side_effect = lambda locator: len(files[locator].encode())
    context.delete.side_effect = delete
    context.write.side_effect = write
    return context


@pytest.fixture
def clean_environment(monkeypatch):
    """Ensure a clean environment for tests."""
    env_vars_to_remove = ['SESSION_SEARCH_PATH', 'STREAMING_THRESHOLD_MB', 'JSON_CHUNK_SIZE', 'LOG_LEVEL']
    for var in env_vars_to_remove:
        monkeypatch.delenv(var, raising=False)

    yield


# ============================================================================
# Test Markers
# ============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow")
    config.addinivalue_line("markers", "integration: marks integration tests")
    config.addinivalue_line("markers", "benchmark: marks benchmark tests")
