"""
StrToFile Backend — Test Configuration (conftest.py)
======================================================

What:  Shared pytest fixtures for the entire test suite.

Fixtures:
    ├── sample_records: Records with nested and backslash paths
    ├── make_zip: Factory building raw ZIP bytes with zipfile directly,
    │             independent of the code under test
    └── test_client: HTTPX AsyncClient bound to a fresh app instance
"""

import io
import os
import zipfile
from typing import Dict, Iterable, Tuple, Union

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

# Must be set before strtofile.config is imported
os.environ["LOG_LEVEL"] = "WARNING"

from strtofile.schemas.file_record import FileRecord  # noqa: E402


@pytest.fixture
def sample_records():
    """Records in a deliberate, non-alphabetical order."""
    return [
        FileRecord(path="readme.txt", content="hi"),
        FileRecord(path="docs/a.txt", content="x"),
        FileRecord(path="src\\main.py", content="print('hello')\n"),
        FileRecord(path="empty.txt", content=""),
        FileRecord(path="unicode/中文.md", content="# 标题\n\nnaïve café ✓"),
    ]


@pytest.fixture
def make_zip():
    """
    Build ZIP bytes from (name, payload) pairs.

    Payloads may be str (encoded as UTF-8) or raw bytes. A name ending in "/"
    becomes a directory entry.

    Usage:
        data = make_zip([("a.txt", "hello"), ("dir/", b"")])
    """

    def _make(
        entries: Union[Iterable[Tuple[str, Union[str, bytes]]], Dict[str, Union[str, bytes]]],
        compression: int = zipfile.ZIP_DEFLATED,
    ) -> bytes:
        if isinstance(entries, dict):
            entries = entries.items()
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w", compression=compression) as zf:
            for name, payload in entries:
                zf.writestr(name, payload)
        return buffer.getvalue()

    return _make


@pytest_asyncio.fixture
async def test_client():
    """
    HTTPX AsyncClient talking to the FastAPI app through ASGITransport.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    from strtofile.main import create_app
    transport = ASGITransport(app=create_app())
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
