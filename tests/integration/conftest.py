#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Pytest fixtures for integration tests.

Provides:
- open_docx: reopen DOCX bytes with python-docx
- client: FastAPI TestClient for api.main
"""

import io
import pytest
from pathlib import Path
import sys

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from docx import Document


@pytest.fixture
def open_docx():
    """Load DOCX bytes back into a python-docx Document."""
    def _open(data: bytes):
        return Document(io.BytesIO(data))
    return _open


@pytest.fixture
def client():
    """Create a test client."""
    from fastapi.testclient import TestClient
    from api.main import app
    return TestClient(app)
