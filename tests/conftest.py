"""Pytest configuration and shared fixtures for all tests."""

import os
import sys
from pathlib import Path

# Keep test logs plain JSON and quiet unless asked otherwise
os.environ.setdefault("ENV", "test")
os.environ.setdefault("LOG_LEVEL", "WARNING")

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import pytest
from fastapi.testclient import TestClient

from app.core.block_store import BlockSetStore
from app.core.config import Settings
from main import create_app


@pytest.fixture
def store():
    """Fresh, empty store per test."""
    return BlockSetStore()


@pytest.fixture
def settings():
    return Settings(remote_timeout=2.0, seed_url=None)


@pytest.fixture
def app(settings, store):
    return create_app(settings=settings, store=store)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c
