"""Shared fixtures for filealloc tests."""

import os
import sys

import pytest

# Allow running the tests without installing the package
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from filealloc.core.models import FileItem, Node  # noqa: E402


@pytest.fixture
def two_nodes():
    """Node A (capacity 10) and node B (capacity 5), both empty."""
    return [Node("A", 10), Node("B", 5)]


@pytest.fixture
def two_files():
    """File X (size 6) and file Y (size 4)."""
    return [FileItem("X", 6), FileItem("Y", 4)]


@pytest.fixture(autouse=True)
def no_telegram_credentials(monkeypatch):
    """Never talk to Telegram from tests."""
    monkeypatch.delenv("TELEGRAM_BOT_TOKEN", raising=False)
    monkeypatch.delenv("TELEGRAM_CHAT_ID", raising=False)
