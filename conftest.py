"""Pytest configuration."""

import sys
from pathlib import Path

import pytest

# Add project root to path for imports
project_root = Path(__file__).parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))


@pytest.fixture(autouse=True)
def clean_publisher_env(monkeypatch):
    """Keep tests independent of the caller's DRY_RUN and credentials."""
    for name in (
        "DRY_RUN",
        "GCS_CREDENTIALS_JSON",
        "GCS_CREDENTIALS_PATH",
        "GOOGLE_CREDENTIALS_JSON",
        "GOOGLE_APPLICATION_CREDENTIALS",
    ):
        monkeypatch.delenv(name, raising=False)
