"""
Pytest configuration and shared fixtures.
"""

import os
import sys
import pytest

sys.path.append(os.path.join(os.getcwd(), "src"))

# Settings are read once at import time
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("HOLIDAY_API_URL", "")
os.environ.setdefault("OPENAI_API_KEY", "")
os.environ.setdefault("METRICS_ENABLED", "false")


@pytest.fixture
def test_data_dir(tmp_path) -> str:
    """Create a temporary data directory for tests."""
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    return str(data_dir)
