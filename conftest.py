"""
pytest configuration for Devkit Tools.
Puts the src directory on the import path and provides shared fixtures.
"""

import json
import sys
from datetime import datetime
from pathlib import Path

import pytest

project_root = Path(__file__).parent.absolute()
sys.path.insert(0, str(project_root / "src"))

from config.settings import load_settings  # noqa: E402
from main import create_app  # noqa: E402


@pytest.fixture
def settings():
    """Default settings, independent of any config file on disk."""
    return load_settings(project_root / "config" / "does-not-exist.json")


@pytest.fixture
def app(settings):
    app = create_app(settings)
    app.config['TESTING'] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def fixed_now():
    """Monday 2024-01-01 08:30, local time."""
    return datetime(2024, 1, 1, 8, 30)


@pytest.fixture
def write_config(tmp_path):
    """Write a config dict to a temporary config.json and return its path."""
    def _write(config):
        config_file = tmp_path / "config.json"
        config_file.write_text(json.dumps(config))
        return config_file
    return _write
