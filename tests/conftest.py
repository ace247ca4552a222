import pytest
import os
from unittest.mock import patch

# telescope_bot.app reads the token on import, before any fixture runs.
os.environ.setdefault('BOT_TOKEN', '123456789:ABCdefGHIjklMNOpqrsTUVwxyz')


@pytest.fixture(autouse=True)
def env_vars():
    """Mock environment variables for testing"""
    with patch.dict(os.environ, {}):
        os.environ.pop('WEBHOOK_SECRET', None)
        yield
