"""
Pytest fixtures and configuration for indexer console tests
"""
import os
import sys
import pytest
from unittest.mock import AsyncMock, MagicMock

# Add app directory to path
sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'app'))


@pytest.fixture(scope='session')
def app_config():
    """Console settings for tests"""
    return {
        'server': {
            'base_url': 'http://backend.test',
            'timeout': 5,
        },
        'cache': {
            'dismiss_after': 0.01,
        },
    }


@pytest.fixture
def mock_logger():
    """Create a mock logger for testing"""
    logger = MagicMock()
    logger.info = MagicMock()
    logger.error = MagicMock()
    logger.warning = MagicMock()
    logger.debug = MagicMock()
    return logger


@pytest.fixture
def sample_indexers():
    """Indexer entries as returned by /api/native/local"""
    return [
        {
            'id': 'idx1',
            'name': 'Example Tracker',
            'description': 'Public tracker',
            'language': 'en-US',
            'indexer_type': 'public',
            'links': ['https://a.example/feed'],
            'legacylinks': ['https://b.example/feed', 'https://c.example/feed'],
            'categories': [2000, 5000],
            'enabled': True
        },
        {
            'id': 'solo',
            'name': 'Solo Tracker',
            'description': 'Only one domain left',
            'language': 'en-US',
            'indexer_type': 'public',
            'links': [],
            'legacylinks': ['https://only.example'],
            'categories': [],
            'enabled': False
        }
    ]


@pytest.fixture
def make_response():
    """Build a mocked aiohttp response usable as an async context manager"""
    def _make(status=200, payload=None, text=''):
        response = MagicMock()
        response.status = status
        response.json = AsyncMock(return_value=payload)
        response.text = AsyncMock(return_value=text)
        response.__aenter__ = AsyncMock(return_value=response)
        response.__aexit__ = AsyncMock(return_value=None)
        return response
    return _make


@pytest.fixture
def mock_session():
    """Create a mock aiohttp ClientSession"""
    session = MagicMock()
    session.closed = False
    session.close = AsyncMock()
    return session
