"""
Tests for the Cache Service client
"""
import asyncio

import aiohttp
import pytest
from unittest.mock import AsyncMock, MagicMock

from cache_service import CacheServiceClient
from exceptions import CacheClearFailed


@pytest.fixture
def client(mock_session):
    client = CacheServiceClient('http://backend.test/', timeout=5)
    client._session = mock_session
    return client


class TestClearCache:
    """Tests for POST /api/settings/cache/clear"""

    @pytest.mark.asyncio
    async def test_returns_deleted_count(self, client, mock_session, make_response):
        mock_session.post = MagicMock(return_value=make_response(200, {'deleted': 7}))

        deleted = await client.clear_cache()

        assert deleted == 7
        mock_session.post.assert_called_once_with('http://backend.test/api/settings/cache/clear')

    @pytest.mark.asyncio
    async def test_zero_deleted(self, client, mock_session, make_response):
        mock_session.post = MagicMock(return_value=make_response(200, {'deleted': 0}))

        assert await client.clear_cache() == 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [400, 404, 500, 503])
    async def test_error_status(self, client, mock_session, make_response, status):
        mock_session.post = MagicMock(return_value=make_response(status, text='Failed to clear cache: locked'))

        with pytest.raises(CacheClearFailed) as exc_info:
            await client.clear_cache()

        assert exc_info.value.message == 'Failed to clear cache'
        assert str(status) in exc_info.value.detail

    @pytest.mark.asyncio
    async def test_transport_error(self, client, mock_session):
        mock_session.post = MagicMock(side_effect=aiohttp.ClientConnectionError("refused"))

        with pytest.raises(CacheClearFailed):
            await client.clear_cache()

    @pytest.mark.asyncio
    async def test_timeout(self, client, mock_session, make_response):
        response = make_response(200, {'deleted': 1})
        response.__aenter__ = AsyncMock(side_effect=asyncio.TimeoutError())
        mock_session.post = MagicMock(return_value=response)

        with pytest.raises(CacheClearFailed):
            await client.clear_cache()

    @pytest.mark.asyncio
    async def test_invalid_json(self, client, mock_session, make_response):
        response = make_response(200)
        response.json = AsyncMock(side_effect=ValueError("Expecting value"))
        mock_session.post = MagicMock(return_value=response)

        with pytest.raises(CacheClearFailed):
            await client.clear_cache()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", [{}, {'deleted': 'seven'}, {'deleted': -1}, {'deleted': True}, [7], None])
    async def test_unusable_count(self, client, mock_session, make_response, payload):
        mock_session.post = MagicMock(return_value=make_response(200, payload))

        with pytest.raises(CacheClearFailed):
            await client.clear_cache()


class TestClearActivity:
    """Tests for POST /api/settings/activity/clear"""

    @pytest.mark.asyncio
    async def test_returns_deleted_count(self, client, mock_session, make_response):
        mock_session.post = MagicMock(return_value=make_response(200, {'deleted': 12}))

        assert await client.clear_activity() == 12
        mock_session.post.assert_called_once_with('http://backend.test/api/settings/activity/clear')


class TestSessionManagement:
    """Test aiohttp session management"""

    @pytest.mark.asyncio
    async def test_get_session_creates_and_reuses(self):
        client = CacheServiceClient('http://backend.test')

        session1 = await client._get_session()
        session2 = await client._get_session()

        assert isinstance(session1, aiohttp.ClientSession)
        assert session1 is session2

        await client.close()
        assert session1.closed

    @pytest.mark.asyncio
    async def test_context_manager_closes_session(self, mock_session):
        async with CacheServiceClient('http://backend.test') as client:
            client._session = mock_session

        mock_session.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_close_without_session(self):
        client = CacheServiceClient('http://backend.test')
        await client.close()
