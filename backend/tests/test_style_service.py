"""
Unit tests for StyleCache and StyleService.
"""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, Mock

import pytest

from imagestudio.core.exceptions import NotFoundError
from imagestudio.database.redis import RedisCache
from imagestudio.database.repositories.style_repository import StyleRepository
from imagestudio.models.style import StyleCreate, StyleTemplate, StyleUpdate
from imagestudio.services.style_cache import StyleCache
from imagestudio.services.style_service import StyleService


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


class FakeRedisClient:
    """In-memory stand-in for redis.asyncio.Redis honoring EX expiry."""

    def __init__(self, clock):
        self.clock = clock
        self.store: dict[str, tuple[str, float | None]] = {}

    async def get(self, key):
        entry = self.store.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at is not None and self.clock() >= expires_at:
            del self.store[key]
            return None
        return value

    async def set(self, key, value, ex=None):
        self.store[key] = (value, self.clock() + ex if ex is not None else None)

    async def delete(self, *keys):
        return sum(1 for key in keys if self.store.pop(key, None) is not None)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def redis_client(clock):
    return FakeRedisClient(clock)


@pytest.fixture
def cache(redis_client):
    redis_cache = RedisCache()
    redis_cache.client = redis_client
    return StyleCache(redis_cache, ttl_seconds=60)


@pytest.fixture
def mock_style_repo():
    repo = Mock(spec=StyleRepository)
    repo.list_all = AsyncMock(return_value=[{"style_id": "style_1", "name": "Runway"}])
    repo.get_by_id = AsyncMock()
    repo.create = AsyncMock()
    repo.update = AsyncMock()
    repo.delete = AsyncMock(return_value=True)
    return repo


@pytest.fixture
def style_service(mock_style_repo, cache):
    return StyleService(mock_style_repo, cache)


# ===== Cache =====


@pytest.mark.asyncio
class TestStyleCache:
    """Test Redis-backed TTL cache behavior."""

    async def test_fresh_entry(self, cache, clock):
        await cache.set("summary", ["a"])
        clock.now += 59

        assert await cache.get("summary") == ["a"]

    async def test_expired_entry(self, cache, clock):
        """Test entries expire at the TTL."""
        await cache.set("summary", ["a"])
        clock.now += 60

        assert await cache.get("summary") is None

    async def test_keys_are_namespaced(self, cache, redis_client):
        await cache.set("full", [])

        assert list(redis_client.store) == ["styles:full"]

    async def test_set_returns_json_form(self, cache):
        """Test datetimes are stored and returned as ISO strings."""
        created = datetime(2025, 10, 13, 10, 0, tzinfo=UTC)

        stored = await cache.set("summary", [{"style_id": "s1", "created_at": created}])

        assert stored == [{"style_id": "s1", "created_at": "2025-10-13T10:00:00Z"}]
        assert await cache.get("summary") == stored

    async def test_invalidate_drops_all_keys(self, cache):
        await cache.set("summary", ["a"])
        await cache.set("full", ["b"])

        await cache.invalidate()

        assert await cache.get("summary") is None
        assert await cache.get("full") is None


# ===== Listing =====


@pytest.mark.asyncio
class TestListStyles:
    """Test read-through listing."""

    async def test_miss_then_hit(self, style_service, mock_style_repo):
        """Test second call within the TTL is served from cache."""
        styles, hit = await style_service.list_styles()
        assert hit is False
        assert styles == [{"style_id": "style_1", "name": "Runway"}]

        _, hit = await style_service.list_styles()
        assert hit is True
        mock_style_repo.list_all.assert_awaited_once_with(summary=True)

    async def test_refetch_after_ttl(self, style_service, mock_style_repo, clock):
        await style_service.list_styles()
        clock.now += 61

        _, hit = await style_service.list_styles()

        assert hit is False
        assert mock_style_repo.list_all.await_count == 2

    async def test_summary_and_full_cached_separately(self, style_service, mock_style_repo):
        await style_service.list_styles(full=False)
        _, hit = await style_service.list_styles(full=True)

        assert hit is False
        mock_style_repo.list_all.assert_awaited_with(summary=False)

    async def test_full_listing_blanks_data_url_covers(self, style_service, mock_style_repo):
        """Test inline cover images are dropped from full listings."""
        mock_style_repo.list_all.return_value = [
            {"style_id": "style_1", "cover_image": "data:image/png;base64,AAAA"},
            {"style_id": "style_2", "cover_image": "https://cdn.example.com/c.png"},
        ]

        styles, _ = await style_service.list_styles(full=True)

        assert [s["cover_image"] for s in styles] == ["", "https://cdn.example.com/c.png"]

    async def test_heavy_summary_entry_is_refetched(self, style_service, mock_style_repo, cache):
        """Test a summary entry holding image payloads is treated as stale."""
        await cache.set("summary", [{"style_id": "style_1", "reference_image": "data:..."}])

        styles, hit = await style_service.list_styles()

        assert hit is False
        assert styles == [{"style_id": "style_1", "name": "Runway"}]


# ===== Mutations =====


@pytest.mark.asyncio
class TestStyleMutations:
    """Test CRUD and cache invalidation."""

    async def test_create_invalidates(self, style_service, mock_style_repo, cache):
        await cache.set("summary", [])
        mock_style_repo.create.return_value = StyleTemplate(style_id="style_9", name="New")

        style = await style_service.create_style(
            StyleCreate(name="New", coverImage="c", referenceImage="r", prompt="p")
        )

        assert style.style_id == "style_9"
        assert await cache.get("summary") is None

    async def test_update_missing(self, style_service, mock_style_repo, cache):
        """Test unknown style is 404 and cache is kept."""
        await cache.set("summary", [])
        mock_style_repo.update.return_value = None

        with pytest.raises(NotFoundError):
            await style_service.update_style("ghost", StyleUpdate(name="x"))

        assert await cache.get("summary") is not None

    async def test_update_invalidates(self, style_service, mock_style_repo, cache):
        await cache.set("full", [])
        mock_style_repo.update.return_value = StyleTemplate(style_id="style_1", name="x")

        await style_service.update_style("style_1", StyleUpdate(name="x"))

        assert await cache.get("full") is None

    async def test_delete(self, style_service, mock_style_repo, cache):
        await cache.set("summary", [])

        await style_service.delete_style("style_1")

        assert await cache.get("summary") is None

    async def test_delete_missing(self, style_service, mock_style_repo):
        mock_style_repo.delete.return_value = False

        with pytest.raises(NotFoundError):
            await style_service.delete_style("ghost")

    async def test_get_style_missing(self, style_service, mock_style_repo):
        mock_style_repo.get_by_id.return_value = None

        with pytest.raises(NotFoundError, match="Style not found"):
            await style_service.get_style("ghost")
