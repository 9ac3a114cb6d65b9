"""
Unit tests for the Redis cache service.
"""

import fnmatch

import pytest
from redis.exceptions import ConnectionError

from careers.services.cache_service import CacheService


class FakeRedis:
    """In-memory stand-in for the handful of commands the service uses."""

    def __init__(self):
        self.data = {}
        self.down = False

    def ping(self):
        if self.down:
            raise ConnectionError('connection refused')
        return True

    def get(self, key):
        return self.data.get(key)

    def setex(self, key, ttl, value):
        self.data[key] = value

    def delete(self, *keys):
        for key in keys:
            self.data.pop(key, None)

    def scan(self, cursor, match='*', count=100):
        return 0, [k for k in self.data if fnmatch.fnmatch(k, match)]


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def cache(app, fake_redis):
    service = CacheService()
    service.client = fake_redis
    service._enabled = True
    service._prefix = 'careers'
    return service


class TestCacheService:
    """Tests for CacheService."""

    def test_disabled_in_testing(self, app):
        assert app.extensions['cache'].is_available() is False

    def test_set_and_get(self, cache, fake_redis):
        assert cache.set('global', 'sitemap', 'xml', '<urlset/>') is True
        assert 'careers:global:sitemap:xml' in fake_redis.data
        assert cache.get('global', 'sitemap', 'xml') == '<urlset/>'

    def test_memoize_loads_once(self, cache):
        calls = []

        def loader():
            calls.append(1)
            return {'value': 42}

        assert cache.memoize('global', 'stats', 'answer', loader) == {'value': 42}
        assert cache.memoize('global', 'stats', 'answer', loader) == {'value': 42}
        assert len(calls) == 1

    def test_invalidate_module(self, cache, fake_redis):
        cache.set('global', 'sitemap', 'xml', 'a')
        cache.set('global', 'sitemap', 'other', 'b')
        cache.set('global', 'robots', 'txt', 'c')

        assert cache.invalidate_module('global', 'sitemap') == 2
        assert list(fake_redis.data) == ['careers:global:robots:txt']

    def test_degrades_when_redis_is_down(self, cache, fake_redis):
        fake_redis.down = True
        assert cache.is_available() is False
        assert cache.get('global', 'sitemap', 'xml') is None
        assert cache.set('global', 'sitemap', 'xml', 'x') is False
        assert cache.delete_pattern('global', 'sitemap') == 0
        assert cache.memoize('global', 'sitemap', 'xml', lambda: 'fresh') == 'fresh'
