import logging

from fastapi.testclient import TestClient

from gameplane.cache import Cache, invalidate_dashboard_cache
from gameplane.main import create_app


class BrokenRedis:
    def get(self, key):
        raise ConnectionError("redis down")

    def setex(self, key, ttl, value):
        raise ConnectionError("redis down")

    def scan_iter(self, match="*"):
        raise ConnectionError("redis down")


def test_cache_without_url_is_disabled():
    cache = Cache()

    assert not cache.enabled
    assert cache.get("dashboard:stats:week") is None
    assert cache.set("dashboard:stats:week", {"range": "week"}) is False
    assert cache.delete_pattern("dashboard:*") == 0


def test_cache_stores_json(redis_client):
    cache = Cache(client=redis_client)

    assert cache.set("dashboard:stats:week", {"range": "week", "totals": {"courts": 2}}, ttl=30)
    assert cache.get("dashboard:stats:week") == {"range": "week", "totals": {"courts": 2}}


def test_invalidation_only_touches_dashboard_keys(redis_client):
    cache = Cache(client=redis_client)
    cache.set("dashboard:stats:week", {})
    cache.set("dashboard:stats:year", {})
    cache.set("session:abc", {})

    assert invalidate_dashboard_cache(cache) == 2
    assert list(redis_client.store) == ["session:abc"]


def test_invalidation_without_cache():
    assert invalidate_dashboard_cache(None) == 0


def test_cache_errors_fail_open():
    cache = Cache(client=BrokenRedis())

    assert cache.get("dashboard:stats:week") is None
    assert cache.set("dashboard:stats:week", {}) is False
    assert cache.delete_pattern("dashboard:*") == 0


def test_dashboard_still_served_when_cache_is_down(client, app, alice_headers):
    app.state.cache = Cache(client=BrokenRedis())

    response = client.get("/dashboard/stats", headers=alice_headers)

    assert response.status_code == 200



def test_startup_reports_disabled_cache(engine, verifier, payments, caplog):
    caplog.set_level(logging.INFO, logger="gameplane.main")
    app = create_app(engine=engine, identity_verifier=verifier, payments=payments, cache=Cache())

    with TestClient(app):
        pass

    assert "dashboard caching disabled" in caplog.text
    assert "Dashboard cache enabled" not in caplog.text


def test_startup_reports_enabled_cache(app, caplog):
    caplog.set_level(logging.INFO, logger="gameplane.main")

    with TestClient(app):
        pass

    assert "Dashboard cache enabled" in caplog.text
