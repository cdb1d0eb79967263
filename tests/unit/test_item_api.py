"""HTTP tests for /api/v1/items with the service wired to in-memory fakes."""

from unittest.mock import AsyncMock, patch

from src.ic_common.health import DependencyStatus
from src.ic_items.domain.cache import ITEMS_COLLECTION_KEY, item_key
from src.main import app

BASE = "/api/v1/items"


async def _create(client, name="Lamp", description="Desk lamp") -> dict:
    resp = await client.post(BASE, json={"name": name, "description": description})
    assert resp.status_code == 201
    return resp.json()["data"]


class TestCreate:
    async def test_returns_201_with_envelope(self, client):
        resp = await client.post(BASE, json={"name": "Lamp", "description": "Desk lamp"})

        assert resp.status_code == 201
        body = resp.json()
        assert body["code"] == 0
        assert body["data"]["id"] == 1
        assert body["data"]["name"] == "Lamp"
        assert "created_at" in body["data"]

    async def test_missing_name_is_400(self, client, repo):
        resp = await client.post(BASE, json={"description": "Desk lamp"})

        assert resp.status_code == 400
        assert resp.json()["code"] == 1001
        assert repo.calls == []

    async def test_name_too_long_is_400(self, client):
        resp = await client.post(BASE, json={"name": "x" * 256, "description": "d"})

        assert resp.status_code == 400


class TestRead:
    async def test_get_by_id(self, client):
        created = await _create(client)

        resp = await client.get(f"{BASE}/{created['id']}")

        assert resp.status_code == 200
        assert resp.json()["data"] == created

    async def test_get_missing_is_404(self, client, cache):
        resp = await client.get(f"{BASE}/999")

        assert resp.status_code == 404
        assert resp.json()["code"] == 2001
        assert resp.json()["data"] is None
        assert item_key(999) not in cache.store

    async def test_non_numeric_id_is_400(self, client, repo):
        resp = await client.get(f"{BASE}/abc")

        assert resp.status_code == 400
        assert resp.json()["code"] == 1001
        assert repo.calls == []

    async def test_id_beyond_bigint_is_400(self, client, repo, cache):
        too_big = 2**63

        for resp in (
            await client.get(f"{BASE}/{too_big}"),
            await client.put(f"{BASE}/{too_big}", json={"name": "x"}),
            await client.delete(f"{BASE}/{too_big}"),
        ):
            assert resp.status_code == 400
            assert resp.json()["code"] == 1001
        assert repo.calls == []
        assert cache.gets == 0

    async def test_non_positive_id_is_400(self, client, repo):
        resp = await client.get(f"{BASE}/0")

        assert resp.status_code == 400
        assert repo.calls == []

    async def test_list_newest_first(self, client):
        await _create(client, name="older")
        await _create(client, name="newer")

        resp = await client.get(BASE)

        data = resp.json()["data"]
        assert [i["name"] for i in data["items"]] == ["newer", "older"]
        assert data["count"] == 2

    async def test_list_served_from_cache_on_second_call(self, client, repo):
        await _create(client)
        await client.get(BASE)
        repo.calls.clear()

        resp = await client.get(BASE)

        assert resp.status_code == 200
        assert repo.calls == []

    async def test_list_with_cache_down_matches(self, client, cache):
        await _create(client)
        up = (await client.get(BASE)).json()["data"]
        cache.store.clear()
        cache.ready = False

        down = (await client.get(BASE)).json()["data"]

        assert down == up


class TestUpdate:
    async def test_partial_update_name(self, client):
        created = await _create(client, name="Lamp", description="Desk lamp")

        resp = await client.put(f"{BASE}/{created['id']}", json={"name": "Light"})

        assert resp.status_code == 200
        assert resp.json()["data"]["name"] == "Light"
        assert resp.json()["data"]["description"] == "Desk lamp"

    async def test_patch_alias(self, client):
        created = await _create(client)

        resp = await client.patch(f"{BASE}/{created['id']}", json={"description": "Floor"})

        assert resp.status_code == 200
        assert resp.json()["data"]["description"] == "Floor"

    async def test_empty_body_rejected(self, client, repo):
        created = await _create(client)
        repo.calls.clear()

        resp = await client.put(f"{BASE}/{created['id']}", json={})

        assert resp.status_code == 400
        assert repo.calls == []

    async def test_missing_is_404(self, client):
        resp = await client.put(f"{BASE}/999", json={"name": "x"})

        assert resp.status_code == 404

    async def test_read_after_update_is_fresh(self, client):
        created = await _create(client)
        await client.get(f"{BASE}/{created['id']}")
        await client.get(BASE)

        await client.put(f"{BASE}/{created['id']}", json={"name": "Light"})

        assert (await client.get(f"{BASE}/{created['id']}")).json()["data"]["name"] == "Light"
        assert (await client.get(BASE)).json()["data"]["items"][0]["name"] == "Light"


class TestDelete:
    async def test_delete_returns_204(self, client, cache):
        created = await _create(client)
        await client.get(f"{BASE}/{created['id']}")

        resp = await client.delete(f"{BASE}/{created['id']}")

        assert resp.status_code == 204
        assert resp.content == b""
        assert item_key(created["id"]) not in cache.store
        assert ITEMS_COLLECTION_KEY not in cache.store
        assert (await client.get(f"{BASE}/{created['id']}")).status_code == 404

    async def test_delete_missing_is_404(self, client):
        resp = await client.delete(f"{BASE}/999")

        assert resp.status_code == 404


class TestErrorsAndMeta:
    async def test_db_failure_is_generic_500(self, client, repo):
        repo.fail_with = RuntimeError("connection refused")

        resp = await client.get(BASE)

        assert resp.status_code == 500
        body = resp.json()
        assert body["code"] == 9002
        assert body["message"] == "Internal server error"

    async def test_db_failure_details_only_in_debug(self, client, repo):
        repo.fail_with = RuntimeError("connection refused")

        with patch("src.main.settings.DEBUG", True):
            resp = await client.get(BASE)

        assert "connection refused" in resp.json()["details"]

    async def test_unhandled_error_keeps_request_id(self, client, repo):
        repo.fail_with = RuntimeError("connection refused")

        resp = await client.get(BASE, headers={"X-Request-ID": "trace-500"})

        assert resp.status_code == 500
        assert resp.headers["X-Request-ID"] == "trace-500"
        assert resp.json()["request_id"] == "trace-500"

    async def test_request_id_echoed(self, client):
        resp = await client.get(BASE, headers={"X-Request-ID": "trace-42"})

        assert resp.headers["X-Request-ID"] == "trace-42"
        assert resp.json()["request_id"] == "trace-42"

    async def test_root_lists_endpoints(self, client):
        resp = await client.get("/")

        assert resp.status_code == 200
        assert resp.json()["endpoints"]["items"] == BASE

    async def test_health_reports_dependencies(self, client, cache):
        app.state.engine = object()
        app.state.item_cache = cache
        db_down = DependencyStatus(connected=False, error="OperationalError: refused")
        with patch("src.main.check_database", AsyncMock(return_value=db_down)):
            resp = await client.get("/api/v1/health")

        assert resp.status_code == 200
        body = resp.json()
        assert body["status"] == "ok"
        assert body["database"] == {"connected": False, "error": "OperationalError: refused"}
        assert body["cache"] == {"connected": True, "error": None}
