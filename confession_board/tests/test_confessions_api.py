# confession_board/tests/test_confessions_api.py
import pytest

pytestmark = pytest.mark.asyncio

URL = "/api/confessions"


async def test_get_when_file_absent(async_client):
    r = await async_client.get(URL)
    assert r.status_code == 200
    assert r.json() == {"confessions": []}
    assert r.headers["access-control-allow-origin"] == "*"


async def test_post_trims_and_lists(async_client, fake_api):
    r = await async_client.post(URL, json={"name": " Alice ", "text": " hello "})
    assert r.status_code == 201
    body = r.json()
    assert body["success"] is True
    assert body["message"] == "Confession added successfully"
    assert body["confession"]["name"] == "Alice"
    assert body["confession"]["text"] == "hello"

    r2 = await async_client.get(URL)
    assert r2.status_code == 200
    assert [c["id"] for c in r2.json()["confessions"]] == [body["confession"]["id"]]
    assert fake_api.stored()[0]["text"] == "hello"


async def test_post_without_name_is_anonymous(async_client):
    r = await async_client.post(URL, json={"text": "secreto"})
    assert r.status_code == 201
    assert r.json()["confession"]["name"] == "Anonymous"


@pytest.mark.parametrize("payload", [{"text": "   "}, {"name": "Bob"}, {}])
async def test_post_blank_text(async_client, fake_api, payload):
    r = await async_client.post(URL, json=payload)
    assert r.status_code == 400
    assert r.json() == {"error": "Confession text is required"}
    assert fake_api.puts == []


async def test_post_non_object_body(async_client):
    r = await async_client.post(URL, json=["text"])
    assert r.status_code == 400
    assert r.json() == {"error": "Invalid request body"}


async def test_options_preflight(async_client):
    r = await async_client.options(URL)
    assert r.status_code == 200
    assert r.json() == {}
    assert r.headers["access-control-allow-methods"] == "GET, POST, OPTIONS"
    assert r.headers["access-control-allow-headers"] == "Content-Type"


@pytest.mark.parametrize("method", ["PUT", "DELETE", "PATCH", "TRACE", "PROPFIND"])
async def test_other_methods_not_allowed(async_client, method):
    r = await async_client.request(method, URL)
    assert r.status_code == 405
    assert r.json() == {"error": "Method not allowed"}
    assert r.headers["access-control-allow-origin"] == "*"


async def test_browser_preflight_returns_empty_json(async_client):
    r = await async_client.options(URL, headers={
        "Origin": "http://example.com",
        "Access-Control-Request-Method": "POST",
        "Access-Control-Request-Headers": "Content-Type",
    })
    assert r.status_code == 200
    assert r.json() == {}
    assert r.headers["access-control-allow-origin"] == "*"
    assert r.headers["access-control-allow-methods"] == "GET, POST, OPTIONS"


async def test_get_tolerates_null_name(async_client, fake_api):
    fake_api.seed([{"id": 1, "name": None, "text": "x", "timestamp": "2026-10-18T00:00:00.000Z"}])
    r = await async_client.get(URL)
    assert r.status_code == 200
    assert r.json()["confessions"][0]["name"] == "Anonymous"


async def test_store_read_failure_is_500(async_client, fake_api):
    fake_api.fail_get_status = 502
    r = await async_client.get(URL)
    assert r.status_code == 500
    body = r.json()
    assert body["error"] == "Failed to fetch confessions"
    assert "502" in body["message"]


async def test_store_write_conflict_is_500(async_client, fake_api):
    fake_api.seed([])
    fake_api.after_get = lambda: fake_api.seed([
        {"id": 1, "name": "X", "text": "racer", "timestamp": "2026-10-19T00:00:00.000Z"}
    ])
    r = await async_client.post(URL, json={"text": "late"})
    assert r.status_code == 500
    assert r.json()["error"] == "Failed to add confession"
    assert "does not match" in r.json()["message"]


async def test_malformed_store_is_500(async_client, fake_api):
    fake_api.seed("not json at all")
    r = await async_client.get(URL)
    assert r.status_code == 500
    assert "not valid JSON" in r.json()["message"]


async def test_health(async_client):
    r = await async_client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"ok": True}
