import base64
import json

import pytest
from sqlalchemy import insert

from nodegraph.api import gateway
from nodegraph.api.gateway import GatewayAdapter
from nodegraph.core.config import Settings
from nodegraph.core.exceptions import DatabaseUnavailableException
from nodegraph.db.schema import connections


@pytest.fixture
def adapter(test_settings):
    adapter = GatewayAdapter.from_settings(test_settings)
    try:
        yield adapter
    finally:
        adapter.close()


def event(method: str, path: str, body: str | None = None, **extra) -> dict:
    return {"httpMethod": method, "path": path, "body": body, "headers": {}, **extra}


def test_create_then_list_scenario(adapter, sync_engine):
    created = adapter.handle(event("POST", "/nodes", '{"title":"A","content":"hello"}'))
    assert created["statusCode"] == 201
    assert created["headers"] == {"Content-Type": "application/json"}
    assert json.loads(created["body"]) == {"id": 1, "title": "A", "content": "hello"}

    with sync_engine.begin() as conn:
        conn.execute(insert(connections).values(source_id=1, target_id=7))

    listed = adapter.handle(event("GET", "/nodes"))
    assert listed["statusCode"] == 200
    assert json.loads(listed["body"]) == {
        "nodes": [{"id": 1, "title": "A", "content": "hello"}],
        "edges": [{"source_id": 1, "target_id": 7}],
    }


def test_health(adapter):
    response = adapter.handle(event("GET", "/health"))

    assert response["statusCode"] == 200
    assert response["body"] == '{"status":"ok"}'


@pytest.mark.parametrize(
    "body, message",
    [
        ('{"title":"","content":"hello"}', "Title and Content cannot be empty"),
        ('{"title":"A"}', "Title and Content cannot be empty"),
        (None, None),
        ("not json", None),
    ],
)
def test_bad_requests(adapter, body, message):
    response = adapter.handle(event("POST", "/nodes", body))

    assert response["statusCode"] == 400
    payload = json.loads(response["body"])
    if message:
        assert payload == {"message": message}
    else:
        assert payload["message"]

    assert json.loads(adapter.handle(event("GET", "/nodes"))["body"])["nodes"] == []


def test_base64_encoded_body_is_decoded(adapter):
    body = base64.b64encode(b'{"title":"A","content":"hello"}').decode()
    response = adapter.handle(event("POST", "/nodes", body, isBase64Encoded=True))

    assert response["statusCode"] == 201
    assert json.loads(response["body"])["title"] == "A"


def test_invalid_base64_body_is_a_bad_request(adapter):
    response = adapter.handle(event("POST", "/nodes", "***", isBase64Encoded=True))
    assert response["statusCode"] == 400


@pytest.mark.parametrize(
    "method, path",
    [("GET", "/"), ("DELETE", "/nodes"), ("GET", "/nodes/"), ("get", "/nodes"), ("POST", "/health")],
)
def test_unmatched_routes(adapter, method, path):
    response = adapter.handle(event(method, path))

    assert response["statusCode"] == 404
    assert json.loads(response["body"]) == {"message": "Not found"}


def test_event_without_method_is_a_bad_request(adapter):
    response = adapter.handle({"path": "/nodes"})
    assert response["statusCode"] == 400


def test_storage_failure_is_internal_error(adapter, sync_engine):
    with sync_engine.begin() as conn:
        conn.exec_driver_sql("DROP TABLE nodes")

    response = adapter.handle(event("GET", "/nodes"))
    assert response["statusCode"] == 500
    assert "nodes" in json.loads(response["body"])["message"]


def test_cold_start_fails_when_database_is_unreachable(tmp_path):
    settings = Settings(DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'graph.db'}")

    with pytest.raises(DatabaseUnavailableException):
        GatewayAdapter.from_settings(settings)


def test_handler_reuses_one_adapter(monkeypatch, test_settings):
    monkeypatch.setattr(gateway, "default_settings", test_settings)
    monkeypatch.setattr(gateway, "_adapter", None)

    first = gateway.handler(event("POST", "/nodes", '{"title":"A","content":"hello"}'), None)
    adapter = gateway._adapter
    second = gateway.handler(event("POST", "/nodes", '{"title":"B","content":"world"}'), None)

    try:
        assert gateway._adapter is adapter
        assert json.loads(first["body"])["id"] == 1
        assert json.loads(second["body"])["id"] == 2
    finally:
        adapter.close()


def test_unscannable_edge_row_is_internal_error(adapter, sync_engine):
    with sync_engine.begin() as conn:
        conn.exec_driver_sql("DROP TABLE connections")
        conn.exec_driver_sql("CREATE TABLE connections (source_id INTEGER, target_id INTEGER)")
        conn.exec_driver_sql("INSERT INTO connections (source_id, target_id) VALUES (1, NULL)")

    response = adapter.handle(event("GET", "/nodes"))
    assert response["statusCode"] == 500
    assert "Edge" in json.loads(response["body"])["message"]

    # The adapter keeps serving after the failure.
    assert adapter.handle(event("GET", "/health"))["statusCode"] == 200


def test_insert_failure_is_internal_error(adapter, sync_engine):
    with sync_engine.begin() as conn:
        conn.exec_driver_sql("DROP TABLE nodes")

    response = adapter.handle(event("POST", "/nodes", '{"title":"A","content":"hello"}'))
    assert response["statusCode"] == 500
    assert "nodes" in json.loads(response["body"])["message"]
