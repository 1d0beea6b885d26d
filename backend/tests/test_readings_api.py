from datetime import datetime

from fastapi.testclient import TestClient

from weatherverse.main import create_app


def test_root_is_liveness_text(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.text == "Server is up!"


def test_health_reports_store(client):
    client.post("/api/readings", json={"temperature": 26, "humidity": 40})

    body = client.get("/health").json()
    assert body["status"] == "healthy"
    assert body["store_mode"] == "history"
    assert body["max_history"] == 24
    assert body["readings"] == 1


def test_latest_before_any_ingest_is_null(client):
    response = client.get("/api/readings/latest")
    assert response.status_code == 200
    assert response.json() is None


def test_history_before_any_ingest_is_empty(client):
    response = client.get("/api/readings/history")
    assert response.status_code == 200
    assert response.json() == []


def test_post_then_get_latest(client):
    response = client.post("/api/readings", json={"temperature": 26, "humidity": 40})
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}

    latest = client.get("/api/readings/latest").json()
    assert latest["temperature"] == 26
    assert latest["humidity"] == 40
    datetime.fromisoformat(latest["timestamp"])


def test_numeric_strings_are_coerced(client, store):
    response = client.post("/api/readings", json={"temperature": "26.5", "humidity": " 41 "})
    assert response.status_code == 200
    assert store.latest().temperature == 26.5
    assert store.latest().humidity == 41.0


def test_device_timestamp_is_kept(client):
    client.post(
        "/api/readings",
        json={"temperature": 26, "humidity": 40, "timestamp": "2025-04-22T09:00:00Z"},
    )
    assert client.get("/api/readings/latest").json()["timestamp"] == "2025-04-22T09:00:00Z"


def test_missing_field_is_rejected_and_store_untouched(client, store):
    response = client.post("/api/readings", json={"temperature": 26})

    assert response.status_code == 400
    assert "humidity is required" in response.json()["detail"]
    assert store.latest() is None


def test_non_numeric_field_is_rejected(client, store):
    response = client.post("/api/readings", json={"temperature": "hot", "humidity": 40})

    assert response.status_code == 400
    assert "temperature" in response.json()["detail"]
    assert store.count == 0


def test_boolean_and_null_fields_are_rejected(client, store):
    assert client.post("/api/readings", json={"temperature": True, "humidity": 40}).status_code == 400
    assert client.post("/api/readings", json={"temperature": None, "humidity": 40}).status_code == 400
    assert store.count == 0


def test_bad_timestamp_is_rejected(client, store):
    response = client.post(
        "/api/readings",
        json={"temperature": 26, "humidity": 40, "timestamp": "yesterday"},
    )
    assert response.status_code == 400
    assert store.count == 0


def test_invalid_json_body_is_rejected(client):
    response = client.post(
        "/api/readings",
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 400


def test_json_array_body_is_rejected(client):
    response = client.post("/api/readings", json=[26, 40])
    assert response.status_code == 400


def test_query_parameters_are_accepted_without_body(client, store):
    response = client.post("/api/readings", params={"temperature": "22", "humidity": "35"})

    assert response.status_code == 200
    assert store.latest().temperature == 22.0


def test_query_parameters_missing_field_is_rejected(client, store):
    response = client.post("/api/readings", params={"temperature": "22"})

    assert response.status_code == 400
    assert "humidity is required" in response.json()["detail"]
    assert store.count == 0


def test_query_parameters_non_numeric_field_is_rejected(client, store):
    response = client.post("/api/readings", params={"temperature": "22", "humidity": "damp"})

    assert response.status_code == 400
    assert "humidity" in response.json()["detail"]
    assert store.count == 0


def test_integer_too_large_for_float_is_rejected(client, store):
    huge = "1" + "0" * 400
    response = client.post(
        "/api/readings",
        content=f'{{"temperature": {huge}, "humidity": 40}}'.encode(),
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert "temperature" in response.json()["detail"]
    assert store.count == 0


def test_history_keeps_last_24_in_arrival_order(client):
    for i in range(1, 26):
        response = client.post("/api/readings", json={"temperature": i, "humidity": 40})
        assert response.status_code == 200

    history = client.get("/api/readings/history").json()
    assert len(history) == 24
    assert [r["temperature"] for r in history] == list(range(2, 26))


def test_repeated_queries_are_identical(client):
    client.post("/api/readings", json={"temperature": 26, "humidity": 40})

    assert client.get("/api/readings/latest").json() == client.get("/api/readings/latest").json()
    assert client.get("/api/readings/history").json() == client.get("/api/readings/history").json()


def test_latest_only_mode_serves_empty_history(latest_store):
    with TestClient(create_app(store=latest_store)) as client:
        client.post("/api/readings", json={"temperature": 20, "humidity": 30})
        client.post("/api/readings", json={"temperature": 21, "humidity": 31})

        assert client.get("/api/readings/latest").json()["temperature"] == 21
        assert client.get("/api/readings/history").json() == []


def test_lifespan_builds_store_from_config():
    with TestClient(create_app()) as client:
        assert client.get("/api/readings/latest").json() is None
        assert client.get("/health").json()["max_history"] == 24


def test_store_missing_before_startup_is_server_error():
    client = TestClient(create_app())
    response = client.get("/api/readings/latest")
    assert response.status_code == 500


# =============================================================================
# LEGACY ENDPOINTS
# =============================================================================

def test_legacy_update_records_reading(client, store):
    response = client.get("/update", params={"temperature": "24", "humidity": "55"})

    assert response.status_code == 200
    assert response.text == "Data updated successfully!"
    assert store.latest().humidity == 55.0


def test_legacy_update_missing_parameter(client, store):
    response = client.get("/update", params={"temperature": "24"})

    assert response.status_code == 400
    assert response.text == "Missing parameters"
    assert store.count == 0


def test_legacy_update_non_numeric_parameter(client, store):
    response = client.get("/update", params={"temperature": "abc", "humidity": "55"})

    assert response.status_code == 400
    assert response.text == "Invalid parameters"
    assert store.count == 0


def test_legacy_data_shape(client):
    assert client.get("/data").json() == {"temperature": None, "humidity": None}

    client.post("/api/readings", json={"temperature": 26, "humidity": 40})
    assert client.get("/data").json() == {"temperature": 26.0, "humidity": 40.0}
