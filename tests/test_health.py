def test_health_check(client):
    response = client.get("/health")
    assert response.status_code == 200

    payload = response.json()
    assert payload["status_code"] == 200
    assert payload["status"] == "success"
    assert payload["message"] == "Service is healthy"
    assert payload["data"] == {"status": "ok", "service": "Compath"}


def test_root_info(client):
    response = client.get("/")
    assert response.status_code == 200
    payload = response.json()
    assert payload["app_name"] == "Compath API"
    assert payload["version"] == "1.0.0"
    assert payload["docs_url"] == "/docs"
    assert payload["api_base"] == "/api/v1"


def test_status_reports_ai_disabled_without_key(client):
    response = client.get("/api/v1/status")
    assert response.status_code == 200
    data = response.json()["data"]
    assert data == {"status": "ok", "ai_enabled": False, "version": "1.0.0"}


def test_lifespan_attaches_cache(client, test_app):
    assert test_app.state.response_cache is not None
    assert len(test_app.state.response_cache) == 0


def test_unknown_route_uses_error_envelope(client):
    response = client.get("/api/v1/nope")
    assert response.status_code == 404
    payload = response.json()
    assert payload["status"] == "error"
    assert payload["status_code"] == 404


def test_validation_error_envelope(client):
    response = client.post("/api/v1/store-doctor/diagnose", json={"lang": "en"})
    assert response.status_code == 422
    payload = response.json()
    assert payload["message"] == "Validation failed"
    assert payload["data"]["errors"]


def test_lifespan_leaves_llm_client_unset_without_key(client, test_app):
    assert test_app.state.llm_client is None
