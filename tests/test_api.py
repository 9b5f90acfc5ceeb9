"""
API response and contract tests.
"""

from datetime import UTC, datetime, timedelta
from unittest.mock import Mock

from fastapi.testclient import TestClient

import core.middleware
from core.security import TokenCodec
from main import create_app

SETTINGS_BODY = {
    "general": {"pastDataHours": "48", "dataRefresh": "10", "timezone": "5.5"},
    "pastTrail": {"hours": "12", "plotSize": "Large"},
}


def signup_and_login(client: TestClient, username: str = "alice", password: str = "pw-123") -> dict:
    r = client.post("/signup", json={"username": username, "password": password})
    assert r.status_code == 200
    r = client.post("/validateUser", json={"username": username, "password": password})
    assert r.status_code == 200
    return r.json()


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def test_health_ok(client: TestClient) -> None:
    r = client.get("/health")
    assert r.status_code == 200
    data = r.json()
    assert data["status"] == "ok"
    assert data["service"] == "qtmap-settings"


def test_health_ready(client: TestClient) -> None:
    r = client.get("/health/ready")
    assert r.status_code == 200
    data = r.json()
    assert data["ready"] is True
    assert data["checks"]["database"] == "ok"


def test_health_live(client: TestClient) -> None:
    assert client.get("/health/live").status_code == 200


def test_secure_headers_present(client: TestClient) -> None:
    r = client.get("/health")
    assert r.headers.get("X-Content-Type-Options") == "nosniff"
    assert r.headers.get("X-Frame-Options") == "DENY"
    assert "X-Response-Time-Ms" in r.headers


def test_cors_preflight_allows_authorization(client: TestClient) -> None:
    r = client.options(
        "/saveSettings",
        headers={
            "Origin": "http://localhost:8080",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "Authorization, Content-Type",
        },
    )
    assert r.status_code == 200
    assert r.headers["access-control-allow-origin"] == "*"
    assert "authorization" in r.headers["access-control-allow-headers"].lower()


def test_signup_and_login(client: TestClient, token_codec: TokenCodec) -> None:
    r = client.post("/signup", json={"username": "alice", "password": "pw-123"})
    assert r.json() == {"success": True, "message": "User registered successfully"}

    r = client.post("/validateUser", json={"username": "alice", "password": "pw-123"})
    assert r.status_code == 200
    data = r.json()
    assert data["success"] is True
    assert data["message"] == "User validated successfully"
    assert data["username"] == "alice"
    assert data["userId"]
    identity = token_codec.verify(data["token"])
    assert identity.user_id == data["userId"]
    assert identity.username == "alice"


def test_signup_duplicate(client: TestClient) -> None:
    client.post("/signup", json={"username": "alice", "password": "pw-123"})
    r = client.post("/signup", json={"username": "alice", "password": "other"})
    assert r.status_code == 400
    assert r.json() == {"success": False, "message": "Username already exists"}


def test_signup_missing_fields(client: TestClient) -> None:
    r = client.post("/signup", json={"username": "alice"})
    assert r.status_code == 400
    assert r.json() == {"success": False, "message": "Username and password are required"}


def test_login_missing_fields(client: TestClient) -> None:
    r = client.post("/validateUser", json={"password": "pw"})
    assert r.status_code == 400
    assert r.json()["success"] is False


def test_login_bad_credentials(client: TestClient) -> None:
    signup_and_login(client)
    r = client.post("/validateUser", json={"username": "alice", "password": "nope"})
    assert r.status_code == 401
    assert r.json() == {"success": False, "message": "Invalid username or password"}


def test_malformed_body_is_400(client: TestClient) -> None:
    r = client.post("/validateUser", content="not json", headers={"Content-Type": "application/json"})
    assert r.status_code == 400
    assert r.json() == {"success": False, "message": "Invalid request body"}


def test_protected_requires_token(client: TestClient) -> None:
    r = client.get("/protected")
    assert r.status_code == 401
    assert r.json() == {"success": False, "message": "No token provided"}
    assert r.headers["WWW-Authenticate"] == "Bearer"


def test_protected_rejects_bad_token(client: TestClient) -> None:
    r = client.get("/protected", headers=bearer("garbage"))
    assert r.status_code == 401
    assert r.json() == {"success": False, "message": "Invalid token"}


def test_protected_rejects_expired_token(client: TestClient, token_codec: TokenCodec) -> None:
    token, _ = token_codec.issue("acc-1", "alice", issued_at=datetime.now(UTC) - timedelta(hours=25))
    r = client.get("/protected", headers=bearer(token))
    assert r.status_code == 401
    assert r.json()["message"] == "Invalid token"


def test_protected_returns_identity(client: TestClient) -> None:
    login = signup_and_login(client)
    r = client.get("/protected", headers=bearer(login["token"]))
    assert r.status_code == 200
    data = r.json()
    assert data["success"] is True
    assert data["user"]["userId"] == login["userId"]
    assert data["user"]["username"] == "alice"
    assert data["user"]["exp"] - data["user"]["iat"] == 24 * 3600


def test_settings_require_token(client: TestClient) -> None:
    assert client.post("/saveSettings", json={"userId": "x", "settings": SETTINGS_BODY}).status_code == 401
    assert client.get("/getSettings/x").status_code == 401


def test_save_and_get_settings(client: TestClient) -> None:
    login = signup_and_login(client)
    headers = bearer(login["token"])
    user_id = login["userId"]

    r = client.get(f"/getSettings/{user_id}", headers=headers)
    assert r.status_code == 404
    assert r.json() == {"success": False, "message": "Settings not found for this user"}

    r = client.post("/saveSettings", json={"userId": user_id, "settings": SETTINGS_BODY}, headers=headers)
    assert r.status_code == 200
    saved = r.json()
    assert saved["success"] is True
    assert saved["message"] == "Settings saved successfully"
    assert saved["settings"]["general"] == {"pastDataHours": 48, "dataRefresh": 10, "timezone": 5.5}
    assert saved["settings"]["pastTrail"] == {"hours": 12, "plotSize": "Large"}
    assert saved["settings"]["userId"] == user_id
    assert "updatedAt" in saved["settings"]

    r = client.get(f"/getSettings/{user_id}", headers=headers)
    assert r.status_code == 200
    fetched = r.json()
    assert fetched["message"] == "Settings retrieved successfully"
    assert fetched["settings"] == saved["settings"]


def test_save_settings_timezone_zero(client: TestClient, auth_headers: dict[str, str]) -> None:
    body = {"userId": "test-user-id", "settings": {**SETTINGS_BODY, "general": {**SETTINGS_BODY["general"], "timezone": 0}}}
    r = client.post("/saveSettings", json=body, headers=auth_headers)
    assert r.status_code == 200
    assert r.json()["settings"]["general"]["timezone"] == 0.0


def test_save_settings_out_of_range(client: TestClient, auth_headers: dict[str, str]) -> None:
    body = {"userId": "test-user-id", "settings": {**SETTINGS_BODY, "general": {**SETTINGS_BODY["general"], "timezone": 15}}}
    r = client.post("/saveSettings", json=body, headers=auth_headers)
    assert r.status_code == 400
    assert r.json() == {
        "success": False,
        "message": "Invalid timezone offset. Must be between -12.0 and +14.0",
    }


def test_save_settings_validation(client: TestClient, auth_headers: dict[str, str]) -> None:
    r = client.post("/saveSettings", json={"settings": SETTINGS_BODY}, headers=auth_headers)
    assert r.status_code == 400
    assert r.json()["message"] == "UserId and settings are required"

    r = client.post("/saveSettings", json={"userId": "u", "settings": {"pastTrail": {}}}, headers=auth_headers)
    assert r.status_code == 400
    assert "structure" in r.json()["message"]

    body = {"userId": "u", "settings": {"general": {"dataRefresh": 5, "timezone": 1}, "pastTrail": {"hours": 1, "plotSize": "Small"}}}
    r = client.post("/saveSettings", json=body, headers=auth_headers)
    assert r.status_code == 400
    assert r.json()["message"] == "Missing required settings fields"


def test_get_settings_blank_id(client: TestClient, auth_headers: dict[str, str]) -> None:
    r = client.get("/getSettings/%20", headers=auth_headers)
    assert r.status_code == 400
    assert r.json() == {"success": False, "message": "UserId is required"}
    r = client.get("/getSettings", headers=auth_headers)
    assert r.status_code == 400


def test_openapi_available(client: TestClient) -> None:
    r = client.get("/openapi.json")
    assert r.status_code == 200
    paths = r.json()["paths"]
    for path in ("/validateUser", "/signup", "/protected", "/saveSettings", "/getSettings/{user_id}"):
        assert path in paths


def test_save_settings_oversized_integer(client: TestClient, auth_headers: dict[str, str]) -> None:
    general = {**SETTINGS_BODY["general"], "pastDataHours": "99999999999999999999"}
    body = {"userId": "test-user-id", "settings": {**SETTINGS_BODY, "general": general}}
    r = client.post("/saveSettings", json=body, headers=auth_headers)
    assert r.status_code == 400
    assert r.json()["success"] is False
    assert "past_data_hours" in r.json()["message"]


def test_bearer_scheme_in_openapi(client: TestClient) -> None:
    schema = client.get("/openapi.json").json()
    assert schema["components"]["securitySchemes"]["HTTPBearer"]["scheme"] == "bearer"
    for path, method in (("/protected", "get"), ("/saveSettings", "post"), ("/getSettings/{user_id}", "get")):
        assert {"HTTPBearer": []} in schema["paths"][path][method]["security"]


def test_bearer_scheme_is_case_insensitive(client: TestClient, token_codec: TokenCodec) -> None:
    token, _ = token_codec.issue("acc-1", "alice")
    r = client.get("/protected", headers={"Authorization": f"bearer {token}"})
    assert r.status_code == 200


def test_non_bearer_scheme_is_missing_token(client: TestClient) -> None:
    r = client.get("/protected", headers={"Authorization": "Basic dXNlcjpwdw=="})
    assert r.status_code == 401
    assert r.json()["message"] == "No token provided"


def test_slow_requests_logged(settings, monkeypatch) -> None:
    warning = Mock()
    monkeypatch.setattr(core.middleware.logger, "warning", warning)
    slow_settings = settings.model_copy(update={"SLOW_REQUEST_MS": 0.0})
    with TestClient(create_app(slow_settings)) as c:
        c.get("/health")
    assert any(call.args[0] == "slow_request" for call in warning.call_args_list)
