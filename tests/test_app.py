"""
Application-level tests: system endpoints, request ids, error envelope.
"""

import uuid
from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from medrecords.api.errors import format_validation_issues
from medrecords.main import create_app


class TestSystemEndpoints:

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ok"
        assert body["database"] == "healthy"
        assert body["environment"] == "development"
        assert body["uptime"] >= 0
        assert "timestamp" in body

    def test_health_reports_unreachable_database(self, client):
        with patch("medrecords.main.check_connection", new=AsyncMock(return_value=False)):
            response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "degraded"
        assert response.json()["database"] == "unhealthy"

    def test_root_lists_endpoints(self, client):
        body = client.get("/").json()

        assert body["endpoints"]["patients"] == "/api/patients"
        assert body["endpoints"]["notes"] == "/api/notes"
        assert body["endpoints"]["summaries"] == "/api/summaries"
        assert body["endpoints"]["docs"] == "/api-docs"

    def test_openapi_documents_api_key(self, client):
        schema = client.get("/openapi.json").json()

        assert "/api/patients" in schema["paths"]
        assert "/api/notes/{id}" in schema["paths"]
        schemes = schema["components"]["securitySchemes"]
        assert any(s.get("name") == "X-API-Key" for s in schemes.values())


class TestRequestId:

    def test_every_response_has_request_id(self, client, api_headers):
        for response in (
            client.get("/health"),
            client.get("/api/patients", headers=api_headers),
            client.get("/api/patients"),
        ):
            uuid.UUID(response.headers["X-Request-ID"])

    def test_request_ids_are_unique(self, client):
        ids = {client.get("/health").headers["X-Request-ID"] for _ in range(5)}

        assert len(ids) == 5


class TestErrorEnvelope:

    def test_unknown_route(self, client, api_headers):
        response = client.get("/api/unknown", headers=api_headers)

        assert response.status_code == 404
        assert response.json()["success"] is False

    def test_malformed_json_body(self, client, api_headers):
        response = client.post(
            "/api/patients",
            content=b"{not json",
            headers={**api_headers, "Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Validation error"

    def test_issue_paths_drop_location_prefix(self):
        issues = format_validation_issues([
            {"loc": ("body", "lastName"), "msg": "Field required", "type": "missing"},
            {"loc": ("body",), "msg": "Field required", "type": "missing"},
        ])

        assert issues == [
            {"path": ["lastName"], "message": "Field required", "code": "missing"},
            {"path": [], "message": "Field required", "code": "missing"},
        ]

    def test_unhandled_error_keeps_request_and_limit_headers(self, client, api_headers):
        with patch(
            "medrecords.services.patient_service.list_patients",
            new=AsyncMock(side_effect=RuntimeError("unexpected")),
        ):
            response = client.get("/api/patients", headers=api_headers)

        assert response.status_code == 500
        assert response.json() == {"success": False, "error": "Internal server error"}
        uuid.UUID(response.headers["X-Request-ID"])
        assert response.headers["X-RateLimit-Limit"] == "100"
        assert response.headers["X-RateLimit-Remaining"] == "99"
        assert "X-RateLimit-Reset" in response.headers

    def test_unhandled_error_outside_api_keeps_request_id(self, client):
        with patch(
            "medrecords.main.check_connection",
            new=AsyncMock(side_effect=RuntimeError("unexpected")),
        ):
            response = client.get("/health")

        assert response.status_code == 500
        assert response.json() == {"success": False, "error": "Internal server error"}
        uuid.UUID(response.headers["X-Request-ID"])


class TestStartup:

    def test_database_init_failure_aborts_startup(self):
        failure = OperationalError("CREATE TABLE", {}, Exception("unable to open database file"))

        with patch("medrecords.main.init_db", new=AsyncMock(side_effect=failure)):
            with pytest.raises(OperationalError):
                with TestClient(create_app()):
                    pass
