"""
Summary API Routes Tests

- GET    /api/summaries[?patientId=]
- POST   /api/summaries
- GET    /api/summaries/{id}
- PUT    /api/summaries/{id}
- DELETE /api/summaries/{id}
"""

import pytest


@pytest.fixture
def summary(client, api_headers, patient_id):
    response = client.post(
        "/api/summaries",
        json={
            "patientId": patient_id,
            "title": "Quarterly review",
            "content": "Blood pressure stable on current medication.",
            "dateFrom": "2024-01-01",
            "dateTo": "2024-03-31",
        },
        headers=api_headers,
    )
    assert response.status_code == 201
    return response.json()["data"]


class TestCreateSummary:
    """Tests for POST /api/summaries"""

    def test_create(self, summary, patient_id):
        assert summary["id"] > 0
        assert summary["patientId"] == patient_id
        assert summary["dateFrom"] == "2024-01-01"
        assert summary["dateTo"] == "2024-03-31"

    def test_dates_are_optional(self, client, api_headers, patient_id):
        response = client.post(
            "/api/summaries",
            json={"patientId": patient_id, "title": "T", "content": "C"},
            headers=api_headers,
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["dateFrom"] is None
        assert data["dateTo"] is None

    def test_bad_date_format(self, client, api_headers, patient_id):
        response = client.post(
            "/api/summaries",
            json={"patientId": patient_id, "title": "T", "content": "C", "dateFrom": "01/01/2024"},
            headers=api_headers,
        )

        assert response.status_code == 400
        assert response.json()["details"][0]["path"] == ["dateFrom"]

    def test_empty_content_rejected(self, client, api_headers, patient_id):
        response = client.post(
            "/api/summaries",
            json={"patientId": patient_id, "title": "T", "content": ""},
            headers=api_headers,
        )

        assert response.status_code == 400

    def test_non_ascii_date_digits_rejected(self, client, api_headers, patient_id):
        response = client.post(
            "/api/summaries",
            json={"patientId": patient_id, "title": "T", "content": "C", "dateFrom": "\u0662\u0660\u0662\u0664-01-01"},
            headers=api_headers,
        )

        assert response.status_code == 400
        assert response.json()["details"][0]["path"] == ["dateFrom"]

    def test_patient_id_beyond_storable_range(self, client, api_headers):
        response = client.post(
            "/api/summaries",
            json={"patientId": 2**63, "title": "T", "content": "C"},
            headers=api_headers,
        )

        assert response.status_code == 400
        assert response.json()["details"][0]["path"] == ["patientId"]

    def test_unknown_patient_is_404(self, client, api_headers):
        response = client.post(
            "/api/summaries",
            json={"patientId": 424242, "title": "T", "content": "C"},
            headers=api_headers,
        )

        assert response.status_code == 404
        assert response.json()["error"] == "Patient not found"


class TestListSummaries:
    """Tests for GET /api/summaries"""

    def test_filter_and_order(self, client, api_headers, patient_id, summary):
        client.post(
            "/api/summaries",
            json={"patientId": patient_id, "title": "Later", "content": "C"},
            headers=api_headers,
        )

        data = client.get(f"/api/summaries?patientId={patient_id}", headers=api_headers).json()["data"]

        assert [s["title"] for s in data] == ["Later", "Quarterly review"]

    def test_malformed_filter(self, client, api_headers):
        response = client.get("/api/summaries?patientId=x1", headers=api_headers)

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid patient ID"

    def test_filter_beyond_storable_range_is_404(self, client, api_headers):
        response = client.get(f"/api/summaries?patientId={2**63}", headers=api_headers)

        assert response.status_code == 404
        assert response.json()["error"] == "Patient not found"


class TestSummaryById:
    """Tests for GET/PUT/DELETE /api/summaries/{id}"""

    def test_get(self, client, api_headers, summary):
        response = client.get(f"/api/summaries/{summary['id']}", headers=api_headers)

        assert response.status_code == 200
        assert response.json()["data"] == summary

    def test_get_missing(self, client, api_headers):
        response = client.get("/api/summaries/99999", headers=api_headers)

        assert response.status_code == 404
        assert response.json()["error"] == "Summary not found"

    def test_get_huge_id_is_404(self, client, api_headers):
        response = client.get("/api/summaries/99999999999999999999", headers=api_headers)

        assert response.status_code == 404
        assert response.json()["error"] == "Summary not found"

    def test_update_dates_only(self, client, api_headers, summary):
        response = client.put(
            f"/api/summaries/{summary['id']}", json={"dateTo": "2024-06-30"}, headers=api_headers
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["dateTo"] == "2024-06-30"
        assert data["dateFrom"] == "2024-01-01"
        assert data["title"] == summary["title"]

    def test_update_null_rejected(self, client, api_headers, summary):
        response = client.put(
            f"/api/summaries/{summary['id']}", json={"dateFrom": None}, headers=api_headers
        )

        assert response.status_code == 400

    def test_update_missing(self, client, api_headers):
        response = client.put("/api/summaries/99999", json={}, headers=api_headers)

        assert response.status_code == 404

    def test_delete(self, client, api_headers, summary):
        response = client.delete(f"/api/summaries/{summary['id']}", headers=api_headers)

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Summary deleted successfully"}
        assert client.delete(f"/api/summaries/{summary['id']}", headers=api_headers).status_code == 404

    def test_malformed_id(self, client, api_headers):
        response = client.delete("/api/summaries/abc", headers=api_headers)

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid summary ID"
