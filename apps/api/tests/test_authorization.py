"""Role checks applied before any route handler runs."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

ADMIN_ONLY = [
    ("get", "/api/admin/cell-groups"),
    ("get", "/api/admin/members"),
    ("get", "/api/admin/reports"),
    ("get", "/api/admin/reports/summary"),
    ("get", "/api/admin/attendance/week/2024-03-10"),
    ("get", "/api/export/excel"),
    ("get", "/api/export/csv"),
    ("get", "/api/export/summary"),
]


class TestAdminRoutes:
    @pytest.mark.parametrize("method,path", ADMIN_ONLY)
    def test_requires_token(self, client: TestClient, method, path):
        assert getattr(client, method)(path).status_code == 401

    @pytest.mark.parametrize("method,path", ADMIN_ONLY)
    def test_leader_is_forbidden(self, client: TestClient, leader_headers, method, path):
        response = getattr(client, method)(path, headers=leader_headers)
        assert response.status_code == 403
        assert response.json()["error"]["code"] == "forbidden"

    @pytest.mark.parametrize("method,path", ADMIN_ONLY)
    def test_admin_allowed(self, client: TestClient, admin_headers, method, path):
        assert getattr(client, method)(path, headers=admin_headers).status_code == 200

    def test_leader_cannot_write_meeting_notes(self, client: TestClient, leader_headers):
        response = client.post(
            "/api/meeting-notes",
            json={"weekDate": "2024-03-10", "title": "Notes"},
            headers=leader_headers,
        )
        assert response.status_code == 403

    def test_leader_cannot_write_week_events(self, client: TestClient, leader_headers):
        response = client.post(
            "/api/week-events",
            json={"weekDate": "2024-03-10", "event": "Retreat"},
            headers=leader_headers,
        )
        assert response.status_code == 403


class TestLeaderRoutes:
    def test_requires_token(self, client: TestClient):
        assert client.get("/api/leader/my-cell-group").status_code == 401

    def test_admin_is_a_superset_of_leader(self, client: TestClient, admin_headers):
        # Admin passes the role check; having no group of their own is a 404
        response = client.get("/api/leader/my-cell-group", headers=admin_headers)
        assert response.status_code == 404
        assert response.json()["error"]["message"] == "Cell group not found"


class TestSharedRoutes:
    @pytest.mark.parametrize("path", ["/api/meeting-notes", "/api/week-events"])
    def test_any_authenticated_user_can_read(self, client: TestClient, leader_headers, path):
        assert client.get(path, headers=leader_headers).status_code == 200

    @pytest.mark.parametrize("path", ["/api/meeting-notes", "/api/week-events"])
    def test_anonymous_cannot_read(self, client: TestClient, path):
        assert client.get(path).status_code == 401
