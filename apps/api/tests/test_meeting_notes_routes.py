"""Tests for meeting note routes."""

from __future__ import annotations

from datetime import date
from uuid import uuid4

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from celltrack.common.models import MeetingNote


def _note(db: Session, week: date, title: str = "Cell meeting", content: str = "<p>Hi</p>") -> MeetingNote:
    note = MeetingNote(week_date=week, title=title, content=content)
    db.add(note)
    db.commit()
    db.refresh(note)
    return note


class TestReadNotes:
    def test_list_newest_first(self, client: TestClient, db: Session, leader_headers):
        _note(db, date(2024, 3, 3), "Older")
        _note(db, date(2024, 3, 10), "Newer")

        response = client.get("/api/meeting-notes", headers=leader_headers)
        assert response.status_code == 200
        assert [n["title"] for n in response.json()] == ["Newer", "Older"]

    def test_get_one(self, client: TestClient, db: Session, leader_headers):
        note = _note(db, date(2024, 3, 10))
        response = client.get(f"/api/meeting-notes/{note.id}", headers=leader_headers)
        assert response.json()["week_date"] == "2024-03-10"

    def test_get_unknown(self, client: TestClient, leader_headers):
        response = client.get(f"/api/meeting-notes/{uuid4()}", headers=leader_headers)
        assert response.status_code == 404


class TestWriteNotes:
    def test_create_sanitizes_and_normalizes_week(self, client: TestClient, admin_headers):
        response = client.post(
            "/api/meeting-notes",
            json={
                "weekDate": "2024-03-05",
                "title": "Prayer night",
                "content": '<p onclick="x()">Agenda</p><script>alert(1)</script>',
            },
            headers=admin_headers,
        )
        assert response.status_code == 201
        data = response.json()
        assert data["week_date"] == "2024-03-10"
        assert data["content"] == "<p>Agenda</p>"

    def test_title_required(self, client: TestClient, admin_headers):
        response = client.post(
            "/api/meeting-notes",
            json={"weekDate": "2024-03-10", "title": ""},
            headers=admin_headers,
        )
        assert response.status_code == 400

    def test_one_note_per_week(self, client: TestClient, db: Session, admin_headers):
        _note(db, date(2024, 3, 10))
        response = client.post(
            "/api/meeting-notes",
            json={"weekDate": "2024-03-08", "title": "Again"},
            headers=admin_headers,
        )
        assert response.status_code == 409

    def test_partial_update(self, client: TestClient, db: Session, admin_headers):
        note = _note(db, date(2024, 3, 10), title="Draft", content="<p>Keep</p>")
        response = client.put(
            f"/api/meeting-notes/{note.id}",
            json={"title": "Final"},
            headers=admin_headers,
        )
        assert response.status_code == 200
        assert response.json()["title"] == "Final"
        assert response.json()["content"] == "<p>Keep</p>"

    def test_update_into_taken_week(self, client: TestClient, db: Session, admin_headers):
        _note(db, date(2024, 3, 10))
        note = _note(db, date(2024, 3, 3))
        response = client.put(
            f"/api/meeting-notes/{note.id}",
            json={"weekDate": "2024-03-10"},
            headers=admin_headers,
        )
        assert response.status_code == 409

    def test_update_unknown(self, client: TestClient, admin_headers):
        response = client.put(
            f"/api/meeting-notes/{uuid4()}", json={"title": "x"}, headers=admin_headers
        )
        assert response.status_code == 404

    def test_delete(self, client: TestClient, db: Session, admin_headers, leader_headers):
        note = _note(db, date(2024, 3, 10))
        response = client.delete(f"/api/meeting-notes/{note.id}", headers=admin_headers)
        assert response.status_code == 200
        assert client.get(f"/api/meeting-notes/{note.id}", headers=leader_headers).status_code == 404
        assert client.delete(f"/api/meeting-notes/{note.id}", headers=admin_headers).status_code == 404
