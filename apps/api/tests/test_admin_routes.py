"""Tests for the Admin API."""

from __future__ import annotations

from datetime import date, timedelta
from uuid import uuid4

from fastapi.testclient import TestClient
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from celltrack.auth.utils import verify_password
from celltrack.common.models import CellGroup, Member, User, WeeklyReport

from conftest import WEEK, add_report


def _count(db: Session, model) -> int:
    return db.execute(select(func.count()).select_from(model)).scalar_one()


class TestCellGroupRoutes:
    def test_create_cell_group_with_leader(
        self, client: TestClient, db: Session, admin_headers
    ):
        response = client.post(
            "/api/admin/cell-groups",
            json={
                "name": "Grace Cell",
                "leaderName": "Paul Green",
                "cellId": "cell003",
                "password": "secret123",
            },
            headers=admin_headers,
        )
        assert response.status_code == 201
        data = response.json()
        assert data["name"] == "Grace Cell"
        assert data["leader"]["cell_id"] == "cell003"
        assert data["member_count"] == 0

        leader = db.execute(select(User).where(User.cell_id == "cell003")).scalar_one()
        assert leader.role == "leader"
        assert verify_password("secret123", leader.password_hash)

        login = client.post(
            "/api/auth/login", json={"cellId": "cell003", "password": "secret123"}
        )
        assert login.json()["user"]["cell_group"]["name"] == "Grace Cell"

    def test_duplicate_cell_id_creates_nothing(
        self, client: TestClient, db: Session, admin_headers, cell_group
    ):
        groups_before = _count(db, CellGroup)
        users_before = _count(db, User)

        response = client.post(
            "/api/admin/cell-groups",
            json={
                "name": "Copy Cell",
                "leaderName": "Someone",
                "cellId": "cell001",
                "password": "pw",
            },
            headers=admin_headers,
        )
        assert response.status_code == 409
        assert response.json()["error"]["message"] == "Cell ID already exists"
        assert _count(db, CellGroup) == groups_before
        assert _count(db, User) == users_before

    def test_create_requires_every_field(self, client: TestClient, admin_headers):
        response = client.post(
            "/api/admin/cell-groups",
            json={"name": "Grace Cell", "leaderName": "", "cellId": "c", "password": "p"},
            headers=admin_headers,
        )
        assert response.status_code == 400

    def test_list_shows_active_members_only(
        self, client: TestClient, admin_headers, members, other_group
    ):
        response = client.get("/api/admin/cell-groups", headers=admin_headers)
        assert response.status_code == 200
        groups = response.json()
        assert [g["name"] for g in groups] == ["Faith Cell", "Hope Cell"]
        faith = groups[0]
        assert faith["member_count"] == 2
        assert {m["name"] for m in faith["members"]} == {"Alice Johnson", "Bob Williams"}
        assert faith["leader"]["name"] == "John Smith"

    def test_update_name(self, client: TestClient, admin_headers, cell_group):
        response = client.put(
            f"/api/admin/cell-groups/{cell_group.id}",
            json={"name": "Faith & Power Cell"},
            headers=admin_headers,
        )
        assert response.status_code == 200
        assert response.json()["name"] == "Faith & Power Cell"

    def test_update_unknown(self, client: TestClient, admin_headers):
        response = client.put(
            f"/api/admin/cell-groups/{uuid4()}",
            json={"name": "Ghost"},
            headers=admin_headers,
        )
        assert response.status_code == 404

    def test_delete_removes_group_leader_members_and_reports(
        self, client: TestClient, db: Session, admin_headers, admin_user, members, other_member
    ):
        group_id = members[0].cell_group_id
        add_report(db, members[0], cell_meeting=True)
        add_report(db, other_member, cell_meeting=True)

        response = client.delete(
            f"/api/admin/cell-groups/{group_id}", headers=admin_headers
        )
        assert response.status_code == 200
        assert response.json()["message"] == "Cell group deleted successfully"

        cell_ids = set(db.execute(select(User.cell_id)).scalars())
        assert cell_ids == {"admin", "cell002"}
        assert db.execute(
            select(func.count()).select_from(Member).where(Member.cell_group_id == group_id)
        ).scalar_one() == 0
        # Only the other group's report survives
        assert _count(db, WeeklyReport) == 1

    def test_delete_unknown(self, client: TestClient, admin_headers):
        response = client.delete(f"/api/admin/cell-groups/{uuid4()}", headers=admin_headers)
        assert response.status_code == 404


class TestLeaderRoutes:
    def test_update_name_and_password(
        self, client: TestClient, admin_headers, leader_user
    ):
        response = client.put(
            f"/api/admin/leaders/{leader_user.id}",
            json={"name": "Johnny Smith", "password": "new-pass"},
            headers=admin_headers,
        )
        assert response.status_code == 200
        assert response.json()["name"] == "Johnny Smith"
        assert response.json()["cell_id"] == "cell001"

        old = client.post("/api/auth/login", json={"cellId": "cell001", "password": "leader123"})
        new = client.post("/api/auth/login", json={"cellId": "cell001", "password": "new-pass"})
        assert old.status_code == 401
        assert new.status_code == 200

    def test_cell_id_must_stay_unique(
        self, client: TestClient, admin_headers, leader_user, other_group
    ):
        response = client.put(
            f"/api/admin/leaders/{leader_user.id}",
            json={"cellId": "cell002"},
            headers=admin_headers,
        )
        assert response.status_code == 409

    def test_keeping_own_cell_id_is_fine(self, client: TestClient, admin_headers, leader_user):
        response = client.put(
            f"/api/admin/leaders/{leader_user.id}",
            json={"cellId": "cell001"},
            headers=admin_headers,
        )
        assert response.status_code == 200

    def test_admin_is_not_a_leader(self, client: TestClient, admin_headers, admin_user):
        response = client.put(
            f"/api/admin/leaders/{admin_user.id}",
            json={"name": "Boss"},
            headers=admin_headers,
        )
        assert response.status_code == 404


class TestMemberRoutes:
    def test_create_member(self, client: TestClient, admin_headers, cell_group):
        response = client.post(
            "/api/admin/members",
            json={"name": "Dan Brown", "cellGroupId": str(cell_group.id)},
            headers=admin_headers,
        )
        assert response.status_code == 201
        data = response.json()
        assert data["is_active"] is True
        assert data["cell_group"]["name"] == "Faith Cell"

    def test_create_member_unknown_group(self, client: TestClient, admin_headers):
        response = client.post(
            "/api/admin/members",
            json={"name": "Dan Brown", "cellGroupId": str(uuid4())},
            headers=admin_headers,
        )
        assert response.status_code == 404

    def test_list_includes_inactive(self, client: TestClient, admin_headers, members, other_member):
        response = client.get("/api/admin/members", headers=admin_headers)
        names = [m["name"] for m in response.json()]
        # Ordered by group name, then member name
        assert names == ["Alice Johnson", "Bob Williams", "Carol Davis", "Emma Wilson"]

    def test_list_filtered_by_group(
        self, client: TestClient, admin_headers, members, other_member, other_group
    ):
        response = client.get(
            "/api/admin/members",
            params={"cell_group_id": str(other_group.id)},
            headers=admin_headers,
        )
        assert [m["name"] for m in response.json()] == ["Emma Wilson"]

    def test_partial_update(self, client: TestClient, admin_headers, members, other_group):
        alice = members[0]
        response = client.put(
            f"/api/admin/members/{alice.id}",
            json={"isActive": False, "cellGroupId": str(other_group.id)},
            headers=admin_headers,
        )
        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Alice Johnson"
        assert data["is_active"] is False
        assert data["cell_group"]["name"] == "Hope Cell"

    def test_delete_is_hard_and_takes_reports(
        self, client: TestClient, db: Session, admin_headers, members
    ):
        alice = members[0]
        add_report(db, alice, prayer_count=2)
        alice_id = alice.id

        response = client.delete(f"/api/admin/members/{alice_id}", headers=admin_headers)
        assert response.status_code == 200
        assert db.get(Member, alice_id) is None
        assert _count(db, WeeklyReport) == 0

    def test_delete_unknown(self, client: TestClient, admin_headers):
        assert client.delete(f"/api/admin/members/{uuid4()}", headers=admin_headers).status_code == 404


class TestReportRoutes:
    def test_filters_and_ordering(
        self, client: TestClient, db: Session, admin_headers, members, other_member
    ):
        alice, bob, carol = members
        add_report(db, bob, week=WEEK, bible_chapters_read=1)
        add_report(db, alice, week=WEEK, bible_chapters_read=2)
        add_report(db, alice, week=date(2024, 3, 3), bible_chapters_read=3)
        add_report(db, other_member, week=WEEK)

        response = client.get("/api/admin/reports", headers=admin_headers)
        rows = response.json()
        assert [(r["week_start"], r["member"]["name"]) for r in rows] == [
            ("2024-03-10", "Alice Johnson"),
            ("2024-03-10", "Bob Williams"),
            ("2024-03-10", "Emma Wilson"),
            ("2024-03-03", "Alice Johnson"),
        ]

        by_group = client.get(
            "/api/admin/reports",
            params={"cell_group_id": str(alice.cell_group_id), "week_start": "2024-03-06"},
            headers=admin_headers,
        ).json()
        assert [r["member"]["name"] for r in by_group] == ["Alice Johnson", "Bob Williams"]

        by_member = client.get(
            "/api/admin/reports",
            params={"member_id": str(alice.id)},
            headers=admin_headers,
        ).json()
        assert len(by_member) == 2

    def test_inactive_members_history_stays_visible(
        self, client: TestClient, db: Session, admin_headers, members
    ):
        carol = members[2]
        add_report(db, carol, cell_meeting=True)
        rows = client.get("/api/admin/reports", headers=admin_headers).json()
        assert [r["member"]["name"] for r in rows] == ["Carol Davis"]
        assert rows[0]["member"]["is_active"] is False

    def test_invalid_week(self, client: TestClient, admin_headers):
        response = client.get(
            "/api/admin/reports", params={"week_start": "soon"}, headers=admin_headers
        )
        assert response.status_code == 400

    def test_summary(self, client: TestClient, db: Session, admin_headers, members):
        alice, bob, _ = members
        add_report(db, alice, early_sermon=True, cell_meeting=True, bible_chapters_read=3, prayer_count=5)
        add_report(db, bob, charis_sermon=True, bible_chapters_read=1, prayer_count=2)
        add_report(db, alice, week=date(2024, 3, 3), prayer_count=1)

        rows = client.get("/api/admin/reports/summary", headers=admin_headers).json()
        assert [r["week_start"] for r in rows] == ["2024-03-10", "2024-03-03"]
        latest = rows[0]
        assert latest["report_count"] == 2
        assert latest["total_bible_chapters"] == 4
        assert latest["total_prayers"] == 7
        assert latest["early_sermon_count"] == 1
        assert latest["charis_sermon_count"] == 1
        assert latest["cell_meeting_count"] == 1

    def test_summary_limited_to_twelve_weeks(
        self, client: TestClient, db: Session, admin_headers, members
    ):
        for offset in range(14):
            add_report(db, members[0], week=WEEK - timedelta(weeks=offset))
        rows = client.get("/api/admin/reports/summary", headers=admin_headers).json()
        assert len(rows) == 12
        assert rows[0]["week_start"] == "2024-03-10"


class TestAttendanceRoutes:
    def test_week_grid(self, client: TestClient, db: Session, admin_headers, members, other_member):
        add_report(db, members[0], early_sermon=True)

        response = client.get("/api/admin/attendance/week/2024-03-07", headers=admin_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["week_start"] == "2024-03-10"
        faith, hope = data["cell_groups"]
        assert faith["name"] == "Faith Cell"
        assert [m["name"] for m in faith["members"]] == ["Alice Johnson", "Bob Williams"]
        assert faith["members"][0]["attendance"] == {
            "early_sermon": True,
            "charis_sermon": False,
            "cell_meeting": False,
        }
        assert faith["members"][1]["attendance"]["early_sermon"] is False
        assert hope["members"][0]["name"] == "Emma Wilson"

    def test_batch_creates_reports_with_zero_counters(
        self, client: TestClient, db: Session, admin_headers, members
    ):
        alice, bob, _ = members
        response = client.post(
            "/api/admin/attendance/batch",
            json={
                "weekStart": "2024-03-10",
                "attendance": [
                    {"memberId": str(alice.id), "earlySermon": True, "cellMeeting": True},
                    {"memberId": str(bob.id)},
                ],
            },
            headers=admin_headers,
        )
        assert response.status_code == 200
        assert response.json() == {"message": "Attendance saved successfully", "count": 2}

        report = db.execute(
            select(WeeklyReport).where(WeeklyReport.member_id == alice.id)
        ).scalar_one()
        assert report.early_sermon and report.cell_meeting and not report.charis_sermon
        assert report.bible_chapters_read == 0
        assert report.prayer_count == 0

    def test_batch_update_keeps_counters_and_notes(
        self, client: TestClient, db: Session, admin_headers, members
    ):
        alice = members[0]
        add_report(db, alice, cell_meeting=True, bible_chapters_read=4, prayer_count=6, notes="Sick")

        client.post(
            "/api/admin/attendance/batch",
            json={
                "weekStart": "2024-03-05",
                "attendance": [{"memberId": str(alice.id), "charisSermon": True}],
            },
            headers=admin_headers,
        )

        db.expire_all()
        report = db.execute(select(WeeklyReport)).scalar_one()
        assert report.week_start == WEEK
        assert report.charis_sermon is True
        assert report.cell_meeting is False
        assert report.bible_chapters_read == 4
        assert report.prayer_count == 6
        assert report.notes == "Sick"

    def test_batch_last_duplicate_wins(self, client: TestClient, db: Session, admin_headers, members):
        alice = members[0]
        response = client.post(
            "/api/admin/attendance/batch",
            json={
                "weekStart": "2024-03-10",
                "attendance": [
                    {"memberId": str(alice.id), "earlySermon": True},
                    {"memberId": str(alice.id), "earlySermon": False, "cellMeeting": True},
                ],
            },
            headers=admin_headers,
        )
        assert response.json()["count"] == 1
        report = db.execute(select(WeeklyReport)).scalar_one()
        assert report.early_sermon is False
        assert report.cell_meeting is True

    def test_batch_unknown_member_writes_nothing(
        self, client: TestClient, db: Session, admin_headers, members
    ):
        response = client.post(
            "/api/admin/attendance/batch",
            json={
                "weekStart": "2024-03-10",
                "attendance": [
                    {"memberId": str(members[0].id), "cellMeeting": True},
                    {"memberId": str(uuid4()), "cellMeeting": True},
                ],
            },
            headers=admin_headers,
        )
        assert response.status_code == 404
        assert _count(db, WeeklyReport) == 0

    def test_batch_requires_week(self, client: TestClient, admin_headers):
        response = client.post(
            "/api/admin/attendance/batch",
            json={"attendance": []},
            headers=admin_headers,
        )
        assert response.status_code == 400
