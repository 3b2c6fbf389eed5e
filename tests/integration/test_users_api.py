# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Integration tests for user settings, absence and health endpoints."""

from conftest import auth

USERS = "/api/v1/users"
ABSENCES = "/api/v1/absences"


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}


class TestWorkModel:
    """Tests for /api/v1/users/{user_id}/work-model."""

    def test_defaults(self, client, owner_user):
        response = client.get(
            f"{USERS}/{owner_user.id}/work-model", headers=auth(owner_user)
        )
        assert response.status_code == 200
        body = response.json()
        assert len(body) == 7
        assert body[0]["target_hours"] == 8.5
        assert body[4]["target_hours"] == 4.5
        assert body[6]["target_hours"] == 0

    def test_update(self, client, owner_user):
        response = client.put(
            f"{USERS}/{owner_user.id}/work-model",
            json={"days": [{"weekday": 4, "target_hours": 6, "start_time": "07:00"}]},
            headers=auth(owner_user),
        )
        assert response.status_code == 200
        assert response.json() == [
            {"weekday": 4, "target_hours": 6.0, "start_time": "07:00:00"}
        ]

    def test_invalid_weekday(self, client, owner_user):
        response = client.put(
            f"{USERS}/{owner_user.id}/work-model",
            json={"days": [{"weekday": 7, "target_hours": 6}]},
            headers=auth(owner_user),
        )
        assert response.status_code == 422

    def test_update_denied(self, client, owner_user, other_user):
        response = client.put(
            f"{USERS}/{owner_user.id}/work-model",
            json={"days": [{"weekday": 0, "target_hours": 6}]},
            headers=auth(other_user),
        )
        assert response.status_code == 403


class TestLockedDays:
    """Tests for /api/v1/users/{user_id}/locked-days."""

    def test_lock_list_unlock(self, client, owner_user, office_user):
        response = client.post(
            f"{USERS}/{owner_user.id}/locked-days",
            json={"date": "2026-08-03"},
            headers=auth(office_user),
        )
        assert response.status_code == 201
        assert response.json()["locked_by"] == str(office_user.id)

        response = client.get(
            f"{USERS}/{owner_user.id}/locked-days", headers=auth(owner_user)
        )
        assert response.json() == ["2026-08-03"]

        response = client.delete(
            f"{USERS}/{owner_user.id}/locked-days/2026-08-03", headers=auth(office_user)
        )
        assert response.status_code == 200
        response = client.get(
            f"{USERS}/{owner_user.id}/locked-days", headers=auth(owner_user)
        )
        assert response.json() == []

    def test_lock_denied(self, client, owner_user):
        response = client.post(
            f"{USERS}/{owner_user.id}/locked-days",
            json={"date": "2026-08-03"},
            headers=auth(owner_user),
        )
        assert response.status_code == 403


class TestAbsences:
    """Tests for /api/v1/absences."""

    def test_create_and_split(self, client, owner_user):
        response = client.post(
            ABSENCES,
            json={
                "start_date": "2026-08-03",
                "end_date": "2026-08-07",
                "category": "sick",
            },
            headers=auth(owner_user),
        )
        assert response.status_code == 201
        absence_id = response.json()["id"]

        response = client.delete(
            f"{ABSENCES}/{absence_id}/days/2026-08-05", headers=auth(owner_user)
        )
        assert response.status_code == 200
        assert [(a["start_date"], a["end_date"]) for a in response.json()] == [
            ("2026-08-03", "2026-08-04"),
            ("2026-08-06", "2026-08-07"),
        ]

        response = client.get(
            ABSENCES, params={"year": 2026}, headers=auth(owner_user)
        )
        assert len(response.json()) == 2

    def test_invalid_range(self, client, owner_user):
        response = client.post(
            ABSENCES,
            json={
                "start_date": "2026-08-07",
                "end_date": "2026-08-03",
                "category": "vacation",
            },
            headers=auth(owner_user),
        )
        assert response.status_code == 422

    def test_create_for_other_user_denied(self, client, owner_user, other_user):
        response = client.post(
            ABSENCES,
            json={
                "user_id": str(owner_user.id),
                "start_date": "2026-08-03",
                "end_date": "2026-08-03",
                "category": "vacation",
            },
            headers=auth(other_user),
        )
        assert response.status_code == 403
