# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Integration tests for time entry API endpoints."""

from datetime import date, timedelta

import pytest
from conftest import auth

ENTRIES = "/api/v1/entries"


def work_entry(day=None, **values):
    data = {
        "date": (day or date.today()).isoformat(),
        "category": "work",
        "description": "Heat pump installation",
        "start_time": "07:00:00",
        "end_time": "15:30:00",
    }
    data.update(values)
    return data


@pytest.fixture
def entry(client, owner_user):
    response = client.post(ENTRIES, json=work_entry(), headers=auth(owner_user))
    assert response.status_code == 201
    return response.json()


class TestCreateEntry:
    """Tests for POST /api/v1/entries."""

    def test_requires_authentication(self, client):
        response = client.post(ENTRIES, json=work_entry())
        assert response.status_code == 401

    def test_unknown_user_header(self, client):
        response = client.post(
            ENTRIES, json=work_entry(), headers={"X-User-Id": "not-a-uuid"}
        )
        assert response.status_code == 401

    def test_create(self, entry, owner_user):
        assert entry["user_id"] == str(owner_user.id)
        assert entry["status"] == "active"
        assert entry["version"] == 1
        assert entry["owner_action"] is None

    def test_incomplete_interval(self, client, owner_user):
        response = client.post(
            ENTRIES, json=work_entry(end_time=None), headers=auth(owner_user)
        )
        assert response.status_code == 422
        assert response.json()["code"] == "validation_error"

    def test_late_entry_needs_reason(self, client, owner_user):
        day = date.today() - timedelta(days=30)
        response = client.post(ENTRIES, json=work_entry(day), headers=auth(owner_user))
        assert response.status_code == 422
        assert response.json()["code"] == "validation_error"

        response = client.post(
            ENTRIES,
            json=work_entry(day, late_reason="Was on a site without network"),
            headers=auth(owner_user),
        )
        assert response.status_code == 201
        assert response.json()["status"] == "pending_late_approval"

    def test_create_for_other_user_denied(self, client, owner_user, other_user):
        response = client.post(
            ENTRIES,
            json=work_entry(user_id=str(owner_user.id)),
            headers=auth(other_user),
        )
        assert response.status_code == 403
        body = response.json()
        assert body["code"] == "permission_denied"
        assert body["detail"]

    def test_apprentice_needs_reviewer(self, client, apprentice_user, owner_user):
        response = client.post(
            ENTRIES, json=work_entry(), headers=auth(apprentice_user)
        )
        assert response.status_code == 422
        assert response.json()["code"] == "missing_reviewer"

        response = client.post(
            ENTRIES,
            json=work_entry(reviewer_id=str(owner_user.id)),
            headers=auth(apprentice_user),
        )
        assert response.status_code == 201
        assert response.json()["status"] == "pending_peer_review"

    def test_locked_day(self, client, owner_user, office_user):
        response = client.post(
            f"/api/v1/users/{owner_user.id}/locked-days",
            json={"date": date.today().isoformat()},
            headers=auth(office_user),
        )
        assert response.status_code == 201

        response = client.post(ENTRIES, json=work_entry(), headers=auth(owner_user))
        assert response.status_code == 422
        assert response.json()["code"] == "day_locked"


class TestListEntries:
    """Tests for GET /api/v1/entries."""

    def test_list_own(self, client, entry, owner_user):
        response = client.get(ENTRIES, headers=auth(owner_user))
        assert response.status_code == 200
        assert [e["id"] for e in response.json()] == [entry["id"]]

    def test_list_as_lead(self, client, entry, owner_user, lead_user):
        response = client.get(
            ENTRIES, params={"user_id": str(owner_user.id)}, headers=auth(lead_user)
        )
        assert response.status_code == 200
        assert len(response.json()) == 1

    def test_list_denied(self, client, entry, owner_user, other_user):
        response = client.get(
            ENTRIES, params={"user_id": str(owner_user.id)}, headers=auth(other_user)
        )
        assert response.status_code == 403

    def test_get_unknown(self, client, owner_user):
        response = client.get(
            f"{ENTRIES}/00000000-0000-0000-0000-000000000000",
            headers=auth(owner_user),
        )
        assert response.status_code == 404
        assert response.json()["code"] == "not_found"


class TestReviewFlow:
    """Tests for confirm, reject and edit endpoints."""

    def test_confirm(self, client, entry, lead_user):
        response = client.post(
            f"{ENTRIES}/{entry['id']}/confirm", headers=auth(lead_user)
        )
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "confirmed"
        assert body["confirmed_by"] == str(lead_user.id)
        assert body["version"] == 2

    def test_owner_cannot_confirm(self, client, entry, owner_user):
        response = client.post(
            f"{ENTRIES}/{entry['id']}/confirm", headers=auth(owner_user)
        )
        assert response.status_code == 403

    def test_stale_version(self, client, entry, lead_user):
        client.post(f"{ENTRIES}/{entry['id']}/confirm", headers=auth(lead_user))

        response = client.post(
            f"{ENTRIES}/{entry['id']}/reject",
            json={"reason": "Wrong site", "expected_version": 1},
            headers=auth(lead_user),
        )
        assert response.status_code == 409
        assert response.json()["code"] == "concurrent_modification"

    def test_reject_confirmed(self, client, entry, lead_user):
        client.post(f"{ENTRIES}/{entry['id']}/confirm", headers=auth(lead_user))

        response = client.post(
            f"{ENTRIES}/{entry['id']}/reject",
            json={"reason": "Wrong site"},
            headers=auth(lead_user),
        )
        assert response.status_code == 409
        assert response.json()["code"] == "already_confirmed"

    def test_reject_then_confirm(self, client, entry, lead_user):
        response = client.post(
            f"{ENTRIES}/{entry['id']}/reject",
            json={"reason": "Wrong site"},
            headers=auth(lead_user),
        )
        assert response.status_code == 200
        assert response.json()["status"] == "rejected"

        response = client.post(
            f"{ENTRIES}/{entry['id']}/confirm", headers=auth(lead_user)
        )
        assert response.status_code == 409
        assert response.json()["code"] == "already_rejected"

    def test_late_entry_goes_to_admin(
        self, client, owner_user, lead_user, admin_user
    ):
        day = date.today() - timedelta(days=30)
        created = client.post(
            ENTRIES,
            json=work_entry(day, late_reason="Forgot"),
            headers=auth(owner_user),
        ).json()

        response = client.get(f"{ENTRIES}/reviews", headers=auth(admin_user))
        assert response.status_code == 200
        assert [e["id"] for e in response.json()] == [created["id"]]

        queue = client.get(f"{ENTRIES}/reviews", headers=auth(lead_user)).json()
        assert queue == []

    def test_manager_edit_needs_owner_ack(self, client, entry, owner_user, lead_user):
        client.post(f"{ENTRIES}/{entry['id']}/confirm", headers=auth(lead_user))

        response = client.post(
            f"{ENTRIES}/{entry['id']}/edit",
            json={"description": "Heat pump service", "reason": "Typo"},
            headers=auth(lead_user),
        )
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "edit_pending_owner_ack"
        assert body["owner_action"] == "edit_acknowledgement"

        notifications = client.get(
            f"{ENTRIES}/notifications", headers=auth(owner_user)
        ).json()
        assert [n["id"] for n in notifications] == [entry["id"]]

        response = client.post(
            f"{ENTRIES}/{entry['id']}/edit/respond",
            json={"accept": True},
            headers=auth(owner_user),
        )
        assert response.status_code == 200
        body = response.json()
        assert body["description"] == "Heat pump service"
        assert body["owner_action"] is None

        history = client.get(
            f"{ENTRIES}/{entry['id']}/history", headers=auth(owner_user)
        ).json()
        assert len(history) == 1
        assert history[0]["status"] == "confirmed"

    def test_owner_edit_of_active_entry(self, client, entry, owner_user):
        response = client.post(
            f"{ENTRIES}/{entry['id']}/edit",
            json={"end_time": "16:00:00", "reason": "Left later"},
            headers=auth(owner_user),
        )
        assert response.status_code == 200
        body = response.json()
        assert body["end_time"] == "16:00:00"
        assert body["status"] == "active"


class TestDeletion:
    """Tests for deletion endpoints."""

    def test_owner_deletes_unconfirmed(self, client, entry, owner_user):
        response = client.post(
            f"{ENTRIES}/{entry['id']}/deletion",
            json={"reason": "Duplicate"},
            headers=auth(owner_user),
        )
        assert response.status_code == 200
        assert response.json()["status"] == "deleted"

    def test_reason_required(self, client, entry, owner_user):
        response = client.post(
            f"{ENTRIES}/{entry['id']}/deletion", json={}, headers=auth(owner_user)
        )
        assert response.status_code == 422
        assert response.json()["code"] == "missing_reason"

    def test_request_and_confirm(self, client, entry, owner_user, lead_user):
        response = client.post(
            f"{ENTRIES}/{entry['id']}/deletion",
            json={"reason": "Booked twice"},
            headers=auth(lead_user),
        )
        assert response.status_code == 200
        assert response.json()["status"] == "deletion_requested"

        response = client.post(
            f"{ENTRIES}/{entry['id']}/deletion/confirm", headers=auth(owner_user)
        )
        assert response.status_code == 200
        assert response.json()["status"] == "deleted"

    def test_request_and_withdraw(self, client, entry, lead_user):
        client.post(
            f"{ENTRIES}/{entry['id']}/deletion",
            json={"reason": "Booked twice"},
            headers=auth(lead_user),
        )
        response = client.post(
            f"{ENTRIES}/{entry['id']}/deletion/withdraw", headers=auth(lead_user)
        )
        assert response.status_code == 200
        assert response.json()["status"] == "active"

    def test_direct_deletion(self, client, entry, owner_user, office_user):
        response = client.post(
            f"{ENTRIES}/{entry['id']}/deletion",
            json={"reason": "Test booking", "direct": True},
            headers=auth(office_user),
        )
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "deleted"
        assert body["owner_action"] == "deletion_acknowledgement"

        response = client.post(
            f"{ENTRIES}/{entry['id']}/deletion/acknowledge", headers=auth(owner_user)
        )
        assert response.status_code == 200
        assert response.json()["owner_action"] is None


class TestSubmit:
    """Tests for POST /api/v1/entries/submit."""

    def test_submit(self, client, entry, owner_user):
        response = client.post(
            f"{ENTRIES}/submit",
            json={"entry_ids": [entry["id"]]},
            headers=auth(owner_user),
        )
        assert response.status_code == 200
        assert response.json()[0]["submitted"] is True

        response = client.post(
            f"{ENTRIES}/submit",
            json={"entry_ids": [entry["id"]]},
            headers=auth(owner_user),
        )
        assert response.json() == []
