"""Tests for ministry and safety schedule endpoints."""

import pytest
from postgrest.exceptions import APIError

MINISTRY_ID = "ministry-worship"


@pytest.fixture
def ministry(db, church_id):
    db.insert("ministries", {
        "id": MINISTRY_ID,
        "church_id": church_id,
        "name": "Worship",
        "category": "worship",
        "is_active": True,
    })
    db.insert("ministry_volunteers", {"id": "vol-1", "ministry_id": MINISTRY_ID, "user_id": "user-member", "is_active": True})
    db.insert("ministry_volunteers", {"id": "vol-2", "ministry_id": MINISTRY_ID, "user_id": "user-moderator", "is_active": True})
    db.insert("ministry_volunteers", {"id": "vol-idle", "ministry_id": MINISTRY_ID, "user_id": "user-overseer", "is_active": False})
    return MINISTRY_ID


@pytest.fixture
def schedules_url(church_url, ministry):
    return f"{church_url}/ministries/{ministry}/schedules"


def shift(volunteer_id="vol-1", day="2025-11-05", start="09:00", end="12:00", **extra):
    return {"volunteer_id": volunteer_id, "scheduled_date": day, "start_time": start, "end_time": end, **extra}


@pytest.mark.api
class TestMinistrySchedules:
    def test_create_schedule(self, client, schedules_url):
        response = client.post(schedules_url, json=shift(service_name="Sunday 9am"))

        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "scheduled"
        assert data["volunteer_id"] == "vol-1"
        assert data["start_time"] == "09:00:00"
        assert data["created_by"] == "user-owner"

    def test_overlapping_booking_conflicts(self, client, schedules_url):
        client.post(schedules_url, json=shift())

        response = client.post(schedules_url, json=shift(start="11:30", end="13:00"))

        assert response.status_code == 409
        assert response.json()["detail"] == (
            "This volunteer is already scheduled during this time period (09:00-12:00)"
        )

    def test_back_to_back_and_other_day_do_not_conflict(self, client, schedules_url):
        client.post(schedules_url, json=shift())

        assert client.post(schedules_url, json=shift(start="12:00", end="13:00")).status_code == 201
        assert client.post(schedules_url, json=shift(day="2025-11-06", start="11:30", end="13:00")).status_code == 201

    def test_other_volunteer_same_slot(self, client, schedules_url):
        client.post(schedules_url, json=shift())
        assert client.post(schedules_url, json=shift(volunteer_id="vol-2")).status_code == 201

    def test_invalid_range(self, client, schedules_url):
        response = client.post(schedules_url, json=shift(start="12:00", end="09:00"))
        assert response.status_code == 400

    @pytest.mark.parametrize("start, end", [
        ("11:30:00Z", "13:00:00Z"),
        ("10:00+02:00", "13:00"),
    ])
    def test_times_with_offset_are_rejected(self, client, schedules_url, db, start, end):
        client.post(schedules_url, json=shift())

        response = client.post(schedules_url, json=shift(start=start, end=end))

        assert response.status_code == 422
        assert len(db.rows("ministry_schedules")) == 1

    def test_update_with_offset_time_is_rejected(self, client, schedules_url):
        schedule_id = client.post(schedules_url, json=shift()).json()["id"]
        response = client.put(f"{schedules_url}/{schedule_id}", json={"start_time": "10:00-05:00"})
        assert response.status_code == 422

    def test_inactive_volunteer(self, client, schedules_url):
        response = client.post(schedules_url, json=shift(volunteer_id="vol-idle"))
        assert response.status_code == 400
        assert "inactive" in response.json()["detail"]

    def test_unknown_volunteer(self, client, schedules_url):
        assert client.post(schedules_url, json=shift(volunteer_id="vol-missing")).status_code == 404

    def test_member_cannot_schedule(self, client, schedules_url, login_as):
        login_as("member")
        response = client.post(schedules_url, json=shift())
        assert response.status_code == 403
        assert response.json()["detail"] == "Only owners and overseers can manage schedules"

    def test_overseer_can_schedule(self, client, schedules_url, login_as):
        login_as("overseer")
        assert client.post(schedules_url, json=shift()).status_code == 201

    def test_members_can_list(self, client, schedules_url, login_as):
        client.post(schedules_url, json=shift())
        client.post(schedules_url, json=shift(day="2025-11-06"))
        login_as("member")

        response = client.get(schedules_url, params={"start_date": "2025-11-06"})

        assert response.status_code == 200
        assert [s["scheduled_date"] for s in response.json()] == ["2025-11-06"]

    def test_outsider_cannot_list(self, client, schedules_url, login_as):
        login_as("outsider")
        response = client.get(schedules_url)
        assert response.status_code == 403
        assert response.json()["detail"] == "You must be a member of this church"

    def test_cancel_frees_slot(self, client, schedules_url):
        schedule_id = client.post(schedules_url, json=shift()).json()["id"]

        response = client.put(f"{schedules_url}/{schedule_id}", json={"status": "cancelled"})

        assert response.status_code == 200
        assert response.json()["status"] == "cancelled"
        assert client.post(schedules_url, json=shift()).status_code == 201

    def test_terminal_status_cannot_be_reopened(self, client, schedules_url):
        schedule_id = client.post(schedules_url, json=shift()).json()["id"]
        client.put(f"{schedules_url}/{schedule_id}", json={"status": "completed"})

        response = client.put(f"{schedules_url}/{schedule_id}", json={"status": "scheduled"})

        assert response.status_code == 409
        assert "completed" in response.json()["detail"]

    def test_resending_status_is_accepted(self, client, schedules_url):
        schedule_id = client.post(schedules_url, json=shift()).json()["id"]
        response = client.put(f"{schedules_url}/{schedule_id}", json={"status": "scheduled", "notes": "bring capo"})
        assert response.status_code == 200
        assert response.json()["notes"] == "bring capo"

    def test_moving_into_taken_slot_conflicts(self, client, schedules_url):
        client.post(schedules_url, json=shift())
        later_id = client.post(schedules_url, json=shift(start="13:00", end="14:00")).json()["id"]

        response = client.put(f"{schedules_url}/{later_id}", json={"start_time": "11:00"})

        assert response.status_code == 409

    def test_update_ignores_own_booking(self, client, schedules_url):
        schedule_id = client.post(schedules_url, json=shift()).json()["id"]

        response = client.put(f"{schedules_url}/{schedule_id}", json={"start_time": "10:00", "end_time": "11:00"})

        assert response.status_code == 200
        assert response.json()["start_time"] == "10:00:00"

    def test_update_to_invalid_range(self, client, schedules_url):
        schedule_id = client.post(schedules_url, json=shift()).json()["id"]
        response = client.put(f"{schedules_url}/{schedule_id}", json={"end_time": "08:00"})
        assert response.status_code == 400

    def test_reassign_to_busy_volunteer(self, client, schedules_url):
        client.post(schedules_url, json=shift(volunteer_id="vol-2"))
        schedule_id = client.post(schedules_url, json=shift()).json()["id"]

        response = client.put(f"{schedules_url}/{schedule_id}", json={"volunteer_id": "vol-2"})

        assert response.status_code == 409

    def test_delete_schedule(self, client, schedules_url, db):
        schedule_id = client.post(schedules_url, json=shift()).json()["id"]

        assert client.delete(f"{schedules_url}/{schedule_id}").status_code == 204
        assert db.rows("ministry_schedules") == []
        assert client.delete(f"{schedules_url}/{schedule_id}").status_code == 404

    def test_storage_exclusion_violation_is_conflict(self, client, schedules_url, db, monkeypatch):
        def reject(table, payload):
            raise APIError({"message": "conflicting key value violates exclusion constraint", "code": "23P01"})

        monkeypatch.setattr(db, "insert", reject)

        response = client.post(schedules_url, json=shift())

        assert response.status_code == 409

    def test_schedule_in_other_ministry_is_not_found(self, client, church_url, church_id, db, ministry):
        db.insert("ministries", {"id": "ministry-kids", "church_id": church_id, "name": "Kids", "category": "children"})
        response = client.post(f"{church_url}/ministries/ministry-kids/schedules", json=shift())
        assert response.status_code == 404


@pytest.fixture
def safety_team(db, church_id):
    db.insert("safety_team_members", {"id": "safety-1", "church_id": church_id, "user_id": "user-member", "is_active": True})
    db.insert("safety_team_members", {"id": "safety-2", "church_id": church_id, "user_id": "user-moderator", "is_active": True})


def watch(member_id="safety-1", day="2025-11-05", start="09:00", end="12:00"):
    return {"safety_member_id": member_id, "scheduled_date": day, "start_time": start, "end_time": end}


@pytest.mark.api
class TestSafetySchedules:
    def test_conflict_names_member(self, client, church_url, safety_team):
        url = f"{church_url}/safety-schedules"
        assert client.post(url, json=watch()).status_code == 201

        response = client.post(url, json=watch(start="11:30", end="13:00"))

        assert response.status_code == 409
        assert response.json()["detail"] == (
            "This member is already scheduled during this time period (09:00-12:00)"
        )

    def test_no_show_is_not_a_safety_status(self, client, church_url, safety_team):
        url = f"{church_url}/safety-schedules"
        schedule_id = client.post(url, json=watch()).json()["id"]

        response = client.put(f"{url}/{schedule_id}", json={"status": "no_show"})

        assert response.status_code == 409

    def test_moderator_cannot_schedule(self, client, church_url, safety_team, login_as):
        login_as("moderator")
        response = client.post(f"{church_url}/safety-schedules", json=watch())
        assert response.status_code == 403


@pytest.mark.api
class TestSafetyTeam:
    def test_add_member(self, client, church_url):
        response = client.post(f"{church_url}/safety-team", json={"user_id": "user-member", "specialty": "medical"})

        assert response.status_code == 201
        assert response.json()["specialty"] == "medical"
        assert response.json()["is_active"] is True

    def test_add_non_member(self, client, church_url):
        response = client.post(f"{church_url}/safety-team", json={"user_id": "user-outsider"})
        assert response.status_code == 400

    def test_add_twice(self, client, church_url, safety_team):
        response = client.post(f"{church_url}/safety-team", json={"user_id": "user-member"})
        assert response.status_code == 409

    def test_deactivated_member_cannot_be_scheduled(self, client, church_url, safety_team):
        client.put(f"{church_url}/safety-team/safety-1", json={"is_active": False})

        response = client.post(f"{church_url}/safety-schedules", json=watch())

        assert response.status_code == 400

    def test_member_cannot_manage_team(self, client, church_url, safety_team, login_as):
        login_as("member")
        response = client.delete(f"{church_url}/safety-team/safety-1")
        assert response.status_code == 403
        assert response.json()["detail"] == "Only owners and overseers can manage the safety team"


@pytest.mark.api
class TestMinistries:
    def test_create_and_duplicate_name(self, client, church_url):
        payload = {"name": "Hospitality", "category": "outreach"}

        assert client.post(f"{church_url}/ministries", json=payload).status_code == 201
        assert client.post(f"{church_url}/ministries", json=payload).status_code == 409

    def test_add_volunteer(self, client, church_url, ministry):
        response = client.post(f"{church_url}/ministries/{ministry}/volunteers", json={"user_id": "user-member-east"})
        assert response.status_code == 201
        assert response.json()["ministry_id"] == ministry

    def test_add_existing_volunteer(self, client, church_url, ministry):
        response = client.post(f"{church_url}/ministries/{ministry}/volunteers", json={"user_id": "user-member"})
        assert response.status_code == 409

    def test_moderator_cannot_create(self, client, church_url, login_as):
        login_as("moderator")
        response = client.post(f"{church_url}/ministries", json={"name": "Youth", "category": "youth"})
        assert response.status_code == 403
