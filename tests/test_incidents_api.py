"""Tests for safety incident reports."""

import pytest


def report(**extra):
    payload = {
        "incident_type": "medical",
        "severity": "medium",
        "title": "Fainting in the lobby",
        "description": "Guest felt faint after the second service",
        "occurred_at": "2025-11-02T11:45:00Z",
        "actions_taken": "Seated, given water, family called",
        "campus_id": "campus-west",
    }
    payload.update(extra)
    return payload


@pytest.fixture
def incidents_url(church_url):
    return f"{church_url}/safety-incidents"


@pytest.mark.api
class TestSafetyIncidents:
    def test_moderator_files_report(self, client, incidents_url, login_as):
        login_as("moderator")

        response = client.post(incidents_url, json=report())

        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "open"
        assert data["reported_by"] == "user-moderator"
        assert data["reporter_name"] == "Mia Moderator"
        assert data["follow_up_needed"] is False

    def test_member_cannot_view_or_file(self, client, incidents_url, login_as):
        login_as("member")

        assert client.get(incidents_url).status_code == 403
        response = client.post(incidents_url, json=report())
        assert response.status_code == 403
        assert response.json()["detail"] == "Only owners, overseers and moderators can manage incident reports"

    def test_outsider_cannot_view(self, client, incidents_url, login_as):
        login_as("outsider")
        assert client.get(incidents_url).status_code == 403

    def test_missing_required_fields(self, client, incidents_url):
        payload = report()
        del payload["actions_taken"]
        assert client.post(incidents_url, json=payload).status_code == 422

    def test_unknown_severity(self, client, incidents_url):
        assert client.post(incidents_url, json=report(severity="apocalyptic")).status_code == 422

    def test_campus_of_other_church(self, client, incidents_url, db):
        db.insert("campuses", {"id": "campus-elsewhere", "church_id": "church-2", "name": "Elsewhere"})
        response = client.post(incidents_url, json=report(campus_id="campus-elsewhere"))
        assert response.status_code == 400

    def test_list_filters_and_orders(self, client, incidents_url):
        client.post(incidents_url, json=report(occurred_at="2025-10-05T09:00:00Z", severity="low"))
        client.post(incidents_url, json=report(occurred_at="2025-11-02T11:45:00Z", severity="high"))
        client.post(incidents_url, json=report(occurred_at="2025-11-09T10:00:00Z", incident_type="security"))

        everything = client.get(incidents_url).json()
        november = client.get(incidents_url, params={"start_date": "2025-11-01"}).json()
        medical = client.get(incidents_url, params={"type": "medical"}).json()
        high = client.get(incidents_url, params={"severity": "high"}).json()

        assert [i["occurred_at"][:10] for i in everything] == ["2025-11-09", "2025-11-02", "2025-10-05"]
        assert len(november) == 2
        assert len(medical) == 2
        assert [i["severity"] for i in high] == ["high"]

    def test_resolving_stamps_and_reopening_clears(self, client, incidents_url, login_as):
        incident_id = client.post(incidents_url, json=report()).json()["id"]
        login_as("overseer")

        resolved = client.put(f"{incidents_url}/{incident_id}", json={"status": "resolved"}).json()
        closed = client.put(f"{incidents_url}/{incident_id}", json={"status": "closed"}).json()
        reopened = client.put(f"{incidents_url}/{incident_id}", json={"status": "under_review"}).json()

        assert resolved["resolved_by"] == "user-overseer"
        assert resolved["resolver_name"] == "Oscar Overseer"
        assert resolved["resolved_at"] is not None
        assert closed["resolved_at"] == resolved["resolved_at"]
        assert reopened["resolved_at"] is None
        assert reopened["resolved_by"] is None

    def test_update_fields(self, client, incidents_url):
        incident_id = client.post(incidents_url, json=report()).json()["id"]

        response = client.put(f"{incidents_url}/{incident_id}", json={
            "follow_up_needed": True,
            "follow_up_notes": "Call the family on Monday",
        })

        assert response.status_code == 200
        assert response.json()["follow_up_needed"] is True
        assert response.json()["status"] == "open"

    def test_get_and_delete(self, client, incidents_url, db):
        incident_id = client.post(incidents_url, json=report()).json()["id"]

        assert client.get(f"{incidents_url}/{incident_id}").json()["title"] == "Fainting in the lobby"
        assert client.delete(f"{incidents_url}/{incident_id}").status_code == 204
        assert db.rows("incident_reports") == []
        assert client.get(f"{incidents_url}/{incident_id}").status_code == 404
        assert client.delete(f"{incidents_url}/{incident_id}").status_code == 404

    def test_unknown_incident(self, client, incidents_url):
        assert client.put(f"{incidents_url}/missing", json={"status": "closed"}).status_code == 404
