"""HTTP-level tests for the meeting status and schedule routes."""

import pytest
from bson import ObjectId
from pymongo.errors import PyMongoError

from app.db.mongodb import COLLECTIONS
from app.services.meeting_status_service import MeetingStatusService, get_meeting_status_service
from app.services.mongo_service import MeetingStatusStore

STATUS_URL = "/api/meeting-status"


def _completed(meeting_id, mentee, **overrides):
    body = {
        "status": "Completed",
        "meetingMinutes": "Discussed progress",
        "phaseId": 1,
        "meetingId": str(meeting_id),
        "menteeId": str(mentee),
        "mentorEmail": "m@x.com",
    }
    body.update(overrides)
    return body


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------


def test_mentees_by_mentor(client, mongo_db, mentor, mentee):
    mongo_db[COLLECTIONS["assignments"]].insert_one({"mentor_user_id": mentor, "mentee_user_ids": [mentee]})

    response = client.get(f"{STATUS_URL}/mentees", params={"email": "M@x.com"})

    assert response.status_code == 200
    assert response.json() == {
        "assignedMentees": [{"id": str(mentee), "name": "Uday Mentee", "email": "u1@x.com"}]
    }


def test_mentees_by_mentor_errors(client, mentor):
    assert client.get(f"{STATUS_URL}/mentees").status_code == 400
    assert client.get(f"{STATUS_URL}/mentees", params={"email": "ghost@x.com"}).status_code == 404


def test_mentee_by_email(client, mentee):
    response = client.get(f"{STATUS_URL}/mentee/by-email", params={"email": "u1@x.com"})

    assert response.status_code == 200
    assert response.json()["id"] == str(mentee)


def test_mentee_by_email_errors(client, mongo_db):
    missing = client.get(f"{STATUS_URL}/mentee/by-email")
    assert missing.status_code == 400
    assert missing.json() == {"message": "Mentee email required", "success": False}
    assert client.get(f"{STATUS_URL}/mentee/by-email", params={"email": "x@y.z"}).status_code == 404


# ---------------------------------------------------------------------------
# Scenarios
# ---------------------------------------------------------------------------


def test_scenario_a_completed(client, mongo_db, mentor, mentee, meeting_id):
    response = client.post(STATUS_URL, json=_completed(meeting_id, mentee))

    assert response.status_code == 201
    body = response.json()
    assert body["count"] == 1
    assert body["phaseId"] == 1
    record = body["statuses"][0]
    assert record["status"] == "Completed"
    assert record["meeting_minutes"] == "Discussed progress"
    assert record["statusApproval"] == "Pending"
    assert "_id" in record


def test_scenario_b_postponed_overwrites(client, mongo_db, mentor, mentee, meeting_id):
    client.post(STATUS_URL, json=_completed(meeting_id, mentee))
    body = {
        "status": "Postponed",
        "postponed_reason": "mentor sick",
        "phaseId": 1,
        "meetingId": str(meeting_id),
        "menteeId": str(mentee),
        "mentorEmail": "m@x.com",
    }

    response = client.post(STATUS_URL, json=body)

    assert response.status_code == 201
    record = response.json()["statuses"][0]
    assert record["status"] == "Postponed"
    assert record["meeting_minutes"] == "mentor sick"
    assert record["postponed_reason"] == ""
    assert record["statusApproval"] == "Pending"
    assert mongo_db[COLLECTIONS["statuses"]].count_documents({}) == 1


def test_postponed_reason_camel_case(client, mentor, mentee, meeting_id):
    body = _completed(meeting_id, mentee, status="Postponed", meetingMinutes=None, postponedReason="exams")

    response = client.post(STATUS_URL, json=body)

    assert response.status_code == 201
    assert response.json()["statuses"][0]["meeting_minutes"] == "exams"


def test_scenario_c_partial_targets(client, mongo_db, make_user, mentor, mentee, meeting_id):
    body = _completed(meeting_id, mentee, menteeId=None, menteeIds=[str(mentee), str(ObjectId())])

    response = client.post(STATUS_URL, json=body)

    assert response.status_code == 201
    assert response.json()["count"] == 1
    stored = list(mongo_db[COLLECTIONS["statuses"]].find())
    assert [doc["mentee_user_id"] for doc in stored] == [mentee]


def test_scenario_d_no_valid_targets(client, mongo_db, mentor, meeting_id):
    response = client.post(STATUS_URL, json=_completed(meeting_id, ObjectId()))

    assert response.status_code == 400
    assert response.json()["message"] == "No valid mentee IDs processed"
    assert mongo_db[COLLECTIONS["statuses"]].count_documents({}) == 0


def test_scenario_e_approval_then_edit(client, mongo_db, mentor, mentee, meeting_id):
    status_id = client.post(STATUS_URL, json=_completed(meeting_id, mentee)).json()["statuses"][0]["_id"]

    approved = client.post(f"{STATUS_URL}/approval", json={"statusId": status_id, "action": "Approved"})
    assert approved.status_code == 200
    assert approved.json()["message"] == "Status approved successfully"
    statuses = mongo_db[COLLECTIONS["statuses"]]
    assert statuses.find_one({"_id": ObjectId(status_id)})["statusApproval"] == "Approved"

    edited = client.post(f"{STATUS_URL}/minutes", json={"statusId": status_id, "minutes": "new text"})
    assert edited.status_code == 200
    record = statuses.find_one({"_id": ObjectId(status_id)})
    assert record["statusApproval"] == "Pending"
    assert record["meeting_minutes"] == "new text"


# ---------------------------------------------------------------------------
# Submit validation
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("overrides,message", [
    ({"phaseId": None}, "phaseId is required"),
    ({"phaseId": 0}, "Invalid phaseId"),
    ({"phaseId": "x"}, "Invalid phaseId"),
    ({"mentorEmail": None}, "Required fields missing"),
    ({"meetingMinutes": ""}, "Meeting minutes required for completed status"),
    ({"status": "Postponed"}, "Postponed reason required for postponed status"),
])
def test_submit_validation(client, mongo_db, mentor, mentee, meeting_id, overrides, message):
    response = client.post(STATUS_URL, json=_completed(meeting_id, mentee, **overrides))

    assert response.status_code == 400
    assert response.json()["message"] == message
    assert mongo_db[COLLECTIONS["statuses"]].count_documents({}) == 0


def test_submit_string_phase_id(client, mentor, mentee, meeting_id):
    response = client.post(STATUS_URL, json=_completed(meeting_id, mentee, phaseId="2"))

    assert response.status_code == 201
    assert response.json()["phaseId"] == 2


def test_submit_unknown_mentor(client, mongo_db, mentee, meeting_id):
    response = client.post(STATUS_URL, json=_completed(meeting_id, mentee))

    assert response.status_code == 404
    assert response.json()["message"] == "Mentor not found"


def test_unparseable_mentee_ids_are_skipped(client, mongo_db, mentor, mentee, meeting_id):
    body = _completed(meeting_id, mentee, menteeId=None, menteeIds=[str(mentee), None, 42])

    response = client.post(STATUS_URL, json=body)

    assert response.status_code == 201
    assert response.json()["count"] == 1
    assert mongo_db[COLLECTIONS["statuses"]].count_documents({}) == 1


def test_blank_reason_falls_through_to_other_spelling(client, mentor, mentee, meeting_id):
    body = _completed(
        meeting_id, mentee,
        status="Postponed", meetingMinutes=None, postponed_reason="   ", postponedReason="mentor sick",
    )

    response = client.post(STATUS_URL, json=body)

    assert response.status_code == 201
    assert response.json()["statuses"][0]["meeting_minutes"] == "mentor sick"


@pytest.mark.parametrize("phase_id", [10**20, "1e20"])
def test_out_of_range_phase_id(client, mongo_db, mentor, mentee, meeting_id, phase_id):
    response = client.post(STATUS_URL, json=_completed(meeting_id, mentee, phaseId=phase_id))

    assert response.status_code == 400
    assert response.json() == {"message": "Invalid phaseId", "success": False}
    assert client.get(f"{STATUS_URL}/phase/{10**20}").status_code == 400
    assert client.get("/api/meeting-schedules", params={"phaseId": 10**20}).status_code == 400


def test_malformed_body_is_400(client, mongo_db):
    response = client.post(STATUS_URL, json={"menteeIds": "not-a-list"})

    assert response.status_code == 400
    assert response.json()["message"] == "Validation error"


# ---------------------------------------------------------------------------
# Approval, minutes, listings
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("action", ["Pending", "Done", None])
def test_approval_rejects_other_actions(client, mentor, mentee, meeting_id, action):
    status_id = client.post(STATUS_URL, json=_completed(meeting_id, mentee)).json()["statuses"][0]["_id"]

    response = client.post(f"{STATUS_URL}/approval", json={"statusId": status_id, "action": action})

    assert response.status_code == 400


def test_approval_never_changes_status(client, mongo_db, mentor, mentee, meeting_id):
    status_id = client.post(STATUS_URL, json=_completed(meeting_id, mentee)).json()["statuses"][0]["_id"]

    client.post(f"{STATUS_URL}/approval", json={"statusId": status_id, "action": "Rejected"})

    record = mongo_db[COLLECTIONS["statuses"]].find_one({"_id": ObjectId(status_id)})
    assert record["status"] == "Completed"
    assert record["statusApproval"] == "Rejected"


def test_approval_and_minutes_unknown_status(client, mongo_db):
    missing = str(ObjectId())
    assert client.post(f"{STATUS_URL}/approval", json={"statusId": missing, "action": "Approved"}).status_code == 404
    assert client.post(f"{STATUS_URL}/minutes", json={"statusId": missing, "minutes": "x"}).status_code == 404


def test_list_all(client, mentor, mentee, meeting_id):
    client.post(STATUS_URL, json=_completed(meeting_id, mentee))

    response = client.get(STATUS_URL)

    assert response.status_code == 200
    statuses = response.json()["statuses"]
    assert len(statuses) == 1
    assert statuses[0]["mentor_user"]["email"] == "m@x.com"
    assert statuses[0]["mentee_user"]["name"] == "Uday Mentee"


def test_list_by_meeting(client, mentor, mentee, meeting_id):
    client.post(STATUS_URL, json=_completed(meeting_id, mentee))

    response = client.get(f"{STATUS_URL}/by-meeting", params={"meetingId": str(meeting_id), "menteeId": str(mentee)})
    assert response.status_code == 200
    assert len(response.json()["statuses"]) == 1

    assert client.get(f"{STATUS_URL}/by-meeting", params={"meetingId": str(meeting_id)}).status_code == 400


def test_list_by_phase(client, mentor, mentee, meeting_id):
    client.post(STATUS_URL, json=_completed(meeting_id, mentee, phaseId=3))

    response = client.get(f"{STATUS_URL}/phase/3", params={"statusApproval": "Pending"})
    assert response.status_code == 200
    assert len(response.json()["statuses"]) == 1

    assert client.get(f"{STATUS_URL}/phase/0").status_code == 400


# ---------------------------------------------------------------------------
# Persistence failures
# ---------------------------------------------------------------------------


class BrokenStore(MeetingStatusStore):
    def upsert(self, record):
        raise PyMongoError("primary unavailable")


def test_persistence_failure_in_development(client, mentor, mentee, meeting_id):
    client.app.dependency_overrides[get_meeting_status_service] = lambda: MeetingStatusService(store=BrokenStore())

    response = client.post(STATUS_URL, json=_completed(meeting_id, mentee))

    assert response.status_code == 500
    assert response.json() == {"message": "Server error", "success": False, "error": "primary unavailable"}


def test_persistence_failure_hides_detail_in_production(client, monkeypatch, mentor, mentee, meeting_id):
    from app import main

    monkeypatch.setattr(main.settings, "environment", "production")
    client.app.dependency_overrides[get_meeting_status_service] = lambda: MeetingStatusService(store=BrokenStore())

    response = client.post(STATUS_URL, json=_completed(meeting_id, mentee))

    assert response.status_code == 500
    assert "error" not in response.json()


# ---------------------------------------------------------------------------
# Schedules
# ---------------------------------------------------------------------------


def test_schedule_routes(client, mentor, mentee):
    body = {
        "mentorEmail": "m@x.com",
        "menteeIds": [str(mentee)],
        "meetingDates": ["2026-02-02T18:00:00", "2026-02-09T18:00:00"],
        "meetingTime": "18:00",
        "durationMinutes": 30,
        "platform": "Google Meet",
        "preferredDay": "Monday",
        "phaseId": 1,
    }

    created = client.post("/api/meeting-schedules", json=body)
    assert created.status_code == 201
    schedule = created.json()
    assert len(schedule["meeting_dates"]) == 2

    fetched = client.get(f"/api/meeting-schedules/{schedule['_id']}")
    assert fetched.status_code == 200
    assert fetched.json()["meeting_dates"] == schedule["meeting_dates"]

    listed = client.get("/api/meeting-schedules", params={"mentorEmail": "m@x.com", "phaseId": 1})
    assert [s["_id"] for s in listed.json()["schedules"]] == [schedule["_id"]]


def test_schedule_validation(client, mentor):
    response = client.post("/api/meeting-schedules", json={"mentorEmail": "m@x.com", "phaseId": 0})

    assert response.status_code == 400


def test_error_envelope_is_documented(client):
    schema = client.get("/openapi.json").json()

    assert "ErrorResponse" in schema["components"]["schemas"]
    responses = schema["paths"]["/api/meeting-status"]["post"]["responses"]
    assert responses["400"]["content"]["application/json"]["schema"]["$ref"].endswith("/ErrorResponse")
