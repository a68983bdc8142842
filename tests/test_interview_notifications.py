import uuid
from datetime import timedelta

from sqlalchemy import select

from app.core.config import settings
from app.models import ExpertConnection, InterviewRequest

INTERVIEW_URL = "/api/v1/notifications/interview"
CONNECTION_URL = "/api/v1/notifications/connection"
REMINDERS_URL = "/api/v1/notifications/interview-reminders"


def _pair(make_user):
    researcher = make_user("researcher@x.com", full_name="Rosalind Franklin", institution="King's College")
    expert = make_user("expert@x.com", full_name="Ada Lovelace", user_type="expert", institution="Analytical Society")
    return researcher, expert


def _interview(db_session, researcher, expert, **fields):
    fields.setdefault("research_topic", "DNA imaging")
    fields.setdefault("duration_minutes", 45)
    interview = InterviewRequest(researcher_id=researcher.id, expert_id=expert.id, **fields)
    db_session.add(interview)
    db_session.commit()
    return interview


# ============================================================
# Interview requests
# ============================================================

def test_new_interview_request_emails_expert(client, db_session, make_user, email_outbox):
    researcher, expert = _pair(make_user)
    interview = _interview(db_session, researcher, expert)

    response = client.post(INTERVIEW_URL, json={"type": "new_request", "interviewRequestId": str(interview.id)})

    assert response.status_code == 200
    assert response.json() == {"success": True}
    message = email_outbox.sent[0]
    assert message["to"] == ["expert@x.com"]
    assert message["from"] == settings.NOTIFICATIONS_EMAIL_FROM
    assert message["subject"] == "New Interview Request on ExpertGate"
    assert "Rosalind Franklin" in message["html"]
    assert "45 minutes" in message["html"]


def test_accepted_and_declined_requests_email_researcher(client, db_session, make_user, email_outbox):
    researcher, expert = _pair(make_user)
    interview = _interview(db_session, researcher, expert)

    client.post(INTERVIEW_URL, json={"type": "request_accepted", "interviewRequestId": str(interview.id)})
    client.post(INTERVIEW_URL, json={"type": "request_declined", "interviewRequestId": str(interview.id)})

    assert [m["to"] for m in email_outbox.sent] == [["researcher@x.com"], ["researcher@x.com"]]
    assert email_outbox.sent[0]["subject"] == "Your Interview Request Has Been Accepted!"
    assert email_outbox.sent[1]["subject"] == "Update on Your Interview Request"
    assert "Ada Lovelace" in email_outbox.sent[1]["html"]


def test_interview_topic_is_escaped(client, db_session, make_user, email_outbox):
    researcher, expert = _pair(make_user)
    interview = _interview(db_session, researcher, expert, research_topic="<img src=x>")

    client.post(INTERVIEW_URL, json={"type": "new_request", "interviewRequestId": str(interview.id)})

    assert "<img src=x>" not in email_outbox.sent[0]["html"]


def test_unknown_interview_request_is_not_found(client, email_outbox):
    response = client.post(INTERVIEW_URL, json={"type": "new_request", "interviewRequestId": str(uuid.uuid4())})

    assert response.status_code == 404
    assert response.json() == {"error": "Interview request not found"}
    assert email_outbox.sent == []


def test_unknown_interview_event_type_is_client_error(client, db_session, make_user, email_outbox):
    researcher, expert = _pair(make_user)
    interview = _interview(db_session, researcher, expert)

    response = client.post(INTERVIEW_URL, json={"type": "request_cancelled", "interviewRequestId": str(interview.id)})

    assert response.status_code == 400
    assert response.json()["error"].startswith("type:")
    assert email_outbox.sent == []


# ============================================================
# Connections
# ============================================================

def test_connection_request_emails_recipient(client, db_session, make_user, email_outbox):
    researcher, expert = _pair(make_user)
    connection = ExpertConnection(requester_id=researcher.id, recipient_id=expert.id)
    db_session.add(connection)
    db_session.commit()

    response = client.post(CONNECTION_URL, json={"type": "connection_request", "connectionId": str(connection.id)})

    assert response.status_code == 200
    message = email_outbox.sent[0]
    assert message["to"] == ["expert@x.com"]
    assert message["subject"] == "New Connection Request on ExpertGate"
    assert "Rosalind Franklin</strong> (Researcher)" in message["html"]
    assert "King&#x27;s College" in message["html"]


def test_connection_accepted_emails_requester(client, db_session, make_user, email_outbox):
    researcher, expert = _pair(make_user)
    connection = ExpertConnection(requester_id=researcher.id, recipient_id=expert.id, status="accepted")
    db_session.add(connection)
    db_session.commit()

    client.post(CONNECTION_URL, json={"type": "connection_accepted", "connectionId": str(connection.id)})

    message = email_outbox.sent[0]
    assert message["to"] == ["researcher@x.com"]
    assert message["subject"] == "Your Connection Request Has Been Accepted!"
    assert "Ada Lovelace</strong> (Expert)" in message["html"]


def test_unknown_connection_is_not_found(client, email_outbox):
    response = client.post(CONNECTION_URL, json={"type": "connection_request", "connectionId": str(uuid.uuid4())})

    assert response.status_code == 404
    assert response.json() == {"error": "Connection not found"}


def test_connection_notification_missing_id(client, email_outbox):
    response = client.post(CONNECTION_URL, json={"type": "connection_request"})

    assert response.status_code == 400
    assert response.json() == {"error": "ConnectionId is required"}


# ============================================================
# Reminders
# ============================================================

def _flags(db_session, interview):
    db_session.expire_all()
    row = db_session.execute(select(InterviewRequest).where(InterviewRequest.id == interview.id)).scalar_one()
    return row.day_reminder_sent, row.soon_reminder_sent


def test_reminders_cover_both_windows_once(client, db_session, make_user, email_outbox, clock):
    researcher, expert = _pair(make_user)
    tomorrow = _interview(db_session, researcher, expert, status="accepted", scheduled_date=clock.now + timedelta(hours=24, minutes=10))
    shortly = _interview(db_session, researcher, expert, status="accepted", scheduled_date=clock.now + timedelta(minutes=32))
    _interview(db_session, researcher, expert, status="accepted", scheduled_date=clock.now + timedelta(hours=3))
    _interview(db_session, researcher, expert, status="pending", scheduled_date=clock.now + timedelta(hours=24))

    response = client.post(REMINDERS_URL)

    assert response.status_code == 200
    assert response.json() == {"success": True, "sent": 4, "failed": 0}
    subjects = sorted(m["subject"] for m in email_outbox.sent)
    assert subjects == [
        "Interview Reminder: Tomorrow with Ada Lovelace",
        "Interview Reminder: Tomorrow with Rosalind Franklin",
        "Interview Starting Soon: In 30 minutes with Ada Lovelace",
        "Interview Starting Soon: In 30 minutes with Rosalind Franklin",
    ]
    assert all(m["from"] == settings.REMINDERS_EMAIL_FROM for m in email_outbox.sent)
    assert _flags(db_session, tomorrow) == (True, False)
    assert _flags(db_session, shortly) == (False, True)

    again = client.post(REMINDERS_URL)
    assert again.json() == {"success": True, "sent": 0, "failed": 0}
    assert len(email_outbox.sent) == 4


def test_reminder_window_edges(client, db_session, make_user, email_outbox, clock):
    researcher, expert = _pair(make_user)
    _interview(db_session, researcher, expert, status="accepted", scheduled_date=clock.now + timedelta(minutes=29))
    _interview(db_session, researcher, expert, status="accepted", scheduled_date=clock.now + timedelta(minutes=36))
    _interview(db_session, researcher, expert, status="accepted", scheduled_date=clock.now + timedelta(hours=24, minutes=31))

    response = client.post(REMINDERS_URL)

    assert response.json()["sent"] == 0
    assert email_outbox.sent == []


def test_failed_reminders_are_retried(client, db_session, make_user, failing_email, clock):
    researcher, expert = _pair(make_user)
    interview = _interview(db_session, researcher, expert, status="accepted", scheduled_date=clock.now + timedelta(minutes=31))

    response = client.post(REMINDERS_URL)

    assert response.status_code == 200
    assert response.json() == {"success": True, "sent": 0, "failed": 2}
    assert _flags(db_session, interview) == (False, False)
