import re
from datetime import timedelta

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from app.core.config import RESET_POLICY_INVALIDATE, settings
from app.models import ResetCode
from app.repositories.reset_code_repo import ResetCodeRepository
from app.services import password_reset_service
from app.services.identity_admin import IdentityAdmin

SEND_URL = "/api/v1/password-reset/send-code"
VERIFY_URL = "/api/v1/password-reset/verify-code"
LOGIN_URL = "/api/v1/auth/login"
GENERIC_SENT = "If an account exists, a reset code has been sent"
INVALID_CODE = "Invalid or expired verification code"


def _codes_for(db_session, email):
    db_session.expire_all()
    return list(
        db_session.execute(
            select(ResetCode).where(ResetCode.email == email).order_by(ResetCode.created_at)
        ).scalars()
    )


def _issue(client, db_session, email):
    response = client.post(SEND_URL, json={"email": email})
    assert response.status_code == 200, response.text
    return _codes_for(db_session, email)[-1].code


def test_issue_creates_one_six_digit_code_expiring_in_15_minutes(client, db_session, make_user, email_outbox, clock):
    make_user("known@x.com")

    response = client.post(SEND_URL, json={"email": "known@x.com"})

    assert response.status_code == 200
    assert response.json() == {"message": GENERIC_SENT}

    codes = _codes_for(db_session, "known@x.com")
    assert len(codes) == 1
    row = codes[0]
    assert re.fullmatch(r"\d{6}", row.code)
    assert row.used is False
    assert row.expires_at - row.created_at == timedelta(minutes=15)

    assert len(email_outbox.sent) == 1
    assert email_outbox.sent[0]["to"] == ["known@x.com"]
    assert row.code in email_outbox.sent[0]["html"]


def test_issue_for_unknown_email_is_indistinguishable(client, db_session, make_user, email_outbox, clock):
    make_user("known@x.com")

    known = client.post(SEND_URL, json={"email": "known@x.com"})
    unknown = client.post(SEND_URL, json={"email": "nobody@x.com"})

    assert unknown.status_code == known.status_code == 200
    assert unknown.json() == known.json()
    assert _codes_for(db_session, "nobody@x.com") == []
    assert [m["to"] for m in email_outbox.sent] == [["known@x.com"]]


def test_issue_without_email_is_client_error(client, email_outbox):
    response = client.post(SEND_URL, json={})

    assert response.status_code == 400
    assert response.json() == {"error": "Email is required"}
    assert email_outbox.sent == []


def test_issue_keeps_code_when_email_send_fails(client, db_session, make_user, failing_email, clock):
    make_user("known@x.com")

    response = client.post(SEND_URL, json={"email": "known@x.com"})

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to send email"}
    assert len(_codes_for(db_session, "known@x.com")) == 1


def test_verify_flips_used_and_rejects_second_attempt(client, db_session, make_user, email_outbox, clock):
    make_user("user@x.com")
    code = _issue(client, db_session, "user@x.com")

    first = client.post(VERIFY_URL, json={"email": "user@x.com", "code": code, "newPassword": "NewPass123"})
    assert first.status_code == 200
    assert first.json() == {"message": "Password reset successful"}
    assert _codes_for(db_session, "user@x.com")[0].used is True

    second = client.post(VERIFY_URL, json={"email": "user@x.com", "code": code, "newPassword": "Other1234"})
    assert second.status_code == 400
    assert second.json() == {"error": INVALID_CODE}


def test_verify_with_expired_code_fails(client, db_session, make_user, email_outbox, clock):
    make_user("a@x.com")
    code = _issue(client, db_session, "a@x.com")

    clock.advance(minutes=16)
    response = client.post(VERIFY_URL, json={"email": "a@x.com", "code": code, "newPassword": "Secret123!"})

    assert response.status_code == 400
    assert response.json() == {"error": INVALID_CODE}
    assert _codes_for(db_session, "a@x.com")[0].used is False


def test_verify_with_code_of_another_email_fails(client, db_session, make_user, email_outbox, clock):
    make_user("owner@x.com")
    make_user("other@x.com")
    code = _issue(client, db_session, "owner@x.com")

    response = client.post(VERIFY_URL, json={"email": "other@x.com", "code": code, "newPassword": "Secret123!"})

    assert response.status_code == 400
    assert response.json() == {"error": INVALID_CODE}


def test_verify_with_wrong_code_fails(client, db_session, make_user, email_outbox, clock):
    make_user("user@x.com")
    code = _issue(client, db_session, "user@x.com")
    wrong = "100000" if code != "100000" else "100001"

    response = client.post(VERIFY_URL, json={"email": "user@x.com", "code": wrong, "newPassword": "Secret123!"})

    assert response.status_code == 400
    assert response.json() == {"error": INVALID_CODE}


def test_verify_then_login_only_with_new_password(client, db_session, make_user, email_outbox, clock):
    make_user("b@x.com", password="OldPass123")
    code = _issue(client, db_session, "b@x.com")

    response = client.post(VERIFY_URL, json={"email": "b@x.com", "code": code, "newPassword": "Secret123!"})
    assert response.status_code == 200

    assert client.post(LOGIN_URL, json={"email": "b@x.com", "password": "Secret123!"}).status_code == 200
    assert client.post(LOGIN_URL, json={"email": "b@x.com", "password": "OldPass123"}).status_code == 401


def test_verify_missing_fields_is_client_error(client):
    response = client.post(VERIFY_URL, json={"email": "user@x.com"})

    assert response.status_code == 400
    assert response.json() == {"error": "Code, newPassword are required"}


def test_verify_for_deleted_account_is_not_found(client, db_session, make_user, email_outbox, clock):
    user = make_user("gone@x.com")
    code = _issue(client, db_session, "gone@x.com")
    db_session.delete(user)
    db_session.commit()

    response = client.post(VERIFY_URL, json={"email": "gone@x.com", "code": code, "newPassword": "Secret123!"})

    assert response.status_code == 404
    assert response.json() == {"error": "User not found"}
    assert _codes_for(db_session, "gone@x.com")[0].used is False


def test_failed_credential_update_leaves_code_reusable(client, db_session, make_user, email_outbox, clock, monkeypatch):
    make_user("retry@x.com")
    code = _issue(client, db_session, "retry@x.com")
    payload = {"email": "retry@x.com", "code": code, "newPassword": "Secret123!"}

    async def broken_update(self, user_id, new_password):
        raise SQLAlchemyError("connection reset by peer")

    monkeypatch.setattr(IdentityAdmin, "update_credential", broken_update)
    failed = client.post(VERIFY_URL, json=payload)

    assert failed.status_code == 500
    assert failed.json() == {"error": "Failed to update password"}
    assert "connection reset" not in failed.text
    assert _codes_for(db_session, "retry@x.com")[0].used is False

    monkeypatch.undo()
    retried = client.post(VERIFY_URL, json=payload)
    assert retried.status_code == 200


def test_older_codes_stay_valid_by_default(client, db_session, make_user, email_outbox, clock):
    make_user("multi@x.com")
    first = _issue(client, db_session, "multi@x.com")
    clock.advance(seconds=5)
    _issue(client, db_session, "multi@x.com")

    response = client.post(VERIFY_URL, json={"email": "multi@x.com", "code": first, "newPassword": "Secret123!"})

    assert response.status_code == 200
    assert len(_codes_for(db_session, "multi@x.com")) == 2


def test_invalidate_policy_burns_older_codes(client, db_session, make_user, email_outbox, clock, monkeypatch):
    monkeypatch.setattr(settings, "RESET_CODE_REISSUE_POLICY", RESET_POLICY_INVALIDATE)
    codes = iter(["111111", "222222"])
    monkeypatch.setattr(password_reset_service, "generate_reset_code", lambda: next(codes))
    make_user("single@x.com")
    _issue(client, db_session, "single@x.com")
    clock.advance(seconds=5)
    _issue(client, db_session, "single@x.com")

    assert [row.used for row in _codes_for(db_session, "single@x.com")] == [True, False]

    stale = client.post(VERIFY_URL, json={"email": "single@x.com", "code": "111111", "newPassword": "Secret123!"})
    assert stale.status_code == 400

    fresh = client.post(VERIFY_URL, json={"email": "single@x.com", "code": "222222", "newPassword": "Secret123!"})
    assert fresh.status_code == 200


def test_preflight_is_open_to_any_origin(client):
    response = client.options(
        SEND_URL,
        headers={
            "Origin": "https://example.org",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "content-type",
        },
    )

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "*"


def test_verify_accepts_any_non_empty_password(client, db_session, make_user, email_outbox, clock):
    make_user("plain@x.com")
    code = _issue(client, db_session, "plain@x.com")

    response = client.post(VERIFY_URL, json={"email": "plain@x.com", "code": code, "newPassword": "hunter22"})

    assert response.status_code == 200
    assert client.post(LOGIN_URL, json={"email": "plain@x.com", "password": "hunter22"}).status_code == 200


def test_verify_for_inactive_account_is_not_found(client, db_session, make_user, email_outbox, clock):
    user = make_user("dormant@x.com")
    code = _issue(client, db_session, "dormant@x.com")
    user.is_active = False
    db_session.commit()

    response = client.post(VERIFY_URL, json={"email": "dormant@x.com", "code": code, "newPassword": "Secret123!"})

    assert response.status_code == 404
    assert response.json() == {"error": "User not found"}
    assert _codes_for(db_session, "dormant@x.com")[0].used is False
    assert client.post(LOGIN_URL, json={"email": "dormant@x.com", "password": "Secret123!"}).status_code == 401


def test_failed_reissue_keeps_older_codes(client, db_session, make_user, email_outbox, clock, monkeypatch):
    monkeypatch.setattr(settings, "RESET_CODE_REISSUE_POLICY", RESET_POLICY_INVALIDATE)
    make_user("keep@x.com")
    first = _issue(client, db_session, "keep@x.com")

    async def broken_insert(self, **kwargs):
        raise SQLAlchemyError("disk full")

    monkeypatch.setattr(ResetCodeRepository, "create_reset_code", broken_insert)
    failed = client.post(SEND_URL, json={"email": "keep@x.com"})

    assert failed.status_code == 500
    assert "disk full" not in failed.text
    assert [row.used for row in _codes_for(db_session, "keep@x.com")] == [False]

    response = client.post(VERIFY_URL, json={"email": "keep@x.com", "code": first, "newPassword": "Secret123!"})
    assert response.status_code == 200
