from datetime import datetime, timedelta

from conftest import PASSWORD, auth_header, register_user

from wallmasters.models.user import User


def _request_reset(client, email="jo@example.com"):
    return client.post("/request-password-reset", json={"email": email})


def _stored_reset_token(session_factory) -> str:
    db = session_factory()
    try:
        return db.query(User).one().reset_token
    finally:
        db.close()


def test_reset_request_for_unknown_email_is_not_found(client, sent_emails):
    response = _request_reset(client, "ghost@example.com")

    assert response.status_code == 404
    assert response.json() == {"message": "User not found."}
    assert sent_emails == []


def test_reset_request_mails_link_with_stored_token(client, session_factory, sent_emails):
    register_user(client)

    response = _request_reset(client)

    assert response.status_code == 200
    token = _stored_reset_token(session_factory)
    assert len(token) == 64
    assert len(sent_emails) == 1
    assert sent_emails[0]["to"] == "jo@example.com"
    assert f"/reset-password/{token}" in sent_emails[0]["html"]


def test_new_reset_request_supersedes_previous_token(client, session_factory, sent_emails):
    register_user(client)
    _request_reset(client)
    first_token = _stored_reset_token(session_factory)
    _request_reset(client)

    response = client.post("/reset-password", json={"token": first_token, "password": "NewPass456!"})

    assert response.status_code == 400


def test_reset_password_updates_credentials_and_ends_sessions(client, session_factory, sent_emails):
    data = register_user(client)
    _request_reset(client)
    token = _stored_reset_token(session_factory)

    response = client.post("/reset-password", json={"token": token, "password": "NewPass456!"})
    assert response.status_code == 200
    assert response.json() == {"message": "Password has been reset successfully"}

    old_login = client.post("/login", json={"email": "jo@example.com", "password": PASSWORD})
    new_login = client.post("/login", json={"email": "jo@example.com", "password": "NewPass456!"})
    assert old_login.status_code == 401
    assert new_login.status_code == 200

    stale_refresh = client.post("/refresh-token", json={"refreshToken": data["refreshToken"]})
    assert stale_refresh.status_code == 403

    reused = client.post("/reset-password", json={"token": token, "password": "Another789!"})
    assert reused.status_code == 400


def test_reset_password_with_expired_token_is_rejected(client, session_factory, sent_emails):
    register_user(client)
    _request_reset(client)

    db = session_factory()
    try:
        user = db.query(User).one()
        token = user.reset_token
        user.reset_token_expires_at = (datetime.utcnow() - timedelta(minutes=1)).isoformat()
        db.commit()
    finally:
        db.close()

    response = client.post("/reset-password", json={"token": token, "password": "NewPass456!"})

    assert response.status_code == 400
    assert response.json() == {"message": "Invalid or expired token"}


def test_reset_request_fails_when_mail_cannot_be_sent(client, monkeypatch):
    register_user(client)
    from wallmasters.services import mailer

    monkeypatch.setattr(mailer, "send_email", lambda *args, **kwargs: False)

    response = _request_reset(client)

    assert response.status_code == 500
    assert response.json() == {"message": "Failed to send password reset email."}


def test_change_password(client):
    data = register_user(client)
    headers = auth_header(data["token"])

    wrong = client.post(
        "/change-password",
        json={"oldPassword": "wrong", "newPassword": "NewPass456!"},
        headers=headers,
    )
    assert wrong.status_code == 400
    assert wrong.json() == {"message": "Incorrect old password"}

    ok = client.post(
        "/change-password",
        json={"oldPassword": PASSWORD, "newPassword": "NewPass456!"},
        headers=headers,
    )
    assert ok.status_code == 200

    login = client.post("/login", json={"email": "jo@example.com", "password": "NewPass456!"})
    assert login.status_code == 200
