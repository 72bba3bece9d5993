from datetime import datetime, timedelta, timezone

import pytest

from conftest import register, user_id_for
from todo_app.core.errors import AppError, ErrorKind
from todo_app.db.models.users import User
from todo_app.features.authentication.gate import (
    INVALID_TOKEN_REASON,
    NO_TOKEN_REASON,
    USER_GONE_REASON,
    Authorized,
    Rejected,
    authorize,
    extract_token,
)
from todo_app.security.tokens import JWTSettings, issue_token

JWT = JWTSettings(secret="gate-secret")
BOB = User(id="u1", email="bob@example.com", password_hash="x", username="bob")


def lookup(user_id):
    return BOB if user_id == BOB.id else None


# -----------------------------
# extract_token
# -----------------------------
def test_cookie_wins_over_bearer():
    assert extract_token({"token": "c"}, {"authorization": "Bearer h"}) == "c"


def test_bearer_header_is_used_without_cookie():
    assert extract_token({}, {"authorization": "Bearer h"}) == "h"


@pytest.mark.parametrize("header", [None, "Basic abc", "Bearer ", "h"])
def test_no_usable_token(header):
    headers = {"authorization": header} if header is not None else {}
    assert extract_token({}, headers) is None


# -----------------------------
# authorize
# -----------------------------
def test_missing_token_is_rejected():
    assert authorize(None, jwt_settings=JWT, lookup_user=lookup) == Rejected(ErrorKind.NO_TOKEN, NO_TOKEN_REASON)


def test_valid_token_is_authorized():
    token = issue_token(BOB.id, JWT)

    assert authorize(token, jwt_settings=JWT, lookup_user=lookup) == Authorized(BOB)


def test_expired_token_is_rejected():
    now = datetime.now(timezone.utc)
    token = issue_token(BOB.id, JWT, now=now - timedelta(hours=2))

    outcome = authorize(token, jwt_settings=JWT, lookup_user=lookup, now=now)

    assert outcome == Rejected(ErrorKind.INVALID_TOKEN, INVALID_TOKEN_REASON)


def test_unknown_user_is_rejected():
    token = issue_token("ghost", JWT)

    assert authorize(token, jwt_settings=JWT, lookup_user=lookup) == Rejected(ErrorKind.USER_GONE, USER_GONE_REASON)


def test_storage_failure_during_lookup_is_rejected():
    def broken(_):
        raise AppError(ErrorKind.STORAGE, "database is locked")

    outcome = authorize(issue_token(BOB.id, JWT), jwt_settings=JWT, lookup_user=broken)

    assert outcome == Rejected(ErrorKind.USER_GONE, USER_GONE_REASON)
    assert "database is locked" not in outcome.reason
    assert outcome.to_error().status_code == 401


def test_authorize_gives_the_same_answer_twice():
    now = datetime.now(timezone.utc)
    token = issue_token(BOB.id, JWT, now=now)

    first = authorize(token, jwt_settings=JWT, lookup_user=lookup, now=now)
    second = authorize(token, jwt_settings=JWT, lookup_user=lookup, now=now)

    assert first == second == Authorized(BOB)


# -----------------------------
# Through HTTP
# -----------------------------
def test_expired_cookie_gives_401_and_clears_flag(client, state):
    register(client)
    uid = user_id_for(state, "bob@example.com")
    now = datetime.now(timezone.utc)

    client.cookies.set("token", issue_token(uid, state.settings.jwt))
    assert client.get("/todo/list").status_code == 200
    assert 'action="/logout"' in client.get("/").text

    client.cookies.set("token", issue_token(uid, state.settings.jwt, now=now - timedelta(hours=2)))
    res = client.get("/todo/list")

    assert res.status_code == 401
    assert INVALID_TOKEN_REASON in res.text
    assert 'href="/login"' in res.text
    assert 'action="/logout"' not in client.get("/").text


def test_bearer_header_is_accepted(client, state):
    register(client)
    token = issue_token(user_id_for(state, "bob@example.com"), state.settings.jwt)

    res = client.get("/todo/list", headers={"Authorization": f"Bearer {token}"})

    assert res.status_code == 200


def test_token_signed_with_another_secret_is_refused(client, state):
    register(client)
    token = issue_token(user_id_for(state, "bob@example.com"), JWTSettings(secret="not-the-app-secret"))

    res = client.get("/todo/list", headers={"Authorization": f"Bearer {token}"})

    assert res.status_code == 401
    assert INVALID_TOKEN_REASON in res.text


def test_token_for_deleted_user_is_refused(client, state):
    token = issue_token("no-such-user", state.settings.jwt)

    res = client.get("/create", headers={"Authorization": f"Bearer {token}"})

    assert res.status_code == 401
    assert USER_GONE_REASON in res.text


def test_fresh_token_after_expired_one_restores_access(client, state):
    register(client)
    uid = user_id_for(state, "bob@example.com")
    now = datetime.now(timezone.utc)

    client.cookies.set("token", issue_token(uid, state.settings.jwt, now=now - timedelta(hours=2)))
    assert client.get("/todo/list").status_code == 401
    assert 'action="/logout"' not in client.get("/").text

    client.cookies.set("token", issue_token(uid, state.settings.jwt, now=now))
    res = client.get("/todo/list")

    assert res.status_code == 200
    assert 'action="/logout"' in res.text
    assert 'action="/logout"' in client.get("/").text
