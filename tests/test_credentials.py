import pytest

from todo_app.core.errors import AppError, ErrorKind
from todo_app.db.repositories.users import UserRepository
from todo_app.features.authentication.services import AuthService
from todo_app.security.password import hash_password, verify_password


@pytest.fixture()
def svc(db_session):
    return AuthService(user_repo=UserRepository(db_session))


def test_password_hash_is_salted_and_verifiable():
    first, second = hash_password("pw123"), hash_password("pw123")

    assert first != second
    assert first.startswith("$argon2id$")
    assert "pw123" not in first
    assert verify_password("pw123", first)
    assert not verify_password("pw124", first)


def test_verify_password_with_unparsable_hash_returns_false():
    assert verify_password("pw123", "not-a-hash") is False


@pytest.mark.parametrize(
    "email,password,username",
    [
        ("bob@example.com", "pw123", "bob"),
        ("Alice.Smith@Example.org", "correct horse battery staple", "Alice"),
        ("x@y.z", "é-ü-∑", "x"),
    ],
)
def test_created_user_can_log_in(svc, email, password, username):
    created = svc.create_user(email, password, username)
    user = svc.check_email_password(email, password)

    assert user.id == created.id
    assert user.email == email.lower()
    assert user.username == username
    assert user.password_hash != password


def test_email_lookup_is_case_insensitive(svc):
    svc.create_user("Bob@Example.com", "pw123", "bob")
    assert svc.check_email_password("BOB@example.COM", "pw123").username == "bob"


def test_duplicate_email_is_rejected_regardless_of_case(svc):
    svc.create_user("bob@example.com", "pw123", "bob")
    with pytest.raises(AppError) as err:
        svc.create_user("BOB@example.com", "other", "bobby")

    assert err.value.kind is ErrorKind.DUPLICATE_EMAIL
    assert err.value.detail == "the email is already in use."


def test_wrong_password_and_unknown_email_fail_identically(svc):
    svc.create_user("bob@example.com", "pw123", "bob")

    with pytest.raises(AppError) as wrong_password:
        svc.check_email_password("bob@example.com", "nope")
    with pytest.raises(AppError) as unknown_email:
        svc.check_email_password("nobody@example.com", "pw123")

    assert wrong_password.value.kind is unknown_email.value.kind is ErrorKind.INVALID_CREDENTIALS
    assert wrong_password.value.detail == unknown_email.value.detail


def test_user_ids_are_unique_and_generated(svc):
    a = svc.create_user("a@example.com", "pw", "same")
    b = svc.create_user("b@example.com", "pw", "same")

    assert a.id and b.id and a.id != b.id


def test_get_user_by_id(svc):
    created = svc.create_user("bob@example.com", "pw123", "bob")

    assert svc.get_user_by_id(created.id).email == "bob@example.com"
    assert svc.get_user_by_id("00000000-0000-0000-0000-000000000000") is None
