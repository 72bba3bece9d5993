import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session

from todo_app.core.config import Settings
from todo_app.db.repositories.users import UserRepository
from todo_app.db.session import build_engine, init_db
from todo_app.main import create_app


@pytest.fixture()
def settings():
    return Settings(
        _env_file=None,
        ENV="test",
        DATABASE_URL="sqlite://",  # base en mémoire, partagée via StaticPool
        JWT_SECRET_KEY="test-secret",
        SESSION_SECRET_KEY="test-session-secret",
        LOG_LEVEL="WARNING",
    )


@pytest.fixture()
def app(settings):
    app = create_app(settings)
    init_db(app.state.app_state.engine)
    return app


@pytest.fixture()
def state(app):
    return app.state.app_state


@pytest.fixture()
def client(app):
    with TestClient(app) as client:
        yield client


@pytest.fixture()
def db_session():
    """Session sur une base vierge, pour tester services et repositories sans HTTP."""
    engine = build_engine("sqlite://")
    init_db(engine)
    with Session(engine) as session:
        yield session


# -----------------------------
# Helpers
# -----------------------------
def register(client, email="bob@example.com", password="pw123", username="bob"):
    return client.post(
        "/register",
        data={"email": email, "password": password, "username": username},
        follow_redirects=False,
    )


def login(client, email="bob@example.com", password="pw123", tz="UTC"):
    headers = {"x-timezone": tz} if tz is not None else {}
    return client.post(
        "/login",
        data={"email": email, "password": password},
        headers=headers,
        follow_redirects=False,
    )


def user_id_for(state, email):
    with Session(state.engine) as session:
        return UserRepository(session).get_by_email(email).id


def token_cookies(response):
    return [c for c in response.headers.get_list("set-cookie") if c.startswith("token=")]


@pytest.fixture()
def logged_in(client, state):
    """Client connecté en tant que bob ; retourne l'id de bob."""
    register(client)
    res = login(client)
    assert res.status_code == 303, res.text
    return user_id_for(state, "bob@example.com")
