from conftest import login, register, token_cookies, user_id_for


def test_healthchecker(client):
    res = client.get("/healthchecker")

    assert res.status_code == 200
    assert res.json()["status"] == "success"


def test_unknown_path_renders_not_found_page(client):
    res = client.get("/does-not-exist")

    assert res.status_code == 404
    assert "Nothing to see here" in res.text


def test_register_then_login_sets_token_cookie(client, state):
    res = register(client)
    assert res.status_code == 303
    assert res.headers["location"] == "/login"
    assert "You have successfully registered!!" in client.get("/login").text

    res = login(client)
    assert res.status_code == 303
    assert res.headers["location"] == "/todo/list"

    (cookie,) = token_cookies(res)
    assert "HttpOnly" in cookie
    assert "Max-Age=3600" in cookie
    assert "Path=/" in cookie
    assert "samesite=lax" in cookie.lower()


def test_login_loads_the_user_cache(client, state):
    register(client)
    login(client)

    uid = user_id_for(state, "bob@example.com")
    assert state.cache.has(uid)
    assert state.cache.read_all(uid) == []


def test_wrong_password_redirects_back_with_error(client):
    register(client)

    res = login(client, password="wrong")

    assert res.status_code == 303
    assert res.headers["location"] == "/login"
    assert token_cookies(res) == []
    page = client.get("/login").text
    assert "invalid email or password." in page
    assert "Error" in page


def test_unknown_email_gets_the_same_message(client):
    res = login(client, email="nobody@example.com")

    assert res.headers["location"] == "/login"
    assert "invalid email or password." in client.get("/login").text


def test_login_email_is_case_insensitive(client):
    register(client, email="Bob@Example.com")

    res = login(client, email="BOB@example.COM")

    assert res.headers["location"] == "/todo/list"


def test_duplicate_registration_is_refused(client):
    register(client)

    res = register(client, username="other bob")

    assert res.status_code == 303
    assert res.headers["location"] == "/register"
    assert "the email is already in use." in client.get("/register").text


def test_login_without_timezone_header_is_refused(client):
    register(client)

    res = login(client, tz=None)

    assert res.headers["location"] == "/login"
    assert token_cookies(res) == []
    assert "x-timezone" in client.get("/login").text


def test_logout_clears_cookie_and_cache(client, state, logged_in):
    assert state.cache.has(logged_in)

    res = client.post("/logout", follow_redirects=False)

    assert res.status_code == 303
    assert res.headers["location"] == "/login"
    (cookie,) = token_cookies(res)
    assert "Max-Age=-3600" in cookie
    assert not state.cache.has(logged_in)

    assert client.get("/todo/list").status_code == 401
    assert 'action="/logout"' not in client.get("/").text


def test_logout_requires_a_token(client):
    assert client.post("/logout", follow_redirects=False).status_code == 401
