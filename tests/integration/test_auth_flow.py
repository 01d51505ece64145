"""
Integration tests for the register -> logout -> login flows.

Drives the full application (session middleware, CSRF, templates, real
domain services) against the in-memory user store.
"""

import logging

import bcrypt
import pytest
from fastapi.testclient import TestClient

VALID_REGISTRATION = {
    "firstName": "Jo",
    "lastName": "Lee",
    "emailAddress": "jo@example.com",
    "password": "Abc123!x",
    "confirmPassword": "Abc123!x",
}


def register(client: TestClient, form_token, **overrides: str):
    token = form_token("/user/register")
    data = {**VALID_REGISTRATION, **overrides, "_csrf": token}
    return client.post("/user/register", data=data, follow_redirects=False)


def login(client: TestClient, form_token, email: str, password: str):
    token = form_token("/user/login")
    data = {"emailAddress": email, "password": password, "_csrf": token}
    return client.post("/user/login", data=data, follow_redirects=False)


class TestRegisterFlow:
    def test_valid_registration_redirects_home_logged_in(self, client: TestClient, form_token) -> None:
        response = register(client, form_token)

        assert response.status_code == 303
        assert response.headers["location"] == "/"

        home = client.get("/")
        assert "You are logged in" in home.text

    def test_persists_one_user_with_hashed_password(self, client: TestClient, form_token, repository) -> None:
        register(client, form_token)

        assert list(repository.users) == ["jo@example.com"]
        stored = repository.users["jo@example.com"]
        assert stored.id == 1
        assert stored.hashed_password != "Abc123!x"
        assert bcrypt.checkpw(b"Abc123!x", stored.hashed_password.encode())

    def test_mismatched_confirmation(self, client: TestClient, form_token, repository) -> None:
        response = register(client, form_token, confirmPassword="different")

        assert response.status_code == 200
        assert "Confirm Password does not match Password" in response.text
        assert repository.save_calls == 0

    @pytest.mark.parametrize("field", list(VALID_REGISTRATION))
    def test_missing_field_persists_nothing(self, client: TestClient, form_token, repository, field: str) -> None:
        response = register(client, form_token, **{field: ""})

        assert response.status_code == 200
        assert "Please provide a value for" in response.text
        assert repository.save_calls == 0

    def test_echoes_fields_but_not_password(self, client: TestClient, form_token) -> None:
        response = register(client, form_token, password="weakpass", confirmPassword="weakpass")

        assert 'value="jo@example.com"' in response.text
        assert 'value="Jo"' in response.text
        assert "weakpass" not in response.text

    def test_rerendered_form_token_is_usable(self, client: TestClient, form_token, extract_csrf_token) -> None:
        failed = register(client, form_token, firstName="")
        token = extract_csrf_token(failed.text)

        response = client.post(
            "/user/register",
            data={**VALID_REGISTRATION, "_csrf": token},
            follow_redirects=False,
        )

        assert response.status_code == 303

    def test_duplicate_email_shows_generic_error(
        self, client: TestClient, form_token, caplog: pytest.LogCaptureFixture
    ) -> None:
        register(client, form_token)
        client.post("/user/logout")

        with caplog.at_level(logging.ERROR):
            response = register(client, form_token)

        assert response.status_code == 500
        assert "Something went wrong" in response.text
        assert "Persistence failure" in caplog.text


class TestLoginFlow:
    @pytest.fixture(autouse=True)
    def registered_user(self, client: TestClient, form_token) -> None:
        register(client, form_token)
        client.post("/user/logout")

    def test_correct_credentials(self, client: TestClient, form_token) -> None:
        response = login(client, form_token, "jo@example.com", "Abc123!x")

        assert response.status_code == 303
        assert response.headers["location"] == "/"
        assert "You are logged in" in client.get("/").text

    def test_wrong_password_and_unknown_email_look_the_same(
        self, client: TestClient, form_token, extract_csrf_token
    ) -> None:
        wrong_password = login(client, form_token, "jo@example.com", "Wrong123!")
        unknown_email = login(client, form_token, "zz@example.com", "Wrong123!")

        assert wrong_password.status_code == unknown_email.status_code == 200
        assert "Login failed for the provided email and password" in wrong_password.text
        # Only the echoed email and the fresh CSRF token differ
        normalized = [
            r.text.replace(extract_csrf_token(r.text), "TOKEN").replace("zz@example.com", "jo@example.com")
            for r in (wrong_password, unknown_email)
        ]
        assert normalized[0] == normalized[1]

    def test_wrong_password_leaves_session_anonymous(self, client: TestClient, form_token) -> None:
        login(client, form_token, "jo@example.com", "Wrong123!")

        assert "You are logged in" not in client.get("/").text

    def test_presence_errors(self, client: TestClient, form_token) -> None:
        response = login(client, form_token, "", "")

        assert "Please provide a value for Email Address" in response.text
        assert "Please provide a value for Password" in response.text
        assert "Login failed" not in response.text


class TestLogoutFlow:
    def test_logout_ends_session(self, client: TestClient, form_token) -> None:
        register(client, form_token)

        response = client.post("/user/logout", follow_redirects=False)

        assert response.status_code == 303
        assert response.headers["location"] == "/user/login"
        assert "You are logged in" not in client.get("/").text

    def test_logout_when_never_logged_in(self, client: TestClient) -> None:
        response = client.post("/user/logout", follow_redirects=False)

        assert response.status_code == 303
        assert response.headers["location"] == "/user/login"
