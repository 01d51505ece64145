"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- An in-memory user store standing in for PostgreSQL
- A test application with the session middleware installed
- CSRF token extraction from rendered forms
"""

import re
from collections.abc import Callable
from dataclasses import replace

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.api.dependencies import get_repository
from src.api.main import create_app
from src.config.settings import Settings
from src.domain.exceptions import DuplicateEmail
from src.domain.user import User

_CSRF_INPUT = re.compile(r'name="_csrf" value="([^"]+)"')


class InMemoryUserRepository:
    """UserRepository keyed by exact email address."""

    def __init__(self) -> None:
        self.users: dict[str, User] = {}
        self.save_calls = 0

    def find_by_email(self, email_address: str) -> User | None:
        user = self.users.get(email_address)
        return replace(user) if user is not None else None

    def save(self, user: User) -> User:
        self.save_calls += 1
        if user.email_address in self.users:
            raise DuplicateEmail(user.email_address)
        user.id = len(self.users) + 1
        self.users[user.email_address] = replace(user)
        return user


def _extract_csrf_token(html: str) -> str:
    """Pull the hidden CSRF field value out of a rendered form."""
    match = _CSRF_INPUT.search(html)
    assert match is not None, "form has no CSRF field"
    return match.group(1)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        session_secret_key="test-secret",
        csrf_secret_key="test-csrf-secret",
        bcrypt_cost=10,
    )


@pytest.fixture
def repository() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def app(settings: Settings, repository: InMemoryUserRepository) -> FastAPI:
    """Application wired to the in-memory store (lifespan/database not started)."""
    test_app = create_app(settings)
    test_app.dependency_overrides[get_repository] = lambda: repository
    return test_app


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Create test client for the application."""
    return TestClient(app)


@pytest.fixture
def extract_csrf_token():
    """Function returning the hidden CSRF field value of a rendered form."""
    return _extract_csrf_token


@pytest.fixture
def form_token(client: TestClient) -> Callable[[str], str]:
    """Fetch a form page and return a CSRF token valid for the client's session."""

    def fetch(path: str) -> str:
        response = client.get(path)
        assert response.status_code == 200
        return _extract_csrf_token(response.text)

    return fetch
