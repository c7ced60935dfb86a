"""Shared test scaffolding: in-memory SQLite database and an API client bound to it."""

import unittest
from unittest.mock import patch

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.config import settings
from app.core.database import get_db
from app.main import app
from app.models import Base, Category
from app.schemas.auth import CurrentUser

# Minimum bcrypt cost keeps the suite fast; production uses settings.BCRYPT_ROUNDS.
TEST_BCRYPT_ROUNDS = 4


def api(path: str) -> str:
    """Full URL path for a v1 route."""
    return f"{settings.API_V1_PREFIX}{path}"


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


class DatabaseTestCase(unittest.TestCase):
    """Fresh in-memory schema per test; self.db is an open session on it."""

    def setUp(self) -> None:
        self.engine = create_engine(
            "sqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        Base.metadata.create_all(self.engine)
        self.SessionLocal = sessionmaker(bind=self.engine, autocommit=False, autoflush=False)
        self.db: Session = self.SessionLocal()
        self.addCleanup(self.engine.dispose)
        self.addCleanup(self.db.close)

        rounds = patch.object(settings, "BCRYPT_ROUNDS", TEST_BCRYPT_ROUNDS)
        rounds.start()
        self.addCleanup(rounds.stop)

    def make_category(self, name: str = "Technology") -> Category:
        category = Category(name=name)
        self.db.add(category)
        self.db.commit()
        self.db.refresh(category)
        return category


class ApiTestCase(DatabaseTestCase):
    """DatabaseTestCase plus a TestClient whose get_db yields sessions on the test engine."""

    def setUp(self) -> None:
        super().setUp()

        def override_get_db():
            db = self.SessionLocal()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = override_get_db
        self.addCleanup(app.dependency_overrides.clear)
        self.client = TestClient(app)

    def register(
        self,
        username: str,
        password: str = "secret123",
        email: str | None = None,
    ) -> dict:
        """Register a user through the API and return the response body."""
        resp = self.client.post(
            api("/auth/register"),
            json={
                "username": username,
                "email": email or f"{username}@example.com",
                "password": password,
                "firstName": username.capitalize(),
                "lastName": "Tester",
            },
        )
        self.assertEqual(resp.status_code, 201, resp.text)
        return resp.json()

    def register_token(self, username: str) -> str:
        return self.register(username)["token"]

    def create_category(self, token: str, name: str = "Technology") -> dict:
        resp = self.client.post(
            api("/categories"),
            json={"name": name},
            headers=bearer(token),
        )
        self.assertEqual(resp.status_code, 201, resp.text)
        return resp.json()

    def create_post(self, token: str, category_id: int, **fields: object) -> dict:
        body = {
            "title": "A day in the hills",
            "content": "We walked for hours and saw nobody at all.",
            "category": category_id,
            "status": "published",
        }
        body.update(fields)
        resp = self.client.post(api("/posts"), json=body, headers=bearer(token))
        self.assertEqual(resp.status_code, 201, resp.text)
        return resp.json()["post"]


def identity(user_id: int, role: str = "user") -> CurrentUser:
    """A request identity as the auth dependency would build it."""
    return CurrentUser(id=user_id, username=f"user{user_id}", email=f"user{user_id}@example.com", role=role)
