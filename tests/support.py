"""Shared fixtures: an in-memory SQLite store and an API client bound to it."""

import unittest
from collections.abc import Generator

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.database import get_db
from app.main import app
from app.models import Base

API = "/api/v1"
PASSWORD = "s3cret-pass"


def make_sessionmaker() -> tuple[object, sessionmaker]:
    """Fresh in-memory database with all tables created."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return engine, sessionmaker(autocommit=False, autoflush=False, bind=engine)


class StoreTestCase(unittest.TestCase):
    """Test case with a real session against an empty in-memory database."""

    def setUp(self) -> None:
        self.engine, self.SessionLocal = make_sessionmaker()
        self.db: Session = self.SessionLocal()

    def tearDown(self) -> None:
        self.db.close()
        self.engine.dispose()


class ApiTestCase(StoreTestCase):
    """StoreTestCase plus a TestClient whose get_db yields sessions on the test store."""

    def setUp(self) -> None:
        super().setUp()

        def override_get_db() -> Generator[Session, None, None]:
            db = self.SessionLocal()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = override_get_db
        self.client = TestClient(app)

    def tearDown(self) -> None:
        app.dependency_overrides.clear()
        super().tearDown()

    def register(
        self,
        name: str,
        email: str,
        phone: str,
        role: str,
        password: str = PASSWORD,
    ):
        return self.client.post(
            f"{API}/auth/register",
            json={
                "name": name,
                "email": email,
                "phone": phone,
                "password": password,
                "role": role,
            },
        )

    def login(self, email: str, role: str, password: str = PASSWORD):
        return self.client.post(
            f"{API}/auth/login",
            json={"email": email, "password": password, "role": role},
        )

    def sign_up_and_in(self, name: str, email: str, phone: str, role: str) -> dict[str, str]:
        """Register, log in and return Authorization headers."""
        resp = self.register(name, email, phone, role)
        self.assertEqual(resp.status_code, 201, resp.text)
        resp = self.login(email, role)
        self.assertEqual(resp.status_code, 200, resp.text)
        return {"Authorization": f"Bearer {resp.json()['access_token']}"}
