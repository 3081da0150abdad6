"""Shared test cases: a fresh in-memory database per test, plus an API client bound to it."""

import unittest
from collections.abc import Generator

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from warden.core.database import build_engine, get_db
from warden.main import app
from warden.models import Base, Permission, Role, RolePermission, User, UserRole
from warden.services import users as user_store


class DatabaseTestCase(unittest.TestCase):
    """Each test gets its own empty schema in a private in-memory SQLite database."""

    def setUp(self) -> None:
        self.engine = build_engine(
            "sqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        Base.metadata.create_all(self.engine)
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)
        self.db: Session = self.SessionLocal()

    def tearDown(self) -> None:
        self.db.close()
        Base.metadata.drop_all(self.engine)
        self.engine.dispose()

    def add_permission(self, name: str) -> Permission:
        permission = Permission(permission_name=name, description=name)
        self.db.add(permission)
        self.db.commit()
        return permission

    def add_role(self, name: str, permissions: tuple[str, ...] = ()) -> Role:
        """Create a role holding the named permissions (created on the fly if missing)."""
        role = Role(role_name=name, description=f"{name} role")
        self.db.add(role)
        self.db.flush()
        for perm_name in permissions:
            permission = (
                self.db.query(Permission).filter(Permission.permission_name == perm_name).first()
            )
            if permission is None:
                permission = Permission(permission_name=perm_name)
                self.db.add(permission)
                self.db.flush()
            self.db.add(RolePermission(role_id=role.id, permission_id=permission.id))
        self.db.commit()
        return role

    def add_user(self, username: str, password: str = "pw123", *roles: Role) -> User:
        """Register a user (default role must exist) and link any extra roles."""
        user = user_store.register(self.db, username, password, f"{username}@example.com")
        for role in roles:
            self.db.add(UserRole(user_id=user.id, role_id=role.id))
        self.db.commit()
        return user

    def count(self, model: type) -> int:
        return self.db.query(model).count()


class ApiTestCase(DatabaseTestCase):
    """DatabaseTestCase plus a TestClient whose get_db points at the test database."""

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
        self.client.close()
        app.dependency_overrides.clear()
        super().tearDown()

    def login(self, username: str, password: str = "pw123") -> str:
        resp = self.client.post(
            "/api/auth/login", json={"username": username, "password": password}
        )
        body = resp.json()
        self.assertTrue(body["success"], body["message"])
        return body["data"]
