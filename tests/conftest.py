"""Shared test fixtures."""

import asyncio
import copy
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from mentorhub.core.email_service.email_service import EmailService
from mentorhub.main import create_app
from mentorhub.modules.auth.dependencies import get_auth_service, get_email_service
from mentorhub.modules.auth.repository import AuthRepository
from mentorhub.modules.auth.service import AuthService
from mentorhub.modules.auth.utility import create_token, hash_password
from mentorhub.modules.sessions.dependencies import get_session_service
from mentorhub.modules.sessions.models import Session, SessionStatus
from mentorhub.modules.sessions.repository import SessionRepository
from mentorhub.modules.sessions.service import SessionService
from mentorhub.modules.sessions.utility import (
    SlotDescriptor,
    ensure_utc,
    is_live_reservation,
    session_blocks_slot,
)
from mentorhub.modules.users.dependencies import get_user_service
from mentorhub.modules.users.models import User, UserRole
from mentorhub.modules.users.repository import UserRepository
from mentorhub.modules.users.service import UserService

NOW = datetime(2030, 5, 1, 9, 0, tzinfo=timezone.utc)
PUBLIC_USER_FIELDS = ("id", "name", "title", "image", "email")


@dataclass
class InMemoryAuthRepository(AuthRepository):
    """In-memory user store standing in for the users collection."""

    users: Dict[str, dict] = field(default_factory=dict)

    async def user_exists(self, email: str) -> bool:
        return any(u["email"] == email for u in self.users.values())

    async def create_user(self, user: User) -> dict:
        data = user.model_dump(mode="python")
        data["role"] = user.role.value
        self.users[data["id"]] = data
        return copy.deepcopy(data)

    async def find_user(self, email: str) -> Optional[dict]:
        for user in self.users.values():
            if user["email"] == email:
                return copy.deepcopy(user)
        return None

    async def find_user_by_id(self, id: str) -> Optional[dict]:
        user = self.users.get(id)
        if user is None:
            return None
        data = copy.deepcopy(user)
        data.pop("hashed_password", None)
        return data

    async def find_user_by_verification_token(self, token: str) -> Optional[dict]:
        for user in self.users.values():
            if user.get("verification_token") == token:
                return copy.deepcopy(user)
        return None

    async def set_verification_token(self, id: str, token: str, expires_at: datetime):
        self.users[id]["verification_token"] = token
        self.users[id]["verification_expires"] = expires_at

    async def mark_email_verified(self, id: str):
        user = self.users[id]
        user["email_verified"] = True
        user.pop("verification_token", None)
        user.pop("verification_expires", None)


@dataclass
class InMemoryUserRepository(UserRepository):
    """Read side of the users collection, sharing the auth store."""

    users: Dict[str, dict] = field(default_factory=dict)

    async def find_users_by_ids(self, ids: List[str]) -> List[dict]:
        return [
            {k: v for k, v in self.users[i].items() if k in PUBLIC_USER_FIELDS}
            for i in ids
            if i in self.users
        ]


@dataclass
class InMemorySessionRepository(SessionRepository):
    """In-memory sessions collection for tests."""

    sessions: Dict[str, dict] = field(default_factory=dict)
    fail_with: Optional[Exception] = None

    def _check(self) -> None:
        if self.fail_with is not None:
            raise self.fail_with

    async def insert_session(self, session: Session):
        self._check()
        document = session.to_document()
        self.sessions[document["id"]] = document
        return document

    async def find_session_by_id(self, session_id: str) -> Optional[dict]:
        self._check()
        session = self.sessions.get(session_id)
        return copy.deepcopy(session) if session else None

    async def find_blocking_sessions(
        self, slot: SlotDescriptor, now: datetime, exclude_id: Optional[str] = None
    ) -> List[dict]:
        self._check()
        return [
            copy.deepcopy(s)
            for s in self.sessions.values()
            if s["id"] != exclude_id and session_blocks_slot(s, slot, now)
        ]

    async def confirm_reservation(self, session_id: str, mentee_id: str, now: datetime) -> bool:
        self._check()
        session = self.sessions.get(session_id)
        if (
            session is None
            or session["mentee_id"] != mentee_id
            or not is_live_reservation(session, now)
        ):
            return False
        session["status"] = SessionStatus.confirmed.value
        session["confirmed_at"] = now
        session.pop("reservation_expires", None)
        return True

    async def delete_session_by_id(self, session_id: str) -> int:
        self._check()
        return 1 if self.sessions.pop(session_id, None) else 0

    async def delete_reservation(self, session_id: str, mentee_id: str) -> int:
        self._check()
        session = self.sessions.get(session_id)
        if (
            session
            and session["mentee_id"] == mentee_id
            and session["status"] == SessionStatus.reserved.value
        ):
            del self.sessions[session_id]
            return 1
        return 0

    async def find_expired_reservations(self, now: Optional[datetime] = None) -> List[dict]:
        self._check()
        return [
            {"id": s["id"]}
            for s in self.sessions.values()
            if s["status"] == SessionStatus.reserved.value
            and ensure_utc(s.get("reservation_expires")) is not None
            and ensure_utc(s["reservation_expires"]) < now
        ]

    async def delete_sessions(self, session_ids: List[str]) -> int:
        self._check()
        deleted = 0
        for session_id in session_ids:
            if self.sessions.pop(session_id, None):
                deleted += 1
        return deleted

    async def find_confirmed_sessions(self, field: str, user_id: str) -> List[dict]:
        self._check()
        found = [
            copy.deepcopy(s)
            for s in self.sessions.values()
            if s.get(field) == user_id and s["status"] == SessionStatus.confirmed.value
        ]
        return sorted(found, key=lambda s: (s["date"], s["start_time"]))


class InterleavingSessionRepository(InMemorySessionRepository):
    """Yields to the event loop between reads and writes to expose races."""

    yield_on_insert: bool = False

    async def find_blocking_sessions(self, slot, now, exclude_id=None):
        found = await super().find_blocking_sessions(slot, now, exclude_id)
        await asyncio.sleep(0)
        return found

    async def insert_session(self, session: Session):
        document = await super().insert_session(session)
        if self.yield_on_insert:
            await asyncio.sleep(0)
        return document


class RecordingEmailService(EmailService):
    """Email service that records outgoing mail instead of sending it."""

    def __init__(self):
        super().__init__(api_key="", provider="email", base_url="http://test")
        self.verifications: List[tuple] = []
        self.confirmations: List[tuple] = []

    def send_verification_email(self, user_email: str, name: str, token: str):
        self.verifications.append((user_email, name, token))

    def send_booking_confirmation(self, user_email: str, booking_data: dict):
        self.confirmations.append((user_email, booking_data))


def make_user(role: UserRole, name: str, email: str, password: str = "secret-pass", **extra) -> dict:
    user = User(
        name=name,
        email=email,
        role=role,
        hashed_password=hash_password(password),
        email_verified=True,
        **extra,
    )
    data = user.model_dump(mode="python")
    data["role"] = role.value
    return data


def reserved_session(mentee_id: str, mentor_id: str, date: str, start: str, end: str,
                     expires: datetime, **extra) -> Session:
    return Session(
        mentee_id=mentee_id,
        mentor_id=mentor_id,
        date=date,
        start_time=start,
        end_time=end,
        status=SessionStatus.reserved,
        reservation_expires=expires,
        created_at=NOW,
        **extra,
    )


def confirmed_session(mentee_id: str, mentor_id: str, date: str, start: str, end: str, **extra) -> Session:
    return Session(
        mentee_id=mentee_id,
        mentor_id=mentor_id,
        date=date,
        start_time=start,
        end_time=end,
        status=SessionStatus.confirmed,
        created_at=NOW,
        confirmed_at=NOW,
        **extra,
    )


@pytest.fixture
def users() -> Dict[str, dict]:
    return {}


@pytest.fixture
def mentor(users) -> dict:
    user = make_user(UserRole.mentor, "Ada Mentor", "ada@example.com",
                     title="Principal Engineer", image="https://img.example.com/ada.png")
    users[user["id"]] = user
    return user


@pytest.fixture
def mentee(users) -> dict:
    user = make_user(UserRole.mentee, "Ben Mentee", "ben@example.com")
    users[user["id"]] = user
    return user


@pytest.fixture
def other_mentee(users) -> dict:
    user = make_user(UserRole.mentee, "Cleo Mentee", "cleo@example.com")
    users[user["id"]] = user
    return user


@pytest.fixture
def admin(users) -> dict:
    user = make_user(UserRole.admin, "Root Admin", "admin@example.com")
    users[user["id"]] = user
    return user


@pytest.fixture
def auth_repository(users) -> InMemoryAuthRepository:
    return InMemoryAuthRepository(users=users)


@pytest.fixture
def user_repository(users) -> InMemoryUserRepository:
    return InMemoryUserRepository(users=users)


@pytest.fixture
def session_repository() -> InMemorySessionRepository:
    return InMemorySessionRepository()


@pytest.fixture
def email_service() -> RecordingEmailService:
    return RecordingEmailService()


@pytest.fixture
def session_service(session_repository, user_repository, email_service) -> SessionService:
    return SessionService(
        session_repository,
        user_repository,
        email_service,
        hold_minutes=10,
        join_window_minutes=10,
        clock=lambda: NOW,
    )


@pytest.fixture
def auth_service(auth_repository, email_service) -> AuthService:
    return AuthService(auth_repo=auth_repository, email_service=email_service)


@pytest.fixture
def client(auth_repository, session_service, auth_service, email_service) -> TestClient:
    app = create_app(use_lifespan=False)
    app.dependency_overrides[AuthRepository] = lambda: auth_repository
    app.dependency_overrides[get_email_service] = lambda: email_service
    app.dependency_overrides[get_auth_service] = lambda: auth_service
    app.dependency_overrides[get_user_service] = UserService
    app.dependency_overrides[get_session_service] = lambda: session_service
    return TestClient(app)


def auth_header(user: dict) -> Dict[str, str]:
    return {"Authorization": f"Bearer {create_token(user['id'], user['role'])}"}
