"""Shared fixtures: in-memory SQLite, cheap argon2, fake clock and mailer."""

import os

# Must be set before any application module reads config
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("STATIC_DIR", "tests/no-static-dir")
os.environ.setdefault("AWS_SES_SENDER_EMAIL", "sender@example.com")

from datetime import datetime, timedelta, timezone

import pytest
from argon2 import PasswordHasher
from botocore.exceptions import ClientError
from fastapi.testclient import TestClient
from sqlalchemy import func
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine, select

from database import LoginEvent, init_db
from main import app, get_account_service
from services.account_service import AccountService
from services.otp_service import InMemoryOTPStore, OTPRegistry
from services.password_service import PasswordService
from services.user_store import UserStore


class FakeClock:
    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class FakeMailer:
    """Records verification emails instead of calling SES."""

    def __init__(self):
        self.sent: list[tuple[str, str]] = []
        self.fail = False
        self.error = None

    def send_verification_email(self, email: str, otp: str) -> dict:
        if self.error is not None:
            raise self.error
        if self.fail:
            raise ClientError(
                {"Error": {"Code": "MessageRejected", "Message": "Email address is not verified"}},
                "SendEmail",
            )
        self.sent.append((email, otp))
        return {"MessageId": f"fake-{len(self.sent)}"}

    def last_code_for(self, email: str) -> str:
        return [otp for to, otp in self.sent if to == email][-1]


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def store(engine):
    return UserStore(engine)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def registry(clock):
    return OTPRegistry(InMemoryOTPStore(), clock=clock)


@pytest.fixture
def passwords():
    return PasswordService(PasswordHasher(time_cost=1, memory_cost=8, parallelism=1))


@pytest.fixture
def mailer():
    return FakeMailer()


@pytest.fixture
def service(registry, store, passwords, mailer):
    return AccountService(registry=registry, store=store, passwords=passwords, mailer=mailer)


@pytest.fixture
def client(service):
    app.dependency_overrides[get_account_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def login_event_count(engine):
    def count(user_id: int) -> int:
        with Session(engine) as session:
            stmt = select(func.count()).select_from(LoginEvent).where(LoginEvent.user_id == user_id)
            return session.exec(stmt).one()

    return count
