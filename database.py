from datetime import datetime, timezone

from sqlmodel import Field, Session, SQLModel, create_engine

from config import DATABASE_URL

connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}
engine = create_engine(DATABASE_URL, echo=False, connect_args=connect_args)


def init_db(bind=None):
    SQLModel.metadata.create_all(bind or engine)


def get_session():
    return Session(engine)


class User(SQLModel, table=True):
    __tablename__ = "users"

    id: int | None = Field(default=None, primary_key=True)
    email: str = Field(unique=True, index=True)
    password_hash: str
    name: str | None = None
    phone: str | None = None
    age: str | None = None
    age_group: str | None = None
    dob: str | None = None
    country: str | None = None
    state: str | None = None
    city: str | None = None
    pincode: str | None = None
    role: str | None = None
    work_tags: str | None = None  # comma-separated
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class LoginEvent(SQLModel, table=True):
    __tablename__ = "login_events"

    id: int | None = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
