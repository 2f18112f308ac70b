from sqlalchemy import func, update
from sqlmodel import Session, select

from database import LoginEvent, User
from database import engine as default_engine


class UserStore:
    """Account storage. Every method runs one parameterized statement in its own session."""

    def __init__(self, engine=None):
        self.engine = engine if engine is not None else default_engine

    def get_by_email(self, email: str) -> User | None:
        with Session(self.engine) as session:
            return session.exec(select(User).where(User.email == email)).first()

    def create(self, email: str, password_hash: str) -> User:
        with Session(self.engine) as session:
            user = User(email=email, password_hash=password_hash)
            session.add(user)
            session.commit()
            session.refresh(user)
            return user

    def update_password_hash(self, user_id: int, password_hash: str) -> None:
        with Session(self.engine) as session:
            session.exec(
                update(User).where(User.id == user_id).values(password_hash=password_hash)
            )
            session.commit()

    def update_profile(self, user_id: int, fields: dict) -> None:
        with Session(self.engine) as session:
            session.exec(update(User).where(User.id == user_id).values(**fields))
            session.commit()

    def record_login_event(self, user_id: int) -> LoginEvent:
        with Session(self.engine) as session:
            event = LoginEvent(user_id=user_id)
            session.add(event)
            session.commit()
            session.refresh(event)
            return event

    def stats(self) -> dict:
        def count(*criteria) -> int:
            stmt = select(func.count()).select_from(User)
            if criteria:
                stmt = stmt.where(*criteria)
            return session.exec(stmt).one()

        with Session(self.engine) as session:
            return {
                "total": count(),
                "helpers": count(User.role == "helper"),
                "hirers": count(User.role == "hirer"),
                "with_role": count(User.role.is_not(None)),
            }
