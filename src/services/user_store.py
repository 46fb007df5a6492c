"""Persistence for user accounts and their credential state."""

from datetime import UTC, datetime

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from src.models.user import User
from src.services.errors import DuplicateEmailError


class UserStore:
    """Data access for the users table.

    Email uniqueness is enforced by the table's unique index; ``create`` turns
    a violation into ``DuplicateEmailError``.
    """

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, user_id: int) -> User | None:
        return self.db.query(User).filter(User.id == user_id).first()

    def get_by_email(self, email: str) -> User | None:
        return self.db.query(User).filter(User.email == email.lower()).first()

    def get_by_verification_token(self, token: str) -> User | None:
        """Find the user holding this verification token, if it is unexpired."""
        return (
            self.db.query(User)
            .filter(
                User.verification_token == token,
                User.verification_token_expires_at > datetime.now(UTC),
            )
            .first()
        )

    def get_by_reset_token_hash(self, token_hash: str) -> User | None:
        """Find the user holding this reset token digest, if it is unexpired."""
        return (
            self.db.query(User)
            .filter(
                User.password_reset_token == token_hash,
                User.password_reset_expires_at > datetime.now(UTC),
            )
            .first()
        )

    def consume_reset_token(self, token_hash: str) -> User | None:
        """Atomically clear an unexpired reset token and return its owner.

        Only one caller can claim a given token: the conditional update matches
        the row only while the digest is still stored.
        """
        user = self.get_by_reset_token_hash(token_hash)
        if user is None:
            return None

        claimed = (
            self.db.query(User)
            .filter(
                User.id == user.id,
                User.password_reset_token == token_hash,
                User.password_reset_expires_at > datetime.now(UTC),
            )
            .update(
                {User.password_reset_token: None, User.password_reset_expires_at: None},
                synchronize_session=False,
            )
        )
        self.db.commit()
        if claimed != 1:
            return None

        self.db.refresh(user)
        return user

    def list_all(self) -> list[User]:
        return self.db.query(User).order_by(User.created_at.desc()).all()

    def create(self, user: User) -> User:
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise DuplicateEmailError() from e
        self.db.refresh(user)
        return user

    def save(self, user: User) -> User:
        self.db.commit()
        self.db.refresh(user)
        return user

    def delete(self, user: User) -> None:
        self.db.delete(user)
        self.db.commit()
