# finance_copilot/core/credentials.py

import logging
from typing import Optional
from passlib.context import CryptContext
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from finance_copilot.core.errors import ConflictError, InternalError, ValidationError
from finance_copilot.models import User


logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


def _is_blank(value) -> bool:
    return value is None or not value.strip()


def build_password_context(rounds: int = 10) -> CryptContext:
    return CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)


class CredentialStore:
    """
    Users and their bcrypt password hashes.
    Plain passwords are only ever handed to the hashing context.
    """

    def __init__(self, db: Session, pwd_context: CryptContext):
        self.db = db
        self.pwd_context = pwd_context

    def register(self, username: str, email: str, password: str) -> User:
        if _is_blank(username) or _is_blank(email) or not password:
            raise ValidationError("All fields are required")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters", field="password"
            )

        if self.find_by_email(email) is not None:
            raise ConflictError("email")
        if self._find_by_username(username) is not None:
            raise ConflictError("username")

        user = User(
            username=username,
            email=email,
            hashed_password=self.pwd_context.hash(password),
        )
        try:
            self.db.add(user)
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logger.info("Registration conflict for %s: %s", username, e.orig)
            raise ConflictError("email" if "email" in str(e.orig) else "username") from e
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception("Registration failed for %s", username)
            raise InternalError("Registration failed") from e

        self.db.refresh(user)
        return user

    def find_by_email(self, email: str) -> Optional[User]:
        try:
            return self.db.query(User).filter(User.email == email).first()
        except SQLAlchemyError as e:
            logger.exception("User lookup failed")
            raise InternalError("Login failed") from e

    def _find_by_username(self, username: str) -> Optional[User]:
        try:
            return self.db.query(User).filter(User.username == username).first()
        except SQLAlchemyError as e:
            logger.exception("User lookup failed")
            raise InternalError("Registration failed") from e

    def verify_password(self, user: User, password: str) -> bool:
        if not password:
            return False
        return self.pwd_context.verify(password, user.hashed_password)

    def authenticate(self, email: str, password: str) -> Optional[User]:
        user = self.find_by_email(email)
        if user is None:
            # keep the unknown-email path as slow as a real check
            self.pwd_context.dummy_verify()
            logger.info("Login failed: unknown email %s", email)
            return None
        if not self.verify_password(user, password):
            logger.info("Login failed: wrong password for user %s", user.id)
            return None
        return user
