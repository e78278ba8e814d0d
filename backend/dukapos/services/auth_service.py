# Overview: Service-layer operations for auth; credential hashing, login, and the super-admin bootstrap.

"""
Authentication Service

WHY: Every action must be attributable to a logged-in account. Passwords are
stored as bcrypt hashes behind the CredentialVerifier interface, so the hash
algorithm is isolated from login and provisioning logic.

SECURITY NOTES:
- Passwords hashed with bcrypt (cost factor from BCRYPT_ROUNDS, default 12)
- Minimum 8 characters required
- Unknown phone and wrong password fail identically (InvalidCredentials)
- The password check runs before the status check, so account status is
  only revealed to callers who know the password
"""

from __future__ import annotations

from abc import ABC, abstractmethod

import bcrypt
from flask import current_app

from ..extensions import db
from ..errors import AccountInactive, InvalidCredentials, ValidationError
from ..models import User
from ..permissions import Role, UserStatus
from ..time_utils import now


MIN_PASSWORD_LENGTH = 8


class PasswordValidationError(ValidationError):
    """Raised when password doesn't meet strength requirements."""
    pass


class CredentialVerifier(ABC):
    """Hashes and checks secrets; the only place that knows the algorithm."""

    @abstractmethod
    def hash(self, secret: str) -> str:
        ...

    @abstractmethod
    def verify(self, secret: str, hashed: str) -> bool:
        ...


class BcryptCredentialVerifier(CredentialVerifier):
    def __init__(self, rounds: int = 12):
        self.rounds = rounds

    def hash(self, secret: str) -> str:
        salt = bcrypt.gensalt(rounds=self.rounds)
        hashed = bcrypt.hashpw(secret.encode('utf-8'), salt)
        return hashed.decode('utf-8')  # Store as string in database

    def verify(self, secret: str, hashed: str) -> bool:
        # bcrypt.checkpw is timing-safe; a malformed stored hash raises ValueError
        try:
            return bcrypt.checkpw(secret.encode('utf-8'), hashed.encode('utf-8'))
        except ValueError:
            return False


def get_verifier() -> CredentialVerifier:
    verifier = current_app.extensions.get("credential_verifier")
    if verifier is None:
        verifier = BcryptCredentialVerifier(rounds=current_app.config.get("BCRYPT_ROUNDS", 12))
        current_app.extensions["credential_verifier"] = verifier
    return verifier


def validate_password_strength(password) -> None:
    """
    Validate password meets strength requirements.

    Raises PasswordValidationError if requirements not met.
    """
    if not isinstance(password, str) or len(password) < MIN_PASSWORD_LENGTH:
        raise PasswordValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")


def hash_password(password: str) -> str:
    """Hash a password after validating its strength."""
    validate_password_strength(password)
    return get_verifier().hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    return get_verifier().verify(password, password_hash)


def authenticate(phone_number: str, password: str) -> User:
    """
    Authenticate by phone number and password.

    Returns the User and stamps last_login_at on success.

    Raises:
        InvalidCredentials: unknown phone number or wrong password
        AccountInactive: correct password but status is not active
    """
    user = db.session.query(User).filter_by(phone_number=phone_number.strip()).first()
    if not user or not verify_password(password, user.password_hash):
        raise InvalidCredentials()

    if user.status != UserStatus.ACTIVE.value:
        raise AccountInactive()

    user.last_login_at = now()
    db.session.commit()
    return user


def ensure_super_admin() -> User | None:
    """
    Idempotently ensure the well-known Super Admin account exists.

    Looks up SUPER_ADMIN_PHONE; creates the account with
    SUPER_ADMIN_PASSWORD if absent. An existing account is left untouched
    (its password is never reset). Returns the account, or None when the
    bootstrap is disabled.

    SECURITY: the default password is public. Change it after first login.
    """
    config = current_app.config
    if not config.get("SUPER_ADMIN_BOOTSTRAP", True):
        return None

    phone = config["SUPER_ADMIN_PHONE"]
    existing = db.session.query(User).filter_by(phone_number=phone).first()
    if existing:
        return existing

    user = User(
        full_name=config.get("SUPER_ADMIN_NAME", "Super Admin"),
        phone_number=phone,
        password_hash=hash_password(config["SUPER_ADMIN_PASSWORD"]),
        role=Role.SUPER_ADMIN.value,
        status=UserStatus.ACTIVE.value,
    )
    db.session.add(user)
    db.session.commit()
    current_app.logger.warning(
        "Created bootstrap super admin %s with the configured default password", phone
    )
    return user
