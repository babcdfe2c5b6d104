"""
AuthGateway -- operator sign-in.

Responsibility:
    Answers "who is operating the console" and verifies passwords for
    destructive operations.  The kernel depends only on the AuthGateway
    interface; LocalAuthGateway checks a fixed set of operator accounts
    with werkzeug PBKDF2-SHA256 password hashes.

Architecture position:
    Kernel > Services -- external interface.
    Used by MaintenanceService and the operator console.

Failure modes:
    - AuthenticationError: unknown email or wrong password.
    - NotAuthenticatedError: an operation needs a session and none exists.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Mapping

from werkzeug.security import check_password_hash, generate_password_hash

from stock_kernel.domain.clock import Clock, SystemClock
from stock_kernel.exceptions import AuthenticationError, NotAuthenticatedError
from stock_kernel.logging_config import get_logger

logger = get_logger("services.auth")

PASSWORD_HASH_METHOD = "pbkdf2:sha256"


def hash_password(password: str, method: str = PASSWORD_HASH_METHOD) -> str:
    """
    Encode ``password`` for the ``operators`` section of a config file.

    ``method`` is a werkzeug method string; ``pbkdf2:sha256:<iterations>``
    pins the iteration count.
    """
    return generate_password_hash(password, method=method)


def verify_password(password: str, encoded: str) -> bool:
    """Check ``password`` against an encoded hash.  Unreadable hashes never match."""
    try:
        return check_password_hash(encoded, password)
    except ValueError:
        return False


@dataclass(frozen=True)
class OperatorSession:
    """A signed-in operator."""

    email: str
    signed_in_at: datetime


class AuthGateway(ABC):
    """
    Operator authentication interface.

    Contract:
        At most one session is active per gateway.  A failed sign_in()
        leaves the current session unchanged.
    """

    @abstractmethod
    def current_session(self) -> OperatorSession | None:
        ...

    @abstractmethod
    def sign_in(self, email: str, password: str) -> OperatorSession:
        ...

    @abstractmethod
    def sign_out(self) -> None:
        ...

    def require_session(self, operation: str) -> OperatorSession:
        session = self.current_session()
        if session is None:
            raise NotAuthenticatedError(operation)
        return session

    def reauthenticate(self, operation: str, password: str) -> OperatorSession:
        """Re-check the signed-in operator's password before ``operation``."""
        session = self.require_session(operation)
        return self.sign_in(session.email, password)


class LocalAuthGateway(AuthGateway):
    """
    Checks credentials against configured operator accounts.

    Args:
        accounts: email -> encoded password hash (see hash_password()).
        clock: Source of ``signed_in_at``.
    """

    def __init__(self, accounts: Mapping[str, str], clock: Clock | None = None):
        self._accounts = {
            email.strip().lower(): encoded for email, encoded in accounts.items()
        }
        self._clock = clock if clock is not None else SystemClock()
        self._session: OperatorSession | None = None

    def current_session(self) -> OperatorSession | None:
        return self._session

    def sign_in(self, email: str, password: str) -> OperatorSession:
        key = email.strip().lower()
        encoded = self._accounts.get(key)
        if encoded is None or not verify_password(password, encoded):
            logger.warning("sign_in_failed", extra={"email": key})
            raise AuthenticationError(key)
        self._session = OperatorSession(email=key, signed_in_at=self._clock.now())
        logger.info("sign_in_succeeded", extra={"email": key})
        return self._session

    def sign_out(self) -> None:
        if self._session is not None:
            logger.info("signed_out", extra={"email": self._session.email})
        self._session = None
