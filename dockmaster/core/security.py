"""Password hashing and JWT creation/verification for authentication."""

import logging
import secrets
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

import bcrypt
import jwt

from dockmaster.core.errors import TokenExpiredError, UnauthorizedError

if TYPE_CHECKING:
    from dockmaster.core.config import Settings

logger = logging.getLogger(__name__)

# Bcrypt cost (rounds); 12 is a good default for security vs speed.
BCRYPT_ROUNDS = 12

# Min/max lengths for username and password validation.
USERNAME_MIN_LEN = 1
USERNAME_MAX_LEN = 255
PASSWORD_MIN_LEN = 8
PASSWORD_MAX_LEN = 128

# Claims every token must carry.
REQUIRED_CLAIMS = ("username", "role", "exp", "iat", "iss")


def hash_password(plain_password: str, rounds: int = BCRYPT_ROUNDS) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    # bcrypt has a 72-byte limit; truncate to avoid errors (validation already limits length).
    pw_bytes = plain_password.encode("utf-8")[:72]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash."""
    pw_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def resolve_signing_key(settings: "Settings") -> str:
    """
    Return the configured JWT secret, or a random per-process one.

    The random fallback keeps a fresh install usable, but every restart
    invalidates all outstanding tokens.
    """
    if settings.JWT_SECRET is not None:
        return settings.JWT_SECRET.get_secret_value()
    logger.warning(
        "JWT_SECRET not provided, using a random secret (tokens will be invalid after restart)"
    )
    return secrets.token_urlsafe(32)


@dataclass(frozen=True)
class TokenClaims:
    username: str
    role: str
    issued_at: int
    expires_at: int
    issuer: str


class TokenIssuer:
    """Issues and validates signed, time-limited bearer tokens."""

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        lifetime: timedelta = timedelta(hours=24),
        issuer: str = "dockmaster",
    ) -> None:
        self._secret = secret
        self._algorithm = algorithm
        self._lifetime = lifetime
        self._issuer = issuer

    @classmethod
    def from_settings(cls, settings: "Settings") -> "TokenIssuer":
        return cls(
            secret=resolve_signing_key(settings),
            algorithm=settings.JWT_ALGORITHM,
            lifetime=timedelta(hours=settings.JWT_EXPIRE_HOURS),
            issuer=settings.JWT_ISSUER,
        )

    def issue(self, username: str, role: str, now: datetime | None = None) -> tuple[str, int]:
        """Create a token for username/role; returns (token, expires_at as Unix seconds)."""
        now = now or datetime.now(UTC)
        expire = now + self._lifetime
        payload: dict[str, Any] = {
            "username": username,
            "role": role,
            "exp": expire,
            "iat": now,
            "iss": self._issuer,
        }
        token = jwt.encode(payload, self._secret, algorithm=self._algorithm)
        return token, int(expire.timestamp())

    def validate(self, token: str) -> TokenClaims:
        """
        Verify signature, issuer and expiry.
        Raises TokenExpiredError once exp has passed, UnauthorizedError on anything else.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                issuer=self._issuer,
                options={"require": list(REQUIRED_CLAIMS)},
            )
        except jwt.ExpiredSignatureError as e:
            raise TokenExpiredError() from e
        except jwt.PyJWTError as e:
            raise UnauthorizedError("Invalid token") from e

        username = payload.get("username")
        role = payload.get("role")
        if not isinstance(username, str) or not username or not isinstance(role, str):
            raise UnauthorizedError("Invalid token payload")
        return TokenClaims(
            username=username,
            role=role,
            issued_at=int(payload["iat"]),
            expires_at=int(payload["exp"]),
            issuer=payload["iss"],
        )
