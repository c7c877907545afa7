"""Login, token validation, password change and first-run admin bootstrap."""

import logging
import threading

from dockmaster.core.errors import InvalidCredentialsError
from dockmaster.core.security import BCRYPT_ROUNDS, TokenClaims, TokenIssuer, hash_password, verify_password
from dockmaster.schemas.auth import StoredUser
from dockmaster.services.credentials import CredentialStore

logger = logging.getLogger(__name__)

ADMIN_ROLE = "admin"


class AuthService:
    def __init__(
        self,
        store: CredentialStore,
        issuer: TokenIssuer,
        bcrypt_rounds: int = BCRYPT_ROUNDS,
    ) -> None:
        self.store = store
        self.issuer = issuer
        self._bcrypt_rounds = bcrypt_rounds
        self._password_lock = threading.Lock()

    def authenticate(self, username: str, password: str) -> StoredUser:
        """
        Return the stored user when password matches.
        Unknown user and wrong password raise the same InvalidCredentialsError;
        only the log says which.
        """
        user = self.store.get(username)
        if user is None:
            logger.warning("Login failed", extra={"username": username, "reason": "unknown user"})
            raise InvalidCredentialsError()
        if not verify_password(password, user.password_hash):
            logger.warning("Login failed", extra={"username": username, "reason": "wrong password"})
            raise InvalidCredentialsError()
        return user

    def issue_token(self, user: StoredUser) -> tuple[str, int]:
        return self.issuer.issue(user.username, user.role)

    def validate_token(self, token: str) -> TokenClaims:
        return self.issuer.validate(token)

    def change_password(self, username: str, current_password: str, new_password: str) -> None:
        """Re-check current_password, then store a hash of new_password."""
        with self._password_lock:
            user = self.authenticate(username, current_password)
            self.store.upsert(
                user.model_copy(
                    update={"password_hash": hash_password(new_password, rounds=self._bcrypt_rounds)}
                )
            )
        logger.info("Password changed", extra={"username": username})

    def bootstrap_admin(self, username: str, password: str) -> bool:
        """Create the admin account on first run. No-op when it already exists."""
        created = self.store.create_if_absent(
            username,
            hash_password(password, rounds=self._bcrypt_rounds),
            ADMIN_ROLE,
        )
        if created:
            logger.warning(
                "Created default admin user %r. CHANGE PASSWORD IMMEDIATELY!",
                username,
                extra={"username": username},
            )
        return created
