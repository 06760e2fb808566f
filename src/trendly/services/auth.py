"""Identity gate: password hashing, token issuance and token resolution."""
import logging
from datetime import timedelta

import bcrypt
import jwt

from trendly import config
from trendly.db import EntityStore, User
from trendly.exceptions import InvalidCredential, ValidationError
from trendly.utils import utc_now

logger = logging.getLogger(__name__)

# bcrypt only looks at the first 72 bytes
_BCRYPT_MAX_BYTES = 72


def hash_password(plain: str) -> str:
    return bcrypt.hashpw(plain.encode()[:_BCRYPT_MAX_BYTES], bcrypt.gensalt()).decode()


def verify_password(plain: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(plain.encode()[:_BCRYPT_MAX_BYTES], hashed.encode())
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


class AuthService:
    """Registers users, checks credentials and issues/verifies bearer tokens."""

    def __init__(
        self,
        store: EntityStore,
        *,
        secret: str | None = None,
        algorithm: str | None = None,
        token_ttl: timedelta | None = None,
    ) -> None:
        self._store = store
        self._secret = secret or config.JWT_SECRET
        self._algorithm = algorithm or config.JWT_ALGORITHM
        self._token_ttl = token_ttl or timedelta(days=config.TOKEN_TTL_DAYS)

    def issue_token(self, user: User) -> str:
        payload = {
            "id": user.id,
            "email": user.email,
            "exp": utc_now() + self._token_ttl,
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def resolve_token(self, token: str) -> str:
        """Return the user id carried by a token.

        Raises:
            InvalidCredential: (403) bad signature, expired, or no user id claim.
        """
        try:
            payload = jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except jwt.InvalidTokenError as exc:
            raise InvalidCredential("Invalid token", status_code=403) from exc
        user_id = payload.get("id")
        if not isinstance(user_id, str) or not user_id:
            raise InvalidCredential("Invalid token", status_code=403)
        return user_id

    def register(self, email: str, password: str, name: str) -> tuple[User, str]:
        """Create an account and return it with a fresh token.

        Raises:
            ValidationError: the email is already registered.
        """
        if self._store.get_user_by_email(email) is not None:
            raise ValidationError("User already exists")
        user = self._store.create_user(
            name=name,
            email=email,
            password=hash_password(password),
        )
        logger.info("Registered user %s", user.id)
        return user, self.issue_token(user)

    def login(self, email: str, password: str) -> tuple[User, str]:
        """Check credentials and return the user with a fresh token.

        Raises:
            InvalidCredential: unknown email or wrong password.
        """
        user = self._store.get_user_by_email(email)
        if user is None or not verify_password(password, user.password):
            raise InvalidCredential()
        return user, self.issue_token(user)
