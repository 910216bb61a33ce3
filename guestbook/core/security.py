import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
from jose import jwt, JWTError, ExpiredSignatureError

from guestbook.core.config import settings

logger = logging.getLogger(__name__)

# bcrypt only looks at the first 72 bytes
_BCRYPT_MAX_BYTES = 72


def get_password_hash(password: str) -> str:
    hashed = bcrypt.hashpw(password.encode("utf-8")[:_BCRYPT_MAX_BYTES], bcrypt.gensalt())
    return hashed.decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return bcrypt.checkpw(
            plain_password.encode("utf-8")[:_BCRYPT_MAX_BYTES],
            hashed_password.encode("utf-8"),
        )
    except ValueError:
        # malformed stored hash
        return False


class CredentialVerifier:
    """
    Issues and verifies bearer credentials.

    Holds the whole verification context (key, algorithm, issuer) so that
    nothing downstream reads process-wide settings to check a token.
    """

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        issuer: str = "guestbook",
        expire_minutes: int = 60 * 24 * 7,
    ):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.issuer = issuer
        self.expire_minutes = expire_minutes

    @classmethod
    def from_settings(cls) -> "CredentialVerifier":
        return cls(
            settings.SECRET_KEY,
            settings.ALGORITHM,
            settings.TOKEN_ISSUER,
            settings.ACCESS_TOKEN_EXPIRE_MINUTES,
        )

    def create_access_token(self, subject: str, expires_delta: Optional[timedelta] = None) -> str:
        if expires_delta is None:
            expires_delta = timedelta(minutes=self.expire_minutes)
        expire = datetime.now(timezone.utc) + expires_delta
        claims = {"sub": str(subject), "iss": self.issuer, "type": "access", "exp": expire}
        return jwt.encode(claims, self.secret_key, algorithm=self.algorithm)

    def verify(self, token: Optional[str]) -> Optional[str]:
        """Return the verified username, or None for a missing or invalid token."""
        if not token:
            return None
        try:
            payload = jwt.decode(
                token, self.secret_key, algorithms=[self.algorithm], issuer=self.issuer
            )
        except ExpiredSignatureError:
            logger.debug("Rejected expired token")
            return None
        except JWTError:
            return None

        username = payload.get("sub")
        if not username or payload.get("type") != "access":
            return None
        return username
