# evoting/security.py
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from .config import Settings
from .errors import InvalidTokenError

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


# Hash a password
def hash_password(password: str) -> str:
    return pwd_context.hash(password)


# Verify a plain password against a hash
def verify_password(plain_password: str, hashed_password: str) -> bool:
    if not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        # stored value is not a recognised hash
        return False


class TokenService:
    """Issues and verifies signed, time-limited bearer tokens.

    The signing secret comes from the immutable Settings object handed in at
    startup. There is no revocation list: rotating ``secret_key`` is the only
    way to invalidate outstanding tokens.
    """

    def __init__(self, settings: Settings):
        self._secret_key = settings.secret_key
        self._algorithm = settings.algorithm
        self._expire_minutes = settings.access_token_expire_minutes

    def issue(self, subject_id: str, expires_delta: Optional[timedelta] = None) -> str:
        if expires_delta is None:
            expires_delta = timedelta(minutes=self._expire_minutes)
        now = datetime.now(timezone.utc)
        to_encode = {"sub": str(subject_id), "iat": now, "exp": now + expires_delta}
        return jwt.encode(to_encode, self._secret_key, algorithm=self._algorithm)

    def verify(self, token: str) -> str:
        """Return the subject id carried by ``token`` or raise InvalidTokenError."""
        if not token:
            raise InvalidTokenError("Token missing")
        try:
            payload = jwt.decode(token, self._secret_key, algorithms=[self._algorithm])
        except JWTError as e:
            raise InvalidTokenError(str(e)) from e
        subject_id = payload.get("sub")
        if not subject_id or not isinstance(subject_id, str):
            raise InvalidTokenError("Token has no subject")
        return subject_id
