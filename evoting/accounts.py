# evoting/accounts.py
# Registration, login and password change
import logging
import re
from typing import Any, Dict, Tuple

from .config import NATIONAL_ID_PATTERN
from .errors import ConflictError, RegistrationConflict, UnauthorizedError, ValidationError
from .metrics import signups
from .schemas import UserCreate
from .security import TokenService
from .storage import UserStore

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid national ID or password"

_national_id_re = re.compile(NATIONAL_ID_PATTERN)


def normalize_national_id(value: str) -> str:
    """Validate a national ID and return its digits-only form."""
    value = (value or "").strip()
    if not _national_id_re.match(value):
        raise ValidationError("National ID must be 12 or 13 digits, optionally grouped as xxxxx-xxxxxxx-x")
    return value.replace("-", "")


async def register_user(users: UserStore, tokens: TokenService, data: UserCreate) -> Tuple[Dict[str, Any], str]:
    record = data.model_dump()
    record["nationalId"] = normalize_national_id(data.nationalId)
    try:
        user = await users.create(record)
    except ConflictError as e:
        raise RegistrationConflict(e.message) from e
    signups.labels(role=user["role"]).inc()
    token = tokens.issue(str(user["_id"]))
    return user, token


async def login_user(users: UserStore, tokens: TokenService, national_id, password) -> str:
    if not national_id or not password:
        raise ValidationError("National ID and password are required")

    # unknown IDs and wrong passwords must look the same to the caller
    try:
        user = await users.find_by_national_id(normalize_national_id(national_id))
    except ValidationError:
        user = None
    if user is None or not users.verify_secret(user, password):
        logger.warning("Failed login attempt")
        raise UnauthorizedError(INVALID_CREDENTIALS)
    return tokens.issue(str(user["_id"]))


async def change_password(users: UserStore, user: Dict[str, Any], current_password, new_password) -> None:
    if not current_password or not new_password:
        raise ValidationError("Both currentPassword and newPassword are required")
    if len(new_password) < 6:
        raise ValidationError("New password must be at least 6 characters")
    if not users.verify_secret(user, current_password):
        raise UnauthorizedError("Invalid current password")
    await users.update_secret(user, new_password)
