# evoting/storage/users.py
import logging
import re
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from ..errors import ConflictError
from ..schemas import Role
from ..security import hash_password, verify_password
from .ids import parse_object_id

logger = logging.getLogger(__name__)

ADMIN_EXISTS_MESSAGE = "Admin user already exists"
NATIONAL_ID_EXISTS_MESSAGE = "User with the same national ID already exists"
EMAIL_EXISTS_MESSAGE = "User with the same email already exists"
MOBILE_EXISTS_MESSAGE = "User with the same mobile number already exists"

DUPLICATE_MESSAGES = {
    "role": ADMIN_EXISTS_MESSAGE,
    "email": EMAIL_EXISTS_MESSAGE,
    "mobile": MOBILE_EXISTS_MESSAGE,
    "nationalId": NATIONAL_ID_EXISTS_MESSAGE,
}

# index name -> field, for servers that report the index but no keyPattern
INDEX_FIELDS = {
    "single_admin": "role",
    "email_1": "email",
    "mobile_1": "mobile",
    "nationalId_1": "nationalId",
}

_index_name_re = re.compile(r"index: (\S+) dup key")


def _duplicate_field(err: DuplicateKeyError) -> Optional[str]:
    """Name the field whose unique index rejected the write, if the error says."""
    details = err.details or {}
    for field in details.get("keyPattern") or {}:
        if field in DUPLICATE_MESSAGES:
            return field
    match = _index_name_re.search(details.get("errmsg") or str(err))
    if match:
        return INDEX_FIELDS.get(match.group(1))
    return None


class UserStore:
    """Persisted user credentials on top of the ``users`` collection."""

    def __init__(self, collection):
        self.collection = collection

    async def create(self, record: Dict[str, Any]) -> Dict[str, Any]:
        """
        Insert a new user, hashing the plaintext password on the way in.

        Args:
            record: user fields including a plaintext ``password``

        Returns:
            The stored document (with the hash, never the plaintext)

        Raises:
            ConflictError: national ID, email or mobile taken, or a second admin
        """
        data = dict(record)
        data["password"] = hash_password(data.pop("password"))
        data["role"] = Role(data.get("role", Role.VOTER)).value
        data["hasVoted"] = False
        now = datetime.now(timezone.utc)
        data["createdAt"] = now
        data["updatedAt"] = now

        if data["role"] == Role.ADMIN.value and await self.admin_exists():
            raise ConflictError(ADMIN_EXISTS_MESSAGE)
        if await self.find_by_national_id(data["nationalId"]) is not None:
            raise ConflictError(NATIONAL_ID_EXISTS_MESSAGE)

        try:
            result = await self.collection.insert_one(data)
        except DuplicateKeyError as e:
            field = _duplicate_field(e) or await self._colliding_field(data)
            message = DUPLICATE_MESSAGES.get(field, NATIONAL_ID_EXISTS_MESSAGE)
            logger.warning(f"Rejected user {data['nationalId']}: {message}")
            raise ConflictError(message) from e
        data["_id"] = result.inserted_id
        logger.info(f"User {result.inserted_id} created with role {data['role']}")
        return data

    async def _colliding_field(self, data: Dict[str, Any]) -> Optional[str]:
        if await self.find_by_national_id(data["nationalId"]) is not None:
            return "nationalId"
        if await self.collection.find_one({"email": data.get("email")}, {"_id": 1}) is not None:
            return "email"
        if await self.collection.find_one({"mobile": data.get("mobile")}, {"_id": 1}) is not None:
            return "mobile"
        admin = await self.collection.find_one({"role": Role.ADMIN.value}, {"_id": 1})
        if data["role"] == Role.ADMIN.value and admin is not None:
            return "role"
        return None

    async def admin_exists(self) -> bool:
        return await self.collection.find_one({"role": Role.ADMIN.value}, {"_id": 1}) is not None

    async def find_by_national_id(self, national_id: str) -> Optional[Dict[str, Any]]:
        return await self.collection.find_one({"nationalId": national_id})

    async def find_by_id(self, user_id) -> Optional[Dict[str, Any]]:
        return await self.collection.find_one({"_id": parse_object_id(user_id, "user ID")})

    @staticmethod
    def verify_secret(record: Dict[str, Any], plaintext: str) -> bool:
        return verify_password(plaintext, record.get("password", ""))

    async def update_secret(self, record: Dict[str, Any], new_plaintext: str) -> None:
        hashed = hash_password(new_plaintext)
        await self.collection.update_one(
            {"_id": record["_id"]},
            {"$set": {"password": hashed, "updatedAt": datetime.now(timezone.utc)}},
        )
        record["password"] = hashed
        logger.info(f"Password updated for user {record['_id']}")

    async def claim_vote(self, user_id) -> Optional[Dict[str, Any]]:
        """
        Flip ``hasVoted`` from false to true for an eligible voter.

        This is a single conditional update, so of any number of concurrent
        callers for the same user exactly one gets the document back.

        Returns:
            The updated user document, or None if the user was not an
            eligible voter who had not voted yet
        """
        return await self.collection.find_one_and_update(
            {"_id": parse_object_id(user_id, "user ID"), "role": Role.VOTER.value, "hasVoted": False},
            {"$set": {"hasVoted": True, "updatedAt": datetime.now(timezone.utc)}},
            return_document=ReturnDocument.AFTER,
        )

    async def release_vote(self, user_id) -> None:
        """Undo a claim whose vote could not be recorded."""
        await self.collection.update_one(
            {"_id": parse_object_id(user_id, "user ID"), "hasVoted": True},
            {"$set": {"hasVoted": False, "updatedAt": datetime.now(timezone.utc)}},
        )
        logger.warning(f"Vote claim released for user {user_id}")
