# evoting/schemas.py
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from .config import MIN_CANDIDATE_AGE, MIN_VOTER_AGE


class Role(str, Enum):
    VOTER = "voter"
    ADMIN = "admin"


# --- User Schemas ---
class UserBase(BaseModel):
    name: str = Field(..., min_length=1)
    age: int = Field(..., ge=MIN_VOTER_AGE)
    email: EmailStr
    mobile: str = Field(..., min_length=1)
    address: str = Field(..., min_length=1)
    nationalId: str
    role: Role = Role.VOTER


class UserCreate(UserBase):
    password: str = Field(..., min_length=6)


class UserOut(UserBase):
    id: str
    hasVoted: bool = False
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None


class LoginRequest(BaseModel):
    # presence is checked by the login workflow so both fields report together
    nationalId: Optional[str] = None
    password: Optional[str] = None


class PasswordChangeRequest(BaseModel):
    currentPassword: Optional[str] = None
    newPassword: Optional[str] = None


# --- Candidate Schemas ---
class CandidateCreate(BaseModel):
    name: str = Field(..., min_length=1)
    party: str = Field(..., min_length=1)
    age: int = Field(..., ge=MIN_CANDIDATE_AGE)


class CandidateUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    party: Optional[str] = Field(None, min_length=1)
    age: Optional[int] = Field(None, ge=MIN_CANDIDATE_AGE)


class CandidateOut(CandidateCreate):
    id: str
    voteCount: int = 0


class TallyEntry(BaseModel):
    name: str
    party: str
    voteCount: int


def user_out(doc: dict) -> UserOut:
    """Serialize a stored user document, dropping the password hash."""
    data = {k: v for k, v in doc.items() if k not in ("_id", "password")}
    return UserOut(id=str(doc["_id"]), **data)


def candidate_out(doc: dict) -> CandidateOut:
    return CandidateOut(
        id=str(doc["_id"]),
        name=doc["name"],
        party=doc["party"],
        age=doc["age"],
        voteCount=doc.get("voteCount", 0),
    )
