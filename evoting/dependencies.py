# evoting/dependencies.py
# Auth gate: resolve the bearer token to a user before protected handlers run
import logging
from typing import Any, Dict, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .database import MongoConnector
from .errors import InvalidTokenError, ValidationError
from .schemas import Role
from .security import TokenService
from .storage import CandidateLedger, UserStore

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def get_connector(request: Request) -> MongoConnector:
    return request.app.state.mongo


def get_token_service(request: Request) -> TokenService:
    return request.app.state.tokens


def get_user_store(connector: MongoConnector = Depends(get_connector)) -> UserStore:
    return UserStore(connector.users_collection)


def get_candidate_ledger(connector: MongoConnector = Depends(get_connector)) -> CandidateLedger:
    return CandidateLedger(connector.candidates_collection)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    tokens: TokenService = Depends(get_token_service),
    users: UserStore = Depends(get_user_store),
) -> Dict[str, Any]:
    if credentials is None:
        raise _unauthorized("Token not found")
    try:
        user_id = tokens.verify(credentials.credentials)
        user = await users.find_by_id(user_id)
    except (InvalidTokenError, ValidationError) as e:
        logger.info(f"Rejected token: {e}")
        raise _unauthorized("Invalid token")
    if user is None:
        raise _unauthorized("Invalid token")
    try:
        Role(user.get("role"))
    except ValueError:
        logger.error(f"User {user['_id']} has unknown role {user.get('role')!r}")
        raise _unauthorized("Invalid token")
    return user


def require_roles(*roles: Role):
    """Dependency factory: authenticated user whose role is one of ``roles``."""
    allowed = frozenset(roles)

    async def checker(user: Dict[str, Any] = Depends(get_current_user)) -> Dict[str, Any]:
        if Role(user["role"]) not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Requires role: {', '.join(sorted(r.value for r in allowed))}",
            )
        return user

    return checker
