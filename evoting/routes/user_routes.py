from typing import Any, Dict

from fastapi import APIRouter, Depends

from ..accounts import change_password, login_user, register_user
from ..dependencies import get_current_user, get_token_service, get_user_store
from ..schemas import LoginRequest, PasswordChangeRequest, UserCreate, user_out
from ..security import TokenService
from ..storage import UserStore

router = APIRouter(prefix="/api/users", tags=["Users"])


@router.post("/signup")
async def signup(
    data: UserCreate,
    users: UserStore = Depends(get_user_store),
    tokens: TokenService = Depends(get_token_service),
):
    user, token = await register_user(users, tokens, data)
    return {"user": user_out(user), "token": token}


@router.post("/login")
async def login(
    credentials: LoginRequest,
    users: UserStore = Depends(get_user_store),
    tokens: TokenService = Depends(get_token_service),
):
    token = await login_user(users, tokens, credentials.nationalId, credentials.password)
    return {"token": token}


@router.get("/profile")
async def profile(user: Dict[str, Any] = Depends(get_current_user)):
    return {"user": user_out(user)}


@router.put("/profile/password")
async def profile_password(
    body: PasswordChangeRequest,
    user: Dict[str, Any] = Depends(get_current_user),
    users: UserStore = Depends(get_user_store),
):
    await change_password(users, user, body.currentPassword, body.newPassword)
    return {"message": "Password updated"}
