"""
User account endpoints. Passwords are hashed here before they reach the store,
and secrets never leave in a response.
"""

import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query

from ..core.registry import get_user_store
from ..core.users import UserStore
from ..util.logging import logger
from ..util.passwords import hash_password, verify_password
from .responses import not_found, unauthorized
from .schemas import (
    LoginRequest,
    PasswordResetConfirmRequest,
    PasswordResetRequest,
    UserCreateRequest,
    UserUpdateRequest,
)

router = APIRouter()

HIDDEN_FIELDS = ("password", "resetToken", "verificationToken")
RESET_TOKEN_TTL = timedelta(hours=1)


def public_user(user: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in user.items() if k not in HIDDEN_FIELDS}


@router.post("", status_code=201)
async def create_user(request: UserCreateRequest, store: UserStore = Depends(get_user_store)):
    data = request.model_dump(exclude_none=True)
    data["password"] = hash_password(request.password)
    data["verificationToken"] = secrets.token_hex(16)
    user = await store.create(data)
    return public_user(user)


@router.get("")
async def list_users(
    role: Optional[str] = None,
    q: Optional[str] = None,
    store: UserStore = Depends(get_user_store),
):
    """List users, optionally narrowed by role or a username/email query."""
    if q:
        users = await store.search_users(q)
    elif role:
        users = await store.find_users_by_role(role)
    else:
        users = await store.get_all()
    if role and q:
        users = [u for u in users if u.get("role") == role]
    return [public_user(u) for u in users]


@router.get("/count")
async def count_users(store: UserStore = Depends(get_user_store)):
    return {"count": await store.count_users()}


@router.get("/by-email")
async def get_user_by_email(email: str = Query(...), store: UserStore = Depends(get_user_store)):
    user = await store.get_user_by_email(email)
    if user is None:
        return not_found("User not found")
    return public_user(user)


@router.post("/login")
async def login(request: LoginRequest, store: UserStore = Depends(get_user_store)):
    """Check credentials and stamp lastLogin. Token issuing is left to the caller."""
    user = await store.get_user_by_email(request.email)
    if user is None or not verify_password(request.password, user.get("password")):
        return unauthorized("Invalid email or password")
    user = await store.record_login(user["id"])
    if user is None:
        return not_found("User not found")
    return public_user(user)


@router.post("/verify/{token}")
async def verify_user(token: str, store: UserStore = Depends(get_user_store)):
    user = await store.verify_user(token)
    if user is None:
        return not_found("Invalid verification token")
    return public_user(user)


@router.post("/password-reset")
async def request_password_reset(request: PasswordResetRequest, store: UserStore = Depends(get_user_store)):
    # Same answer whether or not the address is known
    token = secrets.token_hex(32)
    expiry = datetime.now(timezone.utc) + RESET_TOKEN_TTL
    user = await store.set_password_reset_token(request.email, token, expiry)
    if user is None:
        logger.info("Password reset requested for unknown email")
    return {"message": "If the email is registered, a reset link has been sent"}


@router.post("/password-reset/{token}")
async def reset_password(
    token: str,
    request: PasswordResetConfirmRequest,
    store: UserStore = Depends(get_user_store),
):
    user = await store.reset_password(token, hash_password(request.password))
    if user is None:
        return not_found("Invalid or expired reset token")
    return public_user(user)


@router.get("/{user_id}")
async def get_user(user_id: str, store: UserStore = Depends(get_user_store)):
    user = await store.get_by_id(user_id)
    if user is None:
        return not_found("User not found")
    return public_user(user)


@router.patch("/{user_id}")
async def update_user(user_id: str, request: UserUpdateRequest, store: UserStore = Depends(get_user_store)):
    user = await store.update(user_id, request.model_dump(exclude_unset=True))
    if user is None:
        return not_found("User not found")
    return public_user(user)


@router.delete("/{user_id}")
async def delete_user(user_id: str, store: UserStore = Depends(get_user_store)):
    if not await store.delete(user_id):
        return not_found("User not found")
    return {"message": "User deleted"}
