"""
Account endpoints.

Flow:
  1) POST /signup          -> stores email + bcrypt hash
  2) POST /login           -> verifies password, returns JWT access token
  3) PUT  /update-profile  -> Bearer token for the same email required
"""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db
from domain.errors import PermissionDeniedError
from domain.responses import success_response
from middleware.auth import require_authenticated_email
from middleware.rate_limit import rate_limit
from models import CredentialsRequest, LoginResponse, UpdateProfileRequest
from services import auth_service

logger = logging.getLogger(__name__)
router = APIRouter(tags=["auth"])


@router.post("/signup", status_code=status.HTTP_201_CREATED)
async def signup(
    request: CredentialsRequest,
    db: AsyncSession = Depends(get_db),
    _rate=Depends(rate_limit(max_requests=10, window_seconds=60)),
):
    user = await auth_service.signup(db, request.email, request.password)
    return success_response(
        {"email": user.email},
        meta={"message": "User registered successfully"},
    )


@router.post("/login", response_model=LoginResponse)
async def login(
    request: CredentialsRequest,
    db: AsyncSession = Depends(get_db),
    _rate=Depends(rate_limit(max_requests=20, window_seconds=60)),
):
    result = await auth_service.login(db, request.email, request.password)
    return LoginResponse(**result)


@router.put("/update-profile")
async def update_profile(
    request: UpdateProfileRequest,
    token_email: str = Depends(require_authenticated_email),
    db: AsyncSession = Depends(get_db),
):
    if auth_service.normalize_email(request.email) != token_email:
        raise PermissionDeniedError("Token does not belong to this account.")

    user = await auth_service.update_profile(
        db,
        request.email,
        password=request.password,
        profile_pic=request.profile_pic,
    )
    return success_response(
        {"email": user.email, "profilePic": user.profile_pic},
        meta={"message": "Profile updated successfully"},
    )
