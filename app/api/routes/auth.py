"""
Authentication routes.

Login returns the tokens in the body and also sets the access token as an
HTTP-only cookie, so browser clients need not store it themselves.
"""
from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user
from app.core.config import settings
from app.core.database import get_db
from app.core.rate_limit import limiter, RATE_AUTH
from app.models.user import User
from app.schemas.auth import (
    LoginRequest,
    RegisterRequest,
    TokenResponse,
    RefreshTokenRequest,
)
from app.schemas.base import MessageResponse
from app.schemas.user import UserResponse
from app.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])

auth_service = AuthService()


def _set_auth_cookie(response: Response, tokens: TokenResponse) -> None:
    response.set_cookie(
        key=settings.auth_cookie_name,
        value=tokens.access_token,
        max_age=tokens.expires_in,
        httponly=True,
        secure=settings.auth_cookie_secure,
        samesite="lax",
        path="/",
    )


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(RATE_AUTH)
async def register(
    request: Request,
    response: Response,
    data: RegisterRequest,
    db: AsyncSession = Depends(get_db),
):
    """Register a new user and sign them in."""
    tokens = await auth_service.register(
        db,
        email=data.email,
        password=data.password,
        full_name=data.full_name,
    )
    _set_auth_cookie(response, tokens)
    return tokens


@router.post("/login", response_model=TokenResponse)
@limiter.limit(RATE_AUTH)
async def login(
    request: Request,
    response: Response,
    data: LoginRequest,
    db: AsyncSession = Depends(get_db),
):
    """
    Login with email and password.

    Five consecutive failures lock the account for fifteen minutes.
    """
    tokens = await auth_service.login(db, email=data.email, password=data.password)
    _set_auth_cookie(response, tokens)
    return tokens


@router.post("/refresh", response_model=TokenResponse)
async def refresh_token(
    response: Response,
    data: RefreshTokenRequest,
    db: AsyncSession = Depends(get_db),
):
    tokens = await auth_service.refresh(db, refresh_token=data.refresh_token)
    _set_auth_cookie(response, tokens)
    return tokens


@router.post("/logout", response_model=MessageResponse)
async def logout(response: Response):
    """Clear the session cookie. Bearer clients simply discard their tokens."""
    response.delete_cookie(settings.auth_cookie_name, path="/")
    return MessageResponse(message="Logged out successfully")


@router.get("/me", response_model=UserResponse)
async def me(current_user: User = Depends(get_current_user)):
    return current_user
