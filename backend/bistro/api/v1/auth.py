"""Authentication endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from bistro.api import deps
from bistro.core.config import get_settings
from bistro.models.user import UserRole
from bistro.schemas.auth import RegistrationRequest, RegistrationResponse, Token
from bistro.schemas.user import UserCreate, UserRead
from bistro.services import user_service
from bistro.services.auth_service import authenticate_user, create_access_token_for_user

router = APIRouter()

_settings = get_settings()


@router.post(
    "/token",
    response_model=Token,
    summary="Obtain access token",
    dependencies=[deps.rate_limited(_settings.rate_limit_login, fallback=(10, 60))],
)
async def login_for_access_token(
    form_data: Annotated[OAuth2PasswordRequestForm, Depends()],
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> Token:
    """Validate credentials and issue a bearer token."""
    user = await authenticate_user(
        session, email=form_data.username, password=form_data.password
    )
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return Token(access_token=create_access_token_for_user(user))


@router.post(
    "/register",
    response_model=RegistrationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a diner account",
    dependencies=[deps.rate_limited(_settings.rate_limit_default)],
)
async def register(
    payload: RegistrationRequest,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> RegistrationResponse:
    if await user_service.get_user_by_email(session, email=payload.email) is not None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Email already registered"
        )
    try:
        user = await user_service.create_user(
            session,
            UserCreate(
                email=payload.email,
                password=payload.password,
                name=payload.name,
                phone=payload.phone,
                role=UserRole.CUSTOMER,
            ),
        )
    except IntegrityError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Email already registered"
        ) from exc
    return RegistrationResponse(
        token=Token(access_token=create_access_token_for_user(user)),
        user=UserRead.model_validate(user),
    )
