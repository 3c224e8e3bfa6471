# passguard/app/api/v1/endpoints/auth.py
"""
Account endpoints.

- POST /auth/register   - start registration, email a 6-digit code
- POST /auth/resend-otp - new code (60 s cooldown)
- POST /auth/verify-otp - confirm the code, create the account, log in
- POST /auth/login      - email + password → bearer token
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from passguard.app.api import deps
from passguard.app.core.errors import AuthError
from passguard.app.db.base import get_db
from passguard.app.schemas.user import (
    AuthResponse,
    LoginRequest,
    RegisterRequest,
    RegisterResponse,
    ResendOtpRequest,
    UserResponse,
    VerifyOtpRequest,
)
from passguard.app.schemas.vault import MessageResponse
from passguard.app.services import auth as auth_service
from passguard.app.services.mailer import Mailer

router = APIRouter()


def _http_error(exc: AuthError) -> HTTPException:
    return HTTPException(status_code=exc.status_code, detail=exc.message)


@router.post("/register", response_model=RegisterResponse)
async def register(
        user_in: RegisterRequest,
        db: AsyncSession = Depends(get_db),
        mailer: Mailer = Depends(deps.get_mailer),
):
    try:
        email = await auth_service.register(
            db, mailer, user_in.name, user_in.email, user_in.password
        )
    except AuthError as exc:
        raise _http_error(exc)

    return RegisterResponse(message="Verification code sent to your email", email=email)


@router.post("/resend-otp", response_model=MessageResponse)
async def resend_otp(
        request: ResendOtpRequest,
        db: AsyncSession = Depends(get_db),
        mailer: Mailer = Depends(deps.get_mailer),
):
    try:
        await auth_service.resend_otp(db, mailer, request.email)
    except AuthError as exc:
        raise _http_error(exc)

    return MessageResponse(message="New verification code sent to your email")


@router.post("/verify-otp", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def verify_otp(request: VerifyOtpRequest, db: AsyncSession = Depends(get_db)):
    try:
        user, token = await auth_service.verify_otp(db, request.email, request.otp)
    except AuthError as exc:
        raise _http_error(exc)

    return AuthResponse(
        message="Account verified successfully! Welcome to PassGuard!",
        token=token,
        user=UserResponse.model_validate(user),
    )


@router.post("/login", response_model=AuthResponse)
async def login(form_data: LoginRequest, db: AsyncSession = Depends(get_db)):
    try:
        user, token = await auth_service.login(db, form_data.email, form_data.password)
    except AuthError as exc:
        raise _http_error(exc)

    return AuthResponse(
        message="Login successful",
        token=token,
        user=UserResponse.model_validate(user),
    )
