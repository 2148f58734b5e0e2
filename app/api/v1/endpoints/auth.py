from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import get_db
from app.core.deps import get_current_user
from app.models.user import User
from app.schemas.base import MessageResponse
from app.schemas.user import (
    LoginResponse,
    RefreshTokenRequest,
    RegisterResponse,
    ResendVerificationRequest,
    Token,
    UserCreate,
    UserLogin,
    VerifyEmailResponse,
)
from app.services.user_service import UserService
from app.utils.rate_limiter import allow_for_email

router = APIRouter()

RESEND_NEUTRAL_MESSAGE = "If your account exists and isn't verified, a new verification link has been sent."


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
async def register(user_create: UserCreate, db: Session = Depends(get_db)):
    """Register a new user and email a verification link"""
    user = UserService(db).create_user(user_create)

    requires_verification = settings.REQUIRE_EMAIL_VERIFICATION
    message = (
        "Registration successful. Please check your email to verify your account."
        if requires_verification
        else "Registration successful."
    )
    return {"message": message, "user": user, "requires_verification": requires_verification}


@router.post("/login", response_model=LoginResponse)
async def login(user_login: UserLogin, db: Session = Depends(get_db)):
    """Login user and return access and refresh tokens"""
    user_service = UserService(db)
    user = user_service.authenticate_user(user_login.email, user_login.password)
    return {**user_service.issue_tokens(user), "user": user}


@router.post("/refresh", response_model=Token)
async def refresh_token(payload: RefreshTokenRequest, db: Session = Depends(get_db)):
    """Exchange a refresh token for a new token pair"""
    return UserService(db).refresh_tokens(payload.refresh_token)


@router.post("/logout", response_model=MessageResponse)
async def logout(current_user: User = Depends(get_current_user)):
    """Tokens are stateless; the client discards them"""
    return {"message": "Logged out successfully"}


@router.get("/verify-email", response_model=VerifyEmailResponse)
async def verify_email(token: str = "", db: Session = Depends(get_db)):
    """Confirm the email address and sign the user in"""
    user_service = UserService(db)
    user = user_service.verify_email(token)
    return {**user_service.issue_tokens(user), "user": user, "message": "Email verified successfully"}


@router.post("/resend-verification", response_model=MessageResponse)
async def resend_verification(payload: ResendVerificationRequest, db: Session = Depends(get_db)):
    # Per-email rate limit
    if not allow_for_email("resend-verification", payload.email, settings.VERIFICATION_RESEND_MAX_PER_MINUTE, 60):
        raise HTTPException(status_code=status.HTTP_429_TOO_MANY_REQUESTS, detail="Too many requests, slow down.")

    # Same answer whether or not the account exists
    UserService(db).resend_verification(payload.email)
    return {"message": RESEND_NEUTRAL_MESSAGE}
