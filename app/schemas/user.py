from pydantic import EmailStr, Field, validator
from typing import Optional
from datetime import datetime

from app.models.user import UserRoleEnum
from app.schemas.base import APIModel


class UserBase(APIModel):
    email: EmailStr


class UserCreate(UserBase):
    password: str = Field(..., min_length=6)
    username: Optional[str] = Field(None, min_length=3, max_length=50)
    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)


class UserLogin(APIModel):
    email: EmailStr
    password: str = Field(..., min_length=6)


class UserUpdate(APIModel):
    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)


class User(UserBase):
    id: str
    username: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role: UserRoleEnum
    is_active: bool
    is_verified: bool
    onboarding_completed: bool
    profile_completed: bool
    financial_data_completed: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class Token(APIModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int


class LoginResponse(Token):
    user: User


class RegisterResponse(APIModel):
    message: str
    user: User
    requires_verification: bool


class VerifyEmailResponse(LoginResponse):
    message: str


class RefreshTokenRequest(APIModel):
    refresh_token: str


class ResendVerificationRequest(APIModel):
    email: EmailStr


class PasswordResetRequest(APIModel):
    new_password: str = Field(..., min_length=6)
    confirm_new_password: str

    @validator('confirm_new_password')
    def passwords_match(cls, v, values, **kwargs):
        if 'new_password' in values and v != values['new_password']:
            raise ValueError('passwords do not match')
        return v
