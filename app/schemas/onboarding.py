from pydantic import Field
from typing import Any, Dict, List, Optional
from datetime import date, datetime

from app.models.user_profile import GenderEnum, MaritalStatusEnum
from app.models.financial_data import RiskLevelEnum
from app.schemas.base import APIModel


class ProfileBase(APIModel):
    date_of_birth: Optional[date] = None
    gender: Optional[GenderEnum] = None
    occupation: Optional[str] = Field(None, max_length=200)
    company: Optional[str] = Field(None, max_length=200)
    phone: Optional[str] = Field(None, max_length=50)
    marital_status: Optional[MaritalStatusEnum] = None
    dependents: Optional[int] = Field(None, ge=0, le=50)
    education_level: Optional[str] = Field(None, max_length=100)


class ProfileUpdate(ProfileBase):
    """Partial profile edit; only fields sent by the client are written."""
    pass


class PersonalInfoSubmission(ProfileBase):
    """Profile Stage as submitted from the onboarding flow."""
    date_of_birth: date
    occupation: str = Field(..., min_length=1, max_length=200)


class Profile(ProfileBase):
    id: str
    user_id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class FinancialInfoSubmission(APIModel):
    monthly_income: Optional[float] = Field(None, ge=0)
    monthly_expenses: Optional[float] = Field(None, ge=0)
    current_savings: Optional[float] = Field(None, ge=0)
    current_debt: Optional[float] = Field(None, ge=0)
    emergency_fund_amount: Optional[float] = Field(None, ge=0)
    financial_goals: List[str] = Field(default_factory=list)
    risk_tolerance: Optional[RiskLevelEnum] = None
    investment_experience: Optional[str] = Field(None, max_length=100)
    current_investments: Optional[Dict[str, Any]] = None
    assets: Optional[Dict[str, Any]] = None
    liabilities: Optional[Dict[str, Any]] = None
    insurance: Optional[Dict[str, Any]] = None


class FinancialData(FinancialInfoSubmission):
    id: str
    user_id: str
    monthly_surplus: Optional[float] = None
    created_at: datetime


class OnboardingStatus(APIModel):
    onboarding_completed: bool
    profile_completed: bool
    financial_data_completed: bool
    has_profile: bool
    has_financial_data: bool
    onboarding_skipped: bool = False
    needs_onboarding: bool = True


class OnboardingStepUpdate(APIModel):
    completed: bool


class SkipOnboardingRequest(APIModel):
    reason: Optional[str] = Field(None, max_length=500)


class ProfileStageResult(APIModel):
    profile: Profile
    status: OnboardingStatus


class FinancialStageResult(APIModel):
    financial_data: FinancialData
    status: OnboardingStatus
