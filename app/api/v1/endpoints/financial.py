from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List

from app.core.database import get_db
from app.core.deps import get_current_active_user
from app.models.user import User
from app.schemas.financial import BudgetAnalysis, FinancialSummary
from app.schemas.onboarding import FinancialData, FinancialInfoSubmission
from app.services.financial_service import FinancialDataService
from app.services.onboarding_service import OnboardingService

router = APIRouter()


@router.get("/data", response_model=FinancialData)
async def get_latest_financial_data(
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    """Most recent financial snapshot"""
    return FinancialDataService(db).require_latest(current_user.id)


@router.get("/data/history", response_model=List[FinancialData])
async def get_financial_history(
    limit: int = Query(50, ge=1, le=200),
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    """All snapshots, newest first"""
    return FinancialDataService(db).get_history(current_user.id, limit=limit)


@router.post("/data", response_model=FinancialData, status_code=status.HTTP_201_CREATED)
async def submit_financial_data(
    submission: FinancialInfoSubmission,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    return OnboardingService(db).submit_financial_stage(current_user.id, submission.model_dump())


@router.get("/summary", response_model=FinancialSummary)
async def get_financial_summary(
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    """Net income, net worth and goals from the latest snapshot"""
    return FinancialDataService(db).get_summary(current_user.id)


@router.get("/budget", response_model=BudgetAnalysis)
async def get_budget_analysis(
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    return FinancialDataService(db).get_budget_analysis(current_user.id)
