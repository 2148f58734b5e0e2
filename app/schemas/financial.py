from typing import List, Optional
from datetime import datetime

from app.schemas.base import APIModel


class FinancialSummary(APIModel):
    monthly_income: float
    monthly_expenses: float
    net_income: float
    current_savings: float
    current_debt: float
    net_worth: float
    goal_count: int
    insights: List[str]
    as_of: Optional[datetime] = None


class BudgetAllocation(APIModel):
    """50/30/20 split of monthly income"""
    needs: float
    wants: float
    savings: float


class BudgetAnalysis(APIModel):
    monthly_income: float
    monthly_expenses: float
    monthly_savings: float
    savings_rate: float
    current_savings: float
    emergency_fund: float
    emergency_fund_months: float
    health_score: int
    recommended: BudgetAllocation
    status: str
    strengths: List[str]
    improvements: List[str]
