from sqlalchemy.orm import Session
from typing import Any, Dict, List, Optional
import logging

from app.core.exceptions import NotFoundError
from app.models.financial_data import FinancialData

logger = logging.getLogger(__name__)


class FinancialDataService:
    """Financial Stage storage: append-only snapshots per user."""

    def __init__(self, db: Session):
        self.db = db

    def get_latest(self, user_id: str) -> Optional[FinancialData]:
        return (
            self.db.query(FinancialData)
            .filter(FinancialData.user_id == user_id)
            .order_by(FinancialData.created_at.desc())
            .first()
        )

    def get_history(self, user_id: str, limit: int = 50) -> List[FinancialData]:
        return (
            self.db.query(FinancialData)
            .filter(FinancialData.user_id == user_id)
            .order_by(FinancialData.created_at.desc())
            .limit(limit)
            .all()
        )

    def count(self, user_id: str) -> int:
        return self.db.query(FinancialData.id).filter(FinancialData.user_id == user_id).count()

    def create_snapshot(self, user_id: str, data: Dict[str, Any]) -> FinancialData:
        """Insert a new snapshot. The caller commits."""
        snapshot = FinancialData(user_id=user_id, **data)
        if snapshot.financial_goals is None:
            snapshot.financial_goals = []
        self.db.add(snapshot)
        self.db.flush()
        logger.info(f"Stored financial snapshot {snapshot.id} for user {user_id}")
        return snapshot

    def delete_all(self, user_id: str) -> int:
        """Delete every snapshot of the user; returns rows deleted. The caller commits."""
        return (
            self.db.query(FinancialData)
            .filter(FinancialData.user_id == user_id)
            .delete(synchronize_session=False)
        )

    def require_latest(self, user_id: str) -> FinancialData:
        snapshot = self.get_latest(user_id)
        if snapshot is None:
            raise NotFoundError("No financial data submitted yet")
        return snapshot

    def get_summary(self, user_id: str) -> Dict[str, Any]:
        """Net income, net worth and goal count from the latest snapshot"""
        snapshot = self.require_latest(user_id)
        figures = _amounts(snapshot)
        net_income = snapshot.monthly_surplus
        if net_income is None:
            net_income = figures["monthly_income"] - figures["monthly_expenses"]
        goals = list(snapshot.financial_goals or [])

        return {
            "monthly_income": figures["monthly_income"],
            "monthly_expenses": figures["monthly_expenses"],
            "net_income": net_income,
            "current_savings": figures["current_savings"],
            "current_debt": figures["current_debt"],
            "net_worth": figures["current_savings"] - figures["current_debt"],
            "goal_count": len(goals),
            "insights": [
                f"Your monthly net income is Rp {net_income:,.0f}",
                "You have positive cash flow" if net_income > 0 else "Consider reducing expenses",
                f"You have {len(goals)} financial goals" if goals else "Consider setting financial goals",
            ],
            "as_of": snapshot.created_at,
        }

    def get_budget_analysis(self, user_id: str) -> Dict[str, Any]:
        """Savings rate, emergency-fund coverage and a 50/30/20 baseline"""
        snapshot = self.require_latest(user_id)
        figures = _amounts(snapshot)
        income = figures["monthly_income"]
        expenses = figures["monthly_expenses"]
        emergency_fund = figures["emergency_fund_amount"]

        monthly_savings = income - expenses
        savings_rate = monthly_savings / income * 100 if income > 0 else 0.0
        fund_months = emergency_fund / expenses if expenses > 0 else 0.0

        return {
            "monthly_income": income,
            "monthly_expenses": expenses,
            "monthly_savings": monthly_savings,
            "savings_rate": round(savings_rate, 2),
            "current_savings": figures["current_savings"],
            "emergency_fund": emergency_fund,
            "emergency_fund_months": round(fund_months, 1),
            "health_score": budget_health_score(savings_rate, fund_months, income, expenses),
            "recommended": {"needs": income * 0.5, "wants": income * 0.3, "savings": income * 0.2},
            "status": budget_status(savings_rate, fund_months),
            "strengths": budget_strengths(savings_rate, fund_months, income, expenses),
            "improvements": budget_improvements(savings_rate, fund_months, income, expenses),
        }


def _amounts(snapshot: FinancialData) -> Dict[str, float]:
    """Snapshot amounts as floats; missing values count as zero."""
    context = snapshot.to_context()
    keys = ("monthly_income", "monthly_expenses", "current_savings", "current_debt", "emergency_fund_amount")
    return {key: context[key] or 0.0 for key in keys}


def budget_health_score(savings_rate: float, fund_months: float, income: float, expenses: float) -> int:
    score = 0
    if savings_rate >= 20:
        score += 25
    elif savings_rate >= 10:
        score += 15
    elif savings_rate >= 5:
        score += 10

    if fund_months >= 6:
        score += 25
    elif fund_months >= 3:
        score += 15
    elif fund_months >= 1:
        score += 10

    if expenses <= income:
        score += 25
    if income > 0:
        score += 25
    return min(score, 100)


def budget_status(savings_rate: float, fund_months: float) -> str:
    if savings_rate >= 20 and fund_months >= 6:
        return "Excellent"
    if savings_rate >= 15 and fund_months >= 3:
        return "Good"
    if savings_rate >= 10 and fund_months >= 1:
        return "Fair"
    return "Needs Improvement"


def budget_strengths(savings_rate: float, fund_months: float, income: float, expenses: float) -> List[str]:
    strengths = []
    if savings_rate >= 20:
        strengths.append("Excellent savings rate (20%+)")
    elif savings_rate >= 10:
        strengths.append("Good savings rate (10%+)")

    if fund_months >= 6:
        strengths.append("Strong emergency fund (6+ months)")
    elif fund_months >= 3:
        strengths.append("Good emergency fund (3+ months)")

    if expenses <= income:
        strengths.append("Living within means")
    if income > 0:
        strengths.append("Has income source")
    return strengths or ["Building financial foundation"]


def budget_improvements(savings_rate: float, fund_months: float, income: float, expenses: float) -> List[str]:
    improvements = []
    if expenses > income:
        improvements.append("Reduce expenses to match income")
    if savings_rate < 10:
        improvements.append("Increase savings rate to at least 10%")
    if fund_months < 3:
        improvements.append("Build emergency fund (3-6 months expenses)")
    if savings_rate < 20:
        improvements.append("Aim for 20% savings rate for optimal financial health")
    return improvements
