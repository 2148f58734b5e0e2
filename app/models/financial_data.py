from sqlalchemy import Column, String, DateTime, ForeignKey, Numeric, JSON, Enum as SQLEnum
from sqlalchemy.orm import relationship
from datetime import datetime, timezone
import enum

from app.core.database import Base
from app.models.user import generate_id


class RiskLevelEnum(enum.Enum):
    CONSERVATIVE = "CONSERVATIVE"
    LOW = "LOW"
    MODERATE = "MODERATE"
    HIGH = "HIGH"
    AGGRESSIVE = "AGGRESSIVE"


class FinancialData(Base):
    """One Financial Stage snapshot. A user accumulates one row per submission."""
    __tablename__ = "financial_data"

    id = Column(String(36), primary_key=True, default=generate_id)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    monthly_income = Column(Numeric(16, 2), nullable=True)
    monthly_expenses = Column(Numeric(16, 2), nullable=True)
    current_savings = Column(Numeric(16, 2), nullable=True)
    current_debt = Column(Numeric(16, 2), nullable=True)
    emergency_fund_amount = Column(Numeric(16, 2), nullable=True)
    financial_goals = Column(JSON, nullable=False, default=list)
    risk_tolerance = Column(SQLEnum(RiskLevelEnum, name="risklevel"), nullable=True)
    investment_experience = Column(String, nullable=True)

    # Free-form breakdowns, e.g. {"stocks": 20000000, "deposits": 25000000}
    current_investments = Column(JSON, nullable=True)
    assets = Column(JSON, nullable=True)
    liabilities = Column(JSON, nullable=True)
    insurance = Column(JSON, nullable=True)

    # Python-side timestamp keeps sub-second ordering between snapshots
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False)

    user = relationship("User", back_populates="financial_data")

    @property
    def monthly_surplus(self):
        if self.monthly_income is None or self.monthly_expenses is None:
            return None
        return float(self.monthly_income) - float(self.monthly_expenses)

    def to_context(self) -> dict:
        """Plain-number view used when building LLM prompts"""
        def _num(value):
            return float(value) if value is not None else None

        return {
            "monthly_income": _num(self.monthly_income),
            "monthly_expenses": _num(self.monthly_expenses),
            "current_savings": _num(self.current_savings),
            "current_debt": _num(self.current_debt),
            "emergency_fund_amount": _num(self.emergency_fund_amount),
            "financial_goals": list(self.financial_goals or []),
            "risk_tolerance": self.risk_tolerance.value if self.risk_tolerance else None,
            "investment_experience": self.investment_experience,
        }

    def __repr__(self):
        return f"<FinancialData {self.id} user={self.user_id}>"
