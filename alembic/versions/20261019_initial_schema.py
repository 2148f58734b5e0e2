"""initial schema: users, onboarding stages, chat, consultants

Revision ID: 20261019_initial_schema
Revises:
Create Date: 2026-10-19 00:00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "20261019_initial_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


DEFAULT_NOW = sa.text("CURRENT_TIMESTAMP")

userrole = sa.Enum("CLIENT", "CONSULTANT", "ADMIN", name="userrole")
gender = sa.Enum("MALE", "FEMALE", "OTHER", name="gender")
maritalstatus = sa.Enum("SINGLE", "MARRIED", "DIVORCED", "WIDOWED", name="maritalstatus")
risklevel = sa.Enum("CONSERVATIVE", "LOW", "MODERATE", "HIGH", "AGGRESSIVE", name="risklevel")
chattype = sa.Enum("FINANCIAL_PLANNING", "INVESTMENT_ADVICE", "BUDGET_HELP", "GENERAL", name="chattype")
messagerole = sa.Enum("USER", "ASSISTANT", "SYSTEM", name="messagerole")
bookingstatus = sa.Enum("PENDING", "CONFIRMED", "CANCELLED", "COMPLETED", "NO_SHOW", name="bookingstatus")


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("username", sa.String(), nullable=False),
        sa.Column("password_hash", sa.String(), nullable=False),
        sa.Column("first_name", sa.String(), nullable=True),
        sa.Column("last_name", sa.String(), nullable=True),
        sa.Column("role", userrole, nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("is_verified", sa.Boolean(), nullable=False),
        sa.Column("email_verification_token", sa.String(), nullable=True),
        sa.Column("email_verification_expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("verification_last_sent_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("onboarding_completed", sa.Boolean(), nullable=False),
        sa.Column("profile_completed", sa.Boolean(), nullable=False),
        sa.Column("financial_data_completed", sa.Boolean(), nullable=False),
        sa.Column("onboarding_skipped_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=DEFAULT_NOW),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_username", "users", ["username"], unique=True)
    op.create_index("ix_users_email_verification_token", "users", ["email_verification_token"])

    op.create_table(
        "user_profiles",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True),
        sa.Column("date_of_birth", sa.Date(), nullable=True),
        sa.Column("gender", gender, nullable=True),
        sa.Column("occupation", sa.String(), nullable=True),
        sa.Column("company", sa.String(), nullable=True),
        sa.Column("phone", sa.String(), nullable=True),
        sa.Column("marital_status", maritalstatus, nullable=True),
        sa.Column("dependents", sa.Integer(), nullable=True),
        sa.Column("education_level", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=DEFAULT_NOW),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )

    op.create_table(
        "financial_data",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("monthly_income", sa.Numeric(16, 2), nullable=True),
        sa.Column("monthly_expenses", sa.Numeric(16, 2), nullable=True),
        sa.Column("current_savings", sa.Numeric(16, 2), nullable=True),
        sa.Column("current_debt", sa.Numeric(16, 2), nullable=True),
        sa.Column("emergency_fund_amount", sa.Numeric(16, 2), nullable=True),
        sa.Column("financial_goals", sa.JSON(), nullable=False),
        sa.Column("risk_tolerance", risklevel, nullable=True),
        sa.Column("investment_experience", sa.String(), nullable=True),
        sa.Column("current_investments", sa.JSON(), nullable=True),
        sa.Column("assets", sa.JSON(), nullable=True),
        sa.Column("liabilities", sa.JSON(), nullable=True),
        sa.Column("insurance", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_financial_data_user_id", "financial_data", ["user_id"])

    op.create_table(
        "chat_sessions",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("type", chattype, nullable=False),
        sa.Column("metadata", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=DEFAULT_NOW),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=DEFAULT_NOW),
    )
    op.create_index("ix_chat_sessions_user_id", "chat_sessions", ["user_id"])

    op.create_table(
        "chat_messages",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("session_id", sa.String(36), sa.ForeignKey("chat_sessions.id", ondelete="CASCADE"), nullable=False),
        sa.Column("role", messagerole, nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("metadata", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_chat_messages_session_id", "chat_messages", ["session_id"])

    op.create_table(
        "consultants",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("specialization", sa.String(), nullable=False),
        sa.Column("experience_years", sa.Integer(), nullable=False),
        sa.Column("certifications", sa.JSON(), nullable=False),
        sa.Column("hourly_rate", sa.Numeric(14, 2), nullable=False),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("location", sa.String(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=DEFAULT_NOW),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )

    op.create_table(
        "bookings",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("consultant_id", sa.String(36), sa.ForeignKey("consultants.id"), nullable=False),
        sa.Column("scheduled_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("service", sa.String(), nullable=False),
        sa.Column("duration", sa.Integer(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("price", sa.Numeric(14, 2), nullable=False),
        sa.Column("status", bookingstatus, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=DEFAULT_NOW),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_bookings_user_id", "bookings", ["user_id"])
    op.create_index("ix_bookings_consultant_id", "bookings", ["consultant_id"])


def downgrade() -> None:
    op.drop_table("bookings")
    op.drop_table("consultants")
    op.drop_table("chat_messages")
    op.drop_table("chat_sessions")
    op.drop_table("financial_data")
    op.drop_table("user_profiles")
    op.drop_table("users")

    bind = op.get_bind()
    for enum_type in (bookingstatus, messagerole, chattype, risklevel, maritalstatus, gender, userrole):
        enum_type.drop(bind, checkfirst=True)
