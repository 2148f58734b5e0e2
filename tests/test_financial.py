import pytest
from fastapi import status

from app.core.exceptions import NotFoundError
from app.services.financial_service import FinancialDataService

from conftest import auth_headers, create_user

SNAPSHOT = {
    "monthly_income": 10000000,
    "monthly_expenses": 7000000,
    "current_savings": 20000000,
    "current_debt": 5000000,
    "emergency_fund_amount": 21000000,
    "financial_goals": ["Emergency fund", "Buy a house"],
}


def store(db_session, user, **data):
    service = FinancialDataService(db_session)
    service.create_snapshot(user.id, data)
    db_session.commit()
    return service


def test_summary_uses_latest_snapshot(db_session):
    user = create_user(db_session)
    store(db_session, user, monthly_income=1000000, monthly_expenses=900000)
    service = store(db_session, user, **SNAPSHOT)

    summary = service.get_summary(user.id)

    assert summary["net_income"] == 3000000
    assert summary["net_worth"] == 15000000
    assert summary["goal_count"] == 2
    assert summary["insights"] == [
        "Your monthly net income is Rp 3,000,000",
        "You have positive cash flow",
        "You have 2 financial goals",
    ]


def test_summary_treats_missing_amounts_as_zero(db_session):
    user = create_user(db_session)
    service = store(db_session, user, monthly_income=5000000)

    summary = service.get_summary(user.id)

    assert summary["net_income"] == 5000000
    assert summary["net_worth"] == 0
    assert summary["insights"][2] == "Consider setting financial goals"


def test_budget_analysis(db_session):
    user = create_user(db_session)
    service = store(db_session, user, **SNAPSHOT)

    budget = service.get_budget_analysis(user.id)

    assert budget["monthly_savings"] == 3000000
    assert budget["savings_rate"] == 30.0
    assert budget["emergency_fund_months"] == 3.0
    assert budget["health_score"] == 90
    assert budget["status"] == "Good"
    assert budget["recommended"] == pytest.approx({"needs": 5000000, "wants": 3000000, "savings": 2000000})
    assert budget["strengths"] == [
        "Excellent savings rate (20%+)",
        "Good emergency fund (3+ months)",
        "Living within means",
        "Has income source",
    ]
    assert budget["improvements"] == []


def test_budget_analysis_for_a_deficit(db_session):
    user = create_user(db_session)
    service = store(db_session, user, monthly_income=5000000, monthly_expenses=6000000)

    budget = service.get_budget_analysis(user.id)

    assert budget["savings_rate"] == -20.0
    assert budget["emergency_fund_months"] == 0
    assert budget["health_score"] == 25
    assert budget["status"] == "Needs Improvement"
    assert budget["strengths"] == ["Has income source"]
    assert budget["improvements"][0] == "Reduce expenses to match income"
    assert len(budget["improvements"]) == 4


def test_budget_analysis_without_income(db_session):
    user = create_user(db_session)
    service = store(db_session, user, financial_goals=["Start saving"])

    budget = service.get_budget_analysis(user.id)

    assert budget["savings_rate"] == 0
    assert budget["health_score"] == 25
    assert budget["strengths"] == ["Living within means"]


def test_no_snapshot_is_not_found(db_session):
    user = create_user(db_session)
    service = FinancialDataService(db_session)

    with pytest.raises(NotFoundError):
        service.get_summary(user.id)
    with pytest.raises(NotFoundError):
        service.get_budget_analysis(user.id)


async def test_summary_and_budget_endpoints(client, user):
    headers = auth_headers(user)

    r = await client.get("/api/v1/financial/summary", headers=headers)
    assert r.status_code == status.HTTP_404_NOT_FOUND
    r = await client.get("/api/v1/financial/budget", headers=headers)
    assert r.status_code == status.HTTP_404_NOT_FOUND

    await client.post(
        "/api/v1/financial/data",
        json={"monthlyIncome": 10000000, "monthlyExpenses": 7000000, "emergencyFundAmount": 21000000},
        headers=headers,
    )

    r = await client.get("/api/v1/financial/summary", headers=headers)
    assert r.status_code == 200
    assert r.json()["netIncome"] == 3000000
    assert r.json()["goalCount"] == 0

    r = await client.get("/api/v1/financial/budget", headers=headers)
    assert r.status_code == 200
    assert r.json()["savingsRate"] == 30.0
    assert r.json()["emergencyFundMonths"] == 3.0
    assert r.json()["recommended"]["needs"] == 5000000


async def test_summary_requires_auth(client):
    r = await client.get("/api/v1/financial/summary")
    assert r.status_code == status.HTTP_401_UNAUTHORIZED
