from fastapi import status
from sqlalchemy.orm import sessionmaker

from app.core.first_admin import create_first_admin
from app.core.security import verify_password
from app.models.financial_data import FinancialData
from app.models.user import User, UserRoleEnum
from app.scripts import reset_onboarding, reset_password

from conftest import TestingSessionLocal, auth_headers, create_user

PROFILE_PAYLOAD = {"dateOfBirth": "1990-01-01", "occupation": "Accountant"}
FINANCIAL_PAYLOAD = {"monthlyIncome": 8000000, "monthlyExpenses": 5000000}


async def complete_onboarding(client, user):
    headers = auth_headers(user)
    await client.post("/api/v1/users/onboarding/profile", json=PROFILE_PAYLOAD, headers=headers)
    await client.post("/api/v1/users/onboarding/financial", json=FINANCIAL_PAYLOAD, headers=headers)


async def test_admin_routes_require_admin(client, user):
    r = await client.get("/api/v1/admin/users", headers=auth_headers(user))
    assert r.status_code == status.HTTP_403_FORBIDDEN


async def test_find_users_by_email(client, db_session, admin):
    create_user(db_session, email="rina@example.com")
    create_user(db_session, email="budi@example.com")

    r = await client.get("/api/v1/admin/users", params={"email": "RINA"}, headers=auth_headers(admin))
    assert r.status_code == 200
    assert r.json()["total"] == 1
    assert r.json()["users"][0]["email"] == "rina@example.com"


async def test_reset_onboarding(client, db_session, admin, user):
    await complete_onboarding(client, user)

    r = await client.post(f"/api/v1/admin/users/{user.id}/onboarding/reset", headers=auth_headers(admin))
    assert r.status_code == 200
    body = r.json()
    assert body["profilesDeleted"] == 1
    assert body["financialRecordsDeleted"] == 1
    assert body["status"]["onboardingCompleted"] is False
    assert body["status"]["profileCompleted"] is False
    assert body["status"]["financialDataCompleted"] is False
    assert body["status"]["hasProfile"] is False


async def test_reset_unknown_user(client, admin):
    r = await client.post("/api/v1/admin/users/nope/onboarding/reset", headers=auth_headers(admin))
    assert r.status_code == status.HTTP_404_NOT_FOUND


async def test_recompute_fixes_flags(client, db_session, admin, user):
    await complete_onboarding(client, user)
    db_session.query(FinancialData).filter(FinancialData.user_id == user.id).delete()
    db_session.commit()

    r = await client.post(f"/api/v1/admin/users/{user.id}/onboarding/recompute", headers=auth_headers(admin))
    assert r.status_code == 200
    assert r.json()["profileCompleted"] is True
    assert r.json()["financialDataCompleted"] is False
    assert r.json()["onboardingCompleted"] is False


async def test_reset_password(client, db_session, admin, user):
    r = await client.post(
        f"/api/v1/admin/users/{user.id}/password",
        json={"newPassword": "brand-new-pass", "confirmNewPassword": "brand-new-pass"},
        headers=auth_headers(admin),
    )
    assert r.status_code == 200

    r = await client.post("/api/v1/auth/login", json={"email": user.email, "password": "brand-new-pass"})
    assert r.status_code == 200


async def test_reset_password_mismatch(client, admin, user):
    r = await client.post(
        f"/api/v1/admin/users/{user.id}/password",
        json={"newPassword": "brand-new-pass", "confirmNewPassword": "different"},
        headers=auth_headers(admin),
    )
    assert r.status_code == status.HTTP_400_BAD_REQUEST


async def test_reset_onboarding_script(client, db_session, user):
    await complete_onboarding(client, user)

    assert reset_onboarding.reset_onboarding(user.email, session_factory=TestingSessionLocal) == 0

    check = TestingSessionLocal()
    try:
        fresh = check.query(User).filter(User.id == user.id).first()
        assert (fresh.profile_completed, fresh.financial_data_completed, fresh.onboarding_completed) == (
            False,
            False,
            False,
        )
    finally:
        check.close()

    assert reset_onboarding.reset_onboarding("missing@example.com", session_factory=TestingSessionLocal) == 1


def test_reset_password_script(db_session):
    user = create_user(db_session, email="script@example.com")

    assert reset_password.reset_password("script@example.com", "another-pass", session_factory=TestingSessionLocal) == 0
    assert reset_password.reset_password("script@example.com", "123", session_factory=TestingSessionLocal) == 1
    assert reset_password.reset_password("ghost@example.com", "another-pass", session_factory=TestingSessionLocal) == 1

    db_session.expire_all()
    assert verify_password("another-pass", db_session.get(User, user.id).password_hash)


def test_first_admin_creation(db_session):
    factory = sessionmaker(bind=db_session.get_bind())
    create_first_admin("Boss@example.com", "admin-pass", session_factory=factory)
    create_first_admin("other@example.com", "admin-pass", session_factory=factory)

    admins = db_session.query(User).filter(User.role == UserRoleEnum.ADMIN).all()
    assert [a.email for a in admins] == ["boss@example.com"]
    assert admins[0].is_verified is True
