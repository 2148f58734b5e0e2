from datetime import date

import pytest

from app.core.exceptions import NotFoundError, ValidationError
from app.models.financial_data import FinancialData
from app.models.user_profile import UserProfile
from app.services.onboarding_service import OnboardingService

from conftest import create_user

PROFILE = {"date_of_birth": date(1995, 4, 12), "occupation": "Software Engineer"}
FINANCIAL = {"monthly_income": 15000000, "monthly_expenses": 9000000, "financial_goals": ["Buy a house"]}


def flags(user):
    return (user.profile_completed, user.financial_data_completed, user.onboarding_completed)


def test_fresh_user_has_nothing_completed(db_session):
    user = create_user(db_session)
    status = OnboardingService(db_session).get_status(user.id)

    assert status == {
        "onboarding_completed": False,
        "profile_completed": False,
        "financial_data_completed": False,
        "has_profile": False,
        "has_financial_data": False,
        "onboarding_skipped": False,
        "needs_onboarding": True,
    }


def test_profile_then_financial_completes_onboarding(db_session):
    user = create_user(db_session)
    service = OnboardingService(db_session)

    service.submit_profile_stage(user.id, PROFILE)
    db_session.refresh(user)
    assert flags(user) == (True, False, False)
    assert db_session.query(UserProfile).filter_by(user_id=user.id).count() == 1

    service.submit_financial_stage(user.id, FINANCIAL)
    db_session.refresh(user)
    assert flags(user) == (True, True, True)
    assert db_session.query(FinancialData).filter_by(user_id=user.id).count() == 1


def test_financial_only_does_not_complete_onboarding(db_session):
    user = create_user(db_session)
    OnboardingService(db_session).submit_financial_stage(user.id, FINANCIAL)
    db_session.refresh(user)

    assert flags(user) == (False, True, False)


def test_second_profile_submission_updates_in_place(db_session):
    user = create_user(db_session)
    service = OnboardingService(db_session)
    service.submit_profile_stage(user.id, PROFILE)
    profile = service.submit_profile_stage(user.id, {"occupation": "Data Analyst"})

    assert db_session.query(UserProfile).filter_by(user_id=user.id).count() == 1
    assert profile.occupation == "Data Analyst"
    assert profile.date_of_birth == PROFILE["date_of_birth"]


def test_replacing_profile_without_required_fields_clears_flag(db_session):
    user = create_user(db_session)
    service = OnboardingService(db_session)
    service.submit_profile_stage(user.id, PROFILE)
    service.submit_financial_stage(user.id, FINANCIAL)

    service.submit_profile_stage(user.id, {"company": "Acme"}, replace=True)
    db_session.refresh(user)

    assert flags(user) == (False, True, False)


def test_recompute_repairs_inconsistent_flags(db_session):
    user = create_user(db_session)
    user.onboarding_completed = True
    db_session.commit()

    user = OnboardingService(db_session).recompute(user.id)

    assert flags(user) == (False, False, False)


def test_reset_clears_flags_and_deletes_rows(db_session):
    user = create_user(db_session)
    service = OnboardingService(db_session)
    service.submit_profile_stage(user.id, PROFILE)
    service.submit_financial_stage(user.id, FINANCIAL)
    service.submit_financial_stage(user.id, FINANCIAL)

    counts = service.reset(user.id)
    db_session.refresh(user)

    assert counts == {"profiles_deleted": 1, "financial_records_deleted": 2}
    assert flags(user) == (False, False, False)
    assert db_session.query(UserProfile).filter_by(user_id=user.id).count() == 0
    assert db_session.query(FinancialData).filter_by(user_id=user.id).count() == 0


def test_remove_profile_recomputes(db_session):
    user = create_user(db_session)
    service = OnboardingService(db_session)
    service.submit_profile_stage(user.id, PROFILE)
    service.submit_financial_stage(user.id, FINANCIAL)

    service.remove_profile(user.id)
    db_session.refresh(user)

    assert flags(user) == (False, True, False)
    with pytest.raises(NotFoundError):
        service.remove_profile(user.id)


def test_unknown_user_raises_not_found(db_session):
    service = OnboardingService(db_session)

    with pytest.raises(NotFoundError):
        service.recompute("missing-user")
    with pytest.raises(NotFoundError):
        service.get_status("missing-user")
    with pytest.raises(NotFoundError):
        service.reset("missing-user")


def test_set_step_rejects_unknown_step(db_session):
    user = create_user(db_session)

    with pytest.raises(ValidationError):
        OnboardingService(db_session).set_step(user.id, "payment", True)


def test_set_step_cannot_complete_stage_without_data(db_session):
    user = create_user(db_session)

    with pytest.raises(ValidationError):
        OnboardingService(db_session).set_step(user.id, "financial", True)


def test_set_step_clearing_stage_clears_onboarding(db_session):
    user = create_user(db_session)
    service = OnboardingService(db_session)
    service.submit_profile_stage(user.id, PROFILE)
    service.submit_financial_stage(user.id, FINANCIAL)

    user = service.set_step(user.id, "financial", False)
    assert flags(user) == (True, False, False)

    user = service.set_step(user.id, "financial", True)
    assert flags(user) == (True, True, True)


def test_skip_never_marks_onboarding_complete(db_session):
    user = create_user(db_session)
    service = OnboardingService(db_session)
    assert service.needs_onboarding(user.id) is True

    user = service.skip(user.id, "later")

    assert user.onboarding_skipped_at is not None
    assert user.onboarding_completed is False
    assert service.needs_onboarding(user.id) is False
    assert service.get_status(user.id)["onboarding_skipped"] is True


def test_needs_onboarding_false_once_completed(db_session):
    user = create_user(db_session)
    service = OnboardingService(db_session)
    service.submit_profile_stage(user.id, PROFILE)
    service.submit_financial_stage(user.id, FINANCIAL)

    assert service.needs_onboarding(user.id) is False
    assert service.get_status(user.id)["needs_onboarding"] is False


def test_needs_onboarding_unknown_user(db_session):
    with pytest.raises(NotFoundError):
        OnboardingService(db_session).needs_onboarding("missing-user")
