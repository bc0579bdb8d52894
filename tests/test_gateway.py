"""
Persistence gateway tests against in-memory SQLite.
"""
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from unittest.mock import patch

from sqlalchemy.exc import OperationalError

from diabetes_app import gateway, scoring
from diabetes_app.models import AssessmentHistory, HealthAssessment
from diabetes_app.records import build_assessment_record

T0 = datetime(2026, 1, 10, 8, 0, tzinfo=timezone.utc)


def _record(m, user_id, when):
    return build_assessment_record(m, scoring.assess(m), SimpleNamespace(id=user_id), when)


def test_save_then_get_round_trip(db_session, user, measurements_factory):
    m = measurements_factory(age=50, weight=90, glucose=130, systolic_bp=145, diastolic_bp=95,
                             family_diabetes=True, hypertensive=True)
    result = gateway.save_assessment(db_session, user.id, _record(m, user.id, T0))
    assert result.success is True
    assert result.error is None

    rec = gateway.get_assessment(db_session, user.id)
    assert rec is not None
    assert rec.user_id == user.id
    assert rec.risk_score == 100
    assert rec.risk_level.value == "High"
    assert rec.gender.value == "female"
    assert rec.family_diabetes is True


def test_save_flips_assessment_complete(db_session, user, measurements_factory):
    assert user.assessment_complete is False
    gateway.save_assessment(db_session, user.id, _record(measurements_factory(), user.id, T0))
    db_session.refresh(user)
    assert user.assessment_complete is True


def test_second_save_overwrites_and_keeps_history(db_session, user, measurements_factory):
    gateway.save_assessment(db_session, user.id, _record(measurements_factory(glucose=85), user.id, T0))
    gateway.save_assessment(
        db_session, user.id, _record(measurements_factory(glucose=130), user.id, T0 + timedelta(days=30))
    )

    assert db_session.query(HealthAssessment).filter_by(user_id=user.id).count() == 1
    assert db_session.query(AssessmentHistory).filter_by(user_id=user.id).count() == 2
    assert gateway.get_assessment(db_session, user.id).glucose == 130

    history = gateway.get_history(db_session, user.id)
    assert [h.glucose for h in history] == [85, 130]


def test_get_assessment_for_user_without_one(db_session, user):
    assert gateway.get_assessment(db_session, user.id) is None
    assert gateway.get_history(db_session, user.id) == []


def test_unknown_user_is_reported_not_raised(db_session, measurements_factory):
    result = gateway.save_assessment(db_session, 999, _record(measurements_factory(), 999, T0))
    assert result.success is False
    assert result.error == "User not found"


def test_database_error_comes_back_as_result(db_session, user, measurements_factory):
    rec = _record(measurements_factory(), user.id, T0)
    with patch.object(db_session, "commit", side_effect=OperationalError("INSERT", {}, Exception("disk full"))):
        result = gateway.save_assessment(db_session, user.id, rec)
    assert result.success is False
    assert "disk full" in result.error
    assert gateway.get_assessment(db_session, user.id) is None


def test_get_user_by_email_is_case_insensitive(db_session, user):
    assert gateway.get_user_by_email(db_session, "  JANE@example.com ").id == user.id
    assert gateway.get_user_by_email(db_session, "nobody@example.com") is None
