# backend/diabetes_app/gateway.py
"""
Persistence for users and assessments.

save_assessment never raises on database trouble: it rolls back and hands
the error text back in a SaveResult, and callers show it as-is.
"""
from typing import List, Optional
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .models import AssessmentHistory, GenderEnum, HealthAssessment, User
from .schemas import AssessmentRecord, HistoryEntry, SaveResult

log = logging.getLogger("uvicorn.error")

_MEASUREMENT_FIELDS = (
    "age", "pulse_rate", "systolic_bp", "diastolic_bp", "glucose", "height", "weight",
    "family_diabetes", "hypertensive", "family_hypertension", "cardiovascular_disease", "stroke",
    "bmi", "risk_score",
)


def get_user(db: Session, user_id: int) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).one_or_none()


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email.strip().lower()).one_or_none()


def save_assessment(db: Session, user_id: int, record: AssessmentRecord) -> SaveResult:
    """Upsert the user's current assessment, append history, mark the user complete."""
    user = get_user(db, user_id)
    if not user:
        return SaveResult(success=False, error="User not found")

    try:
        row = db.query(HealthAssessment).filter(HealthAssessment.user_id == user_id).one_or_none()
        if row is None:
            row = HealthAssessment(user_id=user_id)
            db.add(row)

        for name in _MEASUREMENT_FIELDS:
            setattr(row, name, getattr(record, name))
        row.gender = GenderEnum(record.gender.value)
        row.risk_level = record.risk_level.value
        row.updated_at = record.updated_at

        db.add(AssessmentHistory(
            user_id=user_id,
            glucose=record.glucose,
            bmi=record.bmi,
            systolic_bp=record.systolic_bp,
            diastolic_bp=record.diastolic_bp,
            risk_score=record.risk_score,
            risk_level=record.risk_level.value,
            recorded_at=record.updated_at,
        ))

        user.assessment_complete = True
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        log.error(f"[DB] save failed uid={user_id}: {e}")
        return SaveResult(success=False, error=str(e))

    log.info(f"[ASSESS] saved uid={user_id}, level={record.risk_level.value}, score={record.risk_score}")
    return SaveResult(success=True)


def _to_record(row: HealthAssessment) -> AssessmentRecord:
    return AssessmentRecord(
        age=row.age,
        gender=row.gender.value,
        pulse_rate=row.pulse_rate,
        systolic_bp=row.systolic_bp,
        diastolic_bp=row.diastolic_bp,
        glucose=row.glucose,
        height=row.height,
        weight=row.weight,
        family_diabetes=bool(row.family_diabetes),
        hypertensive=bool(row.hypertensive),
        family_hypertension=bool(row.family_hypertension),
        cardiovascular_disease=bool(row.cardiovascular_disease),
        stroke=bool(row.stroke),
        bmi=float(row.bmi),
        risk_score=int(row.risk_score),
        risk_level=row.risk_level,
        user_id=row.user_id,
        updated_at=row.updated_at,
    )


def get_assessment(db: Session, user_id: int) -> Optional[AssessmentRecord]:
    row = db.query(HealthAssessment).filter(HealthAssessment.user_id == user_id).one_or_none()
    if not row:
        return None
    return _to_record(row)


def get_history(db: Session, user_id: int) -> List[HistoryEntry]:
    """Oldest first."""
    rows = (
        db.query(AssessmentHistory)
          .filter(AssessmentHistory.user_id == user_id)
          .order_by(AssessmentHistory.recorded_at.asc(), AssessmentHistory.id.asc())
          .all()
    )
    return [
        HistoryEntry(
            glucose=r.glucose,
            bmi=float(r.bmi),
            systolic_bp=r.systolic_bp,
            diastolic_bp=r.diastolic_bp,
            risk_score=r.risk_score,
            risk_level=r.risk_level,
            recorded_at=r.recorded_at,
        )
        for r in rows
    ]
