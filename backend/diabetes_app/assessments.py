# backend/diabetes_app/assessments.py
from datetime import datetime, timezone
from typing import Optional
import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from .auth import get_current_user, require_user
from .db import get_db
from .gateway import get_assessment, save_assessment
from .models import User
from .records import AuthenticationRequired, build_assessment_record
from .recommendations import build_recommendations, factor_reasons
from .schemas import AssessmentEnvelope, AssessmentIn, AssessmentOut, PatientMeasurements, RiskAssessment
from . import scoring

router = APIRouter(prefix="/assessments", tags=["assessments"])
log = logging.getLogger("uvicorn.error")


def _result(m: PatientMeasurements, a: RiskAssessment, saved: bool = False,
            updated_at: Optional[datetime] = None) -> AssessmentOut:
    return AssessmentOut(
        bmi=a.bmi,
        risk_score=a.score,
        risk_level=a.level,
        factors=a.factors,
        contributions=a.contributions,
        reasons=factor_reasons(m, a.bmi),
        recommendations=build_recommendations(a.level, a.factors),
        saved=saved,
        updated_at=updated_at,
    )


@router.post("/preview", response_model=AssessmentOut)
def preview_assessment(payload: AssessmentIn) -> AssessmentOut:
    """Score the answers without saving anything (no login needed)."""
    m = payload.to_measurements()
    return _result(m, scoring.assess(m))


@router.post("", response_model=AssessmentOut)
def submit_assessment(
    payload: AssessmentIn,
    user: Optional[User] = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> AssessmentOut:
    m = payload.to_measurements()
    result = scoring.assess(m)
    now = datetime.now(timezone.utc)

    try:
        record = build_assessment_record(m, result, user, now)
    except AuthenticationRequired as e:
        raise HTTPException(status_code=401, detail=e.message)

    saved = save_assessment(db, record.user_id, record)
    if not saved.success:
        # gateway message goes to the user untouched
        raise HTTPException(status_code=502, detail=saved.error)

    return _result(m, result, saved=True, updated_at=now)


@router.get("/me", response_model=AssessmentEnvelope)
def my_assessment(user: User = Depends(require_user), db: Session = Depends(get_db)) -> AssessmentEnvelope:
    return AssessmentEnvelope(assessment=get_assessment(db, user.id))
