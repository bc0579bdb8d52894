# backend/diabetes_app/records.py
from datetime import datetime
from typing import Optional

from .schemas import AssessmentRecord, PatientMeasurements, RiskAssessment


class AuthenticationRequired(Exception):
    """No logged-in user at submission time; nothing should be written."""

    def __init__(self, message: str = "Please log in to save your assessment."):
        super().__init__(message)
        self.message = message


def build_assessment_record(
    measurements: PatientMeasurements,
    assessment: RiskAssessment,
    user,
    now: datetime,
) -> AssessmentRecord:
    """
    Compose the persistable record from the form answers, the engine output
    and the caller's identity. `user` is anything with an `id` (ORM User,
    UserOut); None means nobody is logged in.
    """
    user_id: Optional[int] = getattr(user, "id", None) if user is not None else None
    if user_id is None:
        raise AuthenticationRequired()

    return AssessmentRecord(
        **measurements.model_dump(),
        bmi=assessment.bmi,
        risk_score=assessment.score,
        risk_level=assessment.level,
        user_id=user_id,
        updated_at=now,
    )
