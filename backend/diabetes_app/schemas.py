# backend/diabetes_app/schemas.py
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    # The client speaks camelCase JSON (pulseRate, systolicBp, riskLevel, ...)
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Gender(str, Enum):
    male = "male"
    female = "female"
    other = "other"


class RiskLevel(str, Enum):
    low = "Low"
    moderate = "Moderate"
    high = "High"


# ---------- Inputs ----------
class PatientMeasurements(CamelModel):
    """
    Raw questionnaire answers. No range checks here: the scoring engine
    accepts whatever integers it is handed.
    """
    age: int
    gender: Gender
    pulse_rate: int
    systolic_bp: int
    diastolic_bp: int
    glucose: int
    height: int
    weight: int
    family_diabetes: bool = False
    hypertensive: bool = False
    family_hypertension: bool = False
    cardiovascular_disease: bool = False
    stroke: bool = False


class AssessmentIn(PatientMeasurements):
    """Form payload; bounds match the questionnaire inputs."""
    age: int = Field(..., ge=1, le=120)
    pulse_rate: int = Field(..., ge=40, le=200)
    systolic_bp: int = Field(..., ge=80, le=250)
    diastolic_bp: int = Field(..., ge=40, le=150)
    glucose: int = Field(..., ge=50, le=500)
    height: int = Field(..., ge=100, le=250)
    weight: int = Field(..., ge=20, le=300)

    def to_measurements(self) -> PatientMeasurements:
        return PatientMeasurements(**self.model_dump())


# ---------- Engine outputs ----------
class FactorFlags(CamelModel):
    high_bmi: bool = Field(False, alias="highBMI")
    high_glucose: bool = False
    high_bp: bool = Field(False, alias="highBP")
    family_history: bool = False
    cardiovascular: bool = False
    age_risk: bool = False


class RiskAssessment(CamelModel):
    bmi: float
    score: int
    level: RiskLevel
    factors: FactorFlags
    contributions: Dict[str, int] = {}


# ---------- Persisted record ----------
class AssessmentRecord(PatientMeasurements):
    bmi: float
    risk_score: int
    risk_level: RiskLevel
    user_id: int
    updated_at: datetime


class SaveResult(CamelModel):
    success: bool
    error: Optional[str] = None


class HistoryEntry(CamelModel):
    glucose: int
    bmi: float
    systolic_bp: int
    diastolic_bp: int
    risk_score: int
    risk_level: RiskLevel
    recorded_at: datetime


# ---------- Responses ----------
class AssessmentOut(CamelModel):
    bmi: float
    risk_score: int
    risk_level: RiskLevel
    factors: FactorFlags
    contributions: Dict[str, int] = {}
    reasons: List[str] = []
    recommendations: List[str] = []
    saved: bool = False
    updated_at: Optional[datetime] = None


class AssessmentEnvelope(CamelModel):
    assessment: Optional[AssessmentRecord] = None


class UserOut(CamelModel):
    id: int
    email: str
    full_name: Optional[str] = None
    assessment_complete: bool = False
