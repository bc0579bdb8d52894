# backend/diabetes_app/dashboard.py
from typing import List, Optional

import pandas as pd
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from .auth import require_user
from .db import get_db
from .gateway import get_assessment, get_history
from .models import User
from .schemas import AssessmentRecord, CamelModel, HistoryEntry
from . import scoring

router = APIRouter(prefix="/dashboard", tags=["dashboard"])

TREND_MONTHS = 7


# ---------- Schemas ----------
class StatOut(CamelModel):
    title: str
    value: str = "N/A"
    unit: str = "-"
    trend: str = ""          # "up" / "down" / ""
    change: str = ""         # e.g. "-7.3%"
    description: str = "Complete assessment to see data"


class TrendPoint(CamelModel):
    date: str
    value: float


class BloodPressurePoint(CamelModel):
    date: str
    systolic: int
    diastolic: int


class RiskFactorSlice(CamelModel):
    name: str
    value: int


class DashboardOut(CamelModel):
    user_name: str
    has_assessment_data: bool
    stats: List[StatOut]
    glucose_trend: List[TrendPoint] = []
    bmi_trend: List[TrendPoint] = []
    blood_pressure_trend: List[BloodPressurePoint] = []
    risk_factors: List[RiskFactorSlice] = []


EMPTY_RISK_FACTORS = [RiskFactorSlice(name="Assessment Required", value=100)]


# ---------- Helpers ----------
def _change(current: float, previous: Optional[float]):
    """(trend, change) against the previous submission."""
    if previous is None or previous == 0 or current == previous:
        return "", ""
    pct = (current - previous) / previous * 100
    return ("up" if pct > 0 else "down"), f"{pct:+.1f}%"


def build_stats(record: Optional[AssessmentRecord], previous: Optional[HistoryEntry]) -> List[StatOut]:
    if record is None:
        return [
            StatOut(title="Latest Glucose"),
            StatOut(title="Current BMI"),
            StatOut(title="Blood Pressure"),
            StatOut(title="Risk Score"),
        ]

    g_trend, g_change = _change(record.glucose, previous.glucose if previous else None)
    b_trend, b_change = _change(record.bmi, previous.bmi if previous else None)
    p_trend, p_change = _change(record.systolic_bp, previous.systolic_bp if previous else None)
    r_trend, r_change = _change(record.risk_score, previous.risk_score if previous else None)

    return [
        StatOut(title="Latest Glucose", value=str(record.glucose), unit="mg/dL",
                trend=g_trend, change=g_change,
                description=scoring.glucose_category(record.glucose)),
        StatOut(title="Current BMI", value=f"{record.bmi:.1f}", unit="kg/m²",
                trend=b_trend, change=b_change,
                description=scoring.bmi_category(record.bmi)),
        StatOut(title="Blood Pressure", value=f"{record.systolic_bp}/{record.diastolic_bp}", unit="mmHg",
                trend=p_trend, change=p_change,
                description=scoring.blood_pressure_category(record.systolic_bp, record.diastolic_bp)),
        StatOut(title="Risk Score", value=str(record.risk_score), unit="/100",
                trend=r_trend, change=r_change,
                description=f"{record.risk_level.value} risk"),
    ]


def monthly_frame(history: List[HistoryEntry], months: int = TREND_MONTHS) -> pd.DataFrame:
    """Last submission of each calendar month, most recent `months` months, oldest first."""
    cols = ["date", "glucose", "bmi", "systolic_bp", "diastolic_bp"]
    if not history:
        return pd.DataFrame(columns=cols)

    df = pd.DataFrame([h.model_dump() for h in history])
    df["recorded_at"] = pd.to_datetime(df["recorded_at"], utc=True).dt.tz_localize(None)
    df = df.sort_values("recorded_at", kind="stable")
    df["month"] = df["recorded_at"].dt.to_period("M")

    monthly = df.groupby("month", sort=True).last().tail(months).reset_index()
    monthly["date"] = monthly["month"].dt.strftime("%b")
    return monthly[cols]


def build_risk_factors(record: Optional[AssessmentRecord]) -> List[RiskFactorSlice]:
    if record is None:
        return list(EMPTY_RISK_FACTORS)

    c = scoring.score_contributions(record, record.bmi)
    slices = [
        ("BMI", c["bmi"]),
        ("Glucose", c["glucose"]),
        ("Blood Pressure", c["bloodPressure"]),
        ("Family History", c["familyDiabetes"] + c["familyHypertension"]),
        ("Age", c["age"]),
        ("Other", c["hypertensive"] + c["cardiovascular"] + c["stroke"]),
    ]
    return [RiskFactorSlice(name=n, value=v) for n, v in slices if v > 0]


# ---------- Endpoint ----------
@router.get("", response_model=DashboardOut)
def dashboard(user: User = Depends(require_user), db: Session = Depends(get_db)) -> DashboardOut:
    record = get_assessment(db, user.id)
    history = get_history(db, user.id)
    previous = history[-2] if len(history) >= 2 else None

    monthly = monthly_frame(history)
    return DashboardOut(
        user_name=user.full_name or "Patient",
        has_assessment_data=record is not None,
        stats=build_stats(record, previous),
        glucose_trend=[TrendPoint(date=r.date, value=float(r.glucose)) for r in monthly.itertuples()],
        bmi_trend=[TrendPoint(date=r.date, value=float(r.bmi)) for r in monthly.itertuples()],
        blood_pressure_trend=[
            BloodPressurePoint(date=r.date, systolic=int(r.systolic_bp), diastolic=int(r.diastolic_bp))
            for r in monthly.itertuples()
        ],
        risk_factors=build_risk_factors(record),
    )
