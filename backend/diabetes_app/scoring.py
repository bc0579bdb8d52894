# backend/diabetes_app/scoring.py
"""
Heuristic diabetes risk score.

Every cutoff lives in one constant below; the additive score bands, the
factor flags and the dashboard labels all read from the same constants so
they cannot drift apart. Band boundaries are part of the stored data's
meaning: changing one changes what a saved riskScore means.

Nothing in here raises. Zero/negative height or weight gives a BMI of 0,
which simply earns no BMI points.
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict

from .schemas import FactorFlags, PatientMeasurements, RiskAssessment, RiskLevel

# ---------- Thresholds ----------
AGE_HIGH = 45
AGE_MODERATE = 35

BMI_OBESE = 30.0
BMI_OVERWEIGHT = 25.0
BMI_UNDERWEIGHT = 18.5
# Past this a float has no tenths left to round
BMI_UNROUNDED = 1e15

GLUCOSE_DIABETIC = 126      # mg/dL fasting
GLUCOSE_PREDIABETIC = 100

SYSTOLIC_HIGH = 140         # mmHg
DIASTOLIC_HIGH = 90
SYSTOLIC_ELEVATED = 130
DIASTOLIC_ELEVATED = 85

# ---------- Points ----------
AGE_HIGH_POINTS = 15
AGE_MODERATE_POINTS = 10
BMI_OBESE_POINTS = 20
BMI_OVERWEIGHT_POINTS = 10
GLUCOSE_DIABETIC_POINTS = 25
GLUCOSE_PREDIABETIC_POINTS = 15
BP_HIGH_POINTS = 15
BP_ELEVATED_POINTS = 10
FAMILY_DIABETES_POINTS = 15
FAMILY_HYPERTENSION_POINTS = 5
HYPERTENSIVE_POINTS = 10
CARDIOVASCULAR_POINTS = 10
STROKE_POINTS = 5

MAX_SCORE = 100

# ---------- Risk levels ----------
HIGH_RISK_SCORE = 60
MODERATE_RISK_SCORE = 30


def compute_bmi(height: int, weight: int) -> float:
    """weight(kg) / height(m)^2 to one decimal; 0.0 when either input is <= 0."""
    if height <= 0 or weight <= 0:
        return 0.0
    try:
        meters = height / 100
        raw = weight / (meters * meters)
    except OverflowError:
        # an input too large for a float; the ratio still has an obvious side
        return float("inf") if weight > height else 0.0
    if raw >= BMI_UNROUNDED:
        return raw
    # half-up on the exact binary value, same as the client's toFixed(1)
    return float(Decimal(raw).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def _bp_high(systolic: int, diastolic: int) -> bool:
    return systolic >= SYSTOLIC_HIGH or diastolic >= DIASTOLIC_HIGH


def _bp_elevated(systolic: int, diastolic: int) -> bool:
    return systolic >= SYSTOLIC_ELEVATED or diastolic >= DIASTOLIC_ELEVATED


def score_contributions(m: PatientMeasurements, bmi: float) -> Dict[str, int]:
    """Points earned per factor. Within a factor only the highest band counts."""
    if m.age >= AGE_HIGH:
        age = AGE_HIGH_POINTS
    elif m.age >= AGE_MODERATE:
        age = AGE_MODERATE_POINTS
    else:
        age = 0

    if bmi >= BMI_OBESE:
        bmi_pts = BMI_OBESE_POINTS
    elif bmi >= BMI_OVERWEIGHT:
        bmi_pts = BMI_OVERWEIGHT_POINTS
    else:
        bmi_pts = 0

    if m.glucose >= GLUCOSE_DIABETIC:
        glucose = GLUCOSE_DIABETIC_POINTS
    elif m.glucose >= GLUCOSE_PREDIABETIC:
        glucose = GLUCOSE_PREDIABETIC_POINTS
    else:
        glucose = 0

    if _bp_high(m.systolic_bp, m.diastolic_bp):
        bp = BP_HIGH_POINTS
    elif _bp_elevated(m.systolic_bp, m.diastolic_bp):
        bp = BP_ELEVATED_POINTS
    else:
        bp = 0

    return {
        "age": age,
        "bmi": bmi_pts,
        "glucose": glucose,
        "bloodPressure": bp,
        "familyDiabetes": FAMILY_DIABETES_POINTS if m.family_diabetes else 0,
        "familyHypertension": FAMILY_HYPERTENSION_POINTS if m.family_hypertension else 0,
        "hypertensive": HYPERTENSIVE_POINTS if m.hypertensive else 0,
        "cardiovascular": CARDIOVASCULAR_POINTS if m.cardiovascular_disease else 0,
        "stroke": STROKE_POINTS if m.stroke else 0,
    }


def compute_risk_score(m: PatientMeasurements) -> int:
    bmi = compute_bmi(m.height, m.weight)
    return min(sum(score_contributions(m, bmi).values()), MAX_SCORE)


def classify_risk_level(score: int) -> RiskLevel:
    if score >= HIGH_RISK_SCORE:
        return RiskLevel.high
    if score >= MODERATE_RISK_SCORE:
        return RiskLevel.moderate
    return RiskLevel.low


def derive_factors(m: PatientMeasurements, bmi: float) -> FactorFlags:
    return FactorFlags(
        high_bmi=bmi >= BMI_OVERWEIGHT,
        high_glucose=m.glucose >= GLUCOSE_PREDIABETIC,
        high_bp=_bp_elevated(m.systolic_bp, m.diastolic_bp),
        family_history=bool(m.family_diabetes),
        cardiovascular=bool(m.cardiovascular_disease),
        age_risk=m.age >= AGE_HIGH,
    )


def assess(m: PatientMeasurements) -> RiskAssessment:
    bmi = compute_bmi(m.height, m.weight)
    contributions = score_contributions(m, bmi)
    score = min(sum(contributions.values()), MAX_SCORE)
    return RiskAssessment(
        bmi=bmi,
        score=score,
        level=classify_risk_level(score),
        factors=derive_factors(m, bmi),
        contributions=contributions,
    )


# ---------- Dashboard labels ----------
def bmi_category(bmi: float) -> str:
    if bmi <= 0:
        return "Unknown"
    if bmi < BMI_UNDERWEIGHT:
        return "Underweight"
    if bmi < BMI_OVERWEIGHT:
        return "Normal"
    if bmi < BMI_OBESE:
        return "Overweight"
    return "Obese"


def glucose_category(glucose: int) -> str:
    if glucose >= GLUCOSE_DIABETIC:
        return "Diabetes range"
    if glucose >= GLUCOSE_PREDIABETIC:
        return "Prediabetes range"
    return "Normal range"


def blood_pressure_category(systolic: int, diastolic: int) -> str:
    if _bp_high(systolic, diastolic):
        return "High"
    if _bp_elevated(systolic, diastolic):
        return "Elevated"
    return "Normal"
