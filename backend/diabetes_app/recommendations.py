# backend/diabetes_app/recommendations.py
from typing import List

from .schemas import FactorFlags, PatientMeasurements, RiskLevel
from . import scoring

LEVEL_ADVICE = {
    RiskLevel.low: [
        "Keep up a balanced diet and regular physical activity.",
        "Re-check fasting glucose at your routine yearly check-up.",
    ],
    RiskLevel.moderate: [
        "Aim for at least 150 minutes of moderate exercise per week.",
        "Discuss a fasting glucose or HbA1c test with your doctor.",
    ],
    RiskLevel.high: [
        "Book an appointment with your doctor for diabetes screening soon.",
        "Ask about an HbA1c test and a structured lifestyle programme.",
    ],
}


def factor_reasons(m: PatientMeasurements, bmi: float) -> List[str]:
    f = scoring.derive_factors(m, bmi)
    reasons = []
    if f.high_bmi:
        reasons.append(f"BMI ≥ {scoring.BMI_OVERWEIGHT:g} ({bmi})")
    if f.high_glucose:
        reasons.append(f"Fasting glucose ≥ {scoring.GLUCOSE_PREDIABETIC} ({m.glucose} mg/dL)")
    if f.high_bp:
        reasons.append(
            f"BP ≥ {scoring.SYSTOLIC_ELEVATED}/{scoring.DIASTOLIC_ELEVATED} ({m.systolic_bp}/{m.diastolic_bp})"
        )
    if f.family_history:
        reasons.append("Family history of diabetes")
    if f.cardiovascular:
        reasons.append("Cardiovascular disease")
    if f.age_risk:
        reasons.append(f"Age ≥ {scoring.AGE_HIGH} ({m.age})")
    return reasons


def build_recommendations(level: RiskLevel, factors: FactorFlags) -> List[str]:
    recs = list(LEVEL_ADVICE[level])
    if factors.high_bmi:
        recs.append("Losing 5–7% of body weight lowers diabetes risk noticeably.")
    if factors.high_glucose:
        recs.append("Cut back on sugary drinks and refined carbohydrates.")
    if factors.high_bp:
        recs.append("Monitor your blood pressure and reduce salt intake.")
    if factors.family_history:
        recs.append("Family history raises risk; screen more often than average.")
    if factors.cardiovascular:
        recs.append("Coordinate diabetes screening with your cardiologist.")
    if factors.age_risk:
        recs.append("Adults over 45 should be screened every 3 years at least.")
    return recs
