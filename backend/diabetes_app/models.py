from enum import Enum as PyEnum

from sqlalchemy import (
    Column,
    Integer,
    Float,
    String,
    Enum,
    Boolean,
    DateTime,
    ForeignKey,
    UniqueConstraint,
    Index,
)
from sqlalchemy.sql import func

from .db import Base


class GenderEnum(PyEnum):
    male = "male"
    female = "female"
    other = "other"


# -------------------------
# Users
# -------------------------
class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)

    email = Column(String(255), unique=True, index=True, nullable=False)
    full_name = Column(String(255), nullable=True)

    # bcrypt hash only; the clear password is never stored
    password_hash = Column(String(255), nullable=False)

    # Flipped by the gateway the first time an assessment is saved
    assessment_complete = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        UniqueConstraint("email", name="uq_users_email"),
    )


# -------------------------
# Current assessment (one per user, upserted)
# -------------------------
class HealthAssessment(Base):
    __tablename__ = "health_assessments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True, index=True)

    # Form answers
    age = Column(Integer, nullable=False)
    gender = Column(Enum(GenderEnum, name="gender_enum"), nullable=False)
    pulse_rate = Column(Integer, nullable=False)
    systolic_bp = Column(Integer, nullable=False)
    diastolic_bp = Column(Integer, nullable=False)
    glucose = Column(Integer, nullable=False)
    height = Column(Integer, nullable=False)
    weight = Column(Integer, nullable=False)
    family_diabetes = Column(Boolean, default=False, nullable=False)
    hypertensive = Column(Boolean, default=False, nullable=False)
    family_hypertension = Column(Boolean, default=False, nullable=False)
    cardiovascular_disease = Column(Boolean, default=False, nullable=False)
    stroke = Column(Boolean, default=False, nullable=False)

    # Derived
    bmi = Column(Float, nullable=False)
    risk_score = Column(Integer, nullable=False)
    risk_level = Column(String(16), nullable=False)  # "Low" / "Moderate" / "High"

    updated_at = Column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        UniqueConstraint("user_id", name="uq_health_assessments_user_id"),
    )


# -------------------------
# History (append-only, feeds the dashboard trends)
# -------------------------
class AssessmentHistory(Base):
    __tablename__ = "assessment_history"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    glucose = Column(Integer, nullable=False)
    bmi = Column(Float, nullable=False)
    systolic_bp = Column(Integer, nullable=False)
    diastolic_bp = Column(Integer, nullable=False)
    risk_score = Column(Integer, nullable=False)
    risk_level = Column(String(16), nullable=False)

    recorded_at = Column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        Index("ix_assessment_history_user_time", "user_id", "recorded_at"),
    )
