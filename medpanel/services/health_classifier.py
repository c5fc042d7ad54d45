"""
Health classifier - fixed-threshold status and risk labels.

Pure functions of the current vitals: no state, no side effects, so the
same vitals always produce the same assessment.
"""
import logging
from typing import Mapping

from medpanel.core.exceptions import IncompleteRecordError
from medpanel.models import VitalKind, VitalReading
from medpanel.models.assessment import (
    BloodPressureStatus,
    BmiStatus,
    HealthAssessment,
    RiskLevel,
    StatusLabel,
)

logger = logging.getLogger(__name__)

# Blood pressure (mmHg); a reading passes a band only if both values are within it
BP_NORMAL_MAX = (130, 80)
BP_ELEVATED_MAX = (140, 90)

# BMI upper bounds (inclusive)
BMI_NORMAL_MAX = 25
BMI_OVERWEIGHT_MAX = 30

# Cardiovascular risk thresholds (exclusive)
CVD_MEDIUM_SYSTOLIC = 130
CVD_MEDIUM_CHOLESTEROL = 200
CVD_HIGH_SYSTOLIC = 140
CVD_HIGH_CHOLESTEROL = 240

_BP_CLASSES = {
    BloodPressureStatus.NORMAL: "health-good",
    BloodPressureStatus.ELEVATED: "health-warning",
    BloodPressureStatus.HIGH: "health-danger",
}

_BMI_CLASSES = {
    BmiStatus.NORMAL: "health-good",
    BmiStatus.OVERWEIGHT: "health-warning",
    BmiStatus.OBESE: "health-danger",
}

_RISK_CLASSES = {
    RiskLevel.LOW: "risk-low",
    RiskLevel.MEDIUM: "risk-medium",
    RiskLevel.HIGH: "risk-high",
}


def classify_blood_pressure(systolic: int, diastolic: int) -> BloodPressureStatus:
    """Normal up to 130/80, Elevated up to 140/90, otherwise High."""
    if systolic <= BP_NORMAL_MAX[0] and diastolic <= BP_NORMAL_MAX[1]:
        return BloodPressureStatus.NORMAL
    if systolic <= BP_ELEVATED_MAX[0] and diastolic <= BP_ELEVATED_MAX[1]:
        return BloodPressureStatus.ELEVATED
    return BloodPressureStatus.HIGH


def classify_bmi(bmi: float) -> BmiStatus:
    """Normal up to 25, Overweight up to 30, otherwise Obese."""
    if bmi <= BMI_NORMAL_MAX:
        return BmiStatus.NORMAL
    if bmi <= BMI_OVERWEIGHT_MAX:
        return BmiStatus.OVERWEIGHT
    return BmiStatus.OBESE


def assess_cardiovascular_risk(systolic: int, cholesterol: int) -> RiskLevel:
    """
    Low by default; Medium if either systolic or cholesterol is raised;
    High only when both are well above threshold.
    """
    if systolic > CVD_HIGH_SYSTOLIC and cholesterol > CVD_HIGH_CHOLESTEROL:
        return RiskLevel.HIGH
    if systolic > CVD_MEDIUM_SYSTOLIC or cholesterol > CVD_MEDIUM_CHOLESTEROL:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def assess_diabetes_risk(vitals: Mapping[VitalKind, VitalReading]) -> RiskLevel:
    """Always Low. Glucose is not evaluated yet."""
    return RiskLevel.LOW


def classify(vitals: Mapping[VitalKind, VitalReading]) -> HealthAssessment:
    """
    Classify the current vitals.

    Raises:
        IncompleteRecordError: If blood pressure, cholesterol or BMI is missing.
    """
    required = (VitalKind.BLOOD_PRESSURE, VitalKind.CHOLESTEROL, VitalKind.BMI)
    missing = [kind.value for kind in required if kind not in vitals]
    if missing:
        raise IncompleteRecordError(missing=missing)

    bp = vitals[VitalKind.BLOOD_PRESSURE]
    cholesterol = vitals[VitalKind.CHOLESTEROL]
    bmi = vitals[VitalKind.BMI]

    bp_status = classify_blood_pressure(bp.systolic, bp.diastolic)
    bmi_status = classify_bmi(bmi.value)
    cvd_risk = assess_cardiovascular_risk(bp.systolic, cholesterol.total)
    diabetes_risk = assess_diabetes_risk(vitals)

    cvd_label = StatusLabel(cvd_risk.value, _RISK_CLASSES[cvd_risk])
    assessment = HealthAssessment(
        blood_pressure=StatusLabel(bp_status.value, _BP_CLASSES[bp_status]),
        bmi=StatusLabel(bmi_status.value, _BMI_CLASSES[bmi_status]),
        cardiovascular_risk=cvd_label,
        stroke_risk=cvd_label,
        diabetes_risk=StatusLabel(diabetes_risk.value, _RISK_CLASSES[diabetes_risk]),
    )
    logger.debug(
        "Vitals classified",
        extra={
            "blood_pressure": bp_status.value,
            "bmi": bmi_status.value,
            "cardiovascular_risk": cvd_risk.value,
        },
    )
    return assessment
