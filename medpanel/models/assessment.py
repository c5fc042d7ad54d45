"""
Derived health classification. Computed fresh on each dashboard build and
never stored on the record.
"""
from dataclasses import dataclass
from enum import Enum


class BloodPressureStatus(str, Enum):
    NORMAL = "Normal"
    ELEVATED = "Elevated"
    HIGH = "High"


class BmiStatus(str, Enum):
    NORMAL = "Normal"
    OVERWEIGHT = "Overweight"
    OBESE = "Obese"


class RiskLevel(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


@dataclass(frozen=True)
class StatusLabel:
    """A categorical label paired with the CSS severity class used to render it."""
    label: str
    css_class: str


@dataclass(frozen=True)
class HealthAssessment:
    blood_pressure: StatusLabel
    bmi: StatusLabel
    cardiovascular_risk: StatusLabel
    stroke_risk: StatusLabel
    diabetes_risk: StatusLabel

    def risks(self) -> dict:
        """Disease category -> risk label, in display order."""
        return {
            "Cardiovascular Disease": self.cardiovascular_risk,
            "Diabetes": self.diabetes_risk,
            "Stroke": self.stroke_risk,
        }
