"""
Sample data synthesizer - placeholder values for the dashboard.

Every vital the documents did not supply is replaced with a uniformly
random value in a fixed range, tagged ``Provenance.SYNTHESIZED``. The
three six-month trend series are always regenerated and are never derived
from the record. None of this is clinical data.

Pass a seeded ``random.Random`` to get repeatable output.
"""
import logging
import random
from typing import Optional

from medpanel.models import (
    MONTH_LABELS,
    BloodPressureReading,
    BloodPressureSample,
    BmiReading,
    CholesterolReading,
    GlucoseReading,
    LabSample,
    MedicalRecord,
    Provenance,
    TrendData,
    TrendSeries,
    VitalKind,
    WeightSample,
)

logger = logging.getLogger(__name__)

# Inclusive integer ranges unless noted
SYSTOLIC_RANGE = (120, 139)
DIASTOLIC_RANGE = (70, 84)
CHOLESTEROL_RANGE = (180, 219)
GLUCOSE_RANGE = (85, 114)
BMI_RANGE = (22.0, 28.0)  # half-open

TREND_SYSTOLIC_RANGE = (115, 134)
TREND_DIASTOLIC_RANGE = (70, 84)
TREND_WEIGHT_RANGE = (150, 159)
TREND_BMI_RANGE = (22.0, 26.0)  # half-open
TREND_CHOLESTEROL_RANGE = (180, 219)
TREND_GLUCOSE_RANGE = (85, 114)


class SampleDataSynthesizer:
    """Fills gaps in a MedicalRecord with randomized placeholder data."""

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def _int(self, bounds: tuple) -> int:
        low, high = bounds
        return self.rng.randint(low, high)

    def _float(self, bounds: tuple) -> float:
        low, high = bounds
        return low + self.rng.random() * (high - low)

    def fill_missing_vitals(self, record: MedicalRecord) -> list:
        """
        Synthesize every vital missing from the record.

        Returns:
            The kinds of vital that were synthesized.
        """
        missing = record.missing_vitals()
        tag = dict(provenance=Provenance.SYNTHESIZED)

        for kind in missing:
            if kind is VitalKind.BLOOD_PRESSURE:
                record.set_vital(BloodPressureReading(
                    systolic=self._int(SYSTOLIC_RANGE),
                    diastolic=self._int(DIASTOLIC_RANGE),
                    **tag,
                ))
            elif kind is VitalKind.CHOLESTEROL:
                record.set_vital(CholesterolReading(total=self._int(CHOLESTEROL_RANGE), **tag))
            elif kind is VitalKind.GLUCOSE:
                record.set_vital(GlucoseReading(value=self._int(GLUCOSE_RANGE), **tag))
            elif kind is VitalKind.BMI:
                record.set_vital(BmiReading(value=self._float(BMI_RANGE), **tag))

        if missing:
            logger.info(
                "Synthesized placeholder vitals",
                extra={"vitals": [kind.value for kind in missing]},
            )
        return missing

    def generate_trends(self, record: MedicalRecord) -> TrendData:
        """Replace the record's trend series with six fresh months of samples."""
        record.trends = TrendData(
            blood_pressure=TrendSeries("blood_pressure", [
                BloodPressureSample(
                    month=month,
                    systolic=self._int(TREND_SYSTOLIC_RANGE),
                    diastolic=self._int(TREND_DIASTOLIC_RANGE),
                )
                for month in MONTH_LABELS
            ]),
            weight=TrendSeries("weight", [
                WeightSample(
                    month=month,
                    weight=self._int(TREND_WEIGHT_RANGE),
                    bmi=self._float(TREND_BMI_RANGE),
                )
                for month in MONTH_LABELS
            ]),
            labs=TrendSeries("labs", [
                LabSample(
                    month=month,
                    cholesterol=self._int(TREND_CHOLESTEROL_RANGE),
                    glucose=self._int(TREND_GLUCOSE_RANGE),
                )
                for month in MONTH_LABELS
            ]),
        )
        return record.trends

    def synthesize(self, record: MedicalRecord) -> MedicalRecord:
        """Fill missing vitals, then regenerate all trend series."""
        self.fill_missing_vitals(record)
        self.generate_trends(record)
        return record
