"""
Field extractor - pulls vitals and medications out of document text.

Each extraction rule is an independent, case-insensitive regular expression
with named capture groups. Rules run once per document in declaration
order; a rule that finds nothing never blocks the others.

Values are taken as written. Plausibility checks live in
services/validators/vital_validator.py and only run in strict mode.
"""
import logging
import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Pattern, Tuple

from medpanel.models import (
    BloodPressureReading,
    BmiReading,
    CholesterolReading,
    GlucoseReading,
    MedicalRecord,
    Provenance,
    VitalKind,
    VitalReading,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExtractionRule:
    """A named pattern that populates one vital or the medication list."""
    name: str
    pattern: Pattern[str]
    repeat: bool = False


EXTRACTION_RULES: Tuple[ExtractionRule, ...] = (
    ExtractionRule(
        VitalKind.BLOOD_PRESSURE.value,
        re.compile(r"blood pressure[:\s]+(?P<systolic>\d+)/(?P<diastolic>\d+)", re.IGNORECASE),
    ),
    ExtractionRule(
        VitalKind.CHOLESTEROL.value,
        re.compile(r"cholesterol[:\s]+(?P<total>\d+)", re.IGNORECASE),
    ),
    ExtractionRule(
        VitalKind.GLUCOSE.value,
        re.compile(r"glucose[:\s]+(?P<value>\d+)", re.IGNORECASE),
    ),
    ExtractionRule(
        VitalKind.BMI.value,
        re.compile(r"bmi[:\s]+(?P<value>\d+(?:\.\d+)?)", re.IGNORECASE),
    ),
    # The list stops at a line break; a whole PDF page is a single line.
    ExtractionRule(
        "medications",
        re.compile(r"medications?[:\s]+(?P<items>[\w \t,]+)", re.IGNORECASE),
        repeat=True,
    ),
)


@dataclass
class ExtractedFields:
    """Raw values found in one document, before they are merged into a record."""
    blood_pressure: Optional[Tuple[int, int]] = None
    cholesterol: Optional[int] = None
    glucose: Optional[int] = None
    bmi: Optional[float] = None
    medications: List[str] = field(default_factory=list)

    @property
    def found(self) -> List[str]:
        """Names of the rules that matched."""
        names = [
            kind.value for kind in VitalKind
            if getattr(self, kind.value) is not None
        ]
        if self.medications:
            names.append("medications")
        return names

    def readings(
        self,
        source_document: Optional[str] = None,
        observed_at: Optional[datetime] = None,
    ) -> List[VitalReading]:
        """Convert the extracted values into provenance-tagged readings."""
        tags = dict(
            provenance=Provenance.EXTRACTED,
            observed_at=observed_at,
            source_document=source_document,
        )
        readings: List[VitalReading] = []
        if self.blood_pressure is not None:
            systolic, diastolic = self.blood_pressure
            readings.append(BloodPressureReading(systolic=systolic, diastolic=diastolic, **tags))
        if self.cholesterol is not None:
            readings.append(CholesterolReading(total=self.cholesterol, **tags))
        if self.glucose is not None:
            readings.append(GlucoseReading(value=self.glucose, **tags))
        if self.bmi is not None:
            readings.append(BmiReading(value=self.bmi, **tags))
        return readings


def split_medications(items: str) -> List[str]:
    """Split a comma-separated medication list, trimming each entry."""
    return [entry.strip() for entry in items.split(",") if entry.strip()]


def extract_fields(text: str) -> ExtractedFields:
    """
    Apply every extraction rule to the document text.

    Single-valued rules keep their first match; the medication rule
    collects every match in order of appearance, duplicates included.
    """
    fields = ExtractedFields()

    for rule in EXTRACTION_RULES:
        if rule.repeat:
            for match in rule.pattern.finditer(text):
                fields.medications.extend(split_medications(match.group("items")))
            continue

        match = rule.pattern.search(text)
        if not match:
            continue

        if rule.name == VitalKind.BLOOD_PRESSURE.value:
            fields.blood_pressure = (int(match.group("systolic")), int(match.group("diastolic")))
        elif rule.name == VitalKind.CHOLESTEROL.value:
            fields.cholesterol = int(match.group("total"))
        elif rule.name == VitalKind.GLUCOSE.value:
            fields.glucose = int(match.group("value"))
        elif rule.name == VitalKind.BMI.value:
            fields.bmi = float(match.group("value"))

    logger.debug("Extraction rules applied", extra={"found": fields.found})
    return fields


def merge_into(
    record: MedicalRecord,
    fields: ExtractedFields,
    source_document: Optional[str] = None,
    observed_at: Optional[datetime] = None,
) -> None:
    """
    Merge one document's extracted fields into the session record.

    Single-valued vitals overwrite whatever an earlier document supplied;
    medications accumulate.
    """
    for reading in fields.readings(source_document=source_document, observed_at=observed_at):
        record.set_vital(reading)
    record.medications.extend(fields.medications)
