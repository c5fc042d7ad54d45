"""
Plausibility checks for extracted vitals.

Only used when strict validation is enabled. By default extracted values
are accepted as written.
"""
import logging
from dataclasses import fields as dataclass_fields
from typing import Iterable

from medpanel.core.exceptions import InvalidVitalError
from medpanel.core.vital_registry import get_vital
from medpanel.models import VitalReading

logger = logging.getLogger(__name__)

_NON_NUMERIC = {"provenance", "observed_at", "source_document"}


def validate_reading(reading: VitalReading) -> None:
    """
    Check every numeric field of a reading against the registry limits.

    Raises:
        InvalidVitalError: On the first field outside its limits.
    """
    definition = get_vital(reading.kind.value)
    for f in dataclass_fields(reading):
        if f.name in _NON_NUMERIC:
            continue
        value = getattr(reading, f.name)
        if not definition.is_plausible(f.name, value):
            logger.warning(
                "Implausible vital rejected",
                extra={"vital": reading.kind.value, "field": f.name, "value": value},
            )
            raise InvalidVitalError(
                vital=f"{definition.display_name} {f.name}",
                value=value,
                limits=definition.get_limits(f.name),
            )


def validate_readings(readings: Iterable[VitalReading]) -> None:
    """Validate several readings; stops at the first invalid one."""
    for reading in readings:
        validate_reading(reading)
