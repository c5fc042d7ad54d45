"""
Central vital registry - single source of truth for vital and chart definitions.

This module provides:
- YAML-based configuration loading and validation (vitals.yaml)
- VitalDefinition / ChartDefinition dataclasses
- Read-only lookup of vitals and charts by canonical name

YAML access is encapsulated here - no other module should read vitals.yaml
directly.

Usage:
    from medpanel.core.vital_registry import get_vital, list_charts

    bmi = get_vital("bmi")
    bmi.format_value(24.26)   # "24.3"
    for chart in list_charts():
        ...
"""

import logging
import re
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

logger = logging.getLogger(__name__)

CHART_TYPES = ("line", "bar")
TREND_SERIES = ("blood_pressure", "weight", "labs")
_HEX_COLOR = re.compile(r"^#[0-9A-Fa-f]{6}$")


# =============================================================================
# DEFINITION DATACLASSES
# =============================================================================

@dataclass(frozen=True)
class VitalDefinition:
    """
    Immutable definition for a vital sign.

    Attributes:
        canonical_name: Key used in MedicalRecord.vitals
        display_name: Human-readable name
        unit: Measurement unit (e.g., "mg/dL", "mmHg")
        decimals: Digits after the decimal point in display strings
        limits: Physiological (low, high) bounds per reading field
    """
    canonical_name: str
    display_name: str
    unit: str
    decimals: int
    limits: Tuple[Tuple[str, Tuple[float, float]], ...]

    def format_value(self, value: float) -> str:
        """Format a value with this vital's precision."""
        return f"{value:.{self.decimals}f}"

    def get_limits(self, field_name: str) -> Optional[Tuple[float, float]]:
        """Get the physiological limits for one reading field, if defined."""
        return dict(self.limits).get(field_name)

    def is_plausible(self, field_name: str, value: float) -> bool:
        """Check a value against its limits. Fields without limits always pass."""
        limits = self.get_limits(field_name)
        if limits is None:
            return True
        low, high = limits
        return low <= value <= high


@dataclass(frozen=True)
class AxisDefinition:
    """Fixed y-axis bounds for a chart. None leaves the bound to the chart engine."""
    axis_id: str
    min: Optional[float]
    max: Optional[float]
    side: str


@dataclass(frozen=True)
class DatasetDefinition:
    """One plotted field of a trend series."""
    field: str
    label: str
    color: str
    axis: str
    fill_color: Optional[str] = None


@dataclass(frozen=True)
class ChartDefinition:
    """Definition of one trend chart."""
    chart_id: str
    title: str
    chart_type: str
    series: str
    axes: Tuple[AxisDefinition, ...]
    datasets: Tuple[DatasetDefinition, ...]


# =============================================================================
# YAML CONFIGURATION LOADING & VALIDATION
# =============================================================================

def _get_config_path() -> Path:
    """Get the path to the vitals configuration file."""
    return Path(__file__).parent / "vitals.yaml"


def _load_yaml_config() -> Dict[str, Any]:
    """
    Load and parse the YAML configuration file.

    Raises:
        FileNotFoundError: If vitals.yaml is not found
        yaml.YAMLError: If YAML parsing fails
    """
    config_path = _get_config_path()
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}
    except FileNotFoundError:
        logger.error("Vitals config file not found", extra={"path": str(config_path)})
        raise
    except yaml.YAMLError as e:
        logger.error("Failed to parse vitals config", extra={"path": str(config_path), "error": str(e)})
        raise


def _validate_pair(value: Any, what: str) -> Tuple[float, float]:
    """Validate a [low, high] pair."""
    if not isinstance(value, (list, tuple)) or len(value) != 2:
        raise ValueError(f"{what} must be [low, high]")
    try:
        low, high = float(value[0]), float(value[1])
    except (TypeError, ValueError):
        raise ValueError(f"{what} has non-numeric values")
    if low > high:
        raise ValueError(f"{what} has low > high")
    return low, high


def _parse_vital_entry(raw: Dict[str, Any], index: int) -> VitalDefinition:
    """Validate and parse a single vital entry from YAML."""
    if "canonical_name" not in raw:
        raise ValueError(f"Vital at index {index} is missing required field: 'canonical_name'")

    canonical_name = raw["canonical_name"]
    limits_raw = raw.get("limits") or {}
    limits = tuple(
        (field_name, _validate_pair(pair, f"Vital '{canonical_name}' limits.{field_name}"))
        for field_name, pair in limits_raw.items()
    )

    return VitalDefinition(
        canonical_name=canonical_name,
        display_name=raw.get("display_name", canonical_name.replace("_", " ").title()),
        unit=raw.get("unit", ""),
        decimals=int(raw.get("decimals", 0)),
        limits=limits,
    )


def _parse_chart_entry(raw: Dict[str, Any], index: int) -> ChartDefinition:
    """Validate and parse a single chart entry from YAML."""
    for field_name in ("chart_id", "chart_type", "series", "datasets"):
        if field_name not in raw:
            raise ValueError(f"Chart at index {index} is missing required field: '{field_name}'")

    chart_id = raw["chart_id"]
    if raw["chart_type"] not in CHART_TYPES:
        raise ValueError(f"Chart '{chart_id}' has unsupported chart_type: '{raw['chart_type']}'")
    if raw["series"] not in TREND_SERIES:
        raise ValueError(f"Chart '{chart_id}' references unknown series: '{raw['series']}'")

    axes = tuple(
        AxisDefinition(
            axis_id=axis_id,
            min=spec.get("min"),
            max=spec.get("max"),
            side=spec.get("side", "left"),
        )
        for axis_id, spec in (raw.get("axes") or {"y": {}}).items()
    )
    axis_ids = {axis.axis_id for axis in axes}

    datasets: List[DatasetDefinition] = []
    for ds in raw["datasets"]:
        color = ds.get("color", "")
        if not _HEX_COLOR.match(color):
            raise ValueError(f"Chart '{chart_id}' dataset '{ds.get('field')}' has invalid color: '{color}'")
        axis = ds.get("axis", "y")
        if axis not in axis_ids:
            raise ValueError(f"Chart '{chart_id}' dataset '{ds.get('field')}' uses undeclared axis '{axis}'")
        datasets.append(DatasetDefinition(
            field=ds["field"],
            label=ds.get("label", ds["field"].title()),
            color=color,
            axis=axis,
            fill_color=ds.get("fill_color"),
        ))

    return ChartDefinition(
        chart_id=chart_id,
        title=raw.get("title", chart_id),
        chart_type=raw["chart_type"],
        series=raw["series"],
        axes=axes,
        datasets=tuple(datasets),
    )


@lru_cache(maxsize=1)
def _load_registry() -> Tuple[Tuple[VitalDefinition, ...], Tuple[ChartDefinition, ...]]:
    """
    Load and cache the complete registry from YAML.

    Cached so the YAML file is read exactly once per process.
    """
    config = _load_yaml_config()
    vitals = tuple(
        _parse_vital_entry(raw, i) for i, raw in enumerate(config.get("vitals", []))
    )
    charts = tuple(
        _parse_chart_entry(raw, i) for i, raw in enumerate(config.get("charts", []))
    )
    logger.debug("Vital registry loaded", extra={"vitals": len(vitals), "charts": len(charts)})
    return vitals, charts


# =============================================================================
# PUBLIC API
# =============================================================================

def get_vital(canonical_name: str) -> VitalDefinition:
    """
    Get a vital definition by canonical name.

    Raises:
        KeyError: If the vital is not defined in vitals.yaml
    """
    vitals, _ = _load_registry()
    for vital in vitals:
        if vital.canonical_name == canonical_name:
            return vital
    raise KeyError(f"Unknown vital: '{canonical_name}'")


def list_vitals() -> List[VitalDefinition]:
    """List all vital definitions in configuration order."""
    vitals, _ = _load_registry()
    return list(vitals)


def list_charts() -> List[ChartDefinition]:
    """List all chart definitions in configuration order."""
    _, charts = _load_registry()
    return list(charts)
