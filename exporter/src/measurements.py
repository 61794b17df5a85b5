"""
StecaGrid measurement map -- single source of truth.

Defines the closed set of measurement ``Type`` labels the inverter reports in
``/measurements.xml`` and the gauge each one is published as.  Records are
always matched by label: the order and presence of ``Measurement`` elements
varies across firmware versions and wiring (an unconnected channel is simply
omitted), so nothing here depends on position.

Example document served by the inverter::

    <root>
      <Device Name="StecaGrid 2000" NominalPower="2000" Type="Inverter"
              Serial="..." BusAddress="1" NetBiosName="..." IpAddress="..."
              DateTime="2021-08-03T21:39:21">
        <Measurements>
          <Measurement Value="232.8" Unit="V" Type="AC_Voltage"/>
          <Measurement Unit="A" Type="AC_Current"/>
          <Measurement Unit="W" Type="AC_Power"/>
          <Measurement Value="50.131" Unit="Hz" Type="AC_Frequency"/>
          <Measurement Value="1.1" Unit="V" Type="DC_Voltage"/>
          <Measurement Unit="A" Type="DC_Current"/>
          <Measurement Unit="°C" Type="Temp"/>
          <Measurement Unit="W" Type="GridPower"/>
          <Measurement Value="100.0" Unit="%" Type="Derating"/>
        </Measurements>
      </Device>
    </root>

CHANGELOG:
- 2026-10-12: Initial creation (STORY-002)

TODO:
- None
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

NAMESPACE = "stecagrid"
"""Prefix applied to every exported metric name."""


class MeasurementType(str, Enum):
    """Closed set of measurement labels recognised by the exporter.

    Each member's value is the exact ``Type`` attribute used by the device.
    """

    AC_VOLTAGE = "AC_Voltage"
    AC_CURRENT = "AC_Current"
    AC_POWER = "AC_Power"
    AC_FREQUENCY = "AC_Frequency"
    DC_VOLTAGE = "DC_Voltage"
    DC_CURRENT = "DC_Current"
    TEMP = "Temp"
    GRID_POWER = "GridPower"
    DERATING = "Derating"

    @classmethod
    def from_label(cls, label: str | None) -> MeasurementType | None:
        """Return the member for *label*, or ``None`` if it is not recognised."""
        if label is None:
            return None
        return _BY_LABEL.get(label)


_BY_LABEL: dict[str, MeasurementType] = {m.value: m for m in MeasurementType}


# ---------------------------------------------------------------------------
# Sink definitions
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class SinkSpec:
    """Definition of a single exported gauge.

    Attributes:
        measurement: The label this gauge is fed from.
        name: Metric name without the namespace prefix (e.g. ``"ac_power"``).
        help: Help text shown in the exposition output.
        unit: Engineering unit, informational only.
    """

    measurement: MeasurementType
    name: str
    help: str
    unit: str

    @property
    def metric_name(self) -> str:
        """Fully-qualified metric name, e.g. ``stecagrid_ac_power``."""
        return f"{NAMESPACE}_{self.name}"


_SINK_SPECS: list[SinkSpec] = [
    SinkSpec(MeasurementType.AC_POWER, "ac_power", "AC Power (W)", "W"),
    SinkSpec(MeasurementType.AC_CURRENT, "ac_current", "AC Current (A)", "A"),
    SinkSpec(MeasurementType.AC_VOLTAGE, "ac_voltage", "AC Voltage (V)", "V"),
    SinkSpec(MeasurementType.AC_FREQUENCY, "ac_frequency", "AC Frequency (Hz)", "Hz"),
    SinkSpec(MeasurementType.DC_VOLTAGE, "dc_voltage", "DC Voltage (V)", "V"),
    SinkSpec(MeasurementType.DC_CURRENT, "dc_current", "DC Current (A)", "A"),
    SinkSpec(MeasurementType.TEMP, "temp", "Temperature (°C)", "°C"),
    SinkSpec(MeasurementType.GRID_POWER, "grid_power", "Grid Power (W)", "W"),
    SinkSpec(MeasurementType.DERATING, "derating", "Derating (%)", "%"),
]


def validate_sink_specs(specs: list[SinkSpec]) -> dict[MeasurementType, SinkSpec]:
    """Check that *specs* map every label to exactly one distinct gauge.

    Args:
        specs: Candidate sink definitions.

    Returns:
        The definitions keyed by measurement type.

    Raises:
        ValueError: If a label is missing, repeated, or two labels share a
            metric name.
    """
    by_type: dict[MeasurementType, SinkSpec] = {}
    names: set[str] = set()
    for spec in specs:
        if spec.measurement in by_type:
            raise ValueError(f"Measurement '{spec.measurement.value}' has more than one sink")
        if spec.name in names:
            raise ValueError(f"Metric name '{spec.name}' is used by more than one sink")
        by_type[spec.measurement] = spec
        names.add(spec.name)

    missing = [m.value for m in MeasurementType if m not in by_type]
    if missing:
        msg = f"Measurements without a sink: {', '.join(missing)}"
        raise ValueError(msg)
    return by_type


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

ALL_SINKS: dict[MeasurementType, SinkSpec] = validate_sink_specs(_SINK_SPECS)
"""Every gauge keyed by its measurement type, in exposition order."""
