"""
Pydantic models for a parsed StecaGrid measurement document.

A MeasurementDocument is the parsed form of one ``/measurements.xml`` poll
response: the device identity block plus the ordered list of measurement
records.  Records keep the raw ``Type`` label as a string because the device
may report labels outside the closed set; only the mapper decides which ones
are recognised.

CHANGELOG:
- 2026-10-12: Initial creation (STORY-002)

TODO:
- None
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class DeviceInfo(BaseModel):
    """Identity attributes of the ``Device`` element.

    Informational only; the mapper never reads them.  Every attribute is
    optional because firmware versions differ in what they report.

    Attributes:
        name: Model name, e.g. ``"StecaGrid 2000"``.
        nominal_power: Rated power as reported (string, e.g. ``"2000"``).
        device_type: Device class, e.g. ``"Inverter"``.
        serial: Serial number.
        bus_address: RS485 bus address.
        netbios_name: NetBIOS host name.
        ip_address: IP address configured on the device.
        date_time: Device clock at the time of the response (not parsed).
    """

    name: str | None = None
    nominal_power: str | None = None
    device_type: str | None = None
    serial: str | None = None
    bus_address: str | None = None
    netbios_name: str | None = None
    ip_address: str | None = None
    date_time: str | None = None


class MeasurementRecord(BaseModel):
    """A single ``Measurement`` element.

    Attributes:
        type: The ``Type`` label, e.g. ``"AC_Voltage"``.  Empty when missing.
        value: Numeric reading, or ``None`` when the device omitted the
            ``Value`` attribute (which is not the same as zero).
        unit: Engineering unit string, informational only.
    """

    type: str = ""
    value: float | None = None
    unit: str = ""


class MeasurementDocument(BaseModel):
    """One parsed poll response."""

    device: DeviceInfo = Field(default_factory=DeviceInfo)
    measurements: list[MeasurementRecord] = Field(default_factory=list)
