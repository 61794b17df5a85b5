"""
Measurement mapper: parses ``/measurements.xml`` and updates the sinks.

Two steps, kept separate so each can be tested on its own:

1. :func:`parse_document` turns the raw response body into a
   :class:`~exporter.src.models.MeasurementDocument`, raising
   :class:`~exporter.src.errors.ParseError` if the body is not a well-formed
   document with the expected ``root/Device/Measurements`` structure.
2. :func:`apply` walks the records in document order and overwrites the sink
   for every recognised label that carries a value.

Records are matched by their ``Type`` label only.  A recognised label without
a ``Value`` leaves the sink's previous value in place; an unrecognised label
is skipped so new firmware measurement types never break the exporter.

CHANGELOG:
- 2026-10-13: Initial creation (STORY-005)

TODO:
- None
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET

from exporter.src.errors import ConversionError, ParseError
from exporter.src.measurements import MeasurementType
from exporter.src.models import DeviceInfo, MeasurementDocument, MeasurementRecord
from exporter.src.sinks import SinkRegistry

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Mapping from DeviceInfo field names to Device element attributes.
# ---------------------------------------------------------------------------

_DEVICE_ATTRS: dict[str, str] = {
    "name": "Name",
    "nominal_power": "NominalPower",
    "device_type": "Type",
    "serial": "Serial",
    "bus_address": "BusAddress",
    "netbios_name": "NetBiosName",
    "ip_address": "IpAddress",
    "date_time": "DateTime",
}
"""Maps DeviceInfo field name -> attribute name on the Device element."""


# ---------------------------------------------------------------------------
# Parsing helpers
# ---------------------------------------------------------------------------


def _convert_value(label: str, raw: str | None) -> float | None:
    """Convert a ``Value`` attribute to a float.

    Returns ``None`` when the attribute is missing or blank.

    Raises:
        ConversionError: If the attribute is present but not a number.
    """
    if raw is None or not raw.strip():
        return None
    try:
        return float(raw.strip())
    except ValueError as exc:
        raise ConversionError(label, raw) from exc


def _parse_record(element: ET.Element) -> MeasurementRecord:
    label = element.get("Type", "")
    try:
        value = _convert_value(label, element.get("Value"))
    except ConversionError as exc:
        logger.warning("Conversion error, treating value as absent: %s", exc)
        value = None
    return MeasurementRecord(type=label, value=value, unit=element.get("Unit", ""))


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def parse_document(body: bytes) -> MeasurementDocument:
    """Parse a ``/measurements.xml`` response body.

    Args:
        body: Raw response bytes as returned by the fetcher.

    Returns:
        The parsed document with records in document order.

    Raises:
        ParseError: If the body is not well-formed XML, the root element is
            not ``root``, or the ``Device`` or ``Measurements`` element is
            missing.
    """
    try:
        root = ET.fromstring(body)
    except ET.ParseError as exc:
        raise ParseError(f"Malformed XML: {exc}") from exc

    if root.tag != "root":
        raise ParseError(f"Unexpected root element '{root.tag}', expected 'root'")

    device = root.find("Device")
    if device is None:
        raise ParseError("Missing 'Device' element")

    measurements = device.find("Measurements")
    if measurements is None:
        raise ParseError("Missing 'Measurements' element")

    info = DeviceInfo(**{field: device.get(attr) for field, attr in _DEVICE_ATTRS.items()})
    records = [_parse_record(el) for el in measurements.findall("Measurement")]
    return MeasurementDocument(device=info, measurements=records)


def apply(document: MeasurementDocument, registry: SinkRegistry) -> int:
    """Update *registry* from the records in *document*.

    Args:
        document: A parsed measurement document.
        registry: The sinks to update in place.

    Returns:
        Number of distinct sinks that received a new value.
    """
    updated: set[MeasurementType] = set()

    for record in document.measurements:
        measurement = MeasurementType.from_label(record.type)
        if measurement is None:
            logger.debug("Skipping unrecognised measurement type '%s'", record.type)
            continue
        if record.value is None:
            continue
        registry.set(measurement, record.value)
        updated.add(measurement)

    return len(updated)


def ingest(body: bytes, registry: SinkRegistry) -> tuple[MeasurementDocument, int]:
    """Parse *body* and apply it to *registry*.

    The registry is left untouched if parsing fails.

    Returns:
        The parsed document and the number of sinks updated.

    Raises:
        ParseError: If the body is not a valid measurement document.
    """
    document = parse_document(body)
    return document, apply(document, registry)
