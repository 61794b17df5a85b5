"""
Thread-safe registry of last-known measurement values.

The SinkRegistry holds one value slot per MeasurementType, created once at
startup and mutated in place by the mapper.  It doubles as a custom
``prometheus_client`` collector: each scrape takes a consistent snapshot
under the registry lock and emits one gauge family per sink that has been
observed at least once.  Sinks that have never been observed are omitted
from the exposition output rather than reported as zero.

CHANGELOG:
- 2026-10-13: Initial creation (STORY-004)

TODO:
- None
"""

from __future__ import annotations

import threading
from collections.abc import Iterator

from prometheus_client import CollectorRegistry
from prometheus_client.core import GaugeMetricFamily
from prometheus_client.registry import Collector

from exporter.src.measurements import ALL_SINKS, MeasurementType, SinkSpec, validate_sink_specs


class SinkRegistry(Collector):
    """Last-known value per measurement type, exported as Prometheus gauges.

    Every read and write goes through a single lock, so a scrape never sees
    a torn value.  Values from different ticks may be mixed in one scrape.

    Args:
        specs: Sink definitions keyed by measurement type.  Defaults to
            :data:`~exporter.src.measurements.ALL_SINKS`.  The table is
            re-validated so every label has exactly one sink.
    """

    def __init__(self, specs: dict[MeasurementType, SinkSpec] | None = None) -> None:
        table = ALL_SINKS if specs is None else specs
        self._specs = validate_sink_specs(list(table.values()))
        self._values: dict[MeasurementType, float | None] = dict.fromkeys(self._specs)
        self._lock = threading.Lock()

    @property
    def specs(self) -> dict[MeasurementType, SinkSpec]:
        """The sink definitions this registry was built from."""
        return dict(self._specs)

    def set(self, measurement: MeasurementType, value: float) -> None:
        """Overwrite the last-known value for *measurement*."""
        with self._lock:
            self._values[measurement] = float(value)

    def get(self, measurement: MeasurementType) -> float | None:
        """Return the last-known value, or ``None`` if never observed."""
        with self._lock:
            return self._values[measurement]

    def snapshot(self) -> dict[MeasurementType, float]:
        """Return every observed value at one instant, keyed by type."""
        with self._lock:
            return {m: v for m, v in self._values.items() if v is not None}

    # ------------------------------------------------------------------
    # prometheus_client collector protocol
    # ------------------------------------------------------------------

    def describe(self) -> Iterator[GaugeMetricFamily]:
        for spec in self._specs.values():
            yield GaugeMetricFamily(spec.metric_name, spec.help)

    def collect(self) -> Iterator[GaugeMetricFamily]:
        values = self.snapshot()
        for measurement, spec in self._specs.items():
            if measurement in values:
                yield GaugeMetricFamily(spec.metric_name, spec.help, value=values[measurement])


def build_collector_registry(sinks: SinkRegistry) -> CollectorRegistry:
    """Return a dedicated CollectorRegistry that exposes only *sinks*."""
    registry = CollectorRegistry()
    registry.register(sinks)
    return registry
