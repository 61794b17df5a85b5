"""
StecaGrid exporter package.

Polls a StecaGrid inverter's ``/measurements.xml`` status document over HTTP,
maps the measurement records onto a fixed set of gauges, and serves them on a
Prometheus ``/metrics`` endpoint.

CHANGELOG:
- 2026-10-12: Initial creation (STORY-001)

TODO:
- None
"""
