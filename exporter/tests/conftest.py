"""
Shared test fixtures for exporter tests.

Provides environment variable fixtures for ExporterSettings configuration
tests and sample measurement documents.  All exporter env vars are cleaned
before each test to ensure isolation.

CHANGELOG:
- 2026-10-12: Initial creation (STORY-001)

TODO:
- None
"""

from __future__ import annotations

import pytest

# All ExporterSettings environment variable names, used for cleanup.
_ALL_EXPORTER_ENV_VARS = (
    "STECAGRID_HOST",
    "STECAGRID_PATH",
    "STECAGRID_SCHEME",
    "POLL_INTERVAL_S",
    "FETCH_TIMEOUT_S",
    "LISTEN_ADDRESS",
    "LISTEN_PORT",
    "METRICS_PATH",
    "LOG_LEVEL",
    "HEALTH_PATH",
)

SAMPLE_XML = b"""<?xml version="1.0" encoding="UTF-8"?>
<root>
  <Device Name="StecaGrid 2000" NominalPower="2000" Type="Inverter" Serial="748211AB001"
          BusAddress="1" NetBiosName="INVERTER01" IpAddress="192.168.50.144"
          DateTime="2021-08-03T21:39:21">
    <Measurements>
      <Measurement Value="232.8" Unit="V" Type="AC_Voltage"/>
      <Measurement Unit="A" Type="AC_Current"/>
      <Measurement Unit="W" Type="AC_Power"/>
      <Measurement Value="50.131" Unit="Hz" Type="AC_Frequency"/>
      <Measurement Value="1.1" Unit="V" Type="DC_Voltage"/>
      <Measurement Unit="A" Type="DC_Current"/>
      <Measurement Unit="&#176;C" Type="Temp"/>
      <Measurement Unit="W" Type="GridPower"/>
      <Measurement Value="100.0" Unit="%" Type="Derating"/>
    </Measurements>
  </Device>
</root>
"""
"""Night-time document as served by a StecaGrid 2000."""

DAYTIME_XML = b"""<root>
  <Device Name="StecaGrid 2000" Serial="748211AB001">
    <Measurements>
      <Measurement Value="1843.5" Unit="W" Type="AC_Power"/>
      <Measurement Value="7.9" Unit="A" Type="AC_Current"/>
      <Measurement Value="233.4" Unit="V" Type="AC_Voltage"/>
      <Measurement Value="49.98" Unit="Hz" Type="AC_Frequency"/>
      <Measurement Value="412.0" Unit="V" Type="DC_Voltage"/>
      <Measurement Value="4.6" Unit="A" Type="DC_Current"/>
      <Measurement Value="41.2" Unit="&#176;C" Type="Temp"/>
      <Measurement Value="1790.0" Unit="W" Type="GridPower"/>
      <Measurement Value="100.0" Unit="%" Type="Derating"/>
    </Measurements>
  </Device>
</root>
"""
"""Document with a value for every recognised measurement."""


@pytest.fixture(autouse=True)
def _clean_exporter_env(monkeypatch: pytest.MonkeyPatch, tmp_path: str) -> None:
    """Remove all exporter env vars and isolate from .env files before each test.

    Changes working directory to tmp_path so no .env file is accidentally
    loaded by Pydantic BaseSettings.
    """
    for var in _ALL_EXPORTER_ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture()
def env_vars_full(monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    """Set all environment variables for ExporterSettings.

    Returns the dict of env var names to values for assertion convenience.
    """
    env = {
        "STECAGRID_HOST": "192.168.50.144",
        "STECAGRID_PATH": "/status/measurements.xml",
        "STECAGRID_SCHEME": "https",
        "POLL_INTERVAL_S": "10",
        "FETCH_TIMEOUT_S": "2.5",
        "LISTEN_ADDRESS": "127.0.0.1",
        "LISTEN_PORT": "9141",
        "METRICS_PATH": "/probe",
        "LOG_LEVEL": "debug",
        "HEALTH_PATH": "/tmp/exporter-health.json",
    }
    for key, value in env.items():
        monkeypatch.setenv(key, value)
    return env


@pytest.fixture()
def env_vars_required_only(monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    """Set only the required environment variables."""
    env = {"STECAGRID_HOST": "10.0.0.50"}
    for key, value in env.items():
        monkeypatch.setenv(key, value)
    return env


@pytest.fixture()
def sample_xml() -> bytes:
    """Night-time document with four values present and five absent."""
    return SAMPLE_XML


@pytest.fixture()
def daytime_xml() -> bytes:
    """Document with a value for every recognised measurement."""
    return DAYTIME_XML
