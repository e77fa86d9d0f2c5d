import pytest

from siggen.core.config import settings
from tests.helpers import FakeWriter


@pytest.fixture
def make_writer():
    return FakeWriter


@pytest.fixture
def clean_env(monkeypatch):
    for name in (
        "GEN_PORT",
        "GENERATOR_PORT",
        "GEN_HOST",
        "GEN_AMPLITUDE",
        "GEN_WAVEFORM",
        "GEN_SINE_STEP",
        "GEN_PERIOD_SEC",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def local_settings(monkeypatch):
    """Loopback listener on an ephemeral port, ticker effectively idle."""
    monkeypatch.setattr(settings, "GEN_HOST", "127.0.0.1")
    monkeypatch.setattr(settings, "GEN_PORT", 0)
    monkeypatch.setattr(settings, "GEN_PERIOD_SEC", 3600.0)
    return settings
