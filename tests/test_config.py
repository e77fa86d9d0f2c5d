import math
import struct

from siggen.core.config import Settings


def test_defaults(clean_env):
    s = Settings(_env_file=None)
    assert s.GEN_PORT == 3000
    assert s.GEN_AMPLITUDE == 100.0
    assert s.GEN_WAVEFORM == "sine"
    assert s.GEN_SINE_STEP == math.pi / 8
    assert s.GEN_PERIOD_SEC == 1.0
    assert s.listen_host() is None


def test_env_overrides(clean_env):
    clean_env.setenv("GEN_PORT", "4100")
    clean_env.setenv("GEN_AMPLITUDE", "30")
    clean_env.setenv("GEN_WAVEFORM", "triangle")
    clean_env.setenv("GEN_HOST", "127.0.0.1")
    s = Settings(_env_file=None)
    assert s.GEN_PORT == 4100
    assert s.GEN_AMPLITUDE == 30.0
    assert s.GEN_WAVEFORM == "triangle"
    assert s.listen_host() == "127.0.0.1"


def test_legacy_port_name(clean_env):
    clean_env.setenv("GENERATOR_PORT", "4200")
    assert Settings(_env_file=None).GEN_PORT == 4200
    clean_env.setenv("GEN_PORT", "4300")
    assert Settings(_env_file=None).GEN_PORT == 4300


def test_empty_port_falls_through_to_legacy(clean_env):
    clean_env.setenv("GEN_PORT", "")
    clean_env.setenv("GENERATOR_PORT", "4200")
    assert Settings(_env_file=None).GEN_PORT == 4200


def test_malformed_values_fall_back(clean_env):
    clean_env.setenv("GEN_PORT", "http")
    clean_env.setenv("GEN_AMPLITUDE", "loud")
    clean_env.setenv("GEN_WAVEFORM", "noise")
    clean_env.setenv("GEN_PERIOD_SEC", "-2")
    clean_env.setenv("GEN_SINE_STEP", "nan")
    s = Settings(_env_file=None)
    assert s.GEN_PORT == 3000
    assert s.GEN_AMPLITUDE == 100.0
    assert s.GEN_WAVEFORM == "sine"
    assert s.GEN_PERIOD_SEC == 1.0
    assert s.GEN_SINE_STEP == math.pi / 8


def test_out_of_range_port_falls_back(clean_env):
    clean_env.setenv("GEN_PORT", "70000")
    assert Settings(_env_file=None).GEN_PORT == 3000


def test_amplitude_is_single_precision(clean_env):
    clean_env.setenv("GEN_AMPLITUDE", "0.1")
    amp = Settings(_env_file=None).GEN_AMPLITUDE
    assert amp == struct.unpack("f", struct.pack("f", 0.1))[0]
    assert amp != 0.1
    clean_env.setenv("GEN_AMPLITUDE", "12.5")
    assert Settings(_env_file=None).GEN_AMPLITUDE == 12.5


def test_amplitude_beyond_float32_falls_back(clean_env):
    clean_env.setenv("GEN_AMPLITUDE", "1e39")
    assert Settings(_env_file=None).GEN_AMPLITUDE == 100.0
