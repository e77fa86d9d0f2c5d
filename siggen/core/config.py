import math
import struct
from typing import Any, Optional

from pydantic import AliasChoices, Field, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

WAVEFORMS = ("sine", "square", "triangle", "sawtooth")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", extra="ignore", env_ignore_empty=True
    )

    # ── Stream listener ───────────────────────────────────────
    # GENERATOR_PORT is the legacy name, still honoured when GEN_PORT is unset.
    GEN_PORT: int = Field(
        default=3000, validation_alias=AliasChoices("GEN_PORT", "GENERATOR_PORT")
    )
    GEN_HOST: str = ""

    # ── Signal ────────────────────────────────────────────────
    GEN_WAVEFORM: str = "sine"
    GEN_AMPLITUDE: float = 100.0
    GEN_SINE_STEP: float = math.pi / 8
    GEN_PERIOD_SEC: float = 1.0

    # ── Status API ────────────────────────────────────────────
    API_PREFIX: str = "/api/v1"
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000
    LOG_LEVEL: str = "INFO"

    # Bad values fall back to the defaults above instead of failing startup.

    @field_validator("GEN_PORT", "API_PORT", mode="before")
    @classmethod
    def _port_or_default(cls, v: Any, info: ValidationInfo) -> Any:
        default = cls.model_fields[info.field_name].default
        try:
            port = int(str(v).strip())
        except (TypeError, ValueError):
            return default
        return port if 0 <= port <= 65535 else default

    @field_validator("GEN_AMPLITUDE", mode="before")
    @classmethod
    def _amplitude_or_default(cls, v: Any) -> Any:
        # Parsed at single precision; beyond float32 range falls back to the default.
        try:
            value = float(str(v).strip())
            value = struct.unpack("f", struct.pack("f", value))[0]
        except (TypeError, ValueError, OverflowError, struct.error):
            return 100.0
        return value if math.isfinite(value) else 100.0

    @field_validator("GEN_SINE_STEP", mode="before")
    @classmethod
    def _float_or_default(cls, v: Any, info: ValidationInfo) -> Any:
        default = cls.model_fields[info.field_name].default
        try:
            value = float(str(v).strip())
        except (TypeError, ValueError):
            return default
        return value if math.isfinite(value) else default

    @field_validator("GEN_PERIOD_SEC", mode="before")
    @classmethod
    def _period_or_default(cls, v: Any) -> Any:
        try:
            value = float(str(v).strip())
        except (TypeError, ValueError):
            return 1.0
        return value if math.isfinite(value) and value > 0 else 1.0

    @field_validator("GEN_WAVEFORM", mode="before")
    @classmethod
    def _known_waveform(cls, v: Any) -> str:
        name = str(v).strip()
        return name if name in WAVEFORMS else "sine"

    def listen_host(self) -> Optional[str]:
        """Host for the stream listener; None binds every interface."""
        host = self.GEN_HOST.strip()
        return host or None


settings = Settings()
