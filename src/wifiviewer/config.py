"""Application configuration via environment variables and .env file."""

import platform
from pathlib import Path
from typing import Annotated

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode
from pydantic_settings.sources import DotEnvSettingsSource, PydanticBaseSettingsSource

# Path to .env file (patch in tests to use tmp_path / ".env")
_ENV_FILE: Path = Path(".env")

_DEFAULT_AIRPORT_PATH = (
    "/System/Library/PrivateFrameworks/Apple80211.framework"
    "/Versions/Current/Resources/airport"
)

_DEFAULT_FALLBACK_INTERFACES = [
    "wlan0",
    "wlan1",
    "wlp2s0",
    "wlp3s0",
    "wlp4s0",
    "wlp1s0",
    "wlo1",
    "wlx",
    "wifi0",
    "ath0",
    "ra0",
]


class Settings(BaseSettings):
    model_config = {
        "env_prefix": "WIFIVIEWER_",
        "env_file_encoding": "utf-8",
    }

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # Load .env from _ENV_FILE (patchable in tests)
        return (
            init_settings,
            env_settings,
            DotEnvSettingsSource(
                settings_cls,
                env_file=_ENV_FILE,
                env_file_encoding="utf-8",
            ),
            file_secret_settings,
        )

    # Logging
    log_level: str = "info"

    # Timeouts (seconds)
    probe_timeout: float = 5.0  # per external command
    scan_timeout: float | None = 30.0  # whole discovery chain

    # Diagnostics: max characters of stdout/stderr kept per adapter
    diagnostic_excerpt_chars: int = 2000

    # Host paths consulted by the Linux probes
    sys_class_net: Path = Path("/sys/class/net")
    proc_net_wireless: Path = Path("/proc/net/wireless")

    # macOS airport utility
    airport_path: str = _DEFAULT_AIRPORT_PATH

    # Conventional wireless names tried when /sys/class/net has no marker
    # Env: WIFIVIEWER_FALLBACK_INTERFACES="wlan0,wlp2s0"
    fallback_interfaces: Annotated[list[str], NoDecode] = _DEFAULT_FALLBACK_INTERFACES

    # Force a platform ("linux", "darwin", "windows") instead of detecting it
    platform_override: str | None = None

    # Server
    host: str = "127.0.0.1"
    port: int = 8000

    @field_validator("fallback_interfaces", mode="before")
    @classmethod
    def parse_fallback_interfaces(cls, v: object) -> list[str]:
        """Parse comma-separated string or list."""
        if isinstance(v, str):
            return [s.strip() for s in v.split(",") if s.strip()]
        if isinstance(v, list):
            return [s for s in v if s]
        return []

    @field_validator("probe_timeout")
    @classmethod
    def check_probe_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("probe_timeout must be positive")
        return v

    @field_validator("scan_timeout")
    @classmethod
    def check_scan_timeout(cls, v: float | None) -> float | None:
        # None disables the chain budget
        if v is not None and v <= 0:
            raise ValueError("scan_timeout must be positive")
        return v

    def resolve_platform(self) -> str:
        """Return the platform key used to pick probe adapters."""
        if self.platform_override:
            return self.platform_override.strip().lower()
        system = platform.system().lower()
        if system.startswith(("cygwin", "msys")):
            return "windows"
        return system


def load_config() -> Settings:
    """Load configuration from .env and environment (env overrides .env)."""
    return Settings()


settings = Settings()
