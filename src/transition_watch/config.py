"""Configuración validada del monitor de transición.

Validated transition monitor configuration.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from transition_watch.core.models import BURN_ADDRESS as DEFAULT_BURN_ADDRESS
from transition_watch.core.models import MonitorConfig, Window

_ENV_PATH = Path(".env")
_ENV_LOCAL_PATH = Path(".env.local")
load_dotenv(_ENV_PATH, override=False)
load_dotenv(_ENV_LOCAL_PATH, override=False)

DEFAULT_INFO_URL = "https://api.zeromox.com/api/info"
# Heartbeats before this height are pre-fix false positives.
DEFAULT_ONLINE_FLOOR_BLOCK_HEIGHT = 3451680
DEFAULT_WINDOW_LENGTH = 1440
DEFAULT_FIRST_WINDOW_START = 3456000
DEFAULT_WINDOW_COUNT = 6

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")

logger = logging.getLogger(__name__)


class ConfigError(ValueError):
    """Configuración inválida.

    English: Invalid configuration.
    """


class WindowConfig(BaseModel):
    """Ventana de alturas de bloque configurada.

    English: Configured block-height window.
    """

    start: int = Field(ge=0)
    end: int = Field(ge=0)

    @model_validator(mode="after")
    def end_not_before_start(self) -> "WindowConfig":
        if self.end < self.start:
            raise ValueError(f"window end ({self.end}) is before start ({self.start})")
        return self


def default_windows() -> List[WindowConfig]:
    return [
        WindowConfig(
            start=DEFAULT_FIRST_WINDOW_START + index * DEFAULT_WINDOW_LENGTH,
            end=DEFAULT_FIRST_WINDOW_START + (index + 1) * DEFAULT_WINDOW_LENGTH,
        )
        for index in range(DEFAULT_WINDOW_COUNT)
    ]


class MonitorSettings(BaseSettings):
    """Variables de entorno, .env y YAML para el monitor.

    English: Environment variables, .env and YAML for the monitor.
    """

    model_config = SettingsConfigDict(
        env_prefix="TRANSITION_WATCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    BURN_ADDRESS: str = DEFAULT_BURN_ADDRESS
    ONLINE_FLOOR_BLOCK_HEIGHT: int = Field(default=DEFAULT_ONLINE_FLOOR_BLOCK_HEIGHT, ge=0)
    WINDOWS: List[WindowConfig] = Field(default_factory=default_windows)
    FRESH_THRESHOLD_HOURS: float = Field(default=3.0, gt=0)
    STALE_THRESHOLD_HOURS: float = Field(default=6.0, gt=0)
    INFO_URL: str = DEFAULT_INFO_URL
    POLL_INTERVAL_SECONDS: int = Field(default=60, ge=1)
    TIMEOUT_SECONDS: float = Field(default=10.0, gt=0)
    LOG_LEVEL: str = "INFO"
    LOG_FILE: Optional[Path] = None

    @model_validator(mode="after")
    def stale_after_fresh(self) -> "MonitorSettings":
        if self.STALE_THRESHOLD_HOURS < self.FRESH_THRESHOLD_HOURS:
            raise ValueError("STALE_THRESHOLD_HOURS must not be below FRESH_THRESHOLD_HOURS")
        return self

    def to_monitor_config(self) -> MonitorConfig:
        """Construye la configuración inmutable del núcleo.

        English: Build the immutable core configuration.
        """
        return MonitorConfig(
            windows=tuple(Window(start=item.start, end=item.end) for item in self.WINDOWS),
            online_floor_block_height=self.ONLINE_FLOOR_BLOCK_HEIGHT,
            burn_address=self.BURN_ADDRESS,
            fresh_threshold_hours=self.FRESH_THRESHOLD_HOURS,
            stale_threshold_hours=self.STALE_THRESHOLD_HOURS,
        )


def _settings_key(key: str) -> str:
    """``onlineFloorBlockHeight`` / ``online_floor_block_height`` -> ``ONLINE_FLOOR_BLOCK_HEIGHT``."""
    return _CAMEL_BOUNDARY.sub("_", key).upper()


def _load_yaml_mapping(path: Path) -> Dict[str, Any]:
    """Carga un mapa YAML o lanza un error orientado al usuario.

    English: Load a YAML mapping or raise a user-facing error.
    """
    if not path.exists():
        raise ConfigError(f"Missing configuration file {path.as_posix()}")
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"{path.name} has YAML syntax errors") from exc
    if not isinstance(raw, dict):
        raise ConfigError(f"{path.name} must be a YAML mapping")
    return raw


def load_config(path: Optional[Path] = None) -> MonitorSettings:
    """Carga y valida la configuración, fallando con detalle.

    Las claves del YAML (camelCase o snake_case) tienen prioridad sobre las
    variables de entorno.

    English:
        Load and validate configuration, failing with details.

        YAML keys (camelCase or snake_case) take precedence over environment
        variables.
    """
    overrides: Dict[str, Any] = {}
    if path is not None:
        overrides = {_settings_key(str(key)): value for key, value in _load_yaml_mapping(path).items()}
    try:
        settings = MonitorSettings(**overrides)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
    logger.debug(
        "config_loaded source=%s windows=%d", path.as_posix() if path else "env", len(settings.WINDOWS)
    )
    return settings
