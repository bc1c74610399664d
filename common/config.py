from __future__ import annotations

import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional
from urllib.parse import urlsplit

import yaml
from dotenv import load_dotenv


DEFAULT_CONFIG_FILE = "config.yaml"
DEFAULT_SENSOR_TIMEOUT = 60.0
DEFAULT_EVICTION_INTERVAL = 1.0
DEFAULT_QUEUE_MAX_SIZE = 10000

_TLS_SCHEMES = ("ssl", "tls", "mqtts")
_PLAIN_SCHEMES = ("tcp", "mqtt")
_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")

# Unidades aceptadas por time.ParseDuration de Go.
_DURATION_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}
_DURATION_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h)")


class ConfigError(Exception):
    """Configuración ilegible o inválida. Es fatal en el arranque."""


@dataclass(frozen=True)
class Settings:
    name: str
    broker_url: str
    topic: str
    client_name: str
    username: Optional[str]
    password: Optional[str]
    client_cert: Optional[str]
    client_key: Optional[str]
    ca_chain: Optional[str]

    sensor_timeout: float
    eviction_interval: float
    queue_max_size: int
    queue_drop_oldest: bool
    log_level: str

    @property
    def broker_host(self) -> str:
        return urlsplit(self.broker_url).hostname or "localhost"

    @property
    def broker_port(self) -> int:
        parts = urlsplit(self.broker_url)
        if parts.port:
            return parts.port
        return 8883 if self.use_tls else 1883

    @property
    def use_tls(self) -> bool:
        return urlsplit(self.broker_url).scheme.lower() in _TLS_SCHEMES

    def describe(self) -> dict:
        """Vista para el log de arranque (password enmascarado)."""
        return {
            "name": self.name,
            "broker": self.broker_url,
            "topic": self.topic,
            "client_name": self.client_name,
            "username": self.username,
            "password": "***" if self.password else None,
            "sensor_timeout": f"{self.sensor_timeout:g}s",
            "eviction_interval": f"{self.eviction_interval:g}s",
            "queue_max_size": self.queue_max_size,
        }


def parse_duration(value: Any) -> float:
    """Convierte una duración a segundos.

    Acepta números (segundos) y la sintaxis de Go: "60s", "1m30s", "500ms".
    """
    if isinstance(value, bool):
        raise ConfigError(f"Invalid duration: {value!r}")
    if isinstance(value, (int, float)):
        if value < 0:
            raise ConfigError(f"Negative duration: {value!r}")
        return float(value)
    if not isinstance(value, str):
        raise ConfigError(f"Invalid duration: {value!r}")

    text = value.strip()
    if not text:
        raise ConfigError("Empty duration")
    try:
        seconds = float(text)
    except ValueError:
        pass
    else:
        if seconds < 0:
            raise ConfigError(f"Negative duration: {value!r}")
        return seconds

    total = 0.0
    pos = 0
    for match in _DURATION_PART.finditer(text):
        if match.start() != pos:
            raise ConfigError(f"Invalid duration: {value!r}")
        total += float(match.group(1)) * _DURATION_UNITS[match.group(2)]
        pos = match.end()
    if pos != len(text) or pos == 0:
        raise ConfigError(f"Invalid duration: {value!r}")
    return total


def _optional_str(data: dict, key: str) -> Optional[str]:
    value = data.get(key)
    if value is None:
        return None
    candidate = str(value).strip()
    return candidate or None


def _read_int(data: dict, key: str, default: int) -> int:
    value = data.get(key)
    if value is None:
        return default
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{key} must be an integer, got {value!r}")
    if parsed < 0:
        raise ConfigError(f"{key} must be >= 0, got {parsed}")
    return parsed


def _read_bool(data: dict, key: str, default: bool) -> bool:
    value = data.get(key)
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("1", "true", "yes", "on")


def _read_log_level(data: dict) -> str:
    level = (_optional_str(data, "log_level") or "INFO").upper()
    if level not in _LOG_LEVELS:
        raise ConfigError(f"Unknown log_level {level!r}")
    return level


def _validate_broker_url(url: str) -> str:
    parts = urlsplit(url)
    scheme = parts.scheme.lower()
    if scheme not in _TLS_SCHEMES + _PLAIN_SCHEMES:
        raise ConfigError(f"Unsupported broker scheme in {url!r}")
    if not parts.hostname:
        raise ConfigError(f"Broker URL without host: {url!r}")
    try:
        parts.port
    except ValueError:
        raise ConfigError(f"Invalid broker port in {url!r}")
    return url


def _read_yaml(path: Path) -> dict:
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Error reading config file {path}: {e}")

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Error parsing config file {path}: {e}")

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    return data


def _apply_env_overrides(data: dict) -> dict:
    # Las variables de entorno reales tienen prioridad sobre el YAML.
    env_file = os.getenv("EXPORTER_ENV_FILE", ".env")
    if env_file and Path(env_file).exists():
        load_dotenv(env_file, override=False)

    overrides = {
        "broker_url": os.getenv("MQTT_BROKER_URL"),
        "topic": os.getenv("MQTT_TOPIC"),
        "username": os.getenv("MQTT_USERNAME"),
        "password": os.getenv("MQTT_PASSWORD"),
        "ds18b20_timeout": os.getenv("SENSOR_TIMEOUT"),
        "log_level": os.getenv("EXPORTER_LOG_LEVEL"),
    }
    merged = dict(data)
    for key, value in overrides.items():
        if value is not None and value.strip():
            merged[key] = value.strip()
    return merged


def settings_from_mapping(data: dict) -> Settings:
    topic = _optional_str(data, "topic")
    if not topic:
        raise ConfigError("topic is required")
    topic = topic.rstrip("/")
    if not topic:
        raise ConfigError("topic must not be only '/'")

    broker_url = _optional_str(data, "broker_url")
    if not broker_url:
        raise ConfigError("broker_url is required")

    timeout_raw = data.get("ds18b20_timeout")
    sensor_timeout = (
        DEFAULT_SENSOR_TIMEOUT if timeout_raw is None else parse_duration(timeout_raw)
    )

    interval_raw = data.get("eviction_interval")
    eviction_interval = (
        DEFAULT_EVICTION_INTERVAL if interval_raw is None else parse_duration(interval_raw)
    )
    if eviction_interval <= 0:
        raise ConfigError("eviction_interval must be > 0")

    return Settings(
        name=_optional_str(data, "name") or "temperature-exporter",
        broker_url=_validate_broker_url(broker_url),
        topic=topic,
        client_name=_optional_str(data, "client_name") or "temperature-exporter",
        username=_optional_str(data, "username"),
        password=_optional_str(data, "password"),
        client_cert=_optional_str(data, "client_cert"),
        client_key=_optional_str(data, "client_key"),
        ca_chain=_optional_str(data, "ca_chain"),
        sensor_timeout=sensor_timeout,
        eviction_interval=eviction_interval,
        queue_max_size=_read_int(data, "queue_max_size", DEFAULT_QUEUE_MAX_SIZE),
        queue_drop_oldest=_read_bool(data, "queue_drop_oldest", True),
        log_level=_read_log_level(data),
    )


def load_settings(path: str | Path = DEFAULT_CONFIG_FILE) -> Settings:
    data = _read_yaml(Path(path))
    return settings_from_mapping(_apply_env_overrides(data))
