"""Tests de carga de configuración."""

import os

import pytest

from common.config import (
    ConfigError,
    load_settings,
    parse_duration,
    settings_from_mapping,
)

_ENV_VARS = (
    "MQTT_BROKER_URL",
    "MQTT_TOPIC",
    "MQTT_USERNAME",
    "MQTT_PASSWORD",
    "SENSOR_TIMEOUT",
    "EXPORTER_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("EXPORTER_ENV_FILE", str(tmp_path / "missing.env"))


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "name: garage\n"
        "broker_url: ssl://mqtt.example.org:8883\n"
        "topic: sensors/\n"
        "client_name: garage-exporter\n"
        "username: exporter\n"
        "password: secret\n"
        "ds18b20_timeout: 1m30s\n",
        encoding="utf-8",
    )
    return path


class TestParseDuration:

    @pytest.mark.parametrize(
        "value, seconds",
        [
            ("60s", 60.0),
            ("1m30s", 90.0),
            ("500ms", 0.5),
            ("2h", 7200.0),
            ("1.5s", 1.5),
            ("0", 0.0),
            ("45", 45.0),
            (30, 30.0),
            (2.5, 2.5),
        ],
    )
    def test_valid(self, value, seconds):
        assert parse_duration(value) == pytest.approx(seconds)

    @pytest.mark.parametrize("value", ["", "abc", "10x", "s", "1m 30s", "-5s", -1, True, None])
    def test_invalid(self, value):
        with pytest.raises(ConfigError):
            parse_duration(value)


class TestLoadSettings:

    def test_reads_yaml(self, config_file):
        settings = load_settings(config_file)

        assert settings.name == "garage"
        assert settings.topic == "sensors"
        assert settings.sensor_timeout == 90.0
        assert settings.eviction_interval == 1.0
        assert settings.broker_host == "mqtt.example.org"
        assert settings.broker_port == 8883
        assert settings.use_tls is True
        assert settings.queue_max_size == 10000
        assert settings.queue_drop_oldest is True
        assert settings.log_level == "INFO"

    def test_env_overrides_yaml(self, config_file, monkeypatch):
        monkeypatch.setenv("MQTT_TOPIC", "other")
        monkeypatch.setenv("SENSOR_TIMEOUT", "10s")

        settings = load_settings(config_file)

        assert settings.topic == "other"
        assert settings.sensor_timeout == 10.0

    def test_dotenv_file(self, config_file, monkeypatch, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("MQTT_USERNAME=from-dotenv\n", encoding="utf-8")
        monkeypatch.setenv("EXPORTER_ENV_FILE", str(env_file))

        try:
            settings = load_settings(config_file)
        finally:
            os.environ.pop("MQTT_USERNAME", None)

        assert settings.username == "from-dotenv"

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="Error reading config file"):
            load_settings(tmp_path / "nope.yaml")

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("topic: [unclosed\n", encoding="utf-8")

        with pytest.raises(ConfigError, match="Error parsing config file"):
            load_settings(path)

    def test_password_masked_in_description(self, config_file):
        described = load_settings(config_file).describe()

        assert described["password"] == "***"
        assert "secret" not in str(described)


class TestSettingsFromMapping:

    def _base(self, **extra):
        data = {"broker_url": "tcp://localhost", "topic": "sensors"}
        data.update(extra)
        return data

    def test_defaults(self):
        settings = settings_from_mapping(self._base())

        assert settings.sensor_timeout == 60.0
        assert settings.broker_port == 1883
        assert settings.use_tls is False
        assert settings.client_cert is None

    @pytest.mark.parametrize(
        "extra",
        [
            {"topic": ""},
            {"topic": "/"},
            {"broker_url": ""},
            {"broker_url": "http://localhost"},
            {"broker_url": "tcp://"},
            {"ds18b20_timeout": "soon"},
            {"eviction_interval": "0s"},
            {"queue_max_size": "many"},
            {"queue_max_size": -1},
            {"log_level": "LOUD"},
        ],
    )
    def test_invalid_values(self, extra):
        with pytest.raises(ConfigError):
            settings_from_mapping(self._base(**extra))

    def test_queue_options(self):
        settings = settings_from_mapping(
            self._base(queue_max_size=0, queue_drop_oldest="false")
        )

        assert settings.queue_max_size == 0
        assert settings.queue_drop_oldest is False
