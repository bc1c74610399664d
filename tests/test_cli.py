"""Tests del entry point."""

from unittest.mock import patch

import pytest

from temperature_exporter import cli


class TestParseListenAddress:

    @pytest.mark.parametrize(
        "address, expected",
        [
            (":9214", ("0.0.0.0", 9214)),
            ("127.0.0.1:8080", ("127.0.0.1", 8080)),
            ("[::1]:9214", ("::1", 9214)),
        ],
    )
    def test_valid(self, address, expected):
        assert cli.parse_listen_address(address) == expected

    @pytest.mark.parametrize("address", ["9214", "host:", "host:port"])
    def test_invalid(self, address):
        with pytest.raises(ValueError):
            cli.parse_listen_address(address)


def test_defaults():
    args = cli.build_parser().parse_args([])

    assert args.config_file == "config.yaml"
    assert args.listen_address == ":9214"


def test_missing_config_exits_with_error(tmp_path):
    assert cli.main(["--config.file", str(tmp_path / "missing.yaml")]) == 1


def test_receiver_failure_exits_with_error(tmp_path):
    config = tmp_path / "config.yaml"
    config.write_text("broker_url: tcp://localhost\ntopic: sensors\n", encoding="utf-8")

    with patch.object(cli, "ExporterReceiver") as receiver_cls, \
            patch.object(cli, "TemperatureGaugeBinding"), \
            patch.object(cli.uvicorn, "run") as run:
        receiver_cls.return_value.start.return_value = False

        assert cli.main(["--config.file", str(config)]) == 1

    run.assert_not_called()


def test_serves_and_stops_receiver(tmp_path):
    config = tmp_path / "config.yaml"
    config.write_text("broker_url: tcp://localhost\ntopic: sensors\n", encoding="utf-8")

    with patch.object(cli, "ExporterReceiver") as receiver_cls, \
            patch.object(cli, "TemperatureGaugeBinding"), \
            patch.object(cli.uvicorn, "run") as run:
        receiver_cls.return_value.start.return_value = True

        assert cli.main(["--config.file", str(config), "--web.listen-address", ":9999"]) == 0

    assert run.call_args.kwargs["port"] == 9999
    receiver_cls.return_value.stop.assert_called_once()
