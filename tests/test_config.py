"""Tests for v2xsim.config: environment-driven defaults."""

import pytest

from v2xsim import schema
from v2xsim.config import DEFAULT_IP, DEFAULT_PORT, Settings
from v2xsim.schema import Vehicle

pytestmark = pytest.mark.unit


class TestSettings:
    def test_defaults(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        s = Settings()
        assert s.frequency == 10
        assert s.repeat == 1
        assert s.output_format == "csv"
        assert s.default_ip == DEFAULT_IP == "127.0.0.1"
        assert s.default_port == DEFAULT_PORT == 2021
        assert s.verbose is False

    def test_environment_overrides(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("V2XSIM_FREQUENCY", "20")
        monkeypatch.setenv("V2XSIM_OUTPUT_FORMAT", "json")
        monkeypatch.setenv("v2xsim_verbose", "true")
        s = Settings()
        assert s.frequency == 20
        assert s.output_format == "json"
        assert s.verbose is True

    def test_dotenv_file(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        (tmp_path / ".env").write_text("V2XSIM_REPEAT=4\nUNRELATED=1\n")
        assert Settings().repeat == 4

    def test_vehicle_defaults_follow_environment(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("V2XSIM_DEFAULT_IP", "10.0.0.7")
        monkeypatch.setenv("V2XSIM_DEFAULT_PORT", "2999")
        monkeypatch.setattr(schema, "settings", Settings())

        vehicle = Vehicle.model_validate({"id": "v1", "ip": "", "port": None})
        assert vehicle.ip == "10.0.0.7"
        assert vehicle.port == 2999
        assert Vehicle(id="v2").port == 2999
        assert Vehicle(id="v3", ip="192.168.1.5", port=4000).port == 4000
