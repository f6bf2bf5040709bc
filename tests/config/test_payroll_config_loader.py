"""Tests for the payroll YAML loader (backoffice_config)."""

from decimal import Decimal

import pytest
import yaml

from backoffice_config import (
    CONFIG_ENV_VAR,
    DEFAULT_CONFIG_PATH,
    compute_checksum,
    get_active_config,
    load_yaml_file,
    parse_payroll_config,
)
from backoffice_kernel.exceptions import ConfigurationError


def _write(tmp_path, data):
    path = tmp_path / "payroll.yaml"
    path.write_text(yaml.safe_dump(data))
    return path


class TestPackagedDefaults:

    def test_defaults_match_reference_rules(self):
        config = get_active_config()
        assert config.pf_rate == Decimal("0.12")
        assert config.present_weight == Decimal("1")
        assert config.half_day_weight == Decimal("0.5")
        assert config.default_department_name == "General"

    def test_default_file_ships(self):
        assert DEFAULT_CONFIG_PATH.is_file()

    def test_emits_config_trace(self, captured_logs):
        get_active_config()
        traces = [r for r in captured_logs() if r["message"] == "PAYROLL_CONFIG_TRACE"]
        assert len(traces) == 1
        assert len(traces[0]["checksum"]) == 64


class TestOverrides:

    def test_explicit_path(self, tmp_path):
        path = _write(tmp_path, {"payroll": {"pf_rate": "0.10", "currency_code": "usd"}})
        config = get_active_config(path)
        assert config.pf_rate == Decimal("0.10")
        assert config.currency_code == "USD"

    def test_env_var(self, tmp_path, monkeypatch):
        path = _write(tmp_path, {"payroll": {"default_department_name": "Unassigned"}})
        monkeypatch.setenv(CONFIG_ENV_VAR, str(path))
        assert get_active_config().default_department_name == "Unassigned"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            get_active_config(tmp_path / "absent.yaml")


class TestParsePayrollConfig:

    def test_bare_section_accepted(self):
        config = parse_payroll_config({"pf_rate": "0.12"})
        assert config.pf_rate == Decimal("0.12")

    def test_attendance_weights_mapped(self):
        config = parse_payroll_config({
            "payroll": {"attendance_weights": {"Present": 1, "half_day": "0.25", "On-Duty": 1}},
        })
        assert config.present_weight == Decimal("1")
        assert config.half_day_weight == Decimal("0.25")
        assert config.extra_presence_weights == {"On-Duty": Decimal("1")}

    def test_float_goes_through_str(self):
        assert parse_payroll_config({"pf_rate": 0.1}).pf_rate == Decimal("0.1")

    @pytest.mark.parametrize("data", [
        {"payroll": {"overtime_rate": "1.5"}},
        {"payroll": {"pf_rate": "twelve"}},
        {"payroll": {"pf_rate": True}},
        {"payroll": {"pf_rate": "2"}},
        {"payroll": {"attendance_weights": ["Present"]}},
        {"payroll": {"default_department_name": 7}},
        {"payroll": {"currency_code": 356}},
        {"payroll": {"pf_rate": "NaN"}},
        {"payroll": {"rounding_quantum": "Infinity"}},
        {"payroll": {"attendance_weights": {"Present": "NaN"}}},
        {"payroll": {"warn_on_excess_attendance": "false"}},
        {"payroll": {"warn_on_excess_attendance": 0}},
        {"payroll": "nope"},
    ])
    def test_invalid(self, data):
        with pytest.raises(ConfigurationError) as exc_info:
            parse_payroll_config(data, source="test.yaml")
        assert exc_info.value.code == "PAYROLL_CONFIG_INVALID"

    def test_yaml_boolean_accepted_quoted_rejected(self, tmp_path):
        path = tmp_path / "payroll.yaml"
        path.write_text("payroll:\n  warn_on_excess_attendance: false\n")
        assert parse_payroll_config(load_yaml_file(path)).warn_on_excess_attendance is False

        path.write_text("payroll:\n  warn_on_excess_attendance: \"false\"\n")
        with pytest.raises(ConfigurationError):
            parse_payroll_config(load_yaml_file(path), source=str(path))

    def test_rounding_quantum_of_ten(self):
        config = parse_payroll_config({"payroll": {"rounding_quantum": 10}})
        assert config.rounding_quantum == Decimal("10")


class TestChecksum:

    def test_deterministic_and_order_free(self):
        assert compute_checksum({"a": 1, "b": 2}) == compute_checksum({"b": 2, "a": 1})

    def test_load_yaml_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_yaml_file(path) == {}
