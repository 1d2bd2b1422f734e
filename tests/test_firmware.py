"""
Tests for firmware age heuristics and the OUTDATED_FIRMWARE rule.
"""
from datetime import date
from unittest.mock import patch

import pytest

from exp_auditor.schemas.findings import RiskType
from exp_auditor.services.audit_service import analyze_config
from exp_auditor.utils.firmware import (
    extract_firmware_date,
    has_deprecation_keyword,
    is_known_old_version,
    months_between,
    subtract_months,
)


@pytest.mark.parametrize("version,expected", [
    ("7.0.1-5050 (2023-06-15)", date(2023, 6, 15)),
    ("SonicOS 7.1.1 build 2024/01/05", date(2024, 1, 5)),
    ("7.0.1 released Jun 2023", date(2023, 6, 1)),
    ("7.0.1 September 2025", date(2025, 9, 1)),
    ("7.0.1-R20230615", date(2023, 6, 15)),
    ("7.0.1-5050", None),
    ("7.0.1 2023-13-45", None),
    ("", None),
])
def test_extract_firmware_date(version, expected):
    assert extract_firmware_date(version) == expected


@pytest.mark.parametrize("version,old", [
    ("5.9.1.7", True),
    ("SonicOS 6.2.9.1-20n", True),
    ("6.4.0.0", True),
    ("6.5.4.4-44n", False),
    ("7.0.1-5050", False),
    ("v6.1", True),
    ("unknown", False),
])
def test_is_known_old_version(version, old):
    assert is_known_old_version(version) is old


def test_deprecation_keywords():
    assert has_deprecation_keyword("7.0.1 LEGACY branch")
    assert has_deprecation_keyword("deprecated-7.0")
    assert not has_deprecation_keyword("7.0.1-5050")


def test_subtract_months_clamps_to_month_end():
    assert subtract_months(date(2026, 10, 19), 6) == date(2026, 4, 19)
    assert subtract_months(date(2026, 8, 31), 6) == date(2026, 2, 28)
    assert subtract_months(date(2026, 3, 15), 3) == date(2025, 12, 15)


def test_months_between():
    assert months_between(date(2026, 1, 1), date(2026, 7, 1)) == 6
    assert months_between(date(2026, 7, 1), date(2026, 1, 1)) == 0


def _firmware_risks(safe_config, as_of, version):
    system = safe_config.system_settings.model_copy(update={"firmware_version": version})
    risks = analyze_config(safe_config.model_copy(update={"system_settings": system}), as_of=as_of)
    return [risk for risk in risks if risk.risk_type == RiskType.OUTDATED_FIRMWARE]


def test_old_build_date_is_outdated(safe_config, as_of):
    risks = _firmware_risks(safe_config, as_of, "7.0.1-5050 (2025-01-10)")
    assert len(risks) == 1
    assert "2025-01-10" in risks[0].remediation


def test_recent_build_date_is_not_outdated(safe_config, as_of):
    assert _firmware_risks(safe_config, as_of, "7.1.2 build 2026-09-01") == []


def test_all_signals_produce_single_finding(safe_config, as_of):
    risks = _firmware_risks(safe_config, as_of, "6.2.9 legacy 2019-03-01")
    assert len(risks) == 1
    assert risks[0].affected_objects == ("Firmware:6.2.9 legacy 2019-03-01",)


def test_known_old_version_without_date(safe_config, as_of):
    assert len(_firmware_risks(safe_config, as_of, "SonicOS 5.9.1.7")) == 1


def test_empty_firmware_is_not_reported(safe_config, as_of):
    assert _firmware_risks(safe_config, as_of, "") == []


def test_age_threshold_follows_settings(safe_config, as_of):
    version = "7.1.2 build 2026-07-01"
    assert _firmware_risks(safe_config, as_of, version) == []
    with patch("exp_auditor.services.risk_rules.settings.FIRMWARE_MAX_AGE_MONTHS", 2):
        assert len(_firmware_risks(safe_config, as_of, version)) == 1
