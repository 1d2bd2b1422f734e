"""
Tests for the end-to-end audit of configuration text.
"""
import json

from exp_auditor import audit_config_text
from exp_auditor.schemas.findings import RiskType


RISKY_CONFIG = """
firmware version 6.2.9.1-20n
hostname branch-fw

interface X0 zone WAN ip 203.0.113.1 dhcp server enable
interface X1 zone LAN ip 192.168.1.1

access-rule name "Inbound-Any" from WAN to LAN source any destination any service any action allow
access-rule name "Guest-LAN" from GUEST to LAN source any destination 192.168.1.10 action allow comment "temporary"

admin username admin
wan management enable
ssh enable

vpn policy "Weak-VPN" encryption 3des auth psk
"""


def test_audit_safe_config(safe_config_text, as_of):
    result = audit_config_text(safe_config_text, as_of=as_of)
    assert result.risk_score == 100
    assert result.total_findings == 0
    assert result.findings == []
    assert result.breakdown.critical == 0
    assert result.summary == "No security issues detected. Configuration appears secure."
    assert result.parsed_config.system_settings.hostname == "fw-hq-01"


def test_audit_risky_config(as_of):
    result = audit_config_text(RISKY_CONFIG, as_of=as_of)
    types = [risk.risk_type for risk in result.findings]

    assert types[:6] == [
        RiskType.OPEN_INBOUND,
        RiskType.ANY_ANY_RULE,
        RiskType.GUEST_NOT_ISOLATED,
        RiskType.DHCP_ON_WAN,
        RiskType.WAN_MANAGEMENT_ENABLED,
        RiskType.ADMIN_NO_MFA,
    ]
    assert RiskType.SSH_ON_WAN in types
    assert RiskType.VPN_WEAK_ENCRYPTION in types
    assert RiskType.VPN_PSK_ONLY in types
    assert RiskType.OUTDATED_FIRMWARE in types
    assert RiskType.NO_NTP in types
    assert types.count(RiskType.RULE_NO_DESCRIPTION) == 1

    assert result.total_findings == len(result.findings)
    breakdown = result.breakdown
    assert breakdown.critical + breakdown.high + breakdown.medium + breakdown.low == result.total_findings
    assert result.risk_score == 0
    assert result.summary.startswith(f"Found {result.total_findings} security finding(s)")


def test_audit_accepts_bytes(as_of):
    result = audit_config_text(b"ips enable\n\xff\xfe\n", as_of=as_of)
    assert result.parsed_config.security_settings.ips_enabled is True


def test_audit_result_serializes_to_json(as_of):
    result = audit_config_text(RISKY_CONFIG, as_of=as_of)
    payload = json.loads(result.model_dump_json())
    assert payload["findings"][0]["risk_type"] == "OPEN_INBOUND"
    assert payload["findings"][0]["severity"] == "critical"
    assert payload["findings"][0]["affected_objects"] == ["Rule:Inbound-Any"]
    assert payload["parsed_config"]["rules"][0]["rule_name"] == "Inbound-Any"
