"""
Built-in risk rule catalog.

Each entry pairs a stable risk code with its category, severity, fixed
description, remediation template and a detector. A detector receives the
parsed config plus the reference date and returns one match per offending
object; a match is a dict of template values and must carry an ``object`` key
naming the affected object. Detectors are independent of each other and never
look at ``FirewallRule.enabled``: a disabled rule is latent risk.
"""
import logging
from datetime import date
from typing import Callable, Dict, List

from pydantic import BaseModel

from exp_auditor.core.config import settings
from exp_auditor.schemas.config import FirewallRule, ParsedConfig
from exp_auditor.schemas.findings import RiskCategory, RiskSeverity, RiskType
from exp_auditor.utils.firmware import (
    extract_firmware_date,
    has_deprecation_keyword,
    is_known_old_version,
    months_between,
    subtract_months,
)

logger = logging.getLogger(__name__)

Match = Dict[str, str]

DEFAULT_ADMIN_USERNAMES = frozenset({"admin", "root", "administrator"})
DEFAULT_HTTPS_ADMIN_PORT = 443
WEAK_VPN_CIPHERS = ("des", "3des")
PSK_AUTH_MARKERS = ("psk", "pre-shared-key", "preshared", "shared-key", "shared-secret")
CERT_AUTH_MARKERS = ("cert", "x509", "rsa")


class RiskRuleDefinition(BaseModel):
    """One row of the risk catalog."""
    risk_type: RiskType
    category: RiskCategory
    severity: RiskSeverity
    description: str
    remediation: str  # str.format template filled from each match
    detector: Callable[[ParsedConfig, date], List[Match]]

    model_config = {"frozen": True}


def _is(value, expected: str) -> bool:
    """Case-insensitive equality for zones and addresses."""
    return value is not None and value.strip().lower() == expected


def _rule_match(rule: FirewallRule) -> Match:
    return {"object": f"Rule:{rule.display_name}", "name": rule.display_name}


def detect_open_inbound(config: ParsedConfig, as_of: date) -> List[Match]:
    return [
        _rule_match(rule) for rule in config.rules
        if rule.action == "allow"
        and _is(rule.source_zone, "wan")
        and _is(rule.destination_zone, "lan")
        and _is(rule.destination_address, "any")
    ]


def detect_any_any_rule(config: ParsedConfig, as_of: date) -> List[Match]:
    return [
        _rule_match(rule) for rule in config.rules
        if rule.action == "allow"
        and _is(rule.source_address, "any")
        and _is(rule.destination_address, "any")
    ]


def detect_guest_not_isolated(config: ParsedConfig, as_of: date) -> List[Match]:
    return [
        _rule_match(rule) for rule in config.rules
        if rule.action == "allow"
        and _is(rule.source_zone, "guest")
        and _is(rule.destination_zone, "lan")
    ]


def detect_dhcp_on_wan(config: ParsedConfig, as_of: date) -> List[Match]:
    return [
        {"object": f"Interface:{iface.interface_name}", "name": iface.interface_name}
        for iface in config.interfaces
        if _is(iface.zone, "wan") and iface.dhcp_server_enabled
    ]


def detect_wan_management(config: ParsedConfig, as_of: date) -> List[Match]:
    if config.admin_settings.wan_management_enabled:
        return [{"object": "AdminSettings:wan_management"}]
    return []


def detect_admin_no_mfa(config: ParsedConfig, as_of: date) -> List[Match]:
    if not config.admin_settings.mfa_enabled:
        return [{"object": "AdminSettings:mfa"}]
    return []


def detect_default_admin_username(config: ParsedConfig, as_of: date) -> List[Match]:
    return [
        {"object": f"AdminUser:{username}", "name": username}
        for username in config.admin_settings.admin_usernames
        if username.strip().lower() in DEFAULT_ADMIN_USERNAMES
    ]


def detect_default_admin_port(config: ParsedConfig, as_of: date) -> List[Match]:
    if config.admin_settings.https_admin_port == DEFAULT_HTTPS_ADMIN_PORT:
        return [{"object": "AdminSettings:https_admin_port", "port": str(DEFAULT_HTTPS_ADMIN_PORT)}]
    return []


def detect_ssh_on_wan(config: ParsedConfig, as_of: date) -> List[Match]:
    if not config.admin_settings.ssh_enabled:
        return []
    wan_interfaces = [iface.interface_name for iface in config.interfaces if _is(iface.zone, "wan")]
    if not wan_interfaces:
        return []
    return [{"object": "AdminSettings:ssh", "interfaces": ", ".join(wan_interfaces)}]


def _feature_disabled(flag: str, label: str) -> Callable[[ParsedConfig, date], List[Match]]:
    """Detector for a security service that is switched off."""

    def detect(config: ParsedConfig, as_of: date) -> List[Match]:
        if getattr(config.security_settings, flag):
            return []
        return [{"object": f"SecuritySettings:{flag}", "feature": label}]

    detect.__name__ = f"detect_{flag.replace('_enabled', '')}_disabled"
    return detect


def detect_rule_no_description(config: ParsedConfig, as_of: date) -> List[Match]:
    return [
        _rule_match(rule) for rule in config.rules
        if not rule.comment or not rule.comment.strip()
    ]


def detect_vpn_weak_encryption(config: ParsedConfig, as_of: date) -> List[Match]:
    matches = []
    for vpn in config.vpn_configs:
        encryption = (vpn.encryption or "").lower()
        if any(cipher in encryption for cipher in WEAK_VPN_CIPHERS):
            matches.append({
                "object": f"VPN:{vpn.policy_name}",
                "name": vpn.policy_name,
                "encryption": vpn.encryption,
            })
    return matches


def detect_vpn_psk_only(config: ParsedConfig, as_of: date) -> List[Match]:
    matches = []
    for vpn in config.vpn_configs:
        auth = (vpn.authentication_method or "").lower()
        uses_psk = any(marker in auth for marker in PSK_AUTH_MARKERS)
        uses_cert = any(marker in auth for marker in CERT_AUTH_MARKERS)
        if uses_psk and not uses_cert:
            matches.append({"object": f"VPN:{vpn.policy_name}", "name": vpn.policy_name})
    return matches


def detect_outdated_firmware(config: ParsedConfig, as_of: date) -> List[Match]:
    version = config.system_settings.firmware_version.strip()
    if not version:
        return []

    reasons = []
    released = extract_firmware_date(version)
    if released and released < subtract_months(as_of, settings.FIRMWARE_MAX_AGE_MONTHS):
        reasons.append(f"build date {released.isoformat()} is about "
                       f"{months_between(released, as_of)} months old")
    if is_known_old_version(version):
        reasons.append("release train is no longer current")
    if has_deprecation_keyword(version):
        reasons.append("version is marked legacy/deprecated")

    if not reasons:
        return []
    return [{"object": f"Firmware:{version}", "version": version, "reason": "; ".join(reasons)}]


def detect_no_ntp(config: ParsedConfig, as_of: date) -> List[Match]:
    if not config.system_settings.ntp_servers:
        return [{"object": "SystemSettings:ntp_servers"}]
    return []


RISK_RULES: List[RiskRuleDefinition] = [
    RiskRuleDefinition(
        risk_type=RiskType.OPEN_INBOUND,
        category=RiskCategory.EXPOSURE_RISK,
        severity=RiskSeverity.CRITICAL,
        description="Unrestricted WAN to LAN access rule detected",
        remediation='Restrict the destination address of rule "{name}" to specific hosts or networks. '
                    "Never allow unrestricted access from WAN to LAN.",
        detector=detect_open_inbound,
    ),
    RiskRuleDefinition(
        risk_type=RiskType.ANY_ANY_RULE,
        category=RiskCategory.NETWORK_MISCONFIGURATION,
        severity=RiskSeverity.HIGH,
        description="Overly permissive any-to-any rule detected",
        remediation='Replace rule "{name}" with rules scoped to specific sources and destinations. '
                    "Follow the principle of least privilege.",
        detector=detect_any_any_rule,
    ),
    RiskRuleDefinition(
        risk_type=RiskType.GUEST_NOT_ISOLATED,
        category=RiskCategory.NETWORK_MISCONFIGURATION,
        severity=RiskSeverity.HIGH,
        description="Guest network not properly isolated from LAN",
        remediation='Remove rule "{name}" or change its action to deny. '
                    "Guest networks should only have internet access.",
        detector=detect_guest_not_isolated,
    ),
    RiskRuleDefinition(
        risk_type=RiskType.DHCP_ON_WAN,
        category=RiskCategory.NETWORK_MISCONFIGURATION,
        severity=RiskSeverity.CRITICAL,
        description="DHCP server enabled on WAN interface",
        remediation='Disable the DHCP server on WAN interface "{name}". '
                    "DHCP should only be served on internal networks (LAN, DMZ).",
        detector=detect_dhcp_on_wan,
    ),
    RiskRuleDefinition(
        risk_type=RiskType.WAN_MANAGEMENT_ENABLED,
        category=RiskCategory.EXPOSURE_RISK,
        severity=RiskSeverity.CRITICAL,
        description="WAN management access enabled - exposes admin interface to internet",
        remediation="Disable WAN management access. Admin interfaces should only be reachable "
                    "from trusted internal networks; use VPN for remote management.",
        detector=detect_wan_management,
    ),
    RiskRuleDefinition(
        risk_type=RiskType.ADMIN_NO_MFA,
        category=RiskCategory.BEST_PRACTICE_VIOLATION,
        severity=RiskSeverity.HIGH,
        description="Multi-factor authentication not enabled for admin accounts",
        remediation="Enable multi-factor authentication (MFA) for all admin accounts.",
        detector=detect_admin_no_mfa,
    ),
    RiskRuleDefinition(
        risk_type=RiskType.DEFAULT_ADMIN_USERNAME,
        category=RiskCategory.BEST_PRACTICE_VIOLATION,
        severity=RiskSeverity.MEDIUM,
        description="Default admin username detected - should be renamed",
        remediation='Rename the default admin username "{name}" to a unique, non-obvious username. '
                    "Default usernames are the first target of brute-force attacks.",
        detector=detect_default_admin_username,
    ),
    RiskRuleDefinition(
        risk_type=RiskType.DEFAULT_ADMIN_PORT,
        category=RiskCategory.BEST_PRACTICE_VIOLATION,
        severity=RiskSeverity.LOW,
        description="Default HTTPS admin port in use - consider changing",
        remediation="Move the HTTPS admin port from the default {port} to a non-standard port "
                    "(e.g., 8443) to reduce automated scanning.",
        detector=detect_default_admin_port,
    ),
    RiskRuleDefinition(
        risk_type=RiskType.SSH_ON_WAN,
        category=RiskCategory.EXPOSURE_RISK,
        severity=RiskSeverity.HIGH,
        description="SSH management enabled on WAN interface",
        remediation="Disable SSH management on WAN interface(s) {interfaces}. "
                    "Restrict SSH to trusted internal networks and use VPN for remote access.",
        detector=detect_ssh_on_wan,
    ),
    RiskRuleDefinition(
        risk_type=RiskType.IPS_DISABLED,
        category=RiskCategory.SECURITY_FEATURE_DISABLED,
        severity=RiskSeverity.CRITICAL,
        description="Intrusion Prevention System is disabled",
        remediation="Enable {feature} to block network-based attacks and exploits.",
        detector=_feature_disabled("ips_enabled", "Intrusion Prevention (IPS)"),
    ),
    RiskRuleDefinition(
        risk_type=RiskType.GAV_DISABLED,
        category=RiskCategory.SECURITY_FEATURE_DISABLED,
        severity=RiskSeverity.CRITICAL,
        description="Gateway Anti-Virus is disabled",
        remediation="Enable {feature} to stop malware at the network gateway.",
        detector=_feature_disabled("gav_enabled", "Gateway Anti-Virus (GAV)"),
    ),
    RiskRuleDefinition(
        risk_type=RiskType.DPI_SSL_DISABLED,
        category=RiskCategory.SECURITY_FEATURE_DISABLED,
        severity=RiskSeverity.MEDIUM,
        description="DPI-SSL is disabled - encrypted traffic not inspected",
        remediation="Enable {feature} so threats inside TLS connections are inspected.",
        detector=_feature_disabled("dpi_ssl_enabled", "DPI-SSL"),
    ),
    RiskRuleDefinition(
        risk_type=RiskType.BOTNET_FILTER_DISABLED,
        category=RiskCategory.SECURITY_FEATURE_DISABLED,
        severity=RiskSeverity.HIGH,
        description="Botnet Filter is disabled",
        remediation="Enable {feature} to block command-and-control traffic from infected hosts.",
        detector=_feature_disabled("botnet_filter_enabled", "Botnet Filter"),
    ),
    RiskRuleDefinition(
        risk_type=RiskType.APP_CONTROL_DISABLED,
        category=RiskCategory.SECURITY_FEATURE_DISABLED,
        severity=RiskSeverity.MEDIUM,
        description="Application Control is disabled",
        remediation="Enable {feature} to monitor and restrict application usage.",
        detector=_feature_disabled("app_control_enabled", "Application Control"),
    ),
    RiskRuleDefinition(
        risk_type=RiskType.CONTENT_FILTER_DISABLED,
        category=RiskCategory.SECURITY_FEATURE_DISABLED,
        severity=RiskSeverity.MEDIUM,
        description="Content Filtering is disabled",
        remediation="Enable {feature} to block malicious and policy-violating websites.",
        detector=_feature_disabled("content_filter_enabled", "Content Filtering"),
    ),
    RiskRuleDefinition(
        risk_type=RiskType.RULE_NO_DESCRIPTION,
        category=RiskCategory.BEST_PRACTICE_VIOLATION,
        severity=RiskSeverity.LOW,
        description="Firewall rule missing description",
        remediation='Add a description to firewall rule "{name}" documenting its purpose '
                    "and business justification.",
        detector=detect_rule_no_description,
    ),
    RiskRuleDefinition(
        risk_type=RiskType.VPN_WEAK_ENCRYPTION,
        category=RiskCategory.SECURITY_FEATURE_DISABLED,
        severity=RiskSeverity.HIGH,
        description="VPN using weak encryption algorithm",
        remediation='VPN policy "{name}" uses weak encryption "{encryption}". '
                    "Upgrade to AES-256 or AES-128.",
        detector=detect_vpn_weak_encryption,
    ),
    RiskRuleDefinition(
        risk_type=RiskType.VPN_PSK_ONLY,
        category=RiskCategory.BEST_PRACTICE_VIOLATION,
        severity=RiskSeverity.MEDIUM,
        description="VPN using PSK only - consider certificate-based authentication",
        remediation='VPN policy "{name}" authenticates with a pre-shared key only. '
                    "Move to certificate-based authentication.",
        detector=detect_vpn_psk_only,
    ),
    RiskRuleDefinition(
        risk_type=RiskType.OUTDATED_FIRMWARE,
        category=RiskCategory.BEST_PRACTICE_VIOLATION,
        severity=RiskSeverity.MEDIUM,
        description="Firmware version outdated - update recommended",
        remediation='Firmware "{version}" looks outdated ({reason}). '
                    "Update to the latest release to pick up security fixes.",
        detector=detect_outdated_firmware,
    ),
    RiskRuleDefinition(
        risk_type=RiskType.NO_NTP,
        category=RiskCategory.BEST_PRACTICE_VIOLATION,
        severity=RiskSeverity.LOW,
        description="NTP not configured - time synchronization required for accurate logging",
        remediation="Configure at least one NTP server so log timestamps can be correlated.",
        detector=detect_no_ntp,
    ),
]
