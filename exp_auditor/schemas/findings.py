"""
Risk finding schemas produced by the risk engine.
"""
import enum
from typing import Tuple

from pydantic import BaseModel


class RiskCategory(str, enum.Enum):
    """Coarse grouping of a finding's nature."""
    EXPOSURE_RISK = "exposure_risk"
    SECURITY_FEATURE_DISABLED = "security_feature_disabled"
    NETWORK_MISCONFIGURATION = "network_misconfiguration"
    BEST_PRACTICE_VIOLATION = "best_practice_violation"


class RiskSeverity(str, enum.Enum):
    """Risk severity levels."""
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class RiskType(str, enum.Enum):
    """Stable risk codes consumed by reporting and ticketing."""
    OPEN_INBOUND = "OPEN_INBOUND"
    ANY_ANY_RULE = "ANY_ANY_RULE"
    GUEST_NOT_ISOLATED = "GUEST_NOT_ISOLATED"
    DHCP_ON_WAN = "DHCP_ON_WAN"
    WAN_MANAGEMENT_ENABLED = "WAN_MANAGEMENT_ENABLED"
    ADMIN_NO_MFA = "ADMIN_NO_MFA"
    DEFAULT_ADMIN_USERNAME = "DEFAULT_ADMIN_USERNAME"
    DEFAULT_ADMIN_PORT = "DEFAULT_ADMIN_PORT"
    SSH_ON_WAN = "SSH_ON_WAN"
    IPS_DISABLED = "IPS_DISABLED"
    GAV_DISABLED = "GAV_DISABLED"
    DPI_SSL_DISABLED = "DPI_SSL_DISABLED"
    BOTNET_FILTER_DISABLED = "BOTNET_FILTER_DISABLED"
    APP_CONTROL_DISABLED = "APP_CONTROL_DISABLED"
    CONTENT_FILTER_DISABLED = "CONTENT_FILTER_DISABLED"
    RULE_NO_DESCRIPTION = "RULE_NO_DESCRIPTION"
    VPN_WEAK_ENCRYPTION = "VPN_WEAK_ENCRYPTION"
    VPN_PSK_ONLY = "VPN_PSK_ONLY"
    OUTDATED_FIRMWARE = "OUTDATED_FIRMWARE"
    NO_NTP = "NO_NTP"


class ConfigRisk(BaseModel):
    """Structured configuration risk from the rule catalog."""
    risk_category: RiskCategory
    risk_type: RiskType
    severity: RiskSeverity
    description: str
    remediation: str
    affected_objects: Tuple[str, ...] = ()  # e.g., ("Rule:Allow-Web",)

    model_config = {"frozen": True}
