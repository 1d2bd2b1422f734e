"""
Base parser class for configuration files.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Union
import logging

from exp_auditor.schemas.config import (
    AddressObject,
    AdminSettings,
    FirewallRule,
    InterfaceConfig,
    NATPolicy,
    SecuritySettings,
    ServiceObject,
    SystemSettings,
    VPNConfig,
)
from exp_auditor.utils.parsers.tokens import normalize_lines

logger = logging.getLogger(__name__)


class BaseParser(ABC):
    """Base class for configuration parsers.

    Each ``parse_*`` method scans the whole normalized line list on its own;
    extractors share no cursor and never raise on unrecognized input.
    """

    def __init__(self, config_content: Union[str, bytes]):
        """
        Initialize parser with config content.

        Args:
            config_content: The configuration file content as string or bytes
        """
        self.lines = normalize_lines(config_content)

    @abstractmethod
    def parse_rules(self) -> List[FirewallRule]:
        """Parse access rules from config."""
        pass

    @abstractmethod
    def parse_nat_policies(self) -> List[NATPolicy]:
        """Parse NAT policies from config."""
        pass

    @abstractmethod
    def parse_address_objects(self) -> List[AddressObject]:
        """Parse address objects from config."""
        pass

    @abstractmethod
    def parse_service_objects(self) -> List[ServiceObject]:
        """Parse service objects from config."""
        pass

    @abstractmethod
    def parse_security_settings(self) -> SecuritySettings:
        """Parse security service toggles from config."""
        pass

    @abstractmethod
    def parse_admin_settings(self) -> AdminSettings:
        """Parse management settings from config."""
        pass

    @abstractmethod
    def parse_interfaces(self) -> List[InterfaceConfig]:
        """Parse network interfaces from config."""
        pass

    @abstractmethod
    def parse_vpn_configs(self) -> List[VPNConfig]:
        """Parse VPN policies from config."""
        pass

    @abstractmethod
    def parse_system_settings(self) -> SystemSettings:
        """Parse firmware, naming and time settings from config."""
        pass

    def parse_all(self) -> Dict[str, Any]:
        """
        Parse all configuration elements.

        Returns:
            Dictionary with parsed elements
        """
        parsed = {
            "rules": self.parse_rules(),
            "nat_policies": self.parse_nat_policies(),
            "address_objects": self.parse_address_objects(),
            "service_objects": self.parse_service_objects(),
            "security_settings": self.parse_security_settings(),
            "admin_settings": self.parse_admin_settings(),
            "interfaces": self.parse_interfaces(),
            "vpn_configs": self.parse_vpn_configs(),
            "system_settings": self.parse_system_settings(),
        }
        for name, value in parsed.items():
            if isinstance(value, list):
                logger.debug(f"{type(self).__name__}.parse_{name}: {len(value)} item(s)")
        return parsed
