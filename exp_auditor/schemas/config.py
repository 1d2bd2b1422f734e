"""Schemas for parsed firewall configuration entities."""
from typing import Optional, Tuple

from pydantic import BaseModel


class FirewallRule(BaseModel):
    """Access rule between a source and destination zone."""
    rule_name: Optional[str] = None
    source_zone: str = "any"
    destination_zone: str = "any"
    source_address: str = "any"
    destination_address: str = "any"
    service: str = "any"
    action: str = "allow"  # "allow" / "deny"
    enabled: bool = True
    schedule: Optional[str] = None
    comment: Optional[str] = None
    line_number: Optional[int] = None

    model_config = {"frozen": True}

    @property
    def display_name(self) -> str:
        """Name used in finding text; falls back to the source line."""
        if self.rule_name:
            return self.rule_name
        if self.line_number is not None:
            return f"line {self.line_number}"
        return "unnamed rule"


class NATPolicy(BaseModel):
    """Address translation at a given interface."""
    original_source: Optional[str] = None
    translated_source: Optional[str] = None
    original_destination: Optional[str] = None
    translated_destination: Optional[str] = None
    interface: str = "any"
    line_number: Optional[int] = None

    model_config = {"frozen": True}


class AddressObject(BaseModel):
    """Named host or network."""
    object_name: str = "unknown"
    ip_address: Optional[str] = None
    network: Optional[str] = None
    zone: Optional[str] = None
    line_number: Optional[int] = None

    model_config = {"frozen": True}


class ServiceObject(BaseModel):
    """Named protocol/port pair. Values are kept as raw strings."""
    service_name: str = "unknown"
    protocol: Optional[str] = None
    port_range: Optional[str] = None
    line_number: Optional[int] = None

    model_config = {"frozen": True}


class SecuritySettings(BaseModel):
    """Security service toggles. Absent keywords leave a feature disabled."""
    ips_enabled: bool = False
    gav_enabled: bool = False
    anti_spyware_enabled: bool = False
    app_control_enabled: bool = False
    content_filter_enabled: bool = False
    botnet_filter_enabled: bool = False
    dpi_ssl_enabled: bool = False
    geo_ip_filter_enabled: bool = False

    model_config = {"frozen": True}


class AdminSettings(BaseModel):
    """Management plane settings."""
    admin_usernames: Tuple[str, ...] = ()  # insertion order, no duplicates
    mfa_enabled: bool = False
    wan_management_enabled: bool = False
    https_admin_port: int = 443
    ssh_enabled: bool = False

    model_config = {"frozen": True}


class InterfaceConfig(BaseModel):
    """Interface definition. Interfaces sharing a name are kept as separate entries."""
    interface_name: str
    zone: Optional[str] = None
    ip_address: Optional[str] = None
    dhcp_server_enabled: bool = False
    line_number: Optional[int] = None

    model_config = {"frozen": True}


class VPNConfig(BaseModel):
    """VPN policy."""
    policy_name: str = "unknown"
    encryption: Optional[str] = None
    authentication_method: Optional[str] = None
    line_number: Optional[int] = None

    model_config = {"frozen": True}


class SystemSettings(BaseModel):
    """Device identity and time/name services."""
    firmware_version: str = ""
    hostname: Optional[str] = None
    timezone: Optional[str] = None
    ntp_servers: Tuple[str, ...] = ()
    dns_servers: Tuple[str, ...] = ()

    model_config = {"frozen": True}


class ParsedConfig(BaseModel):
    """Aggregate of everything extracted from one configuration export."""
    rules: Tuple[FirewallRule, ...] = ()
    nat_policies: Tuple[NATPolicy, ...] = ()
    address_objects: Tuple[AddressObject, ...] = ()
    service_objects: Tuple[ServiceObject, ...] = ()
    security_settings: SecuritySettings = SecuritySettings()
    admin_settings: AdminSettings = AdminSettings()
    interfaces: Tuple[InterfaceConfig, ...] = ()
    vpn_configs: Tuple[VPNConfig, ...] = ()
    system_settings: SystemSettings = SystemSettings()

    model_config = {"frozen": True}

    def element_counts(self) -> dict:
        """Count of extracted entities per collection."""
        return {
            "rules": len(self.rules),
            "nat_policies": len(self.nat_policies),
            "address_objects": len(self.address_objects),
            "service_objects": len(self.service_objects),
            "interfaces": len(self.interfaces),
            "vpn_configs": len(self.vpn_configs),
        }
