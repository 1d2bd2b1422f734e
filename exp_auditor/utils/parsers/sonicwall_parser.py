"""
SonicWall (.exp export) configuration parser.
"""
import logging
from typing import Dict, List, Optional

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
from exp_auditor.utils.parsers.base_parser import BaseParser
from exp_auditor.utils.parsers.tokens import (
    DISABLE_WORDS,
    ENABLE_WORDS,
    ConfigLine,
    find_state,
    match_anchor,
    parse_port,
    scan_fields,
    value_after,
)

logger = logging.getLogger(__name__)

DEFAULT_HTTPS_ADMIN_PORT = 443

# access-rule name "Allow-Web" from LAN to WAN source any destination any service HTTP action allow comment "..."
RULE_ANCHORS = (("access-rule",), ("firewall-rule",))
RULE_FIELDS = {
    "name": "rule_name",
    "from": "source_zone",
    "source-zone": "source_zone",
    "to": "destination_zone",
    "destination-zone": "destination_zone",
    "source": "source_address",
    "src": "source_address",
    "destination": "destination_address",
    "dest": "destination_address",
    "dst": "destination_address",
    "service": "service",
    "port": "service",
    "action": "action",
    "schedule": "schedule",
    "comment": "comment",
    "description": "comment",
}
RULE_FLAGS = {
    "disable": False,
    "disabled": False,
    "inactive": False,
    "enable": True,
    "enabled": True,
    "active": True,
}
ALLOW_ACTIONS = frozenset({"allow", "accept", "permit"})
DENY_ACTIONS = frozenset({"deny", "drop", "reject", "discard"})

# nat-policy original-source 192.168.1.0/24 translated-source 203.0.113.1 interface X0
NAT_ANCHORS = (("nat-policy",),)
NAT_FIELDS = {
    "original-source": "original_source",
    "orig-src": "original_source",
    "translated-source": "translated_source",
    "trans-src": "translated_source",
    "original-destination": "original_destination",
    "orig-dst": "original_destination",
    "translated-destination": "translated_destination",
    "trans-dst": "translated_destination",
    "interface": "interface",
    "egress-interface": "interface",
}
NAT_ADDRESS_FIELDS = (
    "original_source",
    "translated_source",
    "original_destination",
    "translated_destination",
)

# address-object name "WebServer" ip 192.168.1.100 zone LAN
ADDRESS_ANCHORS = (("address-object",),)
ADDRESS_FIELDS = {
    "name": "object_name",
    "ip": "ip_address",
    "host": "ip_address",
    "address": "ip_address",
    "network": "network",
    "subnet": "network",
    "zone": "zone",
}

# service-object name "HTTP" protocol tcp port 80
SERVICE_ANCHORS = (("service-object",),)
SERVICE_FIELDS = {
    "name": "service_name",
    "protocol": "protocol",
    "proto": "protocol",
    "port": "port_range",
    "ports": "port_range",
    "port-range": "port_range",
}

# Object type words that may sit between the anchor and a positional name
OBJECT_TYPE_WORDS = frozenset({"ipv4", "ipv6", "fqdn", "mac"})

SECURITY_TOGGLES = (
    ("ips_enabled", (("ips",), ("intrusion-prevention",))),
    ("gav_enabled", (("gateway-av",), ("gav",), ("gateway-antivirus",), ("gateway", "anti-virus"))),
    ("anti_spyware_enabled", (("anti-spyware",), ("antispyware",))),
    ("app_control_enabled", (("app-control",), ("application-control",))),
    ("content_filter_enabled", (("content-filter",), ("web-filter",))),
    ("botnet_filter_enabled", (("botnet",), ("botnet-filter",))),
    ("dpi_ssl_enabled", (("dpi-ssl",), ("ssl-inspection",))),
    ("geo_ip_filter_enabled", (("geo-ip",), ("geoip",), ("geo-ip-filter",))),
)

ADMIN_USER_ANCHORS = (
    ("admin", "username"),
    ("admin", "user"),
    ("administrator", "username"),
    ("administrator", "user"),
)
MFA_ANCHORS = (("mfa",), ("two-factor",), ("2fa",))
WAN_MANAGEMENT_ANCHORS = (("wan", "management"), ("wan-management",))
HTTPS_PORT_ANCHORS = (("https", "admin", "port"), ("https", "port"), ("https-admin-port",))
SSH_ANCHORS = (("ssh",),)

# interface X0 zone WAN ip 203.0.113.1 dhcp server enable
INTERFACE_ANCHORS = (("interface",),)
INTERFACE_FIELDS = {
    "zone": "zone",
    "security-zone": "zone",
    "ip": "ip_address",
    "address": "ip_address",
    "ip-address": "ip_address",
}
DHCP_WORDS = frozenset({"dhcp", "dhcp-server"})

# vpn policy "Site-to-Site" encryption aes256 auth certificate
VPN_ANCHORS = (("vpn", "policy"), ("vpn", "tunnel"), ("vpn-policy",))
VPN_FIELDS = {
    "name": "policy_name",
    "encryption": "encryption",
    "cipher": "encryption",
    "auth": "authentication_method",
    "authentication": "authentication_method",
    "auth-method": "authentication_method",
}

FIRMWARE_ANCHORS = (("firmware", "version"), ("firmware-version",))
HOSTNAME_ANCHORS = (("hostname",),)
SYSTEM_NAME_ANCHORS = (("system-name",),)
TIMEZONE_ANCHORS = (("timezone",), ("time-zone",))
NTP_ANCHORS = (("ntp-server",), ("ntp", "server"), ("ntp-servers",))
DNS_ANCHORS = (("dns-server",), ("dns", "server"), ("nameserver",), ("dns-servers",))


def _positional_name(line: ConfigLine, index: int, field_keywords: Dict[str, str]) -> Optional[str]:
    """Name given right after the anchor (``vpn policy "X"``), if any."""
    words = line.words
    if index < len(words) and words[index] in OBJECT_TYPE_WORDS:
        index += 1
    if index < len(words) and words[index] not in field_keywords and line.tokens[index]:
        return line.tokens[index]
    return None


class SonicWallParser(BaseParser):
    """Parser for SonicWall configuration exports."""

    def parse_rules(self) -> List[FirewallRule]:
        """
        Parse access rules.

        Missing zones, addresses and service default to "any"; a missing or
        unrecognized action defaults to "allow".
        """
        rules = []
        for line in self.lines:
            start = match_anchor(line.words, RULE_ANCHORS)
            if start is None:
                continue
            fields, flag = scan_fields(line, start, RULE_FIELDS, RULE_FLAGS)
            action = fields.pop("action", "").lower()
            rules.append(FirewallRule(
                **fields,
                action="deny" if action in DENY_ACTIONS else "allow",
                enabled=flag is not False,
                line_number=line.number,
            ))
        return rules

    def parse_nat_policies(self) -> List[NATPolicy]:
        """Parse NAT policies. Lines carrying no address translation are skipped."""
        policies = []
        for line in self.lines:
            start = match_anchor(line.words, NAT_ANCHORS)
            if start is None:
                continue
            fields, _ = scan_fields(line, start, NAT_FIELDS)
            if not any(name in fields for name in NAT_ADDRESS_FIELDS):
                logger.debug(f"Skipping NAT policy without addresses at line {line.number}")
                continue
            policies.append(NATPolicy(**fields, line_number=line.number))
        return policies

    def parse_address_objects(self) -> List[AddressObject]:
        """Parse address objects."""
        objects = []
        for line in self.lines:
            start = match_anchor(line.words, ADDRESS_ANCHORS)
            if start is None:
                continue
            fields, _ = scan_fields(line, start, ADDRESS_FIELDS)
            if "object_name" not in fields:
                name = _positional_name(line, start, ADDRESS_FIELDS)
                if name is not None:
                    fields["object_name"] = name
            objects.append(AddressObject(**fields, line_number=line.number))
        return objects

    def parse_service_objects(self) -> List[ServiceObject]:
        """Parse service objects. Protocol and ports are not validated."""
        objects = []
        for line in self.lines:
            start = match_anchor(line.words, SERVICE_ANCHORS)
            if start is None:
                continue
            fields, _ = scan_fields(line, start, SERVICE_FIELDS)
            if "service_name" not in fields:
                name = _positional_name(line, start, SERVICE_FIELDS)
                if name is not None:
                    fields["service_name"] = name
            objects.append(ServiceObject(**fields, line_number=line.number))
        return objects

    def parse_security_settings(self) -> SecuritySettings:
        """
        Parse security service toggles (``ips enable``, ``gateway-av disable``, ...).

        A toggle without a recognizable state word is ignored. When a toggle
        appears more than once the last occurrence wins.
        """
        values = {}
        for line in self.lines:
            for field, phrases in SECURITY_TOGGLES:
                start = match_anchor(line.words, phrases)
                if start is None:
                    continue
                state = find_state(line.words, start)
                if state is not None:
                    values[field] = state
        return SecuritySettings(**values)

    def parse_admin_settings(self) -> AdminSettings:
        """Parse admin accounts, MFA, WAN management, HTTPS port and SSH."""
        usernames: List[str] = []
        values = {}
        for line in self.lines:
            words = line.words

            start = match_anchor(words, ADMIN_USER_ANCHORS)
            if start is not None:
                username = value_after(line, start)
                if username and username not in usernames:
                    usernames.append(username)
                continue

            start = match_anchor(words, MFA_ANCHORS)
            if start is not None:
                state = find_state(words, start)
                if state is not None:
                    values["mfa_enabled"] = state
                continue

            start = match_anchor(words, WAN_MANAGEMENT_ANCHORS)
            if start is not None:
                state = find_state(
                    words, start,
                    enable_words=ENABLE_WORDS | {"allow"},
                    disable_words=DISABLE_WORDS | {"deny"},
                )
                if state is not None:
                    values["wan_management_enabled"] = state
                continue

            start = match_anchor(words, HTTPS_PORT_ANCHORS)
            if start is not None:
                values["https_admin_port"] = parse_port(
                    value_after(line, start), DEFAULT_HTTPS_ADMIN_PORT
                )
                continue

            start = match_anchor(words, SSH_ANCHORS)
            if start is not None:
                state = find_state(words, start)
                if state is not None:
                    values["ssh_enabled"] = state

        return AdminSettings(admin_usernames=tuple(usernames), **values)

    def parse_interfaces(self) -> List[InterfaceConfig]:
        """Parse interfaces. Every matching line yields its own entry."""
        interfaces = []
        for line in self.lines:
            start = match_anchor(line.words, INTERFACE_ANCHORS)
            if start is None:
                continue
            if start >= len(line.words) or line.words[start] in INTERFACE_FIELDS:
                continue
            name = line.tokens[start]
            if not name:
                continue
            fields, _ = scan_fields(line, start + 1, INTERFACE_FIELDS)
            interfaces.append(InterfaceConfig(
                interface_name=name,
                dhcp_server_enabled=self._dhcp_server_state(line, start + 1),
                line_number=line.number,
                **fields,
            ))
        return interfaces

    @staticmethod
    def _dhcp_server_state(line: ConfigLine, start: int) -> bool:
        """DHCP server toggle on an interface line; the last mention wins."""
        enabled = False
        words = line.words
        for i in range(start, len(words)):
            if words[i] not in DHCP_WORDS:
                continue
            state = find_state(words, i + 1)
            if state is not None:
                enabled = state
            elif words[i] == "dhcp-server" or "server" in words[i + 1:i + 4]:
                enabled = True
        return enabled

    def parse_vpn_configs(self) -> List[VPNConfig]:
        """Parse VPN policies."""
        configs = []
        for line in self.lines:
            start = match_anchor(line.words, VPN_ANCHORS)
            if start is None:
                continue
            fields, _ = scan_fields(line, start, VPN_FIELDS)
            if "policy_name" not in fields:
                name = _positional_name(line, start, VPN_FIELDS)
                if name is not None:
                    fields["policy_name"] = name
            configs.append(VPNConfig(**fields, line_number=line.number))
        return configs

    def parse_system_settings(self) -> SystemSettings:
        """Parse firmware version, hostname, timezone, NTP and DNS servers."""
        values = {}
        system_name = None
        ntp_servers: List[str] = []
        dns_servers: List[str] = []

        for line in self.lines:
            words = line.words
            for key, phrases in (
                ("firmware_version", FIRMWARE_ANCHORS),
                ("hostname", HOSTNAME_ANCHORS),
                ("timezone", TIMEZONE_ANCHORS),
            ):
                start = match_anchor(words, phrases)
                if start is not None:
                    value = value_after(line, start)
                    if value is not None:
                        values[key] = value

            start = match_anchor(words, SYSTEM_NAME_ANCHORS)
            if start is not None:
                system_name = value_after(line, start) or system_name

            for servers, phrases in ((ntp_servers, NTP_ANCHORS), (dns_servers, DNS_ANCHORS)):
                start = match_anchor(words, phrases)
                if start is not None:
                    server = value_after(line, start)
                    if server and server not in servers:
                        servers.append(server)

        if "hostname" not in values and system_name:
            values["hostname"] = system_name

        return SystemSettings(ntp_servers=tuple(ntp_servers), dns_servers=tuple(dns_servers), **values)
