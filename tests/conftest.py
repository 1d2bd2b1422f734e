"""
Pytest configuration and fixtures.
"""
import logging
from datetime import date

import pytest

from exp_auditor.schemas.config import (
    AdminSettings,
    ParsedConfig,
    SecuritySettings,
    SystemSettings,
)

# Fixed reference date so firmware age checks are reproducible
AS_OF = date(2026, 10, 19)


# Export with every security service on and hardened management settings
SAFE_CONFIG_TEXT = """
# Hardened reference export
hostname fw-hq-01
firmware version 7.0.1-5050
timezone UTC
ntp-server pool.ntp.org
dns-server 1.1.1.1

ips enable
gateway-av enable
anti-spyware enable
app-control enable
content-filter enable
botnet enable
dpi-ssl enable
geo-ip enable

admin username fwops
mfa enable
wan management disable
https admin port 8443
ssh disable

interface X0 zone LAN ip 192.168.1.1
interface X1 zone WAN ip 203.0.113.1
"""


@pytest.fixture
def as_of():
    """Reference date for firmware age checks."""
    return AS_OF


@pytest.fixture
def safe_config():
    """ParsedConfig that triggers no findings."""
    return ParsedConfig(
        security_settings=SecuritySettings(
            ips_enabled=True,
            gav_enabled=True,
            anti_spyware_enabled=True,
            app_control_enabled=True,
            content_filter_enabled=True,
            botnet_filter_enabled=True,
            dpi_ssl_enabled=True,
            geo_ip_filter_enabled=True,
        ),
        admin_settings=AdminSettings(
            admin_usernames=["fwops"],
            mfa_enabled=True,
            https_admin_port=8443,
        ),
        system_settings=SystemSettings(
            firmware_version="7.0.1-5050",
            ntp_servers=["pool.ntp.org"],
        ),
    )


@pytest.fixture
def safe_config_text():
    """Raw export text equivalent to a hardened device."""
    return SAFE_CONFIG_TEXT


@pytest.fixture(autouse=True)
def reset_logging_handlers():
    """Drop handlers installed by setup_logging so captured streams do not leak between tests."""
    yield
    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, "_exp_auditor_handler", False):
            root.removeHandler(handler)
            handler.close()
