"""
Service for parsing configuration exports into structured entities.
"""
import logging
from pathlib import Path
from typing import Union

from exp_auditor.schemas.config import ParsedConfig
from exp_auditor.utils.parsers.sonicwall_parser import SonicWallParser

logger = logging.getLogger(__name__)


class ConfigService:
    """Service for configuration parsing."""

    def parse_config(self, config_content: Union[str, bytes]) -> ParsedConfig:
        """
        Parse configuration text and extract all security-relevant elements.

        Never raises on malformed input: unrecognized lines are ignored and
        missing values fall back to field defaults.

        Args:
            config_content: Raw configuration export

        Returns:
            Freshly built, immutable ParsedConfig
        """
        parser = SonicWallParser(config_content)
        parsed_data = parser.parse_all()

        parsed_config = ParsedConfig(
            rules=tuple(parsed_data["rules"]),
            nat_policies=tuple(parsed_data["nat_policies"]),
            address_objects=tuple(parsed_data["address_objects"]),
            service_objects=tuple(parsed_data["service_objects"]),
            security_settings=parsed_data["security_settings"],
            admin_settings=parsed_data["admin_settings"],
            interfaces=tuple(parsed_data["interfaces"]),
            vpn_configs=tuple(parsed_data["vpn_configs"]),
            system_settings=parsed_data["system_settings"],
        )

        counts = parsed_config.element_counts()
        logger.info(f"Parsed config ({len(parser.lines)} lines): {counts['rules']} rules, "
                    f"{counts['nat_policies']} NAT policies, "
                    f"{counts['address_objects']} address objects, "
                    f"{counts['service_objects']} service objects, "
                    f"{counts['interfaces']} interfaces, "
                    f"{counts['vpn_configs']} VPN policies")

        return parsed_config

    def parse_config_file(self, file_path: Union[str, Path]) -> ParsedConfig:
        """
        Read a configuration export from disk and parse it.

        Raises:
            OSError: If the file cannot be read
        """
        path = Path(file_path)
        config_content = path.read_text(encoding="utf-8", errors="ignore")
        logger.debug(f"Read {len(config_content)} characters from {path}")
        return self.parse_config(config_content)


def parse_config(config_content: Union[str, bytes]) -> ParsedConfig:
    """Parse configuration text into a ParsedConfig."""
    return ConfigService().parse_config(config_content)
