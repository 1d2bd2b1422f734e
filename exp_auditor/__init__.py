"""
Firewall configuration export auditor.

Parses vendor configuration exports into structured entities, reports
configuration risks and reduces them to a 0-100 score.
"""
from exp_auditor.schemas.audit import AuditBreakdown, AuditResult
from exp_auditor.schemas.config import ParsedConfig
from exp_auditor.schemas.findings import ConfigRisk, RiskCategory, RiskSeverity, RiskType
from exp_auditor.services.audit_service import analyze_config, audit_config_text, calculate_risk_score
from exp_auditor.services.config_service import parse_config

__version__ = "1.0.0"

__all__ = [
    "AuditBreakdown",
    "AuditResult",
    "ConfigRisk",
    "ParsedConfig",
    "RiskCategory",
    "RiskSeverity",
    "RiskType",
    "analyze_config",
    "audit_config_text",
    "calculate_risk_score",
    "parse_config",
]
