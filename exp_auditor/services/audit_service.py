"""
Audit service: runs the risk catalog over a parsed configuration and scores it.
"""
import logging
from datetime import date
from typing import List, Optional, Union

from exp_auditor.schemas.audit import AuditBreakdown, AuditResult
from exp_auditor.schemas.config import ParsedConfig
from exp_auditor.schemas.findings import ConfigRisk, RiskSeverity
from exp_auditor.services.config_service import ConfigService
from exp_auditor.services.risk_rules import RISK_RULES, RiskRuleDefinition

logger = logging.getLogger(__name__)


class AuditService:
    """Service for risk analysis and scoring of firewall configurations."""

    # Points deducted from a perfect score of 100 per finding
    SEVERITY_WEIGHTS = {
        RiskSeverity.CRITICAL: 25,
        RiskSeverity.HIGH: 15,
        RiskSeverity.MEDIUM: 5,
        RiskSeverity.LOW: 1,
    }

    def __init__(self, rules: Optional[List[RiskRuleDefinition]] = None):
        self.rules = RISK_RULES if rules is None else rules

    def analyze_config(self, config: ParsedConfig, as_of: Optional[date] = None) -> List[ConfigRisk]:
        """
        Run every catalog rule against a parsed configuration.

        Rules run in catalog order and each contributes its findings in source
        order, so identical input always yields the same list.

        Args:
            config: Parsed configuration
            as_of: Reference date for firmware age checks (default: today)

        Returns:
            List of ConfigRisk findings
        """
        reference_date = as_of or date.today()
        risks: List[ConfigRisk] = []

        for rule in self.rules:
            matches = rule.detector(config, reference_date)
            for match in matches:
                risks.append(ConfigRisk(
                    risk_category=rule.category,
                    risk_type=rule.risk_type,
                    severity=rule.severity,
                    description=rule.description,
                    remediation=rule.remediation.format(**match),
                    affected_objects=(match["object"],),
                ))
            if matches:
                logger.debug(f"{rule.risk_type.value}: {len(matches)} finding(s)")

        logger.info(f"Risk analysis complete: {len(risks)} finding(s)")
        return risks

    def calculate_risk_score(self, risks: List[ConfigRisk]) -> int:
        """
        Calculate the overall score (0-100) using severity weights.

        100 means no findings. Deductions are summed first and the result is
        clamped once at the end.

        Args:
            risks: List of ConfigRisk findings

        Returns:
            Risk score (0-100)
        """
        deductions = sum(self.SEVERITY_WEIGHTS.get(risk.severity, 0) for risk in risks)
        return max(0, min(100, 100 - deductions))

    def calculate_breakdown(self, risks: List[ConfigRisk]) -> AuditBreakdown:
        """
        Calculate breakdown of findings by severity.

        Args:
            risks: List of ConfigRisk findings

        Returns:
            Counts for each severity level
        """
        counts = {severity.value: 0 for severity in RiskSeverity}
        for risk in risks:
            counts[risk.severity.value] += 1
        return AuditBreakdown(**counts)

    def generate_summary(self, risks: List[ConfigRisk], risk_score: int) -> str:
        """Generate human-readable summary of audit results."""
        if not risks:
            return "No security issues detected. Configuration appears secure."

        breakdown = self.calculate_breakdown(risks)
        parts = []
        if breakdown.critical > 0:
            parts.append(f"{breakdown.critical} critical")
        if breakdown.high > 0:
            parts.append(f"{breakdown.high} high")
        if breakdown.medium > 0:
            parts.append(f"{breakdown.medium} medium")
        if breakdown.low > 0:
            parts.append(f"{breakdown.low} low")

        return (f"Found {len(risks)} security finding(s) ({', '.join(parts)}). "
                f"Risk score: {risk_score}/100.")

    def audit_config_text(self, config_content: Union[str, bytes],
                          as_of: Optional[date] = None) -> AuditResult:
        """
        Parse, analyze and score a configuration export in one call.

        Args:
            config_content: Raw configuration export
            as_of: Reference date for firmware age checks (default: today)

        Returns:
            AuditResult with score, breakdown, summary, findings and parsed config
        """
        parsed_config = ConfigService().parse_config(config_content)
        risks = self.analyze_config(parsed_config, as_of=as_of)
        risk_score = self.calculate_risk_score(risks)

        logger.info(f"Audit complete: {len(risks)} finding(s), risk score {risk_score}/100")

        return AuditResult(
            risk_score=risk_score,
            total_findings=len(risks),
            breakdown=self.calculate_breakdown(risks),
            summary=self.generate_summary(risks, risk_score),
            findings=risks,
            parsed_config=parsed_config,
        )


def analyze_config(config: ParsedConfig, as_of: Optional[date] = None) -> List[ConfigRisk]:
    """Run the built-in risk catalog over a parsed configuration."""
    return AuditService().analyze_config(config, as_of=as_of)


def calculate_risk_score(risks: List[ConfigRisk]) -> int:
    """Reduce findings to a single 0-100 score (100 = clean)."""
    return AuditService().calculate_risk_score(risks)


def audit_config_text(config_content: Union[str, bytes], as_of: Optional[date] = None) -> AuditResult:
    """Parse, analyze and score configuration text."""
    return AuditService().audit_config_text(config_content, as_of=as_of)
