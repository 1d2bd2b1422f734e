"""Schemas for security audit results."""
from typing import List

from pydantic import BaseModel

from exp_auditor.schemas.config import ParsedConfig
from exp_auditor.schemas.findings import ConfigRisk


class AuditBreakdown(BaseModel):
    """Breakdown of findings by severity."""
    critical: int = 0
    high: int = 0
    medium: int = 0
    low: int = 0


class AuditResult(BaseModel):
    """Structured audit result for one configuration export."""
    risk_score: int  # 0-100, 100 means no findings
    total_findings: int
    breakdown: AuditBreakdown
    summary: str  # Short human-readable summary
    findings: List[ConfigRisk]
    parsed_config: ParsedConfig
