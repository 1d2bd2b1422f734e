"""
Command-line entry point: ``python -m exp_auditor PATH``.
"""
import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from exp_auditor.core.config import settings
from exp_auditor.core.logging_config import setup_logging
from exp_auditor.schemas.audit import AuditResult
from exp_auditor.services.audit_service import AuditService

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_BELOW_THRESHOLD = 1
EXIT_UNREADABLE = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="exp-auditor",
        description=f"{settings.APP_NAME}: audit a firewall configuration export.",
    )
    parser.add_argument("path", type=Path, help="configuration export to audit")
    parser.add_argument("--json", action="store_true", help="print the full audit result as JSON")
    parser.add_argument("--fail-under", type=int, default=None, metavar="N",
                        help="exit with status 1 when the risk score is below N")
    parser.add_argument("--log-level", type=str, default=None, metavar="LEVEL",
                        help="override LOG_LEVEL for this run")
    return parser


def format_report(result: AuditResult) -> str:
    """Plain-text report: score, breakdown and one line per finding."""
    breakdown = result.breakdown
    lines = [
        f"Risk score: {result.risk_score}/100",
        f"Findings: {result.total_findings} (critical {breakdown.critical}, high {breakdown.high}, "
        f"medium {breakdown.medium}, low {breakdown.low})",
        result.summary,
    ]
    for risk in result.findings:
        target = ", ".join(risk.affected_objects)
        lines.append(f"[{risk.severity.value.upper()}] {risk.risk_type.value} {target}: {risk.description}")
        lines.append(f"    {risk.remediation}")
    return "\n".join(lines)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    # stdout carries the report
    setup_logging(args.log_level, stream=sys.stderr)

    try:
        config_content = args.path.read_text(encoding="utf-8", errors="ignore")
    except OSError as e:
        print(f"Could not read {args.path}: {e}", file=sys.stderr)
        return EXIT_UNREADABLE

    logger.info(f"Auditing {args.path}")
    result = AuditService().audit_config_text(config_content)

    if args.json:
        print(result.model_dump_json(indent=2))
    else:
        print(format_report(result))

    if args.fail_under is not None and result.risk_score < args.fail_under:
        return EXIT_BELOW_THRESHOLD
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
