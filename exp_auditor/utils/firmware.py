"""
Firmware age heuristics.

Firmware strings carry no reliable release metadata, so three independent
signals are used: a date embedded in the version string, a list of known-old
release trains, and deprecation keywords.
"""
import re
from datetime import date
from typing import Optional

# 2023-06-15, 2023/06/15, 2023.06.15
ISO_DATE_PATTERN = re.compile(r"(?<!\d)(\d{4})[-/.](\d{1,2})[-/.](\d{1,2})(?!\d)")

# Jun 2023, June 2023, Sept. 2023
MONTH_YEAR_PATTERN = re.compile(
    r"\b(jan|feb|mar|apr|may|jun|jul|aug|sep|oct|nov|dec)[a-z]*\.?\s+(\d{4})(?!\d)",
    re.IGNORECASE,
)

# 20230615 build stamp
BUILD_DATE_PATTERN = re.compile(r"(?<!\d)(\d{4})(\d{2})(\d{2})(?!\d)")

# Leading release train, optionally prefixed with the OS name: "SonicOS 6.2.9", "5.9.1.7"
RELEASE_TRAIN_PATTERN = re.compile(r"^(?:sonicos[\s-]*)?v?(\d{1,3})\.(\d{1,3})", re.IGNORECASE)

MONTHS = ("jan", "feb", "mar", "apr", "may", "jun", "jul", "aug", "sep", "oct", "nov", "dec")

DEPRECATION_KEYWORDS = ("legacy", "deprecated")

MIN_BUILD_YEAR = 2000
MAX_BUILD_YEAR = 2100


def _safe_date(year: int, month: int, day: int) -> Optional[date]:
    try:
        return date(year, month, day)
    except ValueError:
        return None


def extract_firmware_date(version: str) -> Optional[date]:
    """
    Extract a release date embedded in a firmware version string.

    Tried in order: ISO date, month name with year, 8-digit build stamp.

    Returns:
        The first valid date found, or None
    """
    for match in ISO_DATE_PATTERN.finditer(version):
        found = _safe_date(int(match.group(1)), int(match.group(2)), int(match.group(3)))
        if found:
            return found

    match = MONTH_YEAR_PATTERN.search(version)
    if match:
        month = MONTHS.index(match.group(1).lower()) + 1
        found = _safe_date(int(match.group(2)), month, 1)
        if found:
            return found

    for match in BUILD_DATE_PATTERN.finditer(version):
        year = int(match.group(1))
        if not MIN_BUILD_YEAR <= year <= MAX_BUILD_YEAR:
            continue
        found = _safe_date(year, int(match.group(2)), int(match.group(3)))
        if found:
            return found

    return None


def is_known_old_version(version: str) -> bool:
    """Release trains older than SonicOS 6.5 (5.x and earlier, 6.0 - 6.4)."""
    match = RELEASE_TRAIN_PATTERN.match(version.strip())
    if not match:
        return False
    major, minor = int(match.group(1)), int(match.group(2))
    return major < 6 or (major == 6 and minor <= 4)


def has_deprecation_keyword(version: str) -> bool:
    """True when the version string marks itself as legacy or deprecated."""
    lowered = version.lower()
    return any(keyword in lowered for keyword in DEPRECATION_KEYWORDS)


def subtract_months(day: date, months: int) -> date:
    """Same calendar day ``months`` earlier, clamped to the end of shorter months."""
    month_index = day.year * 12 + (day.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    for candidate in (day.day, 30, 29, 28):
        found = _safe_date(year, month, min(day.day, candidate))
        if found:
            return found
    return date(year, month, 1)


def months_between(earlier: date, later: date) -> int:
    """Whole 30-day months between two dates (never negative)."""
    return max(0, (later - earlier).days // 30)
