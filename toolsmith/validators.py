from __future__ import annotations

import re
from typing import Callable, List, Optional, Tuple

from toolsmith.models import ValidationResult

# Every probe is a textual presence check on the raw code; nothing is parsed.

LOW_CONTRAST_COLORS = ("#777", "#888", "#999", "#aaa", "#bbb", "#ccc")

_ARIA_RE = re.compile(r"\baria-[a-z]+|\brole\s*=", re.IGNORECASE)
_FULL_WIDTH_RE = re.compile(r"width\s*:\s*100%", re.IGNORECASE)
_TRY_RE = re.compile(r"\btry\b", re.IGNORECASE)
_CATCH_RE = re.compile(r"\bcatch\b", re.IGNORECASE)
_INPUT_RE = re.compile(r"<input\b", re.IGNORECASE)
_VALIDATION_RE = re.compile(r"\brequired\b|pattern\s*=|checkValidity|setCustomValidity|validat", re.IGNORECASE)
_FETCH_RE = re.compile(r"\bfetch\s*\(", re.IGNORECASE)
_LOADING_RE = re.compile(r"loading", re.IGNORECASE)


def _low_contrast_re() -> "re.Pattern[str]":
    alternatives = []
    for short in LOW_CONTRAST_COLORS:
        digit = short[1]
        # #999 and #999999 both count; #9999ff does not.
        alternatives.append(re.escape(short) + r"(?![0-9a-f])")
        alternatives.append(re.escape("#" + digit * 6) + r"(?![0-9a-f])")
    return re.compile("|".join(alternatives), re.IGNORECASE)


_LOW_CONTRAST_RE = _low_contrast_re()


def check_structure(code: str) -> Optional[str]:
    lower = code.lower()
    if "<html" in lower and "</html>" in lower:
        return None
    return "Missing HTML structure"


def check_accessibility(code: str) -> Optional[str]:
    if _ARIA_RE.search(code):
        return None
    return "Missing ARIA attributes for accessibility"


def check_responsive(code: str) -> Optional[str]:
    if "@media" in code.lower() or _FULL_WIDTH_RE.search(code):
        return None
    return "Missing responsive design elements"


def check_error_handling(code: str) -> Optional[str]:
    if _TRY_RE.search(code) and _CATCH_RE.search(code):
        return None
    return "Missing error handling"


def check_input_validation(code: str) -> Optional[str]:
    if not _INPUT_RE.search(code):
        return None
    if _VALIDATION_RE.search(code):
        return None
    return "Missing input validation"


def check_loading_states(code: str) -> Optional[str]:
    if not _FETCH_RE.search(code):
        return None
    if _LOADING_RE.search(code):
        return None
    return "Missing loading states for async operations"


def check_color_contrast(code: str) -> Optional[str]:
    if _LOW_CONTRAST_RE.search(code):
        return "Potential color contrast issues"
    return None


RUBRIC: List[Tuple[str, Callable[[str], Optional[str]]]] = [
    ("structure", check_structure),
    ("accessibility", check_accessibility),
    ("responsive", check_responsive),
    ("error_handling", check_error_handling),
    ("input_validation", check_input_validation),
    ("loading_states", check_loading_states),
    ("color_contrast", check_color_contrast),
]


def collect_issues(code: str) -> List[str]:
    """Run every rubric probe and return the issues in rubric order."""
    issues: List[str] = []
    for _name, probe in RUBRIC:
        issue = probe(code or "")
        if issue:
            issues.append(issue)
    return issues


def validate_tool(code: str) -> ValidationResult:
    issues = collect_issues(code)
    return ValidationResult(is_valid=not issues, issues=issues)
