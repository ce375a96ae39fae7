"""
Input validation and sanitization for company fields.

The sanitizer is a pattern-based filter, not an HTML parser. It removes the
constructs most commonly used for script injection before text is stored or
echoed back, and does not replace escaping at render time.
"""
import re
from dataclasses import dataclass
from typing import Any, Mapping, Optional
from urllib.parse import urlparse

COMPANY_NAME_MAX_LENGTH = 200
POSITION_MAX_LENGTH = 200
DESCRIPTION_MAX_LENGTH = 2000
COVER_LETTER_MAX_LENGTH = 10000
COLUMN_TITLE_MAX_LENGTH = 50
PROFILE_FIELD_MAX_LENGTH = 100

ALLOWED_URL_SCHEMES = ("http", "https")

_SCRIPT_BLOCK = re.compile(r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>", re.IGNORECASE)
_IFRAME_BLOCK = re.compile(r"<iframe\b[^<]*(?:(?!</iframe>)<[^<]*)*</iframe>", re.IGNORECASE)
_JAVASCRIPT_URI = re.compile(r"javascript:", re.IGNORECASE)
_EVENT_HANDLER = re.compile(r"on\w+\s*=", re.IGNORECASE)

_PATTERNS = (_SCRIPT_BLOCK, _IFRAME_BLOCK, _JAVASCRIPT_URI, _EVENT_HANDLER)


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    error: Optional[str] = None

    def __bool__(self) -> bool:
        return self.is_valid


VALID = ValidationResult(True)


def sanitize_html(text: Optional[str]) -> str:
    """
    Strip script/iframe blocks, ``javascript:`` prefixes and inline event
    handlers, then trim surrounding whitespace.

    Removal can splice a new match together (``javajavascript:script:``), so
    the patterns are applied until the text stops changing. This keeps the
    function idempotent.
    """
    if not text:
        return ""

    previous = None
    result = text
    while result != previous:
        previous = result
        for pattern in _PATTERNS:
            result = pattern.sub("", result)
        result = result.strip()
    return result


def validate_length(text: str, max_length: int) -> bool:
    return len(text) <= max_length


def validate_url(url: Optional[str]) -> bool:
    """Empty is allowed; otherwise only absolute http(s) URLs pass."""
    if not url:
        return True
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    return parsed.scheme.lower() in ALLOWED_URL_SCHEMES and bool(parsed.netloc)


def _validate_required_text(value: Optional[str], label: str, max_length: int) -> ValidationResult:
    value = value or ""
    if not value.strip():
        return ValidationResult(False, f"{label} is required.")
    if not validate_length(value, max_length):
        return ValidationResult(False, f"{label} cannot exceed {max_length} characters.")
    if sanitize_html(value) != value:
        return ValidationResult(False, f"{label} contains characters that are not allowed.")
    return VALID


def validate_company_name(name: Optional[str]) -> ValidationResult:
    return _validate_required_text(name, "Company name", COMPANY_NAME_MAX_LENGTH)


def validate_position(position: Optional[str]) -> ValidationResult:
    return _validate_required_text(position, "Position", POSITION_MAX_LENGTH)


def validate_description(description: Optional[str]) -> ValidationResult:
    if not validate_length(description or "", DESCRIPTION_MAX_LENGTH):
        return ValidationResult(False, f"Description cannot exceed {DESCRIPTION_MAX_LENGTH} characters.")
    return VALID


def validate_application_link(url: Optional[str]) -> ValidationResult:
    if not url:
        return VALID
    if not validate_url(url):
        return ValidationResult(False, "Invalid URL. Links must start with http:// or https://.")
    return VALID


def validate_cover_letter_content(content: Optional[str]) -> ValidationResult:
    if not validate_length(content or "", COVER_LETTER_MAX_LENGTH):
        return ValidationResult(False, f"Cover letter cannot exceed {COVER_LETTER_MAX_LENGTH} characters.")
    return VALID


def validate_column_title(title: Optional[str]) -> ValidationResult:
    return _validate_required_text(title, "Column title", COLUMN_TITLE_MAX_LENGTH)


def validate_profile_field(value: Optional[str], label: str) -> ValidationResult:
    """Profile fields are optional, but when given follow the company-name rules."""
    if not value:
        return VALID
    return _validate_required_text(value, label, PROFILE_FIELD_MAX_LENGTH)


def validate_company_data(data: Mapping[str, Any]) -> ValidationResult:
    """
    Run the field validators in order and return the first failure.

    Description and application link are only checked when present.
    """
    result = validate_company_name(data.get("name"))
    if not result:
        return result

    result = validate_position(data.get("position"))
    if not result:
        return result

    if data.get("description"):
        result = validate_description(data["description"])
        if not result:
            return result

    if data.get("application_link"):
        result = validate_application_link(data["application_link"])
        if not result:
            return result

    return VALID
