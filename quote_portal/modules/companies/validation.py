"""
Company field validation.

Each validator returns a list of {"field", "message"} errors; an empty list
means the value is acceptable.
"""

import re
from typing import Any, Dict, List, Optional

BRAND_CODE_PATTERN = re.compile(r"^[a-zA-Z0-9_-]+$")
HEX_COLOR_PATTERN = re.compile(r"^#([A-Fa-f0-9]{6}|[A-Fa-f0-9]{3})$")

MAX_NAME_LENGTH = 255
MAX_BRAND_CODE_LENGTH = 50
MAX_LOGO_URL_LENGTH = 500
MAX_TEXT_LENGTH = 5000

ValidationError = Dict[str, str]


def _error(field: str, message: str) -> ValidationError:
    return {"field": field, "message": message}


def validate_company_name(value: Optional[str]) -> List[ValidationError]:
    if not value or not value.strip():
        return [_error("company_name", "Company name is required")]
    if len(value.strip()) > MAX_NAME_LENGTH:
        return [_error("company_name", f"Company name must not exceed {MAX_NAME_LENGTH} characters")]
    return []


def validate_brand_code(value: Optional[str]) -> List[ValidationError]:
    if not value or not value.strip():
        return [_error("brand_code", "Brand code is required")]

    errors = []
    trimmed = value.strip()
    if len(trimmed) > MAX_BRAND_CODE_LENGTH:
        errors.append(_error("brand_code", f"Brand code must not exceed {MAX_BRAND_CODE_LENGTH} characters"))
    if not BRAND_CODE_PATTERN.match(trimmed):
        errors.append(_error(
            "brand_code",
            "Brand code must contain only alphanumeric characters, underscores, and hyphens",
        ))
    return errors


def validate_color(value: Optional[str], field_name: str = "color") -> List[ValidationError]:
    """Optional hex colour, #RGB or #RRGGBB."""
    if not value or not value.strip():
        return []
    if not HEX_COLOR_PATTERN.match(value.strip()):
        return [_error(field_name, "Color must be a valid hex color format (e.g., #2563eb or #fff)")]
    return []


def validate_logo_url(value: Optional[str], field_name: str = "logo_url") -> List[ValidationError]:
    if not value or not value.strip():
        return []

    errors = []
    trimmed = value.strip()
    if ".." in trimmed or "\\" in trimmed:
        errors.append(_error(field_name, "Logo URL contains invalid characters"))
    if len(trimmed) > MAX_LOGO_URL_LENGTH:
        errors.append(_error(field_name, f"Logo URL must not exceed {MAX_LOGO_URL_LENGTH} characters"))
    return errors


def validate_text_content(value: Optional[str], field_name: str = "content") -> List[ValidationError]:
    if not value or not value.strip():
        return []
    if len(value.strip()) > MAX_TEXT_LENGTH:
        return [_error(field_name, f"{field_name} must not exceed {MAX_TEXT_LENGTH} characters")]
    return []


def validate_company_data(data: Dict[str, Any], partial: bool = False) -> List[ValidationError]:
    """
    Validate a company payload keyed by column name (name, brand_code, ...).

    With partial=True (updates) the required fields are only checked when
    present in `data`.
    """
    errors: List[ValidationError] = []

    if not partial or "name" in data:
        errors.extend(validate_company_name(data.get("name")))
    if not partial or "brand_code" in data:
        errors.extend(validate_brand_code(data.get("brand_code")))

    for color_field in ("primary_color", "secondary_color", "tertiary_color"):
        errors.extend(validate_color(data.get(color_field), color_field))

    errors.extend(validate_logo_url(data.get("logo_url")))
    errors.extend(validate_text_content(data.get("hero_content"), "hero_content"))
    errors.extend(validate_text_content(data.get("copy_content"), "copy_content"))

    return errors


def format_validation_errors(errors: List[ValidationError]) -> Dict[str, Any]:
    """Collapse errors into a message and a field -> message map."""
    fields = {e["field"]: e["message"] for e in errors}
    if len(errors) == 1:
        message = "Validation failed: " + errors[0]["message"]
    else:
        message = f"Validation failed: {len(errors)} errors found"
    return {"message": message, "fields": fields}
