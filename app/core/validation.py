import re
import uuid
from typing import Optional

from app.core.errors import ValidationError

_HEX_COLOR = re.compile(r"^#(?:[0-9a-fA-F]{3}){1,2}$")


def require_text(value: Optional[str], field: str, max_length: Optional[int] = None) -> str:
    """Strip and return value; blank or too long raises ValidationError"""
    text = (value or "").strip()
    if not text:
        raise ValidationError(f"Please provide {field}")
    if max_length is not None and len(text) > max_length:
        raise ValidationError(f"{field.capitalize()} cannot exceed {max_length} characters")
    return text


def optional_text(value: Optional[str], field: str, max_length: Optional[int] = None) -> Optional[str]:
    """None passes through (field untouched); anything else must be non-blank"""
    if value is None:
        return None
    return require_text(value, field, max_length)


def optional_color(value: Optional[str], field: str) -> Optional[str]:
    if value is None or value.strip() == "":
        return None
    color = value.strip()
    if not _HEX_COLOR.match(color):
        raise ValidationError(f"{field} must be a hex color such as #1a2b3c")
    return color


def is_uuid(value: Optional[str]) -> bool:
    """Ids are uuid columns; anything else can never resolve"""
    try:
        uuid.UUID(str(value))
    except ValueError:
        return False
    return True
