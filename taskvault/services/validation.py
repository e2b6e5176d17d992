from typing import Optional

from taskvault.errors import ValidationError


def require_text(value: Optional[str], field: str) -> str:
    """Trimmed value, or ValidationError when nothing is left."""
    cleaned = (value or "").strip()
    if not cleaned:
        raise ValidationError(f"{field} must not be empty")
    return cleaned
