"""Helpers for safe handling of checkout form and product input."""
from __future__ import annotations

import re
from typing import Any

_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")


def sanitize_text(text: Any, max_length: int = 200) -> str:
    """Strip whitespace and control characters, cap the length.

    Example:
        >>> sanitize_text("  Ada\\x00 ")
        'Ada'
    """
    if text is None:
        return ""
    text = _CONTROL_CHARS.sub("", str(text).strip())
    return text[:max_length]


def sanitize_phone(phone: Any) -> str:
    """Sanitize phone number - allow only digits, +, spaces, dashes.

    Example:
        >>> sanitize_phone("+234 801<script>")
        '+234 801'
    """
    if not phone:
        return ""
    return re.sub(r"[^0-9+\-\s()]", "", str(phone)).strip()[:20]


def sanitize_email(email: Any) -> str:
    """Trimmed email, or an empty string when the value is blank.

    Only presence is checked here; the payment provider validates the
    address itself.
    """
    return sanitize_text(email, max_length=254).replace(" ", "")
