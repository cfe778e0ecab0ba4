"""Normalization and validation helpers for addresses and header text."""

import re
from typing import Optional

from email_validator import EmailNotValidError, validate_email


# CR/LF runs (header injection)
_LINE_BREAKS_RE = re.compile(r"[\r\n]+")


def is_valid_email(email: Optional[str]) -> bool:
    """Return True when ``email`` is a syntactically valid bare address.

    Only syntax is checked: no DNS lookups, and special-use domains such as
    ``.local`` or ``.test`` are accepted for intranet deployments.
    """
    if not email or not isinstance(email, str):
        return False
    candidate = email.strip()
    # Display-name forms ("Jane <jane@x.com>") are not accepted as bare addresses.
    if not candidate or "<" in candidate or ">" in candidate:
        return False
    try:
        validate_email(candidate, check_deliverability=False, globally_deliverable=False)
    except EmailNotValidError:
        return False
    return True


def single_line(value: Optional[str]) -> str:
    """Replace line breaks with single spaces so a value is header-safe."""
    if not value:
        return ""
    return _LINE_BREAKS_RE.sub(" ", value)
