"""Phone number canonicalization and redaction."""

import re

_NON_DIGITS = re.compile(r"\D+")


def normalize_phone(raw: str | None) -> str | None:
    """Reduce a phone number to one canonical E.164-style key.

    Ten-digit numbers are assumed to be North American and get a ``+1``
    prefix. Anything without digits normalizes to None.

    >>> normalize_phone("(555) 123-4567")
    '+15551234567'
    >>> normalize_phone("1-555-123-4567")
    '+15551234567'
    """
    if not raw:
        return None
    digits = _NON_DIGITS.sub("", raw)
    if not digits:
        return None
    if len(digits) == 10:
        return f"+1{digits}"
    return f"+{digits}"


def redact_phone(phone: str | None) -> str:
    """Mask everything but the trailing four characters."""
    if not phone or len(phone) < 4:
        return "***"
    return phone[-4:].rjust(len(phone), "*")
