"""sqlassist.policy.pii_redactor

Masks PII-looking substrings in result rows.

Order matters: emails are masked before the digit patterns so an address
containing digits is not mangled by the phone/card rules. Masked output does
not match any source pattern, so masking twice is a no-op.
"""

from __future__ import annotations
import re
from typing import Any, Mapping

EMAIL_RE = re.compile(r"([a-zA-Z0-9._%+-]+)@([a-zA-Z0-9.-]+\.[a-zA-Z]{2,})")
PHONE_RE = re.compile(r"(\+?\d{1,3}[-.\s]?(\d{2,4})[-.\s]?\d{3,4}[-.\s]?\d{3,4})")
CARD_RE = re.compile(r"\b(?:\d[ -]*?){13,16}\b")

PHONE_MASK = "***-PHONE-***"
CARD_MASK = "****-CARD-****"


def _mask_email(m: re.Match) -> str:
    return f"{m.group(1)[0]}***@***"


def mask_value(value: Any) -> Any:
    """Mask a single value; non-strings are returned unchanged."""
    if not isinstance(value, str):
        return value
    s = EMAIL_RE.sub(_mask_email, value)
    s = PHONE_RE.sub(PHONE_MASK, s)
    s = CARD_RE.sub(CARD_MASK, s)
    return s


def mask_row(row: Mapping[str, Any]) -> dict[str, Any]:
    """Return a new row with every string value masked."""
    return {k: mask_value(v) for k, v in row.items()}


def mask_rows(result: Any) -> Any:
    """Mask a row-set; anything that is not a list is passed through."""
    if not isinstance(result, list):
        return result

    out = []
    for row in result:
        if isinstance(row, Mapping):
            out.append(mask_row(row))
        elif isinstance(row, (list, tuple)):
            out.append([mask_value(v) for v in row])
        else:
            out.append(mask_value(row))
    return out
