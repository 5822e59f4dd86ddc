import math
import re
from typing import Any, Dict, Iterable, Optional

_LEADING_INT = re.compile(r"^\s*([+-]?)(?:0[xX]([0-9a-fA-F]*)|([0-9]+))")

REQUIRED_FIELDS = ("bookId", "title", "author", "publicationYear")


class YearParser:
    """Integer coercion for ``publicationYear`` values.

    Mirrors the lenient parsing browsers apply to numeric form input: the
    leading integer of the text form is taken and the rest ignored, so
    ``"1965"`` and ``"1965 (1st ed.)"`` both give ``1965`` and ``1965.7``
    gives ``1965``. Values with no leading digits give ``None``.
    """

    @staticmethod
    def parse(value: Any) -> Optional[int]:
        if value is None or isinstance(value, bool):
            return None
        if isinstance(value, int):
            return value
        if isinstance(value, float):
            if math.isnan(value) or math.isinf(value):
                return None
            return int(value)
        if not isinstance(value, str):
            return None

        match = _LEADING_INT.match(value)
        if not match:
            return None
        sign, hex_digits, digits = match.groups()
        if hex_digits is not None:
            # "0x" must be followed by at least one hex digit
            if not hex_digits:
                return None
            number = int(hex_digits, 16)
        else:
            number = int(digits)
        return -number if sign == "-" else number


class FieldValidator:
    """Presence checks for inbound book payloads."""

    @staticmethod
    def missing_fields(payload: Optional[Dict[str, Any]], fields: Iterable[str] = REQUIRED_FIELDS) -> list:
        # A field counts as missing when absent or falsy ("", 0, None).
        if not payload:
            return list(fields)
        return [name for name in fields if not payload.get(name)]

    @staticmethod
    def has_required_fields(payload: Optional[Dict[str, Any]]) -> bool:
        return not FieldValidator.missing_fields(payload)

    @staticmethod
    def has_non_finite(value: Any) -> bool:
        """True if ``value`` holds NaN or an infinity anywhere (these are not valid JSON)."""
        if isinstance(value, float):
            return math.isnan(value) or math.isinf(value)
        if isinstance(value, dict):
            return any(FieldValidator.has_non_finite(v) for v in value.values())
        if isinstance(value, (list, tuple)):
            return any(FieldValidator.has_non_finite(v) for v in value)
        return False
