"""
Coercion of raw env text into typed field values.
One function per FieldKind; scalar failures raise, list elements fall back to zero.
"""

import logging
import math
import re
import struct
from typing import Any, Callable

from envreader.errors import INVALID_SYNTAX, OUT_OF_RANGE, FloatParseError, IntegerParseError, ParseError
from envreader.schema import FieldKind, FieldType

logger = logging.getLogger(__name__)

_INT_RE = re.compile(r"[+-]?[0-9]+")
_FLOAT_RE = re.compile(
    r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf|infinity|nan)",
    re.IGNORECASE,
)


def parse_int(raw: str, bits: int = 64) -> int:
    """Base-10 signed integer constrained to the given bit width."""
    type_name = f"int{bits}"
    if not _INT_RE.fullmatch(raw):
        raise IntegerParseError(raw, type_name, INVALID_SYNTAX)
    sign = raw[0] if raw[0] in "+-" else ""
    digits = raw[len(sign):].lstrip("0") or "0"
    # No int64 needs more than 19 digits; int() rejects very long strings
    if len(digits) > 19:
        raise IntegerParseError(raw, type_name, OUT_OF_RANGE)
    value = int(sign + digits)
    limit = 1 << (bits - 1)
    if not -limit <= value < limit:
        raise IntegerParseError(raw, type_name, OUT_OF_RANGE)
    return value


def parse_float(raw: str, bits: int = 64) -> float:
    """Base-10 float; 32-bit values are rounded to single precision."""
    type_name = f"float{bits}"
    if not _FLOAT_RE.fullmatch(raw):
        raise FloatParseError(raw, type_name, INVALID_SYNTAX)
    value = float(raw)
    if math.isinf(value) and "inf" not in raw.lower():
        raise FloatParseError(raw, type_name, OUT_OF_RANGE)
    if bits == 32 and math.isfinite(value):
        try:
            value = struct.unpack("f", struct.pack("f", value))[0]
        except OverflowError:
            raise FloatParseError(raw, type_name, OUT_OF_RANGE) from None
    return value


def split_list(raw: str) -> list[str]:
    """Drop every space, then split on commas. Empty segments are kept."""
    return raw.replace(" ", "").split(",")


def _coerce_bool(raw: str, field_type: FieldType) -> bool:
    return raw == "1" or raw.lower() == "true"


def _coerce_int(raw: str, field_type: FieldType) -> int:
    return parse_int(raw, field_type.bits)


def _coerce_float(raw: str, field_type: FieldType) -> float:
    return parse_float(raw, field_type.bits)


def _coerce_string(raw: str, field_type: FieldType) -> str:
    return raw


def _coerce_list_string(raw: str, field_type: FieldType) -> list[str]:
    return split_list(raw)


def _parse_elements(raw: str, parse: Callable[[str], Any], zero: Any) -> list[Any]:
    values = []
    for i, segment in enumerate(split_list(raw)):
        try:
            values.append(parse(segment))
        except ParseError as e:
            # A bad element keeps its slot with the zero value
            logger.debug("List element %d left at zero value (%s: %s)", i, e.type_name, e.reason)
            values.append(zero)
    return values


def _coerce_list_int(raw: str, field_type: FieldType) -> list[int]:
    return _parse_elements(raw, lambda s: parse_int(s, field_type.bits), 0)


def _coerce_list_float32(raw: str, field_type: FieldType) -> list[float]:
    return _parse_elements(raw, lambda s: parse_float(s, 32), 0.0)


def _coerce_list_float64(raw: str, field_type: FieldType) -> list[float]:
    return _parse_elements(raw, lambda s: parse_float(s, 64), 0.0)


COERCERS: dict[FieldKind, Callable[[str, FieldType], Any] | None] = {
    FieldKind.BOOL: _coerce_bool,
    FieldKind.INT: _coerce_int,
    FieldKind.FLOAT: _coerce_float,
    FieldKind.STRING: _coerce_string,
    FieldKind.LIST_STRING: _coerce_list_string,
    FieldKind.LIST_INT: _coerce_list_int,
    FieldKind.LIST_FLOAT32: _coerce_list_float32,
    FieldKind.LIST_FLOAT64: _coerce_list_float64,
    FieldKind.UNSUPPORTED: None,
}

_missing = set(FieldKind) - set(COERCERS)
if _missing:
    raise RuntimeError(f"No coercer registered for: {sorted(k.name for k in _missing)}")


def coerce(raw: str, field_type: FieldType) -> Any:
    """
    Convert raw text into a value of field_type.

    Raises IntegerParseError / FloatParseError for bad scalar text.
    Must not be called for FieldKind.UNSUPPORTED.
    """
    coercer = COERCERS[field_type.kind]
    if coercer is None:
        raise TypeError(f"Cannot coerce into {field_type.name}")
    return coercer(raw, field_type)
