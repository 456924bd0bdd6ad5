"""Structural decoding of merchant payloads and decode-error classification.

:func:`classify_decode_error` turns a library-independent
:class:`DecodeFailure` into the ``ErrorResponse`` shown to callers.
:func:`decode_failure_from_validation_error` adapts pydantic's
``ValidationError`` into that shape.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Union

from pydantic import TypeAdapter, ValidationError

from ticketchecker.errors import ErrorCode, ErrorResponse
from ticketchecker.merchants.models import Merchant

logger = logging.getLogger(__name__)

_MERCHANT_LIST = TypeAdapter(List[Merchant])

# pydantic error type prefix -> expected type name shown to users
_EXPECTED_TYPES: Dict[str, str] = {
    "string": "str",
    "tuple": "list",
    "set": "list",
    "model": "dict",
    "model_attributes": "dict",
}


class DecodeFailureKind(str, Enum):
    DATA_CORRUPTED = "data_corrupted"
    KEY_NOT_FOUND = "key_not_found"
    TYPE_MISMATCH = "type_mismatch"
    VALUE_NOT_FOUND = "value_not_found"


@dataclass(frozen=True)
class DecodeFailure:
    """What went wrong while decoding, independent of the decoder library."""

    kind: DecodeFailureKind
    description: str
    raw_message: str
    key: Optional[str] = None
    expected_type: Optional[str] = None


def classify_decode_error(failure: DecodeFailure) -> ErrorResponse:
    """Build the ``DECODING_ERROR`` response for *failure*."""
    if failure.kind is DecodeFailureKind.DATA_CORRUPTED:
        message = f"Data corrupted: {failure.description}"
    elif failure.kind is DecodeFailureKind.KEY_NOT_FOUND:
        message = f"Key '{failure.key}' not found: {failure.description}"
    elif failure.kind is DecodeFailureKind.TYPE_MISMATCH:
        message = f"Type mismatch for type '{failure.expected_type}': {failure.description}"
    elif failure.kind is DecodeFailureKind.VALUE_NOT_FOUND:
        message = f"Value not found for type '{failure.expected_type}': {failure.description}"
    else:
        message = "An unknown decoding error occurred."

    return ErrorResponse(
        error=message,
        error_code=ErrorCode.DECODING_ERROR.value,
        details=failure.raw_message or None,
    )


def format_location(loc: Sequence[Union[int, str]]) -> str:
    """Render a pydantic error location, e.g. ``(0, 'name')`` -> ``[0].name``."""
    parts: List[str] = []
    for item in loc:
        if isinstance(item, int):
            parts.append(f"[{item}]")
        else:
            parts.append(f".{item}" if parts else str(item))
    return "".join(parts)


def _expected_type(error_type: str) -> str:
    base = error_type.rsplit("_", 1)[0]
    return _EXPECTED_TYPES.get(base, base)


def decode_failure_from_validation_error(exc: ValidationError) -> DecodeFailure:
    """Map the first error of a pydantic ``ValidationError``."""
    raw_message = str(exc)
    errors = exc.errors()
    if not errors:
        return DecodeFailure(
            kind=DecodeFailureKind.DATA_CORRUPTED,
            description="The given data was not valid.",
            raw_message=raw_message,
        )

    first: Dict[str, Any] = errors[0]
    error_type: str = first.get("type", "")
    loc = first.get("loc", ())
    path = format_location(loc)
    description = f"{first.get('msg', 'Invalid value')} (at {path or 'root'})"

    if error_type == "missing":
        key = str(loc[-1]) if loc else path
        return DecodeFailure(
            kind=DecodeFailureKind.KEY_NOT_FOUND,
            description=description,
            raw_message=raw_message,
            key=key,
        )

    if error_type.endswith("_type") or error_type.endswith("_parsing"):
        kind = (
            DecodeFailureKind.VALUE_NOT_FOUND
            if "input" in first and first["input"] is None
            else DecodeFailureKind.TYPE_MISMATCH
        )
        return DecodeFailure(
            kind=kind,
            description=description,
            raw_message=raw_message,
            key=path or None,
            expected_type=_expected_type(error_type),
        )

    return DecodeFailure(
        kind=DecodeFailureKind.DATA_CORRUPTED,
        description=description,
        raw_message=raw_message,
        key=path or None,
    )


def decode_merchants(body: bytes) -> List[Merchant]:
    """Decode a JSON array of merchants.

    Raises:
        pydantic.ValidationError: On malformed JSON or a structural mismatch.
    """
    return _MERCHANT_LIST.validate_json(body)
