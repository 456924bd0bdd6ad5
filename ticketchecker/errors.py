"""
Shared error currency for the credential vault and the merchant client.

Every fallible operation returns a :class:`Result` whose failure branch
carries an :class:`ErrorResponse`.  Nothing in the public surface raises.
"""

from enum import Enum
from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class ErrorCode(str, Enum):
    """Machine-readable error tags."""

    KEYCHAIN_ERROR = "KEYCHAIN_ERROR"
    DECODING_ERROR = "DECODING_ERROR"
    UNKNOWN_DECODING_ERROR = "UNKNOWN_DECODING_ERROR"
    BIOMETRIC_NOT_AVAILABLE = "BIOMETRIC_NOT_AVAILABLE"
    AUTH_FAILED = "AUTH_FAILED"
    NETWORK_ERROR = "NETWORK_ERROR"


class ErrorResponse(BaseModel):
    """Uniform failure payload (same shape the server uses for its errors)."""

    model_config = ConfigDict(populate_by_name=True, use_enum_values=True)

    error: str = Field(min_length=1, description="Human-readable message.")
    status_code: Optional[int] = Field(default=None, alias="statusCode")
    error_code: Optional[str] = Field(default=None, alias="errorCode")
    details: Optional[str] = Field(
        default=None, description="Raw diagnostic, e.g. the decoder message."
    )

    def to_dict(self) -> dict:
        return self.model_dump(by_alias=True)


class Result(Generic[T]):
    """Success-or-failure outcome of a single operation."""

    __slots__ = ("_value", "_error")

    def __init__(self, value: Optional[T] = None, error: Optional[ErrorResponse] = None):
        if error is not None and value is not None:
            raise ValueError("Result cannot hold both a value and an error")
        self._value = value
        self._error = error

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: ErrorResponse) -> "Result[T]":
        return cls(error=error)

    @classmethod
    def fail(
        cls,
        error: str,
        *,
        status_code: Optional[int] = None,
        error_code: Optional[Any] = None,
        details: Optional[str] = None,
    ) -> "Result[T]":
        """Shorthand for ``failure(ErrorResponse(...))``."""
        if isinstance(error_code, ErrorCode):
            error_code = error_code.value
        return cls(
            error=ErrorResponse(
                error=error,
                status_code=status_code,
                error_code=error_code,
                details=details,
            )
        )

    @property
    def ok(self) -> bool:
        return self._error is None

    @property
    def value(self) -> Optional[T]:
        return self._value

    @property
    def error(self) -> Optional[ErrorResponse]:
        return self._error

    def unwrap(self) -> T:
        """Return the value, or raise ``ValueError`` for a failure result."""
        if self._error is not None:
            raise ValueError(f"unwrap() on failure result: {self._error.error}")
        return self._value  # type: ignore[return-value]

    def __repr__(self) -> str:
        if self.ok:
            return f"Result.success({self._value!r})"
        return f"Result.failure({self._error!r})"
