"""Credential record stored in the vault."""

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Credential(BaseModel):
    """A single email/password pair.

    Stored entries are a flat string-to-string JSON object: extra keys are
    tolerated, but every value must be a string.
    """

    model_config = ConfigDict(frozen=True, strict=True, extra="allow")

    email: str
    password: str = Field(repr=False)

    @model_validator(mode="after")
    def _extra_values_are_strings(self) -> "Credential":
        bad = sorted(
            key for key, value in (self.model_extra or {}).items()
            if not isinstance(value, str)
        )
        if bad:
            raise ValueError(f"non-string values for keys: {', '.join(bad)}")
        return self

    def to_bytes(self) -> bytes:
        return self.model_dump_json(include={"email", "password"}).encode("utf-8")

    @classmethod
    def from_bytes(cls, data: bytes) -> "Credential":
        """Parse stored bytes.

        Raises:
            pydantic.ValidationError: If the bytes are not a JSON object with
                string ``email`` and ``password`` fields and string-only extras.
        """
        return cls.model_validate_json(data)
