"""Decoding raw event records into ``Event`` values.

The wire schema is validated with a Pydantic model so that a malformed
record is described precisely in the logs. ``EventDecoder.decode`` never
raises: bad input comes back as a ``DecodeError`` instance.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, StrictInt, ValidationError, field_validator

from system.revenue_aggregator.domain.errors import DecodeError
from system.revenue_aggregator.domain.models import Event

# Balances are stored as Postgres BIGINT.
BIGINT_MIN = -(2**63)
BIGINT_MAX = 2**63 - 1


class EventPayload(BaseModel):
    """Wire schema for one event: ``{"userId": str, "name": str, "value": int}``."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    user_id: str = Field(alias="userId")
    name: str
    value: StrictInt = Field(ge=BIGINT_MIN, le=BIGINT_MAX)

    @field_validator("user_id", "name")
    @classmethod
    def non_empty_string(cls, value: str) -> str:
        """Reject empty or whitespace-only identifiers."""
        if not value.strip():
            raise ValueError("must be a non-empty string")
        return value

    def to_event(self) -> Event:
        return Event(user_id=self.user_id, name=self.name, value=self.value)


def _describe(exc: ValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "invalid event"
    first = errors[0]
    loc = ".".join(str(part) for part in first.get("loc", ()))
    message = first.get("msg", "invalid value")
    return f"{loc}: {message}" if loc else message


class EventDecoder:
    """Total decoder from a raw record to ``Event | DecodeError``."""

    def decode(self, raw: str | bytes) -> Event | DecodeError:
        if isinstance(raw, bytes):
            try:
                raw = raw.decode("utf-8")
            except UnicodeDecodeError as e:
                return DecodeError(raw.decode("utf-8", errors="replace"), f"invalid UTF-8: {e.reason}")

        text = raw.strip()
        if not text:
            return DecodeError(raw, "empty record")

        try:
            payload = EventPayload.model_validate_json(text)
        except ValidationError as e:
            return DecodeError(text, _describe(e))

        return payload.to_event()
