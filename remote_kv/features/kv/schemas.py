"""Pydantic schemas for the key-value API."""

from __future__ import annotations

import math
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator

SET_REQUIRED_MESSAGE = "key and string value required"
KEY_REQUIRED_MESSAGE = "key required"


def _format_number(number: float) -> str:
    """Render a number the way JSON clients print it.

    Uses the shortest round-trip digits with the ECMAScript Number::toString
    layout: plain notation for decimal exponents in [-6, 21), otherwise
    ``d.ddde+N`` with no zero padding on the exponent.
    """
    if not math.isfinite(number):
        msg = "must be a finite number"
        raise ValueError(msg)

    _, digit_tuple, exponent = Decimal(repr(abs(number))).as_tuple()
    digits = "".join(str(d) for d in digit_tuple).rstrip("0") or "0"
    # Position of the decimal point relative to the first digit
    point = len(digit_tuple) + exponent
    size = len(digits)
    prefix = "-" if number < 0 else ""

    if size <= point <= 21:
        return prefix + digits + "0" * (point - size)
    if 0 < point <= 21:
        return prefix + digits[:point] + "." + digits[point:]
    if -6 < point <= 0:
        return prefix + "0." + "0" * -point + digits

    power = point - 1
    mantissa = digits if size == 1 else digits[0] + "." + digits[1:]
    return f"{prefix}{mantissa}e{'+' if power >= 0 else '-'}{abs(power)}"


def _scalar_to_str(value: Any) -> str | None:
    """Coerce a JSON scalar to text the way loosely typed clients expect.

    Falsy values (null, 0, false, "") mean "not given". Numbers go through
    double precision, so integers above 2**53 lose their low digits.
    Objects and arrays are rejected.
    """
    if not value:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true"
    if isinstance(value, int | float):
        try:
            return _format_number(float(value))
        except OverflowError as e:
            msg = "number out of range"
            raise ValueError(msg) from e
    msg = "must be a string or number"
    raise ValueError(msg)


class SetRequest(BaseModel):
    """Request body for ``POST /set``."""

    model_config = ConfigDict(extra="ignore")

    key: str = Field(
        ...,
        min_length=1,
        description="Key within the namespace; stored verbatim",
        examples=["settings.json", "notes/today"],
    )
    value: StrictStr = Field(
        ...,
        description="Text value to store; the empty string is allowed",
        examples=["hello"],
    )
    user: str | None = Field(
        None,
        description="Owner namespace; omitted or empty means the shared namespace",
        examples=["alice"],
    )

    @field_validator("key", mode="before")
    @classmethod
    def _coerce_key(cls, value: Any) -> str:
        return _scalar_to_str(value) or ""

    @field_validator("user", mode="before")
    @classmethod
    def _coerce_user(cls, value: Any) -> str | None:
        return _scalar_to_str(value)


class ValueResponse(BaseModel):
    """Response schema for ``GET /get``."""

    value: str = Field(..., description="Stored value")


class OkResponse(BaseModel):
    """Acknowledgement for mutating operations."""

    ok: bool = Field(True, description="Always true on success")


class KeysResponse(BaseModel):
    """Response schema for ``GET /list``."""

    keys: list[str] = Field(
        default_factory=list,
        description="Keys in the namespace, with the namespace prefix removed",
        examples=[["a", "b", "notes/today"]],
    )


class ErrorResponse(BaseModel):
    """Error body shared by every failure response."""

    error: str = Field(..., description="Stable error token or message", examples=["not_found"])
