"""Records, cell values and the export outcome: the contract between pipeline stages."""

import math
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, Optional, Union

import simplejson

Record = Dict[str, Any]

EMPTY_EXPORT_NAME = "empty-export"
NO_ITEMS_MESSAGE = "No items found"


@dataclass(frozen=True)
class NullCell:
    pass


@dataclass(frozen=True)
class BoolCell:
    value: bool


@dataclass(frozen=True)
class NumberCell:
    value: Union[int, float, Decimal]


@dataclass(frozen=True)
class TextCell:
    value: str


@dataclass(frozen=True)
class CompositeCell:
    text: str  # compact JSON


CellValue = Union[NullCell, BoolCell, NumberCell, TextCell, CompositeCell]


def classify_value(value: Any) -> CellValue:
    """Map a raw record value onto exactly one cell variant."""
    if value is None:
        return NullCell()
    # bool before number: bool is an int subclass
    if isinstance(value, bool):
        return BoolCell(value)
    if isinstance(value, (int, float, Decimal)):
        return NumberCell(value)
    if isinstance(value, str):
        return TextCell(value)
    if isinstance(value, (dict, list, tuple, set, frozenset)):
        return CompositeCell(to_compact_json(value))
    return TextCell(str(value))


def to_compact_json(value: Any) -> str:
    # Decimals are written as their exact digits, never through float
    return simplejson.dumps(
        value,
        separators=(",", ":"),
        ensure_ascii=False,
        use_decimal=True,
        allow_nan=True,
        default=_json_default,
    )


def _json_default(obj: Any) -> Any:
    if isinstance(obj, (set, frozenset)):
        return sorted(obj, key=str)
    if isinstance(obj, (bytes, bytearray)):
        return obj.decode("utf-8", errors="replace")
    return str(obj)


def format_number(value: Union[int, float, Decimal]) -> str:
    """Canonical text for a number, in JavaScript's Number-to-String notation.

    Plain digits while the decimal point sits between 1e-7 and 1e21, exponent
    form (1e-7, 1.5e+30) outside that range. Every significant digit is kept.
    """
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        value = Decimal(repr(value))
    if not value.is_finite():
        return format_number(float(value))
    if value == 0:
        return "0"

    sign, digit_tuple, exponent = value.as_tuple()
    digits = "".join(str(d) for d in digit_tuple).lstrip("0")
    stripped = digits.rstrip("0")
    exponent += len(digits) - len(stripped)
    digits = stripped
    k = len(digits)
    n = exponent + k  # position of the decimal point relative to the digits
    if k <= n <= 21:
        text = digits + "0" * (n - k)
    elif 0 < n <= 21:
        text = f"{digits[:n]}.{digits[n:]}"
    elif -6 < n <= 0:
        text = "0." + "0" * -n + digits
    else:
        mantissa = digits if k == 1 else f"{digits[0]}.{digits[1:]}"
        text = f"{mantissa}e{'+' if n - 1 >= 0 else '-'}{abs(n - 1)}"
    return "-" + text if sign else text


def iso_timestamp(moment: datetime) -> str:
    """UTC ISO-8601 with millisecond precision, e.g. 2024-05-01T12:30:45.123Z."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return f"{moment:%Y-%m-%dT%H:%M:%S}.{moment.microsecond // 1000:03d}Z"


@dataclass(frozen=True)
class ArtifactReference:
    url: str
    expires_at: Optional[datetime] = None

    @property
    def time_limited(self) -> bool:
        return self.expires_at is not None


@dataclass(frozen=True)
class ExportOutcome:
    success: bool
    file_name: Optional[str] = None
    artifact_key: Optional[str] = None
    download_url: Optional[str] = None
    expires_at: Optional[datetime] = None
    error_message: Optional[str] = None

    @classmethod
    def exported(cls, key: str, reference: ArtifactReference) -> "ExportOutcome":
        return cls(
            success=True,
            file_name=key,
            artifact_key=key,
            download_url=reference.url,
            expires_at=reference.expires_at,
        )

    @classmethod
    def empty(cls) -> "ExportOutcome":
        return cls(success=True, file_name=EMPTY_EXPORT_NAME, error_message=NO_ITEMS_MESSAGE)

    @classmethod
    def failed(cls, message: str) -> "ExportOutcome":
        return cls(success=False, error_message=message)

    def to_dict(self) -> dict:
        """Return the camelCase wire shape, omitting unset fields."""
        data = {
            "success": self.success,
            "fileName": self.file_name,
            "artifactKey": self.artifact_key,
            "downloadUrl": self.download_url,
            "expiresAt": iso_timestamp(self.expires_at) if self.expires_at else None,
            "errorMessage": self.error_message,
        }
        return {k: v for k, v in data.items() if v is not None}
