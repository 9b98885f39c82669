"""Datamodel definitions for the networking report."""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass, field
from datetime import date
from types import MappingProxyType
from typing import Any, Dict, Mapping, Tuple, Union

from .errors import MissingSignatureError

PNG_MEDIA_TYPE = "image/png"
DATA_URI_PREFIX = f"data:{PNG_MEDIA_TYPE};base64,"

FieldValue = Union[str, date]


@dataclass(frozen=True, slots=True)
class ChecklistRow:
    sequence_number: int
    particulars: str
    remark: str = ""

    def to_payload(self) -> Dict[str, Any]:
        return {
            "sequence_number": self.sequence_number,
            "particulars": self.particulars,
            "remark": self.remark,
        }


@dataclass(frozen=True, slots=True)
class TechnicalParameterRow:
    sequence_number: int
    parameter: str
    value: str = ""
    remark: str = ""

    def to_payload(self) -> Dict[str, Any]:
        return {
            "sequence_number": self.sequence_number,
            "parameter": self.parameter,
            "value": self.value,
            "remark": self.remark,
        }


@dataclass(frozen=True, slots=True)
class SignatureImage:
    """PNG raster of a captured signature."""

    png: bytes
    width: int
    height: int
    is_empty: bool

    def to_base64(self) -> str:
        return base64.b64encode(self.png).decode("ascii")

    def to_data_uri(self) -> str:
        return DATA_URI_PREFIX + self.to_base64()

    @classmethod
    def from_data_uri(cls, uri: str) -> "SignatureImage":
        """Parse a ``data:image/png;base64,...`` URI (or bare base64).

        Raises :class:`ValueError` for malformed payloads.  Pixel size is not
        decoded here; the exporter reads it from the PNG itself.
        """

        text = (uri or "").strip()
        if text.startswith("data:"):
            header, _, text = text.partition(",")
            if not header.endswith(";base64") or PNG_MEDIA_TYPE not in header:
                raise ValueError("Signature must be a base64 encoded PNG data URI")
        try:
            png = base64.b64decode(text, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise ValueError("Signature payload is not valid base64") from exc
        return cls(png=png, width=0, height=0, is_empty=not png)


@dataclass(frozen=True, slots=True)
class TypedRecord:
    """Validated projection of the raw form input."""

    values: Mapping[str, FieldValue]
    connections: Tuple[ChecklistRow, ...] = ()
    technical: Tuple[TechnicalParameterRow, ...] = ()
    tests: Tuple[ChecklistRow, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "values", MappingProxyType(dict(self.values)))

    def __getitem__(self, name: str) -> FieldValue:
        return self.values[name]

    def get(self, name: str, default: Any = None) -> Any:
        return self.values.get(name, default)

    def text(self, name: str) -> str:
        """Return ``name`` as printable text (dates in ISO form)."""

        value = self.values.get(name, "")
        if isinstance(value, date):
            return value.isoformat()
        return str(value)


@dataclass(frozen=True, slots=True)
class Valid:
    record: TypedRecord

    @property
    def is_valid(self) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class Invalid:
    errors: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "errors", MappingProxyType(dict(self.errors)))

    @property
    def is_valid(self) -> bool:
        return False


ValidationResult = Union[Valid, Invalid]


@dataclass(frozen=True, slots=True)
class ReportRecord:
    """Validated report plus both signatures, ready for export."""

    data: TypedRecord
    customer_signature: SignatureImage
    engineer_signature: SignatureImage

    def __post_init__(self) -> None:
        missing = tuple(
            who
            for who, image in (
                ("customer", self.customer_signature),
                ("engineer", self.engineer_signature),
            )
            if image.is_empty
        )
        if missing:
            raise MissingSignatureError(missing)

    @property
    def connections(self) -> Tuple[ChecklistRow, ...]:
        return self.data.connections

    @property
    def technical(self) -> Tuple[TechnicalParameterRow, ...]:
        return self.data.technical

    @property
    def tests(self) -> Tuple[ChecklistRow, ...]:
        return self.data.tests

    def text(self, name: str) -> str:
        return self.data.text(name)

    def to_payload(self) -> Dict[str, Any]:
        """Return a JSON-serialisable mapping for the submission endpoint."""

        payload: Dict[str, Any] = {name: self.data.text(name) for name in self.data.values}
        payload["connections"] = [row.to_payload() for row in self.connections]
        payload["technical_parameters"] = [row.to_payload() for row in self.technical]
        payload["tests"] = [row.to_payload() for row in self.tests]
        payload["customer_signature"] = self.customer_signature.to_data_uri()
        payload["engineer_signature"] = self.engineer_signature.to_data_uri()
        return payload


__all__ = [
    "PNG_MEDIA_TYPE",
    "ChecklistRow",
    "TechnicalParameterRow",
    "SignatureImage",
    "TypedRecord",
    "Valid",
    "Invalid",
    "ValidationResult",
    "ReportRecord",
]
