"""Pydantic schemas for networking report REST payloads."""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .models import SignatureImage

_ALIASED = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DeriveRequest(BaseModel):
    model_config = _ALIASED

    values: Dict[str, Optional[str]] = Field(default_factory=dict)
    changed_field: str


class ValuesRequest(BaseModel):
    model_config = _ALIASED

    values: Dict[str, Optional[str]] = Field(default_factory=dict)


class ValuesRead(BaseModel):
    model_config = _ALIASED

    values: Dict[str, Optional[str]]


class ValidationRead(BaseModel):
    model_config = _ALIASED

    valid: bool
    errors: Dict[str, str] = Field(default_factory=dict)


class ExportRequest(BaseModel):
    model_config = _ALIASED

    values: Dict[str, Optional[str]] = Field(default_factory=dict)
    customer_signature: str = ""
    engineer_signature: str = ""

    @field_validator("customer_signature", "engineer_signature")
    @classmethod
    def check_data_uri(cls, value: str) -> str:
        if value and value.strip():
            SignatureImage.from_data_uri(value)
        return value.strip()

    def signature(self, who: str) -> SignatureImage:
        raw = self.customer_signature if who == "customer" else self.engineer_signature
        if not raw:
            return SignatureImage(png=b"", width=0, height=0, is_empty=True)
        return SignatureImage.from_data_uri(raw)


class FieldRead(BaseModel):
    model_config = _ALIASED

    name: str
    kind: str
    label: str
    required: bool
    min_length: Optional[int] = None
    pattern: Optional[str] = None
    derived_from: Optional[str] = None
    editable: bool


class ChecklistRead(BaseModel):
    model_config = _ALIASED

    key: str
    title: str
    headers: List[str]
    items: List[str]
    remark_fields: List[str]


class SchemaRead(BaseModel):
    model_config = _ALIASED

    descriptors: List[FieldRead]
    checklists: List[ChecklistRead]
