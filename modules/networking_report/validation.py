"""Validation of raw form input against a :class:`FieldSchema`.

The whole submission is atomic: either every editable field satisfies its
constraint and a :class:`Valid` result carries the typed record, or an
:class:`Invalid` result lists one message for every failing field.  Nothing
here reads the clock.
"""

from __future__ import annotations

from datetime import date
from typing import Dict, Mapping, Optional

from .derivation import parse_report_date
from .models import (
    ChecklistRow,
    FieldValue,
    Invalid,
    TechnicalParameterRow,
    TypedRecord,
    Valid,
    ValidationResult,
)
from .schema import FieldKind, FieldSchema

REQUIRED_MESSAGE = "Required"
INVALID_DATE_MESSAGE = "Invalid date"


def _clean(raw: Mapping[str, Optional[str]], name: str) -> str:
    value = raw.get(name)
    return "" if value is None else str(value).strip()


def validate_field(name: str, raw: Mapping[str, Optional[str]], schema: FieldSchema) -> Optional[str]:
    """Return the error message for ``name`` or ``None`` when it is valid.

    Derived fields are never checked.
    """

    descriptor = schema.descriptor(name)
    if descriptor.kind is FieldKind.DERIVED:
        return None
    constraint = descriptor.constraint
    value = _clean(raw, name)
    if not value:
        if not constraint.required:
            return None
        # A blank number fails the digit pattern like any other bad number.
        return constraint.message if descriptor.kind is FieldKind.PHONE else REQUIRED_MESSAGE
    if descriptor.kind is FieldKind.DATE and parse_report_date(value) is None:
        return INVALID_DATE_MESSAGE
    if constraint.min_length is not None and len(value) < constraint.min_length:
        return constraint.message
    if constraint.pattern is not None and constraint.pattern.fullmatch(value) is None:
        return constraint.message
    return None


def _typed_values(raw: Mapping[str, Optional[str]], schema: FieldSchema) -> Dict[str, FieldValue]:
    values: Dict[str, FieldValue] = {}
    for name in schema:
        descriptor = schema.descriptor(name)
        if descriptor.kind is FieldKind.DERIVED:
            continue
        text = _clean(raw, name)
        if descriptor.kind is FieldKind.DATE and text:
            parsed: Optional[date] = parse_report_date(text)
            values[name] = parsed if parsed is not None else text
        else:
            values[name] = text
    # Derived values come from their validated source so a stale raw value
    # never reaches the record.
    for name in schema:
        if not schema.is_derived(name):
            continue
        source, derive = schema.derivation_rule_for(name)
        derived = derive(_clean(raw, source))
        values[name] = derived if derived is not None else _clean(raw, name)
    return values


def _checklist_rows(raw: Mapping[str, Optional[str]], schema: FieldSchema, key: str) -> tuple[ChecklistRow, ...]:
    checklist = schema.checklist(key)
    return tuple(
        ChecklistRow(
            sequence_number=index + 1,
            particulars=item,
            remark=_clean(raw, checklist.remark_field(index)),
        )
        for index, item in enumerate(checklist.items)
    )


def _technical_rows(raw: Mapping[str, Optional[str]], schema: FieldSchema) -> tuple[TechnicalParameterRow, ...]:
    return tuple(
        TechnicalParameterRow(
            sequence_number=index,
            parameter=param.label,
            value=_clean(raw, param.value_field),
            remark=_clean(raw, param.remark_field),
        )
        for index, param in enumerate(schema.technical_parameters, start=1)
    )


def validate(raw: Mapping[str, Optional[str]], schema: FieldSchema) -> ValidationResult:
    """Validate ``raw`` against ``schema``.

    Every failing field is reported; validation never stops at the first
    error.  Absent entries count as empty strings.
    """

    errors: Dict[str, str] = {}
    for name in schema:
        message = validate_field(name, raw, schema)
        if message is not None:
            errors[name] = message
    if errors:
        return Invalid(errors)

    checklist_keys = {c.key for c in schema.checklists}
    record = TypedRecord(
        values=_typed_values(raw, schema),
        connections=_checklist_rows(raw, schema, "connections") if "connections" in checklist_keys else (),
        technical=_technical_rows(raw, schema),
        tests=_checklist_rows(raw, schema, "tests") if "tests" in checklist_keys else (),
    )
    return Valid(record)


__all__ = ["REQUIRED_MESSAGE", "INVALID_DATE_MESSAGE", "validate", "validate_field"]
