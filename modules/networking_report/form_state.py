"""Form state owner for the networking report.

``FormState`` holds the single copy of the raw input that both the widgets
and the validator read.  Every edit flows through :meth:`FormState.set_value`,
which runs the derivation rules explicitly and, once a submission attempt has
failed, re-checks the edited field so the displayed errors stay current.
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Dict, Mapping, Optional

from .derivation import RawInput, apply_derivations
from .errors import FormLockedError, ReadOnlyFieldError
from .models import Invalid, ValidationResult
from .schema import NETWORKING_REPORT_SCHEMA, FieldSchema
from .validation import validate, validate_field

logger = logging.getLogger(__name__)


class FormState:
    def __init__(self, schema: FieldSchema = NETWORKING_REPORT_SCHEMA, initial: Optional[Mapping[str, Optional[str]]] = None) -> None:
        self.schema = schema
        self._raw: RawInput = {}
        self._errors: Dict[str, str] = {}
        self._validated = False
        self._locked = False
        if initial:
            self.reset(initial)

    # --- reading ---------------------------------------------------------
    def current_value(self, name: str) -> str:
        self.schema.descriptor(name)
        return self._raw.get(name) or ""

    def snapshot(self) -> RawInput:
        """Return a copy of the raw input."""

        return dict(self._raw)

    @property
    def errors(self) -> Mapping[str, str]:
        return MappingProxyType(self._errors)

    def error_for(self, name: str) -> Optional[str]:
        self.schema.descriptor(name)
        return self._errors.get(name)

    @property
    def locked(self) -> bool:
        return self._locked

    # --- writing ---------------------------------------------------------
    def set_value(self, name: str, value: Optional[str]) -> None:
        descriptor = self.schema.descriptor(name)
        if not descriptor.editable:
            raise ReadOnlyFieldError(f"{name} is derived and cannot be edited")
        if self._locked:
            raise FormLockedError("The form is locked while a submission is pending")
        raw = dict(self._raw)
        raw[name] = value
        self._raw = apply_derivations(raw, name, self.schema)
        if self._validated:
            message = validate_field(name, self._raw, self.schema)
            if message is None:
                self._errors.pop(name, None)
            else:
                self._errors[name] = message

    def reset(self, values: Optional[Mapping[str, Optional[str]]] = None) -> None:
        """Replace the raw input wholesale and forget previous errors."""

        if self._locked:
            raise FormLockedError("The form is locked while a submission is pending")
        raw: RawInput = {}
        for name, value in (values or {}).items():
            self.schema.descriptor(name)
            raw[name] = value
        for name in list(raw):
            if not self.schema.is_derived(name):
                raw = apply_derivations(raw, name, self.schema)
        self._raw = raw
        self._errors = {}
        self._validated = False

    def validate(self) -> ValidationResult:
        result = validate(self._raw, self.schema)
        self._validated = True
        self._errors = dict(result.errors) if isinstance(result, Invalid) else {}
        if self._errors:
            logger.debug("Form has %d invalid field(s): %s", len(self._errors), sorted(self._errors))
        return result

    def lock(self) -> None:
        self._locked = True

    def unlock(self) -> None:
        self._locked = False


__all__ = ["FormState"]
