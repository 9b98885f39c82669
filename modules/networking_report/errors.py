"""Error kinds raised by the networking report pipeline."""

from __future__ import annotations

from typing import Mapping


class ReportError(RuntimeError):
    """Base class for recoverable, user-facing report errors."""


class FieldValidationError(ReportError):
    """Raised when one or more fields fail their constraint."""

    def __init__(self, errors: Mapping[str, str]):
        super().__init__("One or more fields are invalid.")
        self.errors = dict(errors)


class MissingSignatureError(ReportError):
    """Raised when a signature pad is empty at submit time."""

    def __init__(self, missing: tuple[str, ...] = ()):
        super().__init__("Please provide both signatures")
        self.missing = missing


class ExportFailure(ReportError):
    """Raised when the PDF document cannot be generated."""


class SubmissionFailure(ReportError):
    """Raised when the send step after export fails."""


# Programmer errors ------------------------------------------------------


class SchemaError(ValueError):
    """Raised when a field schema violates its own invariants."""


class UnknownFieldError(KeyError):
    """Raised when a field name is not declared in the schema."""


class ReadOnlyFieldError(ValueError):
    """Raised when a derived field is edited directly."""


class FormLockedError(RuntimeError):
    """Raised when the form is edited while a submission is pending."""


__all__ = [
    "ReportError",
    "FieldValidationError",
    "MissingSignatureError",
    "ExportFailure",
    "SubmissionFailure",
    "SchemaError",
    "UnknownFieldError",
    "ReadOnlyFieldError",
    "FormLockedError",
]
