"""Smart Networking Report module entry point."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .derivation import apply_derivations, po_code_for
from .errors import (
    ExportFailure,
    FieldValidationError,
    MissingSignatureError,
    ReportError,
    SubmissionFailure,
)
from .form_state import FormState
from .models import ChecklistRow, Invalid, ReportRecord, SignatureImage, TypedRecord, Valid
from .pdf_export import DocumentExporter, build_pdf
from .schema import NETWORKING_REPORT_SCHEMA, FieldSchema
from .service import ReportSubmitter, SubmissionOutcome, SubmissionState
from .signature import SignatureCapture
from .validation import validate

if TYPE_CHECKING:  # pragma: no cover - typing only
    from fastapi import FastAPI

__all__ = [
    "register_api",
    "apply_derivations",
    "po_code_for",
    "validate",
    "FieldSchema",
    "NETWORKING_REPORT_SCHEMA",
    "FormState",
    "SignatureCapture",
    "SignatureImage",
    "ChecklistRow",
    "TypedRecord",
    "Valid",
    "Invalid",
    "ReportRecord",
    "DocumentExporter",
    "build_pdf",
    "ReportSubmitter",
    "SubmissionOutcome",
    "SubmissionState",
    "ReportError",
    "FieldValidationError",
    "MissingSignatureError",
    "ExportFailure",
    "SubmissionFailure",
]


def register_api(app: "FastAPI") -> None:
    """Register FastAPI routes for the networking report."""
    from .api import router as report_router

    if not any(getattr(r, "path", "").startswith("/api/networking-report") for r in app.router.routes):
        app.include_router(report_router)
