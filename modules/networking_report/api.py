"""FastAPI routes for the networking report module."""

from __future__ import annotations

from io import BytesIO

from fastapi import APIRouter, Response, status
from fastapi.responses import JSONResponse, StreamingResponse

from utils.app_settings import load_settings

from .derivation import apply_derivations
from .errors import ExportFailure, MissingSignatureError
from .models import Invalid, ReportRecord
from .pdf_export import DocumentExporter
from .schema import NETWORKING_REPORT_SCHEMA
from .validation import validate
from .validators import (
    ChecklistRead,
    DeriveRequest,
    ExportRequest,
    FieldRead,
    SchemaRead,
    ValidationRead,
    ValuesRead,
    ValuesRequest,
)

router = APIRouter(prefix="/api/networking-report", tags=["networking-report"])


def _with_derivations(values: dict) -> dict:
    raw = dict(values)
    for name in list(raw):
        if name in NETWORKING_REPORT_SCHEMA and not NETWORKING_REPORT_SCHEMA.is_derived(name):
            raw = apply_derivations(raw, name, NETWORKING_REPORT_SCHEMA)
    return raw


def _unknown_field(name: str) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"error": "unknown_field", "field": name},
    )


@router.get("/schema", response_model=SchemaRead)
def get_schema() -> SchemaRead:
    schema = NETWORKING_REPORT_SCHEMA
    descriptors = []
    for name in schema:
        d = schema.descriptor(name)
        descriptors.append(
            FieldRead(
                name=name,
                kind=d.kind.value,
                label=d.label,
                required=d.constraint.required,
                min_length=d.constraint.min_length,
                pattern=d.constraint.pattern.pattern if d.constraint.pattern is not None else None,
                derived_from=d.derived_from,
                editable=d.editable,
            )
        )
    checklists = [
        ChecklistRead(
            key=c.key,
            title=c.title,
            headers=list(c.headers),
            items=list(c.items),
            remark_fields=list(c.remark_fields),
        )
        for c in schema.checklists
    ]
    return SchemaRead(descriptors=descriptors, checklists=checklists)


@router.post("/derive", response_model=ValuesRead)
def derive(payload: DeriveRequest) -> Response:
    if payload.changed_field not in NETWORKING_REPORT_SCHEMA:
        return _unknown_field(payload.changed_field)
    values = apply_derivations(payload.values, payload.changed_field, NETWORKING_REPORT_SCHEMA)
    return ValuesRead(values=values)


@router.post("/validate", response_model=ValidationRead)
def validate_values(payload: ValuesRequest) -> ValidationRead:
    result = validate(_with_derivations(payload.values), NETWORKING_REPORT_SCHEMA)
    if isinstance(result, Invalid):
        return ValidationRead(valid=False, errors=dict(result.errors))
    return ValidationRead(valid=True)


@router.post("/export")
def export_pdf(payload: ExportRequest) -> Response:
    result = validate(_with_derivations(payload.values), NETWORKING_REPORT_SCHEMA)
    if isinstance(result, Invalid):
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"error": "validation_failed", "errors": dict(result.errors)},
        )
    try:
        record = ReportRecord(
            data=result.record,
            customer_signature=payload.signature("customer"),
            engineer_signature=payload.signature("engineer"),
        )
    except MissingSignatureError as exc:
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"error": "missing_signature", "missing": list(exc.missing), "message": str(exc)},
        )

    exporter = DocumentExporter(load_settings())
    try:
        pdf_bytes = exporter.export(record)
    except ExportFailure as exc:
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"error": "export_failed", "message": str(exc)},
        )
    filename = exporter.settings.document_filename
    return StreamingResponse(
        BytesIO(pdf_bytes),
        media_type="application/pdf",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


__all__ = ["router"]
