"""Submission flow for the networking report.

Submitting runs validation, the signature check, record assembly, PDF export
and the optional send step.  Every :class:`ReportError` is caught here and
returned in a :class:`SubmissionOutcome`; nothing propagates past
:meth:`ReportSubmitter.submit`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Protocol

from .errors import (
    ExportFailure,
    FieldValidationError,
    MissingSignatureError,
    ReportError,
    SubmissionFailure,
)
from .form_state import FormState
from .models import Invalid, ReportRecord
from .pdf_export import DocumentExporter
from .signature import SignatureCapture

logger = logging.getLogger(__name__)


class SubmissionState(str, Enum):
    IDLE = "idle"
    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class ReportSender(Protocol):
    """Delivers the report payload to a backend."""

    async def send(self, payload: Mapping[str, Any]) -> None:
        ...


@dataclass(slots=True)
class SubmissionOutcome:
    state: SubmissionState
    record: Optional[ReportRecord] = None
    document: Optional[bytes] = None
    payload: Optional[Dict[str, Any]] = None
    error: Optional[ReportError] = None
    errors: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.error is None and self.state is SubmissionState.SUCCEEDED

    @property
    def message(self) -> str:
        if self.error is None:
            return "Report submitted successfully!"
        return str(self.error)


def assemble_record(form: FormState, customer_pad: SignatureCapture, engineer_pad: SignatureCapture) -> ReportRecord:
    """Validate ``form`` and combine it with both signatures.

    Raises :class:`FieldValidationError` or :class:`MissingSignatureError`.
    """

    result = form.validate()
    if isinstance(result, Invalid):
        raise FieldValidationError(result.errors)
    missing = tuple(
        who for who, pad in (("customer", customer_pad), ("engineer", engineer_pad)) if pad.is_empty()
    )
    if missing:
        raise MissingSignatureError(missing)
    return ReportRecord(
        data=result.record,
        customer_signature=customer_pad.export_image(),
        engineer_signature=engineer_pad.export_image(),
    )


class ReportSubmitter:
    """Drives one form and its two signature pads through submission."""

    def __init__(
        self,
        form: FormState,
        customer_pad: SignatureCapture,
        engineer_pad: SignatureCapture,
        *,
        exporter: Optional[DocumentExporter] = None,
        sender: Optional[ReportSender] = None,
    ) -> None:
        self.form = form
        self.customer_pad = customer_pad
        self.engineer_pad = engineer_pad
        self.exporter = exporter or DocumentExporter()
        self.sender = sender
        self.state = SubmissionState.IDLE
        self.last_outcome: Optional[SubmissionOutcome] = None

    @property
    def can_submit(self) -> bool:
        return self.state is not SubmissionState.PENDING

    def clear_signatures(self) -> None:
        self.customer_pad.clear()
        self.engineer_pad.clear()

    async def submit(self) -> SubmissionOutcome:
        if self.state is SubmissionState.PENDING:
            return SubmissionOutcome(
                state=SubmissionState.PENDING,
                error=SubmissionFailure("Submission already in progress"),
            )

        try:
            record = assemble_record(self.form, self.customer_pad, self.engineer_pad)
        except FieldValidationError as exc:
            logger.info("Submission blocked: %d invalid field(s)", len(exc.errors))
            self.state = SubmissionState.IDLE
            return self._finish(SubmissionOutcome(state=SubmissionState.IDLE, error=exc, errors=dict(exc.errors)))
        except MissingSignatureError as exc:
            logger.info("Submission blocked: missing signature(s) %s", ", ".join(exc.missing))
            self.state = SubmissionState.IDLE
            return self._finish(SubmissionOutcome(state=SubmissionState.IDLE, error=exc))

        self.state = SubmissionState.PENDING
        self.form.lock()
        try:
            try:
                document = self.exporter.export(record)
            except ExportFailure:
                raise
            except Exception as exc:
                raise ExportFailure(f"Error generating report document: {exc}") from exc
            payload = record.to_payload()
            if self.sender is not None:
                try:
                    await self.sender.send(payload)
                except Exception as exc:
                    raise SubmissionFailure(f"Error submitting report: {exc}") from exc
        except ReportError as exc:
            logger.warning("Submission failed: %s", exc)
            self.state = SubmissionState.FAILED
            return self._finish(SubmissionOutcome(state=SubmissionState.FAILED, error=exc))
        finally:
            self.form.unlock()

        self.state = SubmissionState.SUCCEEDED
        logger.info("Report %s submitted", record.text("po_code"))
        return self._finish(
            SubmissionOutcome(
                state=SubmissionState.SUCCEEDED,
                record=record,
                document=document,
                payload=payload,
            )
        )

    def _finish(self, outcome: SubmissionOutcome) -> SubmissionOutcome:
        self.last_outcome = outcome
        return outcome


__all__ = [
    "SubmissionState",
    "SubmissionOutcome",
    "ReportSender",
    "ReportSubmitter",
    "assemble_record",
]
