"""Derived field rules.

Derived fields are recomputed explicitly by whoever owns the form input
whenever a source field changes; there is no subscription machinery.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import TYPE_CHECKING, Dict, Mapping, Optional

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .schema import FieldSchema

logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y-%m-%d"

PO_PREFIX = "PO"
# Engineer initials plus sequence.  There is no sequence allocator, so the
# number is always 01.
PO_SUFFIX = "SE01"

RawInput = Dict[str, Optional[str]]


def parse_report_date(value: Optional[str]) -> Optional[date]:
    """Return the calendar date in ``value`` (``YYYY-MM-DD``) or ``None``."""

    text = (value or "").strip()
    if not text:
        return None
    try:
        return datetime.strptime(text, DATE_FORMAT).date()
    except ValueError:
        return None


def po_code_for(value: Optional[str]) -> Optional[str]:
    """Return ``PO<DD><MM><YY>SE01`` for the date in ``value``.

    ``None`` means the date did not parse and the caller should keep the
    current code.
    """

    parsed = parse_report_date(value)
    if parsed is None:
        return None
    return f"{PO_PREFIX}{parsed:%d%m%y}{PO_SUFFIX}"


def apply_derivations(raw: Mapping[str, Optional[str]], changed_field: str, schema: "FieldSchema") -> RawInput:
    """Return a copy of ``raw`` with the dependents of ``changed_field`` recomputed.

    A dependent whose derive function yields ``None`` (source empty or not a
    valid date) keeps its previous value.
    """

    updated: RawInput = dict(raw)
    for name in schema.dependents_of(changed_field):
        _, derive = schema.derivation_rule_for(name)
        value = derive(updated.get(changed_field))
        if value is None:
            logger.debug("Keeping %s=%r; %s did not derive", name, updated.get(name), changed_field)
            continue
        updated[name] = value
    return updated


__all__ = ["DATE_FORMAT", "PO_PREFIX", "PO_SUFFIX", "parse_report_date", "po_code_for", "apply_derivations"]
