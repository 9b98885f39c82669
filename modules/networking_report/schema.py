"""Declarative field schema for the Smart Networking Report form.

The schema is a static description of every field on the form: its kind,
the constraint the ValidationEngine checks, the caption printed on the PDF
and, for derived fields, the source field plus the pure function used to
compute the value.  Checklist tables are declared alongside the fields so the
remark inputs and the fixed item lists always stay in step.

Looking up a field that is not declared is a programmer error and raises
:class:`UnknownFieldError` immediately.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Iterable, Iterator, Optional, Pattern, Sequence, Tuple, cast

from .derivation import po_code_for
from .errors import SchemaError, UnknownFieldError

DeriveFn = Callable[[str], Optional[str]]

TEN_DIGITS: Pattern[str] = re.compile(r"[0-9]{10}", re.ASCII)


class FieldKind(str, Enum):
    TEXT = "text"
    DATE = "date"
    PHONE = "phone"
    LONGTEXT = "longtext"
    DERIVED = "readonly-derived"


@dataclass(frozen=True, slots=True)
class Constraint:
    """Validation rule for a single field.

    ``message`` is reported when the length or pattern check fails.  An empty
    required field reports ``"Required"``, except phone fields, which report
    ``message``.
    """

    required: bool = False
    min_length: Optional[int] = None
    pattern: Optional[Pattern[str]] = None
    message: str = "Required"


@dataclass(frozen=True, slots=True)
class FieldDescriptor:
    name: str
    kind: FieldKind
    label: str
    constraint: Constraint = field(default_factory=Constraint)
    derived_from: Optional[str] = None
    derive_fn: Optional[DeriveFn] = None

    @property
    def editable(self) -> bool:
        return self.kind is not FieldKind.DERIVED


@dataclass(frozen=True, slots=True)
class ChecklistDefinition:
    """Fixed, ordered checklist table with one operator remark per item."""

    key: str
    title: str
    headers: Tuple[str, str, str]
    items: Tuple[str, ...]
    remark_prefix: str

    def remark_field(self, index: int) -> str:
        return f"{self.remark_prefix}_{index}"

    @property
    def remark_fields(self) -> Tuple[str, ...]:
        return tuple(self.remark_field(i) for i in range(len(self.items)))


@dataclass(frozen=True, slots=True)
class TechnicalParameter:
    label: str
    value_field: str
    remark_field: str
    placeholder: str = ""


class FieldSchema:
    """Immutable collection of field descriptors and checklist tables."""

    def __init__(
        self,
        descriptors: Iterable[FieldDescriptor],
        *,
        checklists: Sequence[ChecklistDefinition] = (),
        technical_parameters: Sequence[TechnicalParameter] = (),
    ) -> None:
        fields: Dict[str, FieldDescriptor] = {}
        for descriptor in descriptors:
            if descriptor.name in fields:
                raise SchemaError(f"Duplicate descriptor for field {descriptor.name!r}")
            fields[descriptor.name] = descriptor
        self._fields = fields
        self._checklists: Tuple[ChecklistDefinition, ...] = tuple(checklists)
        self._technical: Tuple[TechnicalParameter, ...] = tuple(technical_parameters)
        self._check_invariants()

    def _check_invariants(self) -> None:
        for name, descriptor in self._fields.items():
            if descriptor.kind is FieldKind.DERIVED:
                source = descriptor.derived_from
                if not source or descriptor.derive_fn is None:
                    raise SchemaError(f"Derived field {name!r} needs a source and a derive function")
                if source not in self._fields:
                    raise SchemaError(f"Derived field {name!r} references unknown field {source!r}")
                if self._fields[source].kind is FieldKind.DERIVED:
                    raise SchemaError(f"Derived field {name!r} cannot derive from derived field {source!r}")
            elif descriptor.derived_from is not None or descriptor.derive_fn is not None:
                raise SchemaError(f"Field {name!r} has a derivation but is not declared as derived")
        for checklist in self._checklists:
            for remark in checklist.remark_fields:
                if remark not in self._fields:
                    raise SchemaError(f"Checklist {checklist.key!r} remark {remark!r} has no descriptor")
        for param in self._technical:
            for name in (param.value_field, param.remark_field):
                if name not in self._fields:
                    raise SchemaError(f"Technical parameter field {name!r} has no descriptor")

    # --- lookups ---------------------------------------------------------
    def __contains__(self, name: object) -> bool:
        return name in self._fields

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(self._fields)

    def descriptor(self, name: str) -> FieldDescriptor:
        try:
            return self._fields[name]
        except KeyError as exc:
            raise UnknownFieldError(name) from exc

    def constraints_for(self, name: str) -> Constraint:
        return self.descriptor(name).constraint

    def is_derived(self, name: str) -> bool:
        return self.descriptor(name).kind is FieldKind.DERIVED

    def derivation_rule_for(self, name: str) -> Tuple[str, DeriveFn]:
        descriptor = self.descriptor(name)
        if descriptor.kind is not FieldKind.DERIVED:
            raise SchemaError(f"Field {name!r} is not derived")
        return cast(str, descriptor.derived_from), cast(DeriveFn, descriptor.derive_fn)

    def dependents_of(self, source: str) -> Tuple[str, ...]:
        self.descriptor(source)
        return tuple(
            name for name, d in self._fields.items() if d.derived_from == source
        )

    def editable_fields(self) -> Tuple[str, ...]:
        return tuple(name for name, d in self._fields.items() if d.editable)

    @property
    def checklists(self) -> Tuple[ChecklistDefinition, ...]:
        return self._checklists

    def checklist(self, key: str) -> ChecklistDefinition:
        for checklist in self._checklists:
            if checklist.key == key:
                return checklist
        raise UnknownFieldError(key)

    @property
    def technical_parameters(self) -> Tuple[TechnicalParameter, ...]:
        return self._technical


# ---------------------------------------------------------------- form data

CONNECTION_ITEMS: Tuple[str, ...] = (
    "Network equipment was installed in a standard network rack",
    "Patch panels are labelled and organised for easy access",
    "Cable management accessories are used for proper routing",
    "Devices are mounted securely with proper ventilation",
    "Power is provided via UPS and tested for failover",
    "Structured cabling completed with labelling",
    "Backbone uplinks are configured between switches",
    "Suggest periodic backup of configurations",
    "Guest WiFi isolation is enabled for security",
)

TEST_ITEMS: Tuple[str, ...] = (
    "Speed test and latency checks performed",
    "Internet access was tested from multiple devices",
    "Wireless coverage checked using signal strength tools",
    "Ping and traceroute verified for LAN/WAN connectivity",
    "Failover tested (if redundant equipment is used)",
)

CONNECTIONS = ChecklistDefinition(
    key="connections",
    title="Position/Location/Type of Connections of the System",
    headers=("S.N", "Particulars", "Remark"),
    items=CONNECTION_ITEMS,
    remark_prefix="connection_remark",
)

TESTS = ChecklistDefinition(
    key="tests",
    title="Testing & Commissioning of User Experience",
    headers=("S.N", "Testing", "Result"),
    items=TEST_ITEMS,
    remark_prefix="test_result",
)

WAN_IP = TechnicalParameter(
    label="WAN IP",
    value_field="wan_ip_type",
    remark_field="wan_ip_remark",
    placeholder="Static IP/DHCP",
)


def _required(message: str = "Required", **kwargs) -> Constraint:
    return Constraint(required=True, message=message, **kwargs)


def _date(name: str, label: str) -> FieldDescriptor:
    return FieldDescriptor(name, FieldKind.DATE, label, _required())


def _text(name: str, label: str) -> FieldDescriptor:
    return FieldDescriptor(name, FieldKind.TEXT, label, _required())


def _optional(name: str, label: str) -> FieldDescriptor:
    return FieldDescriptor(name, FieldKind.TEXT, label)


def build_networking_report_schema() -> FieldSchema:
    """Return the schema of the networking installation report."""

    fields = [
        FieldDescriptor(
            "service_support_mobile",
            FieldKind.PHONE,
            "Service Support Mobile No",
            _required("Invalid mobile number", pattern=TEN_DIGITS),
        ),
        _date("report_date", "Date"),
        _date("starting_date", "Starting Date"),
        _date("completion_date", "Completion Date"),
        FieldDescriptor(
            "customer_name_address",
            FieldKind.LONGTEXT,
            "Customer Name & Address",
            _required("Address too short", min_length=10),
        ),
        _text("spoc_name", "SPOC Name"),
        _text("spoc_designation", "Designation"),
        FieldDescriptor(
            "spoc_contact",
            FieldKind.PHONE,
            "Contact No",
            _required("Invalid contact number", pattern=TEN_DIGITS),
        ),
        FieldDescriptor(
            "po_code",
            FieldKind.DERIVED,
            "PO Code",
            derived_from="report_date",
            derive_fn=po_code_for,
        ),
        _optional(WAN_IP.value_field, "WAN IP Type"),
        _optional(WAN_IP.remark_field, "WAN IP Remark"),
        FieldDescriptor(
            "lsse_remark",
            FieldKind.LONGTEXT,
            "Detailed Observations and Actions Taken",
            _required("Minimum 50 characters required", min_length=50),
        ),
        _text("customer_name", "Customer Name"),
        _date("customer_sign_date", "Date"),
        _text("engineer_name", "Engineer Name"),
        _date("engineer_sign_date", "Date"),
    ]
    for checklist in (CONNECTIONS, TESTS):
        for index, name in enumerate(checklist.remark_fields, start=1):
            fields.append(_optional(name, f"{checklist.headers[2]} {index}"))
    return FieldSchema(fields, checklists=(CONNECTIONS, TESTS), technical_parameters=(WAN_IP,))


NETWORKING_REPORT_SCHEMA = build_networking_report_schema()


__all__ = [
    "FieldKind",
    "Constraint",
    "FieldDescriptor",
    "ChecklistDefinition",
    "TechnicalParameter",
    "FieldSchema",
    "CONNECTION_ITEMS",
    "TEST_ITEMS",
    "CONNECTIONS",
    "TESTS",
    "WAN_IP",
    "TEN_DIGITS",
    "build_networking_report_schema",
    "NETWORKING_REPORT_SCHEMA",
]
