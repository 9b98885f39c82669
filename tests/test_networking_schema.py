import pytest

from modules.networking_report.derivation import po_code_for
from modules.networking_report.errors import SchemaError, UnknownFieldError
from modules.networking_report.schema import (
    CONNECTION_ITEMS,
    NETWORKING_REPORT_SCHEMA,
    TEST_ITEMS,
    FieldDescriptor,
    FieldKind,
    FieldSchema,
)


def test_derived_po_code_rule():
    schema = NETWORKING_REPORT_SCHEMA
    assert schema.is_derived("po_code")
    assert not schema.is_derived("report_date")
    source, fn = schema.derivation_rule_for("po_code")
    assert source == "report_date"
    assert fn("2025-05-16") == "PO160525SE01"
    assert schema.dependents_of("report_date") == ("po_code",)
    assert "po_code" not in schema.editable_fields()


def test_constraints_match_form():
    schema = NETWORKING_REPORT_SCHEMA
    assert schema.constraints_for("customer_name_address").min_length == 10
    assert schema.constraints_for("lsse_remark").min_length == 50
    assert schema.constraints_for("service_support_mobile").pattern.fullmatch("9876543210")
    assert schema.constraints_for("spoc_contact").message == "Invalid contact number"
    assert schema.constraints_for("spoc_name").required
    assert not schema.constraints_for("connection_remark_0").required


def test_checklists_are_fixed_and_ordered():
    connections = NETWORKING_REPORT_SCHEMA.checklist("connections")
    tests = NETWORKING_REPORT_SCHEMA.checklist("tests")
    assert connections.items == CONNECTION_ITEMS
    assert len(connections.items) == 9
    assert tests.items == TEST_ITEMS
    assert len(tests.items) == 5
    assert connections.remark_fields[0] == "connection_remark_0"
    assert tests.remark_fields[-1] == "test_result_4"
    assert tests.headers == ("S.N", "Testing", "Result")


def test_unknown_field_fails_fast():
    with pytest.raises(UnknownFieldError):
        NETWORKING_REPORT_SCHEMA.constraints_for("fax_number")
    with pytest.raises(UnknownFieldError):
        NETWORKING_REPORT_SCHEMA.is_derived("fax_number")


def test_rejects_derivation_from_derived_field():
    fields = [
        FieldDescriptor("report_date", FieldKind.DATE, "Date"),
        FieldDescriptor("po_code", FieldKind.DERIVED, "PO", derived_from="report_date", derive_fn=po_code_for),
        FieldDescriptor("po_copy", FieldKind.DERIVED, "Copy", derived_from="po_code", derive_fn=str),
    ]
    with pytest.raises(SchemaError):
        FieldSchema(fields)


def test_rejects_missing_source_and_duplicates():
    with pytest.raises(SchemaError):
        FieldSchema([FieldDescriptor("po_code", FieldKind.DERIVED, "PO", derived_from="nope", derive_fn=po_code_for)])
    with pytest.raises(SchemaError):
        FieldSchema([FieldDescriptor("a", FieldKind.TEXT, "A"), FieldDescriptor("a", FieldKind.TEXT, "A")])


def test_non_derived_field_has_no_rule():
    with pytest.raises(SchemaError):
        NETWORKING_REPORT_SCHEMA.derivation_rule_for("report_date")
