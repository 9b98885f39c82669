from datetime import date

from modules.networking_report.models import Invalid, Valid
from modules.networking_report.schema import CONNECTION_ITEMS, NETWORKING_REPORT_SCHEMA
from modules.networking_report.validation import validate, validate_field

SCHEMA = NETWORKING_REPORT_SCHEMA


def test_valid_input_produces_typed_record(valid_values):
    padded = dict(valid_values, spoc_name="  Ravi Kumar  ")
    result = validate(padded, SCHEMA)
    assert isinstance(result, Valid)
    record = result.record
    assert record["spoc_name"] == "Ravi Kumar"
    assert record["report_date"] == date(2025, 5, 16)
    assert record["po_code"] == "PO160525SE01"
    for name, value in valid_values.items():
        expected = record.text(name)
        assert expected == value.strip()


def test_checklist_rows_merge_remarks_by_position(valid_values):
    record = validate(valid_values, SCHEMA).record
    assert [row.sequence_number for row in record.connections] == list(range(1, 10))
    assert [row.particulars for row in record.connections] == list(CONNECTION_ITEMS)
    assert record.connections[0].remark == "42U rack in server room"
    assert record.connections[1].remark == ""
    assert record.connections[4].remark == "UPS failover OK"
    assert len(record.tests) == 5
    assert record.tests[3].remark == "All hops reachable"
    assert record.technical[0].parameter == "WAN IP"
    assert record.technical[0].value == "Static IP"


def test_all_failures_collected(valid_values):
    bad = dict(valid_values)
    bad["service_support_mobile"] = "98765432"
    bad["customer_name_address"] = "short"
    bad.pop("spoc_name")
    bad["completion_date"] = "2025-13-01"
    result = validate(bad, SCHEMA)
    assert isinstance(result, Invalid)
    assert dict(result.errors) == {
        "service_support_mobile": "Invalid mobile number",
        "customer_name_address": "Address too short",
        "spoc_name": "Required",
        "completion_date": "Invalid date",
    }


def test_empty_input_reports_every_required_field():
    result = validate({}, SCHEMA)
    assert isinstance(result, Invalid)
    required = {name for name in SCHEMA if not SCHEMA.is_derived(name) and SCHEMA.constraints_for(name).required}
    assert set(result.errors) == required
    assert "po_code" not in result.errors
    assert "connection_remark_0" not in result.errors


def test_mobile_number_digits(valid_values):
    assert validate_field("service_support_mobile", {"service_support_mobile": "98765432"}, SCHEMA) == "Invalid mobile number"
    assert validate_field("service_support_mobile", {"service_support_mobile": "9876543210"}, SCHEMA) is None
    assert validate_field("service_support_mobile", {"service_support_mobile": "98765432101"}, SCHEMA) is not None
    assert validate_field("spoc_contact", {"spoc_contact": "98765-4321"}, SCHEMA) == "Invalid contact number"
    # Non-ASCII digits are not accepted.
    assert validate_field("spoc_contact", {"spoc_contact": "९८७६५४३२१०"}, SCHEMA) is not None


def test_lsse_remark_boundary(valid_values):
    short = dict(valid_values, lsse_remark="a" * 49)
    exact = dict(valid_values, lsse_remark="a" * 50)
    result = validate(short, SCHEMA)
    assert isinstance(result, Invalid)
    assert dict(result.errors) == {"lsse_remark": "Minimum 50 characters required"}
    assert isinstance(validate(exact, SCHEMA), Valid)


def test_min_length_counts_trimmed_value(valid_values):
    padded = dict(valid_values, lsse_remark="  " + "a" * 49 + "   ")
    assert isinstance(validate(padded, SCHEMA), Invalid)


def test_stale_po_code_is_recomputed(valid_values):
    stale = dict(valid_values, po_code="PO010101SE01")
    record = validate(stale, SCHEMA).record
    assert record["po_code"] == "PO160525SE01"


def test_validation_is_deterministic(valid_values):
    assert validate(valid_values, SCHEMA) == validate(dict(valid_values), SCHEMA)


def test_blank_phone_reports_number_message(valid_values):
    blank = dict(valid_values, service_support_mobile="   ", spoc_contact="")
    result = validate(blank, SCHEMA)
    assert isinstance(result, Invalid)
    assert dict(result.errors) == {
        "service_support_mobile": "Invalid mobile number",
        "spoc_contact": "Invalid contact number",
    }
