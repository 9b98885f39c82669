from __future__ import annotations

import os

import pytest

# Qt widgets require a platform plugin.  Offscreen avoids libGL dependencies
# inside the test container.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

LSSE_REMARK = (
    "Installed the rack, patched every port, configured VLANs and verified WAN failover."
)


@pytest.fixture()
def valid_values() -> dict:
    return {
        "service_support_mobile": "9876543210",
        "report_date": "2025-05-16",
        "starting_date": "2025-05-10",
        "completion_date": "2025-05-15",
        "customer_name_address": "Acme Logistics, 12 MG Road, Pune",
        "spoc_name": "Ravi Kumar",
        "spoc_designation": "IT Manager",
        "spoc_contact": "9123456780",
        "wan_ip_type": "Static IP",
        "wan_ip_remark": "ISP provided /29",
        "lsse_remark": LSSE_REMARK,
        "customer_name": "Ravi Kumar",
        "customer_sign_date": "2025-05-16",
        "engineer_name": "Suresh Patil",
        "engineer_sign_date": "2025-05-16",
        "connection_remark_0": "42U rack in server room",
        "connection_remark_4": "UPS failover OK",
        "test_result_0": "94 Mbps / 8 ms",
        "test_result_3": "All hops reachable",
    }


def _signed_pad():
    from modules.networking_report.signature import SignatureCapture

    pad = SignatureCapture()
    pad.add_stroke([(20, 120), (60, 60), (110, 140), (160, 70)])
    pad.add_stroke([(200, 100)])
    return pad


@pytest.fixture()
def signed_pad():
    return _signed_pad()


@pytest.fixture()
def report_record(valid_values):
    from modules.networking_report.models import ReportRecord, Valid
    from modules.networking_report.schema import NETWORKING_REPORT_SCHEMA
    from modules.networking_report.validation import validate

    result = validate(valid_values, NETWORKING_REPORT_SCHEMA)
    assert isinstance(result, Valid)
    return ReportRecord(
        data=result.record,
        customer_signature=_signed_pad().export_image(),
        engineer_signature=_signed_pad().export_image(),
    )
