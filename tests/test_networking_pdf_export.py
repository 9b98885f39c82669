from dataclasses import replace
from io import BytesIO

import pytest
from pypdf import PdfReader

from modules.networking_report.errors import ExportFailure
from modules.networking_report.models import ReportRecord, SignatureImage
from modules.networking_report.pdf_export import DocumentExporter, build_pdf, page_count
from modules.networking_report.schema import CONNECTION_ITEMS, NETWORKING_REPORT_SCHEMA, TEST_ITEMS
from modules.networking_report.validation import validate
from utils.app_settings import ReportSettings


def _text(data: bytes) -> str:
    reader = PdfReader(BytesIO(data))
    return " ".join(" ".join((page.extract_text() or "").split()) for page in reader.pages)


def _record(values, signatures_from):
    result = validate(values, NETWORKING_REPORT_SCHEMA)
    return ReportRecord(
        data=result.record,
        customer_signature=signatures_from.customer_signature,
        engineer_signature=signatures_from.engineer_signature,
    )


def test_pdf_contains_every_section(report_record):
    data = build_pdf(report_record)
    assert data.startswith(b"%PDF")
    text = _text(data)
    for expected in (
        "Smart Networking Report",
        "LAXMI SECURITY SYSTEMS AND ELECTRICALS",
        "Basic Information",
        "PO160525SE01",
        "9876543210",
        "Technical Parameters of the System",
        "WAN IP: Static IP",
        "LSSE Remark",
        "Customer Signature",
        "Engineer Signature",
        "Ravi Kumar",
        "Suresh Patil",
        "Page 1",
    ):
        assert expected in text
    for item in (CONNECTION_ITEMS[0], CONNECTION_ITEMS[-1], TEST_ITEMS[0], TEST_ITEMS[-1]):
        assert item in text
    assert "42U rack in server room" in text


def test_export_is_deterministic(report_record):
    first = build_pdf(report_record)
    second = build_pdf(report_record)
    assert page_count(first) == page_count(second)
    assert _text(first) == _text(second)


def test_long_remark_flows_onto_more_pages(valid_values, report_record):
    long_remark = "\n".join(f"Line {i}: patched switch port and verified uplink connectivity." for i in range(200))
    record = _record(dict(valid_values, lsse_remark=long_remark), report_record)
    data = build_pdf(record)
    assert page_count(data) > page_count(build_pdf(report_record))
    text = _text(data)
    assert "Line 0:" in text
    assert "Line 199:" in text
    assert "Page 2" in text


def test_markup_in_values_is_escaped(valid_values, report_record):
    record = _record(dict(valid_values, spoc_name="R&D <Team>"), report_record)
    assert "R&D <Team>" in _text(build_pdf(record))


def test_unreadable_signature_fails_export(report_record):
    broken = SignatureImage(png=b"definitely not a png", width=10, height=10, is_empty=False)
    record = replace(report_record, engineer_signature=broken)
    with pytest.raises(ExportFailure):
        build_pdf(record)


def test_exporter_writes_configured_file(report_record, tmp_path):
    exporter = DocumentExporter(ReportSettings(page_size="letter", document_filename="site-42.pdf"))
    path = exporter.export_to(report_record, tmp_path / "out")
    assert path == tmp_path / "out" / "site-42.pdf"
    reader = PdfReader(str(path))
    width, height = reader.pages[0].mediabox.width, reader.pages[0].mediabox.height
    assert (round(float(width)), round(float(height))) == (612, 792)


def test_oversized_table_cells_split_across_pages(valid_values, report_record):
    words = " ".join(f"word{i}" for i in range(3000))
    values = dict(
        valid_values,
        connection_remark_0=words,
        test_result_0=words,
        wan_ip_remark=words,
        customer_name_address="Acme Logistics " + words,
    )
    data = build_pdf(_record(values, report_record))
    text = _text(data)
    assert "word2999" in text
    assert text.count("word2999") == 4
    assert page_count(data) > page_count(build_pdf(report_record))
