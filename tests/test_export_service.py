import io
import zipfile
from datetime import date

import pytest

from conftest import make_bill
from domain.exceptions import RenderError
from services.export_service import BillExportJob, archive_name, bill_file_names, export_bills

START = date(2025, 3, 1)
END = date(2025, 3, 5)


def _fake_renderer(bill, bar):
    return f"bill {bill.bill_number}".encode()


def _bills_over_two_days(n_first=2, n_second=3):
    d1, d2 = date(2025, 3, 1), date(2025, 3, 4)
    bills = [make_bill(number=f"{i:06d}", bill_date=d1) for i in range(1, n_first + 1)]
    bills += [make_bill(number=f"{i:06d}", bill_date=d2) for i in range(n_first + 1, n_first + n_second + 1)]
    return bills


def test_archive_name_uses_date_range():
    assert archive_name(START, END) == "bills_2025-03-01_to_2025-03-05.zip"


def test_file_names_index_within_date():
    names = bill_file_names(_bills_over_two_days())

    assert names == [
        "bill_2025-03-01_1.docx",
        "bill_2025-03-01_2.docx",
        "bill_2025-03-04_1.docx",
        "bill_2025-03-04_2.docx",
        "bill_2025-03-04_3.docx",
    ]


def test_twenty_bills_progress_and_archive_contents():
    bills = [make_bill(number=f"{i:06d}") for i in range(1, 21)]
    seen = []

    result = export_bills(bills, START, END, renderer=_fake_renderer, on_progress=seen.append)

    fractions = [p.fraction for p in seen]
    assert fractions == pytest.approx([i / 20 for i in range(1, 21)])
    assert fractions == sorted(fractions) and len(set(fractions)) == 20
    assert fractions[-1] == 1.0

    with zipfile.ZipFile(io.BytesIO(result.archive_bytes)) as archive:
        names = archive.namelist()
        assert len(names) == 20
        assert archive.read("bill_2025-03-01_1.docx") == b"bill 000001"
    assert result.succeeded == 20
    assert result.failed == []
    assert result.archive_name == "bills_2025-03-01_to_2025-03-05.zip"


def test_render_failure_aborts_by_default():
    bills = _bills_over_two_days()
    rendered = []

    def renderer(bill, bar):
        if bill.bill_number == "000003":
            raise OSError("disk full")
        rendered.append(bill.bill_number)
        return b"ok"

    job = BillExportJob(bills, START, END, renderer=renderer)
    with pytest.raises(RenderError) as ex:
        for _ in job.steps():
            pass

    assert ex.value.bill_number == "000003"
    assert "disk full" in str(ex.value)
    assert rendered == ["000001", "000002"]
    with pytest.raises(RuntimeError):
        job.result()


def test_skip_mode_reports_partial_success():
    bills = _bills_over_two_days()

    def renderer(bill, bar):
        if bill.bill_number in ("000002", "000005"):
            raise ValueError("bad font")
        return b"ok"

    seen = []
    result = export_bills(bills, START, END, renderer=renderer, on_error="skip", on_progress=seen.append)

    assert len(seen) == 5
    assert result.succeeded == 3
    assert [n for n, _ in result.failed] == ["000002", "000005"]
    assert result.summary == "3 succeeded, 2 failed"
    with zipfile.ZipFile(io.BytesIO(result.archive_bytes)) as archive:
        assert sorted(archive.namelist()) == [
            "bill_2025-03-01_1.docx",
            "bill_2025-03-04_1.docx",
            "bill_2025-03-04_2.docx",
        ]


def test_unknown_error_policy_rejected():
    with pytest.raises(ValueError):
        BillExportJob([], START, END, on_error="retry")


def test_real_renderer_produces_docx_entries():
    result = export_bills([make_bill()], START, END)

    with zipfile.ZipFile(io.BytesIO(result.archive_bytes)) as archive:
        blob = archive.read("bill_2025-03-01_1.docx")
    assert blob[:2] == b"PK"


def test_job_cannot_be_stepped_twice():
    bills = [make_bill(number=f"{i:06d}") for i in range(1, 4)]
    job = BillExportJob(bills, START, END, renderer=_fake_renderer)

    list(job.steps())
    with pytest.raises(RuntimeError):
        list(job.steps())

    result = job.result()
    assert result.succeeded == 3
    with zipfile.ZipFile(io.BytesIO(result.archive_bytes)) as archive:
        assert len(archive.namelist()) == 3
