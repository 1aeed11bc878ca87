# bar_bills/services/export_service.py
"""
Export of generated bills: one document per bill, all packed into a
single zip archive named after the date range.

  bills_<start>_to_<end>.zip
    bill_<date>_<index within date>.docx
"""

import io
import logging
import zipfile
from collections import defaultdict
from datetime import date
from typing import Callable, Dict, Iterator, List, Optional, Sequence, Tuple

from domain.exceptions import RenderError
from domain.models import Bar, Bill, ExportProgress, ExportResult
from services.doc_service import render_bill_document

logger = logging.getLogger(__name__)

ARCHIVE_EXT = "zip"
DOC_EXT = "docx"

ON_ERROR_ABORT = "abort"
ON_ERROR_SKIP = "skip"

BillRenderer = Callable[[Bill, Optional[Bar]], bytes]


def archive_name(start_date: date, end_date: date) -> str:
    return f"bills_{start_date.isoformat()}_to_{end_date.isoformat()}.{ARCHIVE_EXT}"


def bill_file_names(bills: Sequence[Bill]) -> List[str]:
    """
    bill_<date>_<n>.docx with n counting from 1 within each date,
    in the order the bills were generated.
    """
    per_date: Dict[date, int] = defaultdict(int)
    names = []
    for bill in bills:
        per_date[bill.bill_date] += 1
        names.append(f"bill_{bill.bill_date.isoformat()}_{per_date[bill.bill_date]}.{DOC_EXT}")
    return names


class BillExportJob:
    """
    Renders bills one at a time, strictly in order, and yields progress
    after each one.

    on_error="abort": the first render failure raises RenderError and
    the archive is discarded.
    on_error="skip": the failure is logged and recorded, the job carries
    on, and the result reports how many bills succeeded and failed.
    """

    def __init__(
            self,
            bills: Sequence[Bill],
            start_date: date,
            end_date: date,
            *,
            bar: Optional[Bar] = None,
            renderer: BillRenderer = render_bill_document,
            on_error: str = ON_ERROR_ABORT,
    ):
        if on_error not in (ON_ERROR_ABORT, ON_ERROR_SKIP):
            raise ValueError(f"on_error must be '{ON_ERROR_ABORT}' or '{ON_ERROR_SKIP}', got {on_error!r}")

        self.bills = list(bills)
        self.archive_name = archive_name(start_date, end_date)
        self.bar = bar
        self.renderer = renderer
        self.on_error = on_error

        self.succeeded = 0
        self.failed: List[Tuple[str, str]] = []
        self._buffer = io.BytesIO()
        self._started = False
        self._finished = False

    def steps(self) -> Iterator[ExportProgress]:
        if self._started:
            raise RuntimeError("Export job can only be stepped through once")
        self._started = True

        total = len(self.bills)
        names = bill_file_names(self.bills)

        with zipfile.ZipFile(self._buffer, "w", zipfile.ZIP_DEFLATED) as archive:
            for i, (bill, file_name) in enumerate(zip(self.bills, names), start=1):
                try:
                    blob = self.renderer(bill, self.bar)
                except Exception as e:
                    if self.on_error == ON_ERROR_ABORT:
                        logger.error("Export aborted at bill %s: %s", bill.bill_number, e)
                        raise RenderError(bill.bill_number, str(e)) from e
                    logger.warning("Skipping bill %s: %s", bill.bill_number, e)
                    self.failed.append((bill.bill_number, str(e)))
                else:
                    archive.writestr(file_name, blob)
                    self.succeeded += 1

                yield ExportProgress(completed=i, total=total, file_name=file_name)

        self._finished = True
        logger.info("Exported %s: %d succeeded, %d failed", self.archive_name, self.succeeded, len(self.failed))

    def result(self) -> ExportResult:
        if not self._finished:
            raise RuntimeError("Export job has not finished yet")
        return ExportResult(
            archive_name=self.archive_name,
            archive_bytes=self._buffer.getvalue(),
            succeeded=self.succeeded,
            failed=list(self.failed),
        )


def export_bills(
        bills: Sequence[Bill],
        start_date: date,
        end_date: date,
        *,
        on_progress: Optional[Callable[[ExportProgress], None]] = None,
        **options,
) -> ExportResult:
    """Run an export job inline, reporting progress after every bill."""
    job = BillExportJob(bills, start_date, end_date, **options)
    for progress in job.steps():
        if on_progress is not None:
            on_progress(progress)
    return job.result()
