"""
End-to-end tests for report generation: footers, file name, failure policy.
"""

import asyncio
import time
from datetime import date, datetime

import pytest

from src.errors import ReportGenerationError
from src.layout import images as images_module
from src.layout.images import IMAGE_ERROR_NOTICE
from src.layout.primitives import LayoutSettings
from src.reporting.finalizer import PdfRenderer, format_timestamp, report_filename
from src.reporting.pdf_generator import InspectionReport, generate_report
from utils.logger import NO_RUN, get_request_id


class TestFilename:
    """Output file naming."""

    def test_report_filename(self):
        assert report_filename(date(2024, 3, 15)) == "Inspection_Report_2024-03-15.pdf"

    def test_generation_date_drives_filename(self, full_metadata, fixed_clock):
        result = generate_report(full_metadata.model_copy(update={"inspection_date": "2020-01-01"}), [],
                                 clock=fixed_clock)
        assert result.filename == "Inspection_Report_2024-03-15.pdf"


class TestTimestamp:
    """Footer timestamp formatting."""

    def test_afternoon(self):
        assert format_timestamp(datetime(2024, 3, 15, 14, 5, 9)) == "3/15/2024, 2:05:09 PM"

    def test_midnight_and_noon(self):
        assert format_timestamp(datetime(2024, 1, 2, 0, 0, 0)) == "1/2/2024, 12:00:00 AM"
        assert format_timestamp(datetime(2024, 1, 2, 12, 30, 0)) == "1/2/2024, 12:30:00 PM"


class TestFooters:
    """Footer stamping after composition."""

    def test_every_page_numbered(self, full_metadata, make_defect, fixed_clock):
        defects = [make_defect(defect_id=i) for i in range(1, 6)]
        rendered = asyncio.run(InspectionReport(clock=fixed_clock).generate(full_metadata, defects))

        total = rendered.page_count
        assert total > 2
        for number, page in enumerate(rendered.pages, 1):
            assert page.footer is not None
            assert page.footer.page_label.text == f"Page {number} of {total}"
            page_stamps = [t for t in page.texts if t.startswith("Page ")]
            assert page_stamps == [f"Page {number} of {total}"]

    def test_single_timestamp_across_pages(self, full_metadata, make_defect):
        ticks = iter([datetime(2024, 3, 15, 9, 0, 0), datetime(2024, 3, 16, 9, 0, 0)])
        report = InspectionReport(clock=lambda: next(ticks))
        rendered = asyncio.run(report.generate(full_metadata, [make_defect(defect_id=i) for i in range(1, 4)]))

        stamps = {page.footer.timestamp_label.text for page in rendered.pages}
        assert stamps == {"Report generated: 3/15/2024, 9:00:00 AM"}
        assert rendered.timestamp == "3/15/2024, 9:00:00 AM"

    def test_footer_position(self, empty_metadata, fixed_clock, settings):
        rendered = asyncio.run(InspectionReport(settings=settings, clock=fixed_clock).generate(empty_metadata, []))
        footer = rendered.pages[0].footer
        assert footer.page_label.y == settings.page_height - 10
        assert footer.timestamp_label.y == settings.page_height - 6
        assert footer.page_label.align == "center"
        assert footer.page_label.x == settings.page_width / 2


class TestGenerateReport:
    """Synchronous entry point and failure policy."""

    def test_produces_pdf(self, full_metadata, make_defect, fixed_clock):
        result = generate_report(full_metadata, [make_defect(), make_defect(defect_id=2, fmt="PNG")],
                                 clock=fixed_clock)
        assert result.success is True
        assert result.content.startswith(b"%PDF")
        assert result.page_count >= 2
        assert result.error is None
        assert result.status_message == (
            "PDF report generated successfully! File: Inspection_Report_2024-03-15.pdf"
        )

    def test_output_is_reproducible(self, full_metadata, make_defect, fixed_clock):
        defects = [make_defect(defect_id=i) for i in range(1, 3)]
        first = generate_report(full_metadata, defects, clock=fixed_clock)
        second = generate_report(full_metadata, defects, clock=fixed_clock)
        assert first.content == second.content

    def test_corrupt_image_still_succeeds(self, full_metadata, make_defect, corrupt_bytes, fixed_clock):
        defects = [
            make_defect(defect_id=1, defect_type="Roof", data=corrupt_bytes),
            make_defect(defect_id=2, defect_type="Fence"),
        ]
        rendered = asyncio.run(InspectionReport(clock=fixed_clock).generate(full_metadata, defects))
        texts = [t for page in rendered.pages for t in page.texts]

        assert IMAGE_ERROR_NOTICE in texts
        assert "Defect #2: Fence" in texts
        assert all(page.footer is not None for page in rendered.pages)

        result = generate_report(full_metadata, defects, clock=fixed_clock)
        assert result.success is True

    def test_failure_yields_no_document(self, monkeypatch, full_metadata, fixed_clock):
        def explode(self, report, title=None, author=None):
            raise RuntimeError("boom")

        monkeypatch.setattr(PdfRenderer, "render", explode)
        result = generate_report(full_metadata, [], clock=fixed_clock)

        assert result.success is False
        assert result.content is None
        assert result.filename is None
        assert result.error == "boom"
        assert result.status_message == "Error generating PDF: boom"

    def test_async_generate_raises_generation_error(self, monkeypatch, full_metadata, fixed_clock):
        def explode(self, report, title=None, author=None):
            raise RuntimeError("boom")

        monkeypatch.setattr(PdfRenderer, "render", explode)
        with pytest.raises(ReportGenerationError, match="boom"):
            asyncio.run(InspectionReport(clock=fixed_clock).generate(full_metadata, []))

    def test_input_sequence_not_mutated(self, empty_metadata, make_defect, fixed_clock):
        defects = (make_defect(defect_id=1), make_defect(defect_id=2))
        generate_report(empty_metadata, defects, clock=fixed_clock)
        assert [d.defect_id for d in defects] == [1, 2]

    def test_stuck_image_decode_does_not_hold_up_the_run(self, monkeypatch, empty_metadata, make_defect, fixed_clock):
        def stuck(data):
            time.sleep(2)
            return 10, 10

        monkeypatch.setattr(images_module, "read_image_size", stuck)
        settings = LayoutSettings(image_probe_timeout=0.1)

        started = time.monotonic()
        result = generate_report(empty_metadata, [make_defect()], settings=settings, clock=fixed_clock)
        elapsed = time.monotonic() - started

        assert result.success is True
        assert elapsed < 1.5


class TestRunContext:
    """Run ids used to tag log records."""

    def test_run_id_is_scoped_to_the_run(self, empty_metadata, fixed_clock, monkeypatch):
        seen = []
        original_render = PdfRenderer.render

        def recording_render(self, report, title=None, author=None):
            seen.append(get_request_id())
            return original_render(self, report, title=title, author=author)

        monkeypatch.setattr(PdfRenderer, "render", recording_render)
        generate_report(empty_metadata, [], clock=fixed_clock)
        generate_report(empty_metadata, [], clock=fixed_clock)

        assert len(seen) == 2
        assert NO_RUN not in seen
        assert seen[0] != seen[1]
        assert get_request_id() == NO_RUN
