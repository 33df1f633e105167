"""
Tests for the caller-side defect session, file handling and CLI.
"""

import json

import pytest
from PIL import Image

from app import main as cli
from app.services import session_manager
from app.services.file_handler import load_image_file, save_report, validate_image_upload
from app.services.session_manager import DefectSession
from src.errors import DefectValidationError, GenerationInProgressError
from src.schemas.models import GenerationResult, ImagePayload, ReportMetadata


@pytest.fixture
def session():
    return DefectSession()


@pytest.fixture
def jpeg(image_bytes):
    return ImagePayload(data=image_bytes(), format="JPEG", filename="photo.jpg")


class TestDefectSession:
    """Defect list management."""

    def test_ids_are_monotonic_and_never_reused(self, session, jpeg):
        first = session.add_defect("Roof", jpeg, "Cracked tile")
        second = session.add_defect("Plumbing", jpeg, "Leaking trap")
        assert (first.defect_id, second.defect_id) == (1, 2)

        assert session.remove_defect(2) is True
        third = session.add_defect("Electrical", jpeg, "Exposed wiring")
        assert third.defect_id == 3
        assert [d.defect_id for d in session.defects] == [1, 3]

    def test_remove_unknown_id(self, session, jpeg):
        session.add_defect("Roof", jpeg, "Cracked tile")
        assert session.remove_defect(99) is False
        assert len(session) == 1

    def test_clear_keeps_counter(self, session, jpeg):
        session.add_defect("Roof", jpeg, "Cracked tile")
        session.clear()
        assert len(session) == 0
        assert session.add_defect("Roof", jpeg, "Cracked tile").defect_id == 2

    def test_other_uses_custom_type(self, session, jpeg):
        record = session.add_defect("Other", jpeg, "Broken gate latch", custom_type="  Fencing ")
        assert record.defect_type == "Fencing"

    def test_other_without_custom_type_rejected(self, session, jpeg):
        with pytest.raises(DefectValidationError, match="defect type"):
            session.add_defect("Other", jpeg, "Broken gate latch")

    def test_blank_description_rejected(self, session, jpeg):
        with pytest.raises(DefectValidationError, match="description"):
            session.add_defect("Roof", jpeg, "   ")

    def test_corrupt_image_rejected(self, session, corrupt_bytes):
        with pytest.raises(DefectValidationError):
            session.add_defect("Roof", ImagePayload(data=corrupt_bytes), "Cracked tile")
        assert len(session) == 0

    def test_non_jpeg_png_rejected(self, session, image_bytes):
        gif = ImagePayload(data=image_bytes(fmt="GIF"))
        with pytest.raises(DefectValidationError, match="JPEG or PNG"):
            session.add_defect("Roof", gif, "Cracked tile")

    def test_oversized_image_rejected(self, monkeypatch, session, jpeg):
        monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 100)
        with pytest.raises(DefectValidationError, match="too large"):
            session.add_defect("Roof", jpeg, "Cracked tile")
        assert len(session) == 0

    def test_defects_is_a_snapshot(self, session, jpeg):
        session.add_defect("Roof", jpeg, "Cracked tile")
        snapshot = session.defects
        snapshot.clear()
        assert len(session) == 1

    def test_generate(self, session, jpeg, fixed_clock):
        session.add_defect("Roof", jpeg, "Cracked tile")
        result = session.generate(ReportMetadata(company_name="Acme"), clock=fixed_clock)
        assert result.success is True
        assert result.filename == "Inspection_Report_2024-03-15.pdf"
        assert session.is_generating is False

    def test_trigger_disabled_while_generating(self, monkeypatch, session):
        metadata = ReportMetadata()

        def reentrant(*args, **kwargs):
            assert session.is_generating is True
            with pytest.raises(GenerationInProgressError):
                session.generate(metadata)
            return GenerationResult(success=True, filename="x.pdf", content=b"%PDF")

        monkeypatch.setattr(session_manager, "generate_report", reentrant)
        assert session.generate(metadata).success is True
        assert session.is_generating is False


class TestFileHandler:
    """Upload validation and report saving."""

    def test_validate_png(self, image_bytes):
        assert validate_image_upload(image_bytes(fmt="PNG"), "a.png") == (True, "")

    def test_validate_empty(self):
        ok, error = validate_image_upload(b"")
        assert ok is False
        assert error

    def test_validate_oversized_image(self, monkeypatch, image_bytes):
        data = image_bytes(fmt="PNG")
        monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 100)
        ok, error = validate_image_upload(data, "huge.png")
        assert ok is False
        assert "too large" in error

    def test_load_image_file_detects_format(self, temp_dir, image_bytes):
        path = temp_dir / "photo.png"
        path.write_bytes(image_bytes(fmt="PNG"))
        payload = load_image_file(path)
        assert payload.format == "PNG"
        assert payload.filename == "photo.png"

    def test_save_report(self, temp_dir):
        result = GenerationResult(success=True, filename="Inspection_Report_2024-03-15.pdf", content=b"%PDF-1.4")
        path = save_report(result, temp_dir / "out")
        assert path.name == "Inspection_Report_2024-03-15.pdf"
        assert path.read_bytes() == b"%PDF-1.4"

    def test_save_failed_result(self, temp_dir):
        assert save_report(GenerationResult(success=False, error="boom"), temp_dir) is None


class TestCli:
    """`build` command."""

    def _write_job(self, temp_dir, image_bytes, defects):
        (temp_dir / "photos").mkdir()
        (temp_dir / "photos" / "roof.jpg").write_bytes(image_bytes())
        job = {
            "metadata": {"company_name": "Acme", "client_name": "Jane Doe", "inspection_date": "2024-03-15"},
            "defects": defects,
        }
        job_path = temp_dir / "job.json"
        job_path.write_text(json.dumps(job), encoding="utf-8")
        return job_path

    def test_build_writes_pdf(self, temp_dir, image_bytes):
        job_path = self._write_job(temp_dir, image_bytes, [
            {"type": "Roof", "image": "photos/roof.jpg", "description": "Cracked tiles"},
        ])
        out = temp_dir / "out"

        assert cli.main(["build", str(job_path), "--output-dir", str(out)]) == 0
        pdfs = list(out.glob("Inspection_Report_*.pdf"))
        assert len(pdfs) == 1
        assert pdfs[0].read_bytes().startswith(b"%PDF")

    def test_build_rejects_missing_description(self, temp_dir, image_bytes):
        job_path = self._write_job(temp_dir, image_bytes, [
            {"type": "Roof", "image": "photos/roof.jpg", "description": ""},
        ])
        assert cli.main(["build", str(job_path), "--output-dir", str(temp_dir / "out")]) == 1
        assert not (temp_dir / "out").exists()

    def test_build_rejects_missing_image(self, temp_dir, image_bytes):
        job_path = self._write_job(temp_dir, image_bytes, [
            {"type": "Roof", "image": "photos/missing.jpg", "description": "Cracked tiles"},
        ])
        assert cli.main(["build", str(job_path)]) == 1

    @pytest.mark.parametrize("defects", [
        ["photos/roof.jpg"],
        [{"type": "Roof", "image": 7, "description": "Cracked tiles"}],
        {"type": "Roof"},
    ])
    def test_build_rejects_malformed_defects(self, temp_dir, image_bytes, capsys, defects):
        job_path = self._write_job(temp_dir, image_bytes, defects)
        assert cli.main(["build", str(job_path), "--output-dir", str(temp_dir / "out")]) == 1
        assert "Invalid job" in capsys.readouterr().out
        assert not (temp_dir / "out").exists()

    @pytest.mark.parametrize("metadata", [["Acme"], "Acme"])
    def test_build_rejects_non_object_metadata(self, temp_dir, capsys, metadata):
        job_path = temp_dir / "job.json"
        job_path.write_text(json.dumps({"metadata": metadata, "defects": []}), encoding="utf-8")
        assert cli.main(["build", str(job_path), "--output-dir", str(temp_dir / "out")]) == 1
        assert "Invalid job" in capsys.readouterr().out
