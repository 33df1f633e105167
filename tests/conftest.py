"""
Shared fixtures for report generator tests.
"""

import io
from datetime import datetime

import pytest
from PIL import Image

from src.layout.primitives import LayoutSettings
from src.schemas.models import DefectRecord, ImagePayload, ReportMetadata


def _image_bytes(width: int = 400, height: int = 300, fmt: str = "JPEG", color=(180, 180, 180)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (width, height), color).save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def temp_dir(tmp_path):
    """Temporary directory for files written by a test."""
    return tmp_path


@pytest.fixture
def image_bytes():
    """Factory producing encoded image bytes."""
    return _image_bytes


@pytest.fixture
def corrupt_bytes():
    return b"\xff\xd8\xff\xe0 definitely not a jpeg"


@pytest.fixture
def settings():
    return LayoutSettings()


@pytest.fixture
def fixed_clock():
    return lambda: datetime(2024, 3, 15, 14, 5, 9)


@pytest.fixture
def full_metadata():
    return ReportMetadata(
        company_name="Acme Inspections",
        company_phone="555-0100",
        company_email="info@acme.test",
        report_title="Pre-Purchase Inspection",
        client_name="Jane Doe",
        client_address="12 Long Street, Springfield, 4000",
        inspection_date="2024-03-15",
        inspector_name="Sam Smith",
        inspector_credentials="Licensed Building Inspector #1234",
        attendance="Client present",
        occupancy="Occupied",
        building_type="Single storey dwelling",
        weather_condition="Fine",
        disclaimer="This report is a visual inspection only. " * 5,
    )


@pytest.fixture
def empty_metadata():
    return ReportMetadata()


@pytest.fixture
def make_defect():
    """Factory for defect records with a valid image by default."""
    def _make(defect_id: int = 1, defect_type: str = "Roof", data: bytes = None,
              description: str = "Cracked tiles near the ridge.", fmt: str = "JPEG"):
        if data is None:
            data = _image_bytes(fmt=fmt)
        return DefectRecord(
            defect_id=defect_id,
            defect_type=defect_type,
            image=ImagePayload(data=data, format=fmt),
            description=description,
        )
    return _make
