"""
Pydantic schemas for data validation.
"""

from typing import Literal, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


class ReportMetadata(BaseModel):
    """Report header fields collected from the form. Immutable per run."""
    model_config = ConfigDict(frozen=True)

    # Branding
    company_name: Optional[str] = None
    company_phone: Optional[str] = None
    company_email: Optional[str] = None
    report_title: Optional[str] = None

    # Client & property
    client_name: Optional[str] = None
    client_address: Optional[str] = None
    inspection_date: Optional[str] = Field(
        None, description="ISO date (YYYY-MM-DD) as entered on the form"
    )
    inspector_name: Optional[str] = None
    inspector_credentials: Optional[str] = None

    # Inspection details table
    attendance: Optional[str] = None
    occupancy: Optional[str] = None
    building_type: Optional[str] = None
    weather_condition: Optional[str] = None

    disclaimer: Optional[str] = None

    @field_validator("*", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        """Trim form values; blank strings count as absent."""
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v


class ImagePayload(BaseModel):
    """Binary image data with its declared format."""
    data: bytes = Field(..., repr=False)
    format: Literal["JPEG", "PNG"] = "JPEG"
    filename: Optional[str] = None

    @field_validator("format", mode="before")
    @classmethod
    def normalize_format(cls, v):
        if isinstance(v, str):
            v = v.strip().upper()
            if v == "JPG":
                return "JPEG"
        return v


class DefectRecord(BaseModel):
    """One reported issue: a type, a photo and a description."""
    defect_id: int = Field(..., ge=1, description="Session-unique, never reused")
    defect_type: str = Field(..., min_length=1)
    image: ImagePayload
    description: str = Field(..., min_length=1)

    @field_validator("defect_type", "description")
    @classmethod
    def strip_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class GenerationResult(BaseModel):
    """Outcome of a report generation run handed back to the caller."""
    success: bool
    filename: Optional[str] = None
    content: Optional[bytes] = Field(None, repr=False)
    page_count: int = 0
    error: Optional[str] = None

    @property
    def status_message(self) -> str:
        """Human-readable status line for display."""
        if self.success:
            return f"PDF report generated successfully! File: {self.filename}"
        return f"Error generating PDF: {self.error}"
