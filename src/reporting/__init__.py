"""
Reporting module for the inspection report generator.
"""

from src.reporting.pdf_generator import generate_report, InspectionReport, RenderedReport

__all__ = [
    "generate_report",
    "InspectionReport",
    "RenderedReport",
]
