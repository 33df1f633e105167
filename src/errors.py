"""
Exception hierarchy for report generation.
"""


class ReportError(Exception):
    """Base class for all report generation errors."""


class ImageDecodeError(ReportError):
    """A defect image could not be measured. Recovered inside the layout."""


class ReportGenerationError(ReportError):
    """Unexpected failure while composing or rendering; the run produces nothing."""


class DefectValidationError(ReportError):
    """Form input rejected before it reaches the layout engine."""


class GenerationInProgressError(ReportError):
    """A second run was triggered before the previous one completed."""
