"""
Unified configuration management with Pydantic validation.
Loads and validates all environment variables.
"""

from pathlib import Path
from typing import List
from dotenv import load_dotenv
from pydantic import Field, field_validator, ValidationError
from pydantic_settings import BaseSettings

# Load environment variables
load_dotenv()


class Config(BaseSettings):
    """Application configuration with validation."""

    # ========================
    # Page Layout Configuration
    # ========================
    page_width_mm: float = Field(default=210.0, alias="PAGE_WIDTH_MM")
    page_height_mm: float = Field(default=297.0, alias="PAGE_HEIGHT_MM")
    page_margin_mm: float = Field(default=20.0, alias="PAGE_MARGIN_MM")
    line_height_factor: float = Field(
        default=0.5,
        alias="LINE_HEIGHT_FACTOR"
    )
    max_image_height_mm: float = Field(
        default=80.0,
        alias="MAX_IMAGE_HEIGHT_MM"
    )
    image_heading_reserve_mm: float = Field(
        default=20.0,
        alias="IMAGE_HEADING_RESERVE_MM"
    )
    defect_block_reserve_mm: float = Field(
        default=100.0,
        alias="DEFECT_BLOCK_RESERVE_MM"
    )
    image_probe_timeout: float = Field(
        default=10.0,
        alias="IMAGE_PROBE_TIMEOUT"
    )

    # ========================
    # Report Defaults
    # ========================
    default_company_name: str = Field(
        default="Inspection Company",
        alias="DEFAULT_COMPANY_NAME"
    )
    default_report_title: str = Field(
        default="Home Defect Inspection Report",
        alias="DEFAULT_REPORT_TITLE"
    )

    # ========================
    # File Storage Configuration
    # ========================
    report_dir: str = Field(default="reports", alias="REPORT_DIR")
    log_dir: str = Field(default="logs", alias="LOG_DIR")
    max_file_size_mb: int = Field(default=10, alias="MAX_FILE_SIZE_MB")
    allowed_image_formats: str = Field(
        default="JPEG,PNG",
        alias="ALLOWED_IMAGE_FORMATS"
    )

    # ========================
    # Logging Configuration
    # ========================
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_to_file: bool = Field(default=False, alias="LOG_TO_FILE")

    # ========================
    # Validators
    # ========================

    @field_validator("page_width_mm", "page_height_mm", "line_height_factor",
                     "max_image_height_mm", "image_probe_timeout")
    @classmethod
    def validate_positive(cls, v: float, info) -> float:
        """Validate strictly positive layout values."""
        if v <= 0:
            raise ValueError(f"{info.field_name} must be greater than 0")
        return v

    @field_validator("page_margin_mm", "image_heading_reserve_mm", "defect_block_reserve_mm")
    @classmethod
    def validate_non_negative(cls, v: float, info) -> float:
        """Validate spacing values."""
        if v < 0:
            raise ValueError(f"{info.field_name} must not be negative")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"LOG_LEVEL must be one of {valid_levels}")
        return v.upper()

    # ========================
    # Helper Properties
    # ========================

    @property
    def allowed_image_formats_list(self) -> List[str]:
        """Get allowed image formats as list."""
        return [fmt.strip().upper() for fmt in self.allowed_image_formats.split(",") if fmt.strip()]

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"
        populate_by_name = True


def get_config() -> Config:
    """
    Load and validate configuration.
    Exits if configuration is invalid.
    """
    try:
        return Config()

    except ValidationError as e:
        print("\n❌ Configuration Error:")
        print("=" * 60)
        for error in e.errors():
            field = " -> ".join(str(loc) for loc in error["loc"])
            print(f"\n Field: {field}")
            print(f"  Error: {error['msg']}")
            if "input" in error:
                print(f"  Value: {error['input']}")
        print("\n" + "=" * 60)
        print("\nPlease check your .env file and fix the errors above.\n")
        raise SystemExit(1)


# Global configuration instance
config = get_config()


# Export commonly used paths
REPORT_DIR = Path(config.report_dir)
LOG_DIR = Path(config.log_dir)
