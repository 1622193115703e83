"""
Configuration settings for the survey plan splitter
Handles environment variables and configuration management
"""

from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables from the project root .env if present
env_path = Path(__file__).parent.parent.parent / ".env"
load_dotenv(env_path)


class SegmentationSettings(BaseSettings):
    """Plan segmentation configuration"""

    # Size tiers for the no-signal fallback
    small_document_max_pages: int = Field(
        5, description="Documents up to this size are always a single plan"
    )
    medium_document_max_pages: int = 20
    medium_pages_per_plan: int = 8
    large_document_max_pages: int = 50
    large_pages_per_plan: int = 10
    very_large_pages_per_plan: int = 12

    # Synthesised references, e.g. BUNDLE_SCA_002
    reference_prefix_length: int = 10
    sequence_padding: int = 3

    # Optional page text scan between the filename and heuristic stages
    scan_page_text: bool = False
    text_scan_max_pages: int = 50

    pdf_creator: str = "Survey Plan Splitter"
    max_file_size_mb: int = 200

    model_config = SettingsConfigDict(env_prefix="SEGMENTATION_", extra="ignore")

    @field_validator(
        "medium_pages_per_plan",
        "large_pages_per_plan",
        "very_large_pages_per_plan",
        "reference_prefix_length",
        "sequence_padding",
    )
    @classmethod
    def validate_positive(cls, v: int) -> int:
        """Tier targets and padding must be positive"""
        if v < 1:
            raise ValueError("must be at least 1")
        return v

    @property
    def max_file_size_bytes(self) -> int:
        """Get max file size in bytes"""
        return self.max_file_size_mb * 1024 * 1024

    def pages_per_plan_for(self, total_pages: int) -> int:
        """Target pages per plan for a document of the given size"""
        if total_pages <= self.medium_document_max_pages:
            return self.medium_pages_per_plan
        if total_pages <= self.large_document_max_pages:
            return self.large_pages_per_plan
        return self.very_large_pages_per_plan


class StorageSettings(BaseSettings):
    """Local storage configuration for split plan files"""

    root_dir: Path = Path("./plan_storage")
    metadata_file: str = "plan_records.jsonl"
    key_prefix: str = "projects"

    model_config = SettingsConfigDict(env_prefix="STORAGE_", extra="ignore")

    @property
    def metadata_path(self) -> Path:
        return self.root_dir / self.metadata_file


class LoggingSettings(BaseSettings):
    """Logging configuration"""

    level: str = "INFO"
    format: str = "text"  # json or text
    log_dir: Optional[Path] = None
    max_size_mb: int = 10
    backup_count: int = 5

    model_config = SettingsConfigDict(env_prefix="LOG_", extra="ignore")


class Settings(BaseSettings):
    """Main settings class aggregating all configurations"""

    segmentation: SegmentationSettings = Field(default_factory=SegmentationSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    app_name: str = "plan_splitter"
    environment: str = "development"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def is_production(self) -> bool:
        """Check if running in production"""
        return self.environment.lower() == "production"

    def get_config_summary(self) -> Dict[str, Any]:
        """Get configuration summary for logging"""
        return {
            "app_name": self.app_name,
            "environment": self.environment,
            "scan_page_text": self.segmentation.scan_page_text,
            "storage_root": str(self.storage.root_dir),
            "log_level": self.logging.level,
        }


# Create global settings instance
settings = Settings()
