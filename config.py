"""
Configuration settings for the course builder.

Uses Pydantic Settings for environment variable management with .env file support.
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="COURSE_BUILDER_",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Persistence
    # ========================================
    state_file: Path = Field(
        default=Path.home() / ".course_builder" / "courseBuilderState.v1.json",
        description="JSON file holding the persisted modules and items",
    )
    storage_key: str = Field(
        default="courseBuilderState:v1",
        description="Versioned key recorded with every persisted snapshot",
    )
    auto_save: bool = Field(
        default=True,
        description="Persist after every committed mutation",
    )

    # ========================================
    # History
    # ========================================
    history_max_size: int = Field(
        default=50,
        ge=1,
        description="Undo/redo window; oldest records fall off once exceeded",
    )

    # ========================================
    # Validation Rules
    # ========================================
    module_name_max_length: int = Field(
        default=100,
        description="Maximum characters for a module name",
    )
    item_name_max_length: int = Field(
        default=200,
        description="Maximum characters for an item name",
    )
    url_max_length: int = Field(
        default=2048,
        description="Maximum characters for a link URL",
    )
    file_size_max_mb: int = Field(
        default=100,
        description="Maximum size of an uploaded file (MB)",
    )
    supported_file_extensions: list[str] = Field(
        default=[
            "pdf", "doc", "docx", "txt",
            "jpg", "jpeg", "png", "gif",
            "mp4", "mov", "avi",
            "mp3", "wav",
        ],
        description="File extensions accepted for upload (lower-case, no dot)",
    )

    # ========================================
    # Capacity
    # ========================================
    max_modules: int = Field(
        default=1000,
        description="Maximum number of modules in a course",
    )
    max_items_per_module: int = Field(
        default=100,
        description="Maximum number of items in one container",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Logging verbosity level",
    )
    log_file: str | None = Field(
        default=None,
        description="Log file path (None for stderr only)",
    )

    # ========================================
    # Helper Methods
    # ========================================
    def get_validation_limits(self) -> dict[str, Any]:
        """Get validation limits as a dictionary."""
        return {
            "module_name_max_length": self.module_name_max_length,
            "item_name_max_length": self.item_name_max_length,
            "url_max_length": self.url_max_length,
            "file_size_max_bytes": self.file_size_max_mb * 1024 * 1024,
            "supported_file_extensions": tuple(ext.lower().lstrip(".") for ext in self.supported_file_extensions),
        }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
