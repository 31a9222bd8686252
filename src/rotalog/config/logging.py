"""
Logging Configuration.
"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from rotalog.rotation import RollingBy


class LoggingSettings(BaseSettings):
    """Parameters of an explicitly initialized logger."""

    model_config = SettingsConfigDict(
        env_prefix="ROTALOG_LOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    filename: str = Field(default="logs/rotalog.log", description="Active log file (link path for date rotation)")
    level: str = Field(default="INFO", description="DEBUG, INFO, WARN, ERROR, DPANIC, PANIC or FATAL")
    max_size_mb: int = Field(default=100, ge=0, description="Size cap per file for size rotation (0 = 100 MB)")
    max_backups: int = Field(default=7, ge=0, description="Rotated files to keep")
    max_age_days: int = Field(default=7, ge=0, description="Days to keep rotated files")
    rolling_by: RollingBy = Field(default=RollingBy.BY_SIZE, description="Rotation mode: size or date")
    console: bool = Field(default=False, description="Also print records to stdout")
    time_format: Optional[str] = Field(default=None, description="strftime format; RFC3339 when unset")
    separator: str = Field(default="\t", description="Column separator of a log line")


class DefaultLoggerSettings(BaseSettings):
    """
    Settings of the lazy console logger.

    The threshold is DEBUG whenever ``ROTALOG_DEBUG`` is present, whatever
    its value, and INFO otherwise.
    """

    model_config = SettingsConfigDict(
        env_prefix="ROTALOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    debug: Optional[str] = Field(default=None, description="Presence switches the default logger to DEBUG")

    @property
    def debug_enabled(self) -> bool:
        return self.debug is not None
