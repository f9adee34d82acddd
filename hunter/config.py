"""
Hunter Configuration — pydantic-settings based.

Settings are read from HUNTER_* environment variables or a .env file.
They provide the defaults for the per-run AnalysisConfig thresholds.
"""

from pydantic_settings import BaseSettings
from pydantic import BaseModel, Field


class Settings(BaseSettings):
    """Application-wide settings sourced from environment variables."""

    # ── Rule thresholds ──
    nesting_threshold: int = Field(
        default=3, description="Control-flow nesting depth tolerated inside a function"
    )
    function_length_threshold: int = Field(
        default=50, description="Function body lines before long-function fires"
    )
    min_duplicate_block: int = Field(
        default=5, description="Significant lines in the smallest duplicated block reported"
    )
    min_commented_block: int = Field(
        default=3, description="Consecutive commented-out code lines that form a block"
    )
    god_function_threshold: int = Field(
        default=15, description="Complexity score above which a function is a god function"
    )

    # ── Analysis ──
    max_workers: int = Field(
        default=8, description="Files analyzed concurrently"
    )
    max_file_size_bytes: int = Field(
        default=2_000_000, description="Files above this size are reported unreadable"
    )

    # ── Server ──
    port: int = Field(default=5001, description="Server port")
    host: str = Field(default="0.0.0.0", description="Server bind host")
    cors_origins: list[str] = Field(
        default=["*"], description="Allowed CORS origins"
    )
    max_request_files: int = Field(
        default=500, description="Files accepted by a single POST /analyze"
    )

    model_config = {
        "env_prefix": "HUNTER_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }


# Singleton instance — imported by other modules
settings = Settings()


class AnalysisConfig(BaseModel):
    """Tunable thresholds for one analysis run."""

    nesting_threshold: int = Field(default_factory=lambda: settings.nesting_threshold, ge=1)
    function_length_threshold: int = Field(
        default_factory=lambda: settings.function_length_threshold, ge=1
    )
    min_duplicate_block: int = Field(default_factory=lambda: settings.min_duplicate_block, ge=2)
    min_commented_block: int = Field(default_factory=lambda: settings.min_commented_block, ge=1)
    god_function_threshold: int = Field(
        default_factory=lambda: settings.god_function_threshold, ge=1
    )
    max_workers: int = Field(default_factory=lambda: settings.max_workers, ge=1)
    max_file_size_bytes: int = Field(default_factory=lambda: settings.max_file_size_bytes, ge=1)

    model_config = {"frozen": True}
