from __future__ import annotations

from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings


class AppConfig(BaseSettings):
    """Application configuration loaded from environment variables."""

    step_text_case: str = Field(
        default="identity",
        description="Transform applied to name-derived step titles (identity, lower, upper, title, sentence)",
    )
    include_fixture_steps: bool = Field(
        default=False, description="Also collect unreported Context/Setup/TearDown methods"
    )
    log_level: str = Field(default="WARNING", description="Logging level for the CLI")

    # Discovery
    ignore_globs: List[str] = Field(
        default_factory=lambda: [
            "**/.git/**",
            "**/.venv/**",
            "**/venv/**",
            "**/node_modules/**",
            "**/dist/**",
            "**/build/**",
            "**/__pycache__/**",
        ]
    )

    class Config:
        env_file = ".env"
        env_prefix = "BDDSCAN_"
        extra = "ignore"
