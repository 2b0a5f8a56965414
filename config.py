"""
Configuration settings for the recall engine.

Uses Pydantic Settings for environment variable management with .env file support.
"""
from __future__ import annotations

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.scheduling.review_calculator import check_interval_table


class Settings(BaseSettings):
    """Engine settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: str = Field(
        default="INFO",
        description="Minimum loguru level for the CLI sink",
    )

    # ========================================
    # Session Timing
    # ========================================
    session_min_minutes: int = Field(
        default=1,
        ge=0,
        description="Shortest duration credited to a finished session",
    )
    session_max_minutes: int = Field(
        default=120,
        ge=1,
        description="Longest duration credited to a single session (forgotten timers)",
    )

    activity_retention_days: int = Field(
        default=90,
        ge=1,
        description="Days of in-memory activity history kept for daily totals and streak_days",
    )

    # ========================================
    # Review Scheduling
    # ========================================
    review_interval_table: list[int] = Field(
        default=[1, 3, 7, 14, 30, 60, 120],
        description="Base intervals (days) for perfect recall counts 0-6, non-decreasing",
    )

    # ========================================
    # Engagement Streak
    # ========================================
    engagement_threshold_minutes: int = Field(
        default=1,
        ge=0,
        description="Minutes studied in a day for it to count toward the streak",
    )
    engagement_milestones: list[int] = Field(
        default=[7, 30],
        description="Streak lengths that raise an engagement milestone event",
    )

    # ========================================
    # Habit Challenge
    # ========================================
    habit_threshold_minutes: int = Field(
        default=5,
        ge=1,
        description="Minutes studied in a day for the habit challenge",
    )
    habit_bronze_days: int = Field(default=7, description="Bronze medal streak length")
    habit_silver_days: int = Field(default=21, description="Silver medal streak length")
    habit_gold_days: int = Field(default=66, description="Gold medal streak length (habit formed)")

    # ========================================
    # Daily Goal
    # ========================================
    daily_goal_minutes: int = Field(
        default=60,
        ge=1,
        description="Default daily study goal in minutes",
    )
    daily_goal_enabled: bool = Field(
        default=True,
        description="Whether the daily goal is tracked",
    )

    @model_validator(mode="after")
    def _check_bounds(self) -> Settings:
        if self.session_min_minutes > self.session_max_minutes:
            raise ValueError("session_min_minutes must not exceed session_max_minutes")
        check_interval_table(self.review_interval_table)
        if not (self.habit_bronze_days < self.habit_silver_days < self.habit_gold_days):
            raise ValueError("habit milestones must be strictly increasing")
        return self

    def get_engine_config(self) -> dict[str, any]:
        """Get engine configuration as a dictionary."""
        return {
            "session": {
                "min_minutes": self.session_min_minutes,
                "max_minutes": self.session_max_minutes,
            },
            "activity": {
                "retention_days": self.activity_retention_days,
            },
            "review": {
                "interval_table": list(self.review_interval_table),
            },
            "engagement": {
                "threshold_minutes": self.engagement_threshold_minutes,
                "milestones": list(self.engagement_milestones),
            },
            "habit": {
                "threshold_minutes": self.habit_threshold_minutes,
                "milestones": {
                    "bronze": self.habit_bronze_days,
                    "silver": self.habit_silver_days,
                    "gold": self.habit_gold_days,
                },
            },
            "goal": {
                "daily_minutes": self.daily_goal_minutes,
                "enabled": self.daily_goal_enabled,
            },
        }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
