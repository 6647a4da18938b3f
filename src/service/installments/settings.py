"""
Installment Settings for the Lipa Mdogo Mdogo payment engine.

This module contains the tunable policy parameters for plan validation,
reschedules, reminders and financial health scoring.

Environment variables use the INSTALLMENT_ prefix:
    INSTALLMENT_MIN_DEPOSIT_PERCENT=10
    INSTALLMENT_MAX_RESCHEDULES=2
    INSTALLMENT_HEALTH_PENALTY_PER_DAY=2

Usage:
    from src.service.installments.settings import installment_settings

    # Use default settings (loaded from env)
    limit = installment_settings.max_reschedules

    # Or create custom settings for testing
    custom = InstallmentSettings(max_reschedules=1)
"""

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class InstallmentSettings(BaseSettings):
    """
    Configurable parameters for installment plans and orders.

    All settings can be overridden via environment variables with
    INSTALLMENT_ prefix. Percentages are 0-100, scores are 0-100.
    """

    model_config = SettingsConfigDict(
        env_prefix="INSTALLMENT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # === Plan Validation ===
    min_deposit_percent: float = Field(
        default=10.0,
        ge=0.0,
        le=100.0,
        description="Smallest initial deposit a seller may configure",
    )
    max_deposit_percent: float = Field(
        default=90.0,
        ge=0.0,
        le=100.0,
        description="Largest initial deposit a seller may configure",
    )
    percent_tolerance: float = Field(
        default=0.01,
        gt=0.0,
        description="Allowed drift when deposit plus schedule is summed to 100%",
    )
    max_grace_period_days: int = Field(
        default=30,
        ge=0,
        description="Upper bound for a plan's grace period",
    )

    # === Reschedule Policy ===
    max_reschedules: int = Field(
        default=2,
        ge=0,
        description="How many times one order may move its due date",
    )
    min_reschedule_notice_days: int = Field(
        default=3,
        ge=0,
        description="A new due date must be at least this many days out",
    )
    enforce_grace_on_reschedule: bool = Field(
        default=True,
        description="Refuse reschedules once the due date is past the grace period",
    )

    # === Reminders ===
    due_soon_days: int = Field(
        default=3,
        ge=0,
        description="Orders due within this many days get a due-soon reminder",
    )

    # === Financial Health ===
    health_penalty_per_day: int = Field(
        default=2,
        ge=0,
        description="Points deducted per day an order is late",
    )
    health_max_penalty_per_order: int = Field(
        default=20,
        ge=0,
        description="Cap on points a single order can deduct",
    )
    health_excellent_threshold: int = Field(default=90, ge=0, le=100)
    health_good_threshold: int = Field(default=75, ge=0, le=100)
    health_fair_threshold: int = Field(default=60, ge=0, le=100)

    @model_validator(mode="after")
    def validate_ordering(self) -> "InstallmentSettings":
        """Deposit bounds and health thresholds must be ordered."""
        if self.min_deposit_percent > self.max_deposit_percent:
            raise ValueError("min_deposit_percent cannot exceed max_deposit_percent")
        if not (
            self.health_excellent_threshold
            >= self.health_good_threshold
            >= self.health_fair_threshold
        ):
            raise ValueError("health thresholds must be descending")
        return self


@lru_cache
def get_installment_settings() -> InstallmentSettings:
    """Get cached installment settings instance."""
    return InstallmentSettings()


installment_settings = get_installment_settings()
