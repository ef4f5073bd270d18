"""
Configuration Management for Hotel Ledger

Uses pydantic-settings for type-safe configuration from environment variables.

All configuration is centralized here, validated when first loaded.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LedgerSettings(BaseSettings):
    """Import and manual-entry behavior."""

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    csv_delimiter: str = Field(
        default=",",
        description="Field delimiter for imported CSV text"
    )
    preview_rows: int = Field(
        default=5,
        ge=1,
        le=100,
        description="Number of records shown in the import preview"
    )
    default_manual_category: str = Field(
        default="Operational",
        min_length=1,
        description="Category pre-filled on the manual entry form"
    )
    seed_sample_data: bool = Field(
        default=True,
        description="Populate an empty ledger with sample transactions on first load"
    )

    # Validation thresholds (manual entry)
    max_transaction_amount: float = Field(
        default=10_000_000.0,
        gt=0,
        description="Amounts above this are flagged for review"
    )
    future_date_tolerance_days: int = Field(
        default=7,
        ge=0,
        description="How many days in the future a manual entry date can be"
    )

    @field_validator("csv_delimiter")
    @classmethod
    def validate_delimiter(cls, v: str) -> str:
        """A delimiter must be exactly one non-newline character."""
        if len(v) != 1 or v in "\r\n":
            raise ValueError(f"CSV delimiter must be a single character, got {v!r}")
        return v


class StorageSettings(BaseSettings):
    """Ledger persistence configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    file_path: str = Field(
        default="hotel_finance_data.json",
        description="Path of the JSON file holding the ledger"
    )
    export_filename: str = Field(
        default="hotel_finance_backup.json",
        description="Suggested file name for ledger exports"
    )


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def ledger(self) -> LedgerSettings:
        return LedgerSettings()

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, object]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, plus
    {setting_name}_error entries for the ones that failed.
    Useful for startup checks.
    """
    results: dict[str, object] = {}

    settings = get_settings()

    for name in ("ledger", "storage"):
        try:
            getattr(settings, name)
            results[name] = True
        except ValueError as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
