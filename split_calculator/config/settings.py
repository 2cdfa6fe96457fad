"""
Configuration Management for Split Calculator

Uses pydantic-settings for type-safe configuration from environment variables.

All configuration is centralized here. Nothing in the engine reads the
environment directly; the orchestrator passes settings down.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Durable key-value store configuration."""
    
    model_config = SettingsConfigDict(
        env_prefix="SPLITCALC_STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )
    
    backend: str = Field(
        default="json_file",
        pattern="^(json_file|memory)$",
        description="Which key-value store to use"
    )
    path: str = Field(
        default="~/.split_calculator/storage.json",
        description="Location of the JSON file backing the store"
    )
    key: str = Field(
        default="splittingCalculatorSplits",
        min_length=1,
        description="Name of the entry holding the saved split ratios"
    )
    
    @field_validator('path')
    @classmethod
    def expand_path(cls, v: str) -> str:
        """Expand ~ so the store never writes to a literal '~' directory."""
        return str(Path(v).expanduser())
    
    @property
    def resolved_path(self) -> Path:
        return Path(self.path)


class AppSettings(BaseSettings):
    """
    Main application settings.
    
    Loads configuration from environment variables and .env file.
    """
    
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )
    
    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Minimum level for local structured logs"
    )
    
    # Presentation
    page_title: str = Field(
        default="Split Calculator",
        max_length=100,
        description="Browser tab and header title"
    )
    
    @field_validator('log_level', mode='before')
    @classmethod
    def normalize_log_level(cls, v):
        if isinstance(v, str):
            return v.strip().upper()
        return v


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
    def storage(self) -> StorageSettings:
        return StorageSettings()
    
    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).
    
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.
    
    Returns a dict of {setting_name: is_valid}, with a
    "<name>_error" entry describing each failure.
    """
    results = {}
    
    settings = get_settings()
    
    try:
        _ = settings.storage
        results["storage"] = True
    except Exception as e:
        results["storage"] = False
        results["storage_error"] = str(e)
    
    try:
        _ = settings.app
        results["app"] = True
    except Exception as e:
        results["app"] = False
        results["app_error"] = str(e)
    
    return results
