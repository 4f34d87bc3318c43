"""
Configuration management using Pydantic models loaded from YAML.
"""

from datetime import time
from pathlib import Path
from typing import List, Optional

import pendulum
import yaml
from pydantic import BaseModel, Field, field_validator, model_validator
from rich.logging import RichHandler

from .domain.models import MIN_DURATION_MINUTES, WorkingHours
from .domain.slot_ranker import DEFAULT_MAX_RESULTS
from .logging import setup_logging

CONFIG_FILENAME = "availability.yaml"


class WorkingHoursConfig(BaseModel):
    """Daily window within which free slots may be offered."""
    start_hour: int = 9
    end_hour: int = 21
    exclude_days: List[int] = Field(default_factory=list)  # 0=Monday, 6=Sunday

    @field_validator("start_hour", "end_hour")
    @classmethod
    def validate_hour(cls, v: int) -> int:
        """Validate hour is between 0 and 23."""
        if not 0 <= v <= 23:
            raise ValueError(f"Hour must be between 0 and 23, got {v}")
        return v

    @field_validator("exclude_days")
    @classmethod
    def validate_exclude_days(cls, value: List[int]) -> List[int]:
        """Ensure weekdays are in valid range and deduplicated."""
        invalid_days = [day for day in value if day not in range(7)]
        if invalid_days:
            raise ValueError(f"exclude_days must be between 0 and 6, got {invalid_days}")
        return list(dict.fromkeys(value))

    @model_validator(mode="after")
    def validate_hours_order(self) -> "WorkingHoursConfig":
        """Ensure the configured window opens before it closes."""
        if self.end_hour <= self.start_hour:
            raise ValueError("end_hour must be later than start_hour")
        return self

    def get_start_time(self) -> time:
        """Get start time as time object."""
        return time(hour=self.start_hour, minute=0)

    def get_end_time(self) -> time:
        """Get end time as time object."""
        return time(hour=self.end_hour, minute=0)


class EngineConfig(BaseModel):
    """Availability engine configuration."""
    timezone: str = "UTC"
    working_hours: WorkingHoursConfig = Field(default_factory=WorkingHoursConfig)
    max_results: int = Field(default=DEFAULT_MAX_RESULTS, ge=1, le=DEFAULT_MAX_RESULTS)
    default_min_duration_minutes: int = Field(default=60, ge=MIN_DURATION_MINUTES)
    fetch_timeout_seconds: Optional[float] = Field(default=10.0, gt=0)
    log_level: str = "INFO"

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        """Ensure the timezone is a known IANA name."""
        try:
            pendulum.timezone(value)
        except Exception as exc:
            raise ValueError(f"Unknown timezone: {value}") from exc
        return value

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {value}")
        return level

    def get_working_hours(self) -> WorkingHours:
        """Build the domain working hours from this configuration."""
        return WorkingHours(
            start_time=self.working_hours.get_start_time(),
            end_time=self.working_hours.get_end_time(),
            exclude_weekdays=list(self.working_hours.exclude_days),
            timezone=self.timezone,
        )

    def configure_logging(self, debug_mode: bool = False, color: bool = True) -> RichHandler:
        """Attach the console handler at the configured ``log_level``."""
        return setup_logging(self.log_level, debug_mode=debug_mode, color=color)

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "EngineConfig":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to the YAML config file

        Returns:
            EngineConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        return cls(**data)


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for the config file in current directory
    config_path = Path.cwd() / CONFIG_FILENAME

    if not config_path.exists():
        # Try in the project root (parent of the package)
        project_root = Path(__file__).parent.parent
        config_path = project_root / CONFIG_FILENAME

    return config_path
