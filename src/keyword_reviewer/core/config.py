"""Configuration management for Keyword Reviewer."""

import json
import logging
import math
import os
from enum import Enum
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from keyword_reviewer.exporters.negative_keywords import (
    DEFAULT_EXPORT_FILENAME,
    MatchType,
)

ENV_PREFIX = "KWR_"


class LogFormat(str, Enum):
    """Log format options."""

    JSON = "json"
    TEXT = "text"


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    format: LogFormat = LogFormat.TEXT
    log_file: Path | None = Field(
        default=None, description="Optional file that receives a copy of all logs"
    )

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Normalize and validate the log level name."""
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {v}")
        return level


class ReviewThresholds(BaseModel):
    """Inclusion thresholds applied to every report row of a session."""

    spend_threshold: float = Field(
        default=0.0, ge=0.0, description="Minimum spend for a term to be reviewed"
    )
    cpc_threshold: float = Field(
        default=0.0,
        ge=0.0,
        description="Minimum cost per conversion for a term to be reviewed",
    )

    model_config = {"frozen": True}

    @field_validator("spend_threshold", "cpc_threshold")
    @classmethod
    def validate_finite(cls, v: float) -> float:
        """Reject NaN and infinite thresholds."""
        if not math.isfinite(v):
            raise ValueError("Thresholds must be finite numbers")
        return v

    @property
    def is_positive(self) -> bool:
        """Both thresholds are strictly greater than zero."""
        return self.spend_threshold > 0 and self.cpc_threshold > 0


class ReportConfig(BaseModel):
    """Search terms report conventions."""

    total_row_prefix: str = Field(
        default="Total:", min_length=1, description="Marker of summary/footer rows"
    )
    excluded_status: str = Field(
        default="Excluded",
        min_length=1,
        description="Status value of terms already excluded in Google Ads",
    )
    header_scan_rows: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Number of leading lines searched for the real header row",
    )


class ExportConfig(BaseModel):
    """Negative keyword export configuration."""

    filename: str = Field(default=DEFAULT_EXPORT_FILENAME, min_length=1)
    match_type: MatchType = MatchType.PLAIN


class Settings(BaseSettings):
    """Application settings.

    Environment Variables:
        KWR_THRESHOLDS__SPEND_THRESHOLD=10
        KWR_THRESHOLDS__CPC_THRESHOLD=50
        KWR_REQUIRE_POSITIVE_THRESHOLDS=true
        KWR_REPORT__TOTAL_ROW_PREFIX="Total:"
        KWR_REPORT__EXCLUDED_STATUS=Excluded
        KWR_EXPORT__FILENAME=negative-keywords.csv
        KWR_EXPORT__MATCH_TYPE=exact
        KWR_LOGGING__LEVEL=DEBUG
        KWR_LOGGING__FORMAT=json
    """

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    thresholds: ReviewThresholds = Field(default_factory=ReviewThresholds)
    require_positive_thresholds: bool = Field(
        default=True,
        description="Both thresholds must be greater than zero to start a review",
    )
    report: ReportConfig = Field(default_factory=ReportConfig)
    export: ExportConfig = Field(default_factory=ExportConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_env(cls, env_file: Path | None = None) -> "Settings":
        """Load settings from the environment, reading a .env file first."""
        if env_file:
            load_dotenv(env_file)
        else:
            env_path = Path.cwd() / ".env"
            if env_path.exists():
                load_dotenv(env_path)

        return cls()

    def get_env(self, key: str, default: str | None = None) -> str | None:
        """Get environment variable with KWR_ prefix."""
        return os.environ.get(f"{ENV_PREFIX}{key}", default)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    try:
        return Settings.from_env()
    except ValidationError as e:
        logging.error(f"Configuration error: {e}")
        raise


class JsonFormatter(logging.Formatter):
    """One JSON object per log line."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_data)


_HANDLER_MARKER = "_keyword_reviewer_handler"


def setup_logging(settings: Settings) -> None:
    """Configure logging based on settings.

    Handlers installed by a previous call are replaced, not duplicated.
    """
    log_level = getattr(logging, settings.logging.level.upper())

    if settings.logging.format == LogFormat.JSON:
        formatter: logging.Formatter = JsonFormatter()
    else:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    for handler in list(root_logger.handlers):
        if getattr(handler, _HANDLER_MARKER, False):
            root_logger.removeHandler(handler)
            handler.close()

    handlers: list[logging.Handler] = [logging.StreamHandler()]

    if settings.logging.log_file:
        log_file = Path(settings.logging.log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    for handler in handlers:
        handler.setFormatter(formatter)
        setattr(handler, _HANDLER_MARKER, True)
        root_logger.addHandler(handler)
