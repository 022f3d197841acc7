"""Configuration schema models using Pydantic."""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from .duration import DurationParseError, parse_duration, validate_duration_range


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log output formats."""

    JSON = "json"
    KEY_VALUE = "key-value"


def _validate_base_path(v: str) -> str:
    stripped = v.strip().rstrip("/")
    if not stripped.startswith(("http://", "https://")):
        raise ValueError(f"base_path must be an http(s) URL, got: {v!r}")
    return stripped


def _validate_path(v: str) -> str:
    stripped = v.strip()
    if not stripped:
        raise ValueError("Path cannot be empty or whitespace-only")
    return stripped if stripped.startswith("/") else f"/{stripped}"


class DMPHubConfig(BaseModel):
    """Endpoints of the DMPHub API that supplies plans and receives awards."""

    base_path: str = Field(..., description="Base URL of the DMPHub (e.g. https://dmphub.example.org)")
    plans_path: str = Field(
        "/api/v1/data_management_plans", description="Path listing data management plans"
    )
    awards_path: str = Field("/api/v1/awards", description="Path used to register awards")
    token_path: str = Field("/oauth/token", description="OAuth2 client-credentials token path")

    @field_validator("base_path")
    @classmethod
    def check_base_path(cls, v: str) -> str:
        """Require an http(s) URL without a trailing slash."""
        return _validate_base_path(v)

    @field_validator("plans_path", "awards_path", "token_path")
    @classmethod
    def check_paths(cls, v: str) -> str:
        """Require a non-empty path with a leading slash."""
        return _validate_path(v)

    @property
    def plans_url(self) -> str:
        return f"{self.base_path}{self.plans_path}"

    @property
    def awards_url(self) -> str:
        return f"{self.base_path}{self.awards_path}"

    @property
    def token_url(self) -> str:
        return f"{self.base_path}{self.token_path}"


class NSFConfig(BaseModel):
    """Endpoints of the NSF Award Search Web API."""

    base_path: str = Field(
        "https://api.nsf.gov/services/v1", description="Base URL of the award search API"
    )
    awards_path: str = Field("/awards.json", description="Award search path")

    @field_validator("base_path")
    @classmethod
    def check_base_path(cls, v: str) -> str:
        """Require an http(s) URL without a trailing slash."""
        return _validate_base_path(v)

    @field_validator("awards_path")
    @classmethod
    def check_awards_path(cls, v: str) -> str:
        """Require a non-empty path with a leading slash."""
        return _validate_path(v)

    @property
    def awards_url(self) -> str:
        return f"{self.base_path}{self.awards_path}"


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(LogLevel.INFO, description="Log level")
    format: LogFormat = Field(
        LogFormat.KEY_VALUE, description="Log output format (json or key-value)"
    )

    model_config = {"use_enum_values": True}


class AdvancedConfig(BaseModel):
    """Advanced runtime settings."""

    http_request_timeout: int = Field(
        30, ge=5, le=300, description="Request timeout for API calls (seconds)"
    )
    user_agent: str = Field(
        "DMPAwardScanner/1.0",
        min_length=1,
        description="User-Agent string for HTTP requests",
    )
    max_candidates_per_plan: int = Field(
        500, ge=0, description="Maximum award candidates scored per plan (0 = unlimited)"
    )

    @field_validator("user_agent")
    @classmethod
    def strip_user_agent(cls, v: str) -> str:
        """Strip whitespace from user agent."""
        stripped = v.strip()
        if not stripped:
            raise ValueError("user_agent cannot be empty")
        return stripped


class AppConfig(BaseModel):
    """Root configuration object for the DMP Award Scanner."""

    dmphub: DMPHubConfig = Field(..., description="DMPHub endpoints")
    nsf: NSFConfig = Field(default_factory=NSFConfig, description="NSF Award Search endpoints")
    scan_interval: str = Field("1h", description="Polling interval in daemon mode")
    only_dois: List[str] = Field(
        default_factory=list,
        description="If set, only plans with these DOIs are scanned",
    )
    dry_run: bool = Field(False, description="Match plans without registering awards")
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )
    advanced: AdvancedConfig = Field(
        default_factory=AdvancedConfig, description="Advanced runtime settings"
    )

    # Computed field
    scan_interval_seconds: Optional[int] = None

    @field_validator("scan_interval")
    @classmethod
    def validate_scan_interval(cls, v: str) -> str:
        """Validate and parse scan interval."""
        try:
            validate_duration_range(parse_duration(v))
            return v
        except DurationParseError as e:
            raise ValueError(str(e)) from e

    @field_validator("only_dois")
    @classmethod
    def normalize_dois(cls, v: List[str]) -> List[str]:
        """Strip DOIs, drop blanks and duplicates while keeping order."""
        seen = []
        for doi in v:
            stripped = doi.strip()
            if stripped and stripped not in seen:
                seen.append(stripped)
        return seen

    @model_validator(mode="after")
    def compute_fields(self):
        """Compute derived fields."""
        self.scan_interval_seconds = parse_duration(self.scan_interval)
        return self

    def is_plan_selected(self, doi: str) -> bool:
        """Whether a plan passes the only_dois allow-list."""
        return not self.only_dois or doi in self.only_dois
