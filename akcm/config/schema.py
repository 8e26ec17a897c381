# AKCM Configuration Schema
# Pydantic models for YAML configuration validation

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator


class DesiredState(str, Enum):
    """Target state every selected item is driven toward."""

    ENABLE = "enable"
    DISABLE = "disable"

    @property
    def as_bool(self) -> bool:
        """Switch position that represents this state."""
        return self is DesiredState.ENABLE

    @property
    def past_tense(self) -> str:
        """Human-readable verb for log lines ("enabled" / "disabled")."""
        return f"{self.value}d"


class Category(str, Enum):
    """Content type reported by the dashboard."""

    APP = "APP"
    EBOOK = "EBOOK"
    VIDEO = "VIDEO"
    AUDIBLE = "AUDIBLE"
    SKILL = "SKILL"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def parse(cls, value: Optional[str]) -> "Category":
        """Map a raw content-type string to a Category, UNKNOWN if unrecognised."""
        if not value:
            return cls.UNKNOWN
        try:
            return cls(value.strip().upper())
        except ValueError:
            return cls.UNKNOWN


class LogLevel(str, Enum):
    """Console verbosity."""

    QUIET = "quiet"
    NORMAL = "normal"
    VERBOSE = "verbose"


def _upper_list(v: Any) -> Any:
    if v is None:
        return None
    if isinstance(v, str):
        v = [v]
    return [str(x).strip().upper() for x in v]


class Policy(BaseModel):
    """Selection and pacing policy for a reconciliation run."""

    mode: DesiredState = Field(default=DesiredState.DISABLE, description="'enable' or 'disable' content")
    content_types: Optional[list[Category]] = Field(
        default=None, description="Content types to touch. None = all types."
    )
    keywords: Optional[list[str]] = Field(
        default=None, description="Only titles containing ANY keyword are processed. None = all items."
    )
    exclude_keywords: Optional[list[str]] = Field(
        default=None, description="Titles containing ANY of these keywords are skipped."
    )
    keyword_case_sensitive: bool = Field(default=False, description="Case-sensitive keyword matching")
    concurrency: int = Field(default=5, description="Items actuated at once")
    batch_delay_ms: int = Field(default=150, description="Delay between actuation batches")
    page_delay_ms: int = Field(default=100, description="Delay between pagination loads")
    max_retries: int = Field(default=3, description="Max retries per failed toggle")
    backoff_base_ms: int = Field(default=500, description="Base delay for exponential backoff")
    dry_run: bool = Field(default=False, description="Log what would happen without making changes")

    @field_validator("content_types", mode="before")
    @classmethod
    def normalize_content_types(cls, v: Any) -> Any:
        """Accept lower-case or single-string content types."""
        return _upper_list(v)

    @field_validator("keywords", "exclude_keywords", mode="before")
    @classmethod
    def normalize_keywords(cls, v: Any) -> Any:
        """Accept a single keyword string."""
        if isinstance(v, str):
            return [v]
        return v

    @property
    def desired_state(self) -> bool:
        """Switch position selected items are driven toward."""
        return self.mode.as_bool


class TimingConfig(BaseModel):
    """Polling intervals and timeouts for the host page."""

    verify_timeout_ms: int = Field(default=3000, description="Wait for a toggle to be observed")
    verify_poll_ms: int = Field(default=50, description="Poll interval while verifying a toggle")
    new_items_timeout_ms: int = Field(default=15000, description="Wait for a new page of items")
    new_items_poll_ms: int = Field(default=150, description="Poll interval while waiting for new items")
    loading_poll_ms: int = Field(default=1000, description="Poll interval while a page is loading")
    page_load_timeout_ms: int = Field(default=15000, description="Give up waiting on a loading page")
    panel_timeout_ms: int = Field(default=3000, description="Wait for the manage-access panel to open")
    max_backoff_ms: int = Field(default=60000, description="Upper bound for a single backoff delay")


class HostConfig(BaseModel):
    """Where the dashboard lives and how to reach the browser."""

    url_patterns: list[str] = Field(
        default_factory=lambda: ["parentdashboard", "parents.amazon"],
        description="The active tab URL must contain one of these",
    )
    start_url: str = Field(default="https://parents.amazon.com/explore", description="Dashboard entry page")
    cdp_endpoint: str = Field(default="http://localhost:9222", description="Chromium remote debugging endpoint")
    child_name: Optional[str] = Field(
        default=None, description="Child to manage in no-child-selected view. None = auto-detect."
    )


class DirectCallConfig(BaseModel):
    """Optional HTTP endpoint used when no visual control is available."""

    endpoint: Optional[str] = Field(
        default=None, description="URL template, may reference {item_id} and {state}"
    )
    method: str = Field(default="POST", description="HTTP method")
    headers: dict[str, str] = Field(default_factory=dict, description="Extra request headers")
    timeout_seconds: float = Field(default=10.0, description="Per-request timeout")


class OutputConfig(BaseModel):
    """Output and logging configuration."""

    log_level: LogLevel = Field(default=LogLevel.NORMAL, description="quiet, normal or verbose")
    colored: bool = Field(default=True, description="Enable colored output")


class AkcmConfig(BaseModel):
    """Root configuration model for AKCM."""

    policy: Policy = Field(default_factory=Policy, description="Selection and pacing policy")
    timing: TimingConfig = Field(default_factory=TimingConfig, description="Polling and timeouts")
    host: HostConfig = Field(default_factory=HostConfig, description="Host page settings")
    direct_call: DirectCallConfig = Field(default_factory=DirectCallConfig, description="Direct-call actuation")
    output: OutputConfig = Field(default_factory=OutputConfig, description="Output settings")
