"""
Pydantic model for application configuration.
Provides robust validation for all settings.
"""

from pydantic import BaseModel, Field, field_validator, model_validator

DEFAULT_USER_AGENT = "framefetch"


class ClientConfig(BaseModel):
    """A validated configuration model for the frame client."""

    # Server
    base_url: str = ""

    # Transport Settings
    connect_timeout: float = 15.0
    read_timeout: float = 30.0
    total_timeout: float = 60.0
    user_agent: str = DEFAULT_USER_AGENT

    # Buffer Reuse
    buffer_size: int | None = None

    # Logging
    json_log_dir: str | None = None

    # Internal fields not loaded from INI file
    config_path: str = Field("", repr=False)

    class Config:
        """Pydantic model configuration."""

        validate_assignment = True
        str_strip_whitespace = True

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Ensures the base URL is an http(s) URL without a trailing slash."""
        if not v:
            return v
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"Base URL must start with http:// or https://: {v}")
        if "?" in v or "#" in v:
            raise ValueError("Base URL cannot contain a query string or fragment.")
        return v.rstrip("/")

    @field_validator("connect_timeout", "read_timeout", "total_timeout")
    @classmethod
    def validate_timeouts(cls, v: float) -> float:
        """Ensures timeouts are positive."""
        if v <= 0:
            raise ValueError("Timeouts must be greater than zero.")
        return v

    @field_validator("buffer_size")
    @classmethod
    def validate_buffer_size(cls, v: int | None) -> int | None:
        """A zero-sized buffer disables buffer reuse."""
        if v is None or v == 0:
            return None
        if v < 0:
            raise ValueError("Buffer size cannot be negative.")
        return v

    @field_validator("json_log_dir")
    @classmethod
    def validate_log_dir(cls, v: str | None) -> str | None:
        return v or None

    @model_validator(mode="after")
    def validate_timeout_order(self) -> "ClientConfig":
        """Checks that the per-phase timeouts fit into the total timeout."""
        if self.connect_timeout > self.total_timeout:
            raise ValueError("connect_timeout cannot exceed total_timeout.")
        if self.read_timeout > self.total_timeout:
            raise ValueError("read_timeout cannot exceed total_timeout.")
        return self

    @classmethod
    def get_ini_keys(cls) -> set[str]:
        """Returns a set of all keys that are expected in the INI file."""
        internal_fields = {"config_path"}
        return {key for key in cls.model_fields if key not in internal_fields}
