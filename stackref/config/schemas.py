"""
Configuration schemas using Pydantic for validation.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..template.tags import STACK_RESOURCE_TYPE


class LoggingConfig(BaseModel):
    """Configuration for logging."""

    level: str | bool = Field(default="warning", description="Log level")
    colors: bool = Field(default=True, description="Colored console output")
    location: bool | int = Field(
        default=False, description="Show file locations in logs"
    )
    micros: bool = Field(default=False, description="Show microsecond timestamps")

    @field_validator("level")
    @classmethod
    def validate_log_level(cls, v: Any) -> Any:
        """Validate log level is a recognized level."""
        valid_levels = ["TRACE2", "TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "FALSE"]
        if isinstance(v, str) and v.upper() not in valid_levels:
            raise ValueError(
                f"Invalid log level '{v}'. Must be one of: {', '.join(valid_levels)}"
            )
        return v

    model_config = ConfigDict(extra="forbid")


class AnalysisConfig(BaseModel):
    """Configuration for template analysis."""

    getatt_local_resources: bool = Field(
        default=False,
        description="Also resolve !GetAtt against local non-stack resources",
    )
    skip_remote_template_urls: bool = Field(
        default=True,
        description="Ignore TemplateURL values that carry a URL scheme",
    )
    stack_resource_types: list[str] = Field(
        default_factory=lambda: [STACK_RESOURCE_TYPE],
        description="Resource types that instantiate a child template",
    )
    template_suffixes: list[str] = Field(
        default_factory=lambda: [".yaml", ".yml", ".template"],
        description="File suffixes treated as templates when walking directories",
    )
    encoding: str = Field(default="utf-8", description="Template file encoding")

    @field_validator("stack_resource_types", "template_suffixes", mode="before")
    @classmethod
    def split_single_value(cls, v: Any) -> Any:
        """Accept a single string where a list is expected."""
        if isinstance(v, str):
            return [v]
        return v

    model_config = ConfigDict(extra="forbid")


class OutputConfig(BaseModel):
    """Configuration for diagnostic output."""

    format: Literal["text", "json", "pretty"] = Field(
        default="text", description="Diagnostic output format"
    )

    model_config = ConfigDict(extra="forbid")


class StackRefConfig(BaseModel):
    """Root configuration model."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    analysis: AnalysisConfig = Field(default_factory=AnalysisConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)

    model_config = ConfigDict(extra="forbid")
