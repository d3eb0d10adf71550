"""
Configuration models for session bootstrap.

Option values are checked here so that a bad mapping fails before any
session is built.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from typed_spark.constants import DEFAULT_APP_NAME
from typed_spark.errors import UnsupportedConfigValueError

SUPPORTED_VALUE_TYPES = (str, bool, int, float)


class SparkLogLevel(str, Enum):
    """Log levels accepted by SparkContext.setLogLevel."""

    ALL = "ALL"
    DEBUG = "DEBUG"
    ERROR = "ERROR"
    FATAL = "FATAL"
    INFO = "INFO"
    OFF = "OFF"
    TRACE = "TRACE"
    WARN = "WARN"


def check_config_value(key: str, value: Any) -> None:
    """Raise UnsupportedConfigValueError unless value is a str, bool, int or float."""
    if not isinstance(value, SUPPORTED_VALUE_TYPES):
        raise UnsupportedConfigValueError(key, value)


def to_conf_string(value: Any) -> str:
    """Render a supported option value the way the engine parses it."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class SessionConfig(BaseModel):
    """Inputs for building a session inside with_spark()."""

    props: dict[str, Any] = Field(
        default_factory=dict,
        description="Spark options; values must be str, bool, int or float",
    )
    master: Optional[str] = Field(
        default=None,
        description="Master URL; None falls back to spark.master or local[*]",
    )
    app_name: str = Field(
        default=DEFAULT_APP_NAME,
        description="Application name shown in the Spark web UI",
    )
    log_level: SparkLogLevel = Field(
        default=SparkLogLevel.ERROR,
        description="Overrides any user-defined log settings",
    )

    @field_validator("props")
    @classmethod
    def check_props(cls, v: dict[str, Any]) -> dict[str, Any]:
        # TypeError subclasses are not wrapped into ValidationError.
        for key, value in v.items():
            check_config_value(key, value)
        return v

    def to_builder_options(self) -> dict[str, str]:
        """Props as the string key/value pairs passed to SparkSession.Builder.config."""
        return {k: to_conf_string(v) for k, v in self.props.items()}
