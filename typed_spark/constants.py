"""
Default values for session bootstrap and encoder lookup.

These mirror the engine's own defaults where one exists; everything can be
overridden per call.
"""

from typing import Any

# --- Session ---
DEFAULT_APP_NAME = "Python Spark Sample"
DEFAULT_MASTER = "local[*]"
MASTER_CONF_KEY = "spark.master"
DEFAULT_LOG_LEVEL_NAME = "ERROR"

# --- Encoders ---
DECIMAL_PRECISION = 38  # Spark system default for BigDecimal
DECIMAL_SCALE = 18
VALUE_COLUMN = "value"  # Column name used for non-struct element types
TUPLE_FIELD_PREFIX = "_"  # Fixed tuples become structs with _1, _2, ...

LOGGER_NAME = "typed_spark"


def get_default_settings() -> dict[str, Any]:
    """Return a dict of default settings for use in config or tests."""
    return {
        "app_name": DEFAULT_APP_NAME,
        "master": DEFAULT_MASTER,
        "master_conf_key": MASTER_CONF_KEY,
        "log_level": DEFAULT_LOG_LEVEL_NAME,
        "decimal_precision": DECIMAL_PRECISION,
        "decimal_scale": DECIMAL_SCALE,
        "value_column": VALUE_COLUMN,
        "tuple_field_prefix": TUPLE_FIELD_PREFIX,
    }
