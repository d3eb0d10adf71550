"""
Python convenience layer over PySpark.

Provides:
- with_spark(): scoped session bootstrap from a mapping of options
- to_ds() / ds_of(): typed datasets built from native Python values
- encoder(): schema lookup for dataclasses, enums, containers and atomics
- broadcast(): read-only values shipped to every executor
"""

from typed_spark.broadcast import broadcast, context_broadcast
from typed_spark.config import SessionConfig, SparkLogLevel
from typed_spark.dataset import TypedDataset, ds_of, rdd_to_ds, to_ds
from typed_spark.encoders import Encoder, encoder, infer_type
from typed_spark.errors import (
    TypedSparkError,
    UnsupportedConfigValueError,
    UnsupportedTypeError,
)
from typed_spark.session import (
    SparkApiSession,
    set_log_level,
    with_spark,
    with_spark_builder,
    with_spark_conf,
)

__version__ = "0.1.0"

__all__ = [
    "with_spark",
    "with_spark_builder",
    "with_spark_conf",
    "SparkApiSession",
    "SessionConfig",
    "SparkLogLevel",
    "set_log_level",
    "TypedDataset",
    "to_ds",
    "ds_of",
    "rdd_to_ds",
    "Encoder",
    "encoder",
    "infer_type",
    "broadcast",
    "context_broadcast",
    "TypedSparkError",
    "UnsupportedConfigValueError",
    "UnsupportedTypeError",
]
