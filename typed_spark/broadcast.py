"""Broadcast helpers: ship a read-only value once to every executor."""

import warnings
from typing import TYPE_CHECKING, TypeVar

from typed_spark.logging_config import get_logger

if TYPE_CHECKING:
    from pyspark import Broadcast, SparkContext
    from pyspark.sql import SparkSession

T = TypeVar("T")

_log = get_logger()


def broadcast(spark: "SparkSession", value: T) -> "Broadcast[T]":
    """
    Broadcast a read-only variable to the cluster.

    Args:
        spark: Active SparkSession.
        value: Value to send to the executors; must be picklable.

    Returns:
        Broadcast handle; read it inside distributed functions with ``.value``.
    """
    _log.debug("broadcast: value shipped", extra={"value_type": type(value).__name__})
    return spark.sparkContext.broadcast(value)


def context_broadcast(sc: "SparkContext", value: T) -> "Broadcast[T]":
    """Deprecated: use broadcast(spark, value)."""
    warnings.warn(
        "context_broadcast() is deprecated, use broadcast(spark, value) instead",
        DeprecationWarning,
        stacklevel=2,
    )
    return sc.broadcast(value)
