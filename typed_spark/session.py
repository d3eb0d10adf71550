"""
Session bootstrap: build a SparkSession, use it inside one block, stop it.

    with with_spark(props={"spark.sql.shuffle.partitions": 4}) as s:
        ds = s.ds_of(1, 2, 3)
        ds.collect()
"""

from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Iterator, Optional

from typed_spark.broadcast import broadcast
from typed_spark.config import SessionConfig, SparkLogLevel
from typed_spark.constants import (
    DEFAULT_APP_NAME,
    DEFAULT_MASTER,
    MASTER_CONF_KEY,
)
from typed_spark.dataset import TypedDataset, ds_of, rdd_to_ds, to_ds
from typed_spark.logging_config import get_logger

if TYPE_CHECKING:
    from pyspark import RDD, Broadcast, SparkConf, SparkContext
    from pyspark.sql import SparkSession, UDFRegistration

_log = get_logger()


def _new_builder() -> "SparkSession.Builder":
    from pyspark.sql import SparkSession

    return SparkSession.builder


def default_master() -> str:
    """spark.master from the default SparkConf, otherwise local[*]."""
    from pyspark import SparkConf

    return SparkConf().get(MASTER_CONF_KEY, DEFAULT_MASTER)


def set_log_level(spark_context: "SparkContext", level: SparkLogLevel) -> None:
    """Control the engine log level. This overrides any user-defined log settings."""
    spark_context.setLogLevel(SparkLogLevel(level).value)


class SparkApiSession:
    """
    Wrapper over SparkSession with helpers to create typed datasets.

    - to_ds / ds_of / rdd_to_ds: typed datasets from native values.
    - broadcast: read-only value shipped once to every executor.
    """

    def __init__(self, spark: "SparkSession"):
        self.spark = spark
        self._sc: Optional["SparkContext"] = None

    @property
    def sc(self) -> "SparkContext":
        if self._sc is None:
            self._sc = self.spark.sparkContext
        return self._sc

    @property
    def udf(self) -> "UDFRegistration":
        """Methods for registering user-defined functions."""
        return self.spark.udf

    def to_ds(self, data: Any, type_: Any = None) -> TypedDataset:
        return to_ds(self.spark, data, type_=type_)

    def ds_of(self, *values: Any, type_: Any = None) -> TypedDataset:
        return ds_of(self.spark, *values, type_=type_)

    def rdd_to_ds(self, rdd: "RDD", type_: Any) -> TypedDataset:
        return rdd_to_ds(self.spark, rdd, type_)

    def broadcast(self, value: Any) -> "Broadcast":
        return broadcast(self.spark, value)

    def set_log_level(self, level: SparkLogLevel) -> None:
        set_log_level(self.sc, level)


@contextmanager
def with_spark_builder(
    builder: "SparkSession.Builder",
    log_level: SparkLogLevel = SparkLogLevel.ERROR,
) -> Iterator[SparkApiSession]:
    """
    Run a block against the session built by ``builder``.

    The session is stopped exactly once when the block exits, whether it
    completed or raised; exceptions from the block propagate unchanged.
    """
    spark = builder.getOrCreate()
    _log.info("with_spark: session started")
    try:
        session = SparkApiSession(spark)
        session.set_log_level(log_level)
        level = SparkLogLevel(log_level).value
        _log.info("with_spark: log level set", extra={"log_level": level})
        yield session
    finally:
        spark.stop()
        _log.info("with_spark: session stopped")


@contextmanager
def with_spark(
    props: Optional[dict[str, Any]] = None,
    master: Optional[str] = None,
    app_name: str = DEFAULT_APP_NAME,
    log_level: SparkLogLevel = SparkLogLevel.ERROR,
) -> Iterator[SparkApiSession]:
    """
    Build a session from options and run a block against it.

    Args:
        props: Spark options; values must be str, bool, int or float.
        master: Master URL such as "local", "local[4]" or "spark://master:7077".
            Defaults to spark.master from SparkConf, otherwise "local[*]".
        app_name: Name shown in the Spark web UI.
        log_level: Overrides any user-defined log settings.

    Raises:
        UnsupportedConfigValueError: A props value has another type. Raised
            before any session is created.
    """
    config = SessionConfig(
        props=props or {},
        master=master,
        app_name=app_name,
        log_level=log_level,
    )
    resolved_master = config.master or default_master()
    builder = _new_builder().master(resolved_master).appName(config.app_name)
    options = config.to_builder_options()
    for key, value in options.items():
        builder = builder.config(key, value)
    _log.info(
        "with_spark: building session",
        extra={
            "master": resolved_master,
            "app_name": config.app_name,
            "options": sorted(options),
        },
    )
    with with_spark_builder(builder, config.log_level) as session:
        yield session


@contextmanager
def with_spark_conf(
    conf: "SparkConf",
    log_level: SparkLogLevel = SparkLogLevel.ERROR,
) -> Iterator[SparkApiSession]:
    """Run a block against a session configured from ``conf``."""
    with with_spark_builder(_new_builder().config(conf=conf), log_level) as session:
        yield session
