"""
Tests for the session scope wrapper and broadcast helpers.

No JVM required; the session builder is replaced with an in-memory fake.
"""

import logging

import pytest

import typed_spark.session as session_module
from typed_spark.broadcast import broadcast, context_broadcast
from typed_spark.config import SparkLogLevel
from typed_spark.errors import UnsupportedConfigValueError
from typed_spark.session import (
    SparkApiSession,
    default_master,
    set_log_level,
    with_spark,
    with_spark_builder,
    with_spark_conf,
)


class FakeContext:
    def __init__(self) -> None:
        self.log_levels: list[str] = []
        self.broadcasts: list[object] = []

    def setLogLevel(self, level: str) -> None:
        self.log_levels.append(level)

    def broadcast(self, value):
        self.broadcasts.append(value)
        return ("broadcast", value)


class FakeSpark:
    def __init__(self) -> None:
        self.sparkContext = FakeContext()
        self.stop_calls = 0
        self.udf = "udf-registration"

    def stop(self) -> None:
        self.stop_calls += 1


class FakeBuilder:
    def __init__(self) -> None:
        self.options: dict[str, str] = {}
        self.conf = None
        self.master_url = None
        self.name = None
        self.created: list[FakeSpark] = []

    def master(self, url: str) -> "FakeBuilder":
        self.master_url = url
        return self

    def appName(self, name: str) -> "FakeBuilder":
        self.name = name
        return self

    def config(self, key=None, value=None, conf=None) -> "FakeBuilder":
        if conf is not None:
            self.conf = conf
        else:
            self.options[key] = value
        return self

    def getOrCreate(self) -> FakeSpark:
        spark = FakeSpark()
        self.created.append(spark)
        return spark


@pytest.fixture()
def builder(monkeypatch) -> FakeBuilder:
    fake = FakeBuilder()
    monkeypatch.setattr(session_module, "_new_builder", lambda: fake)
    return fake


# --- Lifecycle ---


def test_with_spark_builds_runs_and_stops(builder: FakeBuilder) -> None:
    with with_spark(
        props={"spark.sql.codegen.comments": True, "spark.sql.shuffle.partitions": 4},
        master="local[2]",
        app_name="lifecycle",
    ) as s:
        assert isinstance(s, SparkApiSession)
        assert s.spark.stop_calls == 0

    (spark,) = builder.created
    assert spark.stop_calls == 1
    assert builder.master_url == "local[2]"
    assert builder.name == "lifecycle"
    assert builder.options == {
        "spark.sql.codegen.comments": "true",
        "spark.sql.shuffle.partitions": "4",
    }
    assert spark.sparkContext.log_levels == ["ERROR"]


def test_session_stopped_once_when_block_raises(builder: FakeBuilder) -> None:
    with pytest.raises(RuntimeError, match="boom"):
        with with_spark(master="local[1]"):
            raise RuntimeError("boom")
    (spark,) = builder.created
    assert spark.stop_calls == 1


def test_unsupported_value_fails_before_session_creation(builder: FakeBuilder) -> None:
    with pytest.raises(UnsupportedConfigValueError):
        with with_spark(props={"spark.jars": ["a.jar"]}, master="local[1]"):
            pytest.fail("block must not run")
    assert builder.created == []
    assert builder.master_url is None


def test_with_spark_logs_session_fields(builder: FakeBuilder, caplog) -> None:
    caplog.set_level(logging.INFO, logger="typed_spark")
    with with_spark(props={"b": 1, "a": True}, master="local[1]", app_name="fields"):
        pass
    (built,) = [r for r in caplog.records if r.getMessage() == "with_spark: building session"]
    assert built.master == "local[1]"
    assert built.app_name == "fields"
    assert built.options == ["a", "b"]
    (level,) = [r for r in caplog.records if r.getMessage() == "with_spark: log level set"]
    assert level.log_level == "ERROR"


def test_log_level_applied(builder: FakeBuilder) -> None:
    with with_spark(master="local[1]", log_level=SparkLogLevel.WARN):
        pass
    assert builder.created[0].sparkContext.log_levels == ["WARN"]


def test_with_spark_builder_stops_on_error() -> None:
    fake = FakeBuilder()
    with pytest.raises(ValueError):
        with with_spark_builder(fake, SparkLogLevel.INFO):
            raise ValueError("inner")
    assert fake.created[0].stop_calls == 1
    assert fake.created[0].sparkContext.log_levels == ["INFO"]


def test_with_spark_conf_passes_conf(builder: FakeBuilder) -> None:
    conf = object()
    with with_spark_conf(conf) as s:
        assert s.spark is builder.created[0]
    assert builder.conf is conf
    assert builder.created[0].stop_calls == 1


def test_default_master_without_running_context(monkeypatch) -> None:
    from pyspark import SparkContext

    monkeypatch.setattr(SparkContext, "_jvm", None)
    assert default_master() == "local[*]"


# --- Session helpers ---


def test_session_helpers_delegate() -> None:
    spark = FakeSpark()
    s = SparkApiSession(spark)
    assert s.sc is spark.sparkContext
    assert s.udf == "udf-registration"
    assert s.broadcast({"a": 1}) == ("broadcast", {"a": 1})
    s.set_log_level(SparkLogLevel.DEBUG)
    set_log_level(spark.sparkContext, "OFF")
    assert spark.sparkContext.log_levels == ["DEBUG", "OFF"]


def test_broadcast_uses_session_context() -> None:
    spark = FakeSpark()
    assert broadcast(spark, [1, 2]) == ("broadcast", [1, 2])
    assert spark.sparkContext.broadcasts == [[1, 2]]


def test_context_broadcast_is_deprecated() -> None:
    sc = FakeContext()
    with pytest.warns(DeprecationWarning):
        handle = context_broadcast(sc, 5)
    assert handle == ("broadcast", 5)
