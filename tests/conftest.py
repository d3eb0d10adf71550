"""
Shared pytest fixtures for engine round-trip tests.

Provides:
  - spark_api: a SparkApiSession opened with with_spark() for the whole test run.
"""

from __future__ import annotations

import os
import shutil

import pytest

from typed_spark import with_spark


def _java_available() -> bool:
    return bool(os.environ.get("JAVA_HOME")) or shutil.which("java") is not None


@pytest.fixture(scope="session")
def spark_api():
    """Session-scoped local SparkApiSession; skipped when no Java runtime is found."""
    if not _java_available():
        pytest.skip("No Java runtime found. Install a JDK or set JAVA_HOME to run engine tests.")

    with with_spark(
        props={
            "spark.sql.codegen.comments": True,
            "spark.sql.shuffle.partitions": 4,
            "spark.ui.enabled": False,
        },
        master="local[2]",
        app_name="typed-spark-tests",
    ) as session:
        yield session
