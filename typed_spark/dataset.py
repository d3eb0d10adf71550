"""
Typed dataset construction.

A TypedDataset is an engine DataFrame plus the Encoder of its element type.
Transformations run as RDD functions that decode rows, call the Python
function and re-encode the result; scheduling and execution stay with the
engine.
"""

from typing import TYPE_CHECKING, Any, Callable, Generic, Iterable, Optional, TypeVar

from typed_spark.encoders import Encoder, encoder, infer_type
from typed_spark.logging_config import get_logger

if TYPE_CHECKING:
    from pyspark import RDD
    from pyspark.sql import DataFrame, SparkSession
    from pyspark.sql.types import StructType

T = TypeVar("T")
U = TypeVar("U")

_log = get_logger()


class TypedDataset(Generic[T]):
    """DataFrame whose rows decode to values of one Python type."""

    def __init__(self, df: "DataFrame", enc: Encoder):
        self._df = df
        self._encoder = enc

    @property
    def df(self) -> "DataFrame":
        return self._df

    @property
    def encoder(self) -> Encoder:
        return self._encoder

    @property
    def schema(self) -> "StructType":
        return self._df.schema

    def collect(self) -> list[T]:
        decode = self._encoder.from_row
        return [decode(row) for row in self._df.collect()]

    def take(self, n: int) -> list[T]:
        decode = self._encoder.from_row
        return [decode(row) for row in self._df.take(n)]

    def first(self) -> Optional[T]:
        rows = self.take(1)
        return rows[0] if rows else None

    def count(self) -> int:
        return self._df.count()

    def show(self, n: int = 20, truncate: bool = True) -> "TypedDataset[T]":
        """Print the first n rows and return self, so it can sit inside a chain."""
        self._df.show(n, truncate=truncate)
        return self

    def _values(self) -> "RDD":
        decode = self._encoder.from_row
        return self._df.rdd.map(decode)

    def map(self, func: Callable[[T], U], type_: Any) -> "TypedDataset[U]":
        """Apply func to every element; type_ is the result's element type."""
        out = encoder(type_)
        encode = out.to_row
        rdd = self._values().map(lambda v: encode(func(v)))
        return TypedDataset(self._df.sparkSession.createDataFrame(rdd, out.schema), out)

    def filter(self, predicate: Callable[[T], bool]) -> "TypedDataset[T]":
        decode = self._encoder.from_row
        rdd = self._df.rdd.filter(lambda row: predicate(decode(row)))
        return TypedDataset(
            self._df.sparkSession.createDataFrame(rdd, self._encoder.schema),
            self._encoder,
        )

    def distinct(self) -> "TypedDataset[T]":
        return TypedDataset(self._df.distinct(), self._encoder)

    def reduce(self, func: Callable[[T, T], T]) -> T:
        """Reduce the elements with func; raises ValueError on an empty dataset."""
        return self._values().reduce(func)

    def __repr__(self) -> str:
        return f"TypedDataset[{getattr(self._encoder.tp, '__name__', self._encoder.tp)}]"


def to_ds(
    spark: "SparkSession",
    data: Iterable[T],
    type_: Any = None,
) -> TypedDataset[T]:
    """
    Create a TypedDataset from an in-memory collection.

    Args:
        spark: Active SparkSession.
        data: Values to distribute.
        type_: Element type; inferred from the first non-None value when omitted.

    Returns:
        TypedDataset whose schema comes from encoder(type_).
    """
    data = list(data)
    if type_ is None:
        type_ = infer_type(data)
    enc = encoder(type_)
    _log.debug(
        "to_ds: creating dataset",
        extra={"element_type": repr(type_), "rows": len(data), "schema": enc.schema.simpleString()},
    )
    df = spark.createDataFrame([enc.to_row(v) for v in data], enc.schema)
    return TypedDataset(df, enc)


def ds_of(spark: "SparkSession", *values: T, type_: Any = None) -> TypedDataset[T]:
    """Create a TypedDataset from positional values."""
    return to_ds(spark, values, type_=type_)


def rdd_to_ds(spark: "SparkSession", rdd: "RDD", type_: Any) -> TypedDataset:
    """Create a TypedDataset from an RDD of native values of type_."""
    enc = encoder(type_)
    encode = enc.to_row
    return TypedDataset(spark.createDataFrame(rdd.map(encode), enc.schema), enc)
