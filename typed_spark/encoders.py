"""
Encoder lookup: map native Python types to engine schemas.

An Encoder pairs a Spark DataType with two plain functions: one turning a
Python value into the tuples/lists/dicts that SparkSession.createDataFrame
accepts, and one turning a collected Row back into the Python value. The
engine owns the actual serialization; nothing here touches the JVM.

Supported:
    bool, int, float, str, bytes, Decimal, date, datetime, timedelta,
    Enum subclasses (stored by member name), dataclasses (structs),
    list[T] / tuple[T, ...] (arrays), tuple[A, B, ...] (structs _1, _2, ...),
    dict[K, V] (maps), Optional[T] (nullable).
"""

import dataclasses
import datetime
import decimal
import enum
import functools
import types
import typing
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional, Union

from pyspark.sql.types import (
    ArrayType,
    BinaryType,
    BooleanType,
    DataType,
    DateType,
    DayTimeIntervalType,
    DecimalType,
    DoubleType,
    LongType,
    MapType,
    StringType,
    StructField,
    StructType,
    TimestampType,
)

from typed_spark.constants import (
    DECIMAL_PRECISION,
    DECIMAL_SCALE,
    TUPLE_FIELD_PREFIX,
    VALUE_COLUMN,
)
from typed_spark.errors import UnsupportedTypeError

Converter = Callable[[Any], Any]


def _identity(v: Any) -> Any:
    return v


def _to_decimal(v: Any) -> decimal.Decimal:
    return v if isinstance(v, decimal.Decimal) else decimal.Decimal(str(v))


# Exact-type lookup; datetime must not fall through to date.
_ATOMIC: dict[type, tuple[DataType, Converter, Converter]] = {
    bool: (BooleanType(), _identity, _identity),
    int: (LongType(), int, _identity),
    float: (DoubleType(), float, _identity),
    str: (StringType(), _identity, _identity),
    bytes: (BinaryType(), bytes, bytes),
    bytearray: (BinaryType(), bytes, bytes),
    decimal.Decimal: (DecimalType(DECIMAL_PRECISION, DECIMAL_SCALE), _to_decimal, _identity),
    datetime.date: (DateType(), _identity, _identity),
    datetime.datetime: (TimestampType(), _identity, _identity),
    datetime.timedelta: (DayTimeIntervalType(), _identity, _identity),
}

_UNION_TYPES: tuple = (Union,)
if hasattr(types, "UnionType"):
    _UNION_TYPES = (Union, types.UnionType)


def _null_safe(fn: Converter) -> Converter:
    def convert(v: Any) -> Any:
        return None if v is None else fn(v)

    return convert


@dataclass(frozen=True)
class Encoder:
    """Schema and value conversions for one Python type."""

    tp: Any
    data_type: DataType
    nullable: bool
    to_internal: Converter
    from_internal: Converter

    @property
    def flat(self) -> bool:
        """True when values are stored in a single ``value`` column.

        Nullable structs are flat too: a top-level row itself cannot be null.
        """
        return self.nullable or not isinstance(self.data_type, StructType)

    @property
    def schema(self) -> StructType:
        if self.flat:
            return StructType([StructField(VALUE_COLUMN, self.data_type, self.nullable)])
        return self.data_type

    def to_row(self, value: Any) -> tuple:
        internal = self.to_internal(value)
        return (internal,) if self.flat else internal

    def from_row(self, row: Any) -> Any:
        return self.from_internal(row[0] if self.flat else row)


def _unwrap_optional(tp: Any) -> tuple[Any, bool]:
    if typing.get_origin(tp) in _UNION_TYPES:
        args = [a for a in typing.get_args(tp) if a is not type(None)]
        if len(args) != 1:
            raise UnsupportedTypeError(f"Only Optional[T] unions are supported, got {tp!r}")
        return args[0], True
    return tp, False


def _field(name: str, tp: Any) -> tuple[StructField, Converter, Converter]:
    data_type, nullable, to_fn, from_fn = _build(tp)
    return StructField(name, data_type, nullable), to_fn, from_fn


def _struct_encoder(
    fields: list[tuple[StructField, Converter, Converter]],
    make: Callable[[list[Any]], Any],
    read: Callable[[Any], Iterable[Any]],
) -> tuple[DataType, Converter, Converter]:
    to_fns = [f[1] for f in fields]
    from_fns = [f[2] for f in fields]

    def to_internal(v: Any) -> tuple:
        return tuple(fn(x) for fn, x in zip(to_fns, read(v)))

    def from_internal(row: Any) -> Any:
        return make([fn(row[i]) for i, fn in enumerate(from_fns)])

    return StructType([f[0] for f in fields]), to_internal, from_internal


def _dataclass_encoder(tp: type) -> tuple[DataType, Converter, Converter]:
    hints = typing.get_type_hints(tp)
    names = [f.name for f in dataclasses.fields(tp) if f.init]
    fields = [_field(name, hints[name]) for name in names]
    return _struct_encoder(
        fields,
        make=lambda values: tp(**dict(zip(names, values))),
        read=lambda v: (getattr(v, name) for name in names),
    )


def _tuple_encoder(args: tuple) -> tuple[DataType, Converter, Converter]:
    fields = [_field(f"{TUPLE_FIELD_PREFIX}{i}", a) for i, a in enumerate(args, start=1)]
    return _struct_encoder(fields, make=tuple, read=iter)


def _array_encoder(elem_tp: Any, make: Callable) -> tuple[DataType, Converter, Converter]:
    elem_type, elem_nullable, to_fn, from_fn = _build(elem_tp)
    return (
        ArrayType(elem_type, containsNull=elem_nullable),
        lambda v: [to_fn(x) for x in v],
        lambda v: make(from_fn(x) for x in v),
    )


def _map_encoder(key_tp: Any, value_tp: Any) -> tuple[DataType, Converter, Converter]:
    key_type, key_nullable, key_to, key_from = _build(key_tp)
    if key_nullable:
        raise UnsupportedTypeError(f"Map keys cannot be nullable, got {key_tp!r}")
    value_type, value_nullable, value_to, value_from = _build(value_tp)
    return (
        MapType(key_type, value_type, valueContainsNull=value_nullable),
        lambda v: {key_to(k): value_to(x) for k, x in v.items()},
        lambda v: {key_from(k): value_from(x) for k, x in v.items()},
    )


def _build(tp: Any) -> tuple[DataType, bool, Converter, Converter]:
    """Return (data_type, nullable, to_internal, from_internal) for tp."""
    tp, nullable = _unwrap_optional(tp)
    origin = typing.get_origin(tp)
    args = typing.get_args(tp)

    if isinstance(tp, type) and issubclass(tp, enum.Enum):
        data_type, to_fn, from_fn = StringType(), (lambda v: v.name), (lambda v: tp[v])
    elif isinstance(tp, type) and dataclasses.is_dataclass(tp):
        data_type, to_fn, from_fn = _dataclass_encoder(tp)
    elif tp in _ATOMIC:
        data_type, to_fn, from_fn = _ATOMIC[tp]
    elif origin is list and len(args) == 1:
        data_type, to_fn, from_fn = _array_encoder(args[0], list)
    elif origin is tuple and len(args) == 2 and args[1] is Ellipsis:
        data_type, to_fn, from_fn = _array_encoder(args[0], tuple)
    elif origin is tuple and args:
        data_type, to_fn, from_fn = _tuple_encoder(args)
    elif origin is dict and len(args) == 2:
        data_type, to_fn, from_fn = _map_encoder(*args)
    else:
        raise UnsupportedTypeError(
            f"Cannot derive an encoder for {tp!r}; containers need element types, e.g. list[int]"
        )
    return data_type, nullable, _null_safe(to_fn), _null_safe(from_fn)


@functools.lru_cache(maxsize=None)
def encoder(tp: Any) -> Encoder:
    """Look up the Encoder for a Python type (cached per type)."""
    data_type, nullable, to_fn, from_fn = _build(tp)
    return Encoder(tp, data_type, nullable, to_fn, from_fn)


def infer_type(values: Iterable[Any]) -> Any:
    """
    Infer the element type of a collection from its first non-null value.

    Only atomic, Enum and dataclass values can be inferred; containers carry
    no element type at runtime and must be given explicitly. The result is
    Optional[...] when the collection holds a None.
    """
    values = list(values)
    present = [v for v in values if v is not None]
    if not present:
        raise UnsupportedTypeError("Cannot infer a type from an empty or all-None collection")
    tp = type(present[0])
    inferable = (
        issubclass(tp, enum.Enum)
        or dataclasses.is_dataclass(tp)
        or tp in _ATOMIC
    )
    if not inferable:
        raise UnsupportedTypeError(
            f"Cannot infer element type from {tp.__name__} values; pass type_ explicitly"
        )
    return Optional[tp] if len(present) < len(values) else tp
