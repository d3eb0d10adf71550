"""Usage errors raised by typed_spark before the engine is invoked."""


class TypedSparkError(Exception):
    """Base class for errors raised by this package."""


class UnsupportedConfigValueError(TypedSparkError, TypeError):
    """A session option value is not a str, bool, int or float."""

    def __init__(self, key: str, value: object):
        self.key = key
        self.value = value
        super().__init__(
            f"Cannot set property {key} because value {value!r} "
            f"of unsupported type {type(value).__name__}"
        )


class UnsupportedTypeError(TypedSparkError, TypeError):
    """No encoder can be derived for a Python type."""
