"""Schemas — validate decoded data into typed values.

A Schema wraps a pydantic TypeAdapter in strict mode, so "true" is not a
bool and 1 is not a str. validate() accepts any Python object, including
MISSING for a value that was never there, and never raises: every mismatch
comes back as Invalid(reason).
"""

from __future__ import annotations

import functools
from dataclasses import dataclass
from typing import Any, Generic, TypeVar, Union

from pydantic import TypeAdapter, ValidationError

T = TypeVar("T")


class _Missing:
    __slots__ = ()

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


@dataclass(frozen=True)
class Valid(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Invalid:
    reason: str

    @property
    def ok(self) -> bool:
        return False


Result = Union[Valid[T], Invalid]


def _describe(exc: ValidationError) -> str:
    """One line per error: location and message."""
    parts = []
    for err in exc.errors(include_url=False):
        loc = ".".join(str(p) for p in err["loc"]) or "<root>"
        parts.append(f"{loc}: {err['msg']}")
    return "; ".join(parts)


class Schema(Generic[T]):
    """Expected shape of a stored value.

    Usage:
        flag = Schema(bool)
        flag.validate(True)     # Valid(value=True)
        flag.validate("true")   # Invalid(reason='<root>: Input should be a valid boolean')
        flag.dumps(False)       # 'false'
        flag.loads("false")     # Valid(value=False)
    """

    __slots__ = ("_type", "_adapter")

    def __init__(self, type_: Any) -> None:
        self._type = type_
        self._adapter: TypeAdapter[T] = TypeAdapter(type_)

    @property
    def type(self) -> Any:
        return self._type

    def validate(self, raw: object) -> Result[T]:
        if raw is MISSING:
            return Invalid("<root>: value is missing")
        try:
            return Valid(self._adapter.validate_python(raw, strict=True))
        except ValidationError as exc:
            return Invalid(_describe(exc))
        except (TypeError, ValueError, RecursionError) as exc:
            # Unhashable or cyclic input that pydantic rejects outside its own error type
            return Invalid(f"<root>: {exc}")

    def is_valid(self, raw: object) -> bool:
        return self.validate(raw).ok

    def dumps(self, value: T) -> str:
        """Serialize a valid value to compact JSON."""
        return self._adapter.dump_json(value).decode("utf-8")

    def loads(self, raw: str) -> Result[T]:
        """Decode a persisted JSON string and validate it.

        Uses pydantic's JSON mode, which reads back what dumps() wrote: enum
        values, ISO datetimes, UUID and Decimal strings.
        """
        try:
            return Valid(self._adapter.validate_json(raw, strict=True))
        except ValidationError as exc:
            return Invalid(_describe(exc))
        except (TypeError, ValueError, RecursionError) as exc:
            return Invalid(f"<root>: {exc}")

    def __repr__(self) -> str:
        plain = isinstance(self._type, type) and not getattr(self._type, "__args__", None)
        name = self._type.__name__ if plain else repr(self._type)
        return f"Schema({name})"


@functools.lru_cache(maxsize=None)
def _cached(type_: Any) -> Schema:
    return Schema(type_)


def schema(type_: Any) -> Schema:
    """Return a Schema for type_, reusing one already built when possible."""
    if isinstance(type_, Schema):
        return type_
    try:
        return _cached(type_)
    except TypeError:
        # Unhashable annotations are built fresh each time
        return Schema(type_)


BOOL: Schema[bool] = schema(bool)
INT: Schema[int] = schema(int)
FLOAT: Schema[float] = schema(float)
STR: Schema[str] = schema(str)
