"""
InfluxDB Line Protocol point model and encoder.

Example:

    from influent import Point

    point = (
        Point("weather")
        .tag("site", "us-west")
        .field("temp", 21.5)
        .field("count", 3)
        .time(1434055562000000000)
    )
    point.to_line()  # 'weather,site=us-west count=3i,temp=21.5 1434055562000000000'
"""

import math
import operator
import time as _time
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Mapping, Optional, Union


class Value:
    """Base class of a field value."""

    __slots__ = ()

    def encode(self) -> str:
        """Return the Line Protocol text of the value."""
        raise NotImplementedError

    @staticmethod
    def of(obj) -> "Value":
        """Wrap a plain Python scalar into the matching Value."""
        if isinstance(obj, Value):
            return obj
        # bool first, it is a subclass of int
        if isinstance(obj, bool):
            return Boolean(obj)
        if isinstance(obj, int):
            return Integer(obj)
        if isinstance(obj, float):
            return Float(obj)
        if isinstance(obj, str):
            return String(obj)
        raise TypeError("Unsupported field value type: %s" % type(obj).__name__)

    def __str__(self):
        return self.encode()


@dataclass(frozen=True)
class String(Value):
    value: str

    def encode(self) -> str:
        # Only double quotes are escaped; newlines and backslashes pass through.
        return '"' + self.value.replace('"', '\\"') + '"'


@dataclass(frozen=True)
class Float(Value):
    value: float

    def __post_init__(self):
        # float subclasses (numpy scalars) may repr as something other than a number
        object.__setattr__(self, "value", float(self.value))

    def encode(self) -> str:
        return _format_float(self.value)


@dataclass(frozen=True)
class Integer(Value):
    value: int

    def __post_init__(self):
        # Rejects floats instead of truncating them; accepts numpy integers.
        object.__setattr__(self, "value", operator.index(self.value))

    def encode(self) -> str:
        return "%di" % self.value


@dataclass(frozen=True)
class Boolean(Value):
    value: bool

    def encode(self) -> str:
        return "t" if self.value else "f"


FieldValue = Union[Value, str, int, float, bool]


def _format_float(value: float) -> str:
    """Shortest round-trip decimal without exponent or trailing '.0'."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    text = format(Decimal(repr(float(value))), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def encode_value(value: FieldValue) -> str:
    """Encode a field value (Value or plain scalar) for Line Protocol."""
    return Value.of(value).encode()


def escape(text: str) -> str:
    """Escape spaces and commas in measurement names, tag keys/values and field keys."""
    return text.replace(" ", "\\ ").replace(",", "\\,")


class Point:
    """
    A single measurement to be written.

    Builder methods mutate the point in place and return it, so calls can be
    chained. Setting an existing tag or field key replaces the old value.
    """

    def __init__(self, key: str):
        """Create an empty point for the measurement `key`."""
        self.key = key
        self.timestamp: Optional[int] = None
        self.tags: Dict[str, str] = {}
        self.fields: Dict[str, Value] = {}

    def tag(self, key: str, value: str) -> "Point":
        """Set a tag."""
        self.tags[key] = value
        return self

    def field(self, key: str, value: FieldValue) -> "Point":
        """Set a field; plain scalars are wrapped with Value.of()."""
        self.fields[key] = Value.of(value)
        return self

    def time(self, timestamp: int) -> "Point":
        """Set the Unix timestamp in nanoseconds."""
        self.timestamp = timestamp
        return self

    def now(self) -> "Point":
        """Set the timestamp to the current Unix time in nanoseconds."""
        return self.time(_time.time_ns())

    def to_line(self) -> str:
        """Encode the point as one Line Protocol record."""
        return encode_point(self)

    def __str__(self):
        return encode_point(self)

    def __repr__(self):
        return "Point(%r, tags=%r, fields=%r, timestamp=%r)" % (
            self.key,
            self.tags,
            self.fields,
            self.timestamp,
        )

    def __eq__(self, other):
        if not isinstance(other, Point):
            return NotImplemented
        return (
            self.key == other.key
            and self.timestamp == other.timestamp
            and self.tags == other.tags
            and self.fields == other.fields
        )


def encode_point(point: Point) -> str:
    """
    Encode a point as `measurement[,tag=val...] field=val[,field=val...] [timestamp]`.

    Tags and fields are emitted in sorted key order. The encoder never fails:
    a point without fields produces a record the server will reject.
    """
    parts = [escape(point.key)]

    for key, value in sorted(point.tags.items()):
        parts.append(",%s=%s" % (escape(key), escape(value)))

    parts.append(" ")
    parts.append(
        ",".join(
            "%s=%s" % (escape(key), value.encode())
            for key, value in sorted(point.fields.items())
        )
    )

    if point.timestamp is not None:
        parts.append(" %d" % point.timestamp)

    return "".join(parts)


def build_line_protocol(
    measurement: str,
    tags: Optional[Mapping[str, str]] = None,
    fields: Optional[Mapping[str, FieldValue]] = None,
    timestamp: Optional[int] = None,
) -> str:
    """Build a Line Protocol record from plain dictionaries."""
    point = Point(measurement)
    for key, value in (tags or {}).items():
        point.tag(key, str(value))
    for key, value in (fields or {}).items():
        point.field(key, value)
    if timestamp is not None:
        point.time(int(timestamp))
    return point.to_line()
