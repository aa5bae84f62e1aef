"""Structured log records and their typed attribute values.

A :class:`Record` is created at the call site, handed to a handler and
dropped after it has been written. Its attributes are :class:`Attr`
key/value pairs whose :class:`Value` carries an explicit :class:`Kind`, so
rewrite hooks can match on the kind instead of probing Python types.
"""

import math
from dataclasses import dataclass
from datetime import datetime
from enum import Enum, auto
from typing import Any, Iterator

TIME_KEY = "time"
LEVEL_KEY = "level"
MESSAGE_KEY = "msg"

BAD_KEY = "!BADKEY"


class Kind(Enum):
    """Closed set of attribute value kinds."""

    STRING = auto()
    INT = auto()
    FLOAT = auto()
    BOOL = auto()
    TIME = auto()
    GROUP = auto()
    ANY = auto()
    # The record level written by the encoder. Value.of never produces it.
    LEVEL = auto()


@dataclass(frozen=True)
class Value:
    """A tagged attribute value.

    Build values with :meth:`of` (classifies an arbitrary Python object) or
    with the kind-specific constructors.
    """

    kind: Kind
    payload: Any = None

    @classmethod
    def of(cls, obj: Any) -> "Value":
        if isinstance(obj, Value):
            return obj
        # bool is a subclass of int, check it first
        if isinstance(obj, bool):
            return cls(Kind.BOOL, obj)
        if isinstance(obj, str):
            return cls(Kind.STRING, obj)
        if isinstance(obj, int):
            return cls(Kind.INT, obj)
        if isinstance(obj, float):
            return cls(Kind.FLOAT, obj)
        if isinstance(obj, datetime):
            return cls(Kind.TIME, obj)
        if isinstance(obj, (list, tuple)) and obj and all(isinstance(a, Attr) for a in obj):
            return cls(Kind.GROUP, tuple(obj))
        return cls(Kind.ANY, obj)

    @classmethod
    def string(cls, v: str) -> "Value":
        return cls(Kind.STRING, v)

    @classmethod
    def time(cls, v: datetime) -> "Value":
        return cls(Kind.TIME, v)

    @classmethod
    def group(cls, *attrs: "Attr") -> "Value":
        return cls(Kind.GROUP, tuple(attrs))

    @classmethod
    def level(cls, v: int) -> "Value":
        return cls(Kind.LEVEL, v)

    def group_attrs(self) -> tuple["Attr", ...]:
        if self.kind is not Kind.GROUP:
            raise TypeError(f"Value of kind {self.kind.name} is not a group")
        return self.payload

    def text(self) -> str:
        """Render the value as text, the way it would read in a message."""
        if self.kind is Kind.STRING:
            return self.payload
        if self.kind is Kind.BOOL:
            return "true" if self.payload else "false"
        if self.kind is Kind.TIME:
            return self.payload.isoformat()
        if self.kind is Kind.GROUP:
            return "[" + " ".join(f"{a.key}={a.value.text()}" for a in self.payload) + "]"
        if self.kind is Kind.FLOAT and not math.isfinite(self.payload):
            return repr(self.payload)
        return str(self.payload)

    def __str__(self) -> str:
        return self.text()


@dataclass(frozen=True)
class Attr:
    """A single key/value pair of a record."""

    key: str
    value: Value

    @classmethod
    def of(cls, key: str, obj: Any) -> "Attr":
        return cls(key, Value.of(obj))

    @classmethod
    def group(cls, key: str, /, *args: Any, **attrs: Any) -> "Attr":
        """Build a group attribute from slog-style ``args`` and keyword attrs."""
        return cls(key, Value.group(*args_to_attrs(args, attrs)))


def args_to_attrs(args: tuple | list, attrs: dict[str, Any] | None = None) -> list[Attr]:
    """
    Turn loosely typed call-site arguments into attributes.

    ``args`` is read left to right: an :class:`Attr` is taken as is, a ``str``
    is a key whose value is the next argument, and anything else (or a ``str``
    with nothing after it) becomes a value under :data:`BAD_KEY`. Keyword
    ``attrs`` follow in their given order.
    """
    out: list[Attr] = []
    i = 0
    while i < len(args):
        arg = args[i]
        if isinstance(arg, Attr):
            out.append(arg)
            i += 1
        elif isinstance(arg, str):
            if i + 1 < len(args):
                out.append(Attr.of(arg, args[i + 1]))
                i += 2
            else:
                out.append(Attr.of(BAD_KEY, arg))
                i += 1
        else:
            out.append(Attr.of(BAD_KEY, arg))
            i += 1

    for key, obj in (attrs or {}).items():
        out.append(Attr.of(key, obj))
    return out


class Record:
    """
    One log event: time, level, message and an ordered list of attributes.

    A record belongs to a single log call. Handlers that need to add to it
    work on a :meth:`clone` so the caller's instance is left as it was.
    """

    def __init__(
        self,
        time: datetime | None,
        level: int,
        message: str,
        /,
        *args: Any,
        **attrs: Any,
    ):
        self.time = time
        self.level = level
        self.message = message
        self._attrs: list[Attr] = []
        if args or attrs:
            self.add(*args, **attrs)

    def add(self, *args: Any, **attrs: Any) -> None:
        self._attrs.extend(args_to_attrs(args, attrs))

    def add_attrs(self, *attrs: Attr) -> None:
        self._attrs.extend(attrs)

    def attrs(self) -> Iterator[Attr]:
        return iter(tuple(self._attrs))

    @property
    def num_attrs(self) -> int:
        return len(self._attrs)

    def clone(self) -> "Record":
        r = Record(self.time, self.level, self.message)
        r._attrs = list(self._attrs)
        return r

    def __repr__(self) -> str:
        return (
            f"Record(time={self.time!r}, level={self.level}, "
            f"message={self.message!r}, attrs={self._attrs!r})"
        )
