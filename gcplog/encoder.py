"""Newline-delimited JSON encoder for :class:`~gcplog.record.Record`.

The encoder knows nothing about Cloud Logging. It writes the built-in
``time``/``level``/``msg`` fields followed by the record attributes, and lets
a ``replace_attr`` hook rename or reformat every non-group attribute on the
way out. Output order follows the order attributes were added, duplicates
included.
"""

import json
import math
import threading
from typing import Iterable, TextIO, Union

from .record import LEVEL_KEY, MESSAGE_KEY, TIME_KEY, Attr, Kind, Record, Value
from .rewrite import ReplaceAttr
from .severity import LEVEL_INFO

# An object under construction: ordered (key, encoded JSON or nested object).
_Node = list[tuple[str, Union[str, "_Node"]]]


def _encode_scalar(value: Value) -> str:
    kind = value.kind
    payload = value.payload
    if kind is Kind.STRING:
        return json.dumps(payload, ensure_ascii=False)
    if kind is Kind.BOOL:
        return "true" if payload else "false"
    if kind is Kind.INT or kind is Kind.LEVEL:
        return str(payload)
    if kind is Kind.FLOAT:
        if not math.isfinite(payload):
            return json.dumps(repr(payload))
        return json.dumps(payload)
    if kind is Kind.TIME:
        return json.dumps(payload.isoformat())
    if isinstance(payload, BaseException):
        return json.dumps(str(payload), ensure_ascii=False)
    try:
        return json.dumps(payload, default=str, ensure_ascii=False, allow_nan=False)
    except (TypeError, ValueError) as e:
        # tuple keys, cycles or NaN inside a container
        return json.dumps(f"!ERROR:{e}", ensure_ascii=False)


def _render(node: _Node) -> str | None:
    """Render ``node`` as a JSON object; ``None`` if it has no members."""
    parts = []
    for key, value in node:
        if isinstance(value, list):
            value = _render(value)
            if value is None:
                continue
        parts.append(f"{json.dumps(key, ensure_ascii=False)}:{value}")
    if not parts:
        return None
    return "{" + ",".join(parts) + "}"


class JSONEncoder:
    """
    Encode records as one JSON object per line and write them to ``writer``.

    Encoders derived through :meth:`with_attrs` and :meth:`with_group` share
    the writer and its lock, so concurrent ``handle`` calls never interleave
    partial lines.

    Parameters:
        writer: Text sink with a ``write(str)`` method.
        level: Minimum level; records below it are not enabled.
        replace_attr: Hook called once per non-group attribute with the
            current group path. Built-in fields are passed with ``()``.
    """

    def __init__(
        self,
        writer: TextIO,
        level: int = LEVEL_INFO,
        replace_attr: ReplaceAttr | None = None,
    ):
        self._writer = writer
        self._level = level
        self._replace_attr = replace_attr
        self._lock = threading.Lock()

        # Groups opened by with_group, and the attrs bound by with_attrs
        # together with the group path that was open at the time.
        self._groups: tuple[str, ...] = ()
        self._bound: tuple[tuple[tuple[str, ...], tuple[Attr, ...]], ...] = ()

    @property
    def level(self) -> int:
        return self._level

    def enabled(self, level: int) -> bool:
        return level >= self._level

    def _derive(
        self,
        groups: tuple[str, ...],
        bound: tuple[tuple[tuple[str, ...], tuple[Attr, ...]], ...],
    ) -> "JSONEncoder":
        enc = JSONEncoder.__new__(JSONEncoder)
        enc._writer = self._writer
        enc._level = self._level
        enc._replace_attr = self._replace_attr
        enc._lock = self._lock
        enc._groups = groups
        enc._bound = bound
        return enc

    def with_attrs(self, attrs: Iterable[Attr]) -> "JSONEncoder":
        """Return an encoder that writes ``attrs`` in every record.

        The attributes land inside the groups opened so far.
        """
        attrs = tuple(attrs)
        if not attrs:
            return self
        return self._derive(self._groups, self._bound + ((self._groups, attrs),))

    def with_group(self, name: str) -> "JSONEncoder":
        """Return an encoder that nests later attributes under ``name``."""
        if not name:
            return self
        return self._derive(self._groups + (name,), self._bound)

    def _append_attr(self, out: _Node, attr: Attr, groups: tuple[str, ...]) -> None:
        if attr.value.kind is not Kind.GROUP and self._replace_attr is not None:
            attr = self._replace_attr(groups, attr)

        if attr.value.kind is Kind.GROUP:
            if attr.key:
                inner: _Node = []
                out.append((attr.key, inner))
                groups = groups + (attr.key,)
            else:
                inner = out
            for member in attr.value.payload:
                self._append_attr(inner, member, groups)
            return

        if not attr.key:
            return
        out.append((attr.key, _encode_scalar(attr.value)))

    def encode(self, record: Record) -> str:
        """Return the JSON line for ``record``, without the trailing newline."""
        root: _Node = []
        if record.time is not None:
            self._append_attr(root, Attr(TIME_KEY, Value.time(record.time)), ())
        self._append_attr(root, Attr(LEVEL_KEY, Value.level(record.level)), ())
        self._append_attr(root, Attr(MESSAGE_KEY, Value.string(record.message)), ())

        # path[i] is the object for the first i open groups
        path: list[_Node] = [root]

        def open_groups(groups: tuple[str, ...]) -> _Node:
            while len(path) <= len(groups):
                node: _Node = []
                path[-1].append((groups[len(path) - 1], node))
                path.append(node)
            return path[len(groups)]

        for groups, attrs in self._bound:
            target = open_groups(groups)
            for attr in attrs:
                self._append_attr(target, attr, groups)

        target = open_groups(self._groups)
        for attr in record.attrs():
            self._append_attr(target, attr, self._groups)

        return _render(root) or "{}"

    def handle(self, record: Record) -> None:
        """Encode ``record`` and write it as one line.

        Errors raised by the writer propagate to the caller.
        """
        line = self.encode(record) + "\n"
        with self._lock:
            self._writer.write(line)
