"""Attribute rewriting for the Cloud Logging JSON schema.

The built-in step renames the encoder's reserved keys to the field names
Cloud Logging extracts from a structured payload:

* ``level`` -> ``severity`` with the mapped severity name,
* ``msg`` -> ``message``,
* ``time`` -> RFC 3339 text with a numeric offset.

A caller-supplied step, if any, runs after the built-in one and sees its
output, so it can adjust or undo the renaming for individual fields.
"""

from collections.abc import Callable
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from functools import partial

from .record import LEVEL_KEY, MESSAGE_KEY, TIME_KEY, Attr, Kind, Value
from .severity import DEFAULT_SEVERITY_TABLE, SeverityTable, map_severity

SEVERITY_KEY = "severity"
CLOUD_MESSAGE_KEY = "message"

RESERVED_KEYS = frozenset({LEVEL_KEY, MESSAGE_KEY, TIME_KEY, SEVERITY_KEY, CLOUD_MESSAGE_KEY})

ReplaceAttr = Callable[[tuple[str, ...], Attr], Attr]


def format_timestamp(t: datetime) -> str:
    """Format ``t`` as ``YYYY-MM-DDTHH:MM:SS`` plus ``Z`` or ``+HH:MM``.

    Naive datetimes are taken as local time.
    """
    if t.tzinfo is None or t.utcoffset() is None:
        t = t.astimezone()
    offset = t.utcoffset() or timedelta(0)
    stamp = t.strftime("%Y-%m-%dT%H:%M:%S")
    if offset == timedelta(0):
        return stamp + "Z"

    sign = "+" if offset > timedelta(0) else "-"
    minutes = abs(int(offset.total_seconds())) // 60
    return f"{stamp}{sign}{minutes // 60:02d}:{minutes % 60:02d}"


def rewrite_attr(
    groups: tuple[str, ...],
    attr: Attr,
    table: SeverityTable = DEFAULT_SEVERITY_TABLE,
) -> Attr:
    """Built-in rewrite step. Only top-level attributes are touched."""
    if groups:
        return attr

    if attr.key == LEVEL_KEY and attr.value.kind is Kind.LEVEL:
        return Attr(SEVERITY_KEY, Value.string(map_severity(attr.value.payload, table)))
    if attr.key == MESSAGE_KEY:
        return replace(attr, key=CLOUD_MESSAGE_KEY)
    if attr.key == TIME_KEY and attr.value.kind is Kind.TIME:
        return Attr(TIME_KEY, Value.string(format_timestamp(attr.value.payload)))
    return attr


@dataclass(frozen=True)
class RewriteChain:
    """
    Ordered sequence of rewrite steps, evaluated left to right.

    Each step receives the group path and the attribute returned by the
    previous step. Steps must not keep state between calls; the chain itself
    is immutable and may be shared by any number of concurrent encoders.
    """

    steps: tuple[ReplaceAttr, ...] = ()

    @classmethod
    def build(
        cls,
        replace_attr: ReplaceAttr | None = None,
        table: SeverityTable = DEFAULT_SEVERITY_TABLE,
    ) -> "RewriteChain":
        """Chain the built-in step with an optional caller step after it."""
        builtin: ReplaceAttr = rewrite_attr
        if table is not DEFAULT_SEVERITY_TABLE:
            builtin = partial(rewrite_attr, table=table)
        if replace_attr is None:
            return cls((builtin,))
        return cls((builtin, replace_attr))

    def __call__(self, groups: tuple[str, ...], attr: Attr) -> Attr:
        for step in self.steps:
            attr = step(groups, attr)
        return attr
