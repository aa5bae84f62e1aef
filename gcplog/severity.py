"""Severity levels and their Cloud Logging names.

Level names come from
https://cloud.google.com/logging/docs/reference/v2/rest/v2/LogEntry#logseverity

The numeric values below do *not* match that page. They are ordered so that
the base levels line up with the usual DEBUG/INFO/WARN/ERROR steps of 4, and
only the string names ever appear in the emitted log lines.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

LEVEL_DEFAULT = -8
LEVEL_DEBUG = -4
LEVEL_INFO = 0
LEVEL_NOTICE = 2
LEVEL_WARNING = 4
LEVEL_ERROR = 8
LEVEL_CRITICAL = 60
LEVEL_ALERT = 70
LEVEL_EMERGENCY = 80

# Anchors for the generic fallback naming (see default_level_name).
_BASE_LEVELS: tuple[tuple[str, int], ...] = (
    ("DEBUG", LEVEL_DEBUG),
    ("INFO", LEVEL_INFO),
    ("WARN", LEVEL_WARNING),
    ("ERROR", LEVEL_ERROR),
)


@dataclass(frozen=True)
class SeverityTable:
    """Read-only mapping from numeric level to Cloud Logging severity name.

    Values must be non-empty upper-case tokens. The mapping is copied and
    frozen at construction, so a table can be shared freely between handlers
    and threads.
    """

    names: Mapping[int, str] = field(default_factory=dict)

    def __post_init__(self):
        frozen = MappingProxyType(dict(self.names))
        for level, name in frozen.items():
            if not isinstance(level, int):
                raise ValueError(f"severity level must be an int, got {level!r}")
            if not name or name != name.upper() or name.split() != [name]:
                raise ValueError(
                    f"severity name for level {level} must be a non-empty upper-case token, got {name!r}"
                )
        object.__setattr__(self, "names", frozen)

    def get(self, level: int) -> str | None:
        return self.names.get(level)

    def __contains__(self, level: object) -> bool:
        return level in self.names

    def __len__(self) -> int:
        return len(self.names)


DEFAULT_SEVERITY_TABLE = SeverityTable(
    {
        LEVEL_DEFAULT: "DEFAULT",
        LEVEL_DEBUG: "DEBUG",
        LEVEL_INFO: "INFO",
        LEVEL_NOTICE: "NOTICE",
        LEVEL_WARNING: "WARNING",
        LEVEL_ERROR: "ERROR",
        LEVEL_CRITICAL: "CRITICAL",
        LEVEL_ALERT: "ALERT",
        LEVEL_EMERGENCY: "EMERGENCY",
    }
)


def default_level_name(level: int) -> str:
    """
    Name a level relative to the closest base level at or below it.

    Levels below INFO are named from DEBUG, so anything under DEBUG gets a
    negative offset, e.g. ``-8 -> "DEBUG-4"``, ``0 -> "INFO"``,
    ``7 -> "WARN+3"``, ``61 -> "ERROR+53"``.
    """
    base_name, base_level = _BASE_LEVELS[0]
    for name, value in _BASE_LEVELS[1:]:
        if level < value:
            break
        base_name, base_level = name, value

    offset = level - base_level
    if offset == 0:
        return base_name
    return f"{base_name}{offset:+d}"


def map_severity(level: int, table: SeverityTable = DEFAULT_SEVERITY_TABLE) -> str:
    """Return the Cloud Logging severity for ``level``.

    Known levels map through ``table``; any other int falls back to
    :func:`default_level_name`, so the result is never empty.
    """
    name = table.get(level)
    if name is not None:
        return name
    return default_level_name(level)


def level_from_name(name: str, table: SeverityTable = DEFAULT_SEVERITY_TABLE) -> int:
    """Parse a severity or base level name (case-insensitive) into a level."""
    wanted = name.strip().upper()
    for level, severity in table.names.items():
        if severity == wanted:
            return level
    for base_name, base_level in _BASE_LEVELS:
        if base_name == wanted:
            return base_level
    raise ValueError(f"Unknown log level: {name!r}")
