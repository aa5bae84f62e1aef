"""Core error types for :mod:`gcplog`."""

from .record import Record
from .severity import map_severity


class GCPLogException(Exception):
    """A record that could not be written, carried with the error that stopped it.

    Used where a failure has to travel as a value (the error channel of a
    reactive stream) instead of being raised at the call site. The original
    error is kept in ``exception`` and the unwritten record in ``record``, so
    a subscriber can retry it or write it somewhere else.
    """

    def __init__(self, exception: BaseException, record: Record | None = None, source: str = "gcplog"):
        self.exception = exception
        self.record = record
        self.source = source
        super().__init__(str(self))

    def __str__(self):
        if self.record is None:
            return f"<{self.source}> log write failed: {self.exception!r}"
        return (
            f"<{self.source}> could not write {map_severity(self.record.level)} "
            f"record {self.record.message!r}: {self.exception!r}"
        )
