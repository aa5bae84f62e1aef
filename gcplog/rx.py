"""Reactive (ReactiveX) plumbing for log records.

Records emitted on an observable stream can be written by a
:class:`RecordSink` subject, or split off a mixed stream with the
:func:`records_to` operator.
"""

from typing import Any

from opentelemetry.context import Context
from reactivex import Observable, Subject

from .handler import GCPLogHandler
from .mechanism import GCPLogException
from .record import Record


class RecordSink(Subject):
    """
    Subject that writes every :class:`~gcplog.record.Record` it receives.

    Behavior
    - Each record is written through ``handler`` and then forwarded to the
      subscribers; other values pass through unchanged.
    - A write failure is forwarded as a :class:`GCPLogException` on the error
      channel instead of being raised into the producer.
    - Never completes (``on_completed`` is a no-op), so one sink can collect
      records from many streams.

    Parameters
    - handler: GCPLogHandler
        Handler the records are written through.
    - context: Optional[Context]
        OpenTelemetry context used for trace correlation. ``None`` means the
        context current on the thread delivering the record.
    - name: str
        Source name reported in errors.
    """

    def __init__(self, handler: GCPLogHandler, context: Context | None = None, name: str = "RecordSink"):
        super().__init__()
        self.handler = handler
        self.context = context
        self.name = name

    def on_next(self, value: Any) -> None:
        # a failed write stops the sink; later records are not written
        if self.is_stopped:
            return
        if isinstance(value, Record):
            try:
                self.handler.handle(value, self.context)
            except Exception as e:
                super().on_error(GCPLogException(e, value, source=self.name))
                return
        super().on_next(value)

    def on_completed(self) -> None:
        """
        The sink will never be completed.
        """
        pass


def records_to(handler: GCPLogHandler, context: Context | None = None):
    """
    The operator writes the records through ``handler`` and forwards other items.

    A write failure terminates the stream with a :class:`GCPLogException`.
    """

    def _records_to(source):
        def subscribe(observer, scheduler=None):
            failed = False

            def on_next(value: Any) -> None:
                nonlocal failed
                if failed:
                    return
                if isinstance(value, Record):
                    try:
                        handler.handle(value, context)
                    except Exception as e:
                        failed = True
                        observer.on_error(GCPLogException(e, value, source="records_to"))
                else:
                    observer.on_next(value)

            return source.subscribe(
                on_next=on_next,
                on_error=observer.on_error,
                on_completed=observer.on_completed,
                scheduler=scheduler,
            )

        return Observable(subscribe)

    return _records_to
