# Copyright 2026 dcmpix authors. See LICENSE file for details.
"""Structured reporting of recoverable problems found while parsing.

The parser and the frame decoders never keep a global log. Each accepts a
*sink*, any callable taking a single :class:`DiagnosticEvent`, and reports
every non-fatal anomaly to it:

.. code-block:: python

    from dcmpix import dcmread
    from dcmpix.diagnostics import CollectingSink

    sink = CollectingSink()
    ds = dcmread(data, sink=sink)
    for event in sink.events:
        print(event.code, event.message)

When no sink is given, :class:`LoggingSink` forwards events to the
``'dcmpix'`` logger.
"""
from enum import Enum
import logging
from typing import List, NamedTuple, Optional, Protocol

from dcmpix import config


class Diagnostic(str, Enum):
    """Codes for the recoverable anomalies that may be reported."""

    UNKNOWN_TRANSFER_SYNTAX = "UNKNOWN_TRANSFER_SYNTAX"
    UNSUPPORTED_VR = "UNSUPPORTED_VR"
    VALUE_DECODE_FAILED = "VALUE_DECODE_FAILED"
    UNDEFINED_LENGTH_ELEMENT = "UNDEFINED_LENGTH_ELEMENT"
    MISSING_DELIMITER = "MISSING_DELIMITER"
    NONZERO_DELIMITER_LENGTH = "NONZERO_DELIMITER_LENGTH"
    IMPLICIT_SEQUENCE = "IMPLICIT_SEQUENCE"
    FRAGMENT_GROUPING = "FRAGMENT_GROUPING"
    RLE_PADDING = "RLE_PADDING"
    JPEG_MARKER = "JPEG_MARKER"

    def __str__(self) -> str:
        return str.__str__(self)


class DiagnosticEvent(NamedTuple):
    """A single recoverable anomaly.

    Attributes
    ----------
    code : Diagnostic
        What kind of problem was found.
    message : str
        A human readable description.
    offset : int or None
        The buffer offset the problem was found at, if known.
    tag : int or None
        The tag of the element being processed, if any.
    level : int
        The :mod:`logging` level the event is reported at by
        :class:`LoggingSink`.
    """
    code: Diagnostic
    message: str
    offset: Optional[int] = None
    tag: Optional[int] = None
    level: int = logging.WARNING


class DiagnosticSink(Protocol):
    def __call__(self, event: DiagnosticEvent) -> None: ...


class LoggingSink:
    """Forward diagnostic events to a :class:`logging.Logger`."""

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self.logger = logger or config.logger

    def __call__(self, event: DiagnosticEvent) -> None:
        location = ""
        if event.offset is not None:
            location = f" at offset 0x{event.offset:x}"
        if event.tag is not None:
            tag = event.tag
            location += f" in ({tag >> 16:04X},{tag & 0xFFFF:04X})"

        self.logger.log(
            event.level, f"{event.code}{location}: {event.message}"
        )


class CollectingSink:
    """Keep every diagnostic event in :attr:`events`."""

    def __init__(self) -> None:
        self.events: List[DiagnosticEvent] = []

    def __call__(self, event: DiagnosticEvent) -> None:
        self.events.append(event)

    def __len__(self) -> int:
        return len(self.events)

    @property
    def codes(self) -> List[Diagnostic]:
        """Return the codes of the collected events, in order."""
        return [event.code for event in self.events]

    def clear(self) -> None:
        """Remove all collected events."""
        self.events.clear()


def default_sink(sink: Optional[DiagnosticSink] = None) -> DiagnosticSink:
    """Return `sink`, or a :class:`LoggingSink` for the ``dcmpix`` logger
    if `sink` is ``None``.

    An empty :class:`CollectingSink` is falsy, so callers must compare
    against ``None`` rather than use ``sink or ...``.
    """
    if sink is not None:
        return sink

    return LoggingSink()
