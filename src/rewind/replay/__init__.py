from __future__ import annotations

from .capture import EventCapture, PredicateCapture
from .drivers import LiveTickDriver, PlaybackTickDriver
from .streams import MandatoryStream, OptionalStream
from .types import InputEvent, Mode, ModeViolation, PollContractError, RunContext, StreamExhausted

__all__ = [
    "EventCapture",
    "InputEvent",
    "LiveTickDriver",
    "MandatoryStream",
    "Mode",
    "ModeViolation",
    "OptionalStream",
    "PlaybackTickDriver",
    "PollContractError",
    "PredicateCapture",
    "RunContext",
    "StreamExhausted",
]
