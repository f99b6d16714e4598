# Services package

from .errors import (
    LengthMismatchError,
    MetricsWriterError,
    SendError,
    TransportError,
    UnexpectedStatusError,
)
from .metrics import MetricsRecorder
from .metrics_writer import MetricsWriter

__all__ = [
    "LengthMismatchError",
    "MetricsRecorder",
    "MetricsWriter",
    "MetricsWriterError",
    "SendError",
    "TransportError",
    "UnexpectedStatusError",
]
