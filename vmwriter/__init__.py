"""VictoriaMetrics JSON line import writer."""

from .models.metric import MetricRecord, SendErrorCode
from .services.encoder import encode_record, to_millis
from .services.errors import (
    LengthMismatchError,
    MetricsWriterError,
    SendError,
    TransportError,
    UnexpectedStatusError,
)
from .services.metrics import MetricsRecorder
from .services.metrics_writer import MetricsWriter

__all__ = [
    "LengthMismatchError",
    "MetricRecord",
    "MetricsRecorder",
    "MetricsWriter",
    "MetricsWriterError",
    "SendError",
    "SendErrorCode",
    "TransportError",
    "UnexpectedStatusError",
    "encode_record",
    "to_millis",
]
