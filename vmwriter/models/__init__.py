# Models package

from .metric import MetricRecord, SendErrorCode

__all__ = ["MetricRecord", "SendErrorCode"]
