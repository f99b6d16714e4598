"""Metric record models."""

from enum import Enum
from typing import Any, Dict, List

from pydantic import BaseModel, Field, StrictInt


class SendErrorCode(str, Enum):
    """Writer error codes."""

    REQUEST_FAILED = "request_failed"
    INVALID_STATUS = "invalid_status"
    LENGTH_MISMATCH = "length_mismatch"


class MetricRecord(BaseModel):
    """1 回の add() 呼び出しに対応する JSON import の 1 行。"""

    name: str = Field(..., min_length=1, description="メトリクス名 (__name__)")
    labels: Dict[str, str] = Field(default_factory=dict, description="ラベル集合")
    values: List[Any] = Field(default_factory=list, description="サンプル値")
    timestamps: List[StrictInt] = Field(
        default_factory=list, description="UNIX エポックからのミリ秒"
    )

    def to_payload(self) -> Dict[str, Any]:
        """import 形式のキー順序を持つ dict を返す。

        ``metric`` の中は ``__name__`` が先頭、残りのラベルはキーの辞書順。
        """
        metric: Dict[str, str] = {"__name__": self.name}
        for key in sorted(self.labels):
            # name 引数が優先
            if key == "__name__":
                continue
            metric[key] = self.labels[key]
        return {
            "metric": metric,
            "values": list(self.values),
            "timestamps": list(self.timestamps),
        }
