"""MetricsWriter 自身の送信結果を集計するレコーダー。

send() は長期間にわたり繰り返し呼ばれるため、観測値は個別に保持せず
件数・合計・直近値・最大値のサマリとして畳み込む。保持する状態の大きさは
(メトリクス名, ラベル) の組み合わせ数だけで決まる。
"""

from collections import defaultdict
from dataclasses import dataclass, replace
from typing import Dict, FrozenSet, Optional, Tuple

LabelKey = FrozenSet[Tuple[str, str]]
SeriesKey = Tuple[str, LabelKey]

SEND_TOTAL = "metrics_writer_send_total"
PAYLOAD_BYTES = "metrics_writer_payload_bytes"
RECORDS_TOTAL = "metrics_writer_records_total"


@dataclass
class Summary:
    """1 系列分の観測値サマリ。"""

    count: int = 0
    total: float = 0.0
    last: float = 0.0
    max: float = 0.0

    def add(self, value: float) -> None:
        self.max = value if self.count == 0 else max(self.max, value)
        self.count += 1
        self.total += value
        self.last = value

    @property
    def mean(self) -> float:
        return self.total / self.count if self.count else 0.0


class MetricsRecorder:
    """send() の結果ごとのカウンタとペイロードサイズのサマリを保持する。"""

    def __init__(self) -> None:
        self._counters: Dict[SeriesKey, int] = defaultdict(int)
        self._summaries: Dict[SeriesKey, Summary] = defaultdict(Summary)

    @staticmethod
    def _key(name: str, labels: Optional[Dict[str, str]]) -> SeriesKey:
        return name, frozenset(labels.items()) if labels else frozenset()

    def increment(
        self, name: str, labels: Optional[Dict[str, str]] = None, value: int = 1
    ) -> None:
        self._counters[self._key(name, labels)] += value

    def observe(
        self, name: str, value: float, labels: Optional[Dict[str, str]] = None
    ) -> None:
        """観測値をサマリへ畳み込む。"""
        self._summaries[self._key(name, labels)].add(value)

    def get_counter(self, name: str, labels: Optional[Dict[str, str]] = None) -> int:
        """指定ラベルのカウンタ値を返す（存在しなければ 0）。"""
        return self._counters.get(self._key(name, labels), 0)

    def get_summary(self, name: str, labels: Optional[Dict[str, str]] = None) -> Summary:
        """指定ラベルのサマリのコピーを返す（存在しなければ空のサマリ）。"""
        summary = self._summaries.get(self._key(name, labels))
        return replace(summary) if summary is not None else Summary()

    @property
    def series_count(self) -> int:
        """保持しているカウンタとサマリの系列数。"""
        return len(self._counters) + len(self._summaries)

    def record_send(self, result: str, payload_bytes: int, records: int) -> None:
        """send() 1 回分の結果を記録する。"""
        labels = {"result": result}
        self.increment(SEND_TOTAL, labels)
        self.increment(RECORDS_TOTAL, labels, records)
        self.observe(PAYLOAD_BYTES, float(payload_bytes), labels)
