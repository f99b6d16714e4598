"""JSON line import 形式へのエンコード処理。"""

import json
import math
import numbers
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any, Iterable, Mapping, Sequence, Union

from ..models.metric import MetricRecord
from .errors import LengthMismatchError

TimestampLike = Union[datetime, int]

LINE_TERMINATOR = b"\r\n"
_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_ONE_MILLISECOND = timedelta(milliseconds=1)


def to_millis(timestamp: TimestampLike) -> int:
    """
    タイムスタンプを UNIX エポックからのミリ秒へ変換する。

    - aware な datetime は UTC に換算し、ミリ秒未満は切り捨てる
    - naive な datetime は UTC とみなす
    - int は既にミリ秒であるとしてそのまま返す
    """
    if isinstance(timestamp, datetime):
        if timestamp.tzinfo is None:
            timestamp = timestamp.replace(tzinfo=timezone.utc)
        # timedelta 同士の整数除算で浮動小数点誤差を避ける
        return (timestamp - _EPOCH) // _ONE_MILLISECOND
    if isinstance(timestamp, int) and not isinstance(timestamp, bool):
        return timestamp
    raise TypeError(
        f"timestamp must be datetime or int milliseconds, got {type(timestamp).__name__}"
    )


def _normalize_value(value: Any) -> Any:
    """
    サンプル値を json.dumps で出力できる形へ揃える。

    - int / float 以外の数値型 (Decimal, Fraction, numpy のスカラーなど) は
      整数なら int、それ以外は float に変換する
    - 有限でない値 (nan/inf) は null
    - 数値以外 (bool, None など) はそのまま渡す
    """
    if isinstance(value, Decimal):
        if not value.is_finite():
            return None
        value = int(value) if value == value.to_integral_value() else float(value)
    elif isinstance(value, numbers.Integral) and not isinstance(value, (bool, int)):
        value = int(value)
    elif isinstance(value, numbers.Real) and not isinstance(value, (int, float)):
        value = float(value)
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return value


def build_record(
    name: str,
    labels: Mapping[str, str],
    values: Iterable[Any],
    timestamps: Iterable[TimestampLike],
) -> MetricRecord:
    """
    引数を検証済みの MetricRecord にまとめる。

    Raises:
        LengthMismatchError: values と timestamps の要素数が異なる場合
        pydantic.ValidationError: name が空、またはラベルが文字列でない場合
    """
    values = list(values)
    timestamps = list(timestamps)
    if len(values) != len(timestamps):
        raise LengthMismatchError(len(values), len(timestamps))
    return MetricRecord(
        name=name,
        labels=dict(labels),
        values=[_normalize_value(value) for value in values],
        timestamps=[to_millis(ts) for ts in timestamps],
    )


def dumps_record(record: MetricRecord) -> bytes:
    """MetricRecord を終端 CRLF 付きのコンパクトな JSON 1 行へ変換する。"""
    line = json.dumps(
        record.to_payload(),
        separators=(",", ":"),
        ensure_ascii=False,
        allow_nan=False,
    )
    return line.encode("utf-8") + LINE_TERMINATOR


def encode_record(
    name: str,
    labels: Mapping[str, str],
    values: Sequence[Any],
    timestamps: Sequence[TimestampLike],
) -> bytes:
    """writer を介さずに 1 レコード分の行を生成する。"""
    return dumps_record(build_record(name, labels, values, timestamps))

