"""VictoriaMetrics の JSON line import エンドポイントへ書き込むサービス。"""

import asyncio
import logging
from typing import Any, Mapping, Optional, Sequence

import httpx

from ..config import Settings, settings
from .encoder import TimestampLike, build_record, dumps_record
from .errors import (
    LengthMismatchError,
    MetricsWriterError,
    SendError,
    TransportError,
    UnexpectedStatusError,
)
from .metrics import MetricsRecorder

logger = logging.getLogger(__name__)

__all__ = [
    "LengthMismatchError",
    "MetricsWriter",
    "MetricsWriterError",
    "SendError",
    "TransportError",
    "UnexpectedStatusError",
]


class MetricsWriter:
    """
    メトリクスをメモリ上に蓄積し、send() で 1 リクエストにまとめて送信する。

    1 インスタンスにつき producer は 1 つを前提とする。複数タスクから add()/send()
    を呼ぶ場合は呼び出し側で asyncio.Lock などにより直列化すること。

    Usage:
        async with MetricsWriter("localhost:8428") as writer:
            writer.add("up", {"job": "node_exporter"}, [0], [datetime.now(timezone.utc)])
            await writer.send()
    """

    def __init__(
        self,
        host: Optional[str] = None,
        *,
        client: Optional[httpx.AsyncClient] = None,
        metrics: Optional[MetricsRecorder] = None,
        settings_obj: Optional[Settings] = None,
    ) -> None:
        use_settings = settings_obj or settings
        # host の形式は検証しない。不正な値は send() 時に TransportError となる
        self._url = use_settings.import_url(host)
        # 注入されたクライアントは呼び出し側が close する
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(use_settings.request_timeout_seconds)
        )
        self._buffer: Optional[bytearray] = None
        self._pending_records = 0
        self.metrics = metrics or MetricsRecorder()

    @property
    def url(self) -> str:
        return self._url

    @property
    def pending_records(self) -> int:
        """未送信のレコード数。"""
        return self._pending_records

    @property
    def pending_bytes(self) -> int:
        """未送信ペイロードのバイト数。"""
        return len(self._buffer) if self._buffer is not None else 0

    def add(
        self,
        name: str,
        labels: Mapping[str, str],
        values: Sequence[Any],
        timestamps: Sequence[TimestampLike],
    ) -> None:
        """
        1 レコードを JSON 1 行 (CRLF 終端) としてバッファへ追記する。

        values には数値 (int, float, Decimal, Fraction, numpy のスカラーなど
        numbers.Number の実装) を渡す。int / float 以外は int か float に変換され、
        nan/inf は null として出力される。
        labels に "__name__" キーが含まれていても無視され、name 引数が優先される。

        Raises:
            LengthMismatchError: values と timestamps の要素数が異なる場合
            pydantic.ValidationError: name が空、またはラベルが文字列でない場合
            TypeError: タイムスタンプが datetime / int 以外、または値が JSON で表現できない場合
        """
        # 検証とエンコードが全て成功してからバッファに触れる
        line = dumps_record(build_record(name, labels, values, timestamps))
        if self._buffer is None:
            self._buffer = bytearray()
        self._buffer += line
        self._pending_records += 1
        logger.debug("Buffered metric %s (%d bytes)", name, len(line))

    def take_payload(self) -> Optional[bytes]:
        """バッファを取り出して空に戻す。何も蓄積されていなければ None を返す。"""
        buffer, self._buffer = self._buffer, None
        self._pending_records = 0
        if buffer is None:
            return None
        return bytes(buffer)

    async def send(self) -> None:
        """
        蓄積済みのペイロードを import エンドポイントへ POST する。

        バッファが空ならリクエストを発行しない。失敗時もペイロードはバッファへ戻さない。

        Raises:
            TransportError: リクエストが完了しなかった場合
            UnexpectedStatusError: 2xx 以外のステータスが返された場合
        """
        records = self._pending_records
        payload = self.take_payload()
        if payload is None:
            return

        try:
            response = await self._client.post(self._url, content=payload)
        except (httpx.RequestError, httpx.InvalidURL) as exc:
            self.metrics.record_send("request_failed", len(payload), records)
            raise TransportError(exc) from exc
        except asyncio.CancelledError:
            self.metrics.record_send("cancelled", len(payload), records)
            raise

        if not response.is_success:
            self.metrics.record_send("invalid_status", len(payload), records)
            raise UnexpectedStatusError(response.status_code)

        self.metrics.record_send("success", len(payload), records)
        logger.debug(
            "Sent %d records (%d bytes) to %s: %d",
            records,
            len(payload),
            self._url,
            response.status_code,
        )

    async def aclose(self) -> None:
        """自身が生成した HTTP クライアントを閉じる。未送信のバッファは破棄しない。"""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "MetricsWriter":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()
