"""MetricsWriter の例外定義。"""

from ..models.metric import SendErrorCode


class MetricsWriterError(Exception):
    """MetricsWriter で発生するエラーの基底クラス。"""

    def __init__(self, message: str, *, error_code: SendErrorCode) -> None:
        super().__init__(message)
        self.message = message
        self.error_code = error_code


class LengthMismatchError(MetricsWriterError, ValueError):
    """values と timestamps の要素数が一致しない場合のエラー。"""

    def __init__(self, values_len: int, timestamps_len: int) -> None:
        super().__init__(
            f"values and timestamps differ in length: {values_len} != {timestamps_len}",
            error_code=SendErrorCode.LENGTH_MISMATCH,
        )
        self.values_len = values_len
        self.timestamps_len = timestamps_len


class SendError(MetricsWriterError):
    """send() の失敗。"""


class TransportError(SendError):
    """HTTP リクエスト自体が完了しなかった場合のエラー。"""

    def __init__(self, cause: Exception) -> None:
        super().__init__(
            f"error sending request: {cause}",
            error_code=SendErrorCode.REQUEST_FAILED,
        )
        self.cause = cause


class UnexpectedStatusError(SendError):
    """2xx 以外のステータスコードが返された場合のエラー。"""

    def __init__(self, status_code: int) -> None:
        super().__init__(
            f"invalid response status code {status_code}",
            error_code=SendErrorCode.INVALID_STATUS,
        )
        self.status_code = status_code
