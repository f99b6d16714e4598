from __future__ import annotations

import os
from typing import Callable, List
from unittest.mock import MagicMock

import httpx
import pytest
from hypothesis import settings

from vmwriter.config import Settings
from vmwriter.services.metrics_writer import MetricsWriter

_DEFAULT_MAX_EXAMPLES = int(os.getenv("HYPOTHESIS_MAX_EXAMPLES", "50"))

# CI/コンテナ環境では初回の JSON エンコードで 200ms を超えることがあるため、
# デッドラインを無効化してフレークを防ぐ。
if "HYPOTHESIS_PROFILE" not in os.environ:
    try:
        settings.register_profile(
            "ci",
            settings(
                deadline=None,
                max_examples=_DEFAULT_MAX_EXAMPLES,
            ),
        )
    except ValueError:
        pass
    settings.load_profile("ci")


@pytest.fixture
def writer_settings(monkeypatch) -> Settings:
    """環境変数や .env の影響を受けない既定設定。"""
    for name in ("VM_HOST", "VM_IMPORT_PATH", "REQUEST_TIMEOUT_SECONDS", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    return Settings(_env_file=None)


@pytest.fixture
def offline_writer(writer_settings: Settings) -> MetricsWriter:
    """送信を伴わないテスト用に、ダミーのクライアントを持つ writer を返す。"""
    return MetricsWriter(
        "localhost:8428", client=MagicMock(), settings_obj=writer_settings
    )


class RecordingHandler:
    """httpx.MockTransport に渡すハンドラ。受信したリクエストを保持する。"""

    def __init__(self, status_code: int = 204) -> None:
        self.status_code = status_code
        self.requests: List[httpx.Request] = []
        self.bodies: List[bytes] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        self.bodies.append(request.read())
        return httpx.Response(self.status_code, request=request)


@pytest.fixture
def make_handler() -> Callable[..., RecordingHandler]:
    return RecordingHandler
