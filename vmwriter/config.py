import logging

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_IMPORT_PATH = "/api/v1/import"


class Settings(BaseSettings):
    """Writer settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # VictoriaMetrics Configuration
    # スキーム無しの host:port 形式
    vm_host: str = "localhost:8428"
    vm_import_path: str = DEFAULT_IMPORT_PATH
    # httpx.AsyncClient に渡すタイムアウト(秒)
    request_timeout_seconds: float = Field(default=30.0, gt=0)

    # Application Configuration
    log_level: str = "INFO"

    def import_url(self, host: str | None = None) -> str:
        """host:port から import エンドポイントの URL を組み立てる。"""
        target = self.vm_host if host is None else host
        path = self.vm_import_path
        if not path.startswith("/"):
            path = f"/{path}"
        return f"http://{target}{path}"


def configure_logging(settings_obj: Settings | None = None) -> None:
    """Configure root logging with the configured level."""
    use_settings = settings_obj or settings
    logging.basicConfig(
        level=getattr(logging, use_settings.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    # httpx はリクエスト毎に INFO ログを出すため抑制する
    logging.getLogger("httpx").setLevel(logging.WARNING)


settings = Settings()
