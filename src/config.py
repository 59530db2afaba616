"""Конфигурация приложения."""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Настройки приложения.

    Every field can be set from the environment with a ``CRONLINT_``
    prefix (e.g. ``CRONLINT_WINDOW_HOURS=48``) or from ``.env``.
    CLI options take precedence.
    """

    model_config = SettingsConfigDict(
        env_prefix="CRONLINT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Источники данных
    jobs_path: str = Field(
        default="~/.openclaw/cron/jobs.json", description="Путь к jobs.json"
    )
    runs_dir: str = Field(
        default="~/.openclaw/cron/runs", description="Директория с <jobId>.jsonl"
    )
    pricing_path: Optional[str] = Field(
        default=None, description="JSON с ценами моделей ($ за 1M токенов)"
    )

    # Анализ
    window_hours: int = Field(default=24, ge=1, description="Окно анализа в часах")

    # Вывод
    min_savings: float = Field(
        default=0.10, ge=0, description="Минимальная экономия в день для отчёта ($)"
    )
    output_format: str = Field(default="text", description="Формат вывода (text/json)")

    # Логирование
    log_level: str = Field(default="WARNING", description="Уровень логирования")


settings = Settings()
