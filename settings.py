"""Настройки движка нормализации на базе Pydantic Settings."""

from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Конфигурация, читаемая из переменных окружения NORMALIZER_* и файла .env"""

    # Предел числа атрибутов для экспоненциального перебора подмножеств
    max_attributes: int = Field(default=20, ge=1)

    # Имя отношения, если вызывающая сторона его не передала
    default_table_name: str = "R"

    # Логирование
    log_level: str = "INFO"
    log_file: Optional[Path] = None

    # Каталог для графиков производительности
    benchmark_output_dir: Path = Path("benchmarks")

    model_config = SettingsConfigDict(
        env_prefix="NORMALIZER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Получить (или создать) общий экземпляр настроек"""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Сбросить закэшированные настройки, чтобы перечитать окружение"""
    global _settings
    _settings = None
