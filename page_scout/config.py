"""
Модуль для загрузки и валидации конфигурации PageScout.
Используется Pydantic для описания схемы и проверки данных.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator


class MarkupConfig(BaseModel):
    """Имена тегов, типов и свойств, по которым ищется конфигурация страницы."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    product_id_meta: str = Field("subscriptions-product-id", min_length=1)
    accessible_for_free_meta: str = Field("subscriptions-accessible-for-free", min_length=1)
    control_flag: str = Field("subscriptions-control", min_length=1)
    ld_json_type: str = Field("application/ld+json", min_length=1)
    schema_org: str = Field("http://schema.org/", description="Префикс словаря schema.org.")
    article_type: str = Field("NewsArticle", min_length=1)
    product_type: str = Field("Product", min_length=1)

    @property
    def article_itemtype(self) -> str:
        return self.schema_org + self.article_type

    @property
    def product_itemtype(self) -> str:
        return self.schema_org + self.product_type


class ScoutConfig(BaseModel):
    """Конфигурация для одного запуска поиска конфигурации страницы."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    markup: MarkupConfig = Field(default_factory=MarkupConfig)
    timeout: float = Field(10.0, gt=0, description="Таймаут на один запрос (секунд).")
    user_agent: str = Field("PageScoutBot/1.0", min_length=1, description="Заголовок User-Agent.")
    retry_times: int = Field(2, ge=0, description="Число повторных попыток при 5xx.")
    backoff_factor: float = Field(1.0, ge=0, description="Множитель экспоненциальной паузы.")
    chunk_size: int = Field(8192, ge=1, description="Размер читаемого блока (байт).")
    encoding: Optional[str] = Field(None, description="Кодировка документа, если известна.")

    @field_validator("encoding", mode="before")
    def _blank_encoding_is_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v


_DEFAULT_CFG = Path("configs/default.yaml")


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Неправильный YAML в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень YAML должен быть mapping, получено {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Неправильный JSON в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень JSON должен быть mapping, получено {type(data).__name__}")
    return data


def load_config(path: Union[str, Path, None]) -> ScoutConfig:
    """
    Читает YAML или JSON и возвращает проверенный объект ScoutConfig.
    Без пути использует configs/default.yaml, а если его нет — значения по умолчанию.
    При отсутствии явно указанного файла бросает FileNotFoundError.
    """
    if path is None:
        if not _DEFAULT_CFG.exists():
            return ScoutConfig()
        path_obj = _DEFAULT_CFG
    else:
        path_obj = Path(path).expanduser().resolve()
        if not path_obj.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        data = _read_yaml(path_obj)
    elif suffix == ".json":
        data = _read_json(path_obj)
    else:
        raise ValueError(f"Неподдерживаемый формат конфига: {suffix}")

    try:
        return ScoutConfig(**data)
    except ValidationError:
        raise


__all__ = ["MarkupConfig", "ScoutConfig", "load_config"]
