# === FILE: page_scout/scanner.py ===
"""
Модуль-обёртка для запуска поиска конфигурации страницы по источнику.
"""
from __future__ import annotations

import asyncio
from contextlib import aclosing
from typing import Optional

from page_scout.config import ScoutConfig
from page_scout.doc import StreamingDoc
from page_scout.loader import open_stream
from page_scout.logger import logger
from page_scout.models import PageConfig
from page_scout.resolver import PageConfigResolver, get_control_flag


async def scan_page(source: str, config: Optional[ScoutConfig] = None) -> PageConfig:
    """
    Потоково загружает документ и возвращает найденную конфигурацию страницы.

    После каждого прочитанного блока резолвер перепроверяет документ, поэтому
    конфигурация может найтись до окончания загрузки; чтение тогда прекращается.

    Raises
    ------
    ConfigNotFoundError
        Документ загружен полностью, но конфигурация не найдена.
    DocumentLoadError
        Источник не удалось открыть или скачать.
    """
    config = config or ScoutConfig()
    async with open_stream(source, config) as stream:
        doc = StreamingDoc(encoding=config.encoding or stream.charset)
        resolver = PageConfigResolver(doc, config.markup)
        result = resolver.resolve_config()
        async with aclosing(stream.chunks) as chunks:
            async for chunk in chunks:
                doc.feed(chunk)
                resolver.check()
                if result.done():
                    logger.debug("Resolved after %d bytes of %s", doc.bytes_fed, source)
                    break
            else:
                doc.close()
    return await result


async def load_document(source: str, config: Optional[ScoutConfig] = None) -> StreamingDoc:
    """Загружает документ целиком."""
    config = config or ScoutConfig()
    async with open_stream(source, config) as stream:
        doc = StreamingDoc(encoding=config.encoding or stream.charset)
        async with aclosing(stream.chunks) as chunks:
            async for chunk in chunks:
                doc.feed(chunk)
    doc.close()
    return doc


async def scan_control_flag(source: str, config: Optional[ScoutConfig] = None) -> Optional[str]:
    """Возвращает управляющий флаг страницы или None."""
    config = config or ScoutConfig()
    doc = await load_document(source, config)
    return get_control_flag(doc, config.markup.control_flag)


__all__ = ["scan_page", "scan_control_flag", "load_document"]
