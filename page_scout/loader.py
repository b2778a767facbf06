# page_scout/loader.py
"""
Loader module: opens a document source and streams its raw bytes.

Supported sources:

* ``http://`` / ``https://`` URLs, fetched with aiohttp (retry/backoff, timeout);
* ``-`` for standard input;
* anything else is treated as a local file path.
"""
from __future__ import annotations

import asyncio
import sys
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Optional, Sequence

from aiohttp import ClientError, ClientResponse, ClientSession, ClientTimeout

from page_scout.config import ScoutConfig
from page_scout.exceptions import DocumentLoadError
from page_scout.logger import logger

__all__ = ("DocumentStream", "open_stream", "is_url")

_RETRY_STATUS: Sequence[int] = tuple(range(500, 600)) + (429,)


@dataclass(slots=True)
class DocumentStream:
    """An opened source: where it came from, its charset if known and its chunks."""

    source: str
    charset: Optional[str]
    chunks: AsyncIterator[bytes]


def is_url(source: str) -> bool:
    return source.lower().startswith(("http://", "https://"))


@asynccontextmanager
async def open_stream(source: str, config: ScoutConfig) -> AsyncIterator[DocumentStream]:
    """Open *source* and yield a :class:`DocumentStream` over its bytes."""
    if is_url(source):
        timeout = ClientTimeout(total=config.timeout)
        async with ClientSession(
            timeout=timeout,
            headers={"User-Agent": config.user_agent},
            raise_for_status=False,
        ) as session:
            resp = await _get_with_retry(session, source, config)
            try:
                yield DocumentStream(
                    source=source,
                    charset=resp.charset,
                    chunks=_iter_response(resp, source, config.chunk_size),
                )
            finally:
                resp.release()
        return

    if source == "-":
        yield DocumentStream(
            source=source,
            charset=None,
            chunks=_iter_file(sys.stdin.buffer, config.chunk_size),
        )
        return

    path = Path(source).expanduser()
    try:
        handle = path.open("rb")
    except OSError as exc:
        raise DocumentLoadError(f"Cannot open {path}: {exc}", source) from exc
    with handle:
        yield DocumentStream(
            source=source,
            charset=None,
            chunks=_iter_file(handle, config.chunk_size),
        )


async def _get_with_retry(
    session: ClientSession, url: str, config: ScoutConfig
) -> ClientResponse:
    """GET *url*, retrying connection errors, timeouts and 5xx/429 answers."""
    attempts = 0
    while True:
        try:
            resp = await session.get(url)
            if resp.status in _RETRY_STATUS:
                resp.release()
                raise ClientError(f"Retryable status {resp.status}")
            if resp.status >= 400:
                resp.release()
                raise DocumentLoadError(
                    f"HTTP {resp.status} for {url}", url, {"status": resp.status}
                )
            return resp
        except (ClientError, asyncio.TimeoutError) as exc:
            attempts += 1
            if attempts > config.retry_times:
                logger.warning("Failed %s: %s", url, exc)
                raise DocumentLoadError(f"Failed to load {url}: {exc}", url) from exc
            # exponential backoff, cap at 60s
            backoff = min(config.backoff_factor * 2**attempts, 60)
            logger.debug("Retry %d/%d for %s after %.2f s", attempts, config.retry_times, url, backoff)
            await asyncio.sleep(backoff)


async def _iter_response(resp: ClientResponse, url: str, chunk_size: int) -> AsyncIterator[bytes]:
    try:
        async for chunk in resp.content.iter_chunked(chunk_size):
            yield chunk
    except (ClientError, asyncio.TimeoutError) as exc:
        raise DocumentLoadError(f"Download of {url} interrupted: {exc}", url) from exc


async def _iter_file(handle: BinaryIO, chunk_size: int) -> AsyncIterator[bytes]:
    while True:
        chunk = handle.read(chunk_size)
        if not chunk:
            break
        yield chunk
        # let scheduled resolver checks run between chunks
        await asyncio.sleep(0)
