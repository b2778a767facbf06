# File: tests/conftest.py
import json
from typing import Any, Callable, Optional

import pytest
from lxml import etree

from page_scout.config import ScoutConfig
from page_scout.doc import TreeDoc

ARTICLE = "http://schema.org/NewsArticle"
PRODUCT = "http://schema.org/Product"


@pytest.fixture()
def make_doc() -> Callable[..., TreeDoc]:
    """
    Build a TreeDoc from markup. ready=False keeps the document "still parsing"
    until the test calls mark_ready().
    """

    def _make(markup: str, ready: bool = True) -> TreeDoc:
        return TreeDoc(etree.HTML(markup), ready=ready)

    return _make


@pytest.fixture()
def ld_json() -> Callable[..., str]:
    """Render a <script type="application/ld+json"> block."""

    def _render(data: Any) -> str:
        text = data if isinstance(data, str) else json.dumps(data)
        return f'<script type="application/ld+json">{text}</script>'

    return _render


@pytest.fixture()
def news_article() -> Callable[..., dict]:
    """JSON-LD NewsArticle that isPartOf a Product."""

    def _article(product_id: str = "pub:123", free: Optional[Any] = None, **extra: Any) -> dict:
        data: dict = {
            "@context": "http://schema.org",
            "@type": "NewsArticle",
            "headline": "Headline",
            "isPartOf": {"@type": ["CreativeWork", "Product"], "productID": product_id},
        }
        if free is not None:
            data["isAccessibleForFree"] = free
        data.update(extra)
        return data

    return _article


@pytest.fixture()
def microdata_article() -> Callable[..., str]:
    """Microdata NewsArticle scope, optionally with access flag and product id."""

    def _article(product_id: Optional[str] = "pub:123", free: Optional[str] = None) -> str:
        parts = [f'<div itemscope itemtype="{ARTICLE}">', "<h1>Headline</h1>"]
        if free is not None:
            parts.append(f'<span itemprop="isAccessibleForFree">{free}</span>')
        if product_id is not None:
            parts.append(
                f'<div itemprop="isPartOf" itemscope itemtype="{PRODUCT}">'
                f'<span itemprop="productID">{product_id}</span></div>'
            )
        parts.append("</div>")
        return "\n".join(parts)

    return _article


@pytest.fixture()
def scout_config() -> ScoutConfig:
    """
    Return a ScoutConfig suitable for tests: short timeouts, no backoff pauses.
    """
    return ScoutConfig(timeout=5.0, retry_times=2, backoff_factor=0.0, chunk_size=64)
