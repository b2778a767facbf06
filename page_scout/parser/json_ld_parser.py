"""page_scout.parser.json_ld_parser: конфигурация страницы из блоков JSON-LD.

A block qualifies when its root object is a ``NewsArticle`` that is
``isPartOf`` a ``Product`` carrying a ``productID``::

    {
      "@context": "http://schema.org",
      "@type": "NewsArticle",
      "isAccessibleForFree": false,
      "isPartOf": {"@type": ["CreativeWork", "Product"], "productID": "pub:premium"}
    }
"""

from __future__ import annotations

from typing import Any, Optional, Set

from lxml import etree

from page_scout.config import MarkupConfig
from page_scout.doc import Doc
from page_scout.dom import find_scripts_by_type, has_next_node_in_document_order, text_content
from page_scout.logger import logger
from page_scout.models import PageConfig
from page_scout.utils import single_value, to_bool, try_parse_json, value_array


class JsonLdParser:
    """Scans ``<script type="application/ld+json">`` blocks in document order.

    Blocks are recorded in :attr:`seen` once evaluated and never looked at
    again. A block that may still be streaming (nothing follows it yet and
    the document is incomplete) is left unmarked for a later pass.
    """

    def __init__(self, doc: Doc, markup: Optional[MarkupConfig] = None) -> None:
        self.doc = doc
        self.markup = markup or MarkupConfig()
        self.seen: Set[etree._Element] = set()

    def check(self) -> Optional[PageConfig]:
        if not self.doc.is_head_parsed():
            # Wait until the whole <head> is parsed.
            return None

        dom_ready = self.doc.is_ready()
        for element in find_scripts_by_type(self.doc.get_root_node(), self.markup.ld_json_type):
            if element in self.seen:
                continue
            text = text_content(element)
            if not text:
                continue
            if not dom_ready and not has_next_node_in_document_order(element):
                continue
            self.seen.add(element)
            if self.markup.article_type not in text:
                continue
            config = self._try_extract_config(text)
            if config is not None:
                logger.debug("JSON-LD block at line %s yields %s", element.sourceline, config)
                return config
        return None

    def _try_extract_config(self, text: str) -> Optional[PageConfig]:
        data = try_parse_json(text)
        if data is None:
            return None

        # Must be a NewsArticle.
        if not self._check_type(data, self.markup.article_type):
            return None

        # Must have an isPartOf[@type=Product].
        product_id = None
        for part in value_array(data, "isPartOf") or []:
            product_id = self._discover_product_id(part)
            if product_id:
                break
        if not product_id:
            return None

        accessible_for_free = to_bool(single_value(data, "isAccessibleForFree"), default=True)
        return PageConfig(product_id, not accessible_for_free)

    def _discover_product_id(self, data: Any) -> Optional[str]:
        if not self._check_type(data, self.markup.product_type):
            return None
        product_id = single_value(data, "productID")
        if isinstance(product_id, bool):
            return None
        if isinstance(product_id, (int, float)):
            # Numeric ids such as 12345 are kept as their text form.
            return str(product_id) if product_id else None
        return product_id if isinstance(product_id, str) else None

    def _check_type(self, data: Any, expected_type: str) -> bool:
        types = value_array(data, "@type")
        if not types:
            return False
        return expected_type in types or self.markup.schema_org + expected_type in types
