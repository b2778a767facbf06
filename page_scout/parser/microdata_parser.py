"""page_scout.parser.microdata_parser: конфигурация страницы из микроразметки schema.org.

Expected markup::

    <div itemscope itemtype="http://schema.org/NewsArticle">
      <meta itemprop="isAccessibleForFree" content="false">
      <div itemprop="isPartOf" itemscope itemtype="http://schema.org/CreativeWork http://schema.org/Product">
        <meta itemprop="productID" content="pub:premium">
      </div>
    </div>

Discovered values are sticky: the first access flag and the first product id
found anywhere in the document are reused for every article scanned after
them, because publishers tend to declare them once per page.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Union

from lxml import etree

from page_scout.config import MarkupConfig
from page_scout.doc import Doc
from page_scout.dom import (
    find_descendants_by_itemprop,
    find_scopes_by_type,
    has_attribute,
    has_next_node_in_document_order,
    nearest_enclosing_scope,
    text_content,
)
from page_scout.logger import logger
from page_scout.models import PageConfig

ACCESS_PROP = "isAccessibleForFree"
PRODUCT_ID_PROP = "productID"


@dataclass(slots=True)
class MicrodataItem:
    """Properties recorded for one article scope."""

    id: int
    properties: Dict[str, Union[str, bool]] = field(default_factory=dict)


class Microdata:
    """Article scopes found in the page, in document order."""

    def __init__(self, entries: List[MicrodataItem]) -> None:
        self.entries = entries

    def get_page_config(self) -> Optional[PageConfig]:
        """Return the configuration of the first article that has a product id.

        Both values carry over from earlier entries to later ones.
        """
        locked = False
        product_id: Optional[str] = None
        for item in self.entries:
            if ACCESS_PROP in item.properties:
                locked = not item.properties[ACCESS_PROP]
            if PRODUCT_ID_PROP in item.properties:
                product_id = str(item.properties[PRODUCT_ID_PROP])
            if product_id is not None:
                return PageConfig(product_id, locked)
        return None


def _item_value(element: etree._Element) -> str:
    return (element.get("content") or text_content(element)).strip()


def _is_scope(node: etree._Element) -> bool:
    return has_attribute(node, "itemscope")


def _is_typed_scope(node: etree._Element) -> bool:
    return has_attribute(node, "itemscope") and has_attribute(node, "itemtype")


class MicrodataParser:
    """Scans ``itemscope`` articles and their ``isAccessibleForFree``/``productID`` props."""

    def __init__(self, doc: Doc, markup: Optional[MarkupConfig] = None) -> None:
        self.doc = doc
        self.markup = markup or MarkupConfig()
        self.access: Optional[bool] = None
        self.product_id: Optional[str] = None
        # Separate visited sets: the two ancestry searches overlap.
        self.seen_for_access: Set[etree._Element] = set()
        self.seen_for_product: Set[etree._Element] = set()

    def check(self) -> Optional[PageConfig]:
        if not self.doc.is_head_parsed():
            # Wait until the whole <head> is parsed.
            return None
        config = self.extract().get_page_config()
        if config is not None:
            logger.debug("Microdata yields %s", config)
        return config

    def extract(self) -> Microdata:
        entries: List[MicrodataItem] = []
        dom_ready = self.doc.is_ready()
        articles = find_scopes_by_type(self.doc.get_root_node(), self.markup.article_itemtype)
        for element in articles:
            if not dom_ready and not has_next_node_in_document_order(element):
                continue
            props: Dict[str, Union[str, bool]] = {}

            if self.access is None:
                discovered_access = self._discover_access(element)
                if discovered_access is not None:
                    self.access = discovered_access
                    props[ACCESS_PROP] = discovered_access
            else:
                props[ACCESS_PROP] = not self.access

            discovered_product_id = self._discover_product_id(element)
            if self.product_id is None:
                if discovered_product_id:
                    self.product_id = discovered_product_id
                    props[PRODUCT_ID_PROP] = discovered_product_id
            else:
                props[PRODUCT_ID_PROP] = self.product_id

            entries.append(MicrodataItem(id=len(entries) + 1, properties=props))
        return Microdata(entries)

    def _discover_access(self, root: etree._Element) -> Optional[bool]:
        """Access flag declared directly in the article *root*, if any."""
        for element in find_descendants_by_itemprop(root, ACCESS_PROP):
            content = _item_value(element)
            if not content:
                continue
            lowered = content.lower()
            access_for_free: Optional[bool] = None
            if lowered == "true":
                access_for_free = True
            elif lowered == "false":
                access_for_free = False
            if self._belongs_to_article(element, self.seen_for_access):
                return access_for_free
        return None

    def _discover_product_id(self, root: etree._Element) -> Optional[str]:
        """Product id of a ``Product`` scope nested directly in the article *root*."""
        for element in find_descendants_by_itemprop(root, PRODUCT_ID_PROP):
            content = _item_value(element)
            item = nearest_enclosing_scope(element, _is_typed_scope)
            if item is None:
                continue
            if self.markup.product_itemtype not in (item.get("itemtype") or ""):
                continue
            if self._belongs_to_article(item.getparent(), self.seen_for_product):
                return content
        return None

    def _belongs_to_article(
        self, node: Optional[etree._Element], seen: Set[etree._Element]
    ) -> bool:
        """Whether the closest scope above *node* is an article.

        Nodes already visited by the same search are not walked again.
        """
        scope = nearest_enclosing_scope(node, _is_scope, seen)
        if scope is None:
            return False
        return self.markup.article_itemtype in (scope.get("itemtype") or "")
