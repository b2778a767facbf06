"""page_scout.parser.meta_parser: конфигурация страницы из тегов ``<meta>``."""

from __future__ import annotations

from typing import Optional

from page_scout.config import MarkupConfig
from page_scout.doc import Doc
from page_scout.dom import get_meta_tag
from page_scout.models import PageConfig


class MetaParser:
    """Reads the product id and access meta tags.

    No scanning state: both tags are looked up again on every call.
    """

    def __init__(self, doc: Doc, markup: Optional[MarkupConfig] = None) -> None:
        self.doc = doc
        self.markup = markup or MarkupConfig()

    def check(self) -> Optional[PageConfig]:
        if not self.doc.is_head_parsed():
            # Wait until the whole <head> is parsed.
            return None
        root = self.doc.get_root_node()

        product_id = get_meta_tag(root, self.markup.product_id_meta)
        if not product_id:
            return None

        accessible_for_free = get_meta_tag(root, self.markup.accessible_for_free_meta)
        locked = bool(accessible_for_free) and accessible_for_free.lower() == "false"
        return PageConfig(product_id, locked)
