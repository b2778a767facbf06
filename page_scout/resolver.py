"""page_scout.resolver: discovery of the page configuration.

The resolver runs the parsers in a fixed priority order, meta tags first,
then JSON-LD, then microdata, every time it is triggered:

* once on the next event-loop iteration after :meth:`PageConfigResolver.resolve_config`;
* once when the document reports that it is fully parsed;
* whenever a caller invokes :meth:`PageConfigResolver.check` directly, e.g.
  after feeding another chunk of a streaming document.

The first configuration found settles the result for good. If the document
is fully parsed and nothing was found, the result fails with
:class:`~page_scout.exceptions.ConfigNotFoundError`.
"""
from __future__ import annotations

import asyncio
from enum import Enum
from typing import Any, Optional

from lxml import etree

from page_scout.config import MarkupConfig
from page_scout.doc import Doc, resolve_doc
from page_scout.dom import find_script_with_attribute, get_meta_tag
from page_scout.exceptions import ConfigNotFoundError
from page_scout.logger import logger
from page_scout.models import PageConfig
from page_scout.parser import JsonLdParser, MetaParser, MicrodataParser

__all__ = ["CellState", "ResolutionCell", "PageConfigResolver", "get_control_flag"]


class CellState(Enum):
    PENDING = "pending"
    RESOLVED = "resolved"
    REJECTED = "rejected"


class ResolutionCell:
    """Single-assignment slot: ``PENDING`` → ``RESOLVED`` or ``REJECTED``.

    Transitions out of a settled state are ignored and reported as ``False``.
    """

    def __init__(self) -> None:
        self.state = CellState.PENDING
        self.value: Optional[PageConfig] = None
        self.error: Optional[BaseException] = None
        self._future: Optional[asyncio.Future[PageConfig]] = None

    @property
    def settled(self) -> bool:
        return self.state is not CellState.PENDING

    def resolve(self, value: PageConfig) -> bool:
        if self.settled:
            return False
        self.state = CellState.RESOLVED
        self.value = value
        self._publish()
        return True

    def reject(self, error: BaseException) -> bool:
        if self.settled:
            return False
        self.state = CellState.REJECTED
        self.error = error
        self._publish()
        return True

    def future(self) -> asyncio.Future[PageConfig]:
        """Future mirroring the cell. Must be called with a running event loop."""
        if self._future is None:
            self._future = asyncio.get_running_loop().create_future()
            self._publish()
        return self._future

    def _publish(self) -> None:
        fut = self._future
        if fut is None or fut.done():
            return
        if self.state is CellState.RESOLVED:
            fut.set_result(self.value)
        elif self.state is CellState.REJECTED:
            fut.set_exception(self.error)


class PageConfigResolver:
    """Discovers the :class:`PageConfig` of one document."""

    def __init__(self, doc: Any, markup: Optional[MarkupConfig] = None) -> None:
        self.doc: Doc = resolve_doc(doc)
        self.markup = markup or MarkupConfig()
        self.cell = ResolutionCell()
        self.meta_parser = MetaParser(self.doc, self.markup)
        self.json_ld_parser = JsonLdParser(self.doc, self.markup)
        self.microdata_parser = MicrodataParser(self.doc, self.markup)

    def resolve_config(self) -> asyncio.Future[PageConfig]:
        """Start resolution and return the future of the configuration.

        Must be called with a running event loop.
        """
        loop = asyncio.get_running_loop()
        # Try to resolve the config at different times.
        loop.call_soon(self.check)
        self.doc.when_ready().add_done_callback(lambda _fut: self.check())
        return self.cell.future()

    def check(self) -> Optional[PageConfig]:
        """Run the parsers once. Returns the configuration settled by this call."""
        if self.cell.settled:
            return None

        config = self.meta_parser.check()
        if config is None:
            config = self.json_ld_parser.check()
        if config is None:
            config = self.microdata_parser.check()

        if config is not None:
            self.cell.resolve(config)
            logger.info("Page config resolved: %s (locked=%s)", config.product_id, config.locked)
        elif self.doc.is_ready():
            self.cell.reject(ConfigNotFoundError("No config could be discovered in the page"))
            logger.warning("No config could be discovered in the page")
        return config


def get_control_flag(root_node: Any, name: Optional[str] = None) -> Optional[str]:
    """Control flag declared by the page, from ``<meta>`` first, then ``<script>``.

    *name* defaults to :attr:`MarkupConfig.control_flag`.
    """
    if name is None:
        name = MarkupConfig().control_flag
    if isinstance(root_node, Doc):
        root_node = root_node.get_root_node()
    elif isinstance(root_node, etree._ElementTree):
        root_node = root_node.getroot()
    if root_node is None:
        return None

    # Look for the flag in `meta`.
    flag = get_meta_tag(root_node, name)
    if flag:
        return flag
    # Look for the flag in `script`.
    element = find_script_with_attribute(root_node, name)
    if element is not None:
        return element.get(name)
    return None
