"""Documents that may still be loading.

A :class:`Doc` exposes the read-only readiness contract used by the page
configuration parsers: the root node, whether a ``<body>`` exists yet,
whether parsing is complete and a future completed at that moment.

* :class:`StreamingDoc` parses markup incrementally with
  :class:`lxml.etree.HTMLPullParser`; elements are live while bytes keep
  arriving and :meth:`StreamingDoc.close` marks the document ready.
* :class:`TreeDoc` wraps an lxml tree built elsewhere; whoever owns the tree
  calls :meth:`Doc.mark_ready` once it is complete.
"""
from __future__ import annotations

import asyncio
from typing import Any, Optional, Union

from lxml import etree

from page_scout.dom import find_body
from page_scout.logger import logger

__all__ = ("Doc", "StreamingDoc", "TreeDoc", "parse_document", "resolve_doc")


class Doc:
    """Base readiness gate. Subclasses provide :meth:`get_root_node`."""

    def __init__(self) -> None:
        self._ready = False
        self._ready_future: Optional[asyncio.Future[None]] = None

    def get_root_node(self) -> Optional[etree._Element]:
        raise NotImplementedError

    def get_body(self) -> Optional[etree._Element]:
        """The ``<body>`` element, or ``None`` while the head is still parsing."""
        root = self.get_root_node()
        if root is None:
            return None
        return find_body(root)

    def is_ready(self) -> bool:
        return self._ready

    def is_head_parsed(self) -> bool:
        """Whether the whole ``<head>`` is available.

        A ``<body>`` element means the head is complete. A fully parsed
        document counts too: libxml2 adds no ``<body>`` to head-only markup.
        """
        if self.get_root_node() is None:
            return False
        return self._ready or self.get_body() is not None

    def when_ready(self) -> asyncio.Future[None]:
        """Future completed once the document is fully parsed.

        Must be called with a running event loop.
        """
        if self._ready_future is None:
            self._ready_future = asyncio.get_running_loop().create_future()
            if self._ready:
                self._ready_future.set_result(None)
        return self._ready_future

    def mark_ready(self) -> None:
        if self._ready:
            return
        self._ready = True
        logger.debug("Document fully parsed")
        if self._ready_future is not None and not self._ready_future.done():
            self._ready_future.set_result(None)


class TreeDoc(Doc):
    """Document over an already built lxml tree."""

    def __init__(
        self,
        root: Union[etree._Element, etree._ElementTree],
        *,
        ready: bool = True,
    ) -> None:
        super().__init__()
        if isinstance(root, etree._ElementTree):
            root = root.getroot()
        self._root = root
        if ready:
            self.mark_ready()

    def get_root_node(self) -> Optional[etree._Element]:
        return self._root


class StreamingDoc(Doc):
    """HTML document built progressively from fed chunks."""

    def __init__(self, encoding: Optional[str] = None) -> None:
        super().__init__()
        self._encoding = encoding
        self._parser: Optional[etree.HTMLPullParser] = None
        self._root: Optional[etree._Element] = None
        self.bytes_fed = 0

    def get_root_node(self) -> Optional[etree._Element]:
        return self._root

    def feed(self, data: Union[str, bytes]) -> None:
        """Feed the next chunk of markup. Text is fed as UTF-8."""
        if self.is_ready():
            raise RuntimeError("Document is already fully parsed")
        if isinstance(data, str):
            data = data.encode("utf-8")
            if self._parser is None and self._encoding is None:
                self._encoding = "utf-8"
        if not data:
            return
        parser = self._ensure_parser()
        parser.feed(data)
        self.bytes_fed += len(data)
        self._collect_events()

    def close(self) -> None:
        """Finish parsing and mark the document ready."""
        if self.is_ready():
            return
        if self._parser is not None:
            try:
                root = self._parser.close()
            except etree.LxmlError as exc:
                logger.debug("Parser rejected the document on close: %s", exc)
                root = None
            self._collect_events()
            if isinstance(root, etree._Element):
                self._root = root
        self.mark_ready()

    def _ensure_parser(self) -> etree.HTMLPullParser:
        if self._parser is None:
            self._parser = etree.HTMLPullParser(events=("start",), encoding=self._encoding)
        return self._parser

    def _collect_events(self) -> None:
        assert self._parser is not None
        for _event, element in self._parser.read_events():
            if self._root is None:
                self._root = element.getroottree().getroot()


def parse_document(markup: Union[str, bytes], encoding: Optional[str] = None) -> StreamingDoc:
    """Parse complete markup into a ready :class:`StreamingDoc`."""
    doc = StreamingDoc(encoding=encoding)
    doc.feed(markup)
    doc.close()
    return doc


def resolve_doc(source: Any) -> Doc:
    """Adapt markup, lxml trees/elements or documents to a :class:`Doc`."""
    if isinstance(source, Doc):
        return source
    if isinstance(source, (etree._Element, etree._ElementTree)):
        return TreeDoc(source)
    if isinstance(source, (str, bytes)):
        return parse_document(source)
    raise TypeError(f"Cannot build a document from {type(source).__name__}")
