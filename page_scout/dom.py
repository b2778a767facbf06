"""Tree-query helpers over lxml element trees.

All queries are precompiled :class:`lxml.etree.XPath` objects. Absolute
paths (``//...``) search the whole tree the context node belongs to, while
relative ones (``.//...``) only look at descendants of the context node.
"""
from __future__ import annotations

from collections.abc import Callable, MutableSet
from typing import List, Optional

from lxml import etree

__all__ = (
    "find_body",
    "find_meta",
    "find_scripts_by_type",
    "find_script_with_attribute",
    "find_scopes_by_type",
    "find_descendants_by_itemprop",
    "text_content",
    "has_attribute",
    "has_next_node_in_document_order",
    "nearest_enclosing_scope",
    "get_meta_tag",
)

_BODY = etree.XPath("(//body)[1]")
_META_BY_NAME = etree.XPath("//meta[@name=$name]")
_SCRIPTS_BY_TYPE = etree.XPath("//script[@type=$type]")
_SCRIPT_WITH_ATTRIBUTE = etree.XPath("(//script[@*[name()=$attr]])[1]")
_SCOPES_BY_TYPE = etree.XPath("//*[@itemscope][@itemtype=$itemtype]")
_DESCENDANTS_BY_ITEMPROP = etree.XPath(".//*[@itemprop=$itemprop]")
_STRING_VALUE = etree.XPath("string()", smart_strings=False)


def _first(nodes: List[etree._Element]) -> Optional[etree._Element]:
    return nodes[0] if nodes else None


def find_body(root: etree._Element) -> Optional[etree._Element]:
    return _first(_BODY(root))


def find_meta(root: etree._Element, name: str) -> Optional[etree._Element]:
    return _first(_META_BY_NAME(root, name=name))


def find_scripts_by_type(root: etree._Element, type_: str) -> List[etree._Element]:
    return _SCRIPTS_BY_TYPE(root, type=type_)


def find_script_with_attribute(root: etree._Element, attr: str) -> Optional[etree._Element]:
    return _first(_SCRIPT_WITH_ATTRIBUTE(root, attr=attr))


def find_scopes_by_type(root: etree._Element, itemtype: str) -> List[etree._Element]:
    """Elements carrying ``itemscope`` whose ``itemtype`` equals *itemtype*."""
    return _SCOPES_BY_TYPE(root, itemtype=itemtype)


def find_descendants_by_itemprop(scope: etree._Element, itemprop: str) -> List[etree._Element]:
    return _DESCENDANTS_BY_ITEMPROP(scope, itemprop=itemprop)


def text_content(node: etree._Element) -> str:
    """Concatenated text of *node* and its descendants (comments excluded)."""
    return _STRING_VALUE(node)


def has_attribute(node: etree._Element, name: str) -> bool:
    return isinstance(node.tag, str) and name in node.attrib


def has_next_node_in_document_order(
    element: etree._Element, stop_node: Optional[etree._Element] = None
) -> bool:
    """Tell whether anything follows *element* in document order.

    Text right after an element lives in its ``tail``, so a tail counts as a
    next sibling just like a following element or comment does.
    """
    node: Optional[etree._Element] = element
    while node is not None and node is not stop_node:
        if node.tail is not None or node.getnext() is not None:
            return True
        node = node.getparent()
    return False


def nearest_enclosing_scope(
    node: Optional[etree._Element],
    predicate: Callable[[etree._Element], bool],
    seen: Optional[MutableSet[etree._Element]] = None,
) -> Optional[etree._Element]:
    """Return *node* or its closest ancestor matching *predicate*.

    With *seen*, every visited node is recorded there and the walk gives up
    (returns ``None``) as soon as it reaches a node recorded earlier.
    """
    while node is not None:
        if seen is not None:
            if node in seen:
                return None
            seen.add(node)
        if predicate(node):
            return node
        node = node.getparent()
    return None


def get_meta_tag(root: etree._Element, name: str) -> Optional[str]:
    """Value of the ``content`` attribute of the first ``<meta name=...>``."""
    element = find_meta(root, name)
    if element is None:
        return None
    return element.get("content")
