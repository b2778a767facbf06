"""
Data models for PageScout.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True, slots=True)
class PageConfig:
    """Product identifier and access flag discovered on a page.

    ``locked`` means access to the page is *not* free.
    """

    product_id: str
    locked: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.product_id, str) or not self.product_id:
            raise ValueError("product_id must be a non-empty string")

    @property
    def publication_id(self) -> str:
        """Publication part of ``publication:label`` ids; the whole id otherwise."""
        return self.product_id.split(":", 1)[0]

    @property
    def label(self) -> Optional[str]:
        _, sep, label = self.product_id.partition(":")
        return label if sep else None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "productId": self.product_id,
            "publicationId": self.publication_id,
            "label": self.label,
            "locked": self.locked,
        }


__all__ = ["PageConfig"]
