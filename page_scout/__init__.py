"""
PageScout package initializer.
Defines package version and exposes the public API.
"""
__version__ = "0.1.0"

from page_scout.config import MarkupConfig, ScoutConfig, load_config
from page_scout.doc import Doc, StreamingDoc, TreeDoc, parse_document, resolve_doc
from page_scout.exceptions import ConfigNotFoundError, DocumentLoadError, PageScoutError
from page_scout.models import PageConfig
from page_scout.resolver import PageConfigResolver, get_control_flag
from page_scout.scanner import scan_control_flag, scan_page

__all__ = [
    "__version__",
    "MarkupConfig",
    "ScoutConfig",
    "load_config",
    "Doc",
    "StreamingDoc",
    "TreeDoc",
    "parse_document",
    "resolve_doc",
    "PageScoutError",
    "ConfigNotFoundError",
    "DocumentLoadError",
    "PageConfig",
    "PageConfigResolver",
    "get_control_flag",
    "scan_page",
    "scan_control_flag",
]
