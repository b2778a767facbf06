"""page_scout.parser: стратегии извлечения конфигурации страницы (meta, JSON-LD, microdata)."""

from .json_ld_parser import JsonLdParser
from .meta_parser import MetaParser
from .microdata_parser import Microdata, MicrodataItem, MicrodataParser

__all__ = ["MetaParser", "JsonLdParser", "MicrodataParser", "Microdata", "MicrodataItem"]
