# File: tests/test_json_ld_parser.py
import json

import pytest
from lxml import etree

import page_scout.parser.json_ld_parser as json_ld_module
from page_scout.doc import TreeDoc, parse_document
from page_scout.dom import find_body
from page_scout.models import PageConfig
from page_scout.parser import JsonLdParser


def page(head: str = "", body: str = "<p>Article</p>") -> str:
    return f"<html><head>{head}</head><body>{body}</body></html>"


@pytest.fixture()
def parse_spy(monkeypatch):
    """Count calls of the JSON parse step."""
    calls = []
    original = json_ld_module.try_parse_json

    def spy(text):
        calls.append(text)
        return original(text)

    monkeypatch.setattr(json_ld_module, "try_parse_json", spy)
    return calls


def test_extracts_product_id(make_doc, ld_json, news_article):
    doc = make_doc(page(ld_json(news_article("pub:123"))))
    assert JsonLdParser(doc).check() == PageConfig("pub:123", locked=False)


@pytest.mark.parametrize(
    "free,locked",
    [
        (False, True),
        (True, False),
        ("false", True),
        ("FALSE", True),
        ("True", False),
        ("maybe", False),
        (0, False),
        ("", False),
        ([False, True], True),
    ],
)
def test_accessible_for_free_coercion(make_doc, ld_json, news_article, free, locked):
    doc = make_doc(page(ld_json(news_article(free=free))))
    config = JsonLdParser(doc).check()
    assert config is not None
    assert config.locked is locked


def test_schema_org_uri_types(make_doc, ld_json):
    data = {
        "@type": ["http://schema.org/NewsArticle"],
        "isPartOf": {"@type": "http://schema.org/Product", "productID": "pub:uri"},
    }
    doc = make_doc(page(ld_json(data)))
    assert JsonLdParser(doc).check() == PageConfig("pub:uri", locked=False)


def test_first_product_in_is_part_of_wins(make_doc, ld_json):
    data = {
        "@type": "NewsArticle",
        "isPartOf": [
            {"@type": "WebSite", "productID": "site:ignored"},
            "just a string",
            {"@type": "Product"},
            {"@type": "Product", "productID": "pub:first"},
            {"@type": "Product", "productID": "pub:second"},
        ],
    }
    doc = make_doc(page(ld_json(data)))
    assert JsonLdParser(doc).check() == PageConfig("pub:first", locked=False)


def test_block_without_marker_is_never_parsed(make_doc, ld_json, parse_spy):
    data = {"@type": "WebPage", "isPartOf": {"@type": "Product", "productID": "pub:1"}}
    doc = make_doc(page(ld_json(data)))
    assert JsonLdParser(doc).check() is None
    assert parse_spy == []


def test_malformed_block_then_valid_block(make_doc, ld_json, news_article):
    broken = '{"@type": "NewsArticle", "isPartOf": '
    doc = make_doc(page(ld_json(broken) + ld_json(news_article("pub:second"))))
    assert JsonLdParser(doc).check() == PageConfig("pub:second", locked=False)


def test_article_without_product_continues_scan(make_doc, ld_json, news_article):
    no_product = {"@type": "NewsArticle", "headline": "x"}
    doc = make_doc(page(ld_json(no_product), ld_json(news_article("pub:body"))))
    assert JsonLdParser(doc).check() == PageConfig("pub:body", locked=False)


def test_non_article_root_is_rejected(make_doc, ld_json):
    data = {
        "@type": "WebPage",
        "about": "NewsArticle",
        "isPartOf": {"@type": "Product", "productID": "pub:1"},
    }
    doc = make_doc(page(ld_json(data)))
    assert JsonLdParser(doc).check() is None


def test_array_root_is_not_matching(make_doc, ld_json, news_article):
    doc = make_doc(page(ld_json([news_article("pub:1")])))
    assert JsonLdParser(doc).check() is None


def test_other_script_types_are_ignored(make_doc, news_article):
    script = f'<script type="application/json">{json.dumps(news_article())}</script>'
    doc = make_doc(page(script))
    assert JsonLdParser(doc).check() is None


def test_seen_blocks_are_not_parsed_again(make_doc, ld_json, news_article, parse_spy):
    doc = make_doc(page(ld_json({"@type": "NewsArticle"})))
    parser = JsonLdParser(doc)
    assert parser.check() is None
    assert parser.check() is None
    assert len(parse_spy) == 1
    assert len(parser.seen) == 1


def test_streaming_block_waits_for_following_content(make_doc, ld_json, news_article):
    # Nothing follows the script yet: its text may still be incomplete.
    doc = make_doc(page(body=ld_json(news_article("pub:late"))), ready=False)
    parser = JsonLdParser(doc)
    assert parser.check() is None
    assert parser.seen == set()

    etree.SubElement(find_body(doc.get_root_node()), "p")
    assert parser.check() == PageConfig("pub:late", locked=False)


def test_streaming_guard_lifted_when_ready(make_doc, ld_json, news_article):
    doc = make_doc(page(body=ld_json(news_article("pub:last"))), ready=False)
    parser = JsonLdParser(doc)
    assert parser.check() is None
    doc.mark_ready()
    assert parser.check() == PageConfig("pub:last", locked=False)


def test_waits_for_body():
    html = etree.Element("html")
    head = etree.SubElement(html, "head")
    script = etree.SubElement(head, "script", type="application/ld+json")
    script.text = '{"@type": "NewsArticle", "isPartOf": {"@type": "Product", "productID": "p"}}'
    etree.SubElement(head, "title")

    parser = JsonLdParser(TreeDoc(html, ready=False))
    assert parser.check() is None
    etree.SubElement(html, "body")
    assert parser.check() == PageConfig("p", locked=False)


def test_head_only_document(ld_json, news_article):
    doc = parse_document(f"<html><head>{ld_json(news_article('pub:head'))}</head></html>")
    assert JsonLdParser(doc).check() == PageConfig("pub:head", locked=False)


@pytest.mark.parametrize(
    "product_id,expected",
    [
        (12345, "12345"),
        (0, None),
        (True, None),
        ({"id": "pub:1"}, None),
        ("", None),
    ],
)
def test_product_id_value_types(make_doc, ld_json, news_article, product_id, expected):
    doc = make_doc(page(ld_json(news_article(product_id))))
    config = JsonLdParser(doc).check()
    if expected is None:
        assert config is None
    else:
        assert config == PageConfig(expected, locked=False)
