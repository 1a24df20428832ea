"""Tests for the classification service: snippet scraping and the LLM classifier."""

import asyncio
from types import SimpleNamespace

import httpx
import pytest

from creatormatch.enrichment.analyzer import _parse_strict_json, classify_site
from creatormatch.enrichment.scraper import SiteScraper, extract_snippet
from creatormatch.errors import ClassificationFailed
from creatormatch.models import SiteSnippet

HOMEPAGE = """<html><head>
<title>  PixelForge |
 Indie Games </title>
<meta name="Description" content="Tiny   worlds, big adventures.">
<style>body { color: red; }</style>
<script>var tracking = "ignore me";</script>
</head><body>
<nav><a href="/">Home</a></nav>
<h1>Play our new roguelike</h1>
<noscript>enable js</noscript>
</body></html>"""


class FakeLLM:
    """Stands in for AsyncAnthropic: records the request, returns canned text."""

    def __init__(self, text):
        self.text = text
        self.requests = []
        self.messages = self

    async def create(self, **kwargs):
        self.requests.append(kwargs)
        return SimpleNamespace(content=[SimpleNamespace(text=self.text)])


def test_extract_snippet():
    snippet = extract_snippet(HOMEPAGE)
    assert snippet.title == "PixelForge | Indie Games"
    assert snippet.description == "Tiny worlds, big adventures."
    assert "Play our new roguelike" in snippet.text
    assert "ignore me" not in snippet.text
    assert "color: red" not in snippet.text
    assert "enable js" not in snippet.text


def test_extract_snippet_caps_text():
    snippet = extract_snippet("<html><body>" + "word " * 5000 + "</body></html>")
    assert len(snippet.text) == 7000


def test_extract_snippet_without_metadata():
    assert extract_snippet("<p>hello</p>") == SiteSnippet(title="", description="", text="hello")


def test_scraper_fetches_html():
    def handler(request):
        assert "CreatorMatchClassifier" in request.headers["User-Agent"]
        return httpx.Response(200, text=HOMEPAGE)

    scraper = SiteScraper(transport=httpx.MockTransport(handler))
    snippet = asyncio.run(scraper.scrape("https://pixelforge.test/"))
    assert snippet.title.startswith("PixelForge")


def test_scraper_non_2xx_fails():
    scraper = SiteScraper(transport=httpx.MockTransport(lambda r: httpx.Response(403)))
    with pytest.raises(httpx.HTTPStatusError, match=r"Website fetch failed \(403\)"):
        asyncio.run(scraper.fetch_html("https://blocked.test/"))


def test_parse_strict_json_variants():
    assert _parse_strict_json('{"category": "Games"}') == {"category": "Games"}
    assert _parse_strict_json('```json\n{"category": "Games"}\n```') == {"category": "Games"}
    assert _parse_strict_json('Sure! {"category": "Games"} Hope that helps.') == {"category": "Games"}
    assert _parse_strict_json("no json here") is None
    assert _parse_strict_json('["Games"]') is None


def test_classify_site_returns_normalized_result():
    llm = FakeLLM('{"category": "gaming", "confidence": 0.82, "reason": "Sells indie games"}')
    snippet = SiteSnippet(title="PixelForge", description="", text="roguelike")
    result = asyncio.run(classify_site("https://pixelforge.test/", snippet, llm=llm))

    assert result.category == "Games"
    assert result.confidence == 0.82
    assert result.reason == "Sells indie games"

    request = llm.requests[0]
    assert request["temperature"] == 0
    assert "- Health & Fitness" in request["system"]
    assert "Meta description: (none)" in request["messages"][0]["content"]


@pytest.mark.parametrize("raw,expected", [("1.7", 1.0), ("-0.2", 0.0), ('"high"', 0.6), ("null", 0.6)])
def test_classify_site_clamps_confidence(raw, expected):
    llm = FakeLLM('{"category": "Finance", "confidence": %s}' % raw)
    result = asyncio.run(classify_site("https://bank.test/", SiteSnippet(), llm=llm))
    assert result.confidence == expected
    assert result.reason == "Classified by site signals"


def test_classify_site_rejects_unknown_category():
    llm = FakeLLM('{"category": "Gardening", "confidence": 0.9}')
    with pytest.raises(ClassificationFailed, match="invalid category"):
        asyncio.run(classify_site("https://garden.test/", SiteSnippet(), llm=llm))


def test_classify_site_rejects_non_json():
    llm = FakeLLM("I think this is a games site.")
    with pytest.raises(ClassificationFailed, match="did not return JSON"):
        asyncio.run(classify_site("https://x.test/", SiteSnippet(), llm=llm))


def test_classify_site_without_api_key(monkeypatch):
    monkeypatch.setattr("creatormatch.enrichment.analyzer.client", None)
    with pytest.raises(ClassificationFailed, match="Missing ANTHROPIC_API_KEY"):
        asyncio.run(classify_site("https://x.test/", SiteSnippet()))
