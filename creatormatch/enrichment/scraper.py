"""
Creator Match - Website Snippet Scraper
Fetches a brand homepage and extracts the signals the classifier prompt
needs: title, meta description and a capped sample of visible text.
"""
import logging
import re
from typing import Optional
import httpx
from bs4 import BeautifulSoup
from creatormatch.config import (
    SITE_FETCH_TIMEOUT, SITE_HTML_MAX_CHARS, SITE_TEXT_MAX_CHARS, SITE_USER_AGENT,
)
from creatormatch.models import SiteSnippet

logger = logging.getLogger(__name__)

_WS = re.compile(r"\s+")


def _clean(text: str) -> str:
    return _WS.sub(" ", text or "").strip()


def extract_snippet(html: str) -> SiteSnippet:
    soup = BeautifulSoup(html, "lxml")

    t = soup.find("title")
    title = _clean(t.get_text()) if t else ""

    description = ""
    m = soup.find("meta", attrs={"name": re.compile(r"^description$", re.IGNORECASE)})
    if m and m.get("content"):
        description = _clean(m["content"])

    for tag in soup(["script", "style", "noscript"]):
        tag.decompose()
    text = _clean(soup.get_text(separator=" "))

    return SiteSnippet(title=title, description=description, text=text[:SITE_TEXT_MAX_CHARS])


class SiteScraper:
    """Fetches homepages for the classification service."""

    def __init__(
        self,
        timeout: float = SITE_FETCH_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.timeout = timeout
        self.transport = transport

    async def fetch_html(self, url: str) -> str:
        async with httpx.AsyncClient(
            timeout=self.timeout, follow_redirects=True, transport=self.transport,
            headers={"User-Agent": SITE_USER_AGENT, "Accept": "text/html,application/xhtml+xml"},
        ) as client:
            resp = await client.get(url)
        if not resp.is_success:
            raise httpx.HTTPStatusError(
                f"Website fetch failed ({resp.status_code})",
                request=resp.request, response=resp,
            )
        return resp.text[:SITE_HTML_MAX_CHARS]

    async def scrape(self, url: str) -> SiteSnippet:
        html = await self.fetch_html(url)
        snippet = extract_snippet(html)
        logger.info(f"Scraped {url}: title={snippet.title[:60]!r}, {len(snippet.text)} chars")
        return snippet
