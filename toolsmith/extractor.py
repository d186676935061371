"""
Article extraction: fetch a page and reduce it to its readable content.

Readability (the algorithm behind Firefox's Reader View) isolates the main
content block; BeautifulSoup turns that block into plain text.
"""

from __future__ import annotations

import logging

import requests
from bs4 import BeautifulSoup
from readability import Document
from readability.readability import Unparseable

from toolsmith.config import Settings
from toolsmith.errors import ExtractionEmpty, FetchError, FetchTimeout, InvalidInput
from toolsmith.models import Article

log = logging.getLogger(__name__)

ACCEPT_HEADER = "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8"


def fetch_html(url: str, settings: Settings) -> str:
    headers = {
        "User-Agent": settings.fetch_user_agent,
        "Accept": ACCEPT_HEADER,
    }
    try:
        resp = requests.get(
            url,
            headers=headers,
            timeout=settings.fetch_timeout_secs,
            allow_redirects=True,
        )
    except requests.Timeout as exc:
        log.warning("extract: timeout fetching url=%s", url)
        raise FetchTimeout(f"Timed out after {settings.fetch_timeout_secs}s fetching {url}") from exc
    except requests.RequestException as exc:
        log.warning("extract: request error url=%s err=%r", url, exc)
        raise FetchError(f"Failed to fetch {url}: {exc}") from exc

    if not 200 <= resp.status_code < 300:
        log.warning("extract: HTTP %s for url=%s", resp.status_code, url)
        raise FetchError(f"Fetching {url} returned HTTP {resp.status_code}")
    return resp.text


def html_to_text(html: str) -> str:
    """Plain text of a markup fragment, one non-empty line per block."""
    soup = BeautifulSoup(html or "", "html.parser")
    for tag in soup(["script", "style", "noscript"]):
        tag.decompose()
    text = soup.get_text(separator="\n")
    return "\n".join(line.strip() for line in text.splitlines() if line.strip())


def parse_article(html: str, url: str) -> Article:
    """Run readability over a fetched page; raises ExtractionEmpty when nothing readable is left."""
    try:
        # url lets readability rewrite relative links against the page
        doc = Document(html, url=url)
        summary = doc.summary(html_partial=True)
        title = doc.short_title() or doc.title() or ""
    except Unparseable as exc:
        log.warning("extract: readability could not parse url=%s err=%r", url, exc)
        raise ExtractionEmpty("Failed to extract main content from the URL.") from exc

    text = html_to_text(summary)
    if not text.strip():
        log.warning("extract: extraction failed or content empty for url=%s", url)
        raise ExtractionEmpty("Failed to extract main content from the URL.")
    return Article(title=title.strip(), content=text, html=summary)


def extract(url: str, settings: Settings) -> Article:
    url = (url or "").strip()
    if not url:
        raise InvalidInput("No URL provided")
    html = fetch_html(url, settings)
    article = parse_article(html, url)
    log.info("extract: ok url=%s title=%s chars=%d", url, article.title[:80], len(article.content))
    return article
