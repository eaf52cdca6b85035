import pytest
import tempfile
from typing import Dict, List, Optional, Union
from unittest import mock

from bs4 import BeautifulSoup

from webnovel_dumper.core.models import IndexPage
from webnovel_dumper.core.fetchers.webnovelpub_fetcher import WebnovelPubFetcher

BASE_URL = "https://www.example-novels.test"


@pytest.fixture(autouse=True)
def isolated_workspace(monkeypatch):
    """Isolate the workspace (config, logs) for each test."""
    with tempfile.TemporaryDirectory() as temp_dir:
        monkeypatch.setenv("WND_WORKSPACE_ROOT", temp_dir)
        yield temp_dir


def build_listing_html(chapters: List[tuple], title: Optional[str] = "The Great Novel: Part I",
                       with_info: bool = True, with_anchor: bool = True, with_list: bool = True) -> str:
    """A chapter index page. `chapters` holds (title, href) pairs; None drops the attribute."""
    parts = ["<html><body>"]
    if with_info:
        parts.append('<div class="novel-item">')
        if with_anchor:
            title_attr = f' title="{title}"' if title is not None else ""
            parts.append(f'<a href="/novel/some-id"{title_attr}><span>cover</span></a>')
        parts.append("</div>")
    if with_list:
        parts.append('<ul class="chapter-list">\n')
        for chapter_title, href in chapters:
            title_attr = f' title="{chapter_title}"' if chapter_title is not None else ""
            href_attr = f' href="{href}"' if href is not None else ""
            parts.append(f'  <li data-orderno="1">\n    <a{href_attr}{title_attr}><strong>{chapter_title}</strong></a>\n  </li>\n')
        parts.append("</ul>")
    parts.append("</body></html>")
    return "".join(parts)


def build_chapter_html(paragraphs_html: str, with_body: bool = True) -> str:
    container = f'<div id="chapter-container">{paragraphs_html}</div>' if with_body else "<div>No text here</div>"
    return f"<html><body><h1>Header</h1>{container}<footer>Footer</footer></body></html>"


def make_fake_fetcher(index_pages: Dict[int, Union[str, None, Exception]],
                      chapter_pages: Optional[Dict[str, list]] = None) -> mock.MagicMock:
    """
    A WebnovelPubFetcher double.

    index_pages maps page numbers to listing HTML, None (404) or an exception to raise.
    Pages that are not listed answer 404. chapter_pages maps a chapter URL to the
    successive outcomes of fetching it (HTML string, None for 404, or an exception).
    """
    fetcher = mock.MagicMock(spec=WebnovelPubFetcher)
    fetcher.base_url = BASE_URL
    real = WebnovelPubFetcher(base_url=BASE_URL)
    fetcher.chapter_url.side_effect = real.chapter_url
    fetcher.novel_url.side_effect = real.novel_url

    def fetch_index_page(novel_id, page_number):
        outcome = index_pages.get(page_number)
        if isinstance(outcome, Exception):
            raise outcome
        if outcome is None:
            return None
        return IndexPage(document=BeautifulSoup(outcome, "html.parser"), page_number=page_number)

    remaining = {url: list(outcomes) for url, outcomes in (chapter_pages or {}).items()}

    def fetch_html(url):
        outcomes = remaining[url]
        outcome = outcomes.pop(0) if len(outcomes) > 1 else outcomes[0]
        if isinstance(outcome, Exception):
            raise outcome
        if outcome is None:
            return None
        return BeautifulSoup(outcome, "html.parser")

    fetcher.fetch_index_page.side_effect = fetch_index_page
    fetcher.fetch_html.side_effect = fetch_html
    return fetcher


@pytest.fixture
def listing_html():
    return build_listing_html


@pytest.fixture
def chapter_html():
    return build_chapter_html


@pytest.fixture
def fake_fetcher():
    return make_fake_fetcher
