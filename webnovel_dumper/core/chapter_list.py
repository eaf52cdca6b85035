from typing import Iterator, Optional, Tuple

from bs4 import Tag

from webnovel_dumper.utils.logger import get_logger
from .models import ChapterStub, IndexPage, NovelMetadata
from webnovel_dumper.exceptions import (
    ChapterListContainerMissingError,
    FetchError,
    PageUnavailableError,
    TitleAnchorMissingError,
    TitleAttributeMissingError,
    TitleContainerMissingError,
)
from .fetchers.webnovelpub_fetcher import WebnovelPubFetcher

logger = get_logger(__name__)

NOVEL_TITLE_CONTAINER = ".novel-item"
CHAPTER_LIST_CONTAINER = ".chapter-list"


def _extract_metadata(page: IndexPage) -> NovelMetadata:
    container = page.document.select_one(NOVEL_TITLE_CONTAINER)
    if container is None:
        raise TitleContainerMissingError(f"Unable to find novel title container class '{NOVEL_TITLE_CONTAINER}'")

    anchor = container.select_one("a")
    if anchor is None:
        raise TitleAnchorMissingError(f"Unable to find title <a> inside '{NOVEL_TITLE_CONTAINER}'")

    proper_title = anchor.get("title")
    if not proper_title:
        raise TitleAttributeMissingError("Title <a> of the novel has no 'title' attribute")

    return NovelMetadata(proper_title=proper_title)


def _chapter_entries(page: IndexPage) -> Optional[Iterator]:
    container = page.document.select_one(CHAPTER_LIST_CONTAINER)
    if container is None:
        return None
    return iter(list(container.children))


class ChapterListIterator:
    """
    Lazy, single-pass sequence of the chapters of a novel.

    Listing pages are fetched one at a time as the previous one runs out. The
    iterator stops for good at the first 404, at any fetch failure after page 1,
    or at the first chapter link missing its title or href. Call `open` again to
    list the chapters a second time.
    """

    def __init__(self, novel_id: str, fetcher: WebnovelPubFetcher, page: IndexPage, entries: Iterator):
        self.novel_id = novel_id
        self.fetcher = fetcher
        self.current_page_number = page.page_number
        self.current_page: Optional[IndexPage] = page
        self._entries: Optional[Iterator] = entries
        self._exhausted = False

    @classmethod
    def open(cls, novel_id: str, fetcher: Optional[WebnovelPubFetcher] = None) -> Tuple[NovelMetadata, "ChapterListIterator"]:
        """
        Fetches the first listing page and reads the novel title from it.

        Raises:
            InitError: The first page is unavailable or lacks an expected element.
        """
        fetcher = fetcher or WebnovelPubFetcher()
        try:
            page = fetcher.fetch_index_page(novel_id, 1)
        except FetchError as e:
            raise PageUnavailableError(f"Unable to fetch the first page of the chapter list: {e}") from e
        if page is None:
            raise PageUnavailableError(f"Unable to fetch the first page of the chapter list for '{novel_id}' (404)")

        metadata = _extract_metadata(page)

        entries = _chapter_entries(page)
        if entries is None:
            raise ChapterListContainerMissingError(f"Unable to find chapter list container class '{CHAPTER_LIST_CONTAINER}'")

        logger.info(f"Opened chapter list for '{novel_id}': {metadata.proper_title}")
        return metadata, cls(novel_id, fetcher, page, entries)

    def __iter__(self) -> "ChapterListIterator":
        return self

    def __next__(self) -> ChapterStub:
        while not self._exhausted:
            for entry in self._entries:
                if not isinstance(entry, Tag):
                    continue
                link = next((child for child in entry.children if isinstance(child, Tag) and child.name == "a"), None)
                if link is None:
                    continue
                return self._stub_from_link(link)

            self._advance_page()

        raise StopIteration

    def _stub_from_link(self, link: Tag) -> ChapterStub:
        title = link.get("title")
        if not title:
            logger.error(f"Chapter link on listing page {self.current_page_number} is missing title. Stopping chapter list.")
            self._stop()
            raise StopIteration

        url = link.get("href")
        if not url:
            logger.error(f"Chapter '{title}' link is missing href. Stopping chapter list.")
            self._stop()
            raise StopIteration

        return ChapterStub(title=title, url=url)

    def _advance_page(self) -> None:
        self.current_page_number += 1
        try:
            page = self.fetcher.fetch_index_page(self.novel_id, self.current_page_number)
        except FetchError as e:
            # A failure here is indistinguishable from the end of the list for the caller.
            # TODO: surface mid-listing fetch failures instead of ending the chapter list early.
            logger.error(f"Unable to fetch chapter index page {self.current_page_number}: {e}. Treating it as the end of the list.")
            self._stop()
            return

        if page is None:
            logger.info(f"No chapter index page {self.current_page_number}; chapter list complete.")
            self._stop()
            return

        entries = _chapter_entries(page)
        if entries is None:
            logger.error(f"Unable to find chapter list container class '{CHAPTER_LIST_CONTAINER}' on page {self.current_page_number}")
            self._stop()
            return

        self.current_page = page
        self._entries = entries

    def _stop(self) -> None:
        self._exhausted = True
        self.current_page = None
        self._entries = None
