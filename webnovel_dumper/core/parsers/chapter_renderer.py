from typing import Optional, TextIO

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import PreformattedString

from webnovel_dumper.core.models import ChapterStub
from webnovel_dumper.exceptions import (
    FetchError,
    FileWriteError,
    HttpWriteError,
    ProtocolWriteError,
)
from webnovel_dumper.core.fetchers.webnovelpub_fetcher import WebnovelPubFetcher
from webnovel_dumper.utils.logger import get_logger

logger = get_logger(__name__)

CHAPTER_BODY_CONTAINER = "#chapter-container"

# Full-width space (U+3000) shows up as indentation in translated chapters
WHITE_SPACE = " \t\n\u3000"

# Inline elements that survive the conversion, with their Markdown markers
INLINE_MARKERS = {
    "em": "*",
    "strong": "**",
}


def _is_text(node) -> bool:
    # Comments, CDATA and doctypes are NavigableStrings too, but not readable text
    return isinstance(node, NavigableString) and not isinstance(node, PreformattedString)


def _trimmed(node) -> str:
    return str(node).strip(WHITE_SPACE)


class ChapterRenderer:
    """
    Downloads a chapter page and writes its text as Markdown.

    Only <p> children of the body container are rendered. Inside a paragraph,
    bare text is written as-is, <em> becomes *text* and <strong> becomes
    **text**; every other element is skipped.
    """

    def __init__(self, fetcher: Optional[WebnovelPubFetcher] = None):
        self.fetcher = fetcher or WebnovelPubFetcher()

    def render_chapter(self, stub: ChapterStub, sink: TextIO) -> None:
        """
        Renders one chapter into `sink`.

        Raises:
            HttpWriteError: The chapter page could not be fetched.
            ProtocolWriteError: The page has no chapter body container.
            FileWriteError: Writing to `sink` failed.
        """
        document = self._fetch_document(stub)

        body = document.select_one(CHAPTER_BODY_CONTAINER)
        if body is None:
            raise ProtocolWriteError(f"{stub.url}: Unable to find body {CHAPTER_BODY_CONTAINER}")

        try:
            sink.write(f"## {stub.title}\n\n")
            for child in body.children:
                if isinstance(child, Tag) and child.name == "p":
                    self._write_paragraph(child, sink)
        except OSError as e:
            logger.error(f"Failed writing chapter '{stub.title}' to output: {e}")
            raise FileWriteError(e) from e

    def _fetch_document(self, stub: ChapterStub) -> BeautifulSoup:
        url = self.fetcher.chapter_url(stub.url)
        logger.info(f"Fetching chapter '{stub.title}' from: {url}")
        try:
            document = self.fetcher.fetch_html(url)
        except FetchError as e:
            raise HttpWriteError(f"{stub.url}: {e}") from e
        if document is None:
            raise HttpWriteError(f"{stub.url}: Request failed with code: 404")
        return document

    def _write_paragraph(self, paragraph: Tag, sink: TextIO) -> None:
        for node in paragraph.children:
            if _is_text(node):
                text = _trimmed(node)
                if text:
                    sink.write(text)
            elif isinstance(node, Tag) and node.name in INLINE_MARKERS:
                marker = INLINE_MARKERS[node.name]
                for inner in node.children:
                    if not _is_text(inner):
                        continue
                    text = _trimmed(inner)
                    if text:
                        sink.write(f" {marker}{text}{marker} ")
        sink.write("\n\n")
