"""Value types passed between the listing, the renderer and the download loop."""

from dataclasses import dataclass

from bs4 import BeautifulSoup


@dataclass(frozen=True)
class NovelMetadata:
    proper_title: str


@dataclass(frozen=True)
class ChapterStub:
    title: str
    url: str # Relative to the site origin, e.g. /novel/<id>/chapter-1


@dataclass(frozen=True)
class IndexPage:
    """One parsed page of the paginated chapter listing."""
    document: BeautifulSoup
    page_number: int # 1-based
