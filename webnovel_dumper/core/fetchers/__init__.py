from webnovel_dumper.core.models import ChapterStub, IndexPage, NovelMetadata
from .webnovelpub_fetcher import WebnovelPubFetcher

__all__ = [
    "ChapterStub",
    "IndexPage",
    "NovelMetadata",
    "WebnovelPubFetcher",
]
