import io
from unittest import mock

import pytest

from webnovel_dumper.core.models import ChapterStub
from webnovel_dumper.exceptions import (
    FileWriteError,
    HttpWriteError,
    InvalidBodyError,
    ProtocolWriteError,
    SourceUnreachableError,
    UnexpectedStatusError,
    WriteError,
)
from webnovel_dumper.core.parsers.chapter_renderer import ChapterRenderer

STUB = ChapterStub(title="Chapter 1: Beginnings", url="/novel/abc/chapter-1")
CHAPTER_URL = "https://www.example-novels.test/novel/abc/chapter-1"


@pytest.fixture
def render(fake_fetcher, chapter_html):
    """Renders STUB from the given body markup and returns the written text."""
    def _render(paragraphs_html):
        fetcher = fake_fetcher({}, {CHAPTER_URL: [chapter_html(paragraphs_html)]})
        sink = io.StringIO()
        ChapterRenderer(fetcher).render_chapter(STUB, sink)
        return sink.getvalue()
    return _render


def test_strong_emphasis_spacing(render):
    output = render("<p>Hello <strong>world</strong>!</p>")
    assert output == "## Chapter 1: Beginnings\n\nHello **world** !\n\n"


def test_emphasis_spacing(render):
    output = render("<p><em>Quiet</em> words</p>")
    assert output == "## Chapter 1: Beginnings\n\n *Quiet* words\n\n"


def test_paragraphs_are_separated_by_blank_lines(render):
    output = render("\n<p>First.</p>\n<p>Second.</p>\n")
    assert output == "## Chapter 1: Beginnings\n\nFirst.\n\nSecond.\n\n"


def test_whitespace_only_text_contributes_nothing(render):
    output = render("<p>　　 \t\n</p><p>　Indented text.　\n</p><p><em>  </em><strong>　</strong></p>")
    assert output == "## Chapter 1: Beginnings\n\n\n\nIndented text.\n\n\n\n"


def test_text_is_trimmed_per_node(render):
    output = render("<p>  He said \n<em> softly </em>\tand left.  </p>")
    assert output == "## Chapter 1: Beginnings\n\nHe said *softly* and left.\n\n"


def test_non_paragraph_children_are_ignored(render):
    output = render('<div class="ad">Buy now</div><img src="x.png"/><table><tr><td>cell</td></tr></table><p>Story.</p><h3>Note</h3>')
    assert output == "## Chapter 1: Beginnings\n\nStory.\n\n"


def test_other_inline_elements_and_comments_are_ignored(render):
    output = render('<p>Keep<!-- hidden --><span>drop</span><a href="/x">link</a><br/><sup>1</sup></p>')
    assert output == "## Chapter 1: Beginnings\n\nKeep\n\n"


def test_only_direct_text_of_emphasis_is_kept(render):
    output = render("<p><em>outer<strong>inner</strong></em></p>")
    assert output == "## Chapter 1: Beginnings\n\n *outer* \n\n"


def test_nested_paragraph_content_is_not_rendered(render):
    output = render("<div><p>Nested paragraph</p></div><p>Direct paragraph</p>")
    assert output == "## Chapter 1: Beginnings\n\nDirect paragraph\n\n"


def test_missing_body_container_is_protocol_error(fake_fetcher, chapter_html):
    fetcher = fake_fetcher({}, {CHAPTER_URL: [chapter_html("<p>x</p>", with_body=False)]})
    sink = io.StringIO()

    with pytest.raises(ProtocolWriteError) as excinfo:
        ChapterRenderer(fetcher).render_chapter(STUB, sink)

    assert not excinfo.value.retryable
    assert "#chapter-container" in str(excinfo.value)
    assert sink.getvalue() == ""


@pytest.mark.parametrize("outcome", [
    None,
    UnexpectedStatusError(503, CHAPTER_URL),
    SourceUnreachableError("www.webnovelpub.com is unreachable", CHAPTER_URL),
    InvalidBodyError("bad bytes", CHAPTER_URL),
])
def test_every_fetch_failure_is_http_error(outcome, fake_fetcher):
    fetcher = fake_fetcher({}, {CHAPTER_URL: [outcome]})
    sink = io.StringIO()

    with pytest.raises(HttpWriteError) as excinfo:
        ChapterRenderer(fetcher).render_chapter(STUB, sink)

    assert excinfo.value.retryable
    assert isinstance(excinfo.value, WriteError)
    assert sink.getvalue() == ""


def test_chapter_is_fetched_from_resolved_url(fake_fetcher, chapter_html):
    fetcher = fake_fetcher({}, {CHAPTER_URL: [chapter_html("<p>x</p>")]})
    ChapterRenderer(fetcher).render_chapter(STUB, io.StringIO())
    fetcher.chapter_url.assert_called_once_with("/novel/abc/chapter-1")
    fetcher.fetch_html.assert_called_once_with(CHAPTER_URL)


def test_sink_failure_is_file_error(fake_fetcher, chapter_html):
    fetcher = fake_fetcher({}, {CHAPTER_URL: [chapter_html("<p>Hello</p>")]})
    disk_full = OSError(28, "No space left on device")
    sink = mock.Mock()
    sink.write.side_effect = [None, disk_full]

    with pytest.raises(FileWriteError) as excinfo:
        ChapterRenderer(fetcher).render_chapter(STUB, sink)

    assert excinfo.value.io_error is disk_full
    assert not excinfo.value.retryable
    assert sink.write.call_count == 2
