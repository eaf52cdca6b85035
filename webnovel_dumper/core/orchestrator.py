import os
import time
from enum import Enum
from typing import Any, Callable, Dict, Optional, TextIO, Union

from webnovel_dumper.utils.filename import build_output_filename
from webnovel_dumper.utils.logger import get_logger
from .chapter_list import ChapterListIterator
from .models import ChapterStub
from webnovel_dumper.exceptions import FileWriteError, WriteError
from .fetchers.webnovelpub_fetcher import WebnovelPubFetcher
from .parsers.chapter_renderer import ChapterRenderer

ProgressCallback = Callable[[Union[str, Dict[str, Any]]], None]
logger = get_logger(__name__)


class ChapterState(Enum):
    ATTEMPTING = "attempting"
    DONE = "done"
    ABORTED = "aborted"


def _download_chapter(
    renderer: ChapterRenderer,
    stub: ChapterStub,
    sink: TextIO,
    retry_delay: float,
    _call_progress_callback: ProgressCallback,
) -> int:
    """
    Renders one chapter, retrying transient failures forever with a fixed delay.

    Returns the number of retries it took. Raises the fatal WriteError when
    the chapter cannot be rendered at all.
    """
    state = ChapterState.ATTEMPTING
    retries = 0
    fatal_error: Optional[WriteError] = None

    while state is ChapterState.ATTEMPTING:
        _call_progress_callback({"status": "info", "message": f">>> {stub.title}: Downloading...", "chapter_title": stub.title, "attempt": retries + 1})
        try:
            renderer.render_chapter(stub, sink)
            state = ChapterState.DONE
        except WriteError as e:
            if e.retryable:
                retries += 1
                logger.warning(f"Transient failure for chapter '{stub.title}' (attempt {retries}): {e}. Retrying in {retry_delay}s.")
                _call_progress_callback({"status": "warning", "message": f"ERR {e}. Retry in {retry_delay:g}s...", "chapter_title": stub.title})
                time.sleep(retry_delay)
            else:
                logger.error(f"Fatal failure for chapter '{stub.title}': {e}")
                _call_progress_callback({"status": "error", "message": f"ERR {e}", "chapter_title": stub.title})
                fatal_error = e
                state = ChapterState.ABORTED

    if state is ChapterState.ABORTED:
        raise fatal_error

    _call_progress_callback({"status": "success", "message": "OK", "chapter_title": stub.title})
    return retries


def download_novel(
    novel_id: str,
    output_dir: str = ".",
    retry_delay: float = 2.0,
    fetcher: Optional[WebnovelPubFetcher] = None,
    progress_callback: Optional[ProgressCallback] = None,
) -> Dict[str, Any]:
    """
    Downloads every chapter of a novel into a single Markdown file.

    Args:
        novel_id: Identifier used in the listing URL (e.g. the-novels-extra-07082217).
        output_dir: Directory the `.md` file is created in.
        retry_delay: Seconds to wait before retrying a chapter after a transient failure.
        fetcher: HTTP layer to use; a default WebnovelPubFetcher when omitted.
        progress_callback: Receives status dicts for display.

    Returns:
        A summary dict with the title, output path and chapter counts.

    Raises:
        InitError: The chapter list could not be opened.
        FileWriteError: The output file could not be created or written.
        ProtocolWriteError: A chapter page had no body container.
    """
    def _call_progress_callback(message: Union[str, Dict[str, Any]]) -> None:
        if progress_callback:
            progress_callback(message)

    fetcher = fetcher or WebnovelPubFetcher()
    renderer = ChapterRenderer(fetcher)

    metadata, chapters = ChapterListIterator.open(novel_id, fetcher)
    _call_progress_callback({"status": "info", "message": f"Title: {metadata.proper_title}", "title": metadata.proper_title})

    output_path = os.path.join(output_dir, build_output_filename(metadata.proper_title, novel_id))
    logger.info(f"Writing '{metadata.proper_title}' to {output_path}")

    try:
        os.makedirs(output_dir, exist_ok=True)
        out = open(output_path, 'w', encoding='utf-8')
    except OSError as e:
        logger.error(f"Failed to create file to store content at {output_path}: {e}")
        raise FileWriteError(e) from e

    chapters_written = 0
    total_retries = 0
    with out:
        try:
            out.write(f"# {metadata.proper_title}\n\nOriginal: {fetcher.novel_url(novel_id)}\n\n")
        except OSError as e:
            raise FileWriteError(e) from e

        for stub in chapters:
            total_retries += _download_chapter(renderer, stub, out, retry_delay, _call_progress_callback)
            chapters_written += 1

    logger.info(f"Finished '{metadata.proper_title}': {chapters_written} chapters, {total_retries} retries.")
    return {
        "title": metadata.proper_title,
        "novel_id": novel_id,
        "output_path": output_path,
        "chapters_written": chapters_written,
        "retries": total_retries,
    }
