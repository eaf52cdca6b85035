from typing import Optional

import requests
from bs4 import BeautifulSoup

from webnovel_dumper.utils.logger import get_logger
from webnovel_dumper.core.models import IndexPage
from webnovel_dumper.exceptions import InvalidBodyError, SourceUnreachableError, UnexpectedStatusError

logger = get_logger(__name__)

DEFAULT_BASE_URL = "https://www.webnovelpub.com"
INDEX_URL_TEMPLATE = "{base_url}/novel/{novel_id}/chapters/page-{page_number}"

DEFAULT_HEADERS = {
    'User-Agent': 'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/126.0.0.0 Safari/537.36',
    'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8',
}


class WebnovelPubFetcher:
    """
    Issues GET requests against the novel site and classifies the outcome.

    No retries happen here; the download loop decides what is worth retrying.
    """

    def __init__(self, base_url: str = DEFAULT_BASE_URL, timeout: Optional[float] = None):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout

    def index_url(self, novel_id: str, page_number: int) -> str:
        return INDEX_URL_TEMPLATE.format(base_url=self.base_url, novel_id=novel_id, page_number=page_number)

    def novel_url(self, novel_id: str) -> str:
        return f"{self.base_url}/novel/{novel_id}"

    def chapter_url(self, relative_url: str) -> str:
        return self.base_url + relative_url if relative_url.startswith('/') else relative_url

    @staticmethod
    def _decode_body(response: requests.Response) -> str:
        # requests falls back to ISO-8859-1 for text/* without a charset, which never fails
        # to decode; only trust its guess when the server actually declared one.
        content_type = response.headers.get('Content-Type', '')
        encoding = response.encoding if 'charset=' in content_type.lower() else None
        return response.content.decode(encoding or 'utf-8')

    def fetch_html(self, url: str) -> Optional[BeautifulSoup]:
        """
        Fetches a page and parses it.

        Returns:
            The parsed document, or None when the server answered 404.

        Raises:
            UnexpectedStatusError: Any status other than 200 or 404.
            SourceUnreachableError: The request never got an answer.
            InvalidBodyError: The body is not valid text.
        """
        try:
            response = requests.get(url, headers=DEFAULT_HEADERS, timeout=self.timeout)
        except requests.exceptions.RequestException as req_err:
            logger.error(f"Request exception occurred while fetching {url}: {req_err}")
            raise SourceUnreachableError(f"{self.base_url} is unreachable", url) from req_err

        if response.status_code == 404:
            logger.info(f"Got 404 for {url}")
            return None
        if response.status_code != 200:
            logger.error(f"Unexpected status code {response.status_code} while fetching {url}")
            raise UnexpectedStatusError(response.status_code, url)

        try:
            text = self._decode_body(response)
        except (UnicodeDecodeError, LookupError) as decode_err:
            logger.error(f"Invalid body received from {url}: {decode_err}")
            raise InvalidBodyError(f"Request to {url} got invalid body: {decode_err}", url) from decode_err

        return BeautifulSoup(text, 'html.parser')

    def fetch_index_page(self, novel_id: str, page_number: int) -> Optional[IndexPage]:
        """Fetches one page of the chapter listing. None marks the end of pagination."""
        url = self.index_url(novel_id, page_number)
        logger.info(f"Fetching chapter index page {page_number}: {url}")
        document = self.fetch_html(url)
        if document is None:
            return None
        return IndexPage(document=document, page_number=page_number)
