from typing import Optional, Dict, Any

from webnovel_dumper.core.config_manager import ConfigManager, DEFAULT_OUTPUT_DIR, DEFAULT_RETRY_DELAY
from webnovel_dumper.core.fetchers.webnovelpub_fetcher import DEFAULT_BASE_URL, WebnovelPubFetcher
from webnovel_dumper.utils.logger import get_logger

logger = get_logger(__name__)

class DumpNovelContext:
    """
    Resolves the settings of a dump run.
    Each value comes from the CLI option when given, then settings.ini, then the built-in default.
    """
    def __init__(
        self,
        novel_id: str,
        retry_delay: Optional[float],
        output_dir: Optional[str],
        config_manager: Optional[ConfigManager] = None
    ):
        self.novel_id = novel_id.strip() if novel_id else novel_id
        self.retry_delay_option: Optional[float] = retry_delay
        self.output_dir_option: Optional[str] = output_dir
        self.error_messages: list[str] = []

        self._config_manager = config_manager or self._load_config_manager()

        self.retry_delay: float = self._resolve_retry_delay()
        self.output_dir: str = self._resolve_output_dir()
        self.base_url: str = self._config_manager.get_base_url() if self._config_manager else DEFAULT_BASE_URL
        self.request_timeout: Optional[float] = self._config_manager.get_request_timeout() if self._config_manager else None

    def _load_config_manager(self) -> Optional[ConfigManager]:
        try:
            return ConfigManager()
        except Exception as e:
            logger.warning(f"Failed to initialize ConfigManager: {e}. Using defaults.")
            self.error_messages.append(f"Warning: Could not read settings, using defaults (Original error: {e})")
            return None

    def _resolve_retry_delay(self) -> float:
        if self.retry_delay_option is not None:
            logger.info(f"Using retry delay provided via CLI: {self.retry_delay_option}s")
            return self.retry_delay_option
        if self._config_manager:
            return self._config_manager.get_retry_delay()
        return DEFAULT_RETRY_DELAY

    def _resolve_output_dir(self) -> str:
        if self.output_dir_option:
            logger.info(f"Using provided output directory: {self.output_dir_option}")
            return self.output_dir_option
        if self._config_manager:
            return self._config_manager.get_output_dir()
        return DEFAULT_OUTPUT_DIR

    def build_fetcher(self) -> WebnovelPubFetcher:
        return WebnovelPubFetcher(base_url=self.base_url, timeout=self.request_timeout)

    def get_orchestrator_kwargs(self) -> Dict[str, Any]:
        """Prepares and returns arguments for the orchestrator."""
        return {
            "novel_id": self.novel_id,
            "output_dir": self.output_dir,
            "retry_delay": self.retry_delay,
            "fetcher": self.build_fetcher(),
            # progress_callback is handled by the handler
        }

    def is_valid(self) -> bool:
        if not self.novel_id:
            self.error_messages.append("Error: Novel id is required.")
            return False
        if '/' in self.novel_id:
            self.error_messages.append(f"Error: Novel id '{self.novel_id}' must not contain '/'. Pass the id, not the URL.")
            return False
        return True
