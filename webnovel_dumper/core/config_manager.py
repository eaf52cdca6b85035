import configparser
import os
from typing import Optional

from webnovel_dumper.core.fetchers.webnovelpub_fetcher import DEFAULT_BASE_URL
from webnovel_dumper.utils.logger import get_logger

SCRIPT_DIR = os.path.dirname(os.path.abspath(__file__))
PROJECT_ROOT = os.path.dirname(os.path.dirname(SCRIPT_DIR)) # Up two levels from core/ to the project root
DEFAULT_WORKSPACE_PATH = os.path.join(PROJECT_ROOT, 'workspace')
CONFIG_RELATIVE_PATH = os.path.join('config', 'settings.ini')

DEFAULT_OUTPUT_DIR = '.'
DEFAULT_RETRY_DELAY = 2.0

logger = get_logger(__name__)


def get_workspace_path() -> str:
    """
    Returns the workspace path.
    Priority:
    1. WND_WORKSPACE_ROOT environment variable.
    2. Default workspace path under the project root.
    """
    env_workspace_path = os.getenv('WND_WORKSPACE_ROOT')
    if env_workspace_path:
        return os.path.abspath(env_workspace_path)
    return DEFAULT_WORKSPACE_PATH


def default_settings() -> dict:
    return {
        'General': {'output_dir': DEFAULT_OUTPUT_DIR},
        'Download': {'retry_delay': str(int(DEFAULT_RETRY_DELAY)), 'request_timeout': ''},
        'Source': {'base_url': DEFAULT_BASE_URL},
    }


class ConfigManager:
    def __init__(self, config_file_path=None):
        self.config_file_path = config_file_path or os.path.join(get_workspace_path(), CONFIG_RELATIVE_PATH)
        self.config = configparser.ConfigParser()
        self._load_config()

    def _load_config(self):
        """Loads the configuration from the INI file, writing a default one when it is missing."""
        if not os.path.exists(self.config_file_path):
            logger.warning(f"Config file not found at {self.config_file_path}. Creating a default config.")
            self.config.read_dict(default_settings())
            try:
                os.makedirs(os.path.dirname(self.config_file_path), exist_ok=True)
                with open(self.config_file_path, 'w', encoding='utf-8') as configfile:
                    self.config.write(configfile)
                logger.info(f"Created a default config file at: {self.config_file_path}")
            except OSError as e:
                logger.error(f"Error creating default config file: {e}. Using built-in defaults.", exc_info=True)
            return

        self.config.read(self.config_file_path, encoding='utf-8')

    def get_setting(self, section: str, option: str, fallback=None) -> Optional[str]:
        """Gets a specific setting from the configuration."""
        try:
            return self.config.get(section, option, fallback=fallback)
        except (configparser.NoSectionError, configparser.NoOptionError):
            return fallback

    def _get_float(self, section: str, option: str, fallback: Optional[float]) -> Optional[float]:
        raw = self.get_setting(section, option, fallback='')
        if raw is None or not raw.strip():
            return fallback
        try:
            return float(raw)
        except ValueError:
            logger.warning(f"Invalid number '{raw}' for [{section}] {option} in {self.config_file_path}. Using {fallback}.")
            return fallback

    def get_output_dir(self) -> str:
        path = self.get_setting('General', 'output_dir', fallback=DEFAULT_OUTPUT_DIR)
        return path.strip() if path and path.strip() else DEFAULT_OUTPUT_DIR

    def get_retry_delay(self) -> float:
        delay = self._get_float('Download', 'retry_delay', DEFAULT_RETRY_DELAY)
        if delay < 0:
            logger.warning(f"Negative retry_delay {delay} in {self.config_file_path}. Using {DEFAULT_RETRY_DELAY}.")
            return DEFAULT_RETRY_DELAY
        return delay

    def get_request_timeout(self) -> Optional[float]:
        """Returns the HTTP timeout in seconds, or None when requests should wait indefinitely."""
        timeout = self._get_float('Download', 'request_timeout', None)
        if timeout is not None and timeout <= 0:
            logger.warning(f"Non-positive request_timeout {timeout} in {self.config_file_path}. Ignoring it.")
            return None
        return timeout

    def get_base_url(self) -> str:
        base_url = self.get_setting('Source', 'base_url', fallback=DEFAULT_BASE_URL)
        return base_url.strip() if base_url and base_url.strip() else DEFAULT_BASE_URL
