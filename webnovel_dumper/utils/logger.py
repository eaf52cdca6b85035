import logging
import os
from logging.handlers import RotatingFileHandler

# Default log level - can be overridden by environment variable
LOG_LEVEL_STR = os.environ.get('LOG_LEVEL', 'INFO').upper()
LOG_LEVEL = getattr(logging, LOG_LEVEL_STR, logging.INFO)

LOG_FORMAT = '%(asctime)s - %(levelname)s - %(name)s - %(module)s.%(funcName)s:%(lineno)d - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

# Determine project root based on the location of logger.py
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..', '..'))
WORKSPACE_PATH = os.path.abspath(os.environ.get('WND_WORKSPACE_ROOT') or os.path.join(PROJECT_ROOT, 'workspace'))
DEFAULT_LOGS_DIR_NAME = 'logs'
LOGS_DIR = os.path.join(WORKSPACE_PATH, DEFAULT_LOGS_DIR_NAME)

MAIN_LOGGER_NAME = 'webnovel_dumper'

def setup_logger(logger_name, log_file, level=logging.INFO, console_level=logging.WARNING, add_console_handler=True):
    """Generic function to set up a logger."""
    logger = logging.getLogger(logger_name)
    logger.setLevel(level)
    logger.propagate = False

    log_dir = os.path.dirname(log_file)
    os.makedirs(log_dir, exist_ok=True)

    # Remove existing handlers to avoid duplication
    if logger.hasHandlers():
        for handler in list(logger.handlers):
            handler.close()
        logger.handlers.clear()

    file_handler = RotatingFileHandler(log_file, maxBytes=5*1024*1024, backupCount=5, encoding='utf-8')
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(file_handler)

    # The CLI echoes progress itself, so the console only gets warnings and up by default
    if add_console_handler:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(max(level, console_level))
        console_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(console_handler)

    return logger

# Setup main application logger. Module loggers created through get_logger(__name__)
# live under this name and propagate their records to it.
main_log_file = os.path.join(LOGS_DIR, 'dumper.log')
logger = setup_logger(MAIN_LOGGER_NAME, main_log_file, LOG_LEVEL)

def get_logger(name: str = MAIN_LOGGER_NAME) -> logging.Logger:
    """
    Returns a logger that writes through the main application handlers.
    """
    return logging.getLogger(name)
