import logging.config
import os
import sys
from pathlib import Path

import yaml

DEFAULT_LOGGING_CONFIG = Path(__file__).resolve().parent.parent / "config" / "logging.yml"
FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s [%(module)s:%(lineno)d]: %(message)s"

_LEVELS = {
    "CRITICAL": logging.CRITICAL,
    "ERROR": logging.ERROR,
    "WARNING": logging.WARNING,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
}


def log_level_from_env():
    return _LEVELS.get(os.environ.get("POSITBENCH_LOG_LEVEL", "INFO").upper(), logging.INFO)


def _configure_fallback_console():
    logging.basicConfig(
        level=log_level_from_env(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
        force=True,
    )


class MasterLogger:
    """Process-wide logging facade. Configured lazily on first use from
    config/logging.yml (or $POSITBENCH_LOG_CONFIG)."""
    _logger = None
    _initialized = False

    @classmethod
    def _initialize(cls):
        if not cls._initialized:
            config_path = os.environ.get("POSITBENCH_LOG_CONFIG", str(DEFAULT_LOGGING_CONFIG))
            try:
                with open(config_path, "r") as f:
                    config = yaml.safe_load(f.read())
                logging.config.dictConfig(config)
            except Exception as e:
                _configure_fallback_console()
                logging.getLogger(__name__).warning(
                    f"[MasterLogger] Falling back to console logging; failed to apply {config_path}: {e}"
                )
            cls._logger = logging.getLogger("positbench")
            cls._initialized = True
            cls._logger.setLevel(log_level_from_env())

    @classmethod
    def add_file_handler(cls, filename) -> logging.Handler:
        """Also write positbench log records to `filename` (parent dirs are created)."""
        cls._initialize()
        path = os.path.normpath(os.path.expanduser(os.path.expandvars(str(filename))))
        parent = os.path.dirname(path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        handler = logging.FileHandler(path, encoding="utf-8")
        handler.setFormatter(logging.Formatter(FILE_FORMAT))
        cls._logger.addHandler(handler)
        return handler

    @classmethod
    def debug(cls, st):
        cls._initialize()
        cls._logger.debug(st)

    @classmethod
    def info(cls, st):
        cls._initialize()
        cls._logger.info(st)

    @classmethod
    def warning(cls, st):
        cls._initialize()
        cls._logger.warning(st)

    @classmethod
    def error(cls, st):
        cls._initialize()
        cls._logger.error(st)
