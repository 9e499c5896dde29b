import logging
import os
import sys
from logging.handlers import RotatingFileHandler

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_configured = False


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() == "true"


def _add_handler(root: logging.Logger, handler: logging.Handler, level: int):
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)


def setup_logging():
    """
    Configure the root logger once from SHOP_LOG_* env vars.
    Console logs go to stderr since stdout carries the CLI's output.
    """
    global _configured
    if _configured:
        return

    level = getattr(logging, os.getenv("SHOP_LOG_LEVEL", "INFO").upper(), logging.INFO)
    log_file = os.getenv("SHOP_LOG_FILE", "/data/shopcore.log")

    root = logging.getLogger()
    root.setLevel(level)

    # Avoid duplicate handlers when embedded in an app that configured logging
    if not root.handlers:
        if _flag("SHOP_LOG_TO_STDERR", "true"):
            _add_handler(root, logging.StreamHandler(sys.stderr), level)

        if _flag("SHOP_LOG_TO_FILE", "true"):
            try:
                os.makedirs(os.path.dirname(log_file) or ".", exist_ok=True)
                fh = RotatingFileHandler(
                    log_file,
                    maxBytes=int(os.getenv("SHOP_LOG_MAX_BYTES", str(1024 * 1024))),
                    backupCount=int(os.getenv("SHOP_LOG_BACKUPS", "3")),
                )
                _add_handler(root, fh, level)
            except OSError as e:
                root.warning("Failed to initialize file logging at %s: %s", log_file, e)

    _configured = True


def get_logger(name: str | None = None) -> logging.Logger:
    setup_logging()
    return logging.getLogger(name)
