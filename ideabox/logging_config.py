import logging
import sys


def setup_logging(level=logging.INFO):
    """
    Configure the root logger.
    Format: 2026-03-21 10:00:00.123 | INFO    | module:function:line - message
    """
    log_format = "%(asctime)s.%(msecs)03d | %(levelname)-7s | %(name)s:%(funcName)s:%(lineno)d - %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"

    handler = logging.StreamHandler(sys.stdout)
    formatter = logging.Formatter(fmt=log_format, datefmt=date_format)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()

    # Avoid duplicate lines when called more than once (reload, tests)
    if root_logger.hasHandlers():
        root_logger.handlers.clear()

    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)

    for logger_name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        uvicorn_logger = logging.getLogger(logger_name)
        if uvicorn_logger.handlers:
            uvicorn_logger.handlers[0].setFormatter(formatter)

    logging.info("Logging initialized at %s", logging.getLevelName(root_logger.level))
    return root_logger
