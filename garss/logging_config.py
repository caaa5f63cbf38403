"""Logging configuration for ga-rss."""
import logging


def setup_logging(level: str | int = logging.INFO) -> logging.Logger:
    """Send log records to the console as plain progress lines.

    Existing root handlers are removed so repeated calls do not duplicate
    output.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(
        logging.Formatter("[%(asctime)s] %(message)s", datefmt="%H:%M:%S")
    )
    root_logger.addHandler(console_handler)

    # httpx logs every request at INFO, which duplicates our progress lines
    logging.getLogger("httpx").setLevel(logging.WARNING)
    return root_logger
