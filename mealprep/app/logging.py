import logging

from rich.logging import RichHandler

# Client libraries that log every request at INFO/DEBUG
CHATTY_LOGGERS = ("httpx", "httpcore", "openai", "sqlalchemy.engine")


def configure_logging(level: int | str = logging.INFO, library_level: int = logging.WARNING) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        handlers=[RichHandler(rich_tracebacks=True)],
    )
    for name in CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(library_level)
