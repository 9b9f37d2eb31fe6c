import logging
import sys


def setup_logging():
    """
    Configure logging for the application.

    Logs go to stdout so they are picked up by Docker / the process manager.
    SQLAlchemy engine logging is kept at WARNING to avoid echoing every query.
    """
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)]
    )

    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    return logging.getLogger("schoolhub")


# Create global logger instance
logger = setup_logging()
