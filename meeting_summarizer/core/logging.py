import logging
import uuid

from meeting_summarizer.core.config import LOG_LEVEL


def setup_logging() -> None:
    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def new_request_id() -> str:
    return uuid.uuid4().hex[:12]
