import logging
from typing import List, Tuple

logger = logging.getLogger(__name__)

class LoggingNotifier:
    """Default notifier: routes toast messages to the log."""
    def success(self, message: str) -> None:
        logger.info(message)

    def info(self, message: str) -> None:
        logger.info(message)

    def error(self, message: str) -> None:
        logger.error(message)

class RecordingNotifier:
    """Keeps (level, message) pairs; handy for callers that render later."""
    def __init__(self):
        self.messages: List[Tuple[str, str]] = []

    def success(self, message: str) -> None:
        self.messages.append(("success", message))

    def info(self, message: str) -> None:
        self.messages.append(("info", message))

    def error(self, message: str) -> None:
        self.messages.append(("error", message))
