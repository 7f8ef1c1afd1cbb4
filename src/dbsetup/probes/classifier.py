import logging
from typing import Iterable, List, Optional

from pydantic import BaseModel

from ..config import WizardSettings
from ..domain.models import ErrorKind, QueryError

logger = logging.getLogger(__name__)


class ErrorPatterns(BaseModel):
    """
    Case-insensitive phrases that tell the store's freeform error text apart.
    Phrase matching is the only discriminator the store gives us.
    """
    absent: List[str] = ["does not exist"]
    permission_denied: List[str] = ["permission denied"]
    unreachable: List[str] = []

    @classmethod
    def from_settings(cls, settings: WizardSettings) -> "ErrorPatterns":
        return cls(
            absent=settings.absent_patterns,
            permission_denied=settings.permission_patterns,
            unreachable=settings.unreachable_patterns,
        )

    def with_absent(self, phrases: Iterable[str]) -> "ErrorPatterns":
        """Copy extended with a client's own wording for a missing relation."""
        extra = [p for p in phrases if p not in self.absent]
        if not extra:
            return self
        return self.model_copy(update={"absent": self.absent + extra})


def _matches(message: str, phrases: Iterable[str]) -> bool:
    lowered = message.lower()
    return any(p.lower() in lowered for p in phrases if p)


def classify_error(error: QueryError, patterns: Optional[ErrorPatterns] = None) -> ErrorKind:
    """
    Map a store error onto ErrorKind.

    Order: absent, permission denied, unreachable (phrase or transport flag),
    otherwise UNKNOWN. UNKNOWN is logged so it never passes silently.
    """
    patterns = patterns or ErrorPatterns()
    message = error.message or ""

    if _matches(message, patterns.absent):
        return ErrorKind.ABSENT
    if _matches(message, patterns.permission_denied):
        return ErrorKind.PERMISSION_DENIED
    if error.transport or _matches(message, patterns.unreachable):
        return ErrorKind.UNREACHABLE

    logger.warning(
        "Unclassified store error (code=%s, status=%s): %s",
        error.code, error.status_code, message,
    )
    return ErrorKind.UNKNOWN
