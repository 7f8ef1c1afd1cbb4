import logging
import time
from typing import Optional
from ..config import WizardSettings
from ..domain.interfaces import ClientFactory
from ..domain.models import ConnectivityReport, Credentials, ErrorKind
from ..exceptions import ConnectivityError, ProbeClassificationAmbiguity
from .classifier import ErrorPatterns, classify_error

logger = logging.getLogger(__name__)

# Store answered meaningfully: the probe relation is absent or access control kicked in
_REACHABLE_KINDS = (ErrorKind.ABSENT, ErrorKind.PERMISSION_DENIED)

class ConnectivityProbe:
    """
    Confirms the store can be reached and authenticated against,
    independent of schema state, with one read of a relation that
    should not exist.
    """
    def __init__(self, client_factory: ClientFactory, settings: Optional[WizardSettings] = None):
        self.client_factory = client_factory
        self.settings = settings or WizardSettings()
        self.patterns = ErrorPatterns.from_settings(self.settings)

    def run(self, credentials: Credentials) -> ConnectivityReport:
        client = self.client_factory(credentials)
        patterns = self.patterns.with_absent(getattr(client, "absent_phrases", ()))
        start_time = time.time()
        try:
            result = client.query(self.settings.connectivity_resource, projection="*", limit=1)
        finally:
            client.close()
        latency = round((time.time() - start_time) * 1000, 2)

        if result.error is None:
            return ConnectivityReport(reachable=True, latency_ms=latency)

        kind = classify_error(result.error, patterns)
        logger.debug("Connectivity probe error classified as %s: %s", kind.value, result.error.message)
        return ConnectivityReport(
            reachable=kind in _REACHABLE_KINDS,
            error_kind=kind,
            error_message=result.error.message,
            latency_ms=latency,
        )

    def check(self, credentials: Credentials) -> ConnectivityReport:
        """Like run(), but raises ConnectivityError carrying the store's message verbatim."""
        report = self.run(credentials)
        if report.reachable:
            return report
        if report.error_kind == ErrorKind.UNKNOWN:
            raise ProbeClassificationAmbiguity(report.error_message, report=report)
        raise ConnectivityError(report.error_message, report=report)
