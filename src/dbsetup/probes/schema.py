import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, Optional
from ..config import WizardSettings
from ..domain.interfaces import ClientFactory
from ..domain.models import (
    EXPECTED_RESOURCES,
    Credentials,
    ErrorKind,
    ExpectedResource,
    ProbeResult,
    QueryResult,
    ResourceCheck,
    SchemaReport,
    SchemaStatus,
)
from .classifier import ErrorPatterns, classify_error

logger = logging.getLogger(__name__)

class SchemaProbe:
    """
    Checks that every expected relation exists, one read per relation,
    all issued concurrently.
    """
    def __init__(self, client_factory: ClientFactory, settings: Optional[WizardSettings] = None):
        self.client_factory = client_factory
        self.settings = settings or WizardSettings()
        self.patterns = ErrorPatterns.from_settings(self.settings)
        self.resources = EXPECTED_RESOURCES

    def classify(
        self, result: QueryResult, resource: ExpectedResource, patterns: Optional[ErrorPatterns] = None
    ) -> ResourceCheck:
        if result.error is None:
            return ResourceCheck(resource=resource, result=ProbeResult.PRESENT)

        kind = classify_error(result.error, patterns or self.patterns)
        if kind == ErrorKind.ABSENT:
            outcome = ProbeResult.ABSENT
        elif kind == ErrorKind.PERMISSION_DENIED:
            # The relation exists, row access is just denied
            outcome = ProbeResult.PRESENT
        else:
            outcome = ProbeResult.AMBIGUOUS
            logger.warning(
                "Could not verify %s (%s): %s", resource.name, kind.value, result.error.message
            )

        return ResourceCheck(
            resource=resource,
            result=outcome,
            error_kind=kind,
            error_message=result.error.message,
        )

    def run(self, credentials: Credentials) -> SchemaReport:
        """
        Fan out one query per resource and fold the answers into a SchemaReport.
        Client construction errors and unexpected client exceptions propagate;
        no partial report is produced in that case.
        """
        client = self.client_factory(credentials)
        patterns = self.patterns.with_absent(getattr(client, "absent_phrases", ()))
        try:
            max_workers = max(1, min(self.settings.max_workers, len(self.resources)))
            with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="schema-probe") as pool:
                futures = {
                    res.name: pool.submit(client.query, res.name, self.settings.schema_projection, 1)
                    for res in self.resources
                }
                results: Dict[str, QueryResult] = {name: f.result() for name, f in futures.items()}
        finally:
            client.close()

        checks = [self.classify(results[res.name], res, patterns) for res in self.resources]
        flags = {check.resource.field: self._is_present(check) for check in checks}
        status = SchemaStatus.from_flags(flags)
        logger.info(
            "Schema detection finished: complete=%s missing=%s", status.is_complete, status.missing
        )
        return SchemaReport(status=status, checks=checks)

    def _is_present(self, check: ResourceCheck) -> bool:
        if check.result == ProbeResult.AMBIGUOUS:
            return self.settings.lenient_classification
        return check.result == ProbeResult.PRESENT
