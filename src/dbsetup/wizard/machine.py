import logging
import threading
from typing import Optional
from ..config import WizardSettings
from ..connectors.factory import get_client
from ..domain.interfaces import ClientFactory, ConfigurationStore, Notifier
from ..domain.models import (
    Credentials,
    OperationOutcome,
    ProbeResult,
    Redirect,
    SchemaReport,
    SchemaStatus,
    WizardState,
)
from ..exceptions import ConnectivityError, InvalidTransition, ValidationError
from ..probes import ConnectivityProbe, SchemaProbe
from .notify import LoggingNotifier
from .progress import ProgressLog
from .state import PROBING_STATES, WizardEvent, next_state

logger = logging.getLogger(__name__)

OPERATION_IN_PROGRESS = "Another operation is already in progress"

class SetupWizard:
    """
    Orchestrates the onboarding flow: validates credentials, runs the
    connectivity and schema probes, keeps the progress log and the latest
    schema status, and persists the configuration.

    Every user-facing operation returns an OperationOutcome; probe failures
    are caught here and never escape to the caller.
    """
    def __init__(
        self,
        config_store: ConfigurationStore,
        client_factory: Optional[ClientFactory] = None,
        settings: Optional[WizardSettings] = None,
        notifier: Optional[Notifier] = None,
    ):
        self.settings = settings or WizardSettings()
        self.config_store = config_store
        self.client_factory = client_factory or (lambda creds: get_client(creds, self.settings))
        self.notifier = notifier or LoggingNotifier()

        self.credentials = Credentials()
        self.progress = ProgressLog()
        self.schema_status: Optional[SchemaStatus] = None
        self.schema_report: Optional[SchemaReport] = None

        self._state = WizardState.IDLE
        self._lock = threading.Lock()
        self._connectivity_probe = ConnectivityProbe(self.client_factory, self.settings)
        self._schema_probe = SchemaProbe(self.client_factory, self.settings)

    @property
    def state(self) -> WizardState:
        return self._state

    @property
    def is_busy(self) -> bool:
        return self._state in PROBING_STATES

    def set_credentials(self, endpoint: str, access_key: str) -> None:
        self.credentials = Credentials(endpoint=endpoint, access_key=access_key)

    def _fire(self, event: WizardEvent) -> WizardState:
        with self._lock:
            self._state = next_state(self._state, event)
            return self._state

    def _require_credentials(self) -> None:
        if not self.credentials.is_complete:
            raise ValidationError(f"Please enter {self.settings.store_name} URL and Anon Key")

    def _start(self, event: WizardEvent) -> Optional[OperationOutcome]:
        """Validate and enter a probing state; returns a rejection when that is not possible."""
        try:
            self._require_credentials()
            self._fire(event)
        except ValidationError as e:
            return self._reject(str(e))
        except InvalidTransition as e:
            logger.debug("Rejected %s: %s", event.value, e)
            return self._reject(OPERATION_IN_PROGRESS)
        return None

    def _reject(self, message: str) -> OperationOutcome:
        self.notifier.error(message)
        return OperationOutcome(ok=False, rejected=True, message=message)

    def test_connectivity(self) -> OperationOutcome:
        rejection = self._start(WizardEvent.TEST_REQUESTED)
        if rejection:
            return rejection

        self.progress.reset()
        self.progress.add(f"Testing connection to {self.settings.store_name}...")
        try:
            report = self._connectivity_probe.check(self.credentials)
        except ConnectivityError as e:
            self.progress.add(f"✗ Connection failed: {e}")
            self.notifier.error(f"Failed to connect: {e}")
            return OperationOutcome(ok=False, message=str(e), connectivity=e.report)
        except Exception as e:
            logger.exception("Connectivity test aborted")
            self.progress.add(f"✗ Connection failed: {e}")
            self.notifier.error(f"Failed to connect: {e}")
            return OperationOutcome(ok=False, message=str(e))
        finally:
            self._fire(WizardEvent.PROBE_RESOLVED)

        self.progress.add("✓ Connection successful!")
        self.notifier.success(f"Connection to {self.settings.store_name} verified!")
        return OperationOutcome(ok=True, connectivity=report)

    def detect_schema(self) -> OperationOutcome:
        rejection = self._start(WizardEvent.DETECT_REQUESTED)
        if rejection:
            return rejection

        self.progress.reset()
        self.progress.add("Detecting existing schema...")
        try:
            report = self._schema_probe.run(self.credentials)
        except Exception as e:
            logger.exception("Schema detection aborted")
            self.progress.add(f"✗ Detection failed: {e}")
            self.notifier.error("Failed to detect schema")
            return OperationOutcome(ok=False, message=str(e))
        finally:
            self._fire(WizardEvent.PROBE_RESOLVED)

        self.schema_report = report
        self.schema_status = report.status

        for check in report.checks:
            if check.result == ProbeResult.PRESENT:
                verdict = "✓ Found"
            elif check.result == ProbeResult.ABSENT:
                verdict = "✗ Missing"
            else:
                verdict = f"? Unverified ({check.error_message})"
            self.progress.add(f"{check.resource.label} table: {verdict}")

        self.progress.add("")
        if report.status.is_complete:
            self.progress.add("✓ Schema appears complete! You can connect directly.")
            self.notifier.success("Existing schema detected!")
        else:
            self.progress.add("Schema is incomplete. Run the SQL schema first.")
            self.notifier.info(f"Schema incomplete - run SQL in {self.settings.store_name} first")

        if report.ambiguous:
            labels = ", ".join(c.resource.label for c in report.ambiguous)
            self.notifier.info(f"Could not verify: {labels}")

        return OperationOutcome(ok=True, schema_report=report)

    def save_and_proceed(self) -> OperationOutcome:
        try:
            self._require_credentials()
        except ValidationError as e:
            return self._reject(str(e))

        # Held through the write so no probe can start mid-save
        with self._lock:
            try:
                self._state = next_state(self._state, WizardEvent.SAVE_REQUESTED)
            except InvalidTransition as e:
                logger.debug("Rejected save: %s", e)
                return self._reject(OPERATION_IN_PROGRESS)

            try:
                self.config_store.save(self.credentials)
            except Exception as e:
                logger.exception("Saving configuration failed")
                self.notifier.error(f"Failed to save configuration: {e}")
                return OperationOutcome(ok=False, message=str(e))

        self.notifier.success("Configuration saved! Redirecting...")
        redirect = Redirect(
            target=self.settings.redirect_target,
            delay_seconds=self.settings.redirect_delay_s,
        )
        return OperationOutcome(ok=True, redirect=redirect)

    def complete(self) -> None:
        """Completion signal from outside the probes (e.g. first account created)."""
        self._fire(WizardEvent.COMPLETED)

    def continue_to_app(self) -> Redirect:
        self._fire(WizardEvent.CONTINUE)
        return Redirect(target=self.settings.redirect_target)
