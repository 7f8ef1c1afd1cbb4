from .machine import OPERATION_IN_PROGRESS, SetupWizard
from .progress import ProgressLog
from .state import TRANSITIONS, WizardEvent

__all__ = ["OPERATION_IN_PROGRESS", "SetupWizard", "ProgressLog", "TRANSITIONS", "WizardEvent"]
