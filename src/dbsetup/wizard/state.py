from enum import Enum
from typing import Dict, Tuple
from ..domain.models import WizardState
from ..exceptions import InvalidTransition

class WizardEvent(str, Enum):
    TEST_REQUESTED = "test_requested"
    DETECT_REQUESTED = "detect_requested"
    PROBE_RESOLVED = "probe_resolved"
    COMPLETED = "completed"
    CONTINUE = "continue"
    SAVE_REQUESTED = "save_requested"

TRANSITIONS: Dict[Tuple[WizardState, WizardEvent], WizardState] = {
    (WizardState.IDLE, WizardEvent.TEST_REQUESTED): WizardState.CONNECTIVITY_TESTING,
    (WizardState.IDLE, WizardEvent.DETECT_REQUESTED): WizardState.SCHEMA_DETECTING,
    (WizardState.CONNECTIVITY_TESTING, WizardEvent.PROBE_RESOLVED): WizardState.IDLE,
    (WizardState.SCHEMA_DETECTING, WizardEvent.PROBE_RESOLVED): WizardState.IDLE,
    (WizardState.IDLE, WizardEvent.COMPLETED): WizardState.SUCCESS,
    (WizardState.SUCCESS, WizardEvent.CONTINUE): WizardState.SUCCESS,
    (WizardState.IDLE, WizardEvent.SAVE_REQUESTED): WizardState.IDLE,
}

PROBING_STATES = frozenset({WizardState.CONNECTIVITY_TESTING, WizardState.SCHEMA_DETECTING})

def next_state(state: WizardState, event: WizardEvent) -> WizardState:
    try:
        return TRANSITIONS[(state, event)]
    except KeyError:
        raise InvalidTransition(f"Event '{event.value}' is not allowed in state '{state.value}'")
