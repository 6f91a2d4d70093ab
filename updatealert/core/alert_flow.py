"""Alert flow — the state machine behind the update prompt.

    IDLE --PROMPT_REQUIRED--> PRESENTING --Update----> UPDATING
                                         --Next time-> DEFERRED
                                         --Skip------> SKIPPED
    PRESENTING --failure/cancel--> IDLE

Skip is the only choice that is persisted. Nothing is written unless the
user actually picked an action while the alert was presenting.
"""

import logging
from dataclasses import replace
from typing import Protocol, Sequence

from updatealert.config.alert_config import AlertConfiguration
from updatealert.config.preferences import PreferenceStore
from updatealert.core.models import (
    AlertState, CatalogEntry, CheckState, Decision, FlowResult,
    InvalidTransition, PresentationFailure, UserAction,
)

logger = logging.getLogger(__name__)

_ACTION_STATES = {
    UserAction.UPDATE: AlertState.UPDATING,
    UserAction.NEXT_TIME: AlertState.DEFERRED,
    UserAction.SKIP: AlertState.SKIPPED,
}


class AlertPresenter(Protocol):
    """Display collaborator: shows the alert and reports the user's choice."""

    def present(self, config: AlertConfiguration, entry: CatalogEntry,
                actions: Sequence[UserAction]) -> UserAction | PresentationFailure: ...

    # Presenters may also define dismiss(), called when the host cancels
    # a pending alert so the dialog closes without a choice.


class AlertFlowController:
    """Drives one update prompt from decision to persisted outcome.

    Not reentrant: one controller presents at most one alert at a time.
    """

    def __init__(self, presenter: AlertPresenter, store: PreferenceStore,
                 config: AlertConfiguration | None = None):
        self._presenter = presenter
        self._store = store
        self._config = config or AlertConfiguration()
        self._state = AlertState.IDLE

    @property
    def state(self) -> AlertState:
        return self._state

    def run(self, decision: Decision, check_state: CheckState) -> FlowResult:
        """Present the alert for a PROMPT_REQUIRED decision and apply the choice."""
        if self._state is not AlertState.IDLE:
            raise InvalidTransition(f"Cannot start an alert flow while {self._state.value}")

        if not decision.prompt_required:
            return FlowResult(AlertState.IDLE, check_state)

        entry = decision.entry
        actions = self._config.alert_type.actions
        if not actions:
            logger.info("Alert type 'none': not presenting update to %s", entry.version)
            return FlowResult(AlertState.IDLE, check_state, entry=entry)

        self._state = AlertState.PRESENTING
        try:
            outcome = self._presenter.present(self._config, entry, actions)
        except Exception:
            self._state = AlertState.IDLE
            raise

        if self._state is not AlertState.PRESENTING:
            return self._fail(check_state, entry,
                              PresentationFailure("Cancelled by host", cancelled=True))
        if isinstance(outcome, PresentationFailure):
            return self._fail(check_state, entry, outcome)
        if outcome not in actions:
            return self._fail(check_state, entry,
                              PresentationFailure(f"Action {outcome!r} was not offered"))

        return self._choose(outcome, entry, check_state)

    def cancel(self) -> bool:
        """Abandon a presenting alert. Returns True if one was pending."""
        if self._state is not AlertState.PRESENTING:
            return False
        logger.info("Update alert cancelled by host")
        self._state = AlertState.IDLE
        dismiss = getattr(self._presenter, 'dismiss', None)
        if dismiss is not None:
            dismiss()
        return True

    def reset(self):
        """Return a finished controller to IDLE for the next cycle."""
        if self._state is AlertState.PRESENTING:
            raise InvalidTransition("Cannot reset while presenting; cancel() first")
        self._state = AlertState.IDLE

    def _fail(self, check_state: CheckState, entry: CatalogEntry,
              failure: PresentationFailure) -> FlowResult:
        logger.warning("Update alert not completed: %s", failure.reason)
        self._state = AlertState.IDLE
        return FlowResult(AlertState.IDLE, check_state, entry=entry, failure=failure)

    def _choose(self, action: UserAction, entry: CatalogEntry,
                check_state: CheckState) -> FlowResult:
        logger.info("User chose %s for version %s", action.value, entry.version)

        if action is UserAction.SKIP:
            check_state = replace(check_state, skipped_version=entry.version)
            try:
                self._store.save(check_state)
            except Exception:
                self._state = AlertState.IDLE
                raise

        self._state = _ACTION_STATES[action]
        return FlowResult(self._state, check_state, entry=entry, action=action)
