"""Update decision engine — decides whether the user should be prompted.

The order of the checks matters:
  1. OS compatibility first: an update the device cannot install is never
     offered, however new it is.
  2. Newer-than-installed.
  3. Skip state last: a skip is tied to one version, so a later release
     prompts again.
"""

import logging
from dataclasses import replace
from datetime import datetime, timezone
from typing import Callable

from updatealert.config.preferences import PreferenceStore
from updatealert.core.eligibility import is_compatible, is_newer
from updatealert.core.models import (
    CatalogEntry, CheckFrequency, CheckState, Decision, DecisionKind,
)
from updatealert.core.version import VersionIdentifier, Ordering, compare

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UpdateDecisionEngine:
    """Evaluates catalog metadata against the installed version and stored state."""

    def __init__(self, store: PreferenceStore,
                 clock: Callable[[], datetime] = _utcnow):
        self._store = store
        self._clock = clock
        self.last_state: CheckState | None = None

    def evaluate(self, installed: VersionIdentifier, catalog: CatalogEntry,
                 device_os: VersionIdentifier, state: CheckState) -> Decision:
        """Return a fresh Decision and record the check timestamp."""
        decision = self._decide(installed, catalog, device_os, state)
        logger.info("Update decision: %s (installed %s, catalog %s, OS %s, min OS %s)",
                    decision.kind.value, installed, catalog.version,
                    device_os, catalog.minimum_os_version)

        self.last_state = replace(state, last_checked_at=self._clock())
        self._store.save(self.last_state)
        return decision

    @staticmethod
    def _decide(installed: VersionIdentifier, catalog: CatalogEntry,
                device_os: VersionIdentifier, state: CheckState) -> Decision:
        if not is_compatible(device_os, catalog.minimum_os_version):
            return Decision(DecisionKind.INCOMPATIBLE_OS)

        if not is_newer(installed, catalog.version):
            return Decision(DecisionKind.NO_UPDATE_AVAILABLE)

        if (state.skipped_version is not None
                and compare(state.skipped_version, catalog.version) is Ordering.EQUAL):
            return Decision(DecisionKind.ALREADY_SKIPPED)

        return Decision(DecisionKind.PROMPT_REQUIRED, entry=catalog)


def is_check_due(state: CheckState, frequency: CheckFrequency,
                 now: datetime | None = None) -> bool:
    """True when enough whole days have passed since the last check."""
    if state.last_checked_at is None or frequency is CheckFrequency.IMMEDIATELY:
        return True

    now = now or _utcnow()
    last = state.last_checked_at
    # Naive timestamps are taken as UTC
    if last.tzinfo is None:
        last = last.replace(tzinfo=timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    return (now - last).days >= frequency.value
