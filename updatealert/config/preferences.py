"""Update preferences — persistence via JSON.

The decision core only sees the PreferenceStore interface (load/save of a
CheckState). JsonPreferenceStore keeps the check state together with the
alert type and check frequency in one settings file.
"""

import json
import logging
import os
from dataclasses import dataclass, asdict, replace
from datetime import datetime
from typing import Protocol

from updatealert.core.models import AlertType, CheckFrequency, CheckState
from updatealert.core.version import ParseFailure, VersionIdentifier

logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR = os.path.join(os.environ.get('LOCALAPPDATA', '.'), 'UpdateAlert')


class PreferenceStore(Protocol):
    """Durable, synchronous storage for CheckState."""

    def load(self) -> CheckState: ...

    def save(self, state: CheckState) -> None: ...


@dataclass
class UpdatePreferences:
    """Persistent update preferences, stored as plain JSON values."""
    alert_type: str = AlertType.SKIP.value
    check_frequency: int = CheckFrequency.IMMEDIATELY.value
    last_checked_at: str = ""           # ISO 8601, '' = never
    skipped_version: str = ""           # '' = nothing skipped

    @staticmethod
    def load(path: str) -> 'UpdatePreferences':
        """Load preferences from JSON. Returns defaults if file doesn't exist."""
        if not os.path.isfile(path):
            logger.info("No preferences file, using defaults")
            return UpdatePreferences()

        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            prefs = UpdatePreferences(**{k: v for k, v in data.items()
                                         if k in UpdatePreferences.__dataclass_fields__})
            logger.info("Loaded preferences from %s", path)
            return prefs
        except (OSError, ValueError, TypeError, AttributeError) as e:
            logger.warning("Failed to load preferences: %s", e)
            return UpdatePreferences()

    def save(self, path: str):
        """Save preferences to JSON. Write errors propagate to the caller."""
        os.makedirs(os.path.dirname(path) or '.', exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(asdict(self), f, indent=2)
        logger.info("Saved preferences to %s", path)

    @property
    def alert(self) -> AlertType:
        try:
            return AlertType(self.alert_type)
        except ValueError:
            logger.warning("Unknown alert type %r, using default", self.alert_type)
            return AlertType.SKIP

    @property
    def frequency(self) -> CheckFrequency:
        try:
            return CheckFrequency(self.check_frequency)
        except ValueError:
            logger.warning("Unknown check frequency %r, using default", self.check_frequency)
            return CheckFrequency.IMMEDIATELY

    def to_check_state(self) -> CheckState:
        last_checked = None
        if self.last_checked_at:
            try:
                last_checked = datetime.fromisoformat(self.last_checked_at)
            except (ValueError, TypeError):
                logger.warning("Ignoring bad last check date %r", self.last_checked_at)

        skipped = None
        if self.skipped_version:
            try:
                skipped = VersionIdentifier.parse(self.skipped_version)
            except ParseFailure:
                logger.warning("Ignoring bad skipped version %r", self.skipped_version)

        return CheckState(last_checked_at=last_checked, skipped_version=skipped)

    def with_check_state(self, state: CheckState) -> 'UpdatePreferences':
        """Copy of these preferences carrying ``state`` in the persisted fields."""
        return replace(
            self,
            last_checked_at=state.last_checked_at.isoformat() if state.last_checked_at else "",
            skipped_version=str(state.skipped_version) if state.skipped_version else "",
        )


class JsonPreferenceStore:
    """PreferenceStore backed by a JSON file."""

    def __init__(self, path: str | None = None):
        self.path = path or os.path.join(DEFAULT_DATA_DIR, 'preferences.json')
        self.preferences = UpdatePreferences.load(self.path)

    def load(self) -> CheckState:
        return self.preferences.to_check_state()

    def save(self, state: CheckState) -> None:
        # Only adopt the new preferences once they are on disk
        updated = self.preferences.with_check_state(state)
        updated.save(self.path)
        self.preferences = updated


class MemoryPreferenceStore:
    """PreferenceStore that keeps state for the current session only."""

    def __init__(self, state: CheckState | None = None):
        self.state = state or CheckState()

    def load(self) -> CheckState:
        return self.state

    def save(self, state: CheckState) -> None:
        self.state = state
