"""Shared fakes for the store and display collaborators."""

import pytest

from updatealert.core.models import CatalogEntry, CheckState, PresentationFailure
from updatealert.core.version import VersionIdentifier


def v(text: str) -> VersionIdentifier:
    return VersionIdentifier.parse(text)


class RecordingStore:
    """PreferenceStore that records every save."""

    def __init__(self, state: CheckState | None = None):
        self.state = state or CheckState()
        self.saved: list[CheckState] = []

    def load(self) -> CheckState:
        return self.state

    def save(self, state: CheckState) -> None:
        self.saved.append(state)
        self.state = state


class ScriptedPresenter:
    """Display collaborator that returns a fixed outcome."""

    def __init__(self, outcome=None, on_present=None):
        self.outcome = outcome
        self.on_present = on_present
        self.calls = []

    def present(self, config, entry, actions):
        self.calls.append((config, entry, tuple(actions)))
        if self.on_present:
            self.on_present()
        if self.outcome is None:
            return PresentationFailure("No host window")
        return self.outcome


@pytest.fixture
def store():
    return RecordingStore()


@pytest.fixture
def entry():
    return CatalogEntry(version=v("2.1"), minimum_os_version=v("13.0"),
                        download_url="https://apps.example.com/app/id123")
