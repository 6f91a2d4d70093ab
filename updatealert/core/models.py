"""Update system data models."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from updatealert.core.version import VersionIdentifier


@dataclass(frozen=True)
class CatalogEntry:
    """Metadata about the version currently published in the catalog."""

    version: VersionIdentifier
    minimum_os_version: VersionIdentifier
    download_url: str = ""      # Store page the "Update" action navigates to
    release_notes: str = ""


@dataclass(frozen=True)
class CheckState:
    """Persisted outcome of previous checks. Empty on first run."""

    last_checked_at: datetime | None = None
    skipped_version: VersionIdentifier | None = None


class DecisionKind(Enum):
    NO_UPDATE_AVAILABLE = "no_update_available"
    PROMPT_REQUIRED = "prompt_required"
    ALREADY_SKIPPED = "already_skipped"
    INCOMPATIBLE_OS = "incompatible_os"


@dataclass(frozen=True)
class Decision:
    """Result of one evaluation. ``entry`` is set only for PROMPT_REQUIRED."""

    kind: DecisionKind
    entry: CatalogEntry | None = None

    @property
    def prompt_required(self) -> bool:
        return self.kind is DecisionKind.PROMPT_REQUIRED


class UserAction(Enum):
    UPDATE = "update"
    NEXT_TIME = "next_time"
    SKIP = "skip"


class AlertType(Enum):
    """Which actions the update alert offers."""
    FORCE = "force"         # Update only
    OPTION = "option"       # Update, Next time
    SKIP = "skip"           # Update, Next time, Skip this version
    NONE = "none"           # No alert; the host surfaces the update itself

    @property
    def actions(self) -> tuple[UserAction, ...]:
        return _ALERT_ACTIONS[self]


_ALERT_ACTIONS = {
    AlertType.FORCE: (UserAction.UPDATE,),
    AlertType.OPTION: (UserAction.UPDATE, UserAction.NEXT_TIME),
    AlertType.SKIP: (UserAction.UPDATE, UserAction.NEXT_TIME, UserAction.SKIP),
    AlertType.NONE: (),
}


class CheckFrequency(Enum):
    """Minimum number of whole days between catalog checks."""
    IMMEDIATELY = 0
    DAILY = 1
    WEEKLY = 7


class AlertState(Enum):
    IDLE = "idle"
    PRESENTING = "presenting"
    UPDATING = "updating"
    DEFERRED = "deferred"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class FetchFailure:
    """The catalog could not be queried or its answer could not be used."""
    reason: str


@dataclass(frozen=True)
class PresentationFailure:
    """The alert could not be shown, or was dismissed without a choice."""
    reason: str
    cancelled: bool = False


class InvalidTransition(RuntimeError):
    """Raised when the alert flow is driven from a state that forbids it."""


@dataclass(frozen=True)
class FlowResult:
    """Outcome of one AlertFlowController run."""

    state: AlertState
    check_state: CheckState
    entry: CatalogEntry | None = None
    action: UserAction | None = None
    failure: PresentationFailure | None = None

    @property
    def download_url(self) -> str:
        """Navigation target when the user chose Update, else ''."""
        if self.state is AlertState.UPDATING and self.entry is not None:
            return self.entry.download_url
        return ""
