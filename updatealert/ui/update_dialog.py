"""Update alert dialog — the Qt display collaborator for AlertFlowController.

A modal QMessageBox with one button per offered action. Closing the dialog
without pressing a button reports a cancelled PresentationFailure.
"""

import logging
from typing import Sequence

from updatealert.config.alert_config import AlertConfiguration, AlertText, Localizer, system_locale
from updatealert.core.models import CatalogEntry, PresentationFailure, UserAction

logger = logging.getLogger(__name__)

# QMessageBox.ButtonRole member names, resolved lazily in present()
_ACTION_ROLES = {
    UserAction.UPDATE: 'AcceptRole',
    UserAction.NEXT_TIME: 'RejectRole',
    UserAction.SKIP: 'DestructiveRole',
}


def button_specs(text: AlertText, actions: Sequence[UserAction]) -> list[tuple[UserAction, str, str]]:
    """(action, label, role name) for each offered action, in display order."""
    labels = {
        UserAction.UPDATE: text.update,
        UserAction.NEXT_TIME: text.next_time,
        UserAction.SKIP: text.skip,
    }
    return [(action, labels[action], _ACTION_ROLES[action]) for action in actions]


def tint_stylesheet(tint_color: str | None) -> str:
    if not tint_color:
        return ""
    return f"QPushButton {{ color: {tint_color}; font-weight: bold; }}"


class QtAlertPresenter:
    """Shows the update alert as a modal QMessageBox."""

    def __init__(self, parent=None, localizer: Localizer | None = None):
        self._parent = parent
        self._localizer = localizer
        self._box = None
        self._dismissed = False

    def present(self, config: AlertConfiguration, entry: CatalogEntry,
                actions: Sequence[UserAction]) -> UserAction | PresentationFailure:
        from PyQt6.QtWidgets import QApplication, QMessageBox

        if QApplication.instance() is None:
            return PresentationFailure("No QApplication is running")

        text = config.resolve_text(entry, self._localizer, system_locale())

        box = QMessageBox(self._parent)
        box.setIcon(QMessageBox.Icon.Information)
        box.setWindowTitle(text.title)
        box.setText(text.message)
        if entry.release_notes:
            box.setDetailedText(entry.release_notes)
        box.setStyleSheet(tint_stylesheet(config.tint_color))

        buttons = {}
        for action, label, role in button_specs(text, actions):
            button = box.addButton(label, getattr(QMessageBox.ButtonRole, role))
            buttons[button] = action
            if action is UserAction.UPDATE:
                box.setDefaultButton(button)

        self._box = box
        self._dismissed = False
        try:
            box.exec()
        finally:
            self._box = None
        action = buttons.get(box.clickedButton())
        if action is None or self._dismissed:
            return PresentationFailure("Alert dismissed without a choice", cancelled=True)
        return action

    def dismiss(self):
        """Close the alert currently on screen, if any, without a choice."""
        if self._box is not None:
            self._dismissed = True
            self._box.reject()
