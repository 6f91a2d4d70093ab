"""Tests for ui/update_dialog.py."""

import os

import pytest

from updatealert.config.alert_config import AlertConfiguration, AlertText
from updatealert.core.models import AlertType, PresentationFailure, UserAction
from updatealert.ui.update_dialog import QtAlertPresenter, button_specs, tint_stylesheet


@pytest.fixture(scope="module")
def qt_app():
    os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
    QtWidgets = pytest.importorskip("PyQt6.QtWidgets")
    return QtWidgets.QApplication.instance() or QtWidgets.QApplication([])


TEXT = AlertText(title="T", message="M", update="Go", next_time="Later", skip="Never")


class TestButtonSpecs:
    def test_all_actions(self):
        specs = button_specs(TEXT, AlertType.SKIP.actions)
        assert specs == [
            (UserAction.UPDATE, "Go", "AcceptRole"),
            (UserAction.NEXT_TIME, "Later", "RejectRole"),
            (UserAction.SKIP, "Never", "DestructiveRole"),
        ]

    def test_force_has_single_button(self):
        assert button_specs(TEXT, AlertType.FORCE.actions) == [
            (UserAction.UPDATE, "Go", "AcceptRole")]


class TestTintStylesheet:
    def test_none_means_platform_default(self):
        assert tint_stylesheet(None) == ""

    def test_color_applied_to_buttons(self):
        assert "color: #FF9500" in tint_stylesheet("#FF9500")


class TestQtAlertPresenter:
    """Runs the real QMessageBox path on the offscreen platform."""

    def test_no_application_is_failure(self, entry):
        QtWidgets = pytest.importorskip("PyQt6.QtWidgets")
        if QtWidgets.QApplication.instance() is not None:
            pytest.skip("a QApplication already exists in this process")
        result = QtAlertPresenter().present(AlertConfiguration(), entry, AlertType.SKIP.actions)
        assert isinstance(result, PresentationFailure)
        assert not result.cancelled

    def test_dismissed_without_button_is_cancelled(self, qt_app, entry, monkeypatch):
        from PyQt6.QtWidgets import QMessageBox
        monkeypatch.setattr(QMessageBox, "exec", lambda self: 0)
        result = QtAlertPresenter().present(AlertConfiguration(), entry, AlertType.SKIP.actions)
        assert isinstance(result, PresentationFailure)
        assert result.cancelled

    def test_clicked_button_maps_to_action(self, qt_app, entry, monkeypatch):
        from PyQt6.QtWidgets import QMessageBox

        def click_skip(box):
            for button in box.buttons():
                if button.text() == "Skip this version":
                    button.click()
            return 0

        monkeypatch.setattr(QMessageBox, "exec", click_skip)
        result = QtAlertPresenter().present(AlertConfiguration(), entry, AlertType.SKIP.actions)
        assert result is UserAction.SKIP

    def test_dismiss_closes_open_dialog(self, qt_app, entry, monkeypatch):
        from PyQt6.QtWidgets import QMessageBox, QDialog
        presenter = QtAlertPresenter()
        results = []

        def dismiss_while_open(box):
            box.setResult(5)
            presenter.dismiss()
            results.append(box.result())
            return box.result()

        monkeypatch.setattr(QMessageBox, "exec", dismiss_while_open)
        result = presenter.present(AlertConfiguration(), entry, AlertType.SKIP.actions)
        assert results == [QDialog.DialogCode.Rejected.value]
        assert result.cancelled
        # Nothing on screen any more; a late dismiss is a no-op
        presenter.dismiss()
