"""UpdateAlert — entry point. Runs one update check cycle."""

import os
import sys
import logging
from typing import Callable

from updatealert.branding import AppBranding
from updatealert.config.alert_config import AlertConfiguration
from updatealert.config.preferences import DEFAULT_DATA_DIR, JsonPreferenceStore, PreferenceStore
from updatealert.core.alert_flow import AlertFlowController, AlertPresenter
from updatealert.core.decision import UpdateDecisionEngine, is_check_due
from updatealert.core.models import CatalogEntry, FetchFailure, FlowResult
from updatealert.core.version import VersionIdentifier

logger = logging.getLogger(__name__)


def setup_logging(data_dir: str):
    """Configure logging to file and console."""
    log_dir = os.path.join(data_dir, 'logs')
    os.makedirs(log_dir, exist_ok=True)
    log_file = os.path.join(log_dir, 'updatealert.log')

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        handlers=[
            logging.FileHandler(log_file, encoding='utf-8'),
            logging.StreamHandler(),
        ],
    )


def run_update_cycle(entry: CatalogEntry, store: PreferenceStore,
                     presenter: AlertPresenter, config: AlertConfiguration,
                     installed: VersionIdentifier,
                     device_os: VersionIdentifier,
                     engine: UpdateDecisionEngine | None = None) -> FlowResult:
    """Evaluate a fetched catalog entry and, if needed, prompt the user."""
    engine = engine or UpdateDecisionEngine(store)
    decision = engine.evaluate(installed, entry, device_os, store.load())
    controller = AlertFlowController(presenter, store, config)
    return controller.run(decision, engine.last_state)


def complete_cycle(entry: CatalogEntry, store: PreferenceStore,
                   presenter: AlertPresenter, config: AlertConfiguration,
                   open_url: Callable[[str], object],
                   installed: VersionIdentifier,
                   device_os: VersionIdentifier) -> FlowResult | None:
    """Run the cycle for a fetched entry from a Qt slot.

    Errors are logged rather than raised: an exception escaping a PyQt6
    slot aborts the process.
    """
    try:
        result = run_update_cycle(entry, store, presenter, config, installed, device_os)
    except Exception as e:
        logger.warning("Update cycle failed: %s", e, exc_info=True)
        return None

    if result.download_url:
        open_url(result.download_url)
    return result


def abort_cycle(failure: FetchFailure):
    logger.warning("Update check aborted: %s", failure.reason)


def main():
    store = JsonPreferenceStore(os.path.join(DEFAULT_DATA_DIR, 'preferences.json'))
    setup_logging(DEFAULT_DATA_DIR)
    logger.info("%s %s checking for updates", AppBranding.APP_NAME, AppBranding.VERSION)

    prefs = store.preferences
    if not is_check_due(store.load(), prefs.frequency):
        logger.info("Last check is recent enough (%s), skipping", prefs.frequency.name.lower())
        return

    from PyQt6.QtCore import QUrl
    from PyQt6.QtGui import QDesktopServices
    from PyQt6.QtWidgets import QApplication
    from updatealert.core.catalog import CatalogClient, get_catalog_worker_class
    from updatealert.ui.update_dialog import QtAlertPresenter

    app = QApplication(sys.argv)
    app.setApplicationName(AppBranding.APP_NAME)
    app.setOrganizationName(AppBranding.PUBLISHER)

    config = AlertConfiguration(alert_type=prefs.alert)
    presenter = QtAlertPresenter()

    def on_entry(entry: CatalogEntry):
        complete_cycle(entry, store, presenter, config,
                       lambda url: QDesktopServices.openUrl(QUrl(url)),
                       AppBranding.installed_version(), AppBranding.os_version())
        app.quit()

    def on_failure(failure: FetchFailure):
        abort_cycle(failure)
        app.quit()

    worker = get_catalog_worker_class()(CatalogClient(AppBranding.BUNDLE_ID))
    worker.entry_fetched.connect(on_entry)
    worker.fetch_failed.connect(on_failure)
    worker.start()

    exit_code = app.exec()
    worker.wait()
    sys.exit(exit_code)


if __name__ == '__main__':
    main()
