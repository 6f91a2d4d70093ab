"""Catalog lookup — fetches the published version for a bundle identifier.

Architecture:
  CatalogClient — pure Python logic (no Qt dependency), blocking fetch
  CatalogWorker — QThread wrapper with pyqtSignal for thread-safe UI updates

Every failure comes back as a FetchFailure value; nothing is retried here.
"""

import json
import logging
from urllib.parse import urlencode
from urllib.request import Request, urlopen
from urllib.error import URLError

from updatealert.branding import AppBranding
from updatealert.core.models import CatalogEntry, FetchFailure
from updatealert.core.version import ParseFailure, VersionIdentifier

logger = logging.getLogger(__name__)

LOOKUP_URL = "https://itunes.apple.com/lookup"
REQUEST_TIMEOUT = 30


def parse_lookup_payload(payload) -> CatalogEntry | FetchFailure:
    """Turn a decoded lookup response into a CatalogEntry."""
    if not isinstance(payload, dict):
        return FetchFailure("Lookup response is not a JSON object")

    results = payload.get('results')
    if not isinstance(results, list) or not results:
        return FetchFailure("No results for this bundle identifier")

    result = results[0]
    if not isinstance(result, dict):
        return FetchFailure("Malformed lookup result")

    raw_version = result.get('version')
    if not raw_version:
        return FetchFailure("Lookup result has no version")
    raw_min_os = result.get('minimumOsVersion')
    if not raw_min_os:
        return FetchFailure("Lookup result has no minimum OS version")

    try:
        version = VersionIdentifier.parse(raw_version)
        minimum_os = VersionIdentifier.parse(raw_min_os)
    except ParseFailure as e:
        return FetchFailure(str(e))

    # Optional fields of the wrong type are dropped, not fatal
    download_url = result.get('trackViewUrl')
    if not isinstance(download_url, str):
        download_url = ''
    release_notes = result.get('releaseNotes')
    if not isinstance(release_notes, str):
        release_notes = ''

    return CatalogEntry(
        version=version,
        minimum_os_version=minimum_os,
        download_url=download_url,
        release_notes=release_notes.strip(),
    )


class CatalogClient:
    """Queries the app catalog for the current published version.

    All methods are synchronous (blocking) — designed to run in a QThread.
    """

    def __init__(self, bundle_id: str, country: str | None = None,
                 lookup_url: str = LOOKUP_URL):
        self.bundle_id = bundle_id
        self.country = country
        self.lookup_url = lookup_url

    def build_url(self) -> str:
        params = {'bundleId': self.bundle_id}
        if self.country:
            params['country'] = self.country
        return f"{self.lookup_url}?{urlencode(params)}"

    def fetch(self) -> CatalogEntry | FetchFailure:
        """Fetch and parse the catalog entry. Never raises for network errors."""
        req = Request(self.build_url(), headers={
            'User-Agent': AppBranding.user_agent(),
            'Accept': 'application/json',
        })

        try:
            with urlopen(req, timeout=REQUEST_TIMEOUT) as resp:
                payload = json.loads(resp.read().decode('utf-8'))
        except (URLError, OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning("Failed to fetch catalog entry: %s", e)
            return FetchFailure(f"Catalog request failed: {e}")

        result = parse_lookup_payload(payload)
        if isinstance(result, FetchFailure):
            logger.warning("Unusable catalog entry for %s: %s", self.bundle_id, result.reason)
        else:
            logger.info("Catalog version for %s: %s (min OS %s)",
                        self.bundle_id, result.version, result.minimum_os_version)
        return result


def fetch_guarded(client: CatalogClient) -> CatalogEntry | FetchFailure:
    """Run ``client.fetch()``, turning any unexpected error into a FetchFailure."""
    try:
        return client.fetch()
    except Exception as e:
        logger.warning("Catalog fetch raised: %s", e, exc_info=True)
        return FetchFailure(f"Catalog fetch raised: {e}")


# ── QThread Worker ───────────────────────────────────────────────────

# The worker class is built on first use so that CatalogClient and the
# rest of this module import without PyQt6 installed.

def _build_worker_class():
    """Define CatalogWorker against the PyQt6 QThread API."""
    from PyQt6.QtCore import QThread, pyqtSignal

    class CatalogWorker(QThread):
        """Runs one catalog fetch off the UI thread.

        Exactly one of the two signals fires per run; Qt delivers it on the
        thread that owns the worker.
        """

        entry_fetched = pyqtSignal(object)      # CatalogEntry
        fetch_failed = pyqtSignal(object)       # FetchFailure

        def __init__(self, client: CatalogClient, parent=None):
            super().__init__(parent)
            self._client = client

        def run(self):
            result = fetch_guarded(self._client)
            if isinstance(result, FetchFailure):
                self.fetch_failed.emit(result)
            else:
                self.entry_fetched.emit(result)

    return CatalogWorker


_CatalogWorkerClass = None


def get_catalog_worker_class():
    """Return the CatalogWorker class, importing PyQt6 the first time."""
    global _CatalogWorkerClass
    if _CatalogWorkerClass is None:
        _CatalogWorkerClass = _build_worker_class()
    return _CatalogWorkerClass
