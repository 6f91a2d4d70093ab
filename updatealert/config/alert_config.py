"""Alert messaging configuration.

Every string has a built-in English default that is looked up through a
Localizer. Overriding a string replaces it verbatim (and loses the built-in
translations for that string only); the other strings keep their defaults.
"""

import locale
from dataclasses import dataclass
from typing import Mapping, Protocol

from updatealert.branding import AppBranding
from updatealert.core.models import AlertType, CatalogEntry


class Constants:
    """Default English strings. They double as localization keys."""
    ALERT_TITLE = "Update Available"
    ALERT_MESSAGE = "A new version of {app_name} is available. Please update to version {version} now."
    UPDATE_BUTTON = "Update"
    NEXT_TIME_BUTTON = "Next time"
    SKIP_BUTTON = "Skip this version"


class Localizer(Protocol):
    def lookup(self, key: str, locale_name: str | None) -> str | None: ...


class DictLocalizer:
    """Localizer over a ``{locale: {key: text}}`` table.

    Falls back from a regional locale to its language ("pt_BR" -> "pt").
    """

    def __init__(self, tables: Mapping[str, Mapping[str, str]] | None = None):
        self._tables = {self._normalize(k): v for k, v in (tables or {}).items()}

    @staticmethod
    def _normalize(locale_name: str) -> str:
        return locale_name.replace('-', '_').split('.')[0].lower()

    def lookup(self, key: str, locale_name: str | None) -> str | None:
        if not locale_name:
            return None
        name = self._normalize(locale_name)
        for candidate in (name, name.split('_')[0]):
            table = self._tables.get(candidate)
            if table and key in table:
                return table[key]
        return None


def system_locale() -> str | None:
    """The host's current locale name, e.g. 'de_DE', or None."""
    try:
        return locale.getlocale()[0]
    except ValueError:
        return None


@dataclass(frozen=True)
class AlertText:
    title: str
    message: str
    update: str
    next_time: str
    skip: str


@dataclass(frozen=True)
class AlertConfiguration:
    """Alert look and wording, supplied once by the host.

    ``None`` means "use the default" for every field: the platform tint,
    the host-reported app name, the built-in (localized) strings and the
    host locale.
    """
    tint_color: str | None = None       # '#RRGGBB' display hint
    app_name: str | None = None
    title: str | None = None
    message: str | None = None
    update_button_label: str | None = None
    next_time_button_label: str | None = None
    skip_button_label: str | None = None
    forced_locale: str | None = None
    alert_type: AlertType = AlertType.SKIP

    def resolved_app_name(self) -> str:
        return self.app_name or AppBranding.best_matching_app_name()

    def resolve_text(self, entry: CatalogEntry, localizer: Localizer | None = None,
                     default_locale: str | None = None) -> AlertText:
        """Produce the strings to display for ``entry``."""
        locale_name = self.forced_locale or default_locale

        def pick(override, key):
            if override is not None:
                return override
            if localizer is not None:
                translated = localizer.lookup(key, locale_name)
                if translated:
                    return translated
            return key

        message = self.message
        if message is None:
            message = pick(None, Constants.ALERT_MESSAGE).format(
                app_name=self.resolved_app_name(), version=entry.version)

        return AlertText(
            title=pick(self.title, Constants.ALERT_TITLE),
            message=message,
            update=pick(self.update_button_label, Constants.UPDATE_BUTTON),
            next_time=pick(self.next_time_button_label, Constants.NEXT_TIME_BUTTON),
            skip=pick(self.skip_button_label, Constants.SKIP_BUTTON),
        )
