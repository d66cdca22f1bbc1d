"""Open locators in the system browser."""

import logging
import webbrowser

log = logging.getLogger(__name__)


class BrowserOpener:
    """:class:`~zara.protocols.ActionOpener` backed by :mod:`webbrowser`.

    URI schemes such as ``whatsapp://`` are handed to the browser too, which
    forwards them to whatever the desktop registered for the scheme.
    """

    def open(self, locator: str) -> None:
        if not webbrowser.open_new_tab(locator):
            log.warning("No browser accepted %s", locator)
