"""
Theme preference, persisted under its own storage key.
"""
from enum import Enum
import logging

from .backends import KeyValueStorage, StorageError

logger = logging.getLogger(__name__)

THEME_KEY = "theme"


class Theme(str, Enum):
    """Site color theme."""
    LIGHT = "light"
    DARK = "dark"


class ThemePreference:
    """Reads and writes the theme preference."""

    def __init__(self, storage: KeyValueStorage, default: Theme = Theme.LIGHT):
        self.storage = storage
        self.default = Theme(default)

    def get(self) -> Theme:
        """Return the saved theme, or the default when none is usable."""
        try:
            saved = self.storage.get_item(THEME_KEY)
        except StorageError as e:
            logger.warning("Could not read theme preference: %s", e)
            return self.default
        if saved is None:
            return self.default
        try:
            return Theme(saved)
        except ValueError:
            logger.warning("Ignoring unknown theme %r", saved)
            return self.default

    def set(self, theme: Theme) -> Theme:
        """Persist `theme`.

        Raises:
            ValueError: if `theme` is not a known theme
            StorageError: if the preference could not be written
        """
        theme = Theme(theme)
        self.storage.set_item(THEME_KEY, theme.value)
        return theme

    def toggle(self) -> Theme:
        """Switch between light and dark and persist the result."""
        current = self.get()
        return self.set(Theme.DARK if current == Theme.LIGHT else Theme.LIGHT)
