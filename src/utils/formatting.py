"""
Display formatting utility.

Locale-aware review dates and weekday names, built on Babel.
"""

import logging
from datetime import datetime

from babel import Locale
from babel.dates import format_date

logger = logging.getLogger(__name__)


class DateFormatter:
    """
    Formats timestamps and weekday numbers for one locale.
    Pure functions of their arguments; holds no state besides the locale.
    """

    def __init__(self, locale: str = "it_IT"):
        """
        Args:
            locale: Babel/POSIX locale identifier (e.g., "it_IT", "en_US")
        """
        self.locale = Locale.parse(locale)
        logger.debug(f"Initialized DateFormatter for locale {self.locale}")

    def format_date(self, value: datetime) -> str:
        """Short, medium-style date such as '12 mar 2024'."""
        return format_date(value, format="medium", locale=self.locale)

    def weekday_name(self, weekday: int) -> str:
        """
        Capitalized weekday name.

        Args:
            weekday: 1 = Sunday ... 7 = Saturday

        Returns:
            Localized name, or "" for out-of-range numbers
        """
        if not (1 <= weekday <= 7):
            return ""

        # Babel indexes days from Monday = 0
        names = self.locale.days["format"]["wide"]
        return names[(weekday - 2) % 7].capitalize()
