"""
Restaurant data model.

Static profile shown on the home screen: description, phone and weekly hours.
"""

from dataclasses import dataclass, field
from typing import List

import config.settings as settings


@dataclass(frozen=True)
class OpeningHour:
    weekday: int  # 1 = Sunday ... 7 = Saturday
    opening_time: str  # HH:MM
    closing_time: str  # HH:MM, may be past midnight

    def __post_init__(self):
        if not (1 <= self.weekday <= 7):
            raise ValueError(f"Invalid weekday: {self.weekday}. Must be 1-7")


@dataclass(frozen=True)
class Restaurant:
    name: str
    description: str
    phone_display: str
    phone_dial: str
    opening_hours: List[OpeningHour] = field(default_factory=list)

    @property
    def phone_url(self) -> str:
        return f"tel://{self.phone_dial}"

    @classmethod
    def from_settings(cls) -> "Restaurant":
        """Build the restaurant profile from config.settings."""
        return cls(
            name=settings.RESTAURANT_NAME,
            description=settings.RESTAURANT_DESCRIPTION,
            phone_display=settings.RESTAURANT_PHONE_DISPLAY,
            phone_dial=settings.RESTAURANT_PHONE_DIAL,
            opening_hours=[
                OpeningHour(weekday, opening, closing)
                for weekday, opening, closing in settings.OPENING_HOURS
            ]
        )
