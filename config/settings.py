"""
Configuration settings for Infantino.

Centralized configuration for storage, workflows and the restaurant profile.
"""

import os
from pathlib import Path

# Project paths
PROJECT_ROOT = Path(__file__).parent.parent
DATA_ROOT = Path(os.getenv("INFANTINO_DATA_ROOT", PROJECT_ROOT / "data"))
OUTPUT_ROOT = Path(os.getenv("INFANTINO_OUTPUT_ROOT", PROJECT_ROOT / "output"))

# Review store
STORE_PATH = Path(os.getenv("INFANTINO_STORE_PATH", DATA_ROOT / "infantino_store.json"))
STORE_VERSION = "1.0.0"

# Identity and locale
DEFAULT_USER_NAME = os.getenv("INFANTINO_USER_NAME", "Ospite")
LOCALE = os.getenv("INFANTINO_LOCALE", "it_IT")

# Review editor
SUCCESS_BANNER_SECONDS = 2.5  # Success message auto-dismiss delay

# Restaurant profile
RESTAURANT_NAME = "Trattoria Infantino"
RESTAURANT_DESCRIPTION = (
    "Cucina milanese di tradizione, pasta fresca fatta in casa "
    "e una cantina di vini lombardi."
)
RESTAURANT_PHONE_DISPLAY = "+39 02 1234 5678"
RESTAURANT_PHONE_DIAL = "+390212345678"

# Weekday uses 1 = Sunday ... 7 = Saturday
OPENING_HOURS = [
    (2, "12:00", "23:00"),
    (3, "12:00", "23:00"),
    (4, "12:00", "23:00"),
    (5, "12:00", "23:30"),
    (6, "12:00", "00:30"),
    (7, "11:00", "00:30"),
    (1, "11:00", "22:00"),
]

# Logging
LOG_LEVEL = os.getenv("INFANTINO_LOG_LEVEL", "INFO")  # DEBUG, INFO, WARNING, ERROR
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FILE = "infantino.log"
