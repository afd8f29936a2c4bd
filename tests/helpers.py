from datetime import datetime

import pytz

FROZEN_NOW = pytz.UTC.localize(datetime(2025, 1, 1, 12, 0))


def at(hour: int, minute: int = 0, day: int = 6) -> datetime:
    """A UTC instant on a fixed test day"""
    return pytz.UTC.localize(datetime(2025, 1, day, hour, minute))
