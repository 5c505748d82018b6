"""Database package."""

from .db import Database, default_url
from .models import Preference
from .store import TimerStore, Subscription

__all__ = ["Database", "default_url", "Preference", "TimerStore", "Subscription"]
