"""Timezone-aware datetime helpers."""
from datetime import datetime
from zoneinfo import ZoneInfo

from app.config.settings import settings


def now() -> datetime:
    """Current time in the configured application timezone."""
    return datetime.now(ZoneInfo(settings.TIMEZONE))
