from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional

from ..core.constants import ONLINE_WINDOW_MINUTES

ONLINE_WINDOW = timedelta(minutes=ONLINE_WINDOW_MINUTES)


def is_online(last_seen: Optional[datetime], now: datetime) -> bool:
    """A chat partner is online if they were seen within the last five minutes."""
    if last_seen is None:
        return False
    return now - last_seen <= ONLINE_WINDOW


def presence_label(last_seen: Optional[datetime], now: datetime) -> str:
    return "Online" if is_online(last_seen, now) else "Offline"
