from __future__ import annotations

from datetime import timedelta

from src.attendance_hub.attendance_hub.presence.status import is_online, presence_label


def test_online_window_boundaries(fixed_now):
    assert is_online(fixed_now - timedelta(minutes=5, seconds=1), fixed_now) is False
    assert is_online(fixed_now - timedelta(minutes=4, seconds=59), fixed_now) is True
    assert is_online(fixed_now - timedelta(minutes=5), fixed_now) is True
    assert is_online(None, fixed_now) is False


def test_presence_label(fixed_now):
    assert presence_label(fixed_now, fixed_now) == "Online"
    assert presence_label(fixed_now - timedelta(hours=1), fixed_now) == "Offline"
    assert presence_label(None, fixed_now) == "Offline"
