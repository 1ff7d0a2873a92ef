"""
Message catalog for reminder notifications.
"""

from __future__ import annotations

MESSAGES = {
    "reminder_title": "Time to take {name}",
    "reminder_body": "It's time to take your {name}",
    "reminder_body_dosage": "It's time to take your {name} ({dosage})",
    "reminder_sound": "default",
}


def fmt(key: str, **kwargs) -> str:
    return MESSAGES[key].format(**kwargs)
