"""
Pydantic request/response models.

Responses only ever carry external identifiers (pid); the `from_entity`
constructors are where internal records become API payloads.
"""

from datetime import datetime, timezone


def isoformat(value: datetime | None) -> str:
    if value is None:
        return ""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()
