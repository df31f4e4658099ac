"""
Timezone-aware timestamps
"""
from datetime import datetime, timezone


def utcnow() -> datetime:
    """Current UTC time with tzinfo set"""
    return datetime.now(timezone.utc)
