"""
Etiquetas de tiempo relativas para mostrar en las tarjetas.
"""
from datetime import datetime, timezone
from typing import Optional


def parse_timestamp(value: str) -> Optional[datetime]:
    """Convierte str ISO8601 (con o sin Z) a datetime con tz UTC."""
    try:
        dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (AttributeError, ValueError):
        return None
    return dt if dt.tzinfo else dt.replace(tzinfo=timezone.utc)


def format_time(timestamp: str, now: Optional[datetime] = None) -> str:
    when = parse_timestamp(timestamp)
    if when is None:
        return timestamp
    now = now or datetime.now(timezone.utc)
    diff = int((now - when).total_seconds())

    if diff < 60: return "just now"
    if diff < 3600: return f"{diff // 60}m ago"
    if diff < 86400: return f"{diff // 3600}h ago"
    if diff < 604800: return f"{diff // 86400}d ago"
    return when.date().isoformat()
