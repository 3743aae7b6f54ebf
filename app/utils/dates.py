# app/utils/dates.py
"""
Normalizacja znacznikow czasu.

Dokumenty niosa daty w kilku postaciach: natywny znacznik magazynu
(obiekt z ``to_date()``), zwykly string ISO-8601 z formularza admina,
albo zserializowany znacznik ``{"seconds": ..., "nanoseconds": ...}``.
Wszystkie porownania dat ida przez ``to_date``.
"""
from datetime import date, datetime, timezone
from typing import Any


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


def _aware(dt: datetime) -> datetime:
    #naiwne daty traktujemy jako UTC
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def to_date(value: Any) -> datetime:
    """Return ``value`` as an aware UTC datetime or raise ``ValueError``."""
    if isinstance(value, datetime):
        return _aware(value)

    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)

    for attr in ("to_date", "toDate"):
        converter = getattr(value, attr, None)
        if callable(converter):
            return to_date(converter())

    if isinstance(value, dict) and "seconds" in value:
        try:
            seconds = value["seconds"] + (value.get("nanoseconds") or 0) / 1_000_000_000
            return datetime.fromtimestamp(seconds, tz=timezone.utc)
        except (TypeError, OverflowError, OSError) as e:
            raise ValueError(f"Unsupported timestamp value: {value!r}") from e

    if isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        return _aware(datetime.fromisoformat(text))

    raise ValueError(f"Unsupported timestamp value: {value!r}")
