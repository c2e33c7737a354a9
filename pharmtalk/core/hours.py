"""Opening-hours evaluation for pharmacies.

All evaluation happens on Korea Standard Time wall-clock fields. The clock
weekday uses 0=Sunday..6=Saturday, while the registry numbers its weekday
columns 1=Monday..7=Sunday.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

from pharmtalk.models import OpeningStatus, OpenStatus, RegistryRecord

KST_OFFSET = timedelta(hours=9)
MINUTES_PER_DAY = 1440
WEEKDAY_NAMES = ("일", "월", "화", "수", "목", "금", "토")
MARKER_24H = "24시"
NAME_MARKERS_24H = (MARKER_24H, "이십사시")

LABEL_24H = "24시 영업"
LABEL_FINISHED = "영업 종료"
HOURS_24H = "00:00~24:00"
HOURS_DAY_OFF = "휴무"

# Fallback schedule when no registry data exists: (start, end) in minutes.
WEEKDAY_WINDOW = (9 * 60, 18 * 60)
SATURDAY_WINDOW = (9 * 60, 13 * 60)


def kst_now(utc_now: Optional[datetime] = None) -> datetime:
    """Return the current instant shifted to KST wall-clock fields."""
    if utc_now is None:
        utc_now = datetime.now(timezone.utc)
    elif utc_now.tzinfo is not None:
        utc_now = utc_now.astimezone(timezone.utc)
    return (utc_now + KST_OFFSET).replace(tzinfo=None)


def clock_weekday(moment: datetime) -> int:
    """Weekday with Sunday as 0."""
    return (moment.weekday() + 1) % 7


def registry_weekday_key(day: int) -> int:
    return 7 if day == 0 else day


def minutes_of_day(moment: datetime) -> int:
    return moment.hour * 60 + moment.minute


def fmt_time(raw: Optional[str]) -> str:
    """Format a raw ``HHMM`` string as ``HH:MM``."""
    if not raw or len(raw) < 4:
        return ""
    return f"{raw[:2]}:{raw[2:4]}"


def fmt_minutes(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def to_minutes(raw: str) -> int:
    return int(raw[:2]) * 60 + int(raw[2:4])


def is_24h_span(start: int, end: int) -> bool:
    return (start == 0 and end == 0) or (start == 0 and end >= MINUTES_PER_DAY - 1) or end - start >= 1380


def has_24h_marker(name: str, category: str = "", description: str = "") -> bool:
    if any(marker in (name or "") for marker in NAME_MARKERS_24H):
        return True
    return MARKER_24H in (description or "") or MARKER_24H in (category or "")


def _window_status(now_minutes: int, start: int, end: int, start_str: str, end_str: str) -> Tuple[OpenStatus, str]:
    if start <= now_minutes < end:
        return OpenStatus.OPEN, f"영업중 ~{end_str}"
    if now_minutes < start:
        return OpenStatus.CLOSED, f"{start_str} 오픈"
    return OpenStatus.CLOSED, LABEL_FINISHED


def registry_status(record: RegistryRecord, now_local: datetime) -> OpeningStatus:
    """Derive the live status from the registry's hours for today."""
    day = clock_weekday(now_local)
    start_raw, end_raw = record.hours.get(registry_weekday_key(day), (None, None))

    if not start_raw or not end_raw:
        return OpeningStatus(
            open_status=OpenStatus.CLOSED,
            open_label=f"{WEEKDAY_NAMES[day]}요일 휴무",
            today_hours=HOURS_DAY_OFF,
            is_24h=False,
        )

    start_str = fmt_time(start_raw)
    end_str = fmt_time(end_raw)
    start = to_minutes(start_raw)
    end = to_minutes(end_raw)

    if is_24h_span(start, end):
        return OpeningStatus(OpenStatus.OPEN, LABEL_24H, HOURS_24H, is_24h=True)

    status, label = _window_status(minutes_of_day(now_local), start, end, start_str, end_str)
    return OpeningStatus(status, label, f"{start_str}~{end_str}", is_24h=False)


def estimate_status(is_24h: bool, now_local: datetime) -> OpeningStatus:
    """Guess the status from a typical pharmacy schedule."""
    if is_24h:
        return OpeningStatus(OpenStatus.OPEN, LABEL_24H, HOURS_24H, is_24h=True)

    day = clock_weekday(now_local)
    if day == 0:
        return OpeningStatus(OpenStatus.CLOSED, "일요일 휴무", HOURS_DAY_OFF, is_24h=False)

    start, end = SATURDAY_WINDOW if day == 6 else WEEKDAY_WINDOW
    start_str, end_str = fmt_minutes(start), fmt_minutes(end)
    status, label = _window_status(minutes_of_day(now_local), start, end, start_str, end_str)
    return OpeningStatus(status, label, f"{start_str}~{end_str}", is_24h=False)
